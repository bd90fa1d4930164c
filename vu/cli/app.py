from __future__ import annotations

from pathlib import Path

import typer
from loguru import logger

from vu import __version__
from vu.cli.context import build_context
from vu.core.config import load_config
from vu.core.errors import ErrorCode
from vu.core.logging import LOG_LEVEL_ENV, init_logging
from vu.core.result import Err
from vu.http.client import DEFAULT_TIMEOUT
from vu.output.summary import RunSummary, print_summary
from vu.output.writer import OutputFormat, write_output
from vu.services.batch import run_services

app = typer.Typer(
    add_completion=False,
    rich_markup_mode="rich",
    help="Resolve the latest upstream release of each service and verify its image tag.",
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit(code=int(ErrorCode.OK))


@app.command()
def run(
    output: Path = typer.Option(..., "--output", "-o", help="File the results are written to."),
    config: Path = typer.Option(Path("config.yaml"), "--config", "-c", help="Config file path."),
    fmt: OutputFormat = typer.Option(
        OutputFormat.JSON, "--format", "-f", case_sensitive=False, help="Output format."
    ),
    timeout: float = typer.Option(
        DEFAULT_TIMEOUT, "--timeout", min=1.0, help="Per-request timeout in seconds."
    ),
    log_level: str | None = typer.Option(
        None, "--log-level", envvar=LOG_LEVEL_ENV, help="TRACE, DEBUG, INFO, WARNING or ERROR."
    ),
    strict: bool = typer.Option(
        False, "--strict", help="Exit non-zero when any service failed to process."
    ),
    version: bool = typer.Option(  # pyright: ignore[reportUnusedParameter]
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """Resolve release versions and validate image tags for all configured services."""
    init_logging(log_level)
    ctx = build_context(timeout)

    config_result = load_config(config, ctx.secrets)
    if isinstance(config_result, Err):
        ctx.console.error(str(config_result.error))
        raise typer.Exit(code=int(ErrorCode.CONFIG_ERROR))

    results = run_services(config_result.value, ctx.http, ctx.secrets)

    written = write_output(results, output, fmt)
    if isinstance(written, Err):
        ctx.console.error(str(written.error))
        raise typer.Exit(code=int(ErrorCode.IO_ERROR))

    summary = RunSummary.from_results(results)
    print_summary(summary, ctx.console)
    if summary.has_failures:
        logger.warning("{} services failed to process", len(summary.failed))
        if strict:
            raise typer.Exit(code=int(ErrorCode.SERVICE_ERROR))


def main() -> None:
    app()

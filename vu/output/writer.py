"""Serializing run results to JSON or YAML."""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

import yaml
from loguru import logger

from vu.core.result import Err, Ok, Result
from vu.services.processor import ServiceResult

__all__ = ["OutputFormat", "OutputError", "render", "write_output"]


class OutputFormat(str, Enum):
    JSON = "json"
    YAML = "yaml"


@dataclass(frozen=True, slots=True)
class OutputError:
    message: str
    path: Path

    def __str__(self) -> str:
        return f"{self.message} ({self.path})"


def render(results: Mapping[str, ServiceResult], fmt: OutputFormat) -> str:
    """Render results as a name-sorted mapping of output records."""
    data = {name: results[name].to_dict() for name in sorted(results)}
    match fmt:
        case OutputFormat.JSON:
            return json.dumps(data, indent=2) + "\n"
        case OutputFormat.YAML:
            return yaml.safe_dump(data, sort_keys=False, default_flow_style=False)
    raise ValueError(f"unsupported output format: {fmt}")


def write_output(
    results: Mapping[str, ServiceResult],
    path: Path,
    fmt: OutputFormat = OutputFormat.JSON,
) -> Result[Path, OutputError]:
    """Write rendered results to ``path``, creating parent directories."""
    logger.info("Writing output to file: {}", path)
    content = render(results, fmt)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    except OSError as e:
        return Err(OutputError(f"cannot write output: {e}", path=path))
    logger.info("Output written successfully")
    return Ok(path)

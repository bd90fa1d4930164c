from __future__ import annotations

from dataclasses import dataclass

from vu.core.secrets import EnvSecrets, SecretsProvider
from vu.http.client import HttpClient, RealHttpClient
from vu.output.console import ConsoleProtocol, RichConsole


@dataclass(frozen=True, slots=True)
class CLIContext:
    secrets: SecretsProvider
    http: HttpClient
    console: ConsoleProtocol


def build_context(timeout: float) -> CLIContext:
    return CLIContext(
        secrets=EnvSecrets(),
        http=RealHttpClient(timeout=timeout),
        console=RichConsole(),
    )

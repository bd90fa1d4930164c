"""Injectable access to tokens and registry credentials.

This module provides:
- SecretsProvider: Protocol for environment tokens and credential lookups
- EnvSecrets: Real implementation over os.environ and the docker config
- MockSecrets: Fixed values for tests
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable

from vu.core.credentials import DockerCredentialStore, RegistryCredential
from vu.core.failures import CredentialStoreError
from vu.core.result import Err, Ok, Result

__all__ = [
    "SecretsProvider",
    "EnvSecrets",
    "MockSecrets",
    "GITHUB_TOKEN",
    "GITLAB_TOKEN",
    "CODEBERG_TOKEN",
]

GITHUB_TOKEN = "GITHUB_TOKEN"
GITLAB_TOKEN = "GITLAB_TOKEN"
CODEBERG_TOKEN = "CODEBERG_TOKEN"


@runtime_checkable
class SecretsProvider(Protocol):
    """Protocol for reading tokens and registry credentials."""

    def env(self, name: str) -> str | None:
        """Return a non-empty environment value, or None."""
        ...

    def registry_credential(
        self, registry: str
    ) -> Result[RegistryCredential | None, CredentialStoreError]:
        """Return stored credentials for a registry host, or None if absent."""
        ...


class EnvSecrets:
    """Secrets read from the process environment and the docker config."""

    def __init__(
        self,
        environ: Mapping[str, str] | None = None,
        store: DockerCredentialStore | None = None,
    ) -> None:
        self._environ = os.environ if environ is None else environ
        self._store = store or DockerCredentialStore()

    def env(self, name: str) -> str | None:
        value = self._environ.get(name)
        if value is None:
            return None
        value = value.strip()
        return value or None

    def registry_credential(
        self, registry: str
    ) -> Result[RegistryCredential | None, CredentialStoreError]:
        return self._store.lookup(registry)


def _empty_env() -> dict[str, str]:
    return {}


def _empty_credentials() -> dict[str, RegistryCredential | CredentialStoreError]:
    return {}


@dataclass
class MockSecrets:
    """Secrets with fixed values for testing.

    Usage:
        secrets = MockSecrets(env_vars={"GITHUB_TOKEN": "t0k"})
        secrets.set_credential("ghcr.io", RegistryCredential("bot", "pw"))
    """

    env_vars: dict[str, str] = field(default_factory=_empty_env)
    credentials: dict[str, RegistryCredential | CredentialStoreError] = field(
        default_factory=_empty_credentials
    )

    def set_credential(
        self, registry: str, credential: RegistryCredential | CredentialStoreError
    ) -> None:
        self.credentials[registry] = credential

    def env(self, name: str) -> str | None:
        return self.env_vars.get(name) or None

    def registry_credential(
        self, registry: str
    ) -> Result[RegistryCredential | None, CredentialStoreError]:
        credential = self.credentials.get(registry)
        if isinstance(credential, CredentialStoreError):
            return Err(credential)
        return Ok(credential)

"""Read-only access to a docker-style credential store.

The store is the ``config.json`` written by ``docker login``::

    {"auths": {"ghcr.io": {"auth": "dXNlcjpwYXNz"}}}

Entries hold either a base64 ``auth`` string (``user:pass``) or explicit
``username``/``password`` fields. vu never writes to the file.
"""

from __future__ import annotations

import base64
import binascii
import json
import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from loguru import logger

from vu.core.failures import CredentialStoreError
from vu.core.result import Err, Ok, Result
from vu.core.structured import StrDict, as_str_dict, get_str, get_table

__all__ = ["RegistryCredential", "DockerCredentialStore", "default_docker_config_path"]

DOCKER_HUB_KEYS = ("https://index.docker.io/v1/", "index.docker.io", "docker.io")


@dataclass(frozen=True, slots=True)
class RegistryCredential:
    username: str
    password: str

    def __repr__(self) -> str:
        return f"RegistryCredential(username={self.username!r}, password='***')"


def default_docker_config_path(environ: Mapping[str, str] | None = None) -> Path:
    """Return the credential file path, honouring ``DOCKER_CONFIG``."""
    env = os.environ if environ is None else environ
    config_dir = env.get("DOCKER_CONFIG")
    if config_dir:
        return Path(config_dir).expanduser() / "config.json"
    return Path.home() / ".docker" / "config.json"


def _candidate_keys(registry: str) -> list[str]:
    keys = [registry, f"https://{registry}"]
    if registry in ("registry.hub.docker.com", "registry-1.docker.io"):
        keys.extend(DOCKER_HUB_KEYS)
    return keys


def _decode_auth(registry: str, auth: str) -> Result[RegistryCredential, CredentialStoreError]:
    try:
        decoded = base64.b64decode(auth, validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError) as e:
        return Err(CredentialStoreError(f"invalid auth entry for {registry}: {e}"))

    username, sep, password = decoded.partition(":")
    if not sep:
        return Err(CredentialStoreError(f"auth entry for {registry} is not 'user:pass'"))
    return Ok(RegistryCredential(username=username, password=password))


class DockerCredentialStore:
    """Looks up registry credentials in a docker ``config.json``.

    A missing file or a registry without an entry is not an error: lookup
    returns ``Ok(None)`` and the caller requests an anonymous token.
    """

    def __init__(self, path: Path | None = None) -> None:
        self._path = path or default_docker_config_path()

    @property
    def path(self) -> Path:
        return self._path

    def _load_auths(self) -> Result[StrDict | None, CredentialStoreError]:
        try:
            text = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return Ok(None)
        except (OSError, UnicodeDecodeError) as e:
            return Err(CredentialStoreError(f"cannot read {self._path}: {e}"))

        try:
            data = as_str_dict(json.loads(text))
        except json.JSONDecodeError as e:
            return Err(CredentialStoreError(f"invalid JSON in {self._path}: {e}"))

        if data is None:
            return Err(CredentialStoreError(f"{self._path} must contain a JSON object"))
        return Ok(get_table(data, "auths"))

    def lookup(self, registry: str) -> Result[RegistryCredential | None, CredentialStoreError]:
        """Return the credential stored for ``registry``, if any."""
        logger.debug("Looking up docker credentials for {} in {}", registry, self._path)
        auths = self._load_auths()
        if isinstance(auths, Err):
            return auths
        if auths.value is None:
            return Ok(None)

        entry: StrDict | None = None
        for key in _candidate_keys(registry):
            entry = get_table(auths.value, key)
            if entry is not None:
                break
        if entry is None:
            logger.debug("No docker credentials found for {}", registry)
            return Ok(None)

        auth = get_str(entry, "auth")
        if auth:
            logger.info("Found base64 encoded docker credentials for {}", registry)
            return _decode_auth(registry, auth)

        username = get_str(entry, "username")
        password = entry.get("password")
        if username and isinstance(password, str) and password:
            logger.info("Found docker username/password credentials for {}", registry)
            return Ok(RegistryCredential(username=username, password=password))

        logger.debug("Docker credential entry for {} has no usable fields", registry)
        return Ok(None)

"""Latest-release version resolution.

ProviderVersionResolver picks the VersionProvider for a source, fetches the
latest release, and extracts the version from ``tag_name`` with the source's
version filter.

Usage:
    resolver = ProviderVersionResolver(http, secrets)
    match resolver.resolve(service.git):
        case Ok(version):
            ...
        case Err(error):
            ...
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from typing import TYPE_CHECKING

from loguru import logger

from vu.core.config import Provider
from vu.core.failures import (
    InvalidResponse,
    MissingCredential,
    NotFound,
    ProviderError,
    RateLimited,
    VersionError,
)
from vu.core.result import Err, Ok, Result
from vu.providers.base import VersionProvider
from vu.providers.codeberg import CodebergProvider
from vu.providers.github import GitHubProvider
from vu.providers.gitlab import GitLabProvider

if TYPE_CHECKING:
    from vu.core.config import GitConfig
    from vu.core.secrets import SecretsProvider
    from vu.http.client import HttpClient

__all__ = ["ProviderVersionResolver", "extract_version", "default_providers"]

RATE_LIMIT_STATUSES = frozenset({403, 429})


def default_providers() -> tuple[VersionProvider, ...]:
    return (GitHubProvider(), GitLabProvider(), CodebergProvider())


def extract_version(tag_name: str, pattern: re.Pattern[str], scope: str) -> Result[str, NotFound]:
    """Apply the version filter and return capture group 1.

    An empty tag, no match, or an empty group all count as "not found".
    """
    match = pattern.search(tag_name)
    version = (match.group(1) or "") if match else ""
    if not version:
        logger.error("No matching version for {}", scope)
        return Err(NotFound(scope))
    return Ok(version)


class ProviderVersionResolver:
    """Resolves the latest upstream version for a GitConfig."""

    def __init__(
        self,
        http: HttpClient,
        secrets: SecretsProvider,
        providers: Iterable[VersionProvider] | None = None,
    ) -> None:
        self._http = http
        self._secrets = secrets
        self._providers: dict[Provider, VersionProvider] = {
            p.provider: p for p in (providers or default_providers())
        }

    def provider_for(self, provider: Provider) -> VersionProvider | None:
        return self._providers.get(provider)

    def resolve(self, source: GitConfig) -> Result[str, VersionError]:
        """Fetch the latest release for ``source`` and extract its version.

        Returns:
            Ok("") for Provider.NONE (no request is made), Ok(version) on
            success, or Err with RateLimited, NotFound, ProviderError,
            MissingCredential or InvalidResponse
        """
        if source.provider is Provider.NONE:
            logger.debug("Source has no upstream provider, skipping version lookup")
            return Ok("")

        impl = self.provider_for(source.provider)
        if impl is None:
            return Err(ProviderError(f"no provider registered for '{source.provider}'"))

        scope = impl.label(source)
        url = impl.latest_release_url(source)
        headers: dict[str, str] = {}

        if source.requires_token:
            env_var = source.provider.token_env or ""
            token = self._secrets.env(env_var)
            if token is None:
                return Err(MissingCredential(env_var))
            name, value = impl.auth_header(token)
            headers[name] = value

        logger.info("Getting latest version from {}", scope)
        logger.debug("API query url {}", url)

        result = self._http.get(url, headers)
        if isinstance(result, Err):
            logger.error("{}: request failed: {}", scope, result.error)
            return Err(ProviderError(f"{scope}: {result.error}"))

        response = result.value
        if response.status in RATE_LIMIT_STATUSES:
            logger.error("{}: Failed to get version: Rate limited", scope)
            return Err(RateLimited(f"{scope} API"))
        if not response.ok:
            logger.error("{}: unexpected status {}", scope, response.status)
            return Err(ProviderError(f"{scope}: HTTP {response.status} from {url}"))

        data = response.json_object()
        if isinstance(data, Err):
            return Err(InvalidResponse(f"{scope}: {data.error}"))

        tag_name = data.value.get("tag_name")
        if not isinstance(tag_name, str):
            tag_name = ""
        logger.trace("Tag is {!r}", tag_name)

        return extract_version(tag_name, source.version_filter, scope)

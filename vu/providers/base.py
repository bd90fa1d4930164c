"""Base class for source-control providers exposing a "latest release" API.

Every provider follows the same shape:
- one GET to a provider-specific endpoint
- an optional token header (format differs per provider)
- a JSON body with a ``tag_name`` field

Subclasses only describe the endpoint and the header; the request itself is
made by ProviderVersionResolver.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, ClassVar

if TYPE_CHECKING:
    from vu.core.config import GitConfig, Provider

__all__ = ["VersionProvider"]


class VersionProvider(ABC):
    """Base class for release providers.

    Subclasses must define:
    - provider: The Provider enum member they serve
    - display_name: Name used in log lines and failure scopes
    - latest_release_url(): Endpoint for a given source

    Example:
        class CodebergProvider(VersionProvider):
            provider = Provider.CODEBERG
            display_name = "Codeberg"

            def latest_release_url(self, source: GitConfig) -> str:
                return f"https://codeberg.org/api/v1/repos/{source.repo}/releases/latest"
    """

    provider: ClassVar[Provider]
    display_name: ClassVar[str]

    @abstractmethod
    def latest_release_url(self, source: GitConfig) -> str:
        """Return the "latest release" endpoint for ``source``."""
        ...

    def auth_header(self, token: str) -> tuple[str, str]:
        """Header carrying the provider token. Bearer by default."""
        return ("Authorization", f"Bearer {token}")

    def label(self, source: GitConfig) -> str:
        """Short description like ``GitHub(acme/web)``."""
        return f"{self.display_name}({source.identifier})"

"""GitHub Releases API."""

from __future__ import annotations

from typing import TYPE_CHECKING

from vu.core.config import Provider
from vu.providers.base import VersionProvider

if TYPE_CHECKING:
    from vu.core.config import GitConfig

__all__ = ["GitHubProvider"]


class GitHubProvider(VersionProvider):
    """Releases from api.github.com.

    Anonymous requests are limited to 60 per hour, which is why GitHub alone
    honours the global ``authenticate`` flag.
    """

    provider = Provider.GITHUB
    display_name = "GitHub"

    def latest_release_url(self, source: GitConfig) -> str:
        return f"https://api.github.com/repos/{source.repo}/releases/latest"

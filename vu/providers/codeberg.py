"""Codeberg (Forgejo) releases API."""

from __future__ import annotations

from typing import TYPE_CHECKING

from vu.core.config import Provider
from vu.providers.base import VersionProvider

if TYPE_CHECKING:
    from vu.core.config import GitConfig

__all__ = ["CodebergProvider"]


class CodebergProvider(VersionProvider):
    provider = Provider.CODEBERG
    display_name = "Codeberg"

    def latest_release_url(self, source: GitConfig) -> str:
        return f"https://codeberg.org/api/v1/repos/{source.repo}/releases/latest"

"""GitLab releases API.

GitLab addresses projects by numeric id and authenticates with a
``PRIVATE-TOKEN`` header instead of a bearer token.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from vu.core.config import Provider
from vu.providers.base import VersionProvider

if TYPE_CHECKING:
    from vu.core.config import GitConfig

__all__ = ["GitLabProvider"]


class GitLabProvider(VersionProvider):
    provider = Provider.GITLAB
    display_name = "GitLab"

    def latest_release_url(self, source: GitConfig) -> str:
        # project_id presence is enforced by config validation
        return (
            f"https://gitlab.com/api/v4/projects/{source.project_id}"
            "/releases/permalink/latest"
        )

    def auth_header(self, token: str) -> tuple[str, str]:
        return ("PRIVATE-TOKEN", token)

"""Release providers: GitHub, GitLab and Codeberg.

This package provides:
- VersionProvider base class (base.py)
- One provider per hosting service (github.py, gitlab.py, codeberg.py)
- ProviderVersionResolver dispatching between them (resolver.py)
"""

from vu.providers.base import VersionProvider
from vu.providers.codeberg import CodebergProvider
from vu.providers.github import GitHubProvider
from vu.providers.gitlab import GitLabProvider
from vu.providers.resolver import ProviderVersionResolver, default_providers, extract_version

__all__ = [
    "VersionProvider",
    "CodebergProvider",
    "GitHubProvider",
    "GitLabProvider",
    "ProviderVersionResolver",
    "default_providers",
    "extract_version",
]

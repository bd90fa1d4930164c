"""Splitting image names into registry host and repository path."""

from __future__ import annotations

import re
from dataclasses import dataclass

from loguru import logger

__all__ = ["ImageReference", "DOCKER_HUB_REGISTRY", "parse_image"]

DOCKER_HUB_REGISTRY = "registry.hub.docker.com"

# First path segment that looks like a host: an FQDN or localhost, optional :port
_REGISTRY_RE = re.compile(
    r"^((?:[a-zA-Z0-9][-a-zA-Z0-9.]*\.[a-zA-Z]{2,}|localhost)(?::\d+)?)/(.+)$"
)

_DOCKER_HUB_ALIASES = frozenset({"docker.io", "index.docker.io", "registry-1.docker.io"})


@dataclass(frozen=True, slots=True)
class ImageReference:
    """Registry host and repository path of an image.

    Attributes:
        registry: Host (with port if given), e.g. "ghcr.io"
        path: Repository path inside the registry, e.g. "acme/web"
    """

    registry: str
    path: str

    def manifest_url(self, tag: str) -> str:
        return f"https://{self.registry}/v2/{self.path}/manifests/{tag}"

    def __str__(self) -> str:
        return f"{self.registry}/{self.path}"


def _with_library_prefix(path: str) -> str:
    # Official Docker Hub images live under library/
    if "/" not in path:
        logger.debug("Found official docker image {}, prepending path with library/", path)
        return f"library/{path}"
    return path


def parse_image(name: str) -> ImageReference:
    """Split an image name such as ``ghcr.io/acme/web`` or ``nginx``.

    Names without a registry host belong to Docker Hub. Unlike a plain
    host-prefix split, an explicit ``:port`` stays part of the registry host
    (``localhost:5000`` is a different registry from ``localhost``), and the
    ``docker.io`` aliases are folded into ``registry.hub.docker.com`` so they
    get Docker Hub authentication.
    """
    match = _REGISTRY_RE.match(name)
    if match is None:
        return ImageReference(registry=DOCKER_HUB_REGISTRY, path=_with_library_prefix(name))

    registry, path = match.group(1), match.group(2)
    if registry in _DOCKER_HUB_ALIASES:
        return ImageReference(registry=DOCKER_HUB_REGISTRY, path=_with_library_prefix(path))

    logger.debug("Found image {} with registry {}", path, registry)
    return ImageReference(registry=registry, path=path)

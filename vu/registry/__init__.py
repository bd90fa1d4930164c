"""Container registry access: image parsing, token exchange, manifest checks."""

from vu.registry.auth import (
    RegistryAuthResolver,
    RegistryAuthScheme,
    TokenAuthScheme,
    scheme_for,
)
from vu.registry.client import RegistryClient
from vu.registry.image import DOCKER_HUB_REGISTRY, ImageReference, parse_image
from vu.registry.manifest import MANIFEST_MEDIA_TYPES, ManifestChecker

__all__ = [
    "DOCKER_HUB_REGISTRY",
    "ImageReference",
    "MANIFEST_MEDIA_TYPES",
    "ManifestChecker",
    "RegistryAuthResolver",
    "RegistryAuthScheme",
    "RegistryClient",
    "TokenAuthScheme",
    "parse_image",
    "scheme_for",
]

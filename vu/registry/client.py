"""Tag validation against a container registry."""

from __future__ import annotations

from typing import TYPE_CHECKING

from loguru import logger

from vu.core.result import Err, Result
from vu.registry.auth import RegistryAuthResolver
from vu.registry.manifest import ManifestChecker

if TYPE_CHECKING:
    from vu.core.failures import RegistryError
    from vu.core.secrets import SecretsProvider
    from vu.http.client import HttpClient
    from vu.registry.image import ImageReference

__all__ = ["RegistryClient"]


class RegistryClient:
    """Checks whether an image tag exists.

    Usage:
        client = RegistryClient(http, secrets)
        result = client.validate_tag(parse_image("ghcr.io/acme/web"), "3.4.0")
    """

    def __init__(
        self,
        http: HttpClient,
        secrets: SecretsProvider,
        auth: RegistryAuthResolver | None = None,
        checker: ManifestChecker | None = None,
    ) -> None:
        self._auth = auth or RegistryAuthResolver(http, secrets)
        self._checker = checker or ManifestChecker(http)

    def validate_tag(self, image: ImageReference, tag: str) -> Result[bool, RegistryError]:
        """Authenticate for ``image`` and check that ``tag`` has a manifest."""
        logger.info("Validating tag '{}' for image '{}'", tag, image.path)

        token = self._auth.authenticate(image.registry, image.path)
        if isinstance(token, Err):
            return token

        return self._checker.exists(image.manifest_url(tag), token.value)

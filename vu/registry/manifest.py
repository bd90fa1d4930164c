"""Manifest existence checks with ordered content negotiation.

A registry may hold a tag as a single-platform manifest, an OCI index or a
Docker manifest list, and some registries answer 404 when the ``Accept``
header names the wrong one. The checker therefore walks MANIFEST_MEDIA_TYPES
in order until one request succeeds or the registry says the tag is absent.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from loguru import logger

from vu.core.failures import RateLimited, RegistryError, RequestError
from vu.core.result import Err, Ok, Result

if TYPE_CHECKING:
    from vu.http.client import HttpClient

__all__ = ["ManifestChecker", "MANIFEST_MEDIA_TYPES", "WRONG_FORMAT_MARKERS"]

MANIFEST_MEDIA_TYPES = (
    "application/vnd.docker.distribution.manifest.v2+json",
    "application/vnd.oci.image.index.v1+json",
    "application/vnd.docker.distribution.manifest.list.v2+json",
)

# 404 bodies meaning "not in this format, try another Accept header"
WRONG_FORMAT_MARKERS = ("OCI index found", "manifest unknown", "MANIFEST_UNKNOWN")


def _is_wrong_format(body: str) -> bool:
    return any(marker in body for marker in WRONG_FORMAT_MARKERS)


class ManifestChecker:
    """Determines whether a manifest URL resolves to an existing image tag."""

    def __init__(self, http: HttpClient) -> None:
        self._http = http

    def exists(self, manifest_url: str, token: str | None = None) -> Result[bool, RegistryError]:
        """Check a manifest URL against each media type in turn.

        Args:
            manifest_url: ``https://<host>/v2/<path>/manifests/<tag>``
            token: Pull token; no Authorization header is sent without one

        Returns:
            Ok(True) on the first 200, Ok(False) when the tag is absent,
            Err(RateLimited) on 429, Err(RequestError) on any other status
            or transport failure
        """
        logger.info("Getting image manifest at URL: {}", manifest_url)
        last = len(MANIFEST_MEDIA_TYPES) - 1

        for index, media_type in enumerate(MANIFEST_MEDIA_TYPES):
            logger.debug("Trying manifest format: {}", media_type)
            headers = {"Accept": media_type}
            if token is not None:
                headers["Authorization"] = f"Bearer {token}"

            result = self._http.get(manifest_url, headers)
            if isinstance(result, Err):
                return Err(RequestError(status=0, body=str(result.error)))

            response = result.value
            match response.status:
                case 200:
                    logger.info(
                        "Found manifest at {} with accept header: {}", manifest_url, media_type
                    )
                    return Ok(True)
                case 404:
                    body = response.text
                    is_last = index == last
                    logger.warning(
                        "Manifest not found with accept header: {}{}",
                        media_type,
                        "" if is_last else ". Trying next accept header",
                    )
                    logger.debug("404 error body for {}: {}", media_type, body)
                    # TODO: confirm against real registries whether an unrecognised
                    # 404 body on an earlier media type should be definitive.
                    if _is_wrong_format(body) or not is_last:
                        continue
                    return Ok(False)
                case 429:
                    logger.error("Rate limit hit for: {}. Error: {}", manifest_url, response.text)
                    return Err(RateLimited(manifest_url))
                case status:
                    logger.warning("Unexpected status code: {} when checking manifest", status)
                    return Err(RequestError(status=status, body=response.text))

        logger.error("No manifest found or no accept header was correct for URL {}", manifest_url)
        return Ok(False)

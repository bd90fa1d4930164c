"""Registry authentication schemes and pull-token exchange.

Registries implementing the Docker token protocol hand out short-lived
bearer tokens from a token endpoint. The endpoint, the ``service`` value and
the preferred credential differ per registry, so each family gets its own
RegistryAuthScheme subclass. Token-issuing registries derive from
TokenAuthScheme:

- registry.hub.docker.com -> DockerHubAuth
- *gitlab*                -> GitLabAuth (adds client_id=docker)
- *ghcr.io*               -> GitHubContainerRegistryAuth (prefers $GITHUB_TOKEN)
- *quay.io*               -> AnonymousAuth (no token request)
- anything else           -> GenericAuth (https://<host>/v2/token)
"""

from __future__ import annotations

import base64
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, ClassVar

from loguru import logger

from vu.core.failures import (
    AuthenticationError,
    InvalidResponse,
    RateLimited,
    RegistryError,
)
from vu.core.result import Err, Ok, Result
from vu.core.secrets import GITHUB_TOKEN
from vu.http.client import build_url
from vu.registry.image import DOCKER_HUB_REGISTRY

if TYPE_CHECKING:
    from vu.core.credentials import RegistryCredential
    from vu.core.secrets import SecretsProvider
    from vu.http.client import HttpClient

__all__ = [
    "RegistryAuthScheme",
    "TokenAuthScheme",
    "DockerHubAuth",
    "GitLabAuth",
    "GitHubContainerRegistryAuth",
    "AnonymousAuth",
    "GenericAuth",
    "RegistryAuthResolver",
    "basic_auth",
    "scheme_for",
]


def basic_auth(credential: RegistryCredential) -> str:
    raw = f"{credential.username}:{credential.password}".encode()
    return f"Basic {base64.b64encode(raw).decode('ascii')}"


class RegistryAuthScheme:
    """Authentication behaviour of one family of registries."""

    name: ClassVar[str]

    def __init__(self, registry: str) -> None:
        self.registry = registry

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.registry!r})"


class TokenAuthScheme(RegistryAuthScheme, ABC):
    """Registries that hand out pull tokens from a token endpoint."""

    @property
    @abstractmethod
    def token_endpoint(self) -> str: ...

    @property
    @abstractmethod
    def service(self) -> str: ...

    def extra_params(self) -> dict[str, str]:
        return {}

    def token_url(self, image_path: str) -> str:
        params = self.extra_params()
        params["service"] = self.service
        params["scope"] = f"repository:{image_path}:pull"
        return build_url(self.token_endpoint, params)

    def authorization(
        self, credential: RegistryCredential | None, secrets: SecretsProvider
    ) -> str | None:
        """Authorization header value for the token request, if any."""
        if credential is None:
            return None
        return basic_auth(credential)


class DockerHubAuth(TokenAuthScheme):
    name = "Docker Hub"

    @property
    def token_endpoint(self) -> str:
        return "https://auth.docker.io/token"

    @property
    def service(self) -> str:
        return "registry.docker.io"


class GitLabAuth(TokenAuthScheme):
    name = "GitLab"

    @property
    def token_endpoint(self) -> str:
        return "https://gitlab.com/jwt/auth"

    @property
    def service(self) -> str:
        return "container_registry"

    def extra_params(self) -> dict[str, str]:
        return {"client_id": "docker"}


class GitHubContainerRegistryAuth(TokenAuthScheme):
    name = "GitHub Container Registry"

    @property
    def token_endpoint(self) -> str:
        return "https://ghcr.io/token"

    @property
    def service(self) -> str:
        return "ghcr.io"

    def authorization(
        self, credential: RegistryCredential | None, secrets: SecretsProvider
    ) -> str | None:
        token = secrets.env(GITHUB_TOKEN)
        if token is not None:
            return f"Bearer {token}"
        return super().authorization(credential, secrets)


class AnonymousAuth(RegistryAuthScheme):
    """Registries that serve public manifests without any token."""

    name = "Anonymous"


class GenericAuth(TokenAuthScheme):
    name = "Generic"

    @property
    def token_endpoint(self) -> str:
        return f"https://{self.registry}/v2/token"

    @property
    def service(self) -> str:
        return self.registry


def scheme_for(registry: str) -> RegistryAuthScheme:
    """Classify a registry host. Rules are checked in order."""
    if registry == DOCKER_HUB_REGISTRY:
        return DockerHubAuth(registry)
    if "gitlab" in registry:
        return GitLabAuth(registry)
    if "ghcr.io" in registry:
        return GitHubContainerRegistryAuth(registry)
    if "quay.io" in registry:
        return AnonymousAuth(registry)
    return GenericAuth(registry)


class RegistryAuthResolver:
    """Exchanges local credentials for a pull-scoped registry token.

    Nothing is cached: every call reads credentials and requests a fresh
    token, even when several services share a registry.
    """

    def __init__(self, http: HttpClient, secrets: SecretsProvider) -> None:
        self._http = http
        self._secrets = secrets

    def authenticate(self, registry: str, image_path: str) -> Result[str | None, RegistryError]:
        """Return a pull token for ``image_path``, or None for anonymous registries."""
        scheme = scheme_for(registry)
        if not isinstance(scheme, TokenAuthScheme):
            logger.debug("Skipping authentication for {}", registry)
            return Ok(None)

        logger.info("Getting registry token for {} ({})", registry, scheme.name)
        credential = self._secrets.registry_credential(registry)
        if isinstance(credential, Err):
            return credential

        url = scheme.token_url(image_path)
        logger.trace("Registry token url is {}", url)

        headers: dict[str, str] = {}
        authorization = scheme.authorization(credential.value, self._secrets)
        if authorization is not None:
            headers["Authorization"] = authorization

        result = self._http.get(url, headers)
        if isinstance(result, Err):
            return Err(AuthenticationError(f"{registry}: {result.error}"))

        response = result.value
        if response.status == 429:
            return Err(RateLimited(f"{registry} token endpoint"))
        if not response.ok:
            return Err(
                AuthenticationError(f"{registry}: token endpoint returned HTTP {response.status}")
            )

        data = response.json_object()
        if isinstance(data, Err):
            return Err(InvalidResponse(f"{registry} token response: {data.error}"))

        token = data.value.get("token") or data.value.get("access_token")
        if not isinstance(token, str) or not token:
            return Err(InvalidResponse(f"{registry} token response has no 'token' field"))

        logger.info("Received registry token for {}", registry)
        return Ok(token)

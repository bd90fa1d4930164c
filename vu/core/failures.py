"""Failure payloads for version resolution and registry validation.

Each failure is an immutable value carried in ``Err``. The unions at the
bottom describe what each stage of the pipeline can return.
"""

from __future__ import annotations

from dataclasses import dataclass

__all__ = [
    "RateLimited",
    "NotFound",
    "ProviderError",
    "MissingCredential",
    "AuthenticationError",
    "InvalidResponse",
    "RequestError",
    "CredentialStoreError",
    "VersionError",
    "RegistryError",
]

_BODY_PREVIEW = 200


@dataclass(frozen=True, slots=True)
class RateLimited:
    """The provider API or registry refused the request due to rate limiting."""

    scope: str

    def __str__(self) -> str:
        return f"Rate limited: {self.scope}"


@dataclass(frozen=True, slots=True)
class NotFound:
    """No release tag matched the version filter."""

    scope: str

    def __str__(self) -> str:
        return f"Not found: no matching version for {self.scope}"


@dataclass(frozen=True, slots=True)
class ProviderError:
    detail: str

    def __str__(self) -> str:
        return f"Provider error: {self.detail}"


@dataclass(frozen=True, slots=True)
class MissingCredential:
    env_var: str

    def __str__(self) -> str:
        return f"Missing credential: {self.env_var} is not set"


@dataclass(frozen=True, slots=True)
class AuthenticationError:
    detail: str

    def __str__(self) -> str:
        return f"Authentication failed: {self.detail}"


@dataclass(frozen=True, slots=True)
class InvalidResponse:
    detail: str

    def __str__(self) -> str:
        return f"Invalid response: {self.detail}"


@dataclass(frozen=True, slots=True)
class RequestError:
    """Unexpected HTTP status from the registry.

    Attributes:
        status: HTTP status code
        body: Response body (truncated in the string form)
    """

    status: int
    body: str

    def __str__(self) -> str:
        body = self.body.strip()
        if len(body) > _BODY_PREVIEW:
            body = body[:_BODY_PREVIEW] + "..."
        if body:
            return f"Unexpected status code {self.status} with body: {body}"
        return f"Unexpected status code {self.status}"


@dataclass(frozen=True, slots=True)
class CredentialStoreError:
    detail: str

    def __str__(self) -> str:
        return f"Credential store error: {self.detail}"


VersionError = RateLimited | NotFound | ProviderError | MissingCredential | InvalidResponse

RegistryError = (
    RateLimited | AuthenticationError | InvalidResponse | RequestError | CredentialStoreError
)

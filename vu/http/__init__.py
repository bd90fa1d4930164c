"""HTTP abstraction shared by providers and registries."""

from vu.http.client import (
    DEFAULT_TIMEOUT,
    USER_AGENT,
    HttpCall,
    HttpClient,
    HttpError,
    HttpResponse,
    MockHttpClient,
    RealHttpClient,
    build_url,
)

__all__ = [
    "DEFAULT_TIMEOUT",
    "USER_AGENT",
    "HttpCall",
    "HttpClient",
    "HttpError",
    "HttpResponse",
    "MockHttpClient",
    "RealHttpClient",
    "build_url",
]

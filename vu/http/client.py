"""HTTP client abstraction for provider and registry calls.

This module provides:
- HttpClient: Protocol for HTTP GET (injectable for tests)
- HttpResponse: Status and body of any completed request
- RealHttpClient: Real implementation using urllib
- MockHttpClient: Queued responses for testing

Unlike a typical client, a 4xx/5xx status is *not* an error here: provider
and registry code must branch on 403/404/429 themselves. ``Err(HttpError)`` is
reserved for requests that never produced a usable response (DNS, TLS,
timeout, malformed or truncated HTTP).
"""

from __future__ import annotations

import http.client
import json
import ssl
import urllib.error
import urllib.parse
import urllib.request
from collections import deque
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable

from vu import __version__
from vu.core.result import Err, Ok, Result
from vu.core.structured import StrDict, as_str_dict

__all__ = [
    "HttpClient",
    "HttpCall",
    "HttpError",
    "HttpResponse",
    "MockHttpClient",
    "RealHttpClient",
    "USER_AGENT",
    "DEFAULT_TIMEOUT",
    "build_url",
]

USER_AGENT = "version-updater"
DEFAULT_TIMEOUT = 30.0


@dataclass(frozen=True, slots=True)
class HttpError:
    """Transport failure details.

    Attributes:
        url: The URL that failed
        status: HTTP status code (0 for network errors)
        message: Human-readable error message
    """

    url: str
    status: int
    message: str

    def __str__(self) -> str:
        if self.status:
            return f"HTTP {self.status}: {self.message} ({self.url})"
        return f"{self.message} ({self.url})"


@dataclass(frozen=True, slots=True)
class HttpResponse:
    url: str
    status: int
    body: bytes = b""

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    @property
    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")

    def json_object(self) -> Result[StrDict, str]:
        """Parse the body as a JSON object."""
        try:
            data_obj: object = json.loads(self.body.decode("utf-8"))
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            return Err(f"JSON parse error: {e}")
        data = as_str_dict(data_obj)
        if data is None:
            return Err("Expected JSON object")
        return Ok(data)


def build_url(base: str, params: Mapping[str, str]) -> str:
    """Append query parameters, keeping ``:`` and ``/`` literal.

    Registry scopes look like ``repository:acme/web:pull`` and are sent
    unescaped.
    """
    if not params:
        return base
    return f"{base}?{urllib.parse.urlencode(params, safe=':/')}"


@runtime_checkable
class HttpClient(Protocol):
    """Protocol for HTTP operations.

    Lets tests inject MockHttpClient instead of touching the network.
    """

    def get(
        self, url: str, headers: Mapping[str, str] | None = None
    ) -> Result[HttpResponse, HttpError]:
        """Issue a GET request.

        Args:
            url: Fully built URL, including query string
            headers: Extra request headers

        Returns:
            Ok with the response (any status), or Err with HttpError
        """
        ...


class RealHttpClient:
    """HTTP client using urllib.

    Holds no per-request state, so one instance is shared by all service
    tasks of a run.
    """

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        user_agent: str = f"{USER_AGENT}/{__version__}",
    ) -> None:
        self.timeout = timeout
        self.user_agent = user_agent
        self._ssl_context = ssl.create_default_context()

    def get(
        self, url: str, headers: Mapping[str, str] | None = None
    ) -> Result[HttpResponse, HttpError]:
        request_headers = {"User-Agent": self.user_agent}
        if headers:
            request_headers.update(headers)

        try:
            req = urllib.request.Request(url, headers=request_headers, method="GET")
            with urllib.request.urlopen(
                req,
                timeout=self.timeout,
                context=self._ssl_context,
            ) as response:
                return Ok(HttpResponse(url=url, status=response.status, body=response.read()))
        except urllib.error.HTTPError as e:
            try:
                body = e.read()
            except (OSError, http.client.HTTPException):
                body = b""
            return Ok(HttpResponse(url=url, status=e.code, body=body))
        except urllib.error.URLError as e:
            return Err(HttpError(url=url, status=0, message=str(e.reason)))
        except TimeoutError:
            return Err(HttpError(url=url, status=0, message="Request timed out"))
        except (ValueError, http.client.HTTPException) as e:
            return Err(HttpError(url=url, status=0, message=str(e) or type(e).__name__))
        except OSError as e:
            return Err(HttpError(url=url, status=0, message=str(e)))


@dataclass(frozen=True, slots=True)
class HttpCall:
    """A request recorded by MockHttpClient."""

    url: str
    headers: dict[str, str]


def _empty_queues() -> dict[str, deque[HttpResponse | HttpError]]:
    return {}


def _empty_calls() -> list[HttpCall]:
    return []


@dataclass
class MockHttpClient:
    """Mock HTTP client for testing.

    Responses are queued per URL. Each call pops the next one; the last
    queued response keeps being returned. Unknown URLs answer 404.

    Usage:
        client = MockHttpClient()
        client.add_json("https://api.example.com/data", {"key": "value"})
        client.add_text("https://reg/v2/x/manifests/1", "manifest unknown", status=404)
    """

    _queues: dict[str, deque[HttpResponse | HttpError]] = field(default_factory=_empty_queues)
    calls: list[HttpCall] = field(default_factory=_empty_calls)

    def add(self, url: str, response: HttpResponse | HttpError) -> None:
        self._queues.setdefault(url, deque()).append(response)

    def add_json(self, url: str, data: object, status: int = 200) -> None:
        self.add(url, HttpResponse(url=url, status=status, body=json.dumps(data).encode()))

    def add_text(self, url: str, text: str, status: int = 200) -> None:
        self.add(url, HttpResponse(url=url, status=status, body=text.encode()))

    def add_error(self, url: str, message: str = "Connection refused") -> None:
        self.add(url, HttpError(url=url, status=0, message=message))

    def get(
        self, url: str, headers: Mapping[str, str] | None = None
    ) -> Result[HttpResponse, HttpError]:
        self.calls.append(HttpCall(url=url, headers=dict(headers or {})))

        queue = self._queues.get(url)
        if not queue:
            return Ok(HttpResponse(url=url, status=404, body=b"Not found (mock)"))

        response = queue.popleft() if len(queue) > 1 else queue[0]
        if isinstance(response, HttpError):
            return Err(response)
        return Ok(response)

    # Test helper methods

    @property
    def urls(self) -> list[str]:
        return [c.url for c in self.calls]

    def calls_to(self, url: str) -> list[HttpCall]:
        return [c for c in self.calls if c.url == url]

"""HTTP client abstraction for the release index and archive downloads.

This module provides:
- HttpClient: Protocol for HTTP operations (injectable for tests)
- RealHttpClient: Real implementation using urllib
- MockHttpClient: Mock implementation for testing

Each request is attempted exactly once; there is no retry.
"""

from __future__ import annotations

import ssl
import urllib.error
import urllib.request
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from tfpick import __version__
from tfpick.core.result import Err, Ok, Result

__all__ = [
    "HttpClient",
    "RealHttpClient",
    "MockHttpClient",
    "HttpError",
]


@dataclass(frozen=True, slots=True)
class HttpError:
    """HTTP error details.

    Attributes:
        url: The URL that failed
        status: HTTP status code (0 for transport errors)
        message: Human-readable error message
    """

    url: str
    status: int
    message: str

    def __str__(self) -> str:
        if self.status:
            return f"HTTP {self.status}: {self.message} ({self.url})"
        return f"{self.message} ({self.url})"


@runtime_checkable
class HttpClient(Protocol):
    """Protocol for HTTP GET operations."""

    def get_text(self, url: str) -> Result[str, HttpError]:
        """Fetch URL and decode the body as UTF-8 text."""
        ...

    def get_bytes(self, url: str) -> Result[bytes, HttpError]:
        """Fetch URL and return the full body."""
        ...


class RealHttpClient:
    """HTTP client using urllib with system certificates.

    Non-2xx responses and transport failures come back as ``Err(HttpError)``.
    """

    def __init__(self, timeout: float = 30.0, user_agent: str = f"tfpick/{__version__}") -> None:
        self.timeout = timeout
        self.user_agent = user_agent
        self._ssl_context = ssl.create_default_context()

    def _fetch(self, url: str) -> Result[bytes, HttpError]:
        try:
            request = urllib.request.Request(url, headers={"User-Agent": self.user_agent})
            with urllib.request.urlopen(
                request, timeout=self.timeout, context=self._ssl_context
            ) as response:
                status = getattr(response, "status", 200)
                if not 200 <= status < 300:
                    return Err(HttpError(url=url, status=status, message="Unexpected status"))
                return Ok(response.read())
        except urllib.error.HTTPError as e:
            return Err(HttpError(url=url, status=e.code, message=str(e.reason)))
        except urllib.error.URLError as e:
            return Err(HttpError(url=url, status=0, message=str(e.reason)))
        except TimeoutError:
            return Err(HttpError(url=url, status=0, message="Request timed out"))
        except (ValueError, OSError) as e:
            # ValueError: malformed URL
            return Err(HttpError(url=url, status=0, message=str(e)))

    def get_text(self, url: str) -> Result[str, HttpError]:
        result = self._fetch(url)
        if isinstance(result, Err):
            return result

        try:
            return Ok(result.value.decode("utf-8"))
        except UnicodeDecodeError as e:
            return Err(HttpError(url=url, status=0, message=f"Decode error: {e}"))

    def get_bytes(self, url: str) -> Result[bytes, HttpError]:
        return self._fetch(url)


class MockHttpClient:
    """In-memory HTTP client for tests.

    Responses are registered per URL; anything unregistered answers 404.
    Every request is appended to ``calls`` as ``(method, url)``.

    Usage:
        client = MockHttpClient()
        client.set_text("https://releases.example.com/terraform", index_html)
        client.set_bytes(archive_url, zip_bytes)
    """

    def __init__(self) -> None:
        self._text: dict[str, str | HttpError] = {}
        self._bytes: dict[str, bytes | HttpError] = {}
        self.calls: list[tuple[str, str]] = []

    def set_text(self, url: str, response: str | HttpError) -> None:
        self._text[url] = response

    def set_bytes(self, url: str, response: bytes | HttpError) -> None:
        self._bytes[url] = response

    def _answer[T](
        self, method: str, url: str, table: dict[str, T | HttpError]
    ) -> Result[T, HttpError]:
        self.calls.append((method, url))
        match table.get(url):
            case None:
                return Err(HttpError(url=url, status=404, message="Not found (mock)"))
            case HttpError() as error:
                return Err(error)
            case body:
                return Ok(body)

    def get_text(self, url: str) -> Result[str, HttpError]:
        return self._answer("get_text", url, self._text)

    def get_bytes(self, url: str) -> Result[bytes, HttpError]:
        return self._answer("get_bytes", url, self._bytes)

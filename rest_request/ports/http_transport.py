"""HTTP transport port: contract for sending requests and downloading bodies.

Domain and application code depend on this port; infrastructure (e.g. httpx)
implements it. Keeps domain free of infrastructure imports.
"""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Protocol, runtime_checkable

from rest_request.domain.models import Request


class HttpClientError(Exception):
    """Base for transport failures (connection, protocol, etc.)."""


class HttpClientTimeoutError(HttpClientError):
    """Raised when the request times out."""


@runtime_checkable
class HttpResponse(Protocol):
    """Minimal read-only view of an HTTP response."""

    @property
    def headers(self) -> Mapping[str, str]: ...

    @property
    def status_code(self) -> int: ...

    @property
    def url(self) -> str: ...

    @property
    def content(self) -> bytes: ...

    @property
    def elapsed_seconds(self) -> float: ...


@dataclass(frozen=True)
class DownloadedFile:
    """Temporary location of a downloaded body; path is None when nothing was stored."""

    path: Path | None
    response: HttpResponse | None


@runtime_checkable
class HttpTransport(Protocol):
    """Port: send requests. Implementations live in infrastructure."""

    async def send(self, request: Request) -> HttpResponse:
        """Send the request; raise HttpClientTimeoutError or HttpClientError on transport failure.

        HTTP error statuses are returned, not raised.
        """
        ...

    async def download(self, request: Request) -> DownloadedFile:
        """Stream the response body to a temporary file; raise HttpClientError on transport failure."""
        ...

    async def close(self) -> None:
        """Release resources (e.g. connection pool). No-op allowed if nothing to close."""
        ...

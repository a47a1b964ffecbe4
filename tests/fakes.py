"""Hand-written fakes for the transport, file and breaker collaborators."""
from __future__ import annotations

from pathlib import Path
from typing import Any

from rest_request.application.rest_request import RestRequest
from rest_request.domain.models import ApiKey, Credentials, HTTPMethod, Request
from rest_request.ports.circuit_breaker import BreakerError
from rest_request.ports.file_mover import FileMoveError
from rest_request.ports.http_transport import DownloadedFile, HttpClientError


class FakeResponse:
    """Implements HttpResponse for tests."""

    def __init__(
        self,
        status_code: int = 200,
        content: bytes = b"",
        *,
        headers: dict[str, str] | None = None,
        url: str = "https://example.com",
    ) -> None:
        self.status_code = status_code
        self.content = content
        self.headers = headers or {}
        self.url = url
        self.elapsed_seconds = 0.01


class FakeTransport:
    """Implements HttpTransport for tests.

    Each send() consumes the next scripted reply: a FakeResponse is returned, an
    exception is raised. The last reply repeats once the script is exhausted.
    """

    def __init__(self, *replies: Any, download: DownloadedFile | Exception | None = None) -> None:
        self._replies = list(replies) or [FakeResponse()]
        self._download = download
        self.sent: list[Request] = []
        self.downloads: list[Request] = []
        self.closed = False

    @property
    def send_count(self) -> int:
        return len(self.sent)

    async def send(self, request: Request) -> FakeResponse:
        self.sent.append(request)
        reply = self._replies.pop(0) if len(self._replies) > 1 else self._replies[0]
        if isinstance(reply, Exception):
            raise reply
        return reply

    async def download(self, request: Request) -> DownloadedFile:
        self.downloads.append(request)
        if isinstance(self._download, Exception):
            raise self._download
        if self._download is None:
            return DownloadedFile(path=None, response=None)
        return self._download

    async def close(self) -> None:
        self.closed = True


class FakeFileMover:
    """Implements FileMover for tests; records moves, optionally fails."""

    def __init__(self, *, fail: bool = False) -> None:
        self.fail = fail
        self.moves: list[tuple[Path, Path]] = []

    def move(self, source: Path, destination: Path) -> None:
        if self.fail:
            raise FileMoveError(f"cannot move {source} to {destination}")
        self.moves.append((source, destination))


class RecordingFallback:
    def __init__(self) -> None:
        self.calls: list[tuple[BreakerError, Any]] = []

    def __call__(self, error: BreakerError, context: Any) -> None:
        self.calls.append((error, context))


class ManualClock:
    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def make_client(
    url: str = "https://api.example.com/items",
    *,
    transport: FakeTransport | None = None,
    file_mover: FakeFileMover | None = None,
    credentials: Credentials | None = None,
    method: HTTPMethod = HTTPMethod.GET,
    breaker: Any = None,
    **kwargs: Any,
) -> RestRequest:
    return RestRequest(
        method,
        url,
        credentials or ApiKey(),
        transport=transport or FakeTransport(),
        file_mover=file_mover or FakeFileMover(),
        breaker=breaker,
        **kwargs,
    )


def transport_error(message: str = "connection refused") -> HttpClientError:
    return HttpClientError(message)

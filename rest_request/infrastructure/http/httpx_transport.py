"""Concrete transport implementation using httpx (injected where HttpTransport is needed)."""
from __future__ import annotations

import asyncio
import contextlib
import os
import tempfile
from pathlib import Path

import httpx

from rest_request.domain.models import Request
from rest_request.ports.http_transport import (
    DownloadedFile,
    HttpClientError,
    HttpClientTimeoutError,
    HttpResponse,
    HttpTransport,
)


def _discard(path: Path) -> None:
    with contextlib.suppress(OSError):
        path.unlink(missing_ok=True)


class _HttpxResponseAdapter:
    """Adapts httpx.Response to the HttpResponse protocol."""

    def __init__(self, response: httpx.Response) -> None:
        self._response = response

    def __repr__(self) -> str:
        return f"<HttpResponse [{self.status_code}] {self.url}>"

    @property
    def headers(self) -> httpx.Headers:
        return self._response.headers

    @property
    def status_code(self) -> int:
        return self._response.status_code

    @property
    def url(self) -> str:
        return str(self._response.url)

    @property
    def content(self) -> bytes:
        return self._response.content

    @property
    def elapsed_seconds(self) -> float:
        try:
            return self._response.elapsed.total_seconds()
        except RuntimeError:
            # elapsed is only set once the response has been closed
            return 0.0


class HttpxTransport(HttpTransport):
    """HttpTransport implementation using httpx.AsyncClient. Status codes are never raised."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        *,
        download_dir: str | None = None,
        chunk_size: int = 64 * 1024,
    ) -> None:
        self._client = client
        self._download_dir = download_dir
        self._chunk_size = chunk_size

    def _build(self, request: Request) -> httpx.Request:
        try:
            httpx_request = self._client.build_request(
                request.method.value,
                request.url,
                headers=request.headers,
                content=request.body,
            )
        except httpx.InvalidURL as exc:
            raise HttpClientError(f"invalid url {request.url!r}: {exc}") from exc
        if not httpx_request.url.scheme or not httpx_request.url.host:
            raise HttpClientError(f"request url {request.url!r} is not absolute")
        return httpx_request

    async def send(self, request: Request) -> HttpResponse:
        httpx_request = self._build(request)
        try:
            response = await self._client.send(httpx_request)
            return _HttpxResponseAdapter(response)
        except httpx.TimeoutException as exc:
            raise HttpClientTimeoutError(f"timeout while fetching {request.url}") from exc
        except httpx.HTTPError as exc:
            raise HttpClientError(f"http fetch failed for {request.url}: {exc}") from exc

    async def download(self, request: Request) -> DownloadedFile:
        httpx_request = self._build(request)
        try:
            fd, name = await asyncio.to_thread(
                tempfile.mkstemp, prefix="rest-request-", suffix=".download", dir=self._download_dir
            )
        except OSError as exc:
            raise HttpClientError(f"cannot create download file in {self._download_dir}: {exc}") from exc
        path = Path(name)
        try:
            with os.fdopen(fd, "wb") as handle:
                response = await self._client.send(httpx_request, stream=True)
                try:
                    async for chunk in response.aiter_bytes(self._chunk_size):
                        await asyncio.to_thread(handle.write, chunk)
                finally:
                    await response.aclose()
        except httpx.TimeoutException as exc:
            _discard(path)
            raise HttpClientTimeoutError(f"timeout while downloading {request.url}") from exc
        except httpx.HTTPError as exc:
            _discard(path)
            raise HttpClientError(f"http download failed for {request.url}: {exc}") from exc
        except OSError as exc:
            _discard(path)
            raise HttpClientError(f"writing download of {request.url} failed: {exc}") from exc
        return DownloadedFile(path=path, response=_HttpxResponseAdapter(response))

    async def close(self) -> None:
        await self._client.aclose()

"""Downloader: stream a response body to a temporary file, then move it into place."""
from __future__ import annotations

import asyncio
import contextlib
from pathlib import Path

from loguru import logger

from rest_request.constants import SERVICE_NAME
from rest_request.domain.errors import RestError
from rest_request.domain.models import DownloadResponse, Request
from rest_request.ports.file_mover import FileMoveError, FileMover
from rest_request.ports.http_transport import HttpClientError, HttpTransport


class Downloader:
    """A move failure wins over transport success: no response metadata is reported then."""

    def __init__(self, transport: HttpTransport, file_mover: FileMover) -> None:
        self._transport = transport
        self._file_mover = file_mover

    async def download(self, request: Request, destination: Path) -> DownloadResponse:
        try:
            downloaded = await self._transport.download(request)
        except HttpClientError as exc:
            logger.bind(service_name=SERVICE_NAME, event="transport_error", url=request.url).warning(
                "download failed: {}", exc
            )
            error = RestError.invalid_file()
            error.__cause__ = exc
            return DownloadResponse(response=None, error=error)

        if downloaded.path is None:
            return DownloadResponse(response=None, error=RestError.invalid_file())

        try:
            await asyncio.to_thread(self._file_mover.move, downloaded.path, destination)
        except FileMoveError as exc:
            logger.bind(
                service_name=SERVICE_NAME,
                event="download_move_failed",
                destination=str(destination),
            ).warning("{}", exc)
            with contextlib.suppress(OSError):
                downloaded.path.unlink(missing_ok=True)
            error = RestError.file_manager_error(str(exc))
            error.__cause__ = exc
            return DownloadResponse(response=None, error=error)

        logger.bind(
            service_name=SERVICE_NAME,
            event="download_completed",
            destination=str(destination),
        ).debug("")
        return DownloadResponse(response=downloaded.response, error=None)

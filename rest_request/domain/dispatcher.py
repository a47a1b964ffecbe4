"""Dispatcher: one transport round-trip per call, transport errors captured as values."""
from __future__ import annotations

from dataclasses import dataclass

from loguru import logger

from rest_request.constants import SERVICE_NAME
from rest_request.domain.models import Request
from rest_request.ports.http_transport import HttpClientError, HttpResponse, HttpTransport


@dataclass(frozen=True)
class DispatchOutcome:
    """Raw result of a dispatch. error is set only for transport-level failures."""

    data: bytes | None
    response: HttpResponse | None
    error: BaseException | None = None

    @property
    def failed(self) -> bool:
        return self.error is not None


class Dispatcher:
    """Sends a Request through the transport. No retries."""

    def __init__(self, transport: HttpTransport) -> None:
        self._transport = transport

    async def send(self, request: Request) -> DispatchOutcome:
        try:
            response = await self._transport.send(request)
        except HttpClientError as exc:
            logger.bind(
                service_name=SERVICE_NAME,
                event="transport_error",
                method=request.method.value,
                url=request.url,
            ).warning("transport failure: {}", exc)
            return DispatchOutcome(data=None, response=None, error=exc)

        logger.bind(
            service_name=SERVICE_NAME,
            event="request_dispatched",
            method=request.method.value,
            url=request.url,
            status_code=response.status_code,
        ).debug("")
        return DispatchOutcome(data=response.content, response=response)

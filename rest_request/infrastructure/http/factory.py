"""HTTP transport factory: builds HttpTransport from settings (no provider logic in composition)."""
from __future__ import annotations

import httpx

from rest_request.config.settings import RestRequestSettings
from rest_request.infrastructure.http.httpx_transport import HttpxTransport
from rest_request.ports.http_transport import HttpTransport


def create_http_transport(settings: RestRequestSettings) -> HttpTransport:
    """Build the transport. One AsyncClient (connection pool) per RestRequest instance."""
    timeout = httpx.Timeout(
        connect=settings.connect_timeout_seconds,
        read=settings.read_timeout_seconds,
        write=settings.read_timeout_seconds,
        pool=settings.connect_timeout_seconds,
    )
    async_client = httpx.AsyncClient(
        timeout=timeout,
        follow_redirects=settings.follow_redirects,
        verify=settings.verify_tls,
    )
    return HttpxTransport(async_client, download_dir=settings.download_dir or None)

"""Composition root: build a RestRequest with concrete collaborators.

Composition may: import concrete classes, call factories, pass interface types
into the client.
"""
from __future__ import annotations

from typing import Any, Callable, Mapping

from rest_request.application.rest_request import RestRequest
from rest_request.config.settings import RestRequestSettings
from rest_request.domain.models import CircuitParameters, Credentials, HTTPMethod, RequestParameters
from rest_request.infrastructure.breaker.circuit_breaker import CircuitBreaker
from rest_request.infrastructure.files.local_file_mover import LocalFileMover
from rest_request.infrastructure.http.factory import create_http_transport
from rest_request.ports.circuit_breaker import BreakerError, CircuitBreakerPort
from rest_request.ports.file_mover import FileMover
from rest_request.ports.http_transport import HttpTransport


def create_circuit_breaker(circuit_parameters: CircuitParameters | None) -> CircuitBreakerPort | None:
    if circuit_parameters is None:
        return None
    return CircuitBreaker(circuit_parameters)


def circuit_parameters_from_settings(
    settings: RestRequestSettings,
    fallback: Callable[[BreakerError, Any], None],
) -> CircuitParameters:
    """CircuitParameters using the configured REST_CIRCUIT_* defaults."""
    return CircuitParameters(
        fallback=fallback,
        timeout_ms=settings.circuit_timeout_ms,
        reset_timeout_ms=settings.circuit_reset_timeout_ms,
        max_failures=settings.circuit_max_failures,
        rolling_window_ms=settings.circuit_rolling_window_ms,
        bulkhead_size=settings.circuit_bulkhead_size,
    )


def create_rest_request(
    method: HTTPMethod,
    url: str,
    credentials: Credentials,
    header_parameters: Mapping[str, str] | None = None,
    accept_type: str | None = None,
    content_type: str | None = None,
    message_body: bytes | None = None,
    product_info: str | None = None,
    circuit_parameters: CircuitParameters | None = None,
    *,
    fallback: Callable[[BreakerError, Any], None] | None = None,
    settings: RestRequestSettings | None = None,
    transport: HttpTransport | None = None,
    file_mover: FileMover | None = None,
) -> RestRequest:
    """Wire a RestRequest. Passing only fallback builds the breaker from settings."""
    settings = settings or RestRequestSettings()
    if product_info is None and settings.product_info:
        product_info = settings.product_info
    if circuit_parameters is None and fallback is not None:
        circuit_parameters = circuit_parameters_from_settings(settings, fallback)
    return RestRequest(
        method,
        url,
        credentials,
        header_parameters=header_parameters,
        accept_type=accept_type,
        content_type=content_type,
        message_body=message_body,
        product_info=product_info,
        transport=transport or create_http_transport(settings),
        file_mover=file_mover or LocalFileMover(),
        breaker=create_circuit_breaker(circuit_parameters),
    )


def create_rest_request_from_parameters(
    parameters: RequestParameters,
    circuit_parameters: CircuitParameters | None = None,
    *,
    fallback: Callable[[BreakerError, Any], None] | None = None,
    settings: RestRequestSettings | None = None,
    transport: HttpTransport | None = None,
    file_mover: FileMover | None = None,
) -> RestRequest:
    return create_rest_request(
        parameters.method,
        parameters.url,
        parameters.credentials,
        header_parameters=parameters.header_parameters,
        accept_type=parameters.accept_type,
        content_type=parameters.content_type,
        message_body=parameters.message_body,
        circuit_parameters=circuit_parameters,
        fallback=fallback,
        settings=settings,
        transport=transport,
        file_mover=file_mover,
    )

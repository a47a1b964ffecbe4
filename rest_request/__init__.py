"""Declarative HTTP request client with optional circuit breaking and typed decoding."""
from rest_request.application.rest_request import RestRequest
from rest_request.composition import create_rest_request, create_rest_request_from_parameters
from rest_request.config.settings import RestRequestSettings
from rest_request.domain.errors import RestError, RestErrorKind
from rest_request.domain.models import (
    ApiKey,
    BasicAuth,
    CircuitParameters,
    DownloadResponse,
    Failure,
    HTTPMethod,
    Request,
    RequestParameters,
    RestResponse,
    Success,
)
from rest_request.ports.circuit_breaker import BreakerError, BreakerErrorKind

__all__ = [
    "ApiKey",
    "BasicAuth",
    "BreakerError",
    "BreakerErrorKind",
    "CircuitParameters",
    "DownloadResponse",
    "Failure",
    "HTTPMethod",
    "Request",
    "RequestParameters",
    "RestError",
    "RestErrorKind",
    "RestRequest",
    "RestRequestSettings",
    "RestResponse",
    "Success",
    "create_rest_request",
    "create_rest_request_from_parameters",
]

"""RestRequest: one client per logical endpoint, callable repeatedly.

Each response_* call runs the same pipeline: template substitution, query merge,
dispatch (through the circuit gate when a breaker is configured), optional
response_to_error hook, then a variant-specific decode step. Every call resolves
with exactly one RestResponse; failures are carried in its result, never raised.

The owned Request is shared by all calls on an instance. Substitution and the query
merge overwrite it, and the dispatch reads it when the send actually starts, so
concurrent calls on one instance can observe each other's url and query. Use one
instance per endpoint-and-query combination, or serialize calls, when that matters.
"""
from __future__ import annotations

from dataclasses import replace
from pathlib import Path
from typing import Any, Callable, Mapping, Sequence, Type, TypeVar

from loguru import logger
from pydantic import ValidationError

from rest_request.constants import SERVICE_NAME
from rest_request.domain import json_path, query
from rest_request.domain.circuit_gate import CircuitGate
from rest_request.domain.dispatcher import DispatchOutcome, Dispatcher
from rest_request.domain.downloader import Downloader
from rest_request.domain.errors import RestError
from rest_request.domain.models import (
    Credentials,
    DownloadResponse,
    Failure,
    HTTPMethod,
    Request,
    RestResponse,
    Result,
    Success,
)
from rest_request.domain.query import QueryItem
from rest_request.domain.request_builder import build_request
from rest_request.domain.url_template import expand
from rest_request.ports.circuit_breaker import CircuitBreakerPort
from rest_request.ports.file_mover import FileMover
from rest_request.ports.http_transport import HttpResponse, HttpTransport

T = TypeVar("T")

ResponseToError = Callable[[HttpResponse | None, bytes | None], BaseException | None]

# (result, body to report on the RestResponse)
_Decoded = tuple[Result[Any], bytes | None]


def _log(event: str, **kwargs: Any) -> None:
    logger.bind(service_name=SERVICE_NAME, event=event, **kwargs).debug("")


class RestRequest:
    """Builds a request once and executes it on demand, decoding into typed results."""

    def __init__(
        self,
        method: HTTPMethod,
        url: str,
        credentials: Credentials,
        header_parameters: Mapping[str, str] | None = None,
        accept_type: str | None = None,
        content_type: str | None = None,
        message_body: bytes | None = None,
        product_info: str | None = None,
        *,
        transport: HttpTransport,
        file_mover: FileMover,
        breaker: CircuitBreakerPort | None = None,
    ) -> None:
        built = build_request(
            method,
            url,
            credentials,
            header_parameters=header_parameters,
            accept_type=accept_type,
            content_type=content_type,
            message_body=message_body,
            product_info=product_info,
        )
        self._request = built.request
        self._url_template = built.url_template
        self._transport = transport
        self._gate = CircuitGate(Dispatcher(transport), breaker)
        self._downloader = Downloader(transport, file_mover)

    async def __aenter__(self) -> "RestRequest":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def close(self) -> None:
        await self._transport.close()

    @property
    def request(self) -> Request:
        return self._request

    @property
    def url_template(self) -> str | None:
        return self._url_template

    @property
    def breaker(self) -> CircuitBreakerPort | None:
        return self._gate.breaker

    @property
    def query_items(self) -> list[QueryItem] | None:
        return query.query_items(self._request)

    @query_items.setter
    def query_items(self, items: Sequence[QueryItem] | None) -> None:
        self._request = query.merge(self._request, items)

    async def response(self) -> DispatchOutcome:
        """Dispatch the current request as-is and return the raw outcome."""
        return await self._gate.dispatch(lambda: self._request)

    async def response_data(
        self,
        template_params: Mapping[str, str] | None = None,
        query_items: Sequence[QueryItem] | None = None,
    ) -> RestResponse[bytes]:
        def _decode(outcome: DispatchOutcome) -> _Decoded:
            if not outcome.data:
                return Failure(RestError.no_data()), None
            return Success(outcome.data), outcome.data

        return await self._perform(template_params, query_items, None, _decode)

    async def response_object(
        self,
        model: Type[T],
        *,
        response_to_error: ResponseToError | None = None,
        path: Sequence[json_path.PathElement] | None = None,
        template_params: Mapping[str, str] | None = None,
        query_items: Sequence[QueryItem] | None = None,
    ) -> RestResponse[T]:
        def _decode(outcome: DispatchOutcome) -> _Decoded:
            if not outcome.data:
                return Failure(RestError.no_data()), None
            try:
                value = json_path.decode_object(outcome.data, model, path)
            except (ValueError, ValidationError, RecursionError, json_path.JSONPathError) as exc:
                _log("response_decode_failed", variant="object", error=str(exc))
                return Failure(exc), outcome.data
            return Success(value), outcome.data

        return await self._perform(template_params, query_items, response_to_error, _decode)

    async def response_array(
        self,
        model: Type[T],
        *,
        response_to_error: ResponseToError | None = None,
        path: Sequence[json_path.PathElement] | None = None,
        template_params: Mapping[str, str] | None = None,
        query_items: Sequence[QueryItem] | None = None,
    ) -> RestResponse[list[T]]:
        def _decode(outcome: DispatchOutcome) -> _Decoded:
            if not outcome.data:
                return Failure(RestError.no_data()), None
            try:
                values = json_path.decode_array(outcome.data, model, path)
            except (ValueError, ValidationError, RecursionError, json_path.JSONPathError) as exc:
                _log("response_decode_failed", variant="array", error=str(exc))
                return Failure(exc), outcome.data
            return Success(values), outcome.data

        return await self._perform(template_params, query_items, response_to_error, _decode)

    async def response_string(
        self,
        *,
        response_to_error: ResponseToError | None = None,
        template_params: Mapping[str, str] | None = None,
        query_items: Sequence[QueryItem] | None = None,
    ) -> RestResponse[str]:
        def _decode(outcome: DispatchOutcome) -> _Decoded:
            if not outcome.data:
                return Failure(RestError.no_data()), None
            try:
                text = outcome.data.decode("utf-8")
            except UnicodeDecodeError as exc:
                _log("response_decode_failed", variant="string", error=str(exc))
                error = RestError.serialization_error()
                error.__cause__ = exc
                return Failure(error), None
            return Success(text), outcome.data

        return await self._perform(template_params, query_items, response_to_error, _decode)

    async def response_void(
        self,
        *,
        response_to_error: ResponseToError | None = None,
        template_params: Mapping[str, str] | None = None,
        query_items: Sequence[QueryItem] | None = None,
    ) -> RestResponse[None]:
        def _decode(outcome: DispatchOutcome) -> _Decoded:
            return Success(None), outcome.data

        return await self._perform(template_params, query_items, response_to_error, _decode)

    async def download(self, destination: Path | str) -> DownloadResponse:
        """Download the current request's body to destination (not breaker-protected)."""
        return await self._downloader.download(self._request, Path(destination))

    def _perform_substitutions(self, params: Mapping[str, str] | None) -> None:
        if params is None:
            return
        source = self._url_template if self._url_template is not None else self._request.url
        self._request = replace(self._request, url=expand(source, params))
        _log("template_expanded", url=self._request.url)

    async def _perform(
        self,
        template_params: Mapping[str, str] | None,
        query_items: Sequence[QueryItem] | None,
        response_to_error: ResponseToError | None,
        decode: Callable[[DispatchOutcome], _Decoded],
    ) -> RestResponse[Any]:
        try:
            self._perform_substitutions(template_params)
        except RestError as exc:
            return RestResponse(request=self._request, response=None, data=None, result=Failure(exc))
        self.query_items = query_items

        outcome = await self._gate.dispatch(lambda: self._request)

        if outcome.error is not None:
            return RestResponse(
                request=self._request,
                response=outcome.response,
                data=outcome.data,
                result=Failure(outcome.error),
            )

        if response_to_error is not None:
            error = response_to_error(outcome.response, outcome.data)
            if error is not None:
                return RestResponse(
                    request=self._request,
                    response=outcome.response,
                    data=outcome.data,
                    result=Failure(error),
                )

        result, data = decode(outcome)
        return RestResponse(request=self._request, response=outcome.response, data=data, result=result)

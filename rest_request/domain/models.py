"""Domain models: request description, credentials, results and responses."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Generic, Mapping, TypeVar, Union

from rest_request.constants import CIRCUIT_DEFAULTS

if TYPE_CHECKING:
    from rest_request.ports.circuit_breaker import BreakerError
    from rest_request.ports.http_transport import HttpResponse

T = TypeVar("T")


class HTTPMethod(str, Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    HEAD = "HEAD"
    PATCH = "PATCH"
    OPTIONS = "OPTIONS"
    TRACE = "TRACE"
    CONNECT = "CONNECT"


@dataclass(frozen=True)
class ApiKey:
    """API key authentication. The key itself travels in the caller's header parameters."""


@dataclass(frozen=True)
class BasicAuth:
    username: str
    password: str = field(repr=False)


Credentials = Union[ApiKey, BasicAuth]


@dataclass(frozen=True)
class Request:
    """Outbound request description (value object).

    Headers are stored with the casing of the last write; lookups are case-insensitive.
    """

    method: HTTPMethod
    url: str
    headers: dict[str, str] = field(default_factory=dict)
    body: bytes | None = None

    def header(self, name: str) -> str | None:
        wanted = name.lower()
        for key, value in self.headers.items():
            if key.lower() == wanted:
                return value
        return None


@dataclass(frozen=True)
class RequestParameters:
    """Everything needed to construct a RestRequest apart from breaker settings."""

    method: HTTPMethod
    url: str
    credentials: Credentials
    header_parameters: Mapping[str, str] = field(default_factory=dict)
    accept_type: str | None = None
    content_type: str | None = None
    message_body: bytes | None = None


@dataclass(frozen=True)
class CircuitParameters:
    """Breaker configuration. Times are in milliseconds; bulkhead 0 means unbounded."""

    fallback: Callable[["BreakerError", Any], None]
    timeout_ms: int = CIRCUIT_DEFAULTS.TIMEOUT_MS
    reset_timeout_ms: int = CIRCUIT_DEFAULTS.RESET_TIMEOUT_MS
    max_failures: int = CIRCUIT_DEFAULTS.MAX_FAILURES
    rolling_window_ms: int = CIRCUIT_DEFAULTS.ROLLING_WINDOW_MS
    bulkhead_size: int = CIRCUIT_DEFAULTS.BULKHEAD_SIZE

    def __post_init__(self) -> None:
        if not callable(self.fallback):
            raise TypeError("circuit fallback must be callable")
        for name in ("timeout_ms", "reset_timeout_ms", "max_failures", "rolling_window_ms"):
            if getattr(self, name) <= 0:
                raise ValueError(f"circuit {name} must be > 0")
        if self.bulkhead_size < 0:
            raise ValueError("circuit bulkhead_size must be >= 0")


@dataclass(frozen=True)
class Success(Generic[T]):
    value: T

    @property
    def is_success(self) -> bool:
        return True

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True)
class Failure:
    error: BaseException

    @property
    def is_success(self) -> bool:
        return False

    def unwrap(self) -> Any:
        raise self.error


Result = Union[Success[T], Failure]


@dataclass(frozen=True)
class RestResponse(Generic[T]):
    """Completed call: final request, transport metadata, raw body and typed result."""

    request: Request
    response: "HttpResponse | None"
    data: bytes | None
    result: Result[T]


@dataclass(frozen=True)
class DownloadResponse:
    """Outcome of a download: response metadata and/or an error."""

    response: "HttpResponse | None"
    error: BaseException | None = None

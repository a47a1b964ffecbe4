"""Client-local error taxonomy.

Transport and decode errors are never remapped into RestError; they travel to the
caller unchanged inside a Failure.
"""
from __future__ import annotations

from enum import Enum


class RestErrorKind(str, Enum):
    NO_DATA = "no_data"
    SERIALIZATION_ERROR = "serialization_error"
    ENCODING_ERROR = "encoding_error"
    FILE_MANAGER_ERROR = "file_manager_error"
    INVALID_FILE = "invalid_file"
    INVALID_SUBSTITUTION = "invalid_substitution"


_MESSAGES = {
    RestErrorKind.NO_DATA: "no data was returned from the network",
    RestErrorKind.SERIALIZATION_ERROR: "response data could not be parsed",
    RestErrorKind.ENCODING_ERROR: "data could not be encoded",
    RestErrorKind.FILE_MANAGER_ERROR: "file could not be moved to its destination",
    RestErrorKind.INVALID_FILE: "no downloaded file is available",
    RestErrorKind.INVALID_SUBSTITUTION: "url template substitution failed",
}


class RestError(Exception):
    """Deterministic failure not attributable to the network or the decoder."""

    def __init__(self, kind: RestErrorKind, detail: str | None = None) -> None:
        message = _MESSAGES[kind] if detail is None else f"{_MESSAGES[kind]}: {detail}"
        super().__init__(message)
        self.kind = kind

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RestError):
            return NotImplemented
        return self.kind is other.kind

    def __hash__(self) -> int:
        return hash(self.kind)

    def __repr__(self) -> str:
        return f"RestError({self.kind.name})"

    @classmethod
    def no_data(cls) -> "RestError":
        return cls(RestErrorKind.NO_DATA)

    @classmethod
    def serialization_error(cls, detail: str | None = None) -> "RestError":
        return cls(RestErrorKind.SERIALIZATION_ERROR, detail)

    @classmethod
    def encoding_error(cls, detail: str | None = None) -> "RestError":
        return cls(RestErrorKind.ENCODING_ERROR, detail)

    @classmethod
    def file_manager_error(cls, detail: str | None = None) -> "RestError":
        return cls(RestErrorKind.FILE_MANAGER_ERROR, detail)

    @classmethod
    def invalid_file(cls) -> "RestError":
        return cls(RestErrorKind.INVALID_FILE)

    @classmethod
    def invalid_substitution(cls, detail: str | None = None) -> "RestError":
        return cls(RestErrorKind.INVALID_SUBSTITUTION, detail)

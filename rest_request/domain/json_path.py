"""JSON decoding collaborator: parse bytes, walk a bounded key/index path, decode to a type.

Errors raised here are decode errors and reach callers unchanged.
"""
from __future__ import annotations

import json
from functools import lru_cache
from typing import Any, Sequence, Type, TypeVar, Union

from pydantic import TypeAdapter

from rest_request.constants import MAX_PATH_DEPTH

T = TypeVar("T")

PathElement = Union[str, int]


class JSONPathError(Exception):
    """Base for failures while locating a node inside parsed JSON."""


class KeyNotFoundError(JSONPathError):
    def __init__(self, key: str) -> None:
        super().__init__(f"key not found: {key!r}")
        self.key = key


class IndexOutOfRangeError(JSONPathError):
    def __init__(self, index: int) -> None:
        super().__init__(f"index out of range: {index}")
        self.index = index


class UnexpectedTypeError(JSONPathError):
    def __init__(self, expected: str, found: Any) -> None:
        super().__init__(f"expected {expected}, found {type(found).__name__}")
        self.expected = expected


class PathTooDeepError(JSONPathError):
    def __init__(self, depth: int) -> None:
        super().__init__(f"path depth {depth} exceeds the limit of {MAX_PATH_DEPTH}")
        self.depth = depth


def parse(data: bytes) -> Any:
    return json.loads(data)


def navigate(node: Any, path: Sequence[PathElement] | None) -> Any:
    """Walk str keys through objects and int indices through arrays. None or [] is the root."""
    if not path:
        return node
    if len(path) > MAX_PATH_DEPTH:
        raise PathTooDeepError(len(path))
    for element in path:
        # bool is an int subclass but never a valid index
        if isinstance(element, int) and not isinstance(element, bool):
            if not isinstance(node, list):
                raise UnexpectedTypeError("array", node)
            if not 0 <= element < len(node):
                raise IndexOutOfRangeError(element)
            node = node[element]
        elif isinstance(element, str):
            if not isinstance(node, dict):
                raise UnexpectedTypeError("object", node)
            if element not in node:
                raise KeyNotFoundError(element)
            node = node[element]
        else:
            raise TypeError(f"path elements must be str or int, got {type(element).__name__}")
    return node


@lru_cache(maxsize=128)
def _adapter(target: Any) -> TypeAdapter[Any]:
    return TypeAdapter(target)


def decode(node: Any, target: Type[T]) -> T:
    return _adapter(target).validate_python(node)


def decode_object(data: bytes, target: Type[T], path: Sequence[PathElement] | None = None) -> T:
    return decode(navigate(parse(data), path), target)


def decode_array(data: bytes, target: Type[T], path: Sequence[PathElement] | None = None) -> list[T]:
    located = navigate(parse(data), path)
    if not isinstance(located, list):
        raise UnexpectedTypeError("array", located)
    return [decode(element, target) for element in located]

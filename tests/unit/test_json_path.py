"""Unit tests for JSON parsing, bounded path navigation and typed decoding."""
from __future__ import annotations

import json

import pytest
from pydantic import BaseModel, ValidationError

from rest_request.domain.json_path import (
    IndexOutOfRangeError,
    KeyNotFoundError,
    PathTooDeepError,
    UnexpectedTypeError,
    decode_array,
    decode_object,
    navigate,
)

NESTED = {"a": {"b": {"c": 1}}}


class Item(BaseModel):
    id: int
    name: str


def test_path_to_scalar():
    assert decode_object(json.dumps(NESTED).encode(), int, ["a", "b", "c"]) == 1


def test_missing_key_is_key_not_found():
    with pytest.raises(KeyNotFoundError) as exc_info:
        decode_object(json.dumps(NESTED).encode(), int, ["a", "b", "z"])

    assert exc_info.value.key == "z"


@pytest.mark.parametrize("depth", [0, 1, 2, 3, 4, 5])
def test_paths_up_to_five_levels(depth):
    node: object = "leaf"
    keys = [f"k{i}" for i in range(depth)]
    for key in reversed(keys):
        node = {key: node}

    assert navigate(node, keys) == "leaf"


def test_path_of_six_is_too_deep():
    node: object = "leaf"
    keys = [f"k{i}" for i in range(6)]
    for key in reversed(keys):
        node = {key: node}

    with pytest.raises(PathTooDeepError) as exc_info:
        navigate(node, keys)

    assert exc_info.value.depth == 6


def test_none_path_is_root():
    assert navigate(NESTED, None) is NESTED


def test_index_navigation():
    data = {"items": [{"id": 1}, {"id": 2}]}

    assert navigate(data, ["items", 1, "id"]) == 2


def test_index_out_of_range():
    with pytest.raises(IndexOutOfRangeError):
        navigate({"items": []}, ["items", 0])


def test_key_into_array_is_unexpected_type():
    with pytest.raises(UnexpectedTypeError):
        navigate({"items": [1]}, ["items", "first"])


def test_index_into_object_is_unexpected_type():
    with pytest.raises(UnexpectedTypeError):
        navigate({"a": {"b": 1}}, ["a", 0])


def test_decode_into_model():
    body = b'{"data": {"item": {"id": 3, "name": "widget"}}}'

    item = decode_object(body, Item, ["data", "item"])

    assert item == Item(id=3, name="widget")


def test_decode_validation_error_propagates():
    with pytest.raises(ValidationError):
        decode_object(b'{"id": "not-a-number", "name": "x"}', Item)


def test_invalid_json_raises_decode_error():
    with pytest.raises(json.JSONDecodeError):
        decode_object(b"{not json", Item)


def test_decode_array_of_models():
    body = b'{"results": [{"id": 1, "name": "a"}, {"id": 2, "name": "b"}]}'

    items = decode_array(body, Item, ["results"])

    assert [i.id for i in items] == [1, 2]


def test_decode_array_requires_array_node():
    with pytest.raises(UnexpectedTypeError):
        decode_array(b'{"results": {"id": 1}}', Item, ["results"])


def test_decode_array_fails_when_any_element_fails():
    with pytest.raises(ValidationError):
        decode_array(b'[{"id": 1, "name": "a"}, {"id": "x"}]', Item)

"""Unit tests for URL template expansion and URL validation."""
from __future__ import annotations

import pytest

from rest_request.domain.errors import RestError, RestErrorKind
from rest_request.domain.url_template import expand, is_well_formed_url, placeholders


def test_expand_replaces_every_placeholder():
    url = expand(
        "https://api.example.com/users/{user}/posts/{post}",
        {"user": "42", "post": "7"},
    )

    assert url == "https://api.example.com/users/42/posts/7"
    assert "{" not in url and "}" not in url


def test_expand_substitutes_host_and_repeated_placeholders():
    url = expand("https://{host}/v1/{name}/{name}", {"host": "api.example.com", "name": "a"})

    assert url == "https://api.example.com/v1/a/a"


def test_expand_ignores_unused_params():
    url = expand("https://api.example.com/{id}", {"id": "1", "unused": "x"})

    assert url == "https://api.example.com/1"


def test_expand_missing_placeholder_is_invalid_substitution():
    with pytest.raises(RestError) as exc_info:
        expand("https://api.example.com/users/{user}/posts/{post}", {"user": "42"})

    assert exc_info.value.kind is RestErrorKind.INVALID_SUBSTITUTION
    assert "post" in str(exc_info.value)


def test_expand_malformed_result_is_invalid_substitution():
    with pytest.raises(RestError) as exc_info:
        expand("https://api.example.com/search/{term}", {"term": "two words"})

    assert exc_info.value == RestError.invalid_substitution()


def test_expand_value_with_braces_is_not_reexpanded():
    with pytest.raises(RestError):
        expand("https://api.example.com/{a}", {"a": "{b}", "b": "x"})


def test_expand_without_params_returns_template_unchanged():
    template = "https://api.example.com/users/{user}"

    assert expand(template, None) == template


def test_expand_with_empty_params_validates_concrete_url():
    assert expand("https://api.example.com/items", {}) == "https://api.example.com/items"


def test_expand_converts_non_string_values():
    assert expand("https://api.example.com/items/{id}", {"id": 5}) == "https://api.example.com/items/5"  # type: ignore[dict-item]


def test_placeholders_lists_names_in_order():
    assert placeholders("https://{host}/a/{b}/{c}") == ["host", "b", "c"]


@pytest.mark.parametrize(
    "value",
    [
        "https://api.example.com",
        "http://localhost:8080/path?x=1&y=%20#frag",
        "https://user:pw@api.example.com/a/b",
    ],
)
def test_well_formed_urls(value):
    assert is_well_formed_url(value) is True


@pytest.mark.parametrize(
    "value",
    [
        "",
        "https://api.example.com/{id}",
        "https://api.example.com/a b",
        "/relative/path",
        "api.example.com/items",
        "https://api.example.com/%zz",
    ],
)
def test_malformed_urls(value):
    assert is_well_formed_url(value) is False

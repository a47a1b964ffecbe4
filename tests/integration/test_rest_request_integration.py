"""
Integration tests for RestRequest against a real HTTP service.

Requires network. Run with:
  pytest tests/integration/test_rest_request_integration.py -m integration -v
"""
from __future__ import annotations

import pytest
from pydantic import BaseModel

from rest_request.composition import create_rest_request
from rest_request.config.settings import RestRequestSettings
from rest_request.domain.errors import RestErrorKind
from rest_request.domain.models import ApiKey, BasicAuth, CircuitParameters, HTTPMethod, Success

HTTPBIN = "https://httpbin.org"


class Slideshow(BaseModel):
    title: str
    author: str


@pytest.mark.integration
@pytest.mark.asyncio
async def test_object_decoding_with_path():
    client = create_rest_request(HTTPMethod.GET, f"{HTTPBIN}/json", ApiKey(), product_info="rest-request-tests/1.0")
    try:
        response = await client.response_object(Slideshow, path=["slideshow"])
    finally:
        await client.close()

    assert isinstance(response.result, Success)
    assert response.result.value.title


@pytest.mark.integration
@pytest.mark.asyncio
async def test_query_plus_reaches_server_as_plus():
    client = create_rest_request(HTTPMethod.GET, f"{HTTPBIN}/get", ApiKey())
    try:
        response = await client.response_object(dict, path=["args"], query_items=[("q", "a+b")])
    finally:
        await client.close()

    assert response.result == Success({"q": "a+b"})


@pytest.mark.integration
@pytest.mark.asyncio
async def test_basic_auth_and_templates():
    client = create_rest_request(
        HTTPMethod.GET,
        HTTPBIN + "/basic-auth/{user}/{password}",
        BasicAuth("alice", "pw"),
    )
    try:
        ok = await client.response_object(bool, path=["authenticated"], template_params={"user": "alice", "password": "pw"})
    finally:
        await client.close()

    assert ok.result == Success(True)


@pytest.mark.integration
@pytest.mark.asyncio
async def test_status_500_is_not_a_failure_without_hook():
    calls = []
    client = create_rest_request(
        HTTPMethod.GET,
        f"{HTTPBIN}/status/500",
        ApiKey(),
        circuit_parameters=CircuitParameters(fallback=lambda e, c: calls.append(e), max_failures=1, timeout_ms=15_000),
        settings=RestRequestSettings(_env_file=None),
    )
    try:
        first = await client.response_void()
        second = await client.response_void()
    finally:
        await client.close()

    assert first.result == Success(None)
    assert second.response.status_code == 500
    assert calls == []


@pytest.mark.integration
@pytest.mark.asyncio
async def test_download_to_file(tmp_path):
    client = create_rest_request(HTTPMethod.GET, f"{HTTPBIN}/bytes/1024", ApiKey())
    try:
        result = await client.download(tmp_path / "bytes.bin")
        unwritable = await client.download(tmp_path / "missing" / "bytes.bin")
    finally:
        await client.close()

    assert result.error is None
    assert (tmp_path / "bytes.bin").stat().st_size == 1024
    assert unwritable.response is None
    assert unwritable.error.kind is RestErrorKind.FILE_MANAGER_ERROR

"""Builds the outbound Request from declarative parameters. No network I/O."""
from __future__ import annotations

import base64
import platform
from dataclasses import dataclass
from typing import Mapping

from loguru import logger

from rest_request.constants import HEADER, SERVICE_NAME, TEMPLATE_PLACEHOLDER_URL
from rest_request.domain.models import ApiKey, BasicAuth, Credentials, HTTPMethod, Request
from rest_request.domain.url_template import is_well_formed_url


@dataclass(frozen=True)
class BuiltRequest:
    """Request plus the raw template when the configured url was not a well-formed URL."""

    request: Request
    url_template: str | None

    @property
    def is_template(self) -> bool:
        return self.url_template is not None


def generate_user_agent(product_info: str) -> str:
    return (
        f"{product_info} {platform.system() or 'unknown'}/{platform.release() or 'unknown'} "
        f"Python/{platform.python_version()}"
    )


def basic_authorization(credentials: BasicAuth) -> str:
    token = base64.b64encode(f"{credentials.username}:{credentials.password}".encode("utf-8"))
    return f"Basic {token.decode('ascii')}"


def set_header(headers: dict[str, str], name: str, value: str) -> None:
    """Case-insensitive set; the new casing replaces any earlier spelling of name."""
    for existing in [key for key in headers if key.lower() == name.lower()]:
        del headers[existing]
    headers[name] = value


def build_request(
    method: HTTPMethod,
    url: str,
    credentials: Credentials,
    header_parameters: Mapping[str, str] | None = None,
    accept_type: str | None = None,
    content_type: str | None = None,
    message_body: bytes | None = None,
    product_info: str | None = None,
) -> BuiltRequest:
    """Assemble the request.

    Header precedence, later wins: User-Agent from product_info, Basic Authorization,
    header_parameters, Accept, Content-Type.
    """
    if is_well_formed_url(url):
        request_url, url_template = url, None
    else:
        request_url, url_template = TEMPLATE_PLACEHOLDER_URL, url

    headers: dict[str, str] = {}
    if product_info is not None:
        set_header(headers, HEADER.USER_AGENT, generate_user_agent(product_info))

    if isinstance(credentials, BasicAuth):
        set_header(headers, HEADER.AUTHORIZATION, basic_authorization(credentials))
    elif not isinstance(credentials, ApiKey):
        raise TypeError(f"unsupported credentials: {type(credentials).__name__}")

    for key, value in (header_parameters or {}).items():
        set_header(headers, key, value)

    if accept_type is not None:
        set_header(headers, HEADER.ACCEPT, accept_type)
    if content_type is not None:
        set_header(headers, HEADER.CONTENT_TYPE, content_type)

    request = Request(method=HTTPMethod(method), url=request_url, headers=headers, body=message_body)
    logger.bind(
        service_name=SERVICE_NAME,
        event="request_built",
        method=request.method.value,
        templated=url_template is not None,
    ).debug("")
    return BuiltRequest(request=request, url_template=url_template)

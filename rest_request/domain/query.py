"""Query component merging with the `+` -> `%2B` fix-up."""
from __future__ import annotations

from dataclasses import replace
from typing import Optional, Sequence, Tuple
from urllib.parse import quote, unquote, urlsplit, urlunsplit

from rest_request.domain.models import Request

QueryItem = Tuple[str, Optional[str]]

# Characters the component encoder leaves alone inside a query key or value.
# `+` is among them; encode_query escapes it afterwards.
_QUERY_SAFE = "!$'()*,;:@/?+"


def encode_query(items: Sequence[QueryItem]) -> str:
    pieces = []
    for key, value in items:
        encoded_key = quote(key, safe=_QUERY_SAFE)
        if value is None:
            pieces.append(encoded_key)
        else:
            pieces.append(f"{encoded_key}={quote(value, safe=_QUERY_SAFE)}")
    # A literal `+` would be read as a space by form decoders downstream.
    return "&".join(pieces).replace("+", "%2B")


def merge(request: Request, items: Sequence[QueryItem] | None) -> Request:
    """Replace the query component of request.url with items; None leaves it untouched."""
    if items is None:
        return request
    try:
        parts = urlsplit(request.url)
    except ValueError:
        return request
    url = urlunsplit(parts._replace(query=encode_query(items)))
    return replace(request, url=url)


def query_items(request: Request) -> list[QueryItem] | None:
    """Decoded (key, value) pairs of the request's query, or None if it has none."""
    try:
        query = urlsplit(request.url).query
    except ValueError:
        return None
    if not query:
        return None
    items: list[QueryItem] = []
    for piece in query.split("&"):
        key, sep, value = piece.partition("=")
        items.append((unquote(key), unquote(value) if sep else None))
    return items

"""URL templating: `{name}` placeholder expansion followed by URL validation."""
from __future__ import annotations

import re
from typing import Mapping
from urllib.parse import urlsplit

from loguru import logger

from rest_request.constants import SERVICE_NAME
from rest_request.domain.errors import RestError

PLACEHOLDER_PATTERN = re.compile(r"\{([^{}]*)\}")

# RFC 3986 characters plus percent-escapes. Braces and spaces are not in the set,
# so an unexpanded template never passes as a URL.
_URL_CHARACTERS = re.compile(r"^(?:[A-Za-z0-9\-._~:/?#\[\]@!$&'()*+,;=]|%[0-9A-Fa-f]{2})+$")


def is_well_formed_url(value: str) -> bool:
    """True when value is an absolute URL made only of legal URL characters."""
    if not value or not _URL_CHARACTERS.match(value):
        return False
    try:
        parts = urlsplit(value)
    except ValueError:
        return False
    return bool(parts.scheme) and bool(parts.netloc)


def placeholders(template: str) -> list[str]:
    return PLACEHOLDER_PATTERN.findall(template)


def expand(template: str, params: Mapping[str, str] | None) -> str:
    """Replace every `{name}` in template with params[name] and validate the result.

    With params None the template is returned untouched. Raises
    RestError(INVALID_SUBSTITUTION) on an unresolved placeholder or a malformed result.
    """
    if params is None:
        return template

    missing: list[str] = []

    def _substitute(match: re.Match[str]) -> str:
        name = match.group(1)
        if name not in params:
            missing.append(name)
            return match.group(0)
        return str(params[name])

    expanded = PLACEHOLDER_PATTERN.sub(_substitute, template)
    if missing:
        logger.bind(
            service_name=SERVICE_NAME,
            event="template_substitution_failed",
            missing=missing,
        ).debug("")
        raise RestError.invalid_substitution(f"no value for {', '.join(missing)}")
    if not is_well_formed_url(expanded):
        logger.bind(
            service_name=SERVICE_NAME,
            event="template_substitution_failed",
            template=template,
        ).debug("")
        raise RestError.invalid_substitution("expanded url is malformed")
    return expanded

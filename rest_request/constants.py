"""Client-level constants shared across modules."""
from __future__ import annotations

SERVICE_NAME = "rest_request"

# Deepest JSON path accepted by the object/array decoders.
MAX_PATH_DEPTH = 5

# Request URL used while the configured URL is still an unexpanded template.
TEMPLATE_PLACEHOLDER_URL = ""

CIRCUIT_OPEN_CONTEXT = "Circuit is open"


class HEADER:
    USER_AGENT = "User-Agent"
    AUTHORIZATION = "Authorization"
    ACCEPT = "Accept"
    CONTENT_TYPE = "Content-Type"


class CIRCUIT_DEFAULTS:
    TIMEOUT_MS = 1000
    RESET_TIMEOUT_MS = 60000
    MAX_FAILURES = 5
    ROLLING_WINDOW_MS = 10000
    BULKHEAD_SIZE = 0

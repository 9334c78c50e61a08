"""Shared immutable constants for routing and response shaping."""

ALLOWED_METHODS = "POST, OPTIONS"

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": ALLOWED_METHODS,
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
}

PREFLIGHT_REQUEST_HEADERS = (
    "Origin",
    "Access-Control-Request-Method",
    "Access-Control-Request-Headers",
)

UNCONFIGURED_MODEL_ERROR = "Selected model not configured"
NO_VALID_REPLY = "Sorry, no valid reply could be obtained."
UPSTREAM_ERROR_EXCERPT_LIMIT = 100
# Client-level default for every outbound call; requests never override it.
UPSTREAM_TIMEOUT_SECONDS = 30.0

"""Relay failure types mapped to client-facing HTTP status codes."""


class RelayError(Exception):
    """Base class for failures surfaced to the caller as a JSON error."""

    status_code = 500


class InvalidChatRequestError(RelayError, ValueError):
    """Raised when the inbound body is not a valid chat request."""

    status_code = 400


class UnconfiguredModelError(RelayError, LookupError):
    """Raised when the requested model id has no routing entry."""

    status_code = 400


class MissingCredentialError(RelayError, RuntimeError):
    """Raised when a routed model's credential is absent on the server."""

    status_code = 500


class UpstreamRequestError(RelayError, RuntimeError):
    """Raised when the upstream provider answers with a non-success status."""

    status_code = 500

    def __init__(self, upstream_status: int, reason: str, body_excerpt: str) -> None:
        self.upstream_status = upstream_status
        self.reason = reason
        self.body_excerpt = body_excerpt
        super().__init__(
            f"API request failed: {upstream_status} {reason}. {body_excerpt}".rstrip()
        )

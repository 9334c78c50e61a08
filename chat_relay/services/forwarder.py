"""Turns one inbound chat request into one upstream call and a client response.

The forwarder is the only error boundary of the relay: every failure raised
while handling a ``POST`` is converted into a JSON ``{"error": ...}`` payload,
and every response except the bare ``OPTIONS`` reply carries permissive CORS
headers so a browser page on another origin can read it.
"""

import logging
from typing import Any, Protocol

from pydantic import ValidationError

from chat_relay.config import RouteEntry
from chat_relay.constants import (
    ALLOWED_METHODS,
    CORS_HEADERS,
    PREFLIGHT_REQUEST_HEADERS,
    UNCONFIGURED_MODEL_ERROR,
)
from chat_relay.services.credentials import CredentialStore
from chat_relay.services.errors import (
    InvalidChatRequestError,
    MissingCredentialError,
    RelayError,
    UnconfiguredModelError,
)
from chat_relay.services.relay_models import (
    ChatRequest,
    RelayRequest,
    RelayResponse,
    describe_validation_errors,
)
from chat_relay.services.routing_table import RoutingTable


logger = logging.getLogger(__name__)


class ChatCompletionClient(Protocol):
    async def complete(self, route: RouteEntry, api_key: str, message: str) -> str:
        """Send one user message to the routed upstream and return its reply."""


class ChatForwarder:
    """Validates, routes and forwards chat requests to upstream providers."""

    def __init__(
        self,
        routing_table: RoutingTable,
        credentials: CredentialStore,
        upstream_client: ChatCompletionClient,
    ) -> None:
        self._routing_table = routing_table
        self._credentials = credentials
        self._upstream_client = upstream_client

    async def handle(self, request: RelayRequest) -> RelayResponse:
        method = request.method.upper()
        if method == "OPTIONS":
            return _build_options_response(request)
        if method != "POST":
            logger.info("relay_method_rejected method=%s", method)
            return RelayResponse(
                status_code=405,
                payload="Method Not Allowed",
                headers=dict(CORS_HEADERS),
            )

        try:
            reply = await self._forward(request)
        except RelayError as exc:
            return _build_error_response(exc.status_code, _client_message(exc))
        except Exception as exc:
            logger.exception("relay_request_failed error_type=%s", type(exc).__name__)
            return _build_error_response(500, _server_error_message(exc))
        return RelayResponse(
            status_code=200,
            payload={"reply": reply},
            headers=dict(CORS_HEADERS),
        )

    async def _forward(self, request: RelayRequest) -> str:
        chat_request = _parse_chat_request(request.body)
        route = self._resolve_route(chat_request.model_id)
        api_key = self._resolve_credential(route)
        logger.info(
            "relay_forward_started model_id=%s message_length=%s",
            route.model_id,
            len(chat_request.message),
        )
        return await self._upstream_client.complete(
            route=route,
            api_key=api_key,
            message=chat_request.message,
        )

    def _resolve_route(self, model_id: str) -> RouteEntry:
        route = self._routing_table.lookup(model_id)
        if route is None:
            logger.info("relay_model_not_configured model_id=%s", model_id)
            raise UnconfiguredModelError(UNCONFIGURED_MODEL_ERROR)
        return route

    def _resolve_credential(self, route: RouteEntry) -> str:
        api_key = self._credentials.resolve(route.credential_ref)
        if api_key is None:
            logger.error(
                "relay_credential_missing model_id=%s credential_ref=%s",
                route.model_id,
                route.credential_ref,
            )
            raise MissingCredentialError(
                f"API Key for model {route.model_id} is missing on the server."
            )
        return api_key


def _parse_chat_request(body: bytes) -> ChatRequest:
    try:
        return ChatRequest.model_validate_json(body)
    except ValidationError as exc:
        detail = describe_validation_errors(exc.errors())
        logger.info("relay_request_body_invalid detail=%s", detail)
        raise InvalidChatRequestError(f"Invalid request body: {detail}") from exc


def _build_options_response(request: RelayRequest) -> RelayResponse:
    if all(request.header(name) is not None for name in PREFLIGHT_REQUEST_HEADERS):
        logger.debug("relay_preflight_accepted origin=%s", request.header("Origin"))
        return RelayResponse(status_code=200, payload=None, headers=dict(CORS_HEADERS))
    return RelayResponse(status_code=200, payload=None, headers={"Allow": ALLOWED_METHODS})


def _build_error_response(status_code: int, message: str) -> RelayResponse:
    payload: dict[str, Any] = {"error": message}
    return RelayResponse(status_code=status_code, payload=payload, headers=dict(CORS_HEADERS))


def _client_message(exc: RelayError) -> str:
    if exc.status_code >= 500 and not isinstance(exc, MissingCredentialError):
        return _server_error_message(exc)
    return str(exc)


def _server_error_message(exc: Exception) -> str:
    message = str(exc)
    if message == "":
        message = "Internal Server Error"
    return f"Server error: {message}"

"""Client for the single outbound OpenAI-compatible chat completion call."""

import logging
from typing import Any

from chat_relay.config import RouteEntry
from chat_relay.constants import (
    NO_VALID_REPLY,
    UPSTREAM_ERROR_EXCERPT_LIMIT,
    UPSTREAM_TIMEOUT_SECONDS,
)
from chat_relay.services.errors import UpstreamRequestError
from chat_relay.services.relay_models import (
    build_chat_payload,
    extract_reply_content,
    require_non_empty,
)


logger = logging.getLogger(__name__)


class UpstreamChatClient:
    """Posts one user message to a routed endpoint and returns the reply text."""

    async def complete(self, route: RouteEntry, api_key: str, message: str) -> str:
        normalized_key = require_non_empty(api_key, "api_key")
        payload = build_chat_payload(model=route.upstream_model, message=message)
        headers = _build_headers(normalized_key)
        logger.info(
            "upstream_chat_started model_id=%s upstream_model=%s endpoint=%s",
            route.model_id,
            route.upstream_model,
            route.endpoint,
        )
        response = await self._post_json(route.endpoint, headers, payload)
        if not _is_success_status(response.status_code):
            error_body = response.text
            logger.error(
                "upstream_chat_failed model_id=%s endpoint=%s status=%s body=%s",
                route.model_id,
                route.endpoint,
                response.status_code,
                error_body,
            )
            raise UpstreamRequestError(
                upstream_status=response.status_code,
                reason=response.reason_phrase,
                body_excerpt=error_body[:UPSTREAM_ERROR_EXCERPT_LIMIT],
            )
        content = extract_reply_content(response.json())
        if content is None:
            logger.warning(
                "upstream_chat_reply_missing model_id=%s upstream_model=%s",
                route.model_id,
                route.upstream_model,
            )
            return NO_VALID_REPLY
        logger.info(
            "upstream_chat_completed model_id=%s response_length=%s",
            route.model_id,
            len(content),
        )
        return content

    async def _post_json(
        self,
        url: str,
        headers: dict[str, str],
        payload: dict[str, Any],
    ) -> Any:
        try:
            import httpx
        except ModuleNotFoundError as exc:
            raise RuntimeError("Missing dependency for upstream chat client: httpx") from exc

        async with httpx.AsyncClient(timeout=UPSTREAM_TIMEOUT_SECONDS) as client:
            return await client.post(url, headers=headers, json=payload)


def _is_success_status(status_code: int) -> bool:
    return 200 <= status_code < 300


def _build_headers(api_key: str) -> dict[str, str]:
    return {
        "Authorization": f"Bearer {api_key}",
        "Content-Type": "application/json",
    }

"""Shared request/response models and payload helpers for the relay."""

from dataclasses import dataclass, field
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field, StrictStr


class ChatRequest(BaseModel):
    model_config = ConfigDict(protected_namespaces=())

    message: StrictStr
    model_id: StrictStr = Field(alias="modelId")


@dataclass(frozen=True)
class RelayRequest:
    """Framework-neutral view of one inbound HTTP request."""

    method: str
    headers: Mapping[str, str]
    body: bytes = b""

    def header(self, name: str) -> str | None:
        lowered_name = name.lower()
        for key, value in self.headers.items():
            if key.lower() == lowered_name:
                return value
        return None


@dataclass(frozen=True)
class RelayResponse:
    status_code: int
    payload: dict[str, Any] | str | None
    headers: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class ModelOption:
    model_id: str
    display_name: str
    provider: str


def require_non_empty(value: str, field_name: str) -> str:
    normalized_value = value.strip()
    if normalized_value == "":
        raise ValueError(f"{field_name} must not be empty")
    return normalized_value


def build_chat_payload(model: str, message: str) -> dict[str, Any]:
    return {
        "model": model,
        "messages": [{"role": "user", "content": message}],
    }


def extract_reply_content(payload: Any) -> str | None:
    """Return the first choice's message text, or None when the shape is absent."""
    if not isinstance(payload, dict):
        return None
    choices = payload.get("choices")
    if not isinstance(choices, list) or len(choices) == 0:
        return None
    first_choice = choices[0]
    if not isinstance(first_choice, dict):
        return None
    message = first_choice.get("message")
    if not isinstance(message, dict):
        return None
    content = message.get("content")
    if not isinstance(content, str):
        return None
    return content.strip()


def describe_validation_errors(errors: list[Any]) -> str:
    return "; ".join(_describe_validation_error(error) for error in errors)


def _describe_validation_error(error: Any) -> str:
    if error["type"] == "json_invalid":
        return "payload must be valid JSON"
    if error["type"] in {"model_type", "model_attributes_type", "dict_type"}:
        return "payload must be a JSON object"
    field_name = ".".join(str(part) for part in error["loc"])
    if error["type"] == "missing":
        return f"{field_name} is required"
    return f"{field_name}: {error['msg']}"

"""Configuration loading with strict required environment variables."""

from dataclasses import dataclass
import json
import logging
from pathlib import Path
from types import MappingProxyType
import os
import re
from typing import Any, Mapping
from urllib.parse import urlparse

from dotenv import load_dotenv


logger = logging.getLogger(__name__)
_CREDENTIAL_REF_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
_ALLOWED_ENDPOINT_SCHEMES = ("http", "https")
_ROUTE_FIELDS = (
    "model_id",
    "display_name",
    "provider",
    "endpoint",
    "credential_ref",
    "upstream_model",
)


@dataclass(frozen=True)
class RouteEntry:
    """Immutable routing metadata for one selectable model."""

    model_id: str
    display_name: str
    provider: str
    endpoint: str
    credential_ref: str
    upstream_model: str


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment variables."""

    routing_table_path: str
    app_log_level: str

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            routing_table_path=_require_env("ROUTING_TABLE_PATH"),
            app_log_level=_require_env("APP_LOG_LEVEL"),
        )


def _require_env(name: str) -> str:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        raise ValueError(f"Missing required environment variable: {name}")
    return value


def load_routing_table(path: str) -> Mapping[str, RouteEntry]:
    """Load and validate the routing table file into an immutable mapping."""
    raw_entries = _read_routing_table_entries(Path(path))
    routes: dict[str, RouteEntry] = {}
    for index, raw_entry in enumerate(raw_entries):
        route = _parse_route_entry(index, raw_entry)
        if route.model_id in routes:
            raise ValueError(f"routing table contains duplicate model_id: {route.model_id}")
        routes[route.model_id] = route
        logger.debug(
            "validated_route model_id=%s provider=%s upstream_model=%s",
            route.model_id,
            route.provider,
            route.upstream_model,
        )
    logger.info("routing_table_loaded path=%s model_count=%s", path, len(routes))
    return MappingProxyType(routes)


def _read_routing_table_entries(path: Path) -> list[Any]:
    if not path.is_file():
        raise ValueError(f"routing table file not found: {path}")
    try:
        document = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValueError(f"routing table file is not valid JSON: {path}") from exc
    if not isinstance(document, dict):
        raise ValueError("routing table must be a JSON object")
    entries = document.get("models")
    if not isinstance(entries, list) or len(entries) == 0:
        raise ValueError("routing table must contain a non-empty models list")
    return entries


def _parse_route_entry(index: int, raw_entry: Any) -> RouteEntry:
    if not isinstance(raw_entry, dict):
        raise ValueError(f"routing table entry {index} must be an object")
    values: dict[str, str] = {}
    for field_name in _ROUTE_FIELDS:
        value = raw_entry.get(field_name)
        if not isinstance(value, str) or value.strip() == "":
            raise ValueError(f"routing table entry {index} missing {field_name}")
        values[field_name] = value.strip()
    _validate_endpoint(values["model_id"], values["endpoint"])
    _validate_credential_ref(values["model_id"], values["credential_ref"])
    return RouteEntry(**values)


def _validate_endpoint(model_id: str, endpoint: str) -> None:
    parsed = urlparse(endpoint)
    if parsed.scheme not in _ALLOWED_ENDPOINT_SCHEMES or parsed.netloc == "":
        raise ValueError(
            f"routing table endpoint for {model_id} must be an absolute http(s) URL"
        )


def _validate_credential_ref(model_id: str, credential_ref: str) -> None:
    if not _CREDENTIAL_REF_PATTERN.match(credential_ref):
        raise ValueError(
            f"routing table credential_ref for {model_id} must be an environment "
            f"variable name: {credential_ref}"
        )


def load_environment_from_dotenv(dotenv_path: str) -> bool:
    if dotenv_path.strip() == "":
        raise ValueError("dotenv_path must not be empty")
    loaded = load_dotenv(dotenv_path=dotenv_path, override=False)
    logger.info("dotenv_load_attempted dotenv_path=%s loaded=%s", dotenv_path, loaded)
    return loaded

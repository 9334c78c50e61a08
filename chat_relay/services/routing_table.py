"""Read-only lookup from client model ids to upstream routing metadata."""

import logging
from types import MappingProxyType
from typing import Mapping

from chat_relay.config import RouteEntry
from chat_relay.services.credentials import CredentialStore
from chat_relay.services.relay_models import ModelOption


logger = logging.getLogger(__name__)


class RoutingTable:
    """Immutable model id to route mapping built once at startup."""

    def __init__(self, routes: Mapping[str, RouteEntry]) -> None:
        if len(routes) == 0:
            raise ValueError("routes must not be empty")
        mismatched_keys = [
            model_id for model_id, route in routes.items() if route.model_id != model_id
        ]
        if len(mismatched_keys) > 0:
            raise ValueError(
                f"route keys must match route model_id: {', '.join(mismatched_keys)}"
            )
        self._routes = MappingProxyType(dict(routes))

    def lookup(self, model_id: str) -> RouteEntry | None:
        return self._routes.get(model_id)

    def list_model_options(self) -> tuple[ModelOption, ...]:
        return tuple(
            ModelOption(
                model_id=route.model_id,
                display_name=route.display_name,
                provider=route.provider,
            )
            for route in self._routes.values()
        )

    def find_missing_credentials(self, credentials: CredentialStore) -> tuple[str, ...]:
        missing_model_ids = tuple(
            route.model_id
            for route in self._routes.values()
            if credentials.resolve(route.credential_ref) is None
        )
        if len(missing_model_ids) > 0:
            logger.warning(
                "routing_table_credentials_missing model_ids=%s",
                ",".join(missing_model_ids),
            )
        return missing_model_ids

    def __len__(self) -> int:
        return len(self._routes)

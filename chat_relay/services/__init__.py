"""Application services package."""

from chat_relay.services.credentials import EnvironmentCredentialStore
from chat_relay.services.forwarder import ChatForwarder
from chat_relay.services.routing_table import RoutingTable
from chat_relay.services.upstream_client import UpstreamChatClient


__all__ = [
    "ChatForwarder",
    "EnvironmentCredentialStore",
    "RoutingTable",
    "UpstreamChatClient",
]

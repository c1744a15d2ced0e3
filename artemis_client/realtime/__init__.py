"""Real-time notification channel."""

from artemis_client.realtime.backoff import ReconnectPolicy
from artemis_client.realtime.manager import RealtimeChannelManager
from artemis_client.realtime.transport import (
    ChannelTransport,
    SocketIOTransport,
    TransportFactory,
)

__all__ = [
    "ChannelTransport",
    "RealtimeChannelManager",
    "ReconnectPolicy",
    "SocketIOTransport",
    "TransportFactory",
]

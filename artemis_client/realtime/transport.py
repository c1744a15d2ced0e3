"""Transport abstraction for the real-time channel and its Socket.IO implementation."""

from collections.abc import Awaitable, Callable
from typing import Any, Protocol

import socketio
import structlog

from artemis_client.constants import SOCKET_TRANSPORTS
from artemis_client.realtime.backoff import ReconnectPolicy

logger = structlog.get_logger(__name__)

EventHandler = Callable[..., Any]
AuthProvider = Callable[[], Awaitable[dict[str, str]]]


class ChannelTransport(Protocol):
    """One bidirectional connection to the backend event server.

    The transport reconnects on its own following its ReconnectPolicy and
    fires ``connect`` after every successful (re)connect and ``disconnect``
    after every drop, including one it caused itself.
    """

    @property
    def connected(self) -> bool: ...

    def on(self, event: str, handler: EventHandler) -> None: ...

    async def connect(self, url: str, auth: AuthProvider, timeout: float) -> None: ...

    async def wait(self) -> None: ...

    async def disconnect(self) -> None: ...

    async def emit(self, event: str, data: Any = None) -> None: ...

    async def call(self, event: str, data: Any = None, timeout: float = 10.0) -> Any: ...


TransportFactory = Callable[[ReconnectPolicy], ChannelTransport]


class SocketIOTransport:
    """ChannelTransport backed by python-socketio's asyncio client."""

    def __init__(self, policy: ReconnectPolicy | None = None):
        """Initialize transport.

        Args:
            policy: Reconnect backoff used by the client after drops and
                failed handshakes
        """
        policy = policy or ReconnectPolicy()
        self._client = socketio.AsyncClient(logger=False, **policy.client_options())

    @property
    def connected(self) -> bool:
        """Whether the underlying socket is connected."""
        return self._client.connected

    def on(self, event: str, handler: EventHandler) -> None:
        """Register a handler for a server event (or connect/disconnect)."""
        self._client.on(event, handler)

    async def connect(self, url: str, auth: AuthProvider, timeout: float) -> None:
        """Open the connection, retrying failed handshakes with backoff.

        ``auth`` is awaited before every attempt, so reconnects present a
        fresh token.

        Raises:
            socketio.exceptions.ConnectionError: If every attempt fails
        """
        logger.debug("Opening socket connection", url=url)
        await self._client.connect(
            url,
            auth=auth,
            transports=SOCKET_TRANSPORTS,
            wait_timeout=timeout,
            retry=self._client.reconnection,
        )

    async def wait(self) -> None:
        """Block until the connection ends for good.

        Returns after an explicit disconnect or once reconnection gives up.
        """
        await self._client.wait()

    async def disconnect(self) -> None:
        """Close the connection and stop any pending reconnect attempts."""
        await self._client.shutdown()

    async def emit(self, event: str, data: Any = None) -> None:
        """Send an event without waiting for acknowledgement."""
        await self._client.emit(event, data)

    async def call(self, event: str, data: Any = None, timeout: float = 10.0) -> Any:
        """Send an event and wait for the server's acknowledgement payload.

        Raises:
            socketio.exceptions.TimeoutError: If no acknowledgement arrives
        """
        return await self._client.call(event, data, timeout=timeout)

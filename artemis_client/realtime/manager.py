"""Lifecycle of the real-time notification channel.

This module provides the RealtimeChannelManager class which owns the single
live connection of the signed-in identity:
- Connects when an identity appears, tears down and clears state on logout
- Replaces the connection when the identity changes, closing the old one first
- Resynchronizes the unread count on every (re)connect

Reconnect backoff itself is left to the transport.
"""

import asyncio
from typing import Any

import structlog

from artemis_client.auth import Identity
from artemis_client.constants import (
    EVENT_GET_UNREAD_COUNT,
    EVENT_NOTIFICATION_NEW,
    EVENT_UNREAD_COUNT,
)
from artemis_client.exceptions import ChannelNotConnectedError
from artemis_client.notifications import NotificationStore
from artemis_client.realtime.backoff import ReconnectPolicy
from artemis_client.realtime.transport import (
    AuthProvider,
    ChannelTransport,
    SocketIOTransport,
    TransportFactory,
)

logger = structlog.get_logger(__name__)


class RealtimeChannelManager:
    """Owns at most one live channel connection at a time.

    ``sync`` is called whenever the authentication state may have changed.
    A background supervisor task opens the connection and waits until the
    transport stops for good. Lifecycle calls are serialized, so a new
    supervisor starts only after the previous one has closed its connection.
    """

    def __init__(
        self,
        url: str,
        store: NotificationStore,
        transport_factory: TransportFactory = SocketIOTransport,
        policy: ReconnectPolicy | None = None,
        connect_timeout: float = 20.0,
        ack_timeout: float = 10.0,
    ):
        """Initialize channel manager.

        Args:
            url: Event server URL (the API base URL)
            store: Notification store receiving pushed events
            transport_factory: Creates a fresh transport per identity
            policy: Reconnect backoff handed to each transport
            connect_timeout: Handshake timeout in seconds
            ack_timeout: Timeout for acknowledged events in seconds
        """
        self.url = url
        self.store = store
        self.transport_factory = transport_factory
        self.policy = policy or ReconnectPolicy()
        self.connect_timeout = connect_timeout
        self.ack_timeout = ack_timeout

        self._identity: Identity | None = None
        self._transport: ChannelTransport | None = None
        self._task: asyncio.Task | None = None
        self._resync_task: asyncio.Task | None = None
        self._lock = asyncio.Lock()
        self._connected = False
        self._connected_event = asyncio.Event()

    @property
    def connected(self) -> bool:
        """Whether a live connection is established."""
        return self._connected

    @property
    def identity(self) -> Identity | None:
        """Identity the channel is currently bound to."""
        return self._identity

    @property
    def active(self) -> bool:
        """Whether a supervisor is connecting or connected."""
        return self._task is not None and not self._task.done()

    def _set_connected(self, connected: bool) -> None:
        if connected == self._connected:
            return
        self._connected = connected
        if connected:
            self._connected_event.set()
        else:
            self._connected_event.clear()
        self.store.notify_listeners()

    async def wait_until_connected(self, timeout: float | None = None) -> bool:
        """Wait for a live connection.

        Returns:
            True if connected before the timeout
        """
        try:
            await asyncio.wait_for(self._connected_event.wait(), timeout)
        except TimeoutError:
            return False
        return True

    # ── Lifecycle ────────────────────────────────────────

    async def sync(self, identity: Identity | None) -> None:
        """Bring the channel in line with the current authentication state.

        Args:
            identity: Signed-in identity, or None after logout
        """
        async with self._lock:
            if identity is None:
                if self._identity is not None:
                    logger.info("Identity cleared, closing channel", user_id=self._identity.user_id)
                await self._stop()
                self._identity = None
                self.store.clear()
                return

            if identity == self._identity and self.active:
                # Don't create duplicate connections
                return

            if self._identity is not None and identity != self._identity:
                logger.info(
                    "Identity changed, replacing channel",
                    previous_user_id=self._identity.user_id,
                    user_id=identity.user_id,
                )
                await self._stop()
                self.store.clear()
            else:
                await self._stop()

            self._identity = identity
            self._task = asyncio.create_task(self._supervise(identity))

    async def close(self) -> None:
        """Close the connection but keep notification state."""
        async with self._lock:
            await self._stop()

    async def _stop(self) -> None:
        task, self._task = self._task, None
        if task is not None and not task.done():
            task.cancel()
            await asyncio.gather(task, return_exceptions=True)
        if self._transport is not None:
            await self._teardown(self._transport)
        self._set_connected(False)

    async def _supervise(self, identity: Identity) -> None:
        token = await self._get_token(identity)
        if token is None:
            return

        transport = self.transport_factory(self.policy)
        self._register_handlers(transport, identity)
        self._transport = transport
        try:
            await transport.connect(
                self.url, self._auth_provider(identity, token), self.connect_timeout
            )
            await transport.wait()
            logger.warning("Real-time channel stopped reconnecting", user_id=identity.user_id)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.error(
                "Giving up on real-time channel",
                user_id=identity.user_id,
                error=str(e),
            )
        finally:
            await self._teardown(transport)
            self._set_connected(False)

    def _auth_provider(self, identity: Identity, token: str) -> AuthProvider:
        """Handshake credentials: the token already fetched, then a fresh one per attempt."""
        pending = [token]

        async def auth() -> dict[str, str]:
            fresh = pending.pop() if pending else await self._get_token(identity)
            return {"token": fresh} if fresh else {}

        return auth

    async def _get_token(self, identity: Identity) -> str | None:
        try:
            token = await identity.get_token()
        except Exception as e:
            logger.error("Failed to obtain token for socket connection", error=str(e))
            return None
        if not token:
            logger.warning("No token available for socket connection")
            return None
        return token

    def _register_handlers(self, transport: ChannelTransport, identity: Identity) -> None:
        def on_connect(*args) -> None:
            if self._transport is not transport:
                return
            logger.info("Socket connected", user_id=identity.user_id)
            self._set_connected(True)
            self._resync_task = asyncio.create_task(self._request_unread_count(transport))

        def on_disconnect(*args) -> None:
            logger.debug("Socket disconnected", reason=args[0] if args else None)
            if self._transport is transport or self._transport is None:
                self._set_connected(False)

        def on_connect_error(*args) -> None:
            logger.error("Socket connect error", error=args[0] if args else None)

        def on_unread_count(payload: dict[str, Any]) -> None:
            self.store.set_unread_count(payload.get("count", 0))

        transport.on("connect", on_connect)
        transport.on("disconnect", on_disconnect)
        transport.on("connect_error", on_connect_error)
        transport.on(EVENT_NOTIFICATION_NEW, self.store.receive_push)
        transport.on(EVENT_UNREAD_COUNT, on_unread_count)

    async def _request_unread_count(self, transport: ChannelTransport) -> None:
        """Ask the server for the current count instead of trusting the cache."""
        try:
            response = await transport.call(EVENT_GET_UNREAD_COUNT, timeout=self.ack_timeout)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.error("Failed to sync unread count over channel", error=str(e))
            return
        if self._transport is not transport:
            return
        if isinstance(response, dict) and "count" in response:
            self.store.set_unread_count(response["count"])

    async def _teardown(self, transport: ChannelTransport) -> None:
        if self._transport is transport:
            self._transport = None
        resync, self._resync_task = self._resync_task, None
        if resync is not None and not resync.done():
            resync.cancel()
        try:
            await transport.disconnect()
        except Exception as e:
            logger.warning("Error while closing socket", error=str(e))

    # ── Outgoing events ──────────────────────────────────

    async def emit(self, event: str, data: Any = None) -> None:
        """Send an event over the live connection.

        Raises:
            ChannelNotConnectedError: If there is no live connection
        """
        transport = self._transport
        if not self._connected or transport is None:
            raise ChannelNotConnectedError(event)
        await transport.emit(event, data)

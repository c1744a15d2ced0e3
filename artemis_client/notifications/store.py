"""Live notification state for the signed-in user.

This module provides the NotificationStore class which merges notifications
pushed over the real-time channel with pages fetched over REST, keeps the
unread count, and performs read/delete actions optimistically.
"""

from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any, Protocol

import structlog
from pydantic import ValidationError

from artemis_client.constants import (
    DEFAULT_PAGE_SIZE,
    EVENT_MARK_ALL_READ,
    EVENT_MARK_READ,
)
from artemis_client.schemas.notification import Notification
from artemis_client.services.notification_api import NotificationApi
from artemis_client.sound import SoundEngine

logger = structlog.get_logger(__name__)

StoreListener = Callable[["NotificationStore"], None]


class NotificationChannel(Protocol):
    """The part of the real-time channel the store talks to."""

    @property
    def connected(self) -> bool: ...

    async def emit(self, event: str, data: Any = None) -> None: ...


class NotificationStore:
    """Notification list, unread count and pagination cursor.

    Invariants:
    - The list is ordered newest first; pushes are prepended, older pages
      appended.
    - The unread count is never negative. It covers the whole mailbox, so
      it is tracked separately from the (paginated) list.

    Actions never raise: failures are logged and only the resulting state
    is observable. Mark-all-read rolls back to its snapshot on failure;
    mark-one-read and delete keep their optimistic change and resync the
    unread count from the server instead.
    """

    def __init__(
        self,
        api: NotificationApi,
        sound: SoundEngine | None = None,
        page_size: int = DEFAULT_PAGE_SIZE,
    ):
        """Initialize notification store.

        Args:
            api: REST wrapper for notification routes
            sound: Chime player; None disables sound entirely
            page_size: Number of notifications per page
        """
        self.api = api
        self.sound = sound
        self.page_size = page_size

        self.notifications: list[Notification] = []
        self.unread_count = 0
        self.loading = False
        self.has_more = True
        self.page = 1

        self._channel: NotificationChannel | None = None
        self._listeners: list[StoreListener] = []
        # Bumped by clear(); results of requests started before are dropped
        self._generation = 0

    def _is_stale(self, generation: int, action: str) -> bool:
        if generation == self._generation:
            return False
        logger.debug("Discarding result fetched before the store was cleared", action=action)
        return True

    # ── Wiring ───────────────────────────────────────────

    def attach_channel(self, channel: NotificationChannel | None) -> None:
        """Route read actions through the live channel when it is connected."""
        self._channel = channel

    @property
    def connected(self) -> bool:
        """Whether the real-time channel is currently connected."""
        return self._channel is not None and self._channel.connected

    def add_listener(self, listener: StoreListener) -> None:
        """Register a callable invoked after every state change."""
        self._listeners.append(listener)

    def remove_listener(self, listener: StoreListener) -> None:
        """Unregister a listener."""
        if listener in self._listeners:
            self._listeners.remove(listener)

    def notify_listeners(self) -> None:
        """Call every listener with the current state."""
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception as e:
                logger.error("Notification store listener failed", error=str(e))

    # ── Sound preference ─────────────────────────────────

    @property
    def sound_enabled(self) -> bool:
        """Whether a chime plays for new notifications."""
        return self.sound is not None and self.sound.enabled

    def toggle_sound(self) -> bool:
        """Flip the sound preference and return the new value."""
        if self.sound is None:
            return False
        enabled = self.sound.toggle()
        self.notify_listeners()
        return enabled

    # ── Fetching ─────────────────────────────────────────

    async def fetch_initial(self, limit: int | None = None) -> None:
        """Load the first page, replacing the list, and the unread count.

        Args:
            limit: Page size override
        """
        limit = limit or self.page_size
        generation = self._generation
        self.loading = True
        self.notify_listeners()
        try:
            result = await self.api.list_page(page=1, limit=limit)
        except Exception as e:
            logger.error("Failed to fetch notifications", error=str(e))
            result = None

        if self._is_stale(generation, "fetch_initial"):
            return
        if result is not None:
            self.notifications = list(result.notifications)
            self.has_more = result.has_more
            self.page = 1
        self.loading = False
        self.notify_listeners()

        # REST fallback for when the channel is not (yet) connected
        await self.refresh_unread_count()

    async def load_more(self) -> None:
        """Append the next (older) page; no-op while loading or at the end."""
        if self.loading or not self.has_more:
            return

        generation = self._generation
        next_page = self.page + 1
        self.loading = True
        try:
            result = await self.api.list_page(page=next_page, limit=self.page_size)
        except Exception as e:
            logger.error("Failed to load more notifications", page=next_page, error=str(e))
            result = None

        if self._is_stale(generation, "load_more"):
            return
        if result is not None:
            self.notifications = self.notifications + list(result.notifications)
            self.has_more = result.has_more
            self.page = next_page
        self.loading = False
        self.notify_listeners()

    async def refresh_unread_count(self) -> None:
        """Resynchronize the unread count from the server."""
        generation = self._generation
        try:
            count = await self.api.unread_count()
        except Exception as e:
            logger.error("Failed to fetch unread count", error=str(e))
            return
        if self._is_stale(generation, "refresh_unread_count"):
            return
        self.set_unread_count(count)

    # ── Real-time events ─────────────────────────────────

    def receive_push(self, payload: Notification | dict[str, Any]) -> None:
        """Handle a pushed notification: prepend it and count it unread.

        The sound preference is read here, at dispatch time.
        """
        try:
            notification = (
                payload
                if isinstance(payload, Notification)
                else Notification.model_validate(payload)
            )
        except ValidationError as e:
            logger.error("Discarding malformed pushed notification", errors=e.errors())
            return

        self.notifications = [notification] + self.notifications
        self.unread_count += 1
        logger.info(
            "Received notification",
            notification_id=notification.id,
            type=notification.type.value,
        )

        if self.sound is not None and self.sound.enabled:
            self.sound.play()
        self.notify_listeners()

    def set_unread_count(self, count: int) -> None:
        """Overwrite the unread count with an authoritative value."""
        self.unread_count = max(0, int(count))
        self.notify_listeners()

    # ── Actions ──────────────────────────────────────────

    def _index_of(self, notification_id: str) -> int | None:
        for i, notification in enumerate(self.notifications):
            if notification.id == notification_id:
                return i
        return None

    async def mark_read(self, notification_id: str) -> None:
        """Mark one notification read, optimistically.

        An item that is loaded and already read does not decrement the
        count again. On failure nothing is rolled back; the unread count is
        resynchronized instead.
        """
        index = self._index_of(notification_id)
        already_read = index is not None and self.notifications[index].read

        if index is not None and not already_read:
            updated = list(self.notifications)
            updated[index] = updated[index].model_copy(
                update={"read": True, "read_at": datetime.now(UTC)}
            )
            self.notifications = updated
        if not already_read:
            self.unread_count = max(0, self.unread_count - 1)
        self.notify_listeners()

        try:
            if self.connected:
                await self._channel.emit(EVENT_MARK_READ, {"notificationId": notification_id})
            else:
                await self.api.mark_read(notification_id)
        except Exception as e:
            logger.error(
                "Failed to mark notification as read",
                notification_id=notification_id,
                error=str(e),
            )
            await self.refresh_unread_count()

    async def mark_all_read(self) -> None:
        """Mark everything read, optimistically, restoring the snapshot on failure."""
        previous_notifications = list(self.notifications)
        previous_count = self.unread_count
        generation = self._generation

        now = datetime.now(UTC)
        self.notifications = [
            n if n.read else n.model_copy(update={"read": True, "read_at": now})
            for n in self.notifications
        ]
        self.unread_count = 0
        self.notify_listeners()

        try:
            if self.connected:
                await self._channel.emit(EVENT_MARK_ALL_READ)
            else:
                await self.api.mark_all_read()
        except Exception as e:
            logger.error("Failed to mark all as read", error=str(e))
            if self._is_stale(generation, "mark_all_read"):
                return
            self.notifications = previous_notifications
            self.unread_count = previous_count
            self.notify_listeners()

    async def delete(self, notification_id: str) -> None:
        """Remove a notification from view, optimistically.

        The item stays removed even if the backend delete fails; the unread
        count is resynchronized in that case.
        """
        index = self._index_of(notification_id)
        if index is not None:
            removed = self.notifications[index]
            self.notifications = self.notifications[:index] + self.notifications[index + 1:]
            if not removed.read:
                self.unread_count = max(0, self.unread_count - 1)
            self.notify_listeners()

        try:
            await self.api.delete(notification_id)
        except Exception as e:
            logger.error(
                "Failed to delete notification",
                notification_id=notification_id,
                error=str(e),
            )
            await self.refresh_unread_count()

    def clear(self) -> None:
        """Drop all notification state (used on logout and identity changes).

        Requests already in flight no longer write their results.
        """
        self._generation += 1
        self.notifications = []
        self.unread_count = 0
        self.loading = False
        self.has_more = True
        self.page = 1
        self.notify_listeners()

"""Notification state."""

from artemis_client.notifications.store import (
    NotificationChannel,
    NotificationStore,
    StoreListener,
)

__all__ = ["NotificationChannel", "NotificationStore", "StoreListener"]

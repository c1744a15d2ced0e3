"""Notification schemas."""

from artemis_client.schemas.notification.notification import (
    Notification,
    NotificationActor,
)
from artemis_client.schemas.notification.notification_page import NotificationPage
from artemis_client.schemas.notification.unread_count import UnreadCount

__all__ = ["Notification", "NotificationActor", "NotificationPage", "UnreadCount"]

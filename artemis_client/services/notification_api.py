"""REST wrapper for the notification routes."""

import structlog

from artemis_client.constants import DEFAULT_PAGE_SIZE, NOTIFICATIONS_PATH
from artemis_client.schemas.notification import NotificationPage, UnreadCount
from artemis_client.services.api_client import ApiClient

logger = structlog.get_logger(__name__)


class NotificationApi:
    """Client for the /api/notifications endpoints."""

    def __init__(self, api_client: ApiClient):
        """Initialize notification API.

        Args:
            api_client: Shared HTTP client
        """
        self.api_client = api_client

    async def list_page(self, page: int = 1, limit: int = DEFAULT_PAGE_SIZE) -> NotificationPage:
        """Fetch one page of notifications, newest first.

        Args:
            page: 1-based page number
            limit: Page size

        Returns:
            NotificationPage with the page items and pagination info
        """
        data = await self.api_client.get(
            NOTIFICATIONS_PATH, params={"page": page, "limit": limit}
        )
        result = NotificationPage.model_validate(data)
        logger.debug(
            "Fetched notification page",
            page=result.page,
            total_pages=result.total_pages,
            count=len(result.notifications),
        )
        return result

    async def unread_count(self) -> int:
        """Fetch the unread count of the whole mailbox."""
        data = await self.api_client.get(f"{NOTIFICATIONS_PATH}/unread-count")
        return UnreadCount.model_validate(data).count

    async def mark_read(self, notification_id: str) -> None:
        """Mark one notification as read."""
        await self.api_client.patch(f"{NOTIFICATIONS_PATH}/{notification_id}/read")

    async def mark_all_read(self) -> None:
        """Mark every notification of the current user as read."""
        await self.api_client.patch(f"{NOTIFICATIONS_PATH}/read-all")

    async def delete(self, notification_id: str) -> None:
        """Delete one notification."""
        await self.api_client.delete(f"{NOTIFICATIONS_PATH}/{notification_id}")

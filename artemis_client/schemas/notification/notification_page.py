"""Schema for a page of the notification list."""

from pydantic import Field

from artemis_client.schemas.base_schema_model import BaseSchemaModel
from artemis_client.schemas.notification.notification import Notification


class NotificationPage(BaseSchemaModel):
    """Paginated notification list returned by GET /api/notifications."""

    notifications: list[Notification] = Field(default_factory=list)
    total: int = Field(default=0, ge=0)
    page: int = Field(..., ge=1)
    limit: int = Field(default=20, ge=1)
    total_pages: int = Field(..., ge=0)

    @property
    def has_more(self) -> bool:
        """Whether a later page exists."""
        return self.page < self.total_pages

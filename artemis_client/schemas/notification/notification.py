"""Schema for a notification delivered to the current user."""

from datetime import datetime
from typing import Any

from pydantic import Field

from artemis_client.enums import NotificationType
from artemis_client.schemas.base_schema_model import BaseSchemaModel


class NotificationActor(BaseSchemaModel):
    """User whose action produced the notification."""

    id: str = Field(..., alias="_id")
    first_name: str = ""
    last_name: str = ""
    profile_picture: str | None = None


class Notification(BaseSchemaModel):
    """A notification as pushed over the channel or fetched over REST.

    Notifications are created server-side only. The client changes nothing
    but the read flag and read time.
    """

    id: str = Field(..., alias="_id", description="Unique notification identifier")
    recipient: str = Field(..., description="ID of the receiving user")
    type: NotificationType
    title: str
    message: str
    contract: str | None = Field(default=None, description="Related contract ID")
    actor: NotificationActor | None = None
    action_url: str | None = Field(default=None, description="Link target")
    read: bool = False
    read_at: datetime | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime
    updated_at: datetime | None = None

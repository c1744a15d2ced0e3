"""Schema for the unread notification count."""

from artemis_client.schemas.base_schema_model import BaseSchemaModel


class UnreadCount(BaseSchemaModel):
    """Unread count over the whole mailbox, not just the loaded page."""

    count: int

"""Pydantic schemas for backend payloads."""

from artemis_client.schemas.assessment import (
    Assessment,
    AssessmentCreate,
    AssessmentList,
    AssessmentSession,
    Invitation,
    InvitationCreate,
    InvitationParty,
    SendMessageResponse,
    SessionMessage,
    StartSessionResponse,
)
from artemis_client.schemas.base_schema_model import BaseSchemaModel
from artemis_client.schemas.notification import (
    Notification,
    NotificationActor,
    NotificationPage,
    UnreadCount,
)

__all__ = [
    "Assessment",
    "AssessmentCreate",
    "AssessmentList",
    "AssessmentSession",
    "BaseSchemaModel",
    "Invitation",
    "InvitationCreate",
    "InvitationParty",
    "Notification",
    "NotificationActor",
    "NotificationPage",
    "SendMessageResponse",
    "SessionMessage",
    "StartSessionResponse",
    "UnreadCount",
]

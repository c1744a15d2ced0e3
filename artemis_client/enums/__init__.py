"""Enumerations for the Artemis client."""

from artemis_client.enums.assessment import (
    AssessmentDifficulty,
    InvitationStatus,
    MessageRole,
    SessionStatus,
)
from artemis_client.enums.notification import NotificationType
from artemis_client.enums.timer import TimerState

__all__ = [
    "AssessmentDifficulty",
    "InvitationStatus",
    "MessageRole",
    "NotificationType",
    "SessionStatus",
    "TimerState",
]

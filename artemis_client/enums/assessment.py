"""Assessment-related enumerations.

Covers assessment difficulty, invitation and session lifecycles, and the
author of a transcript message.
"""

from enum import Enum


class AssessmentDifficulty(str, Enum):
    """Difficulty level of an assessment template."""

    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class InvitationStatus(str, Enum):
    """Lifecycle of an assessment invitation."""

    PENDING = "pending"
    ACCEPTED = "accepted"
    COMPLETED = "completed"
    EXPIRED = "expired"
    DECLINED = "declined"

    @property
    def is_terminal(self) -> bool:
        """Whether the invitation can no longer change."""
        return self in (
            InvitationStatus.COMPLETED,
            InvitationStatus.EXPIRED,
            InvitationStatus.DECLINED,
        )


class SessionStatus(str, Enum):
    """Lifecycle of an assessment session.

    ``abandoned`` is only ever assigned by the backend.
    """

    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    TIMED_OUT = "timed_out"
    ABANDONED = "abandoned"

    @property
    def is_terminal(self) -> bool:
        """Whether the session is finished and immutable."""
        return self is not SessionStatus.IN_PROGRESS


class MessageRole(str, Enum):
    """Author of a session transcript message."""

    AI = "ai"
    USER = "user"

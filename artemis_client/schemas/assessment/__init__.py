"""Assessment schemas."""

from artemis_client.schemas.assessment.assessment import (
    Assessment,
    AssessmentCreate,
    AssessmentList,
)
from artemis_client.schemas.assessment.invitation import (
    Invitation,
    InvitationCreate,
    InvitationParty,
)
from artemis_client.schemas.assessment.session import (
    AssessmentSession,
    SendMessageResponse,
    SessionMessage,
    StartSessionResponse,
)

__all__ = [
    "Assessment",
    "AssessmentCreate",
    "AssessmentList",
    "AssessmentSession",
    "Invitation",
    "InvitationCreate",
    "InvitationParty",
    "SendMessageResponse",
    "SessionMessage",
    "StartSessionResponse",
]

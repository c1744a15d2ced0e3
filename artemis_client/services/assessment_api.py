"""REST wrapper for assessments, invitations and sessions."""

from typing import Any

import structlog

from artemis_client.constants import ASSESSMENTS_PATH
from artemis_client.schemas.assessment import (
    Assessment,
    AssessmentCreate,
    AssessmentList,
    AssessmentSession,
    Invitation,
    InvitationCreate,
    SendMessageResponse,
    StartSessionResponse,
)
from artemis_client.services.api_client import ApiClient

logger = structlog.get_logger(__name__)


def _drop_none(params: dict[str, Any]) -> dict[str, Any] | None:
    cleaned = {k: v for k, v in params.items() if v is not None}
    return cleaned or None


class AssessmentApi:
    """Client for the /api/assessments endpoints."""

    def __init__(self, api_client: ApiClient):
        """Initialize assessment API.

        Args:
            api_client: Shared HTTP client
        """
        self.api_client = api_client

    # ── Assessment templates (employer) ──────────────────

    async def create_assessment(self, data: AssessmentCreate) -> Assessment:
        """Create an assessment template."""
        response = await self.api_client.post(ASSESSMENTS_PATH, data.to_payload())
        assessment = Assessment.model_validate(response["assessment"])
        logger.info("Created assessment", assessment_id=assessment.id)
        return assessment

    async def list_assessments(
        self,
        page: int | None = None,
        limit: int | None = None,
        profession: str | None = None,
    ) -> AssessmentList:
        """List assessment templates."""
        response = await self.api_client.get(
            ASSESSMENTS_PATH,
            params=_drop_none({"page": page, "limit": limit, "profession": profession}),
        )
        return AssessmentList.model_validate(response)

    async def get_assessment(self, assessment_id: str) -> Assessment:
        """Fetch one assessment template."""
        response = await self.api_client.get(f"{ASSESSMENTS_PATH}/{assessment_id}")
        return Assessment.model_validate(response["assessment"])

    async def update_assessment(
        self, assessment_id: str, data: AssessmentCreate
    ) -> Assessment:
        """Update fields of an assessment template."""
        response = await self.api_client.put(
            f"{ASSESSMENTS_PATH}/{assessment_id}", data.to_payload()
        )
        return Assessment.model_validate(response["assessment"])

    async def delete_assessment(self, assessment_id: str) -> None:
        """Delete an assessment template."""
        await self.api_client.delete(f"{ASSESSMENTS_PATH}/{assessment_id}")
        logger.info("Deleted assessment", assessment_id=assessment_id)

    # ── Invitations ──────────────────────────────────────

    async def send_invitation(self, data: InvitationCreate) -> Invitation:
        """Invite a freelancer to take an assessment."""
        response = await self.api_client.post(
            f"{ASSESSMENTS_PATH}/invitations", data.to_payload()
        )
        invitation = Invitation.model_validate(response["invitation"])
        logger.info(
            "Sent assessment invitation",
            invitation_id=invitation.id,
            assessment_id=invitation.assessment_id,
        )
        return invitation

    async def list_invitations(self, status: str | None = None) -> list[Invitation]:
        """List invitations visible to the current user."""
        response = await self.api_client.get(
            f"{ASSESSMENTS_PATH}/invitations", params=_drop_none({"status": status})
        )
        return [Invitation.model_validate(item) for item in response["invitations"]]

    async def get_invitation_by_token(self, token: str) -> Invitation:
        """Look up an invitation by its single-use token."""
        response = await self.api_client.get(
            f"{ASSESSMENTS_PATH}/invitations/token/{token}"
        )
        return Invitation.model_validate(response["invitation"])

    async def decline_invitation(self, invitation_id: str) -> Invitation:
        """Decline an invitation."""
        response = await self.api_client.patch(
            f"{ASSESSMENTS_PATH}/invitations/{invitation_id}/decline"
        )
        return Invitation.model_validate(response["invitation"])

    # ── Sessions ─────────────────────────────────────────

    async def start_session(self, invitation_id: str) -> StartSessionResponse:
        """Start, or resume, the session for an accepted invitation."""
        response = await self.api_client.post(
            f"{ASSESSMENTS_PATH}/sessions/start", {"invitationId": invitation_id}
        )
        return StartSessionResponse.model_validate(response)

    async def get_session(self, session_id: str) -> AssessmentSession:
        """Fetch a session with its transcript."""
        response = await self.api_client.get(f"{ASSESSMENTS_PATH}/sessions/{session_id}")
        return AssessmentSession.model_validate(response["session"])

    async def list_sessions(
        self, status: str | None = None, assessment_id: str | None = None
    ) -> list[AssessmentSession]:
        """List sessions, optionally filtered by status or assessment."""
        response = await self.api_client.get(
            f"{ASSESSMENTS_PATH}/sessions",
            params=_drop_none({"status": status, "assessmentId": assessment_id}),
        )
        return [AssessmentSession.model_validate(item) for item in response["sessions"]]

    async def send_message(self, session_id: str, content: str) -> SendMessageResponse:
        """Post an answer to a session and get the scorer's reply."""
        response = await self.api_client.post(
            f"{ASSESSMENTS_PATH}/sessions/{session_id}/message", {"content": content}
        )
        return SendMessageResponse.model_validate(response)

"""Accepting and declining assessment invitations."""

from datetime import datetime

import structlog

from artemis_client.enums import InvitationStatus
from artemis_client.exceptions import InvitationUnavailableError
from artemis_client.schemas.assessment import Invitation, StartSessionResponse
from artemis_client.services.assessment_api import AssessmentApi

logger = structlog.get_logger(__name__)

# Accepted invitations resume their existing session
STARTABLE_STATUSES = (InvitationStatus.PENDING, InvitationStatus.ACCEPTED)


class InvitationFlow:
    """Freelancer side of an invitation link."""

    def __init__(self, api: AssessmentApi):
        self.api = api

    async def lookup(self, token: str) -> Invitation:
        """Resolve an invite token to its invitation."""
        return await self.api.get_invitation_by_token(token)

    def ensure_startable(self, invitation: Invitation, now: datetime | None = None) -> None:
        """Check that a session can be started from the invitation.

        Raises:
            InvitationUnavailableError: If it is expired, declined or completed
        """
        if invitation.status is InvitationStatus.EXPIRED or invitation.is_expired(now):
            raise InvitationUnavailableError(
                invitation.id, invitation.status.value, expired=True
            )
        if invitation.status not in STARTABLE_STATUSES:
            raise InvitationUnavailableError(invitation.id, invitation.status.value)

    async def accept(self, token: str, now: datetime | None = None) -> StartSessionResponse:
        """Start (or resume) the session for the invitation behind a token.

        Args:
            token: Single-use invite token
            now: Reference time for the expiry check

        Returns:
            The started session and whether it was resumed

        Raises:
            InvitationUnavailableError: If the invitation cannot be started
        """
        invitation = await self.lookup(token)
        self.ensure_startable(invitation, now)

        response = await self.api.start_session(invitation.id)
        logger.info(
            "Started assessment session",
            invitation_id=invitation.id,
            session_id=response.session.id,
            resumed=response.resumed,
        )
        return response

    async def decline(self, invitation_id: str) -> Invitation:
        """Decline an invitation."""
        invitation = await self.api.decline_invitation(invitation_id)
        logger.info("Declined assessment invitation", invitation_id=invitation_id)
        return invitation

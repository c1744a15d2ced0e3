"""Tests for InvitationFlow."""

from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock

import pytest

from artemis_client.assessment import InvitationFlow
from artemis_client.exceptions import InvitationUnavailableError, describe_error
from artemis_client.schemas.assessment import (
    AssessmentSession,
    Invitation,
    StartSessionResponse,
)
from artemis_client.services.assessment_api import AssessmentApi
from tests.factories import invitation_payload, session_payload

pytestmark = pytest.mark.anyio


def make_invitation(**overrides) -> Invitation:
    return Invitation.model_validate(invitation_payload(**overrides))


@pytest.fixture
def api():
    api = AsyncMock(spec=AssessmentApi)
    api.start_session.return_value = StartSessionResponse(
        session=AssessmentSession.model_validate(session_payload()), resumed=False
    )
    return api


@pytest.fixture
def invitations(api):
    return InvitationFlow(api)


class TestAccept:
    """Tests for starting a session from an invite link."""

    async def test_accept_pending_invitation(self, invitations, api):
        invitation = make_invitation()
        api.get_invitation_by_token.return_value = invitation

        response = await invitations.accept(invitation.invite_token)

        api.get_invitation_by_token.assert_awaited_once_with(invitation.invite_token)
        api.start_session.assert_awaited_once_with(invitation.id)
        assert response.resumed is False

    async def test_accepted_invitation_resumes(self, invitations, api):
        invitation = make_invitation(status="accepted")
        api.get_invitation_by_token.return_value = invitation

        await invitations.accept(invitation.invite_token)

        api.start_session.assert_awaited_once_with(invitation.id)

    @pytest.mark.parametrize("status", ["completed", "declined"])
    async def test_finished_invitation_is_rejected(self, invitations, api, status):
        invitation = make_invitation(status=status)
        api.get_invitation_by_token.return_value = invitation

        with pytest.raises(InvitationUnavailableError) as exc_info:
            await invitations.accept(invitation.invite_token)

        assert exc_info.value.status == status
        assert exc_info.value.expired is False
        api.start_session.assert_not_awaited()

    async def test_past_expiry_is_rejected(self, invitations, api):
        invitation = make_invitation(expires_at=datetime.now(UTC) - timedelta(minutes=1))
        api.get_invitation_by_token.return_value = invitation

        with pytest.raises(InvitationUnavailableError) as exc_info:
            await invitations.accept(invitation.invite_token)

        assert exc_info.value.expired is True
        assert "expired" in describe_error(exc_info.value)

    async def test_expired_status_is_rejected(self, invitations, api):
        api.get_invitation_by_token.return_value = make_invitation(status="expired")

        with pytest.raises(InvitationUnavailableError):
            await invitations.accept("token")

    async def test_expiry_checked_against_given_time(self, invitations, api):
        expires_at = datetime(2026, 5, 1, tzinfo=UTC)
        invitation = make_invitation(expires_at=expires_at)
        api.get_invitation_by_token.return_value = invitation

        await invitations.accept("token", now=expires_at - timedelta(seconds=1))

        with pytest.raises(InvitationUnavailableError):
            await invitations.accept("token", now=expires_at)


class TestLookupAndDecline:
    """Tests for token lookup and declining."""

    async def test_lookup(self, invitations, api):
        invitation = make_invitation()
        api.get_invitation_by_token.return_value = invitation

        assert await invitations.lookup("token") == invitation

    async def test_decline(self, invitations, api):
        declined = make_invitation(status="declined")
        api.decline_invitation.return_value = declined

        result = await invitations.decline(declined.id)

        api.decline_invitation.assert_awaited_once_with(declined.id)
        assert result == declined

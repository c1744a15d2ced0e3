"""Schemas for assessment invitations."""

from datetime import UTC, datetime

from pydantic import Field

from artemis_client.enums import InvitationStatus
from artemis_client.schemas.assessment.assessment import Assessment
from artemis_client.schemas.base_schema_model import BaseSchemaModel


class InvitationParty(BaseSchemaModel):
    """Employer or freelancer side of an invitation, when populated."""

    id: str = Field(..., alias="_id")
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    company_name: str | None = None
    profession: str | None = None


class Invitation(BaseSchemaModel):
    """Single-use invitation for a freelancer to take an assessment."""

    id: str = Field(..., alias="_id")
    assessment: Assessment | str
    employer: InvitationParty | str
    freelancer: InvitationParty | str | None = None
    freelancer_email: str
    status: InvitationStatus
    invite_token: str
    expires_at: datetime
    message: str = ""
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def assessment_id(self) -> str:
        """ID of the assessment, whether or not it was populated."""
        if isinstance(self.assessment, Assessment):
            return self.assessment.id
        return self.assessment

    def is_expired(self, now: datetime | None = None) -> bool:
        """Whether the invitation is past its expiry time.

        Args:
            now: Reference time (defaults to the current UTC time)
        """
        now = now or datetime.now(UTC)
        expires_at = self.expires_at
        if expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=UTC)
        return expires_at <= now


class InvitationCreate(BaseSchemaModel):
    """Request body for sending an invitation."""

    assessment_id: str
    freelancer_email: str
    message: str | None = None
    expires_in_days: int | None = Field(default=None, ge=1)

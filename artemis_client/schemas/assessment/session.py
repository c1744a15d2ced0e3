"""Schemas for assessment sessions and their message exchange."""

from datetime import datetime

from pydantic import Field

from artemis_client.enums import MessageRole, SessionStatus
from artemis_client.schemas.assessment.assessment import Assessment
from artemis_client.schemas.base_schema_model import BaseSchemaModel


class SessionMessage(BaseSchemaModel):
    """One entry of the session transcript."""

    id: str = Field(..., alias="_id")
    role: MessageRole
    content: str
    question_index: int | None = None
    timestamp: datetime | None = None


class AssessmentSession(BaseSchemaModel):
    """A freelancer's attempt at an assessment.

    Score, breakdown and summary fields are populated once the session is
    terminal.
    """

    id: str = Field(..., alias="_id")
    invitation: str
    assessment: Assessment | str
    freelancer: str
    status: SessionStatus
    started_at: datetime
    completed_at: datetime | None = None
    time_spent_seconds: int = 0
    messages: list[SessionMessage] = Field(default_factory=list)
    current_question_index: int = Field(default=0, ge=0)
    total_questions: int = Field(default=0, ge=0)
    score: float | None = None
    breakdown: dict[str, float] = Field(default_factory=dict)
    ai_summary: str = ""
    strengths: list[str] = Field(default_factory=list)
    weaknesses: list[str] = Field(default_factory=list)

    @property
    def is_terminal(self) -> bool:
        """Whether the session has finished."""
        return self.status.is_terminal


class SendMessageResponse(BaseSchemaModel):
    """Result of posting an answer to a session."""

    session: AssessmentSession
    evaluation: str = ""
    score: float | None = None
    next_question: str | None = None
    is_complete: bool = False


class StartSessionResponse(BaseSchemaModel):
    """Result of starting (or resuming) a session from an invitation."""

    session: AssessmentSession
    resumed: bool = False

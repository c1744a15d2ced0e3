"""Client side of an assessment session.

This module provides the AssessmentSessionFlow class which loads a session,
exchanges answers with the scorer one message at a time, and reacts to the
timer running out. Status transitions are always taken from the server;
the client never marks a session terminal on its own.
"""

import math
import time
from collections.abc import Callable

import structlog

from artemis_client.assessment.timer import AssessmentTimer
from artemis_client.enums import SessionStatus
from artemis_client.exceptions import ApiRequestError, describe_error
from artemis_client.schemas.assessment import (
    Assessment,
    AssessmentSession,
    SendMessageResponse,
)
from artemis_client.services.assessment_api import AssessmentApi

logger = structlog.get_logger(__name__)

LOAD_FAILED_MESSAGE = "Failed to load assessment session."
SEND_FAILED_MESSAGE = "Failed to send message."


class AssessmentSessionFlow:
    """State of one assessment session as seen by the freelancer."""

    def __init__(self, api: AssessmentApi, session_id: str):
        """Initialize session flow.

        Args:
            api: REST wrapper for assessment routes
            session_id: ID of the session to drive
        """
        self.api = api
        self.session_id = session_id

        self.session: AssessmentSession | None = None
        self.loading = False
        self.sending = False
        self.draft = ""
        self.error: str | None = None
        self.last_response: SendMessageResponse | None = None

    @property
    def assessment(self) -> Assessment | None:
        """The parent assessment, when the backend populated it."""
        if self.session is not None and isinstance(self.session.assessment, Assessment):
            return self.session.assessment
        return None

    @property
    def is_complete(self) -> bool:
        """Whether the session finished or timed out."""
        return self.session is not None and self.session.status in (
            SessionStatus.COMPLETED,
            SessionStatus.TIMED_OUT,
        )

    @property
    def progress(self) -> int:
        """Percentage of questions answered so far."""
        if self.session is None or self.session.total_questions <= 0:
            return 0
        ratio = self.session.current_question_index / self.session.total_questions
        return math.floor(ratio * 100 + 0.5)

    async def load(self) -> AssessmentSession | None:
        """Fetch the session with its transcript.

        Returns:
            The session, or None if it could not be loaded
        """
        self.loading = True
        try:
            self.session = await self.api.get_session(self.session_id)
            self.error = None
        except Exception as e:
            logger.error(
                "Failed to load assessment session",
                session_id=self.session_id,
                error=str(e),
            )
            self.error = LOAD_FAILED_MESSAGE
        finally:
            self.loading = False
        return self.session

    async def send_message(self, content: str) -> SendMessageResponse | None:
        """Send an answer and apply the updated session.

        Only one send may be outstanding; a send issued meanwhile is ignored,
        as are blank answers and sends to a finished session. On failure the
        text is kept in ``draft`` and ``error`` holds a message for the user.

        Args:
            content: Answer text

        Returns:
            The server's response, or None if the send was ignored or failed
        """
        text = (content or "").strip()
        if self.session is None or self.sending or not text:
            return None
        if self.session.is_terminal:
            logger.debug(
                "Ignoring message for finished session",
                session_id=self.session_id,
                status=self.session.status.value,
            )
            return None

        self.sending = True
        self.draft = ""
        self.error = None
        try:
            response = await self.api.send_message(self.session.id, text)
        except Exception as e:
            logger.error(
                "Failed to send assessment message",
                session_id=self.session_id,
                error=str(e),
            )
            self.error = (
                describe_error(e) if isinstance(e, ApiRequestError) else SEND_FAILED_MESSAGE
            )
            # Keep the answer so it is not lost
            self.draft = text
            return None
        finally:
            self.sending = False

        self.session = response.session
        self.last_response = response
        if response.is_complete:
            logger.info(
                "Assessment session finished",
                session_id=self.session_id,
                status=response.session.status.value,
                score=response.session.score,
            )
        return response

    async def handle_time_up(self) -> AssessmentSession | None:
        """Refetch the session to learn the status the server assigned."""
        logger.info("Assessment time is up, refreshing session", session_id=self.session_id)
        try:
            self.session = await self.api.get_session(self.session_id)
        except Exception as e:
            logger.warning(
                "Failed to refresh session after time-up",
                session_id=self.session_id,
                error=str(e),
            )
        return self.session

    def create_timer(
        self,
        time_limit_minutes: int | None = None,
        clock: Callable[[], float] = time.time,
    ) -> AssessmentTimer:
        """Build the countdown for this session, wired to ``handle_time_up``.

        Args:
            time_limit_minutes: Limit override; defaults to the assessment's

        Raises:
            ValueError: If the session is not loaded or the limit is unknown
        """
        if self.session is None:
            raise ValueError("Session must be loaded before creating a timer")
        if time_limit_minutes is None:
            if self.assessment is None:
                raise ValueError("Time limit unknown: assessment was not populated")
            time_limit_minutes = self.assessment.time_limit_minutes

        return AssessmentTimer(
            time_limit_minutes,
            self.session.started_at,
            on_time_up=self.handle_time_up,
            clock=clock,
        )

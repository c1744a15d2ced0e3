"""Tests for AssessmentSessionFlow."""

import asyncio
from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock

import pytest

from artemis_client.assessment import AssessmentSessionFlow
from artemis_client.assessment.session import LOAD_FAILED_MESSAGE, SEND_FAILED_MESSAGE
from artemis_client.enums import SessionStatus
from artemis_client.exceptions import ApiNetworkError, ApiRequestError
from artemis_client.schemas.assessment import AssessmentSession, SendMessageResponse
from artemis_client.services.assessment_api import AssessmentApi
from tests.factories import session_payload

pytestmark = pytest.mark.anyio


def make_session(**overrides) -> AssessmentSession:
    return AssessmentSession.model_validate(session_payload(**overrides))


def make_reply(session: AssessmentSession, is_complete: bool = False) -> SendMessageResponse:
    return SendMessageResponse(session=session, evaluation="Good", is_complete=is_complete)


@pytest.fixture
def session():
    return make_session()


@pytest.fixture
def api(session):
    api = AsyncMock(spec=AssessmentApi)
    api.get_session.return_value = session
    return api


@pytest.fixture
async def flow(api, session):
    flow = AssessmentSessionFlow(api, session.id)
    await flow.load()
    return flow


class TestLoading:
    """Tests for loading the session."""

    async def test_load(self, flow, session, api):
        assert flow.session == session
        assert flow.assessment is not None
        assert flow.error is None
        assert flow.loading is False
        api.get_session.assert_awaited_once_with(session.id)

    async def test_load_failure_sets_error(self, api):
        api.get_session.side_effect = ApiNetworkError("offline")
        flow = AssessmentSessionFlow(api, "s1")

        assert await flow.load() is None
        assert flow.error == LOAD_FAILED_MESSAGE
        assert flow.loading is False


class TestProgress:
    """Tests for derived progress and completion."""

    async def test_progress_rounds_percentage(self, api):
        api.get_session.return_value = make_session(currentQuestionIndex=2, totalQuestions=3)
        flow = AssessmentSessionFlow(api, "s1")
        await flow.load()

        assert flow.progress == 67

    async def test_progress_without_questions(self, api):
        api.get_session.return_value = make_session(totalQuestions=0)
        flow = AssessmentSessionFlow(api, "s1")
        await flow.load()

        assert flow.progress == 0

    @pytest.mark.parametrize(
        "status, complete",
        [("in_progress", False), ("completed", True), ("timed_out", True), ("abandoned", False)],
    )
    async def test_is_complete(self, api, status, complete):
        api.get_session.return_value = make_session(status=status)
        flow = AssessmentSessionFlow(api, "s1")
        await flow.load()

        assert flow.is_complete is complete


class TestSending:
    """Tests for the serialized message exchange."""

    async def test_send_applies_updated_session(self, flow, api, session):
        updated = make_session(_id=session.id, currentQuestionIndex=1)
        api.send_message.return_value = make_reply(updated)

        response = await flow.send_message("  My answer  ")

        assert response.session == updated
        assert flow.session == updated
        assert flow.draft == ""
        api.send_message.assert_awaited_once_with(session.id, "My answer")

    async def test_second_send_while_outstanding_is_ignored(self, flow, api, session):
        """Test only one send is in flight at a time."""
        release = asyncio.Event()

        async def slow_send(session_id, content):
            await release.wait()
            return make_reply(session)

        api.send_message.side_effect = slow_send

        first = asyncio.ensure_future(flow.send_message("first"))
        await asyncio.sleep(0)
        assert flow.sending is True

        second = await flow.send_message("second")
        release.set()
        first_result = await first

        assert second is None
        assert first_result is not None
        api.send_message.assert_awaited_once_with(session.id, "first")
        assert flow.sending is False

    async def test_send_after_first_resolves_is_allowed(self, flow, api, session):
        api.send_message.return_value = make_reply(session)

        await flow.send_message("first")
        await flow.send_message("second")

        assert api.send_message.await_count == 2

    @pytest.mark.parametrize("content", ["", "   ", None])
    async def test_blank_content_is_ignored(self, flow, api, content):
        assert await flow.send_message(content) is None
        api.send_message.assert_not_awaited()

    async def test_terminal_session_rejects_sends(self, api):
        api.get_session.return_value = make_session(status="completed", score=82)
        flow = AssessmentSessionFlow(api, "s1")
        await flow.load()

        assert await flow.send_message("late answer") is None
        api.send_message.assert_not_awaited()

    async def test_send_before_load_is_ignored(self, api):
        flow = AssessmentSessionFlow(api, "s1")

        assert await flow.send_message("answer") is None

    async def test_failure_restores_draft(self, flow, api, session):
        """Test the answer is kept for retry and a message is recorded."""
        api.send_message.side_effect = ApiNetworkError("offline")

        assert await flow.send_message("my long answer") is None

        assert flow.draft == "my long answer"
        assert flow.error == SEND_FAILED_MESSAGE
        assert flow.sending is False
        assert flow.session == session

    async def test_failure_surfaces_server_message(self, flow, api):
        api.send_message.side_effect = ApiRequestError(
            "Session has already ended", status_code=400
        )

        await flow.send_message("answer")

        assert flow.error == "Session has already ended"

    async def test_completion_reply_makes_flow_complete(self, flow, api, session):
        finished = make_session(_id=session.id, status="completed", score=91)
        api.send_message.return_value = make_reply(finished, is_complete=True)

        await flow.send_message("final answer")

        assert flow.is_complete is True
        assert flow.session.score == 91


class TestTimeUp:
    """Tests for the timer running out."""

    async def test_time_up_refetches_session(self, flow, api, session):
        """Test the terminal status comes from the server, not the client."""
        timed_out = make_session(_id=session.id, status="timed_out")
        api.get_session.return_value = timed_out

        result = await flow.handle_time_up()

        assert result.status is SessionStatus.TIMED_OUT
        assert flow.is_complete is True
        assert api.get_session.await_count == 2

    async def test_time_up_refetch_failure_keeps_session(self, flow, api, session):
        api.get_session.side_effect = ApiNetworkError("offline")

        result = await flow.handle_time_up()

        assert result == session
        assert flow.session.status is SessionStatus.IN_PROGRESS

    async def test_timer_fires_time_up_once(self, api):
        started_at = datetime.now(UTC) - timedelta(minutes=31)
        api.get_session.return_value = make_session(started_at=started_at)
        flow = AssessmentSessionFlow(api, "s1")
        await flow.load()

        timer = flow.create_timer()
        for _ in range(3):
            timer.check_time_up()
        await timer.time_up_task

        assert timer.remaining_seconds == 0
        assert api.get_session.await_count == 2


class TestCreateTimer:
    """Tests for building the countdown."""

    async def test_uses_assessment_limit(self, flow, session):
        timer = flow.create_timer()

        assert timer.time_limit_seconds == session.assessment.time_limit_minutes * 60

    async def test_explicit_limit_overrides(self, flow):
        assert flow.create_timer(45).time_limit_seconds == 45 * 60

    async def test_requires_known_limit(self, api):
        api.get_session.return_value = make_session(assessment="a1")
        flow = AssessmentSessionFlow(api, "s1")
        await flow.load()

        with pytest.raises(ValueError):
            flow.create_timer()

    async def test_requires_loaded_session(self, api):
        with pytest.raises(ValueError):
            AssessmentSessionFlow(api, "s1").create_timer(30)

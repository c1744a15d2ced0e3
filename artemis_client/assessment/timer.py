"""Countdown for a timed assessment session."""

import asyncio
import inspect
import math
import time
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any

import structlog

from artemis_client.constants import (
    TIMER_CRITICAL_SECONDS,
    TIMER_PULSE_SECONDS,
    TIMER_WARNING_SECONDS,
)
from artemis_client.enums import TimerState

logger = structlog.get_logger(__name__)

TimeUpCallback = Callable[[], Any]


class AssessmentTimer:
    """Remaining time of a session, derived from a fixed deadline.

    The value is computed from the wall clock on creation and on every tick,
    and never goes up, so a process that was suspended reports the right
    value as soon as it resumes. The time-up callback fires exactly once,
    however often zero is observed.
    """

    def __init__(
        self,
        time_limit_minutes: int,
        started_at: datetime,
        on_time_up: TimeUpCallback | None = None,
        clock: Callable[[], float] = time.time,
    ):
        """Initialize assessment timer.

        Args:
            time_limit_minutes: Total allowed time in minutes
            started_at: When the session started (naive values are UTC)
            on_time_up: Called once when the time runs out; may be async
            clock: Returns the current time as epoch seconds
        """
        if started_at.tzinfo is None:
            started_at = started_at.replace(tzinfo=UTC)
        self.time_limit_seconds = time_limit_minutes * 60
        self.started_at = started_at
        self.on_time_up = on_time_up
        self._clock = clock
        self._started_ts = started_at.timestamp()
        self._remaining = self._compute_remaining()
        self._fired = False
        self.time_up_task: asyncio.Task | None = None

    def _compute_remaining(self) -> int:
        elapsed = math.floor(self._clock() - self._started_ts)
        return max(0, self.time_limit_seconds - elapsed)

    @property
    def remaining_seconds(self) -> int:
        """Seconds left, as of the last tick."""
        return self._remaining

    @property
    def expired(self) -> bool:
        """Whether no time is left."""
        return self._remaining == 0

    @property
    def fired(self) -> bool:
        """Whether the time-up callback has been invoked."""
        return self._fired

    @property
    def formatted(self) -> str:
        """Remaining time as MM:SS."""
        minutes, seconds = divmod(self._remaining, 60)
        return f"{minutes:02d}:{seconds:02d}"

    @property
    def state(self) -> TimerState:
        """Urgency of the remaining time."""
        remaining = self._remaining
        if remaining <= TIMER_PULSE_SECONDS:
            return TimerState.CRITICAL_PULSING
        if remaining <= TIMER_CRITICAL_SECONDS:
            return TimerState.CRITICAL
        if remaining <= TIMER_WARNING_SECONDS:
            return TimerState.WARNING
        return TimerState.NORMAL

    def tick(self) -> int:
        """Recompute the remaining time and fire time-up when it hits zero.

        Returns:
            Remaining seconds
        """
        self._remaining = min(self._remaining, self._compute_remaining())
        self.check_time_up()
        return self._remaining

    def check_time_up(self) -> bool:
        """Fire the time-up callback if the time is out and it has not fired.

        Safe to call any number of times.

        Returns:
            True if the callback was invoked by this call
        """
        if self._remaining > 0 or self._fired:
            return False

        self._fired = True
        logger.info("Assessment time is up", started_at=self.started_at.isoformat())
        if self.on_time_up is None:
            return True

        result = self.on_time_up()
        if inspect.isawaitable(result):
            self.time_up_task = asyncio.ensure_future(result)
        return True

    async def run(self, interval: float = 1.0, sleep=asyncio.sleep) -> None:
        """Tick every ``interval`` seconds until the time runs out.

        Awaits an async time-up callback before returning.
        """
        self.check_time_up()
        while self._remaining > 0:
            await sleep(interval)
            self.tick()

        if self.time_up_task is not None:
            await self.time_up_task

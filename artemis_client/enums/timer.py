"""Visual states of the assessment countdown."""

from enum import Enum


class TimerState(str, Enum):
    """Urgency of the remaining assessment time."""

    NORMAL = "NORMAL"
    WARNING = "WARNING"
    CRITICAL = "CRITICAL"
    CRITICAL_PULSING = "CRITICAL_PULSING"

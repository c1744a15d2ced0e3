"""Reconnect backoff options for the real-time channel."""

from typing import Any


class ReconnectPolicy:
    """Bounded exponential backoff handed to the Socket.IO client.

    The client doubles the delay from ``delay`` up to ``delay_max``, moves
    each delay by up to ``randomization_factor`` of itself, and gives up
    after ``attempts`` reconnect attempts. The counter resets after every
    successful connect.
    """

    def __init__(
        self,
        attempts: int = 10,
        delay: float = 2.0,
        delay_max: float = 30.0,
        randomization_factor: float = 0.5,
    ):
        """Initialize reconnect policy.

        Args:
            attempts: Reconnect attempts allowed after the first failure
            delay: First delay in seconds
            delay_max: Ceiling for any delay in seconds
            randomization_factor: Jitter as a fraction of the delay (0-1)
        """
        self.attempts = attempts
        self.delay = delay
        self.delay_max = delay_max
        self.randomization_factor = randomization_factor

    @classmethod
    def from_settings(cls, settings) -> "ReconnectPolicy":
        """Build the policy from ClientSettings."""
        return cls(
            attempts=settings.socket_reconnection_attempts,
            delay=settings.socket_reconnection_delay,
            delay_max=settings.socket_reconnection_delay_max,
            randomization_factor=settings.socket_randomization_factor,
        )

    def client_options(self) -> dict[str, Any]:
        """Keyword arguments for ``socketio.AsyncClient``."""
        # python-socketio treats 0 attempts as unlimited
        if self.attempts == 0:
            return {"reconnection": False}
        return {
            "reconnection": True,
            "reconnection_attempts": self.attempts,
            "reconnection_delay": self.delay,
            "reconnection_delay_max": self.delay_max,
            "randomization_factor": self.randomization_factor,
        }

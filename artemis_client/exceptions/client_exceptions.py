"""Exceptions raised by client-side checks."""


class ConfigurationError(Exception):
    """Required boot configuration is missing or invalid."""

    def __init__(self, message: str, variables: list[str] | None = None):
        """Initialize configuration error.

        Args:
            message: Error message
            variables: Names of the offending environment variables
        """
        self.variables = variables or []
        super().__init__(message)


class InvitationUnavailableError(Exception):
    """Invitation cannot be accepted (not pending or already expired)."""

    def __init__(self, invitation_id: str, status: str, expired: bool = False):
        """Initialize invitation unavailable error.

        Args:
            invitation_id: ID of the invitation
            status: Current invitation status
            expired: True if the invitation is past its expiry
        """
        self.invitation_id = invitation_id
        self.status = status
        self.expired = expired
        reason = "has expired" if expired else f"is {status}"
        super().__init__(f"Invitation {invitation_id} {reason}")


class ChannelNotConnectedError(Exception):
    """Real-time channel has no live connection to emit on."""

    def __init__(self, event: str):
        """Initialize channel error.

        Args:
            event: Name of the event that could not be emitted
        """
        self.event = event
        super().__init__(f"Cannot emit {event}: real-time channel is not connected")

"""Translation of client errors into user-facing messages."""

import structlog

from artemis_client.exceptions.api_exceptions import ApiError, ApiNetworkError
from artemis_client.exceptions.client_exceptions import InvitationUnavailableError

logger = structlog.get_logger(__name__)

GENERIC_ERROR_MESSAGE = "An unexpected error occurred. Please try again."


def describe_error(exc: BaseException) -> str:
    """Turn an exception into a message suitable for showing to the user.

    Validation failures surface the server-provided text; everything else
    gets a generic, status-specific message.

    Args:
        exc: The exception raised by an API call or client-side check.

    Returns:
        A user-friendly message.
    """
    if isinstance(exc, InvitationUnavailableError):
        return str(exc)

    if isinstance(exc, ApiNetworkError):
        if exc.timed_out:
            return "Request timeout. The operation took too long. Please try again."
        return "No response from server. Please check your internet connection."

    if not isinstance(exc, ApiError) or exc.status_code is None:
        logger.debug("Describing unexpected error", error_type=type(exc).__name__)
        return str(exc) or GENERIC_ERROR_MESSAGE

    status = exc.status_code
    server_message = str(exc)

    if status == 400:
        return server_message or "Invalid request. Please check your input."
    if status == 401:
        return "Authentication required. Please log in."
    if status == 403:
        return "Access denied. You don't have permission to perform this action."
    if status == 404:
        return server_message or "Resource not found."
    if status == 429:
        wait_time = f"{exc.retry_after} seconds" if exc.retry_after else "15 minutes"
        return f"Too many requests. Please try again in {wait_time}."
    if status in (502, 503, 504):
        return "Service temporarily unavailable. Please try again later."
    if status >= 500:
        return "Internal server error. Please try again later."
    return server_message or f"Server error ({status}). Please try again."

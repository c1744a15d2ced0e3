"""Custom exceptions for backend API communication."""


class ApiError(Exception):
    """Base exception for backend API errors."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        correlation_id: str | None = None,
        retry_after: str | None = None,
    ):
        """Initialize API error.

        Args:
            message: Error message (server-provided text where available)
            status_code: HTTP status code if a response was received
            correlation_id: Correlation ID of the failed request
            retry_after: Value of the Retry-After header, if any
        """
        self.status_code = status_code
        self.correlation_id = correlation_id
        self.retry_after = retry_after
        super().__init__(message)


class ApiUnauthorizedError(ApiError):
    """Request was rejected with 401 and could not be recovered by a refresh."""

    def __init__(self, message: str = "Unauthorized", **kwargs):
        """Initialize unauthorized error.

        Args:
            message: Error message
            **kwargs: Forwarded to ApiError
        """
        kwargs.setdefault("status_code", 401)
        super().__init__(message, **kwargs)


class ApiRequestError(ApiError):
    """Backend rejected the request (4xx other than 401)."""


class ApiNotFoundError(ApiRequestError):
    """Requested resource does not exist (404)."""

    def __init__(self, path: str, message: str | None = None, **kwargs):
        """Initialize not found error.

        Args:
            path: API path that was not found
            message: Optional server-provided message
            **kwargs: Forwarded to ApiError
        """
        self.path = path
        kwargs.setdefault("status_code", 404)
        super().__init__(message or f"Resource {path} not found", **kwargs)


class ApiServerError(ApiError):
    """Backend is failing or unavailable (5xx)."""

    def __init__(self, status_code: int, message: str | None = None, **kwargs):
        """Initialize server error.

        Args:
            status_code: HTTP status code (500, 503, etc.)
            message: Optional custom error message
            **kwargs: Forwarded to ApiError
        """
        default_message = f"API server error (status: {status_code})"
        super().__init__(message or default_message, status_code=status_code, **kwargs)


class ApiNetworkError(ApiError):
    """No response was received (connection failure or timeout)."""

    def __init__(self, message: str, timed_out: bool = False, **kwargs):
        """Initialize network error.

        Args:
            message: Error message
            timed_out: True if the request exceeded its timeout
            **kwargs: Forwarded to ApiError
        """
        self.timed_out = timed_out
        super().__init__(message, **kwargs)


class TokenRefreshError(ApiUnauthorizedError):
    """Auth token could not be refreshed after a 401."""

    def __init__(self, message: str = "Failed to refresh token", **kwargs):
        """Initialize token refresh error.

        Args:
            message: Error message
            **kwargs: Forwarded to ApiError
        """
        super().__init__(message, **kwargs)

"""Exception handling utilities for the Artemis client."""

from artemis_client.exceptions.api_exceptions import (
    ApiError,
    ApiNetworkError,
    ApiNotFoundError,
    ApiRequestError,
    ApiServerError,
    ApiUnauthorizedError,
    TokenRefreshError,
)
from artemis_client.exceptions.client_exceptions import (
    ChannelNotConnectedError,
    ConfigurationError,
    InvitationUnavailableError,
)
from artemis_client.exceptions.handlers import describe_error

__all__ = [
    "ApiError",
    "ApiNetworkError",
    "ApiNotFoundError",
    "ApiRequestError",
    "ApiServerError",
    "ApiUnauthorizedError",
    "ChannelNotConnectedError",
    "ConfigurationError",
    "InvitationUnavailableError",
    "TokenRefreshError",
    "describe_error",
]

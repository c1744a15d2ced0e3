"""HTTP client for the marketplace backend.

This client handles:
- Correlation IDs on every request
- Bearer token authentication
- Single-flight token refresh: concurrent requests rejected with 401 wait
  on one refresh and are retried once with the new token, or all fail
  together if the refresh fails
- Mapping of error responses onto the ApiError hierarchy

Requests are made with ``requests`` on a worker thread so the event loop
is never blocked; all client state is only touched on the event loop.
"""

import asyncio
import functools
import random
import string
import time
from collections.abc import Awaitable, Callable
from typing import Any

import anyio
import jwt
import requests
import structlog

from artemis_client.constants import CORRELATION_ID_HEADER
from artemis_client.exceptions import (
    ApiError,
    ApiNetworkError,
    ApiNotFoundError,
    ApiRequestError,
    ApiServerError,
    ApiUnauthorizedError,
    TokenRefreshError,
)
from artemis_client.logging.context import clear_correlation_id, set_correlation_id

logger = structlog.get_logger(__name__)

TokenRefresher = Callable[[], Awaitable[str | None]]

_BASE36 = string.digits + string.ascii_lowercase


def new_correlation_id() -> str:
    """Build a correlation ID of the form ``<epoch-ms>-<9 base36 chars>``."""
    suffix = "".join(random.choices(_BASE36, k=9))
    return f"{int(time.time() * 1000)}-{suffix}"


def is_valid_jwt_format(token: str | None) -> bool:
    """Check that a token looks like a JWT (three non-empty segments).

    Args:
        token: Candidate token

    Returns:
        True if the token has a decodable JWT header
    """
    if not token or not isinstance(token, str):
        return False
    parts = token.split(".")
    if len(parts) != 3 or not all(parts):
        return False
    try:
        jwt.get_unverified_header(token)
    except jwt.InvalidTokenError:
        return False
    return True


class ApiClient:
    """Client for the marketplace REST API."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        service_name: str = "artemis-api",
    ):
        """Initialize API client.

        Args:
            base_url: Base URL of the backend (routes start with /api)
            timeout: Request timeout in seconds
            service_name: Name used in logs
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.service_name = service_name
        self._auth_token: str | None = None
        self._token_refresher: TokenRefresher | None = None
        self._refresh_future: asyncio.Future | None = None

    # ── Authentication ───────────────────────────────────

    @property
    def auth_token(self) -> str | None:
        """Bearer token currently attached to requests."""
        return self._auth_token

    def set_auth_token(self, token: str | None) -> None:
        """Set the bearer token for API requests.

        Tokens without JWT shape are rejected and clear the current token.

        Args:
            token: Access token, or None to remove authentication
        """
        if token and is_valid_jwt_format(token):
            self._auth_token = token
            logger.debug("Auth token set for API client")
            return

        self._auth_token = None
        if token:
            logger.warning(
                "Invalid JWT format received, token not set",
                token_length=len(token),
            )
        else:
            logger.debug("Auth token removed from API client")

    def set_token_refresher(self, refresher: TokenRefresher | None) -> None:
        """Register the coroutine used to obtain a fresh token after a 401.

        Args:
            refresher: Async callable returning a new token (or None on failure)
        """
        self._token_refresher = refresher

    async def _refresh_token(self) -> str:
        """Obtain a new token, sharing one in-flight refresh between callers.

        Returns:
            The new access token

        Raises:
            ApiUnauthorizedError: If no refresher is registered
            TokenRefreshError: If the refresh fails or yields no token
        """
        if self._refresh_future is not None:
            logger.debug("Token refresh already in flight, queueing request")
            return await asyncio.shield(self._refresh_future)

        if self._token_refresher is None:
            logger.warning("Token refresh callback not set - cannot refresh token")
            raise ApiUnauthorizedError("Token refresh callback not set")

        future = asyncio.get_running_loop().create_future()
        self._refresh_future = future
        try:
            try:
                token = await self._token_refresher()
            except Exception as e:
                logger.error("Token refresh failed", error=str(e))
                raise TokenRefreshError(f"Token refresh failed: {e}") from e

            if not token:
                logger.error("Token refresh returned no token")
                raise TokenRefreshError()

            self.set_auth_token(token)
            future.set_result(token)
            logger.debug("Token refreshed successfully, retrying request")
            return token

        except TokenRefreshError as e:
            self._reject_waiters(future, e)
            raise
        except asyncio.CancelledError:
            self._reject_waiters(future, TokenRefreshError("Token refresh cancelled"))
            raise
        finally:
            self._refresh_future = None

    @staticmethod
    def _reject_waiters(future: asyncio.Future, error: Exception) -> None:
        if not future.done():
            future.set_exception(error)
            # Mark retrieved so a refresh without waiters does not warn
            future.exception()

    # ── Requests ─────────────────────────────────────────

    def _get_headers(self, correlation_id: str, token: str | None) -> dict[str, str]:
        """Get common HTTP headers for a request.

        Args:
            correlation_id: Correlation ID of this request
            token: Bearer token to send, if any

        Returns:
            Dictionary of headers
        """
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
            CORRELATION_ID_HEADER: correlation_id,
        }
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    def _send(
        self,
        method: str,
        url: str,
        headers: dict[str, str],
        params: dict[str, Any] | None,
        json_data: Any,
        correlation_id: str,
    ) -> requests.Response:
        """Perform one blocking HTTP request.

        Raises:
            ApiNetworkError: If no response was received
        """
        log = logger.bind(
            service=self.service_name,
            method=method,
            url=url,
            correlation_id=correlation_id,
        )
        log.debug("Making API request", params=params)

        try:
            response = requests.request(
                method=method,
                url=url,
                headers=headers,
                params=params,
                json=json_data,
                timeout=self.timeout,
            )
        except requests.Timeout as e:
            log.error("API request timed out", timeout=self.timeout)
            raise ApiNetworkError(
                f"Request to {url} timed out",
                timed_out=True,
                correlation_id=correlation_id,
            ) from e
        except requests.RequestException as e:
            log.error("Failed to connect to API", error=str(e))
            raise ApiNetworkError(
                f"Request to {url} failed: {e}",
                correlation_id=correlation_id,
            ) from e

        log.debug("Received API response", status_code=response.status_code)
        return response

    async def _send_async(
        self,
        method: str,
        url: str,
        params: dict[str, Any] | None,
        json_data: Any,
        correlation_id: str,
        token: str | None,
    ) -> requests.Response:
        headers = self._get_headers(correlation_id, token)
        return await anyio.to_thread.run_sync(
            functools.partial(
                self._send, method, url, headers, params, json_data, correlation_id
            )
        )

    async def request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        json_data: Any = None,
    ) -> Any:
        """Make an API request, refreshing the token once on 401.

        Args:
            method: HTTP method (GET, POST, etc.)
            path: API path starting with /api
            params: Query parameters
            json_data: JSON body data

        Returns:
            Decoded JSON body, or None for empty responses

        Raises:
            ApiUnauthorizedError: If the request is still unauthorized
            TokenRefreshError: If the token could not be refreshed
            ApiNotFoundError: For 404 responses
            ApiRequestError: For other 4xx responses
            ApiServerError: For 5xx responses
            ApiNetworkError: For timeouts and connection failures
        """
        url = f"{self.base_url}{path}"
        correlation_id = new_correlation_id()
        set_correlation_id(correlation_id)

        try:
            response = await self._send_async(
                method, url, params, json_data, correlation_id, self._auth_token
            )

            if response.status_code == 401:
                logger.info(
                    "API request unauthorized, refreshing token",
                    method=method,
                    path=path,
                )
                token = await self._refresh_token()
                response = await self._send_async(
                    method, url, params, json_data, correlation_id, token
                )

            return self._handle_response(response, method, path, correlation_id)
        finally:
            clear_correlation_id()

    def _handle_response(
        self,
        response: requests.Response,
        method: str,
        path: str,
        correlation_id: str,
    ) -> Any:
        """Decode a response or raise the matching ApiError."""
        status = response.status_code
        message = _server_message(response)

        if status >= 500:
            logger.error(
                "API server error",
                method=method,
                path=path,
                status_code=status,
                response_text=response.text[:500],
            )
            raise ApiServerError(status, message=message, correlation_id=correlation_id)

        if status == 401:
            logger.warning("API request unauthorized after refresh", path=path)
            raise ApiUnauthorizedError(
                message or "Unauthorized", correlation_id=correlation_id
            )

        if status == 404:
            logger.warning("API resource not found", method=method, path=path)
            raise ApiNotFoundError(path, message=message, correlation_id=correlation_id)

        if status >= 400:
            logger.warning(
                "API request rejected",
                method=method,
                path=path,
                status_code=status,
                message=message,
            )
            raise ApiRequestError(
                message or f"Request failed with status {status}",
                status_code=status,
                correlation_id=correlation_id,
                retry_after=response.headers.get("Retry-After"),
            )

        if status == 204 or not response.content:
            return None

        try:
            return response.json()
        except ValueError as e:
            logger.error("Failed to decode API response", path=path, error=str(e))
            raise ApiError(
                f"Invalid JSON in response from {path}",
                status_code=status,
                correlation_id=correlation_id,
            ) from e

    async def get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        """Send a GET request."""
        return await self.request("GET", path, params=params)

    async def post(self, path: str, json_data: Any = None) -> Any:
        """Send a POST request."""
        return await self.request("POST", path, json_data=json_data)

    async def put(self, path: str, json_data: Any = None) -> Any:
        """Send a PUT request."""
        return await self.request("PUT", path, json_data=json_data)

    async def patch(self, path: str, json_data: Any = None) -> Any:
        """Send a PATCH request."""
        return await self.request("PATCH", path, json_data=json_data)

    async def delete(self, path: str) -> Any:
        """Send a DELETE request."""
        return await self.request("DELETE", path)


def _server_message(response: requests.Response) -> str | None:
    """Extract the human-readable error text from an error response."""
    if response.status_code < 400:
        return None
    try:
        data = response.json()
    except ValueError:
        return response.text[:200] or None
    if isinstance(data, dict):
        return data.get("message") or data.get("error")
    return None

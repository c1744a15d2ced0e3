"""Authenticated identity used to scope the real-time channel."""

from collections.abc import Awaitable, Callable
from typing import Any

import jwt
import structlog

logger = structlog.get_logger(__name__)

TokenSupplier = Callable[[], Awaitable[str | None]]


def decode_claims(token: str) -> dict[str, Any]:
    """Read the claims of an identity-provider token without verifying it.

    Signature verification is the backend's job; the client only needs the
    subject to know who is signed in.

    Args:
        token: Encoded JWT

    Returns:
        Token claims

    Raises:
        jwt.InvalidTokenError: If the token is not a decodable JWT
    """
    return jwt.decode(token, options={"verify_signature": False})


class Identity:
    """A signed-in user plus the means to obtain a current token.

    Two identities are equal when they refer to the same user, whatever
    token supplier they carry.
    """

    def __init__(self, user_id: str, token_supplier: TokenSupplier):
        """Initialize identity.

        Args:
            user_id: Backend user ID
            token_supplier: Async callable returning a fresh token, or None
        """
        self.user_id = user_id
        self._token_supplier = token_supplier

    @classmethod
    def from_token(cls, token: str, token_supplier: TokenSupplier | None = None) -> "Identity":
        """Build an identity from an access token's ``sub`` claim.

        Args:
            token: Encoded JWT
            token_supplier: Supplier for later tokens; defaults to returning
                the given token

        Raises:
            ValueError: If the token carries no subject
        """
        claims = decode_claims(token)
        user_id = claims.get("sub")
        if not user_id:
            raise ValueError("Token has no subject claim")

        if token_supplier is None:

            async def token_supplier() -> str | None:
                return token

        return cls(user_id=str(user_id), token_supplier=token_supplier)

    async def get_token(self) -> str | None:
        """Obtain a current access token from the identity provider."""
        return await self._token_supplier()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Identity):
            return NotImplemented
        return self.user_id == other.user_id

    def __hash__(self) -> int:
        return hash(self.user_id)

    def __repr__(self) -> str:
        return f"Identity(user_id={self.user_id})"

"""Authentication helpers."""

from artemis_client.auth.identity import Identity, TokenSupplier, decode_claims

__all__ = ["Identity", "TokenSupplier", "decode_claims"]

"""Client-local persistence."""

from artemis_client.storage.local_storage import LocalStorage

__all__ = ["LocalStorage"]

#!/usr/bin/env python
"""Script to watch live notifications from a terminal.

Reads ``ARTEMIS_*`` settings from the environment, signs in with the token
in ``ARTEMIS_TOKEN`` and prints notifications as they arrive.
"""

import asyncio
import os
import sys

import structlog

from artemis_client.auth import Identity
from artemis_client.client import ArtemisClient
from artemis_client.exceptions import ConfigurationError
from artemis_client.logging import setup_logging
from artemis_client.notifications import NotificationStore

logger = structlog.get_logger(__name__)

TOKEN_ENV = "ARTEMIS_TOKEN"


def _print_notifications(store: NotificationStore, seen: set[str]) -> None:
    for notification in reversed(store.notifications):
        if notification.id in seen:
            continue
        seen.add(notification.id)
        marker = " " if notification.read else "*"
        print(f"{marker} [{notification.type.value}] {notification.title}: {notification.message}")


async def watch(client: ArtemisClient, token: str) -> None:
    """Connect as the token's user and print notifications until cancelled."""
    seen: set[str] = set()
    last_count: list[int | None] = [None]

    def on_change(store: NotificationStore) -> None:
        _print_notifications(store, seen)
        if store.unread_count != last_count[0]:
            last_count[0] = store.unread_count
            print(f"-- unread: {store.unread_count} (live: {'yes' if store.connected else 'no'})")

    client.notifications.add_listener(on_change)
    await client.set_identity(Identity.from_token(token))
    await client.notifications.fetch_initial()

    try:
        await asyncio.Event().wait()
    finally:
        await client.set_identity(None)


def main() -> int:
    """Run the notification watcher.

    Returns:
        Process exit code
    """
    setup_logging()

    try:
        client = ArtemisClient.from_environment()
    except ConfigurationError as e:
        logger.error("Cannot start without required configuration", error=str(e))
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    token = os.getenv(TOKEN_ENV)
    if not token:
        print(f"{TOKEN_ENV} must be set to an access token", file=sys.stderr)
        return 1

    try:
        asyncio.run(watch(client, token))
    except KeyboardInterrupt:
        logger.info("Notification watcher stopped")
    return 0


if __name__ == "__main__":
    sys.exit(main())

"""Tests for NotificationStore."""

import asyncio
from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock, Mock

import pytest

from artemis_client.constants import EVENT_MARK_ALL_READ, EVENT_MARK_READ
from artemis_client.exceptions import ApiNetworkError, ApiServerError
from artemis_client.notifications import NotificationStore
from artemis_client.schemas.notification import Notification, NotificationPage
from artemis_client.services.notification_api import NotificationApi
from artemis_client.sound import SoundEngine
from tests.factories import notification_page_payload, notification_payload

pytestmark = pytest.mark.anyio


def make_notifications(count: int, read: bool = False) -> list[dict]:
    """Payloads ordered newest first."""
    now = datetime.now(UTC)
    return [
        notification_payload(read=read, created_at=now - timedelta(minutes=i))
        for i in range(count)
    ]


def make_page(items: list[dict], page: int = 1, total_pages: int = 1) -> NotificationPage:
    return NotificationPage.model_validate(
        notification_page_payload(items, page=page, total_pages=total_pages)
    )


class FakeChannel:
    """Stand-in for the real-time channel manager."""

    def __init__(self, connected: bool = True, fail: bool = False):
        self.connected = connected
        self.fail = fail
        self.emitted = []

    async def emit(self, event, data=None):
        if self.fail:
            raise ConnectionError("socket closed")
        self.emitted.append((event, data))


@pytest.fixture
def api():
    api = AsyncMock(spec=NotificationApi)
    api.unread_count.return_value = 0
    return api


@pytest.fixture
def sink():
    return Mock()


@pytest.fixture
def sound(sink):
    engine = SoundEngine(sink=sink)
    engine.mark_interacted()
    return engine


@pytest.fixture
def store(api, sound):
    return NotificationStore(api, sound=sound)


async def load(store, api, items, unread, total_pages=1):
    api.list_page.return_value = make_page(items, total_pages=total_pages)
    api.unread_count.return_value = unread
    await store.fetch_initial()


class TestFetching:
    """Tests for initial load and pagination."""

    async def test_fetch_initial_replaces_list_and_count(self, store, api):
        """Test the first page replaces the list and the unread count is fetched."""
        store.receive_push(notification_payload())
        items = make_notifications(3)

        await load(store, api, items, unread=12, total_pages=2)

        assert [n.id for n in store.notifications] == [i["_id"] for i in items]
        assert store.unread_count == 12
        assert store.has_more is True
        assert store.page == 1
        assert store.loading is False
        api.list_page.assert_awaited_once_with(page=1, limit=20)

    async def test_fetch_initial_failure_keeps_state(self, store, api):
        store.receive_push(notification_payload())
        api.list_page.side_effect = ApiNetworkError("offline")

        await store.fetch_initial()

        assert len(store.notifications) == 1
        assert store.loading is False

    async def test_load_more_appends_older_page(self, store, api):
        first = make_notifications(2)
        await load(store, api, first, unread=2, total_pages=2)
        older = make_notifications(2, read=True)
        api.list_page.return_value = make_page(older, page=2, total_pages=2)

        await store.load_more()

        assert [n.id for n in store.notifications] == [
            i["_id"] for i in first + older
        ]
        assert store.page == 2
        assert store.has_more is False
        api.list_page.assert_awaited_with(page=2, limit=20)

    async def test_load_more_noop_without_more_pages(self, store, api):
        await load(store, api, make_notifications(1), unread=1, total_pages=1)
        api.list_page.reset_mock()

        await store.load_more()

        api.list_page.assert_not_awaited()

    async def test_load_more_noop_while_loading(self, store, api):
        store.loading = True

        await store.load_more()

        api.list_page.assert_not_awaited()

    async def test_load_more_failure_keeps_cursor(self, store, api):
        await load(store, api, make_notifications(2), unread=0, total_pages=3)
        api.list_page.side_effect = ApiServerError(503)

        await store.load_more()

        assert store.page == 1
        assert store.has_more is True
        assert store.loading is False


class TestPush:
    """Tests for notifications pushed over the channel."""

    async def test_pushes_stay_newest_first(self, store, api):
        """Test every push is prepended and counted once."""
        initial = make_notifications(3)
        await load(store, api, initial, unread=3)

        pushed = [notification_payload() for _ in range(5)]
        for payload in pushed:
            store.receive_push(payload)

        ids = [n.id for n in store.notifications]
        assert ids[:5] == [p["_id"] for p in reversed(pushed)]
        assert ids[5:] == [i["_id"] for i in initial]
        assert len(store.notifications) == len(initial) + len(pushed)
        assert store.unread_count == 3 + 5

    def test_accepts_notification_instances(self, store):
        store.receive_push(Notification.model_validate(notification_payload()))

        assert store.unread_count == 1

    def test_malformed_push_is_discarded(self, store):
        store.receive_push({"title": "missing everything"})

        assert store.notifications == []
        assert store.unread_count == 0

    def test_push_plays_chime(self, store, sink):
        store.receive_push(notification_payload())

        sink.assert_called_once()

    def test_push_reads_current_sound_preference(self, store, sink):
        """Test a toggle made after wiring is honored by the next push."""
        store.toggle_sound()
        store.receive_push(notification_payload())
        sink.assert_not_called()

        store.toggle_sound()
        store.receive_push(notification_payload())
        sink.assert_called_once()

    def test_push_without_sound_engine(self, api):
        store = NotificationStore(api)

        store.receive_push(notification_payload())

        assert store.unread_count == 1
        assert store.sound_enabled is False
        assert store.toggle_sound() is False


class TestUnreadCount:
    """Tests for unread count bookkeeping."""

    def test_set_unread_count_floors_at_zero(self, store):
        store.set_unread_count(-4)

        assert store.unread_count == 0

    async def test_refresh_unread_count(self, store, api):
        api.unread_count.return_value = 9

        await store.refresh_unread_count()

        assert store.unread_count == 9

    async def test_refresh_failure_keeps_count(self, store, api):
        store.set_unread_count(4)
        api.unread_count.side_effect = ApiNetworkError("offline")

        await store.refresh_unread_count()

        assert store.unread_count == 4

    async def test_count_never_negative(self, store, api):
        """Test reads and deletes of unknown or already-read items keep the count >= 0."""
        await load(store, api, make_notifications(2) + make_notifications(2, read=True), unread=1)
        ids = [n.id for n in store.notifications]

        for notification_id in ids + ["unknown-1", "unknown-2"]:
            await store.mark_read(notification_id)
            assert store.unread_count >= 0
        for notification_id in ids + ["unknown-3"]:
            await store.delete(notification_id)
            assert store.unread_count >= 0

        assert store.unread_count == 0


class TestMarkRead:
    """Tests for marking one notification read."""

    async def test_mark_read_over_rest_when_offline(self, store, api):
        items = make_notifications(2)
        await load(store, api, items, unread=2)

        await store.mark_read(items[0]["_id"])

        assert store.notifications[0].read is True
        assert store.notifications[0].read_at is not None
        assert store.unread_count == 1
        api.mark_read.assert_awaited_once_with(items[0]["_id"])

    async def test_mark_read_over_channel_when_connected(self, store, api):
        channel = FakeChannel()
        store.attach_channel(channel)
        items = make_notifications(1)
        await load(store, api, items, unread=1)

        await store.mark_read(items[0]["_id"])

        assert channel.emitted == [(EVENT_MARK_READ, {"notificationId": items[0]["_id"]})]
        api.mark_read.assert_not_awaited()

    async def test_already_read_item_does_not_decrement(self, store, api):
        items = make_notifications(1, read=True)
        await load(store, api, items, unread=3)

        await store.mark_read(items[0]["_id"])

        assert store.unread_count == 3

    async def test_failure_keeps_change_and_resyncs_count(self, store, api):
        """Test a failed mark-read is not rolled back but the count is resynced."""
        items = make_notifications(2)
        await load(store, api, items, unread=2)
        api.mark_read.side_effect = ApiServerError(500)
        api.unread_count.return_value = 2

        await store.mark_read(items[0]["_id"])

        assert store.notifications[0].read is True
        assert store.unread_count == 2
        assert api.unread_count.await_count == 2

    async def test_channel_failure_resyncs_count(self, store, api):
        store.attach_channel(FakeChannel(fail=True))
        items = make_notifications(1)
        await load(store, api, items, unread=1)
        api.unread_count.return_value = 1

        await store.mark_read(items[0]["_id"])

        assert store.unread_count == 1


class TestMarkAllRead:
    """Tests for marking everything read."""

    async def test_marks_everything_read(self, store, api):
        await load(store, api, make_notifications(3), unread=10)

        await store.mark_all_read()

        assert all(n.read for n in store.notifications)
        assert store.unread_count == 0
        api.mark_all_read.assert_awaited_once()

    async def test_uses_channel_when_connected(self, store, api):
        channel = FakeChannel()
        store.attach_channel(channel)
        await load(store, api, make_notifications(1), unread=1)

        await store.mark_all_read()

        assert channel.emitted == [(EVENT_MARK_ALL_READ, None)]
        api.mark_all_read.assert_not_awaited()

    async def test_failure_restores_exact_snapshot(self, store, api):
        """Test the list and the count are restored to their pre-call values."""
        await load(store, api, make_notifications(2) + make_notifications(1, read=True), unread=5)
        before_notifications = list(store.notifications)
        before_count = store.unread_count
        api.mark_all_read.side_effect = ApiNetworkError("offline")

        await store.mark_all_read()

        assert store.notifications == before_notifications
        assert store.unread_count == before_count


class TestDelete:
    """Tests for deleting a notification."""

    async def test_delete_unread_decrements(self, store, api):
        items = make_notifications(2)
        await load(store, api, items, unread=2)

        await store.delete(items[1]["_id"])

        assert [n.id for n in store.notifications] == [items[0]["_id"]]
        assert store.unread_count == 1
        api.delete.assert_awaited_once_with(items[1]["_id"])

    async def test_delete_read_keeps_count(self, store, api):
        items = make_notifications(1, read=True)
        await load(store, api, items, unread=4)

        await store.delete(items[0]["_id"])

        assert store.unread_count == 4

    async def test_failure_keeps_item_removed_and_resyncs(self, store, api):
        items = make_notifications(2)
        await load(store, api, items, unread=2)
        api.delete.side_effect = ApiServerError(500)
        api.unread_count.return_value = 2

        await store.delete(items[0]["_id"])

        assert [n.id for n in store.notifications] == [items[1]["_id"]]
        assert store.unread_count == 2


class TestClearAndListeners:
    """Tests for logout clearing and change notification."""

    async def test_clear(self, store, api):
        await load(store, api, make_notifications(3), unread=3, total_pages=4)

        store.clear()

        assert store.notifications == []
        assert store.unread_count == 0
        assert store.has_more is True
        assert store.page == 1

    def test_listeners_are_notified(self, store):
        listener = Mock()
        store.add_listener(listener)

        store.receive_push(notification_payload())

        listener.assert_called_with(store)

    def test_failing_listener_does_not_break_store(self, store):
        store.add_listener(Mock(side_effect=RuntimeError("boom")))

        store.receive_push(notification_payload())

        assert store.unread_count == 1

    def test_removed_listener_is_not_called(self, store):
        listener = Mock()
        store.add_listener(listener)
        store.remove_listener(listener)

        store.set_unread_count(3)

        listener.assert_not_called()


class TestResultsAfterClear:
    """Tests for requests that finish after the store was cleared."""

    @pytest.fixture
    def release(self):
        return asyncio.Event()

    async def test_initial_page_is_dropped(self, store, api, release):
        """Test a page fetched for the previous user never reaches the cleared store."""
        items = make_notifications(3)

        async def slow_page(page, limit):
            await release.wait()
            return make_page(items)

        api.list_page.side_effect = slow_page
        api.unread_count.return_value = 3
        fetch = asyncio.ensure_future(store.fetch_initial())
        await asyncio.sleep(0)

        store.clear()
        release.set()
        await fetch

        assert store.notifications == []
        assert store.unread_count == 0
        assert store.loading is False
        api.unread_count.assert_not_awaited()

    async def test_older_page_is_dropped(self, store, api, release):
        await load(store, api, make_notifications(2), unread=2, total_pages=3)

        async def slow_page(page, limit):
            await release.wait()
            return make_page(make_notifications(2), page=page, total_pages=3)

        api.list_page.side_effect = slow_page
        more = asyncio.ensure_future(store.load_more())
        await asyncio.sleep(0)

        store.clear()
        release.set()
        await more

        assert store.notifications == []
        assert store.page == 1
        assert store.loading is False

    async def test_unread_count_is_dropped(self, store, api, release):
        async def slow_count():
            await release.wait()
            return 9

        api.unread_count.side_effect = slow_count
        refresh = asyncio.ensure_future(store.refresh_unread_count())
        await asyncio.sleep(0)

        store.clear()
        release.set()
        await refresh

        assert store.unread_count == 0

    async def test_mark_all_read_rollback_is_dropped(self, store, api, release):
        await load(store, api, make_notifications(2), unread=2)

        async def failing_mark_all():
            await release.wait()
            raise ApiNetworkError("offline")

        api.mark_all_read.side_effect = failing_mark_all
        action = asyncio.ensure_future(store.mark_all_read())
        await asyncio.sleep(0)

        store.clear()
        release.set()
        await action

        assert store.notifications == []
        assert store.unread_count == 0

    async def test_results_after_clear_apply_normally(self, store, api):
        items = make_notifications(1)
        store.clear()

        await load(store, api, items, unread=1)

        assert [n.id for n in store.notifications] == [items[0]["_id"]]
        assert store.unread_count == 1

"""Summary: Tests for the change feed and realtime resync of the messaging service.

Importance: Ensures remote changes refresh exactly the viewers they concern.
Alternatives: Poll the store on a timer.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from pathlib import Path

from growthpro.models import ChangeEvent, Participant, Viewer
from growthpro.realtime import ChangeFeed
from growthpro.services import MessagingService
from growthpro.storage.sqlite_store import SqliteStore


class TickingClock:
    """Clock that advances one second per call so timestamps are strictly ordered."""

    def __init__(self) -> None:
        self.current = datetime(2026, 3, 2, 9, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        self.current += timedelta(seconds=1)
        return self.current


def _build_store(tmp_path: Path) -> SqliteStore:
    store = SqliteStore(str(tmp_path / "test.db"), clock=TickingClock())
    store.initialize()
    store.upsert_profile(Participant("admin-1", "Ada Admin", "ada@growthpro.com", "admin"))
    store.upsert_profile(Participant("client-1", "Carl Client", "carl@example.com", "client"))
    store.upsert_profile(Participant("client-2", "Cora Client", "cora@example.com", "client"))
    return store


def test_feed_matches_any_filter_column() -> None:
    """Summary: Verify subscriptions match when any listed column equals the value.

    Importance: A viewer must hear about messages they sent and received.
    Alternatives: Subscribe separately per column.
    """

    feed = ChangeFeed()
    received: list[ChangeEvent] = []
    feed.subscribe("messages:client-1", "messages", ("sender_id", "receiver_id"), "client-1", received.append)
    feed.publish(ChangeEvent("INSERT", "messages", new={"sender_id": "client-1", "receiver_id": "admin-1"}))
    feed.publish(ChangeEvent("UPDATE", "messages", new={"sender_id": "admin-1", "receiver_id": "client-1"}))
    feed.publish(ChangeEvent("INSERT", "messages", new={"sender_id": "admin-1", "receiver_id": "client-2"}))
    feed.publish(ChangeEvent("INSERT", "message_recipients", new={"recipient_id": "client-1"}))
    assert [event.event_type for event in received] == ["INSERT", "UPDATE"]


def test_failing_callback_does_not_block_others() -> None:
    """Summary: Ensure one failing listener does not stop delivery.

    Importance: A broken subscriber must not starve other viewers.
    Alternatives: Propagate the first callback error.
    """

    feed = ChangeFeed()
    received: list[ChangeEvent] = []

    def broken(_: ChangeEvent) -> None:
        raise RuntimeError("listener crashed")

    feed.subscribe("a", "messages", ("receiver_id",), "client-1", broken)
    feed.subscribe("b", "messages", ("receiver_id",), "client-1", received.append)
    delivered = feed.publish(ChangeEvent("INSERT", "messages", new={"receiver_id": "client-1"}))
    assert delivered == 1
    assert len(received) == 1


def test_remove_channel_drops_its_subscriptions() -> None:
    """Summary: Verify removing a channel unsubscribes every listener on it.

    Importance: Closing a view must stop its refreshes.
    Alternatives: Track subscriptions individually.
    """

    feed = ChangeFeed()
    feed.subscribe("messages:client-1", "messages", ("receiver_id",), "client-1", lambda _: None)
    feed.subscribe("messages:client-1", "message_recipients", ("recipient_id",), "client-1", lambda _: None)
    feed.subscribe("messages:client-2", "messages", ("receiver_id",), "client-2", lambda _: None)
    assert feed.remove_channel("messages:client-1") == 2
    assert feed.subscription_count() == 1
    assert feed.subscription_count("messages:client-2") == 1


def test_incoming_message_triggers_full_refresh(tmp_path: Path) -> None:
    """Summary: Verify an insert addressed to the viewer refreshes state and notifies.

    Importance: Clients see new staff replies without reloading.
    Alternatives: Merge the pushed row into local state.
    """

    store = _build_store(tmp_path)
    service = MessagingService(store, Viewer("client-1"))
    with service:
        assert service.listening
        assert service.state.messages == []
        store.insert_message("admin-1", "client-1", "Hello", "Welcome")
        assert [message.subject for message in service.state.messages] == ["Hello"]
        assert len(service.state.threads) == 1
        assert service.notifier.latest().text == "New message received!"
    assert not service.listening
    assert store.changes.subscription_count() == 0


def test_broadcast_fan_out_reaches_recipient(tmp_path: Path) -> None:
    """Summary: Verify a broadcast fan-out row refreshes its recipient only.

    Importance: Broadcasts reach clients through their recipient rows.
    Alternatives: Refresh every listener on every broadcast.
    """

    store = _build_store(tmp_path)
    recipient = MessagingService(store, Viewer("client-1"))
    bystander = MessagingService(store, Viewer("client-2"))
    recipient.start()
    bystander.start()
    store.insert_broadcast("admin-1", ["client-1"], "News", "Update")
    assert [message.subject for message in recipient.state.messages] == ["News"]
    assert bystander.state.messages == []
    assert bystander.notifier.latest() is None
    recipient.stop()
    bystander.stop()


def test_updates_refresh_without_new_message_notice(tmp_path: Path) -> None:
    """Summary: Ensure read updates resync without a new-message notice.

    Importance: Notices are reserved for incoming messages.
    Alternatives: Notify on every change.
    """

    store = _build_store(tmp_path)
    message = store.insert_message("admin-1", "client-1", "Hello", "Welcome")
    sender = MessagingService(store, Viewer("admin-1", "admin"))
    sender.start()
    store.mark_read(message.id, "client-1", store.now())
    assert sender.state.messages[0].is_read
    assert sender.notifier.latest() is None
    sender.stop()


def test_switch_viewer_resubscribes(tmp_path: Path) -> None:
    """Summary: Verify switching viewers drops old state and listens for the new viewer.

    Importance: Signing in as someone else must not leak the previous inbox.
    Alternatives: Build a new service for every sign-in.
    """

    store = _build_store(tmp_path)
    store.insert_message("admin-1", "client-1", "For Carl", "Body")
    service = MessagingService(store, Viewer("client-1"))
    service.start()
    first_channel = service.channel
    assert len(service.state.messages) == 1
    service.switch_viewer(Viewer("client-2"))
    assert service.listening
    assert service.state.messages == []
    assert service.channel.startswith("messages:client-2:")
    assert store.changes.subscription_count(first_channel) == 0
    assert store.changes.subscription_count(service.channel) == 2
    store.insert_message("admin-1", "client-2", "For Cora", "Body")
    assert [message.subject for message in service.state.messages] == ["For Cora"]
    service.stop()


def test_removing_one_channel_keeps_other_services_for_viewer(tmp_path: Path) -> None:
    """Summary: Verify two services for one viewer listen on separate channels.

    Importance: Tearing down one session must not silence another open for the same person.
    Alternatives: Share one channel per viewer and reference-count it.
    """

    store = _build_store(tmp_path)
    closed = MessagingService(store, Viewer("client-1"))
    still_open = MessagingService(store, Viewer("client-1"))
    closed.start()
    still_open.start()
    assert closed.channel != still_open.channel
    assert store.changes.remove_channel(closed.channel) == 2
    assert store.changes.subscription_count(still_open.channel) == 2
    store.insert_message("admin-1", "client-1", "Hello", "Welcome")
    assert [message.subject for message in still_open.state.messages] == ["Hello"]
    assert closed.state.messages == []
    still_open.stop()

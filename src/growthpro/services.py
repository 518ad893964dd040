"""Summary: Messaging service acting as the repository for one viewer.

Importance: Single source of truth for message data, threads, stats, quota, and realtime resync.
Alternatives: Query the store directly from each entrypoint.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Callable

from growthpro.errors import (
    MessagingError,
    NotAuthorized,
    RateLimitExceeded,
    StoreError,
    ValidationError,
)
from growthpro.models import (
    ChangeEvent,
    ConversationSummary,
    Message,
    MessageStats,
    MessageThread,
    RateLimitInfo,
    SendMessageRequest,
    Viewer,
)
from growthpro.notifications import Notifier
from growthpro.rate_limit import (
    HOURLY_MESSAGE_LIMIT,
    RateLimitReader,
    compute_remaining,
    rate_limit_message,
)
from growthpro.realtime import Subscription
from growthpro.storage.sqlite_store import SqliteStore, new_id
from growthpro.threads import assemble_threads, build_participant_thread, summarize_conversations
from growthpro.validation import validate_send_request

logger = logging.getLogger(__name__)

RECENT_MESSAGES = 5


@dataclass
class MessagingState:
    """Summary: Last-known messaging data for a viewer.

    Importance: Failed reads leave these values untouched instead of clearing them.
    Alternatives: Return fresh values from every call and keep no state.
    """

    status: str = "idle"
    error: str | None = None
    messages: list[Message] = field(default_factory=list)
    threads: list[MessageThread] = field(default_factory=list)
    conversations: list[ConversationSummary] = field(default_factory=list)
    current_thread: MessageThread | None = None
    stats: MessageStats = field(default_factory=MessageStats)
    rate_limit: RateLimitInfo | None = None


class MessagingService:
    """Summary: Fetches, sends, and marks messages for an explicit viewer.

    Importance: Reads catch and log; writes notify and re-raise; stale fetches are discarded.
    Alternatives: Separate services for admin and client viewers.
    """

    def __init__(
        self,
        store: SqliteStore,
        viewer: Viewer,
        notifier: Notifier | None = None,
        hourly_limit: int = HOURLY_MESSAGE_LIMIT,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.store = store
        self.viewer = viewer
        self.notifier = notifier or Notifier()
        self.hourly_limit = hourly_limit
        self._clock = clock or store.now
        self.rate_limits = RateLimitReader(store, hourly_limit, self._clock)
        self.state = MessagingState()
        self.busy = False
        self._generations: dict[str, int] = {}
        self._subscriptions: list[Subscription] = []
        self.channel: str | None = None

    def fetch_messages(self) -> list[Message]:
        """Summary: Load the viewer's messages, merging broadcast fan-out for clients.

        Importance: Feeds lists and badges; a failure keeps the previous list.
        Alternatives: Page through messages lazily.
        """

        token = self._begin("messages")
        self.state.status = "loading"
        self.state.error = None
        try:
            messages = self._load_messages()
        except StoreError as exc:
            logger.exception("Error fetching messages for %s.", self.viewer.id)
            if self._is_current("messages", token):
                self.state.error = str(exc) or "Failed to fetch messages"
                self.state.status = "error"
            return self.state.messages
        if not self._is_current("messages", token):
            logger.info("Discarded stale message list for %s.", self.viewer.id)
            return self.state.messages
        self.state.messages = messages
        self.state.status = "ready"
        self.fetch_stats()
        return messages

    def fetch_threads(self) -> list[MessageThread]:
        """Summary: Rebuild threads from a fresh read of the viewer's messages.

        Importance: Threads are derived, never persisted, so every fetch reassembles them.
        Alternatives: Update threads incrementally from change events.
        """

        token = self._begin("threads")
        try:
            messages = self._load_messages()
        except StoreError:
            logger.exception("Error fetching threads for %s.", self.viewer.id)
            return self.state.threads
        if not self._is_current("threads", token):
            logger.info("Discarded stale thread list for %s.", self.viewer.id)
            return self.state.threads
        threads = assemble_threads(messages, self.viewer.id)
        self.state.threads = threads
        current = self.state.current_thread
        if current is not None:
            for thread in threads:
                if thread.id == current.id:
                    self.state.current_thread = thread
                    break
        return threads

    def fetch_conversations(self) -> list[ConversationSummary]:
        """Summary: Load one summary per counterpart for admin viewers.

        Importance: Uses the server aggregation and falls back to reducing direct messages.
        Alternatives: Hide the conversation list when the aggregation is unavailable.
        """

        if not self.viewer.is_admin:
            return []
        token = self._begin("conversations")
        try:
            try:
                summaries = self.store.conversation_summaries(self.viewer.id)
            except StoreError as exc:
                logger.warning("Conversation summaries unavailable (%s); using message fallback.", exc)
                summaries = summarize_conversations(
                    self.store.list_direct_messages_for(self.viewer.id), self.viewer.id
                )
        except StoreError:
            logger.exception("Error fetching conversations for %s.", self.viewer.id)
            return self.state.conversations
        if not self._is_current("conversations", token):
            logger.info("Discarded stale conversation list for %s.", self.viewer.id)
            return self.state.conversations
        self.state.conversations = summaries
        self.state.stats = replace(self.state.stats, conversations=len(summaries))
        return summaries

    def fetch_stats(self) -> MessageStats:
        """Summary: Count total, unread, sent messages and threads.

        Importance: Admins count across the whole inbox; clients count their own rows.
        Alternatives: Derive counts from the loaded message list.
        """

        token = self._begin("stats")
        viewer_scope = None if self.viewer.is_admin else self.viewer.id
        try:
            total = self.store.count_messages(viewer_scope)
            unread = self.store.count_unread(viewer_scope)
            sent = self.store.count_sent(self.viewer.id)
            threads = self.store.count_threads(viewer_scope)
        except StoreError:
            logger.exception("Error fetching stats for %s.", self.viewer.id)
            return self.state.stats
        if not self._is_current("stats", token):
            return self.state.stats
        conversations = len(self.state.conversations) if self.viewer.is_admin else threads
        self.state.stats = MessageStats(
            total=total,
            unread=unread,
            sent=sent,
            threads=threads,
            conversations=conversations,
            recent=self.state.messages[:RECENT_MESSAGES],
        )
        return self.state.stats

    def fetch_rate_limit(self) -> RateLimitInfo | None:
        token = self._begin("rate_limit")
        try:
            info = self.rate_limits.read(self.viewer.id)
        except StoreError:
            logger.exception("Error fetching rate limit for %s.", self.viewer.id)
            return self.state.rate_limit
        if self._is_current("rate_limit", token):
            self.state.rate_limit = info
        return self.state.rate_limit

    def send_message(self, request: SendMessageRequest) -> list[Message]:
        """Summary: Send a direct or broadcast message and resync.

        Importance: Direct sends create one row per recipient and broadcasts one row plus fan-out,
        each as a single atomic store call.
        Alternatives: Insert rows one by one from the caller.
        """

        errors = validate_send_request(request, self.viewer)
        if errors:
            raise ValidationError(errors)
        if request.message_type == "broadcast" and not self.viewer.is_admin:
            self._fail("Only staff members can send broadcasts")
            raise NotAuthorized("Only staff members can send broadcasts")
        self._check_cached_quota()

        targets = request.targets()
        self.busy = True
        try:
            if request.message_type == "broadcast":
                message, recipients = self.store.insert_broadcast(
                    self.viewer.id,
                    targets,
                    request.subject,
                    request.content,
                    priority=request.priority,
                )
                sent = [message]
                logger.info("Broadcast %s sent to %s recipients.", message.id, len(recipients))
            else:
                sent = self.store.insert_direct_messages(
                    self.viewer.id,
                    targets,
                    request.subject,
                    request.content,
                    priority=request.priority,
                    thread_id=request.thread_id,
                )
                logger.info("Sent %s direct messages from %s.", len(sent), self.viewer.id)
        except RateLimitExceeded as exc:
            text = rate_limit_message(exc.info, self._clock()) if exc.info else str(exc)
            self._fail(text)
            raise RateLimitExceeded(text, exc.info) from exc
        except MessagingError as exc:
            self._fail(str(exc) or "Failed to send message")
            raise
        finally:
            self.busy = False

        self.notifier.success("Message sent successfully!")
        self.refresh()
        return sent

    def mark_as_read(self, message_id: str) -> bool:
        """Summary: Mark one message read for the viewer and resync.

        Importance: Repeated calls leave the first read time in place.
        Alternatives: Mark read on the server when the message is fetched.
        """

        changed = self._mark_read(message_id)
        self.fetch_messages()
        self.fetch_threads()
        return changed

    def get_thread(self, participant_id: str) -> MessageThread | None:
        """Summary: Load the conversation with one counterpart and make it current.

        Importance: Backs the admin thread view.
        Alternatives: Filter the cached message list.
        """

        token = self._begin("current_thread")
        try:
            messages = self.store.list_between(self.viewer.id, participant_id)
        except StoreError:
            logger.exception("Error fetching thread with %s.", participant_id)
            return None
        thread = build_participant_thread(messages, self.viewer.id, participant_id)
        if thread is not None and self._is_current("current_thread", token):
            self.state.current_thread = thread
        return thread

    def open_thread(self, thread_id: str) -> MessageThread | None:
        """Summary: Make a thread current and mark the viewer's unread messages in it read.

        Importance: Opening a conversation clears its unread badge.
        Alternatives: Require an explicit mark-read action per message.
        """

        thread = next((item for item in self.state.threads if item.id == thread_id), None)
        if thread is None:
            return None
        self.state.current_thread = thread
        unread = [
            message
            for message in thread.messages
            if message.receiver_id == self.viewer.id and not message.is_read
        ]
        if not unread:
            return thread
        for message in unread:
            self._mark_read(message.id)
        self.fetch_messages()
        self.fetch_threads()
        return self.state.current_thread

    def refresh(self) -> None:
        self.fetch_messages()
        self.fetch_threads()
        self.fetch_conversations()
        self.fetch_rate_limit()

    def start(self) -> None:
        """Summary: Subscribe to changes touching the viewer and load initial data.

        Importance: Every remote change triggers a full resync.
        Alternatives: Merge the pushed row into local state by id.
        """

        if self._subscriptions:
            return
        feed = self.store.changes
        # Unique per service instance; several services may watch the same viewer.
        channel = self.channel = f"messages:{self.viewer.id}:{new_id()[:8]}"
        self._subscriptions = [
            feed.subscribe(
                channel, "messages", ("sender_id", "receiver_id"), self.viewer.id, self._on_change
            ),
            feed.subscribe(
                channel, "message_recipients", ("recipient_id",), self.viewer.id, self._on_change
            ),
        ]
        self.refresh()

    def stop(self) -> None:
        for subscription in self._subscriptions:
            subscription.unsubscribe()
        self._subscriptions = []

    def switch_viewer(self, viewer: Viewer) -> None:
        """Summary: Re-scope the service to another viewer.

        Importance: Drops state and in-flight results of the previous viewer and re-subscribes.
        Alternatives: Build a new service per viewer.
        """

        was_listening = bool(self._subscriptions)
        self.stop()
        for kind in self._generations:
            self._generations[kind] += 1
        self.viewer = viewer
        self.state = MessagingState()
        if was_listening:
            self.start()

    @property
    def listening(self) -> bool:
        return bool(self._subscriptions)

    def __enter__(self) -> "MessagingService":
        self.start()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stop()

    def _on_change(self, event: ChangeEvent) -> None:
        logger.info("Realtime %s on %s for %s.", event.event_type, event.table, self.viewer.id)
        self.refresh()
        addressed_to_viewer = self.viewer.id in (
            event.new.get("receiver_id"),
            event.new.get("recipient_id"),
        )
        if event.event_type == "INSERT" and addressed_to_viewer:
            self.notifier.success("New message received!")

    def _load_messages(self) -> list[Message]:
        if self.viewer.is_admin:
            return self.store.list_all_messages()
        own = self.store.list_messages_for(self.viewer.id)
        broadcasts = self.store.list_broadcasts_for(self.viewer.id)
        seen = {message.id for message in own}
        merged = own + [message for message in broadcasts if message.id not in seen]
        merged.sort(key=lambda message: (message.created_at, message.id), reverse=True)
        return merged

    def _mark_read(self, message_id: str) -> bool:
        try:
            changed = self.store.mark_read(message_id, self.viewer.id, self._clock())
        except StoreError as exc:
            self._fail(f"Failed to mark message as read: {exc}")
            raise
        if changed:
            logger.info("Marked message %s read for %s.", message_id, self.viewer.id)
        return changed

    def _check_cached_quota(self) -> None:
        info = self.state.rate_limit
        if info is None or self.viewer.is_admin:
            return
        now = self._clock()
        remaining = compute_remaining(info.message_count, info.reset_at, self.hourly_limit, now)
        if remaining <= 0:
            text = rate_limit_message(info, now)
            self._fail(text)
            raise RateLimitExceeded(text, info)

    def _fail(self, text: str) -> None:
        self.state.error = text
        self.notifier.error(text)

    def _begin(self, kind: str) -> int:
        self._generations[kind] = self._generations.get(kind, 0) + 1
        return self._generations[kind]

    def _is_current(self, kind: str, token: int) -> bool:
        return self._generations.get(kind) == token

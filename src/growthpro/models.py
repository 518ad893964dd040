"""Summary: Domain model dataclasses for GrowthPro messaging.

Importance: Defines the entities shared by the store, the thread assembler, and services.
Alternatives: Use Pydantic models or ORM classes directly.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

MESSAGE_TYPES = ("direct", "broadcast")
PRIORITIES = ("low", "normal", "high")
READ_STATUSES = ("sent", "delivered", "read")
ADMIN_ROLES = frozenset({"admin", "super_admin"})


@dataclass(frozen=True)
class Participant:
    """Summary: Denormalized summary of a message participant.

    Importance: Lets threads and conversation lists show names without extra lookups.
    Alternatives: Carry only identifiers and resolve names in the UI.
    """

    id: str
    full_name: str
    email: str
    role: str | None = None


@dataclass(frozen=True)
class Viewer:
    """Summary: Identity and role of the user the service acts for.

    Importance: Scopes every query and write to one explicit caller.
    Alternatives: Probe ambient auth contexts at call time.
    """

    id: str
    role: str = "client"

    @property
    def is_admin(self) -> bool:
        return self.role in ADMIN_ROLES


@dataclass(frozen=True)
class Message:
    """Summary: A direct or broadcast message with read state and thread membership.

    Importance: Single schema for both the direct/broadcast and the priority/thread views.
    Alternatives: Keep separate tables for basic and threaded messages.
    """

    id: str
    sender_id: str
    receiver_id: str | None
    subject: str
    content: str
    message_type: str
    priority: str
    read_status: str
    read_at: datetime | None
    thread_id: str
    created_at: datetime
    updated_at: datetime
    sender: Participant | None = None
    receiver: Participant | None = None

    @property
    def is_read(self) -> bool:
        return self.read_status == "read"

    @property
    def is_broadcast(self) -> bool:
        return self.message_type == "broadcast"


@dataclass(frozen=True)
class MessageRecipient:
    """Summary: Per-recipient fan-out row of a broadcast message.

    Importance: Tracks read state for each target of one authored broadcast.
    Alternatives: Copy the broadcast into one direct message per recipient.
    """

    id: str
    message_id: str
    recipient_id: str
    is_read: bool
    read_at: datetime | None
    created_at: datetime


@dataclass(frozen=True)
class MessageThread:
    """Summary: Derived conversation grouping of messages.

    Importance: Gives the UI a chronological view with an unread count per conversation.
    Alternatives: Persist threads as first-class rows.
    """

    id: str
    subject: str
    participants: list[Participant]
    messages: list[Message]
    unread_count: int

    @property
    def last_message(self) -> Message:
        return self.messages[-1]

    def counterpart(self, viewer_id: str) -> Participant | None:
        """Return the first participant that is not the viewer."""

        for participant in self.participants:
            if participant.id != viewer_id:
                return participant
        return None


@dataclass(frozen=True)
class MessageStats:
    """Summary: Aggregate counts for the messaging dashboard.

    Importance: Feeds badges and overview cards.
    Alternatives: Count rows in the UI from the full message list.
    """

    total: int = 0
    unread: int = 0
    sent: int = 0
    threads: int = 0
    conversations: int = 0
    recent: list[Message] = field(default_factory=list)


@dataclass(frozen=True)
class RateLimitInfo:
    """Summary: Remaining hourly send quota derived from the server counter.

    Importance: Lets composers warn before a send the server would reject.
    Alternatives: Enforce quotas only server-side with no client hint.
    """

    message_count: int
    reset_at: datetime
    remaining: int


@dataclass(frozen=True)
class ConversationSummary:
    """Summary: One row per counterpart in the admin conversation list.

    Importance: Supports the admin inbox overview.
    Alternatives: Show the flat message list only.
    """

    participant_id: str
    participant_name: str
    participant_email: str
    participant_role: str | None
    last_message_content: str
    last_message_time: datetime
    unread_count: int = 0


@dataclass(frozen=True)
class SendMessageRequest:
    """Summary: Input for sending a direct or broadcast message.

    Importance: Keeps composer output explicit and validated in one place.
    Alternatives: Pass loose keyword arguments into the service.
    """

    subject: str
    content: str
    message_type: str = "direct"
    receiver_id: str | None = None
    recipient_ids: tuple[str, ...] = ()
    priority: str = "normal"
    thread_id: str | None = None

    def targets(self) -> list[str]:
        """Summary: Return de-duplicated recipient ids in selection order.

        Importance: A direct send creates exactly one row per distinct target.
        Alternatives: Let the store reject duplicates.
        """

        ordered: list[str] = []
        if self.receiver_id:
            ordered.append(self.receiver_id)
        for recipient_id in self.recipient_ids:
            if recipient_id and recipient_id not in ordered:
                ordered.append(recipient_id)
        return ordered


@dataclass(frozen=True)
class ChangeEvent:
    """Summary: Row-level change notification from the store.

    Importance: Drives realtime refresh of subscribed services.
    Alternatives: Poll the store on an interval.
    """

    event_type: str
    table: str
    new: dict[str, Any] = field(default_factory=dict)
    old: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class Notice:
    """A user-facing notice such as a send confirmation or failure."""

    level: str
    text: str
    created_at: datetime

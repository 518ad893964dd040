"""Summary: SQLite storage implementation for GrowthPro messaging.

Importance: Provides the persistent store, the send-quota guard, and change notifications.
Alternatives: Use a hosted Postgres with row-level security and a realtime bus.
"""

from __future__ import annotations

import logging
import sqlite3
import uuid
from contextlib import contextmanager
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Callable, Iterator

from growthpro.errors import RateLimitExceeded, StoreError
from growthpro.models import (
    ADMIN_ROLES,
    ChangeEvent,
    ConversationSummary,
    Message,
    MessageRecipient,
    Participant,
    RateLimitInfo,
)
from growthpro.realtime import ChangeFeed

logger = logging.getLogger(__name__)

RATE_LIMIT_WINDOW = timedelta(hours=1)

_MESSAGE_SELECT = """
    SELECT m.id, m.sender_id, m.receiver_id, m.subject, m.content, m.message_type,
           m.priority, m.read_status, m.read_at, m.thread_id, m.created_at, m.updated_at,
           s.full_name, s.email, s.role, r.full_name, r.email, r.role
    FROM messages m
    LEFT JOIN profiles s ON s.id = m.sender_id
    LEFT JOIN profiles r ON r.id = m.receiver_id
"""

_BROADCAST_SELECT = """
    SELECT m.id, m.sender_id, mr.recipient_id, m.subject, m.content, m.message_type,
           m.priority, CASE WHEN mr.is_read = 1 THEN 'read' ELSE 'sent' END, mr.read_at,
           m.thread_id, m.created_at, m.updated_at,
           s.full_name, s.email, s.role, r.full_name, r.email, r.role
    FROM message_recipients mr
    JOIN messages m ON m.id = mr.message_id
    LEFT JOIN profiles s ON s.id = m.sender_id
    LEFT JOIN profiles r ON r.id = mr.recipient_id
"""


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Summary: Return an aware UTC datetime, reading naive values as UTC.

    Importance: Stored timestamps are aware; comparing them with naive clocks would fail.
    Alternatives: Reject naive datetimes outright.
    """

    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def to_timestamp(value: datetime) -> str:
    """Summary: Serialize a datetime as a sortable UTC ISO string.

    Importance: Lexicographic order of stored timestamps must match chronological order.
    Alternatives: Store epoch integers.
    """

    return as_utc(value).isoformat(timespec="microseconds")


def from_timestamp(value: str | None) -> datetime | None:
    if value is None:
        return None
    return datetime.fromisoformat(value)


def new_id() -> str:
    return str(uuid.uuid4())


class SqliteStore:
    """Summary: SQLite-backed store for profiles, messages, fan-out rows, and send quotas.

    Importance: Owns durability and publishes row changes to subscribers after each commit.
    Alternatives: Talk to a hosted database over HTTP.
    """

    def __init__(
        self,
        db_path: str,
        clock: Callable[[], datetime] | None = None,
        hourly_limit: int = 10,
        conversation_rpc: bool = True,
    ) -> None:
        """Summary: Initialize the store with a database path and quota settings.

        Importance: Allows configurable database location per environment.
        Alternatives: Hardcode a default path in the class.
        """

        self._db_path = Path(db_path)
        self._clock = clock or utcnow
        self.hourly_limit = hourly_limit
        self.conversation_rpc = conversation_rpc
        self.changes = ChangeFeed()

    def now(self) -> datetime:
        return as_utc(self._clock())

    def initialize(self) -> None:
        """Summary: Create tables if they do not exist.

        Importance: Ensures the database is ready before any messaging call.
        Alternatives: Run migrations using a dedicated migration tool.
        """

        with self._connection() as connection:
            cursor = connection.cursor()
            cursor.execute(
                """
                CREATE TABLE IF NOT EXISTS profiles (
                    id TEXT PRIMARY KEY,
                    full_name TEXT NOT NULL,
                    email TEXT NOT NULL,
                    role TEXT NOT NULL DEFAULT 'client',
                    created_at TEXT NOT NULL
                )
                """
            )
            cursor.execute(
                """
                CREATE TABLE IF NOT EXISTS messages (
                    id TEXT PRIMARY KEY,
                    sender_id TEXT NOT NULL,
                    receiver_id TEXT,
                    subject TEXT NOT NULL,
                    content TEXT NOT NULL,
                    message_type TEXT NOT NULL DEFAULT 'direct',
                    priority TEXT NOT NULL DEFAULT 'normal',
                    read_status TEXT NOT NULL DEFAULT 'sent',
                    read_at TEXT,
                    thread_id TEXT NOT NULL,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL,
                    CHECK (message_type != 'direct' OR receiver_id IS NOT NULL)
                )
                """
            )
            cursor.execute(
                """
                CREATE TABLE IF NOT EXISTS message_recipients (
                    id TEXT PRIMARY KEY,
                    message_id TEXT NOT NULL REFERENCES messages(id) ON DELETE CASCADE,
                    recipient_id TEXT NOT NULL,
                    is_read INTEGER NOT NULL DEFAULT 0,
                    read_at TEXT,
                    created_at TEXT NOT NULL,
                    UNIQUE(message_id, recipient_id)
                )
                """
            )
            cursor.execute(
                """
                CREATE TABLE IF NOT EXISTS message_rate_limits (
                    user_id TEXT PRIMARY KEY,
                    message_count INTEGER NOT NULL,
                    reset_at TEXT NOT NULL
                )
                """
            )
            cursor.execute(
                "CREATE INDEX IF NOT EXISTS ix_messages_sender ON messages (sender_id, created_at)"
            )
            cursor.execute(
                "CREATE INDEX IF NOT EXISTS ix_messages_receiver ON messages (receiver_id, created_at)"
            )
            cursor.execute(
                "CREATE INDEX IF NOT EXISTS ix_recipients_recipient ON message_recipients (recipient_id)"
            )
            connection.commit()

    def upsert_profile(self, profile: Participant) -> str:
        """Summary: Create or update a profile and return its ID.

        Importance: Profiles supply names, emails, and roles for message summaries.
        Alternatives: Read identities from an external auth provider.
        """

        with self._connection() as connection:
            connection.execute(
                """
                INSERT INTO profiles (id, full_name, email, role, created_at)
                VALUES (?, ?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    full_name = excluded.full_name,
                    email = excluded.email,
                    role = excluded.role
                """,
                (
                    profile.id,
                    profile.full_name,
                    profile.email,
                    profile.role or "client",
                    to_timestamp(self.now()),
                ),
            )
            connection.commit()
        return profile.id

    def get_profile(self, profile_id: str) -> Participant | None:
        with self._connection() as connection:
            row = connection.execute(
                "SELECT id, full_name, email, role FROM profiles WHERE id = ?", (profile_id,)
            ).fetchone()
        return Participant(*row) if row else None

    def list_profiles(self, role: str | None = None) -> list[Participant]:
        """Summary: List profiles, optionally filtered by role.

        Importance: Powers the recipient picker of the admin composer.
        Alternatives: Query client profiles from a separate table.
        """

        with self._connection() as connection:
            if role is None:
                rows = connection.execute(
                    "SELECT id, full_name, email, role FROM profiles ORDER BY full_name"
                ).fetchall()
            else:
                rows = connection.execute(
                    "SELECT id, full_name, email, role FROM profiles WHERE role = ? ORDER BY full_name",
                    (role,),
                ).fetchall()
        return [Participant(*row) for row in rows]

    def find_support_recipient(self) -> Participant | None:
        """Summary: Pick the admin that receives client messages.

        Importance: Clients write to staff, preferring a super admin and falling back to any admin.
        Alternatives: Let clients choose a staff member explicitly.
        """

        with self._connection() as connection:
            cursor = connection.cursor()
            for roles in (("super_admin",), tuple(sorted(ADMIN_ROLES))):
                placeholders = ", ".join("?" for _ in roles)
                row = cursor.execute(
                    f"""
                    SELECT id, full_name, email, role FROM profiles
                    WHERE role IN ({placeholders})
                    ORDER BY created_at, id
                    LIMIT 1
                    """,
                    roles,
                ).fetchone()
                if row:
                    return Participant(*row)
        return None

    def get_message(self, message_id: str) -> Message | None:
        with self._connection() as connection:
            row = connection.execute(f"{_MESSAGE_SELECT} WHERE m.id = ?", (message_id,)).fetchone()
        return _message_from_row(row) if row else None

    def list_all_messages(self) -> list[Message]:
        """Summary: Retrieve every message, newest first.

        Importance: Admin staff see the whole inbox.
        Alternatives: Scope admin reads to their own rows.
        """

        return self._select_messages(f"{_MESSAGE_SELECT} ORDER BY m.created_at DESC, m.rowid DESC", ())

    def list_messages_for(self, user_id: str) -> list[Message]:
        """Summary: Retrieve messages the user sent or received, newest first.

        Importance: Mirrors the `sender_id = me OR receiver_id = me` row filter.
        Alternatives: Apply the filter in Python after loading all rows.
        """

        return self._select_messages(
            f"""
            {_MESSAGE_SELECT}
            WHERE m.sender_id = ? OR m.receiver_id = ?
            ORDER BY m.created_at DESC, m.rowid DESC
            """,
            (user_id, user_id),
        )

    def list_direct_messages_for(self, user_id: str) -> list[Message]:
        return self._select_messages(
            f"""
            {_MESSAGE_SELECT}
            WHERE m.message_type = 'direct' AND (m.sender_id = ? OR m.receiver_id = ?)
            ORDER BY m.created_at DESC, m.rowid DESC
            """,
            (user_id, user_id),
        )

    def list_broadcasts_for(self, recipient_id: str) -> list[Message]:
        """Summary: Retrieve broadcasts fanned out to a recipient.

        Importance: The recipient is shown as receiver and read state comes from the fan-out row.
        Alternatives: Copy broadcasts into per-recipient message rows.
        """

        return self._select_messages(
            f"""
            {_BROADCAST_SELECT}
            WHERE mr.recipient_id = ?
            ORDER BY m.created_at DESC, m.rowid DESC
            """,
            (recipient_id,),
        )

    def list_between(self, user_id: str, participant_id: str) -> list[Message]:
        """Summary: Retrieve messages exchanged by two users, oldest first.

        Importance: Backs the per-counterpart conversation view.
        Alternatives: Filter the full message list client-side.
        """

        return self._select_messages(
            f"""
            {_MESSAGE_SELECT}
            WHERE (m.sender_id = ? AND m.receiver_id = ?)
               OR (m.sender_id = ? AND m.receiver_id = ?)
            ORDER BY m.created_at ASC, m.rowid ASC
            """,
            (user_id, participant_id, participant_id, user_id),
        )

    def list_recipients(self, message_id: str) -> list[MessageRecipient]:
        with self._connection() as connection:
            rows = connection.execute(
                """
                SELECT id, message_id, recipient_id, is_read, read_at, created_at
                FROM message_recipients
                WHERE message_id = ?
                ORDER BY rowid
                """,
                (message_id,),
            ).fetchall()
        return [
            MessageRecipient(
                id=row[0],
                message_id=row[1],
                recipient_id=row[2],
                is_read=bool(row[3]),
                read_at=from_timestamp(row[4]),
                created_at=from_timestamp(row[5]),
            )
            for row in rows
        ]

    def count_messages(self, user_id: str | None = None) -> int:
        """Summary: Count messages visible to a user, or all when no user is given.

        Importance: Provides the total for dashboards without loading rows.
        Alternatives: Count the loaded message list.
        """

        if user_id is None:
            return self._scalar("SELECT COUNT(*) FROM messages", ())
        return self._scalar(
            """
            SELECT
                (SELECT COUNT(*) FROM messages WHERE sender_id = ? OR receiver_id = ?)
                + (SELECT COUNT(*) FROM message_recipients WHERE recipient_id = ?)
            """,
            (user_id, user_id, user_id),
        )

    def count_unread(self, receiver_id: str | None = None) -> int:
        if receiver_id is None:
            return self._scalar(
                "SELECT COUNT(*) FROM messages WHERE message_type = 'direct' AND read_status != 'read'",
                (),
            )
        return self._scalar(
            """
            SELECT
                (SELECT COUNT(*) FROM messages WHERE receiver_id = ? AND read_status != 'read')
                + (SELECT COUNT(*) FROM message_recipients WHERE recipient_id = ? AND is_read = 0)
            """,
            (receiver_id, receiver_id),
        )

    def count_sent(self, sender_id: str) -> int:
        return self._scalar("SELECT COUNT(*) FROM messages WHERE sender_id = ?", (sender_id,))

    def count_threads(self, user_id: str | None = None) -> int:
        if user_id is None:
            return self._scalar("SELECT COUNT(DISTINCT thread_id) FROM messages", ())
        return self._scalar(
            """
            SELECT COUNT(*) FROM (
                SELECT thread_id FROM messages WHERE sender_id = ? OR receiver_id = ?
                UNION
                SELECT m.thread_id FROM message_recipients mr
                JOIN messages m ON m.id = mr.message_id
                WHERE mr.recipient_id = ?
            )
            """,
            (user_id, user_id, user_id),
        )

    def insert_message(
        self,
        sender_id: str,
        receiver_id: str,
        subject: str,
        content: str,
        priority: str = "normal",
        thread_id: str | None = None,
    ) -> Message:
        """Summary: Insert one direct message.

        Importance: The common path for replies and client-to-staff messages.
        Alternatives: Always route through the batch insert.
        """

        return self.insert_direct_messages(
            sender_id, [receiver_id], subject, content, priority=priority, thread_id=thread_id
        )[0]

    def insert_direct_messages(
        self,
        sender_id: str,
        receiver_ids: list[str],
        subject: str,
        content: str,
        priority: str = "normal",
        thread_id: str | None = None,
    ) -> list[Message]:
        """Summary: Insert one direct message per receiver in a single transaction.

        Importance: Sending to N people yields N rows or none at all.
        Alternatives: Loop single inserts from the caller and accept partial sends.
        """

        if not receiver_ids:
            raise StoreError("A direct message needs at least one receiver")
        now = self.now()
        stamp = to_timestamp(now)
        ids: list[str] = []
        with self._connection() as connection:
            cursor = connection.cursor()
            self._consume_quota(cursor, sender_id, len(receiver_ids), now)
            for receiver_id in receiver_ids:
                message_id = new_id()
                cursor.execute(
                    """
                    INSERT INTO messages (
                        id, sender_id, receiver_id, subject, content, message_type,
                        priority, read_status, thread_id, created_at, updated_at
                    ) VALUES (?, ?, ?, ?, ?, 'direct', ?, 'sent', ?, ?, ?)
                    """,
                    (
                        message_id,
                        sender_id,
                        receiver_id,
                        subject,
                        content,
                        priority,
                        thread_id or new_id(),
                        stamp,
                        stamp,
                    ),
                )
                ids.append(message_id)
            connection.commit()
        messages = [self._require_message(message_id) for message_id in ids]
        logger.info("Inserted %s direct messages from %s.", len(messages), sender_id)
        for message in messages:
            self.changes.publish(ChangeEvent("INSERT", "messages", new=_message_event_row(message)))
        return messages

    def insert_broadcast(
        self,
        sender_id: str,
        recipient_ids: list[str],
        subject: str,
        content: str,
        priority: str = "normal",
    ) -> tuple[Message, list[MessageRecipient]]:
        """Summary: Insert a broadcast and its fan-out rows in one transaction.

        Importance: The message and every recipient row are created together or not at all.
        Alternatives: Insert the message, then the recipients, and accept partial failures.
        """

        if not recipient_ids:
            raise StoreError("A broadcast needs at least one recipient")
        now = self.now()
        stamp = to_timestamp(now)
        message_id = new_id()
        with self._connection() as connection:
            cursor = connection.cursor()
            self._consume_quota(cursor, sender_id, 1, now)
            cursor.execute(
                """
                INSERT INTO messages (
                    id, sender_id, receiver_id, subject, content, message_type,
                    priority, read_status, thread_id, created_at, updated_at
                ) VALUES (?, ?, NULL, ?, ?, 'broadcast', ?, 'sent', ?, ?, ?)
                """,
                (message_id, sender_id, subject, content, priority, new_id(), stamp, stamp),
            )
            cursor.executemany(
                """
                INSERT INTO message_recipients (id, message_id, recipient_id, is_read, created_at)
                VALUES (?, ?, ?, 0, ?)
                """,
                [(new_id(), message_id, recipient_id, stamp) for recipient_id in recipient_ids],
            )
            connection.commit()
        message = self._require_message(message_id)
        recipients = self.list_recipients(message_id)
        logger.info("Inserted broadcast %s for %s recipients.", message_id, len(recipients))
        self.changes.publish(ChangeEvent("INSERT", "messages", new=_message_event_row(message)))
        for recipient in recipients:
            self.changes.publish(
                ChangeEvent("INSERT", "message_recipients", new=_recipient_event_row(recipient))
            )
        return message, recipients

    def mark_read(self, message_id: str, reader_id: str, read_at: datetime) -> bool:
        """Summary: Mark a message read for its receiver or broadcast recipient.

        Importance: Updates the message row and the fan-out row together; the first read time is kept.
        Alternatives: Issue two independent updates from the caller.
        """

        stamp = to_timestamp(read_at)
        with self._connection() as connection:
            cursor = connection.cursor()
            cursor.execute(
                """
                UPDATE messages
                SET read_status = 'read', read_at = COALESCE(read_at, ?), updated_at = ?
                WHERE id = ? AND receiver_id = ? AND read_status != 'read'
                """,
                (stamp, stamp, message_id, reader_id),
            )
            message_changed = cursor.rowcount > 0
            cursor.execute(
                """
                UPDATE message_recipients
                SET is_read = 1, read_at = COALESCE(read_at, ?)
                WHERE message_id = ? AND recipient_id = ? AND is_read = 0
                """,
                (stamp, message_id, reader_id),
            )
            recipient_changed = cursor.rowcount > 0
            connection.commit()
        if message_changed:
            message = self._require_message(message_id)
            self.changes.publish(ChangeEvent("UPDATE", "messages", new=_message_event_row(message)))
        if recipient_changed:
            for recipient in self.list_recipients(message_id):
                if recipient.recipient_id == reader_id:
                    self.changes.publish(
                        ChangeEvent(
                            "UPDATE", "message_recipients", new=_recipient_event_row(recipient)
                        )
                    )
        return message_changed or recipient_changed

    def get_rate_limit(self, user_id: str) -> tuple[int, datetime] | None:
        """Summary: Return the raw send counter and window reset time for a user.

        Importance: The counter record is authoritative; readers derive remaining quota from it.
        Alternatives: Keep quota counters in memory.
        """

        with self._connection() as connection:
            row = connection.execute(
                "SELECT message_count, reset_at FROM message_rate_limits WHERE user_id = ?",
                (user_id,),
            ).fetchone()
        if not row:
            return None
        return int(row[0]), from_timestamp(row[1])

    def conversation_summaries(self, admin_id: str) -> list[ConversationSummary]:
        """Summary: Aggregate direct messages into one summary per counterpart.

        Importance: Server-side version of the admin conversation list, including unread counts.
        Alternatives: Reduce the raw message list in the client.
        """

        if not self.conversation_rpc:
            raise StoreError("get_conversation_summaries is not available")
        with self._connection() as connection:
            rows = connection.execute(
                """
                SELECT x.counterpart, p.full_name, p.email, p.role,
                       x.content, x.created_at, x.unread
                FROM (
                    SELECT
                        CASE WHEN sender_id = :admin THEN receiver_id ELSE sender_id END AS counterpart,
                        content,
                        created_at,
                        ROW_NUMBER() OVER (
                            PARTITION BY CASE WHEN sender_id = :admin THEN receiver_id ELSE sender_id END
                            ORDER BY created_at DESC, rowid DESC
                        ) AS position,
                        SUM(CASE WHEN receiver_id = :admin AND read_status != 'read' THEN 1 ELSE 0 END)
                            OVER (
                                PARTITION BY CASE WHEN sender_id = :admin THEN receiver_id ELSE sender_id END
                            ) AS unread
                    FROM messages
                    WHERE message_type = 'direct' AND (sender_id = :admin OR receiver_id = :admin)
                ) x
                JOIN profiles p ON p.id = x.counterpart
                WHERE x.position = 1
                ORDER BY x.created_at DESC
                """,
                {"admin": admin_id},
            ).fetchall()
        return [
            ConversationSummary(
                participant_id=row[0],
                participant_name=row[1],
                participant_email=row[2],
                participant_role=row[3],
                last_message_content=row[4],
                last_message_time=from_timestamp(row[5]),
                unread_count=int(row[6] or 0),
            )
            for row in rows
        ]

    def _consume_quota(
        self, cursor: sqlite3.Cursor, sender_id: str, count: int, now: datetime
    ) -> None:
        """Summary: Count inserted messages against the sender's hourly window.

        Importance: Enforces the quota inside the insert transaction; admins are exempt.
        Alternatives: Enforce quotas with a database trigger.
        """

        # Write lock before the counter read.
        cursor.execute("BEGIN IMMEDIATE")
        role_row = cursor.execute("SELECT role FROM profiles WHERE id = ?", (sender_id,)).fetchone()
        if role_row and role_row[0] in ADMIN_ROLES:
            return
        row = cursor.execute(
            "SELECT message_count, reset_at FROM message_rate_limits WHERE user_id = ?",
            (sender_id,),
        ).fetchone()
        if row is None or now > from_timestamp(row[1]):
            used = 0
            reset_at = now + RATE_LIMIT_WINDOW
        else:
            used = int(row[0])
            reset_at = from_timestamp(row[1])
        if used + count > self.hourly_limit:
            info = RateLimitInfo(
                message_count=used,
                reset_at=reset_at,
                remaining=max(0, self.hourly_limit - used),
            )
            logger.warning("Rate limit exceeded for %s (%s used).", sender_id, used)
            raise RateLimitExceeded("Hourly message limit exceeded", info)
        cursor.execute(
            """
            INSERT INTO message_rate_limits (user_id, message_count, reset_at)
            VALUES (?, ?, ?)
            ON CONFLICT(user_id) DO UPDATE SET
                message_count = excluded.message_count,
                reset_at = excluded.reset_at
            """,
            (sender_id, used + count, to_timestamp(reset_at)),
        )

    def _require_message(self, message_id: str) -> Message:
        message = self.get_message(message_id)
        if message is None:
            raise StoreError(f"Message {message_id} not found")
        return message

    def _select_messages(self, sql: str, params: tuple[Any, ...]) -> list[Message]:
        with self._connection() as connection:
            rows = connection.execute(sql, params).fetchall()
        return [_message_from_row(row) for row in rows]

    def _scalar(self, sql: str, params: tuple[Any, ...]) -> int:
        with self._connection() as connection:
            row = connection.execute(sql, params).fetchone()
        return int(row[0] or 0) if row else 0

    @contextmanager
    def _connection(self) -> Iterator[sqlite3.Connection]:
        """Summary: Context manager for SQLite connections.

        Importance: Closes connections cleanly and reports driver failures as StoreError.
        Alternatives: Keep a single long-lived connection.
        """

        try:
            connection = sqlite3.connect(self._db_path)
        except sqlite3.Error as exc:
            raise StoreError(f"Could not open {self._db_path}: {exc}") from exc
        try:
            connection.execute("PRAGMA foreign_keys = ON")
            yield connection
        except sqlite3.Error as exc:
            connection.rollback()
            raise StoreError(str(exc)) from exc
        except BaseException:
            connection.rollback()
            raise
        finally:
            connection.close()


def _participant(
    user_id: str | None, name: str | None, email: str | None, role: str | None
) -> Participant | None:
    if user_id is None or name is None:
        return None
    return Participant(id=user_id, full_name=name, email=email or "", role=role)


def _message_from_row(row: tuple[Any, ...]) -> Message:
    return Message(
        id=row[0],
        sender_id=row[1],
        receiver_id=row[2],
        subject=row[3],
        content=row[4],
        message_type=row[5],
        priority=row[6],
        read_status=row[7],
        read_at=from_timestamp(row[8]),
        thread_id=row[9],
        created_at=from_timestamp(row[10]),
        updated_at=from_timestamp(row[11]),
        sender=_participant(row[1], row[12], row[13], row[14]),
        receiver=_participant(row[2], row[15], row[16], row[17]),
    )


def _message_event_row(message: Message) -> dict[str, Any]:
    return {
        "id": message.id,
        "sender_id": message.sender_id,
        "receiver_id": message.receiver_id,
        "message_type": message.message_type,
        "thread_id": message.thread_id,
        "read_status": message.read_status,
    }


def _recipient_event_row(recipient: MessageRecipient) -> dict[str, Any]:
    return {
        "id": recipient.id,
        "message_id": recipient.message_id,
        "recipient_id": recipient.recipient_id,
        "is_read": recipient.is_read,
    }

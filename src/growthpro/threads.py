"""Summary: Thread assembly for flat message lists.

Importance: Turns store rows into conversations with ordering and unread counts.
Alternatives: Persist threads and update them incrementally.
"""

from __future__ import annotations

from typing import Iterable, Mapping

from growthpro.models import ConversationSummary, Message, MessageThread, Participant

SUPPORT_NAME = "Support Team"
SUPPORT_EMAIL = "support@growthpro.com"


def _chronological_key(message: Message) -> tuple:
    return (message.created_at, message.id)


def sort_chronologically(messages: Iterable[Message]) -> list[Message]:
    return sorted(messages, key=_chronological_key)


def thread_key(message: Message) -> str:
    return message.thread_id


def count_unread(messages: Iterable[Message], viewer_id: str) -> int:
    """Summary: Count messages addressed to the viewer that are not read yet.

    Importance: Same rule for thread badges and the basic conversation view.
    Alternatives: Track unread counters per thread in storage.
    """

    return sum(1 for message in messages if message.receiver_id == viewer_id and not message.is_read)


def _resolve_participant(
    participant_id: str,
    messages: list[Message],
    viewer_id: str,
    directory: Mapping[str, Participant] | None,
) -> Participant:
    for message in messages:
        if message.sender and message.sender.id == participant_id:
            return message.sender
        if message.receiver and message.receiver.id == participant_id:
            return message.receiver
    if directory and participant_id in directory:
        return directory[participant_id]
    if participant_id == viewer_id:
        return Participant(id=participant_id, full_name="You", email="")
    return Participant(id=participant_id, full_name=SUPPORT_NAME, email=SUPPORT_EMAIL)


def assemble_threads(
    messages: Iterable[Message],
    viewer_id: str,
    directory: Mapping[str, Participant] | None = None,
) -> list[MessageThread]:
    """Summary: Group messages by thread and order threads by latest activity.

    Importance: Deterministic for a given message set: ascending messages, newest thread first.
    Alternatives: Group by counterpart pair instead of thread id.
    """

    groups: dict[str, list[Message]] = {}
    for message in messages:
        groups.setdefault(thread_key(message), []).append(message)

    threads: list[MessageThread] = []
    for thread_id, group in groups.items():
        ordered = sort_chronologically(group)
        participant_ids: list[str] = []
        for message in ordered:
            for user_id in (message.sender_id, message.receiver_id):
                if user_id and user_id not in participant_ids:
                    participant_ids.append(user_id)
        participants = [
            _resolve_participant(user_id, ordered, viewer_id, directory) for user_id in participant_ids
        ]
        threads.append(
            MessageThread(
                id=thread_id,
                subject=ordered[0].subject,
                participants=participants,
                messages=ordered,
                unread_count=count_unread(ordered, viewer_id),
            )
        )
    threads.sort(key=lambda thread: _chronological_key(thread.last_message), reverse=True)
    return threads


def build_participant_thread(
    messages: Iterable[Message], viewer_id: str, participant_id: str
) -> MessageThread | None:
    """Summary: Build the conversation between the viewer and one counterpart.

    Importance: Backs the admin thread view keyed by participant rather than thread id.
    Alternatives: Reuse assemble_threads and merge groups by participant.
    """

    ordered = [
        message
        for message in sort_chronologically(messages)
        if {message.sender_id, message.receiver_id} == {viewer_id, participant_id}
    ]
    if not ordered:
        return None
    first = ordered[0]
    participant = first.sender if first.sender_id == participant_id else first.receiver
    if participant is None:
        participant = _resolve_participant(participant_id, ordered, viewer_id, None)
    return MessageThread(
        id=f"{viewer_id}:{participant_id}",
        subject=first.subject,
        participants=[participant],
        messages=ordered,
        unread_count=count_unread(ordered, viewer_id),
    )


def summarize_conversations(
    messages: Iterable[Message], viewer_id: str
) -> list[ConversationSummary]:
    """Summary: Reduce direct messages to one summary per counterpart.

    Importance: Fallback when the server-side summary call is unavailable; broadcasts are skipped.
    Alternatives: Fail the conversation list when the server call fails.
    """

    latest: dict[str, tuple[Message, Participant]] = {}
    unread: dict[str, int] = {}
    for message in messages:
        if message.is_broadcast:
            continue
        from_viewer = message.sender_id == viewer_id
        participant_id = message.receiver_id if from_viewer else message.sender_id
        participant = message.receiver if from_viewer else message.sender
        if not participant_id or participant is None:
            continue
        if message.receiver_id == viewer_id and not message.is_read:
            unread[participant_id] = unread.get(participant_id, 0) + 1
        current = latest.get(participant_id)
        if current is None or _chronological_key(message) > _chronological_key(current[0]):
            latest[participant_id] = (message, participant)

    summaries = [
        ConversationSummary(
            participant_id=participant_id,
            participant_name=participant.full_name,
            participant_email=participant.email,
            participant_role=participant.role,
            last_message_content=message.content,
            last_message_time=message.created_at,
            unread_count=unread.get(participant_id, 0),
        )
        for participant_id, (message, participant) in latest.items()
    ]
    summaries.sort(key=lambda summary: summary.last_message_time, reverse=True)
    return summaries

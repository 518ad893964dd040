"""Summary: Client-side checks for outgoing messages.

Importance: Rejects incomplete drafts before any store call and reports errors per field.
Alternatives: Rely on database constraints and surface their errors.
"""

from __future__ import annotations

from growthpro.models import MESSAGE_TYPES, PRIORITIES, SendMessageRequest, Viewer

SUBJECT_MAX_LENGTH = 100
CONTENT_MAX_LENGTH = 1000


def validate_send_request(request: SendMessageRequest, viewer: Viewer) -> dict[str, str]:
    """Summary: Return a field -> message mapping of problems with a send request.

    Importance: Shared by the composer and the service so both apply the same rules.
    Alternatives: Validate with a Pydantic model.
    """

    errors: dict[str, str] = {}
    subject = request.subject.strip()
    content = request.content.strip()

    if not subject:
        errors["subject"] = "Subject is required"
    elif len(request.subject) > SUBJECT_MAX_LENGTH:
        errors["subject"] = f"Subject must be {SUBJECT_MAX_LENGTH} characters or less"

    if not content:
        errors["content"] = "Message content is required"
    elif len(request.content) > CONTENT_MAX_LENGTH:
        errors["content"] = f"Message must be {CONTENT_MAX_LENGTH} characters or less"

    if request.message_type not in MESSAGE_TYPES:
        errors["message_type"] = f"Unknown message type: {request.message_type}"
    if request.priority not in PRIORITIES:
        errors["priority"] = f"Unknown priority: {request.priority}"

    targets = request.targets()
    if not targets:
        errors["recipients"] = "Please select at least one recipient"
    elif viewer.id in targets:
        errors["recipients"] = "You cannot send a message to yourself"
    elif request.thread_id and len(targets) > 1:
        errors["thread_id"] = "A reply can only go to one recipient"
    return errors

"""Summary: Message composer holding a draft and sending it through the service.

Importance: Validates before sending and keeps the draft when a send fails.
Alternatives: Build SendMessageRequest objects by hand at every call site.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from growthpro.models import Message, SendMessageRequest
from growthpro.rate_limit import compute_remaining
from growthpro.services import MessagingService
from growthpro.validation import validate_send_request

logger = logging.getLogger(__name__)


@dataclass
class Draft:
    subject: str = ""
    content: str = ""
    priority: str = "normal"
    message_type: str = "direct"
    recipients: list[str] = field(default_factory=list)


class MessageComposer:
    """Summary: Draft state, field errors, and send for one composer.

    Importance: Clients are routed to the support recipient; admins pick recipients.
    Alternatives: Let the service resolve recipients itself.
    """

    def __init__(
        self,
        service: MessagingService,
        reply_to_subject: str | None = None,
        reply_to_thread: str | None = None,
        reply_to_participant: str | None = None,
    ) -> None:
        self.service = service
        self.reply_to_thread = reply_to_thread
        self.draft = Draft()
        self.errors: dict[str, str] = {}
        if reply_to_subject:
            self.draft.subject = _reply_subject(reply_to_subject)
        if reply_to_participant:
            self.draft.recipients = [reply_to_participant]

    @property
    def is_reply(self) -> bool:
        return self.reply_to_thread is not None

    def set_subject(self, subject: str) -> None:
        self.draft.subject = subject
        self.errors.pop("subject", None)

    def set_content(self, content: str) -> None:
        self.draft.content = content
        self.errors.pop("content", None)

    def select_recipients(self, recipient_ids: list[str]) -> None:
        self.draft.recipients = list(recipient_ids)
        self.errors.pop("recipients", None)

    def build_request(self) -> SendMessageRequest:
        """Summary: Turn the draft into a send request.

        Importance: Client drafts always go to the support recipient.
        Alternatives: Require clients to pick a staff member.
        """

        recipients = list(self.draft.recipients)
        if not self.service.viewer.is_admin:
            support = self.service.store.find_support_recipient()
            recipients = [support.id] if support else []
        message_type = self.draft.message_type if self.service.viewer.is_admin else "direct"
        return SendMessageRequest(
            subject=self.draft.subject,
            content=self.draft.content,
            message_type=message_type,
            recipient_ids=tuple(recipients),
            priority=self.draft.priority,
            thread_id=self.reply_to_thread,
        )

    def validate(self) -> bool:
        request = self.build_request()
        errors = validate_send_request(request, self.service.viewer)
        if "recipients" in errors and not self.service.viewer.is_admin:
            errors["recipients"] = "No admin users found to send message to"
        self.errors = errors
        return not errors

    @property
    def can_send(self) -> bool:
        """Summary: Whether the send action should be enabled.

        Importance: Disabled while busy, with a blank field, without recipients, or out of quota.
        Alternatives: Always enable and rely on validation.
        """

        if self.service.busy:
            return False
        if not self.draft.subject.strip() or not self.draft.content.strip():
            return False
        if self.service.viewer.is_admin and not self.draft.recipients:
            return False
        info = self.service.state.rate_limit
        if info is not None and not self.service.viewer.is_admin:
            now = self.service.store.now()
            if compute_remaining(info.message_count, info.reset_at, self.service.hourly_limit, now) <= 0:
                return False
        return True

    def send(self) -> list[Message] | None:
        """Summary: Validate and send the draft.

        Importance: An invalid draft never reaches the service; a failed send keeps the draft.
        Alternatives: Clear the draft before sending.
        """

        if not self.validate():
            logger.info("Draft rejected: %s.", ", ".join(sorted(self.errors)))
            return None
        request = self.build_request()
        sent = self.service.send_message(request)
        count = len(request.targets())
        if count > 1:
            self.service.notifier.success(f"Message sent to {count} recipients!")
        self.reset()
        return sent

    def reset(self) -> None:
        subject = self.draft.subject if self.is_reply else ""
        recipients = self.draft.recipients if self.is_reply else []
        self.draft = Draft(subject=subject, recipients=recipients)
        self.errors = {}


def _reply_subject(subject: str) -> str:
    return subject if subject.lower().startswith("re:") else f"Re: {subject}"

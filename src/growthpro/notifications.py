"""Summary: User-facing notices for messaging outcomes.

Importance: Replaces UI toasts with a history the CLI and API can show.
Alternatives: Only log outcomes.
"""

from __future__ import annotations

import logging
from collections import deque
from datetime import datetime
from typing import Callable

from growthpro.models import Notice
from growthpro.storage.sqlite_store import utcnow

logger = logging.getLogger(__name__)

_LOG_LEVELS = {"success": logging.INFO, "info": logging.INFO, "error": logging.ERROR}


class Notifier:
    """Summary: Records notices in a bounded history and logs them.

    Importance: One place for send confirmations, failures, and new-message alerts.
    Alternatives: Print directly from the service.
    """

    def __init__(self, history: int = 50, clock: Callable[[], datetime] = utcnow) -> None:
        self._notices: deque[Notice] = deque(maxlen=history)
        self._clock = clock

    def notify(self, level: str, text: str) -> Notice:
        notice = Notice(level=level, text=text, created_at=self._clock())
        self._notices.append(notice)
        logger.log(_LOG_LEVELS.get(level, logging.INFO), "%s: %s", level, text)
        return notice

    def success(self, text: str) -> Notice:
        return self.notify("success", text)

    def error(self, text: str) -> Notice:
        return self.notify("error", text)

    def info(self, text: str) -> Notice:
        return self.notify("info", text)

    def latest(self) -> Notice | None:
        return self._notices[-1] if self._notices else None

    def history(self) -> list[Notice]:
        return list(self._notices)

    def drain(self) -> list[Notice]:
        """Return and clear every recorded notice."""

        notices = list(self._notices)
        self._notices.clear()
        return notices

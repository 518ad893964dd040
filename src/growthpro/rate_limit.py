"""Summary: Read-side view of the hourly send quota.

Importance: Warns composers before a send the store would reject.
Alternatives: Let every over-quota send fail server-side without a hint.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime
from typing import Callable

from growthpro.models import RateLimitInfo
from growthpro.storage.sqlite_store import RATE_LIMIT_WINDOW, SqliteStore, as_utc, utcnow

HOURLY_MESSAGE_LIMIT = 10


def compute_remaining(message_count: int, reset_at: datetime, limit: int, now: datetime) -> int:
    """Summary: Derive the remaining quota from the server counter.

    Importance: An expired window counts as fresh even before the server resets it.
    Alternatives: Trust a remaining value stored next to the counter.
    """

    if as_utc(now) > as_utc(reset_at):
        return limit
    return min(limit, max(0, limit - message_count))


def minutes_until_reset(info: RateLimitInfo, now: datetime) -> int:
    seconds = (as_utc(info.reset_at) - as_utc(now)).total_seconds()
    return max(0, math.ceil(seconds / 60))


def rate_limit_message(info: RateLimitInfo, now: datetime) -> str:
    minutes = minutes_until_reset(info, now)
    return f"Rate limit exceeded. You can send more messages in {minutes} minutes."


@dataclass(frozen=True)
class RateLimitReader:
    """Summary: Reads the per-user counter record and derives remaining quota.

    Importance: Never decrements locally; remaining is always recomputed from the store.
    Alternatives: Count sends in memory on the client.
    """

    store: SqliteStore
    hourly_limit: int = HOURLY_MESSAGE_LIMIT
    clock: Callable[[], datetime] = utcnow

    def read(self, user_id: str) -> RateLimitInfo:
        now = as_utc(self.clock())
        record = self.store.get_rate_limit(user_id)
        if record is None:
            return RateLimitInfo(
                message_count=0,
                reset_at=now + RATE_LIMIT_WINDOW,
                remaining=self.hourly_limit,
            )
        message_count, reset_at = record
        return RateLimitInfo(
            message_count=message_count,
            reset_at=reset_at,
            remaining=compute_remaining(message_count, reset_at, self.hourly_limit, now),
        )

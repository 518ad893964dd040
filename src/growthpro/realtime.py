"""Summary: In-process change feed for row-level store notifications.

Importance: Lets services resync when messages they can see are inserted or updated.
Alternatives: Poll the store or push events over a websocket broker.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

from growthpro.models import ChangeEvent

logger = logging.getLogger(__name__)

ChangeCallback = Callable[[ChangeEvent], None]


@dataclass(eq=False)
class Subscription:
    """Summary: A channel listening to one table filtered by column equality.

    Importance: Matches only rows touching the subscriber's identity.
    Alternatives: Deliver every change to every listener.
    """

    channel: str
    table: str
    columns: tuple[str, ...]
    value: str
    callback: ChangeCallback
    event: str = "*"
    feed: ChangeFeed | None = None

    def matches(self, event: ChangeEvent) -> bool:
        if event.table != self.table:
            return False
        if self.event != "*" and event.event_type != self.event:
            return False
        row = event.new or event.old
        return any(row.get(column) == self.value for column in self.columns)

    def unsubscribe(self) -> None:
        if self.feed is not None:
            self.feed.remove(self)
            self.feed = None


class ChangeFeed:
    """Summary: Publishes change events to matching subscriptions.

    Importance: Stands in for the hosted realtime bus in local deployments and tests.
    Alternatives: Use Postgres LISTEN/NOTIFY or a message broker.
    """

    def __init__(self) -> None:
        self._subscriptions: list[Subscription] = []

    def subscribe(
        self,
        channel: str,
        table: str,
        columns: tuple[str, ...],
        value: str,
        callback: ChangeCallback,
        event: str = "*",
    ) -> Subscription:
        """Summary: Register a callback for changes on a table.

        Importance: The OR-of-equality filter mirrors `or(a.eq.x,b.eq.x)` predicates.
        Alternatives: Filter inside each callback.
        """

        subscription = Subscription(
            channel=channel,
            table=table,
            columns=tuple(columns),
            value=value,
            callback=callback,
            event=event,
            feed=self,
        )
        self._subscriptions.append(subscription)
        logger.info("Subscribed channel %s to %s (%s).", channel, table, ",".join(columns))
        return subscription

    def remove(self, subscription: Subscription) -> None:
        if subscription in self._subscriptions:
            self._subscriptions.remove(subscription)
            logger.info("Removed subscription on channel %s.", subscription.channel)

    def remove_channel(self, channel: str) -> int:
        """Remove every subscription on a channel and return how many were dropped."""

        dropped = [sub for sub in self._subscriptions if sub.channel == channel]
        for subscription in dropped:
            subscription.unsubscribe()
        return len(dropped)

    def publish(self, event: ChangeEvent) -> int:
        """Summary: Deliver an event to every matching subscription.

        Importance: A failing listener must not block delivery to the others.
        Alternatives: Stop at the first callback error.
        """

        delivered = 0
        # Copy so callbacks may unsubscribe during delivery.
        for subscription in list(self._subscriptions):
            if not subscription.matches(event):
                continue
            try:
                subscription.callback(event)
            except Exception:
                logger.exception(
                    "Change callback failed on channel %s for %s %s.",
                    subscription.channel,
                    event.event_type,
                    event.table,
                )
                continue
            delivered += 1
        return delivered

    def subscription_count(self, channel: str | None = None) -> int:
        if channel is None:
            return len(self._subscriptions)
        return len([sub for sub in self._subscriptions if sub.channel == channel])

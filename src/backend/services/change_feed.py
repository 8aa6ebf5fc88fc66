"""
In-process change notification feed.

Fires whenever an idea or vote is mutated. Events carry no state: a
subscriber that receives one re-queries the board instead of applying a
delta. Each subscriber owns a bounded queue; when a slow subscriber's queue
is full its oldest event is dropped, which is harmless because any later
event triggers the same re-query.
"""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

import structlog

from core.config import settings
from schemas.board import ChangeAction, ChangeEvent, ChangeTable

logger = structlog.get_logger(__name__)


class ChangeFeed:
    """
    Fan-out of change events to subscriber queues.

    Usage:
        async with feed.subscription() as queue:
            event = await queue.get()
    """

    def __init__(self, queue_size: Optional[int] = None):
        self.queue_size = queue_size or settings.CHANGE_FEED_QUEUE_SIZE
        self._subscribers: set[asyncio.Queue[ChangeEvent]] = set()

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def subscribe(self) -> asyncio.Queue[ChangeEvent]:
        """Register a new subscriber queue."""
        queue: asyncio.Queue[ChangeEvent] = asyncio.Queue(maxsize=self.queue_size)
        self._subscribers.add(queue)
        return queue

    def unsubscribe(self, queue: asyncio.Queue[ChangeEvent]) -> None:
        """Remove a subscriber queue. Unknown queues are ignored."""
        self._subscribers.discard(queue)

    @asynccontextmanager
    async def subscription(self) -> AsyncGenerator[asyncio.Queue[ChangeEvent], None]:
        """Subscribe for the duration of a block."""
        queue = self.subscribe()
        try:
            yield queue
        finally:
            self.unsubscribe(queue)

    def publish(self, event: ChangeEvent) -> None:
        """Deliver an event to every subscriber without blocking."""
        for queue in list(self._subscribers):
            if queue.full():
                queue.get_nowait()
                logger.debug("change_feed_dropped_oldest", table=event.table.value)
            queue.put_nowait(event)

    def notify(self, table: ChangeTable, action: ChangeAction, record_id: str) -> None:
        """Build and publish an event."""
        self.publish(ChangeEvent(table=table, action=action, record_id=record_id))


class PendingChanges:
    """
    Buffers events raised inside a database transaction.

    Events are forwarded to the feed by ``flush`` after the transaction
    commits, and thrown away by ``discard`` when it rolls back, so
    subscribers never re-query before the change is visible.
    """

    def __init__(self, feed: ChangeFeed):
        self.feed = feed
        self._events: list[ChangeEvent] = []

    def notify(self, table: ChangeTable, action: ChangeAction, record_id: str) -> None:
        self._events.append(ChangeEvent(table=table, action=action, record_id=record_id))

    def flush(self) -> int:
        """Publish buffered events. Returns how many were published."""
        events, self._events = self._events, []
        for event in events:
            self.feed.publish(event)
        return len(events)

    def discard(self) -> None:
        self._events.clear()

"""
Board snapshots.

The board is always re-derived from the store: ideas with their current
counts, plus the caller's votes and quota. Clients fetch a snapshot, then
re-fetch whenever the change feed notifies them.
"""

import asyncio
from typing import AsyncGenerator, Awaitable, Callable, Optional

from schemas.board import BoardSnapshot, ChangeEvent
from schemas.idea import IdeaQuery
from services.change_feed import ChangeFeed
from services.idea_service import IdeaService, compute_stats

HEARTBEAT_SECONDS = 15.0


class BoardService:
    """Builds board snapshots from the idea service and vote ledger."""

    def __init__(self, ideas: IdeaService):
        self.ideas = ideas
        self.ledger = ideas.ledger

    async def snapshot(self, user_id: Optional[str], query: Optional[IdeaQuery] = None) -> BoardSnapshot:
        """Ideas matching the query, stats over all ideas, and the caller's voting state."""
        all_ideas = await self.ideas.list_ideas(IdeaQuery())
        shown = await self.ideas.list_ideas(query) if query else all_ideas

        voted_idea_ids: list[str] = []
        quota = None
        if user_id:
            voted_idea_ids = await self.ledger.voted_idea_ids(user_id)
            quota = await self.ledger.quarter_info(user_id)

        return BoardSnapshot(
            ideas=shown,
            stats=compute_stats(all_ideas),
            voted_idea_ids=voted_idea_ids,
            quota=quota,
        )


async def watch_changes(
    feed: ChangeFeed,
    is_disconnected: Callable[[], Awaitable[bool]],
    heartbeat_seconds: float = HEARTBEAT_SECONDS,
) -> AsyncGenerator[Optional[ChangeEvent], None]:
    """
    Yield change events until the client goes away.

    Yields None after ``heartbeat_seconds`` without events so callers can
    keep idle connections alive.
    """
    async with feed.subscription() as queue:
        while not await is_disconnected():
            try:
                event = await asyncio.wait_for(queue.get(), timeout=heartbeat_seconds)
            except asyncio.TimeoutError:
                yield None
                continue
            yield event

"""
Quarterly vote quota tracking.

The quota is never stored. Votes used is the number of the user's ledger
rows tagged with the current quarter, so the counter cannot drift from the
ledger and a new quarter starts from zero with no reset job.
"""

from datetime import datetime
from typing import Callable, Optional

import structlog

from core.config import settings
from core.exceptions import NotAuthenticatedError, QuotaExhaustedError
from core.quarters import current_quarter, next_quarter_start, quarter_start, quota_now
from repositories.provider import VoteRepositoryProtocol
from schemas.vote import QuarterInfo, QuotaRecord
from services.store_guard import guarded

logger = structlog.get_logger(__name__)


class QuotaTracker:
    """Answers how many votes a user has left this quarter and enforces the cap."""

    def __init__(
        self,
        votes: VoteRepositoryProtocol,
        total_per_quarter: Optional[int] = None,
        clock: Callable[[], datetime] = quota_now,
        timeout: Optional[float] = None,
    ):
        self.votes = votes
        self.total_per_quarter = total_per_quarter if total_per_quarter is not None else settings.VOTES_PER_QUARTER
        self.clock = clock
        self.timeout = timeout

    def current_quarter(self, now: Optional[datetime] = None) -> str:
        return current_quarter(now or self.clock())

    async def load_or_initialize(self, user_id: str, now: Optional[datetime] = None) -> QuotaRecord:
        """
        Get the user's quota record for the current quarter.

        A user whose votes all belong to earlier quarters gets a fresh record.
        """
        if not user_id:
            raise NotAuthenticatedError()

        quarter = self.current_quarter(now)
        used = await guarded(self.votes.count_for_user(user_id, quarter), "count_votes", self.timeout)
        return QuotaRecord(
            user_id=user_id,
            quarter=quarter,
            votes_used=used,
            total_votes=self.total_per_quarter,
        )

    async def remaining(self, user_id: str, now: Optional[datetime] = None) -> int:
        record = await self.load_or_initialize(user_id, now)
        return record.remaining_votes

    async def consume(self, user_id: str, now: Optional[datetime] = None) -> int:
        """
        Check that a vote can be spent and return what will remain after it.

        The ledger insert that follows is what actually uses the vote.

        Raises:
            QuotaExhaustedError: If no votes remain this quarter.
        """
        remaining = await self.remaining(user_id, now)
        if remaining <= 0:
            logger.info("vote_quota_exhausted", user_id=user_id, quarter=self.current_quarter(now))
            raise QuotaExhaustedError()
        return remaining - 1

    async def release(self, user_id: str, now: Optional[datetime] = None) -> int:
        """Return remaining votes after a ledger delete. Never exceeds the total."""
        return await self.remaining(user_id, now)

    async def quarter_info(self, user_id: str, now: Optional[datetime] = None) -> QuarterInfo:
        """Quota usage plus the window boundaries for display."""
        now = now or self.clock()
        record = await self.load_or_initialize(user_id, now)
        return QuarterInfo(
            current_quarter=record.quarter,
            quarter_start=quarter_start(now),
            next_quarter_start=next_quarter_start(now),
            votes_used=min(record.votes_used, record.total_votes),
            total_votes=record.total_votes,
            remaining_votes=record.remaining_votes,
        )

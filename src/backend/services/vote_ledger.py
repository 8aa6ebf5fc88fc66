"""
Vote ledger: who has voted for what this quarter.

Each (user, idea, quarter) is a two-state machine, NotVoted or Voted.
``vote`` moves it to Voted and ``unvote`` back. Both are idempotent in
effect: repeating a vote fails with AlreadyVotedError and repeating an
unvote fails with NotVotedError, leaving counts untouched, so callers can
retry after StoreUnavailableError without corrupting anything.
"""

from datetime import datetime
from typing import Callable, Optional

import structlog

from core.exceptions import (
    AlreadyVotedError,
    DuplicateVoteError,
    IdeaNotFoundError,
    NotAuthenticatedError,
    NotVotedError,
)
from core.quarters import current_quarter, quota_now
from repositories.provider import Repositories
from schemas.board import ChangeAction, ChangeTable
from schemas.vote import QuarterInfo, VoteReceipt
from services.quota_tracker import QuotaTracker
from services.store_guard import guarded

logger = structlog.get_logger(__name__)


class VoteLedger:
    """
    Casts and removes votes, keeping idea vote counts in step.

    Usage:
        ledger = VoteLedger(repos)
        receipt = await ledger.vote(user_id, idea_id)
    """

    def __init__(
        self,
        repos: Repositories,
        quota: Optional[QuotaTracker] = None,
        clock: Callable[[], datetime] = quota_now,
        timeout: Optional[float] = None,
    ):
        self.repos = repos
        self.clock = clock
        self.timeout = timeout
        self.quota = quota or QuotaTracker(repos.votes, clock=clock, timeout=timeout)

    async def has_voted(self, user_id: str, idea_id: str) -> bool:
        """Whether the user holds a vote for the idea in the current quarter."""
        if not user_id:
            raise NotAuthenticatedError()
        quarter = current_quarter(self.clock())
        return await guarded(self.repos.votes.exists(idea_id, user_id, quarter), "vote_exists", self.timeout)

    async def voted_idea_ids(self, user_id: str) -> list[str]:
        """Ideas the user voted for in the current quarter."""
        if not user_id:
            raise NotAuthenticatedError()
        quarter = current_quarter(self.clock())
        return await guarded(self.repos.votes.idea_ids_for_user(user_id, quarter), "list_user_votes", self.timeout)

    async def quarter_info(self, user_id: str) -> QuarterInfo:
        return await self.quota.quarter_info(user_id, self.clock())

    async def vote(self, user_id: Optional[str], idea_id: str) -> VoteReceipt:
        """
        Cast the user's vote for an idea.

        The duplicate check runs before the quota check so a repeated vote
        never costs quota.

        Raises:
            NotAuthenticatedError: No user id.
            IdeaNotFoundError: Unknown idea.
            AlreadyVotedError: The user already voted for it this quarter.
            QuotaExhaustedError: No votes left this quarter.
            StoreUnavailableError: The store failed; safe to retry.
        """
        if not user_id:
            raise NotAuthenticatedError()

        now = self.clock()
        quarter = current_quarter(now)

        idea = await guarded(self.repos.ideas.get_by_id(idea_id), "get_idea", self.timeout)
        if idea is None:
            raise IdeaNotFoundError()

        # Held until commit so concurrent votes by this user see each other
        await guarded(self.repos.votes.lock_user_quarter(user_id, quarter), "lock_user_quarter", self.timeout)

        if await guarded(self.repos.votes.exists(idea_id, user_id, quarter), "vote_exists", self.timeout):
            raise AlreadyVotedError()

        remaining = await self.quota.consume(user_id, now)

        try:
            await guarded(self.repos.votes.create(idea_id, user_id, quarter, now), "create_vote", self.timeout)
        except DuplicateVoteError as e:
            # Lost a race with a concurrent request from the same user
            raise AlreadyVotedError() from e

        vote_count = await guarded(self.repos.ideas.increment_vote_count(idea_id), "increment_votes", self.timeout)
        self.repos.changes.notify(ChangeTable.VOTES, ChangeAction.INSERT, idea_id)

        logger.info(
            "vote_recorded",
            user_id=user_id,
            idea_id=idea_id,
            quarter=quarter,
            vote_count=vote_count,
            remaining_votes=remaining,
        )

        return VoteReceipt(
            message=f"Vote recorded! You have {remaining} votes remaining this quarter.",
            idea_id=idea_id,
            vote_count=vote_count,
            remaining_votes=remaining,
        )

    async def unvote(self, user_id: Optional[str], idea_id: str) -> VoteReceipt:
        """
        Remove the user's current-quarter vote for an idea.

        Votes cast in earlier quarters are history and cannot be removed.

        Raises:
            NotAuthenticatedError: No user id.
            NotVotedError: No vote for the idea this quarter.
            StoreUnavailableError: The store failed; safe to retry.
        """
        if not user_id:
            raise NotAuthenticatedError()

        now = self.clock()
        quarter = current_quarter(now)

        removed = await guarded(self.repos.votes.delete(idea_id, user_id, quarter), "delete_vote", self.timeout)
        if removed is None:
            raise NotVotedError()

        vote_count = await guarded(self.repos.ideas.decrement_vote_count(idea_id), "decrement_votes", self.timeout)
        remaining = await self.quota.release(user_id, now)
        self.repos.changes.notify(ChangeTable.VOTES, ChangeAction.DELETE, idea_id)

        logger.info(
            "vote_removed",
            user_id=user_id,
            idea_id=idea_id,
            quarter=quarter,
            vote_count=vote_count,
            remaining_votes=remaining,
        )

        return VoteReceipt(
            message="Your vote has been removed successfully!",
            idea_id=idea_id,
            vote_count=vote_count,
            remaining_votes=remaining,
        )

"""
Idea submission, browsing and administration.
"""

from datetime import datetime
from typing import Callable, Iterable, Optional

import structlog

from core.config import settings
from core.exceptions import (
    IdeaNotFoundError,
    IdeaValidationError,
    NotAuthenticatedError,
    QuotaExhaustedError,
)
from core.quarters import quota_now
from repositories.provider import Repositories
from schemas.board import ChangeAction, ChangeTable
from schemas.idea import (
    CategoryList,
    IdeaCreate,
    IdeaQuery,
    IdeaRecord,
    IdeaSortEnum,
    IdeaStats,
    IdeaStatusEnum,
    IdeaStatusUpdate,
    IdeaWithVotes,
    Voter,
)
from services.store_guard import guarded
from services.vote_ledger import VoteLedger

logger = structlog.get_logger(__name__)


def filter_and_sort_ideas(ideas: Iterable[IdeaWithVotes], query: IdeaQuery) -> list[IdeaWithVotes]:
    """
    Apply browse filters and ordering.

    The search term matches title or description, case-insensitively.
    Ties under the "votes" ordering keep newest first.
    """
    term = (query.search or "").strip().lower()

    def matches(idea: IdeaWithVotes) -> bool:
        if term and term not in idea.title.lower() and term not in idea.description.lower():
            return False
        if query.status is not None and idea.status != query.status:
            return False
        if query.category and idea.category != query.category:
            return False
        return True

    filtered = [idea for idea in ideas if matches(idea)]

    newest_first = sorted(filtered, key=lambda i: i.created_at, reverse=True)
    if query.sort == IdeaSortEnum.OLDEST:
        return list(reversed(newest_first))
    if query.sort == IdeaSortEnum.VOTES:
        return sorted(newest_first, key=lambda i: i.vote_count, reverse=True)
    return newest_first


def compute_stats(ideas: Iterable[IdeaRecord]) -> IdeaStats:
    """Dashboard counters over all ideas."""
    stats = IdeaStats()
    for idea in ideas:
        stats.total += 1
        stats.total_votes += idea.vote_count
        if idea.status == IdeaStatusEnum.IN_PROGRESS:
            stats.in_progress += 1
        elif idea.status == IdeaStatusEnum.RELEASED:
            stats.released += 1
    return stats


class IdeaService:
    """Service for the idea collection."""

    def __init__(
        self,
        repos: Repositories,
        ledger: Optional[VoteLedger] = None,
        clock: Callable[[], datetime] = quota_now,
        auto_vote: Optional[bool] = None,
        timeout: Optional[float] = None,
    ):
        self.repos = repos
        self.clock = clock
        self.timeout = timeout
        self.ledger = ledger or VoteLedger(repos, clock=clock, timeout=timeout)
        self.auto_vote = settings.AUTO_VOTE_ON_SUBMIT if auto_vote is None else auto_vote

    async def submit(self, user_id: Optional[str], data: IdeaCreate) -> IdeaRecord:
        """
        Submit a new idea.

        The idea starts "Under Review" with no votes. With auto-vote enabled
        the submitter's vote is cast for it when they have quota left.

        Raises:
            NotAuthenticatedError: No user id.
            IdeaValidationError: Title, description or category is blank.
        """
        if not user_id:
            raise NotAuthenticatedError("Please sign in to submit ideas.")

        title = data.title.strip()
        description = data.description.strip()
        category = data.category.strip()
        missing = [
            name
            for name, value in (("title", title), ("description", description), ("category", category))
            if not value
        ]
        if missing:
            raise IdeaValidationError(f"Please fill in all required fields: {', '.join(missing)}.")

        idea = await guarded(
            self.repos.ideas.create(
                title=title,
                description=description,
                category=category,
                usage_frequency=data.usage_frequency,
                created_by=user_id,
                created_at=self.clock(),
            ),
            "create_idea",
            self.timeout,
        )
        self.repos.changes.notify(ChangeTable.IDEAS, ChangeAction.INSERT, idea.id)
        logger.info("idea_submitted", idea_id=idea.id, user_id=user_id, category=category)

        if self.auto_vote:
            try:
                receipt = await self.ledger.vote(user_id, idea.id)
                idea = idea.model_copy(update={"vote_count": receipt.vote_count})
            except QuotaExhaustedError:
                logger.info("auto_vote_skipped", idea_id=idea.id, user_id=user_id, reason="quota_exhausted")

        return idea

    async def get(self, idea_id: str) -> IdeaWithVotes:
        idea = await guarded(self.repos.ideas.get_by_id(idea_id), "get_idea", self.timeout)
        if idea is None:
            raise IdeaNotFoundError()
        enriched = await self._with_votes([idea])
        return enriched[0]

    async def list_ideas(self, query: Optional[IdeaQuery] = None) -> list[IdeaWithVotes]:
        """All ideas joined with voters, filtered and sorted."""
        ideas = await guarded(self.repos.ideas.list_all(), "list_ideas", self.timeout)
        enriched = await self._with_votes(ideas)
        return filter_and_sort_ideas(enriched, query or IdeaQuery())

    async def stats(self) -> IdeaStats:
        ideas = await guarded(self.repos.ideas.list_all(), "list_ideas", self.timeout)
        return compute_stats(ideas)

    async def categories(self) -> CategoryList:
        """Configured categories followed by any others already in use."""
        ideas = await guarded(self.repos.ideas.list_all(), "list_ideas", self.timeout)
        categories = list(settings.idea_categories_list)
        for idea in sorted(ideas, key=lambda i: i.created_at):
            if idea.category not in categories:
                categories.append(idea.category)
        return CategoryList(categories=categories)

    async def update_status(self, idea_id: str, update: IdeaStatusUpdate) -> IdeaRecord:
        """Administrative status change, optionally replacing notes."""
        idea = await guarded(
            self.repos.ideas.update_status(idea_id, update.status, update.notes, self.clock()),
            "update_idea_status",
            self.timeout,
        )
        if idea is None:
            raise IdeaNotFoundError()

        self.repos.changes.notify(ChangeTable.IDEAS, ChangeAction.UPDATE, idea_id)
        logger.info("idea_status_changed", idea_id=idea_id, status=update.status.value)
        return idea

    async def _with_votes(self, ideas: list[IdeaRecord]) -> list[IdeaWithVotes]:
        """Attach voters and submitter labels from profiles."""
        voters_by_idea = await guarded(
            self.repos.votes.voters_by_idea([idea.id for idea in ideas]),
            "list_voters",
            self.timeout,
        )

        user_ids = [uid for uids in voters_by_idea.values() for uid in uids]
        user_ids.extend(idea.created_by for idea in ideas if idea.created_by)
        profiles = await guarded(self.repos.profiles.get_many(user_ids), "get_profiles", self.timeout)

        enriched = []
        for idea in ideas:
            voters = []
            for uid in voters_by_idea.get(idea.id, []):
                profile = profiles.get(uid)
                voters.append(
                    Voter(
                        user_id=uid,
                        full_name=profile.full_name if profile else None,
                        company_name=profile.company_name if profile else None,
                    )
                )
            submitter = profiles.get(idea.created_by) if idea.created_by else None
            enriched.append(
                IdeaWithVotes(
                    **idea.model_dump(),
                    voters=voters,
                    submitted_by=submitter.full_name if submitter else None,
                    submitted_by_company=submitter.company_name if submitter else None,
                )
            )
        return enriched

"""
In-memory repositories.

Backs the API when STORAGE_BACKEND=memory and the test suite. The store is
an explicit object owned by the application (``app.state.memory_store``),
never a module-level singleton. It mirrors the database rules: votes are
unique per (idea, user, quarter) and vote counts never go below zero.
"""

import asyncio
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional
from uuid import uuid4

from core.exceptions import DuplicateVoteError
from schemas.idea import IdeaRecord, IdeaStatusEnum, UsageFrequencyEnum
from schemas.user import ProfileRecord
from schemas.vote import VoteRecord


@dataclass
class InMemoryStore:
    """Shared record storage for the in-memory repositories."""

    ideas: dict[str, IdeaRecord] = field(default_factory=dict)
    votes: dict[tuple[str, str, str], VoteRecord] = field(default_factory=dict)
    profiles: dict[str, ProfileRecord] = field(default_factory=dict)
    user_locks: dict[tuple[str, str], asyncio.Lock] = field(default_factory=dict)


class InMemoryIdeaRepository:
    """Idea repository over an InMemoryStore."""

    def __init__(self, store: InMemoryStore):
        self.store = store

    async def get_by_id(self, idea_id: str) -> Optional[IdeaRecord]:
        idea = self.store.ideas.get(idea_id)
        return idea.model_copy() if idea else None

    async def list_all(self) -> list[IdeaRecord]:
        ideas = sorted(self.store.ideas.values(), key=lambda i: i.created_at, reverse=True)
        return [idea.model_copy() for idea in ideas]

    async def create(
        self,
        title: str,
        description: str,
        category: str,
        usage_frequency: UsageFrequencyEnum,
        created_by: Optional[str],
        created_at: datetime,
    ) -> IdeaRecord:
        idea = IdeaRecord(
            id=str(uuid4()),
            title=title,
            description=description,
            category=category,
            usage_frequency=usage_frequency,
            status=IdeaStatusEnum.UNDER_REVIEW,
            vote_count=0,
            created_by=created_by,
            created_at=created_at,
            updated_at=created_at,
        )
        self.store.ideas[idea.id] = idea
        return idea.model_copy()

    async def update_status(
        self,
        idea_id: str,
        status: IdeaStatusEnum,
        notes: Optional[str],
        updated_at: datetime,
    ) -> Optional[IdeaRecord]:
        idea = self.store.ideas.get(idea_id)
        if idea is None:
            return None

        changes: dict = {"status": status, "updated_at": updated_at}
        if notes is not None:
            changes["notes"] = notes
        updated = idea.model_copy(update=changes)
        self.store.ideas[idea_id] = updated
        return updated.model_copy()

    async def increment_vote_count(self, idea_id: str) -> int:
        idea = self.store.ideas[idea_id]
        self.store.ideas[idea_id] = idea.model_copy(update={"vote_count": idea.vote_count + 1})
        return idea.vote_count + 1

    async def decrement_vote_count(self, idea_id: str) -> int:
        idea = self.store.ideas[idea_id]
        count = max(0, idea.vote_count - 1)
        self.store.ideas[idea_id] = idea.model_copy(update={"vote_count": count})
        return count


class InMemoryVoteRepository:
    """Vote repository over an InMemoryStore."""

    def __init__(self, store: InMemoryStore):
        self.store = store
        self._held: dict[tuple[str, str], asyncio.Lock] = {}

    async def lock_user_quarter(self, user_id: str, quarter: str) -> None:
        """
        Hold the (user, quarter) lock until ``release_locks``.

        One repository instance serves one request, so a repeated call from the
        same instance is a no-op.
        """
        key = (user_id, quarter)
        if key in self._held:
            return
        lock = self.store.user_locks.setdefault(key, asyncio.Lock())
        await lock.acquire()
        self._held[key] = lock

    def release_locks(self) -> None:
        for lock in self._held.values():
            lock.release()
        self._held.clear()

    async def exists(self, idea_id: str, user_id: str, quarter: str) -> bool:
        return (idea_id, user_id, quarter) in self.store.votes

    async def create(
        self,
        idea_id: str,
        user_id: str,
        quarter: str,
        created_at: datetime,
    ) -> VoteRecord:
        key = (idea_id, user_id, quarter)
        if key in self.store.votes:
            raise DuplicateVoteError(f"vote exists for idea {idea_id} in {quarter}")

        vote = VoteRecord(
            id=str(uuid4()),
            idea_id=idea_id,
            user_id=user_id,
            quarter=quarter,
            created_at=created_at,
        )
        self.store.votes[key] = vote
        return vote

    async def delete(self, idea_id: str, user_id: str, quarter: str) -> Optional[VoteRecord]:
        return self.store.votes.pop((idea_id, user_id, quarter), None)

    async def count_for_user(self, user_id: str, quarter: str) -> int:
        return sum(1 for (_, uid, q) in self.store.votes if uid == user_id and q == quarter)

    async def idea_ids_for_user(self, user_id: str, quarter: str) -> list[str]:
        votes = [v for v in self.store.votes.values() if v.user_id == user_id and v.quarter == quarter]
        return [v.idea_id for v in sorted(votes, key=lambda v: v.created_at)]

    async def voters_by_idea(self, idea_ids: list[str]) -> dict[str, list[str]]:
        wanted = set(idea_ids)
        voters: dict[str, list[str]] = {}
        for vote in sorted(self.store.votes.values(), key=lambda v: v.created_at):
            if vote.idea_id not in wanted:
                continue
            idea_voters = voters.setdefault(vote.idea_id, [])
            # One entry per user, even after re-voting in a later quarter
            if vote.user_id not in idea_voters:
                idea_voters.append(vote.user_id)
        return voters


class InMemoryProfileRepository:
    """Profile repository over an InMemoryStore."""

    def __init__(self, store: InMemoryStore):
        self.store = store

    async def get_by_id(self, user_id: str) -> Optional[ProfileRecord]:
        profile = self.store.profiles.get(user_id)
        return profile.model_copy() if profile else None

    async def get_many(self, user_ids: list[str]) -> dict[str, ProfileRecord]:
        return {uid: self.store.profiles[uid].model_copy() for uid in set(user_ids) if uid in self.store.profiles}

    async def upsert(
        self,
        user_id: str,
        full_name: str,
        company_name: Optional[str],
        email: Optional[str],
        updated_at: datetime,
    ) -> ProfileRecord:
        existing = self.store.profiles.get(user_id)
        profile = ProfileRecord(
            id=user_id,
            email=email or (existing.email if existing else None),
            full_name=full_name,
            company_name=company_name,
            created_at=existing.created_at if existing else updated_at,
            updated_at=updated_at,
        )
        self.store.profiles[user_id] = profile
        return profile.model_copy()

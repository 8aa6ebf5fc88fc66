"""
Repository provider for dependency injection.

This module provides a unified interface for accessing repositories
regardless of the configured storage backend.

Usage:
    from repositories.provider import RepositoriesDep

    # In FastAPI endpoints and dependencies:
    async def some_endpoint(repos: RepositoriesDep):
        idea = await repos.ideas.get_by_id(idea_id)
"""

from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Annotated, AsyncGenerator, Optional, Protocol, runtime_checkable

import structlog
from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import settings
from db.session import get_session_maker
from schemas.board import ChangeAction, ChangeTable
from schemas.idea import IdeaRecord, IdeaStatusEnum, UsageFrequencyEnum
from schemas.user import ProfileRecord
from schemas.vote import VoteRecord
from services.change_feed import ChangeFeed, PendingChanges
from services.store_guard import guarded

if TYPE_CHECKING:
    from repositories.memory_repository import InMemoryStore

logger = structlog.get_logger(__name__)


# =============================================================================
# Repository Protocols (Interfaces)
# =============================================================================


@runtime_checkable
class IdeaRepositoryProtocol(Protocol):
    """Protocol defining idea repository operations."""

    async def get_by_id(self, idea_id: str) -> Optional[IdeaRecord]: ...
    async def list_all(self) -> list[IdeaRecord]: ...
    async def create(
        self,
        title: str,
        description: str,
        category: str,
        usage_frequency: UsageFrequencyEnum,
        created_by: Optional[str],
        created_at: datetime,
    ) -> IdeaRecord: ...
    async def update_status(
        self,
        idea_id: str,
        status: IdeaStatusEnum,
        notes: Optional[str],
        updated_at: datetime,
    ) -> Optional[IdeaRecord]: ...
    async def increment_vote_count(self, idea_id: str) -> int: ...
    async def decrement_vote_count(self, idea_id: str) -> int: ...


@runtime_checkable
class VoteRepositoryProtocol(Protocol):
    """Protocol defining vote repository operations."""

    async def lock_user_quarter(self, user_id: str, quarter: str) -> None: ...
    async def exists(self, idea_id: str, user_id: str, quarter: str) -> bool: ...
    async def create(self, idea_id: str, user_id: str, quarter: str, created_at: datetime) -> VoteRecord: ...
    async def delete(self, idea_id: str, user_id: str, quarter: str) -> Optional[VoteRecord]: ...
    async def count_for_user(self, user_id: str, quarter: str) -> int: ...
    async def idea_ids_for_user(self, user_id: str, quarter: str) -> list[str]: ...
    async def voters_by_idea(self, idea_ids: list[str]) -> dict[str, list[str]]: ...


@runtime_checkable
class ProfileRepositoryProtocol(Protocol):
    """Protocol defining profile repository operations."""

    async def get_by_id(self, user_id: str) -> Optional[ProfileRecord]: ...
    async def get_many(self, user_ids: list[str]) -> dict[str, ProfileRecord]: ...
    async def upsert(
        self,
        user_id: str,
        full_name: str,
        company_name: Optional[str],
        email: Optional[str],
        updated_at: datetime,
    ) -> ProfileRecord: ...


class ChangeNotifier(Protocol):
    """Anything that accepts change notifications (a feed or a buffer)."""

    def notify(self, table: ChangeTable, action: ChangeAction, record_id: str) -> None: ...


@dataclass
class Repositories:
    """Repositories sharing one unit of work, plus where to send change events."""

    ideas: IdeaRepositoryProtocol
    votes: VoteRepositoryProtocol
    profiles: ProfileRepositoryProtocol
    changes: ChangeNotifier


# =============================================================================
# Repository Factory Functions
# =============================================================================


def memory_repositories(store: "InMemoryStore", feed: ChangeFeed) -> Repositories:
    """Build repositories over an in-memory store. Events publish immediately."""
    from repositories.memory_repository import (
        InMemoryIdeaRepository,
        InMemoryProfileRepository,
        InMemoryVoteRepository,
    )

    return Repositories(
        ideas=InMemoryIdeaRepository(store),
        votes=InMemoryVoteRepository(store),
        profiles=InMemoryProfileRepository(store),
        changes=feed,
    )


def sql_repositories(session: AsyncSession, changes: ChangeNotifier) -> Repositories:
    """Build repositories bound to one database session."""
    from repositories.idea_repository import IdeaRepository
    from repositories.profile_repository import ProfileRepository
    from repositories.vote_repository import VoteRepository

    return Repositories(
        ideas=IdeaRepository(session),
        votes=VoteRepository(session),
        profiles=ProfileRepository(session),
        changes=changes,
    )


# =============================================================================
# FastAPI Dependencies
# =============================================================================


async def get_repositories(request: Request) -> AsyncGenerator[Repositories, None]:
    """
    Yield repositories for one request.

    With the postgres backend the whole request is one transaction. The
    commit runs before the response is sent, so a failed commit is reported
    as StoreUnavailableError instead of a success. Change events are
    published only after a successful commit.
    With the memory backend, per-user vote locks are released when the
    request ends.
    """
    feed: ChangeFeed = request.app.state.change_feed

    if settings.STORAGE_BACKEND == "memory":
        repos = memory_repositories(request.app.state.memory_store, feed)
        try:
            yield repos
        finally:
            repos.votes.release_locks()
        return

    pending = PendingChanges(feed)
    async with get_session_maker()() as session:
        try:
            yield sql_repositories(session, pending)
            await guarded(session.commit(), "commit")
        except Exception:
            # Closing the session rolls back whatever was not committed
            pending.discard()
            raise

    published = pending.flush()
    if published:
        logger.debug("change_events_published", count=published)


# Commit must finish before the response is built, hence the function scope
RepositoriesDep = Annotated[Repositories, Depends(get_repositories, scope="function")]

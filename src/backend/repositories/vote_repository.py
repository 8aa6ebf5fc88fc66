"""
Vote repository for database operations.

Each row is one (idea, user, quarter) membership. The database unique
constraint is the final arbiter of duplicates.
"""

from datetime import datetime
from typing import Optional
from uuid import uuid4

from sqlalchemy import and_, delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from core.exceptions import DuplicateVoteError
from models.vote import Vote
from schemas.converters import vote_model_to_record
from schemas.vote import VoteRecord


class VoteRepository:
    """Repository for vote database operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def lock_user_quarter(self, user_id: str, quarter: str) -> None:
        """
        Serialize vote changes for one user and quarter until the transaction ends.

        Row locks cannot stop a concurrent insert of a new row, so quota
        checks take a transaction-scoped advisory lock instead.
        """
        await self.db.execute(select(func.pg_advisory_xact_lock(func.hashtext(f"votes:{user_id}:{quarter}"))))

    async def exists(self, idea_id: str, user_id: str, quarter: str) -> bool:
        """Check if the user holds a vote for the idea in the quarter."""
        result = await self.db.execute(
            select(func.count(Vote.id)).where(
                and_(
                    Vote.idea_id == idea_id,
                    Vote.user_id == user_id,
                    Vote.quarter == quarter,
                )
            )
        )
        count = result.scalar() or 0
        return count > 0

    async def create(
        self,
        idea_id: str,
        user_id: str,
        quarter: str,
        created_at: datetime,
    ) -> VoteRecord:
        """
        Create a vote record.

        Raises:
            DuplicateVoteError: If the uniqueness constraint rejects the row.
        """
        vote = Vote(
            id=str(uuid4()),
            idea_id=idea_id,
            user_id=user_id,
            quarter=quarter,
            created_at=created_at,
        )

        self.db.add(vote)
        try:
            await self.db.flush()
        except IntegrityError as e:
            raise DuplicateVoteError(f"vote exists for idea {idea_id} in {quarter}") from e

        return vote_model_to_record(vote)

    async def delete(self, idea_id: str, user_id: str, quarter: str) -> Optional[VoteRecord]:
        """Delete a vote and return it, or None if no such vote existed."""
        result = await self.db.execute(
            delete(Vote)
            .where(
                and_(
                    Vote.idea_id == idea_id,
                    Vote.user_id == user_id,
                    Vote.quarter == quarter,
                )
            )
            .returning(Vote)
        )
        vote = result.scalar_one_or_none()
        return vote_model_to_record(vote) if vote else None

    async def count_for_user(self, user_id: str, quarter: str) -> int:
        """Count the user's votes in the quarter."""
        result = await self.db.execute(
            select(func.count(Vote.id)).where(
                and_(
                    Vote.user_id == user_id,
                    Vote.quarter == quarter,
                )
            )
        )
        return result.scalar() or 0

    async def idea_ids_for_user(self, user_id: str, quarter: str) -> list[str]:
        """List ideas the user voted for in the quarter, oldest vote first."""
        result = await self.db.execute(
            select(Vote.idea_id)
            .where(
                and_(
                    Vote.user_id == user_id,
                    Vote.quarter == quarter,
                )
            )
            .order_by(Vote.created_at.asc())
        )
        return [str(idea_id) for idea_id in result.scalars().all()]

    async def voters_by_idea(self, idea_ids: list[str]) -> dict[str, list[str]]:
        """
        Map each idea to the users who have voted on it in any quarter.

        A user who voted again after a rollover is listed once, in order of
        their first vote.
        """
        if not idea_ids:
            return {}

        first_voted_at = func.min(Vote.created_at).label("first_voted_at")
        result = await self.db.execute(
            select(Vote.idea_id, Vote.user_id, first_voted_at)
            .where(Vote.idea_id.in_(idea_ids))
            .group_by(Vote.idea_id, Vote.user_id)
            .order_by(first_voted_at.asc())
        )

        voters: dict[str, list[str]] = {}
        for row in result.all():
            voters.setdefault(str(row.idea_id), []).append(row.user_id)
        return voters

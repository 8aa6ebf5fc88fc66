"""
Idea repository for database operations.
"""

from datetime import datetime
from typing import Optional
from uuid import uuid4

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from models.idea import Idea
from schemas.converters import idea_model_to_record
from schemas.idea import IdeaRecord, IdeaStatusEnum, UsageFrequencyEnum


class IdeaRepository:
    """Repository for idea database operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_id(self, idea_id: str) -> Optional[IdeaRecord]:
        """Get an idea by ID."""
        result = await self.db.execute(
            select(Idea).where(Idea.id == idea_id).execution_options(populate_existing=True)
        )
        idea = result.scalar_one_or_none()
        return idea_model_to_record(idea) if idea else None

    async def list_all(self) -> list[IdeaRecord]:
        """List every idea, newest first."""
        result = await self.db.execute(
            select(Idea).order_by(Idea.created_at.desc()).execution_options(populate_existing=True)
        )
        return [idea_model_to_record(idea) for idea in result.scalars().all()]

    async def create(
        self,
        title: str,
        description: str,
        category: str,
        usage_frequency: UsageFrequencyEnum,
        created_by: Optional[str],
        created_at: datetime,
    ) -> IdeaRecord:
        """Create a new idea in the initial review status with no votes."""
        idea = Idea(
            id=str(uuid4()),
            title=title,
            description=description,
            category=category,
            usage_frequency=usage_frequency.value,
            status=IdeaStatusEnum.UNDER_REVIEW.value,
            vote_count=0,
            created_by=created_by,
            created_at=created_at,
            updated_at=created_at,
        )

        self.db.add(idea)
        await self.db.flush()
        await self.db.refresh(idea)

        return idea_model_to_record(idea)

    async def update_status(
        self,
        idea_id: str,
        status: IdeaStatusEnum,
        notes: Optional[str],
        updated_at: datetime,
    ) -> Optional[IdeaRecord]:
        """Set an idea's status, replacing its notes when given."""
        idea = await self.db.get(Idea, idea_id, populate_existing=True)
        if idea is None:
            return None

        idea.status = status.value
        if notes is not None:
            idea.notes = notes
        idea.updated_at = updated_at

        await self.db.flush()
        return idea_model_to_record(idea)

    async def increment_vote_count(self, idea_id: str) -> int:
        """Increment an idea's vote count by one and return the new count."""
        result = await self.db.execute(
            update(Idea)
            .where(Idea.id == idea_id)
            .values(vote_count=Idea.vote_count + 1)
            .returning(Idea.vote_count)
        )
        return result.scalar_one()

    async def decrement_vote_count(self, idea_id: str) -> int:
        """Decrement an idea's vote count by one, never below zero."""
        result = await self.db.execute(
            update(Idea)
            .where(Idea.id == idea_id)
            .values(vote_count=func.greatest(0, Idea.vote_count - 1))
            .returning(Idea.vote_count)
        )
        return result.scalar_one()

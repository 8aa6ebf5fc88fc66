"""
Profile repository for database operations.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from models.profile import Profile
from schemas.converters import profile_model_to_record
from schemas.user import ProfileRecord


class ProfileRepository:
    """Repository for profile database operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_id(self, user_id: str) -> Optional[ProfileRecord]:
        """Get a profile by user ID."""
        result = await self.db.execute(select(Profile).where(Profile.id == user_id))
        profile = result.scalar_one_or_none()
        return profile_model_to_record(profile) if profile else None

    async def get_many(self, user_ids: list[str]) -> dict[str, ProfileRecord]:
        """Fetch profiles for the given user IDs, keyed by ID."""
        if not user_ids:
            return {}
        result = await self.db.execute(select(Profile).where(Profile.id.in_(set(user_ids))))
        return {profile.id: profile_model_to_record(profile) for profile in result.scalars().all()}

    async def upsert(
        self,
        user_id: str,
        full_name: str,
        company_name: Optional[str],
        email: Optional[str],
        updated_at: datetime,
    ) -> ProfileRecord:
        """Create the profile or update its display fields."""
        profile = await self.db.get(Profile, user_id)
        if profile is None:
            profile = Profile(id=user_id, created_at=updated_at)
            self.db.add(profile)

        profile.full_name = full_name
        profile.company_name = company_name
        if email:
            profile.email = email
        profile.updated_at = updated_at

        await self.db.flush()
        return profile_model_to_record(profile)

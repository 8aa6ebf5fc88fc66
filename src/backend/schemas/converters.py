"""
Schema converter functions.

Centralized helper functions for converting SQLAlchemy models to Pydantic schemas.
Repositories return these schemas so services never depend on the storage backend.
"""

from typing import TYPE_CHECKING

from schemas.idea import IdeaRecord, IdeaStatusEnum, UsageFrequencyEnum
from schemas.user import ProfileRecord
from schemas.vote import VoteRecord

if TYPE_CHECKING:
    from models.idea import Idea as IdeaModel
    from models.profile import Profile as ProfileModel
    from models.vote import Vote as VoteModel


def idea_model_to_record(idea: "IdeaModel") -> IdeaRecord:
    """Convert an Idea SQLAlchemy model to an IdeaRecord schema."""
    return IdeaRecord(
        id=str(idea.id),
        title=idea.title,
        description=idea.description,
        category=idea.category,
        usage_frequency=UsageFrequencyEnum(idea.usage_frequency),
        status=IdeaStatusEnum(idea.status),
        vote_count=max(0, idea.vote_count or 0),
        created_by=idea.created_by,
        notes=idea.notes,
        created_at=idea.created_at,
        updated_at=idea.updated_at,
    )


def vote_model_to_record(vote: "VoteModel") -> VoteRecord:
    """Convert a Vote SQLAlchemy model to a VoteRecord schema."""
    return VoteRecord(
        id=str(vote.id),
        idea_id=str(vote.idea_id),
        user_id=vote.user_id,
        quarter=vote.quarter,
        created_at=vote.created_at,
    )


def profile_model_to_record(profile: "ProfileModel") -> ProfileRecord:
    """Convert a Profile SQLAlchemy model to a ProfileRecord schema."""
    return ProfileRecord(
        id=profile.id,
        email=profile.email,
        full_name=profile.full_name,
        company_name=profile.company_name,
        created_at=profile.created_at,
        updated_at=profile.updated_at,
    )

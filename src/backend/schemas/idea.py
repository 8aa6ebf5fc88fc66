"""
Idea-related Pydantic schemas.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class IdeaStatusEnum(str, Enum):
    """Idea lifecycle status."""

    UNDER_REVIEW = "Under Review"
    PLANNED = "Planned"
    IN_PROGRESS = "Development In Progress"
    RELEASED = "Released"
    REVISIT_LATER = "Will be revisited later"


class UsageFrequencyEnum(str, Enum):
    """Expected usage of the proposed improvement."""

    HIGH = "High"
    LOW = "Low"


class IdeaSortEnum(str, Enum):
    """Supported orderings for idea listings."""

    NEWEST = "newest"
    OLDEST = "oldest"
    VOTES = "votes"


class IdeaCreate(BaseModel):
    """Schema for submitting an idea."""

    title: str = Field(..., max_length=200)
    description: str = Field(..., max_length=5000)
    category: str = Field(..., max_length=100)
    usage_frequency: UsageFrequencyEnum = UsageFrequencyEnum.HIGH


class IdeaStatusUpdate(BaseModel):
    """Admin update of an idea's status and notes."""

    status: IdeaStatusEnum
    notes: Optional[str] = Field(None, max_length=2000)


class IdeaRecord(BaseModel):
    """Stored idea as returned by any repository backend."""

    id: str
    title: str
    description: str
    category: str
    usage_frequency: UsageFrequencyEnum
    status: IdeaStatusEnum
    vote_count: int = Field(0, ge=0)
    created_by: Optional[str] = None
    notes: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class Voter(BaseModel):
    """A user holding a vote on an idea, labelled from their profile."""

    user_id: str
    full_name: Optional[str] = None
    company_name: Optional[str] = None


class IdeaWithVotes(IdeaRecord):
    """Idea joined with its voters and submitter labels."""

    voters: list[Voter] = []
    submitted_by: Optional[str] = None
    submitted_by_company: Optional[str] = None


class IdeaQuery(BaseModel):
    """Browse filters. ``None`` means "all"."""

    search: Optional[str] = None
    status: Optional[IdeaStatusEnum] = None
    category: Optional[str] = None
    sort: IdeaSortEnum = IdeaSortEnum.NEWEST


class IdeaStats(BaseModel):
    """Dashboard counters."""

    total: int = 0
    in_progress: int = 0
    released: int = 0
    total_votes: int = 0


class CategoryList(BaseModel):
    """Categories offered for submission and filtering."""

    categories: list[str]

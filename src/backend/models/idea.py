"""
Idea model for PostgreSQL storage.

Stores submitted improvement ideas and their aggregated vote count.
Individual votes live in the votes table.
"""

from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Optional
from uuid import uuid4

from sqlalchemy import DateTime, Index, Integer, String, Text, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from db.base import Base

if TYPE_CHECKING:
    from models.vote import Vote


class IdeaStatus(str, Enum):
    """Idea lifecycle status, set by administrators."""

    UNDER_REVIEW = "Under Review"
    PLANNED = "Planned"
    IN_PROGRESS = "Development In Progress"
    RELEASED = "Released"
    REVISIT_LATER = "Will be revisited later"


class UsageFrequency(str, Enum):
    """How often the submitter expects the improvement to be used."""

    HIGH = "High"
    LOW = "Low"


class Idea(Base):
    """
    Submitted idea.

    vote_count is kept equal to the number of vote rows pointing at the idea.
    It is only changed in the same transaction that inserts or deletes a vote.
    """

    __tablename__ = "ideas"

    __table_args__ = (
        Index("ix_ideas_status_created", "status", "created_at"),
        Index("ix_ideas_category", "category"),
    )

    id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        primary_key=True,
        default=lambda: str(uuid4()),
    )

    title: Mapped[str] = mapped_column(String(200))
    description: Mapped[str] = mapped_column(Text)
    category: Mapped[str] = mapped_column(String(100))
    usage_frequency: Mapped[str] = mapped_column(
        String(10),
        default=UsageFrequency.HIGH.value,
    )

    status: Mapped[str] = mapped_column(
        String(40),
        default=IdeaStatus.UNDER_REVIEW.value,
        index=True,
    )
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    vote_count: Mapped[int] = mapped_column(Integer, default=0)

    # Identity of the submitter as issued by the auth provider
    created_by: Mapped[Optional[str]] = mapped_column(String(64), nullable=True, index=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        index=True,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
    )

    votes: Mapped[list["Vote"]] = relationship(
        "Vote",
        back_populates="idea",
        cascade="all, delete-orphan",
        lazy="noload",
    )

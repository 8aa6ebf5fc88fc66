"""
Vote model for PostgreSQL storage.

One row per (idea, user, quarter). The quarter column is what makes quota
accounting derivable from the ledger: a user's votes used this quarter is
the number of their rows carrying the current quarter identifier.
"""

from datetime import datetime
from typing import TYPE_CHECKING
from uuid import uuid4

from sqlalchemy import DateTime, ForeignKey, Index, String, UniqueConstraint, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from db.base import Base

if TYPE_CHECKING:
    from models.idea import Idea


class Vote(Base):
    """Active or historical vote of one user for one idea."""

    __tablename__ = "votes"

    __table_args__ = (
        UniqueConstraint("idea_id", "user_id", "quarter", name="uq_votes_idea_user_quarter"),
        Index("ix_votes_user_quarter", "user_id", "quarter"),
    )

    id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        primary_key=True,
        default=lambda: str(uuid4()),
    )

    idea_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("ideas.id", ondelete="CASCADE"),
        index=True,
    )
    user_id: Mapped[str] = mapped_column(String(64), index=True)

    # "{year}-Q{n}" at the time the vote was cast
    quarter: Mapped[str] = mapped_column(String(7))

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        index=True,
    )

    idea: Mapped["Idea"] = relationship("Idea", back_populates="votes")

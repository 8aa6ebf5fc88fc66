"""
Board snapshot and change notification schemas.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from schemas.idea import IdeaStats, IdeaWithVotes
from schemas.vote import QuarterInfo


class ChangeTable(str, Enum):
    """Record types that emit change notifications."""

    IDEAS = "ideas"
    VOTES = "votes"


class ChangeAction(str, Enum):
    """Kind of mutation."""

    INSERT = "INSERT"
    UPDATE = "UPDATE"
    DELETE = "DELETE"


class ChangeEvent(BaseModel):
    """
    Notification that an idea or vote changed.

    Carries no state. Subscribers re-query rather than applying deltas.
    """

    table: ChangeTable
    action: ChangeAction
    record_id: str
    occurred_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class BoardSnapshot(BaseModel):
    """Everything a client needs to render the board for one user."""

    ideas: list[IdeaWithVotes]
    stats: IdeaStats
    voted_idea_ids: list[str] = []
    quota: Optional[QuarterInfo] = None

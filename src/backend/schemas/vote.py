"""
Vote-related Pydantic schemas.

These schemas handle the quarterly vote quota and the vote ledger.
"""

from datetime import datetime

from pydantic import BaseModel, Field


class VoteRecord(BaseModel):
    """Stored vote as returned by any repository backend."""

    id: str
    idea_id: str
    user_id: str
    quarter: str = Field(..., description='Quarter the vote counts against, e.g. "2024-Q2"')
    created_at: datetime

    model_config = {"from_attributes": True}


class QuotaRecord(BaseModel):
    """A user's vote usage for one quarter, derived from the ledger."""

    user_id: str
    quarter: str
    votes_used: int = Field(..., ge=0)
    total_votes: int

    @property
    def remaining_votes(self) -> int:
        """Votes left, clamped to [0, total]."""
        return max(0, min(self.total_votes, self.total_votes - self.votes_used))


class QuarterInfo(BaseModel):
    """Quota window details for display ("votes reset on ...")."""

    current_quarter: str
    quarter_start: datetime
    next_quarter_start: datetime
    votes_used: int
    total_votes: int
    remaining_votes: int


class VoteReceipt(BaseModel):
    """Response after successfully casting or removing a vote."""

    success: bool = True
    message: str
    idea_id: str
    vote_count: int
    remaining_votes: int


class VoteStatus(BaseModel):
    """Whether the user holds a vote for an idea this quarter."""

    idea_id: str
    has_voted: bool


class MyVotes(BaseModel):
    """Ideas the user voted for in the current quarter."""

    quarter: str
    idea_ids: list[str]
    remaining_votes: int


class ErrorResponse(BaseModel):
    """Failure payload for domain errors."""

    success: bool = False
    error: str
    title: str
    detail: str

"""Schemas module initialization."""

from schemas.board import BoardSnapshot, ChangeEvent
from schemas.idea import IdeaCreate, IdeaRecord, IdeaStatusUpdate, IdeaWithVotes
from schemas.user import CurrentUser, ProfileRecord, ProfileUpdate
from schemas.vote import QuarterInfo, QuotaRecord, VoteReceipt, VoteRecord, VoteStatus

__all__ = [
    "BoardSnapshot",
    "ChangeEvent",
    "IdeaCreate",
    "IdeaRecord",
    "IdeaStatusUpdate",
    "IdeaWithVotes",
    "CurrentUser",
    "ProfileRecord",
    "ProfileUpdate",
    "QuarterInfo",
    "QuotaRecord",
    "VoteReceipt",
    "VoteRecord",
    "VoteStatus",
]

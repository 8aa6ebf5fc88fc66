"""
Vote management endpoints.

Each user has a fixed number of votes per calendar quarter. Voting twice for
the same idea, or unvoting an idea without a vote, is rejected without side
effects, so clients can safely retry after a 503.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from api.deps import get_current_user, get_vote_ledger
from core.quarters import current_quarter
from schemas.user import CurrentUser
from schemas.vote import MyVotes, QuarterInfo, VoteReceipt, VoteStatus
from services.vote_ledger import VoteLedger

router = APIRouter()


@router.get("/quota", response_model=QuarterInfo)
async def get_quota(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    ledger: Annotated[VoteLedger, Depends(get_vote_ledger)],
) -> QuarterInfo:
    """Votes used and remaining this quarter, and when they reset."""
    return await ledger.quarter_info(current_user.id)


@router.get("/mine", response_model=MyVotes)
async def list_my_votes(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    ledger: Annotated[VoteLedger, Depends(get_vote_ledger)],
) -> MyVotes:
    """Ideas the current user voted for this quarter."""
    idea_ids = await ledger.voted_idea_ids(current_user.id)
    remaining = await ledger.quota.remaining(current_user.id, ledger.clock())
    return MyVotes(
        quarter=current_quarter(ledger.clock()),
        idea_ids=idea_ids,
        remaining_votes=remaining,
    )


@router.get("/status/{idea_id}", response_model=VoteStatus)
async def check_vote_status(
    idea_id: str,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    ledger: Annotated[VoteLedger, Depends(get_vote_ledger)],
) -> VoteStatus:
    """Check if the current user has voted for an idea this quarter."""
    has_voted = await ledger.has_voted(current_user.id, idea_id)
    return VoteStatus(idea_id=idea_id, has_voted=has_voted)


@router.post("/{idea_id}", response_model=VoteReceipt, status_code=status.HTTP_201_CREATED)
async def cast_vote(
    idea_id: str,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    ledger: Annotated[VoteLedger, Depends(get_vote_ledger)],
) -> VoteReceipt:
    """
    Vote for an idea.

    Requirements:
    - User must be authenticated
    - User must not already have voted for the idea this quarter
    - User must have votes left this quarter
    """
    return await ledger.vote(current_user.id, idea_id)


@router.delete("/{idea_id}", response_model=VoteReceipt)
async def retract_vote(
    idea_id: str,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    ledger: Annotated[VoteLedger, Depends(get_vote_ledger)],
) -> VoteReceipt:
    """Remove the current user's vote for an idea, returning the vote to their quota."""
    return await ledger.unvote(current_user.id, idea_id)

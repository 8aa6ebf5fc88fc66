"""
Idea endpoints.

Browsing is public. Submitting requires a signed-in user and status changes
require an admin.
"""

from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Query, status

from api.deps import get_current_admin_user, get_current_user, get_idea_service
from schemas.idea import (
    CategoryList,
    IdeaCreate,
    IdeaQuery,
    IdeaRecord,
    IdeaSortEnum,
    IdeaStats,
    IdeaStatusEnum,
    IdeaStatusUpdate,
    IdeaWithVotes,
)
from schemas.user import CurrentUser
from services.idea_service import IdeaService

router = APIRouter()


@router.get("", response_model=list[IdeaWithVotes])
async def list_ideas(
    service: Annotated[IdeaService, Depends(get_idea_service)],
    search: Optional[str] = Query(None, max_length=200),
    idea_status: Optional[IdeaStatusEnum] = Query(None, alias="status"),
    category: Optional[str] = Query(None, max_length=100),
    sort: IdeaSortEnum = Query(IdeaSortEnum.NEWEST),
) -> list[IdeaWithVotes]:
    """
    List ideas with their voters.

    Filters combine: search matches title or description, status and
    category match exactly. Sort by newest, oldest or votes.
    """
    query = IdeaQuery(search=search, status=idea_status, category=category, sort=sort)
    return await service.list_ideas(query)


@router.get("/stats", response_model=IdeaStats)
async def get_idea_stats(
    service: Annotated[IdeaService, Depends(get_idea_service)],
) -> IdeaStats:
    """Totals for the dashboard header."""
    return await service.stats()


@router.get("/categories", response_model=CategoryList)
async def list_categories(
    service: Annotated[IdeaService, Depends(get_idea_service)],
) -> CategoryList:
    """Categories available for submission and filtering."""
    return await service.categories()


@router.get("/{idea_id}", response_model=IdeaWithVotes)
async def get_idea(
    idea_id: str,
    service: Annotated[IdeaService, Depends(get_idea_service)],
) -> IdeaWithVotes:
    """Get one idea with its voters."""
    return await service.get(idea_id)


@router.post("", response_model=IdeaRecord, status_code=status.HTTP_201_CREATED)
async def submit_idea(
    idea_data: IdeaCreate,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    service: Annotated[IdeaService, Depends(get_idea_service)],
) -> IdeaRecord:
    """
    Submit a new idea.

    The idea starts "Under Review". When auto-voting is enabled the
    submitter's vote is cast for it if they have votes left.
    """
    return await service.submit(current_user.id, idea_data)


@router.patch("/{idea_id}/status", response_model=IdeaRecord)
async def update_idea_status(
    idea_id: str,
    update: IdeaStatusUpdate,
    admin: Annotated[CurrentUser, Depends(get_current_admin_user)],
    service: Annotated[IdeaService, Depends(get_idea_service)],
) -> IdeaRecord:
    """Move an idea to a new status (admin only)."""
    return await service.update_status(idea_id, update)

"""
User profile endpoints.

Profiles only hold display details; accounts live with the identity provider.
"""

from typing import Annotated

import structlog
from fastapi import APIRouter, Depends

from api.deps import get_current_user
from core.quarters import quota_now
from repositories.provider import RepositoriesDep
from schemas.user import CurrentUser, ProfileRecord, ProfileUpdate
from services.store_guard import guarded

logger = structlog.get_logger(__name__)

router = APIRouter()


@router.get("/me/profile", response_model=ProfileRecord)
async def get_my_profile(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    repos: RepositoriesDep,
) -> ProfileRecord:
    """Get the caller's profile, or an empty one if none was saved yet."""
    profile = await guarded(repos.profiles.get_by_id(current_user.id), "get_profile")
    if profile is None:
        return ProfileRecord(id=current_user.id, email=current_user.email)
    return profile


@router.put("/me/profile", response_model=ProfileRecord)
async def update_my_profile(
    profile_data: ProfileUpdate,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    repos: RepositoriesDep,
) -> ProfileRecord:
    """Create or update the caller's display name and company."""
    profile = await guarded(
        repos.profiles.upsert(
            user_id=current_user.id,
            full_name=profile_data.full_name.strip(),
            company_name=profile_data.company_name.strip() if profile_data.company_name else None,
            email=current_user.email,
            updated_at=quota_now(),
        ),
        "upsert_profile",
    )
    logger.info("profile_updated", user_id=current_user.id)
    return profile

"""
Shared dependencies for API endpoints.

Includes:
- Bearer token authentication (identity comes from the external provider)
- Service construction over the request's repositories
"""

from typing import Annotated

import structlog
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from core.exceptions import NotAuthenticatedError
from core.security import decode_token
from repositories.provider import RepositoriesDep
from schemas.user import CurrentUser
from services.board_service import BoardService
from services.idea_service import IdeaService
from services.vote_ledger import VoteLedger

logger = structlog.get_logger(__name__)

security_optional = HTTPBearer(auto_error=False)


# =============================================================================
# Helper Functions
# =============================================================================


def _payload_to_user(payload: dict) -> CurrentUser | None:
    """
    Convert a decoded token payload to a CurrentUser.

    Returns None when the payload has no subject.
    """
    user_id = payload.get("sub")
    if not user_id:
        return None
    return CurrentUser(
        id=str(user_id),
        email=payload.get("email"),
        is_admin=bool(payload.get("is_admin", False)),
    )


# =============================================================================
# User Authentication (JWT-based)
# =============================================================================


async def get_current_user_optional(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security_optional)],
) -> CurrentUser | None:
    """
    Optionally extract the current user from the bearer token.

    Returns None if no token is provided or the token is invalid.
    """
    if credentials is None:
        return None

    payload = decode_token(credentials.credentials)
    if payload is None:
        logger.info("invalid_token_presented")
        return None

    return _payload_to_user(payload)


async def get_current_user(
    current_user: Annotated[CurrentUser | None, Depends(get_current_user_optional)],
) -> CurrentUser:
    """
    Require an authenticated user.

    Raises:
        NotAuthenticatedError: If no valid token was supplied.
    """
    if current_user is None:
        raise NotAuthenticatedError()
    return current_user


async def get_current_admin_user(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> CurrentUser:
    """
    Ensure the current user is an admin.

    Raises:
        HTTPException: If user is not an admin.
    """
    if not current_user.is_admin:
        logger.warning("non_admin_access_attempt", user_id=current_user.id)
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return current_user


# =============================================================================
# Services
# =============================================================================


async def get_vote_ledger(
    repos: RepositoriesDep,
) -> VoteLedger:
    return VoteLedger(repos)


async def get_idea_service(
    repos: RepositoriesDep,
    ledger: Annotated[VoteLedger, Depends(get_vote_ledger)],
) -> IdeaService:
    return IdeaService(repos, ledger=ledger)


async def get_board_service(
    ideas: Annotated[IdeaService, Depends(get_idea_service)],
) -> BoardService:
    return BoardService(ideas)

"""
API v1 router aggregating all endpoints.
"""

from fastapi import APIRouter

from api.v1.board import router as board_router
from api.v1.ideas import router as ideas_router
from api.v1.users import router as users_router
from api.v1.votes import router as votes_router

router = APIRouter()

router.include_router(ideas_router, prefix="/ideas", tags=["Ideas"])
router.include_router(votes_router, prefix="/votes", tags=["Votes"])
router.include_router(users_router, prefix="/users", tags=["Users"])
router.include_router(board_router, prefix="/board", tags=["Board"])

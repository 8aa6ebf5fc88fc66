"""
Board endpoints.

``GET /board`` returns a full snapshot. ``GET /board/events`` is a
server-sent event stream that tells clients when to fetch a new snapshot.
"""

from contextlib import aclosing
from typing import Annotated, AsyncGenerator, Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import StreamingResponse

from api.deps import get_board_service, get_current_user_optional
from schemas.board import BoardSnapshot
from schemas.user import CurrentUser
from services.board_service import BoardService, watch_changes
from services.change_feed import ChangeFeed

router = APIRouter()


@router.get("", response_model=BoardSnapshot)
async def get_board(
    board: Annotated[BoardService, Depends(get_board_service)],
    current_user: Annotated[Optional[CurrentUser], Depends(get_current_user_optional)],
) -> BoardSnapshot:
    """Ideas, stats and, for signed-in users, their votes and quota."""
    return await board.snapshot(current_user.id if current_user else None)


async def sse_stream(feed: ChangeFeed, request: Request) -> AsyncGenerator[str, None]:
    """Format change events as server-sent events, with comment heartbeats."""
    async with aclosing(watch_changes(feed, request.is_disconnected)) as events:
        async for event in events:
            if event is None:
                yield ": keep-alive\n\n"
                continue
            yield f"event: {event.table.value}\ndata: {event.model_dump_json()}\n\n"


@router.get("/events")
async def stream_board_events(request: Request) -> StreamingResponse:
    """Stream idea and vote change notifications."""
    feed: ChangeFeed = request.app.state.change_feed
    return StreamingResponse(
        sse_stream(feed, request),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache", "X-Accel-Buffering": "no"},
    )

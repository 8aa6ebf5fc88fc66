"""
Bounded, failure-mapped calls into the backing store.

The store has no timeouts of its own. Every repository call made by the
services goes through ``guarded`` so that a hung or failing store surfaces as
a retryable StoreUnavailableError instead of a hang or a raw driver error.
"""

import asyncio
from typing import Awaitable, Optional, TypeVar

import structlog
from sqlalchemy.exc import SQLAlchemyError

from core.config import settings
from core.exceptions import StoreUnavailableError

logger = structlog.get_logger(__name__)

T = TypeVar("T")


async def guarded(awaitable: Awaitable[T], operation: str, timeout: Optional[float] = None) -> T:
    """
    Await a store call with a timeout.

    Raises:
        StoreUnavailableError: On timeout, connection failure or driver error.
    """
    limit = timeout if timeout is not None else settings.STORE_TIMEOUT_SECONDS
    try:
        return await asyncio.wait_for(awaitable, timeout=limit)
    except asyncio.TimeoutError as e:
        logger.warning("store_timeout", operation=operation, timeout_seconds=limit)
        raise StoreUnavailableError("The idea store did not respond in time. Please try again.") from e
    except (SQLAlchemyError, OSError) as e:
        logger.error(
            "store_error",
            operation=operation,
            error=str(e),
            error_type=type(e).__name__,
        )
        raise StoreUnavailableError() from e

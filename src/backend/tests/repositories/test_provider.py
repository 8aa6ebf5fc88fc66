"""
Tests for the repository provider dependency.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from core.exceptions import StoreUnavailableError
from repositories.provider import Repositories, get_repositories
from schemas.board import ChangeAction, ChangeTable
from services.change_feed import ChangeFeed


def make_request(feed: ChangeFeed, store=None) -> MagicMock:
    request = MagicMock()
    request.app.state.change_feed = feed
    request.app.state.memory_store = store
    return request


@pytest.mark.unit
class TestGetRepositories:
    """Test get_repositories."""

    async def test_memory_backend_publishes_immediately(self, memory_store) -> None:
        feed = ChangeFeed(queue_size=5)
        queue = feed.subscribe()
        gen = get_repositories(make_request(feed, memory_store))

        repos = await gen.__anext__()
        assert isinstance(repos, Repositories)
        repos.changes.notify(ChangeTable.IDEAS, ChangeAction.INSERT, "idea-1")

        assert queue.get_nowait().record_id == "idea-1"
        with pytest.raises(StopAsyncIteration):
            await gen.__anext__()

    async def test_postgres_publishes_after_commit(self, postgres_backend) -> None:
        from repositories.vote_repository import VoteRepository

        feed = ChangeFeed(queue_size=5)
        queue = feed.subscribe()
        gen = get_repositories(make_request(feed))

        repos = await gen.__anext__()
        assert isinstance(repos.votes, VoteRepository)
        assert repos.votes.db is postgres_backend
        repos.changes.notify(ChangeTable.VOTES, ChangeAction.INSERT, "idea-1")
        assert queue.empty()

        with pytest.raises(StopAsyncIteration):
            await gen.__anext__()

        postgres_backend.commit.assert_awaited_once()
        assert queue.get_nowait().table == ChangeTable.VOTES

    async def test_postgres_discards_on_endpoint_error(self, postgres_backend) -> None:
        feed = ChangeFeed(queue_size=5)
        queue = feed.subscribe()
        gen = get_repositories(make_request(feed))

        repos = await gen.__anext__()
        repos.changes.notify(ChangeTable.VOTES, ChangeAction.INSERT, "idea-1")

        with pytest.raises(RuntimeError):
            await gen.athrow(RuntimeError("endpoint failed"))

        postgres_backend.commit.assert_not_awaited()
        assert queue.empty()

    async def test_failed_commit_is_store_unavailable(self, postgres_backend) -> None:
        postgres_backend.commit = AsyncMock(side_effect=OperationalError("COMMIT", {}, Exception("connection lost")))
        feed = ChangeFeed(queue_size=5)
        queue = feed.subscribe()
        gen = get_repositories(make_request(feed))

        repos = await gen.__anext__()
        repos.changes.notify(ChangeTable.VOTES, ChangeAction.INSERT, "idea-1")

        with pytest.raises(StoreUnavailableError):
            await gen.__anext__()

        assert queue.empty()

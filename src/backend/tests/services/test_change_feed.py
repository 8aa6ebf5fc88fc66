"""
Tests for the change feed, board snapshots and the board event stream.
"""

import pytest

from schemas.board import ChangeAction, ChangeEvent, ChangeTable
from services.board_service import BoardService, watch_changes
from services.change_feed import ChangeFeed, PendingChanges
from services.idea_service import IdeaService
from services.quota_tracker import QuotaTracker
from services.vote_ledger import VoteLedger


@pytest.mark.unit
class TestChangeFeed:
    """Test ChangeFeed fan-out."""

    def test_publish_reaches_every_subscriber(self) -> None:
        feed = ChangeFeed(queue_size=5)
        first = feed.subscribe()
        second = feed.subscribe()

        feed.notify(ChangeTable.IDEAS, ChangeAction.INSERT, "idea-1")

        assert first.get_nowait().record_id == "idea-1"
        assert second.get_nowait().record_id == "idea-1"

    def test_full_queue_drops_oldest(self) -> None:
        feed = ChangeFeed(queue_size=2)
        queue = feed.subscribe()

        for idea_id in ("a", "b", "c"):
            feed.notify(ChangeTable.VOTES, ChangeAction.INSERT, idea_id)

        assert [queue.get_nowait().record_id, queue.get_nowait().record_id] == ["b", "c"]

    def test_unsubscribe_stops_delivery(self) -> None:
        feed = ChangeFeed(queue_size=5)
        queue = feed.subscribe()
        feed.unsubscribe(queue)
        feed.unsubscribe(queue)

        feed.notify(ChangeTable.IDEAS, ChangeAction.UPDATE, "idea-1")

        assert queue.empty()
        assert feed.subscriber_count == 0

    async def test_subscription_context(self) -> None:
        feed = ChangeFeed(queue_size=5)

        async with feed.subscription() as queue:
            assert feed.subscriber_count == 1
            feed.notify(ChangeTable.IDEAS, ChangeAction.INSERT, "idea-1")
            assert (await queue.get()).table == ChangeTable.IDEAS

        assert feed.subscriber_count == 0


@pytest.mark.unit
class TestPendingChanges:
    """Test events buffered until commit."""

    def test_flush_publishes_in_order(self) -> None:
        feed = ChangeFeed(queue_size=5)
        queue = feed.subscribe()
        pending = PendingChanges(feed)

        pending.notify(ChangeTable.IDEAS, ChangeAction.INSERT, "idea-1")
        pending.notify(ChangeTable.VOTES, ChangeAction.INSERT, "idea-1")
        assert queue.empty()

        assert pending.flush() == 2
        assert queue.get_nowait().table == ChangeTable.IDEAS
        assert queue.get_nowait().table == ChangeTable.VOTES
        assert pending.flush() == 0

    def test_discard_drops_events(self) -> None:
        feed = ChangeFeed(queue_size=5)
        queue = feed.subscribe()
        pending = PendingChanges(feed)

        pending.notify(ChangeTable.VOTES, ChangeAction.DELETE, "idea-1")
        pending.discard()

        assert pending.flush() == 0
        assert queue.empty()


@pytest.mark.unit
class TestBoardService:
    """Test board snapshots."""

    @pytest.fixture
    def board(self, repos, clock) -> BoardService:
        ledger = VoteLedger(repos, quota=QuotaTracker(repos.votes, total_per_quarter=5, clock=clock), clock=clock)
        return BoardService(IdeaService(repos, ledger=ledger, clock=clock, auto_vote=False))

    async def test_anonymous_snapshot(self, board: BoardService, make_idea) -> None:
        await make_idea()

        snapshot = await board.snapshot(None)

        assert len(snapshot.ideas) == 1
        assert snapshot.stats.total == 1
        assert snapshot.voted_idea_ids == []
        assert snapshot.quota is None

    async def test_user_snapshot_reflects_votes(self, board: BoardService, make_idea) -> None:
        idea = await make_idea()
        await board.ledger.vote("user-1", idea.id)

        snapshot = await board.snapshot("user-1")

        assert snapshot.voted_idea_ids == [idea.id]
        assert snapshot.quota.remaining_votes == 4
        assert snapshot.ideas[0].vote_count == 1
        assert snapshot.stats.total_votes == 1


@pytest.mark.unit
class TestWatchChanges:
    """Test the change stream used by the board events endpoint."""

    async def test_yields_heartbeat_then_event(self) -> None:
        feed = ChangeFeed(queue_size=5)
        disconnected = False

        async def is_disconnected() -> bool:
            return disconnected

        stream = watch_changes(feed, is_disconnected, heartbeat_seconds=0.01)

        assert await stream.__anext__() is None
        assert feed.subscriber_count == 1

        feed.notify(ChangeTable.VOTES, ChangeAction.INSERT, "idea-1")
        event = await stream.__anext__()
        assert isinstance(event, ChangeEvent)
        assert event.record_id == "idea-1"

        disconnected = True
        with pytest.raises(StopAsyncIteration):
            await stream.__anext__()
        assert feed.subscriber_count == 0

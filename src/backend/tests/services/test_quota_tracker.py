"""
Tests for quarterly quota tracking.
"""

from datetime import datetime, timezone

import pytest

from core.exceptions import NotAuthenticatedError, QuotaExhaustedError
from services.quota_tracker import QuotaTracker


@pytest.fixture
def tracker(repos, clock) -> QuotaTracker:
    return QuotaTracker(repos.votes, total_per_quarter=5, clock=clock)


async def add_votes(repos, user_id: str, quarter: str, count: int, created_at: datetime) -> None:
    for i in range(count):
        await repos.votes.create(f"idea-{quarter}-{i}", user_id, quarter, created_at)


@pytest.mark.unit
class TestQuotaTracker:
    """Test QuotaTracker."""

    async def test_new_user_has_full_quota(self, tracker: QuotaTracker) -> None:
        record = await tracker.load_or_initialize("user-1")

        assert record.quarter == "2024-Q2"
        assert record.votes_used == 0
        assert record.remaining_votes == 5

    async def test_remaining_counts_current_quarter_votes(self, tracker, repos, clock) -> None:
        await add_votes(repos, "user-1", "2024-Q2", 3, clock())

        assert await tracker.remaining("user-1") == 2

    async def test_other_users_do_not_count(self, tracker, repos, clock) -> None:
        await add_votes(repos, "user-2", "2024-Q2", 5, clock())

        assert await tracker.remaining("user-1") == 5

    async def test_prior_quarter_votes_do_not_count(self, tracker, repos) -> None:
        await add_votes(repos, "user-1", "2024-Q1", 5, datetime(2024, 2, 1, tzinfo=timezone.utc))

        record = await tracker.load_or_initialize("user-1")

        assert record.quarter == "2024-Q2"
        assert record.remaining_votes == 5

    async def test_consume_returns_remaining_after_vote(self, tracker, repos, clock) -> None:
        await add_votes(repos, "user-1", "2024-Q2", 4, clock())

        assert await tracker.consume("user-1") == 0

    async def test_consume_raises_when_exhausted(self, tracker, repos, clock) -> None:
        await add_votes(repos, "user-1", "2024-Q2", 5, clock())

        with pytest.raises(QuotaExhaustedError):
            await tracker.consume("user-1")

    async def test_remaining_never_negative(self, repos, clock) -> None:
        # Quota lowered after votes were cast
        await add_votes(repos, "user-1", "2024-Q2", 4, clock())
        tracker = QuotaTracker(repos.votes, total_per_quarter=2, clock=clock)

        info = await tracker.quarter_info("user-1")

        assert info.remaining_votes == 0
        assert info.votes_used == 2

    async def test_release_never_exceeds_total(self, tracker: QuotaTracker) -> None:
        assert await tracker.release("user-1") == 5

    async def test_requires_user(self, tracker: QuotaTracker) -> None:
        with pytest.raises(NotAuthenticatedError):
            await tracker.load_or_initialize("")

    async def test_quarter_info_window(self, tracker: QuotaTracker) -> None:
        info = await tracker.quarter_info("user-1")

        assert info.current_quarter == "2024-Q2"
        assert info.quarter_start == datetime(2024, 4, 1, tzinfo=timezone.utc)
        assert info.next_quarter_start == datetime(2024, 7, 1, tzinfo=timezone.utc)
        assert info.total_votes == 5

    def test_default_total_from_settings(self, repos) -> None:
        from core.config import settings

        assert QuotaTracker(repos.votes).total_per_quarter == settings.VOTES_PER_QUARTER

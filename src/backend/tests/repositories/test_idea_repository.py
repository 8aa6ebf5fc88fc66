"""
Tests for idea repository.
"""

from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest

from repositories.idea_repository import IdeaRepository
from schemas.idea import IdeaStatusEnum, UsageFrequencyEnum

NOW = datetime(2024, 5, 15, 12, 0, tzinfo=timezone.utc)


def make_idea_model(**overrides) -> MagicMock:
    data = {
        "id": "idea-1",
        "title": "Dark Mode Toggle",
        "description": "Add a dark mode option.",
        "category": "User Interface",
        "usage_frequency": "High",
        "status": "Under Review",
        "vote_count": 0,
        "created_by": "user-1",
        "notes": None,
        "created_at": NOW,
        "updated_at": NOW,
    }
    data.update(overrides)
    return MagicMock(**data)


@pytest.mark.unit
class TestIdeaRepository:
    """Test IdeaRepository operations."""

    async def test_get_by_id_returns_record(self, mock_db_session) -> None:
        mock_result = MagicMock()
        mock_result.scalar_one_or_none = MagicMock(return_value=make_idea_model(vote_count=4))
        mock_db_session.execute = AsyncMock(return_value=mock_result)

        repo = IdeaRepository(mock_db_session)
        idea = await repo.get_by_id("idea-1")

        assert idea.id == "idea-1"
        assert idea.vote_count == 4
        assert idea.status == IdeaStatusEnum.UNDER_REVIEW

    async def test_get_by_id_missing(self, mock_db_session) -> None:
        mock_result = MagicMock()
        mock_result.scalar_one_or_none = MagicMock(return_value=None)
        mock_db_session.execute = AsyncMock(return_value=mock_result)

        repo = IdeaRepository(mock_db_session)

        assert await repo.get_by_id("missing") is None

    async def test_create_starts_under_review(self, mock_db_session) -> None:
        repo = IdeaRepository(mock_db_session)

        idea = await repo.create(
            title="Dark Mode Toggle",
            description="Add a dark mode option.",
            category="User Interface",
            usage_frequency=UsageFrequencyEnum.LOW,
            created_by="user-1",
            created_at=NOW,
        )

        mock_db_session.add.assert_called_once()
        mock_db_session.flush.assert_awaited_once()
        assert idea.status == IdeaStatusEnum.UNDER_REVIEW
        assert idea.usage_frequency == UsageFrequencyEnum.LOW
        assert idea.vote_count == 0

    async def test_update_status_missing(self, mock_db_session) -> None:
        mock_db_session.get = AsyncMock(return_value=None)

        repo = IdeaRepository(mock_db_session)

        assert await repo.update_status("missing", IdeaStatusEnum.PLANNED, None, NOW) is None

    async def test_update_status_keeps_notes_when_none(self, mock_db_session) -> None:
        model = make_idea_model(notes="Existing")
        mock_db_session.get = AsyncMock(return_value=model)

        repo = IdeaRepository(mock_db_session)
        idea = await repo.update_status("idea-1", IdeaStatusEnum.RELEASED, None, NOW)

        assert idea.status == IdeaStatusEnum.RELEASED
        assert idea.notes == "Existing"
        mock_db_session.flush.assert_awaited_once()

    async def test_increment_returns_new_count(self, mock_db_session) -> None:
        mock_result = MagicMock()
        mock_result.scalar_one = MagicMock(return_value=7)
        mock_db_session.execute = AsyncMock(return_value=mock_result)

        repo = IdeaRepository(mock_db_session)

        assert await repo.increment_vote_count("idea-1") == 7

    async def test_decrement_returns_new_count(self, mock_db_session) -> None:
        mock_result = MagicMock()
        mock_result.scalar_one = MagicMock(return_value=0)
        mock_db_session.execute = AsyncMock(return_value=mock_result)

        repo = IdeaRepository(mock_db_session)

        assert await repo.decrement_vote_count("idea-1") == 0

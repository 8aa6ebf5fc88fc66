"""
Tests for schema converter functions.
"""

from datetime import datetime, timezone
from unittest.mock import MagicMock
from uuid import uuid4

import pytest

from schemas.converters import idea_model_to_record, profile_model_to_record, vote_model_to_record
from schemas.idea import IdeaStatusEnum, UsageFrequencyEnum

NOW = datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc)


@pytest.mark.unit
class TestIdeaModelToRecord:
    """Test idea_model_to_record."""

    def test_converts_enums_and_uuid(self) -> None:
        idea_id = uuid4()
        model = MagicMock(
            id=idea_id,
            title="Dark Mode Toggle",
            description="Add a dark mode option.",
            category="User Interface",
            usage_frequency="Low",
            status="Will be revisited later",
            vote_count=8,
            created_by="user-1",
            notes=None,
            created_at=NOW,
            updated_at=None,
        )

        record = idea_model_to_record(model)

        assert record.id == str(idea_id)
        assert record.usage_frequency == UsageFrequencyEnum.LOW
        assert record.status == IdeaStatusEnum.REVISIT_LATER
        assert record.vote_count == 8

    def test_negative_count_clamped(self) -> None:
        model = MagicMock(
            id="idea-1",
            title="t",
            description="d",
            category="c",
            usage_frequency="High",
            status="Planned",
            vote_count=-1,
            created_by=None,
            notes=None,
            created_at=NOW,
            updated_at=NOW,
        )

        assert idea_model_to_record(model).vote_count == 0


@pytest.mark.unit
class TestVoteAndProfileConverters:
    """Test vote_model_to_record and profile_model_to_record."""

    def test_vote(self) -> None:
        idea_id = uuid4()
        model = MagicMock(id="vote-1", idea_id=idea_id, user_id="user-1", quarter="2024-Q1", created_at=NOW)

        record = vote_model_to_record(model)

        assert record.idea_id == str(idea_id)
        assert record.quarter == "2024-Q1"

    def test_profile(self) -> None:
        model = MagicMock(
            id="user-1",
            email="sarah@example.com",
            full_name="Sarah Chen",
            company_name=None,
            created_at=NOW,
            updated_at=NOW,
        )

        record = profile_model_to_record(model)

        assert record.full_name == "Sarah Chen"
        assert record.company_name is None

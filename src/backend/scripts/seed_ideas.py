"""
Seed script to create sample ideas for development/demo.

Ideas start with no votes so that vote counts always match the vote ledger.
Run with: python -m scripts.seed_ideas
"""

import asyncio
import sys
from datetime import datetime, timezone
from pathlib import Path

# Allow running as a plain script as well as with -m
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy import func, select

from db.session import close_db, init_db, session_scope
from models.idea import Idea, IdeaStatus, UsageFrequency

SEED_IDEAS = [
    {
        "title": "Dark Mode Toggle",
        "description": (
            "Add a dark mode option to improve user experience during night time usage. "
            "This would help reduce eye strain and provide better accessibility."
        ),
        "category": "User Interface",
        "usage_frequency": UsageFrequency.HIGH,
        "status": IdeaStatus.IN_PROGRESS,
        "created_at": datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc),
        "notes": "Development started. Expected completion in Q2 2024.",
    },
    {
        "title": "Real-time Collaboration",
        "description": (
            "Enable multiple users to work on the same document simultaneously "
            "with live cursor tracking and change highlighting."
        ),
        "category": "New Feature",
        "usage_frequency": UsageFrequency.HIGH,
        "status": IdeaStatus.PLANNED,
        "created_at": datetime(2024, 1, 12, 14, 20, tzinfo=timezone.utc),
        "notes": "High priority feature. Architecture planning in progress.",
    },
    {
        "title": "Mobile App Performance",
        "description": (
            "Optimize the mobile application to reduce loading times and improve "
            "responsiveness on older devices."
        ),
        "category": "Performance",
        "usage_frequency": UsageFrequency.HIGH,
        "status": IdeaStatus.RELEASED,
        "created_at": datetime(2023, 12, 8, 9, 15, tzinfo=timezone.utc),
        "notes": "Completed! App performance improved by 40% on average.",
    },
    {
        "title": "Advanced Search Filters",
        "description": (
            "Add more granular search filters including date ranges, custom tags, "
            "and advanced boolean operations."
        ),
        "category": "User Interface",
        "usage_frequency": UsageFrequency.LOW,
        "status": IdeaStatus.UNDER_REVIEW,
        "created_at": datetime(2024, 1, 18, 16, 45, tzinfo=timezone.utc),
        "notes": None,
    },
    {
        "title": "API Rate Limiting",
        "description": (
            "Implement intelligent rate limiting to prevent abuse while maintaining "
            "good user experience for legitimate usage."
        ),
        "category": "Security",
        "usage_frequency": UsageFrequency.LOW,
        "status": IdeaStatus.REVISIT_LATER,
        "created_at": datetime(2024, 1, 10, 11, 30, tzinfo=timezone.utc),
        "notes": "Lower priority. Will revisit after core features are completed.",
    },
]


async def seed_ideas() -> None:
    await init_db()
    try:
        async with session_scope() as session:
            existing = await session.scalar(select(func.count()).select_from(Idea))
            if existing:
                print("Ideas already exist in database. Skipping seed.")
                return

            for idea_data in SEED_IDEAS:
                session.add(
                    Idea(
                        title=idea_data["title"],
                        description=idea_data["description"],
                        category=idea_data["category"],
                        usage_frequency=idea_data["usage_frequency"].value,
                        status=idea_data["status"].value,
                        notes=idea_data["notes"],
                        vote_count=0,
                        created_at=idea_data["created_at"],
                        updated_at=idea_data["created_at"],
                    )
                )
                print(f"Created idea: {idea_data['title']} ({idea_data['status'].value})")

        print(f"\n✅ Created {len(SEED_IDEAS)} ideas successfully!")
    finally:
        await close_db()


if __name__ == "__main__":
    asyncio.run(seed_ideas())

"""Database models module."""

from models.idea import Idea, IdeaStatus, UsageFrequency
from models.profile import Profile
from models.vote import Vote

__all__ = [
    "Idea",
    "IdeaStatus",
    "UsageFrequency",
    "Profile",
    "Vote",
]

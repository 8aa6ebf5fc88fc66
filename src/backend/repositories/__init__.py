"""Repository modules for database access."""

from repositories.idea_repository import IdeaRepository
from repositories.memory_repository import InMemoryStore
from repositories.profile_repository import ProfileRepository
from repositories.vote_repository import VoteRepository

__all__ = [
    "IdeaRepository",
    "InMemoryStore",
    "ProfileRepository",
    "VoteRepository",
]

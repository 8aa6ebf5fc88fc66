"""
Domain errors for voting and idea management.

Every error is recoverable and user-facing. Each carries a stable ``kind``
for API clients plus a notification title and message.
"""

from enum import Enum


class ErrorKind(str, Enum):
    """Stable identifiers for failure kinds reported to clients."""

    ALREADY_VOTED = "already_voted"
    NOT_VOTED = "not_voted"
    QUOTA_EXHAUSTED = "quota_exhausted"
    NOT_AUTHENTICATED = "not_authenticated"
    STORE_UNAVAILABLE = "store_unavailable"
    IDEA_NOT_FOUND = "idea_not_found"
    VALIDATION_FAILED = "validation_failed"


class IdeaBoxError(Exception):
    """Base exception for IdeaBox domain failures."""

    kind: ErrorKind
    title: str = "Error"
    default_message: str = "Something went wrong."
    retryable: bool = False

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class AlreadyVotedError(IdeaBoxError):
    """The user already has an active vote for this idea."""

    kind = ErrorKind.ALREADY_VOTED
    title = "Already Voted"
    default_message = "You have already voted for this idea."


class NotVotedError(IdeaBoxError):
    """The user has no active vote for this idea."""

    kind = ErrorKind.NOT_VOTED
    title = "Not Voted"
    default_message = "You haven't voted for this idea."


class QuotaExhaustedError(IdeaBoxError):
    """The user has used every vote for the current quarter."""

    kind = ErrorKind.QUOTA_EXHAUSTED
    title = "No Votes Remaining"
    default_message = "You have used all your votes for this quarter. Votes reset every quarter."


class NotAuthenticatedError(IdeaBoxError):
    """No user identity was supplied."""

    kind = ErrorKind.NOT_AUTHENTICATED
    title = "Authentication Required"
    default_message = "Please sign in to vote for ideas."


class StoreUnavailableError(IdeaBoxError):
    """The backing store failed or timed out. Safe to retry."""

    kind = ErrorKind.STORE_UNAVAILABLE
    title = "Service Unavailable"
    default_message = "The idea store is temporarily unavailable. Please try again."
    retryable = True


class IdeaNotFoundError(IdeaBoxError):
    """The referenced idea does not exist."""

    kind = ErrorKind.IDEA_NOT_FOUND
    title = "Idea Not Found"
    default_message = "This idea does not exist."


class IdeaValidationError(IdeaBoxError):
    """A submitted idea is missing required fields."""

    kind = ErrorKind.VALIDATION_FAILED
    title = "Missing Information"
    default_message = "Please fill in all required fields."


class DuplicateVoteError(Exception):
    """Raised by repositories when the (idea, user, quarter) uniqueness rule rejects an insert."""

    pass

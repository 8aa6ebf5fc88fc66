"""Database module."""

from db.session import close_db, init_db, session_scope

__all__ = ["session_scope", "init_db", "close_db"]

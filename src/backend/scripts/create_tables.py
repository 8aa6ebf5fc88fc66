"""
Create the IdeaBox schema (ideas, votes, profiles) in PostgreSQL.

Existing tables are left untouched, so the script is safe to re-run.
Run with: python -m scripts.create_tables
"""

import asyncio
import sys
from pathlib import Path

# Allow running as a plain script as well as with -m
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.config import settings
from db.session import close_db, init_db


async def create_tables() -> None:
    print(f"Creating tables on {settings.POSTGRES_HOST}/{settings.POSTGRES_DB}...")
    try:
        await init_db()
    finally:
        await close_db()
    print("✅ Schema ready")


if __name__ == "__main__":
    asyncio.run(create_tables())

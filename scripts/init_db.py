"""Script to initialize the database."""

import asyncio

from app.database import database
from app.models import metadata


async def init_db() -> None:
    """Initialize the database by creating all tables."""
    engine = await database.get_engine()
    async with engine.begin() as conn:
        await conn.run_sync(metadata.create_all)

    print("✓ Database initialized successfully!")
    await database.dispose()


if __name__ == "__main__":
    asyncio.run(init_db())

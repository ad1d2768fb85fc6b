import asyncio

from gympro.db.session import engine
from gympro.db.base import Base

# Every model must be imported so its table is registered on Base.metadata
import gympro.models  # noqa: F401


async def ensure_tables_exist() -> None:
    """
    Create any missing tables (called on application startup)
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


if __name__ == "__main__":
    asyncio.run(ensure_tables_exist())

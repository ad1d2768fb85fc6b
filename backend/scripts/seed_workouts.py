"""
Demo workout catalog
- creates the tables if needed
- adds the demo workout categories and videos that are not there yet
- also runs the achievement and shop seeders

Usage:
    python scripts/seed_workouts.py
"""

import asyncio
import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from gympro.core.logging_config import setup_logging
from gympro.core.config import settings
from gympro.db.init_db import ensure_tables_exist
from gympro.db.seed import seed_reference_data, seed_workout_catalog
from gympro.db.session import SessionLocal


async def main():
    await ensure_tables_exist()
    async with SessionLocal() as db:
        await seed_reference_data(db)
        created = await seed_workout_catalog(db)
    print(f"✅ Workout catalog seeded: {created} new categories")


if __name__ == "__main__":
    setup_logging(settings.LOG_LEVEL, settings.LOG_DIR)
    asyncio.run(main())

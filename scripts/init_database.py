#!/usr/bin/env python3
"""Initialize database tables and seed monitoring task definitions."""

import asyncio
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from loguru import logger

from boostx.config.constants import DEFAULT_MONITORING_TASKS
from boostx.config.database import async_session_maker, engine
from boostx.models import Base
from boostx.repositories.monitoring_task_repository import MonitoringTaskRepository

# Configure logger for script
logger.remove()
logger.add(sys.stderr, level="INFO")


async def init_database() -> None:
    """Create all database tables."""
    logger.info("Connecting to database...")

    async with engine.begin() as conn:
        logger.info("Creating tables (checkfirst=True)...")
        await conn.run_sync(Base.metadata.create_all, checkfirst=True)

    async with async_session_maker() as session:
        created = await MonitoringTaskRepository(session).seed_defaults(DEFAULT_MONITORING_TASKS)
        await session.commit()
    if created:
        logger.info(f"Seeded monitoring tasks: {', '.join(k.value for k in created)}")

    await engine.dispose()
    logger.success("Database tables created successfully!")


if __name__ == "__main__":
    asyncio.run(init_database())

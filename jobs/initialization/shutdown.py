"""
Graceful shutdown of the reconciliation process.

Stops timers (in-flight ticks finish), closes HTTP sessions and the
database engine.
"""

from loguru import logger

from boostx.config.database import engine
from boostx.services.blockchain.gateway import close_ledger_gateway
from jobs.health import set_task_scheduler
from jobs.scheduler import TaskScheduler


async def shutdown_handler(task_scheduler: TaskScheduler | None) -> None:
    """Handle graceful shutdown."""
    logger.info("Graceful shutdown initiated...")

    set_task_scheduler(None)
    if task_scheduler is not None:
        try:
            await task_scheduler.shutdown()
        except Exception as e:
            logger.warning(f"Error stopping scheduler: {e}")

    try:
        await close_ledger_gateway()
    except Exception as e:
        logger.warning(f"Error closing ledger gateway: {e}")

    try:
        await engine.dispose()
        logger.info("Database connections closed")
    except Exception as e:
        logger.warning(f"Error closing database: {e}")

    logger.info("Graceful shutdown complete")

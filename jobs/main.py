"""
Reconciliation engine entry point.

Usage:
    python -m jobs.main
"""

import asyncio
import signal

from loguru import logger

from boostx.config.database import async_session_maker
from boostx.config.settings import settings
from boostx.services.blockchain.gateway import LedgerGateway, get_ledger_gateway
from boostx.services.deposit.gas_policy import GasTopUpPolicy
from boostx.utils.exceptions import ConfigurationError
from jobs.health import set_task_scheduler, start_health_server, stop_health_server
from jobs.initialization.logging import setup_logging
from jobs.initialization.shutdown import shutdown_handler
from jobs.registry import build_handler_table
from jobs.scheduler import TaskScheduler


def _build_gateway() -> LedgerGateway | None:
    try:
        return get_ledger_gateway()
    except ConfigurationError as e:
        logger.error(f"Ledger gateway not available: {e}")
        return None


async def main() -> None:
    """Run until SIGINT/SIGTERM."""
    setup_logging()

    handlers = build_handler_table(
        async_session_maker,
        _build_gateway(),
        GasTopUpPolicy.from_settings(),
    )
    task_scheduler = TaskScheduler(async_session_maker, handlers)

    stop_event = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, stop_event.set)

    runner = None
    try:
        await task_scheduler.boot()
        set_task_scheduler(task_scheduler)
        runner, _ = await start_health_server(port=settings.health_check_port)

        await stop_event.wait()
        logger.info("Stop signal received")
    finally:
        if runner is not None:
            await stop_health_server(runner)
        await shutdown_handler(task_scheduler)


if __name__ == "__main__":
    asyncio.run(main())

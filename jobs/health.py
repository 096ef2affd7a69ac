"""
Health check server for the reconciliation process.

Provides HTTP endpoints reporting the task scheduler state.
"""

import asyncio
from typing import TYPE_CHECKING

from aiohttp import web
from loguru import logger

if TYPE_CHECKING:
    from jobs.scheduler import TaskScheduler

# Global scheduler reference for health checks
_task_scheduler: "TaskScheduler | None" = None


def set_task_scheduler(task_scheduler: "TaskScheduler | None") -> None:
    """
    Set the task scheduler instance for health checks.

    Args:
        task_scheduler: TaskScheduler to monitor (None to unregister)
    """
    global _task_scheduler
    _task_scheduler = task_scheduler
    if task_scheduler is not None:
        logger.info("Task scheduler registered for health checks")


async def health_handler(request: web.Request) -> web.Response:
    """
    Health check endpoint.

    Returns:
        JSON response with per-task status
    """
    if _task_scheduler is None:
        return web.json_response(
            {
                "status": "unhealthy",
                "error": "Scheduler not initialized",
            },
            status=503,
        )

    try:
        is_running = _task_scheduler.scheduler.running
        tasks = _task_scheduler.status()

        return web.json_response(
            {
                "status": "healthy" if is_running else "stopped",
                "scheduler_running": is_running,
                "running_tasks": sum(1 for t in tasks.values() if t["running"]),
                "tasks": tasks,
            }
        )
    except Exception as e:
        logger.error(f"Health check failed: {e}")
        return web.json_response(
            {
                "status": "unhealthy",
                "error": str(e),
            },
            status=503,
        )


async def readiness_handler(request: web.Request) -> web.Response:
    """Ready once the scheduler has booted and its loop is running."""
    if _task_scheduler is None or not _task_scheduler.scheduler.running:
        return web.json_response(
            {
                "status": "not_ready",
                "ready": False,
            },
            status=503,
        )

    return web.json_response(
        {
            "status": "ready",
            "ready": True,
        }
    )


async def liveness_handler(request: web.Request) -> web.Response:
    return web.json_response(
        {
            "status": "alive",
            "alive": True,
        }
    )


def create_health_app() -> web.Application:
    app = web.Application()
    app.router.add_get("/health", health_handler)
    app.router.add_get("/readiness", readiness_handler)
    app.router.add_get("/liveness", liveness_handler)
    return app


async def start_health_server(
    host: str = "0.0.0.0",
    port: int = 8081,
) -> tuple[web.AppRunner, web.TCPSite]:
    """
    Start health check server.

    Args:
        host: Host to bind to
        port: Port to bind to

    Returns:
        Tuple of (AppRunner, TCPSite) for cleanup
    """
    runner = web.AppRunner(create_health_app())
    await runner.setup()
    site = web.TCPSite(runner, host, port)
    await site.start()

    logger.info(f"Health check server started on {host}:{port} (/health, /readiness, /liveness)")
    return runner, site


async def stop_health_server(
    runner: web.AppRunner,
    timeout: int = 5,
) -> None:
    """
    Stop health check server gracefully.

    Args:
        runner: AppRunner to cleanup
        timeout: Maximum time to wait for cleanup in seconds
    """
    try:
        await asyncio.wait_for(runner.cleanup(), timeout=timeout)
        logger.info("Health check server stopped")
    except TimeoutError:
        logger.warning(f"Health check server cleanup timed out after {timeout}s")

"""
Task scheduler.

Owns the recurring timers of the monitoring tasks. Definitions (enabled
flag, interval) live in the ``monitoring_tasks`` table; this class keeps the
in-memory job handles in sync with them.

Guarantees:
- at most one APScheduler job per task kind
- a kind never overlaps with itself (scheduled or manual ticks)
- a failing or slow tick is logged and never cancels the job
"""

import asyncio
import time
from collections.abc import Awaitable, Callable, Mapping
from typing import Any

from apscheduler.job import Job
from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from boostx.config.constants import DEFAULT_MONITORING_TASKS
from boostx.config.settings import settings
from boostx.models.enums import TaskKind
from boostx.repositories.monitoring_task_repository import MonitoringTaskRepository
from boostx.utils.exceptions import ValidationError

TaskHandler = Callable[[], Awaitable[None]]


def parse_task_kind(kind: TaskKind | str) -> TaskKind | None:
    """
    Parse an external kind value.

    Returns:
        TaskKind or None for unknown values
    """
    if isinstance(kind, TaskKind):
        return kind
    try:
        return TaskKind(kind)
    except ValueError:
        return None


class TaskScheduler:
    """Starts, stops and dispatches the monitoring task timers."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        handlers: Mapping[TaskKind, TaskHandler],
        scheduler: AsyncIOScheduler | None = None,
        tick_timeout: float | None = None,
    ) -> None:
        """
        Initialize task scheduler.

        Args:
            session_factory: Session factory for task definitions
            handlers: Handler table built at startup
            scheduler: APScheduler instance (created if None)
            tick_timeout: Upper bound for one tick in seconds
        """
        self._session_factory = session_factory
        self._handlers: dict[TaskKind, TaskHandler] = dict(handlers)
        self._scheduler = scheduler or AsyncIOScheduler(timezone="UTC")
        self._tick_timeout = (
            tick_timeout if tick_timeout is not None else settings.task_tick_timeout_seconds
        )
        self._jobs: dict[TaskKind, Job] = {}
        self._busy: set[TaskKind] = set()
        self._lock = asyncio.Lock()
        self._shut_down = False

    @property
    def scheduler(self) -> AsyncIOScheduler:
        return self._scheduler

    def _ensure_started(self) -> None:
        if not self._scheduler.running:
            self._scheduler.start()
            logger.info("APScheduler started")

    def _resolve(self, kind: TaskKind | str, action: str) -> TaskKind | None:
        task_kind = parse_task_kind(kind)
        if task_kind is None:
            logger.warning(f"[Scheduler] Cannot {action} unknown task kind {kind!r}")
        return task_kind

    def is_running(self, kind: TaskKind | str) -> bool:
        task_kind = parse_task_kind(kind)
        return task_kind is not None and task_kind in self._jobs

    def is_busy(self, kind: TaskKind | str) -> bool:
        task_kind = parse_task_kind(kind)
        return task_kind is not None and task_kind in self._busy

    async def boot(self) -> list[TaskKind]:
        """
        Seed missing task rows, then start every enabled task.

        Returns:
            Kinds running after boot
        """
        async with self._session_factory() as session:
            repo = MonitoringTaskRepository(session)
            created = await repo.seed_defaults(DEFAULT_MONITORING_TASKS)
            await session.commit()
            tasks = await repo.find_all()
            enabled = [t.kind for t in tasks if t.is_running]

        if created:
            logger.info(
                f"[Scheduler] Seeded task definitions: {', '.join(k.value for k in created)}"
            )

        started = []
        for kind in enabled:
            if await self.start(kind):
                started.append(TaskKind(kind))

        logger.info(
            f"[Scheduler] Boot complete, running: "
            f"{', '.join(k.value for k in started) or 'none'}"
        )
        return started

    async def start(self, kind: TaskKind | str) -> bool:
        """
        Start the timer of a task kind.

        No-op if already running. Refused if the persisted row is missing or
        disabled, or no handler is registered.

        Returns:
            True if the kind is running afterwards
        """
        task_kind = self._resolve(kind, "start")
        if task_kind is None:
            return False

        async with self._lock:
            if task_kind in self._jobs:
                logger.debug(f"[Scheduler] {task_kind.value} already running")
                return True

            async with self._session_factory() as session:
                task = await MonitoringTaskRepository(session).get_by_kind(task_kind)
                if task is None:
                    logger.warning(f"[Scheduler] No task definition for {task_kind.value}")
                    return False
                is_enabled = task.is_running
                interval = task.interval_seconds

            if not is_enabled:
                logger.info(f"[Scheduler] {task_kind.value} is disabled, not starting")
                return False

            if task_kind not in self._handlers:
                logger.warning(f"[Scheduler] No handler registered for {task_kind.value}")
                return False

            self._ensure_started()
            job = self._scheduler.add_job(
                self._run_tick,
                "interval",
                seconds=interval,
                args=[task_kind],
                id=f"monitoring:{task_kind.value}",
                name=f"{task_kind.value} monitoring",
                max_instances=1,
                coalesce=True,
                replace_existing=True,
            )
            self._jobs[task_kind] = job

        logger.info(f"[Scheduler] Started {task_kind.value} every {interval}s")
        return True

    async def stop(self, kind: TaskKind | str) -> bool:
        """
        Remove the timer of a task kind. In-flight ticks run to completion.

        Returns:
            True if a timer was removed
        """
        task_kind = self._resolve(kind, "stop")
        if task_kind is None:
            return False

        async with self._lock:
            job = self._jobs.pop(task_kind, None)
            if job is None:
                return False
            try:
                job.remove()
            except JobLookupError:
                logger.debug(f"[Scheduler] Job for {task_kind.value} was already gone")

        logger.info(f"[Scheduler] Stopped {task_kind.value}")
        return True

    async def reconcile_with_persisted(self, kind: TaskKind | str) -> bool:
        """
        Align the timer with the persisted enabled flag.

        Returns:
            True if the kind is running afterwards
        """
        task_kind = self._resolve(kind, "reconcile")
        if task_kind is None:
            return False

        async with self._session_factory() as session:
            task = await MonitoringTaskRepository(session).get_by_kind(task_kind)
            should_run = task is not None and task.is_running

        if should_run:
            return await self.start(task_kind)
        await self.stop(task_kind)
        return False

    async def set_enabled(self, kind: TaskKind | str, enabled: bool) -> bool:
        """
        Persist the enabled flag and apply it.

        Returns:
            True if the kind is running afterwards
        """
        task_kind = self._resolve(kind, "update")
        if task_kind is None:
            return False

        async with self._session_factory() as session:
            task = await MonitoringTaskRepository(session).set_running(task_kind, enabled)
            if task is None:
                logger.warning(f"[Scheduler] No task definition for {task_kind.value}")
                return False
            await session.commit()

        logger.info(f"[Scheduler] {task_kind.value} {'enabled' if enabled else 'disabled'}")
        return await self.reconcile_with_persisted(task_kind)

    async def set_interval(self, kind: TaskKind | str, seconds: int) -> bool:
        """
        Persist a new interval and reschedule a running timer in place.

        Returns:
            False if the kind has no definition

        Raises:
            ValidationError: If seconds <= 0
        """
        if seconds <= 0:
            raise ValidationError(f"Interval must be positive, got {seconds}")

        task_kind = self._resolve(kind, "update")
        if task_kind is None:
            return False

        async with self._session_factory() as session:
            task = await MonitoringTaskRepository(session).set_interval(task_kind, seconds)
            if task is None:
                logger.warning(f"[Scheduler] No task definition for {task_kind.value}")
                return False
            await session.commit()

        async with self._lock:
            job = self._jobs.get(task_kind)
            if job is not None:
                self._jobs[task_kind] = job.reschedule("interval", seconds=seconds)

        logger.info(f"[Scheduler] {task_kind.value} interval set to {seconds}s")
        return True

    async def trigger(self, kind: TaskKind | str) -> bool:
        """
        Run one tick now, outside the timer.

        Returns:
            True if the tick ran and succeeded
        """
        task_kind = self._resolve(kind, "trigger")
        if task_kind is None:
            return False
        if task_kind not in self._handlers:
            logger.warning(f"[Scheduler] No handler registered for {task_kind.value}")
            return False
        return await self._run_tick(task_kind)

    async def _run_tick(self, kind: TaskKind) -> bool:
        """Invoke the handler of a kind. Never raises."""
        if kind in self._busy:
            logger.warning(f"[Scheduler] {kind.value} tick skipped, previous tick still running")
            return False

        handler = self._handlers[kind]
        self._busy.add(kind)
        started = time.monotonic()
        ok = False
        try:
            await asyncio.wait_for(handler(), timeout=self._tick_timeout)
            ok = True
        except TimeoutError:
            logger.error(f"[Scheduler] {kind.value} tick timed out after {self._tick_timeout}s")
        except Exception as e:
            logger.exception(f"[Scheduler] {kind.value} tick failed: {e}")
        finally:
            self._busy.discard(kind)

        logger.debug(f"[Scheduler] {kind.value} tick finished in {time.monotonic() - started:.2f}s")
        return ok

    def status(self) -> dict[str, dict[str, Any]]:
        """Snapshot of every task kind for health reporting."""
        snapshot: dict[str, dict[str, Any]] = {}
        for kind in TaskKind:
            job = self._jobs.get(kind)
            next_run = getattr(job, "next_run_time", None) if job else None
            snapshot[kind.value] = {
                "running": job is not None,
                "busy": kind in self._busy,
                "has_handler": kind in self._handlers,
                "interval_seconds": (
                    int(job.trigger.interval.total_seconds()) if job is not None else None
                ),
                "next_run_time": next_run.isoformat() if next_run else None,
            }
        return snapshot

    async def wait_idle(self, timeout: float) -> bool:
        """Wait for in-flight ticks to finish. Returns False on timeout."""
        deadline = time.monotonic() + timeout
        while self._busy:
            if time.monotonic() >= deadline:
                return False
            await asyncio.sleep(0.1)
        return True

    async def shutdown(self, timeout: float = 30) -> None:
        """Remove every timer and let in-flight ticks finish. Repeated calls are no-ops."""
        if self._shut_down:
            return
        self._shut_down = True

        for kind in list(self._jobs):
            await self.stop(kind)

        if not await self.wait_idle(timeout):
            logger.warning(
                f"[Scheduler] Ticks still running after {timeout}s: "
                f"{', '.join(k.value for k in self._busy)}"
            )

        if self._scheduler.running:
            self._scheduler.shutdown(wait=False)
            # AsyncIOScheduler stops on the next loop iteration
            await asyncio.sleep(0)
        logger.info("[Scheduler] Shut down")

"""
Monitoring task repository.

Persisted registry of recurring task definitions.
"""

from collections.abc import Mapping

from sqlalchemy.ext.asyncio import AsyncSession

from boostx.models.enums import TaskKind
from boostx.models.monitoring_task import MonitoringTask
from boostx.repositories.base import BaseRepository


class MonitoringTaskRepository(BaseRepository[MonitoringTask]):
    """Monitoring task repository."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(MonitoringTask, session)

    async def get_by_kind(self, kind: TaskKind) -> MonitoringTask | None:
        """Get the task row for a kind."""
        return await self.get_by(kind=kind.value)

    async def seed_defaults(
        self, defaults: Mapping[TaskKind, tuple[bool, int]]
    ) -> list[TaskKind]:
        """
        Insert missing task rows. Existing rows are left untouched.

        Args:
            defaults: kind -> (is_running, interval_seconds)

        Returns:
            Kinds that were created
        """
        created: list[TaskKind] = []
        for kind, (is_running, interval) in defaults.items():
            if await self.get_by_kind(kind) is not None:
                continue
            await self.create(
                kind=kind.value,
                is_running=is_running,
                interval_seconds=interval,
            )
            created.append(kind)
        return created

    async def set_running(self, kind: TaskKind, is_running: bool) -> MonitoringTask | None:
        """Persist the enabled flag. Returns None if the kind has no row."""
        task = await self.get_by_kind(kind)
        if task is None:
            return None
        task.is_running = is_running
        await self.session.flush()
        return task

    async def set_interval(self, kind: TaskKind, interval_seconds: int) -> MonitoringTask | None:
        """Persist the tick interval. Returns None if the kind has no row."""
        task = await self.get_by_kind(kind)
        if task is None:
            return None
        task.interval_seconds = interval_seconds
        await self.session.flush()
        return task

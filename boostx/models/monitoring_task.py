"""
MonitoringTask model.

Persisted definition of a recurring background task.
"""

from datetime import datetime

from sqlalchemy import Boolean, CheckConstraint, DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from boostx.models.base import Base, utcnow
from boostx.models.enums import TaskKind


class MonitoringTask(Base):
    """One row per task kind: enabled flag and tick interval."""

    __tablename__ = "monitoring_tasks"
    __table_args__ = (
        CheckConstraint(
            "interval_seconds > 0", name="check_monitoring_interval_positive"
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    # deposit, mining, crawler, coinPrice, masterWithdraw
    kind: Mapped[str] = mapped_column(String(32), unique=True, nullable=False)
    is_running: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    interval_seconds: Mapped[int] = mapped_column(Integer, nullable=False, default=120)

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )

    @property
    def task_kind(self) -> TaskKind:
        return TaskKind(self.kind)

    def __repr__(self) -> str:
        return (
            f"<MonitoringTask(kind={self.kind}, is_running={self.is_running}, "
            f"interval={self.interval_seconds}s)>"
        )

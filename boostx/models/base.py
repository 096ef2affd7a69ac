"""
Declarative base for all models.
"""

from datetime import UTC, datetime

from sqlalchemy.orm import DeclarativeBase


def utcnow() -> datetime:
    """Timezone-aware current time used for column defaults."""
    return datetime.now(UTC)


class Base(DeclarativeBase):
    """Base class for SQLAlchemy models."""

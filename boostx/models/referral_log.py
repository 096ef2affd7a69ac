"""
ReferralLog model.

Audit row for every commission payment made by the cascade.
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import DECIMAL, DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from boostx.models.base import Base, utcnow


class ReferralLog(Base):
    """Append-only commission audit."""

    __tablename__ = "referral_logs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    group_leader_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    payer_user_name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    payee_user_name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    package_type: Mapped[str] = mapped_column(String(100), nullable=False)
    profit: Mapped[Decimal] = mapped_column(DECIMAL(18, 8), nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, index=True
    )

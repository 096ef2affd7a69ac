"""
ReferrerEdge model.

Package-specific commission edge: who gets paid, and at what rate, when
user_name buys a package of package_type.
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import DECIMAL, CheckConstraint, DateTime, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from boostx.models.base import Base, utcnow


class ReferrerEdge(Base):
    """At most one edge per (user_name, package_type)."""

    __tablename__ = "referrer_edges"
    __table_args__ = (
        UniqueConstraint("user_name", "package_type", name="uq_referrer_edge_user_package"),
        CheckConstraint(
            "fee_rate >= 0 AND fee_rate <= 100", name="check_referrer_edge_fee_rate_range"
        ),
        CheckConstraint(
            "fee_rate_leader >= 0 AND fee_rate_leader <= 100",
            name="check_referrer_edge_leader_rate_range",
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    user_name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    referrer_user_name: Mapped[str] = mapped_column(String(255), nullable=False)
    package_type: Mapped[str] = mapped_column(String(100), nullable=False)

    # Percentages (0-100)
    fee_rate: Mapped[Decimal] = mapped_column(
        DECIMAL(5, 2), nullable=False, default=Decimal("0")
    )
    group_leader_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    fee_rate_leader: Mapped[Decimal] = mapped_column(
        DECIMAL(5, 2), nullable=False, default=Decimal("0")
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    def __repr__(self) -> str:
        return (
            f"<ReferrerEdge({self.user_name} -> {self.referrer_user_name}, "
            f"package={self.package_type}, rate={self.fee_rate}%)>"
        )

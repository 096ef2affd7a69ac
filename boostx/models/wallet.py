"""
Wallet model.

Custodial on-chain wallet owned by exactly one user.
"""

from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import DECIMAL, CheckConstraint, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from boostx.models.base import Base, utcnow

if TYPE_CHECKING:
    from boostx.models.user import User


class Wallet(Base):
    """Wallet model - cached balances of a custodial address."""

    __tablename__ = "wallets"
    __table_args__ = (
        CheckConstraint(
            "stable_token_balance >= 0", name="check_wallet_token_balance_non_negative"
        ),
        CheckConstraint(
            "native_gas_balance >= 0", name="check_wallet_gas_balance_non_negative"
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )

    address: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    withdraw_address: Mapped[str | None] = mapped_column(String(255), nullable=True)

    # Cached balances
    native_gas_balance: Mapped[Decimal] = mapped_column(
        DECIMAL(36, 18), nullable=False, default=Decimal("0")
    )
    stable_token_balance: Mapped[Decimal] = mapped_column(
        DECIMAL(18, 8), nullable=False, default=Decimal("0")
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )

    user: Mapped["User"] = relationship("User", back_populates="wallets")

    def __repr__(self) -> str:
        return (
            f"<Wallet(id={self.id}, user_id={self.user_id}, "
            f"token={self.stable_token_balance}, gas={self.native_gas_balance})>"
        )

"""
TransactionRecord model.

Append-only ledger of credited on-chain events. The unique tx_hash backs
the dedup check done before any balance mutation.
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import DECIMAL, CheckConstraint, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from boostx.models.base import Base, utcnow


class TransactionRecord(Base):
    """Deposit or withdrawal record."""

    __tablename__ = "transactions"
    __table_args__ = (
        CheckConstraint("amount >= 0", name="check_transaction_amount_non_negative"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    type: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    amount: Mapped[Decimal] = mapped_column(DECIMAL(18, 8), nullable=False)
    token: Mapped[str] = mapped_column(String(20), nullable=False)
    tx_hash: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)

    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    wallet_id: Mapped[int] = mapped_column(
        ForeignKey("wallets.id", ondelete="CASCADE"), nullable=False, index=True
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    def __repr__(self) -> str:
        return (
            f"<TransactionRecord(id={self.id}, type={self.type}, "
            f"amount={self.amount} {self.token}, tx_hash={self.tx_hash})>"
        )

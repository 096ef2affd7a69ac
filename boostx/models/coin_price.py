"""
CoinPrice model.

Price history written by the coinPrice task.
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import DECIMAL, DateTime, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from boostx.models.base import Base, utcnow


class CoinPrice(Base):
    """Quoted price of a coin in the currency mapped to a UI language."""

    __tablename__ = "coin_prices"
    __table_args__ = (
        Index("idx_coin_price_coin_language", "coin_name", "language"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    coin_name: Mapped[str] = mapped_column(String(20), nullable=False)
    language: Mapped[str] = mapped_column(String(8), nullable=False)
    currency: Mapped[str] = mapped_column(String(10), nullable=False)
    price: Mapped[Decimal] = mapped_column(DECIMAL(28, 8), nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

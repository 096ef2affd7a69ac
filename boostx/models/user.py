"""
User model.

Only the fields the reconciliation engine reads: the username used as the
referral key and the account-level referrer.
"""

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from boostx.models.base import Base, utcnow

if TYPE_CHECKING:
    from boostx.models.wallet import Wallet


class User(Base):
    """Platform account."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(
        String(255), unique=True, index=True, nullable=False
    )

    # Account-level referrer, independent of package type
    referrer_username: Mapped[str | None] = mapped_column(
        String(255), nullable=True, index=True
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    wallets: Mapped[list["Wallet"]] = relationship(
        "Wallet", back_populates="user", lazy="selectin"
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username={self.username})>"

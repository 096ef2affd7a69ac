"""
Transaction record repository.
"""

from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from boostx.models.enums import TransactionType
from boostx.models.transaction import TransactionRecord
from boostx.repositories.base import BaseRepository


class TransactionRepository(BaseRepository[TransactionRecord]):
    """Append-only transaction records."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(TransactionRecord, session)

    async def exists_by_hash(self, tx_hash: str) -> bool:
        """Check whether an on-chain event was already recorded."""
        stmt = select(TransactionRecord.id).where(TransactionRecord.tx_hash == tx_hash).limit(1)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none() is not None

    async def create_deposit(
        self,
        *,
        tx_hash: str,
        amount: Decimal,
        token: str,
        user_id: int,
        wallet_id: int,
    ) -> TransactionRecord:
        """Append a deposit record."""
        return await self.create(
            type=TransactionType.DEPOSIT.value,
            amount=amount,
            token=token,
            tx_hash=tx_hash,
            user_id=user_id,
            wallet_id=wallet_id,
        )

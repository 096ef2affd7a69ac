"""
Wallet repository.

Balance credits are issued as single UPDATE statements
(``balance = balance + :amount``) so concurrent writers never lose updates.
"""

from decimal import Decimal

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from boostx.models.user import User
from boostx.models.wallet import Wallet
from boostx.repositories.base import BaseRepository


class WalletRepository(BaseRepository[Wallet]):
    """Wallet repository."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(Wallet, session)

    async def get_by_address(self, address: str) -> Wallet | None:
        """Get wallet by address (case-insensitive)."""
        stmt = select(Wallet).where(func.lower(Wallet.address) == address.lower())
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def credit_token_balance(self, wallet_id: int, amount: Decimal) -> bool:
        """
        Increase the cached stable-token balance.

        Args:
            wallet_id: Wallet ID
            amount: Non-negative amount to add

        Returns:
            True if a row was updated
        """
        stmt = (
            update(Wallet)
            .where(Wallet.id == wallet_id)
            .values(stable_token_balance=Wallet.stable_token_balance + amount)
        )
        result = await self.session.execute(stmt)
        return result.rowcount > 0

    async def credit_user_token_balance(self, username: str, amount: Decimal) -> bool:
        """
        Credit the primary wallet of the user with this username.

        Returns:
            False if the user or their wallet does not exist
        """
        stmt = (
            select(Wallet.id)
            .join(User, User.id == Wallet.user_id)
            .where(User.username == username)
            .order_by(Wallet.id)
            .limit(1)
        )
        wallet_id = (await self.session.execute(stmt)).scalar_one_or_none()
        if wallet_id is None:
            return False
        return await self.credit_token_balance(wallet_id, amount)

    async def set_native_balance(self, wallet_id: int, balance: Decimal) -> None:
        """Overwrite the cached native gas balance."""
        stmt = (
            update(Wallet)
            .where(Wallet.id == wallet_id)
            .values(native_gas_balance=balance)
        )
        await self.session.execute(stmt)

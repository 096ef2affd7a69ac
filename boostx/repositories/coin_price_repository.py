"""
Coin price repository.
"""

from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from boostx.models.coin_price import CoinPrice
from boostx.repositories.base import BaseRepository


class CoinPriceRepository(BaseRepository[CoinPrice]):
    """Coin price history."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(CoinPrice, session)

    async def record(
        self, coin_name: str, language: str, currency: str, price: Decimal
    ) -> CoinPrice:
        """Append a price sample."""
        return await self.create(
            coin_name=coin_name, language=language, currency=currency, price=price
        )

    async def get_latest(self, coin_name: str, language: str) -> CoinPrice | None:
        """Most recent sample for a coin/language pair."""
        stmt = (
            select(CoinPrice)
            .where(CoinPrice.coin_name == coin_name, CoinPrice.language == language)
            .order_by(CoinPrice.created_at.desc(), CoinPrice.id.desc())
            .limit(1)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

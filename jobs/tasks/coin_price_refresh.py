"""
Coin price refresh task.
"""

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from boostx.config.settings import settings
from boostx.services.coin_price_service import CoinPriceService


def build_coin_price_handler(session_factory: async_sessionmaker[AsyncSession]):
    """Build the coinPrice tick handler."""

    async def run_coin_price_refresh() -> None:
        async with session_factory() as session:
            service = CoinPriceService(
                session,
                api_url=settings.coin_price_api_url,
                timeout_seconds=settings.http_timeout_seconds,
            )
            try:
                await service.refresh_all()
            finally:
                await service.close()

    return run_coin_price_refresh

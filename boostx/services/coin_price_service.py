"""
Coin price service.

Samples BTC and DOGE prices in every display currency and appends them to
the price history.
"""

from decimal import Decimal, InvalidOperation
from typing import Any

import aiohttp
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from boostx.config.constants import PRICE_CURRENCIES, TRACKED_COINS
from boostx.repositories.coin_price_repository import CoinPriceRepository
from boostx.utils.exceptions import EXTERNAL_FAILURES, ExternalServiceError


class CoinPriceService:
    """Fetches spot prices and records them."""

    def __init__(
        self,
        session: AsyncSession,
        api_url: str,
        timeout_seconds: float = 30,
    ) -> None:
        self.session = session
        self.api_url = api_url
        self._timeout = aiohttp.ClientTimeout(total=timeout_seconds)
        self._repo = CoinPriceRepository(session)
        self._http: aiohttp.ClientSession | None = None

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session."""
        if self._http is None or self._http.closed:
            self._http = aiohttp.ClientSession(timeout=self._timeout)
        return self._http

    async def close(self) -> None:
        if self._http and not self._http.closed:
            await self._http.close()
        self._http = None

    async def _get_json(self, params: dict[str, str]) -> dict[str, Any]:
        http = await self._get_session()
        async with http.get(self.api_url, params=params) as response:
            if response.status != 200:
                raise ExternalServiceError(f"Price API HTTP {response.status}")
            data = await response.json(content_type=None)
        if not isinstance(data, dict):
            raise ExternalServiceError("Price API returned a non-object payload")
        return data

    async def fetch_price(self, coin: str, currency: str) -> Decimal:
        """
        Get spot price of coin quoted in currency.

        Raises:
            ExternalServiceError: On HTTP error or missing quote
        """
        data = await self._get_json({"fsym": coin, "tsyms": currency})
        if currency not in data:
            raise ExternalServiceError(
                f"No {coin}/{currency} quote: {data.get('Message', data)}"
            )
        try:
            return Decimal(str(data[currency]))
        except InvalidOperation as e:
            raise ExternalServiceError(f"Malformed {coin}/{currency} quote") from e

    async def refresh_all(self) -> int:
        """
        Record one sample per coin and language.

        Each pair is isolated: a failed quote is logged and skipped.

        Returns:
            Number of samples recorded
        """
        recorded = 0
        for coin in TRACKED_COINS:
            for language, currency in PRICE_CURRENCIES.items():
                try:
                    price = await self.fetch_price(coin, currency)
                except EXTERNAL_FAILURES as e:
                    logger.warning(f"[Coin Price] {coin}/{currency} unavailable: {e}")
                    continue
                await self._repo.record(coin, language, currency, price)
                recorded += 1

        await self.session.commit()
        logger.debug(f"[Coin Price] Recorded {recorded} samples")
        return recorded

"""
Block explorer client.

Queries a BscScan-compatible HTTP API for token transfers and balances of
the configured stable-token contract.
"""

from dataclasses import dataclass
from typing import Any

import aiohttp
from loguru import logger

from boostx.config.constants import EXPLORER_END_BLOCK, EXPLORER_START_BLOCK
from boostx.utils.exceptions import ConfigurationError, LedgerQueryError
from boostx.utils.security import mask_address


@dataclass(frozen=True)
class TokenTransfer:
    """Single token transfer event as reported by the explorer."""

    tx_hash: str
    from_address: str
    to_address: str
    raw_value: int
    block_number: int
    timestamp: int

    @classmethod
    def from_payload(cls, item: dict[str, Any]) -> "TokenTransfer":
        """
        Build from an explorer ``tokentx`` result item.

        Raises:
            LedgerQueryError: If required fields are missing or not numeric
        """
        try:
            return cls(
                tx_hash=str(item["hash"]),
                from_address=str(item.get("from", "")),
                to_address=str(item["to"]),
                raw_value=int(item["value"]),
                block_number=int(item.get("blockNumber") or 0),
                timestamp=int(item.get("timeStamp") or 0),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise LedgerQueryError(f"Malformed transfer payload: {e}") from e

    def is_inbound_to(self, address: str) -> bool:
        return self.to_address.lower() == address.lower()


class ExplorerClient:
    """
    Stable-token queries against the block explorer API.

    Session is created lazily and reused until close().
    """

    def __init__(
        self,
        api_url: str,
        contract_address: str,
        api_key: str = "",
        timeout_seconds: float = 30,
    ) -> None:
        """
        Initialize explorer client.

        Args:
            api_url: Explorer API endpoint
            contract_address: Stable-token contract address
            api_key: Explorer API key
            timeout_seconds: Total timeout per request

        Raises:
            ConfigurationError: If endpoint or contract is not configured
        """
        if not api_url:
            raise ConfigurationError("Explorer API URL is not configured")
        if not contract_address:
            raise ConfigurationError("Stable token contract address is not configured")

        self.api_url = api_url
        self.contract_address = contract_address
        self._api_key = api_key
        self._timeout = aiohttp.ClientTimeout(total=timeout_seconds)
        self._session: aiohttp.ClientSession | None = None

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self._timeout)
        return self._session

    async def close(self) -> None:
        if self._session and not self._session.closed:
            await self._session.close()
        self._session = None

    def _params(self, action: str, address: str) -> dict[str, str]:
        return {
            "module": "account",
            "action": action,
            "contractaddress": self.contract_address,
            "address": address,
            "startblock": str(EXPLORER_START_BLOCK),
            "endblock": str(EXPLORER_END_BLOCK),
            "sort": "desc",
            "apikey": self._api_key,
        }

    async def _get(self, params: dict[str, str]) -> dict[str, Any]:
        """
        Perform GET and decode the JSON envelope.

        Raises:
            LedgerQueryError: On HTTP error or non-JSON body
        """
        session = await self._get_session()
        try:
            async with session.get(self.api_url, params=params) as response:
                if response.status != 200:
                    raise LedgerQueryError(
                        f"Explorer HTTP {response.status} for action={params['action']}"
                    )
                data = await response.json(content_type=None)
        except aiohttp.ClientError as e:
            raise LedgerQueryError(f"Explorer request failed: {e}") from e

        if not isinstance(data, dict):
            raise LedgerQueryError("Explorer returned a non-object payload")
        return data

    async def get_token_transfers(self, address: str) -> list[TokenTransfer]:
        """
        Get token transfers touching address, most recent first.

        A response with status != "1" means no transfers and yields [].

        Args:
            address: Wallet address

        Returns:
            List of transfers
        """
        data = await self._get(self._params("tokentx", address))

        if str(data.get("status")) != "1":
            logger.debug(
                f"No token transfers for {mask_address(address)}: "
                f"{data.get('message', 'no data')}"
            )
            return []

        result = data.get("result")
        if not isinstance(result, list):
            raise LedgerQueryError("Explorer tokentx result is not a list")

        return [TokenTransfer.from_payload(item) for item in result]

    async def get_token_balance(self, address: str) -> int:
        """
        Get raw on-chain token balance (smallest units).

        Raises:
            LedgerQueryError: If status != "1" or the result is not an integer
        """
        data = await self._get(self._params("tokenbalance", address))

        if str(data.get("status")) != "1":
            raise LedgerQueryError(
                f"Token balance query failed for {mask_address(address)}: "
                f"{data.get('result') or data.get('message')}"
            )

        try:
            return int(data["result"])
        except (KeyError, TypeError, ValueError) as e:
            raise LedgerQueryError(f"Malformed token balance: {e}") from e

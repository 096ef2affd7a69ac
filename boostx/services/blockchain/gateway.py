"""
Ledger gateway.

Single facade over the explorer and the native RPC client, so reconciliation
code depends on one object that tests can replace with an AsyncMock.
"""

from decimal import Decimal

from boostx.config.settings import settings

from .explorer_client import ExplorerClient, TokenTransfer
from .key_store import JsonFileKeyStore
from .native_client import NativeChainClient


class LedgerGateway:
    """Token queries plus native balance and transfers."""

    def __init__(self, explorer: ExplorerClient, native: NativeChainClient) -> None:
        self.explorer = explorer
        self.native = native

    @classmethod
    def from_settings(cls) -> "LedgerGateway":
        """
        Build gateway from application settings.

        Raises:
            ConfigurationError: If an endpoint or the contract is missing
        """
        explorer = ExplorerClient(
            api_url=settings.explorer_api_url,
            contract_address=settings.stable_token_contract_address,
            api_key=settings.explorer_api_key,
            timeout_seconds=settings.http_timeout_seconds,
        )
        native = NativeChainClient(
            rpc_url=settings.rpc_url,
            key_store=JsonFileKeyStore(settings.key_store_path),
            rpc_timeout=settings.rpc_timeout_seconds,
            receipt_timeout=settings.receipt_timeout_seconds,
        )
        return cls(explorer, native)

    async def get_token_transfers(self, address: str) -> list[TokenTransfer]:
        return await self.explorer.get_token_transfers(address)

    async def get_token_balance(self, address: str) -> int:
        return await self.explorer.get_token_balance(address)

    async def get_native_balance(self, address: str) -> Decimal:
        return await self.native.get_balance(address)

    async def send_native(
        self, wallet_id: int, from_address: str, to_address: str, amount: Decimal
    ) -> str:
        return await self.native.send_native(wallet_id, from_address, to_address, amount)

    async def close(self) -> None:
        await self.explorer.close()


_gateway: LedgerGateway | None = None


def get_ledger_gateway() -> LedgerGateway:
    """Get process-wide gateway, built from settings on first use."""
    global _gateway
    if _gateway is None:
        _gateway = LedgerGateway.from_settings()
    return _gateway


async def close_ledger_gateway() -> None:
    global _gateway
    if _gateway is not None:
        await _gateway.close()
        _gateway = None

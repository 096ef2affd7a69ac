"""
Unit tests for native coin balance and transfers (web3 mocked).
"""

from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest

from boostx.services.blockchain.native_client import NativeChainClient
from boostx.utils.exceptions import ConfigurationError, RpcError

SENDER = "0x742d35cc6634c0532925a3b844bc9e7595f0beb0"
RECIPIENT = "0x1111111111111111111111111111111111111111"
TX_HASH = "0x" + "ab" * 32


async def _value(v):
    return v


class FakeEth:
    """Minimal async eth namespace."""

    def __init__(self, receipt_status: int = 1) -> None:
        self.get_balance = AsyncMock(return_value=2 * 10**15)
        self.get_transaction_count = AsyncMock(return_value=3)
        tx_hash = MagicMock()
        tx_hash.to_0x_hex.return_value = TX_HASH
        self.send_raw_transaction = AsyncMock(return_value=tx_hash)
        self.wait_for_transaction_receipt = AsyncMock(
            return_value={"status": receipt_status, "blockNumber": 100}
        )

    @property
    def gas_price(self):
        return _value(5 * 10**9)

    @property
    def chain_id(self):
        return _value(56)


def _client(eth: FakeEth, key_store=None) -> NativeChainClient:
    web3 = MagicMock()
    web3.eth = eth
    if key_store is None:
        key_store = MagicMock()
        key_store.sign.return_value = MagicMock(raw_transaction=b"signed")
    return NativeChainClient(rpc_url="", key_store=key_store, web3=web3)


class TestNativeChainClient:
    def test_requires_rpc_url(self):
        with pytest.raises(ConfigurationError):
            NativeChainClient(rpc_url="", key_store=MagicMock())

    @pytest.mark.asyncio
    async def test_balance_in_whole_coins(self):
        client = _client(FakeEth())

        assert await client.get_balance(RECIPIENT) == Decimal("0.002")

    @pytest.mark.asyncio
    async def test_send_native_signs_and_waits(self):
        eth = FakeEth()
        key_store = MagicMock()
        key_store.sign.return_value = MagicMock(raw_transaction=b"signed")
        client = _client(eth, key_store)

        tx_hash = await client.send_native(5, SENDER, RECIPIENT, Decimal("0.001"))

        assert tx_hash == TX_HASH
        wallet_id, tx = key_store.sign.call_args.args
        assert wallet_id == 5
        assert tx["value"] == 10**15
        assert tx["gas"] == 21000
        assert tx["nonce"] == 3
        assert tx["chainId"] == 56
        assert tx["to"].lower() == RECIPIENT
        eth.send_raw_transaction.assert_awaited_once_with(b"signed")
        eth.wait_for_transaction_receipt.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_reverted_transfer_raises(self):
        client = _client(FakeEth(receipt_status=0))

        with pytest.raises(RpcError):
            await client.send_native(5, SENDER, RECIPIENT, Decimal("0.001"))

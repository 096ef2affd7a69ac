"""
Native coin client.

Balance queries and plain value transfers over JSON-RPC via AsyncWeb3.
"""

import asyncio
from decimal import ROUND_DOWN, Decimal

from eth_utils import to_checksum_address
from loguru import logger
from web3 import AsyncHTTPProvider, AsyncWeb3

from boostx.config.constants import NATIVE_DECIMALS, NATIVE_TRANSFER_GAS_LIMIT
from boostx.utils.exceptions import ConfigurationError, RpcError
from boostx.utils.security import mask_address, mask_tx_hash

from .key_store import KeyStore


class NativeChainClient:
    """Native (gas) coin operations."""

    def __init__(
        self,
        rpc_url: str,
        key_store: KeyStore,
        rpc_timeout: float = 30,
        receipt_timeout: float = 120,
        web3: AsyncWeb3 | None = None,
    ) -> None:
        """
        Initialize native client.

        Args:
            rpc_url: JSON-RPC endpoint
            key_store: Signer for custodial wallets
            rpc_timeout: Per-request timeout
            receipt_timeout: Max wait for one confirmation
            web3: Pre-built AsyncWeb3 instance (tests)

        Raises:
            ConfigurationError: If rpc_url is empty and no web3 is given
        """
        if web3 is None:
            if not rpc_url:
                raise ConfigurationError("RPC URL is not configured")
            web3 = AsyncWeb3(
                AsyncHTTPProvider(rpc_url, request_kwargs={"timeout": rpc_timeout})
            )

        self.web3 = web3
        self.key_store = key_store
        self.rpc_timeout = rpc_timeout
        self.receipt_timeout = receipt_timeout

    async def get_balance(self, address: str) -> Decimal:
        """
        Get native balance in whole coins.

        Raises:
            RpcError: On timeout
        """
        try:
            wei = await asyncio.wait_for(
                self.web3.eth.get_balance(to_checksum_address(address)),
                timeout=self.rpc_timeout,
            )
        except TimeoutError as e:
            raise RpcError(f"Balance query timed out for {mask_address(address)}") from e
        return Decimal(wei).scaleb(-NATIVE_DECIMALS)

    async def send_native(
        self,
        wallet_id: int,
        from_address: str,
        to_address: str,
        amount: Decimal,
    ) -> str:
        """
        Send native coin and wait for one confirmation.

        Args:
            wallet_id: Key store ID of the sending wallet
            from_address: Sender address
            to_address: Recipient address
            amount: Amount in whole coins

        Returns:
            Transaction hash (0x-prefixed hex)

        Raises:
            RpcError: On timeout or reverted transaction
            KeyStoreError: If the sender key is unavailable
        """
        sender = to_checksum_address(from_address)
        recipient = to_checksum_address(to_address)
        value = int(amount.scaleb(NATIVE_DECIMALS).to_integral_value(ROUND_DOWN))

        try:
            nonce = await asyncio.wait_for(
                self.web3.eth.get_transaction_count(sender, "pending"),
                timeout=self.rpc_timeout,
            )
            gas_price = await asyncio.wait_for(
                self.web3.eth.gas_price, timeout=self.rpc_timeout
            )
            chain_id = await asyncio.wait_for(
                self.web3.eth.chain_id, timeout=self.rpc_timeout
            )
        except TimeoutError as e:
            raise RpcError("Timeout preparing native transfer") from e

        tx = {
            "nonce": nonce,
            "to": recipient,
            "value": value,
            "gas": NATIVE_TRANSFER_GAS_LIMIT,
            "gasPrice": gas_price,
            "chainId": chain_id,
        }
        signed = self.key_store.sign(wallet_id, tx)

        try:
            tx_hash = await asyncio.wait_for(
                self.web3.eth.send_raw_transaction(signed.raw_transaction),
                timeout=self.rpc_timeout,
            )
        except TimeoutError as e:
            raise RpcError("Timeout submitting native transfer") from e

        tx_hex = tx_hash.to_0x_hex()
        logger.info(
            f"Native transfer submitted: {amount} to {mask_address(recipient)}, "
            f"tx {mask_tx_hash(tx_hex)}"
        )

        try:
            receipt = await asyncio.wait_for(
                self.web3.eth.wait_for_transaction_receipt(tx_hash),
                timeout=self.receipt_timeout,
            )
        except TimeoutError as e:
            raise RpcError(f"Transaction {mask_tx_hash(tx_hex)} not confirmed in time") from e

        if receipt["status"] != 1:
            raise RpcError(f"Transaction {mask_tx_hash(tx_hex)} reverted")

        return tx_hex

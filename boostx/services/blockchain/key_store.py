"""
Custodial key store.

Signing goes through the KeyStore interface so the backing storage
(file, HSM, KMS) can be swapped without touching callers.
"""

import json
from pathlib import Path
from typing import Any, Protocol

from eth_account import Account
from eth_account.datastructures import SignedTransaction
from loguru import logger

from boostx.utils.exceptions import KeyStoreError


class KeyStore(Protocol):
    """Signs transactions on behalf of custodial wallets."""

    def sign(self, wallet_id: int, tx: dict[str, Any]) -> SignedTransaction: ...


class JsonFileKeyStore:
    """
    Key store backed by a JSON file ``{"<wallet id>": "<hex private key>"}``.

    The file is re-read on every signing call so rotated keys are picked up
    without a restart.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def _load(self) -> dict[str, str]:
        try:
            with self.path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise KeyStoreError(f"Key store {self.path} unreadable: {e}") from e

        if not isinstance(data, dict):
            raise KeyStoreError(f"Key store {self.path} must contain a JSON object")
        return data

    def sign(self, wallet_id: int, tx: dict[str, Any]) -> SignedTransaction:
        """
        Sign a transaction with the key of a wallet.

        Args:
            wallet_id: Wallet ID the key is stored under
            tx: Transaction dict (nonce, to, value, gas, gasPrice, chainId)

        Returns:
            Signed transaction

        Raises:
            KeyStoreError: If the file is unreadable, the key is missing or invalid
        """
        private_key = self._load().get(str(wallet_id))
        if not private_key:
            raise KeyStoreError(f"No key stored for wallet {wallet_id}")

        try:
            return Account.from_key(private_key).sign_transaction(tx)
        except Exception as e:
            # Never include key material in the message
            logger.error(f"Signing failed for wallet {wallet_id}: {type(e).__name__}")
            raise KeyStoreError(f"Invalid key for wallet {wallet_id}") from e

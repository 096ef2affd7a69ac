"""
Unit tests for the JSON file key store.
"""

import json

import pytest
from eth_account import Account

from boostx.services.blockchain.key_store import JsonFileKeyStore
from boostx.utils.exceptions import KeyStoreError

TX = {
    "nonce": 0,
    "to": "0x1111111111111111111111111111111111111111",
    "value": 10**15,
    "gas": 21000,
    "gasPrice": 10**9,
    "chainId": 56,
}


class TestJsonFileKeyStore:
    """Test signing through the key file."""

    def test_signs_with_wallet_key(self, tmp_path):
        account = Account.create()
        path = tmp_path / "privateKey.json"
        path.write_text(json.dumps({"7": account.key.to_0x_hex()}))

        signed = JsonFileKeyStore(path).sign(7, TX)

        assert Account.recover_transaction(signed.raw_transaction) == account.address

    def test_file_reloaded_on_every_call(self, tmp_path):
        path = tmp_path / "privateKey.json"
        path.write_text(json.dumps({}))
        store = JsonFileKeyStore(path)

        with pytest.raises(KeyStoreError):
            store.sign(7, TX)

        account = Account.create()
        path.write_text(json.dumps({"7": account.key.to_0x_hex()}))

        signed = store.sign(7, TX)
        assert Account.recover_transaction(signed.raw_transaction) == account.address

    def test_missing_file(self, tmp_path):
        with pytest.raises(KeyStoreError):
            JsonFileKeyStore(tmp_path / "absent.json").sign(1, TX)

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "privateKey.json"
        path.write_text("{not json")

        with pytest.raises(KeyStoreError):
            JsonFileKeyStore(path).sign(1, TX)

    def test_invalid_key(self, tmp_path):
        path = tmp_path / "privateKey.json"
        path.write_text(json.dumps({"1": "0x1234"}))

        with pytest.raises(KeyStoreError):
            JsonFileKeyStore(path).sign(1, TX)

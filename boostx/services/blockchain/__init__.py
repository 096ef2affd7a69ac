"""
Blockchain access: block explorer, JSON-RPC provider and custodial keys.
"""

from .explorer_client import ExplorerClient, TokenTransfer
from .gateway import LedgerGateway, close_ledger_gateway, get_ledger_gateway
from .key_store import JsonFileKeyStore, KeyStore
from .native_client import NativeChainClient

__all__ = [
    "ExplorerClient",
    "JsonFileKeyStore",
    "KeyStore",
    "LedgerGateway",
    "NativeChainClient",
    "TokenTransfer",
    "close_ledger_gateway",
    "get_ledger_gateway",
]

"""
Deposit reconciliation: detect inbound stable-token transfers, credit
wallets once per transaction hash and keep wallets funded with gas.
"""

from .amounts import to_token_amount
from .gas_policy import GasTopUpPolicy, GasTopUpService
from .reconciler import (
    DepositEvent,
    DepositReconciler,
    ReconcileReport,
    WalletOutcome,
    WalletResult,
    WalletSnapshot,
)

__all__ = [
    "DepositEvent",
    "DepositReconciler",
    "GasTopUpPolicy",
    "GasTopUpService",
    "ReconcileReport",
    "WalletOutcome",
    "WalletResult",
    "WalletSnapshot",
    "to_token_amount",
]

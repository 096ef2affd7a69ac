"""
Enumerations shared by models and services.
"""

from enum import Enum


class TaskKind(str, Enum):
    """Fixed set of recurring monitoring tasks."""

    DEPOSIT = "deposit"
    MINING = "mining"
    CRAWLER = "crawler"
    COIN_PRICE = "coinPrice"
    MASTER_WITHDRAW = "masterWithdraw"


class TransactionType(str, Enum):
    """Ledger transaction direction."""

    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"

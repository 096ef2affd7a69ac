"""
Database models.

Exports all SQLAlchemy models for easy imports.
"""

from boostx.models.base import Base
from boostx.models.coin_price import CoinPrice
from boostx.models.enums import TaskKind, TransactionType
from boostx.models.monitoring_task import MonitoringTask
from boostx.models.referral_log import ReferralLog
from boostx.models.referrer_edge import ReferrerEdge
from boostx.models.transaction import TransactionRecord
from boostx.models.user import User
from boostx.models.wallet import Wallet

__all__ = [
    "Base",
    "CoinPrice",
    "MonitoringTask",
    "ReferralLog",
    "ReferrerEdge",
    "TaskKind",
    "TransactionRecord",
    "TransactionType",
    "User",
    "Wallet",
]

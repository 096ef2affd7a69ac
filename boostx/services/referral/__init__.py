"""
Referral commissions for package purchases.
"""

from .cascade import (
    CascadeOutcome,
    CascadeResult,
    CommissionPayment,
    ReferralCommissionCascade,
)
from .edge_manager import ReferrerEdgeManager

__all__ = [
    "CascadeOutcome",
    "CascadeResult",
    "CommissionPayment",
    "ReferralCommissionCascade",
    "ReferrerEdgeManager",
]

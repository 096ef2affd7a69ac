"""
Exception types and handling categories.

Batch loops (reconciler, scheduler ticks) use the categories below to decide
whether a failure is an expected remote hiccup or a bug worth a traceback.
"""

import aiohttp
from web3.exceptions import Web3Exception


class BoostxError(Exception):
    """Base class for engine errors."""


class ValidationError(BoostxError):
    """Malformed input item; aborts only that item."""


class ConfigurationError(BoostxError):
    """Required endpoint, contract or address missing at construction."""


class ExternalServiceError(BoostxError):
    """Block explorer or RPC call failed."""


class LedgerQueryError(ExternalServiceError):
    """Block explorer returned an error or unusable payload."""


class RpcError(ExternalServiceError):
    """JSON-RPC provider call failed or a transaction reverted."""


class KeyStoreError(BoostxError):
    """Custodial key file unreadable or key missing for a wallet."""


class ReferralChainError(BoostxError):
    """Referral walk could not terminate normally."""

    def __init__(self, message: str, payer: str, package_type: str, path: list[str]) -> None:
        super().__init__(message)
        self.payer = payer
        self.package_type = package_type
        self.path = list(path)


class CycleDetected(ReferralChainError):
    """Generic-referrer walk revisited a user."""


class ChainExhausted(ReferralChainError):
    """Hop limit reached or the walk hit a referrer without an account."""


# Remote failures: log and continue with the next item
EXTERNAL_FAILURES = (
    ExternalServiceError,
    Web3Exception,
    aiohttp.ClientError,
    TimeoutError,
)

# Item-level problems: log and skip the item
ITEM_FAILURES = (
    ValidationError,
)


def is_external_failure(exc: BaseException) -> bool:
    """
    Check if exception is an expected remote failure.

    Args:
        exc: Exception to check

    Returns:
        True for explorer/RPC/network errors
    """
    return isinstance(exc, EXTERNAL_FAILURES)


def is_item_failure(exc: BaseException) -> bool:
    """
    Check if exception only invalidates the current item.

    Args:
        exc: Exception to check

    Returns:
        True for validation errors
    """
    return isinstance(exc, ITEM_FAILURES)

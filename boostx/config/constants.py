"""
Business and operational constants.

Values here are fixed by product rules; tunables that differ per deployment
live in settings.py.
"""

from decimal import Decimal

from boostx.models.enums import TaskKind

# Canonical monitoring tasks seeded at first boot: kind -> (is_running, interval seconds)
DEFAULT_MONITORING_TASKS: dict[TaskKind, tuple[bool, int]] = {
    TaskKind.DEPOSIT: (True, 60),
    TaskKind.MINING: (True, 300),
    TaskKind.CRAWLER: (True, 3600),
    TaskKind.COIN_PRICE: (True, 60),
    TaskKind.MASTER_WITHDRAW: (True, 60),
}

# Block explorer query range
EXPLORER_START_BLOCK = 0
EXPLORER_END_BLOCK = 99999999

# Credited amounts are truncated to 6 decimal places
DEPOSIT_AMOUNT_PRECISION = Decimal("0.000001")

# Native coin (BNB) has 18 decimals
NATIVE_DECIMALS = 18
NATIVE_TRANSFER_GAS_LIMIT = 21000

# Gas top-up defaults (native units)
DEFAULT_GAS_TOPUP_THRESHOLD = Decimal("0.0002")
DEFAULT_GAS_TOPUP_AMOUNT = Decimal("0.001")

# Referral fee rates are percentages
MIN_FEE_RATE = Decimal("0")
MAX_FEE_RATE = Decimal("100")

# Coin price refresh: coins x (language -> quote currency)
TRACKED_COINS = ("BTC", "DOGE")
PRICE_CURRENCIES: dict[str, str] = {
    "en": "USDT",
    "ja": "JPY",
    "ko": "KRW",
    "zh": "CNY",
}

# Commissions are truncated to the precision of the balance columns
COMMISSION_PRECISION = Decimal("0.00000001")

# Largest amount the DECIMAL(18, 8) balance columns hold
MAX_TOKEN_AMOUNT = Decimal("9999999999.99999999")

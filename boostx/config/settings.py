"""
Application settings.

Loads configuration from environment variables using pydantic-settings.
"""

from decimal import Decimal

from loguru import logger
from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from boostx.config.constants import (
    DEFAULT_GAS_TOPUP_AMOUNT,
    DEFAULT_GAS_TOPUP_THRESHOLD,
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database
    database_url: str
    database_echo: bool = False

    # Block explorer (BscScan-compatible API)
    explorer_api_url: str = ""
    explorer_api_key: str = ""

    # Stable token tracked for deposits
    stable_token_contract_address: str = ""
    stable_token_symbol: str = "USDT"
    stable_token_decimals: int = Field(default=18, ge=0, le=36)

    # JSON-RPC provider for native balance and transfers
    rpc_url: str = ""

    # Company hot wallet that funds gas top-ups
    company_gas_wallet_address: str = ""

    # Custodial key file: {"<wallet id>": "<hex private key>"}
    key_store_path: str = "privateKey.json"

    # Gas top-up policy
    gas_topup_threshold: Decimal = Field(
        default=DEFAULT_GAS_TOPUP_THRESHOLD,
        ge=0,
        description="Top up when native balance is at or below this value",
    )
    gas_topup_amount: Decimal = Field(
        default=DEFAULT_GAS_TOPUP_AMOUNT,
        gt=0,
        description="Native amount sent per top-up",
    )

    # Timeouts (seconds)
    http_timeout_seconds: float = Field(default=30, gt=0)
    rpc_timeout_seconds: float = Field(default=30, gt=0)
    receipt_timeout_seconds: float = Field(default=120, gt=0)
    task_tick_timeout_seconds: float = Field(
        default=600, gt=0, description="Upper bound for a single scheduler tick"
    )

    # Referral cascade
    referral_max_hops: int = Field(
        default=32, ge=1, description="Maximum generic-referrer hops per cascade"
    )

    # Coin price feed
    coin_price_api_url: str = "https://min-api.cryptocompare.com/data/price"

    # Application
    environment: str = "production"
    log_level: str = "INFO"
    log_file: str = "logs/engine.log"
    health_check_port: int = Field(
        default=8081, ge=1, le=65535, description="Health check HTTP server port"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @model_validator(mode="after")
    def warn_missing_integrations(self) -> "Settings":
        """Warn about integration endpoints that are not configured in production."""
        if self.environment == "production":
            missing = [
                name
                for name in (
                    "explorer_api_url",
                    "stable_token_contract_address",
                    "rpc_url",
                    "company_gas_wallet_address",
                )
                if not getattr(self, name)
            ]
            if missing:
                logger.warning(
                    f"Integration settings not configured: {', '.join(missing)}. "
                    "Components depending on them will refuse to start."
                )
        return self

    @field_validator("stable_token_contract_address", "company_gas_wallet_address")
    @classmethod
    def validate_eth_address(cls, v: str) -> str:
        """Validate EVM address format (empty means not configured)."""
        if not v:
            return v
        if not v.startswith("0x") or len(v) != 42:
            raise ValueError(
                f"Invalid address: {v}. Must start with 0x and be 42 characters long."
            )
        try:
            int(v[2:], 16)
        except ValueError as exc:
            raise ValueError(f"Invalid address format: {v}") from exc
        return v.lower()

    @field_validator("database_url")
    @classmethod
    def validate_database_url(cls, v: str) -> str:
        """Validate database URL."""
        if not v.startswith(
            ("postgresql://", "postgresql+asyncpg://", "sqlite+aiosqlite://")
        ):
            raise ValueError(
                "DATABASE_URL must start with postgresql://, "
                "postgresql+asyncpg:// or sqlite+aiosqlite://"
            )
        return v

    @property
    def async_database_url(self) -> str:
        """Database URL with an async driver."""
        if self.database_url.startswith("postgresql://"):
            return self.database_url.replace("postgresql://", "postgresql+asyncpg://", 1)
        return self.database_url


# Global settings instance
settings = Settings()

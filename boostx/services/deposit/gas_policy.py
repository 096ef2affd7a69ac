"""
Gas top-up policy and execution.

Wallets that received a deposit need native coin to pay for the sweep
later; the company hot wallet funds them when they run low.
"""

from dataclasses import dataclass
from decimal import Decimal

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from boostx.config.settings import settings
from boostx.repositories.wallet_repository import WalletRepository
from boostx.services.blockchain.gateway import LedgerGateway
from boostx.utils.exceptions import EXTERNAL_FAILURES, ConfigurationError, KeyStoreError
from boostx.utils.security import mask_address


@dataclass(frozen=True)
class GasTopUpPolicy:
    """
    Threshold rule over a native balance.

    Attributes:
        threshold: Top up when balance <= threshold
        amount: Native amount sent per top-up
    """

    threshold: Decimal
    amount: Decimal

    def top_up_amount(self, balance: Decimal) -> Decimal | None:
        """Return the amount to send, or None if the balance is sufficient."""
        if balance <= self.threshold:
            return self.amount
        return None

    @classmethod
    def from_settings(cls) -> "GasTopUpPolicy":
        return cls(threshold=settings.gas_topup_threshold, amount=settings.gas_topup_amount)


class GasTopUpService:
    """Sends native coin from the company hot wallet."""

    def __init__(
        self,
        session: AsyncSession,
        gateway: LedgerGateway,
        company_wallet_address: str,
    ) -> None:
        """
        Initialize top-up service.

        Raises:
            ConfigurationError: If the company wallet address is not configured
        """
        if not company_wallet_address:
            raise ConfigurationError("Company gas wallet address is not configured")

        self.session = session
        self.gateway = gateway
        self.company_wallet_address = company_wallet_address
        self._wallet_repo = WalletRepository(session)

    async def top_up(self, to_address: str, amount: Decimal) -> bool:
        """
        Transfer native coin to a wallet and wait for confirmation.

        Args:
            to_address: Wallet receiving gas
            amount: Native amount

        Returns:
            True if the transfer confirmed
        """
        company = await self._wallet_repo.get_by_address(self.company_wallet_address)
        if company is None:
            logger.error(
                f"[Gas Top-Up] Company wallet {mask_address(self.company_wallet_address)} "
                "has no wallet row, cannot resolve signing key"
            )
            return False

        try:
            tx_hash = await self.gateway.send_native(
                company.id, company.address, to_address, amount
            )
        except KeyStoreError as e:
            logger.error(f"[Gas Top-Up] Signing key unavailable: {e}")
            return False
        except EXTERNAL_FAILURES as e:
            logger.error(
                f"[Gas Top-Up] Transfer to {mask_address(to_address)} failed: {e}"
            )
            return False

        logger.success(
            f"[Gas Top-Up] Sent {amount} to {mask_address(to_address)}",
            extra={"tx_hash": tx_hash},
        )
        return True

"""
Deposit reconciler.

Per wallet and per cycle: read the latest inbound stable-token transfer,
skip it if its hash is already recorded, otherwise credit the wallet and
append a deposit record in one commit. A gas check follows every new
credit; its failures never undo the credit.
"""

import inspect
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum

from loguru import logger
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from boostx.models.wallet import Wallet
from boostx.repositories.transaction_repository import TransactionRepository
from boostx.repositories.wallet_repository import WalletRepository
from boostx.services.blockchain.gateway import LedgerGateway
from boostx.utils.exceptions import ValidationError, is_external_failure, is_item_failure
from boostx.utils.security import mask_address, mask_tx_hash

from .amounts import to_token_amount
from .gas_policy import GasTopUpPolicy, GasTopUpService


class WalletOutcome(str, Enum):
    IDLE = "idle"
    DUPLICATE = "duplicate"
    CREDITED = "credited"


@dataclass(frozen=True)
class WalletSnapshot:
    """
    Plain copy of the wallet fields the reconciler needs.

    Detached from the session so a rollback on one wallet cannot expire
    the data of the next.
    """

    id: int
    user_id: int
    address: str | None
    native_gas_balance: Decimal

    @classmethod
    def from_model(cls, wallet: Wallet) -> "WalletSnapshot":
        return cls(
            id=wallet.id,
            user_id=wallet.user_id,
            address=wallet.address,
            native_gas_balance=wallet.native_gas_balance,
        )


@dataclass(frozen=True)
class DepositEvent:
    """Emitted after a new deposit is committed."""

    wallet_id: int
    user_id: int
    address: str
    amount: Decimal
    token: str
    tx_hash: str


DepositListener = Callable[[DepositEvent], Awaitable[None] | None]


@dataclass
class WalletResult:
    """Result of reconciling one wallet."""

    outcome: WalletOutcome
    amount: Decimal = Decimal("0")
    tx_hash: str | None = None
    topped_up: bool = False


@dataclass
class ReconcileReport:
    """Counters for one reconcile_all() cycle."""

    scanned: int = 0
    credited: int = 0
    duplicates: int = 0
    idle: int = 0
    failed: int = 0
    topups: int = 0
    credited_amount: Decimal = field(default_factory=lambda: Decimal("0"))

    def add(self, result: WalletResult) -> None:
        if result.outcome is WalletOutcome.CREDITED:
            self.credited += 1
            self.credited_amount += result.amount
        elif result.outcome is WalletOutcome.DUPLICATE:
            self.duplicates += 1
        else:
            self.idle += 1
        if result.topped_up:
            self.topups += 1


class DepositReconciler:
    """Credits wallets for new inbound stable-token transfers."""

    def __init__(
        self,
        session: AsyncSession,
        gateway: LedgerGateway,
        gas_policy: GasTopUpPolicy,
        gas_service: GasTopUpService | None = None,
        token_symbol: str = "USDT",
        token_decimals: int = 18,
        on_deposit: DepositListener | None = None,
    ) -> None:
        """
        Initialize reconciler.

        Args:
            session: Database session (committed per wallet)
            gateway: Ledger gateway
            gas_policy: Top-up threshold rule
            gas_service: Executes top-ups; None disables sending
            token_symbol: Token name stored on deposit records
            token_decimals: Decimals of the stable token
            on_deposit: Optional listener notified after each new credit
        """
        self.session = session
        self.gateway = gateway
        self.gas_policy = gas_policy
        self.gas_service = gas_service
        self.token_symbol = token_symbol
        self.token_decimals = token_decimals
        self.on_deposit = on_deposit
        self._wallet_repo = WalletRepository(session)
        self._tx_repo = TransactionRepository(session)

    async def reconcile_all(self) -> ReconcileReport:
        """
        Reconcile every wallet once.

        Each wallet is isolated: a failure is logged, rolled back and the
        loop moves on.

        Returns:
            Cycle counters
        """
        wallets = [WalletSnapshot.from_model(w) for w in await self._wallet_repo.find_all()]
        report = ReconcileReport()

        for wallet in wallets:
            report.scanned += 1
            try:
                result = await self.reconcile_wallet(wallet)
            except Exception as e:
                await self.session.rollback()
                report.failed += 1
                if is_external_failure(e) or is_item_failure(e):
                    logger.warning(
                        f"[Deposit] Wallet {wallet.id} skipped: {type(e).__name__}: {e}"
                    )
                else:
                    logger.exception(f"[Deposit] Unexpected error on wallet {wallet.id}: {e}")
                continue
            report.add(result)

        if report.credited or report.failed:
            logger.info(
                f"[Deposit] Cycle done: scanned={report.scanned}, "
                f"credited={report.credited} ({report.credited_amount} {self.token_symbol}), "
                f"duplicates={report.duplicates}, failed={report.failed}, "
                f"topups={report.topups}"
            )
        return report

    async def reconcile_wallet(self, wallet: WalletSnapshot) -> WalletResult:
        """
        Reconcile one wallet.

        Raises:
            ValidationError: If the wallet has no address
            ExternalServiceError: If the explorer query fails
        """
        if not wallet.address:
            raise ValidationError(f"Wallet {wallet.id} has no address")

        transfers = await self.gateway.get_token_transfers(wallet.address)
        latest = next((t for t in transfers if t.is_inbound_to(wallet.address)), None)
        if latest is None:
            return WalletResult(WalletOutcome.IDLE)

        if await self._tx_repo.exists_by_hash(latest.tx_hash):
            logger.debug(
                f"[Deposit] {mask_tx_hash(latest.tx_hash)} already recorded "
                f"for wallet {wallet.id}"
            )
            return WalletResult(WalletOutcome.DUPLICATE, tx_hash=latest.tx_hash)

        amount = to_token_amount(latest.raw_value, self.token_decimals)

        try:
            await self._wallet_repo.credit_token_balance(wallet.id, amount)
            await self._tx_repo.create_deposit(
                tx_hash=latest.tx_hash,
                amount=amount,
                token=self.token_symbol,
                user_id=wallet.user_id,
                wallet_id=wallet.id,
            )
            await self.session.commit()
        except IntegrityError:
            # Recorded concurrently between the check and the insert
            await self.session.rollback()
            logger.warning(
                f"[Deposit] {mask_tx_hash(latest.tx_hash)} hit the unique constraint, "
                "treated as already recorded"
            )
            return WalletResult(WalletOutcome.DUPLICATE, tx_hash=latest.tx_hash)

        logger.info(
            f"[Deposit] Credited {amount} {self.token_symbol} to wallet {wallet.id} "
            f"({mask_address(wallet.address)}), tx {mask_tx_hash(latest.tx_hash)}"
        )

        result = WalletResult(WalletOutcome.CREDITED, amount=amount, tx_hash=latest.tx_hash)
        await self._notify(
            DepositEvent(
                wallet_id=wallet.id,
                user_id=wallet.user_id,
                address=wallet.address,
                amount=amount,
                token=self.token_symbol,
                tx_hash=latest.tx_hash,
            )
        )

        try:
            result.topped_up = await self._check_gas(wallet)
        except Exception as e:
            await self.session.rollback()
            if is_external_failure(e):
                logger.warning(f"[Deposit] Gas check failed for wallet {wallet.id}: {e}")
            else:
                logger.exception(f"[Deposit] Gas check error for wallet {wallet.id}: {e}")

        return result

    async def _check_gas(self, wallet: WalletSnapshot) -> bool:
        """
        Top up the wallet or refresh its cached native balance.

        Returns:
            True if a top-up confirmed
        """
        balance = await self.gateway.get_native_balance(wallet.address)
        amount = self.gas_policy.top_up_amount(balance)

        if amount is not None:
            if self.gas_service is None:
                logger.warning(
                    f"[Deposit] Wallet {wallet.id} needs gas ({balance}) "
                    "but top-ups are not configured"
                )
                return False
            return await self.gas_service.top_up(wallet.address, amount)

        if balance != wallet.native_gas_balance:
            await self._wallet_repo.set_native_balance(wallet.id, balance)
            await self.session.commit()
        return False

    async def _notify(self, event: DepositEvent) -> None:
        if self.on_deposit is None:
            return
        try:
            outcome = self.on_deposit(event)
            if inspect.isawaitable(outcome):
                await outcome
        except Exception as e:
            logger.error(f"[Deposit] Deposit listener failed for {mask_tx_hash(event.tx_hash)}: {e}")

"""
Deposit reconciliation task.

One DepositReconciler.reconcile_all() per tick, in a fresh session.
"""

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from boostx.config.settings import settings
from boostx.services.blockchain.gateway import LedgerGateway
from boostx.services.deposit.gas_policy import GasTopUpPolicy, GasTopUpService
from boostx.services.deposit.reconciler import DepositListener, DepositReconciler


def build_deposit_handler(
    session_factory: async_sessionmaker[AsyncSession],
    gateway: LedgerGateway,
    gas_policy: GasTopUpPolicy,
    company_wallet_address: str | None = None,
    on_deposit: DepositListener | None = None,
):
    """
    Build the deposit tick handler.

    Args:
        session_factory: Session factory
        gateway: Ledger gateway
        gas_policy: Top-up threshold rule
        company_wallet_address: Hot wallet funding top-ups (defaults to settings)
        on_deposit: Optional listener for new deposits

    Returns:
        Coroutine function run on every tick
    """
    company = (
        company_wallet_address
        if company_wallet_address is not None
        else settings.company_gas_wallet_address
    )
    if not company:
        logger.warning("Company gas wallet not configured, gas top-ups disabled")

    async def run_deposit_reconciliation() -> None:
        async with session_factory() as session:
            gas_service = GasTopUpService(session, gateway, company) if company else None
            reconciler = DepositReconciler(
                session,
                gateway,
                gas_policy,
                gas_service,
                token_symbol=settings.stable_token_symbol,
                token_decimals=settings.stable_token_decimals,
                on_deposit=on_deposit,
            )
            await reconciler.reconcile_all()

    return run_deposit_reconciliation

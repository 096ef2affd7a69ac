"""
Handler table.

Maps every TaskKind this process can run to its handler. Built once at
startup; mining and crawler handlers belong to external collaborators and
are passed in through extra_handlers.
"""

from collections.abc import Mapping

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from boostx.models.enums import TaskKind
from boostx.services.blockchain.gateway import LedgerGateway
from boostx.services.deposit.gas_policy import GasTopUpPolicy
from boostx.services.deposit.reconciler import DepositListener
from jobs.scheduler import TaskHandler
from jobs.tasks.coin_price_refresh import build_coin_price_handler
from jobs.tasks.deposit_reconciliation import build_deposit_handler
from jobs.tasks.master_withdraw import run_master_withdraw


def build_handler_table(
    session_factory: async_sessionmaker[AsyncSession],
    gateway: LedgerGateway | None,
    gas_policy: GasTopUpPolicy | None = None,
    extra_handlers: Mapping[TaskKind, TaskHandler] | None = None,
    on_deposit: DepositListener | None = None,
) -> dict[TaskKind, TaskHandler]:
    """
    Build the handler table.

    Args:
        session_factory: Session factory
        gateway: Ledger gateway; None leaves deposit reconciliation unregistered
        gas_policy: Top-up rule (defaults to settings)
        extra_handlers: Handlers supplied by other components
        on_deposit: Listener for new deposits

    Returns:
        kind -> handler
    """
    handlers: dict[TaskKind, TaskHandler] = {
        TaskKind.COIN_PRICE: build_coin_price_handler(session_factory),
        TaskKind.MASTER_WITHDRAW: run_master_withdraw,
    }

    if gateway is not None:
        handlers[TaskKind.DEPOSIT] = build_deposit_handler(
            session_factory,
            gateway,
            gas_policy or GasTopUpPolicy.from_settings(),
            on_deposit=on_deposit,
        )
    else:
        logger.warning("Ledger gateway unavailable, deposit reconciliation not registered")

    if extra_handlers:
        handlers.update(extra_handlers)

    logger.info(f"Registered task handlers: {', '.join(k.value for k in handlers)}")
    return handlers

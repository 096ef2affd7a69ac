"""
End-to-end: scheduler boot drives deposit reconciliation through the
registered handler table.
"""

from decimal import Decimal

import pytest
from sqlalchemy import select

from boostx.models import TaskKind, TransactionRecord, Wallet
from boostx.services.blockchain.explorer_client import TokenTransfer
from boostx.services.deposit.gas_policy import GasTopUpPolicy
from jobs.registry import build_handler_table
from jobs.scheduler import TaskScheduler

WALLET_ADDRESS = "0x4444444444444444444444444444444444444444"


@pytest.mark.asyncio
@pytest.mark.slow
async def test_scheduled_ticks_credit_deposit_once(session_factory, make_user, mock_gateway):
    await make_user("alice", wallet_address=WALLET_ADDRESS)
    mock_gateway.get_token_transfers.return_value = [
        TokenTransfer(
            tx_hash="0xabc",
            from_address="0x3333333333333333333333333333333333333333",
            to_address=WALLET_ADDRESS,
            raw_value=500 * 10**18,
            block_number=1,
            timestamp=1,
        )
    ]

    handlers = build_handler_table(
        session_factory,
        mock_gateway,
        GasTopUpPolicy(threshold=Decimal("0.0002"), amount=Decimal("0.001")),
    )
    scheduler = TaskScheduler(session_factory, {TaskKind.DEPOSIT: handlers[TaskKind.DEPOSIT]})

    try:
        started = await scheduler.boot()
        assert started == [TaskKind.DEPOSIT]

        job = scheduler.scheduler.get_job("monitoring:deposit")
        assert job.trigger.interval.total_seconds() == 60

        # First tick
        assert await job.func(*job.args) is True
        async with session_factory() as session:
            wallet = (await session.execute(select(Wallet))).scalar_one()
            records = (await session.execute(select(TransactionRecord))).scalars().all()
        assert wallet.stable_token_balance == Decimal("500")
        assert [r.tx_hash for r in records] == ["0xabc"]

        # Second tick, identical explorer response
        assert await job.func(*job.args) is True
        async with session_factory() as session:
            wallet = (await session.execute(select(Wallet))).scalar_one()
            records = (await session.execute(select(TransactionRecord))).scalars().all()
        assert wallet.stable_token_balance == Decimal("500")
        assert len(records) == 1
    finally:
        await scheduler.shutdown(timeout=1)

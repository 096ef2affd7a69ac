"""
Integration tests for deposit reconciliation against an in-memory database.
"""

from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy import func, select

from boostx.models import TransactionRecord, Wallet
from boostx.services.blockchain.explorer_client import TokenTransfer
from boostx.services.deposit.gas_policy import GasTopUpPolicy
from boostx.services.deposit.reconciler import DepositReconciler, WalletOutcome, WalletSnapshot
from boostx.utils.exceptions import LedgerQueryError, RpcError

WALLET_ADDRESS = "0xabcdefabcdefabcdefabcdefabcdefabcdefabcd"
OTHER_ADDRESS = "0x2222222222222222222222222222222222222222"

POLICY = GasTopUpPolicy(threshold=Decimal("0.0002"), amount=Decimal("0.001"))


def _transfer(tx_hash: str, to: str, raw: int) -> TokenTransfer:
    return TokenTransfer(
        tx_hash=tx_hash,
        from_address="0x3333333333333333333333333333333333333333",
        to_address=to,
        raw_value=raw,
        block_number=1,
        timestamp=1,
    )


async def _record_count(session) -> int:
    return (await session.execute(select(func.count()).select_from(TransactionRecord))).scalar()


async def _balance(session_factory, address: str) -> Decimal:
    async with session_factory() as session:
        wallet = (
            await session.execute(select(Wallet).where(Wallet.address == address))
        ).scalar_one()
        return wallet.stable_token_balance


class TestDepositReconciler:
    """Scan, dedup, credit, gas check."""

    @pytest.mark.asyncio
    async def test_new_transfer_credits_wallet(self, db_session, session_factory, make_user, mock_gateway):
        await make_user("alice", wallet_address=WALLET_ADDRESS, token_balance=Decimal("10"))
        mock_gateway.get_token_transfers.return_value = [
            _transfer("0xabc", WALLET_ADDRESS, 500 * 10**18)
        ]

        report = await DepositReconciler(db_session, mock_gateway, POLICY).reconcile_all()

        assert report.scanned == 1
        assert report.credited == 1
        assert report.credited_amount == Decimal("500")
        assert await _balance(session_factory, WALLET_ADDRESS) == Decimal("510")

        record = (await db_session.execute(select(TransactionRecord))).scalar_one()
        assert record.tx_hash == "0xabc"
        assert record.type == "deposit"
        assert record.token == "USDT"
        assert record.amount == Decimal("500")

    @pytest.mark.asyncio
    async def test_repeated_runs_credit_once(self, db_session, session_factory, make_user, mock_gateway):
        await make_user("alice", wallet_address=WALLET_ADDRESS)
        mock_gateway.get_token_transfers.return_value = [
            _transfer("0xabc", WALLET_ADDRESS, 1500000000000000000)
        ]
        reconciler = DepositReconciler(db_session, mock_gateway, POLICY)

        for _ in range(3):
            await reconciler.reconcile_all()

        assert await _record_count(db_session) == 1
        assert await _balance(session_factory, WALLET_ADDRESS) == Decimal("1.5")

        report = await reconciler.reconcile_all()
        assert report.duplicates == 1
        assert report.credited == 0

    @pytest.mark.asyncio
    async def test_no_inbound_transfer_writes_nothing(self, db_session, session_factory, make_user, mock_gateway):
        await make_user("alice", wallet_address=WALLET_ADDRESS, gas_balance=Decimal("0.5"))
        mock_gateway.get_token_transfers.return_value = [
            _transfer("0xout", OTHER_ADDRESS, 10**18)
        ]

        report = await DepositReconciler(db_session, mock_gateway, POLICY).reconcile_all()

        assert report.idle == 1
        assert await _record_count(db_session) == 0
        assert await _balance(session_factory, WALLET_ADDRESS) == Decimal("0")
        mock_gateway.get_native_balance.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_only_latest_inbound_transfer_is_inspected(self, db_session, make_user, mock_gateway):
        await make_user("alice", wallet_address=WALLET_ADDRESS)
        mock_gateway.get_token_transfers.return_value = [
            _transfer("0xout", OTHER_ADDRESS, 10**18),
            _transfer("0xnew", WALLET_ADDRESS.upper().replace("0X", "0x"), 2 * 10**18),
            _transfer("0xold", WALLET_ADDRESS, 3 * 10**18),
        ]

        await DepositReconciler(db_session, mock_gateway, POLICY).reconcile_all()

        hashes = (await db_session.execute(select(TransactionRecord.tx_hash))).scalars().all()
        assert hashes == ["0xnew"]

    @pytest.mark.asyncio
    async def test_low_gas_triggers_top_up(self, db_session, make_user, mock_gateway):
        await make_user("alice", wallet_address=WALLET_ADDRESS)
        mock_gateway.get_token_transfers.return_value = [
            _transfer("0xabc", WALLET_ADDRESS, 10**18)
        ]
        mock_gateway.get_native_balance.return_value = Decimal("0.00019")
        gas_service = MagicMock()
        gas_service.top_up = AsyncMock(return_value=True)

        report = await DepositReconciler(
            db_session, mock_gateway, POLICY, gas_service
        ).reconcile_all()

        gas_service.top_up.assert_awaited_once_with(WALLET_ADDRESS, Decimal("0.001"))
        assert report.topups == 1

    @pytest.mark.asyncio
    async def test_sufficient_gas_refreshes_cached_balance(self, db_session, session_factory, make_user, mock_gateway):
        await make_user("alice", wallet_address=WALLET_ADDRESS, gas_balance=Decimal("0.001"))
        mock_gateway.get_token_transfers.return_value = [
            _transfer("0xabc", WALLET_ADDRESS, 10**18)
        ]
        mock_gateway.get_native_balance.return_value = Decimal("0.005")
        gas_service = MagicMock()
        gas_service.top_up = AsyncMock(return_value=True)

        await DepositReconciler(db_session, mock_gateway, POLICY, gas_service).reconcile_all()

        gas_service.top_up.assert_not_awaited()
        async with session_factory() as session:
            wallet = (await session.execute(select(Wallet))).scalar_one()
            assert wallet.native_gas_balance == Decimal("0.005")

    @pytest.mark.asyncio
    async def test_gas_failure_keeps_credit(self, db_session, session_factory, make_user, mock_gateway):
        await make_user("alice", wallet_address=WALLET_ADDRESS)
        mock_gateway.get_token_transfers.return_value = [
            _transfer("0xabc", WALLET_ADDRESS, 7 * 10**18)
        ]
        mock_gateway.get_native_balance.side_effect = RpcError("node down")

        report = await DepositReconciler(db_session, mock_gateway, POLICY).reconcile_all()

        assert report.credited == 1
        assert report.failed == 0
        assert await _balance(session_factory, WALLET_ADDRESS) == Decimal("7")
        assert await _record_count(db_session) == 1

    @pytest.mark.asyncio
    async def test_failing_wallet_does_not_stop_batch(self, db_session, session_factory, make_user, mock_gateway):
        await make_user("alice", wallet_address=WALLET_ADDRESS)
        await make_user("bob", wallet_address=OTHER_ADDRESS)

        async def transfers(address):
            if address == WALLET_ADDRESS:
                raise LedgerQueryError("explorer down")
            return [_transfer("0xbob", OTHER_ADDRESS, 4 * 10**18)]

        mock_gateway.get_token_transfers.side_effect = transfers

        report = await DepositReconciler(db_session, mock_gateway, POLICY).reconcile_all()

        assert report.scanned == 2
        assert report.failed == 1
        assert report.credited == 1
        assert await _balance(session_factory, OTHER_ADDRESS) == Decimal("4")

    @pytest.mark.asyncio
    async def test_wallet_without_address_is_skipped(self, db_session, make_user, mock_gateway):
        await make_user("alice", wallet_address="")
        await make_user("bob", wallet_address=OTHER_ADDRESS)

        report = await DepositReconciler(db_session, mock_gateway, POLICY).reconcile_all()

        assert report.failed == 1
        assert report.idle == 1
        mock_gateway.get_token_transfers.assert_awaited_once_with(OTHER_ADDRESS)

    @pytest.mark.asyncio
    async def test_listener_notified(self, db_session, make_user, mock_gateway):
        user = await make_user("alice", wallet_address=WALLET_ADDRESS)
        mock_gateway.get_token_transfers.return_value = [
            _transfer("0xabc", WALLET_ADDRESS, 2 * 10**18)
        ]
        events = []

        async def listener(event):
            events.append(event)

        await DepositReconciler(
            db_session, mock_gateway, POLICY, on_deposit=listener
        ).reconcile_all()

        assert len(events) == 1
        assert events[0].user_id == user.id
        assert events[0].amount == Decimal("2")
        assert events[0].tx_hash == "0xabc"

    @pytest.mark.asyncio
    async def test_reconcile_wallet_outcomes(self, db_session, make_user, mock_gateway):
        await make_user("alice", wallet_address=WALLET_ADDRESS)
        reconciler = DepositReconciler(db_session, mock_gateway, POLICY)
        wallet = (await db_session.execute(select(Wallet))).scalar_one()

        snapshot = WalletSnapshot.from_model(wallet)
        assert (await reconciler.reconcile_wallet(snapshot)).outcome is WalletOutcome.IDLE

        mock_gateway.get_token_transfers.return_value = [
            _transfer("0xabc", WALLET_ADDRESS, 10**18)
        ]
        assert (await reconciler.reconcile_wallet(snapshot)).outcome is WalletOutcome.CREDITED
        assert (await reconciler.reconcile_wallet(snapshot)).outcome is WalletOutcome.DUPLICATE

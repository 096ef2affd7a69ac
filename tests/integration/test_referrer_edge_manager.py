"""
Integration tests for referrer edge registration.
"""

from decimal import Decimal

import pytest
from sqlalchemy import func, select

from boostx.models import ReferrerEdge
from boostx.services.referral.edge_manager import ReferrerEdgeManager
from boostx.utils.exceptions import ValidationError


class TestReferrerEdgeManager:
    @pytest.mark.asyncio
    async def test_register_edge(self, db_session):
        edge = await ReferrerEdgeManager(db_session).register_edge(
            "alice", "bob", "premium", Decimal("10"), "carol", Decimal("2.5")
        )

        assert edge.id is not None
        assert edge.fee_rate == Decimal("10")
        assert edge.group_leader_name == "carol"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "fee_rate,leader_rate",
        [("-1", "0"), ("100.01", "0"), ("10", "-0.5"), ("10", "101")],
    )
    async def test_rate_out_of_range(self, db_session, fee_rate, leader_rate):
        with pytest.raises(ValidationError):
            await ReferrerEdgeManager(db_session).register_edge(
                "alice", "bob", "premium", Decimal(fee_rate), None, Decimal(leader_rate)
            )

    @pytest.mark.asyncio
    async def test_boundaries_accepted(self, db_session):
        manager = ReferrerEdgeManager(db_session)

        await manager.register_edge("alice", "bob", "basic", Decimal("0"))
        await manager.register_edge("alice", "bob", "premium", Decimal("100"))

        count = (await db_session.execute(select(func.count()).select_from(ReferrerEdge))).scalar()
        assert count == 2

    @pytest.mark.asyncio
    async def test_duplicate_rejected(self, db_session):
        manager = ReferrerEdgeManager(db_session)
        await manager.register_edge("alice", "bob", "premium", Decimal("10"))

        with pytest.raises(ValidationError):
            await manager.register_edge("alice", "carol", "premium", Decimal("5"))

    @pytest.mark.asyncio
    async def test_self_referral_rejected(self, db_session):
        with pytest.raises(ValidationError):
            await ReferrerEdgeManager(db_session).register_edge(
                "alice", "alice", "premium", Decimal("10")
            )

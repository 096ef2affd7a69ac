"""
Unit tests for the handler table.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from boostx.models import TaskKind
from jobs.registry import build_handler_table
from jobs.tasks.master_withdraw import run_master_withdraw


class TestBuildHandlerTable:
    def test_default_kinds(self):
        handlers = build_handler_table(MagicMock(), AsyncMock())

        assert set(handlers) == {TaskKind.DEPOSIT, TaskKind.COIN_PRICE, TaskKind.MASTER_WITHDRAW}
        assert handlers[TaskKind.MASTER_WITHDRAW] is run_master_withdraw

    def test_without_gateway_deposit_not_registered(self):
        handlers = build_handler_table(MagicMock(), None)

        assert TaskKind.DEPOSIT not in handlers

    def test_extra_handlers_added(self):
        mining = AsyncMock()
        crawler = AsyncMock()

        handlers = build_handler_table(
            MagicMock(),
            None,
            extra_handlers={TaskKind.MINING: mining, TaskKind.CRAWLER: crawler},
        )

        assert handlers[TaskKind.MINING] is mining
        assert handlers[TaskKind.CRAWLER] is crawler

    @pytest.mark.asyncio
    async def test_master_withdraw_tick_is_noop(self):
        assert await run_master_withdraw() is None

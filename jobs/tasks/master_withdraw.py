"""
Master withdraw task.

Reserved kind: the sweep of deposited funds into the master wallet is not
automated yet, the tick only records that it ran.
"""

from loguru import logger


async def run_master_withdraw() -> None:
    logger.debug("[Master Withdraw] Tick (sweep not automated)")

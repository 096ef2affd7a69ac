#!/usr/bin/env python3
"""
Register a package-specific referrer edge.

Usage:
    python scripts/register_referrer_edge.py alice bob premium 10 \
        --leader carol --leader-rate 2.5
"""

import argparse
import asyncio
import sys
from decimal import Decimal, InvalidOperation
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from loguru import logger

from boostx.config.database import async_session_maker, engine
from boostx.services.referral.edge_manager import ReferrerEdgeManager
from boostx.utils.exceptions import ValidationError

logger.remove()
logger.add(sys.stderr, level="INFO")


def _decimal(value: str) -> Decimal:
    try:
        return Decimal(value)
    except InvalidOperation as e:
        raise argparse.ArgumentTypeError(f"not a number: {value}") from e


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Register a referrer edge")
    parser.add_argument("user_name", help="Buyer the edge belongs to")
    parser.add_argument("referrer_user_name", help="User receiving the commission")
    parser.add_argument("package_type", help="Package type the edge applies to")
    parser.add_argument("fee_rate", type=_decimal, help="Commission percentage (0-100)")
    parser.add_argument("--leader", dest="group_leader_name", default=None, help="Group leader")
    parser.add_argument(
        "--leader-rate",
        dest="fee_rate_leader",
        type=_decimal,
        default=Decimal("0"),
        help="Group leader percentage (0-100)",
    )
    return parser.parse_args(argv)


async def register(args: argparse.Namespace) -> int:
    try:
        async with async_session_maker() as session:
            edge = await ReferrerEdgeManager(session).register_edge(
                user_name=args.user_name,
                referrer_user_name=args.referrer_user_name,
                package_type=args.package_type,
                fee_rate=args.fee_rate,
                group_leader_name=args.group_leader_name,
                fee_rate_leader=args.fee_rate_leader,
            )
    except ValidationError as e:
        logger.error(str(e))
        return 1
    finally:
        await engine.dispose()

    logger.success(f"Registered {edge!r}")
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(register(parse_args())))

"""
Referral log repository.
"""

from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from boostx.models.referral_log import ReferralLog
from boostx.repositories.base import BaseRepository


class ReferralLogRepository(BaseRepository[ReferralLog]):
    """Commission audit rows."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(ReferralLog, session)

    async def log_payment(
        self,
        *,
        group_leader_name: str | None,
        payee_user_name: str,
        payer_user_name: str,
        package_type: str,
        profit: Decimal,
    ) -> ReferralLog:
        """Append one commission payment."""
        return await self.create(
            group_leader_name=group_leader_name,
            payee_user_name=payee_user_name,
            payer_user_name=payer_user_name,
            package_type=package_type,
            profit=profit,
        )

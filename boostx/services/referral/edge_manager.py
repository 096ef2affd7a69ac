"""
Referrer edge management.
"""

from decimal import Decimal

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from boostx.config.constants import MAX_FEE_RATE, MIN_FEE_RATE
from boostx.models.referrer_edge import ReferrerEdge
from boostx.repositories.referrer_edge_repository import ReferrerEdgeRepository
from boostx.utils.exceptions import ValidationError


class ReferrerEdgeManager:
    """Registers package-specific referrer edges."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.edge_repo = ReferrerEdgeRepository(session)

    @staticmethod
    def _validate_rate(name: str, value: Decimal) -> None:
        if not MIN_FEE_RATE <= value <= MAX_FEE_RATE:
            raise ValidationError(
                f"{name} must be between {MIN_FEE_RATE} and {MAX_FEE_RATE}, got {value}"
            )

    async def register_edge(
        self,
        user_name: str,
        referrer_user_name: str,
        package_type: str,
        fee_rate: Decimal,
        group_leader_name: str | None = None,
        fee_rate_leader: Decimal = Decimal("0"),
    ) -> ReferrerEdge:
        """
        Register the referrer paid when user_name buys package_type.

        Args:
            user_name: Buyer the edge belongs to
            referrer_user_name: Commission payee
            package_type: Package type
            fee_rate: Payee percentage (0-100)
            group_leader_name: Optional group leader
            fee_rate_leader: Leader percentage (0-100)

        Returns:
            Created edge

        Raises:
            ValidationError: Rate out of range, self-referral or duplicate edge
        """
        self._validate_rate("fee_rate", fee_rate)
        self._validate_rate("fee_rate_leader", fee_rate_leader)

        if user_name == referrer_user_name:
            raise ValidationError("A user cannot be their own referrer")

        if await self.edge_repo.find_edge(user_name, package_type) is not None:
            raise ValidationError(
                f"Referrer edge already exists for {user_name} ({package_type})"
            )

        edge = await self.edge_repo.create(
            user_name=user_name,
            referrer_user_name=referrer_user_name,
            package_type=package_type,
            fee_rate=fee_rate,
            group_leader_name=group_leader_name,
            fee_rate_leader=fee_rate_leader,
        )
        await self.session.commit()

        logger.info(
            f"[Referral] Edge registered: {user_name} -> {referrer_user_name} "
            f"({package_type}, {fee_rate}%"
            + (f", leader {group_leader_name} {fee_rate_leader}%" if group_leader_name else "")
            + ")"
        )
        return edge

"""
Referral commission cascade.

Starting at the payer, follow account-level referrers until a user with a
package-specific edge is found. That edge pays its referrer and group
leader, then the walk ends: only one level ever pays out.

The fallback walk is bounded by a visited set and a hop limit.
"""

from dataclasses import dataclass, field
from decimal import ROUND_DOWN, Decimal
from enum import Enum

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from boostx.config.constants import COMMISSION_PRECISION
from boostx.config.settings import settings
from boostx.models.referrer_edge import ReferrerEdge
from boostx.repositories.referral_log_repository import ReferralLogRepository
from boostx.repositories.referrer_edge_repository import ReferrerEdgeRepository
from boostx.repositories.user_repository import UserRepository
from boostx.repositories.wallet_repository import WalletRepository
from boostx.utils.exceptions import ChainExhausted, CycleDetected, ValidationError


class CascadeOutcome(str, Enum):
    NO_REFERRER = "no_referrer"
    PAID = "paid"
    NO_COMMISSION = "no_commission"


@dataclass
class CommissionPayment:
    """One credited commission."""

    payee_user_name: str
    amount: Decimal
    is_leader: bool = False


@dataclass
class CascadeResult:
    """Result of one cascade run."""

    outcome: CascadeOutcome
    path: list[str]
    payments: list[CommissionPayment] = field(default_factory=list)
    edge_owner: str | None = None

    @property
    def total_paid(self) -> Decimal:
        return sum((p.amount for p in self.payments), Decimal("0"))


def commission(total_price: Decimal, rate: Decimal) -> Decimal:
    """Percentage of total_price, truncated to balance precision."""
    return (total_price * rate / Decimal("100")).quantize(
        COMMISSION_PRECISION, rounding=ROUND_DOWN
    )


class ReferralCommissionCascade:
    """Pays referral commissions for a completed purchase."""

    def __init__(self, session: AsyncSession, max_hops: int | None = None) -> None:
        """
        Initialize cascade.

        Args:
            session: Database session (committed once per distribute call)
            max_hops: Generic-referrer hop limit (defaults to settings)
        """
        self.session = session
        self.max_hops = max_hops if max_hops is not None else settings.referral_max_hops
        self.user_repo = UserRepository(session)
        self.edge_repo = ReferrerEdgeRepository(session)
        self.wallet_repo = WalletRepository(session)
        self.log_repo = ReferralLogRepository(session)

    async def distribute(
        self, payer_user_name: str, package_type: str, total_price: Decimal
    ) -> CascadeResult:
        """
        Distribute commissions for a purchase.

        Args:
            payer_user_name: Buyer
            package_type: Purchased package type
            total_price: Purchase price

        Returns:
            CascadeResult; NO_REFERRER when the walk ends without an edge

        Raises:
            ValidationError: Unknown payer or negative price
            CycleDetected: Referrer walk revisited a user
            ChainExhausted: Hop limit exceeded or dangling referrer
        """
        if total_price < 0:
            raise ValidationError(f"Total price must be non-negative: {total_price}")

        if await self.user_repo.get_by_username(payer_user_name) is None:
            raise ValidationError(f"Unknown payer: {payer_user_name}")

        edge, path = await self._find_paying_edge(payer_user_name, package_type)
        if edge is None:
            logger.debug(
                f"[Referral] No referrer for {payer_user_name} ({package_type}), "
                f"walked {' -> '.join(path)}"
            )
            return CascadeResult(CascadeOutcome.NO_REFERRER, path=path)

        try:
            payments = await self._pay(edge, payer_user_name, package_type, total_price)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        outcome = CascadeOutcome.PAID if payments else CascadeOutcome.NO_COMMISSION
        if payments:
            logger.info(
                f"[Referral] {payer_user_name} bought {package_type} for {total_price}: "
                + ", ".join(f"{p.payee_user_name}={p.amount}" for p in payments)
            )
        return CascadeResult(outcome, path=path, payments=payments, edge_owner=edge.user_name)

    async def _find_paying_edge(
        self, payer_user_name: str, package_type: str
    ) -> tuple[ReferrerEdge | None, list[str]]:
        """Walk generic referrers until a package-specific edge is found."""
        current = payer_user_name
        path = [current]
        visited = {current}

        while True:
            edge = await self.edge_repo.find_edge(current, package_type)
            if edge is not None:
                return edge, path

            user = await self.user_repo.get_by_username(current)
            if user is None:
                logger.error(f"[Referral] Dangling referrer {current} in chain of {payer_user_name}")
                raise ChainExhausted(
                    f"Referrer {current} has no account", payer_user_name, package_type, path
                )

            next_user = user.referrer_username
            if not next_user:
                return None, path

            if next_user in visited:
                logger.error(
                    f"[Referral] Cycle in referrer chain of {payer_user_name}: "
                    f"{' -> '.join(path + [next_user])}"
                )
                raise CycleDetected(
                    f"Referrer cycle at {next_user}", payer_user_name, package_type, path + [next_user]
                )

            if len(path) > self.max_hops:
                logger.error(
                    f"[Referral] Referrer chain of {payer_user_name} exceeds {self.max_hops} hops"
                )
                raise ChainExhausted(
                    f"More than {self.max_hops} referrer hops", payer_user_name, package_type, path
                )

            visited.add(next_user)
            path.append(next_user)
            current = next_user

    async def _pay(
        self,
        edge: ReferrerEdge,
        payer_user_name: str,
        package_type: str,
        total_price: Decimal,
    ) -> list[CommissionPayment]:
        payments: list[CommissionPayment] = []

        if edge.fee_rate > 0:
            amount = commission(total_price, edge.fee_rate)
            if amount > 0 and await self._credit(edge.referrer_user_name, amount):
                await self.log_repo.log_payment(
                    group_leader_name=edge.group_leader_name,
                    payee_user_name=edge.referrer_user_name,
                    payer_user_name=payer_user_name,
                    package_type=package_type,
                    profit=amount,
                )
                payments.append(CommissionPayment(edge.referrer_user_name, amount))

        if edge.fee_rate_leader > 0 and edge.group_leader_name:
            amount = commission(total_price, edge.fee_rate_leader)
            if amount > 0 and await self._credit(edge.group_leader_name, amount):
                await self.log_repo.log_payment(
                    group_leader_name=edge.group_leader_name,
                    payee_user_name=edge.group_leader_name,
                    payer_user_name=payer_user_name,
                    package_type=package_type,
                    profit=amount,
                )
                payments.append(
                    CommissionPayment(edge.group_leader_name, amount, is_leader=True)
                )

        return payments

    async def _credit(self, user_name: str, amount: Decimal) -> bool:
        credited = await self.wallet_repo.credit_user_token_balance(user_name, amount)
        if not credited:
            logger.warning(f"[Referral] {user_name} has no wallet, commission {amount} not paid")
        return credited

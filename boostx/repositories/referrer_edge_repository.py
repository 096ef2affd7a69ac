"""
Referrer edge repository.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from boostx.models.referrer_edge import ReferrerEdge
from boostx.repositories.base import BaseRepository


class ReferrerEdgeRepository(BaseRepository[ReferrerEdge]):
    """Package-specific referrer edges."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(ReferrerEdge, session)

    async def find_edge(self, user_name: str, package_type: str) -> ReferrerEdge | None:
        """Get the edge keyed by (user_name, package_type)."""
        return await self.get_by(user_name=user_name, package_type=package_type)

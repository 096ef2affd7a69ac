"""
User repository.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from boostx.models.user import User
from boostx.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """User repository with referral lookups."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(User, session)

    async def get_by_username(self, username: str) -> User | None:
        """Get user by username."""
        return await self.get_by(username=username)

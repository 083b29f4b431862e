"""
User repository: lookups needed by authentication and the notes subsystem.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from campreg.app_logger import get_logger
from campreg.db.models import User, UserRole

from .base import BaseRepository

logger = get_logger(__name__)


class UserRepository(BaseRepository[User]):
    """Repository for User model."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, User)

    async def create_user(
        self,
        email: str,
        first_name: str,
        last_name: str,
        role: UserRole = UserRole.PARTICIPANT,
    ) -> User:
        return await self.create(
            email=email.strip().lower(),
            first_name=first_name.strip(),
            last_name=last_name.strip(),
            role=role,
        )

    async def get_by_email(self, email: str) -> User | None:
        stmt = select(User).where(User.email == email.strip().lower())
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

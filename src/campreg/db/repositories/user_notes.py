"""
UserNote repository: notes listed per target user, loaded with their creator.
"""

from typing import NamedTuple
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from campreg.app_logger import get_logger
from campreg.db.models import User, UserNote

from .base import BaseRepository

logger = get_logger(__name__)


class NoteRow(NamedTuple):
    """A note together with its creator's name."""

    note: UserNote
    creator_first_name: str
    creator_last_name: str


class UserNoteRepository(BaseRepository[UserNote]):
    """
    Repository for UserNote model.

    Notes have no update path: rows are inserted with `create_note` and
    removed with `delete`.
    """

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, UserNote)

    async def create_note(self, user_id: UUID, note: str, created_by_id: UUID) -> UserNote:
        return await self.create(user_id=user_id, note=note, created_by_id=created_by_id)

    async def list_for_user(self, user_id: UUID) -> list[NoteRow]:
        """
        All notes about `user_id`, newest first, joined to the creator's name.
        """
        stmt = (
            select(UserNote, User.first_name, User.last_name)
            .join(User, UserNote.created_by_id == User.id)
            .where(UserNote.user_id == user_id)
            .order_by(UserNote.created_at.desc())
        )
        result = await self.session.execute(stmt)
        rows = [NoteRow(note, first, last) for note, first, last in result.all()]
        logger.debug("Listed %d notes for user %s", len(rows), user_id)
        return rows

    async def get_with_creator(self, note_id: UUID) -> UserNote | None:
        """Load a note with `created_by` populated (its role drives deletion rights)."""
        stmt = (
            select(UserNote)
            .options(joinedload(UserNote.created_by))
            .where(UserNote.id == note_id)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

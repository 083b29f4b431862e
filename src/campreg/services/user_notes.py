# src/campreg/services/user_notes.py
"""
Service for staff notes attached to user profiles.

Every call takes the acting user explicitly; nothing is read from request
context. Each operation does one existence check followed by at most one
mutation, and storage errors propagate unchanged.
"""
from __future__ import annotations

import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from campreg.app_logger import get_logger
from campreg.db.models import UserNote
from campreg.db.repositories import NoteRow, UserNoteRepository, UserRepository
from campreg.services.errors import ForbiddenError, NotFoundError
from campreg.services.note_policy import Actor, can_delete

log = get_logger("services.user_notes")


def parse_id(raw: str, kind: str) -> uuid.UUID:
    """
    Parse a path id. An id that is not a UUID cannot name a stored row, so it
    is reported the same way as a missing one.
    """
    try:
        return uuid.UUID(raw)
    except ValueError:
        raise NotFoundError(f"{kind} with ID {raw} not found", context={"id": raw})


class UserNotesService:
    def __init__(self, users: UserRepository, notes: UserNoteRepository) -> None:
        self.users = users
        self.notes = notes

    @classmethod
    def from_session(cls, session: AsyncSession) -> "UserNotesService":
        return cls(UserRepository(session), UserNoteRepository(session))

    async def _ensure_user(self, user_id: uuid.UUID) -> None:
        if not await self.users.exists(user_id):
            raise NotFoundError(
                f"User with ID {user_id} not found", context={"user_id": user_id}
            )

    async def list_for_user(self, user_id: uuid.UUID) -> list[NoteRow]:
        """All notes about `user_id`, newest first, with the creator's name."""
        await self._ensure_user(user_id)
        return await self.notes.list_for_user(user_id)

    async def create(self, user_id: uuid.UUID, body: str, creator_id: uuid.UUID) -> UserNote:
        """
        Attach a note to `user_id`. The body length is validated by the
        request schema before it gets here.
        """
        await self._ensure_user(user_id)
        note = await self.notes.create_note(user_id=user_id, note=body, created_by_id=creator_id)
        log.info("note %s created for user %s by %s", note.id, user_id, creator_id)
        return note

    async def delete(self, note_id: uuid.UUID, actor: Actor) -> UserNote:
        """
        Delete a note if `actor` is allowed to (see `can_delete`).

        Returns the deleted record. A note that is already gone, including
        one removed by a concurrent caller after it was loaded, raises
        NotFoundError.
        """
        note = await self.notes.get_with_creator(note_id)
        if note is None:
            raise NotFoundError(
                f"Note with ID {note_id} not found", context={"note_id": note_id}
            )

        if not can_delete(note.created_by_id, note.created_by.role, actor):
            log.warning(
                "note %s delete denied for %s (%s); creator %s is %s",
                note_id, actor.id, actor.role.value, note.created_by_id, note.created_by.role.value,
            )
            raise ForbiddenError(
                "You do not have permission to delete this note",
                context={"note_id": note_id, "actor_id": actor.id},
            )

        if not await self.notes.delete(note_id):
            raise NotFoundError(
                f"Note with ID {note_id} not found", context={"note_id": note_id}
            )
        log.info("note %s deleted by %s (%s)", note_id, actor.id, actor.role.value)
        return note

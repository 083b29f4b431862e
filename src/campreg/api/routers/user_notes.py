from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from campreg.auth.deps import actor_for, require_roles
from campreg.db.models import User, UserRole
from campreg.db.session import get_db
from campreg.schemas.user_notes import UserNoteCreate, UserNoteOut, UserNoteWithCreatorOut
from campreg.services.user_notes import UserNotesService, parse_id

staff_or_admin = require_roles(any_of={UserRole.ADMIN, UserRole.STAFF})

router = APIRouter(prefix="/admin/users", tags=["user-notes"])


def get_user_notes_service(session: AsyncSession = Depends(get_db)) -> UserNotesService:
    return UserNotesService.from_session(session)


# ids arrive as plain strings; anything that is not a UUID is a 404
def path_user_id(user_id: str) -> uuid.UUID:
    return parse_id(user_id, "User")


def path_note_id(note_id: str) -> uuid.UUID:
    return parse_id(note_id, "Note")


@router.get(
    "/{user_id}/notes",
    response_model=list[UserNoteWithCreatorOut],
    summary="Get all notes for a user",
    responses={403: {"description": "Insufficient privileges"}, 404: {"description": "User not found"}},
)
async def list_user_notes(
    _user: User = Depends(staff_or_admin),
    user_id: uuid.UUID = Depends(path_user_id),
    service: UserNotesService = Depends(get_user_notes_service),
) -> list[UserNoteWithCreatorOut]:
    rows = await service.list_for_user(user_id)
    return [UserNoteWithCreatorOut.from_row(r) for r in rows]


@router.post(
    "/{user_id}/notes",
    response_model=UserNoteOut,
    status_code=status.HTTP_201_CREATED,
    summary="Create a note for a user",
    responses={403: {"description": "Insufficient privileges"}, 404: {"description": "User not found"}},
)
async def create_user_note(
    payload: UserNoteCreate,
    user: User = Depends(staff_or_admin),
    user_id: uuid.UUID = Depends(path_user_id),
    service: UserNotesService = Depends(get_user_notes_service),
) -> UserNoteOut:
    note = await service.create(user_id, payload.note, creator_id=user.id)
    return UserNoteOut.model_validate(note)


@router.delete(
    "/notes/{note_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete a note",
    responses={403: {"description": "Not allowed to delete this note"}, 404: {"description": "Note not found"}},
)
async def delete_user_note(
    user: User = Depends(staff_or_admin),
    note_id: uuid.UUID = Depends(path_note_id),
    service: UserNotesService = Depends(get_user_notes_service),
) -> Response:
    await service.delete(note_id, actor_for(user))
    return Response(status_code=status.HTTP_204_NO_CONTENT)

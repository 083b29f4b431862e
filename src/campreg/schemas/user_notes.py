# src/campreg/schemas/user_notes.py
from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import Field, field_validator

from campreg.db.models.user_notes import NOTE_MAX_LENGTH
from campreg.db.repositories.user_notes import NoteRow
from .base import APIModel


class UserNoteCreate(APIModel):
    """Payload for attaching a note to a user."""

    note: str = Field(..., min_length=1, max_length=NOTE_MAX_LENGTH, description="The note content")

    @field_validator("note")
    @classmethod
    def _not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("note must not be blank")
        return v


class UserNoteOut(APIModel):
    id: uuid.UUID
    user_id: uuid.UUID = Field(..., description="ID of the user this note is about")
    note: str
    created_by_id: uuid.UUID = Field(..., description="ID of the user who created this note")
    created_at: datetime
    updated_at: datetime


class UserNoteWithCreatorOut(UserNoteOut):
    creator_first_name: str
    creator_last_name: str

    @classmethod
    def from_row(cls, row: NoteRow) -> "UserNoteWithCreatorOut":
        return cls(
            **UserNoteOut.model_validate(row.note).model_dump(),
            creator_first_name=row.creator_first_name,
            creator_last_name=row.creator_last_name,
        )

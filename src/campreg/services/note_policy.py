from __future__ import annotations

import uuid
from dataclasses import dataclass

from campreg.db.models.enums import UserRole


@dataclass(frozen=True)
class Actor:
    """The authenticated user invoking an operation."""

    id: uuid.UUID
    role: UserRole


def can_delete(creator_id: uuid.UUID, creator_role: UserRole, actor: Actor) -> bool:
    """
    Whether `actor` may delete a note written by `creator_id`.

    Allowed when the actor wrote the note, when the actor is an admin, or
    when the actor is staff and the note was not written by an admin.
    """
    if actor.id == creator_id:
        return True
    if actor.role == UserRole.ADMIN:
        return True
    return actor.role == UserRole.STAFF and creator_role != UserRole.ADMIN

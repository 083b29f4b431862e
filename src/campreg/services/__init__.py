from .errors import CampregError, ForbiddenError, NotFoundError
from .note_policy import Actor, can_delete
from .user_notes import UserNotesService, parse_id

__all__ = [
    "Actor",
    "CampregError",
    "ForbiddenError",
    "NotFoundError",
    "UserNotesService",
    "can_delete",
    "parse_id",
]

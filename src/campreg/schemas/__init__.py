from .base import APIModel
from .user import UserOut
from .user_notes import UserNoteCreate, UserNoteOut, UserNoteWithCreatorOut

__all__ = ["APIModel", "UserOut", "UserNoteCreate", "UserNoteOut", "UserNoteWithCreatorOut"]

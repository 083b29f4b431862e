from .base import BaseRepository
from .users import UserRepository
from .user_notes import NoteRow, UserNoteRepository

__all__ = ["BaseRepository", "UserRepository", "UserNoteRepository", "NoteRow"]

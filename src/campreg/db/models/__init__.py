# Import every model so Base.metadata is complete (Alembic, create_all).
from campreg.db.base import Base
from campreg.db.models.enums import UserRole
from campreg.db.models.users import User
from campreg.db.models.user_notes import UserNote, NOTE_MAX_LENGTH

__all__ = ["Base", "UserRole", "User", "UserNote", "NOTE_MAX_LENGTH"]

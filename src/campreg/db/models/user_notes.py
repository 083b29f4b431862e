"""
SQLAlchemy model for UserNote: a staff-only annotation on a user profile.
"""
from __future__ import annotations

import uuid
from typing import ClassVar

import sqlalchemy as sa
from sqlalchemy import ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from campreg.db.base import Base, UUIDMixin, GUID, TimestampMixin

NOTE_MAX_LENGTH = 1024


class UserNote(UUIDMixin, TimestampMixin, Base):
    __tablename__ = "user_notes"

    NOTE: ClassVar[str] = (
        "description=Stores staff notes attached to a user profile. "
        "References related entities via: user, created_by. "
        "Notes are immutable; they are only created or deleted."
    )

    __table_args__ = (
        sa.Index("ix_user_notes_user_id", "user_id"),
        sa.Index("ix_user_notes_created_by_id", "created_by_id"),
        {
            "comment": (
                "Stores staff notes attached to a user profile. "
                "Includes standard audit timestamps (created_at, updated_at). "
                "Primary key is `id`."
            ),
            "info": {"note": NOTE},
        },
    )

    user_id: Mapped[uuid.UUID] = mapped_column(
        GUID(), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    note: Mapped[str] = mapped_column(sa.Text, nullable=False)
    created_by_id: Mapped[uuid.UUID] = mapped_column(
        GUID(), ForeignKey("users.id", ondelete="RESTRICT"), nullable=False
    )

    user: Mapped["User"] = relationship(
        "User", back_populates="notes", foreign_keys=[user_id]
    )
    created_by: Mapped["User"] = relationship("User", foreign_keys=[created_by_id])

    def __repr__(self) -> str:
        return f"UserNote(id={self.id!r}, user_id={self.user_id!r}, created_by_id={self.created_by_id!r})"

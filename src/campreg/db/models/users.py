from __future__ import annotations

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column, relationship

from campreg.db.base import Base, UUIDMixin, TimestampMixin
from campreg.db.models.enums import UserRole


class User(UUIDMixin, TimestampMixin, Base):
    __tablename__ = "users"

    __table_args__ = {
        "comment": (
            "Stores camp participants, staff and administrators. "
            "Includes standard audit timestamps (created_at, updated_at). "
            "Primary key is `id`."
        )
    }

    email: Mapped[str] = mapped_column(sa.String(255), unique=True, nullable=False, index=True)
    first_name: Mapped[str] = mapped_column(sa.String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(sa.String(100), nullable=False)
    role: Mapped[UserRole] = mapped_column(
        sa.Enum(UserRole, name="user_role"),
        nullable=False,
        default=UserRole.PARTICIPANT,
        server_default=UserRole.PARTICIPANT.value,
    )

    # Notes written about this user; removed together with the user.
    notes: Mapped[list["UserNote"]] = relationship(
        "UserNote",
        back_populates="user",
        foreign_keys="UserNote.user_id",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def __repr__(self) -> str:
        return f"User(id={self.id!r}, email={self.email!r}, role={self.role!r})"

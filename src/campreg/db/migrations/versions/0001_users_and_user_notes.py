from alembic import op
import sqlalchemy as sa

from campreg.db.base import GUID

revision = "0001_users_and_user_notes"
down_revision = None
branch_labels = None
depends_on = None

user_role = sa.Enum("ADMIN", "STAFF", "PARTICIPANT", name="user_role")


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", GUID(), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("first_name", sa.String(100), nullable=False),
        sa.Column("last_name", sa.String(100), nullable=False),
        sa.Column("role", user_role, nullable=False, server_default="PARTICIPANT"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_users"),
        comment="Stores camp participants, staff and administrators.",
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "user_notes",
        sa.Column("id", GUID(), nullable=False),
        sa.Column("user_id", GUID(), nullable=False),
        sa.Column("note", sa.Text(), nullable=False),
        sa.Column("created_by_id", GUID(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_user_notes"),
        sa.ForeignKeyConstraint(
            ["user_id"], ["users.id"],
            name="fk_user_notes_user_id_users", ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["created_by_id"], ["users.id"],
            name="fk_user_notes_created_by_id_users", ondelete="RESTRICT",
        ),
        comment="Stores staff notes attached to a user profile.",
    )
    op.create_index("ix_user_notes_user_id", "user_notes", ["user_id"])
    op.create_index("ix_user_notes_created_by_id", "user_notes", ["created_by_id"])


def downgrade() -> None:
    op.drop_index("ix_user_notes_created_by_id", table_name="user_notes")
    op.drop_index("ix_user_notes_user_id", table_name="user_notes")
    op.drop_table("user_notes")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")
    user_role.drop(op.get_bind(), checkfirst=True)

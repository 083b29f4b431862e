# src/campreg/tests/test_repositories.py
from __future__ import annotations

import uuid

import pytest
from sqlalchemy.exc import IntegrityError

from campreg.db.models import UserRole
from campreg.db.repositories import UserNoteRepository, UserRepository

pytestmark = pytest.mark.anyio


async def test_create_user_normalizes_input(session):
    repo = UserRepository(session)
    user = await repo.create_user("  Camp.Lead@Camp.TEST ", " Lee ", " Lead ", UserRole.STAFF)

    assert user.email == "camp.lead@camp.test"
    assert user.full_name == "Lee Lead"
    assert (await repo.get_by_email("CAMP.LEAD@camp.test")).id == user.id


async def test_create_user_defaults_to_participant(session):
    user = await UserRepository(session).create_user("p@camp.test", "P", "Q")
    assert user.role is UserRole.PARTICIPANT


async def test_duplicate_email_rejected(session, users):
    with pytest.raises(IntegrityError):
        await UserRepository(session).create_user("staff@camp.test", "Dup", "User")


async def test_exists_and_get_by_id(session, users):
    repo = UserRepository(session)
    assert await repo.exists(users.admin.id) is True
    assert await repo.exists(uuid.uuid4()) is False
    assert (await repo.get_by_id(users.admin.id)).email == "admin@camp.test"
    assert await repo.get_by_id(uuid.uuid4()) is None


async def test_get_with_creator_loads_role(session, users):
    repo = UserNoteRepository(session)
    created = await repo.create_note(users.participant.id, "bring inhaler", users.staff2.id)

    note = await repo.get_with_creator(created.id)
    assert note.created_by.role is UserRole.STAFF
    assert note.created_by.first_name == "Sky"


async def test_delete_reports_missing_row(session, users):
    repo = UserNoteRepository(session)
    note = await repo.create_note(users.participant.id, "x", users.staff.id)

    assert await repo.delete(note.id) is True
    assert await repo.delete(note.id) is False

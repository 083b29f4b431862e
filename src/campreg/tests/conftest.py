# src/campreg/tests/conftest.py
from __future__ import annotations

import os
import sys
import logging
from types import SimpleNamespace

import pytest

# ==============================================================
# Env bootstrap (must run before campreg.core.config is imported)
# ==============================================================
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["TESTING"] = "1"
os.environ["LOG_JSON"] = "0"
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("JWT_ALLOWED_ALGS", "HS256")

from httpx import AsyncClient, ASGITransport  # noqa: E402
from sqlalchemy import event  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from campreg.auth.deps import create_access_token  # noqa: E402
from campreg.db.models import Base, UserRole  # noqa: E402
from campreg.db.repositories import UserRepository  # noqa: E402
from campreg.db.session import get_db  # noqa: E402
from campreg.main import create_app  # noqa: E402


# =========================
# Logging -> stdout
# =========================
@pytest.fixture(scope="session", autouse=True)
def _tests_log_to_stdout():
    """Send test logs to stdout so they show up under pytest -s."""
    root = logging.getLogger()
    if not any(getattr(h, "stream", None) is sys.stdout for h in root.handlers):
        h = logging.StreamHandler(sys.stdout)
        h.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
        root.addHandler(h)
    root.setLevel(os.getenv("TEST_LOG_LEVEL", "INFO").upper())


# Make anyio run on asyncio (so our async fixtures work everywhere)
@pytest.fixture(scope="session")
def anyio_backend():
    return "asyncio"


# ==============================================================
# Database: one in-memory SQLite per test
# ==============================================================

@pytest.fixture
async def engine():
    eng = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    # SQLite leaves FK enforcement off unless asked (needed for CASCADE/RESTRICT)
    @event.listens_for(eng.sync_engine, "connect")
    def _fk_on(dbapi_conn, _record):
        cur = dbapi_conn.cursor()
        cur.execute("PRAGMA foreign_keys=ON")
        cur.close()

    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest.fixture
def sessionmaker(engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(bind=engine, expire_on_commit=False, class_=AsyncSession)


@pytest.fixture
async def session(sessionmaker):
    async with sessionmaker() as s:
        yield s


@pytest.fixture
async def users(sessionmaker):
    """admin, two staff members and a participant."""
    async with sessionmaker() as s:
        repo = UserRepository(s)
        admin = await repo.create_user("admin@camp.test", "Ada", "Admin", UserRole.ADMIN)
        staff = await repo.create_user("staff@camp.test", "Sam", "Staff", UserRole.STAFF)
        staff2 = await repo.create_user("staff2@camp.test", "Sky", "Staffer", UserRole.STAFF)
        participant = await repo.create_user("kid@camp.test", "Pat", "Camper", UserRole.PARTICIPANT)
    return SimpleNamespace(admin=admin, staff=staff, staff2=staff2, participant=participant)


def _bearer(user) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user.id)}", "Accept": "application/json"}


# ==============================================================
# Client fixture (in-process app, DB dependency pointed at the test engine)
# ==============================================================

@pytest.fixture
async def client(sessionmaker):
    app = create_app()

    async def _get_test_db():
        async with sessionmaker() as s:
            try:
                yield s
            except Exception:
                await s.rollback()
                raise

    app.dependency_overrides[get_db] = _get_test_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    """auth_headers(user) -> headers carrying a freshly signed token for that user."""
    return _bearer

# src/campreg/tests/test_app.py
from __future__ import annotations

import json
import logging
import uuid
from contextlib import contextmanager
from datetime import datetime, timezone

import pytest
from sqlalchemy.exc import IntegrityError
from starlette.requests import Request

from campreg.core.config import Settings
from campreg.main import build_logging_config, campreg_error_handler, create_app, integrity_error_handler
from campreg.schemas.user_notes import UserNoteCreate, UserNoteOut
from campreg.services.errors import CampregError, ForbiddenError, NotFoundError


def _request(method: str = "POST", path: str = "/admin/users/x/notes") -> Request:
    return Request({"type": "http", "method": method, "path": path, "headers": [], "query_string": b""})


def _integrity(msg: str) -> IntegrityError:
    return IntegrityError("INSERT ...", {}, Exception(msg))


@contextmanager
def _records(name: str):
    """Collect records emitted on logger `name` (campreg loggers do not propagate)."""
    seen: list[logging.LogRecord] = []
    handler = logging.Handler()
    handler.emit = seen.append
    lg = logging.getLogger(name)
    lg.addHandler(handler)
    try:
        yield seen
    finally:
        lg.removeHandler(handler)


# ---------------- routes ----------------

def _operations(app) -> dict[tuple[str, str], dict]:
    return {
        (path, method.upper()): op
        for path, item in app.openapi()["paths"].items()
        for method, op in item.items()
    }


def test_note_routes_are_mounted():
    routes = _operations(create_app())
    assert ("/admin/users/{user_id}/notes", "GET") in routes
    assert ("/admin/users/{user_id}/notes", "POST") in routes
    assert ("/admin/users/notes/{note_id}", "DELETE") in routes
    assert ("/me", "GET") in routes


def test_operation_ids_are_unique():
    ids = [op["operationId"] for op in _operations(create_app()).values()]
    assert len(ids) >= 4
    assert len(ids) == len(set(ids))
    assert "user_notes__delete__admin_users_notes_note_id" in ids


@pytest.mark.anyio
async def test_startup_logs_mounted_routes():
    app = create_app()
    with _records("startup") as seen:
        async with app.router.lifespan_context(app):
            pass
    mounted = [r for r in seen if "mounted routes" in r.msg]
    assert mounted
    assert "/admin/users/{user_id}/notes" in mounted[0].args[0]


# ---------------- errors ----------------

def test_domain_error_codes():
    assert NotFoundError("x").status_code == 404
    assert ForbiddenError("x").status_code == 403
    err = NotFoundError("User with ID 1 not found", context={"user_id": 1})
    d = err.to_dict()
    assert d["error_code"] == "not_found"
    assert d["context"] == {"user_id": "1"}
    assert d["exception_type"] == "NotFoundError"
    assert isinstance(err, CampregError)
    assert str(err) == "NotFoundError: User with ID 1 not found"


@pytest.mark.anyio
async def test_domain_error_response_is_logged_on_api_logger():
    with _records("campreg.api") as seen:
        resp = await campreg_error_handler(
            _request("DELETE", "/admin/users/notes/x"), NotFoundError("Note with ID x not found")
        )
    assert resp.status_code == 404
    assert json.loads(resp.body) == {"detail": "Note with ID x not found"}
    assert [r.levelno for r in seen] == [logging.WARNING]


@pytest.mark.anyio
@pytest.mark.parametrize(
    "message, status",
    [
        ("UNIQUE constraint failed: users.email", 409),
        ('duplicate key value violates unique constraint "ix_users_email"', 409),
        ("FOREIGN KEY constraint failed", 422),
        ('null value in column "note" violates not-null constraint', 422),
        ("something else entirely", 400),
    ],
)
async def test_integrity_error_mapping(message, status):
    resp = await integrity_error_handler(_request(), _integrity(message))
    assert resp.status_code == status
    body = json.loads(resp.body)
    assert body["detail"]["error"] == "integrity_error"


# ---------------- logging ----------------

def test_logging_config_json_and_plain():
    cfg = build_logging_config("debug", json_logs=True)
    assert cfg["handlers"]["console"]["formatter"] == "json"
    assert cfg["formatters"]["json"]["()"] == "pythonjsonlogger.jsonlogger.JsonFormatter"
    assert cfg["loggers"]["campreg"]["level"] == "DEBUG"

    plain = build_logging_config("info", json_logs=False)
    assert plain["handlers"]["console"]["formatter"] == "plain"


# ---------------- settings ----------------

def test_cors_from_csv(monkeypatch):
    monkeypatch.setenv("CORS_ORIGINS", "http://a.test/, http://b.test")
    assert Settings().cors_origins == ["http://a.test", "http://b.test"]


def test_cors_from_json(monkeypatch):
    monkeypatch.setenv("CORS_ORIGINS", '["http://a.test", "http://c.test/"]')
    assert Settings().cors_origins == ["http://a.test", "http://c.test"]


def test_cors_falls_back_to_frontend_url(monkeypatch):
    monkeypatch.delenv("CORS_ORIGINS", raising=False)
    monkeypatch.setenv("FRONTEND_URL", "http://camp.test/")
    assert Settings().cors_origins == ["http://camp.test"]


def test_jwt_algorithms_list(monkeypatch):
    monkeypatch.setenv("JWT_ALLOWED_ALGS", "HS256, HS384")
    assert Settings().jwt_algorithms == ["HS256", "HS384"]


# ---------------- schemas ----------------

def test_note_schema_speaks_camel_case():
    now = datetime.now(timezone.utc)
    out = UserNoteOut(
        id=uuid.uuid4(), user_id=uuid.uuid4(), note="n", created_by_id=uuid.uuid4(),
        created_at=now, updated_at=now,
    )
    dumped = out.model_dump(by_alias=True)
    assert {"userId", "createdById", "createdAt", "updatedAt"} <= set(dumped)
    assert UserNoteCreate.model_validate({"note": "  keep spacing  "}).note == "  keep spacing  "

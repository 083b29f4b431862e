# src/campreg/main.py
from __future__ import annotations

import logging
import logging.config
from contextlib import asynccontextmanager

import sqlalchemy as sa
from asyncpg.exceptions import (
    UniqueViolationError,
    ForeignKeyViolationError,
    NotNullViolationError,
    CheckViolationError,
)
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.routing import APIRoute
from sqlalchemy.exc import IntegrityError
from starlette.responses import JSONResponse

from campreg.api.routers.health import router as health_router
from campreg.api.routers.me import router as me_router
from campreg.api.routers.user_notes import router as user_notes_router
from campreg.app_logger import get_logger
from campreg.core.config import settings
from campreg.db.session import dispose_engine, get_engine
from campreg.services.errors import CampregError


def build_logging_config(level: str = "INFO", json_logs: bool = True) -> dict:
    level = level.upper()
    formatter = "json" if json_logs else "plain"
    console = {"handlers": ["console"], "level": level, "propagate": False}
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "json": {
                "()": "pythonjsonlogger.jsonlogger.JsonFormatter",
                "fmt": "%(asctime)s %(levelname)s %(name)s %(message)s %(process)d %(thread)d %(module)s",
            },
            "plain": {"format": "%(asctime)s [%(levelname)s] %(name)s: %(message)s"},
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": formatter,
                "stream": "ext://sys.stdout",
            },
        },
        "loggers": {
            "":               {"handlers": ["console"], "level": level},
            "campreg":        console,
            "uvicorn":        console,
            "uvicorn.error":  console,
            "uvicorn.access": console,
            "startup":        {"handlers": ["console"], "level": "DEBUG", "propagate": False},
        },
    }


logging.config.dictConfig(build_logging_config(settings.LOG_LEVEL, settings.LOG_JSON))
log = logging.getLogger("startup")


def generate_unique_id(route: APIRoute) -> str:
    methods = "_".join(sorted((route.methods or []), key=str.lower)).lower()
    path = route.path_format.replace("/", "_").replace("{", "").replace("}", "").strip("_")
    tag = (route.tags[0] if route.tags else "default").lower().replace(" ", "_").replace("-", "_")
    return f"{tag}__{methods}__{path}"


async def campreg_error_handler(request: Request, exc: CampregError) -> JSONResponse:
    get_logger("api").warning(
        "%s %s -> %s: %s", request.method, request.url.path, exc.status_code, exc.message
    )
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    """
    Map DB integrity errors to clear 4xx responses instead of 500.
    - Unique constraint -> 409 Conflict
    - Not-null / FK / Check -> 422 Unprocessable Entity
    - Otherwise -> 400 Bad Request
    """
    orig = getattr(exc, "orig", None)
    cause = getattr(orig, "__cause__", None)
    message = str(orig or exc)

    status_code = 400
    detail = "Integrity error"

    # asyncpg errors arrive wrapped by the SQLAlchemy adapter
    for candidate in (orig, cause):
        if isinstance(candidate, UniqueViolationError):
            status_code, detail = 409, "Unique constraint violation"
        elif isinstance(candidate, ForeignKeyViolationError):
            status_code, detail = 422, "Foreign key constraint failed"
        elif isinstance(candidate, NotNullViolationError):
            status_code, detail = 422, "Missing required field (NOT NULL violation)"
        elif isinstance(candidate, CheckViolationError):
            status_code, detail = 422, "Check constraint failed"

    if status_code == 400:
        # Generic string heuristics (works across DBs/drivers)
        low = message.lower()
        if "unique constraint" in low or "duplicate key" in low:
            status_code, detail = 409, "Unique constraint violation"
        elif "foreign key" in low:
            status_code, detail = 422, "Foreign key constraint failed"
        elif "not null" in low or "null value in column" in low:
            status_code, detail = 422, "Missing required field (NOT NULL violation)"
        elif "check constraint" in low:
            status_code, detail = 422, "Check constraint failed"

    log.exception(
        "IntegrityError on %s %s -> %s: %s",
        request.method, request.url.path, status_code, message
    )
    return JSONResponse(
        status_code=status_code,
        content={"detail": {"error": "integrity_error", "reason": detail}},
    )


def create_app() -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # ---------------- STARTUP ----------------
        if not settings.TESTING:
            try:
                async with get_engine().connect() as conn:
                    await conn.execute(sa.text("SELECT 1"))
                log.info("[startup] database reachable")
            except Exception as e:
                # keep serving; /healthz/db reports the failure
                log.warning("[startup] database ping failed: %s", e)

        log.info(
            "[startup] mounted routes: %s",
            sorted(app.openapi().get("paths", {})),
        )

        yield

        # ---------------- SHUTDOWN ----------------
        await dispose_engine()

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        generate_unique_id_function=generate_unique_id,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(CampregError, campreg_error_handler)
    app.add_exception_handler(IntegrityError, integrity_error_handler)

    app.include_router(health_router)
    app.include_router(me_router)
    app.include_router(user_notes_router)

    return app


app = create_app()

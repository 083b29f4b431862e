from __future__ import annotations

import os
import sys
from logging.config import fileConfig
from urllib.parse import quote, urlsplit, urlunsplit

from alembic import context
from sqlalchemy import engine_from_config, pool

from campreg.db.models import Base

print(f"[alembic-env] loaded: {__file__}", file=sys.stderr)

# Alembic Config object
config = context.config

# Logging
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata

# ----- helpers ---------------------------------------------------------------

def _sync_url(url_str: str) -> str:
    """Swap async drivers for their sync counterparts and percent-encode the password."""
    p = urlsplit(url_str)
    scheme = p.scheme
    if scheme == "postgresql" or scheme.startswith("postgresql+"):
        scheme = "postgresql+psycopg2"
    elif scheme.startswith("sqlite+"):
        scheme = "sqlite"

    netloc = p.netloc
    if "@" in netloc:
        userinfo, hostport = netloc.split("@", 1)
        if ":" in userinfo:
            u, pw = userinfo.split(":", 1)
            userinfo = f"{u}:{quote(pw, safe='')}"
        netloc = f"{userinfo}@{hostport}"
    return urlunsplit((scheme, netloc, p.path, p.query, p.fragment))

def _choose_url() -> str:
    x = context.get_x_argument(as_dictionary=True)
    if x.get("sqlalchemy_url"):
        return x["sqlalchemy_url"]
    for k in ("ALEMBIC_DATABASE_URL", "DATABASE_URL", "ASYNC_DATABASE_URL"):
        v = os.getenv(k)
        if v:
            return v
    from campreg.core.config import settings
    return settings.DATABASE_URL

# ----- runners ---------------------------------------------------------------

def run_migrations_offline() -> None:
    url = _sync_url(_choose_url())
    print(f"[alembic-env] OFFLINE url={url}", file=sys.stderr)
    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()

def run_migrations_online() -> None:
    section = config.get_section(config.config_ini_section) or {}
    cfg = dict(section)
    cfg["sqlalchemy.url"] = _sync_url(_choose_url())

    connectable = engine_from_config(cfg, prefix="sqlalchemy.", poolclass=pool.NullPool)
    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            render_as_batch=connection.dialect.name == "sqlite",
        )
        with context.begin_transaction():
            context.run_migrations()

if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()

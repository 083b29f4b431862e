#!/usr/bin/env python3
from __future__ import annotations

import asyncio
import json
import os
import sys
import uuid
from pathlib import Path
from typing import Any, Dict, Optional

import click
import httpx
from rich.console import Console
from rich.table import Table
from rich.prompt import Confirm

# --- TOML IO (py3.11 stdlib reader + tomli_w for writing) ---
if sys.version_info >= (3, 11):
    import tomllib
else:  # pragma: no cover
    import tomli as tomllib
from tomli_w import dump as toml_dump

# -----------------------------------------------------------------------------
# Globals / Config
# -----------------------------------------------------------------------------
console = Console()
CONFIG_PATH = Path(os.getenv("CAMPREG_CLI_CONFIG", str(Path.home() / ".campreg.toml")))

# Environment key mapping -> config keys
ENV_MAP = {
    "CAMPREG_API_BASE": "api_base",
    "CAMPREG_API_TOKEN": "token",
    "CAMPREG_API_TIMEOUT": "timeout",
}

DEFAULTS: Dict[str, Any] = {
    "api_base": "http://localhost:8000",
    "timeout": 20,
    "token": "",
}

ROLE_CHOICES = click.Choice(["ADMIN", "STAFF", "PARTICIPANT"], case_sensitive=False)


def load_config() -> Dict[str, Any]:
    """Effective config precedence:
       DEFAULTS < saved config (~/.campreg.toml) < OS env
    """
    cfg = dict(DEFAULTS)

    if CONFIG_PATH.exists():
        with CONFIG_PATH.open("rb") as f:
            file_cfg = tomllib.load(f)
        cfg.update({k: v for k, v in file_cfg.items() if v not in ("", None)})

    for env_key, conf_key in ENV_MAP.items():
        val = os.environ.get(env_key)
        if val in (None, ""):
            continue
        if conf_key == "timeout":
            try:
                cfg[conf_key] = int(val)
                continue
            except ValueError:
                pass
        cfg[conf_key] = val

    return cfg

def save_config(cfg: Dict[str, Any]) -> None:
    CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
    with CONFIG_PATH.open("wb") as f:
        toml_dump(cfg, f)

def client(cfg: Dict[str, Any]) -> httpx.Client:
    headers: Dict[str, str] = {"Accept": "application/json"}
    token = cfg.get("token")
    if token:
        headers["Authorization"] = f"Bearer {token}"
    return httpx.Client(base_url=cfg["api_base"], headers=headers, timeout=int(cfg.get("timeout", 20)))

def show_table(items: list[dict[str, Any]], columns: list[str]) -> None:
    t = Table(show_lines=False)
    for col in columns:
        t.add_column(col)
    for it in items:
        t.add_row(*(str(it.get(c, "")) for c in columns))
    console.print(t)

def _handle_resp(r: httpx.Response):
    if r.status_code == 204:
        return None
    ctype = (r.headers.get("content-type") or "").split(";")[0].strip()
    data = r.json() if ctype == "application/json" else r.text
    if r.is_success:
        return data
    msg = data if isinstance(data, str) else json.dumps(data, indent=2)
    console.print(f"[red]HTTP {r.status_code}[/]: {msg}")
    raise click.Abort()

def _confirm_delete(kind: str, ident: Any) -> bool:
    return Confirm.ask(f"Delete {kind} [bold]{ident}[/]?")


# ------------------------------
# Root CLI
# ------------------------------
@click.group(help="campreg CLI")
def cli() -> None:
    """Top-level command group."""


@cli.command("serve", help="Run the API with uvicorn")
@click.option("--host", default="127.0.0.1", show_default=True)
@click.option("--port", default=8000, type=int, show_default=True)
@click.option("--reload", is_flag=True, help="Reload on code changes (development)")
def serve(host: str, port: int, reload: bool) -> None:
    import uvicorn

    uvicorn.run("campreg.main:app", host=host, port=port, reload=reload, log_config=None)


@cli.command("init-db", help="Create all tables directly (local/dev databases; use Alembic elsewhere)")
def init_db() -> None:
    from campreg.db.models import Base
    from campreg.db.session import dispose_engine, get_engine

    async def _run() -> None:
        async with get_engine().begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        await dispose_engine()

    asyncio.run(_run())
    console.print("[green]Tables created[/] ✅")


# ---- users subgroup (direct DB access) ----
@cli.group("users", help="Manage users in the configured database")
def users_group() -> None:
    pass

@users_group.command("create", help="Create a user and print its id")
@click.option("--email", required=True)
@click.option("--first-name", required=True)
@click.option("--last-name", required=True)
@click.option("--role", type=ROLE_CHOICES, default="PARTICIPANT", show_default=True)
def users_create(email: str, first_name: str, last_name: str, role: str) -> None:
    from campreg.db.models import UserRole
    from campreg.db.repositories import UserRepository
    from campreg.db.session import dispose_engine, get_session

    async def _run():
        async with get_session() as session:
            repo = UserRepository(session)
            if await repo.get_by_email(email) is not None:
                user = None
            else:
                user = await repo.create_user(
                    email=email, first_name=first_name, last_name=last_name, role=UserRole(role.upper()),
                )
        await dispose_engine()
        return user

    user = asyncio.run(_run())
    if user is None:
        console.print(f"[red]A user with email {email} already exists[/]")
        raise click.Abort()
    console.print(f"[green]Created[/] {user.role.value} [cyan]{user.full_name}[/] <{user.email}> id=[bold]{user.id}[/]")


# ---- auth subgroup ----
@cli.group("auth", help="Bearer tokens for the API")
def auth_group() -> None:
    pass

@auth_group.command("token", help="Sign a token for USER_ID with the server's JWT_SECRET")
@click.argument("user_id", type=click.UUID)
@click.option("--expires-in", type=int, default=None, help="Lifetime in seconds")
@click.option("--save/--no-save", default=True, show_default=True, help="Store the token in the CLI config")
def auth_token(user_id: uuid.UUID, expires_in: Optional[int], save: bool) -> None:
    from campreg.auth.deps import create_access_token

    token = create_access_token(user_id, expires_in=expires_in)
    if save:
        cfg = load_config()
        cfg["token"] = token
        save_config(cfg)
        console.print(f"[green]Token saved[/] to {CONFIG_PATH}")
    click.echo(token)

@auth_group.command("whoami", help="Show the user the stored token belongs to")
def auth_whoami() -> None:
    cfg = load_config()
    if not cfg.get("token"):
        console.print("[red]Not authenticated[/] (no token; run `campreg auth token`)")
        raise click.Abort()
    with client(cfg) as c:
        data = _handle_resp(c.get("/me"))
    show_table([data], ["id", "email", "firstName", "lastName", "role"])


# ---- notes subgroup (HTTP API) ----
@cli.group("notes", help="Staff notes on user profiles")
def notes_group() -> None:
    pass

@notes_group.command("list", help="List notes for USER_ID, newest first")
@click.argument("user_id", type=click.UUID)
@click.option("--json", "as_json", is_flag=True, help="Print raw JSON")
def notes_list(user_id: uuid.UUID, as_json: bool) -> None:
    with client(load_config()) as c:
        data = _handle_resp(c.get(f"/admin/users/{user_id}/notes"))
    if as_json:
        console.print_json(data=data)
        return
    for it in data:
        it["creator"] = f"{it.get('creatorFirstName', '')} {it.get('creatorLastName', '')}".strip()
    show_table(data, ["id", "createdAt", "creator", "note"])

@notes_group.command("add", help="Attach NOTE to USER_ID")
@click.argument("user_id", type=click.UUID)
@click.argument("note")
def notes_add(user_id: uuid.UUID, note: str) -> None:
    with client(load_config()) as c:
        data = _handle_resp(c.post(f"/admin/users/{user_id}/notes", json={"note": note}))
    console.print(f"[green]Created[/] note [bold]{data['id']}[/]")

@notes_group.command("delete", help="Delete NOTE_ID")
@click.argument("note_id", type=click.UUID)
@click.option("--yes", is_flag=True, help="Skip confirmation")
def notes_delete(note_id: uuid.UUID, yes: bool) -> None:
    if not yes and not _confirm_delete("note", note_id):
        console.print("[yellow]Cancelled[/]")
        return
    with client(load_config()) as c:
        _handle_resp(c.delete(f"/admin/users/notes/{note_id}"))
    console.print("[green]Deleted[/] ✅")


if __name__ == "__main__":
    cli()

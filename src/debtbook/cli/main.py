"""Debtbook CLI — talk to a Debtbook server from the terminal.

Usage:
    debtbook register alice                        # Create an account, print token
    debtbook login alice                           # Print a fresh token
    export DEBTBOOK_TOKEN=...                      # Use it for the record commands
    debtbook records list                          # Newest first
    debtbook records add "Bob" 555-1234 1000 400 2024-01-01
    debtbook records update <id> "Bob" 555-1234 1000 250 2024-01-01
    debtbook records rm <id>
    debtbook serve                                 # Run the API with uvicorn
"""

from __future__ import annotations

import asyncio
import concurrent.futures
import os
import sys
from typing import Optional

import click
import httpx

# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------

DEFAULT_API_URL = "http://localhost:8000"


def _api_url() -> str:
    return os.environ.get("DEBTBOOK_API_URL", DEFAULT_API_URL).rstrip("/")


def _client(token: Optional[str] = None) -> httpx.AsyncClient:
    """Build an async HTTP client pointed at the Debtbook server."""
    headers = {"Authorization": f"Bearer {token}"} if token else {}
    return httpx.AsyncClient(base_url=_api_url(), headers=headers, timeout=30.0)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _run(coro):
    """Run an async coroutine from a synchronous Click handler.

    Offloads to a thread when an event loop is already running
    (e.g. CliRunner inside an async test).
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(coro)
    else:
        with concurrent.futures.ThreadPoolExecutor(max_workers=1) as pool:
            return pool.submit(asyncio.run, coro).result()


def _check(r: httpx.Response):
    """Return the JSON body, or print the server's message and exit 1."""
    try:
        body = r.json()
    except ValueError:
        body = {}
    if r.is_error:
        message = body.get("message") if isinstance(body, dict) else None
        click.secho(f"Error ({r.status_code}): {message or r.reason_phrase}",
                    fg="red", err=True)
        sys.exit(1)
    return body


def _require_token(token: Optional[str]) -> str:
    if not token:
        click.secho(
            "Error: --token required (or set DEBTBOOK_TOKEN env var)",
            fg="red",
            err=True,
        )
        sys.exit(1)
    return token


def _print_table(rows: list[dict], columns: list[tuple[str, str, int]]):
    """Print a simple ASCII table.

    columns: list of (header, dict_key, width)
    """
    header = "  ".join(h.ljust(w) for h, _, w in columns)
    click.secho(header, bold=True)
    click.echo("-" * len(header))
    for row in rows:
        line = "  ".join(str(row.get(k, "—"))[:w].ljust(w) for _, k, w in columns)
        click.echo(line)


def _record_body(name, contact, total, remaining, date) -> dict:
    return {
        "name": name,
        "contact": contact,
        "totalAmount": total,
        "remainingAmount": remaining,
        "date": date,
    }


RECORD_COLUMNS = [
    ("ID", "id", 36),
    ("Name", "name", 20),
    ("Contact", "contact", 14),
    ("Total", "totalAmount", 12),
    ("Remaining", "remainingAmount", 12),
    ("Date", "date", 10),
]

token_option = click.option(
    "--token", envvar="DEBTBOOK_TOKEN", help="Bearer token (or set DEBTBOOK_TOKEN)"
)


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(version="0.1.0", prog_name="debtbook")
def main():
    """Debtbook — keep track of who owes what."""


# ---------------------------------------------------------------------------
# Accounts
# ---------------------------------------------------------------------------


@main.command()
@click.argument("username")
@click.password_option()
def register(username: str, password: str):
    """Create an account and print its token."""
    _run(_auth_impl("register", username, password))


@main.command()
@click.argument("username")
@click.option("--password", prompt=True, hide_input=True)
def login(username: str, password: str):
    """Sign in and print a token."""
    _run(_auth_impl("login", username, password))


async def _auth_impl(action: str, username: str, password: str):
    async with _client() as c:
        r = await c.post(
            f"/api/v1/auth/{action}",
            json={"username": username, "password": password},
        )
        body = _check(r)
    click.secho(f"Signed in as {body['user']['username']}", fg="green", err=True)
    click.echo(body["token"])


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------


@main.group()
def records():
    """List and edit your records."""


@records.command("list")
@token_option
def list_records(token: Optional[str]):
    """Show your records, newest first."""
    _run(_list_impl(_require_token(token)))


async def _list_impl(token: str):
    async with _client(token) as c:
        rows = _check(await c.get("/api/v1/records"))
    if not rows:
        click.echo("No records yet.")
        return
    _print_table(rows, RECORD_COLUMNS)


@records.command("add")
@click.argument("name")
@click.argument("contact")
@click.argument("total")
@click.argument("remaining")
@click.argument("date")
@token_option
def add_record(name, contact, total, remaining, date, token: Optional[str]):
    """Add a record. DATE is YYYY-MM-DD."""
    body = _record_body(name, contact, total, remaining, date)
    _run(_write_impl(_require_token(token), "post", "/api/v1/records", body))


@records.command("update")
@click.argument("record_id")
@click.argument("name")
@click.argument("contact")
@click.argument("total")
@click.argument("remaining")
@click.argument("date")
@token_option
def update_record(record_id, name, contact, total, remaining, date,
                  token: Optional[str]):
    """Replace every field of a record."""
    body = _record_body(name, contact, total, remaining, date)
    _run(_write_impl(_require_token(token), "put", f"/api/v1/records/{record_id}", body))


async def _write_impl(token: str, method: str, path: str, body: dict):
    async with _client(token) as c:
        record = _check(await c.request(method.upper(), path, json=body))
    click.secho(f"Saved record {record['id']}", fg="green")
    _print_table([record], RECORD_COLUMNS)


@records.command("rm")
@click.argument("record_id")
@token_option
def remove_record(record_id: str, token: Optional[str]):
    """Delete a record permanently."""
    _run(_remove_impl(_require_token(token), record_id))


async def _remove_impl(token: str, record_id: str):
    async with _client(token) as c:
        body = _check(await c.delete(f"/api/v1/records/{record_id}"))
    click.secho(body["message"], fg="green")


# ---------------------------------------------------------------------------
# Server
# ---------------------------------------------------------------------------


@main.command()
@click.option("--host", default=None, help="Bind address (default: DEBTBOOK_HOST)")
@click.option("--port", type=int, default=None, help="Port (default: DEBTBOOK_PORT)")
@click.option("--reload", is_flag=True, help="Restart on code changes")
def serve(host: Optional[str], port: Optional[int], reload: bool):
    """Run the API server."""
    import uvicorn

    from debtbook.config import settings

    uvicorn.run(
        "debtbook.main:app",
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
    )


if __name__ == "__main__":
    main()

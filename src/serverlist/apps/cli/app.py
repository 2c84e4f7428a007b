# src/serverlist/apps/cli/app.py
from __future__ import annotations

import os, traceback
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from serverlist.apps.bootstrap import build_context
from serverlist.services import codec
from serverlist.services.errors import CodecError, ConfigError, RetryExhausted, TransientStoreError
from serverlist.services.keys import StoreKeys
from serverlist.services.settings import Settings

app = typer.Typer(help="Keep this host listed in the shared server list", no_args_is_help=True)

ENV_FILE_HELP = "Path to a .env file (values from the process environment win)"


def _debug() -> bool:
    return os.getenv("SERVERLIST_CLI_DEBUG") == "1"


def _load_settings(env_file: Optional[Path], **overrides) -> Settings:
    try:
        return Settings.from_sources(env_file).with_overrides(**overrides)
    except ConfigError as e:
        typer.echo(f"failed to read config: {e}", err=True)
        raise typer.Exit(2)


def _age(ts: datetime) -> str:
    seconds = int((datetime.now(timezone.utc) - ts).total_seconds())
    if seconds < 120:
        return f"{seconds}s"
    if seconds < 2 * 3600:
        return f"{seconds // 60}m"
    if seconds < 2 * 86400:
        return f"{seconds // 3600}h"
    return f"{seconds // 86400}d"


@app.command("publish")
def publish(
    env_file: Optional[Path] = typer.Argument(None, help=ENV_FILE_HELP),
    max_rounds: Optional[int] = typer.Option(None, "--max-rounds", min=1, help="Give up after this many rounds (default: never)"),
    deadline: Optional[float] = typer.Option(None, "--deadline", min=0.0, help="Give up after this many seconds (default: never)"),
    strict_verify: Optional[bool] = typer.Option(None, "--strict-verify/--no-strict-verify", help="Also compare the stored entry field by field"),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="DEBUG | INFO | WARNING | ERROR"),
    log_file: Optional[Path] = typer.Option(None, "--log-file", help="Also write JSON logs to this file (rotated)"),
):
    """Add or refresh this host in the list, prune stale hosts and print the skylink."""
    settings = _load_settings(env_file, max_rounds=max_rounds, deadline=deadline, strict_verify=strict_verify, log_level=log_level)
    ctx = build_context(settings, logfile=log_file)
    try:
        locator = ctx.engine().run()
    except RetryExhausted as e:
        if _debug():
            traceback.print_exc()
        typer.echo(f"failed to update server list: {e}", err=True)
        raise typer.Exit(1)
    finally:
        ctx.close()
    typer.echo(f"skylink updated successfully: {locator}")


@app.command("list")
def list_members(
    env_file: Optional[Path] = typer.Argument(None, help=ENV_FILE_HELP),
    as_json: bool = typer.Option(False, "--json", help="Print the raw list as JSON"),
):
    """Show the current list without changing it."""
    settings = _load_settings(env_file)
    ctx = build_context(settings)
    try:
        entries, revision = ctx.engine().read_list()
    except (TransientStoreError, CodecError) as e:
        typer.echo(f"failed to get server list: {e}", err=True)
        raise typer.Exit(1)
    finally:
        ctx.close()

    if as_json:
        typer.echo(codec.encode(entries).decode("utf-8"))
        return
    table = Table(title=f"server list (revision {revision})")
    table.add_column("name")
    table.add_column("ip")
    table.add_column("last announce")
    table.add_column("age", justify="right")
    for e in entries:
        table.add_row(e.name, e.address or "-", e.last_seen.isoformat(), _age(e.last_seen))
    Console().print(table)


@app.command("locator")
def locator(env_file: Optional[Path] = typer.Argument(None, help=ENV_FILE_HELP)):
    """Print the skylink of the list without touching the store."""
    settings = _load_settings(env_file)
    typer.echo(StoreKeys.from_entropy(settings.entropy, settings.tweak).locator())


if __name__ == "__main__":
    app()

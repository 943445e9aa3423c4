"""policystore set/get/list/remove/info — thin wrappers over the status store."""

from __future__ import annotations

import json
import sys
from collections import Counter
from pathlib import Path
from typing import NoReturn

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from policystore.core.constants import ExitCode
from policystore.core.exceptions import (
    InvalidArgumentError,
    PolicyNotFoundError,
    StatusStoreError,
)
from policystore.core.store import StatusKind, StatusStore

_STATUS_STYLE = {
    StatusKind.INSTALLED: "green",
    StatusKind.PENDING: "yellow",
    StatusKind.FAILED: "red",
    StatusKind.UNKNOWN: "dim",
}


def resolve_store_path(db_path: str | None, config_path: str | None, console: Console) -> Path:
    """Load config, set up logging, and return the store file to use."""
    from policystore.core.config import default_config, load_config
    from policystore.core.exceptions import ConfigError, ConfigNotFoundError
    from policystore.core.logging_setup import configure_logging

    try:
        config = load_config(Path(config_path) if config_path else None)
    except ConfigNotFoundError:
        if config_path:
            console.print(f"[red]Config file not found:[/red] {config_path}")
            sys.exit(ExitCode.CONFIG_ERROR)
        config = default_config()
    except ConfigError as exc:
        console.print(f"[red]Config error:[/red] {exc}")
        sys.exit(ExitCode.CONFIG_ERROR)

    configure_logging(config.logging)

    if db_path:
        return Path(db_path).expanduser()
    return config.db_path


def _open(path: Path, err_console: Console) -> StatusStore:
    try:
        return StatusStore.open(path)
    except StatusStoreError as exc:
        err_console.print(f"[red]Cannot open status store:[/red] {exc}")
        sys.exit(ExitCode.STORAGE_ERROR)


def _storage_failure(exc: StatusStoreError, err_console: Console) -> NoReturn:
    err_console.print(f"[red]Storage error:[/red] {exc}")
    sys.exit(ExitCode.STORAGE_ERROR)


def _style(status: StatusKind) -> str:
    return f"[{_STATUS_STYLE[status]}]{status.value}[/{_STATUS_STYLE[status]}]"


def cmd_set(
    path: Path, policy: str, status: str, message: str, console: Console, err_console: Console
) -> None:
    with _open(path, err_console) as store:
        try:
            store.put_status(policy, status, message)
        except InvalidArgumentError as exc:
            err_console.print(f"[red]Invalid argument:[/red] {exc}")
            sys.exit(ExitCode.ERROR)
        except StatusStoreError as exc:
            _storage_failure(exc, err_console)
    console.print(f"{escape(policy)}: {_style(StatusKind(status))}")


def cmd_get(path: Path, policy: str, as_json: bool, console: Console, err_console: Console) -> None:
    with _open(path, err_console) as store:
        try:
            record = store.get_read_only().get_record(policy)
        except PolicyNotFoundError as exc:
            err_console.print(f"[yellow]{exc}[/yellow]")
            sys.exit(ExitCode.NOT_FOUND)
        except StatusStoreError as exc:
            _storage_failure(exc, err_console)

    if as_json:
        click.echo(
            json.dumps(
                {
                    "policy": record.policy,
                    "status": record.status.value,
                    "message": record.message,
                    "updated_at": record.updated_at,
                },
                indent=2,
            )
        )
        return
    console.print(f"[bold]{escape(record.policy)}[/bold]: {_style(record.status)}")
    if record.message:
        console.print(f"  {escape(record.message)}")
    console.print(f"  [dim]updated {record.updated_at}[/dim]")


def cmd_list(path: Path, as_json: bool, console: Console, err_console: Console) -> None:
    with _open(path, err_console) as store:
        reader = store.get_read_only()
        try:
            records = [reader.get_record(p) for p in reader.list_policies()]
        except StatusStoreError as exc:
            _storage_failure(exc, err_console)

    if as_json:
        click.echo(
            json.dumps(
                [
                    {"policy": r.policy, "status": r.status.value, "message": r.message}
                    for r in records
                ],
                indent=2,
            )
        )
        return

    if not records:
        console.print("No policies recorded.")
        return

    table = Table("Policy", "Status", "Message")
    for r in records:
        table.add_row(escape(r.policy), _style(r.status), escape(r.message))
    console.print(table)


def cmd_remove(path: Path, policy: str, console: Console, err_console: Console) -> None:
    with _open(path, err_console) as store:
        try:
            store.remove(policy)
        except StatusStoreError as exc:
            _storage_failure(exc, err_console)
    console.print(f"Removed {escape(policy)}")


def cmd_info(path: Path, as_json: bool, console: Console, err_console: Console) -> None:
    with _open(path, err_console) as store:
        reader = store.get_read_only()
        try:
            counts = Counter(reader.get_status(p)[0] for p in reader.list_policies())
        except StatusStoreError as exc:
            _storage_failure(exc, err_console)
    size_kb = path.stat().st_size / 1024

    if as_json:
        click.echo(
            json.dumps(
                {
                    "path": str(path),
                    "size_kb": round(size_kb, 1),
                    "total": sum(counts.values()),
                    "by_status": {k.value: counts.get(k, 0) for k in StatusKind},
                },
                indent=2,
            )
        )
        return

    console.print(f"[bold]Status store[/bold]: {path}")
    console.print(f"Size: {size_kb:.1f} KB")
    console.print(f"Policies: {sum(counts.values())}")
    for kind in StatusKind:
        console.print(f"  {kind.value:<10} {counts.get(kind, 0)}")

"""
policystore CLI entry point.

Commands:
  policystore set <policy> <status> [message]  — record a policy status
  policystore get <policy>                     — show one policy status
  policystore list                             — list every recorded policy
  policystore remove <policy>                  — forget a policy
  policystore info                             — store path, size, and counts
"""

from __future__ import annotations

from pathlib import Path

import click
from rich.console import Console

from policystore import __version__
from policystore.core.store.models import StatusKind

console = Console()
err_console = Console(stderr=True)


# ---------------------------------------------------------------------------
# Root group
# ---------------------------------------------------------------------------


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(__version__, "--version", "-V", message="policystore %(version)s")
@click.option(
    "--db",
    "db_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="Store file (default: database.path from config, else ~/.policystore/policy.db)",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="Config file (default: $POLICYSTORE_CONFIG or ~/.policystore/config.toml)",
)
@click.pass_context
def cli(ctx: click.Context, db_path: str | None, config_path: str | None) -> None:
    """policystore — track policy installation status on this host."""
    ctx.ensure_object(dict)
    ctx.obj["db_path"] = db_path
    ctx.obj["config_path"] = config_path


def _store_path(ctx: click.Context) -> Path:
    from policystore.cli._status_cmd import resolve_store_path

    return resolve_store_path(
        db_path=ctx.obj.get("db_path"),
        config_path=ctx.obj.get("config_path"),
        console=err_console,
    )


# ---------------------------------------------------------------------------
# set / get
# ---------------------------------------------------------------------------


@cli.command("set")
@click.argument("policy")
@click.argument("status", type=click.Choice([k.value for k in StatusKind]))
@click.argument("message", default="")
@click.pass_context
def set_status(ctx: click.Context, policy: str, status: str, message: str) -> None:
    """Record STATUS (and an optional MESSAGE) for POLICY."""
    from policystore.cli._status_cmd import cmd_set

    cmd_set(_store_path(ctx), policy, status, message, console=console, err_console=err_console)


@cli.command("get")
@click.argument("policy")
@click.option("--json", "as_json", is_flag=True, default=False)
@click.pass_context
def get_status(ctx: click.Context, policy: str, as_json: bool) -> None:
    """Show the recorded status of POLICY."""
    from policystore.cli._status_cmd import cmd_get

    cmd_get(_store_path(ctx), policy, as_json=as_json, console=console, err_console=err_console)


# ---------------------------------------------------------------------------
# list / remove
# ---------------------------------------------------------------------------


@cli.command("list")
@click.option("--json", "as_json", is_flag=True, default=False)
@click.pass_context
def list_cmd(ctx: click.Context, as_json: bool) -> None:
    """List every recorded policy."""
    from policystore.cli._status_cmd import cmd_list

    cmd_list(_store_path(ctx), as_json=as_json, console=console, err_console=err_console)


@cli.command("remove")
@click.argument("policy")
@click.pass_context
def remove(ctx: click.Context, policy: str) -> None:
    """Forget POLICY. Succeeds if it was never recorded."""
    from policystore.cli._status_cmd import cmd_remove

    cmd_remove(_store_path(ctx), policy, console=console, err_console=err_console)


# ---------------------------------------------------------------------------
# info
# ---------------------------------------------------------------------------


@cli.command("info")
@click.option("--json", "as_json", is_flag=True, default=False)
@click.pass_context
def info(ctx: click.Context, as_json: bool) -> None:
    """Show store path, size, and record counts per status."""
    from policystore.cli._status_cmd import cmd_info

    cmd_info(_store_path(ctx), as_json=as_json, console=console, err_console=err_console)


def main() -> None:
    cli()


if __name__ == "__main__":
    main()

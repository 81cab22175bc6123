from __future__ import annotations

from pathlib import Path

import typer

from relpanel.cli.commands._helpers import exit_on_error, value_or_exit
from relpanel.cli.context import build_context
from relpanel.core.errors import ErrorCode
from relpanel.panel.infra.session import clear_session, load_session

session_app = typer.Typer(add_completion=False, no_args_is_help=True)


@session_app.command("show")
def show(
    config: Path | None = typer.Option(None, "--config", help="relpanel.toml to use."),
) -> None:
    """Show the persisted catalog selection."""
    ctx = build_context(config)
    path = ctx.session_path()

    session = value_or_exit(load_session(path=path), ctx, ErrorCode.IO_ERROR)
    if session is None:
        ctx.console.print(f"no session at {path}")
        return
    ctx.console.print(f"selected catalog: {session.selected_catalog_id or '-'}")


@session_app.command("clear")
def clear(
    config: Path | None = typer.Option(None, "--config", help="relpanel.toml to use."),
) -> None:
    """Forget the persisted catalog selection."""
    ctx = build_context(config)
    path = ctx.session_path()

    exit_on_error(clear_session(path=path), ctx, ErrorCode.IO_ERROR)
    ctx.console.success(f"session cleared ({path})")

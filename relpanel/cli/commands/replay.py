"""Drive the panel runtime from a JSON Lines script.

Each non-empty line is one of:

- a host message: ``{"command": "updateBranchName", "branch": "feature"}``
- a user action: ``{"action": "editVersion", "value": "1.2.0"}``
- a clock step: ``{"advance": 10}``

Lines starting with ``#`` are comments.
"""

from __future__ import annotations

import json
from dataclasses import replace
from pathlib import Path
from typing import NoReturn, cast

import typer

from relpanel.cli.commands._helpers import exit_with_code
from relpanel.cli.context import CLIContext, build_context
from relpanel.core.config import Profile
from relpanel.core.errors import ErrorCode
from relpanel.core.result import Err
from relpanel.core.structured import as_str_dict, get_float
from relpanel.output.console import ConsoleProtocol, Style
from relpanel.panel.infra.session import FileSessionStore, MemorySessionStore
from relpanel.panel.runtime import PanelRuntime, RecordingTransport, SessionStore
from relpanel.panel.view.render import PanelView


def _fail(ctx: CLIContext, lineno: int, message: str) -> NoReturn:
    ctx.console.error(f"line {lineno}: {message}")
    exit_with_code(int(ErrorCode.USER_ERROR))


def _flag(enabled: bool) -> str:
    return "on" if enabled else "off"


def print_view(console: ConsoleProtocol, view: PanelView) -> None:
    console.header(f"Branch: {view.branch_label}")
    if view.auth_badges:
        console.print(
            "  ".join(
                f"{name}: {'signed in' if ok else 'signed out'}" for name, ok in view.auth_badges
            ),
            Style.DIM,
        )
    if view.cache_label:
        console.print(view.cache_label, Style.DIM)

    console.print(f"Catalog: {view.selected_catalog_id or '-'}")
    console.print(f"Version: {view.version or '-'}   Postfix: {view.postfix or '-'}")
    if view.tag_preview:
        console.print(view.tag_preview, Style.DIM)

    c = view.controls
    if view.profile == "terminal":
        actions = f"create={_flag(c.create)} publish-checkbox={_flag(c.publish_checkbox)}"
    else:
        actions = (
            f"create-github={_flag(c.create_github)} publish-catalog={_flag(c.publish_catalog)}"
        )
    console.print(
        f"inputs={_flag(c.version)} get-latest={_flag(c.get_latest)} {actions}",
        Style.DIM,
    )

    if view.warning:
        console.warning(view.warning)
    if view.error:
        console.error(view.error)
    if view.notice:
        console.warning(view.notice)
    if view.release_error:
        console.error(view.release_error)
    if view.overlay:
        console.info(view.overlay)

    if view.placeholder:
        console.print(view.placeholder, Style.DIM)
    else:
        console.table(
            "Versions",
            ("GitHub", "Catalog"),
            [(row.github, ", ".join(row.catalog)) for row in view.rows],
        )


def replay(
    script: Path = typer.Argument(..., help="JSON Lines script of messages, actions, clock steps."),
    profile: str | None = typer.Option(None, "--profile", help="form or terminal."),
    session: Path | None = typer.Option(
        None,
        "--session",
        help="Persist the catalog selection to this file (default: in memory).",
    ),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Do not trace messages."),
    config: Path | None = typer.Option(None, "--config", help="relpanel.toml to use."),
) -> None:
    """Replay a host/user script through the panel and print the final view."""
    ctx = build_context(config)

    panel_config = ctx.config.panel
    if profile is not None:
        if profile not in {"form", "terminal"}:
            ctx.console.error(f"unknown profile: {profile}")
            exit_with_code(int(ErrorCode.USER_ERROR))
        panel_config = replace(panel_config, profile=cast(Profile, profile))

    try:
        lines = script.read_text(encoding="utf-8").splitlines()
    except OSError as e:
        ctx.console.error(f"cannot read script: {e}")
        exit_with_code(int(ErrorCode.IO_ERROR))

    sessions: SessionStore = (
        FileSessionStore(session) if session is not None else MemorySessionStore()
    )
    transport = RecordingTransport()
    runtime = PanelRuntime(
        config=panel_config,
        transport=transport,
        sessions=sessions,
        console=None if quiet else ctx.console,
    )
    runtime.start()

    for lineno, line in enumerate(lines, start=1):
        text = line.strip()
        if not text or text.startswith("#"):
            continue
        try:
            obj: object = json.loads(text)
        except json.JSONDecodeError as e:
            _fail(ctx, lineno, f"invalid JSON: {e}")

        d = as_str_dict(obj)
        if d is None:
            _fail(ctx, lineno, "expected a JSON object")

        if "advance" in d:
            seconds = get_float(d, "advance")
            if seconds is None or seconds < 0:
                _fail(ctx, lineno, "advance expects a non-negative number of seconds")
            runtime.advance(seconds)
            continue

        result = runtime.receive(d) if "command" in d else runtime.act(d)
        if isinstance(result, Err):
            _fail(ctx, lineno, result.error.pretty())

    print_view(ctx.console, runtime.view())
    ctx.console.print(f"{len(transport.sent)} message(s) sent", Style.DIM)

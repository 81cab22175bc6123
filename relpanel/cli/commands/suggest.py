from __future__ import annotations

from pathlib import Path

import typer

from relpanel.cli.commands._helpers import (
    exit_on_error,
    exit_with_code,
    read_snapshot,
    value_or_exit,
)
from relpanel.cli.context import build_context
from relpanel.core.errors import ErrorCode
from relpanel.core.result import Err
from relpanel.panel.domain.errors import (
    first_release_error,
    invalid_version_error,
    version_conflict_error,
)
from relpanel.panel.domain.semver import is_strict_semver
from relpanel.panel.domain.suggest import suggest_next_version


def suggest(
    catalog_json: Path = typer.Argument(..., help="Catalog details or version list (JSON)."),
    current: str | None = typer.Option(
        None,
        "--current",
        help="Version already typed in the form; never replaced, only checked.",
    ),
    config: Path | None = typer.Option(None, "--config", help="relpanel.toml to use."),
) -> None:
    """Propose the next catalog version."""
    ctx = build_context(config)

    snapshot = value_or_exit(read_snapshot(catalog_json), ctx)

    if not snapshot.offering_found:
        ctx.console.error("Offering not found in this catalog")
        exit_with_code(int(ErrorCode.USER_ERROR))

    suggestion = suggest_next_version(snapshot.entries)
    match suggestion.kind:
        case "not_loaded":
            ctx.console.error("catalog versions not loaded")
            exit_with_code(int(ErrorCode.USER_ERROR))
        case "first_release_required":
            ctx.console.error(first_release_error(snapshot.label or snapshot.name).message)
            exit_with_code(int(ErrorCode.USER_ERROR))
        case _:
            pass

    typed = (current or "").strip()
    if typed:
        if not is_strict_semver(typed):
            exit_on_error(Err(invalid_version_error()), ctx)
        if typed in snapshot.versions:
            exit_on_error(Err(version_conflict_error(typed)), ctx)
        ctx.console.success(f"keeping {typed}")
        return

    if suggestion.version is None:
        ctx.console.warning("no semantic versions in the catalog; enter a version manually")
        return

    ctx.console.print(suggestion.version)
    ctx.console.info(f"latest in catalog: {suggestion.latest}")

from __future__ import annotations

from pathlib import Path

import typer

from relpanel.cli.commands._helpers import read_releases, read_snapshot, value_or_exit
from relpanel.cli.context import build_context
from relpanel.output.console import Style
from relpanel.panel.domain.reconcile import build_reconciliation
from relpanel.panel.view.render import NOT_PUBLISHED, table_rows


def reconcile(
    releases_json: Path = typer.Argument(..., help="Upstream releases (JSON list)."),
    catalog_json: Path = typer.Argument(..., help="Catalog details or version list (JSON)."),
    config: Path | None = typer.Option(None, "--config", help="relpanel.toml to use."),
) -> None:
    """Print the GitHub / catalog reconciliation table."""
    ctx = build_context(config)

    releases = value_or_exit(read_releases(releases_json), ctx)
    snapshot = value_or_exit(read_snapshot(catalog_json), ctx)

    if snapshot.entries is None:
        ctx.console.warning("catalog versions not loaded; showing releases only")

    rows = build_reconciliation(
        releases,
        snapshot.entries or (),
        max_versions=ctx.config.panel.max_catalog_versions,
    )
    if not rows:
        ctx.console.print("No versions found", Style.DIM)
        return

    title = snapshot.label or snapshot.name or "Releases"
    ctx.console.table(
        title,
        ("GitHub", "Catalog"),
        [(r.github, ", ".join(r.catalog)) for r in table_rows(rows)],
    )
    unmatched = sum(1 for r in rows if not r.catalog_published)
    if unmatched:
        ctx.console.info(f"{unmatched} release(s) {NOT_PUBLISHED.lower()} to the catalog")

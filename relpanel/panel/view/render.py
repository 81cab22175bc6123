"""Pure rendering of panel state.

``render`` turns a ``PanelState`` into a ``PanelView`` that a presentation
layer (a webview, a terminal, a test) can draw without knowing any policy.
Two profiles share the same state: ``form`` shows separate GitHub and
catalog actions plus cache and authentication badges; ``terminal`` shows a
single create action with a publish-to-catalog checkbox and nothing else.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from relpanel.core.config import Profile
from relpanel.panel.domain.extract import format_release_tag
from relpanel.panel.domain.model import CatalogEntry, ReconciliationRow
from relpanel.panel.flow.state import PanelState
from relpanel.panel.flow.validate import can_create_github, can_publish_catalog

NOT_PUBLISHED = "Not published"

PLACEHOLDER_SELECT = "Please select a catalog above to view its details"
PLACEHOLDER_LOADING = "Loading catalog details..."
PLACEHOLDER_LOADING_VERSIONS = "Loading versions..."
PLACEHOLDER_OFFERING_MISSING = "Offering not found in this catalog"
PLACEHOLDER_NO_VERSIONS = "No versions found"
PLACEHOLDER_FAILED = "Failed to load catalog details. Please try again."

UNPUSHED_WARNING = (
    "You have unpushed changes. The release will be created from the last pushed commit."
)


@dataclass(frozen=True, slots=True)
class Controls:
    version: bool
    postfix: bool
    catalog: bool
    get_latest: bool
    # form profile
    create_github: bool
    publish_catalog: bool
    # terminal profile
    create: bool
    publish_checkbox: bool


@dataclass(frozen=True, slots=True)
class TableRow:
    github: str
    catalog: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class PanelView:
    profile: Profile
    branch_label: str
    catalogs: tuple[tuple[str, str], ...]
    selected_catalog_id: str | None
    version: str
    postfix: str
    controls: Controls
    error: str | None
    notice: str | None
    release_error: str | None
    placeholder: str | None
    rows: tuple[TableRow, ...]
    tag_preview: str | None
    warning: str | None
    create_busy: bool
    overlay: str | None
    cache_label: str | None = None
    auth_badges: tuple[tuple[str, bool], ...] = ()


def _entry_cell(entry: CatalogEntry) -> str:
    if entry.flavor_label:
        return f"{entry.version} ({entry.flavor_label})"
    return entry.version


def table_rows(rows: tuple[ReconciliationRow, ...]) -> tuple[TableRow, ...]:
    return tuple(
        TableRow(
            github=row.github_tag or NOT_PUBLISHED,
            catalog=tuple(_entry_cell(e) for e in row.catalog_entries) or (NOT_PUBLISHED,),
        )
        for row in rows
    )


def _placeholder(state: PanelState) -> str | None:
    selection = state.selection
    match selection.phase:
        case "none":
            return PLACEHOLDER_SELECT
        case "awaiting_metadata":
            return PLACEHOLDER_LOADING
        case "metadata_ready":
            snapshot = selection.snapshot
            if snapshot is not None and not snapshot.offering_found:
                return PLACEHOLDER_OFFERING_MISSING
            return PLACEHOLDER_LOADING_VERSIONS
        case "versions_ready":
            return None if state.rows else PLACEHOLDER_NO_VERSIONS
        case "timed_out":
            return PLACEHOLDER_FAILED


def _branch_label(state: PanelState) -> str:
    if state.branch_phase in {"uninitialized", "loading"} or state.branch is None:
        return "Loading branch..."
    if state.branch.is_protected:
        return f"{state.branch.name} (protected)"
    return state.branch.name


def _cache_label(state: PanelState) -> str | None:
    if state.cache.timestamp is None:
        return None
    if state.cache.is_cached:
        return f"Cached data from {state.cache.timestamp}"
    return f"Fetched {state.cache.timestamp}"


def render(state: PanelState, profile: Profile = "form") -> PanelView:
    form = state.form
    editable = not form.main_branch_locked and not form.is_loading
    github_ok = can_create_github(state)
    catalog_ok = can_publish_catalog(state)

    controls = Controls(
        version=editable,
        postfix=editable,
        catalog=editable,
        get_latest=not state.refresh_busy,
        create_github=github_ok,
        publish_catalog=catalog_ok,
        create=github_ok,
        publish_checkbox=catalog_ok,
    )

    version = form.version.strip()
    postfix = form.postfix.strip()
    preview = f"GitHub Tag: {format_release_tag(version, postfix)}" if version and postfix else None

    view = PanelView(
        profile=profile,
        branch_label=_branch_label(state),
        catalogs=tuple((c.id, c.label) for c in state.catalogs),
        selected_catalog_id=state.selection.catalog_id,
        version=form.version,
        postfix=form.postfix,
        controls=controls,
        error=state.error.message,
        notice=state.notice,
        release_error=state.release_error,
        placeholder=_placeholder(state),
        rows=table_rows(state.rows or ()),
        tag_preview=preview,
        warning=UNPUSHED_WARNING if state.has_unpushed_changes else None,
        create_busy=state.release_busy,
        overlay=(state.overlay_message or "Loading...") if state.overlay else None,
    )
    if profile == "terminal":
        return view

    return replace(
        view,
        cache_label=_cache_label(state),
        auth_badges=(("GitHub", state.auth.github), ("Catalog", state.auth.catalog)),
    )

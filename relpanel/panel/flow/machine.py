"""Reducer for the release panel.

``transition`` is pure: it takes the current state, one event, the panel
config and the current clock reading, and returns the next state plus the
effects the runtime must carry out. Nothing here performs I/O.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from relpanel.core.config import PanelConfig
from relpanel.core.result import Err
from relpanel.panel.domain.errors import PROTECTED_BRANCH_ADVISORY
from relpanel.panel.domain.extract import postfix_from_branch
from relpanel.panel.domain.model import BranchState
from relpanel.panel.domain.reconcile import build_reconciliation
from relpanel.panel.domain.suggest import suggest_next_version
from relpanel.panel.flow.events import (
    ArmTimer,
    AuthenticationStatus,
    BranchNameUpdated,
    CancelTimer,
    CatalogDetailsUpdated,
    CatalogSelected,
    CheckAuthentication,
    CreateRequested,
    DataUpdated,
    Effect,
    ErrorCleared,
    ErrorShown,
    ForceRefresh,
    GetBranchName,
    GetLatest,
    Initialize,
    LoadingHidden,
    LoadingShown,
    PanelEvent,
    PersistSession,
    PollTick,
    PostfixEdited,
    RefreshCompleted,
    ReleaseCompleted,
    SelectCatalog,
    Send,
    ShowConfirmation,
    ShowErrorRequest,
    TimeoutExpired,
    UnpushedChanges,
    VersionEdited,
)
from relpanel.panel.flow.state import AuthState, CacheInfo, PanelState, PendingRequest, Selection
from relpanel.panel.flow.validate import confirmation_summary, policy_error, validate_create

NO_CATALOGS_MESSAGE = "No private catalogs available"
REFRESH_TIMEOUT_MESSAGE = "Refreshing catalog data timed out. Please try again."
RELEASE_FAILED_MESSAGE = "Failed to create pre-release"


@dataclass(frozen=True, slots=True)
class Transition:
    state: PanelState
    effects: tuple[Effect, ...] = ()


def _next_id(state: PanelState) -> tuple[PanelState, int]:
    request_id = state.next_request_id
    return replace(state, next_request_id=request_id + 1), request_id


def _rebuild_rows(state: PanelState, config: PanelConfig) -> PanelState:
    snapshot = state.snapshot
    if snapshot is None or snapshot.entries is None or not snapshot.offering_found:
        return replace(state, rows=None)
    rows = build_reconciliation(
        state.releases,
        snapshot.entries,
        max_versions=config.max_catalog_versions,
    )
    return replace(state, rows=rows)


def _revalidate(state: PanelState) -> PanelState:
    # Policy errors only replace nothing or an older policy error.
    error = policy_error(state)
    if error is None:
        return replace(state, error=state.error.clear_source("policy"))
    if state.error.visible and state.error.source != "policy":
        return state
    return replace(state, error=state.error.show(error.message, source="policy"))


# -----------------------------------------------------------------------------
# Requests
# -----------------------------------------------------------------------------


def _request_branch(state: PanelState) -> tuple[PanelState, tuple[Effect, ...]]:
    state, request_id = _next_id(state)
    if state.branch_phase == "uninitialized":
        state = replace(state, branch_phase="loading")
    state = replace(state, branch_request_id=request_id)
    return state, (Send(GetBranchName(request_id=request_id)), Send(CheckAuthentication()))


def _select(
    state: PanelState, catalog_id: str | None, config: PanelConfig, now: float
) -> Transition:
    if not catalog_id:
        effects: list[Effect] = []
        if state.pending_for("catalog_select") is not None:
            effects.append(CancelTimer(kind="catalog_select"))
        state = replace(state.without_pending("catalog_select"), selection=Selection(), rows=None)
        state = state.with_form(is_loading=False)
        effects.append(PersistSession(selected_catalog_id=None))
        return Transition(state, tuple(effects))

    state, request_id = _next_id(state)
    state = state.with_pending(
        PendingRequest(kind="catalog_select", request_id=request_id, armed_at=now)
    )
    state = replace(
        state,
        selection=Selection(
            catalog_id=catalog_id,
            phase="awaiting_metadata",
            snapshot=None,
            request_id=request_id,
        ),
        rows=None,
    )
    state = state.with_form(is_loading=True)
    return Transition(
        state,
        (
            PersistSession(selected_catalog_id=catalog_id),
            ArmTimer(
                kind="catalog_select",
                request_id=request_id,
                delay=config.request_timeout_seconds,
            ),
            Send(SelectCatalog(catalog_id=catalog_id, request_id=request_id)),
        ),
    )


# -----------------------------------------------------------------------------
# Handlers
# -----------------------------------------------------------------------------


def _on_initialize(
    state: PanelState, event: Initialize, config: PanelConfig, now: float
) -> Transition:
    state, effects = _request_branch(state)
    if event.restored_catalog_id:
        selected = _select(state, event.restored_catalog_id, config, now)
        return Transition(selected.state, effects + selected.effects)
    return Transition(state, effects)


def _on_branch(
    state: PanelState, event: BranchNameUpdated, config: PanelConfig, now: float
) -> Transition:
    if (
        event.request_id is not None
        and state.branch_applied_id is not None
        and event.request_id < state.branch_applied_id
    ):
        return Transition(state)
    if event.request_id is not None:
        state = replace(state, branch_applied_id=event.request_id)

    if event.error:
        phase = "loading" if state.branch_phase == "uninitialized" else state.branch_phase
        return Transition(
            replace(
                state,
                branch_phase=phase,
                error=state.error.show(event.error, source="branch"),
            )
        )

    name = event.name.strip()
    protected = config.is_protected(name)
    was_protected = state.is_protected
    state = replace(
        state,
        branch=BranchState(name=name, is_protected=protected),
        branch_phase="protected" if protected else "unprotected",
        error=state.error.clear_source("branch"),
    )

    if protected:
        state = state.with_form(main_branch_locked=True)
        state = replace(state, error=state.error.lock(PROTECTED_BRANCH_ADVISORY))
        return Transition(state)

    if not state.form.postfix and name:
        state = state.with_form(postfix=postfix_from_branch(name))

    if not was_protected:
        return Transition(state)

    state = state.with_form(main_branch_locked=False)
    state = replace(state, error=state.error.clear(force=True))
    if state.selection.catalog_id:
        return _select(state, state.selection.catalog_id, config, now)
    return Transition(state)


def _on_data(state: PanelState, event: DataUpdated) -> Transition:
    state = replace(
        state,
        catalogs=event.catalogs,
        releases=event.releases,
        cache=CacheInfo(is_cached=event.is_cached, timestamp=event.timestamp),
    )
    if event.catalogs:
        state = replace(state, error=state.error.clear_source("host"))
    else:
        state = replace(state, error=state.error.show(NO_CATALOGS_MESSAGE, source="host"))
    return Transition(state)


def _on_details(state: PanelState, event: CatalogDetailsUpdated) -> Transition:
    selection = state.selection
    snapshot = event.snapshot
    if selection.catalog_id is None:
        return Transition(state)
    if snapshot.catalog_id and snapshot.catalog_id != selection.catalog_id:
        return Transition(state)
    if event.request_id is not None and event.request_id not in (
        selection.request_id,
        state.refresh_request_id,
    ):
        return Transition(state)

    effects: tuple[Effect, ...] = ()
    if state.pending_for("catalog_select") is not None:
        state = state.without_pending("catalog_select")
        effects = (CancelTimer(kind="catalog_select"),)

    if snapshot.offering_found and snapshot.entries is not None:
        phase = "versions_ready"
    else:
        phase = "metadata_ready"

    state = replace(state, selection=replace(selection, phase=phase, snapshot=snapshot))
    state = state.with_form(is_loading=False)

    if phase == "versions_ready" and not state.form.version:
        suggestion = suggest_next_version(snapshot.entries)
        if suggestion.version is not None:
            state = state.with_form(version=suggestion.version)

    return Transition(state, effects)


def _on_timeout(state: PanelState, event: TimeoutExpired) -> Transition:
    pending = state.pending_for(event.kind)
    if pending is None or pending.request_id != event.request_id:
        return Transition(state)

    state = state.without_pending(event.kind)
    if event.kind == "catalog_select":
        state = replace(state, selection=replace(state.selection, phase="timed_out"), rows=None)
        return Transition(state.with_form(is_loading=False))

    return Transition(replace(state, refresh_busy=False, notice=REFRESH_TIMEOUT_MESSAGE))


def _on_get_latest(state: PanelState, config: PanelConfig, now: float) -> Transition:
    if state.refresh_busy:
        return Transition(state)
    state, request_id = _next_id(state)
    state = state.with_pending(PendingRequest(kind="refresh", request_id=request_id, armed_at=now))
    state = replace(
        state,
        cache=replace(state.cache, is_cached=False),
        refresh_busy=True,
        refresh_request_id=request_id,
    )
    return Transition(
        state,
        (
            ArmTimer(kind="refresh", request_id=request_id, delay=config.request_timeout_seconds),
            Send(ForceRefresh(catalog_id=state.selection.catalog_id, request_id=request_id)),
        ),
    )


def _on_refresh_complete(state: PanelState, event: RefreshCompleted) -> Transition:
    # A reply to an earlier refresh must not settle the one in flight.
    if event.request_id is not None and event.request_id != state.refresh_request_id:
        return Transition(state)
    effects: tuple[Effect, ...] = ()
    if state.pending_for("refresh") is not None:
        state = state.without_pending("refresh")
        effects = (CancelTimer(kind="refresh"),)
    state = replace(state, refresh_busy=False)
    if not event.success and event.error:
        state = replace(state, notice=event.error)
    return Transition(state, effects)


def _on_create(state: PanelState, event: CreateRequested, config: PanelConfig) -> Transition:
    if state.release_busy:
        return Transition(state)

    result = validate_create(
        state,
        publish_to_catalog=event.publish_to_catalog,
        release_github=event.release_github,
    )
    if isinstance(result, Err):
        message = result.error.message
        state = replace(state, error=state.error.show(message, source="validation"))
        if config.profile == "terminal":
            return Transition(state, (Send(ShowErrorRequest(error=message)),))
        return Transition(state)

    release = result.value
    state = replace(state, release_busy=True, release_error=None)
    if config.require_confirmation:
        summary = confirmation_summary(state, release)
        return Transition(state, (Send(ShowConfirmation(summary=summary, release=release)),))
    return Transition(state, (Send(release),))


def _on_release_complete(state: PanelState, event: ReleaseCompleted) -> Transition:
    state = replace(state, release_busy=False)
    if event.success:
        state = replace(state, release_error=None).with_form(version="", postfix="")
        return Transition(state)
    return Transition(replace(state, release_error=event.error or RELEASE_FAILED_MESSAGE))


def _on_edit(
    state: PanelState, *, version: str | None = None, postfix: str | None = None
) -> Transition:
    if state.is_protected:
        return Transition(state)
    if version is not None:
        state = state.with_form(version=version)
    if postfix is not None:
        state = state.with_form(postfix=postfix)
    return Transition(replace(state, error=state.error.clear_source("validation")))


# -----------------------------------------------------------------------------
# Entry point
# -----------------------------------------------------------------------------


def _dispatch(state: PanelState, event: PanelEvent, config: PanelConfig, now: float) -> Transition:
    match event:
        case Initialize():
            return _on_initialize(state, event, config, now)
        case PollTick():
            state, effects = _request_branch(state)
            return Transition(state, effects)
        case BranchNameUpdated():
            return _on_branch(state, event, config, now)
        case AuthenticationStatus(github=github, catalog=catalog):
            return Transition(replace(state, auth=AuthState(github=github, catalog=catalog)))
        case DataUpdated():
            return _on_data(state, event)
        case CatalogSelected(catalog_id=catalog_id):
            return _select(state, catalog_id, config, now)
        case CatalogDetailsUpdated():
            return _on_details(state, event)
        case TimeoutExpired():
            return _on_timeout(state, event)
        case GetLatest():
            return _on_get_latest(state, config, now)
        case RefreshCompleted():
            return _on_refresh_complete(state, event)
        case VersionEdited(value=value):
            return _on_edit(state, version=value)
        case PostfixEdited(value=value):
            return _on_edit(state, postfix=value)
        case CreateRequested():
            return _on_create(state, event, config)
        case ReleaseCompleted():
            return _on_release_complete(state, event)
        case ErrorShown(error=error):
            return Transition(replace(state, notice=error or None))
        case ErrorCleared(force=force):
            return Transition(replace(state, error=state.error.clear(force=force)))
        case UnpushedChanges(has_changes=has_changes):
            return Transition(replace(state, has_unpushed_changes=has_changes))
        case LoadingShown(message=message):
            return Transition(replace(state, overlay=True, overlay_message=message))
        case LoadingHidden():
            return Transition(replace(state, overlay=False, overlay_message=None))
        case _:
            raise AssertionError(f"unexpected panel event: {event!r}")


def transition(
    state: PanelState,
    event: PanelEvent,
    *,
    config: PanelConfig,
    now: float = 0.0,
) -> Transition:
    """Apply one event.

    Derived data (the reconciliation table and standing policy errors) is
    recomputed after every event so no handler has to remember to do it.
    """
    result = _dispatch(state, event, config, now)
    state = _rebuild_rows(result.state, config)
    return Transition(_revalidate(state), result.effects)

"""Panel state.

One frozen record owns everything the panel knows: branch, authentication,
catalog selection, form fields, error surfaces and armed requests. The
reducer in ``machine`` is the only code that produces new states.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Literal

from relpanel.panel.domain.model import (
    BranchState,
    CatalogOption,
    CatalogSnapshot,
    ReconciliationRow,
    ReleaseRecord,
)

BranchPhase = Literal["uninitialized", "loading", "protected", "unprotected"]
SelectionPhase = Literal[
    "none",
    "awaiting_metadata",
    "metadata_ready",
    "versions_ready",
    "timed_out",
]
RequestKind = Literal["catalog_select", "refresh"]
ErrorSource = Literal["advisory", "policy", "validation", "host", "branch"]


@dataclass(frozen=True, slots=True)
class ErrorSurface:
    """A single-purpose error text slot.

    A sticky surface ignores every change that is not forced; the
    protected-branch advisory is the only sticky error.
    """

    message: str | None = None
    source: ErrorSource | None = None
    sticky: bool = False

    @property
    def visible(self) -> bool:
        return self.message is not None

    def show(self, message: str, *, source: ErrorSource, force: bool = False) -> ErrorSurface:
        if self.sticky and not force:
            return self
        return ErrorSurface(message=message, source=source)

    def lock(self, message: str) -> ErrorSurface:
        return ErrorSurface(message=message, source="advisory", sticky=True)

    def clear(self, *, force: bool = False) -> ErrorSurface:
        if self.sticky and not force:
            return self
        return ErrorSurface()

    def clear_source(self, source: ErrorSource) -> ErrorSurface:
        """Clear only if the current error came from ``source``."""
        if self.source != source:
            return self
        return self.clear()


@dataclass(frozen=True, slots=True)
class AuthState:
    github: bool = False
    catalog: bool = False


@dataclass(frozen=True, slots=True)
class CacheInfo:
    is_cached: bool = False
    timestamp: str | None = None


@dataclass(frozen=True, slots=True)
class PendingRequest:
    kind: RequestKind
    request_id: int
    armed_at: float


@dataclass(frozen=True, slots=True)
class Selection:
    catalog_id: str | None = None
    phase: SelectionPhase = "none"
    snapshot: CatalogSnapshot | None = None
    # Id of the selectCatalog request that opened this selection.
    request_id: int | None = None


@dataclass(frozen=True, slots=True)
class FormState:
    version: str = ""
    postfix: str = ""
    is_loading: bool = False
    main_branch_locked: bool = False


@dataclass(frozen=True, slots=True)
class PanelState:
    branch_phase: BranchPhase = "uninitialized"
    branch: BranchState | None = None
    auth: AuthState = AuthState()
    catalogs: tuple[CatalogOption, ...] = ()
    releases: tuple[ReleaseRecord, ...] = ()
    cache: CacheInfo = CacheInfo()
    selection: Selection = Selection()
    form: FormState = FormState()
    rows: tuple[ReconciliationRow, ...] | None = None

    error: ErrorSurface = ErrorSurface()
    notice: str | None = None
    release_error: str | None = None

    pending: tuple[PendingRequest, ...] = ()
    next_request_id: int = 1
    branch_request_id: int | None = None
    branch_applied_id: int | None = None
    refresh_request_id: int | None = None

    refresh_busy: bool = False
    release_busy: bool = False
    has_unpushed_changes: bool = False
    overlay: bool = False
    overlay_message: str | None = None

    @property
    def is_protected(self) -> bool:
        return self.form.main_branch_locked

    @property
    def snapshot(self) -> CatalogSnapshot | None:
        return self.selection.snapshot

    def pending_for(self, kind: RequestKind) -> PendingRequest | None:
        return next((p for p in self.pending if p.kind == kind), None)

    def with_pending(self, request: PendingRequest) -> PanelState:
        """Arm ``request``, superseding any pending request of the same kind."""
        others = tuple(p for p in self.pending if p.kind != request.kind)
        return replace(self, pending=others + (request,))

    def without_pending(self, kind: RequestKind) -> PanelState:
        return replace(self, pending=tuple(p for p in self.pending if p.kind != kind))

    def with_form(self, **changes: object) -> PanelState:
        return replace(self, form=replace(self.form, **changes))


def initial_state() -> PanelState:
    return PanelState()

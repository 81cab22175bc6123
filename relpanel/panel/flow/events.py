"""Events consumed and effects produced by the panel reducer.

Every input to the panel (a host message, a user action, a clock tick or
an expired timer) is an event. Everything the panel asks of the outside
world (an outbound message, a timer, a session write) is an effect.
"""

from __future__ import annotations

from dataclasses import dataclass

from relpanel.panel.domain.model import CatalogOption, CatalogSnapshot, ReleaseRecord
from relpanel.panel.flow.state import RequestKind

# -----------------------------------------------------------------------------
# Inbound: host messages
# -----------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class AuthenticationStatus:
    github: bool
    catalog: bool


@dataclass(frozen=True, slots=True)
class DataUpdated:
    catalogs: tuple[CatalogOption, ...]
    releases: tuple[ReleaseRecord, ...]
    is_cached: bool = False
    timestamp: str | None = None


@dataclass(frozen=True, slots=True)
class BranchNameUpdated:
    name: str
    error: str | None = None
    request_id: int | None = None


@dataclass(frozen=True, slots=True)
class ErrorShown:
    error: str | None


@dataclass(frozen=True, slots=True)
class CatalogDetailsUpdated:
    snapshot: CatalogSnapshot
    request_id: int | None = None


@dataclass(frozen=True, slots=True)
class UnpushedChanges:
    has_changes: bool


@dataclass(frozen=True, slots=True)
class RefreshCompleted:
    success: bool
    error: str | None = None
    request_id: int | None = None


@dataclass(frozen=True, slots=True)
class ReleaseCompleted:
    success: bool
    error: str | None = None


@dataclass(frozen=True, slots=True)
class LoadingShown:
    message: str | None = None


@dataclass(frozen=True, slots=True)
class LoadingHidden:
    pass


HostEvent = (
    AuthenticationStatus
    | DataUpdated
    | BranchNameUpdated
    | ErrorShown
    | CatalogDetailsUpdated
    | UnpushedChanges
    | RefreshCompleted
    | ReleaseCompleted
    | LoadingShown
    | LoadingHidden
)

# -----------------------------------------------------------------------------
# Inbound: user actions, clock and timers
# -----------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Initialize:
    restored_catalog_id: str | None = None


@dataclass(frozen=True, slots=True)
class PollTick:
    pass


@dataclass(frozen=True, slots=True)
class CatalogSelected:
    catalog_id: str | None


@dataclass(frozen=True, slots=True)
class VersionEdited:
    value: str


@dataclass(frozen=True, slots=True)
class PostfixEdited:
    value: str


@dataclass(frozen=True, slots=True)
class GetLatest:
    pass


@dataclass(frozen=True, slots=True)
class CreateRequested:
    publish_to_catalog: bool
    release_github: bool


@dataclass(frozen=True, slots=True)
class ErrorCleared:
    force: bool = False


@dataclass(frozen=True, slots=True)
class TimeoutExpired:
    kind: RequestKind
    request_id: int


UserEvent = (
    Initialize
    | PollTick
    | CatalogSelected
    | VersionEdited
    | PostfixEdited
    | GetLatest
    | CreateRequested
    | ErrorCleared
)

PanelEvent = HostEvent | UserEvent | TimeoutExpired

# -----------------------------------------------------------------------------
# Outbound messages
# -----------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class CheckAuthentication:
    pass


@dataclass(frozen=True, slots=True)
class GetBranchName:
    request_id: int


@dataclass(frozen=True, slots=True)
class SelectCatalog:
    catalog_id: str
    request_id: int


@dataclass(frozen=True, slots=True)
class ForceRefresh:
    catalog_id: str | None
    request_id: int


@dataclass(frozen=True, slots=True)
class CreatePreRelease:
    version: str
    postfix: str
    publish_to_catalog: bool
    release_github: bool
    catalog_id: str | None


@dataclass(frozen=True, slots=True)
class ShowConfirmation:
    summary: str
    release: CreatePreRelease


@dataclass(frozen=True, slots=True)
class ShowErrorRequest:
    error: str


OutboundMessage = (
    CheckAuthentication
    | GetBranchName
    | SelectCatalog
    | ForceRefresh
    | CreatePreRelease
    | ShowConfirmation
    | ShowErrorRequest
)

# -----------------------------------------------------------------------------
# Effects
# -----------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Send:
    message: OutboundMessage


@dataclass(frozen=True, slots=True)
class ArmTimer:
    """Schedule ``TimeoutExpired(kind, request_id)``; replaces any timer of ``kind``."""

    kind: RequestKind
    request_id: int
    delay: float


@dataclass(frozen=True, slots=True)
class CancelTimer:
    kind: RequestKind


@dataclass(frozen=True, slots=True)
class PersistSession:
    selected_catalog_id: str | None


Effect = Send | ArmTimer | CancelTimer | PersistSession

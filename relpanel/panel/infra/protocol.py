"""Host message codec.

Messages are JSON objects keyed by ``command`` with camelCase fields.
Decoding never raises: malformed input comes back as ``Err(PanelError)``.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping

from relpanel.core.result import Err, Ok, Result
from relpanel.core.structured import (
    StrDict,
    as_str_dict,
    get_bool,
    get_int,
    get_list,
    get_raw_str,
    get_str,
    get_table,
)
from relpanel.panel.domain.errors import PanelError
from relpanel.panel.domain.model import CatalogEntry, CatalogOption, CatalogSnapshot, ReleaseRecord
from relpanel.panel.flow.events import (
    AuthenticationStatus,
    BranchNameUpdated,
    CatalogDetailsUpdated,
    CatalogSelected,
    CheckAuthentication,
    CreatePreRelease,
    CreateRequested,
    DataUpdated,
    ErrorCleared,
    ErrorShown,
    ForceRefresh,
    GetBranchName,
    GetLatest,
    HostEvent,
    Initialize,
    LoadingHidden,
    LoadingShown,
    OutboundMessage,
    PollTick,
    PostfixEdited,
    RefreshCompleted,
    ReleaseCompleted,
    SelectCatalog,
    ShowConfirmation,
    ShowErrorRequest,
    UnpushedChanges,
    UserEvent,
    VersionEdited,
)


def _invalid(message: str, hint: str | None = None) -> Err[PanelError]:
    return Err(PanelError(kind="invalid_message", message=message, hint=hint))


# -----------------------------------------------------------------------------
# Payload pieces
# -----------------------------------------------------------------------------


def decode_release(obj: object) -> ReleaseRecord | None:
    d = as_str_dict(obj)
    if d is None:
        return None
    tag = get_str(d, "tag_name") or get_str(d, "tag")
    if tag is None:
        return None
    return ReleaseRecord(
        tag=tag,
        created_at=get_str(d, "created_at"),
        name=get_str(d, "name") or "",
        tarball_url=get_str(d, "tarball_url"),
    )


def decode_catalog_entry(obj: object) -> CatalogEntry | None:
    if isinstance(obj, str):
        return CatalogEntry(version=obj.strip()) if obj.strip() else None
    d = as_str_dict(obj)
    if d is None:
        return None
    version = get_str(d, "version")
    if version is None:
        return None
    flavor = get_table(d, "flavor") or {}
    return CatalogEntry(
        version=version,
        flavor_label=get_str(flavor, "label") or get_str(flavor, "name") or "",
        artifact_url=get_str(d, "tgz_url") or get_str(d, "artifactUrl"),
    )


def decode_snapshot(d: Mapping[str, object]) -> CatalogSnapshot:
    raw_versions = get_list(d, "versions")
    entries: tuple[CatalogEntry, ...] | None
    if raw_versions is None:
        entries = None
    else:
        entries = tuple(e for e in map(decode_catalog_entry, raw_versions) if e is not None)
    return CatalogSnapshot(
        catalog_id=get_str(d, "catalogId") or "",
        offering_id=get_str(d, "offeringId") or "",
        name=get_str(d, "name") or "",
        label=get_str(d, "label") or "",
        offering_found=not bool(get_bool(d, "offeringNotFound")),
        entries=entries,
    )


def _decode_option(obj: object) -> CatalogOption | None:
    d = as_str_dict(obj)
    if d is None:
        return None
    catalog_id = get_str(d, "id")
    if catalog_id is None:
        return None
    return CatalogOption(
        id=catalog_id,
        label=get_str(d, "label") or catalog_id,
        short_description=get_str(d, "shortDescription"),
    )


# -----------------------------------------------------------------------------
# Host -> panel
# -----------------------------------------------------------------------------


def _auth(d: StrDict) -> Result[HostEvent, PanelError]:
    github = get_bool(d, "githubAuthenticated")
    catalog = get_bool(d, "catalogAuthenticated")
    return Ok(AuthenticationStatus(github=bool(github), catalog=bool(catalog)))


def _data(d: StrDict) -> Result[HostEvent, PanelError]:
    catalogs = tuple(
        o for o in map(_decode_option, get_list(d, "catalogs") or []) if o is not None
    )
    releases = tuple(r for r in map(decode_release, get_list(d, "releases") or []) if r is not None)
    return Ok(
        DataUpdated(
            catalogs=catalogs,
            releases=releases,
            is_cached=bool(get_bool(d, "isCached")),
            timestamp=get_str(d, "timestamp"),
        )
    )


def _branch(d: StrDict) -> Result[HostEvent, PanelError]:
    return Ok(
        BranchNameUpdated(
            name=get_raw_str(d, "branch") or "",
            error=get_str(d, "error"),
            request_id=get_int(d, "requestId"),
        )
    )


def _show_error(d: StrDict) -> Result[HostEvent, PanelError]:
    return Ok(ErrorShown(error=get_str(d, "error")))


def _details(d: StrDict) -> Result[HostEvent, PanelError]:
    details = get_table(d, "catalogDetails")
    if details is None:
        return _invalid("updateCatalogDetails without catalogDetails")
    return Ok(
        CatalogDetailsUpdated(
            snapshot=decode_snapshot(details),
            request_id=get_int(d, "requestId"),
        )
    )


def _unpushed(d: StrDict) -> Result[HostEvent, PanelError]:
    flag = get_bool(d, "hasUnpushedChanges")
    if flag is None:
        flag = get_bool(d, "value")
    return Ok(UnpushedChanges(has_changes=bool(flag)))


def _refresh_complete(d: StrDict) -> Result[HostEvent, PanelError]:
    success = get_bool(d, "success")
    return Ok(
        RefreshCompleted(
            success=True if success is None else success,
            error=get_str(d, "error"),
            request_id=get_int(d, "requestId"),
        )
    )


def _release_complete(d: StrDict) -> Result[HostEvent, PanelError]:
    success = get_bool(d, "success")
    if success is None:
        return _invalid("releaseComplete without success flag")
    return Ok(ReleaseCompleted(success=success, error=get_str(d, "error")))


_HOST_DECODERS: dict[str, Callable[[StrDict], Result[HostEvent, PanelError]]] = {
    "authenticationStatus": _auth,
    "updateData": _data,
    "updateBranchName": _branch,
    "showError": _show_error,
    "updateCatalogDetails": _details,
    "hasUnpushedChanges": _unpushed,
    "refreshComplete": _refresh_complete,
    "releaseComplete": _release_complete,
    "showLoading": lambda d: Ok(LoadingShown(message=get_str(d, "message"))),
    "hideLoading": lambda _: Ok(LoadingHidden()),
}


def decode_host_message(obj: object) -> Result[HostEvent, PanelError]:
    d = as_str_dict(obj)
    if d is None:
        return _invalid("host message must be a JSON object")
    command = get_str(d, "command")
    if command is None:
        return _invalid("host message without command")
    decoder = _HOST_DECODERS.get(command)
    if decoder is None:
        return _invalid(f"unknown host command: {command}", hint=", ".join(sorted(_HOST_DECODERS)))
    return decoder(d)


# -----------------------------------------------------------------------------
# User actions (replay scripts)
# -----------------------------------------------------------------------------


def decode_user_action(obj: object) -> Result[UserEvent, PanelError]:
    d = as_str_dict(obj)
    if d is None:
        return _invalid("user action must be a JSON object")
    action = get_str(d, "action")
    match action:
        case "initialize":
            return Ok(Initialize(restored_catalog_id=get_str(d, "catalogId")))
        case "tick":
            return Ok(PollTick())
        case "selectCatalog":
            return Ok(CatalogSelected(catalog_id=get_str(d, "catalogId")))
        case "editVersion":
            return Ok(VersionEdited(value=get_raw_str(d, "value") or ""))
        case "editPostfix":
            return Ok(PostfixEdited(value=get_raw_str(d, "value") or ""))
        case "getLatest":
            return Ok(GetLatest())
        case "create":
            return Ok(
                CreateRequested(
                    publish_to_catalog=bool(get_bool(d, "publishToCatalog")),
                    release_github=get_bool(d, "releaseGithub") is not False,
                )
            )
        case "clearError":
            return Ok(ErrorCleared(force=bool(get_bool(d, "force"))))
        case None:
            return _invalid("user action without action")
        case _:
            return _invalid(f"unknown user action: {action}")


# -----------------------------------------------------------------------------
# Panel -> host
# -----------------------------------------------------------------------------


def _release_payload(release: CreatePreRelease) -> StrDict:
    return {
        "version": release.version,
        "postfix": release.postfix,
        "publishToCatalog": release.publish_to_catalog,
        "releaseGithub": release.release_github,
        "catalogId": release.catalog_id,
    }


def encode_outbound(message: OutboundMessage) -> StrDict:
    match message:
        case CheckAuthentication():
            return {"command": "checkAuthentication"}
        case GetBranchName(request_id=request_id):
            return {"command": "getBranchName", "requestId": request_id}
        case SelectCatalog(catalog_id=catalog_id, request_id=request_id):
            return {"command": "selectCatalog", "catalogId": catalog_id, "requestId": request_id}
        case ForceRefresh(catalog_id=catalog_id, request_id=request_id):
            return {"command": "forceRefresh", "catalogId": catalog_id, "requestId": request_id}
        case CreatePreRelease():
            return {"command": "createPreRelease", "data": _release_payload(message)}
        case ShowConfirmation(summary=summary, release=release):
            return {
                "command": "showConfirmation",
                "data": {**_release_payload(release), "message": summary},
            }
        case ShowErrorRequest(error=error):
            return {"command": "showError", "message": error}
        case _:
            raise AssertionError(f"unexpected outbound message: {message!r}")

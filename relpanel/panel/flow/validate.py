from __future__ import annotations

from relpanel.core.result import Err, Ok, Result
from relpanel.panel.domain.errors import (
    PanelError,
    first_release_error,
    invalid_version_error,
    not_authenticated_error,
    protected_branch_error,
    tag_exists_error,
    version_conflict_error,
)
from relpanel.panel.domain.extract import format_release_tag
from relpanel.panel.domain.semver import is_strict_semver
from relpanel.panel.flow.events import CreatePreRelease
from relpanel.panel.flow.state import PanelState


def _has_fields(state: PanelState) -> bool:
    return bool(state.form.version.strip()) and bool(state.form.postfix.strip())


def target_tag(state: PanelState) -> str:
    return format_release_tag(state.form.version.strip(), state.form.postfix.strip())


def tag_released(state: PanelState) -> bool:
    tag = target_tag(state)
    return any(r.tag == tag for r in state.releases)


def version_published(state: PanelState) -> bool:
    snapshot = state.snapshot
    if snapshot is None:
        return False
    return state.form.version.strip() in snapshot.versions


def can_create_github(state: PanelState) -> bool:
    return (
        _has_fields(state)
        and not state.is_protected
        and not state.release_busy
        and not tag_released(state)
        and state.auth.github
    )


def can_publish_catalog(state: PanelState) -> bool:
    snapshot = state.snapshot
    return (
        _has_fields(state)
        and not state.is_protected
        and not state.release_busy
        and snapshot is not None
        and snapshot.offering_found
        and snapshot.versions_loaded
        and not version_published(state)
        and state.auth.catalog
    )


def policy_error(state: PanelState) -> PanelError | None:
    """Standing policy violation of the current form, if any.

    Protected branches report nothing here; the advisory already covers them.
    """
    if state.is_protected:
        return None
    snapshot = state.snapshot
    if snapshot is None:
        return None
    if not snapshot.offering_found:
        return PanelError(
            kind="offering_not_found",
            message=f"Offering {snapshot.name or '(unnamed)'} was not found in catalog "
            f"{snapshot.label or snapshot.catalog_id}.",
            hint="Create the offering through the catalog's own interface first.",
        )
    if snapshot.entries is not None and not snapshot.entries:
        return first_release_error(snapshot.name)
    if state.form.version.strip() and version_published(state):
        return version_conflict_error(state.form.version.strip())
    return None


def validate_create(
    state: PanelState,
    *,
    publish_to_catalog: bool,
    release_github: bool,
) -> Result[CreatePreRelease, PanelError]:
    version = state.form.version.strip()
    postfix = state.form.postfix.strip()

    if not version or not postfix:
        return Err(PanelError(kind="missing_fields", message="Please fill in all required fields"))

    if not is_strict_semver(version):
        return Err(invalid_version_error())

    if state.is_protected:
        return Err(protected_branch_error())

    if not publish_to_catalog and not release_github:
        return Err(PanelError(kind="no_target", message="Select at least one release target"))

    if release_github:
        if not state.auth.github:
            return Err(not_authenticated_error("GitHub"))
        if tag_released(state):
            return Err(tag_exists_error(format_release_tag(version, postfix)))

    catalog_id = state.selection.catalog_id
    if publish_to_catalog:
        if not state.auth.catalog:
            return Err(not_authenticated_error("the catalog"))
        snapshot = state.snapshot
        if catalog_id is None or snapshot is None or not snapshot.versions_loaded:
            return Err(
                PanelError(
                    kind="missing_fields",
                    message="Select a catalog and wait for its versions before publishing",
                )
            )
        if not snapshot.entries:
            return Err(first_release_error(snapshot.name))
        if version in snapshot.versions:
            return Err(version_conflict_error(version))

        if not release_github and not tag_released(state):
            tag = format_release_tag(version, postfix)
            return Err(
                PanelError(
                    kind="missing_upstream_tag",
                    message=f"GitHub release {tag} not found. "
                    "Cannot publish to catalog without a GitHub release.",
                )
            )

    return Ok(
        CreatePreRelease(
            version=version,
            postfix=postfix,
            publish_to_catalog=publish_to_catalog,
            release_github=release_github,
            catalog_id=catalog_id,
        )
    )


def confirmation_summary(state: PanelState, release: CreatePreRelease) -> str:
    tag = format_release_tag(release.version, release.postfix)
    parts: list[str] = []
    if release.release_github:
        parts.append(f"create GitHub release {tag}")
    if release.publish_to_catalog:
        snapshot = state.snapshot
        where = (snapshot.label or snapshot.catalog_id) if snapshot else release.catalog_id
        parts.append(f"publish version {release.version} to catalog {where}")
    branch = state.branch.name if state.branch else "unknown branch"
    summary = " and ".join(parts)
    return f"{summary[:1].upper()}{summary[1:]} from {branch}?"

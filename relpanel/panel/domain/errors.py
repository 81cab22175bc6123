"""Error types for the release panel."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

PanelErrorKind = Literal[
    # policy: detected locally, block the action without contacting the host
    "protected_branch",
    "version_conflict",
    "first_release_required",
    "offering_not_found",
    "missing_upstream_tag",
    "invalid_version",
    "missing_fields",
    "no_target",
    "not_authenticated",
    "tag_exists",
    # reported by the host, shown verbatim
    "host",
    # no response in time
    "timeout",
    # infrastructure
    "invalid_message",
    "session_io",
]

POLICY_KINDS: frozenset[str] = frozenset(
    {
        "protected_branch",
        "version_conflict",
        "first_release_required",
        "offering_not_found",
        "missing_upstream_tag",
        "invalid_version",
        "missing_fields",
        "no_target",
        "not_authenticated",
        "tag_exists",
    }
)


@dataclass(frozen=True, slots=True)
class PanelError:
    """Canonical panel error payload.

    Rendered as plain text; ``kind`` never reaches the user.
    """

    kind: PanelErrorKind
    message: str
    hint: str | None = None

    @property
    def is_policy(self) -> bool:
        return self.kind in POLICY_KINDS

    def pretty(self) -> str:
        if self.hint:
            return f"{self.message} (hint: {self.hint})"
        return self.message


PROTECTED_BRANCH_ADVISORY = (
    "Pre-releases cannot be created from the main or master branch. "
    "Switch to a feature branch to continue."
)


def protected_branch_error() -> PanelError:
    return PanelError(kind="protected_branch", message=PROTECTED_BRANCH_ADVISORY)


def first_release_error(offering: str) -> PanelError:
    name = offering or "this offering"
    return PanelError(
        kind="first_release_required",
        message=(
            f"No versions exist for {name}. The first release must be created "
            "through the catalog's own interface."
        ),
    )


def version_conflict_error(version: str) -> PanelError:
    return PanelError(
        kind="version_conflict",
        message=f"Version {version} already exists in the catalog.",
        hint="Pick a higher version.",
    )


def invalid_version_error() -> PanelError:
    return PanelError(
        kind="invalid_version",
        message="Invalid version format. Please use semantic versioning (e.g., 1.0.0)",
    )


def not_authenticated_error(service: str) -> PanelError:
    return PanelError(
        kind="not_authenticated",
        message=f"Not signed in to {service}.",
        hint=f"Sign in to {service} and try again.",
    )


def tag_exists_error(tag: str) -> PanelError:
    return PanelError(kind="tag_exists", message=f"GitHub release {tag} already exists.")

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Literal

from relpanel.panel.domain.model import CatalogEntry
from relpanel.panel.domain.semver import bump_patch, is_strict_semver, sort_descending

SuggestionKind = Literal["not_loaded", "first_release_required", "no_valid", "suggested"]


@dataclass(frozen=True, slots=True)
class Suggestion:
    kind: SuggestionKind
    version: str | None = None
    latest: str | None = None


def suggest_next_version(entries: Sequence[CatalogEntry] | None) -> Suggestion:
    """Propose the next patch release after the newest catalog version.

    ``entries is None`` means versions are still loading and yields nothing.
    An empty sequence means the offering has never been released, which the
    panel refuses to originate.
    """
    if entries is None:
        return Suggestion(kind="not_loaded")
    if not entries:
        return Suggestion(kind="first_release_required")

    candidates = sort_descending(e.version for e in entries if is_strict_semver(e.version))
    if not candidates:
        return Suggestion(kind="no_valid")

    latest = candidates[0]
    return Suggestion(kind="suggested", version=bump_patch(latest), latest=latest)

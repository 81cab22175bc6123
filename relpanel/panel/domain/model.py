from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class BranchState:
    name: str
    is_protected: bool


@dataclass(frozen=True, slots=True)
class ReleaseRecord:
    """An upstream tagged release."""

    tag: str
    created_at: str | None = None
    name: str = ""
    tarball_url: str | None = None


@dataclass(frozen=True, slots=True)
class CatalogEntry:
    """One (version, flavor) pair published in the catalog."""

    version: str
    flavor_label: str = ""
    artifact_url: str | None = None


@dataclass(frozen=True, slots=True)
class CatalogSnapshot:
    catalog_id: str
    offering_id: str = ""
    name: str = ""
    label: str = ""
    offering_found: bool = True
    # None: versions not loaded yet. (): the offering has no versions.
    entries: tuple[CatalogEntry, ...] | None = None

    @property
    def versions_loaded(self) -> bool:
        return self.entries is not None

    @property
    def versions(self) -> frozenset[str]:
        return frozenset(e.version for e in self.entries or ())


@dataclass(frozen=True, slots=True)
class CatalogOption:
    """An entry of the catalog selection list."""

    id: str
    label: str
    short_description: str | None = None


@dataclass(frozen=True, slots=True)
class ReconciliationRow:
    github_tag: str | None
    catalog_entries: tuple[CatalogEntry, ...]

    @property
    def github_published(self) -> bool:
        return self.github_tag is not None

    @property
    def catalog_published(self) -> bool:
        return bool(self.catalog_entries)

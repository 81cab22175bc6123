from __future__ import annotations

from collections.abc import Sequence
from functools import cmp_to_key

from relpanel.core.config import MAX_CATALOG_VERSIONS
from relpanel.panel.domain.extract import release_version, tag_from_artifact_url
from relpanel.panel.domain.model import CatalogEntry, ReconciliationRow, ReleaseRecord
from relpanel.panel.domain.semver import compare, sort_descending


def sort_releases(releases: Sequence[ReleaseRecord]) -> list[ReleaseRecord]:
    """Releases newest first by bare version; ties keep their input order."""
    return sorted(
        releases,
        key=cmp_to_key(lambda a, b: compare(release_version(a.tag), release_version(b.tag))),
        reverse=True,
    )


def published_tags(entries: Sequence[CatalogEntry]) -> dict[str, CatalogEntry]:
    lookup: dict[str, CatalogEntry] = {}
    for entry in entries:
        tag = tag_from_artifact_url(entry.artifact_url)
        if tag is not None and tag not in lookup:
            lookup[tag] = entry
    return lookup


def build_reconciliation(
    releases: Sequence[ReleaseRecord],
    entries: Sequence[CatalogEntry],
    *,
    max_versions: int = MAX_CATALOG_VERSIONS,
) -> tuple[ReconciliationRow, ...]:
    """Align upstream release tags with catalog entries.

    Releases whose tag no catalog artifact points at come first, newest
    first, with an empty catalog side. They are followed by the newest
    ``max_versions`` catalog versions, each carrying every flavor entry of
    that version and the tag resolved from the first entry whose artifact
    URL names one.
    """
    lookup = published_tags(entries)

    rows: list[ReconciliationRow] = [
        ReconciliationRow(github_tag=release.tag, catalog_entries=())
        for release in sort_releases(releases)
        if release.tag not in lookup
    ]

    distinct = list(dict.fromkeys(entry.version for entry in entries))
    for version in sort_descending(distinct)[:max_versions]:
        flavors = tuple(entry for entry in entries if entry.version == version)
        github_tag = next(
            (
                tag
                for tag in (tag_from_artifact_url(entry.artifact_url) for entry in flavors)
                if tag is not None
            ),
            None,
        )
        rows.append(ReconciliationRow(github_tag=github_tag, catalog_entries=flavors))

    return tuple(rows)

from __future__ import annotations

import re
from collections.abc import Iterable
from functools import cmp_to_key

_STRICT_RE = re.compile(r"\d+\.\d+\.\d+", re.ASCII)


def _segments(version: str) -> list[int]:
    # Non-numeric segments coerce to 0; callers filter with is_strict_semver first.
    return [int(part) if part.isascii() and part.isdigit() else 0 for part in version.split(".")]


def compare(a: str, b: str) -> int:
    """Compare two dotted numeric versions component-wise.

    Returns -1, 0 or 1. Missing trailing segments count as 0, so
    ``compare("1.2", "1.2.0") == 0``.
    """
    left = _segments(a)
    right = _segments(b)
    width = max(len(left), len(right))
    left += [0] * (width - len(left))
    right += [0] * (width - len(right))
    if left == right:
        return 0
    return -1 if left < right else 1


def is_strict_semver(version: str) -> bool:
    return _STRICT_RE.fullmatch(version) is not None


def sort_descending(versions: Iterable[str]) -> list[str]:
    """Stable descending sort by ``compare``."""
    return sorted(versions, key=cmp_to_key(compare), reverse=True)


def bump_patch(version: str) -> str:
    if not is_strict_semver(version):
        raise ValueError(f"not a MAJOR.MINOR.PATCH version: {version}")
    major, minor, patch = (int(p) for p in version.split("."))
    return f"{major}.{minor}.{patch + 1}"

from __future__ import annotations

import re

_ARTIFACT_TAG_RE = re.compile(r"/tags/([^/]+?)\.tar\.gz")
_POSTFIX_UNSAFE_RE = re.compile(r"[^A-Za-z0-9._-]+")


def release_version(tag: str) -> str:
    """Bare version of a release tag: one leading ``v`` and any ``-suffix`` removed."""
    bare = tag[1:] if tag.startswith("v") else tag
    return bare.split("-", 1)[0]


def tag_from_artifact_url(url: str | None) -> str | None:
    """Source tag a catalog artifact was built from, if the URL names one."""
    if not url:
        return None
    m = _ARTIFACT_TAG_RE.search(url)
    if m is None:
        return None
    return m.group(1)


def format_release_tag(version: str, postfix: str) -> str:
    return f"v{version}-{postfix}"


def postfix_from_branch(branch: str) -> str:
    cleaned = _POSTFIX_UNSAFE_RE.sub("-", branch.strip()).strip("-")
    return f"{cleaned}-beta" if cleaned else ""

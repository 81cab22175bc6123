from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path

from relpanel.core.result import Err, Ok, Result
from relpanel.core.structured import as_str_dict, get_str
from relpanel.panel.domain.errors import PanelError
from relpanel.platform.files import atomic_write_text

SESSION_SCHEMA = 1


@dataclass(frozen=True, slots=True)
class SessionState:
    """The only panel state that survives a reload."""

    selected_catalog_id: str | None = None


def save_session(*, path: Path, session: SessionState) -> Result[None, PanelError]:
    payload: dict[str, object] = {
        "schema": SESSION_SCHEMA,
        "selected_catalog_id": session.selected_catalog_id,
    }
    try:
        atomic_write_text(path, json.dumps(payload, indent=2) + "\n", encoding="utf-8")
    except OSError as e:
        return Err(
            PanelError(
                kind="session_io",
                message=f"failed to write panel session: {e}",
                hint=str(path),
            )
        )
    return Ok(None)


def load_session(*, path: Path) -> Result[SessionState | None, PanelError]:
    if not path.exists():
        return Ok(None)

    try:
        obj: object = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        return Err(
            PanelError(
                kind="session_io",
                message=f"failed to load panel session: {e}",
                hint=str(path),
            )
        )

    d = as_str_dict(obj)
    if d is None:
        return Err(
            PanelError(kind="session_io", message="invalid panel session format", hint=str(path))
        )

    schema = d.get("schema")
    if schema != SESSION_SCHEMA:
        return Err(
            PanelError(
                kind="session_io",
                message=f"unsupported panel session schema: {schema}",
                hint=str(path),
            )
        )

    return Ok(SessionState(selected_catalog_id=get_str(d, "selected_catalog_id")))


def clear_session(*, path: Path) -> Result[None, PanelError]:
    if not path.exists():
        return Ok(None)
    try:
        path.unlink()
    except OSError as e:
        return Err(
            PanelError(
                kind="session_io",
                message=f"failed to delete panel session: {e}",
                hint=str(path),
            )
        )
    return Ok(None)


class FileSessionStore:
    """Session persistence backed by a JSON file."""

    def __init__(self, path: Path) -> None:
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> Result[SessionState | None, PanelError]:
        return load_session(path=self._path)

    def save(self, session: SessionState) -> Result[None, PanelError]:
        return save_session(path=self._path, session=session)


class MemorySessionStore:
    """Session persistence kept in memory; survives runtime rebuilds in tests."""

    def __init__(self, session: SessionState | None = None) -> None:
        self.session = session
        self.writes = 0

    def load(self) -> Result[SessionState | None, PanelError]:
        return Ok(self.session)

    def save(self, session: SessionState) -> Result[None, PanelError]:
        self.session = session
        self.writes += 1
        return Ok(None)

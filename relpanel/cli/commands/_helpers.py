"""Shared helpers for CLI commands."""

from __future__ import annotations

import json
from pathlib import Path
from typing import TYPE_CHECKING, NoReturn, TypeVar

import typer

from relpanel.core.errors import ErrorCode
from relpanel.core.result import Err, Ok, Result
from relpanel.core.structured import as_obj_list, as_str_dict, get_list, get_table
from relpanel.output.console import Style
from relpanel.panel.domain.errors import PanelError
from relpanel.panel.domain.model import CatalogSnapshot, ReleaseRecord
from relpanel.panel.infra.protocol import decode_release, decode_snapshot

if TYPE_CHECKING:
    from relpanel.cli.context import CLIContext

T = TypeVar("T")
E = TypeVar("E")


def exit_on_error(
    result: Result[T, E],
    ctx: CLIContext,
    error_code: ErrorCode = ErrorCode.USER_ERROR,
) -> None:
    """Exit with error if result is Err, otherwise return.

    Expects error objects to have 'message' and optional 'hint' attributes.
    """
    if isinstance(result, Err):
        error = result.error
        message: str = getattr(error, "message", str(error))
        hint: str | None = getattr(error, "hint", None)
        ctx.console.error(message)
        if hint:
            ctx.console.print(f"hint: {hint}", Style.DIM)
        raise typer.Exit(code=int(error_code))


def value_or_exit(
    result: Result[T, E],
    ctx: CLIContext,
    error_code: ErrorCode = ErrorCode.USER_ERROR,
) -> T:
    """Return the Ok value, or report the error and exit."""
    exit_on_error(result, ctx, error_code)
    assert isinstance(result, Ok)
    return result.value


def exit_with_code(code: int) -> NoReturn:
    raise typer.Exit(code=code)


def _input_error(message: str, path: Path) -> Err[PanelError]:
    return Err(PanelError(kind="invalid_message", message=message, hint=str(path)))


def read_json(path: Path) -> Result[object, PanelError]:
    try:
        return Ok(json.loads(path.read_text(encoding="utf-8")))
    except OSError as e:
        return _input_error(f"cannot read {path.name}: {e}", path)
    except json.JSONDecodeError as e:
        return _input_error(f"invalid JSON in {path.name}: {e}", path)


def read_releases(path: Path) -> Result[tuple[ReleaseRecord, ...], PanelError]:
    """Releases as a bare list or an ``updateData``-shaped object."""
    loaded = read_json(path)
    if isinstance(loaded, Err):
        return loaded

    items = as_obj_list(loaded)
    if items is None:
        d = as_str_dict(loaded)
        items = get_list(d, "releases") if d is not None else None
    if items is None:
        return _input_error("expected a list of releases", path)
    return Ok(tuple(r for r in map(decode_release, items) if r is not None))


def read_snapshot(path: Path) -> Result[CatalogSnapshot, PanelError]:
    """Catalog details as a bare version list or a ``catalogDetails`` object.

    A file wrapping the object in ``updateCatalogDetails`` is accepted too.
    """
    loaded = read_json(path)
    if isinstance(loaded, Err):
        return loaded

    if as_obj_list(loaded) is not None:
        return Ok(decode_snapshot({"versions": loaded}))

    d = as_str_dict(loaded)
    if d is None:
        return _input_error("expected catalog details or a list of versions", path)
    return Ok(decode_snapshot(get_table(d, "catalogDetails") or d))

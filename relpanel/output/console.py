"""Console output for the CLI and the panel runtime.

Nothing outside this module touches Rich. Commands and the runtime write
through ``ConsoleProtocol``; tests swap in ``MockConsole`` and read back what
was written.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Protocol

__all__ = [
    "ConsoleProtocol",
    "MockConsole",
    "OutputRecord",
    "RichConsole",
    "Style",
]


class Style(Enum):
    DEFAULT = auto()
    SUCCESS = auto()
    ERROR = auto()
    WARNING = auto()
    INFO = auto()
    DIM = auto()  # message traces
    BOLD = auto()
    HEADER = auto()

    def __str__(self) -> str:
        return self.name.lower()


# Level prefixes shared by both consoles so captured text matches the terminal.
_PREFIX: dict[Style, str] = {
    Style.SUCCESS: "OK",
    Style.ERROR: "error:",
    Style.WARNING: "warning:",
    Style.INFO: "info:",
}

_RICH_STYLE: dict[Style, str] = {
    Style.SUCCESS: "green",
    Style.ERROR: "red bold",
    Style.WARNING: "yellow",
    Style.INFO: "cyan",
    Style.DIM: "dim",
    Style.BOLD: "bold",
    Style.HEADER: "blue bold",
}


class ConsoleProtocol(Protocol):
    def print(self, message: str, style: Style = Style.DEFAULT) -> None: ...

    def success(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...

    def warning(self, message: str) -> None: ...

    def info(self, message: str) -> None: ...

    def header(self, message: str) -> None: ...

    def table(self, title: str, columns: Sequence[str], rows: Sequence[Sequence[str]]) -> None:
        """Print a titled table; every row has one cell per column."""
        ...

    def newline(self) -> None: ...


class RichConsole:
    """Terminal console backed by Rich. Markup in messages is never interpreted."""

    def __init__(self) -> None:
        from rich.console import Console

        self._console = Console()

    def print(self, message: str, style: Style = Style.DEFAULT) -> None:
        self._console.print(message, style=_RICH_STYLE.get(style), markup=False)

    def _level(self, style: Style, message: str) -> None:
        from rich.text import Text

        line = Text(_PREFIX[style], style=_RICH_STYLE[style])
        line.append(f" {message}")
        self._console.print(line)

    def success(self, message: str) -> None:
        self._level(Style.SUCCESS, message)

    def error(self, message: str) -> None:
        self._level(Style.ERROR, message)

    def warning(self, message: str) -> None:
        self._level(Style.WARNING, message)

    def info(self, message: str) -> None:
        self._level(Style.INFO, message)

    def header(self, message: str) -> None:
        self._console.print()
        self._console.print(message, style=_RICH_STYLE[Style.HEADER], markup=False)

    def table(self, title: str, columns: Sequence[str], rows: Sequence[Sequence[str]]) -> None:
        from rich.table import Table
        from rich.text import Text

        table = Table(title=title, title_justify="left", show_lines=False)
        for column in columns:
            table.add_column(column, no_wrap=True)
        for row in rows:
            table.add_row(*(Text(cell) for cell in row))
        self._console.print(table)

    def newline(self) -> None:
        self._console.print()


@dataclass(frozen=True, slots=True)
class OutputRecord:
    message: str
    style: Style


@dataclass
class MockConsole:
    """Captures output in memory.

    Level methods record the same prefixed text ``RichConsole`` prints; a
    table becomes a title record, a ``" | "``-joined header and one record
    per row.
    """

    outputs: list[OutputRecord] = field(default_factory=list)

    def _add(self, message: str, style: Style) -> None:
        self.outputs.append(OutputRecord(message, style))

    def print(self, message: str, style: Style = Style.DEFAULT) -> None:
        self._add(message, style)

    def success(self, message: str) -> None:
        self._add(f"{_PREFIX[Style.SUCCESS]} {message}", Style.SUCCESS)

    def error(self, message: str) -> None:
        self._add(f"{_PREFIX[Style.ERROR]} {message}", Style.ERROR)

    def warning(self, message: str) -> None:
        self._add(f"{_PREFIX[Style.WARNING]} {message}", Style.WARNING)

    def info(self, message: str) -> None:
        self._add(f"{_PREFIX[Style.INFO]} {message}", Style.INFO)

    def header(self, message: str) -> None:
        self._add(message, Style.HEADER)

    def table(self, title: str, columns: Sequence[str], rows: Sequence[Sequence[str]]) -> None:
        self._add(title, Style.HEADER)
        self._add(" | ".join(columns), Style.BOLD)
        for row in rows:
            self._add(" | ".join(row), Style.DEFAULT)

    def newline(self) -> None:
        self._add("", Style.DEFAULT)

    def clear(self) -> None:
        self.outputs.clear()

    @property
    def messages(self) -> list[str]:
        return [record.message for record in self.outputs]

    @property
    def text(self) -> str:
        return "\n".join(self.messages)

    def has_error(self) -> bool:
        return self.count(Style.ERROR) > 0

    def has_warning(self) -> bool:
        return self.count(Style.WARNING) > 0

    def find(self, substring: str) -> list[OutputRecord]:
        return [record for record in self.outputs if substring in record.message]

    def count(self, style: Style) -> int:
        return sum(1 for record in self.outputs if record.style is style)

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import typer

from relpanel.core.config import DEFAULT_CONFIG_NAME, Config, load_config
from relpanel.core.errors import ErrorCode
from relpanel.core.result import Err
from relpanel.output.console import ConsoleProtocol, RichConsole


@dataclass(frozen=True, slots=True)
class CLIContext:
    config: Config
    config_path: Path | None
    console: ConsoleProtocol

    def session_path(self) -> Path:
        path = Path(self.config.session.path).expanduser()
        if path.is_absolute() or self.config_path is None:
            return path
        return self.config_path.parent / path


def build_context(config_path: Path | None = None) -> CLIContext:
    """Load configuration and wire the console.

    An explicit ``--config`` must load; the implicit ``relpanel.toml`` in the
    working directory is optional.
    """
    path = config_path
    if path is None:
        candidate = Path.cwd() / DEFAULT_CONFIG_NAME
        path = candidate if candidate.is_file() else None

    config = Config()
    if path is not None:
        config_result = load_config(path)
        if isinstance(config_result, Err):
            typer.echo(f"error: {config_result.error.message}", err=True)
            raise typer.Exit(code=int(ErrorCode.ENV_ERROR))
        config = config_result.value

    return CLIContext(config=config, config_path=path, console=RichConsole())

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from relpanel.cli.context import CLIContext
from relpanel.core.config import Config, SessionConfig
from relpanel.output.console import MockConsole


@pytest.fixture
def console() -> MockConsole:
    return MockConsole()


@pytest.fixture
def use_context(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path, console: MockConsole
) -> Callable[..., None]:
    """Point a command module's ``build_context`` at a MockConsole."""

    def install(module: object, config: Config | None = None) -> None:
        cfg = config or Config(session=SessionConfig(path=str(tmp_path / "session.json")))

        def fake_build_context(config_path: Path | None = None) -> CLIContext:
            return CLIContext(config=cfg, config_path=config_path, console=console)

        monkeypatch.setattr(module, "build_context", fake_build_context)

    return install

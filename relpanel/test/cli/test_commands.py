from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path

import pytest
import typer
from typer.testing import CliRunner

import relpanel.cli.commands.reconcile as reconcile_cmd
import relpanel.cli.commands.replay as replay_cmd
import relpanel.cli.commands.session as session_cmd
import relpanel.cli.commands.suggest as suggest_cmd
from relpanel import __version__
from relpanel.cli.app import app
from relpanel.core.config import Config, PanelConfig, SessionConfig
from relpanel.output.console import MockConsole


def _url(tag: str) -> str:
    return f"https://github.com/org/repo/archive/refs/tags/{tag}.tar.gz"


def _write(path: Path, obj: object) -> Path:
    path.write_text(json.dumps(obj), encoding="utf-8")
    return path


def _script(path: Path, *lines: object) -> Path:
    path.write_text("\n".join(json.dumps(line) for line in lines) + "\n", encoding="utf-8")
    return path


class TestReconcile:
    def test_prints_table(
        self, tmp_path: Path, console: MockConsole, use_context: Callable[..., None]
    ) -> None:
        use_context(reconcile_cmd)
        releases = _write(tmp_path / "r.json", [{"tag_name": "v1.0.0"}, {"tag_name": "v2.0.0"}])
        catalog = _write(
            tmp_path / "c.json",
            {"label": "Private", "versions": [{"version": "1.0.0", "tgz_url": _url("v1.0.0")}]},
        )

        reconcile_cmd.reconcile(releases_json=releases, catalog_json=catalog, config=None)

        assert console.messages[:4] == [
            "Private",
            "GitHub | Catalog",
            "v2.0.0 | Not published",
            "v1.0.0 | 1.0.0",
        ]
        assert console.find("1 release(s) not published to the catalog")

    def test_bad_json_exits(
        self, tmp_path: Path, console: MockConsole, use_context: Callable[..., None]
    ) -> None:
        use_context(reconcile_cmd)
        bad = tmp_path / "r.json"
        bad.write_text("{", encoding="utf-8")
        catalog = _write(tmp_path / "c.json", [])

        with pytest.raises(typer.Exit) as exc:
            reconcile_cmd.reconcile(releases_json=bad, catalog_json=catalog, config=None)
        assert exc.value.exit_code == 1
        assert console.has_error()


class TestSuggest:
    def test_suggests_next_patch(
        self, tmp_path: Path, console: MockConsole, use_context: Callable[..., None]
    ) -> None:
        use_context(suggest_cmd)
        catalog = _write(tmp_path / "c.json", ["1.0.0", "1.1.0"])

        suggest_cmd.suggest(catalog_json=catalog, current=None, config=None)

        assert console.messages[0] == "1.1.1"
        assert not console.has_error()

    def test_empty_catalog_is_policy_error(
        self, tmp_path: Path, console: MockConsole, use_context: Callable[..., None]
    ) -> None:
        use_context(suggest_cmd)
        catalog = _write(tmp_path / "c.json", {"catalogDetails": {"name": "off", "versions": []}})

        with pytest.raises(typer.Exit) as exc:
            suggest_cmd.suggest(catalog_json=catalog, current=None, config=None)
        assert exc.value.exit_code == 1
        assert console.find("first release must be created")

    def test_current_version_is_kept(
        self, tmp_path: Path, console: MockConsole, use_context: Callable[..., None]
    ) -> None:
        use_context(suggest_cmd)
        catalog = _write(tmp_path / "c.json", ["1.0.0"])

        suggest_cmd.suggest(catalog_json=catalog, current="3.0.0", config=None)
        assert console.messages == ["OK keeping 3.0.0"]

    def test_current_version_conflict(
        self, tmp_path: Path, console: MockConsole, use_context: Callable[..., None]
    ) -> None:
        use_context(suggest_cmd)
        catalog = _write(tmp_path / "c.json", ["1.0.0"])

        with pytest.raises(typer.Exit):
            suggest_cmd.suggest(catalog_json=catalog, current="1.0.0", config=None)
        assert console.find("Version 1.0.0 already exists in the catalog.")


class TestReplay:
    def test_replay_reaches_ready_form(
        self, tmp_path: Path, console: MockConsole, use_context: Callable[..., None]
    ) -> None:
        use_context(replay_cmd)
        script = _script(
            tmp_path / "s.jsonl",
            {"command": "updateBranchName", "branch": "feature", "requestId": 1},
            {"command": "authenticationStatus", "githubAuthenticated": True},
            {"action": "selectCatalog", "catalogId": "c1"},
            {
                "command": "updateCatalogDetails",
                "requestId": 2,
                "catalogDetails": {"catalogId": "c1", "versions": ["1.0.0"]},
            },
        )

        replay_cmd.replay(script=script, profile=None, session=None, quiet=False, config=None)

        assert console.find("-> selectCatalog")
        assert console.find("Version: 1.0.1   Postfix: feature-beta")
        assert console.find("GitHub Tag: v1.0.1-feature-beta")
        assert console.find("create-github=on publish-catalog=off")

    def test_replay_timeout_with_clock_steps(
        self, tmp_path: Path, console: MockConsole, use_context: Callable[..., None]
    ) -> None:
        use_context(replay_cmd)
        script = _script(
            tmp_path / "s.jsonl",
            {"action": "selectCatalog", "catalogId": "c1"},
            {"advance": 10},
        )

        replay_cmd.replay(script=script, profile=None, session=None, quiet=True, config=None)

        assert console.find("Failed to load catalog details. Please try again.")
        assert not console.find("->")

    def test_terminal_profile(
        self, tmp_path: Path, console: MockConsole, use_context: Callable[..., None]
    ) -> None:
        use_context(replay_cmd)
        script = _script(tmp_path / "s.jsonl", {"command": "updateBranchName", "branch": "main"})

        replay_cmd.replay(script=script, profile="terminal", session=None, quiet=True, config=None)

        assert console.find("Branch: main (protected)")
        assert console.find("create=off publish-checkbox=off")

    def test_session_file_restores_selection(
        self, tmp_path: Path, console: MockConsole, use_context: Callable[..., None]
    ) -> None:
        use_context(replay_cmd)
        session = tmp_path / "session.json"
        first = _script(tmp_path / "a.jsonl", {"action": "selectCatalog", "catalogId": "c7"})
        replay_cmd.replay(script=first, profile=None, session=session, quiet=True, config=None)

        console.clear()
        second = _script(tmp_path / "b.jsonl", {"advance": 0})
        replay_cmd.replay(script=second, profile=None, session=session, quiet=True, config=None)
        assert console.find("Catalog: c7")

    def test_bad_line_reports_line_number(
        self, tmp_path: Path, console: MockConsole, use_context: Callable[..., None]
    ) -> None:
        use_context(replay_cmd)
        script = tmp_path / "s.jsonl"
        script.write_text('# comment\n\n{"action": "fly"}\n', encoding="utf-8")

        with pytest.raises(typer.Exit) as exc:
            replay_cmd.replay(script=script, profile=None, session=None, quiet=True, config=None)
        assert exc.value.exit_code == 1
        assert console.find("line 3: unknown user action: fly")

    def test_confirmation_config(
        self, tmp_path: Path, console: MockConsole, use_context: Callable[..., None]
    ) -> None:
        use_context(
            replay_cmd,
            Config(
                panel=PanelConfig(require_confirmation=True),
                session=SessionConfig(path=str(tmp_path / "s.json")),
            ),
        )
        script = _script(
            tmp_path / "s.jsonl",
            {"command": "updateBranchName", "branch": "feature", "requestId": 1},
            {"command": "authenticationStatus", "githubAuthenticated": True},
            {"action": "editVersion", "value": "2.0.0"},
            {"action": "create"},
        )

        replay_cmd.replay(script=script, profile=None, session=None, quiet=False, config=None)
        assert console.find("-> showConfirmation")


class TestSession:
    def test_show_and_clear(
        self, tmp_path: Path, console: MockConsole, use_context: Callable[..., None]
    ) -> None:
        use_context(session_cmd)
        session_cmd.show(config=None)
        assert console.find("no session at")

        _write(tmp_path / "session.json", {"schema": 1, "selected_catalog_id": "c1"})
        console.clear()
        session_cmd.show(config=None)
        assert console.messages == ["selected catalog: c1"]

        session_cmd.clear(config=None)
        assert not (tmp_path / "session.json").exists()

    def test_corrupt_session_is_io_error(
        self, tmp_path: Path, console: MockConsole, use_context: Callable[..., None]
    ) -> None:
        use_context(session_cmd)
        (tmp_path / "session.json").write_text("nope", encoding="utf-8")
        with pytest.raises(typer.Exit) as exc:
            session_cmd.show(config=None)
        assert exc.value.exit_code == 5


class TestApp:
    def test_version(self) -> None:
        result = CliRunner().invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_suggest_through_app(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tmp_path)
        catalog = _write(tmp_path / "c.json", ["0.1.0"])
        result = CliRunner().invoke(app, ["suggest", str(catalog)])
        assert result.exit_code == 0
        assert "0.1.1" in result.output

    def test_bad_explicit_config(self, tmp_path: Path) -> None:
        bad = tmp_path / "relpanel.toml"
        bad.write_text("[panel\n", encoding="utf-8")
        catalog = _write(tmp_path / "c.json", ["0.1.0"])
        result = CliRunner().invoke(app, ["suggest", str(catalog), "--config", str(bad)])
        assert result.exit_code == 2

from __future__ import annotations

from pathlib import Path

from relpanel.core.config import PanelConfig
from relpanel.core.result import Err, Ok, Result
from relpanel.output.console import MockConsole, Style
from relpanel.panel.domain.errors import PanelError
from relpanel.panel.infra.session import FileSessionStore, MemorySessionStore, SessionState
from relpanel.panel.runtime import POLL_KEY, PanelRuntime, RecordingTransport, SessionStore


def _runtime(
    sessions: SessionStore | None = None,
    *,
    console: MockConsole | None = None,
    config: PanelConfig | None = None,
) -> tuple[PanelRuntime, RecordingTransport]:
    transport = RecordingTransport()
    runtime = PanelRuntime(
        config=config or PanelConfig(),
        transport=transport,
        sessions=sessions or MemorySessionStore(),
        console=console,
    )
    return runtime, transport


class _BrokenStore:
    def load(self) -> Result[SessionState | None, PanelError]:
        return Err(PanelError(kind="session_io", message="unreadable session"))

    def save(self, session: SessionState) -> Result[None, PanelError]:
        return Err(PanelError(kind="session_io", message="disk full"))


def test_start_requests_branch_and_arms_poll() -> None:
    runtime, transport = _runtime()
    runtime.start()
    assert transport.commands() == ["getBranchName", "checkAuthentication"]
    assert runtime.is_armed(POLL_KEY)
    assert runtime.state.branch_phase == "loading"


def test_restored_selection_sends_identical_request() -> None:
    store = MemorySessionStore()
    first, first_transport = _runtime(store)
    first.start()
    assert first.act({"action": "selectCatalog", "catalogId": "c1"}) == Ok(None)
    manual = first_transport.last("selectCatalog")
    assert store.session == SessionState(selected_catalog_id="c1")

    second, second_transport = _runtime(store)
    second.start()
    assert second_transport.last("selectCatalog") == manual
    assert manual == {"command": "selectCatalog", "catalogId": "c1", "requestId": 2}


def test_file_session_round_trip(tmp_path: Path) -> None:
    path = tmp_path / "session.json"
    first, _ = _runtime(FileSessionStore(path))
    first.start()
    first.act({"action": "selectCatalog", "catalogId": "c9"})

    second, transport = _runtime(FileSessionStore(path))
    second.start()
    assert transport.commands()[-1] == "selectCatalog"
    assert second.state.selection.catalog_id == "c9"


def test_poll_ticks_follow_the_clock() -> None:
    runtime, transport = _runtime()
    runtime.start()
    transport.clear()

    runtime.advance(1.5)
    assert transport.sent == []

    runtime.advance(0.5)
    assert transport.last("getBranchName") == {"command": "getBranchName", "requestId": 2}

    runtime.advance(4.0)
    assert transport.commands().count("getBranchName") == 3
    assert runtime.scheduler.now() == 6.0


def test_selection_times_out() -> None:
    runtime, _ = _runtime()
    runtime.start()
    runtime.act({"action": "selectCatalog", "catalogId": "c1"})

    runtime.advance(9.0)
    assert runtime.state.selection.phase == "awaiting_metadata"

    runtime.advance(1.0)
    assert runtime.state.selection.phase == "timed_out"
    assert runtime.view().placeholder == "Failed to load catalog details. Please try again."


def test_answered_selection_never_times_out() -> None:
    runtime, _ = _runtime()
    runtime.start()
    runtime.act({"action": "selectCatalog", "catalogId": "c1"})
    runtime.receive(
        {
            "command": "updateCatalogDetails",
            "requestId": 2,
            "catalogDetails": {"catalogId": "c1", "versions": ["1.0.0"]},
        }
    )
    assert not runtime.is_armed("catalog_select")

    runtime.advance(30.0)
    assert runtime.state.selection.phase == "versions_ready"
    assert runtime.state.form.version == "1.0.1"


def test_invalid_host_message_is_rejected() -> None:
    runtime, _ = _runtime()
    runtime.start()
    before = runtime.state
    result = runtime.receive({"command": "teleport"})
    assert isinstance(result, Err)
    assert runtime.state == before


def test_protected_branch_from_host() -> None:
    runtime, _ = _runtime()
    runtime.start()
    runtime.receive({"command": "updateBranchName", "branch": "main", "requestId": 1})
    view = runtime.view()
    assert view.branch_label == "main (protected)"
    assert not view.controls.version


def test_traces_messages_to_console() -> None:
    console = MockConsole()
    runtime, _ = _runtime(console=console)
    runtime.start()
    runtime.receive({"command": "authenticationStatus", "githubAuthenticated": True})
    assert console.find("-> getBranchName")[0].style == Style.DIM
    assert console.find("<- authenticationStatus")


def test_session_failures_are_warnings() -> None:
    console = MockConsole()
    runtime, transport = _runtime(_BrokenStore(), console=console)
    runtime.start()
    runtime.act({"action": "selectCatalog", "catalogId": "c1"})

    assert console.find("warning: unreadable session")
    assert console.find("warning: disk full")
    assert transport.last("selectCatalog") is not None

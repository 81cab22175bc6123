"""Single-consumer event loop for the release panel.

``PanelRuntime`` feeds events through the reducer one at a time, in arrival
order, and carries out the resulting effects: outbound messages go to the
host transport, timers to the scheduler, the selected catalog to the
session store. Events raised while an event is being processed are queued
behind it.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Hashable
from typing import Protocol

from relpanel.core.config import PanelConfig
from relpanel.core.result import Err, Ok, Result
from relpanel.core.structured import StrDict
from relpanel.output.console import ConsoleProtocol, Style
from relpanel.panel.domain.errors import PanelError
from relpanel.panel.flow.events import (
    ArmTimer,
    CancelTimer,
    Effect,
    Initialize,
    PanelEvent,
    PersistSession,
    PollTick,
    Send,
    TimeoutExpired,
)
from relpanel.panel.flow.machine import transition
from relpanel.panel.flow.state import PanelState, initial_state
from relpanel.panel.infra.protocol import decode_host_message, decode_user_action, encode_outbound
from relpanel.panel.infra.scheduler import ManualScheduler
from relpanel.panel.infra.session import SessionState
from relpanel.panel.view.render import PanelView, render

POLL_KEY = "branch_poll"


class HostTransport(Protocol):
    def send(self, message: StrDict) -> None: ...


class SessionStore(Protocol):
    def load(self) -> Result[SessionState | None, PanelError]: ...

    def save(self, session: SessionState) -> Result[None, PanelError]: ...


class RecordingTransport:
    """Transport that keeps every outbound message."""

    def __init__(self) -> None:
        self.sent: list[StrDict] = []

    def send(self, message: StrDict) -> None:
        self.sent.append(message)

    def commands(self) -> list[str]:
        return [str(m.get("command")) for m in self.sent]

    def last(self, command: str) -> StrDict | None:
        return next((m for m in reversed(self.sent) if m.get("command") == command), None)

    def clear(self) -> None:
        self.sent.clear()


class PanelRuntime:
    def __init__(
        self,
        *,
        config: PanelConfig,
        transport: HostTransport,
        sessions: SessionStore,
        scheduler: ManualScheduler | None = None,
        console: ConsoleProtocol | None = None,
    ) -> None:
        self._config = config
        self._transport = transport
        self._sessions = sessions
        self._scheduler = scheduler or ManualScheduler()
        self._console = console
        self._state = initial_state()
        self._queue: deque[PanelEvent] = deque()
        self._draining = False

    @property
    def state(self) -> PanelState:
        return self._state

    @property
    def scheduler(self) -> ManualScheduler:
        return self._scheduler

    def view(self) -> PanelView:
        return render(self._state, self._config.profile)

    def start(self) -> None:
        """Restore the session, send the first requests and start branch polling."""
        restored: str | None = None
        loaded = self._sessions.load()
        if isinstance(loaded, Err):
            self._warn(loaded.error)
        elif loaded.value is not None:
            restored = loaded.value.selected_catalog_id

        self.dispatch(Initialize(restored_catalog_id=restored))
        self._scheduler.arm(POLL_KEY, self._config.poll_interval_seconds, PollTick())

    def dispatch(self, event: PanelEvent) -> None:
        self._queue.append(event)
        if self._draining:
            return
        self._draining = True
        try:
            while self._queue:
                self._step(self._queue.popleft())
        finally:
            self._draining = False

    def receive(self, raw: object) -> Result[None, PanelError]:
        """Decode and dispatch one host message."""
        decoded = decode_host_message(raw)
        if isinstance(decoded, Err):
            return decoded
        self._trace(f"<- {_command_of(raw)}")
        self.dispatch(decoded.value)
        return Ok(None)

    def act(self, raw: object) -> Result[None, PanelError]:
        """Decode and dispatch one user action."""
        decoded = decode_user_action(raw)
        if isinstance(decoded, Err):
            return decoded
        self.dispatch(decoded.value)
        return Ok(None)

    def advance(self, seconds: float) -> None:
        """Move the clock forward, firing due timers and poll ticks in order."""
        until = self._scheduler.now() + seconds
        while (task := self._scheduler.pop_due(until)) is not None:
            if task.key == POLL_KEY:
                self._scheduler.arm(POLL_KEY, self._config.poll_interval_seconds, PollTick())
            self.dispatch(task.event)
        self._scheduler.set_time(until)

    def _step(self, event: PanelEvent) -> None:
        result = transition(
            self._state,
            event,
            config=self._config,
            now=self._scheduler.now(),
        )
        self._state = result.state
        for effect in result.effects:
            self._apply(effect)

    def _apply(self, effect: Effect) -> None:
        match effect:
            case Send(message=message):
                payload = encode_outbound(message)
                self._trace(f"-> {payload['command']}")
                self._transport.send(payload)
            case ArmTimer(kind=kind, request_id=request_id, delay=delay):
                self._scheduler.arm(kind, delay, TimeoutExpired(kind=kind, request_id=request_id))
            case CancelTimer(kind=kind):
                self._scheduler.cancel(kind)
            case PersistSession(selected_catalog_id=catalog_id):
                saved = self._sessions.save(SessionState(selected_catalog_id=catalog_id))
                if isinstance(saved, Err):
                    self._warn(saved.error)

    def is_armed(self, key: Hashable) -> bool:
        return self._scheduler.is_armed(key)

    def _trace(self, message: str) -> None:
        if self._console is not None:
            self._console.print(message, Style.DIM)

    def _warn(self, error: PanelError) -> None:
        if self._console is not None:
            self._console.warning(error.pretty())


def _command_of(raw: object) -> str:
    if isinstance(raw, dict):
        return str(raw.get("command", "?"))
    return "?"

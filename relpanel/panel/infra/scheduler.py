"""Cancellable timers keyed by request kind.

The panel never sleeps. A timer is a record of "deliver this event at this
time"; arming a key that is already armed replaces the earlier task, so a
superseded request can never time out.
"""

from __future__ import annotations

from collections.abc import Hashable
from dataclasses import dataclass

from relpanel.panel.flow.events import PanelEvent


@dataclass(frozen=True, slots=True)
class ScheduledTask:
    key: Hashable
    due: float
    event: PanelEvent
    seq: int


class ManualScheduler:
    """Virtual clock for tests and script replay.

    Time moves only through ``pop_due`` and ``set_time``. Due tasks come out
    in due order, arming order breaking ties.
    """

    def __init__(self, start: float = 0.0) -> None:
        self._now = start
        self._tasks: dict[Hashable, ScheduledTask] = {}
        self._seq = 0

    def now(self) -> float:
        return self._now

    def arm(self, key: Hashable, delay: float, event: PanelEvent) -> None:
        self._seq += 1
        self._tasks[key] = ScheduledTask(key=key, due=self._now + delay, event=event, seq=self._seq)

    def cancel(self, key: Hashable) -> None:
        self._tasks.pop(key, None)

    def is_armed(self, key: Hashable) -> bool:
        return key in self._tasks

    @property
    def armed(self) -> tuple[ScheduledTask, ...]:
        return tuple(sorted(self._tasks.values(), key=lambda t: (t.due, t.seq)))

    def next_due(self) -> float | None:
        tasks = self.armed
        return tasks[0].due if tasks else None

    def pop_due(self, until: float) -> ScheduledTask | None:
        """Remove and return the earliest task due at or before ``until``."""
        tasks = self.armed
        if not tasks or tasks[0].due > until:
            return None
        task = tasks[0]
        del self._tasks[task.key]
        self._now = max(self._now, task.due)
        return task

    def set_time(self, now: float) -> None:
        self._now = max(self._now, now)

from __future__ import annotations

import threading
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from acadash.adapters.actions_mock import InMemoryActions
from acadash.app.polling_scheduler import PollingScheduler


class RecordingNotifier:
    def __init__(self) -> None:
        self.successes: List[str] = []
        self.errors: List[str] = []

    def success(self, message: str) -> None:
        self.successes.append(message)

    def error(self, message: str) -> None:
        self.errors.append(message)


class FakeClock:
    """Manual timer source; ``advance`` fires due callbacks in order."""

    def __init__(self) -> None:
        self.now_ms = 0
        self._next_token = 0
        self._timers: Dict[int, Tuple[int, Callable[[], None]]] = {}

    def schedule(self, delay_ms: int, callback: Callable[[], None]) -> int:
        self._next_token += 1
        self._timers[self._next_token] = (self.now_ms + delay_ms, callback)
        return self._next_token

    def cancel(self, token: int) -> None:
        self._timers.pop(token, None)

    @property
    def pending(self) -> int:
        return len(self._timers)

    def advance(self, ms: int) -> None:
        target = self.now_ms + ms
        while True:
            due = [(when, token) for token, (when, _) in self._timers.items() if when <= target]
            if not due:
                break
            when, token = min(due)
            _, callback = self._timers.pop(token)
            self.now_ms = when
            callback()
        self.now_ms = target


def fake_scheduler() -> Tuple[PollingScheduler, FakeClock]:
    clock = FakeClock()
    return PollingScheduler(clock.schedule, clock.cancel), clock


class GatedActions(InMemoryActions):
    """Blocks one action inside ``invoke`` until ``release`` is called."""

    def __init__(self, gated_action: str, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.gated_action = gated_action
        self.entered = threading.Event()
        self._release = threading.Event()

    def release(self) -> None:
        self._release.set()

    def invoke(self, action: str, payload: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
        if action == self.gated_action:
            self.entered.set()
            self._release.wait(5)
        return super().invoke(action, payload)


__all__ = ["FakeClock", "GatedActions", "RecordingNotifier", "fake_scheduler"]

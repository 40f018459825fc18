from __future__ import annotations

from typing import Any, Callable, Optional, Protocol


class TimerHost(Protocol):
    """Keyed one-shot timers (``PollingScheduler`` or a screen's lifetime scope)."""

    def schedule(self, channel: str, delay_ms: int, callback: Callable[[], None]) -> None: ...
    def cancel(self, channel: str) -> None: ...
    def handle_for(self, channel: str) -> Optional[Any]: ...


class Debouncer:
    """Collapse rapid triggers into one callback after an idle period.

    Every ``trigger`` restarts the timer; the callback runs once, ``delay_ms``
    after the last trigger.
    """

    def __init__(
        self,
        timers: TimerHost,
        channel: str,
        delay_ms: int,
        callback: Callable[[], None],
    ) -> None:
        self._timers = timers
        self._channel = channel
        self.delay_ms = delay_ms
        self._callback = callback

    @property
    def pending(self) -> bool:
        return self._timers.handle_for(self._channel) is not None

    def trigger(self) -> None:
        self._timers.schedule(self._channel, self.delay_ms, self._callback)

    def cancel(self) -> None:
        self._timers.cancel(self._channel)


__all__ = ["Debouncer", "TimerHost"]

"""Cancellable one-shot timers on top of an event loop."""
import asyncio
from typing import Callable, Optional, Protocol


class TimerHandle(Protocol):
    def cancel(self) -> None:
        ...


class Scheduler(Protocol):
    """The subset of ``asyncio.AbstractEventLoop`` the controllers rely on."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        ...

    def time(self) -> float:
        ...


def get_scheduler(scheduler: Optional[Scheduler] = None) -> Scheduler:
    """Return the given scheduler or the running asyncio loop.

    Raises:
        RuntimeError: If no scheduler is given and no loop is running
    """
    if scheduler is not None:
        return scheduler
    return asyncio.get_running_loop()


class Timer:
    """A restartable one-shot timer.

    ``start()`` while pending restarts the countdown instead of queueing a
    second callback. Once ``close()`` is called the timer never fires again.
    """

    def __init__(self, scheduler: Scheduler, delay_ms: float, callback: Callable[[], None]):
        self._scheduler = scheduler
        self.delay_ms = delay_ms
        self._callback = callback
        self._handle: Optional[TimerHandle] = None
        self._closed = False

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def start(self) -> None:
        """Start or restart the countdown."""
        if self._closed:
            return
        self.cancel()
        self._handle = self._scheduler.call_later(self.delay_ms / 1000.0, self._fire)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def close(self) -> None:
        self.cancel()
        self._closed = True

    def _fire(self) -> None:
        self._handle = None
        if self._closed:
            return
        self._callback()

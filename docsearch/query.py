"""Query controllers: the live query text and the value searches run on."""
from abc import ABC, abstractmethod
from typing import Callable, List, Optional

from docsearch.timers import Scheduler, Timer, get_scheduler


QueryListener = Callable[[str], None]


class _QueryBase(ABC):
    """Shared state and subscriptions for both query variants."""

    def __init__(self) -> None:
        self.raw = ""
        self.debounced = ""
        self._listeners: List[QueryListener] = []
        self._closed = False

    def subscribe(self, listener: QueryListener) -> Callable[[], None]:
        """Register a listener for debounced value changes.

        Returns:
            Function that removes the listener
        """
        if self._closed:
            raise RuntimeError("Query controller is closed")
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def clear(self) -> None:
        self.set_raw("")

    @abstractmethod
    def set_raw(self, text: str) -> None:
        """Update the live query text."""

    def close(self) -> None:
        """Drop listeners; later updates are ignored."""
        self._closed = True
        self._listeners = []

    def _commit(self, value: str) -> None:
        if self._closed or value == self.debounced:
            return
        self.debounced = value
        for listener in list(self._listeners):
            listener(value)


class DebouncedQuery(_QueryBase):
    """Query whose searchable value settles after a quiet period.

    Every keystroke restarts the timer; only the last value of a burst is
    committed. An empty or whitespace-only query commits immediately.
    """

    def __init__(self, delay_ms: float = 150, scheduler: Optional[Scheduler] = None):
        super().__init__()
        self._timer = Timer(get_scheduler(scheduler), delay_ms, self._settle)

    @property
    def pending(self) -> bool:
        return self._timer.pending

    def set_raw(self, text: str) -> None:
        if self._closed:
            return
        self.raw = text or ""

        if not self.raw.strip():
            self._timer.cancel()
            self._commit("")
            return

        self._timer.start()

    def flush(self) -> None:
        """Commit the pending value now, if any."""
        if self._timer.pending:
            self._timer.cancel()
            self._settle()

    def close(self) -> None:
        self._timer.close()
        super().close()

    def _settle(self) -> None:
        self._commit(self.raw)


class ImmediateQuery(_QueryBase):
    """Query whose searchable value tracks every keystroke."""

    def set_raw(self, text: str) -> None:
        if self._closed:
            return
        self.raw = text or ""
        self._commit(self.raw)

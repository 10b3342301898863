"""Key events and global keydown subscriptions."""
from dataclasses import dataclass
from typing import Callable, List


@dataclass
class KeyEvent:
    """A keydown event as delivered by the host.

    ``key`` uses DOM key names: "ArrowDown", "Enter", "Escape", "k", "/".
    """
    key: str
    meta: bool = False
    ctrl: bool = False
    shift: bool = False
    default_prevented: bool = False

    def prevent_default(self) -> None:
        self.default_prevented = True

    def is_shortcut(self, key: str) -> bool:
        """True for Cmd+key or Ctrl+key."""
        return (self.meta or self.ctrl) and self.key.lower() == key.lower()


KeyListener = Callable[[KeyEvent], None]


class KeyboardHub:
    """Window-level keydown listeners.

    ``add_listener`` hands back the function that removes the listener, so
    every subscriber owns its own teardown.
    """

    def __init__(self) -> None:
        self._listeners: List[KeyListener] = []

    def add_listener(self, listener: KeyListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return remove

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def dispatch(self, event: KeyEvent) -> KeyEvent:
        """Deliver an event to every listener in registration order."""
        for listener in list(self._listeners):
            listener(event)
        return event

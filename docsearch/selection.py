"""Keyboard-driven selection over a list of results or links."""
from enum import Enum
from typing import Optional

from docsearch.keyboard import KeyEvent
from docsearch.timers import Scheduler, Timer


class NavigationPolicy(Enum):
    """What arrow keys do at the ends of the list."""
    WRAP = "wrap"    # Search overlay: cycle to the opposite end
    CLAMP = "clamp"  # Sidebar: stop at the edge


class SelectionModel:
    """Selection state machine: Idle (no items) or Active(index).

    Arrow keys move the selection according to the policy and flag a pending
    scroll for the viewport; hover selects directly but is ignored for a
    short window after keyboard navigation, so a mouse resting over a list
    that is scrolling under it doesn't steal the selection back.
    """

    def __init__(
        self,
        policy: NavigationPolicy,
        scheduler: Optional[Scheduler] = None,
        hover_suppress_ms: float = 500,
    ):
        self.policy = policy
        self.result_count = 0
        self._index = 0
        self._scroll_pending = False
        # Without a scheduler hover is never suppressed
        self._keyboard_recent: Optional[Timer] = None
        if scheduler is not None:
            self._keyboard_recent = Timer(scheduler, hover_suppress_ms, lambda: None)

    @property
    def is_active(self) -> bool:
        return self.result_count > 0

    @property
    def index(self) -> Optional[int]:
        """Selected index, clamped to the current item count; None when idle."""
        if self.result_count <= 0:
            return None
        return max(0, min(self._index, self.result_count - 1))

    @property
    def keyboard_recent(self) -> bool:
        """True while hover reselection is suppressed."""
        return self._keyboard_recent is not None and self._keyboard_recent.pending

    def reset(self, result_count: int) -> None:
        """Start over for a new item set, discarding the previous index."""
        self.result_count = max(0, result_count)
        self._index = 0
        self._scroll_pending = False

    def move_down(self) -> bool:
        current = self.index
        if current is None:
            return False
        if self.policy is NavigationPolicy.WRAP:
            self._index = (current + 1) % self.result_count
        else:
            self._index = min(current + 1, self.result_count - 1)
        self._mark_keyboard()
        return True

    def move_up(self) -> bool:
        current = self.index
        if current is None:
            return False
        if self.policy is NavigationPolicy.WRAP:
            self._index = (current - 1) % self.result_count
        else:
            self._index = max(current - 1, 0)
        self._mark_keyboard()
        return True

    def hover(self, index: int) -> bool:
        """Select an item under the mouse.

        Returns:
            True if the selection changed
        """
        if self.keyboard_recent:
            return False
        if not 0 <= index < self.result_count or index == self.index:
            return False
        self._index = index
        return True

    def select(self, index: int) -> None:
        """Select an item directly, e.g. on click."""
        if 0 <= index < self.result_count:
            self._index = index

    def handle_key(self, event: KeyEvent) -> Optional[int]:
        """Apply a navigation key.

        Returns:
            The index to activate for Enter, otherwise None
        """
        if not self.is_active:
            return None

        if event.key == "ArrowDown":
            event.prevent_default()
            self.move_down()
        elif event.key == "ArrowUp":
            event.prevent_default()
            self.move_up()
        elif event.key == "Enter":
            event.prevent_default()
            return self.index

        return None

    def consume_keyboard_scroll(self) -> bool:
        """Return and clear the flag set by the last keyboard move."""
        pending = self._scroll_pending
        self._scroll_pending = False
        return pending

    def close(self) -> None:
        if self._keyboard_recent is not None:
            self._keyboard_recent.close()
        self.reset(0)

    def _mark_keyboard(self) -> None:
        self._scroll_pending = True
        if self._keyboard_recent is not None:
            self._keyboard_recent.start()

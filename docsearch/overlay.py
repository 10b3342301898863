"""Search overlay controller.

Composes a debounced query, a wrapping selection and the viewport scroller
into the modal search experience. All per-open state lives in a
``SearchSession`` that is created on open and torn down on close, so
nothing typed in one session can leak into the next.
"""
from enum import Enum
from typing import Callable, List, Optional, Protocol

from docsearch.config import OverlayConfig, get_config
from docsearch.index import IndexEntry
from docsearch.keyboard import KeyboardHub, KeyEvent
from docsearch.query import DebouncedQuery
from docsearch.search import SearchEngine, SubstringSearchEngine
from docsearch.selection import NavigationPolicy, SelectionModel
from docsearch.timers import Scheduler, Timer, get_scheduler
from docsearch.viewport import ScrollContainer, ensure_visible


IndexProvider = Callable[[], List[IndexEntry]]
Navigate = Callable[[str], None]


class Page(Protocol):
    """Host page the overlay is mounted in."""

    results_container: Optional[ScrollContainer]

    def focus_search_input(self) -> None:
        ...

    def get_body_overflow(self) -> str:
        ...

    def set_body_overflow(self, value: str) -> None:
        ...


class OverlayState(Enum):
    CLOSED = "closed"
    OPEN = "open"


class SearchSession:
    """Query, results and selection for one opening of the overlay."""

    def __init__(self, config: OverlayConfig, scheduler: Scheduler):
        self.query = DebouncedQuery(config.debounce_ms, scheduler)
        self.selection = SelectionModel(NavigationPolicy.WRAP, scheduler, config.hover_suppress_ms)
        self.results: List[IndexEntry] = []

    def close(self) -> None:
        self.query.close()
        self.selection.close()
        self.results = []


class OverlayController:
    """Open/closed state machine for the search overlay.

    Opening is driven from outside (see ``install_open_shortcut``); the
    overlay closes itself on Escape, on the shortcut, on a backdrop click
    and after a result is activated.
    """

    def __init__(
        self,
        index_provider: IndexProvider,
        navigate: Navigate,
        page: Page,
        scheduler: Optional[Scheduler] = None,
        config: Optional[OverlayConfig] = None,
        engine: Optional[SearchEngine] = None,
        on_close: Optional[Callable[[], None]] = None,
    ):
        self._index_provider = index_provider
        self._navigate = navigate
        self._page = page
        self._scheduler = get_scheduler(scheduler)
        self.config = config or get_config().overlay
        self._engine = engine or SubstringSearchEngine()
        self._on_close = on_close

        self.state = OverlayState.CLOSED
        self._session: Optional[SearchSession] = None
        self._saved_overflow: Optional[str] = None
        self._remove_key_listener: Optional[Callable[[], None]] = None
        self._closing = Timer(self._scheduler, self.config.close_animation_ms, lambda: None)
        self._disposed = False

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def is_open(self) -> bool:
        return self.state is OverlayState.OPEN

    @property
    def closing(self) -> bool:
        """True while the close animation is still playing."""
        return self._closing.pending

    @property
    def query(self) -> str:
        return self._session.query.raw if self._session else ""

    @property
    def debounced_query(self) -> str:
        return self._session.query.debounced if self._session else ""

    @property
    def results(self) -> List[IndexEntry]:
        return list(self._session.results) if self._session else []

    @property
    def selected_index(self) -> Optional[int]:
        return self._session.selection.index if self._session else None

    @property
    def selected(self) -> Optional[IndexEntry]:
        index = self.selected_index
        if index is None:
            return None
        return self._session.results[index]

    @property
    def status_text(self) -> str:
        count = len(self.results)
        return f"{count} result{'' if count == 1 else 's'}"

    @property
    def empty_state(self) -> Optional[str]:
        """Empty-state kind: "prompt" before typing, "no-results" for a fruitless query."""
        if not self.is_open or self.results:
            return None
        return "no-results" if self.query.strip() else "prompt"

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def open(self) -> None:
        """Open the overlay with a fresh session."""
        if self._disposed:
            raise RuntimeError("Overlay controller has been disposed")
        if self.is_open:
            return

        self._closing.cancel()
        self._session = SearchSession(self.config, self._scheduler)
        self._session.query.subscribe(self._run_search)
        self.state = OverlayState.OPEN

        self._saved_overflow = self._page.get_body_overflow()
        self._page.set_body_overflow("hidden")
        self._page.focus_search_input()

    def close(self) -> None:
        """Close immediately; the animation flag trails behind."""
        if not self.is_open:
            return

        if self._session is not None:
            self._session.close()
            self._session = None
        self.state = OverlayState.CLOSED
        self._restore_overflow()
        self._closing.start()

        if self._on_close is not None:
            self._on_close()

    def attach(self, keyboard: KeyboardHub) -> None:
        """Listen for Escape and the shortcut on the window."""
        self.detach()
        self._remove_key_listener = keyboard.add_listener(self.handle_global_key)

    def detach(self) -> None:
        if self._remove_key_listener is not None:
            self._remove_key_listener()
            self._remove_key_listener = None

    def dispose(self) -> None:
        """Unmount: close, drop listeners and give the page its scroll back."""
        self.close()
        self.detach()
        self._closing.close()
        self._restore_overflow()
        self._disposed = True

    def _restore_overflow(self) -> None:
        if self._saved_overflow is not None:
            self._page.set_body_overflow(self._saved_overflow)
            self._saved_overflow = None

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------

    def set_query(self, text: str) -> None:
        if self._session is not None:
            self._session.query.set_raw(text)

    def clear_query(self) -> None:
        self.set_query("")
        if self.is_open:
            self._page.focus_search_input()

    def handle_global_key(self, event: KeyEvent) -> None:
        if not self.is_open:
            return
        if event.key == "Escape":
            self.close()
        elif event.is_shortcut(self.config.shortcut_key) and not event.default_prevented:
            event.prevent_default()
            self.close()

    def handle_input_key(self, event: KeyEvent) -> None:
        """Arrow keys and Enter typed into the search input."""
        if self._session is None or not self._session.results:
            return

        activate = self._session.selection.handle_key(event)
        if activate is not None:
            self.activate(activate)
            return
        self._scroll_to_selection()

    def hover(self, index: int) -> None:
        if self._session is not None:
            self._session.selection.hover(index)

    def click(self, index: int) -> None:
        if self._session is not None:
            self._session.selection.select(index)
        self.activate(index)

    def backdrop_click(self) -> None:
        self.close()

    def activate(self, index: int) -> None:
        """Navigate to a result and close."""
        if self._session is None:
            return
        results = self._session.results
        if not 0 <= index < len(results):
            return
        self._navigate(results[index].url)
        self.close()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _run_search(self, query: str) -> None:
        if self._session is None:
            return
        if query.strip():
            results = self._engine.search(query, self._index_provider(), self.config.max_results)
        else:
            results = []
        self._session.results = results
        self._session.selection.reset(len(results))

    def _scroll_to_selection(self) -> None:
        selection = self._session.selection
        if not selection.consume_keyboard_scroll():
            return
        container = getattr(self._page, "results_container", None)
        if container is None or selection.index is None:
            return
        ensure_visible(
            container,
            selection.index,
            self.config.scroll_buffer_px,
            self.config.scroll_lookback,
            self.config.scroll_margin_px,
        )


def install_open_shortcut(keyboard: KeyboardHub, overlay: OverlayController) -> Callable[[], None]:
    """Open the overlay on Cmd/Ctrl + shortcut key while it is closed.

    Returns:
        Function that removes the listener
    """
    def listener(event: KeyEvent) -> None:
        if event.default_prevented or overlay.is_open:
            return
        if event.is_shortcut(overlay.config.shortcut_key):
            event.prevent_default()
            overlay.open()

    return keyboard.add_listener(listener)

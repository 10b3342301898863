"""Filterable navigation sidebar."""
import sys
from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional

from docsearch.config import SidebarConfig, get_config
from docsearch.keyboard import KeyboardHub, KeyEvent
from docsearch.query import ImmediateQuery
from docsearch.selection import NavigationPolicy, SelectionModel
from docsearch.timers import Scheduler
from docsearch.viewport import ScrollContainer, ensure_visible


@dataclass(frozen=True)
class SidebarLink:
    id: str
    label: str


@dataclass(frozen=True)
class SidebarSection:
    title: str
    links: List[SidebarLink] = field(default_factory=list)


def sections_from_config(groups: List[Any]) -> List[SidebarSection]:
    """Build sidebar sections from the "sidebar" part of the docs content.

    Malformed groups and links are skipped with a warning.
    """
    sections = []
    for group in groups or []:
        if not isinstance(group, dict):
            print(f"[Sidebar] Skipping malformed group: {group!r}", file=sys.stderr)
            continue
        links = []
        for link in group.get("links") or []:
            if not isinstance(link, dict) or not link.get("id"):
                print(f"[Sidebar] Skipping malformed link: {link!r}", file=sys.stderr)
                continue
            links.append(SidebarLink(id=str(link["id"]), label=str(link.get("label") or "")))
        sections.append(SidebarSection(title=str(group.get("title") or ""), links=links))
    return sections


def filter_sections(sections: List[SidebarSection], query: str) -> List[SidebarSection]:
    """Keep links whose label or id contains the query.

    An empty query returns the sections unfiltered. Sections left without
    links are dropped. The input sections are never modified.
    """
    if not (query or "").strip():
        return list(sections)

    needle = query.lower()
    filtered = []
    for section in sections:
        links = [
            link for link in section.links
            if needle in link.label.lower() or needle in link.id.lower()
        ]
        if links:
            filtered.append(SidebarSection(title=section.title, links=links))
    return filtered


class SidebarFilter:
    """Always-visible sidebar: instant filtering and clamped keyboard moves.

    Args:
        sections: Configured sidebar groups
        container: Scrollable sidebar, if the host can report geometry
        config: Sidebar configuration
        focus_input: Callback that focuses the filter input
        navigate: Callback receiving "#<link id>" when a link is activated
        search_height: Height of the sticky filter input above the links
        scheduler: Event loop used to suppress hover after arrow keys
    """

    def __init__(
        self,
        sections: List[SidebarSection],
        container: Optional[ScrollContainer] = None,
        config: Optional[SidebarConfig] = None,
        focus_input: Optional[Callable[[], None]] = None,
        navigate: Optional[Callable[[str], None]] = None,
        search_height: float = 0.0,
        scheduler: Optional[Scheduler] = None,
    ):
        self.sections = list(sections)
        self.container = container
        self.config = config or get_config().sidebar
        self._focus_input = focus_input
        self._navigate = navigate
        self.search_height = search_height

        self.query = ImmediateQuery()
        self.selection = SelectionModel(NavigationPolicy.CLAMP, scheduler)
        self._filtered = list(self.sections)
        self.selection.reset(len(self.visible_links))
        self.query.subscribe(self._refilter)

        self._active_section: Optional[str] = None
        self._remove_key_listener: Optional[Callable[[], None]] = None

    @property
    def filtered_sections(self) -> List[SidebarSection]:
        return list(self._filtered)

    @property
    def visible_links(self) -> List[SidebarLink]:
        return [link for section in self._filtered for link in section.links]

    @property
    def is_empty(self) -> bool:
        """True when the filter hides every link ("No results")."""
        return not self._filtered

    @property
    def selected_link(self) -> Optional[SidebarLink]:
        index = self.selection.index
        if index is None:
            return None
        return self.visible_links[index]

    def set_query(self, text: str) -> None:
        self.query.set_raw(text)

    def clear(self) -> None:
        self.query.clear()
        if self._focus_input is not None:
            self._focus_input()

    def _refilter(self, query: str) -> None:
        self._filtered = filter_sections(self.sections, query)
        self.selection.reset(len(self.visible_links))

    # ------------------------------------------------------------------
    # Keyboard
    # ------------------------------------------------------------------

    def handle_key(self, event: KeyEvent) -> None:
        """Arrow keys and Enter typed into the filter input."""
        activate = self.selection.handle_key(event)
        if activate is not None:
            if self._navigate is not None:
                self._navigate(f"#{self.visible_links[activate].id}")
            return
        if self.selection.consume_keyboard_scroll():
            self._scroll_to(self.selection.index)

    def hover(self, index: int) -> None:
        self.selection.hover(index)

    def handle_global_key(self, event: KeyEvent, input_focused: bool = False) -> None:
        """Focus the filter on "/" unless the user is typing somewhere."""
        if event.key != self.config.focus_key or input_focused:
            return
        if event.meta or event.ctrl:
            return
        event.prevent_default()
        if self._focus_input is not None:
            self._focus_input()

    def attach(self, keyboard: KeyboardHub, is_input_focused: Callable[[], bool]) -> None:
        self.detach()
        self._remove_key_listener = keyboard.add_listener(
            lambda event: self.handle_global_key(event, is_input_focused())
        )

    def detach(self) -> None:
        if self._remove_key_listener is not None:
            self._remove_key_listener()
            self._remove_key_listener = None

    # ------------------------------------------------------------------
    # Active section
    # ------------------------------------------------------------------

    def set_active_section(self, section_id: str) -> Optional[float]:
        """Track the section being read and keep its link in view.

        The first call only records the section, so the initial page load
        doesn't scroll the sidebar. Repeating the current section is a no-op.

        Returns:
            The offset scrolled to, or None if nothing moved
        """
        if not section_id:
            return None

        previous = self._active_section
        self._active_section = section_id
        if previous is None or previous == section_id:
            return None

        ids = [link.id for link in self.visible_links]
        if section_id not in ids:
            return None
        return self._scroll_to(ids.index(section_id))

    @property
    def active_section(self) -> Optional[str]:
        return self._active_section

    def _scroll_to(self, index: Optional[int]) -> Optional[float]:
        if self.container is None or index is None:
            return None
        return ensure_visible(
            self.container,
            index,
            self.config.scroll_buffer_px,
            self.config.scroll_lookback,
            self.config.scroll_margin_px,
            top_inset=self.search_height,
        )

    def close(self) -> None:
        self.detach()
        self.query.close()
        self.selection.close()

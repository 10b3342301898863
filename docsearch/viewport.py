"""Keep the selected item of a scrollable list comfortably in view.

The geometry is a pure function over plain rectangles so it can be tested
without a rendering environment. ``ensure_visible`` is the thin adapter that
reads rectangles from a ``ScrollContainer`` and applies the result.
"""
from dataclasses import dataclass
from typing import List, Optional, Protocol, Sequence

# Offsets closer than this are treated as unchanged
SCROLL_EPSILON = 0.5


@dataclass(frozen=True)
class Rect:
    """Vertical extent of a box, in the host's viewport coordinates."""
    top: float
    bottom: float

    @property
    def height(self) -> float:
        return self.bottom - self.top


class ScrollContainer(Protocol):
    """What the scroller needs from a scrollable list."""

    def get_rect(self) -> Rect:
        """Visible area of the container."""
        ...

    def get_item_rects(self) -> List[Rect]:
        """Current rectangles of every item, in list order."""
        ...

    def get_scroll_top(self) -> float:
        ...

    def scroll_to(self, top: float) -> None:
        """Jump to an offset, without animation."""
        ...


def compute_scroll_top(
    container: Rect,
    items: Sequence[Rect],
    index: int,
    scroll_top: float,
    buffer: float,
    lookback: int = 1,
    margin: float = 10.0,
    top_inset: float = 0.0,
) -> Optional[float]:
    """Work out where to scroll so ``items[index]`` isn't hugging an edge.

    When the target is within ``buffer`` of the top, the item ``lookback``
    positions earlier is aligned to the top, less ``margin``. When it is
    within ``buffer`` of the bottom, the item ``lookback`` positions later is
    aligned to the bottom, plus ``margin``, but never past the end of the
    content. ``top_inset`` is the height of a sticky header covering the top
    of the container.

    Args:
        container: Visible rectangle of the scroll container
        items: Rectangles of all list items
        index: Target item
        scroll_top: Current scroll offset
        buffer: Comfort zone in pixels
        lookback: How many neighbouring items to keep visible
        margin: Extra space beyond the neighbour
        top_inset: Space hidden under a sticky header

    Returns:
        New scroll offset, or None if no scrolling is needed
    """
    if not 0 <= index < len(items):
        return None

    target = items[index]
    last = len(items) - 1
    element_top = target.top - container.top - top_inset
    element_bottom = target.bottom - container.top

    if element_top < buffer:
        neighbour = items[max(0, index - lookback)]
        offset = neighbour.top - container.top + scroll_top - top_inset - margin
    elif element_bottom > container.height - buffer:
        neighbour = items[min(last, index + lookback)]
        offset = neighbour.bottom - container.top + scroll_top - container.height + margin
    else:
        return None

    # Content ends at the last item
    max_offset = items[last].bottom - container.top + scroll_top - container.height
    offset = max(0.0, min(offset, max_offset))
    if abs(offset - scroll_top) < SCROLL_EPSILON:
        return None

    return offset


def ensure_visible(
    container: ScrollContainer,
    index: int,
    buffer: float,
    lookback: int = 1,
    margin: float = 10.0,
    top_inset: float = 0.0,
) -> Optional[float]:
    """Scroll a container so the item at ``index`` stays in view.

    Returns:
        The offset scrolled to, or None if nothing moved
    """
    offset = compute_scroll_top(
        container.get_rect(),
        container.get_item_rects(),
        index,
        container.get_scroll_top(),
        buffer,
        lookback,
        margin,
        top_inset,
    )
    if offset is None:
        return None

    before = container.get_scroll_top()
    container.scroll_to(offset)
    after = container.get_scroll_top()
    if abs(after - before) < SCROLL_EPSILON:
        return None
    return after


class ListViewport:
    """In-memory scroll container for hosts that lay out rows themselves.

    Items are stacked top to bottom from ``content_offset`` (space taken by
    headers above the first item). Scrolling is clamped to the content.
    """

    def __init__(
        self,
        height: float,
        item_heights: Sequence[float] = (),
        top: float = 0.0,
        content_offset: float = 0.0,
    ):
        self.height = height
        self.top = top
        self.content_offset = content_offset
        self.item_heights = list(item_heights)
        self.scroll_top = 0.0
        self.scroll_calls = 0

    def set_items(self, item_heights: Sequence[float]) -> None:
        self.item_heights = list(item_heights)
        self.scroll_top = min(self.scroll_top, self.max_scroll)

    @property
    def max_scroll(self) -> float:
        content = self.content_offset + sum(self.item_heights)
        return max(0.0, content - self.height)

    def get_rect(self) -> Rect:
        return Rect(self.top, self.top + self.height)

    def get_item_rects(self) -> List[Rect]:
        rects = []
        y = self.top + self.content_offset - self.scroll_top
        for item_height in self.item_heights:
            rects.append(Rect(y, y + item_height))
            y += item_height
        return rects

    def get_scroll_top(self) -> float:
        return self.scroll_top

    def scroll_to(self, top: float) -> None:
        self.scroll_calls += 1
        self.scroll_top = min(max(0.0, top), self.max_scroll)

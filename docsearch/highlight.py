"""Match highlighting for search result text."""
import re
from dataclasses import dataclass
from typing import List, Optional, Pattern

MIN_TERM_LENGTH = 2
MIN_STEM_LENGTH = 3  # Shortest stem highlighted for a longer query word


@dataclass(frozen=True)
class Segment:
    """A run of text that either matches the query or doesn't."""
    text: str
    matched: bool


def _term_patterns(term: str) -> List[str]:
    """Alternatives highlighting one query word.

    Matches the word itself or any word it starts (prefix), and for words of
    four or more characters also whole words that are a shorter stem of it,
    so "blocks" highlights "block".
    """
    patterns = [rf"\b{re.escape(term)}\w*"]
    if len(term) > MIN_STEM_LENGTH:
        for length in range(len(term) - 1, MIN_STEM_LENGTH - 1, -1):
            patterns.append(rf"\b{re.escape(term[:length])}\b")
    return patterns


def build_pattern(query: str) -> Optional[Pattern[str]]:
    """Compile the highlight pattern for a query.

    Args:
        query: Raw query text

    Returns:
        Case-insensitive pattern, or None when no term is long enough
    """
    terms = [t for t in (query or "").strip().lower().split() if len(t) >= MIN_TERM_LENGTH]

    alternatives = []
    for term in terms:
        term_pattern = "|".join(_term_patterns(term))
        try:
            re.compile(term_pattern)
        except re.error:
            # Unusable term: leave it unhighlighted
            continue
        alternatives.append(term_pattern)

    if not alternatives:
        return None

    return re.compile("|".join(alternatives), re.IGNORECASE)


def highlight(text: str, query: str) -> List[Segment]:
    """Split text into matched and unmatched segments.

    Concatenating the segment texts always gives back ``text``.

    Args:
        text: Text to decorate
        query: Raw query text

    Returns:
        Segments in text order; a single unmatched segment when nothing matches
    """
    text = text or ""
    pattern = build_pattern(query)
    if pattern is None or not text:
        return [Segment(text, False)]

    segments: List[Segment] = []

    def push(part: str, matched: bool) -> None:
        if not part:
            return
        if segments and segments[-1].matched == matched:
            segments[-1] = Segment(segments[-1].text + part, matched)
        else:
            segments.append(Segment(part, matched))

    position = 0
    for found in pattern.finditer(text):
        push(text[position:found.start()], False)
        push(found.group(0), True)
        position = found.end()
    push(text[position:], False)

    return segments or [Segment(text, False)]


def render_marked(text: str, query: str, start: str = "<mark>", end: str = "</mark>") -> str:
    """Render text with matched segments wrapped in markers."""
    return "".join(
        f"{start}{segment.text}{end}" if segment.matched else segment.text
        for segment in highlight(text, query)
    )

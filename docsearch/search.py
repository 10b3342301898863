"""Search engine module for the docs index."""
from typing import Dict, List, Optional, Protocol, Tuple

from docsearch.index import IndexEntry


# Result groups appear in this order; other modules follow in first-seen order
PREFERRED_MODULE_ORDER = ["Guide", "Core", "API Modules", "Data", "Page"]

# Relevance tiers, lower is better
EXACT_TITLE = 0
TITLE_PREFIX = 1
TITLE_WORD = 2
TITLE_SUBSTRING = 3
DESCRIPTION_MATCH = 4
LOCATION_MATCH = 5


class SearchEngine(Protocol):
    """Protocol for search engines to allow extensibility."""

    def search(self, query: str, entries: List[IndexEntry], limit: Optional[int] = None) -> List[IndexEntry]:
        """Search index entries based on query.

        Args:
            query: Search query string
            entries: Index entries to search
            limit: Maximum number of results to return, None for all

        Returns:
            List of matching entries, ranked and grouped by module
        """
        ...


def _starts_word(text: str, query: str) -> bool:
    """True if query occurs in text at the start of a word."""
    start = text.find(query)
    while start != -1:
        if start == 0 or not text[start - 1].isalnum():
            return True
        start = text.find(query, start + 1)
    return False


def score_entry(query: str, entry: IndexEntry) -> Optional[int]:
    """Score an entry against a lowercased, trimmed query.

    Args:
        query: Normalized query
        entry: Entry to score

    Returns:
        Relevance tier, or None if the entry doesn't match
    """
    title = (entry.title or "").lower()

    if title == query:
        return EXACT_TITLE
    if title.startswith(query):
        return TITLE_PREFIX
    if _starts_word(title, query):
        return TITLE_WORD
    if query in title:
        return TITLE_SUBSTRING
    if query in (entry.description or "").lower():
        return DESCRIPTION_MATCH
    if query in (entry.id or "").lower() or query in (entry.path or "").lower():
        return LOCATION_MATCH

    return None


def group_by_module(entries: List[IndexEntry]) -> List[Tuple[str, List[IndexEntry]]]:
    """Group entries by module, preserving their order within each group.

    Args:
        entries: Ranked entries

    Returns:
        (module, entries) pairs, preferred modules first, then the rest in
        first-encountered order
    """
    groups: Dict[str, List[IndexEntry]] = {}
    for entry in entries:
        groups.setdefault(entry.module, []).append(entry)

    ordered = [module for module in PREFERRED_MODULE_ORDER if module in groups]
    ordered += [module for module in groups if module not in PREFERRED_MODULE_ORDER]

    return [(module, groups[module]) for module in ordered]


def match(query: str, entries: List[IndexEntry], limit: Optional[int] = None) -> List[IndexEntry]:
    """Find entries matching a query.

    Matching is a case-insensitive substring test against title,
    description, id and path. Results are ranked by relevance tier (ties
    keep index order) and then regrouped so each module is contiguous.

    Args:
        query: Raw query text
        entries: Index snapshot
        limit: Maximum number of results, None for no cap

    Returns:
        Ordered matching entries
    """
    normalized = (query or "").strip().lower()
    if not normalized or not entries:
        return []

    scored = []
    for position, entry in enumerate(entries):
        score = score_entry(normalized, entry)
        if score is not None:
            scored.append((score, position, entry))

    scored.sort(key=lambda x: (x[0], x[1]))
    ranked = [entry for _, _, entry in scored]

    results = [entry for _, group in group_by_module(ranked) for entry in group]
    if limit is not None:
        results = results[:limit]

    return results


class SubstringSearchEngine:
    """Substring search engine with tiered ranking and module grouping."""

    def search(self, query: str, entries: List[IndexEntry], limit: Optional[int] = None) -> List[IndexEntry]:
        """Search entries using case-insensitive substring matching.

        Args:
            query: Search query string
            entries: Index entries to search
            limit: Maximum number of results to return, None for all

        Returns:
            Matching entries, ranked and grouped by module
        """
        return match(query, entries, limit)

"""Search index for the documentation content.

The index is a flat, read-only list of entries derived once from the docs
content file. Controllers never hold on to a snapshot: they call
``get_index()`` on every search so a reload is picked up immediately.

Content file layout::

    {
      "sections": [{"id", "badge", "title", "description",
                    "methods": [{"name", "description"}],
                    "table": [{"option", "description"}]}],
      "sidebar":  [{"title", "links": [{"id", "label"}]}],
      "pages":    [{"id", "title", "description", "path", "category"}]
    }
"""
import json
import re
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional


DOCS_PATH = "/docs"

# Display labels for entry categories
CATEGORY_LABELS = {
    "api": "API",
    "config": "Config",
    "tool": "Tool",
    "event": "Event",
    "page": "Page",
}


def _text(value: Any) -> str:
    """Coerce a loosely-typed field to a string, treating None as empty."""
    if value is None:
        return ""
    return str(value)


@dataclass(frozen=True)
class IndexEntry:
    """A single searchable item."""
    id: str
    title: str
    description: str = ""
    category: str = ""
    module: str = ""
    path: str = ""
    hash: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "IndexEntry":
        """Build an entry from a mapping, tolerating missing fields."""
        return cls(
            id=_text(data.get("id")),
            title=_text(data.get("title")),
            description=_text(data.get("description")),
            category=_text(data.get("category")),
            module=_text(data.get("module")),
            path=_text(data.get("path")),
            hash=data.get("hash") or None,
        )

    @property
    def url(self) -> str:
        """Navigation target including the in-page anchor, if any."""
        if self.hash:
            return f"{self.path}#{self.hash}"
        return self.path

    @property
    def category_label(self) -> str:
        return CATEGORY_LABELS.get(self.category, self.category)


def load_content_file(content_path: Path) -> Dict[str, Any]:
    """Load the docs content JSON file.

    Args:
        content_path: Path to the content file

    Returns:
        Parsed JSON content

    Raises:
        FileNotFoundError: If the content file doesn't exist
        json.JSONDecodeError: If the content file is malformed
    """
    if not content_path.exists():
        raise FileNotFoundError(f"Docs content file not found at {content_path}")

    with open(content_path, "r", encoding="utf-8") as f:
        return json.load(f)


def _method_title(name: str) -> str:
    """Strip the call signature: 'blocks.move(toIndex)' -> 'blocks.move'."""
    return name.split("(", 1)[0].strip()


def _slug(text: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", text.lower()).strip("-")


def _section_modules(sidebar: List[Dict[str, Any]]) -> Dict[str, str]:
    """Map each linked section id to the title of its sidebar group."""
    modules = {}
    for group in sidebar:
        if not isinstance(group, dict):
            continue
        for link in group.get("links") or []:
            if isinstance(link, dict) and link.get("id"):
                modules.setdefault(link["id"], _text(group.get("title")))
    return modules


def build_index(content: Dict[str, Any]) -> List[IndexEntry]:
    """Build search entries from docs content.

    Each API section yields one entry for itself, one per method and one per
    option table row. The module of a section is the sidebar group linking to
    it, falling back to its badge. Standalone pages land in the "Page" module.

    Args:
        content: Parsed docs content

    Returns:
        List of entries with unique ids, in content order
    """
    modules = _section_modules(content.get("sidebar") or [])
    entries: List[IndexEntry] = []
    seen = set()

    def add(entry: IndexEntry) -> None:
        if entry.id in seen:
            return
        seen.add(entry.id)
        entries.append(entry)

    for section in content.get("sections") or []:
        if not isinstance(section, dict) or not section.get("id"):
            print(f"[SearchIndex] Skipping malformed section: {section!r}", file=sys.stderr)
            continue

        section_id = _text(section["id"])
        module = modules.get(section_id) or _text(section.get("badge")) or "Core"
        methods = section.get("methods") or []
        table = section.get("table") or []
        category = "config" if table and not methods else "api"

        add(IndexEntry(
            id=section_id,
            title=_text(section.get("title")),
            description=_text(section.get("description")),
            category=category,
            module=module,
            path=DOCS_PATH,
            hash=section_id,
        ))

        method_category = "event" if _text(section.get("badge")).lower() == "events" else "api"
        for method in methods:
            if not isinstance(method, dict) or not method.get("name"):
                continue
            title = _method_title(_text(method["name"]))
            anchor = f"{section_id}-{_slug(title)}"
            add(IndexEntry(
                id=anchor,
                title=title,
                description=_text(method.get("description")),
                category=method_category,
                module=module,
                path=DOCS_PATH,
                hash=anchor,
            ))

        for row in table:
            if not isinstance(row, dict) or not row.get("option"):
                continue
            option = _text(row["option"])
            anchor = f"{section_id}-{_slug(option)}"
            add(IndexEntry(
                id=anchor,
                title=option,
                description=_text(row.get("description")),
                category="config",
                module=module,
                path=DOCS_PATH,
                hash=anchor,
            ))

    for page in content.get("pages") or []:
        if not isinstance(page, dict) or not page.get("id"):
            print(f"[SearchIndex] Skipping malformed page: {page!r}", file=sys.stderr)
            continue
        add(IndexEntry(
            id=_text(page["id"]),
            title=_text(page.get("title")),
            description=_text(page.get("description")),
            category=_text(page.get("category")) or "page",
            module="Page",
            path=_text(page.get("path")) or f"/{page['id']}",
            hash=page.get("hash") or None,
        ))

    return entries


def entries_from_records(records: List[Any]) -> List[IndexEntry]:
    """Convert raw index records, skipping anything that isn't a mapping."""
    entries = []
    for record in records:
        if isinstance(record, IndexEntry):
            entries.append(record)
        elif isinstance(record, dict):
            entries.append(IndexEntry.from_dict(record))
        else:
            print(f"[SearchIndex] Skipping malformed record: {record!r}", file=sys.stderr)
    return entries


class SearchIndex:
    """Holds the current index snapshot.

    Starts empty; ``get_index()`` is safe to call before anything is loaded.
    """

    def __init__(self, entries: Optional[List[IndexEntry]] = None):
        self._entries: List[IndexEntry] = list(entries or [])
        self._content: Dict[str, Any] = {}

    @classmethod
    def from_file(cls, content_path: Path) -> "SearchIndex":
        """Create an index loaded from a content file.

        Raises:
            FileNotFoundError: If the content file doesn't exist
            json.JSONDecodeError: If the content file is malformed
        """
        index = cls()
        index.load(content_path)
        return index

    def load(self, content_path: Path) -> None:
        """Replace the snapshot with entries built from a content file."""
        content = load_content_file(content_path)
        self._content = content
        self._entries = build_index(content)

    def set_entries(self, records: List[Any]) -> None:
        """Replace the snapshot with prebuilt entries or raw records."""
        self._entries = entries_from_records(records)

    @property
    def content(self) -> Dict[str, Any]:
        """Raw content the index was built from (empty if none)."""
        return self._content

    def get_index(self) -> List[IndexEntry]:
        """Return the current entries."""
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

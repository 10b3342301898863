"""Shared fixtures for tests."""
import json
import pytest

from docsearch.index import IndexEntry
from docsearch.sidebar import SidebarLink, SidebarSection


SAMPLE_CONTENT = {
    "sections": [
        {
            "id": "quick-start",
            "badge": "Guide",
            "title": "Quick Start",
            "description": "Get up and running with Blok in just a few simple steps."
        },
        {
            "id": "config",
            "title": "Configuration",
            "description": "The configuration object passed to the Blok constructor.",
            "table": [
                {"option": "holder", "description": "Container element ID or reference"},
                {"option": "readOnly", "description": "Enable read-only mode"}
            ]
        },
        {
            "id": "blocks-api",
            "badge": "Blocks",
            "title": "Blocks API",
            "description": "Manage blocks in the editor.",
            "methods": [
                {"name": "blocks.move(toIndex, fromIndex?)", "description": "Moves a block to a new position."},
                {"name": "blocks.delete(index?)", "description": "Remove the block at the specified index."}
            ]
        },
        {
            "id": "events-api",
            "badge": "Events",
            "title": "Events API",
            "description": "Subscribe to editor lifecycle events.",
            "methods": [
                {"name": "on(event, callback)", "description": "Subscribe to an editor event."}
            ]
        },
        {
            "id": "output-data",
            "badge": "Data",
            "title": "OutputData",
            "description": "The data structure returned by the save() method."
        }
    ],
    "sidebar": [
        {"title": "Guide", "links": [{"id": "quick-start", "label": "Quick Start"}]},
        {"title": "Core", "links": [{"id": "config", "label": "Configuration"}]},
        {
            "title": "API Modules",
            "links": [
                {"id": "blocks-api", "label": "Blocks"},
                {"id": "events-api", "label": "Events"}
            ]
        }
    ],
    "pages": [
        {"id": "recipes", "title": "Recipes", "description": "Practical examples.", "path": "/recipes"}
    ]
}


class FakeHandle:
    def __init__(self, scheduler, when, callback):
        self._scheduler = scheduler
        self.when = when
        self.callback = callback
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


class FakeScheduler:
    """Deterministic stand-in for the asyncio loop's call_later/time."""

    def __init__(self):
        self.now = 0.0
        self.handles = []

    def time(self):
        return self.now

    def call_later(self, delay, callback):
        handle = FakeHandle(self, self.now + delay, callback)
        self.handles.append(handle)
        return handle

    @property
    def pending(self):
        return [h for h in self.handles if not h.cancelled]

    def advance(self, ms):
        """Move the clock forward, firing due callbacks in order."""
        target = self.now + ms / 1000.0
        while True:
            due = [h for h in self.pending if h.when <= target + 1e-9]
            if not due:
                break
            handle = min(due, key=lambda h: h.when)
            self.handles.remove(handle)
            self.now = max(self.now, handle.when)
            handle.callback()
        self.now = target


class FakePage:
    """Host page recording focus and body scroll changes."""

    def __init__(self, results_container=None):
        self.results_container = results_container
        self.overflow = "auto"
        self.focus_count = 0

    def focus_search_input(self):
        self.focus_count += 1

    def get_body_overflow(self):
        return self.overflow

    def set_body_overflow(self, value):
        self.overflow = value


@pytest.fixture
def scheduler():
    return FakeScheduler()


@pytest.fixture
def page():
    return FakePage()


@pytest.fixture
def sample_content():
    return json.loads(json.dumps(SAMPLE_CONTENT))


@pytest.fixture
def sample_content_path(tmp_path):
    """Create a temporary docs content file with sample data."""
    content_file = tmp_path / "content.json"
    content_file.write_text(json.dumps(SAMPLE_CONTENT, indent=2))
    return content_file


@pytest.fixture
def sample_entries():
    """Return a small hand-built index."""
    return [
        IndexEntry(id="blocks-move", title="blocks.move", description="Moves a block to a new position.",
                   category="api", module="API Modules", path="/docs", hash="blocks-move"),
        IndexEntry(id="config", title="Configuration", description="The configuration object.",
                   category="config", module="Core", path="/docs", hash="config"),
        IndexEntry(id="quick-start", title="Quick Start", description="Get up and running.",
                   category="api", module="Guide", path="/docs", hash="quick-start"),
        IndexEntry(id="caret-api", title="Caret API", description="Control cursor position.",
                   category="api", module="API Modules", path="/docs", hash="caret-api"),
        IndexEntry(id="toolbar-api", title="Toolbar", description="Control the block toolbar.",
                   category="api", module="API Modules", path="/docs", hash="toolbar-api"),
    ]


@pytest.fixture
def sidebar_sections():
    return [
        SidebarSection("Guide", [SidebarLink("quick-start", "Quick Start")]),
        SidebarSection("Core", [
            SidebarLink("core", "Blok Class"),
            SidebarLink("config", "Configuration"),
        ]),
        SidebarSection("API Modules", [
            SidebarLink("blocks-api", "Blocks"),
            SidebarLink("caret-api", "Caret"),
            SidebarLink("events-api", "Events"),
        ]),
    ]


@pytest.fixture
def make_page():
    return FakePage

"""Tests for search module."""
import pytest

from docsearch.index import IndexEntry, build_index
from docsearch.search import (
    PREFERRED_MODULE_ORDER,
    SubstringSearchEngine,
    group_by_module,
    match,
    score_entry,
)


def entry(id, title, module="Core", description="", path="/docs"):
    return IndexEntry(id=id, title=title, description=description, category="api", module=module, path=path)


@pytest.fixture
def engine():
    return SubstringSearchEngine()


def assert_modules_contiguous(results):
    seen = []
    for result in results:
        if not seen or seen[-1] != result.module:
            assert result.module not in seen, f"{result.module} appears in two runs"
            seen.append(result.module)


class TestBasicSearch:
    def test_finds_by_title(self, engine, sample_entries):
        results = engine.search("caret", sample_entries)
        assert [r.title for r in results] == ["Caret API"]

    def test_finds_by_description(self, engine, sample_entries):
        results = engine.search("cursor", sample_entries)
        assert [r.id for r in results] == ["caret-api"]

    def test_finds_by_id(self, engine, sample_entries):
        results = engine.search("toolbar-api", sample_entries)
        assert [r.id for r in results] == ["toolbar-api"]

    def test_case_insensitive(self, engine, sample_entries):
        assert engine.search("CARET", sample_entries) == engine.search("caret", sample_entries)

    def test_empty_query_returns_empty(self, engine, sample_entries):
        assert engine.search("", sample_entries) == []

    def test_whitespace_query_returns_empty(self, engine, sample_entries):
        assert engine.search("   ", sample_entries) == []

    def test_query_is_trimmed(self, engine, sample_entries):
        assert [r.id for r in engine.search("  caret ", sample_entries)] == ["caret-api"]

    def test_no_match_returns_empty(self, engine, sample_entries):
        assert engine.search("xyznonexistent", sample_entries) == []

    def test_empty_index_returns_empty(self, engine):
        assert engine.search("caret", []) == []

    def test_respects_limit(self, engine, sample_entries):
        results = engine.search("o", sample_entries, limit=2)
        assert len(results) == 2

    def test_no_limit_returns_all(self, engine, sample_entries):
        assert len(engine.search("o", sample_entries)) == 5

    def test_entries_missing_description(self, engine):
        entries = [IndexEntry.from_dict({"id": "a", "title": "Alpha", "module": "Core"})]
        assert [r.id for r in engine.search("alp", entries)] == ["a"]
        assert engine.search("zzz", entries) == []


class TestRanking:
    @pytest.fixture
    def ranked_entries(self):
        return [
            entry("other", "Persist", description="How to save content"),
            entry("autosaver", "autosaver"),
            entry("block-save", "block.save"),
            entry("save-x", "Unrelated"),
            entry("saver-save", "saver.save"),
            entry("save", "save"),
        ]

    def test_relevance_order(self, ranked_entries):
        results = match("save", ranked_entries)
        assert [r.id for r in results] == [
            "save",        # exact title
            "saver-save",  # title prefix
            "block-save",  # title word
            "autosaver",   # title substring
            "other",       # description
            "save-x",      # id
        ]

    def test_ties_keep_index_order(self):
        entries = [entry("b", "Blocks two"), entry("a", "Blocks one")]
        assert [r.id for r in match("blocks", entries)] == ["b", "a"]

    def test_score_tiers(self):
        assert score_entry("caret", entry("x", "Caret")) == 0
        assert score_entry("caret", entry("x", "Caret API")) == 1
        assert score_entry("api", entry("x", "Caret API")) == 2
        assert score_entry("ret", entry("x", "Caret API")) == 3
        assert score_entry("nope", entry("x", "Caret API")) is None

    def test_deterministic(self, sample_entries):
        first = match("o", sample_entries)
        for _ in range(5):
            assert match("o", sample_entries) == first


class TestModuleGrouping:
    def test_preferred_order_scenario(self):
        entries = [
            entry("blocks-move", "blocks.move", module="API Modules"),
            entry("config", "Configuration", module="Core"),
            entry("quick-start", "Quick Start", module="Guide"),
        ]
        results = match("o", entries)
        assert [(r.title, r.module) for r in results] == [
            ("Quick Start", "Guide"),
            ("Configuration", "Core"),
            ("blocks.move", "API Modules"),
        ]

    def test_grouping_beats_relevance(self):
        entries = [
            entry("exact", "Toolbar", module="API Modules"),
            entry("weak", "Guide", module="Guide", description="toolbar basics"),
        ]
        results = match("toolbar", entries)
        assert [r.id for r in results] == ["weak", "exact"]

    def test_relevance_kept_within_group(self):
        entries = [
            entry("sub", "The toolbar", module="API Modules"),
            entry("prefix", "Toolbar API", module="API Modules"),
        ]
        assert [r.id for r in match("toolbar", entries)] == ["prefix", "sub"]

    def test_unknown_modules_follow_in_first_seen_order(self):
        entries = [
            entry("z", "Widget zeta", module="Zeta"),
            entry("a", "Widget alpha", module="Alpha"),
            entry("p", "Widget page", module="Page"),
            entry("z2", "Widget", module="Zeta"),
        ]
        results = match("widget", entries)
        # z2 is an exact title so Zeta is encountered first
        assert [r.module for r in results] == ["Page", "Zeta", "Zeta", "Alpha"]
        assert [r.id for r in results] == ["p", "z2", "z", "a"]

    def test_limit_applies_after_grouping(self):
        entries = [
            entry("api", "Blocks", module="API Modules"),
            entry("guide", "Blocks guide", module="Guide"),
        ]
        assert [r.id for r in match("blocks", entries, limit=1)] == ["guide"]

    @pytest.mark.parametrize("query", ["o", "a", "block", "save", "e", "data", "api"])
    def test_modules_contiguous(self, sample_content, query):
        index = build_index(sample_content)
        assert_modules_contiguous(match(query, index))

    def test_group_by_module(self, sample_entries):
        groups = group_by_module(sample_entries)
        assert [module for module, _ in groups] == ["Guide", "Core", "API Modules"]
        assert [e.id for e in groups[2][1]] == ["blocks-move", "caret-api", "toolbar-api"]

    def test_preferred_order_constant(self):
        assert PREFERRED_MODULE_ORDER == ["Guide", "Core", "API Modules", "Data", "Page"]

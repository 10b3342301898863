"""MCP server exposing the docs search index as tools."""
import json
import sys
from pathlib import Path
from typing import Any, List, Optional

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import Tool, TextContent

from docsearch.config import get_config
from docsearch.highlight import render_marked
from docsearch.index import SearchIndex
from docsearch.search import SearchEngine, SubstringSearchEngine, group_by_module
from docsearch.sidebar import filter_sections, sections_from_config


SERVER_NAME = "docs-search-mcp"

# Global state
_index: Optional[SearchIndex] = None
_search_engine: SearchEngine = SubstringSearchEngine()


def load_index(content_path: Optional[Path] = None) -> SearchIndex:
    """Load the docs index, using the cached one if available.

    A missing or malformed content file leaves an empty index so the tools
    still answer.

    Args:
        content_path: Optional path to the docs content file

    Returns:
        The search index
    """
    global _index

    if _index is None:
        path = content_path or get_config().resolved_content_path()
        try:
            _index = SearchIndex.from_file(path)
            print(f"[Server] Loaded {len(_index)} index entries from {path}", file=sys.stderr)
        except FileNotFoundError as e:
            print(f"[Server] Warning: Could not find docs content: {e}", file=sys.stderr)
            _index = SearchIndex()
        except json.JSONDecodeError as e:
            print(f"[Server] Error parsing docs content {path}: {e}", file=sys.stderr)
            _index = SearchIndex()

    return _index


def reset_index() -> None:
    """Forget the cached index so the next call reloads it."""
    global _index
    _index = None


def _json_content(data: Any) -> List[TextContent]:
    return [TextContent(type="text", text=json.dumps(data, indent=2))]


async def health_check_tool() -> List[TextContent]:
    index = load_index()
    return _json_content({
        "status": "ok",
        "entries": len(index),
        "sidebar_sections": len(index.content.get("sidebar") or []),
    })


def _coerce_limit(limit: Any) -> int:
    """Return a positive result cap, falling back to the overlay default."""
    try:
        value = int(limit)
    except (TypeError, ValueError):
        return get_config().overlay.max_results
    if value <= 0:
        return get_config().overlay.max_results
    return value


async def search_docs_tool(query: str, limit: Optional[int] = None) -> List[TextContent]:
    """Tool handler for search_docs.

    Args:
        query: Search query string
        limit: Maximum number of results (defaults to the overlay cap)

    Returns:
        List of TextContent with results grouped by module
    """
    index = load_index()
    entries = index.get_index()

    if not entries:
        return [TextContent(
            type="text",
            text="No docs index available. Please check the docs content file."
        )]

    results = _search_engine.search(query, entries, _coerce_limit(limit))

    if not results:
        return [TextContent(
            type="text",
            text=f"No results found for query: {query}"
        )]

    groups = []
    for module, members in group_by_module(results):
        groups.append({
            "module": module,
            "results": [
                {
                    "id": entry.id,
                    "title": entry.title,
                    "title_marked": render_marked(entry.title, query),
                    "description": entry.description,
                    "category": entry.category,
                    "category_label": entry.category_label,
                    "url": entry.url,
                }
                for entry in members
            ],
        })

    return _json_content({"count": len(results), "groups": groups})


async def filter_sidebar_tool(query: str) -> List[TextContent]:
    """Tool handler for filter_sidebar."""
    sections = sections_from_config(load_index().content.get("sidebar") or [])
    filtered = filter_sections(sections, query)

    if not filtered:
        return [TextContent(type="text", text="No results")]

    return _json_content([
        {
            "title": section.title,
            "links": [{"id": link.id, "label": link.label, "href": f"#{link.id}"} for link in section.links],
        }
        for section in filtered
    ])


async def list_sections_tool() -> List[TextContent]:
    sections = sections_from_config(load_index().content.get("sidebar") or [])
    return _json_content([
        {"title": section.title, "links": [link.id for link in section.links]}
        for section in sections
    ])


def create_server() -> Server:
    """Create and configure the MCP server.

    Returns:
        Configured Server instance
    """
    server = Server(SERVER_NAME)

    @server.list_tools()
    async def list_tools() -> list[Tool]:
        """List available tools."""
        return [
            Tool(
                name="health_check",
                description="Report whether the docs index is loaded and how many entries it holds.",
                inputSchema={"type": "object", "properties": {}},
            ),
            Tool(
                name="search_docs",
                description="Search the Blok documentation: API methods, configuration options, tools and guides. Results are grouped by module (Guide, Core, API Modules, Data, Page) with matches marked in titles.",
                inputSchema={
                    "type": "object",
                    "properties": {
                        "query": {
                            "type": "string",
                            "description": "Search query, matched case-insensitively against titles, descriptions and ids"
                        },
                        "limit": {
                            "type": "integer",
                            "description": "Maximum number of results (default 10)"
                        }
                    },
                    "required": ["query"]
                }
            ),
            Tool(
                name="filter_sidebar",
                description="Filter the documentation navigation sidebar. An empty query returns every section.",
                inputSchema={
                    "type": "object",
                    "properties": {
                        "query": {
                            "type": "string",
                            "description": "Text matched against link labels and ids"
                        }
                    },
                    "required": ["query"]
                }
            ),
            Tool(
                name="list_sections",
                description="List the documentation sidebar sections and their link ids.",
                inputSchema={"type": "object", "properties": {}},
            ),
        ]

    @server.call_tool()
    async def call_tool(name: str, arguments: Any) -> list[TextContent]:
        """Handle tool calls."""
        arguments = arguments or {}
        if name == "health_check":
            return await health_check_tool()
        elif name == "search_docs":
            query = arguments.get("query", "")
            if not query or not query.strip():
                return [TextContent(
                    type="text",
                    text="Error: 'query' parameter is required"
                )]
            return await search_docs_tool(query, arguments.get("limit"))
        elif name == "filter_sidebar":
            return await filter_sidebar_tool(arguments.get("query", ""))
        elif name == "list_sections":
            return await list_sections_tool()
        else:
            raise ValueError(f"Unknown tool: {name}")

    return server


async def main():
    """Main entry point for the MCP server."""
    server = create_server()

    async with stdio_server() as (read_stream, write_stream):
        initialization_options = server.create_initialization_options()
        await server.run(read_stream, write_stream, initialization_options)

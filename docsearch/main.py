"""Main entry point for the docs search MCP server."""
import asyncio

from docsearch.server import main


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()

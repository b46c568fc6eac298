"""contextcore MCP Server - exposes context extraction tools via Model Context Protocol.

Usage:
    contextcore-mcp
    contextcore-mcp --verbose

    # Or via Python:
    python -m contextcore_mcp.server
"""

import argparse
import json
import logging

from mcp.server import FastMCP

from contextcore import CATEGORY_NAMES, __version__
from contextcore.compiler import CATEGORY_BY_NAME, extract_context as _extract_context, get_compiler

logger = logging.getLogger("contextcore-mcp")

mcp = FastMCP(
    "contextcore",
    instructions=(
        "contextcore turns a user message into structured context: goals, facts, "
        "preferences, constraints, warnings, intents, tools, skills, jobs, "
        "experiences, events, identity claims and results. "
        "Call extract_context with the user's latest message to see what they "
        "want and what limits apply before answering. "
        "Use extract_category when only one kind of record matters."
    ),
)


@mcp.tool()
def extract_context(text: str, source: str = "text") -> str:
    """Extract every category of structured context from a message.

    Returns a JSON object with one array per category plus ``meta``.
    Each item carries a confidence between 0.05 and 0.98.

    Args:
        text: The message to analyze.
        source: Label recorded in meta.source (e.g. 'chat', 'email').
    """
    response = _extract_context(text, source=source)
    logger.debug("extract_context produced %d items", response.total)
    return json.dumps(response.to_dict(), indent=2)


@mcp.tool()
def extract_category(category: str, text: str) -> str:
    """Extract a single category of context from a message.

    Args:
        category: One of identity, goals, events, tools, skills, jobs,
            preferences, experiences, facts, results, intents,
            constraints, warnings.
        text: The message to analyze.
    """
    if category not in CATEGORY_BY_NAME:
        return json.dumps({
            "error": f"unknown category: {category}",
            "categories": list(CATEGORY_NAMES),
        }, indent=2)

    items = get_compiler().extract_category(category, text)
    return json.dumps({
        "category": category,
        "items": [item.to_dict() for item in items],
        "count": len(items),
    }, indent=2)


@mcp.tool()
def list_categories() -> str:
    """List the categories this server can extract, in output order."""
    return json.dumps({
        "categories": list(CATEGORY_NAMES),
        "parser_version": __version__,
    }, indent=2)


def main():
    """Entry point for the contextcore-mcp command."""
    parser = argparse.ArgumentParser(description="contextcore MCP Server")
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose logging",
    )
    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)
    else:
        logging.basicConfig(level=logging.WARNING)

    logger.info("contextcore MCP server %s started", __version__)

    # Run via stdio (standard for MCP)
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()

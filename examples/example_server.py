"""Example MCP server ranking an in-memory set of documents.

This example shows how to plug a custom document provider into the ranking
engine and expose it with the jump resources.
Run with: uv run python examples/example_server.py
"""

from fastmcp import FastMCP

from jump_mcp.ranking import (
    Document,
    RankingOrchestrator,
    RecencyCache,
    StaticDocumentProvider,
)
from jump_mcp.resources import register_resources
from jump_mcp.rules import RuleSet
from jump_mcp.tools import record_open, switch_documents

provider = StaticDocumentProvider(
    [
        Document("projects/alpha.md", "alpha", ("projects/beta.md",), {"status": "active"}),
        Document("projects/beta.md", "beta", ("reference/glossary.md",)),
        Document("reference/glossary.md", "glossary"),
        Document("daily/2026-10-17.md", "2026-10-17", ("projects/alpha.md",)),
    ]
)
recency = RecencyCache(4)
rules = RuleSet()
engine = RankingOrchestrator(provider, recency)

# Create MCP server
mcp = FastMCP("jump-mcp-example")

# Register resources
register_resources(mcp, recency, rules)


@mcp.tool()
def jump(query: str = "", current: str | None = None) -> list[dict]:
    """Suggest documents to jump to.

    Args:
        query: Text to match against document names
        current: Path of the document currently open

    Returns:
        Ranked suggestions
    """
    return switch_documents(engine, rules, query=query, current=current, limit=10)


@mcp.tool()
def visit(path: str) -> dict:
    """Record that a document was opened."""
    return record_open(engine, path)


if __name__ == "__main__":
    print("Starting jump-mcp example server...")
    print("\nAvailable resources:")
    print("  - jump://recent")
    print("  - jump://rules")
    print("\nAvailable tools:")
    print("  - jump")
    print("  - visit")
    print("\nPress Ctrl+C to stop")

    mcp.run()

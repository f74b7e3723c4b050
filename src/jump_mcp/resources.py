"""MCP Resources for jumpMCP.

Resources expose the switcher's state as read-only URIs.
"""

import json

from jump_mcp.ranking import RecencyCache
from jump_mcp.rules import RuleSet
from jump_mcp.tools import rule_to_dict


def get_recent_resource(recency: RecencyCache) -> str:
    """Recently opened documents, newest first, as JSON."""
    return json.dumps(
        {"capacity": recency.capacity, "recent": recency.list()},
        indent=2,
    )


def get_rules_resource(rules: RuleSet) -> str:
    """Configured rules and workspace assignments as JSON."""
    return json.dumps(
        {
            "rules": [rule_to_dict(rule) for rule in rules.rules],
            "workspaces": rules.workspaces,
        },
        indent=2,
    )


def register_resources(mcp, recency: RecencyCache, rules: RuleSet):
    """Register all resources with the FastMCP server.

    Args:
        mcp: FastMCP server instance
        recency: Recency cache shared with the tools
        rules: Configured search rules
    """

    @mcp.resource("jump://recent")
    def recent_documents():
        """Recently opened documents."""
        return get_recent_resource(recency)

    @mcp.resource("jump://rules")
    def search_rules():
        """Configured search rules."""
        return get_rules_resource(rules)

"""MCP tools for jumpMCP server.

This module defines the tools exposed by the MCP server:
- switch: Ranked "jump to document" suggestions for a query
- open_document: Record that a document was opened (feeds recent documents)
- related_documents: Outgoing links, backlinks and two-hop links of a document
- list_rules: Configured search rules
"""

import logging

from fastmcp import FastMCP

from jump_mcp.config import Config
from jump_mcp.ranking import LinkAnalyzer, LinkGraph, RankedResult, RankingOrchestrator
from jump_mcp.ranking.fuzzy import TextMatcher
from jump_mcp.ranking.models import RankingPolicy
from jump_mcp.ranking.orchestrator import is_empty_query
from jump_mcp.rules import RuleSet
from jump_mcp.vault import Vault

logger = logging.getLogger(__name__)


def result_to_dict(result: RankedResult, matcher: TextMatcher | None = None) -> dict:
    """Serialize a ranked result for tool output.

    With a matcher, "highlights" holds the [start, end) character ranges of
    the display name that matched the query; it is empty when browsing or
    when only tags or properties matched.
    """
    doc = result.document
    match = matcher(doc.name) if matcher is not None else None
    return {
        "path": doc.id,
        "name": doc.name,
        "folder": doc.folder,
        "group": result.group.value,
        "label": result.group.label,
        "priority": result.priority,
        "score": None if result.score is None else round(result.score, 4),
        "highlights": [list(span) for span in match.spans] if match else [],
    }


def rule_to_dict(rule: RankingPolicy) -> dict:
    """Serialize a rule for tool output."""
    return {
        "id": rule.id,
        "name": rule.name,
        "excluded_paths": list(rule.excluded_paths),
        "property_filters": [
            {"key": f.key, "operator": f.operator.value, "value": f.value}
            for f in rule.property_filters
        ],
        "groups": {
            name: {
                "enabled": group.enabled,
                "priority": group.priority,
                "bypass_filters": group.bypass_filters,
            }
            for name, group in (
                ("recent", rule.recent),
                ("outgoing", rule.outgoing),
                ("backlinks", rule.backlinks),
                ("two_hop", rule.two_hop),
            )
        },
        "extend_results": rule.extend_results,
        "filter_related_documents": rule.filter_related_documents,
        "fallback_to_all": rule.fallback_to_all,
        "search_in_tags": rule.search_in_tags,
        "search_in_properties": rule.search_in_properties,
    }


def switch_documents(
    engine: RankingOrchestrator,
    rules: RuleSet,
    query: str = "",
    rule: str | None = None,
    current: str | None = None,
    limit: int | None = None,
    workspace: str | None = None,
) -> list[dict]:
    """Rank documents for a query under the named rule.

    Without an explicit rule, the workspace's first configured rule is used,
    then the default rule.

    Raises:
        ValueError: If the rule doesn't exist
    """
    policy = None
    if rule is None and workspace is not None:
        policy = rules.rule_for_workspace(workspace)
    if policy is None:
        policy = rules.get(rule)
    if policy is None:
        raise ValueError(f"Unknown rule: {rule}")
    results = engine.rank(query, policy, current_id=current, limit=limit)
    matcher = None if is_empty_query(query) else engine.matcher_factory(query.strip())
    return [result_to_dict(r, matcher) for r in results]


def record_open(engine: RankingOrchestrator, path: str) -> dict:
    """Add a document to the recent documents, if it exists."""
    if engine.provider.get_document(path) is None:
        return {"path": path, "recorded": False, "error": "Document not found"}
    engine.recency.add(path)
    return {"path": path, "recorded": True, "recent": engine.recency.list()}


def describe_links(vault: Vault, path: str) -> dict:
    """Categorized link relationships of one document."""
    if vault.get_document(path) is None:
        return {"path": path, "exists": False, "error": "Document not found"}

    analyzer = LinkAnalyzer(LinkGraph(vault.link_graph()))
    links = analyzer.categorized_links(path)
    return {
        "path": path,
        "exists": True,
        "outgoing": sorted(links.outgoing),
        "backlinks": sorted(links.backlinks),
        "two_hop": sorted(links.two_hop),
    }


def register_tools(
    mcp: FastMCP,
    vault: Vault,
    engine: RankingOrchestrator,
    rules: RuleSet,
    config: Config,
) -> None:
    """Register all tools with the FastMCP server.

    Args:
        mcp: FastMCP server instance
        vault: Vault serving the documents
        engine: Ranking engine (shares the vault and the recency cache)
        rules: Configured search rules
        config: Configuration instance
    """

    @mcp.tool()
    def switch(
        query: str = "",
        rule: str | None = None,
        current: str | None = None,
        limit: int | None = None,
        workspace: str | None = None,
    ) -> list[dict]:
        """Suggest documents to jump to, most relevant first.

        With an empty query, lists documents grouped by relationship to the
        current document: recently opened, outgoing links, backlinks, two-hop
        links, then everything else. With a query, matches document names
        fuzzily within those groups. Matches outside the rule's filters are
        appended with the "all" label when the rule allows it.

        Args:
            query: Text to match against document names (empty to browse)
            rule: ID of the search rule to apply (default: first rule)
            current: Path of the document currently open, if any
            limit: Maximum number of suggestions (default: server setting)
            workspace: Workspace whose rule applies when no rule is given

        Returns:
            List of suggestions with:
            - path: Document path within the vault
            - name: Display name
            - folder: Containing folder
            - group: recent, outgoing, backlink, two-hop, other or extended
            - label: Short label to show (None for "other")
            - priority: Group priority (lower is shown first)
            - score: Match score, None when browsing
            - highlights: [start, end) ranges of the name that matched
        """
        vault.refresh()
        return switch_documents(
            engine,
            rules,
            query=query,
            rule=rule,
            current=current,
            limit=config.max_suggestions if limit is None else limit,
            workspace=workspace,
        )

    @mcp.tool()
    def open_document(path: str) -> dict:
        """Record that a document was opened, making it a recent document.

        Args:
            path: Document path within the vault (e.g., "projects/alpha.md")

        Returns:
            - path: The document path
            - recorded: Whether the visit was recorded
            - recent: Recent documents, newest first
            - error: Error message if the document was not found
        """
        vault.refresh()
        result = record_open(engine, path)
        if result["recorded"]:
            logger.debug("Recorded open of %s", path)
        return result

    @mcp.tool()
    def related_documents(path: str) -> dict:
        """List the documents linked to or from a document.

        Args:
            path: Document path within the vault

        Returns:
            - outgoing: Documents it links to
            - backlinks: Documents linking to it
            - two_hop: Documents one link further away
            - exists: Whether the document was found
        """
        vault.refresh()
        return describe_links(vault, path)

    @mcp.tool()
    def list_rules() -> list[dict]:
        """List the configured search rules."""
        return [rule_to_dict(r) for r in rules.rules]

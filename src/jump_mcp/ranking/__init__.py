"""
Ranking engine for jumpMCP.

Combines link relationships, recently opened documents, frontmatter property
filters and fuzzy name matching into the ordered result list of the switcher.
"""

from jump_mcp.ranking.filters import PropertyFilterEngine, passes, passes_all
from jump_mcp.ranking.fuzzy import prepare_fuzzy_search, score_document
from jump_mcp.ranking.links import LinkAnalyzer, LinkGraph
from jump_mcp.ranking.models import (
    CategorizedLinks,
    Document,
    DocumentProvider,
    FilterOperator,
    GroupPriority,
    PropertyFilter,
    RankedResult,
    RankingPolicy,
    ResultGroup,
    StaticDocumentProvider,
    TextMatch,
)
from jump_mcp.ranking.orchestrator import Branch, RankingOrchestrator, select_branch
from jump_mcp.ranking.paths import filter_excluded, is_excluded
from jump_mcp.ranking.recency import RecencyCache

__all__ = [
    "Branch",
    "CategorizedLinks",
    "Document",
    "DocumentProvider",
    "FilterOperator",
    "GroupPriority",
    "LinkAnalyzer",
    "LinkGraph",
    "PropertyFilter",
    "PropertyFilterEngine",
    "RankedResult",
    "RankingOrchestrator",
    "RankingPolicy",
    "RecencyCache",
    "ResultGroup",
    "StaticDocumentProvider",
    "TextMatch",
    "filter_excluded",
    "is_excluded",
    "passes",
    "passes_all",
    "prepare_fuzzy_search",
    "score_document",
    "select_branch",
]

"""
Result assembly for the document switcher.

Merges recency, link relationships, property filters and fuzzy match scores
into one ordered, labeled result list. Which merge rules apply depends on
whether the query is empty, whether the current document itself satisfies the
active rule, and whether a filtered search found anything; the combinations are
spelled out in DECISION_TABLE.
"""

import logging
from collections.abc import Callable, Iterable
from enum import Enum
from functools import cached_property

from jump_mcp.ranking.filters import PropertyFilterEngine
from jump_mcp.ranking.fuzzy import TextMatcher, prepare_fuzzy_search, score_document
from jump_mcp.ranking.links import LinkAnalyzer, LinkGraph
from jump_mcp.ranking.models import (
    OTHER_PRIORITY,
    CategorizedLinks,
    Document,
    DocumentProvider,
    LinkMap,
    RankedResult,
    RankingPolicy,
    ResultGroup,
)
from jump_mcp.ranking.paths import filter_excluded, is_excluded
from jump_mcp.ranking.recency import RecencyCache
from jump_mcp.ranking.sorting import (
    categorize_all,
    mark_extended,
    sort_by_priority,
    sort_by_priority_and_score,
    sort_by_score,
)

logger = logging.getLogger(__name__)


class Branch(str, Enum):
    """Pipeline branches of a ranking call."""

    EMPTY_QUERY = "empty-query"
    EMPTY_QUERY_OUTSIDE = "empty-query-outside-filter"
    SEARCH = "search"
    SEARCH_WITHOUT_MATCHES = "search-without-matches"
    SEARCH_OUTSIDE = "search-outside-filter"


# (query_empty, current_document_outside_filter, has_matches) -> branch.
# has_matches is only known, and only relevant, for searches inside the filter.
DECISION_TABLE: dict[tuple[bool, bool, bool | None], Branch] = {
    (True, False, None): Branch.EMPTY_QUERY,
    (True, True, None): Branch.EMPTY_QUERY_OUTSIDE,
    (False, False, True): Branch.SEARCH,
    (False, False, False): Branch.SEARCH_WITHOUT_MATCHES,
    (False, True, None): Branch.SEARCH_OUTSIDE,
}


def select_branch(
    query_empty: bool, outside_filter: bool, has_matches: bool | None = None
) -> Branch:
    """Look up the branch for a call; has_matches is ignored where irrelevant."""
    if query_empty or outside_filter:
        has_matches = None
    elif has_matches is None:
        raise ValueError("has_matches is required for searches inside the filter")
    return DECISION_TABLE[(query_empty, outside_filter, has_matches)]


def is_empty_query(query: str | None) -> bool:
    return not query or not query.strip()


class _RankingCall:
    """Per-call snapshot of documents, recency and link data."""

    def __init__(
        self,
        query: str,
        policy: RankingPolicy,
        documents: list[Document],
        current: Document | None,
        recent: list[str],
        link_map: LinkMap,
    ):
        self.query = query
        self.policy = policy
        self.documents = documents
        self.current = current
        self.recent = recent
        self._link_map = link_map
        self.matcher: TextMatcher | None = None
        self.filtered: list[Document] = []
        self.filtered_scores: dict[str, float] | None = None

        current_id = current.id if current else None
        self.all_documents = [d for d in documents if d.id != current_id]
        # Candidate pool: nothing outside it may be shown, except by fallback
        self.pool = filter_excluded(self.all_documents, policy.excluded_paths)

    @cached_property
    def links(self) -> CategorizedLinks:
        if self.current is None:
            return CategorizedLinks()
        analyzer = LinkAnalyzer(LinkGraph(self._link_map))
        return analyzer.categorized_links(self.current.id)


class RankingOrchestrator:
    """
    Ranks documents for the switcher.

    Each call to rank() reads fresh snapshots from the document provider and
    the recency cache; the orchestrator itself keeps no state between calls.
    """

    def __init__(
        self,
        provider: DocumentProvider,
        recency: RecencyCache,
        matcher_factory: Callable[[str], TextMatcher] = prepare_fuzzy_search,
        filter_engine: PropertyFilterEngine | None = None,
    ):
        """
        Initialize the orchestrator.

        Args:
            provider: Source of documents and the link graph
            recency: Shared recency cache, updated by "document opened" events
            matcher_factory: Builds a text matcher for a query
            filter_engine: Property filter evaluation (default engine if None)
        """
        self.provider = provider
        self.recency = recency
        self.matcher_factory = matcher_factory
        self.filters = filter_engine or PropertyFilterEngine()
        self._handlers: dict[Branch, Callable[[_RankingCall], list[RankedResult]]] = {
            Branch.EMPTY_QUERY: self._rank_empty_query,
            Branch.EMPTY_QUERY_OUTSIDE: self._rank_related,
            Branch.SEARCH: self._rank_search,
            Branch.SEARCH_WITHOUT_MATCHES: self._rank_search_without_matches,
            Branch.SEARCH_OUTSIDE: self._rank_search_outside,
        }

    def is_outside_filter(self, document: Document | None, policy: RankingPolicy) -> bool:
        """True if the document is excluded by path or fails the property filters."""
        if document is None:
            return False
        if is_excluded(document.id, policy.excluded_paths):
            return True
        return not self.filters.passes(document, policy.property_filters)

    def rank(
        self,
        query: str,
        policy: RankingPolicy,
        current_id: str | None = None,
        limit: int | None = None,
    ) -> list[RankedResult]:
        """
        Rank documents for a query under a policy.

        Args:
            query: Text typed by the user; empty or blank means browse mode
            policy: The active rule
            current_id: ID of the open document; unknown IDs count as none
            limit: Maximum number of results to return (at least 1)

        Returns:
            Ordered results. The current document is never included.

        Raises:
            ValueError: If limit is less than 1
        """
        if limit is not None and limit < 1:
            raise ValueError(f"limit must be >= 1, got {limit}")

        documents = self.provider.list_documents()
        by_id = {doc.id: doc for doc in documents}
        current = by_id.get(current_id) if current_id else None
        if current_id and current is None:
            logger.debug("Current document %s not found, ranking without it", current_id)

        call = _RankingCall(
            query=query or "",
            policy=policy,
            documents=documents,
            current=current,
            recent=self.recency.list(),
            link_map=self.provider.link_graph(),
        )

        query_empty = is_empty_query(query)
        outside = self.is_outside_filter(current, policy)
        has_matches = None
        if not query_empty:
            call.matcher = self.matcher_factory(query.strip())
            if not outside:
                has_matches = bool(self._filtered_scores(call))

        branch = select_branch(query_empty, outside, has_matches)
        logger.debug(
            "Ranking %r with rule %s: %d documents, %d candidates, branch=%s",
            query,
            policy.id,
            len(documents),
            len(call.pool),
            branch.value,
        )

        results = self._handlers[branch](call)
        if limit is not None:
            results = results[:limit]
        return results

    # Branches

    def _rank_empty_query(self, call: _RankingCall) -> list[RankedResult]:
        """Browse the filtered pool, with recent documents optionally bypassing filters."""
        policy = call.policy
        shown = self.filters.filter_documents(call.pool, policy.property_filters)

        if policy.recent.enabled and policy.recent.bypass_filters:
            shown_ids = {doc.id for doc in shown}
            recent_ids = set(call.recent)
            extra = [d for d in call.pool if d.id in recent_ids and d.id not in shown_ids]
            if extra:
                logger.debug("Added %d recent documents ignoring filters", len(extra))
            shown.extend(extra)

        return sort_by_priority(self._categorize(call, shown))

    def _rank_related(self, call: _RankingCall) -> list[RankedResult]:
        """Browse documents related to a current document that fails the rule."""
        links = call.links
        related_ids = set(call.recent) | links.outgoing | links.backlinks | links.two_hop
        related = [doc for doc in call.pool if doc.id in related_ids]

        if call.policy.filter_related_documents:
            related = self.filters.filter_documents(related, call.policy.property_filters)

        return sort_by_priority(self._categorize(call, related))

    def _rank_search(self, call: _RankingCall) -> list[RankedResult]:
        """Search the filtered pool, then optionally append matches outside it."""
        scores = self._filtered_scores(call)
        matched = [doc for doc in call.filtered if doc.id in scores]
        results = sort_by_priority_and_score(self._categorize(call, matched, scores))

        if call.policy.extend_results:
            filtered_ids = {doc.id for doc in call.filtered}
            outside = [doc for doc in call.pool if doc.id not in filtered_ids]
            results.extend(self._extended(call, outside))
        return results

    def _rank_search_without_matches(self, call: _RankingCall) -> list[RankedResult]:
        if not call.policy.fallback_to_all:
            return self._rank_search(call)

        logger.info(
            "No matches for %r under rule %s, searching all documents",
            call.query,
            call.policy.id,
        )
        return self._extended(call, call.all_documents)

    def _rank_search_outside(self, call: _RankingCall) -> list[RankedResult]:
        """Search while the current document fails the rule: no link categories."""
        if not call.policy.extend_results:
            return []
        return self._extended(call, call.pool)

    # Helpers

    def _categorize(
        self,
        call: _RankingCall,
        documents: Iterable[Document],
        scores: dict[str, float] | None = None,
    ) -> list[RankedResult]:
        if call.current is None:
            # Without a current document there is no context to rank by
            scores = scores or {}
            return [
                RankedResult(doc, ResultGroup.OTHER, OTHER_PRIORITY, scores.get(doc.id))
                for doc in documents
            ]
        return categorize_all(documents, call.recent, call.links, call.policy, scores)

    def _score(self, call: _RankingCall, documents: Iterable[Document]) -> dict[str, float]:
        policy = call.policy
        scores: dict[str, float] = {}
        for doc in documents:
            score = score_document(
                call.matcher,
                doc,
                search_in_tags=policy.search_in_tags,
                search_in_properties=policy.search_in_properties,
            )
            if score is not None:
                scores[doc.id] = score
        return scores

    def _filtered_scores(self, call: _RankingCall) -> dict[str, float]:
        """Scores of matching documents inside the filter, computed once per call."""
        if call.filtered_scores is None:
            call.filtered = self.filters.filter_documents(
                call.pool, call.policy.property_filters
            )
            call.filtered_scores = self._score(call, call.filtered)
            logger.debug(
                "Matched %d of %d filtered documents",
                len(call.filtered_scores),
                len(call.filtered),
            )
        return call.filtered_scores

    def _extended(self, call: _RankingCall, documents: list[Document]) -> list[RankedResult]:
        scores = self._score(call, documents)
        matched = [doc for doc in documents if doc.id in scores]
        return sort_by_score(mark_extended(matched, scores))

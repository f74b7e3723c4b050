"""Shared categorization and ordering of ranked results."""

from collections import Counter
from collections.abc import Collection, Iterable

from jump_mcp.ranking.models import (
    EXTENDED_PRIORITY,
    OTHER_PRIORITY,
    CategorizedLinks,
    Document,
    RankedResult,
    RankingPolicy,
    ResultGroup,
)


def categorize(
    document: Document,
    recent: Collection[str],
    links: CategorizedLinks,
    policy: RankingPolicy,
    score: float | None = None,
) -> RankedResult:
    """
    Place a document in the first matching enabled group.

    Precedence is recent, outgoing, backlink, two-hop; disabled groups are
    skipped and anything left over is "other".
    """
    checks = (
        (policy.recent, recent, ResultGroup.RECENT),
        (policy.outgoing, links.outgoing, ResultGroup.OUTGOING),
        (policy.backlinks, links.backlinks, ResultGroup.BACKLINK),
        (policy.two_hop, links.two_hop, ResultGroup.TWO_HOP),
    )
    for settings, members, group in checks:
        if settings.enabled and document.id in members:
            return RankedResult(document, group, settings.priority, score)
    return RankedResult(document, ResultGroup.OTHER, OTHER_PRIORITY, score)


def categorize_all(
    documents: Iterable[Document],
    recent: Collection[str],
    links: CategorizedLinks,
    policy: RankingPolicy,
    scores: dict[str, float] | None = None,
) -> list[RankedResult]:
    """Categorize every document, attaching its score when one is known."""
    scores = scores or {}
    return [
        categorize(doc, recent, links, policy, scores.get(doc.id)) for doc in documents
    ]


def mark_extended(
    documents: Iterable[Document], scores: dict[str, float]
) -> list[RankedResult]:
    """Label documents as matches outside the active filter."""
    return [
        RankedResult(doc, ResultGroup.EXTENDED, EXTENDED_PRIORITY, scores.get(doc.id))
        for doc in documents
    ]


def _name_key(result: RankedResult) -> tuple[str, str, str]:
    name = result.document.name
    return (name.casefold(), name, result.document.id)


def sort_by_priority(results: Iterable[RankedResult]) -> list[RankedResult]:
    """Order by priority (lowest first), then alphabetically by name."""
    return sorted(results, key=lambda r: (r.priority, _name_key(r)))


def sort_by_priority_and_score(results: Iterable[RankedResult]) -> list[RankedResult]:
    """Order by priority (lowest first), then by match score (highest first)."""
    return sorted(
        results,
        key=lambda r: (r.priority, -(r.score or 0.0), _name_key(r)),
    )


def sort_by_score(results: Iterable[RankedResult]) -> list[RankedResult]:
    """Order by match score alone (highest first)."""
    return sorted(results, key=lambda r: (-(r.score or 0.0), _name_key(r)))


def count_by_group(results: Iterable[RankedResult]) -> dict[ResultGroup, int]:
    """Number of results in each group, including empty groups."""
    counts = Counter(r.group for r in results)
    return {group: counts.get(group, 0) for group in ResultGroup}


def documents_in_group(
    results: Iterable[RankedResult], group: ResultGroup
) -> list[Document]:
    """Documents of one group, in result order."""
    return [r.document for r in results if r.group is group]

"""Link graph analysis: outgoing links, backlinks and two-hop relations."""

import logging
from collections.abc import Iterable

from jump_mcp.ranking.models import CategorizedLinks, LinkMap

logger = logging.getLogger(__name__)


class LinkGraph:
    """
    Read-only adjacency view over documents' outgoing links.

    Duplicate edges and self-links are dropped when the graph is built, and a
    reverse index is kept so backlink lookups don't scan every edge.
    """

    def __init__(self, links: LinkMap | None = None):
        self._outgoing: dict[str, tuple[str, ...]] = {}
        self._incoming: dict[str, list[str]] = {}

        for source, targets in (links or {}).items():
            seen: dict[str, None] = {}
            for target in targets:
                if target != source:
                    seen.setdefault(target, None)
            self._outgoing[source] = tuple(seen)
            for target in seen:
                self._incoming.setdefault(target, []).append(source)

    @classmethod
    def from_edges(cls, edges: Iterable[tuple[str, str]]) -> "LinkGraph":
        """Build a graph from (source, target) pairs."""
        links: dict[str, list[str]] = {}
        for source, target in edges:
            links.setdefault(source, []).append(target)
        return cls(links)

    def __contains__(self, doc_id: object) -> bool:
        return doc_id in self._outgoing or doc_id in self._incoming

    def __len__(self) -> int:
        return len(self._outgoing)

    def outgoing(self, doc_id: str) -> tuple[str, ...]:
        """Distinct link targets of a document, in first-seen order."""
        return self._outgoing.get(doc_id, ())

    def incoming(self, doc_id: str) -> tuple[str, ...]:
        """Distinct documents linking to doc_id."""
        return tuple(self._incoming.get(doc_id, ()))


class LinkAnalyzer:
    """Computes link relationships of one document against a LinkGraph."""

    def __init__(self, graph: LinkGraph):
        self.graph = graph

    def outgoing(self, doc_id: str) -> list[str]:
        """Documents doc_id links to."""
        return list(self.graph.outgoing(doc_id))

    def backlinks(self, target: str) -> list[str]:
        """Documents that link directly to target."""
        return list(self.graph.incoming(target))

    def two_hop(self, target: str) -> list[str]:
        """
        Documents linked from target's backlinks.

        If A links to target and A also links to B, then B is a two-hop link
        of target. Target itself, the backlink A, and any other direct
        backlink of target are excluded, so backlinks and two-hop links never
        overlap.
        """
        backlinks = self.backlinks(target)
        backlink_set = set(backlinks)
        found: dict[str, None] = {}

        for backlink in backlinks:
            for linked in self.graph.outgoing(backlink):
                if linked == target or linked == backlink or linked in backlink_set:
                    continue
                found.setdefault(linked, None)

        return list(found)

    def is_backlink(self, doc_id: str, target: str) -> bool:
        """True if doc_id links to target."""
        return target in self.graph.outgoing(doc_id)

    def is_two_hop(self, doc_id: str, target: str) -> bool:
        """True if doc_id is a two-hop link of target."""
        return doc_id in self.two_hop(target)

    def categorized_links(self, target: str | None) -> CategorizedLinks:
        """
        Compute outgoing links, backlinks and two-hop links in one pass.

        Two-hop links come from three patterns:
        - outgoing -> outgoing: documents linked by documents you link to
        - backlink -> outgoing: documents linked by documents linking to you
        - outgoing -> backlink: documents linking to documents you link to

        A document linked in both directions counts as outgoing only.
        """
        if target is None:
            return CategorizedLinks()

        outgoing = set(self.graph.outgoing(target))
        backlinks = set(self.graph.incoming(target)) - outgoing
        direct = outgoing | backlinks
        two_hop: set[str] = set()

        def collect(candidates: Iterable[str]) -> None:
            for doc_id in candidates:
                if doc_id != target and doc_id not in direct:
                    two_hop.add(doc_id)

        for doc_id in outgoing:
            collect(self.graph.outgoing(doc_id))
            collect(self.graph.incoming(doc_id))
        for doc_id in backlinks:
            collect(self.graph.outgoing(doc_id))

        logger.debug(
            "Links of %s: %d outgoing, %d backlinks, %d two-hop",
            target,
            len(outgoing),
            len(backlinks),
            len(two_hop),
        )
        return CategorizedLinks(
            outgoing=frozenset(outgoing),
            backlinks=frozenset(backlinks),
            two_hop=frozenset(two_hop),
        )

"""Data models for the ranking engine."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol

# Frontmatter values: a scalar or a list of scalars.
Scalar = str | int | float | bool | None
MetadataValue = Scalar | list[Scalar]
Metadata = Mapping[str, MetadataValue]

# Document ID -> ordered outgoing link target IDs
LinkMap = Mapping[str, list[str] | tuple[str, ...]]

OTHER_PRIORITY = 999
EXTENDED_PRIORITY = 1000


class FilterOperator(str, Enum):
    """Operators supported by property filters."""

    EQUALS = "equals"
    NOT_EQUALS = "not-equals"
    CONTAINS = "contains"
    EXISTS = "exists"
    NOT_EXISTS = "not-exists"


class ResultGroup(str, Enum):
    """Category a ranked document was placed in."""

    RECENT = "recent"
    OUTGOING = "outgoing"
    BACKLINK = "backlink"
    TWO_HOP = "two-hop"
    OTHER = "other"
    EXTENDED = "extended"  # Matches outside the active filter

    @property
    def label(self) -> str | None:
        """Short label shown next to a result, None for unlabeled groups."""
        return GROUP_LABELS[self]


GROUP_LABELS: dict[ResultGroup, str | None] = {
    ResultGroup.RECENT: "recent",
    ResultGroup.OUTGOING: "out",
    ResultGroup.BACKLINK: "back",
    ResultGroup.TWO_HOP: "related",
    ResultGroup.OTHER: None,
    ResultGroup.EXTENDED: "all",
}


@dataclass(frozen=True)
class Document:
    """Snapshot of a note as seen by the ranking engine."""

    id: str  # Relative path, e.g. "projects/alpha.md"
    name: str  # Display name (basename without extension)
    links: tuple[str, ...] = ()  # Resolved outgoing link target IDs
    metadata: Metadata = field(default_factory=dict)
    tags: tuple[str, ...] = ()

    @property
    def folder(self) -> str:
        """Containing folder, "" for documents at the vault root."""
        head, _, _ = self.id.rpartition("/")
        return head


@dataclass(frozen=True)
class PropertyFilter:
    """A single key/operator/value predicate over frontmatter."""

    key: str
    operator: FilterOperator
    value: str = ""  # Unused by exists/not-exists

    def __post_init__(self) -> None:
        # Accept plain strings ("equals") and reject anything unknown
        object.__setattr__(self, "operator", FilterOperator(self.operator))


@dataclass(frozen=True)
class GroupPriority:
    """Ranking settings for one result group."""

    enabled: bool = True
    priority: int = 1  # Lower number is shown first
    bypass_filters: bool = False  # Only honored for recent documents


@dataclass(frozen=True)
class RankingPolicy:
    """Everything a single ranking call needs to know about the active rule."""

    id: str = "default"
    name: str = "Default"
    excluded_paths: tuple[str, ...] = ()
    property_filters: tuple[PropertyFilter, ...] = ()
    recent: GroupPriority = GroupPriority(enabled=True, priority=1, bypass_filters=True)
    outgoing: GroupPriority = GroupPriority(enabled=True, priority=2)
    backlinks: GroupPriority = GroupPriority(enabled=True, priority=3)
    two_hop: GroupPriority = GroupPriority(enabled=True, priority=4)
    extend_results: bool = True
    filter_related_documents: bool = False
    fallback_to_all: bool = False
    search_in_tags: bool = True
    search_in_properties: bool = False


@dataclass(frozen=True)
class CategorizedLinks:
    """Link relationships of one document, as pairwise-disjoint sets."""

    outgoing: frozenset[str] = frozenset()
    backlinks: frozenset[str] = frozenset()
    two_hop: frozenset[str] = frozenset()


@dataclass(frozen=True)
class TextMatch:
    """Result of matching a query against one piece of text."""

    score: float
    spans: tuple[tuple[int, int], ...] = ()


@dataclass(frozen=True)
class RankedResult:
    """A document placed in a group, with its priority and match score."""

    document: Document
    group: ResultGroup
    priority: int
    score: float | None = None  # None when ranking without a query


class DocumentProvider(Protocol):
    """Source of document snapshots, queried fresh on every ranking call."""

    def list_documents(self) -> list[Document]: ...

    def get_document(self, doc_id: str) -> Document | None: ...

    def link_graph(self) -> LinkMap: ...


class StaticDocumentProvider:
    """In-memory provider over a fixed list of documents."""

    def __init__(self, documents: list[Document] | None = None):
        self._documents: dict[str, Document] = {}
        for doc in documents or []:
            self._documents[doc.id] = doc

    def add(self, document: Document) -> None:
        """Add or replace a document."""
        self._documents[document.id] = document

    def remove(self, doc_id: str) -> None:
        self._documents.pop(doc_id, None)

    def list_documents(self) -> list[Document]:
        return list(self._documents.values())

    def get_document(self, doc_id: str) -> Document | None:
        return self._documents.get(doc_id)

    def link_graph(self) -> LinkMap:
        return {doc.id: list(doc.links) for doc in self._documents.values()}

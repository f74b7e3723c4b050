"""Property filters evaluated against document frontmatter."""

from collections.abc import Iterable, Sequence

from jump_mcp.ranking.models import (
    Document,
    FilterOperator,
    Metadata,
    MetadataValue,
    PropertyFilter,
    Scalar,
)

_MISSING = object()


def _to_text(value: Scalar) -> str:
    """Render a scalar the way it reads in frontmatter, lowercased."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).lower()


def compare_values(value: MetadataValue, needle: str, exact: bool) -> bool:
    """
    Compare a frontmatter value with a filter value, ignoring case.

    Lists match if any element matches. Null values never match.

    Args:
        value: The value from the frontmatter
        needle: The value from the filter
        exact: Whether to require equality instead of a substring match
    """
    if value is None:
        return False

    if isinstance(value, list):
        return any(compare_values(item, needle, exact) for item in value)

    text = _to_text(value)
    needle = needle.lower()
    if exact:
        return text == needle
    # An empty needle is contained in any non-empty value
    return bool(text) and needle in text


def passes(metadata: Metadata | None, prop_filter: PropertyFilter) -> bool:
    """Check a single filter against a document's frontmatter."""
    if metadata is None:
        # No frontmatter at all: only "not-exists" can pass
        return prop_filter.operator is FilterOperator.NOT_EXISTS

    value = metadata.get(prop_filter.key, _MISSING)
    operator = prop_filter.operator

    if operator is FilterOperator.EXISTS:
        return value is not _MISSING
    if operator is FilterOperator.NOT_EXISTS:
        return value is _MISSING
    if value is _MISSING:
        # Missing properties fail equals, contains AND not-equals.
        # Use not-exists to select documents without the property.
        return False
    if operator is FilterOperator.EQUALS:
        return compare_values(value, prop_filter.value, exact=True)
    if operator is FilterOperator.NOT_EQUALS:
        return not compare_values(value, prop_filter.value, exact=True)
    if operator is FilterOperator.CONTAINS:
        return compare_values(value, prop_filter.value, exact=False)
    return False


def passes_all(metadata: Metadata | None, filters: Sequence[PropertyFilter]) -> bool:
    """Check all filters (AND logic). An empty filter list always passes."""
    return all(passes(metadata, f) for f in filters)


class PropertyFilterEngine:
    """Applies property filters to documents."""

    def passes(self, document: Document, filters: Sequence[PropertyFilter]) -> bool:
        """Check whether a document passes every filter."""
        if not filters:
            return True
        return passes_all(document.metadata or None, filters)

    def filter_documents(
        self, documents: Iterable[Document], filters: Sequence[PropertyFilter]
    ) -> list[Document]:
        """Keep the documents that pass every filter."""
        if not filters:
            return list(documents)
        return [doc for doc in documents if self.passes(doc, filters)]

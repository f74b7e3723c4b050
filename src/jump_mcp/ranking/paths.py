"""Folder-prefix exclusion of documents."""

from collections.abc import Iterable, Sequence

from jump_mcp.ranking.models import Document

SEPARATOR = "/"


def normalize_prefix(prefix: str) -> str:
    """Ensure a folder prefix ends with a separator ("temp" -> "temp/")."""
    return prefix if prefix.endswith(SEPARATOR) else prefix + SEPARATOR


def is_excluded(doc_id: str, prefixes: Sequence[str]) -> bool:
    """
    Check whether a document lives inside any excluded folder.

    Examples:
        is_excluded("templates/daily.md", ["templates/"])  # True
        is_excluded("templates/a/b.md", ["templates"])     # True (nested)
        is_excluded("templates/daily.md", ["temp/"])       # False
    """
    return any(
        doc_id.startswith(normalize_prefix(prefix)) for prefix in prefixes if prefix
    )


def filter_excluded(
    documents: Iterable[Document], prefixes: Sequence[str]
) -> list[Document]:
    """Drop documents inside excluded folders."""
    if not prefixes:
        return list(documents)
    return [doc for doc in documents if not is_excluded(doc.id, prefixes)]

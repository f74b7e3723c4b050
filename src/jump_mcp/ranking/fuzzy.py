"""Default fuzzy text matcher used to score documents against a query."""

from collections.abc import Callable
from difflib import SequenceMatcher

from jump_mcp.ranking.models import Document, MetadataValue, TextMatch

TextMatcher = Callable[[str], TextMatch | None]

WORD_BOUNDARIES = " -_/.#"
TAG_WEIGHT = 0.5
PROPERTY_WEIGHT = 0.3


def _find_word(word: str, text: str) -> list[int] | None:
    """Positions of word's characters in text: a substring if possible, else a subsequence."""
    start = text.find(word)
    if start >= 0:
        return list(range(start, start + len(word)))

    positions: list[int] = []
    pos = 0
    for char in word:
        pos = text.find(char, pos)
        if pos < 0:
            return None
        positions.append(pos)
        pos += 1
    return positions


def _to_spans(positions: list[int]) -> list[tuple[int, int]]:
    """Collapse sorted positions into (start, end) ranges, end exclusive."""
    spans: list[tuple[int, int]] = []
    for pos in positions:
        if spans and spans[-1][1] == pos:
            spans[-1] = (spans[-1][0], pos + 1)
        else:
            spans.append((pos, pos + 1))
    return spans


def prepare_fuzzy_search(query: str) -> TextMatcher:
    """
    Build a case-insensitive matcher for query.

    Every whitespace-separated word of the query must occur in the text as a
    subsequence. Scores fall in (0, 1]: compact matches starting on a word
    boundary score higher, and shorter texts beat longer ones. An empty query
    matches nothing.
    """
    words = query.lower().split()
    joined = " ".join(words)

    def match(text: str) -> TextMatch | None:
        if not words or not text:
            return None
        lowered = text.lower()

        word_scores: list[float] = []
        positions: set[int] = set()
        for word in words:
            found = _find_word(word, lowered)
            if found is None:
                return None
            compactness = len(word) / (found[-1] - found[0] + 1)
            first = found[0]
            on_boundary = first == 0 or lowered[first - 1] in WORD_BOUNDARIES
            word_scores.append(compactness * (1.0 if on_boundary else 0.85))
            positions.update(found)

        ratio = SequenceMatcher(None, joined, lowered).ratio()
        score = 0.7 * (sum(word_scores) / len(word_scores)) + 0.3 * ratio
        return TextMatch(score=score, spans=tuple(_to_spans(sorted(positions))))

    return match


def _property_text(key: str, value: MetadataValue) -> str:
    if isinstance(value, list):
        value = ",".join("" if v is None else str(v) for v in value)
    return f"{key}:{value}"


def score_document(
    matcher: TextMatcher,
    document: Document,
    search_in_tags: bool = False,
    search_in_properties: bool = False,
) -> float | None:
    """
    Score a document against a prepared matcher.

    The display name always counts; tags and frontmatter properties add a
    weighted share of their own match scores when enabled. Returns None when
    nothing matched.
    """
    matched = False
    score = 0.0

    result = matcher(document.name)
    if result is not None:
        matched = True
        score += result.score

    if search_in_tags:
        for tag in document.tags:
            result = matcher(tag)
            if result is not None:
                matched = True
                score += result.score * TAG_WEIGHT

    if search_in_properties:
        for key, value in document.metadata.items():
            result = matcher(_property_text(key, value))
            if result is not None:
                matched = True
                score += result.score * PROPERTY_WEIGHT

    return score if matched else None

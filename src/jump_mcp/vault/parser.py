"""Parser for note frontmatter, tags and links."""

import json
import logging
import re
from dataclasses import dataclass, field
from datetime import date, datetime
from urllib.parse import unquote

import yaml

from jump_mcp.ranking.models import MetadataValue, Scalar

logger = logging.getLogger(__name__)


@dataclass
class NoteData:
    """Parsed contents of a note relevant to ranking."""

    metadata: dict[str, MetadataValue] = field(default_factory=dict)
    tags: list[str] = field(default_factory=list)
    links: list[str] = field(default_factory=list)  # Raw, unresolved link paths


# [[target]], [[target|alias]], [[target#heading]], ![[embed]]
WIKILINK_PATTERN = re.compile(r"!?\[\[([^\]|#^]*)(?:[#^][^\]|]*)?(?:\|[^\]]*)?\]\]")
# [text](target.md "title")
MARKDOWN_LINK_PATTERN = re.compile(r"\[[^\]]*\]\(<?([^)\s>]+)>?(?:\s+\"[^\"]*\")?\)")
# #tag, #nested/tag; must contain a non-digit and not follow a word character
TAG_PATTERN = re.compile(r"(?<![\w/#&])#([\w\-/]*[^\W\d][\w\-/]*)")
FENCED_CODE_PATTERN = re.compile(r"^(```|~~~).*?^\1", re.MULTILINE | re.DOTALL)
INLINE_CODE_PATTERN = re.compile(r"`[^`\n]*`")


def _normalize_scalar(value: object) -> Scalar:
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return str(value)


def normalize_metadata(raw: dict) -> dict[str, MetadataValue]:
    """Coerce YAML values to scalars or lists of scalars."""
    metadata: dict[str, MetadataValue] = {}
    for key, value in raw.items():
        if isinstance(value, (list, tuple)):
            metadata[str(key)] = [_normalize_scalar(v) for v in value]
        else:
            metadata[str(key)] = _normalize_scalar(value)
    return metadata


def split_frontmatter(content: str) -> tuple[dict | None, str]:
    """
    Split YAML frontmatter from markdown content.

    Returns:
        Tuple of (raw frontmatter mapping or None, body)
    """
    if not content.startswith("---"):
        return None, content

    parts = content.split("---", 2)
    if len(parts) < 3:
        return None, content

    try:
        raw = yaml.safe_load(parts[1])
    except yaml.YAMLError as e:
        logger.debug("Invalid YAML frontmatter: %s", e)
        return None, content

    if raw is None:
        return {}, parts[2].lstrip("\n")
    if not isinstance(raw, dict):
        return None, content
    return raw, parts[2].lstrip("\n")


def _frontmatter_tags(raw: dict) -> list[str]:
    value = raw.get("tags", raw.get("tag"))
    if value is None:
        return []
    if isinstance(value, str):
        items = re.split(r"[,\s]+", value)
    elif isinstance(value, list):
        items = [str(v) for v in value if v is not None]
    else:
        items = [str(value)]
    return [item.lstrip("#") for item in items if item.strip("#").strip()]


def _strip_code(body: str) -> str:
    body = FENCED_CODE_PATTERN.sub("", body)
    return INLINE_CODE_PATTERN.sub("", body)


def extract_links(text: str) -> list[str]:
    """Link paths from wikilinks, embeds and local markdown links, in order."""
    found: list[tuple[int, str]] = []

    for match in WIKILINK_PATTERN.finditer(text):
        target = match.group(1).strip()
        if target:
            found.append((match.start(), target))

    for match in MARKDOWN_LINK_PATTERN.finditer(text):
        target = match.group(1)
        if "://" in target or target.startswith(("mailto:", "#")):
            continue
        target = unquote(target.split("#", 1)[0]).strip()
        if target:
            found.append((match.start(), target))

    return [target for _, target in sorted(found, key=lambda item: item[0])]


def _frontmatter_links(raw: dict) -> list[str]:
    links: list[str] = []
    for value in raw.values():
        values = value if isinstance(value, list) else [value]
        for item in values:
            if isinstance(item, str):
                links.extend(
                    m.group(1).strip()
                    for m in WIKILINK_PATTERN.finditer(item)
                    if m.group(1).strip()
                )
    return links


def parse_note(content: str) -> NoteData:
    """Parse a markdown note: frontmatter, tags (frontmatter and inline) and links."""
    raw, body = split_frontmatter(content)
    data = NoteData()

    if raw is not None:
        data.metadata = normalize_metadata(raw)
        data.tags = _frontmatter_tags(raw)

    searchable = _strip_code(body)
    # Link targets may hold heading anchors ("#intro") that are not tags
    tag_text = MARKDOWN_LINK_PATTERN.sub(" ", WIKILINK_PATTERN.sub(" ", searchable))
    for tag in TAG_PATTERN.findall(tag_text):
        if tag not in data.tags:
            data.tags.append(tag)

    data.links = extract_links(searchable)
    if raw:
        data.links.extend(_frontmatter_links(raw))
    return data


def parse_canvas(content: str) -> NoteData:
    """Parse a JSON canvas: file nodes count as links."""
    data = NoteData()
    try:
        canvas = json.loads(content)
    except json.JSONDecodeError as e:
        logger.debug("Invalid canvas JSON: %s", e)
        return data

    if not isinstance(canvas, dict):
        return data
    for node in canvas.get("nodes", []):
        if isinstance(node, dict) and node.get("type") == "file" and node.get("file"):
            data.links.append(str(node["file"]))
    return data


def parse_file(content: str, filename: str) -> NoteData:
    """Dispatch on file type."""
    lowered = filename.lower()
    if lowered.endswith(".md"):
        return parse_note(content)
    if lowered.endswith(".canvas"):
        return parse_canvas(content)
    return NoteData()

"""Vault document provider: keeps a parsed snapshot of the notes on disk."""

import logging
import posixpath
import threading
from dataclasses import dataclass
from pathlib import Path

from jump_mcp.ranking.models import Document, LinkMap
from jump_mcp.vault.parser import NoteData, parse_file
from jump_mcp.vault.walker import FileInfo, compute_hash, walk_vault

logger = logging.getLogger(__name__)


@dataclass
class _Entry:
    """A parsed file and the fingerprint it was parsed from."""

    file_info: FileInfo
    note: NoteData


def display_name(relative_path: str) -> str:
    """File name without its extension ("notes/Alpha.md" -> "Alpha")."""
    filename = relative_path.rsplit("/", 1)[-1]
    stem, dot, _ = filename.rpartition(".")
    return stem if dot else filename


def _strip_md(path: str) -> str:
    return path[:-3] if path.lower().endswith(".md") else path


class LinkResolver:
    """
    Resolves raw link paths to document IDs.

    Tries, in order: the exact path, the path relative to the linking note,
    each of those with ".md" appended, and finally a match on the trailing
    path segments. Ambiguous matches prefer the linking note's folder, then
    the shortest path.
    """

    def __init__(self, doc_ids: list[str]):
        self._ids = {doc_id.lower(): doc_id for doc_id in doc_ids}
        self._by_name: dict[str, list[str]] = {}
        for doc_id in doc_ids:
            name = _strip_md(doc_id.rsplit("/", 1)[-1]).lower()
            self._by_name.setdefault(name, []).append(doc_id)

    def resolve(self, link: str, source_id: str) -> str | None:
        link = link.strip().lstrip("/")
        if not link:
            return None

        source_folder = posixpath.dirname(source_id)
        relative = posixpath.normpath(posixpath.join(source_folder, link))
        for candidate in (link, relative, link + ".md", relative + ".md"):
            found = self._ids.get(candidate.lower())
            if found is not None:
                return found

        wanted = _strip_md(link).lower()
        name = wanted.rsplit("/", 1)[-1]
        matches = [
            doc_id
            for doc_id in self._by_name.get(name, [])
            if _strip_md(doc_id).lower() == wanted
            or _strip_md(doc_id).lower().endswith("/" + wanted)
        ]
        if not matches:
            return None

        def preference(doc_id: str) -> tuple[bool, int, str]:
            same_folder = posixpath.dirname(doc_id) == source_folder
            return (not same_folder, doc_id.count("/"), doc_id)

        return min(matches, key=preference)


class Vault:
    """
    Document provider backed by a folder of markdown notes.

    The filesystem is always the source of truth. The vault keeps a parsed
    snapshot that refresh() brings up to date, re-reading only files whose
    mtime and content hash changed.

    Thread Safety:
        refresh() is protected by a lock. Readers get the snapshot that was
        current when they called in; snapshots are replaced, never mutated.
    """

    def __init__(self, root: Path):
        """
        Initialize the vault.

        Args:
            root: Path to the vault directory
        """
        self.root = root
        self._entries: dict[str, _Entry] = {}
        self._documents: dict[str, Document] = {}
        self._loaded = False
        self._write_lock = threading.Lock()

    def _ensure_loaded(self) -> None:
        if not self._loaded:
            self.refresh()

    def refresh(self) -> tuple[int, int, int]:
        """
        Sync the snapshot with filesystem changes.

        Uses mtime as fast-path: unchanged files are neither read nor hashed.
        When the mtime moved, the content hash decides whether the file is
        parsed again.

        Returns:
            Tuple of (added, updated, deleted) counts.
        """
        with self._write_lock:
            added = 0
            updated = 0
            deleted = 0
            entries = dict(self._entries)
            seen_paths: set[str] = set()

            for file_info in walk_vault(self.root):
                path = file_info.relative_path
                seen_paths.add(path)
                existing = entries.get(path)

                if existing is not None:
                    if abs(file_info.mtime - existing.file_info.mtime) <= 0.001:
                        continue

                raw = self._read(file_info)
                if raw is None:
                    continue
                file_info.content_hash = compute_hash(raw)

                previous_hash = existing.file_info.content_hash if existing else None
                if previous_hash == file_info.content_hash:
                    # Only mtime changed
                    entries[path] = _Entry(file_info=file_info, note=existing.note)
                    continue

                entry = self._parse(file_info, raw)
                if entry is None:
                    continue
                entries[path] = entry
                if existing is None:
                    added += 1
                else:
                    updated += 1

            for path in list(entries):
                if path not in seen_paths:
                    del entries[path]
                    deleted += 1

            self._entries = entries
            if added or updated or deleted or not self._loaded:
                self._documents = self._build_documents(entries)
            self._loaded = True

            logger.debug(
                "Vault refresh: %d added, %d updated, %d deleted",
                added,
                updated,
                deleted,
            )
            return added, updated, deleted

    def _read(self, file_info: FileInfo) -> bytes | None:
        """Read one file's bytes, or None if it lies outside the vault."""
        # Validate path is within the vault (prevent symlink escapes)
        try:
            resolved_path = file_info.path.resolve()
            resolved_root = self.root.resolve()
            if not str(resolved_path).startswith(str(resolved_root) + "/"):
                logger.warning("Skipping file outside vault: %s", file_info.relative_path)
                return None
        except OSError as e:
            logger.warning("Cannot resolve path %s: %s", file_info.relative_path, e)
            return None

        return file_info.path.read_bytes()

    def _parse(self, file_info: FileInfo, raw: bytes) -> _Entry | None:
        """Decode and parse one file, or None if it can't be used."""
        try:
            content = raw.decode("utf-8")
        except UnicodeDecodeError as e:
            logger.warning(
                "Skipping file with invalid UTF-8 encoding: %s (%s)",
                file_info.relative_path,
                e,
            )
            return None

        return _Entry(file_info=file_info, note=parse_file(content, file_info.filename))

    def _build_documents(self, entries: dict[str, _Entry]) -> dict[str, Document]:
        """Resolve links across the whole vault and build document snapshots."""
        resolver = LinkResolver(list(entries))
        documents: dict[str, Document] = {}

        for path, entry in entries.items():
            links = []
            for raw_link in entry.note.links:
                target = resolver.resolve(raw_link, path)
                if target is not None and target != path:
                    links.append(target)

            documents[path] = Document(
                id=path,
                name=display_name(path),
                links=tuple(links),
                metadata=dict(entry.note.metadata),
                tags=tuple(entry.note.tags),
            )
        return documents

    # Provider interface

    def list_documents(self) -> list[Document]:
        self._ensure_loaded()
        return list(self._documents.values())

    def get_document(self, doc_id: str) -> Document | None:
        self._ensure_loaded()
        return self._documents.get(doc_id)

    def link_graph(self) -> LinkMap:
        self._ensure_loaded()
        return {doc.id: list(doc.links) for doc in self._documents.values()}

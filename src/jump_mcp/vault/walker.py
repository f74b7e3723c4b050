"""File walker for discovering notes in a vault."""

import hashlib
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path

# Note types the switcher can open
SUPPORTED_EXTENSIONS = (".md", ".canvas", ".base")


@dataclass
class FileInfo:
    """Information about a discovered file."""

    path: Path  # Absolute path
    relative_path: str  # Relative to the vault root, "/"-separated
    folder: str  # Containing folder, or "" for root files
    filename: str
    mtime: float
    content_hash: str | None = None  # Filled in by the vault when the file is read


def compute_hash(content: bytes) -> str:
    """Compute SHA-256 hash of content."""
    return hashlib.sha256(content).hexdigest()


def is_supported(path: Path) -> bool:
    return path.suffix.lower() in SUPPORTED_EXTENSIONS


def walk_vault(vault_root: Path) -> Iterator[FileInfo]:
    """
    Walk the vault and yield FileInfo for each supported note.

    Hidden files and directories (".obsidian/", ".trash/", ...) are skipped.
    Files are yielded in sorted path order. Only stat data is collected; file
    contents are left for the caller to read when the mtime says it must.
    """
    if not vault_root.exists():
        return

    for file_path in sorted(vault_root.rglob("*")):
        if not file_path.is_file() or not is_supported(file_path):
            continue

        relative_parts = file_path.relative_to(vault_root).parts
        if any(part.startswith(".") for part in relative_parts):
            continue

        relative_path = "/".join(relative_parts)
        folder = "/".join(relative_parts[:-1])

        stat = file_path.stat()

        yield FileInfo(
            path=file_path,
            relative_path=relative_path,
            folder=folder,
            filename=file_path.name,
            mtime=stat.st_mtime,
        )

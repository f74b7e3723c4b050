"""
Vault module for jumpMCP.

Reads a folder of markdown notes (plus canvas and base files), parses
frontmatter, tags and links, and serves document snapshots and the link graph
to the ranking engine.
"""

from jump_mcp.vault.parser import NoteData, parse_file, parse_note
from jump_mcp.vault.vault import LinkResolver, Vault
from jump_mcp.vault.walker import FileInfo, walk_vault

__all__ = [
    "FileInfo",
    "LinkResolver",
    "NoteData",
    "Vault",
    "parse_file",
    "parse_note",
    "walk_vault",
]

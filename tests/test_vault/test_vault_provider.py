"""Tests for the vault document provider."""

import json
import logging
import os
from pathlib import Path

import pytest

from jump_mcp.vault import vault as vault_module
from jump_mcp.vault.vault import LinkResolver, Vault, display_name
from jump_mcp.vault.walker import compute_hash


def bump_mtime(path: Path) -> None:
    stat = path.stat()
    os.utime(path, (stat.st_atime, stat.st_mtime + 10))


class TestDisplayName:
    @pytest.mark.parametrize(
        "path, expected",
        [
            ("notes/Alpha.md", "Alpha"),
            ("board.canvas", "board"),
            ("a/b/v1.2 notes.md", "v1.2 notes"),
            ("README", "README"),
        ],
    )
    def test_strips_folder_and_extension(self, path, expected):
        assert display_name(path) == expected


class TestLinkResolver:
    @pytest.fixture
    def resolver(self) -> LinkResolver:
        return LinkResolver(
            [
                "notes/alpha.md",
                "notes/beta.md",
                "archive/beta.md",
                "projects/x/beta.md",
                "board.canvas",
                "Readme.md",
            ]
        )

    def test_exact_path(self, resolver):
        assert resolver.resolve("notes/alpha.md", "other.md") == "notes/alpha.md"

    def test_relative_to_source_folder(self, resolver):
        assert resolver.resolve("alpha", "notes/beta.md") == "notes/alpha.md"

    def test_parent_relative(self, resolver):
        assert resolver.resolve("../notes/alpha.md", "archive/beta.md") == "notes/alpha.md"

    def test_same_folder_preferred(self, resolver):
        assert resolver.resolve("beta", "archive/today.md") == "archive/beta.md"

    def test_shortest_path_then_alphabetical(self, resolver):
        assert resolver.resolve("beta", "inbox.md") == "archive/beta.md"

    def test_trailing_segments(self, resolver):
        assert resolver.resolve("x/beta", "inbox.md") == "projects/x/beta.md"

    def test_non_markdown_extension(self, resolver):
        assert resolver.resolve("board.canvas", "notes/alpha.md") == "board.canvas"

    def test_case_insensitive(self, resolver):
        assert resolver.resolve("README", "inbox.md") == "Readme.md"

    def test_leading_slash(self, resolver):
        assert resolver.resolve("/notes/alpha", "inbox.md") == "notes/alpha.md"

    @pytest.mark.parametrize("link", ["missing", "", "   ", "notes/gamma"])
    def test_unresolved(self, resolver, link):
        assert resolver.resolve(link, "inbox.md") is None


class TestVault:
    @pytest.fixture
    def vault_root(self, tmp_path: Path) -> Path:
        notes = tmp_path / "notes"
        notes.mkdir()
        (notes / "alpha.md").write_text(
            "---\nstatus: draft\ntags: [work]\n---\n"
            "See [[beta]], [[missing]] and [[alpha]].\n"
        )
        (notes / "beta.md").write_text("Back to [[alpha]]\n")
        (tmp_path / "board.canvas").write_text(
            json.dumps({"nodes": [{"id": "1", "type": "file", "file": "notes/alpha.md"}]})
        )
        (tmp_path / ".obsidian").mkdir()
        (tmp_path / ".obsidian" / "hidden.md").write_text("[[alpha]]")
        return tmp_path

    @pytest.fixture
    def vault(self, vault_root: Path) -> Vault:
        return Vault(vault_root)

    def test_lazy_load(self, vault):
        ids = sorted(doc.id for doc in vault.list_documents())
        assert ids == ["board.canvas", "notes/alpha.md", "notes/beta.md"]

    def test_document_fields(self, vault):
        alpha = vault.get_document("notes/alpha.md")
        assert alpha is not None
        assert alpha.name == "alpha"
        assert alpha.folder == "notes"
        assert alpha.metadata == {"status": "draft", "tags": ["work"]}
        assert alpha.tags == ("work",)

    def test_links_resolved_without_self_links(self, vault):
        alpha = vault.get_document("notes/alpha.md")
        assert alpha.links == ("notes/beta.md",)

    def test_canvas_links(self, vault):
        assert vault.get_document("board.canvas").links == ("notes/alpha.md",)

    def test_link_graph(self, vault):
        graph = vault.link_graph()
        assert graph["notes/beta.md"] == ["notes/alpha.md"]
        assert graph["board.canvas"] == ["notes/alpha.md"]
        assert set(graph) == {"board.canvas", "notes/alpha.md", "notes/beta.md"}

    def test_unknown_document(self, vault):
        assert vault.get_document("notes/missing.md") is None

    def test_refresh_counts(self, vault, vault_root: Path):
        assert vault.refresh() == (3, 0, 0)
        assert vault.refresh() == (0, 0, 0)

        beta = vault_root / "notes" / "beta.md"
        beta.write_text("No links now\n")
        bump_mtime(beta)
        assert vault.refresh() == (0, 1, 0)
        assert vault.get_document("notes/beta.md").links == ()

        (vault_root / "notes" / "gamma.md").write_text("[[beta]]")
        (vault_root / "board.canvas").unlink()
        assert vault.refresh() == (1, 0, 1)
        assert vault.get_document("board.canvas") is None
        assert vault.get_document("notes/gamma.md").links == ("notes/beta.md",)

    def test_mtime_only_change_is_not_an_update(self, vault, vault_root: Path):
        vault.refresh()
        bump_mtime(vault_root / "notes" / "alpha.md")
        assert vault.refresh() == (0, 0, 0)

    def test_unchanged_files_are_not_hashed(self, vault, vault_root: Path, monkeypatch):
        vault.refresh()
        hashed = []

        def counting_hash(content: bytes) -> str:
            hashed.append(content)
            return compute_hash(content)

        monkeypatch.setattr(vault_module, "compute_hash", counting_hash)

        assert vault.refresh() == (0, 0, 0)
        assert vault.refresh() == (0, 0, 0)
        assert hashed == []

    def test_mtime_change_hashes_once(self, vault, vault_root: Path, monkeypatch):
        vault.refresh()
        hashed = []

        def counting_hash(content: bytes) -> str:
            hashed.append(content)
            return compute_hash(content)

        monkeypatch.setattr(vault_module, "compute_hash", counting_hash)
        bump_mtime(vault_root / "notes" / "beta.md")

        assert vault.refresh() == (0, 0, 0)
        assert len(hashed) == 1
        # The new mtime is remembered
        assert vault.refresh() == (0, 0, 0)
        assert len(hashed) == 1

    def test_new_file_resolves_dangling_link(self, vault, vault_root: Path):
        vault.refresh()
        (vault_root / "notes" / "missing.md").write_text("")
        vault.refresh()
        links = vault.get_document("notes/alpha.md").links
        assert links == ("notes/beta.md", "notes/missing.md")

    def test_snapshots_are_not_mutated(self, vault, vault_root: Path):
        before = vault.list_documents()
        (vault_root / "notes" / "gamma.md").write_text("")
        vault.refresh()
        assert len(before) == 3
        assert len(vault.list_documents()) == 4

    def test_skips_invalid_utf8(self, vault, vault_root: Path, caplog):
        (vault_root / "notes" / "bad.md").write_bytes(b"\xff\xfe\xfa broken")
        with caplog.at_level(logging.WARNING):
            vault.refresh()
        assert vault.get_document("notes/bad.md") is None
        assert "invalid UTF-8" in caplog.text

    def test_skips_symlink_outside_vault(self, tmp_path: Path, caplog):
        outside = tmp_path / "outside"
        outside.mkdir()
        (outside / "secret.md").write_text("secret")
        root = tmp_path / "vault"
        root.mkdir()
        (root / "note.md").write_text("note")
        (root / "link.md").symlink_to(outside / "secret.md")

        vault = Vault(root)
        with caplog.at_level(logging.WARNING):
            ids = [doc.id for doc in vault.list_documents()]
        assert ids == ["note.md"]
        assert "outside vault" in caplog.text

    def test_missing_root(self, tmp_path: Path):
        assert Vault(tmp_path / "missing").list_documents() == []

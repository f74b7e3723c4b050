"""Tests for folder exclusion."""

from jump_mcp.ranking.models import Document
from jump_mcp.ranking.paths import filter_excluded, is_excluded, normalize_prefix


class TestNormalizePrefix:
    def test_appends_separator(self):
        assert normalize_prefix("templates") == "templates/"

    def test_keeps_existing_separator(self):
        assert normalize_prefix("templates/") == "templates/"


class TestIsExcluded:
    def test_file_in_folder(self):
        assert is_excluded("templates/daily.md", ["templates/"])

    def test_nested_file(self):
        assert is_excluded("archive/old/2020/note.md", ["archive/old"])

    def test_prefix_without_separator(self):
        assert is_excluded("templates/daily.md", ["templates"])

    def test_respects_segment_boundary(self):
        assert not is_excluded("templates/daily.md", ["temp/"])
        assert not is_excluded("templates/daily.md", ["temp"])

    def test_other_folder(self):
        assert not is_excluded("notes/daily.md", ["templates/"])

    def test_root_file_with_same_name(self):
        assert not is_excluded("templates.md", ["templates"])

    def test_empty_prefix_list(self):
        assert not is_excluded("templates/daily.md", [])

    def test_empty_prefix_ignored(self):
        assert not is_excluded("notes/a.md", [""])

    def test_any_prefix_matches(self):
        assert is_excluded("b/x.md", ["a/", "b/"])


class TestFilterExcluded:
    def test_drops_excluded_documents(self):
        docs = [
            Document(id="templates/daily.md", name="daily"),
            Document(id="notes/project.md", name="project"),
        ]
        kept = filter_excluded(docs, ["templates/"])
        assert [d.id for d in kept] == ["notes/project.md"]

    def test_no_prefixes(self):
        docs = [Document(id="a.md", name="a")]
        assert filter_excluded(docs, []) == docs

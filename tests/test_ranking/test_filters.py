"""Tests for property filters."""

import pytest

from jump_mcp.ranking.filters import (
    PropertyFilterEngine,
    compare_values,
    passes,
    passes_all,
)
from jump_mcp.ranking.models import Document, FilterOperator, PropertyFilter


def flt(key: str, operator: str, value: str = "") -> PropertyFilter:
    return PropertyFilter(key=key, operator=operator, value=value)


class TestPropertyFilter:
    def test_accepts_operator_strings(self):
        f = flt("status", "not-equals", "done")
        assert f.operator is FilterOperator.NOT_EQUALS

    def test_rejects_unknown_operator(self):
        with pytest.raises(ValueError):
            flt("status", "greater-than", "1")

    def test_is_immutable(self):
        f = flt("status", "equals", "done")
        with pytest.raises(AttributeError):
            f.key = "other"


class TestCompareValues:
    def test_exact_is_case_insensitive(self):
        assert compare_values("Active", "active", exact=True)

    def test_contains(self):
        assert compare_values("in-progress", "PROG", exact=False)

    def test_list_matches_any_element(self):
        assert compare_values(["a", "b", "Public"], "public", exact=True)
        assert not compare_values(["a", "b"], "c", exact=True)

    def test_none_never_matches(self):
        assert not compare_values(None, "", exact=True)
        assert not compare_values(None, "", exact=False)

    def test_numbers_and_booleans(self):
        assert compare_values(3, "3", exact=True)
        assert compare_values(2.0, "2", exact=True)
        assert compare_values(True, "TRUE", exact=True)
        assert compare_values(False, "false", exact=True)

    def test_empty_needle(self):
        assert compare_values("anything", "", exact=False)
        assert not compare_values("", "", exact=False)


class TestPasses:
    def test_exists(self):
        assert passes({"status": "x"}, flt("status", "exists"))
        assert passes({"status": None}, flt("status", "exists"))
        assert not passes({}, flt("status", "exists"))

    def test_not_exists(self):
        assert passes({}, flt("status", "not-exists"))
        assert not passes({"status": "x"}, flt("status", "not-exists"))

    def test_equals(self):
        assert passes({"status": "Active"}, flt("status", "equals", "active"))
        assert not passes({"status": "done"}, flt("status", "equals", "active"))
        assert not passes({}, flt("status", "equals", "active"))

    def test_not_equals_present_value(self):
        meta = {"status": "active"}
        assert not passes(meta, flt("status", "not-equals", "active"))
        assert passes(meta, flt("status", "not-equals", "done"))

    def test_not_equals_absent_value_fails(self):
        # Missing properties fail not-equals as well as equals
        assert not passes({}, flt("status", "not-equals", "active"))
        assert not passes({}, flt("status", "equals", "active"))

    def test_not_equals_list(self):
        meta = {"tags": ["work", "draft"]}
        assert not passes(meta, flt("tags", "not-equals", "draft"))
        assert passes(meta, flt("tags", "not-equals", "final"))

    def test_contains(self):
        assert passes({"title": "Project Alpha"}, flt("title", "contains", "alpha"))
        assert not passes({"title": "Project"}, flt("title", "contains", "beta"))
        assert not passes({}, flt("title", "contains", "alpha"))

    def test_contains_empty_needle(self):
        assert passes({"title": "x"}, flt("title", "contains", ""))
        assert not passes({"title": ""}, flt("title", "contains", ""))

    @pytest.mark.parametrize(
        "operator, expected",
        [
            ("exists", False),
            ("not-exists", True),
            ("equals", False),
            ("not-equals", False),
            ("contains", False),
        ],
    )
    def test_absent_metadata(self, operator, expected):
        assert passes(None, flt("status", operator, "x")) is expected


class TestPassesAll:
    def test_empty_filter_list_passes(self):
        assert passes_all({"a": 1}, [])
        assert passes_all(None, [])

    def test_conjunction(self):
        meta = {"access": "public", "status": "draft"}
        filters = [flt("access", "equals", "public"), flt("status", "equals", "draft")]
        assert passes_all(meta, filters)
        filters.append(flt("owner", "exists"))
        assert not passes_all(meta, filters)

    def test_absent_metadata_only_passes_not_exists(self):
        assert passes_all(None, [flt("a", "not-exists"), flt("b", "not-exists")])
        assert not passes_all(None, [flt("a", "not-exists"), flt("b", "exists")])


class TestPropertyFilterEngine:
    @pytest.fixture
    def documents(self) -> list[Document]:
        return [
            Document(id="a.md", name="a", metadata={"access": "public"}),
            Document(id="b.md", name="b", metadata={"access": "local"}),
            Document(id="c.md", name="c"),
        ]

    def test_filter_documents(self, documents):
        engine = PropertyFilterEngine()
        kept = engine.filter_documents(documents, [flt("access", "equals", "public")])
        assert [d.id for d in kept] == ["a.md"]

    def test_no_filters_keeps_everything(self, documents):
        engine = PropertyFilterEngine()
        assert engine.filter_documents(documents, []) == documents

    def test_document_without_frontmatter(self, documents):
        engine = PropertyFilterEngine()
        assert engine.passes(documents[2], [flt("access", "not-exists")])
        assert not engine.passes(documents[2], [flt("access", "not-equals", "public")])

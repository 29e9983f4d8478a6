"""
Tests for search query construction helpers (no database).
"""
import pytest

from duech.core.errors import ValidationError
from duech.modules.search.query import (
    PAGE_SIZE,
    SearchCriteria,
    build_rank,
    build_where,
    clamp_page,
    clamp_page_size,
    clean_values,
    fold,
    make_snippet,
    match_type,
    paginate,
    parse_assignees,
)


class TestFold:
    def test_strips_accents_and_case(self):
        assert fold("ÁrBol") == "arbol"

    def test_keeps_enie(self):
        assert fold("Ñandú") == "ñandu"

    def test_none_is_empty(self):
        assert fold(None) == ""


class TestValues:
    def test_comma_split_trim_dedupe(self):
        assert clean_values(["verbo, sustantivo", " verbo ", ""]) == ("verbo", "sustantivo")

    def test_assignees_parsed_as_ints(self):
        assert parse_assignees(["1,2", "2"]) == (1, 2)

    def test_bad_assignee_rejected(self):
        with pytest.raises(ValidationError):
            parse_assignees(["abc"])


class TestPaging:
    def test_page_size_default_and_cap(self):
        assert clamp_page_size(None) == PAGE_SIZE == 50
        assert clamp_page_size(500) == 50
        assert clamp_page_size(0) == 1
        assert clamp_page_size(10) == 10

    def test_page_floor(self):
        assert clamp_page(None) == 1
        assert clamp_page(-3) == 1
        assert clamp_page(4) == 4

    def test_first_page_of_three(self):
        p = paginate(120, 1, 50)

        assert p["total_pages"] == 3
        assert p["has_next"] is True
        assert p["has_prev"] is False

    def test_last_page_of_three(self):
        p = paginate(120, 3, 50)

        assert p["has_next"] is False
        assert p["has_prev"] is True

    def test_empty_result(self):
        p = paginate(0, 1, 50)

        assert p["total"] == 0
        assert p["total_pages"] == 0
        assert p["has_next"] is False


class TestCriteria:
    def test_empty_criteria(self):
        assert SearchCriteria().has_criteria(editor_mode=False) is False
        assert SearchCriteria(query="   ").has_criteria(editor_mode=True) is False

    def test_editor_filters_count_only_in_editor_mode(self):
        c = SearchCriteria(status="draft")

        assert c.has_criteria(editor_mode=True) is True
        assert c.has_criteria(editor_mode=False) is False

    def test_filter_counts_as_criteria(self):
        assert SearchCriteria(letters=("a",)).has_criteria(editor_mode=False) is True


class TestWhere:
    def test_public_forces_published(self):
        sql, args = build_where(SearchCriteria(query="x", status="draft", assigned_to=(3,)), editor_mode=False)

        assert "w.status = ?" in sql
        assert args[0] == "published"
        assert 3 not in args
        assert "draft" not in args

    def test_editor_status_validated(self):
        with pytest.raises(ValidationError):
            build_where(SearchCriteria(status="bogus"), editor_mode=True)

    def test_editor_without_status_has_no_status_clause(self):
        sql, args = build_where(SearchCriteria(query="x"), editor_mode=True)

        assert "w.status" not in sql

    def test_meaning_filters_share_one_exists(self):
        sql, args = build_where(
            SearchCriteria(categories=("verbo",), style_markers=("coloquial",)), editor_mode=True
        )

        assert sql.count("EXISTS") == 1
        assert "mf.grammar_category IN (?)" in sql
        assert "mf.style_markers IN (?)" in sql
        assert args == ["verbo", "coloquial"]

    def test_letters_are_folded(self):
        sql, args = build_where(SearchCriteria(letters=("Á", "ñ")), editor_mode=True)

        assert "w.letter IN (?,?)" in sql
        assert args == ["a", "ñ"]

    def test_like_wildcards_escaped(self):
        _sql, args = build_where(SearchCriteria(query="50%_"), editor_mode=True)

        assert args == ["%50\\%\\_%", "%50\\%\\_%"]


class TestRank:
    def test_rank_args_in_order(self):
        expr, args = build_rank(SearchCriteria(query="Árbol"))

        assert expr.startswith("CASE")
        assert args == ["arbol", "arbol%", "%arbol%"]

    def test_no_query_no_rank(self):
        assert build_rank(SearchCriteria()) == ("0", [])

    def test_match_types(self):
        c = SearchCriteria(query="arbol")

        assert [match_type(r, c) for r in range(4)] == ["exact", "prefix", "partial", "meaning"]
        assert match_type(0, SearchCriteria(letters=("a",))) == "filter"


class TestSnippet:
    def test_short_text_untouched(self):
        assert make_snippet("  planta   leñosa ") == "planta leñosa"

    def test_long_text_centred_on_match(self):
        text = "relleno " * 40 + "objetivo final " + "cola " * 40

        snippet = make_snippet(text, "objetivo", width=60)

        assert snippet.startswith("…")
        assert snippet.endswith("…")
        assert "objetivo" in snippet

"""
Tests for free-text service matching.

Covers:
- exact, substring and keyword strategies
- strategy precedence and category order
- blank and unmatched input
"""

from types import SimpleNamespace

from src.services.service_matcher import SERVICE_KEYWORDS, match_service_category


def _categories(*names):
    return [SimpleNamespace(id=i, name=name) for i, name in enumerate(names, start=1)]


SHEET = _categories(
    "Kitchen Remodeling",
    "Plumbing",
    "Heating & Cooling",
    "Decks & Porches",
    "Swimming Pools",
    "House cleaning",
)


# ── Exact ─────────────────────────────────────────────────


class TestExactMatch:
    def test_case_insensitive(self):
        match = match_service_category("kitchen remodeling", SHEET)
        assert match.name == "Kitchen Remodeling"

    def test_surrounding_whitespace_ignored(self):
        match = match_service_category("   PLUMBING  ", SHEET)
        assert match.name == "Plumbing"

    def test_exact_beats_earlier_substring(self):
        categories = _categories("Roofing Repair", "Roofing")
        match = match_service_category("Roofing", categories)
        assert match.name == "Roofing"


# ── Substring ─────────────────────────────────────────────


class TestSubstringMatch:
    def test_request_inside_category_name(self):
        match = match_service_category("heating", SHEET)
        assert match.name == "Heating & Cooling"

    def test_name_head_inside_request(self):
        match = match_service_category("Heating repair needed asap", SHEET)
        assert match.name == "Heating & Cooling"

    def test_head_cut_at_ampersand(self):
        match = match_service_category("new decks for the backyard", SHEET)
        assert match.name == "Decks & Porches"

    def test_first_category_in_order_wins(self):
        categories = _categories("Pool service", "Pool supplies")
        match = match_service_category("pool", categories)
        assert match.name == "Pool service"

    def test_empty_head_never_matches(self):
        categories = _categories("& Misc")
        assert match_service_category("anything at all", categories) is None


# ── Keyword ───────────────────────────────────────────────


class TestKeywordMatch:
    def test_hvac_keyword(self):
        match = match_service_category("I need a new hvac system", SHEET)
        assert match.name == "Heating & Cooling"

    def test_pool_keyword(self):
        match = match_service_category("pool cleaning", SHEET)
        assert match.name == "Swimming Pools"

    def test_keyword_table_order(self):
        categories = _categories("Walk-in Tubs", "Kitchen Remodeling")
        match = match_service_category("kitchen and bathroom", categories)
        assert match.name == "Kitchen Remodeling"

    def test_keyword_without_category_falls_through(self):
        assert match_service_category("solar install", SHEET) is None

    def test_keyword_table_entries_are_lowercase(self):
        for keyword, candidates in SERVICE_KEYWORDS.items():
            assert keyword == keyword.lower()
            assert all(c == c.lower() for c in candidates)


# ── No match ──────────────────────────────────────────────


class TestNoMatch:
    def test_unrelated_text(self):
        assert match_service_category("dog walking", SHEET) is None

    def test_blank_text(self):
        assert match_service_category("   ", SHEET) is None

    def test_none_text(self):
        assert match_service_category(None, SHEET) is None

    def test_empty_sheet(self):
        assert match_service_category("Plumbing", []) is None

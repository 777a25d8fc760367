"""Tests for the list pipeline: search, equality filters, sort and page window."""

import pytest

from app.listing.config import KYC_USERS, PENDING_PRODUCTS
from app.listing.processor import (
    ALL,
    FilterField,
    FilterState,
    InvalidConfigError,
    ListConfig,
    apply_filters,
    apply_search,
    apply_sort,
    clamp_page,
    paginate,
    process,
)
from app.listing.view import render_page
from app.schemas.product import Product
from app.schemas.user import User


CONFIG = ListConfig(
    searchable_fields=("name", "email"),
    filterable_fields=(
        FilterField("role"),
        FilterField("verification", attribute="verified", value_map={"verified": True, "pending": False}),
    ),
    sort_rules={"name": "string", "score": "numeric", "verified": "boolean", "joined": "date"},
    page_size=2,
)


def _records():
    return [
        {"id": 1, "name": "GreenCo", "email": "a@example.com", "role": "SELLER", "verified": True, "score": 3,
         "joined": "2024-03-01T00:00:00Z"},
        {"id": 2, "name": "Acme", "email": "green@example.com", "role": "USER", "verified": False, "score": 1,
         "joined": "2024-01-01T00:00:00Z"},
        {"id": 3, "name": "Blue Ltd", "email": "b@example.com", "role": "SELLER", "verified": False, "score": 3,
         "joined": "2024-02-01T00:00:00Z"},
        {"id": 4, "name": "acme", "email": "c@example.com", "role": "ADMIN", "verified": True, "score": 2,
         "joined": None},
    ]


def _ids(records):
    return [r["id"] for r in records]


# ---------------------------------------------------------------------------
# Search
# ---------------------------------------------------------------------------


class TestSearch:
    """Tests for the case-insensitive substring search stage."""

    def test_matches_any_searchable_field(self):
        """'green' finds GreenCo by name and Acme by email."""
        result = apply_search(_records(), "green", CONFIG.searchable_fields)
        assert _ids(result) == [1, 2]

    def test_case_insensitive(self):
        """'GREENCO' matches 'GreenCo'."""
        result = apply_search(_records(), "GREENCO", CONFIG.searchable_fields)
        assert _ids(result) == [1]

    def test_empty_term_keeps_everything(self):
        """An empty search term is a no-op."""
        assert _ids(apply_search(_records(), "", CONFIG.searchable_fields)) == [1, 2, 3, 4]

    def test_no_match(self):
        """A term found nowhere yields an empty list."""
        assert apply_search(_records(), "zzz", CONFIG.searchable_fields) == []


# ---------------------------------------------------------------------------
# Equality filters
# ---------------------------------------------------------------------------


class TestFilters:
    """Tests for the equality filter stage."""

    def test_all_sentinel_is_noop(self):
        """Filters set to 'all' leave the records untouched."""
        result = apply_filters(_records(), {"role": ALL, "verification": ALL}, CONFIG)
        assert _ids(result) == [1, 2, 3, 4]

    def test_role_filter(self):
        """Only records with the exact role survive."""
        result = apply_filters(_records(), {"role": "SELLER"}, CONFIG)
        assert _ids(result) == [1, 3]

    def test_value_map_translates_ui_vocabulary(self):
        """'verified' maps onto verified=True, 'pending' onto False."""
        assert _ids(apply_filters(_records(), {"verification": "verified"}, CONFIG)) == [1, 4]
        assert _ids(apply_filters(_records(), {"verification": "pending"}, CONFIG)) == [2, 3]

    def test_filters_combine(self):
        """Multiple filters are ANDed."""
        result = apply_filters(_records(), {"role": "SELLER", "verification": "pending"}, CONFIG)
        assert _ids(result) == [3]

    def test_unknown_filter_raises(self):
        """A filter the configuration does not declare is a config error."""
        with pytest.raises(InvalidConfigError):
            apply_filters(_records(), {"country": "NG"}, CONFIG)

    def test_enum_values_compare_by_value(self, make_user):
        """UserRole members match their string value."""
        users = [User.model_validate(make_user(index=i, role=r)) for i, r in enumerate(["USER", "SELLER"])]
        result = apply_filters(users, {"role": "SELLER"}, KYC_USERS)
        assert [u.id for u in result] == ["user-1"]


# ---------------------------------------------------------------------------
# Sort
# ---------------------------------------------------------------------------


class TestSort:
    """Tests for the stable sort stage."""

    def test_string_sort_is_case_insensitive(self):
        """'acme' and 'Acme' compare equal and keep their input order."""
        result = apply_sort(_records(), "name", "asc", CONFIG)
        assert _ids(result) == [2, 4, 3, 1]

    def test_numeric_sort_ascending_is_stable(self):
        """Ties on score keep their incoming order."""
        result = apply_sort(_records(), "score", "asc", CONFIG)
        assert _ids(result) == [2, 4, 1, 3]

    def test_numeric_sort_descending_is_stable(self):
        """Descending order also keeps ties in their incoming order."""
        result = apply_sort(_records(), "score", "desc", CONFIG)
        assert _ids(result) == [1, 3, 4, 2]

    def test_boolean_sort_false_first(self):
        """Ascending boolean sort puts False before True."""
        result = apply_sort(_records(), "verified", "asc", CONFIG)
        assert _ids(result) == [2, 3, 1, 4]

    def test_date_sort_missing_first(self):
        """ISO dates compare chronologically; a missing date sorts first."""
        result = apply_sort(_records(), "joined", "asc", CONFIG)
        assert _ids(result) == [4, 2, 3, 1]

    def test_unknown_sort_field_raises(self):
        """Sorting on a field without a rule is a config error."""
        with pytest.raises(InvalidConfigError):
            apply_sort(_records(), "email", "asc", CONFIG)

    def test_product_date_sort(self, make_product):
        """Products sort newest first by created_at."""
        products = [Product.model_validate(make_product(index=i)) for i in range(3)]
        result = apply_sort(products, "created_at", "desc", PENDING_PRODUCTS)
        assert [p.id for p in result] == [3, 2, 1]


# ---------------------------------------------------------------------------
# Page window
# ---------------------------------------------------------------------------


class TestPaginate:
    """Tests for slicing a single page out of the processed list."""

    def test_first_page(self):
        """Page 1 of 4 records at size 2 shows records 1-2."""
        page = paginate(_records(), 1, 2)
        assert _ids(page.visible_slice) == [1, 2]
        assert (page.range_start, page.range_end) == (1, 2)
        assert page.total_pages == 2
        assert page.total_count == 4

    def test_partial_last_page(self):
        """The last page may hold fewer than page_size records."""
        page = paginate(_records()[:3], 2, 2)
        assert _ids(page.visible_slice) == [3]
        assert (page.range_start, page.range_end) == (3, 3)

    def test_out_of_range_page_is_empty(self):
        """A page beyond the end yields an empty slice without error."""
        page = paginate(_records(), 9, 2)
        assert page.visible_slice == []
        assert (page.range_start, page.range_end) == (0, 0)
        assert page.total_pages == 2

    def test_empty_input(self):
        """No records means zero pages and an empty range."""
        page = paginate([], 1, 10)
        assert page.total_pages == 0
        assert page.visible_slice == []
        assert (page.range_start, page.range_end) == (0, 0)

    @pytest.mark.parametrize("page_size", [0, -1])
    def test_non_positive_page_size_raises(self, page_size):
        """page_size must be positive."""
        with pytest.raises(InvalidConfigError):
            paginate(_records(), 1, page_size)


# ---------------------------------------------------------------------------
# Full pipeline and filter state
# ---------------------------------------------------------------------------


class TestProcess:
    """Tests for the composed pipeline."""

    def test_pipeline_order(self):
        """Search, then filter, then sort, then page."""
        state = FilterState(
            search_term="e",
            equality_filters={"role": "SELLER"},
            sort_field="name",
            sort_direction="desc",
        )
        result = process(_records(), state, CONFIG)
        assert _ids(result.visible_slice) == [1, 3]
        assert result.total_count == 2

    def test_rejects_bad_page_size(self):
        """A configuration with page_size 0 is rejected before any work."""
        config = ListConfig(searchable_fields=("name",), sort_rules={"name": "string"}, page_size=0)
        with pytest.raises(InvalidConfigError):
            process(_records(), FilterState(), config)

    def test_render_page_clamps_beyond_last_page(self):
        """A stale page number is pulled back to the last page."""
        state = FilterState(sort_field="name", current_page=5)
        rendered = render_page(_records(), state, CONFIG)
        assert rendered.state.current_page == 2
        assert _ids(rendered.result.visible_slice) == [3, 1]
        assert rendered.controls.has_next is False


class TestFilterState:
    """Tests for FilterState transitions."""

    def test_changing_search_resets_page(self):
        """Any non-page change sends the user back to page 1."""
        state = FilterState(current_page=3)
        assert state.update(search_term="green").current_page == 1

    def test_changing_filter_resets_page(self):
        state = FilterState(current_page=3)
        assert state.update(equality_filters={"role": "USER"}).current_page == 1

    def test_page_change_keeps_page(self):
        """Changing only the page does not reset it."""
        assert FilterState().update(current_page=4).current_page == 4

    def test_unchanged_value_keeps_page(self):
        """Re-applying the same search term is not a change."""
        state = FilterState(search_term="x", current_page=3)
        assert state.update(search_term="x").current_page == 3

    def test_changing_sort_resets_page(self):
        """A new sort direction also sends the user back to page 1."""
        state = FilterState(sort_field="name", sort_direction="asc", current_page=2)
        changed = state.update(sort_direction="desc")
        assert (changed.sort_field, changed.sort_direction, changed.current_page) == ("name", "desc", 1)

    def test_page_must_be_positive(self):
        with pytest.raises(ValueError):
            FilterState(current_page=0)


class TestClampPage:
    """Tests for bringing a page number into range."""

    @pytest.mark.parametrize(
        "page,total,expected",
        [(1, 0, 1), (5, 3, 3), (2, 3, 2), (0, 3, 1)],
    )
    def test_clamp(self, page, total, expected):
        assert clamp_page(page, total) == expected

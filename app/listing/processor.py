"""
Client-side list processing — search, equality filters, sort, page window.

The same pipeline backs the KYC and product-review screens. Stages run in
a fixed order and each one only narrows or reorders the output of the
previous stage:

    search → equality filters → stable sort → page window

Everything here is pure and synchronous; callers own the FilterState and
re-run ``process`` after every change.
"""

from __future__ import annotations

import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field, replace
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any, Literal

ALL = "all"

SortDirection = Literal["asc", "desc"]
CompareRule = Literal["string", "numeric", "boolean", "date"]


class InvalidConfigError(Exception):
    """Raised for a list configuration no correct caller can reach."""
    pass


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class FilterField:
    """
    An equality filter exposed to the UI.

    ``name`` is the key used in FilterState; ``attribute`` is the record
    field it compares against. ``value_map`` translates UI vocabulary
    onto record values, e.g. ``{"verified": True, "pending": False}``.
    """
    name: str
    attribute: str | None = None
    value_map: Mapping[str, Any] | None = None

    @property
    def source(self) -> str:
        return self.attribute or self.name

    def expected(self, value: Any) -> Any:
        if self.value_map is not None and value in self.value_map:
            return self.value_map[value]
        return value


@dataclass(frozen=True)
class ListConfig:
    """Declarative description of a list screen."""
    searchable_fields: tuple[str, ...]
    filterable_fields: tuple[FilterField, ...] = ()
    sort_rules: Mapping[str, CompareRule] = field(default_factory=dict)
    page_size: int = 10

    def filter_field(self, name: str) -> FilterField:
        for candidate in self.filterable_fields:
            if candidate.name == name:
                return candidate
        raise InvalidConfigError(f"Unknown filter field: {name!r}")


# ---------------------------------------------------------------------------
# Filter state and result
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class FilterState:
    """UI-owned parameters controlling search, filters, sort and page."""
    search_term: str = ""
    equality_filters: Mapping[str, Any] = field(default_factory=dict)
    sort_field: str = "name"
    sort_direction: SortDirection = "asc"
    current_page: int = 1

    def __post_init__(self):
        if self.current_page < 1:
            raise ValueError("current_page must be a positive integer")
        if self.sort_direction not in ("asc", "desc"):
            raise ValueError(f"Invalid sort direction: {self.sort_direction!r}")

    def update(self, **changes) -> FilterState:
        """
        Return a new state with ``changes`` applied.

        Any change to a field other than ``current_page`` sends the
        user back to page 1.
        """
        new = replace(self, **changes)
        page_only = all(
            key == "current_page" or getattr(self, key) == value
            for key, value in changes.items()
        )
        if not page_only:
            new = replace(new, current_page=1)
        return new


@dataclass(frozen=True)
class PaginationResult:
    total_pages: int
    visible_slice: list
    range_start: int
    range_end: int
    total_count: int


# ---------------------------------------------------------------------------
# Field access and comparison keys
# ---------------------------------------------------------------------------


def field_value(record: Any, name: str) -> Any:
    """Read a field from a mapping or an attribute-bearing record."""
    if isinstance(record, Mapping):
        return record.get(name)
    return getattr(record, name, None)


def _to_epoch(value: Any) -> float:
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.timestamp()
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc).timestamp()
    if isinstance(value, (int, float)):
        return float(value)
    return _to_epoch(datetime.fromisoformat(str(value).replace("Z", "+00:00")))


def _sort_key(rule: CompareRule):
    def key(value: Any):
        # Missing values sort before everything else
        if value is None:
            return (0, 0)
        if isinstance(value, Enum):
            value = value.value
        if rule == "string":
            return (1, str(value).casefold())
        if rule == "numeric":
            return (1, float(value))
        if rule == "boolean":
            return (1, int(bool(value)))
        if rule == "date":
            return (1, _to_epoch(value))
        raise InvalidConfigError(f"Unknown comparison rule: {rule!r}")

    return key


# ---------------------------------------------------------------------------
# Pipeline stages
# ---------------------------------------------------------------------------


def apply_search(records: Sequence, term: str, searchable_fields: Sequence[str]) -> list:
    """Keep records where any searchable field contains ``term`` (case-insensitive)."""
    if not term:
        return list(records)
    needle = term.casefold()
    result = []
    for record in records:
        for name in searchable_fields:
            value = field_value(record, name)
            if value is not None and needle in str(value).casefold():
                result.append(record)
                break
    return result


def apply_filters(records: Sequence, filters: Mapping[str, Any], config: ListConfig) -> list:
    """Apply every equality filter whose value is not the ``"all"`` sentinel."""
    result = list(records)
    for name, value in filters.items():
        filter_field = config.filter_field(name)
        if value == ALL:
            continue
        expected = filter_field.expected(value)
        result = [
            record for record in result
            if _normalize(field_value(record, filter_field.source)) == expected
        ]
    return result


def _normalize(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    return value


def apply_sort(records: Sequence, sort_field: str, direction: SortDirection, config: ListConfig) -> list:
    """Stable sort by the configured rule; ties keep their incoming order."""
    rule = config.sort_rules.get(sort_field)
    if rule is None:
        raise InvalidConfigError(f"Field {sort_field!r} is not sortable")
    key = _sort_key(rule)
    # sorted() stays stable under reverse=True
    return sorted(
        records,
        key=lambda record: key(field_value(record, sort_field)),
        reverse=(direction == "desc"),
    )


def paginate(records: Sequence, current_page: int, page_size: int) -> PaginationResult:
    """Slice one page out of ``records``; an out-of-range page yields an empty slice."""
    if page_size <= 0:
        raise InvalidConfigError("page_size must be greater than zero")

    total = len(records)
    total_pages = math.ceil(total / page_size)
    start = (current_page - 1) * page_size
    visible = list(records[start:start + page_size])

    if visible:
        range_start, range_end = start + 1, start + len(visible)
    else:
        range_start = range_end = 0

    return PaginationResult(
        total_pages=total_pages,
        visible_slice=visible,
        range_start=range_start,
        range_end=range_end,
        total_count=total,
    )


def process(records: Sequence, state: FilterState, config: ListConfig) -> PaginationResult:
    """Run the full pipeline and return the page to render."""
    if config.page_size <= 0:
        raise InvalidConfigError("page_size must be greater than zero")

    result = apply_search(records, state.search_term, config.searchable_fields)
    result = apply_filters(result, state.equality_filters, config)
    result = apply_sort(result, state.sort_field, state.sort_direction, config)
    return paginate(result, state.current_page, config.page_size)


def clamp_page(page: int, total_pages: int) -> int:
    """Bring ``page`` into ``[1, total_pages]`` (page 1 when there are no pages)."""
    return max(1, min(page, max(total_pages, 1)))

"""
Pydantic schemas for processed list pages and review actions.
"""

from typing import Any, Generic, TypeVar

from pydantic import BaseModel

from app.listing.view import ListPage

T = TypeVar("T")


class PageControlsRead(BaseModel):
    pages: list[int]
    show_first: bool
    leading_ellipsis: bool
    show_last: bool
    trailing_ellipsis: bool
    has_previous: bool
    has_next: bool


class FilterStateRead(BaseModel):
    search: str
    filters: dict[str, Any]
    sort_field: str
    sort_direction: str
    page: int


class Page(BaseModel, Generic[T]):
    """One rendered page of a list screen."""
    items: list[T]
    total_count: int
    total_pages: int
    range_start: int
    range_end: int
    state: FilterStateRead
    controls: PageControlsRead

    @classmethod
    def from_list_page(cls, page: ListPage) -> "Page[T]":
        state, result, controls = page.state, page.result, page.controls
        return cls(
            items=result.visible_slice,
            total_count=result.total_count,
            total_pages=result.total_pages,
            range_start=result.range_start,
            range_end=result.range_end,
            state=FilterStateRead(
                search=state.search_term,
                filters=dict(state.equality_filters),
                sort_field=state.sort_field,
                sort_direction=state.sort_direction,
                page=state.current_page,
            ),
            controls=PageControlsRead(
                pages=controls.pages,
                show_first=controls.show_first,
                leading_ellipsis=controls.leading_ellipsis,
                show_last=controls.show_last,
                trailing_ellipsis=controls.trailing_ellipsis,
                has_previous=controls.has_previous,
                has_next=controls.has_next,
            ),
        )


class ActionResultRead(BaseModel):
    """Outcome of an approve/reject action, surfaced to the operator."""
    ok: bool
    record_id: str
    error: str | None = None

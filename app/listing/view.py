"""
Render one list page: run the processor, clamp the page, build controls.
"""

from collections.abc import Sequence
from dataclasses import dataclass

from app.listing.pagination import PageControls, page_controls
from app.listing.processor import FilterState, ListConfig, PaginationResult, clamp_page, process


@dataclass(frozen=True)
class ListPage:
    state: FilterState
    result: PaginationResult
    controls: PageControls


def render_page(records: Sequence, state: FilterState, config: ListConfig) -> ListPage:
    """
    Process ``records`` for ``state``.

    A page beyond the last one (e.g. after filters shrank the list) is
    pulled back to the last page before rendering.
    """
    result = process(records, state, config)
    page = clamp_page(state.current_page, result.total_pages)
    if page != state.current_page:
        state = state.update(current_page=page)
        result = process(records, state, config)
    return ListPage(state=state, result=result, controls=page_controls(state.current_page, result.total_pages))

"""
Page-control windowing for numbered pagination buttons.

Shows at most five contiguous page numbers around the current page,
plus optional "1 …" and "… last" shortcuts.
"""

from dataclasses import dataclass

WINDOW_SIZE = 5


@dataclass(frozen=True)
class PageControls:
    current_page: int
    total_pages: int
    pages: list[int]
    show_first: bool
    leading_ellipsis: bool
    show_last: bool
    trailing_ellipsis: bool
    has_previous: bool
    has_next: bool


def page_window(current_page: int, total_pages: int) -> list[int]:
    """Return the contiguous page numbers to render as buttons."""
    count = min(total_pages, WINDOW_SIZE)
    if total_pages <= WINDOW_SIZE or current_page <= 3:
        first = 1
    elif current_page >= total_pages - 2:
        first = total_pages - 4
    else:
        first = current_page - 2
    return list(range(first, first + count))


def page_controls(current_page: int, total_pages: int) -> PageControls:
    """Build the full set of page controls for ``current_page`` of ``total_pages``."""
    paged = total_pages > WINDOW_SIZE
    show_first = paged and current_page > 3
    show_last = paged and current_page < total_pages - 2

    return PageControls(
        current_page=current_page,
        total_pages=total_pages,
        pages=page_window(current_page, total_pages),
        show_first=show_first,
        leading_ellipsis=show_first and current_page > 4,
        show_last=show_last,
        trailing_ellipsis=show_last and current_page < total_pages - 3,
        has_previous=current_page > 1,
        has_next=current_page < total_pages,
    )

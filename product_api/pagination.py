# product_api/pagination.py

"""
Page/size arithmetic for product listings.
Callers validate input first: page and size are None or positive, and
page is never given without size.
"""

from typing import Optional, Tuple

DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 10


def compute_page_window(
    page: Optional[int], size: Optional[int]
) -> Tuple[int, int, int]:
    """
    Turns optional page/size query values into `(limit, offset, effective_page)`.
    No clamping is applied; a page past the end is detected later from the
    fetched rows.
    """
    effective_page = DEFAULT_PAGE if page is None else page
    limit = DEFAULT_PAGE_SIZE if size is None else size
    offset = (effective_page - 1) * limit
    return limit, offset, effective_page


def compute_total_pages(total_count: int, limit: int) -> int:
    """Ceiling of total_count / limit, or 0 when limit is 0."""
    if limit == 0:
        return 0
    return (total_count + limit - 1) // limit

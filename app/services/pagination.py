"""Page-number pagination shared by the transaction history and the admin user listing."""

import math
from typing import TypeVar

T = TypeVar("T")

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100


def paginate(items: list[T], page: int, limit: int) -> tuple[list[T], int]:
    """Return (page_items, total_pages) for a 1-based page; limit is clamped to 1..MAX_PAGE_SIZE."""
    page = max(1, page)
    limit = max(1, min(MAX_PAGE_SIZE, limit))
    offset = (page - 1) * limit
    total_pages = math.ceil(len(items) / limit) if items else 0
    return items[offset : offset + limit], total_pages

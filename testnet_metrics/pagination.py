import math
from typing import List, Sequence, TypeVar

T = TypeVar("T")

ITEMS_PER_PAGE = 5


def paginate(items: Sequence[T], page: int, page_size: int = ITEMS_PER_PAGE) -> List[T]:
    """Return the 1-indexed `page` of `items`. Pages past the end are empty."""
    if page < 1:
        return []
    start = (page - 1) * page_size
    return list(items[start:start + page_size])


def page_count(total: int, page_size: int = ITEMS_PER_PAGE) -> int:
    return math.ceil(total / page_size)


def clamp_page(page: int, total: int, page_size: int = ITEMS_PER_PAGE) -> int:
    """Keep a requested page inside [1, page_count], treating an empty list as one page."""
    return max(1, min(page, max(1, page_count(total, page_size))))

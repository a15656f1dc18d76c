"""Page slicing over a fully materialised issue list."""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass
class Page(Generic[T]):
    items: list[T] = field(default_factory=list)
    total_count: int = 0
    total_pages: int = 0
    current_page: int = 1
    has_next: bool = False
    has_previous: bool = False


def paginate(items: Sequence[T], page: int, page_size: int) -> Page[T]:
    """Return one page of *items* (1-based).

    Out-of-range page numbers are clamped into ``1..total_pages`` rather than
    producing an empty page. An empty input yields ``total_pages == 0`` on
    page 1.
    """
    if page_size < 1:
        msg = f"page_size must be at least 1, got {page_size}"
        raise ValueError(msg)

    total_count = len(items)
    total_pages = math.ceil(total_count / page_size)
    current = max(1, min(page, total_pages)) if total_pages else 1

    start = (current - 1) * page_size
    return Page(
        items=list(items[start : start + page_size]),
        total_count=total_count,
        total_pages=total_pages,
        current_page=current,
        has_next=current < total_pages,
        has_previous=current > 1,
    )

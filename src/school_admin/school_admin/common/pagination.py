from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Generic, Sequence, TypeVar, Union

T = TypeVar("T")


@dataclass(frozen=True)
class Page(Generic[T]):
    items: list[T]
    page: int
    per_page: int
    total_items: int
    total_pages: int

    @property
    def first_index(self) -> int:
        """1-based index of the first item shown ("1 a 5 de 12 resultados")."""
        if self.total_items == 0:
            return 0
        return (self.page - 1) * self.per_page + 1

    @property
    def last_index(self) -> int:
        return min(self.page * self.per_page, self.total_items)

    @property
    def has_prev(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages


def paginate(items: Sequence[T], page: int, per_page: int) -> Page[T]:
    per_page = max(1, int(per_page))
    total_items = len(items)
    total_pages = max(1, math.ceil(total_items / per_page))
    page = min(max(1, int(page)), total_pages)
    start = (page - 1) * per_page
    return Page(
        items=list(items[start:start + per_page]),
        page=page,
        per_page=per_page,
        total_items=total_items,
        total_pages=total_pages,
    )


def visible_pages(current: int, total: int, delta: int = 2) -> list[Union[int, str]]:
    """Page links with ellipses: [1, '...', 4, 5, 6, '...', 10]."""
    if total <= 1:
        return [1]
    middle = list(range(max(2, current - delta), min(total - 1, current + delta) + 1))
    out: list[Union[int, str]] = [1]
    if current - delta > 2:
        out.append("...")
    out.extend(middle)
    if current + delta < total - 1:
        out.append("...")
    out.append(total)
    return out

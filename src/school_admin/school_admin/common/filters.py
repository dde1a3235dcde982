"""Composable list filters.

Every predicate looks at one field of an item and the list view ANDs them
together. Ordering is the caller's business: sort first, then filter.
"""
from __future__ import annotations

from datetime import date, timedelta
from typing import Any, Callable, Iterable, Optional, Sequence, TypeVar

from ..core.enums import DatePreset
from .datetime_utils import DateLike, as_day, now_local, week_bounds
from .text import matches

T = TypeVar("T")
Predicate = Callable[[T], bool]
Getter = Callable[[T], Any]


def apply_filters(items: Iterable[T], predicates: Sequence[Predicate]) -> list[T]:
    items = list(items)
    if not predicates:
        return items
    return [item for item in items if all(p(item) for p in predicates)]


def sort_by_id_desc(items: Iterable[T], *, key: Callable[[T], int] = lambda x: x.id) -> list[T]:
    """Newest first. ``sorted`` is stable so equal ids keep their order."""
    return sorted(items, key=key, reverse=True)


def field_equals(getter: Getter, value: Any) -> Predicate:
    return lambda item: getter(item) == value


def text_contains(getters: Sequence[Getter], needle: str) -> Predicate:
    """Free-text match over one or several fields (any of them may match)."""

    def predicate(item) -> bool:
        return any(matches(g(item) or "", needle) for g in getters)

    return predicate


def preset_range(preset: DatePreset, today: date) -> tuple[date, date]:
    """Inclusive [first, last] day range a date preset covers on ``today``."""
    if preset == DatePreset.TODAY:
        return today, today
    if preset == DatePreset.YESTERDAY:
        y = today - timedelta(days=1)
        return y, y
    if preset == DatePreset.WEEK:
        return week_bounds(today)
    if preset == DatePreset.MONTH:
        first = today.replace(day=1)
        nxt = (first + timedelta(days=32)).replace(day=1)
        return first, nxt - timedelta(days=1)
    if preset == DatePreset.YEAR:
        return today.replace(month=1, day=1), today.replace(month=12, day=31)
    raise ValueError(f"Unknown date preset: {preset!r}")


def date_preset(getter: Getter, preset: DatePreset, *, now: Optional[Callable[[], DateLike]] = None) -> Predicate:
    """Membership in today/yesterday/this week/month/year.

    The clock is read on every call, never captured when the predicate is
    built, so a long-lived predicate follows midnight.
    """
    clock = now or now_local

    def predicate(item) -> bool:
        value = getter(item)
        if value is None:
            return False
        first, last = preset_range(preset, as_day(clock()))
        return first <= as_day(value) <= last

    return predicate


def date_between(getter: Getter, start: Optional[date], end: Optional[date]) -> Predicate:
    """Inclusive range. Only filters when both bounds are given."""

    def predicate(item) -> bool:
        if start is None or end is None:
            return True
        value = getter(item)
        if value is None:
            return False
        return start <= as_day(value) <= end

    return predicate


def same_day(getter: Getter, day: date) -> Predicate:
    def predicate(item) -> bool:
        value = getter(item)
        return value is not None and as_day(value) == day

    return predicate


def hour_equals(getter: Getter, hour: int) -> Predicate:
    def predicate(item) -> bool:
        value = getter(item)
        return value is not None and getattr(value, "hour", None) == hour

    return predicate


def number_between(getter: Getter, low: Optional[float] = None, high: Optional[float] = None) -> Predicate:
    def predicate(item) -> bool:
        value = getter(item)
        if value is None:
            return False
        if low is not None and value < low:
            return False
        if high is not None and value > high:
            return False
        return True

    return predicate

"""Composable list filters used by the dashboard list views.

Filters on different fields are ANDed; the values of a single multi-select
filter are ORed. Empty selections and blank range bounds filter nothing.
"""
from __future__ import annotations

import math
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Generic, Protocol, TypeVar

from routinedesk.schemas.dashboard import Page

T = TypeVar("T")

Bound = float | int | str | None


class Filter(Protocol[T]):
    def matches(self, item: T) -> bool: ...


def _as_values(value: Any) -> list[Any]:
    if value is None:
        return []
    if isinstance(value, (list, tuple, set, frozenset)):
        return list(value)
    return [value]


def _parse_bound(value: Bound) -> float | None:
    if value is None:
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    bound = float(value)
    if not math.isfinite(bound):
        raise ValueError(f"Range bound must be a finite number: {value!r}")
    return bound


def _parse_date(value: str | None) -> date | None:
    if value is None or not value.strip():
        return None
    return date.fromisoformat(value.strip())


@dataclass(frozen=True)
class MultiSelectFilter(Generic[T]):
    getter: Callable[[T], Any]
    values: Sequence[Any] = ()

    def matches(self, item: T) -> bool:
        if not self.values:
            return True
        wanted = set(self.values)
        return any(value in wanted for value in _as_values(self.getter(item)))


@dataclass(frozen=True)
class RangeFilter(Generic[T]):
    getter: Callable[[T], float | int | None]
    minimum: Bound = None
    maximum: Bound = None

    def matches(self, item: T) -> bool:
        low = _parse_bound(self.minimum)
        high = _parse_bound(self.maximum)
        if low is None and high is None:
            return True
        value = self.getter(item)
        if value is None:
            return False
        if low is not None and value < low:
            return False
        if high is not None and value > high:
            return False
        return True


@dataclass(frozen=True)
class DateRangeFilter(Generic[T]):
    """Inclusive ISO date range; items without a date fail once a bound is set."""

    getter: Callable[[T], str | None]
    start: str | None = None
    end: str | None = None

    def matches(self, item: T) -> bool:
        low = _parse_date(self.start)
        high = _parse_date(self.end)
        if low is None and high is None:
            return True
        raw = self.getter(item)
        if not raw:
            return False
        value = date.fromisoformat(raw)
        if low is not None and value < low:
            return False
        if high is not None and value > high:
            return False
        return True


@dataclass(frozen=True)
class SearchFilter(Generic[T]):
    term: str | None
    fields: Sequence[Callable[[T], Any]] = field(default_factory=tuple)

    def matches(self, item: T) -> bool:
        needle = (self.term or "").strip().lower()
        if not needle:
            return True
        for getter in self.fields:
            for value in _as_values(getter(item)):
                if value is not None and needle in str(value).lower():
                    return True
        return False


def apply_filters(items: Iterable[T], filters: Iterable[Filter[T]]) -> list[T]:
    active = list(filters)
    return [item for item in items if all(item_filter.matches(item) for item_filter in active)]


def paginate(items: Sequence[T], page: int = 1, page_size: int = 20) -> Page[T]:
    page_size = max(1, page_size)
    total_items = len(items)
    total_pages = max(1, math.ceil(total_items / page_size))
    page = min(max(1, page), total_pages)
    start = (page - 1) * page_size
    return Page(
        items=list(items[start:start + page_size]),
        page=page,
        pageSize=page_size,
        totalItems=total_items,
        totalPages=total_pages,
    )

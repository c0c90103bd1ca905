from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Sequence

from cachetools import LRUCache

from .models import ALL_CATEGORIES, ALL_DATASETS, CATEGORIES, FilterState, GlossaryMetric
from .store import MetricStore

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TableView:
    pinned: list[GlossaryMetric]
    groups: dict[str, list[GlossaryMetric]]


def matches_search(metric: GlossaryMetric, search: str) -> bool:
    if not search:
        return True
    needle = search.lower()
    if needle in metric.name.lower() or needle in metric.description.lower():
        return True
    return any(needle in s.lower() for s in metric.synonyms)


def _matches_dataset(metric: GlossaryMetric, dataset: str) -> bool:
    return dataset == ALL_DATASETS or metric.dataset == dataset


def _matches_category(metric: GlossaryMetric, category: str) -> bool:
    return category == ALL_CATEGORIES or metric.category == category


def filter_metrics(metrics: Iterable[GlossaryMetric], state: FilterState) -> list[GlossaryMetric]:
    return [
        m
        for m in metrics
        if matches_search(m, state.search)
        and _matches_category(m, state.category)
        and _matches_dataset(m, state.dataset)
    ]


def category_counts(metrics: Sequence[GlossaryMetric], search: str, dataset: str) -> dict[str, int]:
    """How many metrics each category pill would show.

    The selected category is not an input: every count applies
    only the search and dataset filters.
    """
    visible = [m for m in metrics if _matches_dataset(m, dataset) and matches_search(m, search)]
    counts = {cat: 0 for cat in CATEGORIES}
    counts[ALL_CATEGORIES] = len(visible)
    for m in visible:
        if m.category in counts and m.category != ALL_CATEGORIES:
            counts[m.category] += 1
    return counts


def favorites_first(metrics: Sequence[GlossaryMetric], favorites: frozenset[str] | set[str]) -> list[GlossaryMetric]:
    pinned = [m for m in metrics if m.id in favorites]
    rest = [m for m in metrics if m.id not in favorites]
    return pinned + rest


def group_by_category(metrics: Iterable[GlossaryMetric]) -> dict[str, list[GlossaryMetric]]:
    groups: dict[str, list[GlossaryMetric]] = {}
    for m in metrics:
        groups.setdefault(m.category, []).append(m)
    return groups


def table_view(metrics: Sequence[GlossaryMetric], favorites: frozenset[str] | set[str]) -> TableView:
    return TableView(
        pinned=[m for m in metrics if m.id in favorites],
        groups=group_by_category(m for m in metrics if m.id not in favorites),
    )


class QueryEngine:
    """Derived views over a :class:`MetricStore`, memoized per store version."""

    def __init__(self, store: MetricStore, cache_size: int = 256):
        self.store = store
        self.cache = LRUCache(maxsize=max(1, cache_size))

    def _cached(self, kind: str, state: FilterState, compute):
        key = (self.store.version, kind, state)
        if key in self.cache:
            return self.cache[key]
        _logger.debug("query cache miss: %s %s", kind, state)
        value = compute()
        self.cache[key] = value
        return value

    def list(self, state: FilterState) -> list[GlossaryMetric]:
        result = self._cached(
            "list",
            state,
            lambda: favorites_first(filter_metrics(self.store.all(), state), self.store.favorites()),
        )
        return list(result)

    def category_counts(self, state: FilterState) -> dict[str, int]:
        # category is not part of the key: counts never depend on it
        key_state = FilterState(search=state.search, dataset=state.dataset)
        result = self._cached(
            "counts",
            key_state,
            lambda: category_counts(self.store.all(), state.search, state.dataset),
        )
        return dict(result)

    def table_view(self, state: FilterState) -> TableView:
        result = self._cached(
            "table",
            state,
            lambda: table_view(filter_metrics(self.store.all(), state), self.store.favorites()),
        )
        return TableView(
            pinned=list(result.pinned),
            groups={k: list(v) for k, v in result.groups.items()},
        )

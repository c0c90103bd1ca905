from __future__ import annotations

import logging
from dataclasses import replace
from threading import Lock
from typing import Callable, Iterable

from .drafts import MetricDraft
from .ids import IdGenerator, uuid_ids
from .models import GlossaryMetric

_logger = logging.getLogger(__name__)


class MetricStore:
    """Owns the metric collection and the favorite-id set.

    Every mutation swaps in a new list/frozenset, so a reader holding the
    result of :meth:`all` or :meth:`favorites` never sees a partial change.
    """

    def __init__(self, ids: IdGenerator | None = None):
        self._lock = Lock()
        self._ids = ids or uuid_ids()
        self._metrics: list[GlossaryMetric] = []
        self._favorites: frozenset[str] = frozenset()
        self._version = 0

    @property
    def version(self) -> int:
        return self._version

    def load(self, metrics: Iterable[GlossaryMetric]) -> int:
        with self._lock:
            seen = {m.id for m in self._metrics}
            added: list[GlossaryMetric] = []
            for m in metrics:
                if m.id in seen:
                    _logger.warning("load: skipping duplicate metric id %s", m.id)
                    continue
                seen.add(m.id)
                added.append(m)
            self._metrics = [*self._metrics, *added]
            self._version += 1
        _logger.info("loaded %d metrics", len(added))
        return len(added)

    def all(self) -> list[GlossaryMetric]:
        return list(self._metrics)

    def favorites(self) -> frozenset[str]:
        return self._favorites

    def is_favorite(self, metric_id: str) -> bool:
        return metric_id in self._favorites

    def get_by_id(self, metric_id: str) -> GlossaryMetric | None:
        for m in self._metrics:
            if m.id == metric_id:
                return m
        return None

    def _fresh_id(self) -> str:
        taken = {m.id for m in self._metrics}
        new_id = self._ids()
        while new_id in taken:
            new_id = self._ids()
        return new_id

    def create(self, draft: MetricDraft) -> GlossaryMetric:
        with self._lock:
            metric = draft.to_metric(self._fresh_id())
            self._metrics = [*self._metrics, metric]
            self._version += 1
        _logger.info("created metric %s (%s)", metric.id, metric.name)
        return metric

    def update(self, metric_id: str, new_version: GlossaryMetric) -> GlossaryMetric | None:
        return self.apply(metric_id, lambda old: new_version)

    def apply(
        self, metric_id: str, fn: Callable[[GlossaryMetric], GlossaryMetric]
    ) -> GlossaryMetric | None:
        """Replace the record with ``fn(current)`` as one step under the lock.

        The result always keeps ``metric_id``. Unknown ids are a no-op.
        """
        with self._lock:
            old = self.get_by_id(metric_id)
            if old is None:
                _logger.warning("update: no metric with id %s", metric_id)
                return None
            new_version = replace(fn(old), id=metric_id)
            self._metrics = [new_version if m.id == metric_id else m for m in self._metrics]
            self._version += 1
        _logger.info("updated metric %s", metric_id)
        return new_version

    def delete(self, metric_id: str) -> None:
        with self._lock:
            remaining = [m for m in self._metrics if m.id != metric_id]
            if len(remaining) == len(self._metrics):
                _logger.warning("delete: no metric with id %s", metric_id)
            else:
                _logger.info("deleted metric %s", metric_id)
            self._metrics = remaining
            self._favorites = self._favorites - {metric_id}
            self._version += 1

    def toggle_favorite(self, metric_id: str) -> None:
        with self._lock:
            if metric_id in self._favorites:
                self._favorites = self._favorites - {metric_id}
            else:
                self._favorites = self._favorites | {metric_id}
            self._version += 1

from __future__ import annotations

import logging

from .assets import load_seed_metrics
from .changelog import Clock, history, track_changes, utc_now
from .config import settings
from .drafts import MetricDraft, validate_draft
from .ids import IdGenerator, uuid_ids
from .lineage import Lineage, depends_on, lineage, referenced_by
from .models import ChangelogEntry, FilterState, GlossaryMetric
from .query import QueryEngine, TableView
from .store import MetricStore

_logger = logging.getLogger(__name__)


class GlossaryService:
    """Read and write operations offered to the view layer.

    Drafts are validated here, before the store is touched; an invalid draft
    raises :class:`~glossary.drafts.DraftRejected` and nothing is saved.
    """

    def __init__(
        self,
        store: MetricStore | None = None,
        *,
        actor: str | None = None,
        ids: IdGenerator | None = None,
        clock: Clock = utc_now,
        cache_size: int | None = None,
    ):
        self.ids = ids or uuid_ids(settings.id_prefix)
        self.store = store or MetricStore(ids=self.ids)
        self.actor = actor or settings.actor_name
        self.clock = clock
        self.queries = QueryEngine(
            self.store,
            cache_size=settings.query_cache_size if cache_size is None else cache_size,
        )

    # -----------------------------
    # Read
    # -----------------------------

    def get(self, metric_id: str) -> GlossaryMetric | None:
        return self.store.get_by_id(metric_id)

    def list(self, state: FilterState | None = None) -> list[GlossaryMetric]:
        return self.queries.list(state or FilterState())

    def category_counts(self, state: FilterState | None = None) -> dict[str, int]:
        return self.queries.category_counts(state or FilterState())

    def table_view(self, state: FilterState | None = None) -> TableView:
        return self.queries.table_view(state or FilterState())

    def depends_on(self, metric_id: str) -> list[GlossaryMetric]:
        metric = self.store.get_by_id(metric_id)
        if metric is None:
            return []
        return depends_on(metric, self.store.all())

    def referenced_by(self, metric_id: str) -> list[GlossaryMetric]:
        metric = self.store.get_by_id(metric_id)
        if metric is None:
            return []
        return referenced_by(metric, self.store.all())

    def lineage(self, metric_id: str) -> Lineage | None:
        metric = self.store.get_by_id(metric_id)
        if metric is None:
            return None
        return lineage(metric, self.store.all())

    def history(self, metric_id: str) -> list[ChangelogEntry]:
        metric = self.store.get_by_id(metric_id)
        if metric is None:
            return []
        return history(metric)

    def is_favorite(self, metric_id: str) -> bool:
        return self.store.is_favorite(metric_id)

    # -----------------------------
    # Write
    # -----------------------------

    def create(self, draft: MetricDraft) -> GlossaryMetric:
        validate_draft(draft)
        return self.store.create(draft)

    def update(self, metric_id: str, draft: MetricDraft) -> GlossaryMetric | None:
        validate_draft(draft)

        def _edit(old: GlossaryMetric) -> GlossaryMetric:
            new = track_changes(
                old,
                draft.to_metric(metric_id),
                actor=self.actor,
                ids=self.ids,
                clock=self.clock,
            )
            added = len(new.changelog) - len(old.changelog)
            if added:
                _logger.info("metric %s: %d field(s) changed", metric_id, added)
            return new

        # diff and write happen against the same stored version
        return self.store.apply(metric_id, _edit)

    def delete(self, metric_id: str) -> None:
        self.store.delete(metric_id)

    def toggle_favorite(self, metric_id: str) -> bool:
        self.store.toggle_favorite(metric_id)
        return self.store.is_favorite(metric_id)


def build_service() -> GlossaryService:
    service = GlossaryService()
    if settings.seed_on_startup:
        service.store.load(load_seed_metrics(settings.seed_path))
    return service

from __future__ import annotations

from dataclasses import dataclass, field

from .ids import IdGenerator
from .models import STORABLE_CATEGORIES, STORABLE_DATASETS, GlossaryMetric, SqlPattern


class DraftRejected(ValueError):
    """Raised when a draft is not fit to be saved."""


def parse_synonyms(text: str) -> list[str]:
    return [s.strip() for s in (text or "").split(",") if s.strip()]


def format_synonyms(synonyms) -> str:
    return ", ".join(synonyms)


@dataclass
class MetricDraft:
    """Edit-form state for a metric.

    ``id`` is unset while creating and set while editing. Unlike
    :class:`GlossaryMetric` the draft is mutable and carries no changelog;
    the history of a saved metric is owned by the change tracker.
    """

    name: str = ""
    description: str = ""
    category: str = "Metric"
    dataset: str = "Sales"
    synonyms: list[str] = field(default_factory=list)
    sql_patterns: list[SqlPattern] = field(default_factory=list)
    sample_question: str = ""
    related_metric_ids: list[str] = field(default_factory=list)
    id: str | None = None

    @classmethod
    def from_metric(cls, metric: GlossaryMetric) -> "MetricDraft":
        return cls(
            id=metric.id,
            name=metric.name,
            description=metric.description,
            category=metric.category,
            dataset=metric.dataset,
            synonyms=list(metric.synonyms),
            sql_patterns=list(metric.sql_patterns),
            sample_question=metric.sample_question,
            related_metric_ids=list(metric.related_metric_ids),
        )

    def to_metric(self, metric_id: str, changelog=()) -> GlossaryMetric:
        return GlossaryMetric(
            id=metric_id,
            name=self.name,
            description=self.description,
            category=self.category,
            dataset=self.dataset,
            synonyms=tuple(self.synonyms),
            sql_patterns=tuple(self.sql_patterns),
            sample_question=self.sample_question,
            related_metric_ids=tuple(self.related_metric_ids or ()),
            changelog=tuple(changelog or ()),
        )

    def set_synonyms_text(self, text: str) -> None:
        self.synonyms = parse_synonyms(text)


def blank_draft(ids: IdGenerator) -> MetricDraft:
    return MetricDraft(sql_patterns=[SqlPattern(id=ids(), label="", query="")])


def validate_draft(draft: MetricDraft) -> None:
    reasons: list[str] = []
    if not (draft.name or "").strip():
        reasons.append("name is required")
    if draft.category not in STORABLE_CATEGORIES:
        reasons.append(f"unknown category: {draft.category!r}")
    if draft.dataset not in STORABLE_DATASETS:
        reasons.append(f"unknown dataset: {draft.dataset!r}")
    if reasons:
        raise DraftRejected("; ".join(reasons))

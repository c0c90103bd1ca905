from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from .models import GlossaryMetric


@dataclass(frozen=True)
class Lineage:
    metric: GlossaryMetric
    depends_on: list[GlossaryMetric]
    referenced_by: list[GlossaryMetric]

    @property
    def is_isolated(self) -> bool:
        return not self.depends_on and not self.referenced_by


def depends_on(metric: GlossaryMetric, all_metrics: Sequence[GlossaryMetric]) -> list[GlossaryMetric]:
    by_id = {}
    for m in all_metrics:
        by_id.setdefault(m.id, m)
    # dangling ids are dropped, duplicates are kept
    return [by_id[rid] for rid in metric.related_metric_ids if rid in by_id]


def referenced_by(metric: GlossaryMetric, all_metrics: Sequence[GlossaryMetric]) -> list[GlossaryMetric]:
    return [m for m in all_metrics if m.id != metric.id and metric.id in m.related_metric_ids]


def related_names(metric: GlossaryMetric, all_metrics: Sequence[GlossaryMetric]) -> list[str]:
    return [m.name for m in depends_on(metric, all_metrics)]


def lineage(metric: GlossaryMetric, all_metrics: Sequence[GlossaryMetric]) -> Lineage:
    return Lineage(
        metric=metric,
        depends_on=depends_on(metric, all_metrics),
        referenced_by=referenced_by(metric, all_metrics),
    )

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field

ALL_CATEGORIES = "All"
ALL_DATASETS = "All Datasets"

CATEGORIES = (
    ALL_CATEGORIES,
    "Calculated",
    "Core Entity",
    "Customer",
    "Financial",
    "Marketing",
    "Metric",
    "Product",
    "Segment",
    "Status",
    "Treatment Type",
)

DATASETS = (
    ALL_DATASETS,
    "Sales",
    "Marketing",
    "Finance",
    "Operations",
    "Customer",
    "Product",
)

# values that may be stored on a metric (wildcards are filter-only)
STORABLE_CATEGORIES = tuple(c for c in CATEGORIES if c != ALL_CATEGORIES)
STORABLE_DATASETS = tuple(d for d in DATASETS if d != ALL_DATASETS)


@dataclass(frozen=True)
class SqlPattern:
    id: str
    label: str
    query: str


@dataclass(frozen=True)
class ChangelogEntry:
    id: str
    timestamp: dt.datetime
    field: str
    old_value: str
    new_value: str
    user: str


@dataclass(frozen=True)
class GlossaryMetric:
    id: str
    name: str
    description: str = ""
    category: str = "Metric"
    dataset: str = "Sales"
    synonyms: tuple[str, ...] = ()
    sql_patterns: tuple[SqlPattern, ...] = ()
    sample_question: str = ""
    related_metric_ids: tuple[str, ...] = ()
    changelog: tuple[ChangelogEntry, ...] = field(default=(), repr=False)


@dataclass(frozen=True)
class FilterState:
    search: str = ""
    category: str = ALL_CATEGORIES
    dataset: str = ALL_DATASETS

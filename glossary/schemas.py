from __future__ import annotations

import datetime as dt

from pydantic import BaseModel, Field

from .drafts import MetricDraft, blank_draft, format_synonyms
from .models import ChangelogEntry, GlossaryMetric, SqlPattern
from .sql_tags import sql_tags


class SqlPatternIn(BaseModel):
    id: str | None = Field(default=None, description="kept when editing, generated when absent")
    label: str = ""
    query: str = ""


class MetricDraftIn(BaseModel):
    name: str = ""
    description: str = ""
    category: str = "Metric"
    dataset: str = "Sales"
    synonyms: list[str] | None = None
    synonyms_text: str | None = Field(default=None, description="comma-separated, used when synonyms is absent")
    sql_patterns: list[SqlPatternIn] = Field(default_factory=list)
    sample_question: str = ""
    related_metric_ids: list[str] = Field(default_factory=list)

    def to_draft(self, ids, metric_id: str | None = None) -> MetricDraft:
        # a new metric without patterns gets the blank pattern row the form shows
        if metric_id is None and not self.sql_patterns:
            draft = blank_draft(ids)
        else:
            draft = MetricDraft(
                id=metric_id,
                sql_patterns=[SqlPattern(id=p.id or ids(), label=p.label, query=p.query) for p in self.sql_patterns],
            )
        draft.name = self.name
        draft.description = self.description
        draft.category = self.category
        draft.dataset = self.dataset
        if self.synonyms is not None:
            draft.synonyms = [s.strip() for s in self.synonyms if s.strip()]
        else:
            draft.set_synonyms_text(self.synonyms_text or "")
        draft.sample_question = self.sample_question
        draft.related_metric_ids = list(self.related_metric_ids)
        return draft

    @classmethod
    def from_draft(cls, draft: MetricDraft) -> "MetricDraftIn":
        return cls(
            name=draft.name,
            description=draft.description,
            category=draft.category,
            dataset=draft.dataset,
            synonyms=list(draft.synonyms),
            synonyms_text=format_synonyms(draft.synonyms),
            sql_patterns=[SqlPatternIn(id=p.id, label=p.label, query=p.query) for p in draft.sql_patterns],
            sample_question=draft.sample_question,
            related_metric_ids=list(draft.related_metric_ids),
        )


class SqlPatternOut(BaseModel):
    id: str
    label: str
    query: str
    tags: dict = Field(default_factory=dict)

    @classmethod
    def from_pattern(cls, p: SqlPattern, with_tags: bool = False) -> "SqlPatternOut":
        return cls(id=p.id, label=p.label, query=p.query, tags=sql_tags(p.query) if with_tags else {})


class ChangelogEntryOut(BaseModel):
    id: str
    timestamp: dt.datetime
    field: str
    old_value: str
    new_value: str
    user: str

    @classmethod
    def from_entry(cls, e: ChangelogEntry) -> "ChangelogEntryOut":
        return cls(
            id=e.id,
            timestamp=e.timestamp,
            field=e.field,
            old_value=e.old_value,
            new_value=e.new_value,
            user=e.user,
        )


class MetricOut(BaseModel):
    id: str
    name: str
    description: str
    category: str
    dataset: str
    synonyms: list[str]
    synonyms_text: str = ""
    sql_patterns: list[SqlPatternOut]
    sample_question: str
    related_metric_ids: list[str]
    changelog_count: int = 0
    is_favorite: bool = False
    related_names: list[str] = Field(default_factory=list)

    @classmethod
    def from_metric(
        cls,
        m: GlossaryMetric,
        is_favorite: bool = False,
        related_names: list[str] | None = None,
        with_tags: bool = False,
    ) -> "MetricOut":
        return cls(
            id=m.id,
            name=m.name,
            description=m.description,
            category=m.category,
            dataset=m.dataset,
            synonyms=list(m.synonyms),
            synonyms_text=format_synonyms(m.synonyms),
            sql_patterns=[SqlPatternOut.from_pattern(p, with_tags) for p in m.sql_patterns],
            sample_question=m.sample_question,
            related_metric_ids=list(m.related_metric_ids),
            changelog_count=len(m.changelog),
            is_favorite=is_favorite,
            related_names=related_names or [],
        )


class MetricRef(BaseModel):
    id: str
    name: str
    category: str
    dataset: str
    description: str

    @classmethod
    def from_metric(cls, m: GlossaryMetric) -> "MetricRef":
        return cls(id=m.id, name=m.name, category=m.category, dataset=m.dataset, description=m.description)


class LineageOut(BaseModel):
    metric: MetricRef
    depends_on: list[MetricRef]
    referenced_by: list[MetricRef]
    is_isolated: bool


class TableViewOut(BaseModel):
    pinned: list[MetricOut]
    groups: dict[str, list[MetricOut]]


class FavoriteOut(BaseModel):
    id: str
    is_favorite: bool


class MetaOut(BaseModel):
    categories: list[str]
    datasets: list[str]

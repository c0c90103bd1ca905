from __future__ import annotations

import datetime as dt
from dataclasses import replace
from typing import Callable

from .ids import IdGenerator
from .models import ChangelogEntry, GlossaryMetric

Clock = Callable[[], dt.datetime]

# (attribute, name recorded on the changelog entry)
TRACKED_FIELDS = (
    ("name", "name"),
    ("description", "description"),
    ("category", "category"),
    ("dataset", "dataset"),
    ("sample_question", "sampleQuestion"),
)
SYNONYMS_FIELD = "synonyms"


def utc_now() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


def diff_fields(old: GlossaryMetric, new: GlossaryMetric) -> list[tuple[str, str, str]]:
    """Field-level differences between two versions of a metric.

    Scalar fields come first in ``TRACKED_FIELDS`` order. The synonym list is
    compared as comma-joined text and yields at most one change, last.
    ``sql_patterns`` and ``related_metric_ids`` are not tracked.
    """
    changes: list[tuple[str, str, str]] = []
    for attr, label in TRACKED_FIELDS:
        before = str(getattr(old, attr))
        after = str(getattr(new, attr))
        if before != after:
            changes.append((label, before, after))

    before = ", ".join(old.synonyms)
    after = ", ".join(new.synonyms)
    if before != after:
        changes.append((SYNONYMS_FIELD, before, after))
    return changes


def track_changes(
    old: GlossaryMetric | None,
    new: GlossaryMetric,
    *,
    actor: str,
    ids: IdGenerator,
    clock: Clock = utc_now,
) -> GlossaryMetric:
    """Return ``new`` with the old changelog plus one entry per changed field."""
    if old is None:
        return replace(new, changelog=())

    now = clock()
    entries = tuple(
        ChangelogEntry(
            id=ids(),
            timestamp=now,
            field=label,
            old_value=before,
            new_value=after,
            user=actor,
        )
        for label, before, after in diff_fields(old, new)
    )
    return replace(new, changelog=tuple(old.changelog) + entries)


def history(metric: GlossaryMetric) -> list[ChangelogEntry]:
    # display order only; storage order stays append order
    return sorted(metric.changelog, key=lambda e: e.timestamp, reverse=True)

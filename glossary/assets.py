from __future__ import annotations

import datetime as dt
from pathlib import Path
from typing import Any

import orjson

from .models import ChangelogEntry, GlossaryMetric, SqlPattern

ROOT = Path(__file__).resolve().parent.parent
ASSETS_DIR = ROOT / "assets"
SEED_METRICS = ASSETS_DIR / "metrics.seed.json"


def _read_json(path: Path) -> Any:
    return orjson.loads(path.read_bytes())


def _parse_timestamp(value: str) -> dt.datetime:
    ts = dt.datetime.fromisoformat(value.replace("Z", "+00:00"))
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=dt.timezone.utc)
    return ts


def metric_from_dict(m: dict) -> GlossaryMetric:
    return GlossaryMetric(
        id=str(m["id"]),
        name=m["name"],
        description=m.get("description", ""),
        category=m.get("category", "Metric"),
        dataset=m.get("dataset", "Sales"),
        synonyms=tuple(m.get("synonyms", [])),
        sql_patterns=tuple(
            SqlPattern(id=str(p["id"]), label=p.get("label", ""), query=p.get("query", ""))
            for p in m.get("sql_patterns", [])
        ),
        sample_question=m.get("sample_question", ""),
        related_metric_ids=tuple(str(r) for r in m.get("related_metric_ids", [])),
        changelog=tuple(
            ChangelogEntry(
                id=str(c["id"]),
                timestamp=_parse_timestamp(c["timestamp"]),
                field=c["field"],
                old_value=c.get("old_value", ""),
                new_value=c.get("new_value", ""),
                user=c.get("user", ""),
            )
            for c in m.get("changelog", [])
        ),
    )


def load_seed_metrics(path: str | Path | None = None) -> list[GlossaryMetric]:
    data = _read_json(Path(path) if path else SEED_METRICS)
    return [metric_from_dict(m) for m in data]

import datetime as dt

import pytest

from glossary.assets import load_seed_metrics
from glossary.ids import CounterIds
from glossary.models import GlossaryMetric
from glossary.service import GlossaryService
from glossary.store import MetricStore

FIXED_NOW = dt.datetime(2026, 3, 1, 9, 0, tzinfo=dt.timezone.utc)


def make_metric(metric_id: str, name: str, **kw) -> GlossaryMetric:
    return GlossaryMetric(id=metric_id, name=name, **kw)


@pytest.fixture
def ids():
    return CounterIds(prefix="n")


@pytest.fixture
def store(ids):
    return MetricStore(ids=ids)


@pytest.fixture
def service(store, ids):
    store.load(load_seed_metrics())
    return GlossaryService(store, actor="Admin", ids=ids, clock=lambda: FIXED_NOW, cache_size=16)

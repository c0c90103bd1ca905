from __future__ import annotations

import itertools
from typing import Callable
from uuid import uuid4

# Produces a fresh id on each call. Metric, SQL pattern and changelog ids all
# come from one of these so tests can swap in a deterministic source.
IdGenerator = Callable[[], str]


def uuid_ids(prefix: str = "") -> IdGenerator:
    def _next() -> str:
        return prefix + uuid4().hex

    return _next


class CounterIds:
    """Monotonic ids: ``prefix1``, ``prefix2``, ..."""

    def __init__(self, prefix: str = "", start: int = 1):
        self.prefix = prefix
        self._counter = itertools.count(start)

    def __call__(self) -> str:
        return f"{self.prefix}{next(self._counter)}"

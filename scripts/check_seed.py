from __future__ import annotations

import sys

from glossary.assets import load_seed_metrics
from glossary.drafts import DraftRejected, MetricDraft, validate_draft


def check(metrics) -> list[str]:
    problems: list[str] = []
    seen: set[str] = set()
    for m in metrics:
        if m.id in seen:
            problems.append(f"duplicate id {m.id}")
        seen.add(m.id)

    for m in metrics:
        try:
            validate_draft(MetricDraft.from_metric(m))
        except DraftRejected as e:
            problems.append(f"{m.id} ({m.name}): {e}")
        for rid in m.related_metric_ids:
            if rid not in seen:
                problems.append(f"{m.id} ({m.name}): dangling related id {rid}")
    return problems


def main():
    path = sys.argv[1] if len(sys.argv) > 1 else None
    metrics = load_seed_metrics(path)
    problems = check(metrics)
    for p in problems:
        print(p)
    if problems:
        sys.exit(1)
    print(f"OK: {len(metrics)} metrics, no problems.")


if __name__ == "__main__":
    main()

from __future__ import annotations

import logging

from fastapi import Depends, FastAPI, HTTPException, Response

from .config import settings
from .drafts import DraftRejected, blank_draft
from .lineage import related_names
from .models import ALL_CATEGORIES, ALL_DATASETS, CATEGORIES, DATASETS, FilterState, GlossaryMetric
from .schemas import (
    ChangelogEntryOut,
    FavoriteOut,
    LineageOut,
    MetaOut,
    MetricDraftIn,
    MetricOut,
    MetricRef,
    TableViewOut,
)
from .service import GlossaryService, build_service

logging.basicConfig(level=getattr(logging, settings.log_level.upper(), logging.INFO))

app = FastAPI(title="Business Glossary", version="0.1.0")

_service: GlossaryService | None = None


def get_service() -> GlossaryService:
    global _service
    if _service is None:
        _service = build_service()
    return _service


def _filters(search: str = "", category: str = ALL_CATEGORIES, dataset: str = ALL_DATASETS) -> FilterState:
    return FilterState(search=search, category=category, dataset=dataset)


def _count_filters(search: str = "", dataset: str = ALL_DATASETS) -> FilterState:
    return FilterState(search=search, dataset=dataset)


def _out(svc: GlossaryService, m: GlossaryMetric, all_metrics: list[GlossaryMetric], with_tags: bool = False) -> MetricOut:
    return MetricOut.from_metric(
        m,
        is_favorite=svc.is_favorite(m.id),
        related_names=related_names(m, all_metrics),
        with_tags=with_tags,
    )


def _require(svc: GlossaryService, metric_id: str) -> GlossaryMetric:
    metric = svc.get(metric_id)
    if metric is None:
        raise HTTPException(status_code=404, detail=f"unknown metric: {metric_id}")
    return metric


@app.get("/health")
def health():
    return {"ok": True}


@app.get("/meta", response_model=MetaOut)
def meta():
    return MetaOut(categories=list(CATEGORIES), datasets=list(DATASETS))


@app.get("/metrics", response_model=list[MetricOut])
def list_metrics(state: FilterState = Depends(_filters), svc: GlossaryService = Depends(get_service)):
    all_metrics = svc.store.all()
    return [_out(svc, m, all_metrics) for m in svc.list(state)]


@app.get("/metrics/counts", response_model=dict[str, int])
def metric_counts(state: FilterState = Depends(_count_filters), svc: GlossaryService = Depends(get_service)):
    return svc.category_counts(state)


@app.get("/metrics/table", response_model=TableViewOut)
def metric_table(state: FilterState = Depends(_filters), svc: GlossaryService = Depends(get_service)):
    all_metrics = svc.store.all()
    view = svc.table_view(state)
    return TableViewOut(
        pinned=[_out(svc, m, all_metrics) for m in view.pinned],
        groups={cat: [_out(svc, m, all_metrics) for m in items] for cat, items in view.groups.items()},
    )


@app.get("/metrics/draft", response_model=MetricDraftIn)
def new_metric_draft(svc: GlossaryService = Depends(get_service)):
    return MetricDraftIn.from_draft(blank_draft(svc.ids))


@app.get("/metrics/{metric_id}", response_model=MetricOut)
def get_metric(metric_id: str, svc: GlossaryService = Depends(get_service)):
    metric = _require(svc, metric_id)
    return _out(svc, metric, svc.store.all(), with_tags=True)


@app.post("/metrics", response_model=MetricOut, status_code=201)
def create_metric(req: MetricDraftIn, svc: GlossaryService = Depends(get_service)):
    try:
        metric = svc.create(req.to_draft(svc.ids))
    except DraftRejected as e:
        raise HTTPException(status_code=422, detail=f"not saved: {e}") from e
    return _out(svc, metric, svc.store.all())


@app.put("/metrics/{metric_id}", response_model=MetricOut)
def update_metric(metric_id: str, req: MetricDraftIn, svc: GlossaryService = Depends(get_service)):
    _require(svc, metric_id)
    try:
        metric = svc.update(metric_id, req.to_draft(svc.ids, metric_id=metric_id))
    except DraftRejected as e:
        raise HTTPException(status_code=422, detail=f"not saved: {e}") from e
    if metric is None:
        raise HTTPException(status_code=404, detail=f"unknown metric: {metric_id}")
    return _out(svc, metric, svc.store.all())


@app.delete("/metrics/{metric_id}", status_code=204)
def delete_metric(metric_id: str, svc: GlossaryService = Depends(get_service)):
    svc.delete(metric_id)
    return Response(status_code=204)


@app.post("/metrics/{metric_id}/favorite", response_model=FavoriteOut)
def toggle_favorite(metric_id: str, svc: GlossaryService = Depends(get_service)):
    return FavoriteOut(id=metric_id, is_favorite=svc.toggle_favorite(metric_id))


@app.get("/metrics/{metric_id}/changelog", response_model=list[ChangelogEntryOut])
def metric_changelog(metric_id: str, svc: GlossaryService = Depends(get_service)):
    _require(svc, metric_id)
    return [ChangelogEntryOut.from_entry(e) for e in svc.history(metric_id)]


@app.get("/metrics/{metric_id}/lineage", response_model=LineageOut)
def metric_lineage(metric_id: str, svc: GlossaryService = Depends(get_service)):
    _require(svc, metric_id)
    view = svc.lineage(metric_id)
    if view is None:
        raise HTTPException(status_code=404, detail=f"unknown metric: {metric_id}")
    return LineageOut(
        metric=MetricRef.from_metric(view.metric),
        depends_on=[MetricRef.from_metric(m) for m in view.depends_on],
        referenced_by=[MetricRef.from_metric(m) for m in view.referenced_by],
        is_isolated=view.is_isolated,
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("glossary.main:app", host="0.0.0.0", port=settings.app_port, reload=settings.app_env == "dev")

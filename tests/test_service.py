import threading
import time

import pytest

from glossary.drafts import DraftRejected, MetricDraft
from glossary.models import FilterState

from conftest import FIXED_NOW


def test_update_records_field_changes(service):
    draft = MetricDraft.from_metric(service.get("3"))
    draft.name = "Sales"
    draft.set_synonyms_text("Income, Earnings, Sales, Turnover")

    updated = service.update("3", draft)

    new_entries = updated.changelog[1:]
    assert [(e.field, e.old_value, e.new_value) for e in new_entries] == [
        ("name", "Revenue", "Sales"),
        ("synonyms", "Income, Earnings, Sales", "Income, Earnings, Sales, Turnover"),
    ]
    assert all(e.user == "Admin" and e.timestamp == FIXED_NOW for e in new_entries)
    assert service.get("3") == updated
    assert service.history("3")[0].timestamp == FIXED_NOW


def test_unchanged_update_adds_no_entries(service):
    before = service.get("1")
    after = service.update("1", MetricDraft.from_metric(before))
    assert after.changelog == before.changelog


def test_rejected_draft_never_reaches_store(service):
    version = service.store.version
    with pytest.raises(DraftRejected):
        service.create(MetricDraft(name=""))
    with pytest.raises(DraftRejected):
        service.update("1", MetricDraft(name=""))
    assert service.store.version == version


def test_update_after_delete_is_ignored(service):
    draft = MetricDraft.from_metric(service.get("2"))
    service.delete("2")
    assert service.update("2", draft) is None
    assert service.get("2") is None


def test_dangling_reference_after_delete(service):
    service.delete("12")
    assert [m.name for m in service.depends_on("1")] == ["Revenue"]
    assert service.get("1").related_metric_ids == ("3", "12")


def test_lineage_of_revenue(service):
    assert [m.name for m in service.depends_on("3")] == ["Invoice", "GMV", "MRR", "ARPU"]
    assert [m.name for m in service.referenced_by("3")] == ["Invoice", "GMV", "AOV", "LTV", "ARPU", "MRR"]
    assert service.lineage("missing") is None
    assert service.depends_on("missing") == []


def test_created_metric_starts_clean(service):
    created = service.create(MetricDraft(name="Gross Margin", category="Calculated", dataset="Finance"))
    assert created.changelog == ()
    assert service.list(FilterState(category="Calculated")) == [created]


def test_favorites_lead_the_list(service):
    assert service.toggle_favorite("12") is True
    assert service.toggle_favorite("5") is True
    listed = [m.id for m in service.list()]
    assert listed[:2] == ["5", "12"]
    assert service.toggle_favorite("12") is False
    assert [m.id for m in service.list()][:1] == ["5"]


def test_counts_use_full_search_rule(service):
    counts = service.category_counts(FilterState(search="revenue", category="Marketing"))
    assert counts["All"] == 5
    assert counts["Financial"] == 3
    assert counts["Customer"] == 1
    assert counts["Metric"] == 1
    assert counts["Marketing"] == 0


def test_table_view_groups_in_first_seen_order(service):
    service.toggle_favorite("1")
    view = service.table_view()
    assert [m.id for m in view.pinned] == ["1"]
    assert list(view.groups) == ["Financial", "Marketing", "Customer", "Product", "Metric"]
    assert "1" not in [m.id for m in view.groups["Financial"]]


def test_concurrent_edits_keep_every_changelog_entry(service):
    created = service.create(MetricDraft(name="Margin", description="d0", category="Calculated", dataset="Finance"))

    def slow_clock():
        time.sleep(0.05)
        return FIXED_NOW

    service.clock = slow_clock

    def edit(description):
        draft = MetricDraft.from_metric(created)
        draft.description = description
        service.update(created.id, draft)

    threads = [threading.Thread(target=edit, args=(d,)) for d in ("d1", "d2")]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    entries = service.get(created.id).changelog
    assert len(entries) == 2
    assert entries[0].old_value == "d0"
    assert entries[1].old_value == entries[0].new_value
    assert service.get(created.id).description == entries[1].new_value

import datetime as dt
from dataclasses import replace

from glossary.changelog import diff_fields, history, track_changes
from glossary.ids import CounterIds
from glossary.models import ChangelogEntry, SqlPattern

from conftest import FIXED_NOW, make_metric


def _track(old, new):
    return track_changes(old, new, actor="Admin", ids=CounterIds(prefix="c"), clock=lambda: FIXED_NOW)


def test_name_and_synonym_changes_produce_two_entries():
    old = make_metric("1", "Revenue", synonyms=("Income",))
    new = replace(old, name="Sales", synonyms=("Income", "Earnings"))

    result = _track(old, new)

    assert [(e.field, e.old_value, e.new_value) for e in result.changelog] == [
        ("name", "Revenue", "Sales"),
        ("synonyms", "Income", "Income, Earnings"),
    ]
    assert all(e.user == "Admin" and e.timestamp == FIXED_NOW for e in result.changelog)
    assert len({e.id for e in result.changelog}) == 2


def test_identical_tracked_fields_add_nothing():
    old = make_metric("1", "Revenue", description="Money in", synonyms=("Income",))
    result = _track(old, replace(old))
    assert result.changelog == ()


def test_sql_patterns_and_related_ids_are_not_tracked():
    old = make_metric("1", "Revenue")
    new = replace(
        old,
        sql_patterns=(SqlPattern(id="s1", label="Total", query="SELECT 1"),),
        related_metric_ids=("2",),
    )
    result = _track(old, new)
    assert result.changelog == ()
    assert result.related_metric_ids == ("2",)


def test_old_changelog_is_a_prefix_of_the_new_one():
    earlier = ChangelogEntry(
        id="c0",
        timestamp=dt.datetime(2025, 1, 1, tzinfo=dt.timezone.utc),
        field="description",
        old_value="",
        new_value="Money in",
        user="Admin",
    )
    old = make_metric("1", "Revenue", description="Money in", changelog=(earlier,))
    new = replace(old, description="Money collected", changelog=())

    result = _track(old, new)

    assert len(result.changelog) > len(old.changelog)
    assert result.changelog[: len(old.changelog)] == old.changelog
    assert result.changelog[-1].field == "description"


def test_fields_are_reported_in_fixed_order():
    old = make_metric("1", "A", description="d", category="Metric", dataset="Sales", sample_question="q", synonyms=("x",))
    new = replace(
        old,
        name="B",
        description="e",
        category="Financial",
        dataset="Finance",
        sample_question="r",
        synonyms=("y",),
    )
    assert [f for f, _, _ in diff_fields(old, new)] == [
        "name",
        "description",
        "category",
        "dataset",
        "sampleQuestion",
        "synonyms",
    ]


def test_creation_starts_with_empty_changelog():
    new = make_metric("1", "Revenue", changelog=(
        ChangelogEntry(id="x", timestamp=FIXED_NOW, field="name", old_value="", new_value="Revenue", user="Admin"),
    ))
    assert _track(None, new).changelog == ()


def test_history_is_most_recent_first_without_touching_storage():
    first = ChangelogEntry(id="a", timestamp=dt.datetime(2025, 1, 1, tzinfo=dt.timezone.utc), field="name", old_value="", new_value="", user="Admin")
    second = ChangelogEntry(id="b", timestamp=dt.datetime(2026, 1, 1, tzinfo=dt.timezone.utc), field="name", old_value="", new_value="", user="Admin")
    metric = make_metric("1", "Revenue", changelog=(first, second))

    assert [e.id for e in history(metric)] == ["b", "a"]
    assert [e.id for e in metric.changelog] == ["a", "b"]

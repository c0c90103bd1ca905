import pytest

from glossary.drafts import DraftRejected, MetricDraft, blank_draft, format_synonyms, parse_synonyms, validate_draft
from glossary.ids import CounterIds

from conftest import make_metric


def test_parse_synonyms_trims_and_drops_empties():
    assert parse_synonyms(" Income, Earnings ,, Sales ,") == ["Income", "Earnings", "Sales"]
    assert parse_synonyms("") == []
    assert format_synonyms(["Income", "Earnings"]) == "Income, Earnings"


def test_blank_draft_seeds_one_pattern():
    draft = blank_draft(CounterIds(prefix="s"))
    assert draft.id is None
    assert draft.category == "Metric" and draft.dataset == "Sales"
    assert [(p.id, p.label, p.query) for p in draft.sql_patterns] == [("s1", "", "")]


def test_from_metric_round_trips_editable_fields():
    m = make_metric("7", "Churn Rate", synonyms=("attrition rate",), related_metric_ids=("6",))
    draft = MetricDraft.from_metric(m)
    draft.set_synonyms_text("attrition rate, customer loss rate")
    result = draft.to_metric("7")
    assert result.synonyms == ("attrition rate", "customer loss rate")
    assert result.related_metric_ids == ("6",)


@pytest.mark.parametrize(
    "draft",
    [
        MetricDraft(name=""),
        MetricDraft(name="   "),
        MetricDraft(name="X", category="All"),
        MetricDraft(name="X", dataset="All Datasets"),
    ],
)
def test_invalid_drafts_are_rejected(draft):
    with pytest.raises(DraftRejected):
        validate_draft(draft)


def test_valid_draft_passes():
    validate_draft(MetricDraft(name="Revenue", category="Financial", dataset="Finance"))

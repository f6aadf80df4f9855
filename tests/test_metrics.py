from __future__ import annotations

import math

from ideabank.filters import FilterCriteria
from ideabank.metrics import (
    compute_overview,
    count_by_status,
    distinct_submitters,
    mean_savings,
    savings_by_subsystem,
    summarize_rows,
    total_savings,
)
from ideabank.views import prepare_view
from tests.conftest import make_idea


def test_total_and_mean():
    ideas = [make_idea(id=str(n), savings=s) for n, s in enumerate([100.0, 200.0, 300.0])]
    assert total_savings(ideas) == 600.0
    assert mean_savings(ideas) == 200.0


def test_empty_aggregates_are_zero():
    assert total_savings([]) == 0.0
    assert mean_savings([]) == 0.0
    assert not math.isnan(mean_savings([]))
    assert distinct_submitters([]) == 0
    assert savings_by_subsystem([]) == []
    assert count_by_status([]) == []


def test_distinct_submitters(sample_ideas):
    assert distinct_submitters(sample_ideas) == 3


def test_savings_by_subsystem_descending_with_top_n(sample_ideas):
    assert savings_by_subsystem(sample_ideas) == [
        {"name": "Chassis", "value": 1000.0},
        {"name": "Electrical", "value": 750.0},
        {"name": "Packaging", "value": 500.0},
        {"name": "Chassis Body", "value": 250.0},
    ]
    assert [g["name"] for g in savings_by_subsystem(sample_ideas, top_n=2)] == ["Chassis", "Electrical"]


def test_savings_by_subsystem_sums_groups():
    ideas = [
        make_idea(id="a", subsystem="Body", savings=10.0),
        make_idea(id="b", subsystem="Trim", savings=25.0),
        make_idea(id="c", subsystem="Body", savings=20.0),
    ]
    assert savings_by_subsystem(ideas) == [{"name": "Body", "value": 30.0}, {"name": "Trim", "value": 25.0}]


def test_count_by_status_first_seen_order(sample_ideas):
    assert count_by_status(sample_ideas) == [
        {"name": "Approved", "value": 2},
        {"name": "In Review", "value": 1},
        {"name": "Rejected", "value": 1},
    ]


def test_compute_overview_payload(sample_ideas):
    f = FilterCriteria(statuses=frozenset({"Approved"}))
    ctx = prepare_view(sample_ideas, f)
    payload = compute_overview(f, ctx, top_n=5)

    assert payload["filters"]["statuses"] == ["Approved"]
    assert payload["kpis"]["idea_count"] == 2
    assert payload["kpis"]["total_savings"] == 1750.0
    assert payload["kpis"]["mean_savings"] == 875.0
    assert payload["kpis"]["distinct_submitters"] == 2
    assert payload["kpis"]["total_savings_display"] == "$1,750"
    assert payload["count_by_status"] == [{"name": "Approved", "value": 2}]
    assert payload["total_ideas"] == 4


def test_compute_overview_empty_filter_result(sample_ideas):
    f = FilterCriteria(subsystems=frozenset({"Nonexistent"}))
    payload = compute_overview(f, prepare_view(sample_ideas, f))
    assert payload["kpis"]["idea_count"] == 0
    assert payload["kpis"]["mean_savings"] == 0.0
    assert payload["savings_by_subsystem"] == []


def test_summarize_rows_keeps_view_order(sample_ideas):
    ctx = prepare_view(sample_ideas, FilterCriteria(), sort="asc")
    df = summarize_rows(ctx)
    assert df["id"].tolist() == ["IB-003", "IB-002", "IB-004", "IB-001"]

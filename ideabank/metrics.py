from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict, List, Sequence

import pandas as pd

from ideabank.data import format_currency_0, ideas_to_frame
from ideabank.filters import FilterCriteria
from ideabank.records import Idea


TOP_SUBSYSTEMS = 8


def total_savings(ideas: Sequence[Idea]) -> float:
    return float(sum(i.savings for i in ideas))


def mean_savings(ideas: Sequence[Idea]) -> float:
    if not ideas:
        return 0.0
    return total_savings(ideas) / len(ideas)


def distinct_submitters(ideas: Sequence[Idea]) -> int:
    return len({i.submitter for i in ideas})


def savings_by_subsystem(ideas: Sequence[Idea], top_n: int = TOP_SUBSYSTEMS) -> List[Dict[str, Any]]:
    df = ideas_to_frame(ideas)
    if df.empty:
        return []
    grouped = (
        df.groupby("subsystem", sort=False)["savings"]
        .sum()
        .sort_values(ascending=False, kind="stable")
        .head(max(0, int(top_n)))
    )
    return [{"name": str(name), "value": float(value)} for name, value in grouped.items()]


def count_by_status(ideas: Sequence[Idea]) -> List[Dict[str, Any]]:
    df = ideas_to_frame(ideas)
    if df.empty:
        return []
    counts = df.groupby("status", sort=False).size()
    return [{"name": str(name), "value": int(value)} for name, value in counts.items()]


def criteria_payload(filters: FilterCriteria) -> Dict[str, Any]:
    payload = asdict(filters)
    for key in ("subsystems", "platforms", "statuses"):
        payload[key] = sorted(payload[key])
    return payload


def compute_overview(filters: FilterCriteria, ctx: Dict[str, Any], *, top_n: int = TOP_SUBSYSTEMS) -> Dict[str, Any]:
    """KPI tiles and grouped aggregates for the filtered set of ``ctx``."""
    filtered: Sequence[Idea] = ctx.get("filtered", [])
    total = total_savings(filtered)
    mean = mean_savings(filtered)

    return {
        "filters": criteria_payload(filters),
        "kpis": {
            "idea_count": len(filtered),
            "total_savings": total,
            "mean_savings": mean,
            "distinct_submitters": distinct_submitters(filtered),
            "total_savings_display": format_currency_0(total),
            "mean_savings_display": format_currency_0(mean),
        },
        "savings_by_subsystem": savings_by_subsystem(filtered, top_n=top_n),
        "count_by_status": count_by_status(filtered),
        "total_ideas": len(ctx.get("all_ideas", [])),
    }


def summarize_rows(ctx: Dict[str, Any]) -> pd.DataFrame:
    """Searched and sorted table rows as a DataFrame, for CSV export."""
    return ideas_to_frame(ctx.get("rows", []))

from __future__ import annotations

from collections import Counter
from typing import Any, Dict, Iterable, List, Literal, Optional, Sequence, Tuple

from ideabank.filters import FilterCriteria, available_years
from ideabank.records import Idea


SortDirection = Literal["asc", "desc"]

SEARCH_FIELDS: Tuple[str, ...] = ("id", "title", "submitter")
EXTENDED_SEARCH_FIELDS: Tuple[str, ...] = SEARCH_FIELDS + ("subsystem", "platform")


def matches_criteria(idea: Idea, criteria: FilterCriteria) -> bool:
    day = idea.date.date()
    if criteria.start_date is not None and day < criteria.start_date:
        return False
    if criteria.end_date is not None and day > criteria.end_date:
        return False
    if criteria.subsystems and idea.subsystem not in criteria.subsystems:
        return False
    if criteria.platforms and idea.platform not in criteria.platforms:
        return False
    if criteria.statuses and idea.status not in criteria.statuses:
        return False
    return True


def apply_filters(ideas: Sequence[Idea], criteria: FilterCriteria) -> List[Idea]:
    return [i for i in ideas if matches_criteria(i, criteria)]


def search_ideas(ideas: Sequence[Idea], term: str, *, search_fields: Iterable[str] = SEARCH_FIELDS) -> List[Idea]:
    """Case-insensitive substring match over ``search_fields``."""
    if not term or not term.strip():
        return list(ideas)
    q = term.lower()
    search_fields = tuple(search_fields)
    return [i for i in ideas if any(q in str(getattr(i, f)).lower() for f in search_fields)]


def sort_ideas(ideas: Sequence[Idea], direction: Optional[SortDirection] = "desc") -> List[Idea]:
    # sorted() is stable in both directions, so ties keep filtered order.
    if direction is None:
        return list(ideas)
    if direction not in ("asc", "desc"):
        raise ValueError(f"unknown sort direction: {direction!r}")
    return sorted(ideas, key=lambda i: i.savings, reverse=direction == "desc")


def unique_options(ideas: Sequence[Idea], field_name: str) -> List[Tuple[str, int]]:
    """Distinct values of ``field_name`` with counts, most frequent first.

    Call this on the unfiltered dataset so filters can always be widened
    again. Ties keep first-seen order.
    """
    counts = Counter(str(getattr(i, field_name)) for i in ideas)
    return counts.most_common()


def filter_options(ideas: Sequence[Idea]) -> Dict[str, Any]:
    return {
        "subsystems": unique_options(ideas, "subsystem"),
        "platforms": unique_options(ideas, "platform"),
        "statuses": unique_options(ideas, "status"),
        "years": available_years(ideas),
    }


def prepare_view(
    ideas: Sequence[Idea],
    criteria: FilterCriteria,
    *,
    query: str = "",
    sort: Optional[SortDirection] = "desc",
    search_fields: Iterable[str] = SEARCH_FIELDS,
) -> Dict[str, Any]:
    """Recompute every list the dashboard shows for one set of criteria.

    ``filtered`` feeds the KPIs and charts; ``rows`` is the searched and
    sorted table. The input sequence is never modified.
    """
    filtered = apply_filters(ideas, criteria)
    searched = search_ideas(filtered, query, search_fields=search_fields)
    rows = sort_ideas(searched, sort)
    return {
        "filters": criteria,
        "query": query,
        "sort": sort,
        "all_ideas": list(ideas),
        "filtered": filtered,
        "rows": rows,
    }

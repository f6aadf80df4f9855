from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import FrozenSet, Iterable, List, Optional, Sequence, Tuple

from ideabank.records import Idea


DEFAULT_SUBSYSTEMS = ("Chassis", "Packaging")
DEFAULT_PLATFORMS = ("Fsr", "Wo", "Ct", "Mwo")
REJECTED_STATUS_TOKEN = "reject"


@dataclass(frozen=True)
class FilterCriteria:
    """Inclusion predicates applied to the full idea list.

    An empty value set allows everything for that field. Date bounds are
    inclusive; None leaves that side open.
    """

    subsystems: FrozenSet[str] = field(default_factory=frozenset)
    platforms: FrozenSet[str] = field(default_factory=frozenset)
    statuses: FrozenSet[str] = field(default_factory=frozenset)
    start_date: Optional[date] = None
    end_date: Optional[date] = None


def year_bounds(start_year: Optional[int], end_year: Optional[int]) -> Tuple[Optional[date], Optional[date]]:
    start = date(start_year, 1, 1) if start_year is not None and date.min.year <= start_year <= date.max.year else None
    end = date(end_year, 12, 31) if end_year is not None and date.min.year <= end_year <= date.max.year else None
    return start, end


def _as_str_set(values: Optional[Iterable[object]]) -> FrozenSet[str]:
    if not values:
        return frozenset()
    return frozenset(str(v) for v in values if v is not None and str(v) != "")


def _as_date(value: object) -> Optional[date]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).strip()[:10])
    except ValueError:
        return None


def _as_int(value: object) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        return int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None


def normalize_filters(raw: dict) -> FilterCriteria:
    """Build criteria from a loosely-typed dict (API body, query string).

    Explicit dates win over years; unparseable bounds are treated as open.
    """
    start = _as_date(raw.get("start_date"))
    end = _as_date(raw.get("end_date"))
    year_start, year_end = year_bounds(_as_int(raw.get("start_year")), _as_int(raw.get("end_year")))

    return FilterCriteria(
        subsystems=_as_str_set(raw.get("subsystems")),
        platforms=_as_str_set(raw.get("platforms")),
        statuses=_as_str_set(raw.get("statuses")),
        start_date=start or year_start,
        end_date=end or year_end,
    )


def available_years(ideas: Sequence[Idea]) -> List[int]:
    return sorted({i.date.year for i in ideas})


def default_filters(ideas: Sequence[Idea]) -> FilterCriteria:
    """Initial criteria for a freshly loaded dataset.

    Preset subsystems and platforms are kept only when present in the data,
    every status except rejected ones is selected, and the date range spans
    the first to the last submission year.
    """
    subsystems = {i.subsystem for i in ideas}
    platforms = {i.platform for i in ideas}
    statuses = {i.status for i in ideas if REJECTED_STATUS_TOKEN not in i.status.lower()}
    years = available_years(ideas)
    start, end = year_bounds(years[0], years[-1]) if years else (None, None)

    return FilterCriteria(
        subsystems=frozenset(s for s in DEFAULT_SUBSYSTEMS if s in subsystems),
        platforms=frozenset(p for p in DEFAULT_PLATFORMS if p in platforms),
        statuses=frozenset(statuses),
        start_date=start,
        end_date=end,
    )

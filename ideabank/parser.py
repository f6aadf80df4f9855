from __future__ import annotations

import logging
import math
import re
from datetime import datetime
from typing import List, Optional

import pandas as pd

from ideabank.records import (
    DEFAULT_SUBMITTER,
    DEFAULT_TITLE,
    REQUIRED_COLUMNS,
    UNKNOWN,
    Idea,
    RawRow,
)


logger = logging.getLogger(__name__)

# Longest leading decimal literal, read the way a browser's parseFloat does.
_LEADING_NUMBER = re.compile(r"[+-]?(?:Infinity|(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?)", re.ASCII)
_CATEGORY_SPLIT = re.compile(r"[\s/]+")
_WORD_START = re.compile(r"\b\w", re.ASCII)
# Keywords pandas resolves against the clock.
_RELATIVE_DATES = frozenset({"now", "today", "tomorrow", "yesterday"})


def split_csv_line(line: str) -> List[str]:
    """Tokenize one physical line into trimmed fields.

    Quoted fields may contain commas and ``""`` escapes. A quoted field that
    spans several physical lines is not supported: every line is tokenized
    on its own.
    """
    values: List[str] = []
    current: List[str] = []
    in_quotes = False
    i = 0
    n = len(line)
    while i < n:
        char = line[i]
        if char == '"' and i + 1 < n and line[i + 1] == '"':
            current.append('"')
            i += 1
        elif char == '"':
            in_quotes = not in_quotes
        elif char == "," and not in_quotes:
            values.append("".join(current).strip())
            current = []
        else:
            current.append(char)
        i += 1
    values.append("".join(current).strip())
    return values


def split_header_line(line: str) -> List[str]:
    headers = []
    for raw in line.split(","):
        h = raw.strip()
        if h.startswith('"'):
            h = h[1:]
        if h.endswith('"'):
            h = h[:-1]
        headers.append(h)
    return headers


def normalize_category(value: Optional[str]) -> str:
    """Title-case a categorical cell: ``"chassis/body"`` -> ``"Chassis Body"``.

    Words are split on whitespace and ``/`` and capitalized, then every
    ASCII word boundary is capitalized again (``"x-ray"`` -> ``"X-Ray"``).
    """
    if not value:
        return UNKNOWN
    trimmed = value.strip()
    if not trimmed:
        return UNKNOWN
    words = _CATEGORY_SPLIT.split(trimmed.lower())
    joined = " ".join(w[:1].upper() + w[1:] for w in words)
    return _WORD_START.sub(lambda m: m.group(0).upper(), joined)


def parse_savings(value: Optional[str]) -> Optional[float]:
    if value is None:
        return None
    cleaned = re.sub(r"[$,]", "", value).lstrip()
    match = _LEADING_NUMBER.match(cleaned)
    if not match:
        return None
    amount = float(match.group(0).replace("Infinity", "inf"))
    if not math.isfinite(amount) or amount <= 0:
        return None
    return amount


def parse_submit_date(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    if value.strip().lower() in _RELATIVE_DATES:
        return None
    try:
        ts = pd.to_datetime(value, errors="coerce")
    except (ValueError, TypeError, OverflowError):
        return None
    if ts is None or pd.isna(ts):
        return None
    if ts.tzinfo is not None:
        ts = ts.tz_convert(None)
    return ts.to_pydatetime()


def build_raw_row(headers: List[str], values: List[str]) -> RawRow:
    row = {header: (values[idx] if idx < len(values) else None) for idx, header in enumerate(headers)}
    return RawRow.from_mapping(row)


def _clean(value: Optional[str]) -> str:
    return (value or "").strip()


def row_to_idea(row: RawRow) -> Optional[Idea]:
    """Validate one row; None means the row is rejected."""
    idea_id = _clean(row.idea_id)
    raw_date = _clean(row.submit_date)
    raw_savings = _clean(row.total_savings)
    if not idea_id or not raw_date or not raw_savings:
        return None

    savings = parse_savings(raw_savings)
    if savings is None:
        return None

    date = parse_submit_date(raw_date)
    if date is None:
        return None

    return Idea(
        id=idea_id,
        title=_clean(row.title or DEFAULT_TITLE),
        subsystem=normalize_category(row.subsystem),
        region=normalize_category(row.region),
        platform=normalize_category(row.platform),
        plant=normalize_category(row.plant),
        status=normalize_category(row.status),
        date=date,
        submitter=_clean(row.requester_email or DEFAULT_SUBMITTER),
        scoping_leader=normalize_category(row.scoping_leader),
        savings=savings,
        link=_clean(row.link),
    )


def parse_ideas(text: str) -> List[Idea]:
    """Parse a full CSV export into Idea records, in input order.

    Malformed rows are dropped. Any string is accepted; text without a data
    line yields an empty list.
    """
    if not isinstance(text, str):
        raise TypeError(f"expected CSV text, got {type(text).__name__}")
    lines = text.split("\n")
    if len(lines) < 2:
        return []

    headers = split_header_line(lines[0])
    missing = [c for c in REQUIRED_COLUMNS if c not in headers]
    if missing:
        logger.warning("export is missing required columns: %s", ", ".join(missing))

    ideas: List[Idea] = []
    rejected = 0
    for line in lines[1:]:
        if not line.strip():
            continue
        idea = row_to_idea(build_raw_row(headers, split_csv_line(line)))
        if idea is None:
            rejected += 1
            continue
        ideas.append(idea)
    logger.debug("parsed %d ideas, rejected %d rows", len(ideas), rejected)
    return ideas

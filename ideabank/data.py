from __future__ import annotations

import logging
import os
from dataclasses import asdict
from functools import lru_cache
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple

import pandas as pd

from ideabank.filters import available_years
from ideabank.parser import parse_ideas
from ideabank.records import IDEA_FIELDS, Idea


logger = logging.getLogger(__name__)

DATA_DIR = Path(os.environ.get("IDEABANK_DATA_DIR") or Path(__file__).resolve().parents[1])
FILE_GLOB = "*.csv"

NO_VALID_DATA_MESSAGE = "No valid data found in spreadsheet."


class NoValidDataError(ValueError):
    """No row of an export survived validation."""

    def __init__(self, message: str = NO_VALID_DATA_MESSAGE) -> None:
        super().__init__(message)


def get_source_files(data_dir: Optional[Path] = None) -> List[Path]:
    return sorted((data_dir or DATA_DIR).glob(FILE_GLOB))


def file_signature(files: List[Path]) -> Tuple[Tuple[str, float], ...]:
    return tuple((str(f), f.stat().st_mtime) for f in files)


def read_export(path: Path) -> str:
    # Sheets exports may carry a BOM in front of the first header.
    return path.read_text(encoding="utf-8-sig")


def ingest_export(text: str) -> List[Idea]:
    """Single-export entry point: parse one export's text.

    Raises NoValidDataError when no row survives validation. The directory
    loader concatenates several files instead and signals emptiness through
    ``require_ideas``.
    """
    ideas = parse_ideas(text)
    if not ideas:
        raise NoValidDataError()
    return ideas


def ideas_to_frame(ideas: Iterable[Idea]) -> pd.DataFrame:
    df = pd.DataFrame([asdict(i) for i in ideas], columns=list(IDEA_FIELDS))
    df["savings"] = pd.to_numeric(df["savings"], errors="coerce").astype(float)
    df["date"] = pd.to_datetime(df["date"])
    return df


def format_currency_0(value: object) -> str:
    if value is None or pd.isna(value):
        return "N/A"
    return f"${float(value):,.0f}"


# ---------------- Public API ----------------
@lru_cache(maxsize=4)
def _load_dashboard_data_cached(files_sig: Tuple[Tuple[str, float], ...]) -> Dict[str, object]:
    ideas: List[Idea] = []
    for name, _ in files_sig:
        path = Path(name)
        parsed = parse_ideas(read_export(path))
        if not parsed:
            logger.warning("no valid rows in %s", path.name)
        ideas.extend(parsed)
    logger.info("loaded %d ideas from %d file(s)", len(ideas), len(files_sig))
    return {
        "files": [Path(name).name for name, _ in files_sig],
        "years": available_years(ideas),
        "ideas": tuple(ideas),
    }


def load_dashboard_data(data_dir: Optional[Path] = None) -> Dict[str, object]:
    files = get_source_files(data_dir)
    if not files:
        return {"files": [], "years": [], "ideas": ()}
    return _load_dashboard_data_cached(file_signature(files))


def require_ideas(data_ctx: Dict[str, object]) -> Tuple[Idea, ...]:
    """Ideas of a loaded context; raises when nothing usable was loaded."""
    ideas = data_ctx.get("ideas") or ()
    if not ideas:
        raise NoValidDataError()
    return tuple(ideas)  # type: ignore[arg-type]

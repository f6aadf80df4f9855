from __future__ import annotations

from dataclasses import dataclass, fields
from datetime import datetime
from typing import Dict, Mapping, Optional, Tuple


DEFAULT_TITLE = "Untitled Project"
DEFAULT_SUBMITTER = "anonymous@enterprise.com"
UNKNOWN = "Unknown"

# Spreadsheet column title -> RawRow field.
IDEA_COLUMNS: Dict[str, str] = {
    "IDEA BANK ID": "idea_id",
    "PROJECT TITLE": "title",
    "SUBSYSTEM": "subsystem",
    "REGION": "region",
    "PLATFORM": "platform",
    "PLANT": "plant",
    "FINAL STATUS": "status",
    "SUBMIT DATE": "submit_date",
    "REQUESTER EMAIL": "requester_email",
    "SCOPING LEADER": "scoping_leader",
    "TOTAL SAVINGS": "total_savings",
    "LINK": "link",
}

REQUIRED_COLUMNS: Tuple[str, ...] = ("IDEA BANK ID", "SUBMIT DATE", "TOTAL SAVINGS")


@dataclass(frozen=True)
class RawRow:
    """One data line after tokenizing, keyed by the fixed column set.

    A column the line does not supply (short row or missing header) is None.
    """

    idea_id: Optional[str] = None
    title: Optional[str] = None
    subsystem: Optional[str] = None
    region: Optional[str] = None
    platform: Optional[str] = None
    plant: Optional[str] = None
    status: Optional[str] = None
    submit_date: Optional[str] = None
    requester_email: Optional[str] = None
    scoping_leader: Optional[str] = None
    total_savings: Optional[str] = None
    link: Optional[str] = None

    @classmethod
    def from_mapping(cls, row: Mapping[str, Optional[str]]) -> "RawRow":
        return cls(**{attr: row.get(header) for header, attr in IDEA_COLUMNS.items()})


@dataclass(frozen=True)
class Idea:
    id: str
    title: str
    subsystem: str
    region: str
    platform: str
    plant: str
    status: str
    date: datetime
    submitter: str
    scoping_leader: str
    savings: float
    link: str = ""


IDEA_FIELDS: Tuple[str, ...] = tuple(f.name for f in fields(Idea))

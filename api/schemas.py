from __future__ import annotations

from datetime import date
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from ideabank.metrics import TOP_SUBSYSTEMS


class IdeaFiltersModel(BaseModel):
    subsystems: List[str] = Field(default_factory=list)
    platforms: List[str] = Field(default_factory=list)
    statuses: List[str] = Field(default_factory=list)
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    start_year: Optional[int] = None
    end_year: Optional[int] = None
    query: str = ""
    sort: Optional[Literal["asc", "desc"]] = "desc"
    extended_search: bool = False
    top_n: int = Field(default=TOP_SUBSYSTEMS, ge=1, le=50)


class OptionCount(BaseModel):
    value: str
    count: int


class MetaOptionsResponse(BaseModel):
    subsystems: List[OptionCount]
    platforms: List[OptionCount]
    statuses: List[OptionCount]
    years: List[int]

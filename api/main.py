from __future__ import annotations

import logging
import math
from dataclasses import asdict
from typing import Any, Dict

import numpy as np
import pandas as pd
from fastapi import FastAPI
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from api.schemas import IdeaFiltersModel, MetaOptionsResponse, OptionCount
from ideabank.data import NoValidDataError, load_dashboard_data, require_ideas
from ideabank.filters import FilterCriteria, default_filters, normalize_filters
from ideabank.metrics import compute_overview, criteria_payload, summarize_rows
from ideabank.views import EXTENDED_SEARCH_FIELDS, SEARCH_FIELDS, filter_options, prepare_view


app = FastAPI(title="Idea Bank API", version="0.1.0")
logger = logging.getLogger(__name__)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000", "http://127.0.0.1:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _filters_from_model(model: IdeaFiltersModel) -> FilterCriteria:
    return normalize_filters(model.model_dump())


def _view_from_model(model: IdeaFiltersModel) -> Dict[str, Any]:
    ideas = require_ideas(load_dashboard_data())
    f = _filters_from_model(model)
    fields = EXTENDED_SEARCH_FIELDS if model.extended_search else SEARCH_FIELDS
    return prepare_view(ideas, f, query=model.query, sort=model.sort, search_fields=fields)


def _json(data: object) -> JSONResponse:
    """Return JSON with safe encoding for pandas/numpy objects."""

    def _safe_float(value: object) -> float | None:
        try:
            out = float(value)  # type: ignore[arg-type]
        except (TypeError, ValueError):
            return None
        if math.isnan(out) or math.isinf(out):
            return None
        return out

    return JSONResponse(
        content=jsonable_encoder(
            data,
            custom_encoder={
                type(pd.NA): lambda _: None,
                np.integer: int,
                float: _safe_float,
                np.floating: _safe_float,
                np.bool_: bool,
                pd.Timestamp: lambda ts: ts.isoformat(),
            },
        )
    )


def _error(exc: Exception, status_code: int = 500) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": str(exc), "type": type(exc).__name__})


@app.get("/meta/options", response_model=MetaOptionsResponse)
def meta_options():
    try:
        ideas = require_ideas(load_dashboard_data())
        opts = filter_options(ideas)
        return MetaOptionsResponse(
            subsystems=[OptionCount(value=v, count=c) for v, c in opts["subsystems"]],
            platforms=[OptionCount(value=v, count=c) for v, c in opts["platforms"]],
            statuses=[OptionCount(value=v, count=c) for v, c in opts["statuses"]],
            years=opts["years"],
        )
    except NoValidDataError as exc:
        return _error(exc, status_code=422)
    except Exception as exc:
        logger.exception("meta_options failed")
        return _error(exc)


@app.get("/meta/defaults")
def meta_defaults():
    try:
        ideas = require_ideas(load_dashboard_data())
        return _json(criteria_payload(default_filters(ideas)))
    except NoValidDataError as exc:
        return _error(exc, status_code=422)
    except Exception as exc:
        logger.exception("meta_defaults failed")
        return _error(exc)


@app.post("/ideas")
def ideas(filters: IdeaFiltersModel):
    try:
        ctx = _view_from_model(filters)
        return _json(
            {
                "filters": criteria_payload(ctx["filters"]),
                "query": ctx["query"],
                "sort": ctx["sort"],
                "count": len(ctx["rows"]),
                "rows": [asdict(i) for i in ctx["rows"]],
            }
        )
    except NoValidDataError as exc:
        return _error(exc, status_code=422)
    except Exception as exc:
        logger.exception("ideas failed")
        return _error(exc)


@app.post("/overview")
def overview(filters: IdeaFiltersModel):
    try:
        ctx = _view_from_model(filters)
        return _json(compute_overview(ctx["filters"], ctx, top_n=filters.top_n))
    except NoValidDataError as exc:
        return _error(exc, status_code=422)
    except Exception as exc:
        logger.exception("overview failed")
        return _error(exc)


@app.post("/export/ideas")
def export_ideas(filters: IdeaFiltersModel):
    try:
        ctx = _view_from_model(filters)
    except NoValidDataError as exc:
        return _error(exc, status_code=422)
    export_df = summarize_rows(ctx)
    csv_bytes = export_df.to_csv(index=False).encode("utf-8")
    return Response(content=csv_bytes, media_type="text/csv", headers={"Content-Disposition": "attachment; filename=ideas.csv"})

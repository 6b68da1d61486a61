"""
GET /productChart/production/{metric}/{organisation_id}: per-shift and overall averages per bucket.
GET /productChart/production/prod_efficiency_home/{organisation_id}
GET /productChart/production/eup_home/{organisation_id}
"""
from typing import Any

from fastapi import APIRouter, Depends

from spintel.db import MetricStore, get_store
from spintel.queries.aggregation import avg, chart_rows, shift_split
from spintel.queries.reports import chart_report
from spintel.utils.report_filters import FilterRequest, get_filter_request
from spintel.utils.time_window import Clock, get_clock

router = APIRouter(prefix="/productChart/production", tags=["production charts"])

TABLE = "production_efficiency"

SHIFT_CHART_COLUMNS: dict[str, str] = {
    "efficiency": "production_efficiency",
    "kgs": "kgs",
    "gps": "gps",
    "utilization": "u%",
    "eup": "eup",
}

PROD_EFFICIENCY_HOME_METRICS = [
    avg("kgs"),
    avg("utilization_percentage", "u%"),
    avg("production_efficiency"),
    avg("gps"),
]

EUP_HOME_METRICS = [
    avg("eup"),
    avg("utilization_percentage", "u%"),
    avg("production_efficiency"),
]


def _add_shift_chart(slug: str, column: str) -> None:
    metrics = shift_split(avg(column))

    def shift_chart(
        filters: FilterRequest = Depends(get_filter_request),
        store: MetricStore = Depends(get_store),
        clock: Clock = Depends(get_clock),
    ) -> list[dict[str, Any]]:
        return chart_rows(chart_report(filters, store, clock, TABLE, metrics))

    router.add_api_route(
        f"/{slug}/{{organisation_id}}",
        shift_chart,
        methods=["GET"],
        name=f"production_{slug}_chart",
        summary=f"Average {column} per bucket for shifts 1-3 and overall",
    )


for _slug, _column in SHIFT_CHART_COLUMNS.items():
    _add_shift_chart(_slug, _column)


@router.get("/prod_efficiency_home/{organisation_id}")
def prod_efficiency_home_chart(
    filters: FilterRequest = Depends(get_filter_request),
    store: MetricStore = Depends(get_store),
    clock: Clock = Depends(get_clock),
) -> list[dict[str, Any]]:
    return chart_rows(chart_report(filters, store, clock, TABLE, PROD_EFFICIENCY_HOME_METRICS))


@router.get("/eup_home/{organisation_id}")
def eup_home_chart(
    filters: FilterRequest = Depends(get_filter_request),
    store: MetricStore = Depends(get_store),
    clock: Clock = Depends(get_clock),
) -> list[dict[str, Any]]:
    return chart_rows(chart_report(filters, store, clock, TABLE, EUP_HOME_METRICS))

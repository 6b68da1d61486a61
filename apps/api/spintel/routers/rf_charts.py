"""
GET /rfCharts/{section}/{metric}/{organisation_id}: average of one ring-frame loss column per bucket.
GET /rfCharts/loss-summary/{organisation_id}: allocated spindles and loss categories per bucket.
"""
from decimal import Decimal
from typing import Any

from fastapi import APIRouter, Depends

from spintel.db import MetricStore, get_store
from spintel.queries.aggregation import avg, chart_rows, total
from spintel.queries.catalog import RF_LOSS_GROUPS
from spintel.queries.reports import chart_report
from spintel.utils.percentages import ZERO, to_number
from spintel.utils.report_filters import FilterRequest, QuarterCalendar, get_filter_request
from spintel.utils.time_window import Clock, get_clock

router = APIRouter(prefix="/rfCharts", tags=["rf charts"])

TABLE = "rf_utilisation"

RF_CHART_COLUMNS: dict[str, dict[str, str]] = {
    "mechanical": {
        "routine-maintainance": "routine_maintainance",
        "preventive-maintainance": "preventive_maintainance",
        "mechanical-breakdown": "mechanical_breakdown",
    },
    "electrical": {
        "electrical-breakdown": "electrical_breakdown",
        "planned-maintainance": "planned_maintainance",
        "power-failure": "power_failure",
    },
    "labour": {
        "labour-absentism": "labour_absentism",
        "labour-unrest": "labour_unrest",
        "labour-shortage": "labour_shortage",
        "doff-delay": "doff_delay",
    },
    "process": {
        "bobbin-shortage": "bobbin_shortage",
        "lot-count-change": "lot_count_change",
        "lot-count-runout": "lot_count_runout",
        "quality-checking": "quality_checking",
        "quality-deviation": "quality_deviation",
        "traveller-change": "traveller_change",
    },
}

LOSS_SUMMARY_METRICS = [
    total("allocated_spindle"),
    *(total(name, *columns) for name, columns in RF_LOSS_GROUPS.items()),
]


def _add_column_chart(section: str, slug: str, column: str) -> None:
    metrics = [avg(f"avg_{column}", column)]

    def column_chart(
        filters: FilterRequest = Depends(get_filter_request),
        store: MetricStore = Depends(get_store),
        clock: Clock = Depends(get_clock),
    ) -> list[dict[str, Any]]:
        return chart_rows(chart_report(filters, store, clock, TABLE, metrics))

    router.add_api_route(
        f"/{section}/{slug}/{{organisation_id}}",
        column_chart,
        methods=["GET"],
        name=f"rf_{column}_chart",
        summary=f"Average {column} per bucket",
    )


for _section, _slugs in RF_CHART_COLUMNS.items():
    for _slug, _column in _slugs.items():
        _add_column_chart(_section, _slug, _column)


def _zero_filled(values: dict[str, Decimal | None]) -> dict[str, Any]:
    return {k: to_number(v if v is not None else ZERO) for k, v in values.items()}


@router.get("/loss-summary/{organisation_id}")
def loss_summary_chart(
    filters: FilterRequest = Depends(get_filter_request),
    store: MetricStore = Depends(get_store),
    clock: Clock = Depends(get_clock),
) -> list[dict[str, Any]]:
    """Summed allocated spindles and mechanical/electrical/labour/process losses. Calendar quarters."""
    buckets = chart_report(
        filters,
        store,
        clock,
        TABLE,
        LOSS_SUMMARY_METRICS,
        calendar=QuarterCalendar.CALENDAR,
        error_message="Failed to fetch loss summary",
    )
    return chart_rows(buckets, _zero_filled)

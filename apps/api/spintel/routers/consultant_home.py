"""
GET /consultanthome/combined-summary/{organisation_id}: headline numbers for the
consultant home screen, one query per metric table. Calendar quarters.
GET /consultanthome/{metric}/{organisation_id}: one averaged metric per bucket for
the home screen trend lines. Fiscal quarters.
"""
from typing import Any

from fastapi import APIRouter, Depends

from spintel.db import MetricStore, get_store
from spintel.queries.aggregation import MetricSpec, avg, chart_rows, total
from spintel.queries.catalog import UKG_COLUMNS, UKG_TOTAL_COLUMN
from spintel.queries.reports import chart_report, summary_report
from spintel.utils.percentages import ZERO, format_decimal, percentage, ratio_string, to_number
from spintel.utils.report_filters import FilterRequest, get_filter_request
from spintel.utils.time_window import Clock, get_clock

router = APIRouter(prefix="/consultanthome", tags=["consultant home"])

ERROR_MESSAGE = "Error fetching combined summary"


@router.get("/combined-summary/{organisation_id}")
def combined_summary(
    filters: FilterRequest = Depends(get_filter_request),
    store: MetricStore = Depends(get_store),
    clock: Clock = Depends(get_clock),
) -> dict[str, Any]:
    def run(table, metrics):
        values = summary_report(filters, store, clock, table, metrics, error_message=ERROR_MESSAGE)
        return {k: v if v is not None else ZERO for k, v in values.items()}

    yarn = run("yarn_realisation", [total("raw_material_input"), total("yarn_output")])
    rf = run("rf_utilisation", [total("allocated_spindle"), total("worked_spindle")])
    production = run("production_efficiency", [total("eup"), total("production_efficiency")])
    ukg = run("unit_per_kg", [total("unit_per_kg", *UKG_COLUMNS)])

    return {
        "yarn_realisation_ratio": ratio_string(yarn["yarn_output"], yarn["raw_material_input"]),
        "yarn_realisation_percent": percentage(yarn["yarn_output"], yarn["raw_material_input"]),
        "rf_utilisation_ratio": ratio_string(rf["worked_spindle"], rf["allocated_spindle"]),
        "rf_utilisation_percent": percentage(rf["worked_spindle"], rf["allocated_spindle"]),
        "total_eup": to_number(production["eup"]),
        "unit_per_kg": format_decimal(ukg["unit_per_kg"]),
        "total_efficiency": to_number(production["production_efficiency"]),
    }


# path -> (table, metric, error message)
TREND_CHARTS: dict[str, tuple[str, MetricSpec, str]] = {
    "yarn_realisation": (
        "yarn_realisation",
        avg("yarn_realisation", "realisation"),
        "Error fetching yarn realisation data",
    ),
    "rf_utilisation": (
        "rf_utilisation",
        avg("rf_utilisation", "utilisation"),
        "Error fetching rf utilisation data",
    ),
    "production_efficiency": (
        "production_efficiency",
        avg("production_efficiency"),
        "Error fetching production efficiency data",
    ),
    "eup": ("production_efficiency", avg("eup"), "Error fetching EUP data"),
    "unit_per_kg": ("unit_per_kg", avg("unit_per_kg", UKG_TOTAL_COLUMN), "Error fetching unit_per_kg data"),
}


def _add_trend_chart(path: str, table: str, metric: MetricSpec, error_message: str) -> None:
    metrics = [metric]

    def trend_chart(
        filters: FilterRequest = Depends(get_filter_request),
        store: MetricStore = Depends(get_store),
        clock: Clock = Depends(get_clock),
    ) -> list[dict[str, Any]]:
        return chart_rows(chart_report(filters, store, clock, table, metrics, error_message=error_message))

    router.add_api_route(
        f"/{path}/{{organisation_id}}",
        trend_chart,
        methods=["GET"],
        name=f"consultant_{path}_trend",
        summary=f"Average {metric.source_columns[0]} per bucket",
    )


for _path, (_table, _metric, _message) in TREND_CHARTS.items():
    _add_trend_chart(_path, _table, _metric, _message)

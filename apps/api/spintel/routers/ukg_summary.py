"""
GET /ukgSummarys/*: unit-per-kg energy totals. Calendar quarters.
"""
from typing import Any

from fastapi import APIRouter, Depends

from spintel.db import MetricStore, get_store
from spintel.queries.aggregation import MetricSpec, total
from spintel.queries.catalog import UKG_COLUMNS, UKG_MACHINE_COLUMNS, UKG_OPERATION_COLUMNS
from spintel.queries.reports import summary_report
from spintel.utils.percentages import ZERO, format_decimal, to_number
from spintel.utils.report_filters import FilterRequest, get_filter_request
from spintel.utils.time_window import Clock, get_clock

router = APIRouter(prefix="/ukgSummarys", tags=["unit per kg summaries"])

TABLE = "unit_per_kg"


def _numbers(
    filters: FilterRequest, store: MetricStore, clock: Clock, metrics: list[MetricSpec], error_message: str
) -> dict[str, float]:
    values = summary_report(filters, store, clock, TABLE, metrics, error_message=error_message)
    return {k: to_number(v if v is not None else ZERO) for k, v in values.items()}


def _add_total(path: str, metrics: list[MetricSpec], error_message: str) -> None:
    def ukg_total(
        filters: FilterRequest = Depends(get_filter_request),
        store: MetricStore = Depends(get_store),
        clock: Clock = Depends(get_clock),
    ) -> dict[str, float]:
        return _numbers(filters, store, clock, metrics, error_message)

    router.add_api_route(f"/{path}/{{organisation_id}}", ukg_total, methods=["GET"], name=f"ukg_{path}")


for _column in UKG_COLUMNS:
    _add_total(_column, [total(f"total_{_column}", _column)], f"Error calculating total {_column}")

_add_total(
    "draw_frame_ukg",
    [total("first_passage_ukg"), total("second_passage_ukg")],
    "Error calculating Draw Frame UKG",
)
_add_total("machine_ukg", [total("machine", *UKG_MACHINE_COLUMNS)], "Error calculating Machine UKG")
_add_total("operation_ukg", [total("operation", *UKG_OPERATION_COLUMNS)], "Error calculating Operation UKG")


@router.get("/unit-per-kg/{organisation_id}")
def unit_per_kg(
    filters: FilterRequest = Depends(get_filter_request),
    store: MetricStore = Depends(get_store),
    clock: Clock = Depends(get_clock),
) -> dict[str, Any]:
    """Sum of all nine unit-per-kg columns as a 2-dp string."""
    values = summary_report(
        filters,
        store,
        clock,
        TABLE,
        [total("unit_per_kg", *UKG_COLUMNS)],
        error_message="Error calculating unit per kg",
    )
    return {"unit_per_kg": format_decimal(values["unit_per_kg"])}

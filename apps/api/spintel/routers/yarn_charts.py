"""
GET /yarnCharts/{section}/{metric}/{organisation_id}: average of one waste column per bucket.
GET /yarnCharts/waste-summary/{organisation_id}: waste categories per bucket.
"""
from decimal import Decimal
from typing import Any

from fastapi import APIRouter, Depends

from spintel.db import MetricStore, get_store
from spintel.queries.aggregation import avg, chart_rows, total
from spintel.queries.catalog import YARN_WASTE_GROUPS
from spintel.queries.reports import chart_report
from spintel.utils.percentages import ZERO, quantize, to_number
from spintel.utils.report_filters import FilterRequest, QuarterCalendar, get_filter_request
from spintel.utils.time_window import Clock, get_clock

router = APIRouter(prefix="/yarnCharts", tags=["yarn charts"])

TABLE = "yarn_realisation"

# section -> url slug -> column
YARN_CHART_COLUMNS: dict[str, dict[str, str]] = {
    "blow-room": {
        "total-droppings": "total_dropping",
        "flat-waste": "flat_waste",
        "micro-dust": "micro_dust",
        "contamination-collection": "contamination_collection",
    },
    "filter-waste": {
        "prep-fan-waste": "prep_fan_waste",
        "plant-room-waste": "plant_room_waste",
    },
    "roving-waste": {
        "ring-frame-roving-waste": "ring_frame_roving_waste",
        "speed-frame-roving-waste": "speed_frame_roving_waste",
    },
    "other-waste": {
        "all-dept-sweeping-waste": "all_dept_sweeping_waste",
        "comber-waste": "comber_waste",
        "hard-waste": "hard_waste",
        "invisible-loss": "invisible_loss",
    },
}

WASTE_SUMMARY_METRICS = [
    total("raw_material_input"),
    *(total(name, *columns) for name, columns in YARN_WASTE_GROUPS.items()),
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
        name=f"yarn_{column}_chart",
        summary=f"Average {column} per bucket",
    )


for _section, _slugs in YARN_CHART_COLUMNS.items():
    for _slug, _column in _slugs.items():
        _add_column_chart(_section, _slug, _column)


def _waste_summary_row(values: dict[str, Decimal | None]) -> dict[str, Any]:
    categories = {name: quantize(values[name] or ZERO) for name in YARN_WASTE_GROUPS}
    # waste_output is the sum of the rounded categories so the columns add up on screen
    waste_output = sum(categories.values(), ZERO)
    return {
        "raw_material_input": to_number(values["raw_material_input"] or ZERO),
        **{name: to_number(v) for name, v in categories.items()},
        "waste_output": to_number(waste_output),
    }


@router.get("/waste-summary/{organisation_id}")
def waste_summary_chart(
    filters: FilterRequest = Depends(get_filter_request),
    store: MetricStore = Depends(get_store),
    clock: Clock = Depends(get_clock),
) -> list[dict[str, Any]]:
    """Raw material input, four waste categories and their total per bucket. Calendar quarters."""
    buckets = chart_report(
        filters,
        store,
        clock,
        TABLE,
        WASTE_SUMMARY_METRICS,
        calendar=QuarterCalendar.CALENDAR,
        error_message="Error fetching waste summary chart",
    )
    return chart_rows(buckets, _waste_summary_row)

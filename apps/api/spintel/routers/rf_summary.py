"""
GET /rfSummarys/*: ring-frame spindle utilisation and loss breakdowns as a
percentage of allocated spindles. Fiscal quarters, except loss-summary which
uses calendar quarters.
"""
from decimal import Decimal
from typing import Any

from fastapi import APIRouter, Depends

from spintel.db import MetricStore, get_store
from spintel.queries.aggregation import MetricSpec, avg, total
from spintel.queries.catalog import RF_LOSS_GROUPS
from spintel.queries.reports import summary_report
from spintel.utils.percentages import ZERO, derive_percentages, percentage, ratio_string, to_number
from spintel.utils.report_filters import FilterRequest, QuarterCalendar, get_filter_request
from spintel.utils.time_window import Clock, get_clock

router = APIRouter(prefix="/rfSummarys", tags=["rf summaries"])

TABLE = "rf_utilisation"
BASE = "allocated_spindle"


def _totals(
    filters: FilterRequest,
    store: MetricStore,
    clock: Clock,
    metrics: list[MetricSpec],
    error_message: str,
    calendar: QuarterCalendar = QuarterCalendar.FISCAL,
) -> dict[str, Decimal]:
    values = summary_report(
        filters, store, clock, TABLE, metrics, calendar=calendar, error_message=error_message
    )
    return {k: v if v is not None else ZERO for k, v in values.items()}


def _with_percentages(values: dict[str, Decimal], names: list[str]) -> dict[str, Any]:
    percents = derive_percentages(values[BASE], {n: values[n] for n in names})
    out: dict[str, Any] = {}
    for n in names:
        out[n] = to_number(values[n])
        out[f"{n}_percent"] = percents[n]
    return out


@router.get("/spindle-summary/{organisation_id}")
def spindle_summary(
    filters: FilterRequest = Depends(get_filter_request),
    store: MetricStore = Depends(get_store),
    clock: Clock = Depends(get_clock),
) -> dict[str, Any]:
    """Average allocated and worked spindles."""
    v = _totals(
        filters,
        store,
        clock,
        [avg("allocated_spindle"), avg("worked_spindle")],
        "Error fetching spindle summary data",
    )
    return {k: to_number(x) for k, x in v.items()}


@router.get("/mechanical-maintainance-summary/{organisation_id}")
def mechanical_maintainance_summary(
    filters: FilterRequest = Depends(get_filter_request),
    store: MetricStore = Depends(get_store),
    clock: Clock = Depends(get_clock),
) -> dict[str, Any]:
    v = _totals(
        filters,
        store,
        clock,
        [
            total(BASE),
            total("worked_spindle"),
            total("routine_maintainance"),
            total("preventive_maintainance"),
            total("mechanical_maintainance", "mechanical_breakdown"),
        ],
        "Error fetching spindle maintenance summary",
    )
    return {
        "allocated_spindle": to_number(v[BASE]),
        "worked_spindle": to_number(v["worked_spindle"]),
        **_with_percentages(v, ["routine_maintainance", "preventive_maintainance", "mechanical_maintainance"]),
    }


def _add_loss_breakdown(path: str, fields: dict[str, str], error_message: str) -> None:
    """fields maps response name -> column."""
    metrics = [total(BASE), *(total(name, column) for name, column in fields.items())]

    def breakdown(
        filters: FilterRequest = Depends(get_filter_request),
        store: MetricStore = Depends(get_store),
        clock: Clock = Depends(get_clock),
    ) -> dict[str, Any]:
        v = _totals(filters, store, clock, metrics, error_message)
        return _with_percentages(v, list(fields))

    router.add_api_route(
        f"/{path}/{{organisation_id}}",
        breakdown,
        methods=["GET"],
        name=f"rf_{path.replace('-', '_')}",
    )


_add_loss_breakdown(
    "electrical-maintainance-summary",
    {
        "power_failure": "power_failure",
        "electrical_breakdown": "electrical_breakdown",
        "planned_maintainance": "planned_maintainance",
    },
    "Error fetching electrical maintainance summary",
)
_add_loss_breakdown(
    "labour-summary",
    {
        "labour_absentism": "labour_absentism",
        "labour_shortage": "labour_shortage",
        "labour_rest": "labour_unrest",
        "day_off_delay": "doff_delay",
    },
    "Error calculating labour summary",
)
_add_loss_breakdown(
    "process-loss-summary",
    {
        "bobbin_shortage": "bobbin_shortage",
        "lot_count_changes": "lot_count_change",
        "lot_count_runout": "lot_count_runout",
        "quality_checking": "quality_checking",
        "quality_deviation": "quality_deviation",
        "traveller_changes": "traveller_change",
    },
    "Error retrieving process loss summary",
)


@router.get("/loss-summary/{organisation_id}")
def loss_summary(
    filters: FilterRequest = Depends(get_filter_request),
    store: MetricStore = Depends(get_store),
    clock: Clock = Depends(get_clock),
) -> dict[str, Any]:
    """Loss categories as a share of allocated spindles. Calendar quarters."""
    v = _totals(
        filters,
        store,
        clock,
        [total(BASE), *(total(name, *cols) for name, cols in RF_LOSS_GROUPS.items())],
        "Error retrieving loss summary",
        calendar=QuarterCalendar.CALENDAR,
    )
    return _with_percentages(v, list(RF_LOSS_GROUPS))


@router.get("/rf-utilisation/{organisation_id}")
def rf_utilisation(
    filters: FilterRequest = Depends(get_filter_request),
    store: MetricStore = Depends(get_store),
    clock: Clock = Depends(get_clock),
) -> dict[str, str]:
    v = _totals(
        filters,
        store,
        clock,
        [total(BASE), total("worked_spindle")],
        "Error calculating RF Utilisation",
    )
    return {
        "rf_utilisation_ratio": ratio_string(v["worked_spindle"], v[BASE]),
        "rf_utilisation_percent": percentage(v["worked_spindle"], v[BASE]),
    }

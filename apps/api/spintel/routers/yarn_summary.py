"""
GET /yarnSummarys/*: yarn realisation totals and waste breakdowns as percentages
of raw material input. Calendar quarters.
"""
from decimal import Decimal
from typing import Any

from fastapi import APIRouter, Depends

from spintel.db import MetricStore, get_store
from spintel.queries.aggregation import MetricSpec, total
from spintel.queries.catalog import YARN_WASTE_GROUPS
from spintel.queries.reports import summary_report
from spintel.utils.percentages import (
    HUNDRED,
    ZERO,
    derive_percentages,
    format_decimal,
    percentage,
    quantize,
    ratio_string,
    to_number,
)
from spintel.utils.report_filters import FilterRequest, get_filter_request
from spintel.utils.time_window import Clock, get_clock

router = APIRouter(prefix="/yarnSummarys", tags=["yarn summaries"])

TABLE = "yarn_realisation"
INPUT = "raw_material_input"


def _totals(
    filters: FilterRequest,
    store: MetricStore,
    clock: Clock,
    metrics: list[MetricSpec],
    error_message: str,
) -> dict[str, Decimal]:
    values = summary_report(filters, store, clock, TABLE, metrics, error_message=error_message)
    return {k: v if v is not None else ZERO for k, v in values.items()}


def _breakdown(values: dict[str, Decimal], parts: dict[str, str]) -> dict[str, str]:
    """`<name>_kg` and `<name>_percent` for each part, relative to raw material input."""
    amounts = {name: values[name] for name in parts}
    percents = derive_percentages(values[INPUT], amounts)
    out: dict[str, str] = {}
    for name, label in parts.items():
        out[f"{label}_kg"] = format_decimal(amounts[name])
        out[f"{label}_percent"] = percents[name]
    return out


@router.get("/efficiency/{organisation_id}")
def yarn_efficiency(
    filters: FilterRequest = Depends(get_filter_request),
    store: MetricStore = Depends(get_store),
    clock: Clock = Depends(get_clock),
) -> dict[str, Any]:
    """Yarn realisation and waste as % of input; invisible loss is the remainder."""
    v = _totals(
        filters,
        store,
        clock,
        [total(INPUT), total("yarn_output"), total("total_waste")],
        "Error calculating yarn efficiency",
    )
    mi, yo, tw = v[INPUT], v["yarn_output"], v["total_waste"]
    yr = wo = il = ZERO
    if mi > 0:
        yr = yo / mi * HUNDRED
        wo = tw / mi * HUNDRED
        il = HUNDRED - (yr + wo)
    return {
        "MaterialInput": to_number(mi),
        "YarnOutput": to_number(yo),
        "TotalWaste": to_number(tw),
        "YarnRealization": to_number(yr),
        "WasteOutput": to_number(wo),
        "InvisibleLoss": to_number(il),
    }


@router.get("/waste-summary/{organisation_id}")
def waste_summary(
    filters: FilterRequest = Depends(get_filter_request),
    store: MetricStore = Depends(get_store),
    clock: Clock = Depends(get_clock),
) -> dict[str, str]:
    metrics = [total(INPUT), *(total(name, *cols) for name, cols in YARN_WASTE_GROUPS.items())]
    v = _totals(filters, store, clock, metrics, "Error calculating waste summary")
    categories = {name: quantize(v[name]) for name in YARN_WASTE_GROUPS}
    waste_output = sum(categories.values(), ZERO)
    percents = derive_percentages(v[INPUT], {**categories, "waste_output": waste_output})
    out = {"raw_material_input": format_decimal(v[INPUT])}
    for name, amount in categories.items():
        prefix = name.removesuffix("_waste")
        out[name] = format_decimal(amount)
        out[f"{prefix}_percent"] = percents[name]
    out["waste_output"] = format_decimal(waste_output)
    out["waste_percent_of_input"] = percents["waste_output"]
    return out


def _add_breakdown(path: str, parts: dict[str, str], error_message: str) -> None:
    metrics = [total(INPUT), *(total(col) for col in parts)]

    def breakdown(
        filters: FilterRequest = Depends(get_filter_request),
        store: MetricStore = Depends(get_store),
        clock: Clock = Depends(get_clock),
    ) -> dict[str, str]:
        return _breakdown(_totals(filters, store, clock, metrics, error_message), parts)

    router.add_api_route(
        f"/{path}/{{organisation_id}}",
        breakdown,
        methods=["GET"],
        name=f"yarn_{path.replace('-', '_')}_summary",
    )


# column -> response field prefix
_add_breakdown(
    "blow-room-waste",
    {
        "total_dropping": "dropping",
        "flat_waste": "flat_waste",
        "micro_dust": "micro_dust",
        "contamination_collection": "contamination",
    },
    "Error calculating blow room waste breakdown",
)
_add_breakdown(
    "filter-waste",
    {"prep_fan_waste": "prep_fan_waste", "plant_room_waste": "plant_room_waste"},
    "Error calculating filter waste breakdown",
)
_add_breakdown(
    "roving-waste",
    {"speed_frame_roving_waste": "roving_preparatory", "ring_frame_roving_waste": "roving_spinning"},
    "Error calculating roving waste breakdown",
)
_add_breakdown(
    "other-waste",
    {
        "all_dept_sweeping_waste": "sweeping_waste",
        "comber_waste": "comber_waste",
        "hard_waste": "hard_waste",
        "invisible_loss": "invisible_loss",
    },
    "Error calculating other waste breakdown",
)


@router.get("/yarn-realisation/{organisation_id}")
def yarn_realisation(
    filters: FilterRequest = Depends(get_filter_request),
    store: MetricStore = Depends(get_store),
    clock: Clock = Depends(get_clock),
) -> dict[str, str]:
    v = _totals(filters, store, clock, [total(INPUT), total("yarn_output")], "Error calculating yarn realisation")
    return {
        "yarn_realisation_ratio": ratio_string(v["yarn_output"], v[INPUT]),
        "yarn_realisation_percent": percentage(v["yarn_output"], v[INPUT]),
    }

"""
GET /productionSummarys/*: production totals and averages. Pass shift=1..3 to
restrict any of them to one shift. Calendar quarters.
"""
from fastapi import APIRouter, Depends

from spintel.db import MetricStore, get_store
from spintel.queries.aggregation import MetricSpec, avg, total
from spintel.queries.reports import summary_report
from spintel.utils.percentages import ZERO, to_number
from spintel.utils.report_filters import FilterRequest, get_filter_request
from spintel.utils.time_window import Clock, get_clock

router = APIRouter(prefix="/productionSummarys", tags=["production summaries"])

TABLE = "production_efficiency"

# path -> (metric, error message)
PRODUCTION_SUMMARIES: dict[str, tuple[MetricSpec, str]] = {
    "totalKgs": (total("total_kgs", "kgs"), "Error calculating total kgs"),
    "uPercent": (avg("average_u_percent", "u%"), "Error calculating U%"),
    "efficiencyTotal": (
        total("total_efficiency", "production_efficiency"),
        "Error calculating total production efficiency",
    ),
    "gpsTotal": (total("total_gps", "gps"), "Error calculating total GPS"),
    "eupTotal": (total("total_eup", "eup"), "Error calculating total EUP"),
}


def _add_summary(path: str, metric: MetricSpec, error_message: str) -> None:
    def production_summary(
        filters: FilterRequest = Depends(get_filter_request),
        store: MetricStore = Depends(get_store),
        clock: Clock = Depends(get_clock),
    ) -> dict[str, float]:
        values = summary_report(filters, store, clock, TABLE, [metric], error_message=error_message)
        value = values[metric.output_name]
        return {metric.output_name: to_number(value if value is not None else ZERO)}

    router.add_api_route(
        f"/{path}/{{organisation_id}}",
        production_summary,
        methods=["GET"],
        name=f"production_{path.replace('/', '_')}",
        summary=f"{metric.kind.name.lower()} of {', '.join(metric.source_columns)}",
    )


for _path, (_metric, _message) in PRODUCTION_SUMMARIES.items():
    _add_summary(_path, _metric, _message)

# path used by existing dashboard clients
_add_summary("eupTotal/overall", *PRODUCTION_SUMMARIES["eupTotal"])

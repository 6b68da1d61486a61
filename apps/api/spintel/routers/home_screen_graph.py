"""
GET /homeScreenGraph/efficiency_summary/{organisation_id}: production efficiency,
EUP, RF utilisation and yarn realisation averaged per bucket. Fiscal quarters.
"""
from typing import Any

from fastapi import APIRouter, Depends

from spintel.db import MetricStore, get_store
from spintel.queries.aggregation import avg, chart_rows
from spintel.queries.reports import chart_report
from spintel.utils.report_filters import FilterRequest, get_filter_request
from spintel.utils.time_window import Clock, get_clock

router = APIRouter(prefix="/homeScreenGraph", tags=["home screen"])

ERROR_MESSAGE = "Error fetching summary data"

PRODUCTION_TABLE = "production_efficiency"
PRODUCTION_METRICS = [avg("production_efficiency"), avg("eup")]

# merged into the production buckets by label
JOINED_METRICS = {
    "rf_utilisation": [avg("utilisation")],
    "yarn_realisation": [avg("realisation")],
}


@router.get("/efficiency_summary/{organisation_id}")
def efficiency_summary(
    filters: FilterRequest = Depends(get_filter_request),
    store: MetricStore = Depends(get_store),
    clock: Clock = Depends(get_clock),
) -> list[dict[str, Any]]:
    """
    Buckets come from production rows only. Utilisation and realisation fill in
    the buckets with the same label and are null where that table has no rows.
    """
    buckets = chart_report(
        filters, store, clock, PRODUCTION_TABLE, PRODUCTION_METRICS, error_message=ERROR_MESSAGE
    )
    for table, metrics in JOINED_METRICS.items():
        by_label = {
            b.label: b.metrics
            for b in chart_report(filters, store, clock, table, metrics, error_message=ERROR_MESSAGE)
        }
        missing = {m.output_name: None for m in metrics}
        for bucket in buckets:
            bucket.metrics.update(by_label.get(bucket.label, missing))
    return chart_rows(buckets)

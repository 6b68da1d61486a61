"""
Bucket selection for chart queries: which time grain a request groups by,
the GROUP BY key for that grain and the label each bucket gets.
"""
from datetime import date
from enum import Enum

from spintel.queries.catalog import DATE_COLUMN
from spintel.queries.dialect import SqlDialect, quote_ident
from spintel.utils.report_filters import FilterRequest
from spintel.utils.time_window import month_label, week_label


class BucketingStrategy(str, Enum):
    DAILY = "daily"
    WEEKLY_WITHIN_MONTH = "weekly_within_month"
    MONTHLY = "monthly"


class KeyPart(str, Enum):
    DATE = "date"
    YEAR = "year"
    MONTH = "month"
    WEEK_OF_MONTH = "week_of_month"


GROUPING_KEYS: dict[BucketingStrategy, tuple[KeyPart, ...]] = {
    BucketingStrategy.DAILY: (KeyPart.DATE,),
    BucketingStrategy.WEEKLY_WITHIN_MONTH: (KeyPart.YEAR, KeyPart.MONTH, KeyPart.WEEK_OF_MONTH),
    BucketingStrategy.MONTHLY: (KeyPart.YEAR, KeyPart.MONTH),
}


def select_bucket(request: FilterRequest) -> BucketingStrategy:
    if request.date_range is not None or request.exact_date is not None or request.weeks_of_month:
        return BucketingStrategy.DAILY
    if request.months:
        return BucketingStrategy.WEEKLY_WITHIN_MONTH
    return BucketingStrategy.MONTHLY


def render_key_part(part: KeyPart, dialect: SqlDialect, col: str) -> str:
    if part is KeyPart.DATE:
        return col
    if part is KeyPart.YEAR:
        return dialect.year(col)
    if part is KeyPart.MONTH:
        return dialect.month(col)
    return dialect.week_of_month(col)


def group_by_sql(strategy: BucketingStrategy, dialect: SqlDialect) -> str:
    col = quote_ident(DATE_COLUMN)
    return ", ".join(render_key_part(p, dialect, col) for p in GROUPING_KEYS[strategy])


def bucket_label(strategy: BucketingStrategy, first_day: date) -> str:
    """Label for a bucket, derived from the earliest date it contains."""
    if strategy is BucketingStrategy.DAILY:
        return first_day.isoformat()
    if strategy is BucketingStrategy.WEEKLY_WITHIN_MONTH:
        return week_label(first_day)
    return month_label(first_day)

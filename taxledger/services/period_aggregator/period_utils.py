"""Reporting window utilities.

Provides range resolution, the equal-length comparison period, bucket
resolution (daily vs monthly) and chart label formatting.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import List, Optional, Union

from taxledger.core.config import settings
from taxledger.core.exceptions import InvalidReportRangeError

DAYS = "days"
MONTHS = "months"

DateLike = Union[date, str, None]


@dataclass(frozen=True)
class ReportRange:
    """Inclusive [start, end] reporting window with end >= start."""
    start: date
    end: date

    @property
    def span_days(self) -> int:
        """Elapsed days between start and end, at least 1."""
        return max((self.end - self.start).days, 1)

    @property
    def is_multi_year(self) -> bool:
        return self.start.year != self.end.year

    @property
    def resolution(self) -> str:
        return DAYS if self.span_days <= settings.DAILY_BUCKET_MAX_DAYS else MONTHS


def parse_date(value: DateLike, field: str = "date") -> Optional[date]:
    """Parse a ``YYYY-MM-DD`` string (or full ISO timestamp) into a date."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(value[:10])
    except (TypeError, ValueError) as e:
        raise InvalidReportRangeError(str(value), field) from e


def resolve_report_range(
    start: DateLike = None,
    end: DateLike = None,
    today: Optional[date] = None,
) -> ReportRange:
    """Resolve optional filter dates into a concrete window.

    Args:
        start: Window start; defaults to 1 January of the reference year
        end: Window end; defaults to 31 December of the reference year
        today: Reference date when *end* is missing (defaults to today)

    Returns:
        ReportRange whose end is never before its start

    Raises:
        InvalidReportRangeError: If a date string cannot be parsed
    """
    start_date = parse_date(start, "start")
    end_date = parse_date(end, "end")

    reference = end_date or today or date.today()
    if start_date is None:
        start_date = date(reference.year, 1, 1)
    if end_date is None:
        end_date = date(reference.year, 12, 31)

    if end_date < start_date:
        end_date = start_date
    return ReportRange(start_date, end_date)


def previous_range(current: ReportRange) -> ReportRange:
    """Equal-length window ending the day before *current* starts."""
    previous_end = current.start - timedelta(days=1)
    previous_start = previous_end - (current.end - current.start)
    return ReportRange(previous_start, previous_end)


def bucket_start_for(day: date, resolution: str) -> date:
    """Key of the bucket that *day* falls into."""
    if resolution == DAYS:
        return day
    return day.replace(day=1)


def iter_bucket_starts(window: ReportRange) -> List[date]:
    """Every bucket key in the window, in calendar order."""
    starts: List[date] = []
    if window.resolution == DAYS:
        current = window.start
        while current <= window.end:
            starts.append(current)
            current += timedelta(days=1)
        return starts

    current = window.start.replace(day=1)
    while current <= window.end:
        starts.append(current)
        if current.month == 12:
            current = date(current.year + 1, 1, 1)
        else:
            current = date(current.year, current.month + 1, 1)
    return starts


def ordinal(n: int) -> str:
    """1 -> '1st', 12 -> '12th', 22 -> '22nd'."""
    if 10 <= n % 100 <= 20:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(n % 10, "th")
    return f"{n}{suffix}"


def bucket_label(bucket_start: date, window: ReportRange) -> str:
    """Chart label for a bucket.

    Days: ``Mon`` for windows up to a week, else ``21st Feb`` (``21st Feb 26``
    across years). Months: ``Jan`` (``Jan 2026`` across years).
    """
    if window.resolution == DAYS:
        if window.span_days <= settings.WEEKDAY_LABEL_MAX_DAYS:
            return bucket_start.strftime("%a")
        label = f"{ordinal(bucket_start.day)} {bucket_start.strftime('%b')}"
        if window.is_multi_year:
            label = f"{label} {bucket_start.strftime('%y')}"
        return label

    if window.is_multi_year:
        return bucket_start.strftime("%b %Y")
    return bucket_start.strftime("%b")


def report_period_label(bucket_start: date, window: ReportRange) -> str:
    """Tax breakdown label: single-year month buckets carry a ``'yy`` suffix."""
    label = bucket_label(bucket_start, window)
    if window.resolution == MONTHS and not window.is_multi_year:
        label = f"{label} '{bucket_start.strftime('%y')}"
    return label

"""Period Aggregator.

Buckets ledgers over a reporting window, derives the comparison window and
assembles dashboard and reports payloads on top of the tax engine.

Sub-modules:
- period_utils: Window resolution, comparison window, bucket labels
- aggregation: Whole-window totals and per-bucket accumulators
- liability: Shared full-liability computation, rent proration, trends
- reporting_service: Dashboard/reports builders and ReportingService
"""
from .aggregation import (
    CategoryAggregate,
    LedgerAggregate,
    LedgerTotals,
    PeriodBucket,
    aggregate_ledger,
    filter_expenses,
    summarise_ledger,
)
from .liability import (
    bucket_rent_slice,
    build_trend_stat,
    compute_full_liability,
    compute_liability_for_totals,
    compute_trend,
    scaled_annual_rent,
)
from .period_utils import (
    DAYS,
    MONTHS,
    ReportRange,
    bucket_label,
    previous_range,
    report_period_label,
    resolve_report_range,
)
from .reporting_service import (
    ReportingService,
    build_dashboard_data,
    build_reports_data,
)

__all__ = [
    # Windows
    "DAYS",
    "MONTHS",
    "ReportRange",
    "bucket_label",
    "previous_range",
    "report_period_label",
    "resolve_report_range",
    # Aggregation
    "CategoryAggregate",
    "LedgerAggregate",
    "LedgerTotals",
    "PeriodBucket",
    "aggregate_ledger",
    "filter_expenses",
    "summarise_ledger",
    # Liability and trends
    "bucket_rent_slice",
    "build_trend_stat",
    "compute_full_liability",
    "compute_liability_for_totals",
    "compute_trend",
    "scaled_annual_rent",
    # Reports
    "ReportingService",
    "build_dashboard_data",
    "build_reports_data",
]

"""Dashboard and reports assembly.

``build_dashboard_data`` and ``build_reports_data`` are pure: they take
already-fetched records and a profile snapshot. ``ReportingService`` wires
them to the record and profile stores.
"""
import logging
from datetime import date
from decimal import Decimal
from typing import List, Optional, Sequence, Tuple

from sqlalchemy.orm import Session

from taxledger.models.ledger import ExpenseCategory
from taxledger.models.schemas.records import BusinessProfileData, ExpenseRecord, IncomeRecord
from taxledger.models.schemas.reports import (
    CategorySpend,
    DashboardData,
    DashboardStats,
    DeductibleSplit,
    PeriodTrend,
    ReportsData,
    TaxBreakdownPoint,
)
from taxledger.services import record_store
from taxledger.services.profile_service import ProfileService

from .aggregation import aggregate_ledger, filter_expenses, summarise_ledger
from .liability import (
    bucket_rent_slice,
    build_trend_stat,
    compute_full_liability,
    compute_liability_for_totals,
    scaled_annual_rent,
)
from .period_utils import (
    DateLike,
    ReportRange,
    previous_range,
    report_period_label,
    resolve_report_range,
)

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


def category_label(category: str) -> str:
    """Display name for a category, tolerating categories outside the enum."""
    try:
        return ExpenseCategory(category).label
    except ValueError:
        return category.replace("_", " ").title()


def build_dashboard_data(
    window: ReportRange,
    profile: BusinessProfileData,
    incomes: Sequence[IncomeRecord],
    expenses: Sequence[ExpenseRecord],
    previous_incomes: Sequence[IncomeRecord],
    previous_expenses: Sequence[ExpenseRecord],
    category: Optional[str] = None,
    tag: Optional[str] = None,
) -> DashboardData:
    """
    Assemble the dashboard: five trend stats, bucket series, category
    breakdown, deductible split and the full-window tax result.

    Args:
        window: Current reporting window
        profile: Business profile snapshot
        incomes: Income records in *window*
        expenses: Expense records in *window*
        previous_incomes: Income records in the comparison window
        previous_expenses: Expense records in the comparison window
        category: Optional expense category filter (applied to both windows)
        tag: Optional expense tag filter (applied to both windows)

    Returns:
        DashboardData
    """
    previous_window = previous_range(window)
    expenses = filter_expenses(expenses, category, tag)
    previous_expenses = filter_expenses(previous_expenses, category, tag)

    aggregate = aggregate_ledger(window, incomes, expenses)
    totals = aggregate.totals
    previous_totals = summarise_ledger(previous_incomes, previous_expenses)

    # Both windows have the same length, so they share the prorated rent.
    rent = scaled_annual_rent(profile, window.span_days)
    tax_year = window.end.year
    tax = compute_liability_for_totals(totals, profile, rent, tax_year)
    previous_tax = compute_liability_for_totals(previous_totals, profile, rent, previous_window.end.year)

    period_trends = [
        PeriodTrend(
            label=bucket.label,
            income=bucket.income,
            expenses=bucket.expenses,
            profit=bucket.income - bucket.expenses,
        )
        for bucket in aggregate.buckets
    ]

    spend_by_category = sorted(
        (
            CategorySpend(category=name, label=category_label(name), total=agg.total)
            for name, agg in totals.category_aggregates.items()
        ),
        key=lambda item: item.total,
        reverse=True,
    )

    deductible_by_category = {
        item.label: item.amount for item in tax.taxable_profit.itemized_deductions
    }
    deductibles = sorted(
        (
            DeductibleSplit(
                category=name,
                deductible=deductible_by_category.get(name, ZERO),
                non_deductible=agg.total - deductible_by_category.get(name, ZERO),
            )
            for name, agg in totals.category_aggregates.items()
        ),
        key=lambda item: item.deductible,
        reverse=True,
    )

    profit = totals.net_profit
    previous_profit = previous_totals.net_profit
    stats = DashboardStats(
        total_income=build_trend_stat(totals.total_income, previous_totals.total_income, higher_is_better=True),
        total_expenses=build_trend_stat(totals.total_expenses, previous_totals.total_expenses, higher_is_better=False),
        net_profit=build_trend_stat(profit, previous_profit, higher_is_better=True),
        net_profit_after_tax=build_trend_stat(
            profit - tax.total_tax_payable,
            previous_profit - previous_tax.total_tax_payable,
            higher_is_better=True,
        ),
        tax_liability=build_trend_stat(
            tax.total_tax_payable, previous_tax.total_tax_payable, higher_is_better=False
        ),
    )

    return DashboardData(
        start_date=window.start,
        end_date=window.end,
        previous_start_date=previous_window.start,
        previous_end_date=previous_window.end,
        stats=stats,
        period_trends=period_trends,
        spend_by_category=spend_by_category,
        deductibles=deductibles,
        tax=tax,
    )


def build_reports_data(
    window: ReportRange,
    profile: BusinessProfileData,
    incomes: Sequence[IncomeRecord],
    expenses: Sequence[ExpenseRecord],
    category: Optional[str] = None,
    tag: Optional[str] = None,
) -> ReportsData:
    """
    Assemble the reports view: per-bucket tax breakdown plus the full-window
    tax result.

    Each bucket is taxed on its own totals with a rent slice matching its
    duration. Empty buckets stay in the series as zero rows.
    """
    expenses = filter_expenses(expenses, category, tag)
    aggregate = aggregate_ledger(window, incomes, expenses, label_fn=report_period_label)
    tax_year = window.end.year
    rent_slice = bucket_rent_slice(profile, window.resolution)

    tax_breakdown: List[TaxBreakdownPoint] = []
    for bucket in aggregate.buckets:
        if bucket.is_empty:
            tax_breakdown.append(
                TaxBreakdownPoint(period=bucket.label, cit=ZERO, development_levy=ZERO, pit=ZERO, total=ZERO)
            )
            continue

        bucket_tax = compute_full_liability(
            total_income=bucket.income,
            category_aggregates=bucket.category_aggregates,
            gross_salary=bucket.gross_salary,
            dividend_income=ZERO,
            profile=profile,
            annual_rent=rent_slice,
            tax_year=tax_year,
        )
        pit = bucket_tax.pit.total_pit if bucket_tax.pit else ZERO
        tax_breakdown.append(
            TaxBreakdownPoint(
                period=bucket.label,
                cit=bucket_tax.cit.cit,
                development_levy=bucket_tax.cit.development_levy,
                pit=pit,
                total=bucket_tax.cit.total + pit,
            )
        )

    rent = scaled_annual_rent(profile, window.span_days)
    tax = compute_liability_for_totals(aggregate.totals, profile, rent, tax_year)

    return ReportsData(
        start_date=window.start,
        end_date=window.end,
        tax_breakdown=tax_breakdown,
        tax=tax,
    )


class ReportingService:
    """Builds dashboard and reports payloads for one user.

    Responsibilities:
    - Resolve the reporting window and its comparison window
    - Fetch records and the business profile from their stores
    - Delegate all math to the pure builders above
    """

    def __init__(self, db: Session):
        self.db = db
        self.profile_service = ProfileService(db)

    def _fetch_window(
        self,
        user_id: int,
        window: ReportRange,
        category: Optional[str] = None,
        tag: Optional[str] = None,
    ) -> Tuple[List[IncomeRecord], List[ExpenseRecord]]:
        incomes = record_store.fetch_income_records(self.db, user_id, window.start, window.end)
        expenses = record_store.fetch_expense_records(
            self.db, user_id, window.start, window.end, category=category, tag=tag
        )
        return incomes, expenses

    def get_dashboard_data(
        self,
        user_id: int,
        start: DateLike = None,
        end: DateLike = None,
        category: Optional[str] = None,
        tag: Optional[str] = None,
        today: Optional[date] = None,
    ) -> DashboardData:
        """Dashboard for *user_id* over [start, end] (defaults: current year).

        Raises:
            ProfileNotFoundError: If the user has no business profile
            RecordStoreError: If records cannot be fetched
        """
        profile = self.profile_service.require_profile(user_id)
        window = resolve_report_range(start, end, today)
        previous_window = previous_range(window)

        incomes, expenses = self._fetch_window(user_id, window, category, tag)
        previous_incomes, previous_expenses = self._fetch_window(user_id, previous_window, category, tag)

        data = build_dashboard_data(
            window,
            profile,
            incomes,
            expenses,
            previous_incomes,
            previous_expenses,
            category=category,
            tag=tag,
        )
        logger.info(
            f"Dashboard for user {user_id} ({window.start} to {window.end}, {window.resolution}): "
            f"Income={data.stats.total_income.value}, Expenses={data.stats.total_expenses.value}, "
            f"Tax={data.tax.total_tax_payable}"
        )
        return data

    def get_reports_data(
        self,
        user_id: int,
        start: DateLike = None,
        end: DateLike = None,
        category: Optional[str] = None,
        tag: Optional[str] = None,
        today: Optional[date] = None,
    ) -> ReportsData:
        """Tax breakdown series for *user_id* over [start, end] (defaults: current year).

        Raises:
            ProfileNotFoundError: If the user has no business profile
            RecordStoreError: If records cannot be fetched
        """
        profile = self.profile_service.require_profile(user_id)
        window = resolve_report_range(start, end, today)
        incomes, expenses = self._fetch_window(user_id, window, category, tag)

        data = build_reports_data(window, profile, incomes, expenses, category=category, tag=tag)
        logger.info(
            f"Reports for user {user_id} ({window.start} to {window.end}, {window.resolution}): "
            f"Buckets={len(data.tax_breakdown)}, Tax={data.tax.total_tax_payable}"
        )
        return data

"""Full tax liability for one aggregate, plus trend math.

``compute_full_liability`` is the single place where taxable profit, CIT,
PIT, CGT and dividend tax are combined. The dashboard, the reports view and
the comparison period all go through it.
"""
from __future__ import annotations

from decimal import Decimal
from typing import Mapping, Optional

from taxledger.core.config import settings
from taxledger.models.schemas.records import BusinessProfileData
from taxledger.models.schemas.reports import TrendStat
from taxledger.models.schemas.tax import FullTaxLiabilityResult
from taxledger.services.tax_engine import (
    compute_cgt,
    compute_cit,
    compute_dividend_tax,
    compute_pit,
    compute_taxable_profit,
    to_decimal,
)

from .aggregation import CategoryAggregate, LedgerTotals
from .period_utils import DAYS

ZERO = Decimal("0")
HUNDRED = Decimal("100")
MONTHS_PER_YEAR = 12


def _days_per_year() -> Decimal:
    return Decimal(str(settings.DAYS_PER_YEAR))


def scaled_annual_rent(profile: BusinessProfileData, span_days: int) -> Decimal:
    """Annual rent prorated linearly to a window of *span_days* days."""
    annual_rent = profile.effective_monthly_rent * MONTHS_PER_YEAR
    return annual_rent * Decimal(max(span_days, 1)) / _days_per_year()


def bucket_rent_slice(profile: BusinessProfileData, resolution: str) -> Decimal:
    """One day of rent for day buckets, one month of rent for month buckets."""
    if resolution == DAYS:
        return profile.effective_monthly_rent * MONTHS_PER_YEAR / _days_per_year()
    return profile.effective_monthly_rent


def compute_full_liability(
    total_income: Decimal,
    category_aggregates: Mapping[str, CategoryAggregate],
    gross_salary: Decimal,
    dividend_income: Decimal,
    profile: BusinessProfileData,
    annual_rent: Decimal,
    tax_year: int,
    capital_gains: Decimal = ZERO,
    capital_gains_export: bool = False,
) -> FullTaxLiabilityResult:
    """
    Combine every tax component for one income/expense aggregate.

    PIT only applies when there is salary income; otherwise ``pit`` is None.

    Args:
        total_income: All income in the window
        category_aggregates: Expense totals and tags per category
        gross_salary: Salary income in the window
        dividend_income: Dividend income in the window
        profile: Business profile snapshot
        annual_rent: Rent already prorated to the window
        tax_year: Year reported on the result
        capital_gains: Realised capital gains in the window
        capital_gains_export: Whether the gains are export income (CGT exempt)

    Returns:
        FullTaxLiabilityResult
    """
    total_income = to_decimal(total_income)
    gross_salary = to_decimal(gross_salary)

    taxable = compute_taxable_profit(
        total_income,
        category_aggregates,
        annual_rent,
        gross_salary,
        profile.effective_pension_rate,
        profile.effective_nhf_rate,
    )
    cit = compute_cit(taxable.taxable_profit, profile.annual_turnover, profile.fixed_assets)
    pit = (
        compute_pit(gross_salary, taxable.pension_deduction, taxable.nhf_deduction, annual_rent)
        if gross_salary > 0
        else None
    )
    cgt = compute_cgt(capital_gains, capital_gains_export)
    dividend_tax = compute_dividend_tax(dividend_income)

    total_tax_payable = cit.total + (pit.total_pit if pit else ZERO) + cgt + dividend_tax
    effective_tax_rate = total_tax_payable / total_income if total_income > 0 else ZERO

    return FullTaxLiabilityResult(
        tax_year=tax_year,
        is_small_business_exempt=cit.exempt,
        taxable_profit=taxable,
        cit=cit,
        pit=pit,
        cgt=cgt,
        dividend_tax=dividend_tax,
        total_tax_payable=total_tax_payable,
        effective_tax_rate=effective_tax_rate,
    )


def compute_liability_for_totals(
    totals: LedgerTotals,
    profile: BusinessProfileData,
    annual_rent: Decimal,
    tax_year: int,
) -> FullTaxLiabilityResult:
    """``compute_full_liability`` over whole-window ledger totals.

    The ledger holds no capital-gain records, so CGT is computed on zero.
    """
    return compute_full_liability(
        total_income=totals.total_income,
        category_aggregates=totals.category_aggregates,
        gross_salary=totals.gross_salary,
        dividend_income=totals.dividend_income,
        profile=profile,
        annual_rent=annual_rent,
        tax_year=tax_year,
    )


def compute_trend(current: Decimal, previous: Decimal) -> Optional[Decimal]:
    """Percentage change vs the previous period; None when previous is zero."""
    current = to_decimal(current)
    previous = to_decimal(previous)
    if previous == 0:
        return None
    return (current - previous) / previous * HUNDRED


def build_trend_stat(value: Decimal, previous: Decimal, higher_is_better: bool) -> TrendStat:
    """Trend-annotated metric.

    Income and profit are good when they do not fall; expenses and tax are
    good when they do not rise.
    """
    value = to_decimal(value)
    previous = to_decimal(previous)
    is_positive = value >= previous if higher_is_better else value <= previous
    return TrendStat(
        value=value,
        trend_percentage=compute_trend(value, previous),
        is_positive=is_positive,
    )

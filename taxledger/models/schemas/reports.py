"""Dashboard and reports schemas."""
from __future__ import annotations

import datetime as dt
from decimal import Decimal

from pydantic import BaseModel

from .tax import FullTaxLiabilityResult


class TrendStat(BaseModel):
    """Scalar metric compared with the preceding period."""
    value: Decimal
    trend_percentage: Decimal | None  # None means no previous data, not 0% change
    is_positive: bool


class DashboardStats(BaseModel):
    total_income: TrendStat
    total_expenses: TrendStat
    net_profit: TrendStat
    net_profit_after_tax: TrendStat
    tax_liability: TrendStat


class PeriodTrend(BaseModel):
    """Income, expenses and profit for one bucket."""
    label: str  # "Mon", "21st Feb", "Jan 2026"
    income: Decimal
    expenses: Decimal
    profit: Decimal


class CategorySpend(BaseModel):
    category: str
    label: str
    total: Decimal


class DeductibleSplit(BaseModel):
    category: str
    deductible: Decimal
    non_deductible: Decimal


class DashboardData(BaseModel):
    """Complete dashboard payload."""
    start_date: dt.date
    end_date: dt.date
    previous_start_date: dt.date
    previous_end_date: dt.date
    stats: DashboardStats
    period_trends: list[PeriodTrend]
    spend_by_category: list[CategorySpend]
    deductibles: list[DeductibleSplit]
    tax: FullTaxLiabilityResult


class TaxBreakdownPoint(BaseModel):
    """Tax liability for one bucket."""
    period: str  # "Jan '26"
    cit: Decimal
    development_levy: Decimal
    pit: Decimal
    total: Decimal


class ReportsData(BaseModel):
    """Complete reports payload."""
    start_date: dt.date
    end_date: dt.date
    tax_breakdown: list[TaxBreakdownPoint]
    tax: FullTaxLiabilityResult

"""Pydantic schemas for ledger inputs and report outputs.

Sub-modules:
- records: Income/expense records and business profile snapshots
- tax: Tax engine results
- reports: Dashboard and reports payloads
"""
from .records import (
    DEFAULT_NHF_RATE,
    DEFAULT_PENSION_RATE,
    BusinessProfileData,
    BusinessProfileUpdate,
    ExpenseRecord,
    IncomeRecord,
)
from .reports import (
    CategorySpend,
    DashboardData,
    DashboardStats,
    DeductibleSplit,
    PeriodTrend,
    ReportsData,
    TaxBreakdownPoint,
    TrendStat,
)
from .tax import (
    CITResult,
    FullTaxLiabilityResult,
    ItemizedDeduction,
    PITBracketBreakdown,
    PITResult,
    TaxableProfitResult,
)

__all__ = [
    # Records
    "DEFAULT_NHF_RATE",
    "DEFAULT_PENSION_RATE",
    "BusinessProfileData",
    "BusinessProfileUpdate",
    "ExpenseRecord",
    "IncomeRecord",
    # Tax results
    "CITResult",
    "FullTaxLiabilityResult",
    "ItemizedDeduction",
    "PITBracketBreakdown",
    "PITResult",
    "TaxableProfitResult",
    # Reports
    "CategorySpend",
    "DashboardData",
    "DashboardStats",
    "DeductibleSplit",
    "PeriodTrend",
    "ReportsData",
    "TaxBreakdownPoint",
    "TrendStat",
]

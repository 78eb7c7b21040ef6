"""Tax computation result schemas."""
from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel


class CITResult(BaseModel):
    """Company Income Tax plus Development Levy."""
    exempt: bool
    taxable_profit: Decimal
    cit: Decimal
    development_levy: Decimal
    total: Decimal
    reason: str  # Human-readable explanation of exemption or liability


class PITBracketBreakdown(BaseModel):
    """Tax charged within one PIT bracket."""
    bracket: str  # "₦800,000 – ₦2,000,000"
    taxable_amount: Decimal
    rate: Decimal
    tax: Decimal


class PITResult(BaseModel):
    """Personal Income Tax on salary income."""
    gross_income: Decimal
    total_deductions: Decimal
    taxable_income: Decimal
    bracket_breakdown: list[PITBracketBreakdown]
    total_pit: Decimal


class ItemizedDeduction(BaseModel):
    label: str
    amount: Decimal


class TaxableProfitResult(BaseModel):
    """Income less deductible expenses and statutory reliefs."""
    total_income: Decimal
    total_deductible_expenses: Decimal
    pension_deduction: Decimal
    nhf_deduction: Decimal
    rent_relief: Decimal
    total_deductions: Decimal
    taxable_profit: Decimal  # never negative
    itemized_deductions: list[ItemizedDeduction]


class FullTaxLiabilityResult(BaseModel):
    """CIT, PIT, CGT and dividend tax combined for one window."""
    tax_year: int
    is_small_business_exempt: bool
    taxable_profit: TaxableProfitResult
    cit: CITResult
    pit: PITResult | None  # None when there is no salary income
    cgt: Decimal
    dividend_tax: Decimal
    total_tax_payable: Decimal
    effective_tax_rate: Decimal  # total_tax_payable / total_income, as a fraction

"""Tax computation functions.

Pure computation logic for Nigerian Company Income Tax (CIT), Personal
Income Tax (PIT), Capital Gains Tax (CGT), dividend withholding tax and
expense deductibility. No database access, no dates, no side effects: every
function works on pre-aggregated NGN totals.

Inputs are not validated. Callers must not pass negative amounts or rates.
"""
from __future__ import annotations

from decimal import Decimal
from typing import Any, Mapping, Protocol, Union

from taxledger.models.ledger import ExpenseTag
from taxledger.models.schemas.tax import (
    CITResult,
    ItemizedDeduction,
    PITBracketBreakdown,
    PITResult,
    TaxableProfitResult,
)
from taxledger.utils.currency import format_naira

from .constants import (
    CGT_RATE,
    CIT_EXEMPTION_FIXED_ASSETS,
    CIT_EXEMPTION_TURNOVER,
    CIT_RATE,
    DEDUCTIBILITY_RATES,
    DEFAULT_DEDUCTIBILITY_RATE,
    DEVELOPMENT_LEVY_RATE,
    DIVIDEND_WITHHOLDING_RATE,
    PIT_BRACKETS,
    PITBracket,
    RENT_RELIEF_CAP,
    RENT_RELIEF_RATE,
)

Number = Union[Decimal, int, float]

ZERO = Decimal("0")


class CategoryTotal(Protocol):
    """Per-category expense aggregate: summed amount and representative tag."""
    total: Decimal
    tag: str


def to_decimal(value: Number | None) -> Decimal:
    """Coerce an int/float/Decimal amount to Decimal (None -> 0)."""
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


# ---------------------------------------------------------------------------
# CIT
# ---------------------------------------------------------------------------

def is_small_business_exempt(annual_turnover: Number, fixed_assets: Number) -> bool:
    """True when turnover ≤ ₦100M AND fixed assets ≤ ₦250M (both inclusive)."""
    return (
        to_decimal(annual_turnover) <= CIT_EXEMPTION_TURNOVER
        and to_decimal(fixed_assets) <= CIT_EXEMPTION_FIXED_ASSETS
    )


def compute_cit(
    taxable_profit: Number,
    annual_turnover: Number,
    fixed_assets: Number,
) -> CITResult:
    """
    Calculate Company Income Tax and Development Levy.

    Small businesses (see ``is_small_business_exempt``) owe nothing. Everyone
    else pays 30% CIT plus a 4% Development Levy on taxable profit.

    Args:
        taxable_profit: Taxable profit, already floored at zero by the caller
        annual_turnover: Declared annual turnover
        fixed_assets: Declared fixed assets value

    Returns:
        CITResult with a human-readable reason
    """
    profit = to_decimal(taxable_profit)
    turnover = to_decimal(annual_turnover)
    assets = to_decimal(fixed_assets)

    if is_small_business_exempt(turnover, assets):
        return CITResult(
            exempt=True,
            taxable_profit=profit,
            cit=ZERO,
            development_levy=ZERO,
            total=ZERO,
            reason=(
                f"Turnover {format_naira(turnover)} ≤ {format_naira(CIT_EXEMPTION_TURNOVER)} "
                f"and Fixed Assets {format_naira(assets)} ≤ {format_naira(CIT_EXEMPTION_FIXED_ASSETS)}: "
                f"exempt under 2026 Tax Reform Act"
            ),
        )

    cit = profit * CIT_RATE
    development_levy = profit * DEVELOPMENT_LEVY_RATE
    return CITResult(
        exempt=False,
        taxable_profit=profit,
        cit=cit,
        development_levy=development_levy,
        total=cit + development_levy,
        reason=(
            f"Exceeds small business threshold: CIT @ {CIT_RATE * 100:.0f}% "
            f"+ Development Levy @ {DEVELOPMENT_LEVY_RATE * 100:.0f}%"
        ),
    )


# ---------------------------------------------------------------------------
# PIT
# ---------------------------------------------------------------------------

def compute_rent_relief(annual_rent: Number) -> Decimal:
    """20% of annual rent, capped at ₦500,000."""
    return min(to_decimal(annual_rent) * RENT_RELIEF_RATE, RENT_RELIEF_CAP)


def _bracket_label(bracket: PITBracket) -> str:
    if bracket.max is None:
        return f"Above {format_naira(bracket.min)}"
    return f"{format_naira(bracket.min)} – {format_naira(bracket.max)}"


def compute_pit(
    gross_salary: Number,
    pension_contribution: Number,
    nhf_contribution: Number,
    annual_rent: Number,
) -> PITResult:
    """
    Calculate Personal Income Tax using the progressive bracket schedule.

    Pension, NHF and rent relief are deducted first; the remaining taxable
    income is then sliced across brackets in ascending order. Each bracket
    only taxes the part of income inside its width, and the top bracket
    takes whatever is left. Brackets with nothing to tax are left out of the
    breakdown.

    Args:
        gross_salary: Salary income for the window
        pension_contribution: Pension amount (not rate)
        nhf_contribution: NHF amount (not rate)
        annual_rent: Rent used for rent relief

    Returns:
        PITResult with per-bracket breakdown
    """
    gross = to_decimal(gross_salary)
    rent_relief = compute_rent_relief(annual_rent)
    total_deductions = to_decimal(pension_contribution) + to_decimal(nhf_contribution) + rent_relief
    taxable_income = max(ZERO, gross - total_deductions)

    breakdown: list[PITBracketBreakdown] = []
    remaining = taxable_income
    total_pit = ZERO

    for bracket in PIT_BRACKETS:
        if remaining <= 0:
            break

        width = remaining if bracket.max is None else bracket.max - bracket.min
        taxable_in_bracket = min(remaining, width)
        tax = taxable_in_bracket * bracket.rate

        if taxable_in_bracket > 0:
            breakdown.append(
                PITBracketBreakdown(
                    bracket=_bracket_label(bracket),
                    taxable_amount=taxable_in_bracket,
                    rate=bracket.rate,
                    tax=tax,
                )
            )

        total_pit += tax
        remaining -= taxable_in_bracket

    return PITResult(
        gross_income=gross,
        total_deductions=total_deductions,
        taxable_income=taxable_income,
        bracket_breakdown=breakdown,
        total_pit=total_pit,
    )


# ---------------------------------------------------------------------------
# Deductibility
# ---------------------------------------------------------------------------

def deductibility_rate(category: str) -> Decimal:
    """Deductible fraction for a category; unknown categories are fully deductible."""
    key = getattr(category, "value", category)
    rate = DEDUCTIBILITY_RATES.get(key)
    if rate is None:
        return DEFAULT_DEDUCTIBILITY_RATE
    return rate


def compute_deductible_amount(amount: Number, category: str, tag: str) -> Decimal:
    """
    Deductible portion of an expense.

    - ``personal`` tag -> ₦0 whatever the category
    - ``equipment`` -> ₦0 (claimed through capital allowance)
    - ``meals_entertainment`` -> 50%
    - everything else -> 100%
    """
    if tag == ExpenseTag.PERSONAL:
        return ZERO
    return to_decimal(amount) * deductibility_rate(category)


# ---------------------------------------------------------------------------
# Taxable profit
# ---------------------------------------------------------------------------

def _total_and_tag(aggregate: CategoryTotal | Mapping[str, Any]) -> tuple[Decimal, str]:
    if isinstance(aggregate, Mapping):
        return to_decimal(aggregate["total"]), aggregate["tag"]
    return to_decimal(aggregate.total), aggregate.tag


def compute_taxable_profit(
    total_income: Number,
    expenses_by_category: Mapping[str, CategoryTotal | Mapping[str, Any]],
    annual_rent: Number,
    gross_salary: Number,
    pension_rate: Number,
    nhf_rate: Number,
) -> TaxableProfitResult:
    """
    Aggregate all deductions to arrive at taxable profit (input to ``compute_cit``).

    Args:
        total_income: All income for the window
        expenses_by_category: category -> aggregate with ``total`` and ``tag``
            (attribute access or a plain dict)
        annual_rent: Rent for the window (already prorated by the caller)
        gross_salary: Salary income, basis for pension/NHF deductions
        pension_rate: Pension contribution rate (fraction)
        nhf_rate: NHF contribution rate (fraction)

    Returns:
        TaxableProfitResult; taxable_profit is floored at zero and the
        itemized list only carries categories with a nonzero deduction
    """
    income = to_decimal(total_income)
    salary = to_decimal(gross_salary)

    total_deductible_expenses = ZERO
    itemized: list[ItemizedDeduction] = []

    for category, aggregate in expenses_by_category.items():
        total, tag = _total_and_tag(aggregate)
        deductible = compute_deductible_amount(total, category, tag)
        if deductible > 0:
            total_deductible_expenses += deductible
            itemized.append(ItemizedDeduction(label=category, amount=deductible))

    pension_deduction = salary * to_decimal(pension_rate)
    nhf_deduction = salary * to_decimal(nhf_rate)
    rent_relief = compute_rent_relief(annual_rent)

    total_deductions = total_deductible_expenses + pension_deduction + nhf_deduction + rent_relief
    taxable_profit = max(ZERO, income - total_deductions)

    return TaxableProfitResult(
        total_income=income,
        total_deductible_expenses=total_deductible_expenses,
        pension_deduction=pension_deduction,
        nhf_deduction=nhf_deduction,
        rent_relief=rent_relief,
        total_deductions=total_deductions,
        taxable_profit=taxable_profit,
        itemized_deductions=itemized,
    )


# ---------------------------------------------------------------------------
# CGT / dividends
# ---------------------------------------------------------------------------

def compute_cgt(capital_gain: Number, is_export_income: bool) -> Decimal:
    """CGT at 10%; export income is exempt."""
    if is_export_income:
        return ZERO
    return to_decimal(capital_gain) * CGT_RATE


def compute_dividend_tax(dividend_amount: Number) -> Decimal:
    """Dividend withholding tax at 10%."""
    return to_decimal(dividend_amount) * DIVIDEND_WITHHOLDING_RATE

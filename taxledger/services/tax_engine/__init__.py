"""Tax Engine.

Pure, stateless tax computations on pre-aggregated totals.

Sub-modules:
- constants: Rates, thresholds, PIT brackets, deductibility table
- computations: CIT, PIT, CGT, dividend tax, deductibility, taxable profit
"""
from .computations import (
    compute_cgt,
    compute_cit,
    compute_deductible_amount,
    compute_dividend_tax,
    compute_pit,
    compute_rent_relief,
    compute_taxable_profit,
    deductibility_rate,
    is_small_business_exempt,
    to_decimal,
)
from .constants import (
    DEDUCTIBILITY_RATES,
    PIT_BRACKETS,
    PITBracket,
)

__all__ = [
    # Constants
    "DEDUCTIBILITY_RATES",
    "PIT_BRACKETS",
    "PITBracket",
    # Computation functions
    "compute_cgt",
    "compute_cit",
    "compute_deductible_amount",
    "compute_dividend_tax",
    "compute_pit",
    "compute_rent_relief",
    "compute_taxable_profit",
    "deductibility_rate",
    "is_small_business_exempt",
    "to_decimal",
]

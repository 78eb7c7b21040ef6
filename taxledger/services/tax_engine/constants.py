"""Nigerian 2026 tax reform constants.

Immutable lookup tables shared by the computation functions. Nothing here is
mutated at runtime.
"""
from __future__ import annotations

from decimal import Decimal
from types import MappingProxyType
from typing import Mapping, NamedTuple, Optional

from taxledger.models.ledger import ExpenseCategory

# Small business CIT exemption (both conditions must hold)
CIT_EXEMPTION_TURNOVER = Decimal("100000000")      # ₦100M
CIT_EXEMPTION_FIXED_ASSETS = Decimal("250000000")  # ₦250M

CIT_RATE = Decimal("0.30")
DEVELOPMENT_LEVY_RATE = Decimal("0.04")
CGT_RATE = Decimal("0.10")
DIVIDEND_WITHHOLDING_RATE = Decimal("0.10")

# Rent relief: 20% of annual rent, capped
RENT_RELIEF_RATE = Decimal("0.20")
RENT_RELIEF_CAP = Decimal("500000")                # ₦500,000

DEFAULT_PENSION_RATE = Decimal("0.08")             # 8% employee contribution
DEFAULT_NHF_RATE = Decimal("0.025")                # 2.5%


class PITBracket(NamedTuple):
    min: Decimal
    max: Optional[Decimal]  # None = no upper bound
    rate: Decimal


# Personal Income Tax brackets, ascending. Upper bounds are exclusive.
PIT_BRACKETS: tuple[PITBracket, ...] = (
    PITBracket(Decimal("0"), Decimal("800000"), Decimal("0")),              # First ₦800K: 0%
    PITBracket(Decimal("800000"), Decimal("2000000"), Decimal("0.15")),     # ₦800K-₦2M: 15%
    PITBracket(Decimal("2000000"), Decimal("4000000"), Decimal("0.19")),    # ₦2M-₦4M: 19%
    PITBracket(Decimal("4000000"), Decimal("6000000"), Decimal("0.21")),    # ₦4M-₦6M: 21%
    PITBracket(Decimal("6000000"), Decimal("10000000"), Decimal("0.23")),   # ₦6M-₦10M: 23%
    PITBracket(Decimal("10000000"), None, Decimal("0.25")),                 # Above ₦10M: 25%
)


# Deductible fraction per expense category. Categories missing from this
# table fall back to DEFAULT_DEDUCTIBILITY_RATE.
DEFAULT_DEDUCTIBILITY_RATE = Decimal("1")

DEDUCTIBILITY_RATES: Mapping[str, Decimal] = MappingProxyType({
    ExpenseCategory.OFFICE_SUPPLIES.value: Decimal("1"),
    ExpenseCategory.TRAVEL.value: Decimal("1"),
    ExpenseCategory.MEALS_ENTERTAINMENT.value: Decimal("0.5"),
    ExpenseCategory.SOFTWARE_SUBSCRIPTIONS.value: Decimal("1"),
    ExpenseCategory.EQUIPMENT.value: Decimal("0"),  # capital allowance, not immediately deductible
    ExpenseCategory.RENT.value: Decimal("1"),
    ExpenseCategory.UTILITIES.value: Decimal("1"),
    ExpenseCategory.SALARIES.value: Decimal("1"),
    ExpenseCategory.MARKETING.value: Decimal("1"),
    ExpenseCategory.PROFESSIONAL_SERVICES.value: Decimal("1"),
    ExpenseCategory.BANK_CHARGES.value: Decimal("1"),
    ExpenseCategory.INSURANCE.value: Decimal("1"),
    ExpenseCategory.REPAIRS_MAINTENANCE.value: Decimal("1"),
    ExpenseCategory.FUEL.value: Decimal("1"),
    ExpenseCategory.AIRTIME_INTERNET.value: Decimal("1"),
    ExpenseCategory.OTHER.value: Decimal("1"),
})

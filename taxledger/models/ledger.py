"""
Ledger models: business profile, income entries and expense entries.

All amounts are stored in the NGN base currency. Currency conversion happens
before a record reaches these tables.
"""
from datetime import datetime, timezone
from enum import Enum

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    Integer,
    Numeric,
    String,
    Text,
)

from taxledger.db.base_class import Base


class IncomeType(str, Enum):
    """Income streams tracked by the ledger."""
    SALARY = "salary"
    DIVIDEND = "dividend"
    FREELANCE = "freelance"
    EXPORT = "export"
    OTHER = "other"


class ExpenseTag(str, Enum):
    """How the owner classified an expense."""
    DEDUCTIBLE = "deductible"
    CAPITAL = "capital"
    PERSONAL = "personal"    # never deductible, whatever the category
    BUSINESS = "business"


class ExpenseCategory(str, Enum):
    """
    Expense categories offered by the product.

    Deductibility is looked up per category in the tax engine; any category
    string not listed here is treated as an ordinary business expense.
    """
    OFFICE_SUPPLIES = "office_supplies"
    TRAVEL = "travel"
    MEALS_ENTERTAINMENT = "meals_entertainment"   # 50% deductible
    SOFTWARE_SUBSCRIPTIONS = "software_subscriptions"
    EQUIPMENT = "equipment"                       # capital allowance, not expensed
    RENT = "rent"
    UTILITIES = "utilities"
    SALARIES = "salaries"
    MARKETING = "marketing"
    PROFESSIONAL_SERVICES = "professional_services"
    BANK_CHARGES = "bank_charges"
    INSURANCE = "insurance"
    REPAIRS_MAINTENANCE = "repairs_maintenance"
    FUEL = "fuel"
    AIRTIME_INTERNET = "airtime_internet"
    LOAN_REPAYMENT = "loan_repayment"
    GIFT = "gift"
    GROCERIES = "groceries"
    REIMBURSEMENT = "reimbursement"
    TRANSPORT = "transport"
    EDUCATION = "education"
    HEALTHCARE = "healthcare"
    PERSONAL_CARE = "personal_care"
    CLOTHING = "clothing"
    HOUSEHOLD = "household"
    CHARITY = "charity"
    TAXES_LEVIES = "taxes_levies"
    ENTERTAINMENT = "entertainment"
    SAVINGS_INVESTMENT = "savings_investment"
    OTHER = "other"

    @property
    def label(self) -> str:
        """Human-readable category name"""
        overrides = {
            "meals_entertainment": "Meals & Entertainment",
            "software_subscriptions": "Software & Subscriptions",
            "repairs_maintenance": "Repairs & Maintenance",
            "airtime_internet": "Airtime & Internet",
            "charity": "Charity / Tithe",
            "taxes_levies": "Taxes & Levies",
            "savings_investment": "Savings & Investment",
        }
        return overrides.get(self.value, self.value.replace("_", " ").title())


class BusinessProfile(Base):
    """
    Declared business profile used for tax computation.

    Tracks:
    - Annual turnover and fixed assets (small-business exemption test)
    - Monthly rent (rent relief, prorated per report window)
    - Statutory pension and NHF contribution rates
    """
    __tablename__ = "business_profiles"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, unique=True, nullable=False, index=True)

    full_name = Column(String(200))
    business_name = Column(String(200))

    annual_turnover = Column(Numeric(18, 2), nullable=False, default=0)
    fixed_assets = Column(Numeric(18, 2), nullable=False, default=0)
    monthly_rent = Column(Numeric(18, 2), nullable=True)
    pension_rate = Column(Numeric(6, 4), nullable=True)  # NULL -> 8%
    nhf_rate = Column(Numeric(6, 4), nullable=True)      # NULL -> 2.5%
    tax_year = Column(Integer, nullable=False)

    onboarding_complete = Column(Boolean, default=False)

    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(DateTime, default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    def __repr__(self):
        return f"<BusinessProfile(user_id={self.user_id}, turnover={self.annual_turnover}, assets={self.fixed_assets})>"


class IncomeEntry(Base):
    """Single income record."""
    __tablename__ = "income_entries"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, nullable=False, index=True)

    date = Column(Date, nullable=False, index=True)
    amount_ngn = Column(Numeric(18, 2), nullable=False)
    income_type = Column(String(20), nullable=False, default=IncomeType.OTHER.value)
    is_export_income = Column(Boolean, nullable=False, default=False)

    source = Column(String(200))
    description = Column(Text)

    created_at = Column(DateTime, nullable=False, default=lambda: datetime.now(timezone.utc))

    def __repr__(self):
        return f"<IncomeEntry(id={self.id}, user_id={self.user_id}, amount={self.amount_ngn}, type={self.income_type}, date={self.date})>"


class ExpenseEntry(Base):
    """Single expense record."""
    __tablename__ = "expense_entries"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, nullable=False, index=True)

    date = Column(Date, nullable=False, index=True)
    amount_ngn = Column(Numeric(18, 2), nullable=False)
    category = Column(String(50), nullable=False, index=True)
    tag = Column(String(20), nullable=False, default=ExpenseTag.BUSINESS.value)

    description = Column(String(500))
    notes = Column(Text)

    created_at = Column(DateTime, nullable=False, default=lambda: datetime.now(timezone.utc))

    def __repr__(self):
        return f"<ExpenseEntry(id={self.id}, user_id={self.user_id}, amount={self.amount_ngn}, category={self.category}, date={self.date})>"

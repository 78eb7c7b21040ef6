"""Ledger record and business profile schemas."""
from __future__ import annotations

import datetime as dt
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from taxledger.models.ledger import ExpenseTag, IncomeType

DEFAULT_PENSION_RATE = Decimal("0.08")
DEFAULT_NHF_RATE = Decimal("0.025")


class IncomeRecord(BaseModel):
    """Income record as consumed by the aggregator."""
    model_config = ConfigDict(from_attributes=True, use_enum_values=True, frozen=True)

    date: dt.date
    amount_ngn: Decimal = Field(ge=0)
    income_type: IncomeType = IncomeType.OTHER
    is_export_income: bool = False


class ExpenseRecord(BaseModel):
    """Expense record as consumed by the aggregator.

    ``category`` is a free string: unknown categories are allowed and fall
    back to full deductibility in the tax engine.
    """
    model_config = ConfigDict(from_attributes=True, use_enum_values=True, frozen=True)

    date: dt.date
    amount_ngn: Decimal = Field(ge=0)
    category: str
    tag: ExpenseTag = ExpenseTag.BUSINESS


class BusinessProfileData(BaseModel):
    """Immutable snapshot of a business profile for one computation."""
    model_config = ConfigDict(from_attributes=True, frozen=True)

    user_id: int | None = None
    annual_turnover: Decimal = Field(Decimal("0"), ge=0)
    fixed_assets: Decimal = Field(Decimal("0"), ge=0)
    monthly_rent: Decimal | None = Field(None, ge=0)
    pension_rate: Decimal | None = Field(None, ge=0, le=1)
    nhf_rate: Decimal | None = Field(None, ge=0, le=1)
    tax_year: int

    @property
    def effective_monthly_rent(self) -> Decimal:
        return self.monthly_rent if self.monthly_rent is not None else Decimal("0")

    @property
    def effective_pension_rate(self) -> Decimal:
        return self.pension_rate if self.pension_rate is not None else DEFAULT_PENSION_RATE

    @property
    def effective_nhf_rate(self) -> Decimal:
        return self.nhf_rate if self.nhf_rate is not None else DEFAULT_NHF_RATE


class BusinessProfileUpdate(BaseModel):
    """Schema for updating the declared business profile."""
    full_name: str | None = Field(None, max_length=200)
    business_name: str | None = Field(None, max_length=200)
    annual_turnover: Decimal | None = Field(None, ge=0, description="Annual turnover in NGN")
    fixed_assets: Decimal | None = Field(None, ge=0, description="Fixed assets value in NGN")
    monthly_rent: Decimal | None = Field(None, ge=0, description="Monthly rent in NGN")
    pension_rate: Decimal | None = Field(None, ge=0, le=1, description="Pension contribution rate, e.g. 0.08")
    nhf_rate: Decimal | None = Field(None, ge=0, le=1, description="National Housing Fund rate, e.g. 0.025")
    tax_year: int | None = Field(None, ge=2000, le=2100)
    onboarding_complete: bool | None = None

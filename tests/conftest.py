from __future__ import annotations

import os

os.environ.setdefault("APP_ENV", "test")

from datetime import date  # noqa: E402
from decimal import Decimal  # noqa: E402

import pytest  # noqa: E402

from taxledger.db.base_class import Base  # noqa: E402
from taxledger.db.session import SessionLocal, engine  # noqa: E402
from taxledger.models.ledger import BusinessProfile, ExpenseEntry, IncomeEntry  # noqa: E402
from taxledger.models.schemas.records import (  # noqa: E402
    BusinessProfileData,
    ExpenseRecord,
    IncomeRecord,
)


@pytest.fixture
def db_session():
    """Fresh schema and session for each test."""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def profile_factory(db_session):
    """Factory to persist business profiles for tests."""
    def _create(user_id: int = 1, **overrides):
        data = {
            "user_id": user_id,
            "annual_turnover": Decimal("50000000"),
            "fixed_assets": Decimal("100000000"),
            "monthly_rent": Decimal("100000"),
            "pension_rate": Decimal("0.08"),
            "nhf_rate": Decimal("0.025"),
            "tax_year": 2026,
        }
        data.update(overrides)
        profile = BusinessProfile(**data)
        db_session.add(profile)
        db_session.commit()
        return profile
    return _create


@pytest.fixture
def income_factory(db_session):
    def _create(user_id: int, day: date, amount, income_type: str = "freelance", is_export_income: bool = False):
        entry = IncomeEntry(
            user_id=user_id,
            date=day,
            amount_ngn=Decimal(str(amount)),
            income_type=income_type,
            is_export_income=is_export_income,
        )
        db_session.add(entry)
        db_session.commit()
        return entry
    return _create


@pytest.fixture
def expense_factory(db_session):
    def _create(user_id: int, day: date, amount, category: str = "office_supplies", tag: str = "business"):
        entry = ExpenseEntry(
            user_id=user_id,
            date=day,
            amount_ngn=Decimal(str(amount)),
            category=category,
            tag=tag,
        )
        db_session.add(entry)
        db_session.commit()
        return entry
    return _create


def make_profile(**overrides) -> BusinessProfileData:
    """In-memory profile snapshot (no database)."""
    data = {
        "user_id": 1,
        "annual_turnover": Decimal("50000000"),
        "fixed_assets": Decimal("100000000"),
        "monthly_rent": Decimal("0"),
        "pension_rate": Decimal("0.08"),
        "nhf_rate": Decimal("0.025"),
        "tax_year": 2026,
    }
    data.update(overrides)
    return BusinessProfileData(**data)


def income(day: date, amount, income_type: str = "freelance", is_export_income: bool = False) -> IncomeRecord:
    return IncomeRecord(
        date=day,
        amount_ngn=Decimal(str(amount)),
        income_type=income_type,
        is_export_income=is_export_income,
    )


def expense(day: date, amount, category: str = "office_supplies", tag: str = "business") -> ExpenseRecord:
    return ExpenseRecord(date=day, amount_ngn=Decimal(str(amount)), category=category, tag=tag)

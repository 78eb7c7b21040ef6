"""Tests for the record store."""
from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from taxledger.core.exceptions import RecordStoreError
from taxledger.models.schemas.records import ExpenseRecord, IncomeRecord
from taxledger.services.period_aggregator import ReportingService
from taxledger.services.record_store import fetch_expense_records, fetch_income_records


def test_fetch_income_records_inclusive_and_scoped(db_session, income_factory):
    income_factory(1, date(2026, 2, 28), 100)
    income_factory(1, date(2026, 3, 1), 200, "salary")
    income_factory(1, date(2026, 3, 31), 300, "export", is_export_income=True)
    income_factory(1, date(2026, 4, 1), 400)
    income_factory(2, date(2026, 3, 15), 999)

    records = fetch_income_records(db_session, 1, date(2026, 3, 1), date(2026, 3, 31))

    assert [r.amount_ngn for r in records] == [Decimal("200"), Decimal("300")]
    assert all(isinstance(r, IncomeRecord) for r in records)
    assert records[0].income_type == "salary"
    assert records[1].is_export_income is True


def test_fetch_income_records_ordered_by_date(db_session, income_factory):
    income_factory(1, date(2026, 3, 20), 2)
    income_factory(1, date(2026, 3, 5), 1)

    records = fetch_income_records(db_session, 1, date(2026, 3, 1), date(2026, 3, 31))

    assert [r.date for r in records] == [date(2026, 3, 5), date(2026, 3, 20)]


def test_fetch_expense_records_filters(db_session, expense_factory):
    expense_factory(1, date(2026, 3, 1), 100, "travel", "business")
    expense_factory(1, date(2026, 3, 2), 200, "travel", "personal")
    expense_factory(1, date(2026, 3, 3), 300, "fuel", "business")

    everything = fetch_expense_records(db_session, 1, date(2026, 3, 1), date(2026, 3, 31))
    travel = fetch_expense_records(db_session, 1, date(2026, 3, 1), date(2026, 3, 31), category="travel")
    business_travel = fetch_expense_records(
        db_session, 1, date(2026, 3, 1), date(2026, 3, 31), category="travel", tag="business"
    )

    assert len(everything) == 3
    assert all(isinstance(r, ExpenseRecord) for r in everything)
    assert [r.amount_ngn for r in travel] == [Decimal("100"), Decimal("200")]
    assert [r.tag for r in business_travel] == ["business"]


def test_fetch_records_empty_window(db_session):
    assert fetch_income_records(db_session, 1, date(2026, 1, 1), date(2026, 1, 31)) == []
    assert fetch_expense_records(db_session, 1, date(2026, 1, 1), date(2026, 1, 31)) == []


def test_store_failure_raises_record_store_error():
    # No tables created on this engine
    bare_engine = create_engine("sqlite:///:memory:")
    session = sessionmaker(bind=bare_engine)()
    try:
        with pytest.raises(RecordStoreError) as exc:
            fetch_income_records(session, 1, date(2026, 1, 1), date(2026, 1, 31))
    finally:
        session.close()

    assert exc.value.code == "REC200"
    assert exc.value.details == {"record_type": "income"}


def test_unknown_income_type_raises_record_store_error(db_session, income_factory):
    income_factory(1, date(2026, 3, 1), 100, "bonus")

    with pytest.raises(RecordStoreError) as exc:
        fetch_income_records(db_session, 1, date(2026, 3, 1), date(2026, 3, 31))

    assert exc.value.details == {"record_type": "income"}
    assert "income_type" in exc.value.message
    assert "'bonus'" in exc.value.message


def test_unknown_expense_tag_raises_record_store_error(db_session, expense_factory):
    expense_factory(1, date(2026, 3, 1), 100, "travel", "Business")

    with pytest.raises(RecordStoreError) as exc:
        fetch_expense_records(db_session, 1, date(2026, 3, 1), date(2026, 3, 31))

    assert exc.value.code == "REC200"
    assert exc.value.details == {"record_type": "expense"}
    assert "tag" in exc.value.message


def test_malformed_row_surfaces_through_reports(db_session, profile_factory, expense_factory):
    profile_factory(1)
    expense_factory(1, date(2026, 3, 1), 100, "travel", "Business")

    with pytest.raises(RecordStoreError):
        ReportingService(db_session).get_reports_data(1, "2026-03-01", "2026-03-31")
    with pytest.raises(RecordStoreError):
        ReportingService(db_session).get_dashboard_data(1, "2026-03-01", "2026-03-31")

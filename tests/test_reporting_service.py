"""Tests for dashboard and reports assembly."""
import logging
from datetime import date
from decimal import Decimal

import pytest
from conftest import expense, income, make_profile

from taxledger.core.exceptions import ProfileNotFoundError
from taxledger.services.period_aggregator import (
    ReportingService,
    build_dashboard_data,
    build_reports_data,
    previous_range,
    resolve_report_range,
)

MARCH = resolve_report_range("2026-03-01", "2026-03-31")


def test_dashboard_trends_compare_with_previous_window():
    data = build_dashboard_data(
        MARCH,
        make_profile(),
        incomes=[income(date(2026, 3, 5), 200000)],
        expenses=[expense(date(2026, 3, 10), 50000)],
        previous_incomes=[income(date(2026, 2, 10), 100000)],
        previous_expenses=[expense(date(2026, 2, 11), 100000)],
    )

    assert data.previous_start_date == date(2026, 1, 29)
    assert data.previous_end_date == date(2026, 2, 28)

    stats = data.stats
    assert stats.total_income.value == Decimal("200000")
    assert stats.total_income.trend_percentage == Decimal("100")
    assert stats.total_income.is_positive is True

    assert stats.total_expenses.trend_percentage == Decimal("-50")
    assert stats.total_expenses.is_positive is True

    assert stats.net_profit.value == Decimal("150000")
    assert stats.net_profit.trend_percentage is None
    assert stats.net_profit.is_positive is True

    assert stats.tax_liability.value == 0
    assert stats.tax_liability.trend_percentage is None
    assert stats.tax_liability.is_positive is True


def test_dashboard_without_previous_data_has_no_trends():
    data = build_dashboard_data(
        MARCH,
        make_profile(),
        incomes=[income(date(2026, 3, 5), 200000)],
        expenses=[],
        previous_incomes=[],
        previous_expenses=[],
    )

    assert data.stats.total_income.trend_percentage is None
    assert data.stats.total_expenses.trend_percentage is None


def test_dashboard_period_trends_cover_every_day():
    data = build_dashboard_data(
        MARCH,
        make_profile(),
        incomes=[income(date(2026, 3, 1), 1000)],
        expenses=[expense(date(2026, 3, 1), 400)],
        previous_incomes=[],
        previous_expenses=[],
    )

    assert len(data.period_trends) == 31
    first = data.period_trends[0]
    assert (first.label, first.income, first.expenses, first.profit) == (
        "1st Mar", Decimal("1000"), Decimal("400"), Decimal("600"),
    )
    assert data.period_trends[-1].label == "31st Mar"
    assert data.period_trends[-1].profit == 0


def test_dashboard_category_breakdown_and_deductibles():
    data = build_dashboard_data(
        MARCH,
        make_profile(),
        incomes=[income(date(2026, 3, 1), 500000)],
        expenses=[
            expense(date(2026, 3, 2), 10000, "meals_entertainment"),
            expense(date(2026, 3, 3), 40000, "equipment", "capital"),
            expense(date(2026, 3, 4), 50000, "office_supplies"),
        ],
        previous_incomes=[],
        previous_expenses=[],
    )

    assert [c.category for c in data.spend_by_category] == ["office_supplies", "equipment", "meals_entertainment"]
    assert data.spend_by_category[2].label == "Meals & Entertainment"

    splits = {d.category: (d.deductible, d.non_deductible) for d in data.deductibles}
    assert [d.category for d in data.deductibles][0] == "office_supplies"
    assert splits["meals_entertainment"] == (Decimal("5000"), Decimal("5000"))
    assert splits["equipment"] == (Decimal("0"), Decimal("40000"))
    assert data.deductibles[-1].category == "equipment"


def test_dashboard_filters_apply_to_both_windows():
    data = build_dashboard_data(
        MARCH,
        make_profile(),
        incomes=[],
        expenses=[expense(date(2026, 3, 2), 30000, "travel"), expense(date(2026, 3, 3), 70000, "fuel")],
        previous_incomes=[],
        previous_expenses=[expense(date(2026, 2, 2), 10000, "travel"), expense(date(2026, 2, 3), 90000, "fuel")],
        category="travel",
    )

    assert data.stats.total_expenses.value == Decimal("30000")
    assert data.stats.total_expenses.trend_percentage == Decimal("200")
    assert [c.category for c in data.spend_by_category] == ["travel"]


def test_dashboard_tax_uses_scaled_rent():
    profile = make_profile(monthly_rent=Decimal("100000"))
    window = resolve_report_range("2026-01-01", "2026-12-31")

    data = build_dashboard_data(
        window,
        profile,
        incomes=[income(date(2026, 6, 30), 2400000, "salary")],
        expenses=[],
        previous_incomes=[],
        previous_expenses=[],
    )

    expected_rent = Decimal("1200000") * 364 / Decimal("365.25")
    assert data.tax.taxable_profit.rent_relief == expected_rent * Decimal("0.20")
    assert data.tax.tax_year == 2026


def test_reports_breakdown_per_month():
    profile = make_profile(annual_turnover=Decimal("200000000"))
    window = resolve_report_range("2026-01-01", "2026-12-31")

    data = build_reports_data(window, profile, [income(date(2026, 3, 15), 1000000)], [])

    assert len(data.tax_breakdown) == 12
    assert data.tax_breakdown[0].period == "Jan '26"
    assert data.tax_breakdown[0].total == 0

    march = data.tax_breakdown[2]
    assert march.period == "Mar '26"
    assert march.cit == Decimal("300000")
    assert march.development_levy == Decimal("40000")
    assert march.pit == 0
    assert march.total == Decimal("340000")
    assert data.tax.total_tax_payable == Decimal("340000")


def test_reports_breakdown_per_day_with_salary():
    window = resolve_report_range("2026-03-01", "2026-03-07")

    data = build_reports_data(window, make_profile(), [income(date(2026, 3, 2), 5000000, "salary")], [])

    assert [p.period for p in data.tax_breakdown] == ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]
    monday = data.tax_breakdown[1]
    # 5M less 8% pension and 2.5% NHF, no rent
    assert monday.pit == Decimal("659750")
    assert monday.cit == 0
    assert monday.total == Decimal("659750")
    assert data.tax.pit.total_pit == Decimal("659750")


def test_reports_category_filter():
    window = resolve_report_range("2026-01-01", "2026-12-31")
    profile = make_profile(annual_turnover=Decimal("200000000"))

    data = build_reports_data(
        window,
        profile,
        [income(date(2026, 3, 15), 1000000)],
        [expense(date(2026, 3, 16), 100000, "travel"), expense(date(2026, 3, 17), 400000, "fuel")],
        category="travel",
    )

    # Only travel is deducted: (1,000,000 - 100,000) * 34%
    assert data.tax.total_tax_payable == Decimal("306000")


def test_service_requires_profile(db_session):
    service = ReportingService(db_session)

    with pytest.raises(ProfileNotFoundError) as exc:
        service.get_dashboard_data(99, "2026-03-01", "2026-03-31")

    assert exc.value.code == "PRF100"
    assert exc.value.status_code == 404


def test_service_reports_from_store(db_session, profile_factory, income_factory, expense_factory):
    profile_factory(1, annual_turnover=Decimal("200000000"), monthly_rent=Decimal("0"))
    income_factory(1, date(2026, 3, 15), 1000000)
    expense_factory(1, date(2026, 4, 10), 100000)
    income_factory(2, date(2026, 3, 15), 5000000)

    data = ReportingService(db_session).get_reports_data(1, today=date(2026, 10, 18))

    assert data.start_date == date(2026, 1, 1)
    assert data.end_date == date(2026, 12, 31)
    assert data.tax_breakdown[2].total == Decimal("340000")
    assert data.tax_breakdown[3].total == 0
    assert data.tax.total_tax_payable == Decimal("306000")


def test_service_dashboard_from_store(db_session, profile_factory, income_factory, expense_factory, caplog):
    profile_factory(1, monthly_rent=Decimal("0"))
    income_factory(1, date(2026, 3, 5), 200000)
    income_factory(1, date(2026, 2, 10), 100000)
    expense_factory(1, date(2026, 3, 10), 30000, "travel")
    expense_factory(1, date(2026, 3, 11), 70000, "fuel")

    with caplog.at_level(logging.INFO):
        data = ReportingService(db_session).get_dashboard_data(1, "2026-03-01", "2026-03-31", category="travel")

    window = resolve_report_range("2026-03-01", "2026-03-31")
    assert data.previous_start_date == previous_range(window).start
    assert data.stats.total_income.value == Decimal("200000")
    assert data.stats.total_income.trend_percentage == Decimal("100")
    assert data.stats.total_expenses.value == Decimal("30000")
    assert "Dashboard for user 1" in caplog.text

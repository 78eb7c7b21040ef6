"""Tests for ledger bucketing and totals."""
import logging
from datetime import date
from decimal import Decimal

from conftest import expense, income

from taxledger.services.period_aggregator import (
    aggregate_ledger,
    filter_expenses,
    resolve_report_range,
    summarise_ledger,
)


def test_summarise_ledger_splits_income_types():
    totals = summarise_ledger(
        [
            income(date(2026, 1, 5), 500000, "salary"),
            income(date(2026, 1, 6), 100000, "dividend"),
            income(date(2026, 1, 7), 300000, "export", is_export_income=True),
            income(date(2026, 1, 8), 50000, "freelance"),
        ],
        [expense(date(2026, 1, 9), 20000)],
    )

    assert totals.total_income == Decimal("950000")
    assert totals.gross_salary == Decimal("500000")
    assert totals.dividend_income == Decimal("100000")
    assert totals.export_income == Decimal("300000")
    assert totals.income_by_type["freelance"] == Decimal("50000")
    assert totals.total_expenses == Decimal("20000")
    assert totals.net_profit == Decimal("930000")


def test_category_tag_is_last_seen_and_mixed_tags_warn(caplog):
    expenses = [
        expense(date(2026, 2, 1), 10000, "travel", "business"),
        expense(date(2026, 2, 2), 5000, "travel", "personal"),
    ]

    with caplog.at_level(logging.WARNING, logger="taxledger.services.period_aggregator.aggregation"):
        totals = summarise_ledger([], expenses)

    travel = totals.category_aggregates["travel"]
    assert travel.total == Decimal("15000")
    assert travel.tag == "personal"
    assert travel.has_mixed_tags
    assert "mixed tags" in caplog.text


def test_consistent_tags_do_not_warn(caplog):
    expenses = [
        expense(date(2026, 2, 1), 10000, "travel"),
        expense(date(2026, 2, 2), 5000, "travel"),
    ]

    with caplog.at_level(logging.WARNING):
        totals = summarise_ledger([], expenses)

    assert not totals.category_aggregates["travel"].has_mixed_tags
    assert "mixed tags" not in caplog.text


def test_every_bucket_present_even_when_empty():
    window = resolve_report_range("2026-01-01", "2026-12-31")
    aggregate = aggregate_ledger(window, [income(date(2026, 3, 15), 1000)], [])

    assert len(aggregate.buckets) == 12
    march = aggregate.buckets[2]
    assert march.label == "Mar"
    assert march.income == Decimal("1000")
    assert all(b.is_empty for i, b in enumerate(aggregate.buckets) if i != 2)


def test_bucket_sums_match_totals():
    window = resolve_report_range("2026-03-01", "2026-03-31")
    incomes = [
        income(date(2026, 3, 1), 100000, "salary"),
        income(date(2026, 3, 1), 25000),
        income(date(2026, 3, 20), 75000),
    ]
    expenses = [
        expense(date(2026, 3, 1), 10000, "fuel"),
        expense(date(2026, 3, 31), 5000, "meals_entertainment"),
    ]

    aggregate = aggregate_ledger(window, incomes, expenses)

    assert len(aggregate.buckets) == 31
    first = aggregate.buckets[0]
    assert first.label == "1st Mar"
    assert first.income == Decimal("125000")
    assert first.gross_salary == Decimal("100000")
    assert first.category_aggregates["fuel"].total == Decimal("10000")
    assert sum(b.income for b in aggregate.buckets) == aggregate.totals.total_income
    assert sum(b.expenses for b in aggregate.buckets) == aggregate.totals.total_expenses


def test_repeated_weekday_labels_do_not_merge_buckets():
    window = resolve_report_range("2026-03-01", "2026-03-08")
    aggregate = aggregate_ledger(
        window,
        [income(date(2026, 3, 1), 500), income(date(2026, 3, 8), 700)],
        [],
    )

    assert len(aggregate.buckets) == 8
    assert aggregate.buckets[0].label == aggregate.buckets[-1].label == "Sun"
    assert aggregate.buckets[0].income == Decimal("500")
    assert aggregate.buckets[-1].income == Decimal("700")


def test_out_of_window_records_count_in_totals_only():
    window = resolve_report_range("2026-03-01", "2026-03-31")
    aggregate = aggregate_ledger(window, [income(date(2026, 4, 2), 9000)], [])

    assert aggregate.totals.total_income == Decimal("9000")
    assert all(b.is_empty for b in aggregate.buckets)


def test_filter_expenses_by_category_and_tag():
    expenses = [
        expense(date(2026, 1, 1), 100, "travel", "business"),
        expense(date(2026, 1, 2), 200, "travel", "personal"),
        expense(date(2026, 1, 3), 300, "fuel", "business"),
    ]

    assert len(filter_expenses(expenses)) == 3
    assert [e.amount_ngn for e in filter_expenses(expenses, category="travel")] == [100, 200]
    assert [e.amount_ngn for e in filter_expenses(expenses, tag="business")] == [100, 300]
    assert [e.amount_ngn for e in filter_expenses(expenses, "travel", "personal")] == [200]

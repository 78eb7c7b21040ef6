"""Ledger bucketing and totals.

Folds income and expense records into whole-window totals and per-bucket
(day or month) accumulators. No tax logic lives here.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Set

from taxledger.models.ledger import IncomeType
from taxledger.models.schemas.records import ExpenseRecord, IncomeRecord

from .period_utils import ReportRange, bucket_label, bucket_start_for, iter_bucket_starts

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


@dataclass
class CategoryAggregate:
    """Summed expenses for one category.

    ``tag`` is the tag of the last record folded in; ``tags`` keeps every tag
    seen so inconsistent tagging can be reported.
    """
    total: Decimal = ZERO
    tag: str = ""
    tags: Set[str] = field(default_factory=set)

    def add(self, record: ExpenseRecord) -> None:
        self.total += record.amount_ngn
        self.tag = record.tag
        self.tags.add(record.tag)

    @property
    def has_mixed_tags(self) -> bool:
        return len(self.tags) > 1


@dataclass
class PeriodBucket:
    """Accumulators for one day or month of the window."""
    start: date
    label: str
    income: Decimal = ZERO
    expenses: Decimal = ZERO
    gross_salary: Decimal = ZERO
    category_aggregates: Dict[str, CategoryAggregate] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return self.income == 0 and self.expenses == 0


@dataclass
class LedgerTotals:
    """Whole-window sums fed into the tax engine."""
    total_income: Decimal = ZERO
    total_expenses: Decimal = ZERO
    gross_salary: Decimal = ZERO
    dividend_income: Decimal = ZERO
    export_income: Decimal = ZERO
    income_by_type: Dict[str, Decimal] = field(default_factory=dict)
    category_aggregates: Dict[str, CategoryAggregate] = field(default_factory=dict)

    @property
    def net_profit(self) -> Decimal:
        return self.total_income - self.total_expenses

    def add_income(self, record: IncomeRecord) -> None:
        amount = record.amount_ngn
        self.total_income += amount
        self.income_by_type[record.income_type] = self.income_by_type.get(record.income_type, ZERO) + amount
        if record.income_type == IncomeType.SALARY:
            self.gross_salary += amount
        elif record.income_type == IncomeType.DIVIDEND:
            self.dividend_income += amount
        if record.is_export_income:
            self.export_income += amount

    def add_expense(self, record: ExpenseRecord) -> None:
        self.total_expenses += record.amount_ngn
        fold_expense(self.category_aggregates, record)


@dataclass
class LedgerAggregate:
    window: ReportRange
    totals: LedgerTotals
    buckets: List[PeriodBucket]


def fold_expense(aggregates: Dict[str, CategoryAggregate], record: ExpenseRecord) -> None:
    """Add *record* to its category aggregate, creating it on first sight."""
    aggregate = aggregates.get(record.category)
    if aggregate is None:
        aggregate = aggregates[record.category] = CategoryAggregate()
    aggregate.add(record)


def filter_expenses(
    expenses: Iterable[ExpenseRecord],
    category: Optional[str] = None,
    tag: Optional[str] = None,
) -> List[ExpenseRecord]:
    """Apply the optional dashboard category/tag filters."""
    result = list(expenses)
    if category:
        result = [e for e in result if e.category == category]
    if tag:
        result = [e for e in result if e.tag == tag]
    return result


def summarise_ledger(
    incomes: Iterable[IncomeRecord],
    expenses: Iterable[ExpenseRecord],
) -> LedgerTotals:
    """Whole-window totals only, without buckets."""
    totals = LedgerTotals()
    for income in incomes:
        totals.add_income(income)
    for expense in expenses:
        totals.add_expense(expense)
    _warn_mixed_tags(totals.category_aggregates)
    return totals


def aggregate_ledger(
    window: ReportRange,
    incomes: Sequence[IncomeRecord],
    expenses: Sequence[ExpenseRecord],
    label_fn: Callable[[date, ReportRange], str] = bucket_label,
) -> LedgerAggregate:
    """
    Bucket records over *window* and compute whole-window totals.

    Every bucket in the window is present, even when nothing was recorded
    in it. Records dated outside the window count toward the totals (the
    record store already scoped them) but land in no bucket.

    Args:
        window: Reporting window
        incomes: Income records for the window
        expenses: Expense records for the window (filters already applied)
        label_fn: Label formatter for buckets

    Returns:
        LedgerAggregate with ordered buckets
    """
    resolution = window.resolution
    buckets: Dict[date, PeriodBucket] = {
        start: PeriodBucket(start=start, label=label_fn(start, window))
        for start in iter_bucket_starts(window)
    }

    totals = summarise_ledger(incomes, expenses)

    for income in incomes:
        bucket = buckets.get(bucket_start_for(income.date, resolution))
        if bucket is None:
            continue
        bucket.income += income.amount_ngn
        if income.income_type == IncomeType.SALARY:
            bucket.gross_salary += income.amount_ngn

    for expense in expenses:
        bucket = buckets.get(bucket_start_for(expense.date, resolution))
        if bucket is None:
            continue
        bucket.expenses += expense.amount_ngn
        fold_expense(bucket.category_aggregates, expense)

    return LedgerAggregate(window=window, totals=totals, buckets=list(buckets.values()))


def _warn_mixed_tags(aggregates: Dict[str, CategoryAggregate]) -> None:
    for category, aggregate in aggregates.items():
        if aggregate.has_mixed_tags:
            logger.warning(
                "Category %s recorded with mixed tags %s; using last tag '%s' for deductibility",
                category,
                sorted(aggregate.tags),
                aggregate.tag,
            )

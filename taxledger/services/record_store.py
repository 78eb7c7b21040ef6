"""Record store: income and expense records for a user and date window.

Returns the full, unpaginated list of matching records as immutable schema
objects. Authorization and user scoping are the caller's concern.
"""
import logging
from datetime import date
from typing import List, Optional

from pydantic import ValidationError
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from taxledger.core.exceptions import RecordStoreError
from taxledger.models.ledger import ExpenseEntry, IncomeEntry
from taxledger.models.schemas.records import ExpenseRecord, IncomeRecord

logger = logging.getLogger(__name__)


def _first_error(error: ValidationError) -> str:
    """Short description of the first invalid field in a stored row."""
    first = error.errors()[0]
    field = ".".join(str(part) for part in first["loc"])
    return f"invalid {field} {first.get('input')!r}: {first['msg']}"


def fetch_income_records(
    db: Session,
    user_id: int,
    start_date: date,
    end_date: date,
) -> List[IncomeRecord]:
    """
    Fetch income records dated within [start_date, end_date].

    Args:
        db: Database session
        user_id: User ID
        start_date: Start date (inclusive)
        end_date: End date (inclusive)

    Returns:
        Income records ordered by date

    Raises:
        RecordStoreError: If the query fails or a stored row is malformed
    """
    stmt = (
        select(IncomeEntry)
        .where(
            IncomeEntry.user_id == user_id,
            IncomeEntry.date >= start_date,
            IncomeEntry.date <= end_date,
        )
        .order_by(IncomeEntry.date, IncomeEntry.id)
    )
    try:
        rows = db.execute(stmt).scalars().all()
    except SQLAlchemyError as e:
        logger.exception(f"Income fetch failed for user {user_id} ({start_date} to {end_date})")
        raise RecordStoreError("income", str(e)) from e
    try:
        return [IncomeRecord.model_validate(row) for row in rows]
    except ValidationError as e:
        logger.error(f"Malformed income row for user {user_id}: {e}")
        raise RecordStoreError("income", _first_error(e)) from e


def fetch_expense_records(
    db: Session,
    user_id: int,
    start_date: date,
    end_date: date,
    category: Optional[str] = None,
    tag: Optional[str] = None,
) -> List[ExpenseRecord]:
    """
    Fetch expense records dated within [start_date, end_date].

    Args:
        db: Database session
        user_id: User ID
        start_date: Start date (inclusive)
        end_date: End date (inclusive)
        category: Only this category, if given
        tag: Only this tag, if given

    Returns:
        Expense records ordered by date

    Raises:
        RecordStoreError: If the query fails or a stored row is malformed
    """
    stmt = select(ExpenseEntry).where(
        ExpenseEntry.user_id == user_id,
        ExpenseEntry.date >= start_date,
        ExpenseEntry.date <= end_date,
    )
    if category:
        stmt = stmt.where(ExpenseEntry.category == category)
    if tag:
        stmt = stmt.where(ExpenseEntry.tag == tag)
    stmt = stmt.order_by(ExpenseEntry.date, ExpenseEntry.id)

    try:
        rows = db.execute(stmt).scalars().all()
    except SQLAlchemyError as e:
        logger.exception(f"Expense fetch failed for user {user_id} ({start_date} to {end_date})")
        raise RecordStoreError("expense", str(e)) from e
    try:
        return [ExpenseRecord.model_validate(row) for row in rows]
    except ValidationError as e:
        logger.error(f"Malformed expense row for user {user_id}: {e}")
        raise RecordStoreError("expense", _first_error(e)) from e

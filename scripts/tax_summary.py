#!/usr/bin/env python3
"""
Print the tax liability summary for a user.

Usage:
    python scripts/tax_summary.py --user-id 34
    python scripts/tax_summary.py --user-id 34 --from 2026-01-01 --to 2026-03-31
    python scripts/tax_summary.py --init-db
"""
import argparse
import sys

from taxledger.core.exceptions import TaxLedgerException
from taxledger.core.logger import init_logging
from taxledger.db.base_class import Base
from taxledger.db.session import engine, session_scope
from taxledger.services.period_aggregator import ReportingService
from taxledger.utils.currency import format_naira


def print_summary(user_id: int, start: str | None, end: str | None) -> bool:
    with session_scope() as db:
        try:
            data = ReportingService(db).get_reports_data(user_id, start=start, end=end)
        except TaxLedgerException as e:
            print(f"❌ {e.code}: {e.message}")
            return False

    tax = data.tax
    print('\n' + '=' * 60)
    print(f'TAX SUMMARY  {data.start_date} to {data.end_date}')
    print('=' * 60)
    print(f'Total income:        {format_naira(tax.taxable_profit.total_income, decimals=True)}')
    print(f'Total deductions:    {format_naira(tax.taxable_profit.total_deductions, decimals=True)}')
    print(f'Taxable profit:      {format_naira(tax.taxable_profit.taxable_profit, decimals=True)}')
    print(f'CIT:                 {format_naira(tax.cit.total, decimals=True)}  ({tax.cit.reason})')
    print(f'PIT:                 {format_naira(tax.pit.total_pit if tax.pit else 0, decimals=True)}')
    print(f'Dividend tax:        {format_naira(tax.dividend_tax, decimals=True)}')
    print(f'Total tax payable:   {format_naira(tax.total_tax_payable, decimals=True)}')
    print('-' * 60)
    for point in data.tax_breakdown:
        print(f'{point.period:<14} {format_naira(point.total, decimals=True):>20}')
    print()
    return True


def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("--user-id", type=int)
    parser.add_argument("--from", dest="start")
    parser.add_argument("--to", dest="end")
    parser.add_argument("--init-db", action="store_true", help="Create ledger tables and exit")
    args = parser.parse_args()

    init_logging()

    if args.init_db:
        Base.metadata.create_all(bind=engine)
        print("✅ Ledger tables created")
        return 0
    if args.user_id is None:
        parser.error("--user-id is required")
    return 0 if print_summary(args.user_id, args.start, args.end) else 1


if __name__ == '__main__':
    sys.exit(main())

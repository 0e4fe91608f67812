#!/usr/bin/env python3
"""Print a loan's schedule or a portfolio's monthly outstandings.

Reads the store configured through environment variables (see
``LedgerConfig.from_env``).

Usage:
    python scripts/ledger_report.py summary
    python scripts/ledger_report.py loan <loan_id> [--as-of 2024-06-30]
    python scripts/ledger_report.py outstandings personal
"""

import argparse
import logging
import sys
from datetime import date
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from loan_ledger.config import LedgerConfig
from loan_ledger.engine import (
    aggregate_monthly,
    compute_interest_summary,
    fixed_term_schedule_for,
    open_ended_schedule_for,
    transaction_history_for,
)
from loan_ledger.exceptions import LoanLedgerError
from loan_ledger.logging import setup_logging
from loan_ledger.models import Loan, LoanType
from loan_ledger.sinks import ConsoleSink
from loan_ledger.store import create_store
from loan_ledger.store.base import LoanStore

logger = logging.getLogger(__name__)

FIXED_TERM_COLUMNS = ["month", "date", "emi", "principal", "interest",
                      "prepayment_applied", "remaining_principal"]
OPEN_ENDED_COLUMNS = ["month", "date", "monthly_interest", "accumulated_interest",
                      "total_payment", "total_prepayment", "outstanding_principal",
                      "total_outstanding", "is_current_month"]
HISTORY_COLUMNS = ["date", "description", "spent", "payment", "outstanding"]
BUCKET_COLUMNS = ["month_key", "active_loans", "outstanding_principal",
                  "total_outstanding", "total_interest", "total_payment",
                  "total_prepayment", "is_current_month"]


def report_loan(loan: Loan, sink: ConsoleSink, as_of: date) -> None:
    sink.write_batch("Loan", [loan])
    if loan.loan_type == LoanType.PERSONAL:
        schedule = fixed_term_schedule_for(loan)
        sink.write_table(f"EMI schedule (EMI {schedule.emi:,.2f})", schedule.rows, FIXED_TERM_COLUMNS)
        summary = compute_interest_summary(loan.amount, loan.interest_rate, loan.term, schedule)
        sink.write_batch("Interest summary", [summary])
    elif loan.loan_type == LoanType.GOLD:
        sink.write_table("Interest accrual", open_ended_schedule_for(loan, as_of), OPEN_ENDED_COLUMNS)
    else:
        sink.write_table("Transactions", transaction_history_for(loan), HISTORY_COLUMNS)


def report_outstandings(store: LoanStore, loan_type: LoanType, sink: ConsoleSink, as_of: date) -> None:
    buckets = aggregate_monthly(store.list_by_type(loan_type), loan_type, as_of)
    sink.write_table(f"{loan_type.value} outstandings", buckets, BUCKET_COLUMNS)


def main() -> int:
    parser = argparse.ArgumentParser(description="Loan ledger reports")
    parser.add_argument("--as-of", type=date.fromisoformat, default=date.today(),
                        help="Evaluation date (YYYY-MM-DD)")
    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("summary", help="Loan and event counts")
    loan_parser = subparsers.add_parser("loan", help="Schedule or history of one loan")
    loan_parser.add_argument("loan_id")
    outstandings_parser = subparsers.add_parser("outstandings", help="Monthly buckets of one loan type")
    outstandings_parser.add_argument("loan_type", choices=[LoanType.PERSONAL.value, LoanType.GOLD.value])
    args = parser.parse_args()

    config = LedgerConfig.from_env()
    setup_logging(level=config.log_level, format_type=config.log_format)
    sink = ConsoleSink(pretty=config.output.pretty_json, max_records=config.output.max_rows)

    try:
        store = create_store(config, clock=lambda: args.as_of)
        if args.command == "summary":
            sink.write_batch("Summary", [store.summary()])
        elif args.command == "loan":
            report_loan(store.get(args.loan_id), sink, args.as_of)
        else:
            report_outstandings(store, LoanType(args.loan_type), sink, args.as_of)
    except LoanLedgerError as e:
        logger.error("%s", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())

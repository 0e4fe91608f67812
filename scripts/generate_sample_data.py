#!/usr/bin/env python3
"""Generate a sample ledger for manual validation.

Creates personal loans, gold loans and credit cards with event histories in
a JSON document store, then prints the outstandings summary of each type.
"""

import argparse
import logging
import sys
from datetime import date
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from loan_ledger.engine import aggregate_monthly, current_bucket, outstanding_for
from loan_ledger.generators import LedgerGenerator, PortfolioSize
from loan_ledger.logging import setup_logging
from loan_ledger.models import LoanType
from loan_ledger.sinks import ConsoleSink
from loan_ledger.store import JsonFileLoanStore

logger = logging.getLogger(__name__)


def print_outstandings(store: JsonFileLoanStore, sink: ConsoleSink, as_of: date) -> None:
    """Print the current bucket of every scheduled loan type."""
    loans = store.list_loans()
    for loan_type in (LoanType.PERSONAL, LoanType.GOLD):
        bucket = current_bucket(aggregate_monthly(loans, loan_type, as_of))
        if bucket is None:
            print(f"\nNo {loan_type.value} loans")
            continue
        sink.write_table(
            f"{loan_type.value} outstandings for {bucket.month_key} "
            f"({bucket.active_loans} active loans)",
            list(bucket.entries.values()),
            ["borrower_name", "outstanding_principal", "total_outstanding", "interest"],
        )

    cards = store.list_by_type(LoanType.CREDIT_CARD)
    print(f"\nCredit card balance: {sum(outstanding_for(card, as_of) for card in cards):,.2f}")


def main() -> None:
    parser = argparse.ArgumentParser(description="Generate a sample loan ledger")
    parser.add_argument("--output-dir", type=Path, default=project_root / "local" / "ledger")
    parser.add_argument("--personal", type=int, default=3, help="Personal loans to create")
    parser.add_argument("--gold", type=int, default=2, help="Gold loans to create")
    parser.add_argument("--cards", type=int, default=2, help="Credit cards to create")
    parser.add_argument("--seed", type=int, default=42)
    parser.add_argument("--as-of", type=date.fromisoformat, default=date.today(),
                        help="Evaluation date (YYYY-MM-DD)")
    parser.add_argument("--log-level", default="INFO")
    args = parser.parse_args()

    setup_logging(level=args.log_level)

    print("=" * 60)
    print("Generating Sample Ledger")
    print("=" * 60)

    store = JsonFileLoanStore(args.output_dir, pretty=True, clock=lambda: args.as_of)
    generator = LedgerGenerator(seed=args.seed)
    loans = generator.populate(
        store,
        args.as_of,
        PortfolioSize(personal=args.personal, gold=args.gold, credit_cards=args.cards),
    )
    logger.info("Generated %d loans in %s", len(loans), args.output_dir)

    sink = ConsoleSink(max_records=20)
    print_outstandings(store, sink, args.as_of)

    print("\n" + "=" * 60)
    print("Summary")
    print("=" * 60)
    for name, count in store.summary().items():
        print(f"  {name}: {count}")
    print(f"\nFiles saved to: {args.output_dir}")


if __name__ == "__main__":
    main()

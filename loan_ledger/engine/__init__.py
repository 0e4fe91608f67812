"""Amortization engine: pure functions over loan snapshots."""

from loan_ledger.engine.aggregation import aggregate_monthly, current_bucket
from loan_ledger.engine.common import allocate_interest_first, monthly_rate, round_money
from loan_ledger.engine.fixed_term import (
    calculate_emi,
    compute_fixed_term_schedule,
    compute_interest_summary,
    fixed_term_schedule_for,
)
from loan_ledger.engine.open_ended import compute_open_ended_schedule, open_ended_schedule_for
from loan_ledger.engine.revolving import (
    adjust_for_delete,
    adjust_for_edit,
    apply_event,
    reconstruct_transaction_history,
    transaction_history_for,
)
from loan_ledger.engine.status import determine_status, outstanding_for

__all__ = [
    "adjust_for_delete",
    "adjust_for_edit",
    "aggregate_monthly",
    "allocate_interest_first",
    "apply_event",
    "calculate_emi",
    "compute_fixed_term_schedule",
    "compute_interest_summary",
    "compute_open_ended_schedule",
    "current_bucket",
    "determine_status",
    "fixed_term_schedule_for",
    "monthly_rate",
    "open_ended_schedule_for",
    "outstanding_for",
    "reconstruct_transaction_history",
    "round_money",
    "transaction_history_for",
]

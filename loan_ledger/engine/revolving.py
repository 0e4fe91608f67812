"""Revolving balance bookkeeping for credit cards."""

from collections.abc import Sequence
from typing import Any

from loan_ledger.exceptions import TypeMismatchError
from loan_ledger.models import EventKind, LedgerTransaction, Loan, LoanType, Payment, Spent


def _signed(kind: EventKind, amount: float) -> float:
    return amount if kind == EventKind.SPENT else -amount


def apply_event(outstanding: Any, kind: EventKind, amount: Any) -> float:
    """Balance right after recording a new spend or payment.

    A payment never takes the balance below zero; any excess is dropped.
    """
    outstanding = float(outstanding)
    amount = float(amount)
    if kind == EventKind.SPENT:
        return outstanding + amount
    return max(0.0, outstanding - amount)


def adjust_for_edit(outstanding: Any, kind: EventKind, old_amount: Any, new_amount: Any) -> float:
    """Swap an edited event's old effect for its new one."""
    delta = _signed(kind, float(new_amount)) - _signed(kind, float(old_amount))
    return float(outstanding) + delta


def adjust_for_delete(outstanding: Any, kind: EventKind, amount: Any) -> float:
    """Undo a deleted event's effect."""
    return float(outstanding) - _signed(kind, float(amount))


def reconstruct_transaction_history(
    outstanding_now: Any,
    spent_events: Sequence[Spent],
    payment_events: Sequence[Payment],
) -> list[LedgerTransaction]:
    """Rebuild each transaction's running balance from the current balance.

    Spends and payments are merged and ordered by date; events on the same
    date keep insertion order with spends ahead of payments. Walking from
    the newest event back, each older row's balance is the newer row's
    balance minus the newer event's net effect, so the newest row always
    shows ``outstanding_now`` even after events were edited or deleted.

    Returns
    -------
    list[LedgerTransaction]
        Rows in ascending date order.
    """
    merged: list[tuple[str, EventKind, Any, str, float, float]] = []
    for spent in spent_events:
        merged.append((spent.spent_id, EventKind.SPENT, spent.date, spent.description,
                       float(spent.amount), 0.0))
    for payment in payment_events:
        merged.append((payment.payment_id, EventKind.PAYMENT, payment.date, "Payment",
                       0.0, float(payment.amount)))

    # Stable sort over the reversed list: same-date ties come out newest inserted first
    newest_first = sorted(reversed(merged), key=lambda item: item[2], reverse=True)

    rows: list[LedgerTransaction] = []
    balance = float(outstanding_now)
    for event_id, kind, when, description, spent, payment in newest_first:
        rows.append(LedgerTransaction(
            event_id=event_id,
            kind=kind,
            date=when,
            description=description,
            spent=spent,
            payment=payment,
            outstanding=balance,
        ))
        balance -= spent - payment

    rows.reverse()
    return rows


def opening_balance(history: Sequence[LedgerTransaction]) -> float | None:
    """Balance before the oldest transaction, or None for an empty history."""
    if not history:
        return None
    return history[0].outstanding - history[0].net


def transaction_history_for(loan: Loan) -> list[LedgerTransaction]:
    """Audit history for a stored credit card."""
    if loan.loan_type != LoanType.CREDIT_CARD:
        raise TypeMismatchError(
            f"Loan {loan.loan_id} is a {loan.loan_type.value} loan; "
            "transaction histories apply to credit cards only"
        )
    outstanding = loan.outstanding if loan.outstanding is not None else loan.amount
    return reconstruct_transaction_history(outstanding, loan.spent_history, loan.payments)

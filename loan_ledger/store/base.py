"""Loan document store interface shared by every backend.

A backend only knows how to fetch, insert, remove and lock-and-rewrite a
loan document. Everything else lives here: boundary validation, event ids,
credit-card balance bookkeeping and the central status recompute that runs
after every mutation.
"""

import logging
import uuid
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterator
from contextlib import AbstractContextManager, contextmanager
from datetime import date, datetime
from typing import Any

from loan_ledger.engine import (
    adjust_for_delete,
    adjust_for_edit,
    apply_event,
    determine_status,
    round_money,
)
from loan_ledger.exceptions import EventNotFoundError, ValidationError
from loan_ledger.logging import loan_logger
from loan_ledger.models import (
    EventKind,
    Loan,
    LoanInput,
    LoanStatus,
    LoanType,
    Payment,
    Prepayment,
    Spent,
)
from loan_ledger.store import validation

logger = logging.getLogger(__name__)


class LoanStore(ABC):
    """Create/read/update/delete loans and their embedded event arrays.

    Parameters
    ----------
    clock : Callable[[], date] | None
        Source of "today" for status recomputation (default
        ``date.today``).
    """

    def __init__(self, clock: Callable[[], date] | None = None) -> None:
        self._clock = clock or date.today

    # Backend primitives

    @abstractmethod
    def _fetch(self, loan_id: str) -> Loan:
        """Return a detached copy of the document or raise LoanNotFoundError."""

    @abstractmethod
    def _fetch_all(self) -> list[Loan]:
        """Return detached copies of every document in creation order."""

    @abstractmethod
    def _insert(self, loan: Loan) -> None:
        """Store a brand new document."""

    @abstractmethod
    def _remove(self, loan_id: str) -> None:
        """Delete a document or raise LoanNotFoundError."""

    @abstractmethod
    def _mutate(self, loan_id: str) -> AbstractContextManager[Loan]:
        """Lock the document, yield a working copy and save it on clean exit."""

    @staticmethod
    def new_id() -> str:
        return uuid.uuid4().hex

    @contextmanager
    def _changing(self, loan_id: str) -> Iterator[Loan]:
        validation.validate_id(loan_id)
        with self._mutate(loan_id) as loan:
            yield loan
            loan.updated_at = datetime.now()
            loan.status = determine_status(loan, self._clock())

    # Loans

    def list_loans(self) -> list[Loan]:
        return self._fetch_all()

    def list_by_type(self, loan_type: LoanType) -> list[Loan]:
        loan_type = LoanType(loan_type)
        return [loan for loan in self._fetch_all() if loan.loan_type == loan_type]

    def get(self, loan_id: str) -> Loan:
        return self._fetch(validation.validate_id(loan_id))

    def create(self, data: LoanInput) -> Loan:
        """Validate and store a new loan with no events.

        Credit cards start with ``credit_limit`` and ``outstanding`` equal to
        ``amount``.
        """
        data = validation.validate_loan_input(data)
        is_card = data.loan_type == LoanType.CREDIT_CARD
        now = datetime.now()
        loan = Loan(
            loan_id=self.new_id(),
            borrower_name=data.borrower_name,
            loan_type=data.loan_type,
            amount=data.amount,
            interest_rate=data.interest_rate,
            start_date=data.start_date,
            term=data.term,
            status=LoanStatus.ACTIVE,
            credit_limit=data.amount if is_card else None,
            card_number=data.card_number,
            outstanding=data.amount if is_card else None,
            created_at=now,
            updated_at=now,
        )
        self._insert(loan)
        loan_logger(logger, loan.loan_id, loan.loan_type.value).info(
            "Created %s loan for %s", loan.loan_type.value, loan.borrower_name
        )
        return loan

    def update(self, loan_id: str, **fields: Any) -> Loan:
        """Change loan fields; ``loan_type`` is immutable.

        Changing a card's seed ``amount`` shifts ``outstanding`` by the same
        delta so the balance stays reconstructable.
        """
        with self._changing(loan_id) as loan:
            changes = validation.validate_loan_update(loan, fields)
            if loan.is_credit_card and "amount" in changes:
                loan.outstanding = round_money(
                    adjust_for_edit(self._balance(loan), EventKind.SPENT, loan.amount, changes["amount"])
                )
            for name, value in changes.items():
                setattr(loan, name, value)
        loan_logger(logger, loan_id).info("Updated fields %s", ", ".join(sorted(changes)))
        return loan

    def delete(self, loan_id: str) -> None:
        self._remove(validation.validate_id(loan_id))
        loan_logger(logger, loan_id).info("Deleted loan and its events")

    # Payments

    def append_payment(self, loan_id: str, amount: Any, when: Any) -> Loan:
        amount = validation.validate_amount(amount)
        when = validation.validate_date(when)
        with self._changing(loan_id) as loan:
            validation.ensure_accepts(loan, "payment")
            payment = Payment(payment_id=self.new_id(), amount=amount, date=when)
            loan.payments.append(payment)
            if loan.is_credit_card:
                loan.outstanding = round_money(apply_event(self._balance(loan), EventKind.PAYMENT, amount))
        self._log_event(loan, "Recorded payment of %s", amount, payment.payment_id, EventKind.PAYMENT)
        return loan

    def update_payment(self, loan_id: str, payment_id: str, amount: Any = None, when: Any = None) -> Loan:
        with self._changing(loan_id) as loan:
            payment = self._find(loan.payments, "payment_id", payment_id, loan_id)
            old_amount = payment.amount
            self._apply_edit(payment, amount, when)
            if loan.is_credit_card:
                loan.outstanding = round_money(
                    adjust_for_edit(self._balance(loan), EventKind.PAYMENT, old_amount, payment.amount)
                )
        self._log_event(loan, "Edited payment to %s", payment.amount, payment_id, EventKind.PAYMENT)
        return loan

    def delete_payment(self, loan_id: str, payment_id: str) -> Loan:
        with self._changing(loan_id) as loan:
            payment = self._find(loan.payments, "payment_id", payment_id, loan_id)
            loan.payments.remove(payment)
            if loan.is_credit_card:
                loan.outstanding = round_money(
                    adjust_for_delete(self._balance(loan), EventKind.PAYMENT, payment.amount)
                )
        self._log_event(loan, "Deleted payment of %s", payment.amount, payment_id, EventKind.PAYMENT)
        return loan

    # Prepayments

    def append_prepayment(self, loan_id: str, amount: Any, when: Any) -> Loan:
        amount = validation.validate_amount(amount)
        when = validation.validate_date(when)
        with self._changing(loan_id) as loan:
            validation.ensure_accepts(loan, "prepayment")
            validation.ensure_open_for_prepayment(loan)
            prepayment = Prepayment(prepayment_id=self.new_id(), amount=amount, date=when)
            loan.prepayments.append(prepayment)
        self._log_event(loan, "Recorded prepayment of %s", amount, prepayment.prepayment_id)
        return loan

    def update_prepayment(
        self, loan_id: str, prepayment_id: str, amount: Any = None, when: Any = None
    ) -> Loan:
        with self._changing(loan_id) as loan:
            prepayment = self._find(loan.prepayments, "prepayment_id", prepayment_id, loan_id)
            self._apply_edit(prepayment, amount, when)
        self._log_event(loan, "Edited prepayment to %s", prepayment.amount, prepayment_id)
        return loan

    def delete_prepayment(self, loan_id: str, prepayment_id: str) -> Loan:
        with self._changing(loan_id) as loan:
            prepayment = self._find(loan.prepayments, "prepayment_id", prepayment_id, loan_id)
            loan.prepayments.remove(prepayment)
        self._log_event(loan, "Deleted prepayment of %s", prepayment.amount, prepayment_id)
        return loan

    # Spends

    def append_spent(self, loan_id: str, amount: Any, when: Any, description: str) -> Loan:
        amount = validation.validate_amount(amount)
        when = validation.validate_date(when)
        description = validation.validate_text(description, "description")
        with self._changing(loan_id) as loan:
            validation.ensure_accepts(loan, "spent")
            spent = Spent(spent_id=self.new_id(), amount=amount, date=when, description=description)
            loan.spent_history.append(spent)
            loan.outstanding = round_money(apply_event(self._balance(loan), EventKind.SPENT, amount))
        self._log_event(loan, "Recorded spend of %s", amount, spent.spent_id, EventKind.SPENT)
        return loan

    def update_spent(
        self,
        loan_id: str,
        spent_id: str,
        amount: Any = None,
        when: Any = None,
        description: str | None = None,
    ) -> Loan:
        with self._changing(loan_id) as loan:
            spent = self._find(loan.spent_history, "spent_id", spent_id, loan_id)
            old_amount = spent.amount
            if description is None or amount is not None or when is not None:
                self._apply_edit(spent, amount, when)
            if description is not None:
                spent.description = validation.validate_text(description, "description")
            loan.outstanding = round_money(
                adjust_for_edit(self._balance(loan), EventKind.SPENT, old_amount, spent.amount)
            )
        self._log_event(loan, "Edited spend to %s", spent.amount, spent_id, EventKind.SPENT)
        return loan

    def delete_spent(self, loan_id: str, spent_id: str) -> Loan:
        with self._changing(loan_id) as loan:
            spent = self._find(loan.spent_history, "spent_id", spent_id, loan_id)
            loan.spent_history.remove(spent)
            loan.outstanding = round_money(adjust_for_delete(self._balance(loan), EventKind.SPENT, spent.amount))
        self._log_event(loan, "Deleted spend of %s", spent.amount, spent_id, EventKind.SPENT)
        return loan

    def summary(self) -> dict[str, int]:
        """Return summary counts of loans and events."""
        loans = self._fetch_all()
        counts = {"loans": len(loans)}
        for loan_type in LoanType:
            counts[loan_type.value] = sum(1 for loan in loans if loan.loan_type == loan_type)
        for status in LoanStatus:
            counts[status.value] = sum(1 for loan in loans if loan.status == status)
        counts["payments"] = sum(len(loan.payments) for loan in loans)
        counts["prepayments"] = sum(len(loan.prepayments) for loan in loans)
        counts["spent"] = sum(len(loan.spent_history) for loan in loans)
        return counts

    # Helpers

    @staticmethod
    def _balance(loan: Loan) -> Any:
        return loan.outstanding if loan.outstanding is not None else loan.amount

    @staticmethod
    def _find(events: list, id_attr: str, event_id: str, loan_id: str) -> Any:
        validation.validate_id(event_id, id_attr)
        for event in events:
            if getattr(event, id_attr) == event_id:
                return event
        label = id_attr.removesuffix("_id")
        raise EventNotFoundError(f"{label.capitalize()} {event_id} not found on loan {loan_id}")

    @staticmethod
    def _apply_edit(event: Any, amount: Any, when: Any) -> None:
        if amount is None and when is None:
            raise ValidationError("amount", "an amount or a date is required")
        if amount is not None:
            event.amount = validation.validate_amount(amount)
        if when is not None:
            event.date = validation.validate_date(when)

    @staticmethod
    def _log_event(
        loan: Loan,
        message: str,
        amount: Any,
        event_id: str,
        kind: EventKind | None = None,
    ) -> None:
        extra = {"event_id": event_id}
        if kind is not None:
            extra["event_kind"] = kind.value
        loan_logger(logger, loan.loan_id, loan.loan_type.value).info(
            message + " (status %s)", amount, loan.status.value, extra=extra
        )

"""Transaction Lifecycle — ACTIVE -> OVERDUE -> RETURNED transitions.

Invariants:
    - plan_overdue_sweep is PURE: returns transition descriptors, mutates nothing
    - Only ACTIVE transactions with due_date < today are planned (RETURNED and
      already-OVERDUE ones are skipped), so a second sweep on the same day plans nothing
    - Sweep fine = days_overdue * daily_fine_rate, set once on the ACTIVE -> OVERDUE edge
    - close_transaction refuses RETURNED input (terminal) and return_date < issue_date

Design Decisions:
    - Fine frozen at the sweep that flips a loan to OVERDUE; the amount actually owed
      is recomputed by calculate_fine when the loan is closed
    - mark_overdue / close_transaction mutate the passed transaction: the shell works
      on transient copies and persists them through the store
"""

from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal

from circulation.core.domain_types import TransactionStatus
from circulation.core.entities import Book, Member, Transaction
from circulation.core.errors import (
    ErrorContext, InvalidTransactionError, TransactionAlreadyReturnedError,
)
from circulation.core.fines import calculate_fine, days_overdue, fine_for_days
from circulation.core.loan_policy import LoanPolicy


@dataclass(frozen=True)
class OverdueTransition:
    """A planned ACTIVE -> OVERDUE flip for one transaction."""
    transaction: Transaction
    days_overdue: int
    fine: Decimal


def is_sweep_candidate(transaction: Transaction, today: date) -> bool:
    return (
        transaction.status not in (TransactionStatus.RETURNED, TransactionStatus.OVERDUE)
        and transaction.due_date is not None
        and transaction.due_date < today
    )


def plan_overdue_sweep(
    transactions: list[Transaction], today: date, policy: LoanPolicy,
) -> list[OverdueTransition]:
    """Every transaction that crosses into OVERDUE today, with its fine."""
    plan = []
    for transaction in transactions:
        if not is_sweep_candidate(transaction, today):
            continue
        days = days_overdue(transaction.due_date, today)
        plan.append(OverdueTransition(transaction, days, fine_for_days(days, policy)))
    return plan


def mark_overdue(transition: OverdueTransition) -> Transaction:
    transaction = transition.transaction
    transaction.status = TransactionStatus.OVERDUE
    transaction.fine_amount = transition.fine
    return transaction


def open_transaction(
    book: Book, member: Member, issue_date: date, loan_period_days: int,
) -> Transaction:
    """New ACTIVE loan: due loan_period_days after issue, no fine."""
    if loan_period_days < 1:
        raise InvalidTransactionError(
            f"Loan period must be at least 1 day, got {loan_period_days}",
            "loan_period_days",
            ErrorContext(book_id=book.id, member_id=member.id),
        )
    return Transaction(
        book=book,
        member=member,
        issue_date=issue_date,
        due_date=issue_date + timedelta(days=loan_period_days),
        status=TransactionStatus.ACTIVE,
    )


def close_transaction(
    transaction: Transaction, return_date: date, policy: LoanPolicy,
) -> Decimal:
    """Mark returned on return_date and finalize the fine. Returns the fine."""
    context = ErrorContext(transaction_id=transaction.id)
    if transaction.is_returned:
        raise TransactionAlreadyReturnedError(transaction.id, context)
    if transaction.issue_date is not None and return_date < transaction.issue_date:
        raise InvalidTransactionError(
            f"Return date {return_date} is before issue date {transaction.issue_date}",
            "return_date", context,
        )
    transaction.return_date = return_date
    transaction.fine_amount = calculate_fine(transaction, return_date, policy)
    transaction.status = TransactionStatus.RETURNED
    return transaction.fine_amount

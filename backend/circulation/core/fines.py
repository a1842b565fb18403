"""Fine Calculation — pure late-fee arithmetic for a single transaction.

Invariants:
    - Fine is 0 when due_date is absent
    - Fine is 0 when the effective return date is on or before due_date
    - Otherwise fine == whole days late * daily_fine_rate (never negative)
    - Effective return date is return_date if present, else today

Design Decisions:
    - today is a parameter, never read from the system clock (shell injects a Clock)
    - Decimal arithmetic, quantized to cents: amounts are money
"""

from datetime import date
from decimal import Decimal

from circulation.core.entities import Transaction
from circulation.core.loan_policy import LoanPolicy


CENTS = Decimal("0.01")


def days_overdue(due_date: date | None, as_of: date) -> int:
    """Whole days between due_date and as_of, floored at 0."""
    if due_date is None or as_of <= due_date:
        return 0
    return (as_of - due_date).days


def fine_for_days(days: int, policy: LoanPolicy) -> Decimal:
    return (Decimal(max(days, 0)) * policy.daily_fine_rate).quantize(CENTS)


def effective_return_date(transaction: Transaction, today: date) -> date:
    return transaction.return_date if transaction.return_date is not None else today


def calculate_fine(
    transaction: Transaction, today: date, policy: LoanPolicy,
) -> Decimal:
    """Fine owed for this transaction as of today. Pure, usable for previews."""
    if transaction.due_date is None:
        return Decimal("0.00")
    returned_on = effective_return_date(transaction, today)
    return fine_for_days(days_overdue(transaction.due_date, returned_on), policy)

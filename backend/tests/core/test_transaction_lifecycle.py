"""Transaction Lifecycle — tests for sweep planning and open/close transitions.

Tests cover:
    - plan_overdue_sweep picks only ACTIVE loans strictly past due
    - RETURNED and already-OVERDUE loans are never planned
    - applying a plan leaves nothing to plan on the same day
    - open_transaction / close_transaction enforce their invariants
"""

from datetime import timedelta
from decimal import Decimal

import pytest

from circulation.core.domain_types import TransactionStatus
from circulation.core.errors import InvalidTransactionError, TransactionAlreadyReturnedError
from circulation.core.transaction_lifecycle import (
    close_transaction, mark_overdue, open_transaction, plan_overdue_sweep,
)


# ─── plan_overdue_sweep ──────────────────────────────────────────

def test_plans_active_past_due_loan_with_fine(make_loan, today, policy):
    loan = make_loan(due_in=-10, issued_ago=24)
    plan = plan_overdue_sweep([loan], today, policy)
    assert len(plan) == 1
    assert plan[0].transaction is loan
    assert plan[0].days_overdue == 10
    assert plan[0].fine == Decimal("50.00")


def test_planning_does_not_mutate(make_loan, today, policy):
    loan = make_loan(due_in=-3)
    plan_overdue_sweep([loan], today, policy)
    assert loan.status == TransactionStatus.ACTIVE
    assert loan.fine_amount == Decimal("0")


def test_never_plans_returned_loans(make_loan, today, policy):
    loan = make_loan(due_in=-30, issued_ago=50, returned_in=-1, status=TransactionStatus.RETURNED)
    assert plan_overdue_sweep([loan], today, policy) == []


def test_never_replans_overdue_loans(make_loan, today, policy):
    loan = make_loan(due_in=-3, status=TransactionStatus.OVERDUE, fine="15.00")
    assert plan_overdue_sweep([loan], today, policy) == []


@pytest.mark.parametrize("due_in", [0, 1, None])
def test_skips_loans_not_strictly_past_due(make_loan, today, policy, due_in):
    assert plan_overdue_sweep([make_loan(due_in=due_in)], today, policy) == []


def test_applying_plan_leaves_nothing_for_second_pass(make_loan, today, policy):
    loans = [make_loan(due_in=-1), make_loan(due_in=-2), make_loan(due_in=5)]
    for transition in plan_overdue_sweep(loans, today, policy):
        mark_overdue(transition)
    assert [l.status for l in loans] == [
        TransactionStatus.OVERDUE, TransactionStatus.OVERDUE, TransactionStatus.ACTIVE,
    ]
    assert [l.fine_amount for l in loans] == [Decimal("5.00"), Decimal("10.00"), Decimal("0")]
    assert plan_overdue_sweep(loans, today, policy) == []


# ─── open / close ────────────────────────────────────────────────

def test_open_transaction_starts_active_with_due_date(book, member, today):
    loan = open_transaction(book, member, today, 14)
    assert loan.status == TransactionStatus.ACTIVE
    assert loan.issue_date == today
    assert loan.due_date == today + timedelta(days=14)
    assert loan.fine_amount == Decimal("0")
    assert loan.id is None


def test_open_transaction_rejects_non_positive_period(book, member, today):
    with pytest.raises(InvalidTransactionError) as exc:
        open_transaction(book, member, today, 0)
    assert exc.value.field == "loan_period_days"


def test_close_transaction_finalizes_fine(make_loan, today, policy):
    loan = make_loan(due_in=-4, issued_ago=18, status=TransactionStatus.OVERDUE, fine="5.00")
    fine = close_transaction(loan, today, policy)
    assert fine == Decimal("20.00")
    assert loan.fine_amount == Decimal("20.00")
    assert loan.status == TransactionStatus.RETURNED
    assert loan.return_date == today


def test_close_on_time_has_zero_fine(make_loan, today, policy):
    loan = make_loan(due_in=2)
    assert close_transaction(loan, today, policy) == Decimal("0")


def test_close_twice_is_refused(make_loan, today, policy):
    loan = make_loan(due_in=2)
    close_transaction(loan, today, policy)
    with pytest.raises(TransactionAlreadyReturnedError):
        close_transaction(loan, today, policy)


def test_return_before_issue_is_refused(make_loan, today, policy):
    loan = make_loan(issued_ago=0)
    with pytest.raises(InvalidTransactionError) as exc:
        close_transaction(loan, today - timedelta(days=1), policy)
    assert exc.value.field == "return_date"
    assert loan.status == TransactionStatus.ACTIVE

"""Fine Calculation — tests for pure late-fee arithmetic.

Tests cover:
    - zero fine without a due date, on time, or early
    - days_late * rate when the effective return date is past due
    - return_date wins over today when present
"""

from datetime import date, timedelta
from decimal import Decimal

import pytest

from circulation.core.fines import calculate_fine, days_overdue, fine_for_days
from circulation.core.loan_policy import LoanPolicy


def test_no_due_date_means_no_fine(make_loan, today, policy):
    loan = make_loan(due_in=None)
    assert calculate_fine(loan, today, policy) == Decimal("0")


def test_not_yet_due_means_no_fine(make_loan, today, policy):
    assert calculate_fine(make_loan(due_in=3), today, policy) == Decimal("0")


def test_due_today_means_no_fine(make_loan, today, policy):
    assert calculate_fine(make_loan(due_in=0), today, policy) == Decimal("0")


def test_ten_days_late_at_five_per_day_is_fifty(make_loan, today, policy):
    loan = make_loan(due_in=-10, issued_ago=24)
    assert calculate_fine(loan, today, policy) == Decimal("50.00")


@pytest.mark.parametrize("days_late", [1, 2, 7, 30, 365])
def test_fine_is_days_late_times_rate(make_loan, today, policy, days_late):
    loan = make_loan(due_in=-days_late, issued_ago=days_late + 14)
    assert calculate_fine(loan, today, policy) == Decimal(days_late) * Decimal("5")


def test_returned_on_time_has_no_fine_even_if_today_is_later(make_loan, today, policy):
    loan = make_loan(due_in=-5, issued_ago=20, returned_in=-6)
    assert calculate_fine(loan, today, policy) == Decimal("0")


def test_return_date_is_used_instead_of_today(make_loan, today, policy):
    loan = make_loan(due_in=-10, issued_ago=24, returned_in=-7)
    assert calculate_fine(loan, today, policy) == Decimal("15.00")


def test_rate_comes_from_policy(make_loan, today):
    loan = make_loan(due_in=-4, issued_ago=18)
    policy = LoanPolicy(daily_fine_rate=Decimal("2.50"))
    assert calculate_fine(loan, today, policy) == Decimal("10.00")


def test_days_overdue_is_never_negative():
    due = date(2026, 3, 15)
    assert days_overdue(due, due - timedelta(days=3)) == 0
    assert days_overdue(None, due) == 0
    assert days_overdue(due, due + timedelta(days=3)) == 3


def test_fine_for_negative_days_is_zero(policy):
    assert fine_for_days(-2, policy) == Decimal("0.00")

"""Borrowing Rules — tests for advisory limit and overdue-hold signals.

Tests cover:
    - active/overdue counting per member (other members and returned loans excluded)
    - limit boundary: exactly max fires, max - 1 does not
    - holds counted from due dates, independent of status
"""

from circulation.core.borrowing_rules import (
    check_borrowing_limit, check_overdue_holds,
    count_active_borrows, count_overdue_borrows, count_overdue_holds,
)
from circulation.core.domain_types import AuditKind, EventSeverity, TransactionStatus
from circulation.core.entities import Transaction


# ─── counting ────────────────────────────────────────────────────

def test_active_borrows_exclude_returned_and_other_members(make_loan, member, other_member):
    loans = [
        make_loan(),
        make_loan(status=TransactionStatus.OVERDUE, due_in=-2),
        make_loan(status=TransactionStatus.RETURNED, returned_in=-1),
        make_loan(borrower=other_member),
    ]
    assert count_active_borrows(member, loans) == 2
    assert count_active_borrows(other_member, loans) == 1


def test_loans_without_member_are_ignored(make_loan, member):
    orphan = make_loan()
    orphan.member = None
    assert count_active_borrows(member, [orphan]) == 0


def test_overdue_borrows_count_status_only(make_loan, member):
    loans = [
        make_loan(status=TransactionStatus.OVERDUE, due_in=-3),
        make_loan(status=TransactionStatus.ACTIVE, due_in=-3),
    ]
    assert count_overdue_borrows(member, loans) == 1


def test_overdue_holds_count_past_due_regardless_of_status(make_loan, member, today):
    loans = [
        make_loan(status=TransactionStatus.OVERDUE, due_in=-3),
        make_loan(status=TransactionStatus.ACTIVE, due_in=-1),
        make_loan(status=TransactionStatus.ACTIVE, due_in=0),
        make_loan(status=TransactionStatus.RETURNED, due_in=-9, returned_in=-2),
    ]
    assert count_overdue_holds(member, loans, today) == 2


# ─── borrowing limit ─────────────────────────────────────────────

def test_limit_fires_exactly_at_max(make_loan, member, policy):
    loans = [make_loan() for _ in range(policy.max_active_borrows)]
    signal = check_borrowing_limit(member, loans, policy)
    assert signal.kind == AuditKind.BORROW_LIMIT_REACHED
    assert signal.severity == EventSeverity.WARNING
    assert signal.active_borrows == 5
    assert signal.max_borrows == 5


def test_limit_does_not_fire_one_below_max(make_loan, member, policy):
    loans = [make_loan() for _ in range(policy.max_active_borrows - 1)]
    signal = check_borrowing_limit(member, loans, policy)
    assert signal.kind == AuditKind.BORROW_LIMIT_OK
    assert signal.severity == EventSeverity.INFO
    assert signal.active_borrows == 4


def test_returned_loans_do_not_count_toward_limit(make_loan, member, policy):
    loans = [make_loan(status=TransactionStatus.RETURNED, returned_in=-1) for _ in range(8)]
    assert check_borrowing_limit(member, loans, policy).kind == AuditKind.BORROW_LIMIT_OK


def test_limit_with_no_history(member, policy):
    signal = check_borrowing_limit(member, [], policy)
    assert signal.kind == AuditKind.BORROW_LIMIT_OK
    assert signal.active_borrows == 0


# ─── overdue holds ───────────────────────────────────────────────

def test_holds_signal_names_the_count(make_loan, member, today):
    loans = [make_loan(due_in=-1), make_loan(due_in=-20, issued_ago=34)]
    signal = check_overdue_holds(member, loans, today)
    assert signal is not None
    assert signal.kind == AuditKind.OVERDUE_HOLDS
    assert signal.count == 2
    assert signal.member_code == "M-007"


def test_no_holds_signal_when_nothing_is_past_due(make_loan, member, today):
    assert check_overdue_holds(member, [make_loan(due_in=0)], today) is None


def test_other_members_overdue_loans_do_not_hold(make_loan, member, other_member, today):
    loans = [make_loan(due_in=-5, borrower=other_member)]
    assert check_overdue_holds(member, loans, today) is None


def test_loan_without_due_date_is_never_a_hold(make_loan, member, today):
    loans: list[Transaction] = [make_loan(due_in=None)]
    assert check_overdue_holds(member, loans, today) is None

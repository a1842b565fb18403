"""Borrowing Rules — advisory overdue-holds and borrowing-limit checks.

Invariants:
    - Checks are PURE and advisory: they return signals, never block an issue
    - Active borrows = member's transactions with status != RETURNED
    - Overdue holds = member's non-RETURNED transactions with due_date < today
    - Overdue borrows = member's transactions with status == OVERDUE
    - Limit signal fires iff active borrows >= max_active_borrows

Design Decisions:
    - Overdue holds are computed from due dates, not status: a loan that passed its
      due date before any sweep ran still counts
"""

from collections.abc import Iterable
from datetime import date

from circulation.core.audit_events import AuditEvent
from circulation.core.domain_types import AuditKind, EventAction, EventSeverity, TransactionStatus
from circulation.core.entities import Member, Transaction
from circulation.core.loan_policy import LoanPolicy


def member_transactions(
    member: Member, transactions: Iterable[Transaction],
) -> list[Transaction]:
    return [t for t in transactions if t.belongs_to(member)]


def count_active_borrows(member: Member, transactions: Iterable[Transaction]) -> int:
    return sum(1 for t in member_transactions(member, transactions) if not t.is_returned)


def count_overdue_borrows(member: Member, transactions: Iterable[Transaction]) -> int:
    return sum(
        1 for t in member_transactions(member, transactions)
        if t.status == TransactionStatus.OVERDUE
    )


def count_overdue_holds(
    member: Member, transactions: Iterable[Transaction], today: date,
) -> int:
    return sum(
        1 for t in member_transactions(member, transactions)
        if not t.is_returned and t.due_date is not None and t.due_date < today
    )


def check_overdue_holds(
    member: Member, transactions: Iterable[Transaction], today: date,
) -> AuditEvent | None:
    """Warning signal naming the count of overdue holds, or None when clear."""
    count = count_overdue_holds(member, transactions, today)
    if count == 0:
        return None
    return AuditEvent(
        kind=AuditKind.OVERDUE_HOLDS,
        severity=EventSeverity.WARNING,
        action=EventAction.ISSUE,
        member_name=member.full_name,
        member_code=member.member_code,
        count=count,
    )


def check_borrowing_limit(
    member: Member, transactions: Iterable[Transaction], policy: LoanPolicy,
) -> AuditEvent:
    """Violation signal at or above the limit, otherwise an "N of M used" note."""
    active = count_active_borrows(member, transactions)
    reached = active >= policy.max_active_borrows
    return AuditEvent(
        kind=AuditKind.BORROW_LIMIT_REACHED if reached else AuditKind.BORROW_LIMIT_OK,
        severity=EventSeverity.WARNING if reached else EventSeverity.INFO,
        action=EventAction.ISSUE,
        member_name=member.full_name,
        member_code=member.member_code,
        active_borrows=active,
        max_borrows=policy.max_active_borrows,
    )

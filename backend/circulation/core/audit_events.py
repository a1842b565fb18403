"""Audit Events — structured records the engine emits, and the outcome it returns.

Invariants:
    - AuditEvent is data only (kind, ids, amounts, dates); rendering lives in format_audit
    - Builders are pure: same inputs, same event
    - EventOutcome carries failures as values; orchestrations never raise

Design Decisions:
    - One flat AuditEvent with optional fields over one class per kind: sinks and the
      API schema handle a single shape, and format_audit dispatches on kind
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from circulation.core.domain_types import (
    AuditKind, EventAction, EventSeverity, OutcomeStatus, ReturnLabel,
    TransactionId, TransactionStatus,
)
from circulation.core.entities import Book, Member, Transaction


@dataclass(frozen=True)
class AuditEvent:
    """A single structured audit record."""
    kind: AuditKind
    severity: EventSeverity = EventSeverity.INFO
    action: EventAction | None = None
    transaction_id: int | None = None
    book_title: str | None = None
    isbn: str | None = None
    member_name: str | None = None
    member_code: str | None = None
    issue_date: date | None = None
    due_date: date | None = None
    return_date: date | None = None
    fine: Decimal | None = None
    days_overdue: int | None = None
    return_label: ReturnLabel | None = None
    available_copies: int | None = None
    quantity: int | None = None
    active_borrows: int | None = None
    overdue_borrows: int | None = None
    max_borrows: int | None = None
    count: int | None = None


@dataclass(frozen=True)
class StepFailure:
    """A sub-step that failed without stopping the orchestration."""
    step: str
    code: str
    message: str


@dataclass
class EventOutcome:
    """Result of handle_issue / handle_return."""
    action: EventAction
    status: OutcomeStatus = OutcomeStatus.COMPLETED
    transaction_id: TransactionId | None = None
    fine: Decimal | None = None
    transitioned: int = 0
    events: list[AuditEvent] = field(default_factory=list)
    failures: list[StepFailure] = field(default_factory=list)

    def has_event(self, kind: AuditKind) -> bool:
        return any(e.kind == kind for e in self.events)


# ─── Builders ────────────────────────────────────────────────────

def _member_fields(member: Member) -> dict:
    return {"member_name": member.full_name, "member_code": member.member_code}


def _book_fields(book: Book) -> dict:
    return {
        "book_title": book.title,
        "isbn": book.isbn,
        "available_copies": book.available_copies,
        "quantity": book.quantity,
    }


def borrow_event(book: Book, member: Member) -> AuditEvent:
    return AuditEvent(
        kind=AuditKind.BORROW, action=EventAction.ISSUE,
        **_book_fields(book), **_member_fields(member),
    )


def issue_audit_event(
    transaction: Transaction, book: Book, member: Member,
) -> AuditEvent:
    """BOOK ISSUED record: id, title, ISBN, member, issue and due dates."""
    return AuditEvent(
        kind=AuditKind.ISSUE,
        action=EventAction.ISSUE,
        transaction_id=transaction.id,
        issue_date=transaction.issue_date,
        due_date=transaction.due_date,
        **_book_fields(book),
        **_member_fields(member),
    )


def return_event(
    book: Book, member: Member, days_late: int, fine: Decimal,
) -> AuditEvent:
    return AuditEvent(
        kind=AuditKind.RETURN, action=EventAction.RETURN,
        days_overdue=days_late, fine=fine,
        **_book_fields(book), **_member_fields(member),
    )


def return_label_for(status: TransactionStatus) -> ReturnLabel:
    if status == TransactionStatus.OVERDUE:
        return ReturnLabel.OVERDUE_RETURN
    return ReturnLabel.ON_TIME_RETURN


def return_audit_event(
    transaction: Transaction, book: Book, member: Member,
    today: date, fine: Decimal,
) -> AuditEvent:
    """BOOK RETURNED record, labelled from the status stored before this return."""
    return AuditEvent(
        kind=AuditKind.RETURN_AUDIT,
        action=EventAction.RETURN,
        transaction_id=transaction.id,
        return_date=today,
        fine=fine,
        return_label=return_label_for(transaction.status),
        **_book_fields(book),
        **_member_fields(member),
    )


def sweep_event(count: int) -> AuditEvent:
    return AuditEvent(kind=AuditKind.SWEEP, count=count)


def member_status_event(
    member: Member, active_borrows: int, overdue_borrows: int,
) -> AuditEvent:
    return AuditEvent(
        kind=AuditKind.MEMBER_STATUS,
        active_borrows=active_borrows,
        overdue_borrows=overdue_borrows,
        **_member_fields(member),
    )


def not_available_event(action: EventAction) -> AuditEvent:
    return AuditEvent(
        kind=AuditKind.NOT_AVAILABLE, severity=EventSeverity.WARNING, action=action,
    )


def not_found_event(transaction_id: int) -> AuditEvent:
    return AuditEvent(
        kind=AuditKind.NOT_FOUND, severity=EventSeverity.WARNING,
        action=EventAction.RETURN, transaction_id=transaction_id,
    )

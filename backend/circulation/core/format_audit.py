"""Audit Formatting — pure text rendering of structured AuditEvents.

Invariants:
    - All functions are pure (no IO, no logging); the sink decides where text goes
    - Absent dates render as "N/A", an absent transaction id as 0
    - Money renders with two decimals after the configured currency symbol

Design Decisions:
    - Dispatch table keyed by AuditKind: adding a kind means adding one renderer
"""

from collections.abc import Callable
from datetime import date
from decimal import Decimal

from circulation.core.audit_events import AuditEvent
from circulation.core.domain_types import AuditKind, EventAction


DATE_FORMAT = "%Y-%m-%d"
DEFAULT_CURRENCY = "₹"


def format_date(value: date | None) -> str:
    return value.strftime(DATE_FORMAT) if value is not None else "N/A"


def format_money(amount: Decimal | None, currency: str = DEFAULT_CURRENCY) -> str:
    return f"{currency}{(amount or Decimal('0')):.2f}"


def _who(e: AuditEvent) -> str:
    return f"{e.member_name} ({e.member_code})"


def _book(e: AuditEvent) -> str:
    return f"{e.book_title} (ISBN: {e.isbn})"


def _copies(e: AuditEvent) -> str:
    return f"Available copies: {e.available_copies or 0}/{e.quantity or 0}"


def _render_borrow(e: AuditEvent, currency: str) -> str:
    return (
        f"BORROW EVENT: Member {_who(e)} borrowed book '{e.book_title}' "
        f"(ISBN: {e.isbn}). {_copies(e)}"
    )


def _render_issue(e: AuditEvent, currency: str) -> str:
    return (
        f"BOOK ISSUED - Transaction ID: {e.transaction_id or 0} | Book: {_book(e)} | "
        f"Member: {_who(e)} | Issue Date: {format_date(e.issue_date)} | "
        f"Due Date: {format_date(e.due_date)}"
    )


def _render_return(e: AuditEvent, currency: str) -> str:
    return (
        f"RETURN EVENT: Member {_who(e)} returned book '{e.book_title}' "
        f"(ISBN: {e.isbn}). Days overdue: {e.days_overdue or 0}, "
        f"Fine: {format_money(e.fine, currency)}. {_copies(e)}"
    )


def _render_return_audit(e: AuditEvent, currency: str) -> str:
    label = e.return_label.value if e.return_label else "N/A"
    return (
        f"BOOK RETURNED - Transaction ID: {e.transaction_id or 0} | Book: {_book(e)} | "
        f"Member: {_who(e)} | Return Date: {format_date(e.return_date)} | "
        f"Fine: {format_money(e.fine, currency)} | Status: {label}"
    )


def _render_overdue_holds(e: AuditEvent, currency: str) -> str:
    return (
        f"WARNING: Member {_who(e)} has {e.count} overdue book(s). "
        f"Please return them before borrowing new books."
    )


def _render_limit_reached(e: AuditEvent, currency: str) -> str:
    return (
        f"WARNING: Member {_who(e)} has reached borrowing limit "
        f"({e.max_borrows} books). Current active borrows: {e.active_borrows}"
    )


def _render_limit_ok(e: AuditEvent, currency: str) -> str:
    return (
        f"Member {_who(e)} has {e.active_borrows} active borrow(s) "
        f"out of {e.max_borrows} allowed"
    )


def _render_sweep(e: AuditEvent, currency: str) -> str:
    return f"Updated {e.count} transaction(s) to OVERDUE status"


def _render_member_status(e: AuditEvent, currency: str) -> str:
    return (
        f"Member {_who(e)} currently has {e.active_borrows} active borrow(s), "
        f"{e.overdue_borrows} overdue"
    )


# Audit lines call the issue side "borrow".
_ACTION_WORDS = {EventAction.ISSUE: "borrow", EventAction.RETURN: "return"}


def _render_not_available(e: AuditEvent, currency: str) -> str:
    action = _ACTION_WORDS.get(e.action, "borrow")
    return f"Book {action} action triggered - Transaction data not yet available"


def _render_not_found(e: AuditEvent, currency: str) -> str:
    return f"Book return action triggered - Transaction {e.transaction_id} not found"


_RENDERERS: dict[AuditKind, Callable[[AuditEvent, str], str]] = {
    AuditKind.BORROW: _render_borrow,
    AuditKind.ISSUE: _render_issue,
    AuditKind.RETURN: _render_return,
    AuditKind.RETURN_AUDIT: _render_return_audit,
    AuditKind.OVERDUE_HOLDS: _render_overdue_holds,
    AuditKind.BORROW_LIMIT_REACHED: _render_limit_reached,
    AuditKind.BORROW_LIMIT_OK: _render_limit_ok,
    AuditKind.SWEEP: _render_sweep,
    AuditKind.MEMBER_STATUS: _render_member_status,
    AuditKind.NOT_AVAILABLE: _render_not_available,
    AuditKind.NOT_FOUND: _render_not_found,
}


def render_event(event: AuditEvent, currency: str = DEFAULT_CURRENCY) -> str:
    """Render one AuditEvent as a single audit line."""
    return _RENDERERS[event.kind](event, currency)

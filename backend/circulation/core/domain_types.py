"""Domain Types — identity types and enums for the circulation domain.

Invariants:
    - TransactionStatus has exactly three states; RETURNED is terminal
    - All valid states encoded as Enums — no raw string matching

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON and to DB String columns without custom encoders
"""

from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

TransactionId = NewType("TransactionId", int)
BookId = NewType("BookId", int)
MemberId = NewType("MemberId", int)


# ─── Enums ───────────────────────────────────────────────────────

class TransactionStatus(str, Enum):
    """Loan lifecycle states — maps to DB `status` column."""
    ACTIVE = "active"
    OVERDUE = "overdue"
    RETURNED = "returned"


class AuditKind(str, Enum):
    """Every kind of structured event the engine hands to the audit sink."""
    BORROW = "borrow"
    ISSUE = "issue"
    RETURN = "return"
    RETURN_AUDIT = "return_audit"
    OVERDUE_HOLDS = "overdue_holds"
    BORROW_LIMIT_REACHED = "borrow_limit_reached"
    BORROW_LIMIT_OK = "borrow_limit_ok"
    SWEEP = "sweep"
    MEMBER_STATUS = "member_status"
    NOT_AVAILABLE = "not_available"
    NOT_FOUND = "not_found"


class EventSeverity(str, Enum):
    """Audit event severity — decides the log level used by the sink."""
    INFO = "info"
    WARNING = "warning"


class ReturnLabel(str, Enum):
    """Return audit label, chosen from the status stored before the return."""
    OVERDUE_RETURN = "OVERDUE RETURN"
    ON_TIME_RETURN = "ON-TIME RETURN"


class EventAction(str, Enum):
    """Which orchestration produced an outcome."""
    ISSUE = "issue"
    RETURN = "return"


class OutcomeStatus(str, Enum):
    """How an orchestration ended. None of these are raised to the caller."""
    COMPLETED = "completed"
    PARTIAL = "partial"          # finished, but one or more store steps failed
    SKIPPED = "skipped"          # required reference not yet available
    NOT_FOUND = "not_found"      # transaction id unknown to the store
    ABORTED = "aborted"          # unexpected exception at the boundary

"""Loan Schemas — Pydantic models with field-level validation for API boundaries.

Invariants:
    - LoanIssueRequest ids are positive; loan_period_days, when given, is 1-365
    - Response models read straight from core dataclasses (from_attributes)
"""

from datetime import date
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from circulation.core.domain_types import (
    AuditKind, EventAction, EventSeverity, OutcomeStatus, ReturnLabel, TransactionStatus,
)


class LoanIssueRequest(BaseModel):
    """Issue one copy of a book to a member."""
    book_id: int = Field(gt=0)
    member_id: int = Field(gt=0)
    loan_period_days: int | None = Field(None, ge=1, le=365)


class BookSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    isbn: str
    title: str
    quantity: int
    available_copies: int


class MemberSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    member_code: str
    full_name: str


class LoanResponse(BaseModel):
    """Public view of a loan transaction."""
    model_config = ConfigDict(from_attributes=True)

    id: int | None
    book: BookSummary | None
    member: MemberSummary | None
    issue_date: date | None
    due_date: date | None
    return_date: date | None
    status: TransactionStatus
    fine_amount: Decimal


class AuditEventResponse(BaseModel):
    """Structured audit event plus its rendered line."""
    model_config = ConfigDict(from_attributes=True)

    kind: AuditKind
    severity: EventSeverity
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
    message: str = ""


class StepFailureResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    step: str
    code: str
    message: str


class OutcomeResponse(BaseModel):
    """How the lifecycle engine handled the event."""
    action: EventAction
    status: OutcomeStatus
    fine: Decimal | None = None
    transitioned: int = 0
    events: list[AuditEventResponse] = []
    failures: list[StepFailureResponse] = []


class LoanEventResponse(BaseModel):
    """Issue/return response: the loan as stored plus the engine's outcome."""
    loan: LoanResponse
    outcome: OutcomeResponse


class FinePreviewResponse(BaseModel):
    transaction_id: int
    status: TransactionStatus
    due_date: date | None
    as_of: date
    fine: Decimal


class MemberStatusResponse(BaseModel):
    member_id: int
    member_code: str
    full_name: str
    active_borrows: int
    overdue_borrows: int
    max_borrows: int

"""Loan Routes — issue, return, inspect and price loans.

Invariants:
    - Issue and return always report the engine outcome, including advisory warnings
    - A violated borrowing limit or overdue hold never turns an issue into an error
    - Desk errors (404 / 409 / 400) surface through the global CirculationError handler
"""

import dataclasses
import logging

from fastapi import APIRouter, Depends, status

from circulation.config import Settings, get_settings
from circulation.core.audit_events import EventOutcome
from circulation.core.domain_types import BookId, MemberId, TransactionId
from circulation.core.format_audit import render_event
from circulation.api.dependencies import get_desk
from circulation.schemas.loan import (
    AuditEventResponse, FinePreviewResponse, LoanEventResponse, LoanIssueRequest,
    LoanResponse, OutcomeResponse, StepFailureResponse,
)
from circulation.services.circulation_desk import CirculationDesk

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/loans", tags=["loans"])


def outcome_response(outcome: EventOutcome, currency: str) -> OutcomeResponse:
    return OutcomeResponse(
        action=outcome.action,
        status=outcome.status,
        fine=outcome.fine,
        transitioned=outcome.transitioned,
        events=[
            AuditEventResponse(
                **dataclasses.asdict(event), message=render_event(event, currency),
            )
            for event in outcome.events
        ],
        failures=[StepFailureResponse.model_validate(f) for f in outcome.failures],
    )


@router.post(
    "", response_model=LoanEventResponse,
    status_code=status.HTTP_201_CREATED,
)
async def issue_loan(
    body: LoanIssueRequest,
    desk: CirculationDesk = Depends(get_desk),
    settings: Settings = Depends(get_settings),
):
    transaction, outcome = await desk.issue_loan(
        BookId(body.book_id), MemberId(body.member_id), body.loan_period_days,
    )
    return LoanEventResponse(
        loan=LoanResponse.model_validate(transaction),
        outcome=outcome_response(outcome, settings.currency_symbol),
    )


@router.post("/{transaction_id}/return", response_model=LoanEventResponse)
async def return_loan(
    transaction_id: int,
    desk: CirculationDesk = Depends(get_desk),
    settings: Settings = Depends(get_settings),
):
    transaction, outcome = await desk.return_loan(TransactionId(transaction_id))
    return LoanEventResponse(
        loan=LoanResponse.model_validate(transaction),
        outcome=outcome_response(outcome, settings.currency_symbol),
    )


@router.get("/{transaction_id}", response_model=LoanResponse)
async def get_loan(transaction_id: int, desk: CirculationDesk = Depends(get_desk)):
    transaction = await desk.get_loan(TransactionId(transaction_id))
    return LoanResponse.model_validate(transaction)


@router.get("/{transaction_id}/fine", response_model=FinePreviewResponse)
async def preview_fine(transaction_id: int, desk: CirculationDesk = Depends(get_desk)):
    """Fine owed if the loan were returned today (returned loans: the final fine)."""
    transaction, fine = await desk.preview_fine(TransactionId(transaction_id))
    return FinePreviewResponse(
        transaction_id=transaction_id,
        status=transaction.status,
        due_date=transaction.due_date,
        as_of=desk.engine.clock.today(),
        fine=fine,
    )

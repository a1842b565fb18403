"""Circulation Desk — the issue and return operations that drive the engine.

Invariants:
    - issue_loan: unknown book/member -> ResourceNotFoundError, no free copy ->
      NoCopiesAvailableError; otherwise one copy reserved and one ACTIVE loan recorded
    - return_loan: unknown id -> ResourceNotFoundError, already returned ->
      TransactionAlreadyReturnedError (also when another desk closed it first: the
      ledger refuses the write); otherwise loan closed and one copy released
    - Engine outcomes are advisory: a violated borrowing limit never blocks an issue

Design Decisions:
    - The desk raises (it performs the user action); the engine it calls never does
    - handle_return runs BEFORE the loan is closed, so the audit label reflects the
      stored status (OVERDUE vs ACTIVE) rather than the freshly written RETURNED
    - The loan is reloaded after handle_return: its sweep may have flipped it to OVERDUE
"""

import logging
from decimal import Decimal

from circulation.core.audit_events import AuditEvent, EventOutcome
from circulation.core.domain_types import BookId, MemberId, TransactionId
from circulation.core.entities import Transaction
from circulation.core.errors import (
    ErrorContext, NoCopiesAvailableError, ResourceNotFoundError,
    TransactionAlreadyReturnedError,
)
from circulation.core.repository_protocols import CatalogRepository, LoanLedger
from circulation.core.transaction_lifecycle import close_transaction, open_transaction
from circulation.services.lifecycle_engine import TransactionLifecycleEngine

logger = logging.getLogger(__name__)


class CirculationDesk:
    """Issue, return, fine preview and member status for the HTTP layer."""

    def __init__(
        self,
        catalog: CatalogRepository,
        ledger: LoanLedger,
        engine: TransactionLifecycleEngine,
    ):
        self.catalog = catalog
        self.ledger = ledger
        self.engine = engine

    async def issue_loan(
        self, book_id: BookId, member_id: MemberId, loan_period_days: int | None = None,
    ) -> tuple[Transaction, EventOutcome]:
        book = await self.catalog.get_book(book_id)
        if book is None:
            raise ResourceNotFoundError("Book", str(book_id))
        member = await self.catalog.get_member(member_id)
        if member is None:
            raise ResourceNotFoundError("Member", str(member_id))

        period = loan_period_days or self.engine.policy.loan_period_days
        transaction = open_transaction(book, member, self.engine.clock.today(), period)

        if not await self.catalog.reserve_copy(book.id):
            raise NoCopiesAvailableError(
                book.isbn, ErrorContext(book_id=book.id, member_id=member.id),
            )
        book.available_copies -= 1
        await self.ledger.add(transaction)
        logger.info(
            f"Issued '{book.title}' to {member.member_code}, due {transaction.due_date}",
            extra={"transaction_id": transaction.id, "member_id": member.id},
        )

        outcome = await self.engine.handle_issue(transaction, book, member)
        return transaction, outcome

    async def return_loan(
        self, transaction_id: TransactionId,
    ) -> tuple[Transaction, EventOutcome]:
        transaction = await self._get_open_loan(transaction_id)

        outcome = await self.engine.handle_return(transaction_id)

        transaction = await self._get_open_loan(transaction_id)
        close_transaction(transaction, self.engine.clock.today(), self.engine.policy)
        if transaction.book is not None and await self.catalog.release_copy(transaction.book.id):
            transaction.book.available_copies += 1
        await self.ledger.update(transaction)
        logger.info(
            f"Closed loan {transaction_id} with fine {transaction.fine_amount}",
            extra={"transaction_id": transaction_id},
        )
        return transaction, outcome

    async def get_loan(self, transaction_id: TransactionId) -> Transaction:
        transaction = await self.ledger.find_by_id(transaction_id)
        if transaction is None:
            raise ResourceNotFoundError("Transaction", str(transaction_id))
        return transaction

    async def preview_fine(self, transaction_id: TransactionId) -> tuple[Transaction, Decimal]:
        transaction = await self.get_loan(transaction_id)
        return transaction, self.engine.preview_fine(transaction)

    async def member_status(self, member_id: MemberId) -> AuditEvent:
        member = await self.catalog.get_member(member_id)
        if member is None:
            raise ResourceNotFoundError("Member", str(member_id))
        return await self.engine.member_status(member)

    async def _get_open_loan(self, transaction_id: TransactionId) -> Transaction:
        transaction = await self.get_loan(transaction_id)
        if transaction.is_returned:
            raise TransactionAlreadyReturnedError(
                transaction_id, ErrorContext(transaction_id=transaction_id),
            )
        return transaction

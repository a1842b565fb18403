"""Transaction Stores — SQL and in-memory implementations of LoanLedger.

Invariants:
    - Stores hand out entity copies; mutating one changes nothing until update()
    - update() persists status, fine_amount and return_date of an existing loan
      and is visible to every later find_by_id / find_all
    - Every persistence failure surfaces as DatabaseError
    - RETURNED is terminal in storage too: update() of a returned loan raises
      TransactionAlreadyReturnedError and writes nothing

Design Decisions:
    - SQL store commits per update: the sweep persists each changed record individually
    - Conditional UPDATE ... WHERE status != returned: two desks closing the same
      loan cannot both release a copy
    - In-memory store deep-copies on the way in and out, so it behaves like a real
      datastore in tests and in single-process tooling
    - Reads use populate_existing: rows touched by an earlier step in the same
      session are reloaded, relationships included
"""

import copy
import logging
from decimal import Decimal

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from circulation.core.domain_types import BookId, MemberId, TransactionId, TransactionStatus
from circulation.core.entities import Book, Member, Transaction
from circulation.core.errors import DatabaseError, ErrorContext, TransactionAlreadyReturnedError
from circulation.infrastructure.database import translate_db_error
from circulation.models.book import Book as BookRow
from circulation.models.loan_transaction import LoanTransaction
from circulation.models.member import Member as MemberRow

logger = logging.getLogger(__name__)


# ─── Row -> entity mapping ───────────────────────────────────────

def book_to_entity(row: BookRow) -> Book:
    return Book(
        id=BookId(row.id),
        isbn=row.isbn,
        title=row.title,
        quantity=row.quantity,
        available_copies=row.available_copies,
    )


def member_to_entity(row: MemberRow) -> Member:
    return Member(id=MemberId(row.id), member_code=row.member_code, full_name=row.full_name)


def transaction_to_entity(row: LoanTransaction) -> Transaction:
    return Transaction(
        id=TransactionId(row.id),
        book=book_to_entity(row.book) if row.book is not None else None,
        member=member_to_entity(row.member) if row.member is not None else None,
        issue_date=row.issue_date,
        due_date=row.due_date,
        return_date=row.return_date,
        status=TransactionStatus(row.status),
        fine_amount=Decimal(row.fine_amount),
    )


# ─── SQL ─────────────────────────────────────────────────────────

class SqlTransactionStore:
    """LoanLedger over the loan_transactions table."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_by_id(self, transaction_id: TransactionId) -> Transaction | None:
        try:
            row = await self.db.get(LoanTransaction, transaction_id, populate_existing=True)
        except SQLAlchemyError as e:
            raise translate_db_error(e, ErrorContext(transaction_id=transaction_id)) from e
        return transaction_to_entity(row) if row is not None else None

    async def find_all(self) -> list[Transaction]:
        try:
            result = await self.db.execute(
                select(LoanTransaction)
                .order_by(LoanTransaction.id)
                .execution_options(populate_existing=True),
            )
            rows = result.scalars().all()
        except SQLAlchemyError as e:
            raise translate_db_error(e) from e
        return [transaction_to_entity(row) for row in rows]

    async def update(self, transaction: Transaction) -> None:
        """Write status, fine and return date. A RETURNED row is never written again."""
        context = ErrorContext(transaction_id=transaction.id)
        if transaction.id is None:
            raise DatabaseError("transaction was never persisted", "update", context)
        try:
            result = await self.db.execute(
                update(LoanTransaction)
                .where(
                    LoanTransaction.id == transaction.id,
                    LoanTransaction.status != TransactionStatus.RETURNED.value,
                )
                .values(
                    status=transaction.status.value,
                    fine_amount=transaction.fine_amount,
                    return_date=transaction.return_date,
                )
                .execution_options(synchronize_session=False),
            )
            if result.rowcount != 1:
                await self.db.rollback()
                stored = await self.db.scalar(
                    select(LoanTransaction.status).where(LoanTransaction.id == transaction.id),
                )
                if stored is None:
                    raise DatabaseError(f"no loan with id {transaction.id}", "update", context)
                raise TransactionAlreadyReturnedError(transaction.id, context)
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise translate_db_error(e, context) from e

    async def add(self, transaction: Transaction) -> Transaction:
        """Insert a new loan (and commit any staged copy-count change with it)."""
        if transaction.book is None or transaction.member is None:
            raise DatabaseError("loan needs a book and a member", "insert")
        row = LoanTransaction(
            book_id=transaction.book.id,
            member_id=transaction.member.id,
            issue_date=transaction.issue_date,
            due_date=transaction.due_date,
            return_date=transaction.return_date,
            status=transaction.status.value,
            fine_amount=transaction.fine_amount,
        )
        try:
            self.db.add(row)
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise translate_db_error(e) from e
        transaction.id = TransactionId(row.id)
        logger.info(
            f"Recorded loan {row.id}",
            extra={"transaction_id": row.id, "member_id": row.member_id, "book_id": row.book_id},
        )
        return transaction


# ─── In-memory ───────────────────────────────────────────────────

class InMemoryTransactionStore:
    """LoanLedger kept in a dict; ids assigned sequentially from 1."""

    def __init__(self, transactions: list[Transaction] | None = None):
        self._rows: dict[int, Transaction] = {}
        self._next_id = 1
        for transaction in transactions or []:
            self._insert(transaction)

    def _insert(self, transaction: Transaction) -> Transaction:
        if transaction.id is None:
            transaction.id = TransactionId(self._next_id)
        self._next_id = max(self._next_id, transaction.id + 1)
        self._rows[transaction.id] = copy.deepcopy(transaction)
        return transaction

    async def find_by_id(self, transaction_id: TransactionId) -> Transaction | None:
        row = self._rows.get(transaction_id)
        return copy.deepcopy(row) if row is not None else None

    async def find_all(self) -> list[Transaction]:
        return [copy.deepcopy(row) for _, row in sorted(self._rows.items())]

    async def update(self, transaction: Transaction) -> None:
        if transaction.id is None or transaction.id not in self._rows:
            raise DatabaseError(
                f"no loan with id {transaction.id}", "update",
                ErrorContext(transaction_id=transaction.id),
            )
        if self._rows[transaction.id].is_returned:
            raise TransactionAlreadyReturnedError(
                transaction.id, ErrorContext(transaction_id=transaction.id),
            )
        self._rows[transaction.id] = copy.deepcopy(transaction)

    async def add(self, transaction: Transaction) -> Transaction:
        return self._insert(transaction)

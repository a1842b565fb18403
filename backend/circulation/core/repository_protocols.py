"""Boundary Protocols — contracts between core and shell.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - All IO operations accessed through Protocol types
    - Implementations provided by shell via dependency injection
    - TransactionStore.update is visible to later find_all / find_by_id calls
    - Store implementations report persistence failures as DatabaseError
    - TransactionStore.update never overwrites a RETURNED record; it raises
      TransactionAlreadyReturnedError instead

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - Async store: implementations do IO, but the core functions that consume
      the loaded transactions are never async themselves
"""

from datetime import date
from typing import Protocol

from circulation.core.audit_events import AuditEvent
from circulation.core.domain_types import BookId, MemberId, TransactionId
from circulation.core.entities import Book, Member, Transaction


class TransactionStore(Protocol):
    """Contract for transaction persistence — implemented by shell."""
    async def find_by_id(self, transaction_id: TransactionId) -> Transaction | None: ...
    async def find_all(self) -> list[Transaction]: ...
    async def update(self, transaction: Transaction) -> None: ...


class Clock(Protocol):
    """Supplies "today"."""
    def today(self) -> date: ...


class AuditSink(Protocol):
    """Receives every structured audit event the engine produces."""
    def emit(self, event: AuditEvent) -> None: ...


class LoanLedger(TransactionStore, Protocol):
    """TransactionStore that can also record new loans — used by the desk."""
    async def add(self, transaction: Transaction) -> Transaction: ...


class CatalogRepository(Protocol):
    """Book and member lookups plus copy-count moves — implemented by shell.

    reserve_copy/release_copy stage their change; it is committed together
    with the next LoanLedger write.
    """
    async def get_book(self, book_id: BookId) -> Book | None: ...
    async def get_member(self, member_id: MemberId) -> Member | None: ...
    async def reserve_copy(self, book_id: BookId) -> bool: ...
    async def release_copy(self, book_id: BookId) -> bool: ...

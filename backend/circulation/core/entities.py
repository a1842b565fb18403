"""Circulation Entities — Book, Member, Transaction as plain dataclasses.

Invariants:
    - Transaction.fine_amount is a non-negative Decimal
    - Transaction.return_date, when present, is never before issue_date
    - Book: 0 <= available_copies <= quantity (read-only here; the desk moves counts)
    - Entities carry no IO; stores map them to and from the ORM

Design Decisions:
    - Dataclasses, not ORM rows: the engine works on transient copies and writes
      back through TransactionStore.update (the store owns persisted state)
    - Mutable Transaction: the sweep and the return step mutate status/fine in place
      before persisting, matching the store contract
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from circulation.core.domain_types import (
    BookId, MemberId, TransactionId, TransactionStatus,
)


@dataclass
class Book:
    """A catalogued title with its copy counts."""
    id: BookId
    isbn: str
    title: str
    quantity: int = 0
    available_copies: int = 0


@dataclass
class Member:
    """A borrower. Only identity matters to the engine."""
    id: MemberId
    member_code: str
    full_name: str


@dataclass
class Transaction:
    """A single loan of one Book to one Member."""
    book: Book | None
    member: Member | None
    issue_date: date | None
    due_date: date | None
    status: TransactionStatus = TransactionStatus.ACTIVE
    return_date: date | None = None
    fine_amount: Decimal = Decimal("0.00")
    id: TransactionId | None = None

    @property
    def is_returned(self) -> bool:
        return self.status == TransactionStatus.RETURNED

    def belongs_to(self, member: Member) -> bool:
        """True if this loan is held by the given member (matched on numeric id)."""
        return (
            self.member is not None
            and self.member.id is not None
            and self.member.id == member.id
        )

"""Core fixtures — entities and policy for pure-function tests.

Invariants:
    - TODAY is fixed; every date in core tests is expressed relative to it
"""

from datetime import date, timedelta
from decimal import Decimal

import pytest

from circulation.core.domain_types import BookId, MemberId, TransactionStatus
from circulation.core.entities import Book, Member, Transaction
from circulation.core.loan_policy import LoanPolicy

TODAY = date(2026, 3, 15)


@pytest.fixture
def today():
    return TODAY


@pytest.fixture
def policy():
    return LoanPolicy(daily_fine_rate=Decimal("5.00"), max_active_borrows=5)


@pytest.fixture
def book():
    return Book(id=BookId(1), isbn="978-0132350884", title="Clean Code", quantity=3, available_copies=2)


@pytest.fixture
def member():
    return Member(id=MemberId(7), member_code="M-007", full_name="Asha Rao")


@pytest.fixture
def other_member():
    return Member(id=MemberId(8), member_code="M-008", full_name="Ravi Iyer")


@pytest.fixture
def make_loan(book, member):
    """Build a loan whose dates are offsets (in days) from TODAY."""
    def _make(
        due_in: int | None = 4,
        issued_ago: int = 10,
        returned_in: int | None = None,
        status: TransactionStatus = TransactionStatus.ACTIVE,
        borrower: Member | None = None,
        fine: str = "0.00",
    ) -> Transaction:
        return Transaction(
            book=book,
            member=borrower or member,
            issue_date=TODAY - timedelta(days=issued_ago),
            due_date=TODAY + timedelta(days=due_in) if due_in is not None else None,
            return_date=TODAY + timedelta(days=returned_in) if returned_in is not None else None,
            status=status,
            fine_amount=Decimal(fine),
        )
    return _make

"""LoanTransaction ORM — persists one loan of a Book to a Member.

Invariants:
    - Always references exactly one book and one member (non-null FKs)
    - status is one of TransactionStatus values: active | overdue | returned
    - fine_amount >= 0, return_date >= issue_date when present (CHECK constraints)

Design Decisions:
    - Numeric(10, 2) for fine_amount: money stays Decimal end to end
    - book/member loaded with selectin: the store always hands the engine a
      transaction with both references resolved
"""

from datetime import date
from decimal import Decimal

from sqlalchemy import CheckConstraint, Date, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from circulation.core.domain_types import TransactionStatus
from circulation.db.base import Base


class LoanTransaction(Base):
    """Loan row — mutated by the overdue sweep and by the return step."""
    __tablename__ = "loan_transactions"
    __table_args__ = (
        CheckConstraint("fine_amount >= 0", name="ck_loan_fine_nonneg"),
        CheckConstraint(
            "return_date IS NULL OR return_date >= issue_date",
            name="ck_loan_return_after_issue",
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    book_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("books.id"), nullable=False, index=True,
    )
    member_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("members.id"), nullable=False, index=True,
    )
    issue_date: Mapped[date] = mapped_column(Date, nullable=False)
    due_date: Mapped[date] = mapped_column(Date, nullable=False)
    return_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=TransactionStatus.ACTIVE.value,
    )
    fine_amount: Mapped[Decimal] = mapped_column(
        Numeric(10, 2), nullable=False, default=Decimal("0.00"),
    )

    book: Mapped["Book"] = relationship(
        "Book", back_populates="transactions", lazy="selectin",
    )
    member: Mapped["Member"] = relationship(
        "Member", back_populates="transactions", lazy="selectin",
    )

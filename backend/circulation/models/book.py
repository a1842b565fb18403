"""Book ORM — a catalogued title and its copy counts.

Invariants:
    - isbn is unique
    - 0 <= available_copies <= quantity (enforced by CHECK constraints)
"""

from sqlalchemy import CheckConstraint, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from circulation.db.base import Base


class Book(Base):
    """Book entity — counts are moved by the circulation desk, not the engine."""
    __tablename__ = "books"
    __table_args__ = (
        CheckConstraint("available_copies >= 0", name="ck_books_available_nonneg"),
        CheckConstraint("available_copies <= quantity", name="ck_books_available_le_qty"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    isbn: Mapped[str] = mapped_column(String(20), nullable=False, unique=True)
    title: Mapped[str] = mapped_column(String(300), nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    available_copies: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    transactions: Mapped[list["LoanTransaction"]] = relationship(
        "LoanTransaction", back_populates="book",
    )

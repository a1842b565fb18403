"""Member ORM — a borrower, identified by numeric id and human-facing member code."""

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from circulation.db.base import Base


class Member(Base):
    __tablename__ = "members"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    member_code: Mapped[str] = mapped_column(String(40), nullable=False, unique=True)
    full_name: Mapped[str] = mapped_column(String(200), nullable=False)

    transactions: Mapped[list["LoanTransaction"]] = relationship(
        "LoanTransaction", back_populates="member",
    )

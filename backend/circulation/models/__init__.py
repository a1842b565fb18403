"""ORM Models — SQLAlchemy declarative models for books, members and loans.

Invariants:
    - All models inherit from Base (db/base.py)

Design Decisions:
    - One file per entity for locality
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs
"""

from circulation.models.book import Book  # noqa: F401
from circulation.models.member import Member  # noqa: F401
from circulation.models.loan_transaction import LoanTransaction  # noqa: F401

"""Circulation schema — books, members, loan_transactions.

Revision ID: 001_circulation
Revises: None
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001_circulation"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "books",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("isbn", sa.String(20), nullable=False, unique=True),
        sa.Column("title", sa.String(300), nullable=False),
        sa.Column("quantity", sa.Integer, nullable=False, server_default="0"),
        sa.Column("available_copies", sa.Integer, nullable=False, server_default="0"),
        sa.CheckConstraint("available_copies >= 0", name="ck_books_available_nonneg"),
        sa.CheckConstraint("available_copies <= quantity", name="ck_books_available_le_qty"),
    )

    op.create_table(
        "members",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("member_code", sa.String(40), nullable=False, unique=True),
        sa.Column("full_name", sa.String(200), nullable=False),
    )

    op.create_table(
        "loan_transactions",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("book_id", sa.Integer, sa.ForeignKey("books.id"), nullable=False),
        sa.Column("member_id", sa.Integer, sa.ForeignKey("members.id"), nullable=False),
        sa.Column("issue_date", sa.Date, nullable=False),
        sa.Column("due_date", sa.Date, nullable=False),
        sa.Column("return_date", sa.Date, nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="active"),
        sa.Column("fine_amount", sa.Numeric(10, 2), nullable=False, server_default="0"),
        sa.CheckConstraint("fine_amount >= 0", name="ck_loan_fine_nonneg"),
        sa.CheckConstraint(
            "return_date IS NULL OR return_date >= issue_date",
            name="ck_loan_return_after_issue",
        ),
    )
    op.create_index("ix_loan_transactions_book_id", "loan_transactions", ["book_id"])
    op.create_index("ix_loan_transactions_member_id", "loan_transactions", ["member_id"])


def downgrade() -> None:
    op.drop_index("ix_loan_transactions_member_id", "loan_transactions")
    op.drop_index("ix_loan_transactions_book_id", "loan_transactions")
    op.drop_table("loan_transactions")
    op.drop_table("members")
    op.drop_table("books")

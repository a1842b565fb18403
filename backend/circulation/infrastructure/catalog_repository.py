"""Catalog Repository — book/member lookups and copy-count moves for the desk.

Invariants:
    - reserve_copy never takes available_copies below 0
    - release_copy never lifts available_copies above quantity
    - Copy-count changes are staged only; the next ledger commit persists them

Design Decisions:
    - Conditional UPDATE ... WHERE instead of read-modify-write: two desks issuing
      the last copy at once cannot both succeed
    - No identity-map sync on the UPDATE; lookups load with populate_existing instead
"""

from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from circulation.core.domain_types import BookId, MemberId
from circulation.core.entities import Book, Member
from circulation.core.errors import ErrorContext
from circulation.infrastructure.database import translate_db_error
from circulation.infrastructure.transaction_store import book_to_entity, member_to_entity
from circulation.models.book import Book as BookRow
from circulation.models.member import Member as MemberRow


class SqlCatalogRepository:
    """CatalogRepository over the books and members tables."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_book(self, book_id: BookId) -> Book | None:
        try:
            row = await self.db.get(BookRow, book_id, populate_existing=True)
        except SQLAlchemyError as e:
            raise translate_db_error(e, ErrorContext(book_id=book_id)) from e
        return book_to_entity(row) if row is not None else None

    async def get_member(self, member_id: MemberId) -> Member | None:
        try:
            row = await self.db.get(MemberRow, member_id, populate_existing=True)
        except SQLAlchemyError as e:
            raise translate_db_error(e, ErrorContext(member_id=member_id)) from e
        return member_to_entity(row) if row is not None else None

    async def reserve_copy(self, book_id: BookId) -> bool:
        return await self._move_copy(
            book_id, BookRow.available_copies > 0, BookRow.available_copies - 1,
        )

    async def release_copy(self, book_id: BookId) -> bool:
        return await self._move_copy(
            book_id, BookRow.available_copies < BookRow.quantity, BookRow.available_copies + 1,
        )

    async def _move_copy(self, book_id: BookId, guard, new_value) -> bool:
        try:
            result = await self.db.execute(
                update(BookRow)
                .where(BookRow.id == book_id, guard)
                .values(available_copies=new_value)
                .execution_options(synchronize_session=False),
            )
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise translate_db_error(e, ErrorContext(book_id=book_id)) from e
        return result.rowcount == 1

"""Service test fixtures — in-memory engine wiring plus async DB + FastAPI test client.

Invariants:
    - Every test gets a fresh store (in-memory or in-memory SQLite)
    - The clock is fixed at TODAY everywhere, including behind the HTTP API
    - get_db and get_clock dependencies overridden for route tests

Design Decisions:
    - SQLite in-memory: fast, no external dependency, sufficient for route tests
"""

from datetime import date, timedelta
from decimal import Decimal

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncSession, async_sessionmaker, create_async_engine,
)

from circulation.api.dependencies import get_clock
from circulation.core.domain_types import BookId, MemberId, TransactionStatus
from circulation.core.entities import Book, Member, Transaction
from circulation.core.loan_policy import LoanPolicy
from circulation.db.base import Base
from circulation.infrastructure.audit_sink import MemoryAuditSink
from circulation.infrastructure.clock import FixedClock
from circulation.infrastructure.database import get_db
from circulation.infrastructure.transaction_store import InMemoryTransactionStore
from circulation.main import app
from circulation.models.book import Book as BookRow
from circulation.models.loan_transaction import LoanTransaction
from circulation.models.member import Member as MemberRow
from circulation.services.lifecycle_engine import TransactionLifecycleEngine

TODAY = date(2026, 3, 15)


# ─── In-memory engine ────────────────────────────────────────────

@pytest.fixture
def clock():
    return FixedClock(TODAY)


@pytest.fixture
def sink():
    return MemoryAuditSink()


@pytest.fixture
def policy():
    return LoanPolicy()


@pytest.fixture
def store():
    return InMemoryTransactionStore()


@pytest.fixture
def engine(store, sink, clock, policy):
    return TransactionLifecycleEngine(store, sink, clock, policy)


@pytest.fixture
def book():
    return Book(id=BookId(1), isbn="978-0262033848", title="Introduction to Algorithms",
                quantity=4, available_copies=3)


@pytest.fixture
def member():
    return Member(id=MemberId(1), member_code="LIB-0001", full_name="Meera Nair")


@pytest.fixture
def other_member():
    return Member(id=MemberId(2), member_code="LIB-0002", full_name="Karan Shah")


@pytest.fixture
def loan(book, member):
    """Loan factory: due_in is an offset in days from TODAY."""
    def _make(due_in=7, status=TransactionStatus.ACTIVE, borrower=None, fine="0.00"):
        return Transaction(
            book=book,
            member=borrower or member,
            issue_date=TODAY + timedelta(days=due_in - 14),
            due_date=TODAY + timedelta(days=due_in),
            status=status,
            fine_amount=Decimal(fine),
        )
    return _make


# ─── SQL + HTTP ──────────────────────────────────────────────────

@pytest.fixture
async def test_engine():
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
async def catalog(test_db):
    """Two books (one with no free copy) and two members."""
    rows = {
        "book": BookRow(isbn="978-0201633610", title="Design Patterns",
                        quantity=3, available_copies=3),
        "empty_book": BookRow(isbn="978-0131103627", title="The C Programming Language",
                              quantity=1, available_copies=0),
        "member": MemberRow(member_code="LIB-0100", full_name="Anita Desai"),
        "other_member": MemberRow(member_code="LIB-0101", full_name="Vikram Seth"),
    }
    test_db.add_all(rows.values())
    await test_db.commit()
    return rows


@pytest.fixture
def seed_loan(test_db, catalog):
    """Insert a loan row directly; due_in is an offset in days from TODAY."""
    async def _seed(due_in=7, status=TransactionStatus.ACTIVE, fine="0.00", member_key="member"):
        row = LoanTransaction(
            book_id=catalog["book"].id,
            member_id=catalog[member_key].id,
            issue_date=TODAY + timedelta(days=due_in - 14),
            due_date=TODAY + timedelta(days=due_in),
            status=status.value,
            fine_amount=Decimal(fine),
        )
        test_db.add(row)
        await test_db.commit()
        return row
    return _seed


@pytest.fixture
async def client(test_engine, test_session_factory):
    """FastAPI test client with DB and clock dependencies overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_clock] = lambda: FixedClock(TODAY)

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()

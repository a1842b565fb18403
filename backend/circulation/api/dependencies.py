"""Request Dependencies — builds the desk and engine for each request.

Invariants:
    - One engine lock per process, shared by every request's engine
    - Store, catalog and ledger share the request's AsyncSession, so a staged
      copy-count change commits together with the loan write

Design Decisions:
    - Lock created lazily: asyncio.Lock must not be built at import time
"""

import asyncio

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from circulation.config import Settings, get_settings
from circulation.infrastructure.audit_sink import LoggingAuditSink
from circulation.infrastructure.catalog_repository import SqlCatalogRepository
from circulation.infrastructure.clock import SystemClock
from circulation.infrastructure.database import get_db
from circulation.infrastructure.transaction_store import SqlTransactionStore
from circulation.services.circulation_desk import CirculationDesk
from circulation.services.lifecycle_engine import TransactionLifecycleEngine

_engine_lock: asyncio.Lock | None = None


def get_engine_lock() -> asyncio.Lock:
    global _engine_lock
    if _engine_lock is None:
        _engine_lock = asyncio.Lock()
    return _engine_lock


def get_clock() -> SystemClock:
    return SystemClock()


def get_desk(
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
    clock: SystemClock = Depends(get_clock),
) -> CirculationDesk:
    ledger = SqlTransactionStore(db)
    engine = TransactionLifecycleEngine(
        store=ledger,
        sink=LoggingAuditSink(settings.currency_symbol),
        clock=clock,
        policy=settings.loan_policy(),
        lock=get_engine_lock(),
    )
    return CirculationDesk(SqlCatalogRepository(db), ledger, engine)

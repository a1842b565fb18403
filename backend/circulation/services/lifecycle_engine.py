"""Transaction Lifecycle Engine — issue/return orchestration around the pure core.

Invariants:
    - handle_issue / handle_return NEVER raise: every failure ends up on the EventOutcome
    - Missing Transaction/Book/Member -> SKIPPED with a NOT_AVAILABLE event
    - Unknown transaction id on return -> NOT_FOUND event, store untouched
    - Store failures (DatabaseError) are logged as warnings and recorded as StepFailure;
      the orchestration continues, so a failed sweep still lets the audit record out
    - Any other exception aborts the orchestration at its boundary (logged with traceback)
    - Overdue sweep only runs as a side effect of an issue or return event; a loan
      returned between the sweep's read and its write is skipped, not counted
    - Holds and limit checks on issue count only the member's earlier loans, even
      when the loan being issued is already stored

Design Decisions:
    - Impureim sandwich: load from store -> pure core decides -> write back through store
    - One asyncio.Lock per engine (or shared, when the caller passes one) serializes
      read-compute-update sequences inside a process; across processes the datastore wins
    - Policy, clock, store and sink injected at construction: no ambient state
"""

import asyncio
import logging
from decimal import Decimal

from circulation.core.audit_events import (
    AuditEvent, EventOutcome, StepFailure,
    borrow_event, issue_audit_event, member_status_event, not_available_event,
    not_found_event, return_audit_event, return_event, sweep_event,
)
from circulation.core.borrowing_rules import (
    check_borrowing_limit, check_overdue_holds,
    count_active_borrows, count_overdue_borrows,
)
from circulation.core.domain_types import EventAction, OutcomeStatus, TransactionId
from circulation.core.entities import Book, Member, Transaction
from circulation.core.errors import DatabaseError, TransactionAlreadyReturnedError
from circulation.core.fines import calculate_fine, days_overdue, effective_return_date
from circulation.core.loan_policy import LoanPolicy
from circulation.core.repository_protocols import AuditSink, Clock, TransactionStore
from circulation.core.transaction_lifecycle import mark_overdue, plan_overdue_sweep

logger = logging.getLogger(__name__)


class TransactionLifecycleEngine:
    """Overdue sweep, fine finalization and advisory policy checks."""

    def __init__(
        self,
        store: TransactionStore,
        sink: AuditSink,
        clock: Clock,
        policy: LoanPolicy,
        lock: asyncio.Lock | None = None,
    ):
        self.store = store
        self.sink = sink
        self.clock = clock
        self.policy = policy
        self._lock = lock or asyncio.Lock()

    # ─── Standalone operations ───────────────────────────────────

    def preview_fine(self, transaction: Transaction) -> Decimal:
        """What the fine would be if the loan were closed today."""
        return calculate_fine(transaction, self.clock.today(), self.policy)

    async def sweep_overdue(self) -> int:
        """Flip every ACTIVE loan past its due date to OVERDUE. Returns the count."""
        async with self._lock:
            return await self._sweep(None)

    async def member_status(self, member: Member) -> AuditEvent:
        """Active and overdue borrow counts for one member. Store errors propagate."""
        transactions = await self.store.find_all()
        return member_status_event(
            member,
            count_active_borrows(member, transactions),
            count_overdue_borrows(member, transactions),
        )

    # ─── Orchestrations ──────────────────────────────────────────

    async def handle_issue(
        self,
        transaction: Transaction | None,
        book: Book | None,
        member: Member | None,
    ) -> EventOutcome:
        """Holds check, limit check, global sweep, then the BOOK ISSUED record."""
        outcome = EventOutcome(
            action=EventAction.ISSUE,
            transaction_id=transaction.id if transaction is not None else None,
        )
        if transaction is None or book is None or member is None:
            logger.warning("Borrow action triggered but transaction data not available")
            outcome.status = OutcomeStatus.SKIPPED
            self._emit(outcome, not_available_event(EventAction.ISSUE))
            return outcome

        try:
            async with self._lock:
                await self._run_issue(outcome, transaction, book, member)
        except Exception as e:
            self._abort(outcome, "issue", e, member_id=member.id)
        return outcome

    async def handle_return(self, transaction_id: TransactionId | None) -> EventOutcome:
        """Reload, price the fine, BOOK RETURNED record, sweep, member summary."""
        outcome = EventOutcome(action=EventAction.RETURN, transaction_id=transaction_id)
        if transaction_id is None:
            logger.warning("Return action triggered but transaction data not available")
            outcome.status = OutcomeStatus.SKIPPED
            self._emit(outcome, not_available_event(EventAction.RETURN))
            return outcome

        try:
            async with self._lock:
                await self._run_return(outcome, transaction_id)
        except Exception as e:
            self._abort(outcome, "return", e)
        return outcome

    # ─── Steps ───────────────────────────────────────────────────

    async def _run_issue(
        self, outcome: EventOutcome, transaction: Transaction, book: Book, member: Member,
    ) -> None:
        today = self.clock.today()
        self._emit(outcome, borrow_event(book, member))

        history = await self._load_all(outcome, "issue.find_all")
        if history is not None:
            # Checks judge the member's standing before this loan.
            history = [t for t in history if t.id is None or t.id != transaction.id]
            holds = check_overdue_holds(member, history, today)
            if holds is not None:
                self._emit(outcome, holds)
            self._emit(outcome, check_borrowing_limit(member, history, self.policy))

        outcome.transitioned = await self._sweep(outcome)
        self._emit(outcome, issue_audit_event(transaction, book, member))
        self._settle(outcome)

    async def _run_return(self, outcome: EventOutcome, transaction_id: TransactionId) -> None:
        try:
            transaction = await self.store.find_by_id(transaction_id)
        except DatabaseError as e:
            self._record_failure(outcome, "return.find_by_id", e)
            outcome.status = OutcomeStatus.ABORTED
            return

        if transaction is None:
            logger.warning(
                "Return action triggered but transaction not found",
                extra={"transaction_id": transaction_id},
            )
            outcome.status = OutcomeStatus.NOT_FOUND
            self._emit(outcome, not_found_event(transaction_id))
            return

        book, member = transaction.book, transaction.member
        if book is None or member is None:
            outcome.status = OutcomeStatus.SKIPPED
            self._emit(outcome, not_available_event(EventAction.RETURN))
            return

        today = self.clock.today()
        fine = calculate_fine(transaction, today, self.policy)
        outcome.fine = fine
        late = days_overdue(transaction.due_date, effective_return_date(transaction, today))
        self._emit(outcome, return_event(book, member, late, fine))
        self._emit(outcome, return_audit_event(transaction, book, member, today, fine))

        outcome.transitioned = await self._sweep(outcome)

        history = await self._load_all(outcome, "return.member_status")
        if history is not None:
            self._emit(outcome, member_status_event(
                member,
                count_active_borrows(member, history),
                count_overdue_borrows(member, history),
            ))
        self._settle(outcome)

    async def _sweep(self, outcome: EventOutcome | None) -> int:
        transactions = await self._load_all(outcome, "sweep.find_all")
        if transactions is None:
            return 0

        updated = 0
        for transition in plan_overdue_sweep(transactions, self.clock.today(), self.policy):
            try:
                await self.store.update(mark_overdue(transition))
            except TransactionAlreadyReturnedError:
                logger.info(
                    "Loan returned while the sweep ran; left as returned",
                    extra={"transaction_id": transition.transaction.id},
                )
                continue
            except DatabaseError as e:
                self._record_failure(outcome, "sweep.update", e)
                continue
            updated += 1

        if updated:
            event = sweep_event(updated)
            if outcome is not None:
                self._emit(outcome, event)
            else:
                self.sink.emit(event)
        return updated

    async def _load_all(
        self, outcome: EventOutcome | None, step: str,
    ) -> list[Transaction] | None:
        try:
            return await self.store.find_all()
        except DatabaseError as e:
            self._record_failure(outcome, step, e)
            return None

    # ─── Outcome bookkeeping ─────────────────────────────────────

    def _emit(self, outcome: EventOutcome, event: AuditEvent) -> None:
        outcome.events.append(event)
        self.sink.emit(event)

    def _record_failure(
        self, outcome: EventOutcome | None, step: str, error: DatabaseError,
    ) -> None:
        logger.warning(
            f"Store step {step} failed: {error.message}",
            extra={"error_code": error.code, "transaction_id": error.context.transaction_id},
        )
        if outcome is not None:
            outcome.failures.append(StepFailure(step, error.code, error.message))

    def _abort(self, outcome: EventOutcome, step: str, error: Exception, **fields) -> None:
        logger.error(
            f"Error in {step} orchestration: {error}",
            exc_info=True,
            extra={"transaction_id": outcome.transaction_id, **fields},
        )
        outcome.status = OutcomeStatus.ABORTED
        outcome.failures.append(StepFailure(step, "INTERNAL_ERROR", str(error)))

    @staticmethod
    def _settle(outcome: EventOutcome) -> None:
        if outcome.failures:
            outcome.status = OutcomeStatus.PARTIAL

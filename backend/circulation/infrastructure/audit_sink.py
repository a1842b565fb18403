"""Audit Sinks — where structured AuditEvents end up.

Invariants:
    - Sinks render through core/format_audit; they never build message text themselves
    - WARNING-severity events log at WARNING, everything else at INFO

Design Decisions:
    - Dedicated "circulation.audit" logger: audit lines can be routed separately
      from application logs by logging configuration alone
"""

import logging

from circulation.core.audit_events import AuditEvent
from circulation.core.domain_types import EventSeverity
from circulation.core.format_audit import DEFAULT_CURRENCY, render_event


audit_logger = logging.getLogger("circulation.audit")


class LoggingAuditSink:
    """Writes each event as one rendered audit line."""

    def __init__(self, currency: str = DEFAULT_CURRENCY, logger: logging.Logger | None = None):
        self.currency = currency
        self.logger = logger or audit_logger

    def emit(self, event: AuditEvent) -> None:
        level = logging.WARNING if event.severity == EventSeverity.WARNING else logging.INFO
        self.logger.log(
            level,
            render_event(event, self.currency),
            extra={"event_kind": event.kind.value, "transaction_id": event.transaction_id},
        )


class MemoryAuditSink:
    """Keeps events in a list; used where the caller wants to inspect them afterwards."""

    def __init__(self):
        self.events: list[AuditEvent] = []

    def emit(self, event: AuditEvent) -> None:
        self.events.append(event)

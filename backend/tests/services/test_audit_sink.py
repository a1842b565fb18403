"""Audit sink and JSON log formatting."""

import json
import logging

from circulation.core.audit_events import borrow_event, not_found_event, sweep_event
from circulation.infrastructure.audit_sink import LoggingAuditSink
from circulation.infrastructure.observability import JSONFormatter


def test_info_event_logged_as_rendered_line(caplog, book, member):
    sink = LoggingAuditSink()

    with caplog.at_level(logging.INFO, logger="circulation.audit"):
        sink.emit(borrow_event(book, member))

    [record] = caplog.records
    assert record.levelno == logging.INFO
    assert record.getMessage().startswith("BORROW EVENT: Member Meera Nair (LIB-0001)")
    assert record.event_kind == "borrow"


def test_warning_event_logged_at_warning(caplog):
    sink = LoggingAuditSink()

    with caplog.at_level(logging.INFO, logger="circulation.audit"):
        sink.emit(not_found_event(99))

    [record] = caplog.records
    assert record.levelno == logging.WARNING
    assert record.transaction_id == 99


def test_json_formatter_surfaces_extra_fields():
    record = logging.LogRecord(
        "circulation.audit", logging.INFO, __file__, 1,
        "Updated 2 transaction(s) to OVERDUE status", None, None,
    )
    record.event_kind = sweep_event(2).kind.value
    record.transaction_id = None

    payload = json.loads(JSONFormatter().format(record))

    assert payload["level"] == "INFO"
    assert payload["event_kind"] == "sweep"
    assert "transaction_id" not in payload

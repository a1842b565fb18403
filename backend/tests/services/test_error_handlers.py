"""Error envelope and log level for desk rejections vs store outages."""

import logging

from circulation.api.dependencies import get_desk
from circulation.core.errors import DatabaseError, ErrorContext
from circulation.main import app

HANDLER_LOGGER = "circulation.api.error_handlers"


class OfflineDesk:
    async def get_loan(self, transaction_id):
        raise DatabaseError(
            "connection refused", "query", ErrorContext(transaction_id=transaction_id),
        )


def _handler_records(caplog):
    return [r for r in caplog.records if r.name == HANDLER_LOGGER]


async def test_store_outage_is_503_and_logged_as_error(client, caplog):
    app.dependency_overrides[get_desk] = OfflineDesk

    with caplog.at_level(logging.WARNING, logger=HANDLER_LOGGER):
        res = await client.get("/api/v1/loans/3")

    assert res.status_code == 503
    error = res.json()["error"]
    assert error["code"] == "DATABASE_ERROR"
    assert error["severity"] == "critical"
    assert error["context"]["transaction_id"] == 3
    [record] = _handler_records(caplog)
    assert record.levelno == logging.ERROR
    assert record.error_code == "DATABASE_ERROR"


async def test_unknown_loan_is_404_and_logged_as_warning(client, catalog, caplog):
    with caplog.at_level(logging.WARNING, logger=HANDLER_LOGGER):
        res = await client.get("/api/v1/loans/777")

    assert res.status_code == 404
    [record] = _handler_records(caplog)
    assert record.levelno == logging.WARNING
    assert record.path == "/api/v1/loans/777"

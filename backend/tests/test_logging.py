from __future__ import annotations

import logging

import orjson

from shelfwatch.core.logging import JsonFormatter, TenantLogger


class CaptureHandler(logging.Handler):
    def __init__(self) -> None:
        super().__init__()
        self.records: list[logging.LogRecord] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.records.append(record)


def test_tenant_context_is_nested_in_json() -> None:
    logger = logging.getLogger("shelfwatch.test.tenant")
    handler = CaptureHandler()
    logger.addHandler(handler)
    logger.setLevel(logging.INFO)
    bound = {"store": "inventory", "network_id": "net-1", "location_id": None}
    try:
        TenantLogger(logger, lambda: bound).info("projected %d slots", 3)
        bound["location_id"] = "loc-9"
        TenantLogger(logger, lambda: bound).info("again", extra={"ctx_store": "override"})
    finally:
        logger.removeHandler(handler)

    first, second = (orjson.loads(JsonFormatter().format(record)) for record in handler.records)
    assert first["message"] == "projected 3 slots"
    assert first["logger"] == "shelfwatch.test.tenant"
    assert first["context"] == {"store": "inventory", "network_id": "net-1"}
    assert second["context"] == {"store": "override", "network_id": "net-1", "location_id": "loc-9"}


def test_record_without_context_has_no_context_key() -> None:
    record = logging.LogRecord("shelfwatch", logging.WARNING, __file__, 1, "plain", None, None)
    payload = orjson.loads(JsonFormatter().format(record))
    assert payload["level"] == "WARNING"
    assert "context" not in payload

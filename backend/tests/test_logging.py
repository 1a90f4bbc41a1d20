"""Tests for structured logging and the lifespan startup path."""

import asyncio
import json
import logging

from fastapi.testclient import TestClient

from fxrates.core.config import Settings
from fxrates.core.logging import JsonLineFormatter, RequestIdFilter, current_request_id
from fxrates.main import create_app
from fxrates.services.store import RateStore


def make_record(**extra) -> logging.LogRecord:
    record = logging.LogRecord("fxrates.sync", logging.INFO, __file__, 1, "applied %d rates", (3,), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_line_contains_service_and_request_id():
    record = make_record()
    token = current_request_id.set("req-42")
    try:
        RequestIdFilter().filter(record)
    finally:
        current_request_id.reset(token)

    entry = json.loads(JsonLineFormatter("FX Rates").format(record))

    assert entry["service"] == "FX Rates"
    assert entry["request_id"] == "req-42"
    assert entry["message"] == "applied 3 rates"
    assert entry["logger"] == "fxrates.sync"
    assert entry["ts"].endswith("+00:00")


def test_json_line_carries_access_fields():
    record = make_record(method="GET", path="/latest", status=200, duration_ms=1.5, unrelated="x")

    entry = json.loads(JsonLineFormatter("fxrates").format(record))

    assert entry["status"] == 200
    assert entry["path"] == "/latest"
    assert entry["duration_ms"] == 1.5
    assert "unrelated" not in entry


def test_schema_created_off_the_event_loop(settings: Settings, store: RateStore, monkeypatch):
    calls = []
    original = store.create_schema

    def recording_create_schema(*args, **kwargs):
        try:
            asyncio.get_running_loop()
            calls.append("event-loop")
        except RuntimeError:
            calls.append("worker-thread")
        original(*args, **kwargs)

    monkeypatch.setattr(store, "create_schema", recording_create_schema)

    with TestClient(create_app(settings, store)) as client:
        assert client.get("/latest").status_code == 200

    assert calls == ["worker-thread"]

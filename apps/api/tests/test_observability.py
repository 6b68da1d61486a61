"""
Request ID, structured logging, internal metrics.
"""
import json
import logging
import re

from fastapi.testclient import TestClient

from spintel.main import app
from spintel.utils.observability import log_event

client = TestClient(app)

UUID_HEX_RE = re.compile(r"^[a-f0-9]{32}$")


def test_request_id_echo():
    """Send X-Request-ID header; assert same in response header."""
    req_id = "abc123def456"
    r = client.get("/health", headers={"X-Request-ID": req_id})
    assert r.status_code == 200
    assert r.headers.get("X-Request-ID") == req_id


def test_request_id_generated():
    """No X-Request-ID; assert response has one and it looks like uuid hex."""
    r = client.get("/health")
    assert r.status_code == 200
    rid = r.headers.get("X-Request-ID")
    assert rid is not None
    assert UUID_HEX_RE.match(rid)


def test_internal_metrics_debug_guard(monkeypatch):
    monkeypatch.delenv("DEBUG", raising=False)
    r = client.get("/internal/metrics")
    assert r.status_code == 200
    assert "disabled" in r.json().get("error", "").lower()


def test_internal_metrics_when_debug(monkeypatch):
    monkeypatch.setenv("DEBUG", "true")
    r = client.get("/internal/metrics")
    assert r.status_code == 200
    data = r.json()
    assert "uptime_seconds" in data
    assert "database_configured" in data
    assert data["routes"] > 0


def test_log_event_is_single_line_json_without_nones(caplog):
    logger = logging.getLogger("spintel.test")
    with caplog.at_level(logging.INFO, logger="spintel.test"):
        log_event(logger, "store_query_failed", table="rf_utilisation", strategy=None, elapsed_ms=3)
    (record,) = caplog.records
    assert "\n" not in record.getMessage()
    assert json.loads(record.getMessage()) == {
        "event": "store_query_failed",
        "table": "rf_utilisation",
        "elapsed_ms": 3,
    }


def test_request_complete_is_logged(caplog):
    with caplog.at_level(logging.INFO, logger="spintel.middleware.timing"):
        client.get("/health", headers={"X-Request-ID": "trace-1"})
    events = [json.loads(r.getMessage()) for r in caplog.records if r.name == "spintel.middleware.timing"]
    assert any(e["event"] == "request_complete" and e["request_id"] == "trace-1" for e in events)

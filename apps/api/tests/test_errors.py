"""
Error contract: 400 for bad input, 500 with a context message when the store fails.
"""
from conftest import ORG


def test_blank_organisation_returns_400(client):
    r = client.get("/yarnCharts/waste-summary/%20")
    assert r.status_code == 400
    assert r.json() == {"error": "organisation_id is required"}


def test_blank_organisation_on_summary_returns_400(client):
    r = client.get("/rfSummarys/rf-utilisation/%20%20")
    assert r.status_code == 400
    assert r.json() == {"error": "organisation_id is required"}


def test_month_out_of_range_returns_400(client):
    r = client.get(f"/yarnCharts/blow-room/micro-dust/{ORG}", params={"month": 13})
    assert r.status_code == 400
    assert "month" in r.json()["error"]


def test_half_open_range_returns_400(client):
    r = client.get(f"/yarnCharts/blow-room/micro-dust/{ORG}", params={"start_date": "2024-01-01"})
    assert r.status_code == 400


def test_reversed_range_returns_400(client):
    r = client.get(
        f"/yarnCharts/blow-room/micro-dust/{ORG}",
        params={"start_date": "2024-02-01", "end_date": "2024-01-01"},
    )
    assert r.status_code == 400


def test_non_integer_year_returns_400_with_error_body(client):
    r = client.get(f"/yarnCharts/blow-room/micro-dust/{ORG}", params={"year": "abc"})
    assert r.status_code == 400
    assert "error" in r.json()


def test_shift_out_of_range_returns_400(client):
    r = client.get(f"/productChart/production/kgs/{ORG}", params={"shift": 4})
    assert r.status_code == 400


def test_store_failure_returns_500_with_context_message(broken_client):
    r = broken_client.get(f"/yarnCharts/blow-room/micro-dust/{ORG}")
    assert r.status_code == 500
    assert r.json() == {"error": "Error fetching chart data"}


def test_store_failure_on_summary_does_not_leak_sql(broken_client):
    r = broken_client.get(f"/yarnSummarys/waste-summary/{ORG}")
    assert r.status_code == 500
    body = r.json()
    assert body == {"error": "Error calculating waste summary"}
    assert "SELECT" not in r.text


def test_unconfigured_database_returns_500(monkeypatch):
    from fastapi.testclient import TestClient

    from spintel import db
    from spintel.main import app

    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.setattr(db, "_db_engine", None)
    r = TestClient(app).get(f"/yarnSummarys/efficiency/{ORG}")
    assert r.status_code == 500
    assert "error" in r.json()

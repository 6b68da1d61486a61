"""
GET /export: allow-listed table and columns only.
"""
from datetime import date

from conftest import ORG


def test_export_returns_requested_columns_plus_base(client, insert):
    insert(
        "production_efficiency",
        [
            {"date": date(2024, 6, 2), "shift": "2", "kgs": "50", "u%": "90"},
            {"date": date(2024, 6, 1), "shift": "1", "kgs": "40", "u%": "80"},
            {"date": date(2024, 7, 1), "shift": "1", "kgs": "99", "u%": "99"},
        ],
    )
    r = client.get(
        "/export",
        params={
            "table": "production_efficiency",
            "columns": "kgs, u%",
            "start_date": "2024-06-01",
            "end_date": "2024-06-30",
            "organisation_id": ORG,
        },
    )
    assert r.status_code == 200
    assert r.json() == [
        {"user_id": "u1", "date": "2024-06-01", "shift": "1", "kgs": "40", "u%": "80"},
        {"user_id": "u1", "date": "2024-06-02", "shift": "2", "kgs": "50", "u%": "90"},
    ]


def test_export_shift_filter(client, insert):
    insert(
        "production_efficiency",
        [
            {"date": date(2024, 6, 1), "shift": "1", "kgs": "40"},
            {"date": date(2024, 6, 1), "shift": "2", "kgs": "50"},
        ],
    )
    r = client.get(
        "/export",
        params={
            "table": "production_efficiency",
            "columns": "kgs",
            "start_date": "2024-06-01",
            "end_date": "2024-06-30",
            "shift": 2,
        },
    )
    assert [row["kgs"] for row in r.json()] == ["50"]


def test_export_unknown_table_returns_400(client):
    r = client.get(
        "/export",
        params={"table": "users", "columns": "password", "start_date": "2024-06-01", "end_date": "2024-06-30"},
    )
    assert r.status_code == 400
    assert r.json() == {"error": "Unknown table: users"}


def test_export_unknown_column_returns_400(client):
    r = client.get(
        "/export",
        params={
            "table": "unit_per_kg",
            "columns": 'compressor_ukg,"x"; DROP TABLE unit_per_kg',
            "start_date": "2024-06-01",
            "end_date": "2024-06-30",
        },
    )
    assert r.status_code == 400
    assert "Unknown column" in r.json()["error"]


def test_export_no_rows_is_empty_list(client):
    r = client.get(
        "/export",
        params={"table": "rf_utilisation", "columns": "worked_spindle", "start_date": "2024-06-01", "end_date": "2024-06-30"},
    )
    assert r.status_code == 200
    assert r.json() == []


def test_export_missing_parameters_returns_400(client):
    r = client.get("/export", params={"table": "rf_utilisation"})
    assert r.status_code == 400

"""
Organisation CRUD against the in-memory store.
"""
import pytest


def _create(client, name, **fields):
    r = client.post("/organisation", json={"org_name": name, **fields})
    assert r.status_code == 201
    return r.json()["org_id"]


def test_create_assigns_sequential_ids(client):
    first = client.post("/organisation", json={"org_name": "Sri Mills", "spindle_count": 24000})
    assert first.status_code == 201
    assert first.json() == {"org_id": "ORG0001", "message": "Insertion was successful with org_id: ORG0001"}
    assert _create(client, "Arun Textiles") == "ORG0002"


def test_list_is_paginated(client):
    for name in ("A Mills", "B Mills", "C Mills"):
        _create(client, name, status="Active")

    r = client.get("/organisation", params={"page": 2, "limit": 2})
    assert r.status_code == 200
    data = r.json()
    assert data["total"] == 3
    assert data["page"] == 2
    assert data["limit"] == 2
    (row,) = data["data"]
    assert row["org_id"] == "ORG0003"
    assert row["org_name"] == "C Mills"
    assert row["status"] == "Active"


def test_list_defaults(client):
    data = client.get("/organisation").json()
    assert data == {"data": [], "total": 0, "page": 1, "limit": 10}


def test_names_sorted_by_name(client):
    _create(client, "Zeta Spinners", org_code="ZS")
    _create(client, "Alpha Yarns", org_code="AY")
    assert client.get("/organisation/names").json() == [
        {"org_id": "ORG0002", "org_code": "AY", "org_name": "Alpha Yarns"},
        {"org_id": "ORG0001", "org_code": "ZS", "org_name": "Zeta Spinners"},
    ]


def test_update_replaces_fields(client):
    org_id = _create(client, "Old Name", poc_name="Ravi")
    r = client.put(f"/organisation/{org_id}", json={"org_name": "New Name", "gst_count": 2})
    assert r.status_code == 200
    assert r.json() == {"message": "Update was successful"}
    (row,) = client.get("/organisation").json()["data"]
    assert row["org_name"] == "New Name"
    assert row["gst_count"] == 2
    assert row["poc_name"] is None


def test_update_unknown_returns_404(client):
    r = client.put("/organisation/ORG9999", json={"org_name": "Nobody"})
    assert r.status_code == 404
    assert r.json() == {"error": "Organisation not found"}


@pytest.mark.parametrize("action,status", [("deactivate", "Deactive"), ("activate", "Active")])
def test_status_changes(client, action, status):
    org_id = _create(client, "Sri Mills")
    r = client.patch(f"/organisation/{org_id}/{action}")
    assert r.status_code == 200
    assert r.json() == {"message": f"Organisation {action}d successfully"}
    (row,) = client.get("/organisation").json()["data"]
    assert row["status"] == status


def test_status_change_unknown_returns_404(client):
    r = client.patch("/organisation/ORG0042/activate")
    assert r.status_code == 404
    assert r.json() == {"error": "Organisation not found"}


def test_blank_name_returns_400(client):
    r = client.post("/organisation", json={"org_name": ""})
    assert r.status_code == 400
    assert r.json()["error"].startswith("Invalid org_name")


def test_negative_count_returns_400(client):
    r = client.post("/organisation", json={"org_name": "Sri Mills", "user_count": -1})
    assert r.status_code == 400


def test_page_zero_returns_400(client):
    assert client.get("/organisation", params={"page": 0}).status_code == 400


def test_store_failure_returns_500(broken_client):
    r = broken_client.post("/organisation", json={"org_name": "Sri Mills"})
    assert r.status_code == 500
    assert r.json() == {"error": "Insertion failed"}

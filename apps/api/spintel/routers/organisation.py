"""
Organisation records.
Endpoints: POST /organisation, GET /organisation, GET /organisation/names,
PUT /organisation/{org_id}, PATCH /organisation/{org_id}/activate|deactivate
Ids are ORG0001, ORG0002, ... in creation order.
"""
import logging
from typing import Any

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field
from sqlalchemy import text

from spintel.db import MetricStore, get_store
from spintel.errors import NotFoundError
from spintel.queries.catalog import ORGANISATION_FIELDS, ORGANISATION_ID_COLUMN, ORGANISATION_TABLE
from spintel.queries.dialect import quote_ident
from spintel.utils.observability import log_event

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/organisation", tags=["organisation"])

ORG_ID_PREFIX = "ORG"
ACTIVE = "Active"
INACTIVE = "Deactive"

_TABLE = quote_ident(ORGANISATION_TABLE)
_ID = quote_ident(ORGANISATION_ID_COLUMN)


# --- Pydantic models ---

class OrganisationIn(BaseModel):
    org_name: str = Field(..., min_length=1, max_length=255)
    org_code: str | None = None
    poc_name: str | None = None
    poc_email: str | None = None
    poc_contact_no: str | None = None
    user_count: int | None = Field(None, ge=0)
    gst_count: int | None = Field(None, ge=0)
    spindle_count: int | None = Field(None, ge=0)
    pan: str | None = None
    cin: str | None = None
    logo_url: str | None = None
    billing_address: str | None = None
    mill_address: str | None = None
    status: str | None = None


# --- Helpers ---

def org_id_for(n: int) -> str:
    return f"{ORG_ID_PREFIX}{n:04d}"


def _values(body: OrganisationIn) -> dict[str, Any]:
    data = body.model_dump()
    data["org_name"] = body.org_name.strip()
    return {c: data[c] for c in ORGANISATION_FIELDS}


def _count(store: MetricStore, where: str, params: dict[str, Any], error_message: str) -> int:
    row = store.fetch_one(
        text(f"SELECT COUNT(*) AS n FROM {_TABLE}{where}"),
        params,
        error_message=error_message,
        table=ORGANISATION_TABLE,
    )
    return int(row._mapping["n"]) if row is not None else 0


# --- Endpoints ---

@router.post("", status_code=201)
def create_organisation(body: OrganisationIn, store: MetricStore = Depends(get_store)) -> dict[str, str]:
    """Insert with the next ORGnnnn id."""
    error_message = "Insertion failed"
    existing = _count(store, f" WHERE {_ID} LIKE :prefix", {"prefix": ORG_ID_PREFIX + "%"}, error_message)
    org_id = org_id_for(existing + 1)

    columns = [ORGANISATION_ID_COLUMN, *ORGANISATION_FIELDS]
    store.execute(
        text(
            f"INSERT INTO {_TABLE} ({', '.join(quote_ident(c) for c in columns)}) "
            f"VALUES ({', '.join(':' + c for c in columns)})"
        ),
        {ORGANISATION_ID_COLUMN: org_id, **_values(body)},
        error_message=error_message,
        table=ORGANISATION_TABLE,
    )
    log_event(logger, "organisation_created", org_id=org_id)
    return {"org_id": org_id, "message": f"Insertion was successful with org_id: {org_id}"}


@router.get("")
def list_organisations(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    store: MetricStore = Depends(get_store),
) -> dict[str, Any]:
    error_message = "Error fetching organisation"
    rows = store.fetch_all(
        text(f"SELECT * FROM {_TABLE} ORDER BY {_ID} LIMIT :limit OFFSET :offset"),
        {"limit": limit, "offset": (page - 1) * limit},
        error_message=error_message,
        table=ORGANISATION_TABLE,
    )
    return {
        "data": [dict(r._mapping) for r in rows],
        "total": _count(store, "", {}, error_message),
        "page": page,
        "limit": limit,
    }


@router.get("/names")
def organisation_names(store: MetricStore = Depends(get_store)) -> list[dict[str, Any]]:
    """id, code and name of every organisation, sorted by name."""
    rows = store.fetch_all(
        text(f"SELECT {_ID}, org_code, org_name FROM {_TABLE} ORDER BY org_name ASC"),
        {},
        error_message="Error fetching organisation names",
        table=ORGANISATION_TABLE,
    )
    return [dict(r._mapping) for r in rows]


@router.put("/{org_id}")
def update_organisation(
    org_id: str, body: OrganisationIn, store: MetricStore = Depends(get_store)
) -> dict[str, str]:
    assignments = ", ".join(f"{quote_ident(c)} = :{c}" for c in ORGANISATION_FIELDS)
    updated = store.execute(
        text(f"UPDATE {_TABLE} SET {assignments} WHERE {_ID} = :org_id"),
        {**_values(body), "org_id": org_id},
        error_message="Update failed",
        table=ORGANISATION_TABLE,
    )
    if updated == 0:
        raise NotFoundError("Organisation not found")
    return {"message": "Update was successful"}


def _add_status_route(action: str, status: str, error_message: str) -> None:
    def set_status(org_id: str, store: MetricStore = Depends(get_store)) -> dict[str, str]:
        updated = store.execute(
            text(f"UPDATE {_TABLE} SET status = :status WHERE {_ID} = :org_id"),
            {"status": status, "org_id": org_id},
            error_message=error_message,
            table=ORGANISATION_TABLE,
        )
        if updated == 0:
            raise NotFoundError("Organisation not found")
        log_event(logger, "organisation_status_changed", org_id=org_id, status=status)
        return {"message": f"Organisation {action}d successfully"}

    router.add_api_route(
        f"/{{org_id}}/{action}",
        set_status,
        methods=["PATCH"],
        name=f"{action}_organisation",
    )


_add_status_route("activate", ACTIVE, "Failed to activate organisation")
_add_status_route("deactivate", INACTIVE, "Failed to deactivate organisation")

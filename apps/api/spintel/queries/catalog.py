"""
Allow-list of metric tables and their columns, plus the organisation table
layout. The only identifiers that may be interpolated into SQL text come from here.
"""
from collections.abc import Iterable

from spintel.errors import ValidationError

DATE_COLUMN = "date"
SHIFT_COLUMN = "shift"
ORGANISATION_COLUMN = "organisation_id"

# Present on every metric table.
BASE_COLUMNS = frozenset({ORGANISATION_COLUMN, "user_id", DATE_COLUMN, SHIFT_COLUMN})

YARN_WASTE_GROUPS: dict[str, tuple[str, ...]] = {
    "blowroom_waste": ("total_dropping", "flat_waste", "micro_dust", "contamination_collection"),
    "filter_waste": ("ohtc_waste", "prep_fan_waste", "plant_room_waste"),
    "roving_waste": ("ring_frame_roving_waste", "speed_frame_roving_waste"),
    "other_waste": ("all_dept_sweeping_waste", "comber_waste", "hard_waste", "invisible_loss"),
}

RF_LOSS_GROUPS: dict[str, tuple[str, ...]] = {
    "mechanical": ("routine_maintainance", "preventive_maintainance", "mechanical_breakdown"),
    "electrical": ("electrical_breakdown", "planned_maintainance", "power_failure"),
    "labour": ("labour_absentism", "labour_shortage", "labour_unrest", "doff_delay"),
    "process": (
        "bobbin_shortage",
        "lot_count_change",
        "lot_count_runout",
        "quality_checking",
        "quality_deviation",
        "traveller_change",
    ),
}

UKG_MACHINE_COLUMNS = (
    "first_passage_ukg",
    "second_passage_ukg",
    "speed_frame_ukg",
    "ring_frame_ukg",
    "autoconer_ukg",
)
UKG_OPERATION_COLUMNS = ("humidification_ukg", "compressor_ukg", "lighting_other_ukg")
UKG_WASTE_COLUMN = "br_carding_awes_ukg"
UKG_COLUMNS = (UKG_WASTE_COLUMN, *UKG_MACHINE_COLUMNS, *UKG_OPERATION_COLUMNS)
# per-row total as uploaded, not recomputed from the nine columns
UKG_TOTAL_COLUMN = "total_unit_per_kg"

METRIC_TABLES: dict[str, frozenset[str]] = {
    "yarn_realisation": frozenset(
        {"raw_material_input", "yarn_output", "total_waste", "realisation"}
        | {c for cols in YARN_WASTE_GROUPS.values() for c in cols}
    ),
    "rf_utilisation": frozenset(
        {"allocated_spindle", "worked_spindle", "utilisation"}
        | {c for cols in RF_LOSS_GROUPS.values() for c in cols}
    ),
    "production_efficiency": frozenset({"production_efficiency", "kgs", "gps", "u%", "eup"}),
    "unit_per_kg": frozenset({*UKG_COLUMNS, UKG_TOTAL_COLUMN}),
}


def require_table(table: str) -> str:
    if table not in METRIC_TABLES:
        raise ValidationError(f"Unknown table: {table}")
    return table


def require_columns(table: str, columns: Iterable[str]) -> list[str]:
    allowed = METRIC_TABLES[require_table(table)] | BASE_COLUMNS
    out = list(columns)
    unknown = [c for c in out if c not in allowed]
    if unknown:
        raise ValidationError(f"Unknown column(s) for {table}: {', '.join(sorted(set(unknown)))}")
    return out


ORGANISATION_TABLE = "organisation"
ORGANISATION_ID_COLUMN = "org_id"

# column -> SQL type, excluding org_id
ORGANISATION_FIELDS: dict[str, str] = {
    "org_name": "TEXT NOT NULL",
    "org_code": "TEXT",
    "poc_name": "TEXT",
    "poc_email": "TEXT",
    "poc_contact_no": "TEXT",
    "user_count": "INTEGER",
    "gst_count": "INTEGER",
    "spindle_count": "INTEGER",
    "pan": "TEXT",
    "cin": "TEXT",
    "logo_url": "TEXT",
    "billing_address": "TEXT",
    "mill_address": "TEXT",
    "status": "TEXT",
}

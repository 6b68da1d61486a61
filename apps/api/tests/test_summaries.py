"""
Summary routes end to end: totals, percentages of a base and zero-row behaviour.
"""
from datetime import date
from decimal import Decimal

from conftest import ORG


def _yarn_row(day, **values):
    base = {
        "date": day,
        "raw_material_input": "0",
        "yarn_output": "0",
        "total_waste": "0",
        "total_dropping": "0",
        "flat_waste": "0",
        "micro_dust": "0",
        "contamination_collection": "0",
        "ohtc_waste": "0",
        "prep_fan_waste": "0",
        "plant_room_waste": "0",
        "ring_frame_roving_waste": "0",
        "speed_frame_roving_waste": "0",
        "all_dept_sweeping_waste": "0",
        "comber_waste": "0",
        "hard_waste": "0",
        "invisible_loss": "0",
    }
    base.update(values)
    return base


def test_yarn_efficiency(client, insert):
    insert(
        "yarn_realisation",
        [
            _yarn_row(date(2024, 6, 3), raw_material_input="600", yarn_output="500", total_waste="60"),
            _yarn_row(date(2024, 6, 4), raw_material_input="400", yarn_output="300", total_waste="40"),
        ],
    )
    r = client.get(f"/yarnSummarys/efficiency/{ORG}")
    assert r.status_code == 200
    assert r.json() == {
        "MaterialInput": 1000.0,
        "YarnOutput": 800.0,
        "TotalWaste": 100.0,
        "YarnRealization": 80.0,
        "WasteOutput": 10.0,
        "InvisibleLoss": 10.0,
    }


def test_waste_summary_is_additive_and_relative_to_input(client, insert):
    insert(
        "yarn_realisation",
        [
            _yarn_row(
                date(2024, 6, 3),
                raw_material_input="1000",
                total_dropping="10",
                micro_dust="5",
                prep_fan_waste="2.5",
                speed_frame_roving_waste="7.5",
                comber_waste="20",
                invisible_loss="n/a",
            )
        ],
    )
    r = client.get(f"/yarnSummarys/waste-summary/{ORG}")
    assert r.status_code == 200
    data = r.json()
    assert data["raw_material_input"] == "1000.00"
    assert data["blowroom_waste"] == "15.00"
    assert data["blowroom_percent"] == "1.50"
    assert data["filter_waste"] == "2.50"
    assert data["roving_waste"] == "7.50"
    assert data["other_waste"] == "20.00"
    parts = sum(Decimal(data[k]) for k in ("blowroom_waste", "filter_waste", "roving_waste", "other_waste"))
    assert Decimal(data["waste_output"]) == parts
    assert data["waste_percent_of_input"] == "4.50"


def test_waste_summary_with_no_rows_is_zero_valued(client):
    r = client.get(f"/yarnSummarys/waste-summary/{ORG}")
    assert r.status_code == 200
    data = r.json()
    assert data["waste_output"] == "0.00"
    assert data["blowroom_percent"] == "0.00"


def test_blow_room_breakdown_fields(client, insert):
    insert(
        "yarn_realisation",
        [_yarn_row(date(2024, 6, 3), raw_material_input="200", total_dropping="4", contamination_collection="1")],
    )
    r = client.get(f"/yarnSummarys/blow-room-waste/{ORG}")
    assert r.status_code == 200
    assert r.json() == {
        "dropping_kg": "4.00",
        "dropping_percent": "2.00",
        "flat_waste_kg": "0.00",
        "flat_waste_percent": "0.00",
        "micro_dust_kg": "0.00",
        "micro_dust_percent": "0.00",
        "contamination_kg": "1.00",
        "contamination_percent": "0.50",
    }


def test_roving_breakdown_maps_frames(client, insert):
    insert(
        "yarn_realisation",
        [
            _yarn_row(
                date(2024, 6, 3),
                raw_material_input="100",
                speed_frame_roving_waste="1",
                ring_frame_roving_waste="2",
            )
        ],
    )
    data = client.get(f"/yarnSummarys/roving-waste/{ORG}").json()
    assert data["roving_preparatory_kg"] == "1.00"
    assert data["roving_spinning_kg"] == "2.00"
    assert data["roving_spinning_percent"] == "2.00"


def test_yarn_realisation_zero_input(client, insert):
    insert("yarn_realisation", [_yarn_row(date(2024, 6, 3), yarn_output="50")])
    r = client.get(f"/yarnSummarys/yarn-realisation/{ORG}")
    assert r.json() == {"yarn_realisation_ratio": "0.00", "yarn_realisation_percent": "0.00"}


def test_rf_utilisation_and_labour_summary(client, insert):
    insert(
        "rf_utilisation",
        [
            {
                "date": date(2024, 6, 3),
                "allocated_spindle": "1000",
                "worked_spindle": "900",
                "labour_unrest": "10",
                "doff_delay": "5",
            }
        ],
    )
    rf = client.get(f"/rfSummarys/rf-utilisation/{ORG}").json()
    assert rf == {"rf_utilisation_ratio": "0.90", "rf_utilisation_percent": "90.00"}

    labour = client.get(f"/rfSummarys/labour-summary/{ORG}").json()
    assert labour["labour_rest"] == 10.0
    assert labour["labour_rest_percent"] == "1.00"
    assert labour["day_off_delay_percent"] == "0.50"
    assert labour["labour_shortage"] == 0.0


def test_rf_loss_summary_uses_calendar_quarters(client, insert):
    insert(
        "rf_utilisation",
        [
            {"date": date(2024, 2, 5), "allocated_spindle": "100", "mechanical_breakdown": "4"},
            {"date": date(2024, 4, 5), "allocated_spindle": "100", "mechanical_breakdown": "50"},
        ],
    )
    data = client.get(f"/rfSummarys/loss-summary/{ORG}", params={"quarter": 1}).json()
    assert data["mechanical"] == 4.0
    assert data["mechanical_percent"] == "4.00"
    assert data["process_percent"] == "0.00"


def test_spindle_summary_averages(client, insert):
    insert(
        "rf_utilisation",
        [
            {"date": date(2024, 6, 3), "allocated_spindle": "100", "worked_spindle": "80"},
            {"date": date(2024, 6, 4), "allocated_spindle": "200", "worked_spindle": "bad"},
        ],
    )
    data = client.get(f"/rfSummarys/spindle-summary/{ORG}").json()
    assert data == {"allocated_spindle": 150.0, "worked_spindle": 80.0}


def test_production_summaries_respect_shift(client, insert):
    insert(
        "production_efficiency",
        [
            {"date": date(2024, 6, 3), "shift": "1", "kgs": "100", "u%": "90"},
            {"date": date(2024, 6, 3), "shift": "2", "kgs": "50", "u%": "70"},
        ],
    )
    assert client.get(f"/productionSummarys/totalKgs/{ORG}").json() == {"total_kgs": 150.0}
    assert client.get(f"/productionSummarys/totalKgs/{ORG}", params={"shift": 2}).json() == {"total_kgs": 50.0}
    assert client.get(f"/productionSummarys/uPercent/{ORG}").json() == {"average_u_percent": 80.0}
    assert client.get(f"/productionSummarys/eupTotal/{ORG}").json() == {"total_eup": 0.0}


def test_ukg_summaries(client, insert):
    insert(
        "unit_per_kg",
        [
            {
                "date": date(2024, 6, 3),
                "br_carding_awes_ukg": "0.5",
                "first_passage_ukg": "0.1",
                "second_passage_ukg": "0.2",
                "compressor_ukg": "0.25",
            }
        ],
    )
    assert client.get(f"/ukgSummarys/draw_frame_ukg/{ORG}").json() == {
        "first_passage_ukg": 0.1,
        "second_passage_ukg": 0.2,
    }
    assert client.get(f"/ukgSummarys/machine_ukg/{ORG}").json() == {"machine": 0.3}
    assert client.get(f"/ukgSummarys/operation_ukg/{ORG}").json() == {"operation": 0.25}
    assert client.get(f"/ukgSummarys/compressor_ukg/{ORG}").json() == {"total_compressor_ukg": 0.25}
    assert client.get(f"/ukgSummarys/unit-per-kg/{ORG}").json() == {"unit_per_kg": "1.05"}


def test_consultant_combined_summary(client, insert):
    insert("yarn_realisation", [_yarn_row(date(2024, 6, 3), raw_material_input="1000", yarn_output="850")])
    insert("rf_utilisation", [{"date": date(2024, 6, 3), "allocated_spindle": "400", "worked_spindle": "300"}])
    insert("production_efficiency", [{"date": date(2024, 6, 3), "eup": "75.5", "production_efficiency": "88"}])
    insert("unit_per_kg", [{"date": date(2024, 6, 3), "autoconer_ukg": "0.4", "lighting_other_ukg": "0.1"}])

    r = client.get(f"/consultanthome/combined-summary/{ORG}")
    assert r.status_code == 200
    assert r.json() == {
        "yarn_realisation_ratio": "0.85",
        "yarn_realisation_percent": "85.00",
        "rf_utilisation_ratio": "0.75",
        "rf_utilisation_percent": "75.00",
        "total_eup": 75.5,
        "unit_per_kg": "0.50",
        "total_efficiency": 88.0,
    }


def test_negative_adjustments_are_summed(client, insert):
    insert(
        "yarn_realisation",
        [
            _yarn_row(date(2024, 6, 3), raw_material_input="100", invisible_loss="-2"),
            _yarn_row(date(2024, 6, 4), raw_material_input="100", invisible_loss="4"),
        ],
    )
    data = client.get(f"/yarnSummarys/other-waste/{ORG}").json()
    assert data["invisible_loss_kg"] == "2.00"
    assert data["invisible_loss_percent"] == "1.00"


def test_eup_total_served_on_overall_path(client, insert):
    insert(
        "production_efficiency",
        [
            {"date": date(2024, 6, 3), "shift": "1", "eup": "40.25"},
            {"date": date(2024, 6, 3), "shift": "2", "eup": "35"},
        ],
    )
    r = client.get(f"/productionSummarys/eupTotal/overall/{ORG}")
    assert r.status_code == 200
    assert r.json() == {"total_eup": 75.25}
    assert client.get(f"/productionSummarys/eupTotal/{ORG}").json() == {"total_eup": 75.25}
    assert client.get(f"/productionSummarys/eupTotal/overall/{ORG}", params={"shift": 2}).json() == {
        "total_eup": 35.0
    }

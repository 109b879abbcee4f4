#!/usr/bin/env python3
"""
Test the FastAPI endpoints with inline catalogs.
"""

import sys
sys.path.insert(0, 'src')

import pytest
from fastapi.testclient import TestClient

from estimator_api.main import app

client = TestClient(app)

CATALOG = {
    "templates": [
        {"id": "t1", "name": "Bricklaying", "unit": "pieces", "estimated_hours": 0.02},
        {"id": "s1", "name": "Porcelain slab 600x600", "unit": "m2", "estimated_hours": 0.5},
    ],
    "prices": [
        {"name": "Cement", "unit": "bag", "price": 6.5},
    ],
}


def test_health():
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_calculate_wall():
    response = client.post("/api/v1/calculate/wall", json={
        "length": "4", "height": 1, "catalog": CATALOG,
    })
    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "Brick Wall"
    assert data["amount"] == 270
    assert data["hours_worked"] == pytest.approx(5.4)
    assert data["total_hours"] == data["hours_worked"]
    assert data["taskBreakdown"][0]["event_task_id"] == "t1"
    assert data["subtotal_materials"] == pytest.approx(6.5)
    assert "Bricks" in data["unpriced_materials"]


def test_invalid_wall_is_422():
    response = client.post("/api/v1/calculate/wall", json={
        "length": "abc", "height": 1, "catalog": {},
    })
    assert response.status_code == 422
    assert response.json()["detail"] == ["Wall length must be a number"]


def test_unknown_wall_type_is_rejected():
    response = client.post("/api/v1/calculate/wall", json={
        "length": 4, "height": 1, "wall_type": "glass", "catalog": {},
    })
    assert response.status_code == 422


def test_transport_entry_reports_normalized_time():
    response = client.post("/api/v1/calculate/sand", json={
        "length": 2, "width": 3, "height_mm": 50,
        "transport": {"carrier_size": 1, "distance": 30},
        "catalog": {},
    })
    assert response.status_code == 200
    entry = response.json()["taskBreakdown"][0]
    assert entry["normalized_hours"] == pytest.approx(entry["hours"])


def test_calculate_slab():
    response = client.post("/api/v1/calculate/slab", json={
        "area": 10, "type1_thickness_cm": 10, "mortar_thickness_cm": 4,
        "slab_type_id": "s1", "compactor_id": "medium_compactor", "catalog": CATALOG,
    })
    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "Porcelain slab 600x600"
    tasks = [t["task"] for t in data["taskBreakdown"]]
    assert tasks[0] == "Porcelain slab 600x600"
    assert "Compacting with medium compactor" in tasks


def test_calculate_tile():
    response = client.post("/api/v1/calculate/tile", json={
        "length": 3, "height": 1, "slab_width_cm": 60, "slab_height_cm": 60,
        "orientation": "side", "length_cut": "2cuts", "catalog": {},
    })
    assert response.status_code == 200
    assert response.json()["unit"] == "square meters"


def test_calculate_type1_needs_excavator():
    response = client.post("/api/v1/calculate/type1", json={
        "depth_cm": 10, "tons": 5, "compactor_id": "small_compactor", "catalog": {},
    })
    assert response.status_code == 422
    assert "Select an excavator" in response.json()["detail"]


def test_price_materials():
    response = client.post("/api/v1/price", json={
        "materials": [
            {"name": "Cement", "quantity": 4, "unit": "bags"},
            {"name": "Sand", "quantity": 1.2, "unit": "tonnes"},
        ],
        "prices": [{"name": "Cement", "unit": "bag", "price": 6.5}],
    })
    assert response.status_code == 200
    data = response.json()
    assert data["subtotal_materials"] == pytest.approx(26.0)
    assert data["unpriced_materials"] == ["Sand"]
    assert data["materials"][1]["total_price"] is None


def test_pdf_report():
    response = client.post("/api/v1/report/pdf", json={
        "calculator": "wall",
        "input": {"length": 4, "height": 1, "project_name": "Back garden", "catalog": CATALOG},
    })
    assert response.status_code == 200
    assert response.headers["content-type"] == "application/pdf"
    assert 'filename="Back garden_report.pdf"' in response.headers["content-disposition"]
    assert response.content.startswith(b"%PDF")


def test_pdf_report_with_bad_input():
    response = client.post("/api/v1/report/pdf", json={
        "calculator": "deck",
        "input": {"pattern": "zigzag", "catalog": {}},
    })
    assert response.status_code == 422


def test_reference_data():
    response = client.get("/api/v1/reference")
    assert response.status_code == 200
    data = response.json()
    assert data["carrier_speeds"]["0.5"] == 1000
    assert data["material_capacity"]["slabs"]["0.5"] == 10
    assert {c["id"] for c in data["compactors"]} == set(
        ["small_compactor", "medium_compactor", "large_compactor", "small_roller"])


EQUIPMENT = {
    "templates": [
        {"id": "x1", "name": "Excavation soil with Digger (3t)", "unit": "tonnes", "estimated_hours": 0.1},
        {"id": "s1", "name": "Porcelain slab 600x600", "unit": "m2", "estimated_hours": 0.5},
        {"id": "p1", "name": "laying monoblocks", "unit": "m2", "estimated_hours": 0.4},
        {"id": "k1", "name": "KL kerbs installation", "unit": "metres", "estimated_hours": 0.5},
    ],
    "excavators": [{"id": "e1", "name": "Digger", "size_t": 3}],
    "carriers": [{"id": "d1", "name": "Dumper", "size_t": 1, "speed_m_per_hour": 4000}],
}


def test_calculate_paving():
    response = client.post("/api/v1/calculate/paving", json={
        "area": 10, "sand_thickness_cm": 5, "type1_thickness_cm": 10, "block_height_cm": 6,
        "catalog": EQUIPMENT,
    })
    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "Paving Installation"
    assert data["taskBreakdown"][0]["task"] == "laying monoblocks"
    assert data["taskBreakdown"][0]["hours"] == pytest.approx(4.0)


def test_calculate_paving_needs_area():
    response = client.post("/api/v1/calculate/paving", json={
        "sand_thickness_cm": 5, "type1_thickness_cm": 10, "block_height_cm": 6, "catalog": {},
    })
    assert response.status_code == 422
    assert response.json()["detail"] == ["Enter the area"]


def test_calculate_kerbs():
    response = client.post("/api/v1/calculate/kerbs", json={
        "length": 10, "base_height_cm": 5, "kerb_type": "kl", "haunch": "full-both",
        "catalog": EQUIPMENT,
    })
    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "KL Kerbs Installation"
    assert data["total_hours"] == pytest.approx(5.0)


def test_calculate_soil_excavation_by_ids():
    response = client.post("/api/v1/calculate/soil-excavation", json={
        "excavation": {"excavator_id": "e1", "carrier_id": "d1"},
        "length": 4, "width": 2.5, "depth_cm": 20, "distance": 20,
        "catalog": EQUIPMENT,
    })
    assert response.status_code == 200
    tasks = {t["task"]: t["hours"] for t in response.json()["taskBreakdown"]}
    assert tasks["Excavation"] == pytest.approx(0.3)
    assert tasks["Transport"] == pytest.approx(0.03)


def test_slab_excavator_by_id():
    response = client.post("/api/v1/calculate/slab", json={
        "area": 10, "type1_thickness_cm": 10, "mortar_thickness_cm": 4, "slab_type_id": "s1",
        "excavation": {"excavator_id": "e1"}, "catalog": EQUIPMENT,
    })
    assert response.status_code == 200
    tasks = {t["task"]: t["hours"] for t in response.json()["taskBreakdown"]}
    assert tasks["Soil excavation"] == pytest.approx(0.24)

    response = client.post("/api/v1/calculate/slab", json={
        "area": 10, "type1_thickness_cm": 10, "mortar_thickness_cm": 4, "slab_type_id": "s1",
        "excavation": {"excavator_id": "e7"}, "catalog": EQUIPMENT,
    })
    assert response.status_code == 422
    assert response.json()["detail"] == ["Selected excavator not found (ID: e7)"]


def test_transport_carrier_from_catalog():
    body = {"length": 2, "width": 3, "height_mm": 50, "catalog": EQUIPMENT}
    by_id = client.post("/api/v1/calculate/sand", json=dict(
        body, transport={"carrier_id": "d1", "carrier_size": 0.1, "distance": 30}))
    by_size = client.post("/api/v1/calculate/sand", json=dict(
        body, transport={"carrier_size": 1, "distance": 30}))
    assert by_id.status_code == 200
    assert by_id.json()["taskBreakdown"] == by_size.json()["taskBreakdown"]

"""
Tests for the HTTP surface of the seating chart
"""

import io

import pandas as pd
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from app.core.config import settings
from app.core.db import Base, get_db
from app.services.table_config_service import TableConfigService
from main import app

# Test database setup
SQLALCHEMY_DATABASE_URL = "sqlite:///./test_api.db"
engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

AUTH = {"Authorization": f"Bearer {settings.ADMIN_TOKEN}"}

def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()

@pytest.fixture
def client():
    """Client against a fresh database with three 8-seat tables"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    TableConfigService.seed_tables(db, count=3, capacity=8)
    db.close()
    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
        Base.metadata.drop_all(bind=engine)

def add_guest(client, name1, name2=None):
    payload = {
        "person1_name": name1,
        "person2_name": name2,
        "attendance1": "confirmed",
        "attendance2": "confirmed" if name2 else None,
        "host_tag": "Bride",
    }
    response = client.post("/admin/roster", json=payload, headers=AUTH)
    assert response.status_code == 201
    return response.json()["data"]["id"]

def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "tables": 3}

def test_wrong_token_is_rejected(client):
    response = client.get("/admin/tables/config", headers={"Authorization": "Bearer wrong"})

    assert response.status_code == 401

def test_list_table_configs(client):
    response = client.get("/admin/tables/config", headers=AUTH)

    assert response.status_code == 200
    body = response.json()
    assert body["success"]
    assert [t["table_number"] for t in body["data"]] == [1, 2, 3]

def test_add_guest_with_unknown_host(client):
    response = client.post(
        "/admin/roster", json={"person1_name": "Ana", "host_tag": "uncle"}, headers=AUTH
    )

    assert response.status_code == 422
    assert not response.json()["success"]

def test_seat_candidate_and_conflict(client):
    couple_id = add_guest(client, "Ana", "Luis")
    single_id = add_guest(client, "Maria")

    unassigned = client.get("/admin/tables/unassigned", headers=AUTH).json()["data"]
    assert {c["id"] for c in unassigned} == {f"{couple_id}-couple", f"{single_id}-1"}

    response = client.post(
        "/admin/tables/assignments/candidate",
        json={"guest_id": couple_id, "as_couple": True, "table_number": 1, "seat_position": 1},
        headers=AUTH,
    )
    assert response.status_code == 201
    assert [a["seat_position"] for a in response.json()["data"]] == [1, 2]

    response = client.post(
        "/admin/tables/assignments/candidate",
        json={"guest_id": single_id, "table_number": 1, "seat_position": 2},
        headers=AUTH,
    )
    assert response.status_code == 409
    body = response.json()
    assert not body["success"]
    assert body["error_code"] == "SeatOccupied"

    occupants = client.get("/admin/tables/1/occupants", headers=AUTH).json()["data"]
    assert [o["person_name"] for o in occupants] == ["Ana", "Luis"]

def test_move_and_swap(client):
    first_guest = add_guest(client, "Ana")
    second_guest = add_guest(client, "Bruno")
    first = client.post(
        "/admin/tables/assignments/candidate",
        json={"guest_id": first_guest, "table_number": 1}, headers=AUTH,
    ).json()["data"][0]["id"]
    second = client.post(
        "/admin/tables/assignments/candidate",
        json={"guest_id": second_guest, "table_number": 2}, headers=AUTH,
    ).json()["data"][0]["id"]

    response = client.put(
        f"/admin/tables/assignments/{first}", json={"table_number": 3, "seat_position": 6}, headers=AUTH
    )
    assert response.status_code == 200

    response = client.post(
        "/admin/tables/swap", json={"first_assignment_id": first, "second_assignment_id": second}, headers=AUTH
    )
    assert response.status_code == 200

    assignments = {a["id"]: a for a in client.get("/admin/tables/assignments", headers=AUTH).json()["data"]}
    assert (assignments[first]["table_number"], assignments[first]["seat_position"]) == (2, 1)
    assert (assignments[second]["table_number"], assignments[second]["seat_position"]) == (3, 6)

def test_swap_unknown_assignment(client):
    response = client.post(
        "/admin/tables/swap", json={"first_assignment_id": 1, "second_assignment_id": 2}, headers=AUTH
    )

    assert response.status_code == 404
    assert response.json()["error_code"] == "AssignmentNotFound"

def test_capacity_validation(client):
    response = client.put("/admin/tables/config", json={"table_number": 1, "capacity": 0}, headers=AUTH)
    assert response.status_code == 400
    assert response.json()["error_code"] == "InvalidCapacity"

    response = client.put("/admin/tables/config", json={"table_number": 1, "capacity": 11}, headers=AUTH)
    assert response.status_code == 400

    response = client.put("/admin/tables/config", json={"table_number": 1, "capacity": 10}, headers=AUTH)
    assert response.status_code == 200
    assert response.json()["data"]["capacity"] == 10

def test_capacity_below_occupancy(client):
    for name in ("Ana", "Bruno", "Carla"):
        guest_id = add_guest(client, name)
        client.post(
            "/admin/tables/assignments/candidate",
            json={"guest_id": guest_id, "table_number": 1}, headers=AUTH,
        )

    response = client.put("/admin/tables/config", json={"table_number": 1, "capacity": 2}, headers=AUTH)

    assert response.status_code == 400
    assert response.json()["error_code"] == "CapacityBelowOccupancy"

def test_reorder(client):
    response = client.post(
        "/admin/tables/reorder", json={"dragged_table": 3, "target_table": 1}, headers=AUTH
    )

    assert response.status_code == 200
    configs = client.get("/admin/tables/config", headers=AUTH).json()["data"]
    assert [c["table_number"] for c in configs] == [3, 1, 2]

def test_overview_and_integrity(client):
    guest_id = add_guest(client, "Ana", "Luis")
    client.post(
        "/admin/tables/assignments/candidate",
        json={"guest_id": guest_id, "as_couple": True, "table_number": 2}, headers=AUTH,
    )

    overview = client.get("/admin/tables/overview", headers=AUTH).json()["data"]
    assert overview["total_seated"] == 2
    assert overview["partial_tables"] == 1

    integrity = client.get("/admin/tables/integrity", headers=AUTH).json()
    assert integrity["data"] == []

def test_roster_upload_rejects_other_files(client):
    response = client.post(
        "/admin/roster/upload",
        files={"file": ("guests.csv", b"Name 1,Attendance 1\nAna,yes\n", "text/csv")},
        headers=AUTH,
    )

    assert response.status_code == 400

def test_roster_upload(client):
    df = pd.DataFrame({"Name 1": ["Ana", "Maria"], "Name 2": ["Luis", None], "Attendance 1": ["yes", "pending"],
                       "Attendance 2": ["no", None]})
    buffer = io.BytesIO()
    with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
        df.to_excel(writer, index=False)

    response = client.post(
        "/admin/roster/upload",
        files={"file": ("guests.xlsx", buffer.getvalue(), "application/octet-stream")},
        headers=AUTH,
    )

    assert response.status_code == 200
    assert response.json()["data"]["processed_count"] == 2
    unassigned = client.get("/admin/tables/unassigned", headers=AUTH).json()["data"]
    assert sorted(c["name"] for c in unassigned) == ["Ana", "Maria"]

def test_export_by_table(client):
    guest_id = add_guest(client, "Ana")
    client.post(
        "/admin/tables/assignments/candidate",
        json={"guest_id": guest_id, "table_number": 2, "seat_position": 4}, headers=AUTH,
    )

    response = client.get("/admin/tables/export/by-table.xlsx", headers=AUTH)

    assert response.status_code == 200
    df = pd.read_excel(io.BytesIO(response.content))
    assert df.iloc[0]["Full Name"] == "Ana"
    assert df.iloc[0]["Seat"] == 4

def test_capacity_bounds_follow_settings(client, monkeypatch):
    monkeypatch.setattr(settings, "MAX_TABLE_CAPACITY", 12)

    response = client.put("/admin/tables/config", json={"table_number": 1, "capacity": 12}, headers=AUTH)

    assert response.status_code == 200
    assert response.json()["data"]["capacity"] == 12

def test_second_attendee_without_answer_is_pending(client):
    response = client.post(
        "/admin/roster",
        json={"person1_name": "Ana", "person2_name": "Luis", "attendance1": "confirmed", "host_tag": "bride"},
        headers=AUTH,
    )
    assert response.status_code == 201
    guest = response.json()["data"]
    assert guest["attendance2"] == "pending"

    unassigned = client.get("/admin/tables/unassigned", headers=AUTH).json()["data"]

    assert [(c["id"], c["name"], c["is_couple"]) for c in unassigned] == [
        (f"{guest['id']}-couple", "Ana & Luis", True)
    ]

def test_explicit_allocation_of_unknown_guest(client):
    response = client.post(
        "/admin/tables/assignments",
        json={"table_number": 1, "person": {"guest_id": 4242, "person_index": 1, "person_name": "Nobody"}},
        headers=AUTH,
    )

    assert response.status_code == 404
    assert response.json()["error_code"] == "GuestNotFound"
    assert client.get("/admin/tables/assignments", headers=AUTH).json()["data"] == []

def test_unassigned_filters(client):
    for payload in (
        {"person1_name": "Ana Perez", "attendance1": "confirmed", "host_tag": "bride"},
        {"person1_name": "Bruno Diaz", "attendance1": "pending", "host_tag": "groom"},
        {"person1_name": "Carla Perez", "attendance1": "pending", "host_tag": "bride"},
    ):
        assert client.post("/admin/roster", json=payload, headers=AUTH).status_code == 201

    def names(**params):
        response = client.get("/admin/tables/unassigned", params=params, headers=AUTH)
        assert response.status_code == 200
        return sorted(c["name"] for c in response.json()["data"])

    assert names(search="perez") == ["Ana Perez", "Carla Perez"]
    assert names(attendance="pending") == ["Bruno Diaz", "Carla Perez"]
    assert names(host_tag="Groom") == ["Bruno Diaz"]
    assert names(search="PEREZ", attendance="pending", host_tag="bride") == ["Carla Perez"]
    assert names() == ["Ana Perez", "Bruno Diaz", "Carla Perez"]

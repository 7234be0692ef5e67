"""
Tests for seating invariant checks and staged-row repair
"""

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from app.core.config import settings
from app.core.db import Base
from app.models import Guest, SeatAssignment
from app.services.allocation_service import AllocationService
from app.services.integrity_service import IntegrityService
from app.services.repositories import AssignmentRepo
from app.services.table_config_service import TableConfigService

# Test database setup
SQLALCHEMY_DATABASE_URL = "sqlite:///./test_integrity.db"
engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

@pytest.fixture
def db_session():
    """Create test database session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    TableConfigService.seed_tables(db, count=2, capacity=8)
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)

@pytest.fixture
def couple(db_session):
    guest = Guest(person1_name="Ana", person2_name="Luis", attendance1="confirmed",
                  attendance2="confirmed", host_tag="bride")
    db_session.add(guest)
    db_session.commit()
    first, second = AllocationService.allocate_candidate(db_session, guest.id, 1, as_couple=True).data
    return first["id"], second["id"]

def kinds(db):
    return [v["kind"] for v in IntegrityService.find_violations(db)]

def test_clean_chart_has_no_violations(db_session, couple):
    assert kinds(db_session) == []

def test_staged_row_is_reported_and_repaired(db_session, couple):
    first, second = couple
    AssignmentRepo.update_assignment(
        db_session, second, table_number=settings.STAGING_TABLE_NUMBER, seat_position=1
    )
    db_session.commit()

    assert "staged" in kinds(db_session)

    result = IntegrityService.repair_staged_rows(db_session)

    assert result.success
    assert result.data["removed_ids"] == [second]
    survivor = AssignmentRepo.get(db_session, first)
    assert survivor.companion_assignment_id is None
    assert survivor.couple_color is None
    assert kinds(db_session) == []

def test_one_way_link_is_reported(db_session, couple):
    first, second = couple
    AssignmentRepo.update_assignment(db_session, second, companion_assignment_id=None)
    db_session.commit()

    assert "asymmetric_companion" in kinds(db_session)

def test_split_couple_is_reported(db_session, couple):
    first, _ = couple
    AssignmentRepo.update_assignment(db_session, first, table_number=2, seat_position=1)
    db_session.commit()

    assert "split_couple" in kinds(db_session)

def test_seat_beyond_shrunk_capacity_is_tolerated(db_session):
    guest = Guest(person1_name="Maria", attendance1="confirmed", host_tag="groom")
    db_session.add(guest)
    db_session.commit()
    AllocationService.allocate_candidate(db_session, guest.id, 2, seat_position=8)
    assert TableConfigService.update_capacity(db_session, 2, 4).success

    assert kinds(db_session) == ["legacy_seat"]

def test_row_at_unconfigured_table(db_session):
    guest = Guest(person1_name="Maria", attendance1="confirmed", host_tag="groom")
    db_session.add(guest)
    db_session.commit()
    db_session.add(SeatAssignment(
        guest_id=guest.id, table_number=30, seat_position=1, person_index=1, person_name="Maria"
    ))
    db_session.commit()

    assert kinds(db_session) == ["unknown_table"]

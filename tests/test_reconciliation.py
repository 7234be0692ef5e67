"""
Tests for deriving unassigned attendees and pruning stale assignments
"""

from types import SimpleNamespace

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from app.core.db import Base
from app.models import Guest
from app.schemas.guest import GuestCreate
from app.services.allocation_service import AllocationService
from app.services.reconciliation_service import ReconciliationService, compute_unassigned, filter_candidates
from app.services.repositories import AssignmentRepo, GuestRepo
from app.services.table_config_service import TableConfigService

# Test database setup
SQLALCHEMY_DATABASE_URL = "sqlite:///./test_reconciliation.db"
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

def guest(id, name1, name2=None, attendance1="confirmed", attendance2=None, diet1=None, diet2=None, host="bride"):
    """Unsaved roster entry"""
    return Guest(
        id=id,
        person1_name=name1,
        person2_name=name2,
        attendance1=attendance1,
        attendance2=attendance2 if attendance2 is not None else ("confirmed" if name2 else None),
        dietary_restriction1=diet1,
        dietary_restriction2=diet2,
        host_tag=host,
    )

def seated(guest_id, person_index):
    return SimpleNamespace(guest_id=guest_id, person_index=person_index)

# -------- pure derivation --------

def test_unseated_couple_is_one_candidate():
    roster = [guest(1, "Ana", "Luis", diet1="vegan", diet2="celiac", host="groom")]

    [candidate] = compute_unassigned(roster, [])

    assert candidate.id == "1-couple"
    assert candidate.is_couple
    assert candidate.name == "Ana & Luis"
    assert candidate.companion_name == "Luis"
    assert candidate.dietary_restriction == "vegan, celiac"
    assert candidate.host_tag == "groom"

def test_single_invitation_pending():
    roster = [guest(2, "Maria", attendance1="pending")]

    [candidate] = compute_unassigned(roster, [])

    assert candidate.id == "2-1"
    assert not candidate.is_couple
    assert not candidate.has_companion
    assert candidate.attendance == "pending"

def test_declined_partner_leaves_single_candidate():
    roster = [guest(3, "Ana", "Luis", attendance2="declined")]

    [candidate] = compute_unassigned(roster, [])

    assert candidate.id == "3-1"
    assert candidate.name == "Ana"
    assert candidate.has_companion
    assert not candidate.is_couple

def test_partially_seated_couple_lists_remaining_person():
    roster = [guest(4, "Ana", "Luis")]

    [candidate] = compute_unassigned(roster, [seated(4, 1)])

    assert candidate.id == "4-2"
    assert candidate.person_index == 2
    assert candidate.name == "Luis"
    assert candidate.companion_name == "Ana"

def test_fully_declined_and_fully_seated_are_omitted():
    roster = [
        guest(5, "Ana", "Luis", attendance1="declined", attendance2="declined"),
        guest(6, "Pablo", "Rosa"),
    ]

    assert compute_unassigned(roster, [seated(6, 1), seated(6, 2)]) == []

def test_derivation_is_repeatable():
    roster = [guest(7, "Ana", "Luis"), guest(8, "Maria", attendance1="pending")]
    assignments = [seated(7, 2)]

    assert compute_unassigned(roster, assignments) == compute_unassigned(roster, assignments)

def test_missing_host_tag_defaults_to_first_host():
    roster = [guest(9, "Maria", host=None)]

    [candidate] = compute_unassigned(roster, [])

    assert candidate.host_tag == "bride"

# -------- against the database --------

def test_unassigned_reflects_allocations(db_session):
    couple = guest(None, "Ana", "Luis")
    single = guest(None, "Maria")
    db_session.add_all([couple, single])
    db_session.commit()

    assert {c.id for c in ReconciliationService.get_unassigned(db_session)} == {
        f"{couple.id}-couple", f"{single.id}-1"
    }

    assert AllocationService.allocate_candidate(db_session, couple.id, 1, as_couple=True).success

    assert [c.id for c in ReconciliationService.get_unassigned(db_session)] == [f"{single.id}-1"]

def test_prune_unseats_declined_attendee_and_frees_partner(db_session):
    couple = guest(None, "Ana", "Luis")
    db_session.add(couple)
    db_session.commit()
    first, second = AllocationService.allocate_candidate(db_session, couple.id, 1, as_couple=True).data

    couple.attendance2 = "declined"
    db_session.commit()
    assert ReconciliationService.find_orphans(db_session) == [second["id"]]

    result = ReconciliationService.prune_orphans(db_session)

    assert result.success
    assert result.data["removed_ids"] == [second["id"]]
    survivor = AssignmentRepo.get(db_session, first["id"])
    assert survivor.companion_assignment_id is None
    assert survivor.couple_color is None
    assert AssignmentRepo.get(db_session, second["id"]) is None

def test_prune_removes_rows_of_deleted_guests(db_session):
    couple = guest(None, "Ana", "Luis")
    single = guest(None, "Maria")
    db_session.add_all([couple, single])
    db_session.commit()
    AllocationService.allocate_candidate(db_session, couple.id, 1, as_couple=True)
    AllocationService.allocate_candidate(db_session, single.id, 2)

    # bulk delete, as a roster re-import would
    db_session.query(Guest).filter(Guest.id == couple.id).delete(synchronize_session=False)
    db_session.commit()

    result = ReconciliationService.prune_orphans(db_session)

    assert result.success
    assert AssignmentRepo.count_at_table(db_session, 1) == 0
    assert AssignmentRepo.count_at_table(db_session, 2) == 1
    assert ReconciliationService.find_orphans(db_session) == []

def test_prune_with_nothing_to_do(db_session):
    result = ReconciliationService.prune_orphans(db_session)

    assert result.success
    assert result.data["removed_ids"] == []

# -------- missing second answer --------

def test_second_attendee_defaults_to_pending_on_create():
    invitation = GuestCreate(person1_name="Ana", person2_name="Luis", attendance1="confirmed", host_tag="bride")
    solo = GuestCreate(person1_name="Maria", person2_name="  ", attendance2="confirmed", host_tag="bride")

    assert invitation.attendance2 == "pending"
    assert solo.person2_name is None
    assert solo.attendance2 is None

def test_repo_fills_missing_second_answer(db_session):
    couple = GuestRepo.create(db_session, person1_name="Ana", person2_name="Luis",
                              attendance1="confirmed", host_tag="bride")
    solo = GuestRepo.create(db_session, person1_name="Maria", attendance1="pending",
                            attendance2="confirmed", host_tag="groom")
    db_session.commit()

    assert couple.attendance2 == "pending"
    assert solo.attendance2 is None
    [candidate] = [c for c in ReconciliationService.get_unassigned(db_session) if c.guest_id == couple.id]
    assert candidate.is_couple
    assert candidate.name == "Ana & Luis"

# -------- filtering --------

def test_filter_candidates():
    roster = [
        guest(1, "Ana Perez", "Luis Gomez", host="bride"),
        guest(2, "Bruno Diaz", attendance1="pending", host="groom"),
        guest(3, "Carla Perez", attendance1="pending", host="bride"),
    ]
    candidates = compute_unassigned(roster, [])

    def names(**filters):
        return [c.name for c in filter_candidates(candidates, **filters)]

    assert names(search="gomez") == ["Ana Perez & Luis Gomez"]
    assert names(search="perez") == ["Ana Perez & Luis Gomez", "Carla Perez"]
    assert names(attendance="Pending") == ["Bruno Diaz", "Carla Perez"]
    assert names(host_tag="GROOM") == ["Bruno Diaz"]
    assert names(search="perez", attendance="confirmed", host_tag="bride") == ["Ana Perez & Luis Gomez"]
    assert names() == [c.name for c in candidates]

"""
Seating chart API routes - requires authentication
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import Optional

from app.core.db import get_db
from app.schemas.common import Violation
from app.schemas.seating import (
    AllocationRequest,
    CandidateAllocationRequest,
    CapacityUpdate,
    MoveRequest,
    ReorderRequest,
    SeatAssignmentResponse,
    SwapRequest,
    TableConfigResponse,
)
from app.services.allocation_service import AllocationService
from app.services.integrity_service import IntegrityService
from app.services.move_service import MoveService
from app.services.reconciliation_service import ReconciliationService
from app.services.repositories import AssignmentRepo
from app.services.seating_service import SeatingService
from app.services.table_config_service import TableConfigService
from app.utils.security import verify_admin_token
from app.utils.responses import success_response, result_response

router = APIRouter(dependencies=[Depends(verify_admin_token)])

# -------- Table configuration --------

@router.get("/config")
async def list_table_configs(db: Session = Depends(get_db)):
    """All tables in display order"""
    configs = TableConfigService.list_configs(db)
    return success_response(
        message="Table configurations retrieved",
        data=[TableConfigResponse.model_validate(c).model_dump() for c in configs]
    )

@router.put("/config")
async def update_table_capacity(update: CapacityUpdate, db: Session = Depends(get_db)):
    """Change a table's capacity"""
    result = TableConfigService.update_capacity(db, update.table_number, update.capacity)
    return result_response(result)

@router.post("/reorder")
async def reorder_tables(request: ReorderRequest, db: Session = Depends(get_db)):
    """Move a table before or after another in the display order"""
    result = TableConfigService.reorder(
        db, request.dragged_table, request.target_table, request.insert_before
    )
    return result_response(result)

# -------- Assignments --------

@router.get("/assignments")
async def list_assignments(db: Session = Depends(get_db)):
    """Every seat assignment, by table then seat"""
    assignments = AssignmentRepo.list_assignments(db)
    return success_response(
        message="Assignments retrieved",
        data=[SeatAssignmentResponse.model_validate(a).model_dump() for a in assignments]
    )

@router.get("/overview")
async def seating_overview(db: Session = Depends(get_db)):
    """Tables with occupants and summary counts"""
    return success_response(
        message="Seating overview retrieved",
        data=SeatingService.get_seating_overview(db)
    )

@router.get("/{table_number}/occupants")
async def table_occupants(table_number: int, db: Session = Depends(get_db)):
    """Occupants of one table in seat order"""
    return success_response(
        message=f"Occupants of table {table_number} retrieved",
        data=SeatingService.get_table_occupants(db, table_number)
    )

@router.get("/unassigned")
async def unassigned_people(
    search: Optional[str] = Query(None),
    attendance: Optional[str] = Query(None),
    host_tag: Optional[str] = Query(None),
    db: Session = Depends(get_db)
):
    """People who still need a seat, optionally filtered by name, attendance and host"""
    candidates = ReconciliationService.get_unassigned(
        db, search=search, attendance=attendance, host_tag=host_tag
    )
    return success_response(
        message=f"{len(candidates)} unassigned",
        data=[c.model_dump() for c in candidates]
    )

@router.post("/assignments")
async def create_assignment(request: AllocationRequest, db: Session = Depends(get_db)):
    """Seat a person, or a couple when a companion is given"""
    result = AllocationService.allocate(
        db,
        table_number=request.table_number,
        person=request.person.model_dump(),
        companion=request.companion.model_dump() if request.companion else None,
        seat_position=request.seat_position,
    )
    return result_response(result, status_code=201)

@router.post("/assignments/candidate")
async def create_assignment_from_roster(request: CandidateAllocationRequest, db: Session = Depends(get_db)):
    """Seat an unassigned candidate using the roster's details"""
    result = AllocationService.allocate_candidate(
        db,
        guest_id=request.guest_id,
        table_number=request.table_number,
        person_index=request.person_index,
        as_couple=request.as_couple,
        seat_position=request.seat_position,
    )
    return result_response(result, status_code=201)

@router.put("/assignments/{assignment_id}")
async def move_assignment(assignment_id: int, request: MoveRequest, db: Session = Depends(get_db)):
    """Move a person (and their companion) to a free seat"""
    result = MoveService.move(db, assignment_id, request.table_number, request.seat_position)
    return result_response(result)

@router.delete("/assignments/{assignment_id}")
async def delete_assignment(assignment_id: int, db: Session = Depends(get_db)):
    """Unseat a person together with their companion"""
    result = MoveService.remove(db, assignment_id)
    return result_response(result)

@router.post("/swap")
async def swap_assignments(request: SwapRequest, db: Session = Depends(get_db)):
    """Swap two singles or two couples"""
    result = MoveService.swap(db, request.first_assignment_id, request.second_assignment_id)
    return result_response(result)

# -------- Maintenance --------

@router.post("/prune")
async def prune_orphans(db: Session = Depends(get_db)):
    """Unseat people who declined or were removed from the roster"""
    result = ReconciliationService.prune_orphans(db)
    return result_response(result)

@router.get("/integrity")
async def integrity_report(db: Session = Depends(get_db)):
    """List broken seating invariants"""
    violations = [Violation(**v) for v in IntegrityService.find_violations(db)]
    return success_response(
        message="No problems found" if not violations else f"{len(violations)} problems found",
        data=[v.model_dump() for v in violations]
    )

@router.post("/integrity/repair")
async def repair_staged(db: Session = Depends(get_db)):
    """Unseat anyone left at the staging table"""
    result = IntegrityService.repair_staged_rows(db)
    return result_response(result)

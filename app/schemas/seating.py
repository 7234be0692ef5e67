"""
Seating chart Pydantic schemas
"""

from typing import List, Optional
from pydantic import BaseModel, Field

class PersonData(BaseModel):
    """One attendee about to be seated"""
    guest_id: int
    person_index: int = Field(ge=1, le=2)
    person_name: str = Field(min_length=1)
    dietary_restriction: Optional[str] = None

class AllocationRequest(BaseModel):
    """Seat one person, or a couple when ``companion`` is given"""
    table_number: int
    seat_position: Optional[int] = None
    person: PersonData
    companion: Optional[PersonData] = None

class CandidateAllocationRequest(BaseModel):
    """Seat an unassigned candidate straight from the roster"""
    guest_id: int
    person_index: int = Field(1, ge=1, le=2)
    as_couple: bool = False
    table_number: int
    seat_position: Optional[int] = None

class MoveRequest(BaseModel):
    table_number: int
    seat_position: int

class SwapRequest(BaseModel):
    first_assignment_id: int
    second_assignment_id: int

class CapacityUpdate(BaseModel):
    table_number: int
    capacity: int

class ReorderRequest(BaseModel):
    dragged_table: int
    target_table: int
    insert_before: bool = True

class SeatAssignmentResponse(BaseModel):
    id: int
    guest_id: int
    table_number: int
    seat_position: int
    person_index: int
    person_name: str
    dietary_restriction: Optional[str] = None
    companion_assignment_id: Optional[int] = None
    couple_color: Optional[str] = None

    class Config:
        from_attributes = True

class TableConfigResponse(BaseModel):
    table_number: int
    capacity: int
    display_order: int

    class Config:
        from_attributes = True

class UnassignedCandidate(BaseModel):
    """A person (or a couple, shown once) who still needs a seat"""
    id: str
    guest_id: int
    person_index: int
    name: str
    companion_name: Optional[str] = None
    attendance: str
    has_companion: bool
    is_couple: bool
    dietary_restriction: Optional[str] = None
    host_tag: str

class TableOverview(BaseModel):
    table_number: int
    display_order: int
    capacity: int
    occupied: int
    available: int
    occupants: List[SeatAssignmentResponse]

"""
Pydantic schemas package
"""

from .common import *
from .guest import *
from .seating import *

__all__ = [
    "StandardResponse",
    "ErrorResponse",
    "Violation",
    "GuestCreate",
    "GuestResponse",
    "PersonData",
    "AllocationRequest",
    "CandidateAllocationRequest",
    "MoveRequest",
    "SwapRequest",
    "CapacityUpdate",
    "ReorderRequest",
    "SeatAssignmentResponse",
    "TableConfigResponse",
    "UnassignedCandidate",
    "TableOverview",
]

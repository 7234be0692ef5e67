"""
Seating error taxonomy and operation results
"""

from dataclasses import dataclass
from typing import Any, Optional


class SeatingError(Exception):
    """Expected, user-facing rejection of a seating operation"""

    code = "SeatingError"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class CapacityExceeded(SeatingError):
    code = "CapacityExceeded"


class SeatOccupied(SeatingError):
    code = "SeatOccupied"


class NoAdjacentSeat(SeatingError):
    code = "NoAdjacentSeat"


class AsymmetricSwap(SeatingError):
    code = "AsymmetricSwap"


class CapacityBelowOccupancy(SeatingError):
    code = "CapacityBelowOccupancy"


class InvalidCapacity(SeatingError):
    code = "InvalidCapacity"


class InvalidSeatPosition(SeatingError):
    code = "InvalidSeatPosition"


class PersonAlreadySeated(SeatingError):
    code = "PersonAlreadySeated"


class TableNotFound(SeatingError):
    code = "TableNotFound"


class AssignmentNotFound(SeatingError):
    code = "AssignmentNotFound"


class GuestNotFound(SeatingError):
    code = "GuestNotFound"


class InvalidOccupant(SeatingError):
    code = "InvalidOccupant"


@dataclass
class OperationResult:
    """Outcome of an engine call; failures carry the error code"""

    success: bool
    message: str
    data: Any = None
    error_code: Optional[str] = None

    @classmethod
    def ok(cls, message: str, data: Any = None) -> "OperationResult":
        return cls(success=True, message=message, data=data)

    @classmethod
    def failure(cls, error: SeatingError) -> "OperationResult":
        return cls(success=False, message=error.message, error_code=error.code)

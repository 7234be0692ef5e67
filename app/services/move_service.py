"""
Moving, swapping and removing seated people.

Every operation here validates the full plan against a fresh read of the
affected tables before it writes anything, and runs inside a single
transaction. Relocations of more than one row are staged: all rows are first
parked at the staging table, then written to their final seats, so no
intermediate flush ever puts two rows on the same seat.
"""

import logging
from typing import Dict, List, Optional, Set, Tuple

from sqlalchemy.orm import Session

from app.core.config import settings
from app.models import SeatAssignment
from app.services import seat_math
from app.services.errors import (
    AssignmentNotFound,
    AsymmetricSwap,
    CapacityExceeded,
    InvalidSeatPosition,
    NoAdjacentSeat,
    OperationResult,
    SeatOccupied,
    TableNotFound,
)
from app.services.repositories import AssignmentRepo, TableConfigRepo
from app.services.transactions import run_operation

logger = logging.getLogger(__name__)

# (assignment, table_number, seat_position, couple_color)
Placement = Tuple[SeatAssignment, int, int, Optional[str]]

class MoveService:
    """Service for relocating occupants"""

    @staticmethod
    def move(db: Session, assignment_id: int, table_number: int, seat_position: int) -> OperationResult:
        """Move a person to a free seat; a couple moves together"""
        def operation():
            assignment = MoveService._get_assignment(db, assignment_id)
            config = TableConfigRepo.get(db, table_number)
            if config is None:
                raise TableNotFound(f"Table {table_number} not found")
            if not seat_math.is_valid_position(seat_position, config.capacity):
                raise InvalidSeatPosition(
                    f"Seat {seat_position} does not exist at table {table_number} (seats 1-{config.capacity})"
                )

            if assignment.companion_assignment_id is None:
                moved = MoveService._move_single(db, assignment, table_number, seat_position, config.capacity)
                return f"{assignment.person_name} moved to table {table_number}, seat {seat_position}", moved

            companion = MoveService._get_assignment(db, assignment.companion_assignment_id)
            moved = MoveService._move_couple(db, assignment, companion, table_number, seat_position, config.capacity)
            return (
                f"{assignment.person_name} & {companion.person_name} moved to table {table_number}",
                moved,
            )

        return run_operation(db, operation, "move")

    @staticmethod
    def swap(db: Session, first_id: int, second_id: int) -> OperationResult:
        """Exchange two singles, or two couples, in one transaction"""
        def operation():
            if first_id == second_id:
                return "Nothing to swap", []
            first = MoveService._get_assignment(db, first_id)
            second = MoveService._get_assignment(db, second_id)

            if first.companion_assignment_id == second.id:
                placements = [
                    (first, second.table_number, second.seat_position, first.couple_color),
                    (second, first.table_number, first.seat_position, second.couple_color),
                ]
            elif (first.companion_assignment_id is None) != (second.companion_assignment_id is None):
                raise AsymmetricSwap(
                    "A couple can only be swapped with another couple, and a single person with another single person"
                )
            elif first.companion_assignment_id is None:
                placements = [
                    (first, second.table_number, second.seat_position, None),
                    (second, first.table_number, first.seat_position, None),
                ]
            else:
                placements = MoveService._plan_couple_swap(db, first, second)

            MoveService._relocate(db, placements)
            return (
                f"{first.person_name} and {second.person_name} swapped places",
                [assignment.to_dict() for assignment, *_ in placements],
            )

        return run_operation(db, operation, "swap")

    @staticmethod
    def remove(db: Session, assignment_id: int) -> OperationResult:
        """Unseat a person together with their companion"""
        def operation():
            assignment = MoveService._get_assignment(db, assignment_id)
            ids = [assignment.id]
            if assignment.companion_assignment_id is not None:
                ids.append(assignment.companion_assignment_id)
            AssignmentRepo.delete_assignments(db, ids)
            return "Assignment removed", {"removed_ids": ids}

        return run_operation(db, operation, "remove")

    # -------- helpers --------

    @staticmethod
    def _get_assignment(db: Session, assignment_id: int) -> SeatAssignment:
        assignment = AssignmentRepo.get(db, assignment_id)
        if assignment is None:
            raise AssignmentNotFound(f"Assignment {assignment_id} not found")
        return assignment

    @staticmethod
    def _capacity(db: Session, table_number: int) -> int:
        config = TableConfigRepo.get(db, table_number)
        if config is None:
            raise TableNotFound(f"Table {table_number} not found")
        return config.capacity

    @staticmethod
    def _move_single(
        db: Session, assignment: SeatAssignment, table_number: int, seat_position: int, capacity: int
    ) -> List[dict]:
        if (assignment.table_number, assignment.seat_position) == (table_number, seat_position):
            return [assignment.to_dict()]

        occupied = AssignmentRepo.occupied_positions(db, table_number, exclude_ids=[assignment.id])
        if seat_position in occupied:
            raise SeatOccupied(f"Seat {seat_position} at table {table_number} is already taken")
        if assignment.table_number != table_number and len(occupied) >= capacity:
            raise CapacityExceeded(f"Table {table_number} is full")

        AssignmentRepo.update_assignment(
            db, assignment.id, table_number=table_number, seat_position=seat_position
        )
        return [assignment.to_dict()]

    @staticmethod
    def _move_couple(
        db: Session,
        assignment: SeatAssignment,
        companion: SeatAssignment,
        table_number: int,
        seat_position: int,
        capacity: int,
    ) -> List[dict]:
        moving = [assignment.id, companion.id]
        occupied = AssignmentRepo.occupied_positions(db, table_number, exclude_ids=moving)
        available = seat_math.free_seats(capacity, occupied)
        if min(capacity - len(occupied), len(available)) < 2:
            raise CapacityExceeded(f"Table {table_number} does not have room for a couple")

        pair = seat_math.adjacent_pair_near(seat_position, capacity, occupied)
        if pair is None:
            raise NoAdjacentSeat(
                f"There are no 2 consecutive free seats for the couple at table {table_number}. "
                "Use another table or move someone first."
            )

        color = seat_math.pick_couple_color(
            AssignmentRepo.colors_at_table(db, table_number, exclude_ids=moving), settings.COUPLE_COLORS
        )
        placements = [
            (assignment, table_number, pair[0], color),
            (companion, table_number, pair[1], color),
        ]
        MoveService._relocate(db, placements)
        return [assignment.to_dict(), companion.to_dict()]

    @staticmethod
    def _plan_couple_swap(db: Session, first: SeatAssignment, second: SeatAssignment) -> List[Placement]:
        """Final seats for two couples trading places.

        Each primary lands on the other's seat; each companion needs a free
        neighbour of that seat once the four departing people are gone and the
        seats already claimed in this swap are counted.
        """
        first_companion = MoveService._get_assignment(db, first.companion_assignment_id)
        second_companion = MoveService._get_assignment(db, second.companion_assignment_id)
        departing = [first.id, first_companion.id, second.id, second_companion.id]

        capacities: Dict[int, int] = {}
        claimed: Dict[int, Set[int]] = {}
        for table_number in (first.table_number, second.table_number):
            if table_number not in claimed:
                capacities[table_number] = MoveService._capacity(db, table_number)
                claimed[table_number] = set(
                    AssignmentRepo.occupied_positions(db, table_number, exclude_ids=departing)
                )

        # incoming primaries take each other's seats
        claimed[second.table_number].add(second.seat_position)
        claimed[first.table_number].add(first.seat_position)

        first_companion_seat = seat_math.partner_seat(
            second.seat_position, capacities[second.table_number], claimed[second.table_number]
        )
        if first_companion_seat is None:
            raise NoAdjacentSeat(
                f"There are no 2 consecutive free seats at table {second.table_number} for the couple. "
                "Pick another table or move someone first."
            )
        claimed[second.table_number].add(first_companion_seat)

        second_companion_seat = seat_math.partner_seat(
            first.seat_position, capacities[first.table_number], claimed[first.table_number]
        )
        if second_companion_seat is None:
            raise NoAdjacentSeat(
                f"There are no 2 consecutive free seats at table {first.table_number} for the couple. "
                "Pick another table or move someone first."
            )

        color_at_second = seat_math.pick_couple_color(
            AssignmentRepo.colors_at_table(db, second.table_number, exclude_ids=departing),
            settings.COUPLE_COLORS,
        )
        used_at_first = AssignmentRepo.colors_at_table(db, first.table_number, exclude_ids=departing)
        if first.table_number == second.table_number:
            used_at_first.append(color_at_second)
        color_at_first = seat_math.pick_couple_color(used_at_first, settings.COUPLE_COLORS)

        return [
            (first, second.table_number, second.seat_position, color_at_second),
            (first_companion, second.table_number, first_companion_seat, color_at_second),
            (second, first.table_number, first.seat_position, color_at_first),
            (second_companion, first.table_number, second_companion_seat, color_at_first),
        ]

    @staticmethod
    def _relocate(db: Session, placements: List[Placement]) -> None:
        """Write placements through the staging table"""
        staging = settings.STAGING_TABLE_NUMBER
        base = max(AssignmentRepo.occupied_positions(db, staging), default=0)

        for offset, (assignment, *_) in enumerate(placements, start=1):
            AssignmentRepo.update_assignment(
                db, assignment.id, table_number=staging, seat_position=base + offset
            )

        for assignment, table_number, seat_position, color in placements:
            AssignmentRepo.update_assignment(
                db,
                assignment.id,
                table_number=table_number,
                seat_position=seat_position,
                couple_color=color,
            )
        logger.debug("Relocated %d rows through staging table %d", len(placements), staging)

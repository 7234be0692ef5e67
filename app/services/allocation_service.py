"""
Seat allocation: placing unseated people at a table
"""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from app.core.config import settings
from app.models import SeatAssignment
from app.models.guest import ATTENDANCE_DECLINED
from app.services import seat_math
from app.services.errors import (
    CapacityExceeded,
    GuestNotFound,
    InvalidOccupant,
    InvalidSeatPosition,
    NoAdjacentSeat,
    OperationResult,
    PersonAlreadySeated,
    SeatOccupied,
    TableNotFound,
)
from app.services.repositories import AssignmentRepo, GuestRepo, TableConfigRepo
from app.services.transactions import run_operation

logger = logging.getLogger(__name__)

class AllocationService:
    """Service for seating new occupants"""

    @staticmethod
    def allocate(
        db: Session,
        table_number: int,
        person: Dict[str, Any],
        companion: Optional[Dict[str, Any]] = None,
        seat_position: Optional[int] = None,
    ) -> OperationResult:
        """Seat one person, or a couple side by side.

        ``person`` and ``companion`` carry ``guest_id``, ``person_index``,
        ``person_name`` and ``dietary_restriction``. For a couple,
        ``seat_position`` is where the first person sits; the companion takes
        the clockwise neighbour, or the counter-clockwise one when that is
        taken. Without a position the lowest free seat (or pair) is used.
        """
        def operation():
            assignments = AllocationService._place(db, table_number, person, companion, seat_position)
            names = " & ".join(a.person_name for a in assignments)
            seats = ", ".join(str(a.seat_position) for a in assignments)
            return (
                f"{names} seated at table {table_number} (seat {seats})",
                [a.to_dict() for a in assignments],
            )

        return run_operation(db, operation, "allocate")

    @staticmethod
    def allocate_candidate(
        db: Session,
        guest_id: int,
        table_number: int,
        person_index: int = 1,
        as_couple: bool = False,
        seat_position: Optional[int] = None,
    ) -> OperationResult:
        """Seat a roster attendee (or both attendees) using the roster's details"""
        def operation():
            guest = GuestRepo.get(db, guest_id)
            if guest is None:
                raise GuestNotFound(f"Guest {guest_id} not found")

            indexes = [1, 2] if as_couple else [person_index]
            people = []
            for index in indexes:
                name = guest.person_name(index)
                if not name:
                    raise InvalidOccupant(f"Guest {guest_id} has no attendee #{index}")
                if guest.attendance(index) == ATTENDANCE_DECLINED:
                    raise InvalidOccupant(f"{name} declined the invitation and cannot be seated")
                people.append({
                    "guest_id": guest.id,
                    "person_index": index,
                    "person_name": name,
                    "dietary_restriction": guest.dietary_restriction(index),
                })

            first = people[0]
            second = people[1] if len(people) > 1 else None
            assignments = AllocationService._place(db, table_number, first, second, seat_position)
            names = " & ".join(a.person_name for a in assignments)
            return (
                f"{names} seated at table {table_number}",
                [a.to_dict() for a in assignments],
            )

        return run_operation(db, operation, "allocate candidate")

    @staticmethod
    def _place(
        db: Session,
        table_number: int,
        person: Dict[str, Any],
        companion: Optional[Dict[str, Any]],
        seat_position: Optional[int],
    ) -> List[SeatAssignment]:
        config = TableConfigRepo.get(db, table_number)
        if config is None:
            raise TableNotFound(f"Table {table_number} not found")
        capacity = config.capacity

        if seat_position is not None and not seat_math.is_valid_position(seat_position, capacity):
            raise InvalidSeatPosition(
                f"Seat {seat_position} does not exist at table {table_number} (seats 1-{capacity})"
            )

        people = [person] if companion is None else [person, companion]
        if companion is not None and (
            (person["guest_id"], person["person_index"]) == (companion["guest_id"], companion["person_index"])
        ):
            raise InvalidOccupant("A person cannot be their own companion")
        for p in people:
            if GuestRepo.get(db, p["guest_id"]) is None:
                raise GuestNotFound(f"Guest {p['guest_id']} not found")
            seated = AssignmentRepo.find_person(db, p["guest_id"], p["person_index"])
            if seated is not None:
                raise PersonAlreadySeated(
                    f"{p['person_name']} already sits at table {seated.table_number}, seat {seated.seat_position}"
                )

        occupied = AssignmentRepo.occupied_positions(db, table_number)
        available = seat_math.free_seats(capacity, occupied)
        room = min(capacity - len(occupied), len(available))
        if room < len(people):
            raise CapacityExceeded(
                f"Table {table_number} does not have enough room. Available: {max(room, 0)}, needed: {len(people)}"
            )

        if companion is None:
            if seat_position is not None:
                if seat_position in occupied:
                    raise SeatOccupied(f"Seat {seat_position} at table {table_number} is already taken")
                positions = [seat_position]
            else:
                positions = [available[0]]
            color = None
        else:
            if seat_position is not None:
                if seat_position in occupied:
                    raise SeatOccupied(f"Seat {seat_position} at table {table_number} is already taken")
                partner = seat_math.partner_seat(seat_position, capacity, occupied)
                if partner is None:
                    raise NoAdjacentSeat(
                        f"There are no 2 consecutive free seats for the couple at seat {seat_position} "
                        f"of table {table_number}. Pick another seat or another table."
                    )
                positions = [seat_position, partner]
            else:
                pair = seat_math.first_adjacent_pair(capacity, occupied)
                if pair is None:
                    raise NoAdjacentSeat(
                        f"There are no 2 consecutive free seats for the couple at table {table_number}. "
                        "Use another table or move someone first."
                    )
                positions = list(pair)
            color = seat_math.pick_couple_color(
                AssignmentRepo.colors_at_table(db, table_number), settings.COUPLE_COLORS
            )

        rows = [
            {
                "guest_id": p["guest_id"],
                "person_index": p["person_index"],
                "person_name": p["person_name"],
                "dietary_restriction": p.get("dietary_restriction"),
                "table_number": table_number,
                "seat_position": position,
                "couple_color": color,
            }
            for p, position in zip(people, positions)
        ]
        assignments = AssignmentRepo.create_assignments(db, rows)
        if len(assignments) == 2:
            AssignmentRepo.link_companions(db, assignments[0], assignments[1], color)
        return assignments

"""
Reconciliation of the guest roster against current seat assignments
"""

import logging
from typing import Dict, Iterable, List, Optional, Set

from sqlalchemy.orm import Session

from app.core.config import settings
from app.models.guest import ATTENDANCE_CONFIRMED, ATTENDANCE_DECLINED, ATTENDANCE_PENDING
from app.schemas.seating import UnassignedCandidate
from app.services.errors import OperationResult
from app.services.repositories import AssignmentRepo, GuestRepo
from app.services.transactions import run_operation

logger = logging.getLogger(__name__)

ELIGIBLE_ATTENDANCE = (ATTENDANCE_CONFIRMED, ATTENDANCE_PENDING)


def is_eligible(guest, person_index: int) -> bool:
    """Named attendee who has not declined"""
    return bool(guest.person_name(person_index)) and guest.attendance(person_index) in ELIGIBLE_ATTENDANCE


def compute_unassigned(guests: Iterable, assignments: Iterable) -> List[UnassignedCandidate]:
    """Attendees who still need a seat, in roster order.

    When both attendees of an invitation are eligible and unseated they are
    returned once, as a couple; otherwise each unseated eligible attendee is
    returned on its own.
    """
    seated: Dict[int, Set[int]] = {}
    for assignment in assignments:
        seated.setdefault(assignment.guest_id, set()).add(assignment.person_index)

    candidates: List[UnassignedCandidate] = []
    for guest in guests:
        taken = seated.get(guest.id, set())
        host_tag = guest.host_tag or settings.HOST_TAGS[0]
        waiting = [i for i in (1, 2) if i not in taken and is_eligible(guest, i)]

        if waiting == [1, 2]:
            restrictions = [r for r in (guest.dietary_restriction1, guest.dietary_restriction2) if r]
            candidates.append(UnassignedCandidate(
                id=f"{guest.id}-couple",
                guest_id=guest.id,
                person_index=1,
                name=f"{guest.person1_name} & {guest.person2_name}",
                companion_name=guest.person2_name,
                attendance=guest.attendance1,
                has_companion=True,
                is_couple=True,
                dietary_restriction=", ".join(restrictions) or None,
                host_tag=host_tag,
            ))
            continue

        for index in waiting:
            other = 2 if index == 1 else 1
            candidates.append(UnassignedCandidate(
                id=f"{guest.id}-{index}",
                guest_id=guest.id,
                person_index=index,
                name=guest.person_name(index),
                companion_name=guest.person_name(other),
                attendance=guest.attendance(index),
                has_companion=bool(guest.person2_name),
                is_couple=False,
                dietary_restriction=guest.dietary_restriction(index),
                host_tag=host_tag,
            ))

    return candidates


def filter_candidates(
    candidates: Iterable[UnassignedCandidate],
    search: Optional[str] = None,
    attendance: Optional[str] = None,
    host_tag: Optional[str] = None,
) -> List[UnassignedCandidate]:
    """Narrow candidates by name fragment, attendance answer and host, all case-insensitive"""
    term = (search or "").strip().lower()
    wanted_attendance = (attendance or "").strip().lower()
    wanted_host = (host_tag or "").strip().lower()
    return [
        c for c in candidates
        if term in c.name.lower()
        and (not wanted_attendance or c.attendance.lower() == wanted_attendance)
        and (not wanted_host or c.host_tag.lower() == wanted_host)
    ]


class ReconciliationService:
    """Service deriving who still needs a seat"""

    @staticmethod
    def get_unassigned(
        db: Session,
        search: Optional[str] = None,
        attendance: Optional[str] = None,
        host_tag: Optional[str] = None,
    ) -> List[UnassignedCandidate]:
        candidates = compute_unassigned(GuestRepo.list_roster(db), AssignmentRepo.list_assignments(db))
        return filter_candidates(candidates, search=search, attendance=attendance, host_tag=host_tag)

    @staticmethod
    def find_orphans(db: Session) -> List[int]:
        """Assignments whose attendee no longer exists or has declined"""
        guests = {guest.id: guest for guest in GuestRepo.list_roster(db)}
        orphans = []
        for assignment in AssignmentRepo.list_assignments(db):
            guest = guests.get(assignment.guest_id)
            if guest is None or not guest.person_name(assignment.person_index):
                orphans.append(assignment.id)
            elif guest.attendance(assignment.person_index) == ATTENDANCE_DECLINED:
                orphans.append(assignment.id)
        return orphans

    @staticmethod
    def prune_orphans(db: Session) -> OperationResult:
        """Unseat orphaned assignments; a surviving companion becomes a single"""
        def operation():
            orphans = ReconciliationService.find_orphans(db)
            if orphans:
                AssignmentRepo.delete_assignments(db, orphans)
                logger.info("Removed %d orphaned assignments: %s", len(orphans), orphans)
            return f"{len(orphans)} orphaned assignments removed", {"removed_ids": orphans}

        return run_operation(db, operation, "prune orphans")

"""
Post-condition checks over the whole seating chart
"""

import logging
from typing import Dict, List

from sqlalchemy.orm import Session

from app.core.config import settings
from app.services import seat_math
from app.services.errors import OperationResult
from app.services.repositories import AssignmentRepo, TableConfigRepo
from app.services.transactions import run_operation

logger = logging.getLogger(__name__)

class IntegrityService:
    """Service verifying seating invariants"""

    @staticmethod
    def find_violations(db: Session) -> List[Dict]:
        """Every broken invariant in the current snapshot.

        Each entry has ``kind``, ``message`` and the offending
        ``assignment_ids`` or ``table_number``. Seats above a table's current
        capacity are reported as ``legacy_seat`` and are tolerated.
        """
        configs = {c.table_number: c for c in TableConfigRepo.list_table_configs(db)}
        assignments = AssignmentRepo.list_assignments(db)
        by_id = {a.id: a for a in assignments}
        staging = settings.STAGING_TABLE_NUMBER
        violations: List[Dict] = []

        counts: Dict[int, int] = {}
        for a in assignments:
            counts[a.table_number] = counts.get(a.table_number, 0) + 1

        for table_number, count in sorted(counts.items()):
            if table_number == staging:
                continue
            config = configs.get(table_number)
            if config is None:
                violations.append({
                    "kind": "unknown_table",
                    "table_number": table_number,
                    "message": f"{count} people are seated at table {table_number}, which is not configured",
                })
            elif count > config.capacity:
                violations.append({
                    "kind": "over_capacity",
                    "table_number": table_number,
                    "message": f"Table {table_number} seats {count} people but has capacity {config.capacity}",
                })

        for a in assignments:
            if a.table_number == staging:
                violations.append({
                    "kind": "staged",
                    "assignment_ids": [a.id],
                    "message": f"{a.person_name} is parked at staging table {staging} by an interrupted operation",
                })
                continue

            config = configs.get(a.table_number)
            if config is not None and not seat_math.is_valid_position(a.seat_position, config.capacity):
                violations.append({
                    "kind": "legacy_seat",
                    "assignment_ids": [a.id],
                    "message": f"{a.person_name} sits at seat {a.seat_position} of table {a.table_number}, "
                               f"beyond its capacity of {config.capacity}",
                })

            if a.companion_assignment_id is None:
                if a.couple_color:
                    violations.append({
                        "kind": "color_without_companion",
                        "assignment_ids": [a.id],
                        "message": f"{a.person_name} has a couple colour but no companion",
                    })
                continue

            companion = by_id.get(a.companion_assignment_id)
            if companion is None:
                violations.append({
                    "kind": "dangling_companion",
                    "assignment_ids": [a.id],
                    "message": f"{a.person_name} points at missing companion {a.companion_assignment_id}",
                })
                continue
            # report each couple once
            if companion.id < a.id and companion.companion_assignment_id == a.id:
                continue
            pair = [a.id, companion.id]
            if companion.companion_assignment_id != a.id:
                violations.append({
                    "kind": "asymmetric_companion",
                    "assignment_ids": pair,
                    "message": f"{a.person_name} and {companion.person_name} are not linked both ways",
                })
            if companion.table_number != a.table_number:
                violations.append({
                    "kind": "split_couple",
                    "assignment_ids": pair,
                    "message": f"{a.person_name} and {companion.person_name} sit at different tables",
                })
            elif config is not None and not seat_math.are_adjacent(
                a.seat_position, companion.seat_position, config.capacity
            ):
                violations.append({
                    "kind": "non_adjacent_couple",
                    "assignment_ids": pair,
                    "message": f"{a.person_name} and {companion.person_name} do not sit next to each other",
                })
            if not a.couple_color or a.couple_color != companion.couple_color:
                violations.append({
                    "kind": "color_mismatch",
                    "assignment_ids": pair,
                    "message": f"{a.person_name} and {companion.person_name} do not share a couple colour",
                })

        return violations

    @staticmethod
    def repair_staged_rows(db: Session) -> OperationResult:
        """Unseat anyone left at the staging table so they can be placed again"""
        def operation():
            staged = AssignmentRepo.list_assignments(db, table_number=settings.STAGING_TABLE_NUMBER)
            ids = [a.id for a in staged]
            if ids:
                logger.warning(
                    "Found %d rows parked at staging table %d; unseating %s",
                    len(ids), settings.STAGING_TABLE_NUMBER, [a.person_name for a in staged],
                )
                AssignmentRepo.delete_assignments(db, ids)
            return f"{len(ids)} staged assignments repaired", {"removed_ids": ids}

        return run_operation(db, operation, "repair staged rows")

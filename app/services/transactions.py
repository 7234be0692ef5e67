"""
Transaction boundary shared by the seating engines
"""

import logging
from typing import Any, Callable, Optional, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.services.errors import OperationResult, PersonAlreadySeated, SeatingError, SeatOccupied

logger = logging.getLogger(__name__)


def conflict_from_integrity_error(exc: IntegrityError) -> Optional[SeatingError]:
    """Translate a lost race on a unique constraint into a seating rejection.

    Only the two assignment uniqueness rules are races; any other violation
    (foreign key, check constraint) is returned as ``None``.
    """
    detail = str(exc.orig).lower()
    if "uq_assignment_guest_person" in detail or ("unique" in detail and "person_index" in detail):
        return PersonAlreadySeated("This person was seated by someone else in the meantime. Reload and try again.")
    if "uq_assignment_table_seat" in detail or ("unique" in detail and "seat_position" in detail):
        return SeatOccupied("That seat was taken by someone else in the meantime. Reload and try again.")
    return None


def run_operation(
    db: Session,
    operation: Callable[[], Tuple[str, Any]],
    label: str,
) -> OperationResult:
    """Run ``operation`` in one transaction.

    ``operation`` returns ``(message, data)``. Expected rejections roll back
    and come back as a failed result; anything else rolls back and propagates.
    """
    try:
        message, data = operation()
        db.commit()
    except SeatingError as exc:
        db.rollback()
        logger.info("%s rejected [%s]: %s", label, exc.code, exc.message)
        return OperationResult.failure(exc)
    except IntegrityError as exc:
        db.rollback()
        error = conflict_from_integrity_error(exc)
        if error is None:
            logger.exception("%s violated a database constraint", label)
            raise
        logger.info("%s lost a write race [%s]: %s", label, error.code, exc.orig)
        return OperationResult.failure(error)
    except Exception:
        db.rollback()
        logger.exception("%s failed unexpectedly", label)
        raise

    logger.info("%s: %s", label, message)
    return OperationResult.ok(message, data)

"""
Repository layer over the SQL store.

Repositories flush but never commit: the calling service owns the
transaction so multi-row seating operations apply all-or-nothing.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.models import Guest, SeatAssignment, TableConfig
from app.models.guest import ATTENDANCE_PENDING


# -------- Table configuration repository --------

class TableConfigRepo:
    @staticmethod
    def list_table_configs(db: Session) -> List[TableConfig]:
        return db.query(TableConfig).order_by(TableConfig.display_order, TableConfig.table_number).all()

    @staticmethod
    def get(db: Session, table_number: int) -> Optional[TableConfig]:
        return db.query(TableConfig).filter(TableConfig.table_number == table_number).first()

    @staticmethod
    def create(db: Session, table_number: int, capacity: int, display_order: int) -> TableConfig:
        config = TableConfig(table_number=table_number, capacity=capacity, display_order=display_order)
        db.add(config)
        db.flush()
        return config

    @staticmethod
    def update_table_config(
        db: Session,
        table_number: int,
        capacity: Optional[int] = None,
        display_order: Optional[int] = None,
    ) -> Optional[TableConfig]:
        config = TableConfigRepo.get(db, table_number)
        if config is None:
            return None
        if capacity is not None:
            config.capacity = capacity
        if display_order is not None:
            config.display_order = display_order
        db.flush()
        return config


# -------- Seat assignment repository --------

class AssignmentRepo:
    @staticmethod
    def list_assignments(
        db: Session,
        table_number: Optional[int] = None,
        exclude_ids: Iterable[int] = (),
        ids: Optional[Iterable[int]] = None,
    ) -> List[SeatAssignment]:
        query = db.query(SeatAssignment)
        if table_number is not None:
            query = query.filter(SeatAssignment.table_number == table_number)
        excluded = [i for i in exclude_ids if i is not None]
        if excluded:
            query = query.filter(SeatAssignment.id.notin_(excluded))
        if ids is not None:
            query = query.filter(SeatAssignment.id.in_(list(ids)))
        return query.order_by(SeatAssignment.table_number, SeatAssignment.seat_position).all()

    @staticmethod
    def get(db: Session, assignment_id: int) -> Optional[SeatAssignment]:
        return db.query(SeatAssignment).filter(SeatAssignment.id == assignment_id).first()

    @staticmethod
    def find_person(db: Session, guest_id: int, person_index: int) -> Optional[SeatAssignment]:
        return db.query(SeatAssignment).filter(
            SeatAssignment.guest_id == guest_id,
            SeatAssignment.person_index == person_index,
        ).first()

    @staticmethod
    def occupied_positions(db: Session, table_number: int, exclude_ids: Iterable[int] = ()) -> List[int]:
        return [
            a.seat_position
            for a in AssignmentRepo.list_assignments(db, table_number=table_number, exclude_ids=exclude_ids)
        ]

    @staticmethod
    def create_assignments(db: Session, rows: List[Dict[str, Any]]) -> List[SeatAssignment]:
        assignments = [SeatAssignment(**row) for row in rows]
        db.add_all(assignments)
        db.flush()
        return assignments

    @staticmethod
    def link_companions(db: Session, first: SeatAssignment, second: SeatAssignment, color: str) -> None:
        first.companion_assignment_id = second.id
        second.companion_assignment_id = first.id
        first.couple_color = color
        second.couple_color = color
        db.flush()

    @staticmethod
    def update_assignment(db: Session, assignment_id: int, **fields: Any) -> Optional[SeatAssignment]:
        assignment = AssignmentRepo.get(db, assignment_id)
        if assignment is None:
            return None
        for key, value in fields.items():
            setattr(assignment, key, value)
        db.flush()
        return assignment

    @staticmethod
    def delete_assignments(db: Session, ids: Iterable[int]) -> int:
        """Delete rows; partners left behind become plain singles"""
        ids = [i for i in ids if i is not None]
        if not ids:
            return 0
        survivors = db.query(SeatAssignment).filter(
            SeatAssignment.companion_assignment_id.in_(ids),
            SeatAssignment.id.notin_(ids),
        ).all()
        for survivor in survivors:
            survivor.companion_assignment_id = None
            survivor.couple_color = None
        db.flush()
        # break links inside the deleted set too, so row order never matters
        db.query(SeatAssignment).filter(SeatAssignment.id.in_(ids)).update(
            {SeatAssignment.companion_assignment_id: None}, synchronize_session="fetch"
        )
        deleted = db.query(SeatAssignment).filter(SeatAssignment.id.in_(ids)).delete(
            synchronize_session="fetch"
        )
        db.flush()
        return deleted

    @staticmethod
    def count_at_table(db: Session, table_number: int) -> int:
        return db.query(SeatAssignment).filter(SeatAssignment.table_number == table_number).count()

    @staticmethod
    def colors_at_table(db: Session, table_number: int, exclude_ids: Iterable[int] = ()) -> List[str]:
        return [
            a.couple_color
            for a in AssignmentRepo.list_assignments(db, table_number=table_number, exclude_ids=exclude_ids)
            if a.couple_color
        ]


# -------- Guest roster repository --------

class GuestRepo:
    @staticmethod
    def list_roster(db: Session) -> List[Guest]:
        return db.query(Guest).order_by(Guest.person1_name, Guest.id).all()

    @staticmethod
    def get(db: Session, guest_id: int) -> Optional[Guest]:
        return db.query(Guest).filter(Guest.id == guest_id).first()

    @staticmethod
    def create(db: Session, **fields: Any) -> Guest:
        if fields.get("person2_name"):
            fields["attendance2"] = fields.get("attendance2") or ATTENDANCE_PENDING
        else:
            fields["attendance2"] = None
        guest = Guest(**fields)
        db.add(guest)
        db.flush()
        return guest

    @staticmethod
    def search(db: Session, name_icontains: str) -> List[Guest]:
        pattern = f"%{name_icontains}%"
        return db.query(Guest).filter(
            or_(Guest.person1_name.ilike(pattern), Guest.person2_name.ilike(pattern))
        ).order_by(Guest.person1_name).all()

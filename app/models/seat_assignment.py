"""
Seat assignment model
"""

from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, UniqueConstraint, CheckConstraint

from app.core.db import Base

class SeatAssignment(Base):
    """One person sitting in one seat.

    Couples are two rows pointing at each other through
    ``companion_assignment_id`` and sharing ``couple_color``. Name and dietary
    restriction are copied from the guest roster when the person is seated and
    are not refreshed afterwards.
    """
    __tablename__ = "seat_assignments"

    id = Column(Integer, primary_key=True, index=True)
    guest_id = Column(Integer, ForeignKey("guests.id", ondelete="CASCADE"), nullable=False, index=True)
    table_number = Column(Integer, nullable=False, index=True)
    seat_position = Column(Integer, nullable=False)
    person_index = Column(Integer, nullable=False)
    person_name = Column(String(255), nullable=False)
    dietary_restriction = Column(String(255), nullable=True)
    companion_assignment_id = Column(
        Integer, ForeignKey("seat_assignments.id", ondelete="SET NULL"), nullable=True
    )
    couple_color = Column(String(20), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    __table_args__ = (
        UniqueConstraint("table_number", "seat_position", name="uq_assignment_table_seat"),
        UniqueConstraint("guest_id", "person_index", name="uq_assignment_guest_person"),
        CheckConstraint("person_index IN (1, 2)", name="check_assignment_person_index"),
        CheckConstraint("seat_position >= 1", name="check_assignment_seat_positive"),
    )

    @property
    def has_companion(self) -> bool:
        return self.companion_assignment_id is not None

    def to_dict(self):
        return {
            "id": self.id,
            "guest_id": self.guest_id,
            "table_number": self.table_number,
            "seat_position": self.seat_position,
            "person_index": self.person_index,
            "person_name": self.person_name,
            "dietary_restriction": self.dietary_restriction,
            "companion_assignment_id": self.companion_assignment_id,
            "couple_color": self.couple_color,
        }

    def __repr__(self) -> str:
        return (
            f"<SeatAssignment(id={self.id}, table={self.table_number}, seat={self.seat_position}, "
            f"name={self.person_name!r})>"
        )

"""
Guest model
"""

from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime

from app.core.db import Base

ATTENDANCE_CONFIRMED = "confirmed"
ATTENDANCE_PENDING = "pending"
ATTENDANCE_DECLINED = "declined"

ATTENDANCE_VALUES = (ATTENDANCE_CONFIRMED, ATTENDANCE_PENDING, ATTENDANCE_DECLINED)

class Guest(Base):
    """An invitation: one or two named attendees and their RSVP answers"""
    __tablename__ = "guests"

    id = Column(Integer, primary_key=True, index=True)
    person1_name = Column(String(255), nullable=False)
    person2_name = Column(String(255), nullable=True)
    attendance1 = Column(String(20), nullable=False, default=ATTENDANCE_PENDING)
    attendance2 = Column(String(20), nullable=True)
    dietary_restriction1 = Column(String(255), nullable=True)
    dietary_restriction2 = Column(String(255), nullable=True)
    host_tag = Column(String(50), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def person_name(self, person_index: int):
        return self.person1_name if person_index == 1 else self.person2_name

    def attendance(self, person_index: int):
        return self.attendance1 if person_index == 1 else self.attendance2

    def dietary_restriction(self, person_index: int):
        return self.dietary_restriction1 if person_index == 1 else self.dietary_restriction2

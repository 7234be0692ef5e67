"""
Guest roster Pydantic schemas
"""

from typing import Literal, Optional
from pydantic import BaseModel, model_validator

Attendance = Literal["confirmed", "pending", "declined"]

class GuestCreate(BaseModel):
    """Schema for adding an invitation to the roster"""
    person1_name: str
    person2_name: Optional[str] = None
    attendance1: Attendance = "pending"
    attendance2: Optional[Attendance] = None
    dietary_restriction1: Optional[str] = None
    dietary_restriction2: Optional[str] = None
    host_tag: str

    @model_validator(mode="after")
    def default_second_attendance(self):
        """A named second attendee without an answer is pending"""
        if not (self.person2_name or "").strip():
            self.person2_name = None
            self.attendance2 = None
            self.dietary_restriction2 = None
        elif self.attendance2 is None:
            self.attendance2 = "pending"
        return self

class GuestResponse(BaseModel):
    """Guest response schema"""
    id: int
    person1_name: str
    person2_name: Optional[str] = None
    attendance1: str
    attendance2: Optional[str] = None
    dietary_restriction1: Optional[str] = None
    dietary_restriction2: Optional[str] = None
    host_tag: str

    class Config:
        from_attributes = True

"""
Response envelope and report schemas shared by the routers
"""

from typing import Any, List, Optional
from pydantic import BaseModel

class StandardResponse(BaseModel):
    """Envelope for successful calls"""
    success: bool
    message: str
    data: Optional[Any] = None

class ErrorResponse(BaseModel):
    """Envelope for rejected calls; ``error_code`` names the seating rejection"""
    success: bool = False
    message: str
    error_code: Optional[str] = None
    details: Optional[Any] = None

class Violation(BaseModel):
    """One broken seating invariant found by the integrity check"""
    kind: str
    message: str
    table_number: Optional[int] = None
    assignment_ids: List[int] = []

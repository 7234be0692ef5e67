"""
Database models package
"""

from .guest import Guest
from .table_config import TableConfig
from .seat_assignment import SeatAssignment

__all__ = ["Guest", "TableConfig", "SeatAssignment"]

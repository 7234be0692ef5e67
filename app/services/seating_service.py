"""
Seating chart read models
"""

from typing import Dict, List

from sqlalchemy.orm import Session

from app.core.config import settings
from app.schemas.seating import SeatAssignmentResponse, TableOverview
from app.services.repositories import AssignmentRepo, TableConfigRepo

class SeatingService:
    """Service for seating chart views"""

    @staticmethod
    def get_seating_overview(db: Session) -> Dict:
        """Tables in display order with their occupants and summary counts"""
        configs = TableConfigRepo.list_table_configs(db)
        by_table: Dict[int, list] = {}
        for assignment in AssignmentRepo.list_assignments(db):
            by_table.setdefault(assignment.table_number, []).append(assignment)

        tables = []
        for config in configs:
            occupants = by_table.get(config.table_number, [])
            tables.append(TableOverview(
                table_number=config.table_number,
                display_order=config.display_order,
                capacity=config.capacity,
                occupied=len(occupants),
                available=max(config.capacity - len(occupants), 0),
                occupants=[SeatAssignmentResponse.model_validate(a) for a in occupants],
            ))

        by_capacity: Dict[int, int] = {}
        for config in configs:
            by_capacity[config.capacity] = by_capacity.get(config.capacity, 0) + 1

        return {
            "total_tables": len(tables),
            "total_seated": sum(t.occupied for t in tables),
            "total_capacity": sum(t.capacity for t in tables),
            "complete_tables": sum(1 for t in tables if t.occupied >= t.capacity),
            "partial_tables": sum(1 for t in tables if 0 < t.occupied < t.capacity),
            "empty_tables": sum(1 for t in tables if t.occupied == 0),
            "tables_by_capacity": by_capacity,
            "staged_assignments": len(by_table.get(settings.STAGING_TABLE_NUMBER, [])),
            "tables": [t.model_dump() for t in tables],
        }

    @staticmethod
    def get_table_occupants(db: Session, table_number: int) -> List[Dict]:
        """All occupants of one table in seat order"""
        return [a.to_dict() for a in AssignmentRepo.list_assignments(db, table_number=table_number)]

"""
Table configuration: capacity changes, display order and bootstrap
"""

import logging
from typing import List

from sqlalchemy.orm import Session

from app.core.config import settings
from app.models import TableConfig
from app.services.errors import CapacityBelowOccupancy, InvalidCapacity, OperationResult, TableNotFound
from app.services.repositories import AssignmentRepo, TableConfigRepo
from app.services.transactions import run_operation

logger = logging.getLogger(__name__)

class TableConfigService:
    """Service for table capacity and ordering"""

    @staticmethod
    def list_configs(db: Session) -> List[TableConfig]:
        return TableConfigRepo.list_table_configs(db)

    @staticmethod
    def seed_tables(db: Session, count: int = None, capacity: int = None) -> int:
        """Create any missing tables 1..count; existing rows are left alone"""
        count = settings.TABLE_COUNT if count is None else count
        capacity = settings.DEFAULT_TABLE_CAPACITY if capacity is None else capacity

        existing = {config.table_number for config in TableConfigRepo.list_table_configs(db)}
        next_order = max((c.display_order for c in TableConfigRepo.list_table_configs(db)), default=0)
        created = 0
        for table_number in range(1, count + 1):
            if table_number in existing:
                continue
            next_order += 1
            TableConfigRepo.create(db, table_number, capacity, next_order)
            created += 1
        db.commit()
        if created:
            logger.info("Seeded %d tables with capacity %d", created, capacity)
        return created

    @staticmethod
    def update_capacity(db: Session, table_number: int, capacity: int) -> OperationResult:
        """Change a table's seat count without ever unseating anyone"""
        def operation():
            if not settings.MIN_TABLE_CAPACITY <= capacity <= settings.MAX_TABLE_CAPACITY:
                raise InvalidCapacity(
                    f"Capacity must be between {settings.MIN_TABLE_CAPACITY} and {settings.MAX_TABLE_CAPACITY}"
                )
            config = TableConfigRepo.get(db, table_number)
            if config is None:
                raise TableNotFound(f"Table {table_number} not found")

            occupancy = AssignmentRepo.count_at_table(db, table_number)
            if occupancy > capacity:
                raise CapacityBelowOccupancy(
                    f"Cannot reduce table {table_number} to {capacity} seats: {occupancy} people are seated there. "
                    "Remove some people first."
                )

            TableConfigRepo.update_table_config(db, table_number, capacity=capacity)
            return f"Table {table_number} capacity set to {capacity}", config.to_dict()

        return run_operation(db, operation, "update capacity")

    @staticmethod
    def reorder(db: Session, dragged_table: int, target_table: int, insert_before: bool = True) -> OperationResult:
        """Put ``dragged_table`` right before or after ``target_table``.

        Display orders are rewritten as 1..N for every table.
        """
        def operation():
            configs = TableConfigRepo.list_table_configs(db)
            by_number = {config.table_number: config for config in configs}
            for table_number in (dragged_table, target_table):
                if table_number not in by_number:
                    raise TableNotFound(f"Table {table_number} not found")

            if dragged_table != target_table:
                ordered = [c for c in configs if c.table_number != dragged_table]
                target_index = next(i for i, c in enumerate(ordered) if c.table_number == target_table)
                insert_at = target_index if insert_before else target_index + 1
                ordered.insert(insert_at, by_number[dragged_table])
            else:
                ordered = configs

            for position, config in enumerate(ordered, start=1):
                if config.display_order != position:
                    config.display_order = position
            db.flush()
            return "Table order updated", [c.to_dict() for c in ordered]

        return run_operation(db, operation, "reorder tables")

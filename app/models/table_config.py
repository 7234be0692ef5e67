"""
Table configuration model
"""

from sqlalchemy import Column, Integer, CheckConstraint

from app.core.db import Base

class TableConfig(Base):
    """Capacity and display position of one table.

    ``table_number`` is the stable identity referenced by seat assignments;
    ``display_order`` is the admin-controlled presentation sequence.
    """
    __tablename__ = "table_configs"

    table_number = Column(Integer, primary_key=True, autoincrement=False)
    capacity = Column(Integer, nullable=False, default=8)
    display_order = Column(Integer, nullable=False, index=True)

    __table_args__ = (
        CheckConstraint("capacity >= 1", name="check_table_capacity_positive"),
    )

    def __repr__(self) -> str:
        return f"<TableConfig(table={self.table_number}, capacity={self.capacity}, order={self.display_order})>"

    def to_dict(self):
        return {
            "table_number": self.table_number,
            "capacity": self.capacity,
            "display_order": self.display_order,
        }

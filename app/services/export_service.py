"""
Excel exports of the seating chart
"""

import io
from typing import Dict
import pandas as pd
from sqlalchemy.orm import Session

from app.core.config import settings
from app.services.repositories import AssignmentRepo, TableConfigRepo

class ExportService:
    """Service for flattening the seating chart into spreadsheets"""

    ALPHABETICAL_COLUMNS = ['Full Name', 'Table']
    BY_TABLE_COLUMNS = ['Table', 'Seat', 'Full Name', 'Dietary Restriction']

    @staticmethod
    def _display_numbers(db: Session) -> Dict[int, int]:
        """Map table number -> number shown to people (its display order)"""
        return {c.table_number: c.display_order for c in TableConfigRepo.list_table_configs(db)}

    @staticmethod
    def _seated(db: Session):
        return [
            a for a in AssignmentRepo.list_assignments(db)
            if a.table_number != settings.STAGING_TABLE_NUMBER
        ]

    @staticmethod
    def alphabetical_frame(db: Session) -> pd.DataFrame:
        """Everyone seated, sorted by name"""
        display = ExportService._display_numbers(db)
        data = [
            {
                'Full Name': a.person_name,
                'Table': display.get(a.table_number) or a.table_number,
            }
            for a in ExportService._seated(db)
        ]
        df = pd.DataFrame(data, columns=ExportService.ALPHABETICAL_COLUMNS)
        if not df.empty:
            df = df.sort_values('Full Name', key=lambda names: names.str.lower(), kind='stable')
        return df.reset_index(drop=True)

    @staticmethod
    def by_table_frame(db: Session) -> pd.DataFrame:
        """Everyone seated, grouped by table then seat"""
        display = ExportService._display_numbers(db)
        data = [
            {
                'Table': display.get(a.table_number) or a.table_number,
                'Seat': a.seat_position,
                'Full Name': a.person_name,
                'Dietary Restriction': a.dietary_restriction or 'None',
            }
            for a in ExportService._seated(db)
        ]
        df = pd.DataFrame(data, columns=ExportService.BY_TABLE_COLUMNS)
        if not df.empty:
            df = df.sort_values(['Table', 'Seat'], kind='stable')
        return df.reset_index(drop=True)

    @staticmethod
    def to_excel_bytes(df: pd.DataFrame, sheet_name: str) -> bytes:
        """Render a frame as a single-sheet workbook"""
        buffer = io.BytesIO()
        with pd.ExcelWriter(buffer, engine='openpyxl') as writer:
            df.to_excel(writer, index=False, sheet_name=sheet_name)
            worksheet = writer.sheets[sheet_name]
            for index, column in enumerate(df.columns, start=1):
                longest = max([len(str(column))] + [len(str(v)) for v in df[column]])
                worksheet.column_dimensions[worksheet.cell(row=1, column=index).column_letter].width = longest + 2

        return buffer.getvalue()

    @staticmethod
    def export_alphabetical(db: Session) -> bytes:
        return ExportService.to_excel_bytes(ExportService.alphabetical_frame(db), 'Alphabetical')

    @staticmethod
    def export_by_table(db: Session) -> bytes:
        return ExportService.to_excel_bytes(ExportService.by_table_frame(db), 'By Table')

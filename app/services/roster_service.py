"""
Excel processing service for guest roster import
"""

import io
import logging
from typing import Dict, List, Optional, Tuple
import pandas as pd
from sqlalchemy.orm import Session

from app.core.config import settings
from app.models.guest import ATTENDANCE_CONFIRMED, ATTENDANCE_DECLINED, ATTENDANCE_PENDING
from app.services.repositories import GuestRepo

logger = logging.getLogger(__name__)

class RosterService:
    """Service for loading the guest roster from Excel"""

    REQUIRED_COLUMNS = ['name 1', 'attendance 1']
    OPTIONAL_COLUMNS = ['name 2', 'attendance 2', 'dietary 1', 'dietary 2', 'host']

    ATTENDANCE_ALIASES = {
        'confirmed': ATTENDANCE_CONFIRMED,
        'yes': ATTENDANCE_CONFIRMED,
        'si': ATTENDANCE_CONFIRMED,
        'pending': ATTENDANCE_PENDING,
        '': ATTENDANCE_PENDING,
        'declined': ATTENDANCE_DECLINED,
        'no': ATTENDANCE_DECLINED,
    }

    @staticmethod
    def create_template() -> bytes:
        """Create Excel template with the roster columns"""
        df = pd.DataFrame(columns=[
            'Name 1', 'Name 2', 'Attendance 1', 'Attendance 2', 'Dietary 1', 'Dietary 2', 'Host'
        ])

        # Add sample data for guidance
        sample_data = [
            ['Ana Perez', 'Luis Gomez', 'confirmed', 'pending', 'vegetarian', '', settings.HOST_TAGS[0]],
            ['Maria Lopez', '', 'pending', '', '', '', settings.HOST_TAGS[-1]],
        ]

        for row in sample_data:
            df.loc[len(df)] = row

        buffer = io.BytesIO()
        with pd.ExcelWriter(buffer, engine='openpyxl') as writer:
            df.to_excel(writer, index=False, sheet_name='Guest List')

        return buffer.getvalue()

    @staticmethod
    def _column_mapping(df: pd.DataFrame) -> Dict[str, str]:
        """Map normalised column name -> actual column"""
        return {str(col).lower().strip(): col for col in df.columns}

    @staticmethod
    def _text(value) -> Optional[str]:
        if value is None or pd.isna(value):
            return None
        text = str(value).strip()
        return text or None

    @staticmethod
    def normalize_attendance(value) -> Optional[str]:
        text = (RosterService._text(value) or '').lower()
        return RosterService.ATTENDANCE_ALIASES.get(text)

    @staticmethod
    def validate_roster_structure(df: pd.DataFrame) -> Tuple[bool, List[str]]:
        """Validate roster file structure"""
        errors = []

        mapping = RosterService._column_mapping(df)
        missing_columns = [col for col in RosterService.REQUIRED_COLUMNS if col not in mapping]
        if missing_columns:
            errors.append(f"Missing required columns: {', '.join(missing_columns)}")

        return len(errors) == 0, errors

    @staticmethod
    def validate_roster_rows(df: pd.DataFrame) -> Tuple[bool, List[str]]:
        """Validate attendance and host values row by row"""
        errors = []
        mapping = RosterService._column_mapping(df)
        hosts = [h.lower() for h in settings.HOST_TAGS]

        for position, (_, row) in enumerate(df.iterrows(), start=2):
            name1 = RosterService._text(row[mapping['name 1']])
            if not name1:
                continue

            if RosterService.normalize_attendance(row[mapping['attendance 1']]) is None:
                errors.append(f"Row {position}: unknown attendance '{row[mapping['attendance 1']]}'")

            if 'name 2' in mapping and RosterService._text(row[mapping['name 2']]):
                raw = row[mapping['attendance 2']] if 'attendance 2' in mapping else None
                if RosterService.normalize_attendance(raw) is None:
                    errors.append(f"Row {position}: unknown attendance '{raw}' for second attendee")

            if 'host' in mapping:
                host = (RosterService._text(row[mapping['host']]) or '').lower()
                if host and host not in hosts:
                    errors.append(f"Row {position}: host must be one of {', '.join(settings.HOST_TAGS)}")

        return len(errors) == 0, errors

    @staticmethod
    def process_roster_upload(file_content: bytes, db: Session) -> Tuple[bool, List[str], int]:
        """Validate an uploaded roster and append its guests"""
        try:
            df = pd.read_excel(io.BytesIO(file_content))

            valid_structure, structure_errors = RosterService.validate_roster_structure(df)
            if not valid_structure:
                return False, structure_errors, 0

            valid_rows, row_errors = RosterService.validate_roster_rows(df)
            if not valid_rows:
                return False, row_errors, 0

            mapping = RosterService._column_mapping(df)

            def cell(row, column):
                return RosterService._text(row[mapping[column]]) if column in mapping else None

            processed_count = 0
            for _, row in df.iterrows():
                name1 = cell(row, 'name 1')
                # Skip empty rows
                if not name1:
                    continue

                name2 = cell(row, 'name 2')
                GuestRepo.create(
                    db,
                    person1_name=name1,
                    person2_name=name2,
                    attendance1=RosterService.normalize_attendance(row[mapping['attendance 1']]),
                    attendance2=RosterService.normalize_attendance(
                        row[mapping['attendance 2']] if 'attendance 2' in mapping else None
                    ) if name2 else None,
                    dietary_restriction1=cell(row, 'dietary 1'),
                    dietary_restriction2=cell(row, 'dietary 2') if name2 else None,
                    host_tag=(cell(row, 'host') or settings.HOST_TAGS[0]).lower(),
                )
                processed_count += 1

            db.commit()
            logger.info("Imported %d guests from roster upload", processed_count)
            return True, [], processed_count

        except Exception as e:
            db.rollback()
            logger.exception("Roster upload failed")
            return False, [f"Error processing Excel file: {str(e)}"], 0

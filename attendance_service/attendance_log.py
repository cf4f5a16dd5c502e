"""
Attendance log module.

Appends one CSV line per first sighting: name,DD-MM-YYYY,HH:MM:SS.
The file is only ever appended to.
"""

import csv
import os
from dataclasses import dataclass, asdict
from datetime import datetime
from typing import Dict, List, Optional
from .logging_config import get_logger
from .utils.timing import format_timestamp

logger = get_logger(__name__)


@dataclass(frozen=True)
class AttendanceRecord:
    """One persisted attendance line."""

    name: str
    date: str
    time: str

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)


class AttendanceLog:
    """
    Append-only attendance CSV.

    Single writer; no locking is performed.
    """

    def __init__(self, path: str):
        self.path = path

    def append(self, name: str, timestamp: datetime) -> Optional[AttendanceRecord]:
        """
        Append one attendance record.

        A file that cannot be opened is reported and the event dropped.

        Args:
            name: Identity name
            timestamp: Local time of the sighting

        Returns:
            The written record, or None if the write failed
        """
        date_str, time_str = format_timestamp(timestamp)
        record = AttendanceRecord(name=name, date=date_str, time=time_str)

        try:
            with open(self.path, 'a', newline='', encoding='utf-8') as f:
                writer = csv.writer(f, lineterminator='\n')
                writer.writerow([record.name, record.date, record.time])
        except OSError as e:
            logger.error(f'❌ Error opening attendance file {self.path}: {e}')
            return None

        logger.info(f'✅ Attendance marked for {name}')
        return record

    def read_records(self, on_date: Optional[str] = None) -> List[AttendanceRecord]:
        """
        Read records back from the log.

        Args:
            on_date: Only return records of this 'DD-MM-YYYY' date

        Returns:
            Records in file order; malformed lines are skipped
        """
        if not os.path.exists(self.path):
            return []

        records: List[AttendanceRecord] = []
        with open(self.path, newline='', encoding='utf-8') as f:
            for row in csv.reader(f):
                if len(row) != 3:
                    logger.debug(f'Skipping malformed attendance line: {row}')
                    continue
                record = AttendanceRecord(*row)
                if on_date is None or record.date == on_date:
                    records.append(record)

        return records

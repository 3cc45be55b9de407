"""
Attendance report generator for the admin panel.

Filters, summarises and exports attendance records.
"""
import csv
import datetime
import io
import logging
import os
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from ..data.models import AttendanceRecord, Employee, PunchType
from ..data.record_store import RecordStore
from ..utils.export_utils import get_export_directory, write_file

logger = logging.getLogger(__name__)

ALL_EMPLOYEES = 'all'
EXPORT_HEADER = ['Employee', 'Punch Type', 'Timestamp', 'Location', 'Synced']
UNKNOWN_EMPLOYEE = 'Unknown Employee'


@dataclass
class ReportSummary:
    total_employees: int
    total_records: int
    punch_in_count: int
    unsynced_count: int


def filter_records(records: Iterable[AttendanceRecord], employee_id: Optional[str] = ALL_EMPLOYEES,
                   date: Optional[datetime.date] = None) -> List[AttendanceRecord]:
    """
    Filter records by employee and local calendar date, newest first.

    Args:
        records: Records to filter
        employee_id: Exact employee id, or 'all' / None for everyone
        date: Only records on this local date (time of day ignored)
    """
    filtered = list(records)
    if employee_id and employee_id != ALL_EMPLOYEES:
        filtered = [r for r in filtered if r.employee_id == employee_id]
    if date is not None:
        filtered = [r for r in filtered if r.local_date == date]
    return sorted(filtered, key=lambda r: r.timestamp, reverse=True)


def summarize(records: List[AttendanceRecord], employees: List[Employee]) -> ReportSummary:
    return ReportSummary(
        total_employees=len(employees),
        total_records=len(records),
        punch_in_count=sum(1 for r in records if r.punch_type is PunchType.IN),
        unsynced_count=sum(1 for r in records if not r.is_synced),
    )


def format_export_timestamp(dt: datetime.datetime) -> str:
    """Local time as e.g. 'May 01, 2024, 09:30 AM'"""
    return dt.astimezone().strftime('%b %d, %Y, %I:%M %p')


def format_location(record: AttendanceRecord) -> str:
    location = record.location
    if location.address:
        return location.address
    return f"{location.latitude}, {location.longitude}"


def _employee_name(record: AttendanceRecord, names: Dict[str, str]) -> str:
    return names.get(record.employee_id) or record.employee_name or UNKNOWN_EMPLOYEE


def export_rows(records: List[AttendanceRecord],
                employees: Optional[List[Employee]] = None) -> List[List[str]]:
    """Header row followed by one row per record"""
    names = {e.id: e.name for e in employees or []}
    rows = [list(EXPORT_HEADER)]
    for record in records:
        rows.append([
            _employee_name(record, names),
            record.punch_type.value,
            format_export_timestamp(record.timestamp),
            format_location(record),
            'Yes' if record.is_synced else 'No',
        ])
    return rows


def export_csv(records: List[AttendanceRecord], employees: Optional[List[Employee]] = None,
               quote_fields: bool = False) -> str:
    """
    Render records as comma separated text, one line per row.

    Fields are joined as-is: a comma inside a field (the "lat, lon" location
    or a geocoded address) is not escaped, which keeps the layout existing
    consumers read. Pass quote_fields=True for RFC 4180 quoting instead.
    """
    rows = export_rows(records, employees)
    if not quote_fields:
        return '\n'.join(','.join(row) for row in rows)

    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator='\n')
    writer.writerows(rows)
    return buffer.getvalue().rstrip('\n')


def export_filename(date: Optional[datetime.date] = None) -> str:
    return f"attendance_{date.isoformat() if date else ALL_EMPLOYEES}.csv"


class AttendanceReport:
    """Filtered view of the attendance records for the admin panel"""

    def __init__(self, store: RecordStore, employee_id: Optional[str] = ALL_EMPLOYEES,
                 date: Optional[datetime.date] = None):
        """
        Initialize an attendance report.

        Args:
            store: Record store to read from
            employee_id: Employee to report on, or 'all'
            date: Local calendar date to report on, or None for every day
        """
        self.store = store
        self.employee_id = employee_id or ALL_EMPLOYEES
        self.date = date
        self.employees: List[Employee] = []
        self.records: List[AttendanceRecord] = []

    async def load(self) -> 'AttendanceReport':
        """Read employees and records from the store and apply the filter"""
        self.employees = await self.store.list_employees()
        all_records = await self.store.list_attendance_records()
        self.records = filter_records(all_records, self.employee_id, self.date)
        logger.info(
            f"Report loaded: {len(self.records)} of {len(all_records)} records "
            f"(employee={self.employee_id}, date={self.date or 'all'})"
        )
        return self

    @property
    def summary(self) -> ReportSummary:
        return summarize(self.records, self.employees)

    @property
    def filename(self) -> str:
        return export_filename(self.date)

    def employee_name(self, record: AttendanceRecord) -> str:
        return _employee_name(record, {e.id: e.name for e in self.employees})

    def to_csv(self, quote_fields: bool = False) -> str:
        return export_csv(self.records, self.employees, quote_fields=quote_fields)

    def save(self, export_dir: Optional[str] = None, quote_fields: bool = False) -> str:
        """
        Write the CSV export.

        Returns:
            Path of the written file

        Raises:
            ExportError: The file could not be written
        """
        target_dir = get_export_directory(export_dir)
        path = write_file(self.to_csv(quote_fields).encode('utf-8'), os.path.join(target_dir, self.filename))
        logger.info(f"Exported {len(self.records)} records to {path}")
        return path

"""
Record store for employees, attendance records and the login session.

Each logical collection lives under its own key in the mapping store as a
JSON string. Writes are read-modify-write of the whole collection; there
are no transactions across keys.
"""
import datetime
import json
import logging
import secrets
import string
import time
from typing import List, Optional

from .database import MappingStore
from .models import AttendanceRecord, Employee, Session
from ..utils.errors import StorageError, ValidationError

logger = logging.getLogger(__name__)

EMPLOYEES_KEY = 'employees'
RECORDS_KEY = 'attendance_records'
AUTH_TOKEN_KEY = 'authToken'
CURRENT_EMPLOYEE_KEY = 'currentEmployeeId'

_ID_ALPHABET = string.ascii_lowercase + string.digits


class RecordStore:
    """Employees, attendance records and session over a MappingStore"""

    def __init__(self, mapping: MappingStore):
        self.mapping = mapping

    async def _load_list(self, key: str) -> list:
        raw = await self.mapping.get(key)
        if not raw:
            return []
        try:
            data = json.loads(raw)
        except ValueError as e:
            raise StorageError(f"Corrupt data under {key!r}: {e}") from e
        if not isinstance(data, list):
            raise StorageError(f"Expected a list under {key!r}, got {type(data).__name__}")
        return data

    async def _save_list(self, key: str, items: list) -> None:
        await self.mapping.set(key, json.dumps(items))

    # --- Employees ---

    async def list_employees(self) -> List[Employee]:
        return [Employee.from_dict(item) for item in await self._load_list(EMPLOYEES_KEY)]

    async def upsert_employee(self, employee: Employee) -> None:
        """
        Replace the employee with the same id, or append a new one.

        Raises:
            ValidationError: Another employee already has this phone number
        """
        employees = await self.list_employees()
        for existing in employees:
            if existing.phone_number == employee.phone_number and existing.id != employee.id:
                raise ValidationError(f"Phone number {employee.phone_number} is already assigned to {existing.name}")
        for index, existing in enumerate(employees):
            if existing.id == employee.id:
                employees[index] = employee
                logger.info(f"Employee updated: {employee}")
                break
        else:
            employees.append(employee)
            logger.info(f"Employee created: {employee}")
        await self._save_list(EMPLOYEES_KEY, [e.to_dict() for e in employees])

    async def get_employee(self, employee_id: str) -> Optional[Employee]:
        for employee in await self.list_employees():
            if employee.id == employee_id:
                return employee
        return None

    async def find_employee_by_phone(self, phone_number: str) -> Optional[Employee]:
        for employee in await self.list_employees():
            if employee.phone_number == phone_number:
                return employee
        return None

    # --- Attendance records ---

    async def list_attendance_records(self, employee_id: Optional[str] = None,
                                      date: Optional[datetime.date] = None) -> List[AttendanceRecord]:
        """
        Get attendance records in the order they were appended.

        Args:
            employee_id: Only records of this employee
            date: Only records whose local calendar date equals this date
        """
        records = [AttendanceRecord.from_dict(item) for item in await self._load_list(RECORDS_KEY)]
        if employee_id is not None:
            records = [r for r in records if r.employee_id == employee_id]
        if date is not None:
            records = [r for r in records if r.local_date == date]
        return records

    async def append_attendance_record(self, record: AttendanceRecord) -> None:
        items = await self._load_list(RECORDS_KEY)
        items.append(record.to_dict())
        await self._save_list(RECORDS_KEY, items)
        logger.info(f"Attendance record saved: {record}")

    async def list_today_records(self, employee_id: str,
                                 today: Optional[datetime.date] = None) -> List[AttendanceRecord]:
        """Records of an employee for the local calendar day, oldest first"""
        today = today or datetime.date.today()
        records = await self.list_attendance_records(employee_id=employee_id, date=today)
        return sorted(records, key=lambda r: r.timestamp)

    async def list_unsynced_records(self) -> List[AttendanceRecord]:
        return [r for r in await self.list_attendance_records() if not r.is_synced]

    async def mark_synced(self, record_id: str) -> bool:
        """Set isSynced on a record. Returns False when the id is unknown."""
        items = await self._load_list(RECORDS_KEY)
        for item in items:
            if str(item.get('id')) == record_id:
                item['isSynced'] = True
                await self._save_list(RECORDS_KEY, items)
                logger.info(f"Record {record_id} marked as synced")
                return True
        logger.warning(f"Cannot mark unknown record {record_id} as synced")
        return False

    # --- Session ---

    async def save_session(self, token: str, employee_id: str) -> None:
        await self.mapping.set(AUTH_TOKEN_KEY, token)
        await self.mapping.set(CURRENT_EMPLOYEE_KEY, employee_id)

    async def read_session(self) -> Optional[Session]:
        token = await self.mapping.get(AUTH_TOKEN_KEY)
        employee_id = await self.mapping.get(CURRENT_EMPLOYEE_KEY)
        if token and employee_id:
            return Session(token=token, employee_id=employee_id)
        return None

    async def clear_session(self) -> None:
        await self.mapping.remove(AUTH_TOKEN_KEY)
        await self.mapping.remove(CURRENT_EMPLOYEE_KEY)

    # --- Utility ---

    async def clear_all_data(self) -> None:
        await self.mapping.clear()
        logger.info("All data cleared")

    @staticmethod
    def generate_id() -> str:
        """Epoch milliseconds followed by 9 random base-36 characters"""
        suffix = ''.join(secrets.choice(_ID_ALPHABET) for _ in range(9))
        return f"{int(time.time() * 1000)}{suffix}"

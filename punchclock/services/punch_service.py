"""
Punch service for handling punch in/out business logic.
"""
import datetime
import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from ..data.models import AttendanceRecord, Employee, Location, PunchState, PunchType
from ..data.record_store import RecordStore
from ..hardware.camera import PhotoData
from ..hardware.location import LocationData
from .camera_service import validate_photo_quality
from .location_service import LocationService
from ..utils.errors import CaptureFailureError, LocationTimeoutError, PunchClockError

logger = logging.getLogger(__name__)


def _utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


@dataclass
class PunchStatus:
    """What the punch screen shows for an employee today"""
    is_punched_in: bool
    last_punch_type: Optional[PunchType] = None
    last_punch_time: Optional[datetime.datetime] = None
    today_records: List[AttendanceRecord] = field(default_factory=list)

    @property
    def state(self) -> PunchState:
        return PunchState.PUNCHED_IN if self.is_punched_in else PunchState.PUNCHED_OUT


@dataclass
class PunchResult:
    """Result of a punch action"""
    success: bool
    punch_type: Optional[PunchType]
    employee: Employee
    record: Optional[AttendanceRecord] = None
    error: Optional[str] = None


class PunchService:
    """Handles punch in/out business logic"""

    def __init__(self, store: RecordStore, location_service: LocationService,
                 clock: Callable[[], datetime.datetime] = _utcnow):
        """
        Initialize punch service.

        Args:
            store: Record store holding attendance records
            location_service: Used when the caller supplies no location
            clock: Returns the current aware datetime
        """
        self.store = store
        self.location_service = location_service
        self.clock = clock

    def _today(self) -> datetime.date:
        return self.clock().astimezone().date()

    async def status(self, employee_id: str) -> PunchStatus:
        records = await self.store.list_today_records(employee_id, today=self._today())
        if not records:
            return PunchStatus(is_punched_in=False)
        last = records[-1]
        return PunchStatus(
            is_punched_in=last.punch_type is PunchType.IN,
            last_punch_type=last.punch_type,
            last_punch_time=last.timestamp,
            today_records=records,
        )

    async def current_state(self, employee_id: str) -> PunchState:
        return (await self.status(employee_id)).state

    async def next_punch_type(self, employee_id: str) -> PunchType:
        """The only punch an employee may be offered: the opposite of the current state"""
        return self._determine_punch_type(await self.current_state(employee_id))

    def _determine_punch_type(self, state: PunchState) -> PunchType:
        if state is PunchState.PUNCHED_IN:
            return PunchType.OUT
        return PunchType.IN

    async def record_punch(self, employee: Employee, photo: Optional[PhotoData],
                           location: Optional[LocationData] = None) -> AttendanceRecord:
        """
        Append the next punch for an employee.

        Args:
            employee: Employee punching
            photo: Verification photo from the camera
            location: Position, fetched with the configured timeout when omitted

        Raises:
            CaptureFailureError: Missing photo or photo failed validation
            LocationTimeoutError: No location within the configured wait
            StorageError: The record could not be written
        """
        if photo is None:
            raise CaptureFailureError("No photo captured")
        validation = validate_photo_quality(photo)
        if not validation.is_valid:
            raise CaptureFailureError(", ".join(validation.issues))

        if location is None:
            location = await self.location_service.get_location_with_timeout()
        if location is None:
            raise LocationTimeoutError("Could not get location. Please try again.")

        punch_type = await self.next_punch_type(employee.id)
        record = AttendanceRecord(
            id=self.store.generate_id(),
            employee_id=employee.id,
            employee_name=employee.name,
            punch_type=punch_type,
            timestamp=self.clock(),
            location=Location(
                latitude=location.latitude,
                longitude=location.longitude,
                address=location.address,
            ),
            photo_uri=photo.uri,
            is_synced=False,
        )
        await self.store.append_attendance_record(record)
        return record

    async def punch(self, employee: Employee, photo: Optional[PhotoData],
                    location: Optional[LocationData] = None) -> PunchResult:
        """
        Perform punch action for employee.

        Returns:
            PunchResult; failures carry a user-facing message and write nothing
        """
        try:
            record = await self.record_punch(employee, photo, location)
        except PunchClockError as e:
            logger.error(f"Error performing punch for {employee.name}: {e}")
            return PunchResult(success=False, punch_type=None, employee=employee, error=str(e))

        logger.info(f"Punched {record.punch_type.value} - {employee.name}")
        return PunchResult(
            success=True,
            punch_type=record.punch_type,
            employee=employee,
            record=record,
        )

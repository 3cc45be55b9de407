"""
Record types persisted by the punch clock.

Each type converts to and from the JSON layout kept in the mapping store,
which uses camelCase keys.
"""
import datetime
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from ..utils.errors import ValidationError


class PunchType(str, Enum):
    IN = 'IN'
    OUT = 'OUT'

    @property
    def opposite(self) -> 'PunchType':
        return PunchType.OUT if self is PunchType.IN else PunchType.IN


class PunchState(str, Enum):
    PUNCHED_IN = 'PUNCHED_IN'
    PUNCHED_OUT = 'PUNCHED_OUT'


def format_timestamp(dt: datetime.datetime) -> str:
    """Serialize an instant as UTC ISO-8601 with millisecond precision"""
    if dt.tzinfo is None:
        dt = dt.astimezone()
    utc = dt.astimezone(datetime.timezone.utc)
    return utc.isoformat(timespec='milliseconds').replace('+00:00', 'Z')


def parse_timestamp(value: str) -> datetime.datetime:
    """
    Parse an ISO-8601 timestamp into an aware datetime.

    Accepts a trailing 'Z', explicit offsets, and naive values (read as
    local time).
    """
    text = value.strip()
    if text.endswith('Z'):
        text = text[:-1] + '+00:00'
    dt = datetime.datetime.fromisoformat(text)
    if dt.tzinfo is None:
        dt = dt.astimezone()
    return dt


def local_date(dt: datetime.datetime) -> datetime.date:
    """Calendar date of an instant in the device's local timezone"""
    return dt.astimezone().date()


@dataclass
class Employee:
    id: str
    phone_number: str
    name: str
    pin: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'phoneNumber': self.phone_number,
            'name': self.name,
            'pin': self.pin,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Employee':
        return cls(
            id=str(data['id']),
            phone_number=str(data['phoneNumber']),
            name=data.get('name', ''),
            pin=str(data.get('pin', '')),
        )

    def __str__(self):
        return f"{self.name} ({self.phone_number})"


PIN_LENGTH = 4


def validate_pin(pin: str) -> str:
    if not pin or len(pin) != PIN_LENGTH or not pin.isdigit():
        raise ValidationError(f"PIN must be exactly {PIN_LENGTH} digits")
    return pin


def validate_phone(phone: str) -> str:
    if not phone or not phone.isdigit():
        raise ValidationError("Phone number must contain digits only")
    return phone


def validate_name(name: Optional[str]) -> str:
    name = (name or '').strip()
    if not name:
        raise ValidationError("Employee name cannot be empty")
    return name


@dataclass
class Location:
    latitude: float
    longitude: float
    address: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {'latitude': self.latitude, 'longitude': self.longitude}
        if self.address:
            data['address'] = self.address
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Location':
        return cls(
            latitude=float(data['latitude']),
            longitude=float(data['longitude']),
            address=data.get('address') or None,
        )


@dataclass
class AttendanceRecord:
    id: str
    employee_id: str
    employee_name: str
    punch_type: PunchType
    timestamp: datetime.datetime
    location: Location
    photo_uri: Optional[str] = None
    is_synced: bool = False

    @property
    def local_date(self) -> datetime.date:
        return local_date(self.timestamp)

    def to_dict(self) -> Dict[str, Any]:
        data = {
            'id': self.id,
            'employeeId': self.employee_id,
            'employeeName': self.employee_name,
            'punchType': self.punch_type.value,
            'timestamp': format_timestamp(self.timestamp),
            'location': self.location.to_dict(),
            'isSynced': self.is_synced,
        }
        if self.photo_uri:
            data['photoUri'] = self.photo_uri
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'AttendanceRecord':
        return cls(
            id=str(data['id']),
            employee_id=str(data['employeeId']),
            employee_name=data.get('employeeName', ''),
            punch_type=PunchType(data['punchType']),
            timestamp=parse_timestamp(data['timestamp']),
            location=Location.from_dict(data['location']),
            photo_uri=data.get('photoUri') or None,
            is_synced=bool(data.get('isSynced', False)),
        )

    def __str__(self):
        return f"{self.employee_name} - {self.punch_type.value} @ {format_timestamp(self.timestamp)}"


@dataclass
class Session:
    token: str
    employee_id: str

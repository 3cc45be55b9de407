import asyncio
import datetime

import pytest
from peewee import SqliteDatabase

from punchclock.data.database import KeyValueMappingStore, MappingStore
from punchclock.data.models import AttendanceRecord, Employee, Location, PunchType
from punchclock.data.record_store import RecordStore
from punchclock.utils.errors import StorageError


class FakeClock:
    """Callable clock that only moves when told to"""

    def __init__(self, start):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now += datetime.timedelta(**kwargs)


class BrokenMapping(MappingStore):
    """Mapping whose reads succeed (empty) and writes fail"""

    async def get(self, key):
        return None

    async def set(self, key, value):
        raise StorageError("disk full")

    async def remove(self, key):
        raise StorageError("disk full")

    async def clear(self):
        raise StorageError("disk full")


def local_dt(year, month, day, hour=9, minute=0):
    return datetime.datetime(year, month, day, hour, minute).astimezone()


def make_record(record_id, employee_id='emp-1', punch_type=PunchType.IN, timestamp=None,
                name='Ramesh', address=None, is_synced=False):
    return AttendanceRecord(
        id=record_id,
        employee_id=employee_id,
        employee_name=name,
        punch_type=punch_type,
        timestamp=timestamp or local_dt(2024, 5, 1),
        location=Location(latitude=12.5, longitude=77.25, address=address),
        photo_uri=f"mock://photo/{record_id}.jpg",
        is_synced=is_synced,
    )


@pytest.fixture
def mapping():
    store = KeyValueMappingStore(SqliteDatabase(':memory:'))
    yield store
    store.close()


@pytest.fixture
def store(mapping):
    return RecordStore(mapping)


@pytest.fixture
def employee(store):
    ramesh = Employee(id='emp-1', phone_number='9876543210', name='Ramesh', pin='1234')
    asyncio.run(store.upsert_employee(ramesh))
    return ramesh


@pytest.fixture
def clock():
    return FakeClock(local_dt(2024, 5, 1, 9, 0))

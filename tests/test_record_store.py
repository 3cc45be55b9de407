import asyncio
import datetime
import json

import pytest

from punchclock.data.models import Employee, PunchType
from punchclock.data.record_store import RecordStore
from punchclock.utils.errors import StorageError, ValidationError

from .conftest import BrokenMapping, local_dt, make_record


def test_upsert_replaces_by_id(store, employee):
    async def scenario():
        await store.upsert_employee(Employee(id='emp-1', phone_number='9876543210', name='Ramesh K.', pin='4321'))
        await store.upsert_employee(Employee(id='emp-2', phone_number='9123456780', name='Sita', pin='1111'))
        return await store.list_employees()

    employees = asyncio.run(scenario())
    assert [e.id for e in employees] == ['emp-1', 'emp-2']
    assert employees[0].name == 'Ramesh K.'
    assert employees[0].pin == '4321'


def test_upsert_rejects_phone_held_by_another_employee(store, employee):
    duplicate = Employee(id='emp-2', phone_number='9876543210', name='Sita', pin='1111')
    with pytest.raises(ValidationError):
        asyncio.run(store.upsert_employee(duplicate))

    employees = asyncio.run(store.list_employees())
    assert [e.id for e in employees] == ['emp-1']
    assert asyncio.run(store.find_employee_by_phone('9876543210')).name == 'Ramesh'


def test_find_employee_by_phone(store, employee):
    assert asyncio.run(store.find_employee_by_phone('9876543210')) == employee
    assert asyncio.run(store.find_employee_by_phone('0000000000')) is None
    assert asyncio.run(store.get_employee('emp-1')) == employee
    assert asyncio.run(store.get_employee('missing')) is None


def test_list_records_filters_by_employee_and_local_date(store):
    async def scenario():
        await store.append_attendance_record(make_record('r1', 'emp-1', timestamp=local_dt(2024, 5, 1, 9)))
        await store.append_attendance_record(make_record('r2', 'emp-2', timestamp=local_dt(2024, 5, 1, 10)))
        await store.append_attendance_record(make_record('r3', 'emp-1', PunchType.OUT, local_dt(2024, 5, 2, 23, 30)))
        return (
            await store.list_attendance_records(),
            await store.list_attendance_records(employee_id='emp-1'),
            await store.list_attendance_records(date=datetime.date(2024, 5, 1)),
            await store.list_attendance_records(employee_id='emp-1', date=datetime.date(2024, 5, 2)),
        )

    everything, emp1, may_first, emp1_may_second = asyncio.run(scenario())
    assert [r.id for r in everything] == ['r1', 'r2', 'r3']
    assert [r.id for r in emp1] == ['r1', 'r3']
    assert [r.id for r in may_first] == ['r1', 'r2']
    assert [r.id for r in emp1_may_second] == ['r3']


def test_today_records_sorted_oldest_first(store):
    async def scenario():
        await store.append_attendance_record(make_record('late', timestamp=local_dt(2024, 5, 1, 17)))
        await store.append_attendance_record(make_record('early', timestamp=local_dt(2024, 5, 1, 8)))
        await store.append_attendance_record(make_record('yesterday', timestamp=local_dt(2024, 4, 30, 12)))
        return await store.list_today_records('emp-1', today=datetime.date(2024, 5, 1))

    assert [r.id for r in asyncio.run(scenario())] == ['early', 'late']


def test_records_round_trip_through_storage(store):
    record = make_record('r1', address='MG Road, Bengaluru')
    asyncio.run(store.append_attendance_record(record))

    loaded = asyncio.run(store.list_attendance_records())[0]
    assert loaded == record
    assert loaded.timestamp == record.timestamp


def test_stored_layout_uses_camel_case_and_utc(store, mapping):
    record = make_record('r1', timestamp=datetime.datetime(2024, 5, 1, 9, 30, tzinfo=datetime.timezone.utc))
    asyncio.run(store.append_attendance_record(record))

    raw = json.loads(asyncio.run(mapping.get('attendance_records')))
    assert raw[0]['employeeId'] == 'emp-1'
    assert raw[0]['employeeName'] == 'Ramesh'
    assert raw[0]['punchType'] == 'IN'
    assert raw[0]['timestamp'] == '2024-05-01T09:30:00.000Z'
    assert raw[0]['isSynced'] is False
    assert raw[0]['location'] == {'latitude': 12.5, 'longitude': 77.25}


def test_mark_synced(store):
    async def scenario():
        await store.append_attendance_record(make_record('r1'))
        await store.append_attendance_record(make_record('r2'))
        marked = await store.mark_synced('r1')
        unknown = await store.mark_synced('nope')
        return marked, unknown, await store.list_unsynced_records()

    marked, unknown, unsynced = asyncio.run(scenario())
    assert marked is True
    assert unknown is False
    assert [r.id for r in unsynced] == ['r2']


def test_session_save_read_clear(store):
    async def scenario():
        before = await store.read_session()
        await store.save_session('tok', 'emp-1')
        during = await store.read_session()
        await store.clear_session()
        return before, during, await store.read_session()

    before, during, after = asyncio.run(scenario())
    assert before is None
    assert during.token == 'tok'
    assert during.employee_id == 'emp-1'
    assert after is None


def test_clear_all_data(store, employee):
    async def scenario():
        await store.append_attendance_record(make_record('r1'))
        await store.save_session('tok', 'emp-1')
        await store.clear_all_data()
        return (await store.list_employees(), await store.list_attendance_records(),
                await store.read_session())

    assert asyncio.run(scenario()) == ([], [], None)


def test_corrupt_collection_raises_storage_error(store, mapping):
    asyncio.run(mapping.set('employees', 'not json'))
    with pytest.raises(StorageError):
        asyncio.run(store.list_employees())

    asyncio.run(mapping.set('attendance_records', '{"id": 1}'))
    with pytest.raises(StorageError):
        asyncio.run(store.list_attendance_records())


def test_write_failures_propagate():
    store = RecordStore(BrokenMapping())
    with pytest.raises(StorageError):
        asyncio.run(store.append_attendance_record(make_record('r1')))
    with pytest.raises(StorageError):
        asyncio.run(store.save_session('tok', 'emp-1'))


def test_generate_id_shape():
    ids = {RecordStore.generate_id() for _ in range(50)}
    assert len(ids) == 50
    for value in ids:
        assert value[:13].isdigit()
        assert len(value) == 22

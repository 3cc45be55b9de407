import asyncio
import csv
import datetime
import io
import os

import pytest

from punchclock.data.models import Employee, PunchType
from punchclock.services.report_service import (
    AttendanceReport, export_csv, export_filename, filter_records, format_export_timestamp, summarize
)

from .conftest import local_dt, make_record


@pytest.fixture
def records():
    return [
        make_record('r1', 'emp-1', PunchType.IN, local_dt(2024, 5, 1, 9, 0)),
        make_record('r2', 'emp-2', PunchType.IN, local_dt(2024, 5, 1, 9, 15), name='Sita', is_synced=True),
        make_record('r3', 'emp-1', PunchType.OUT, local_dt(2024, 5, 1, 18, 0)),
        make_record('r4', 'emp-1', PunchType.IN, local_dt(2024, 5, 2, 0, 5), address='MG Road, Bengaluru'),
    ]


@pytest.fixture
def employees():
    return [
        Employee(id='emp-1', phone_number='9876543210', name='Ramesh', pin='1234'),
        Employee(id='emp-2', phone_number='9123456780', name='Sita', pin='1111'),
    ]


def test_filter_all_sorts_newest_first(records):
    assert [r.id for r in filter_records(records, 'all', None)] == ['r4', 'r3', 'r2', 'r1']
    assert [r.id for r in filter_records(records, None)] == ['r4', 'r3', 'r2', 'r1']


def test_filter_by_employee(records):
    assert [r.id for r in filter_records(records, 'emp-2')] == ['r2']
    assert filter_records(records, 'nobody') == []


def test_filter_by_date_ignores_time_of_day(records):
    assert [r.id for r in filter_records(records, 'all', datetime.date(2024, 5, 1))] == ['r3', 'r2', 'r1']
    assert [r.id for r in filter_records(records, 'emp-1', datetime.date(2024, 5, 2))] == ['r4']


def test_summary(records, employees):
    filtered = filter_records(records, 'emp-1')
    summary = summarize(filtered, employees)

    assert summary.total_employees == 2
    assert summary.total_records == 3
    assert summary.punch_in_count == 2
    assert summary.unsynced_count == 3


def test_export_has_header_plus_one_row_per_record(records, employees):
    filtered = filter_records(records)
    lines = export_csv(filtered, employees).split('\n')

    assert len(lines) == len(filtered) + 1
    assert lines[0] == 'Employee,Punch Type,Timestamp,Location,Synced'
    in_rows = [line for line in lines[1:] if line.split(',')[1] == 'IN']
    assert len(in_rows) == summarize(filtered, employees).punch_in_count


def test_export_row_layout(records, employees):
    lines = export_csv(filter_records(records, 'emp-2'), employees).split('\n')
    timestamp = format_export_timestamp(local_dt(2024, 5, 1, 9, 15))
    assert lines[1] == f"Sita,IN,{timestamp},12.5, 77.25,Yes"


def test_export_keeps_embedded_commas_unescaped(records, employees):
    lines = export_csv([records[3]], employees).split('\n')
    assert lines[1].endswith(',MG Road, Bengaluru,No')
    assert '"' not in lines[1]


def test_export_with_quoting(records, employees):
    text = export_csv(filter_records(records), employees, quote_fields=True)
    rows = list(csv.reader(io.StringIO(text)))

    assert len(rows) == len(records) + 1
    assert all(len(row) == 5 for row in rows)
    assert rows[1][3] == 'MG Road, Bengaluru'


def test_export_name_falls_back_to_snapshot(records):
    lines = export_csv([records[0]], employees=[]).split('\n')
    assert lines[1].startswith('Ramesh,IN,')

    orphan = make_record('r9', 'gone', name='')
    assert export_csv([orphan]).split('\n')[1].startswith('Unknown Employee,')


def test_export_empty():
    assert export_csv([]) == 'Employee,Punch Type,Timestamp,Location,Synced'


def test_export_timestamp_format():
    assert format_export_timestamp(local_dt(2024, 5, 1, 9, 30)) == 'May 01, 2024, 09:30 AM'
    assert format_export_timestamp(local_dt(2024, 12, 24, 18, 5)) == 'Dec 24, 2024, 06:05 PM'


def test_export_filename():
    assert export_filename(None) == 'attendance_all.csv'
    assert export_filename(datetime.date(2024, 5, 1)) == 'attendance_2024-05-01.csv'


def test_attendance_report_loads_and_saves(store, employees, records, tmp_path):
    async def seed():
        for employee in employees:
            await store.upsert_employee(employee)
        for record in records:
            await store.append_attendance_record(record)

    asyncio.run(seed())
    report = asyncio.run(AttendanceReport(store, 'emp-1', datetime.date(2024, 5, 1)).load())

    assert [r.id for r in report.records] == ['r3', 'r1']
    assert report.summary.total_employees == 2
    assert report.filename == 'attendance_2024-05-01.csv'

    path = report.save(str(tmp_path))
    assert path == os.path.join(str(tmp_path), 'attendance_2024-05-01.csv')
    with open(path, encoding='utf-8') as f:
        assert f.read() == report.to_csv()

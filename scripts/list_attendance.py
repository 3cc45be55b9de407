#!/usr/bin/env python3
"""
List attendance records, optionally filtered, and export them as CSV.

Usage:
    python scripts/list_attendance.py
    python scripts/list_attendance.py --phone 9876543210 --date 2024-05-01
    python scripts/list_attendance.py --date 2024-05-01 --export
    python scripts/list_attendance.py --unsynced
"""
import argparse
import asyncio
import datetime
import os
import sys

# Add parent directory to path to import punchclock modules
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from punchclock.config import Settings
from punchclock.data.database import KeyValueMappingStore, open_database
from punchclock.data.record_store import RecordStore
from punchclock.services.report_service import (
    ALL_EMPLOYEES, AttendanceReport, format_export_timestamp, format_location
)
from punchclock.utils.errors import PunchClockError


def parse_date(value):
    try:
        return datetime.date.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Could not parse date: {value}. Use YYYY-MM-DD.")


async def run(store, args, export_dir=None):
    employee_id = ALL_EMPLOYEES
    if args.phone:
        employee = await store.find_employee_by_phone(args.phone)
        if employee is None:
            print(f"ERROR: No employee found with phone number: {args.phone}")
            return 1
        employee_id = employee.id

    report = await AttendanceReport(store, employee_id, args.date).load()
    records = report.records
    if args.unsynced:
        records = [r for r in records if not r.is_synced]

    if not records:
        print("\nNo attendance records found")
    else:
        print(f"\n{'='*100}")
        print(f"{'Employee':<24} {'Type':<5} {'Time':<24} {'Synced':<7} Location")
        print(f"{'-'*100}")
        for record in records:
            print(f"{report.employee_name(record):<24} {record.punch_type.value:<5} "
                  f"{format_export_timestamp(record.timestamp):<24} "
                  f"{'Yes' if record.is_synced else 'No':<7} {format_location(record)}")
        print(f"{'='*100}")

    summary = report.summary
    print(f"Employees: {summary.total_employees}  Records: {summary.total_records}  "
          f"Punch Ins: {summary.punch_in_count}  Unsynced: {summary.unsynced_count}\n")

    if args.export:
        path = report.save(args.export_dir or export_dir, quote_fields=args.quote)
        print(f"✓ Exported {len(report.records)} records to {path}")
    return 0


def main():
    parser = argparse.ArgumentParser(
        description="List and export attendance records",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s --phone 9876543210
  %(prog)s --date 2024-05-01 --export
  %(prog)s --unsynced
        """
    )
    parser.add_argument('--phone', '-p', help='Only records of the employee with this phone number')
    parser.add_argument('--date', '-d', type=parse_date, help='Only records on this local date (YYYY-MM-DD)')
    parser.add_argument('--unsynced', action='store_true', help='Only list records not yet synced')
    parser.add_argument('--export', '-e', action='store_true', help='Write the filtered records to CSV')
    parser.add_argument('--export-dir', help='Directory for the CSV file')
    parser.add_argument('--quote', action='store_true', help='Quote CSV fields containing commas')
    args = parser.parse_args()

    settings = Settings.from_env()
    try:
        mapping = KeyValueMappingStore(open_database(settings.db_file, settings.encryption_key))
    except PunchClockError as e:
        print(f"ERROR: Failed to initialize database: {e}")
        sys.exit(1)

    try:
        sys.exit(asyncio.run(run(RecordStore(mapping), args, settings.export_path)))
    except PunchClockError as e:
        print(f"ERROR: {e}")
        sys.exit(1)
    finally:
        mapping.close()


if __name__ == '__main__':
    main()

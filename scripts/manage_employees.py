#!/usr/bin/env python3
"""
Add, update and list employees who may log in to the punch clock.

Usage:
    python scripts/manage_employees.py list
    python scripts/manage_employees.py add --name "Ramesh Kumar" --phone 9876543210 --pin 1234
    python scripts/manage_employees.py update --phone 9876543210 --pin 4321
    python scripts/manage_employees.py update --phone 9876543210 --name "Ramesh K."
"""
import argparse
import asyncio
import os
import sys

# Add parent directory to path to import punchclock modules
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from punchclock.config import Settings
from punchclock.data.database import KeyValueMappingStore, open_database
from punchclock.data.models import Employee, validate_name, validate_phone, validate_pin
from punchclock.data.record_store import RecordStore
from punchclock.utils.errors import PunchClockError


async def list_employees(store):
    employees = await store.list_employees()
    if not employees:
        print("No employees found.")
        return
    print(f"\n{'ID':<24} {'Name':<30} {'Phone':<15}")
    print(f"{'-'*70}")
    for employee in employees:
        print(f"{employee.id:<24} {employee.name:<30} {employee.phone_number:<15}")
    print(f"\nTotal: {len(employees)} employees\n")


async def add_employee(store, name, phone, pin):
    name = validate_name(name)
    employee = Employee(id=store.generate_id(), phone_number=validate_phone(phone), name=name, pin=validate_pin(pin))
    await store.upsert_employee(employee)
    print(f"✓ Created: {employee.name} ({employee.phone_number}), id {employee.id}")


async def update_employee(store, phone, name=None, pin=None):
    employee = await store.find_employee_by_phone(phone)
    if employee is None:
        raise ValueError(f"No employee found with phone number: {phone}")
    if name is not None:
        employee.name = validate_name(name)
    if pin is not None:
        employee.pin = validate_pin(pin)
    await store.upsert_employee(employee)
    print(f"✓ Updated: {employee.name} ({employee.phone_number})")


def main():
    parser = argparse.ArgumentParser(
        description="Manage punch clock employees",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s list
  %(prog)s add --name "Ramesh Kumar" --phone 9876543210 --pin 1234
  %(prog)s update --phone 9876543210 --pin 4321
        """
    )
    subparsers = parser.add_subparsers(dest='command')
    subparsers.add_parser('list', help='List all employees')

    add_parser = subparsers.add_parser('add', help='Add an employee')
    add_parser.add_argument('--name', '-n', required=True, help='Employee name')
    add_parser.add_argument('--phone', '-p', required=True, help='Phone number used to log in')
    add_parser.add_argument('--pin', required=True, help='4-digit PIN')

    update_parser = subparsers.add_parser('update', help='Change name or PIN of an employee')
    update_parser.add_argument('--phone', '-p', required=True, help='Phone number of the employee')
    update_parser.add_argument('--name', '-n', help='New name')
    update_parser.add_argument('--pin', help='New 4-digit PIN')

    args = parser.parse_args()
    if not args.command:
        parser.print_help()
        sys.exit(1)

    settings = Settings.from_env()
    try:
        mapping = KeyValueMappingStore(open_database(settings.db_file, settings.encryption_key))
    except PunchClockError as e:
        print(f"ERROR: Failed to initialize database: {e}")
        sys.exit(1)
    store = RecordStore(mapping)

    try:
        if args.command == 'list':
            asyncio.run(list_employees(store))
        elif args.command == 'add':
            asyncio.run(add_employee(store, args.name, args.phone, args.pin))
        elif args.command == 'update':
            if args.name is None and args.pin is None:
                print("ERROR: Nothing to update, pass --name and/or --pin")
                sys.exit(1)
            asyncio.run(update_employee(store, args.phone, args.name, args.pin))
    except (ValueError, PunchClockError) as e:
        print(f"ERROR: {e}")
        sys.exit(1)
    finally:
        mapping.close()


if __name__ == '__main__':
    main()

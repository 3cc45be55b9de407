"""
Data layer for the punch clock application.

Contains the key-value mapping store, record types and the record store.
"""

from .database import MappingStore, KeyValueMappingStore, open_database
from .models import AttendanceRecord, Employee, Location, PunchState, PunchType, Session
from .record_store import RecordStore

__all__ = [
    'MappingStore',
    'KeyValueMappingStore',
    'open_database',
    'AttendanceRecord',
    'Employee',
    'Location',
    'PunchState',
    'PunchType',
    'Session',
    'RecordStore',
]

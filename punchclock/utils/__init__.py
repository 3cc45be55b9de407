"""
Utilities for the punch clock application.
"""

from .errors import (
    PunchClockError,
    StorageError,
    PermissionDeniedError,
    EmployeeNotFoundError,
    InvalidCredentialError,
    LocationTimeoutError,
    CaptureFailureError,
    ExportError,
    ValidationError,
)
from .export_utils import (
    get_export_directory,
    write_file,
)

__all__ = [
    'PunchClockError',
    'StorageError',
    'PermissionDeniedError',
    'EmployeeNotFoundError',
    'InvalidCredentialError',
    'LocationTimeoutError',
    'CaptureFailureError',
    'ExportError',
    'ValidationError',
    'get_export_directory',
    'write_file',
]

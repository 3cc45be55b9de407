"""
Service layer for punch clock business logic.
"""

from .auth_service import AuthService
from .camera_service import CameraService
from .location_service import LocationService
from .punch_service import PunchService
from .report_service import AttendanceReport

__all__ = ['AuthService', 'CameraService', 'LocationService', 'PunchService', 'AttendanceReport']

"""
Error hierarchy for the punch clock application.

Every failure a user-initiated action can run into derives from
PunchClockError so screens can turn it into a notice with one except clause.
"""


class PunchClockError(Exception):
    """Base exception for the punch clock application"""
    pass


class StorageError(PunchClockError):
    """Raised when the durable mapping store fails to read or write"""
    pass


class PermissionDeniedError(PunchClockError):
    """Raised when camera or location permission is not granted"""
    pass


class EmployeeNotFoundError(PunchClockError):
    """Raised when no employee matches a lookup"""
    pass


class InvalidCredentialError(PunchClockError):
    """Raised when a PIN does not match the employee's PIN"""
    pass


class LocationTimeoutError(PunchClockError):
    """Raised when no location arrived within the configured wait"""
    pass


class CaptureFailureError(PunchClockError):
    """Raised when the camera returned no image or the image was rejected"""
    pass


class ExportError(PunchClockError):
    """Raised when an export operation fails"""
    pass


class ValidationError(PunchClockError):
    """Raised when validation fails"""
    pass

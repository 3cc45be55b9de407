"""
Screen controllers for the punch clock application.
"""

from .login_screen import LoginScreen
from .punch_screen import PunchScreen
from .camera_screen import CameraScreen
from .admin_screen import AdminScreen

__all__ = [
    'LoginScreen',
    'PunchScreen',
    'CameraScreen',
    'AdminScreen',
]

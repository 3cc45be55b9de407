"""
Hardware layer for the punch clock application.

Contains camera and location providers, real and mock.
"""

from .camera import PhotoData, CameraProvider, OpenCVCameraProvider, MockCameraProvider, get_camera_provider
from .location import (
    LocationData, LocationProvider, PlyerLocationProvider, MockLocationProvider, get_location_provider,
    Geocoder, NominatimGeocoder, format_address, get_geocoder,
)

__all__ = [
    'PhotoData',
    'CameraProvider',
    'OpenCVCameraProvider',
    'MockCameraProvider',
    'get_camera_provider',
    'LocationData',
    'LocationProvider',
    'PlyerLocationProvider',
    'MockLocationProvider',
    'get_location_provider',
    'Geocoder',
    'NominatimGeocoder',
    'format_address',
    'get_geocoder',
]

"""
Location providers.

A provider answers one request for the current position. It does not time
out on its own; LocationService races it against the configured wait.
"""
import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import Optional

from ..utils.errors import PermissionDeniedError

logger = logging.getLogger(__name__)


@dataclass
class LocationData:
    latitude: float
    longitude: float
    address: Optional[str] = None
    accuracy: Optional[float] = None
    timestamp: float = field(default_factory=time.time)


class LocationProvider:
    async def request(self) -> Optional[LocationData]:
        # To be implemented by subclasses
        raise NotImplementedError


def format_address(parts: dict) -> Optional[str]:
    """
    Join a geocoder address breakdown as "street, city, region, country".

    Empty parts are skipped; returns None when nothing is left.
    """
    street = parts.get('road') or parts.get('pedestrian')
    city = parts.get('city') or parts.get('town') or parts.get('village')
    fields = [street, city, parts.get('state'), parts.get('country')]
    text = ', '.join(str(f) for f in fields if f)
    return text or None


class Geocoder:
    async def reverse(self, latitude: float, longitude: float) -> Optional[str]:
        # To be implemented by subclasses
        raise NotImplementedError


class NominatimGeocoder(Geocoder):
    """Reverse geocoding through OpenStreetMap Nominatim (geopy)"""

    def __init__(self, user_agent: str = 'punchclock', timeout: float = 5.0):
        from geopy.geocoders import Nominatim

        self._geolocator = Nominatim(user_agent=user_agent, timeout=timeout)

    async def reverse(self, latitude: float, longitude: float) -> Optional[str]:
        result = await asyncio.to_thread(
            self._geolocator.reverse, (latitude, longitude), exactly_one=True, addressdetails=True
        )
        if result is None:
            return None
        return format_address(result.raw.get('address', {}))


class PlyerLocationProvider(LocationProvider):
    """Device GPS through plyer (Android / iOS)"""

    def __init__(self, min_time_ms: int = 1000, min_distance_m: float = 0):
        self.min_time_ms = min_time_ms
        self.min_distance_m = min_distance_m

    async def request(self) -> Optional[LocationData]:
        from plyer import gps

        loop = asyncio.get_running_loop()
        future = loop.create_future()

        def _resolve(result=None, error=None):
            if future.done():
                return
            if error is not None:
                future.set_exception(error)
            else:
                future.set_result(result)

        def on_location(**kwargs):
            data = LocationData(
                latitude=float(kwargs['lat']),
                longitude=float(kwargs['lon']),
                accuracy=kwargs.get('accuracy'),
            )
            loop.call_soon_threadsafe(_resolve, data)

        def on_status(stype, status):
            logger.debug(f"GPS status: {stype} {status}")
            if stype == 'provider-disabled':
                loop.call_soon_threadsafe(
                    _resolve, None, PermissionDeniedError(f"Location provider disabled: {status}")
                )

        try:
            gps.configure(on_location=on_location, on_status=on_status)
            gps.start(minTime=self.min_time_ms, minDistance=self.min_distance_m)
        except NotImplementedError:
            logger.warning("GPS is not available on this platform")
            return None

        try:
            return await future
        finally:
            try:
                gps.stop()
            except NotImplementedError:
                pass


class MockLocationProvider(LocationProvider):
    """Fixed coordinates, optionally after a delay"""

    def __init__(self, latitude: float = 0.0, longitude: float = 0.0,
                 address: Optional[str] = None, delay: float = 0.0):
        self.latitude = latitude
        self.longitude = longitude
        self.address = address
        self.delay = delay

    async def request(self) -> Optional[LocationData]:
        if self.delay:
            await asyncio.sleep(self.delay)
        logger.info(f"Mock location: {self.latitude}, {self.longitude}")
        return LocationData(
            latitude=self.latitude,
            longitude=self.longitude,
            address=self.address,
            accuracy=0.0,
        )


def get_location_provider(use_mock: bool = False, latitude: float = 0.0,
                          longitude: float = 0.0) -> LocationProvider:
    if use_mock:
        return MockLocationProvider(latitude, longitude)
    return PlyerLocationProvider()


def get_geocoder(enabled: bool = True, user_agent: str = 'punchclock') -> Optional[Geocoder]:
    if not enabled:
        return None
    return NominatimGeocoder(user_agent=user_agent)

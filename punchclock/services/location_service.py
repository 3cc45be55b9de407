"""
Location service: bounded-wait position lookup and distance helpers.
"""
import asyncio
import logging
import math
from typing import Optional

from ..hardware.location import Geocoder, LocationData, LocationProvider
from ..utils.errors import PunchClockError

logger = logging.getLogger(__name__)

EARTH_RADIUS_KM = 6371.0
DEFAULT_TIMEOUT_SECONDS = 10.0


class LocationService:
    """Wraps a LocationProvider with timeouts, reverse geocoding and formatting"""

    def __init__(self, provider: LocationProvider, timeout: float = DEFAULT_TIMEOUT_SECONDS,
                 geocoder: Optional[Geocoder] = None):
        self.provider = provider
        self.timeout = timeout
        self.geocoder = geocoder

    async def get_current_location(self) -> Optional[LocationData]:
        """
        Ask the provider for the current position and fill in its address.

        Returns:
            LocationData, or None if permission was denied or the provider failed
        """
        try:
            location = await self.provider.request()
        except PunchClockError as e:
            logger.warning(f"Location unavailable: {e}")
            return None
        except Exception as e:
            logger.error(f"Location provider failed: {e}", exc_info=True)
            return None
        if location is not None and location.address is None:
            location.address = await self._reverse_geocode(location)
        return location

    async def _reverse_geocode(self, location: LocationData) -> Optional[str]:
        if self.geocoder is None:
            return None
        try:
            return await self.geocoder.reverse(location.latitude, location.longitude)
        except Exception as e:
            logger.warning(f"Could not get address: {e}")
            return None

    async def get_location_with_timeout(self, timeout: Optional[float] = None) -> Optional[LocationData]:
        """
        Race the provider against a timeout.

        Args:
            timeout: Seconds to wait, defaults to the service timeout

        Returns:
            LocationData, or None when nothing arrived in time
        """
        timeout = self.timeout if timeout is None else timeout
        try:
            return await asyncio.wait_for(self.get_current_location(), timeout)
        except asyncio.TimeoutError:
            logger.warning(f"Location request timed out after {timeout:.1f}s")
            return None

    @staticmethod
    def calculate_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
        """
        Calculate distance between two coordinates using the Haversine formula

        Returns:
            float: Distance in kilometres
        """
        lat1_rad = math.radians(lat1)
        lat2_rad = math.radians(lat2)
        delta_lat = math.radians(lat2 - lat1)
        delta_lon = math.radians(lon2 - lon1)

        a = (math.sin(delta_lat / 2) ** 2 +
             math.cos(lat1_rad) * math.cos(lat2_rad) *
             math.sin(delta_lon / 2) ** 2)
        c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

        return EARTH_RADIUS_KM * c

    def is_within_radius(self, target_lat: float, target_lon: float,
                         current_lat: float, current_lon: float, radius_km: float = 0.5) -> bool:
        distance = self.calculate_distance(target_lat, target_lon, current_lat, current_lon)
        return distance <= radius_km

    @staticmethod
    def format_location_for_display(location) -> str:
        if location.address:
            return location.address
        return f"{location.latitude:.6f}, {location.longitude:.6f}"

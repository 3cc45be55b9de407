"""
Runtime configuration for the punch clock application.

All settings come from environment variables so the same build can run as a
kiosk with real hardware or on a workstation with mock providers.
"""
import os
from dataclasses import dataclass
from typing import Optional

# Environment variable for the encryption key
ENV_KEY_NAME = "PUNCHCLOCK_ENV_KEY"
DB_FILE = "punchclock.db"
DEFAULT_LOCATION_TIMEOUT = 5.0


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return float(value)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {value!r}")


@dataclass
class Settings:
    db_file: str = DB_FILE
    encryption_key: Optional[str] = None
    export_path: Optional[str] = None
    photo_dir: str = "photos"
    location_timeout: float = DEFAULT_LOCATION_TIMEOUT
    reverse_geocode: bool = True
    geocoder_user_agent: str = "punchclock"
    use_mock_hardware: bool = False
    mock_latitude: float = 0.0
    mock_longitude: float = 0.0
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> 'Settings':
        """Build settings from PUNCHCLOCK_* environment variables"""
        return cls(
            db_file=os.getenv("PUNCHCLOCK_DB_FILE", DB_FILE),
            encryption_key=os.getenv(ENV_KEY_NAME) or None,
            export_path=os.getenv("PUNCHCLOCK_EXPORT_PATH") or None,
            photo_dir=os.getenv("PUNCHCLOCK_PHOTO_DIR", "photos"),
            location_timeout=_env_float("PUNCHCLOCK_LOCATION_TIMEOUT", DEFAULT_LOCATION_TIMEOUT),
            reverse_geocode=_env_flag("PUNCHCLOCK_REVERSE_GEOCODE", True),
            geocoder_user_agent=os.getenv("PUNCHCLOCK_GEOCODER_USER_AGENT", "punchclock"),
            use_mock_hardware=_env_flag("PUNCHCLOCK_USE_MOCK_HARDWARE"),
            mock_latitude=_env_float("PUNCHCLOCK_MOCK_LATITUDE", 0.0),
            mock_longitude=_env_float("PUNCHCLOCK_MOCK_LONGITUDE", 0.0),
            log_level=os.getenv("PUNCHCLOCK_LOG_LEVEL", "INFO").upper(),
        )

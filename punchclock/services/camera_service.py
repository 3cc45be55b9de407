"""
Camera service: capture and quality validation of verification photos.
"""
import logging
from dataclasses import dataclass, field
from typing import List, Optional

from ..hardware.camera import CameraProvider, PhotoData
from ..utils.errors import CaptureFailureError, PunchClockError

logger = logging.getLogger(__name__)

MIN_WIDTH = 640
MIN_HEIGHT = 480
MAX_SIZE_BYTES = 5 * 1024 * 1024


@dataclass
class PhotoValidation:
    is_valid: bool
    issues: List[str] = field(default_factory=list)


def validate_photo_quality(photo: PhotoData) -> PhotoValidation:
    """Reject photos below 640x480 or with an encoded size above 5 MB"""
    issues = []
    if photo.width < MIN_WIDTH or photo.height < MIN_HEIGHT:
        issues.append('Photo resolution too low')
    if photo.data is not None and len(photo.data) > MAX_SIZE_BYTES:
        issues.append('Photo file size too large')
    return PhotoValidation(is_valid=not issues, issues=issues)


class CameraService:
    def __init__(self, provider: CameraProvider):
        self.provider = provider

    async def take_photo(self) -> Optional[PhotoData]:
        try:
            return await self.provider.capture()
        except PunchClockError as e:
            logger.error(f"Error taking photo: {e}")
            return None
        except Exception as e:
            logger.error(f"Camera failed: {e}", exc_info=True)
            return None

    async def capture_validated(self) -> PhotoData:
        """
        Capture a photo and check its quality.

        Raises:
            CaptureFailureError: No image, or the image failed validation
        """
        photo = await self.take_photo()
        if photo is None:
            raise CaptureFailureError("Camera returned no image")
        result = validate_photo_quality(photo)
        if not result.is_valid:
            raise CaptureFailureError(", ".join(result.issues))
        return photo

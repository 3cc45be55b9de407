"""
Camera providers.

A provider captures one still image and describes it with PhotoData. The
OpenCV provider blocks while the device warms up, so it runs in a worker
thread.
"""
import asyncio
import logging
import os
import time
from dataclasses import dataclass, field
from typing import Optional

logger = logging.getLogger(__name__)

JPEG_QUALITY = 80


@dataclass
class PhotoData:
    uri: str
    width: int
    height: int
    data: Optional[bytes] = None
    timestamp: float = field(default_factory=time.time)


class CameraProvider:
    async def capture(self) -> Optional[PhotoData]:
        # To be implemented by subclasses
        raise NotImplementedError


class OpenCVCameraProvider(CameraProvider):
    """Webcam capture through OpenCV, saving a JPEG to photo_dir"""

    def __init__(self, photo_dir: str = 'photos', device_index: int = 0):
        self.photo_dir = photo_dir
        self.device_index = device_index

    async def capture(self) -> Optional[PhotoData]:
        return await asyncio.to_thread(self._capture_frame)

    def _capture_frame(self) -> Optional[PhotoData]:
        import cv2

        cap = cv2.VideoCapture(self.device_index)
        try:
            if not cap.isOpened():
                logger.error("Cannot open camera")
                return None
            ok, frame = cap.read()
            if not ok:
                logger.error("Camera returned no frame")
                return None
        finally:
            cap.release()

        ok, buffer = cv2.imencode('.jpg', frame, [cv2.IMWRITE_JPEG_QUALITY, JPEG_QUALITY])
        if not ok:
            logger.error("Could not encode captured frame")
            return None
        data = buffer.tobytes()

        os.makedirs(self.photo_dir, exist_ok=True)
        path = os.path.join(self.photo_dir, f"punch_{int(time.time() * 1000)}.jpg")
        with open(path, 'wb') as f:
            f.write(data)

        height, width = frame.shape[:2]
        logger.info(f"Photo captured: {path} ({width}x{height}, {len(data)} bytes)")
        return PhotoData(uri=os.path.abspath(path), width=width, height=height, data=data)


class MockCameraProvider(CameraProvider):
    """Synthetic photo descriptor with configurable dimensions"""

    def __init__(self, width: int = 1280, height: int = 720, data: Optional[bytes] = None):
        self.width = width
        self.height = height
        self.data = data

    async def capture(self) -> Optional[PhotoData]:
        uri = f"mock://photo/{int(time.time() * 1000)}.jpg"
        logger.info(f"Mock capture: {uri}")
        return PhotoData(uri=uri, width=self.width, height=self.height, data=self.data)


def get_camera_provider(use_mock: bool = False, photo_dir: str = 'photos') -> CameraProvider:
    if use_mock:
        return MockCameraProvider()
    return OpenCVCameraProvider(photo_dir)

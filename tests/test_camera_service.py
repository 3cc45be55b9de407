import asyncio

import pytest

from punchclock.hardware.camera import CameraProvider, MockCameraProvider, PhotoData
from punchclock.services.camera_service import CameraService, validate_photo_quality
from punchclock.utils.errors import CaptureFailureError


class EmptyCamera(CameraProvider):
    async def capture(self):
        return None


class FailingCamera(CameraProvider):
    async def capture(self):
        raise OSError("device busy")


class CrashingCamera(CameraProvider):
    async def capture(self):
        raise RuntimeError("bad frame")


def test_valid_photo():
    result = validate_photo_quality(PhotoData(uri='a.jpg', width=640, height=480, data=b'x' * 1024))
    assert result.is_valid
    assert result.issues == []


def test_resolution_too_low():
    result = validate_photo_quality(PhotoData(uri='a.jpg', width=639, height=480))
    assert not result.is_valid
    assert result.issues == ['Photo resolution too low']

    assert not validate_photo_quality(PhotoData(uri='a.jpg', width=1280, height=479)).is_valid


def test_file_too_large():
    result = validate_photo_quality(PhotoData(uri='a.jpg', width=1280, height=720, data=b'x' * (5 * 1024 * 1024 + 1)))
    assert result.issues == ['Photo file size too large']


def test_exactly_five_megabytes_is_accepted():
    assert validate_photo_quality(PhotoData(uri='a.jpg', width=1280, height=720, data=b'x' * (5 * 1024 * 1024))).is_valid


def test_capture_validated_returns_photo():
    photo = asyncio.run(CameraService(MockCameraProvider()).capture_validated())
    assert photo.uri.startswith('mock://photo/')
    assert (photo.width, photo.height) == (1280, 720)


def test_capture_validated_rejects_small_photo():
    with pytest.raises(CaptureFailureError):
        asyncio.run(CameraService(MockCameraProvider(width=320, height=240)).capture_validated())


def test_no_image_is_capture_failure():
    with pytest.raises(CaptureFailureError):
        asyncio.run(CameraService(EmptyCamera()).capture_validated())


def test_provider_error_yields_none():
    assert asyncio.run(CameraService(FailingCamera()).take_photo()) is None


def test_unexpected_camera_error_is_capture_failure():
    service = CameraService(CrashingCamera())
    assert asyncio.run(service.take_photo()) is None
    with pytest.raises(CaptureFailureError):
        asyncio.run(service.capture_validated())

from __future__ import annotations

from pathlib import Path

import numpy as np
import pytest

from photomerge_app.errors import CameraError
from photomerge_app.io import camera as camera_module
from photomerge_app.io.camera import CaptureOptions, CaptureResult, OpenCVCamera
from photomerge_app.io.loader import read_image_size


def test_write_still_creates_jpeg_with_metadata(tmp_path: Path):
    camera = OpenCVCamera(device_index=3, capture_dir=tmp_path / "captures")
    frame = np.full((24, 32, 3), 128, dtype=np.uint8)

    result = camera.write_still(frame, CaptureOptions(quality=0.8, include_metadata=True))

    assert not result.cancelled
    assert result.path.suffix == ".jpg"
    assert result.path.exists()
    assert (result.width, result.height) == (32, 24)
    assert read_image_size(result.path) == (32, 24)
    assert result.metadata["device_index"] == 3
    assert result.metadata["quality"] == 0.8


def test_write_still_without_metadata(tmp_path: Path):
    camera = OpenCVCamera(device_index=0, capture_dir=tmp_path)
    result = camera.write_still(np.zeros((4, 4, 3), dtype=np.uint8), CaptureOptions())
    assert result.metadata == {}


def test_cancel_result():
    result = CaptureResult.cancel()
    assert result.cancelled
    assert result.path is None


class _FakeVideoCapture:
    instances: list["_FakeVideoCapture"] = []

    def __init__(self, index: int, opened: bool = True, frame=None) -> None:
        self.index = index
        self.opened = opened
        self.frame = frame
        self.released = False
        _FakeVideoCapture.instances.append(self)

    def isOpened(self) -> bool:
        return self.opened and not self.released

    def read(self):
        return self.frame is not None, self.frame

    def release(self) -> None:
        self.released = True


@pytest.fixture
def fake_device(monkeypatch):
    _FakeVideoCapture.instances = []
    bgr = np.zeros((6, 8, 3), dtype=np.uint8)
    bgr[..., 0] = 255

    def factory(index: int, opened: bool = True):
        return _FakeVideoCapture(index, opened=opened, frame=bgr)

    monkeypatch.setattr(camera_module.cv2, "VideoCapture", factory)
    return _FakeVideoCapture.instances


def test_open_returns_the_live_capture(tmp_path: Path, fake_device):
    camera = OpenCVCamera(device_index=2, capture_dir=tmp_path)

    first = camera.open()

    assert first is fake_device[0]
    assert camera.open() is first
    assert len(fake_device) == 1


def test_read_frame_opens_device_and_converts_to_rgb(tmp_path: Path, fake_device):
    with OpenCVCamera(device_index=0, capture_dir=tmp_path) as camera:
        frame = camera.read_frame()

    assert frame.shape == (6, 8, 3)
    assert frame[0, 0].tolist() == [0, 0, 255]
    assert fake_device[0].released
    assert not camera.is_open


def test_open_failure_raises_camera_error(tmp_path: Path, monkeypatch):
    monkeypatch.setattr(camera_module.cv2, "VideoCapture", lambda index: _FakeVideoCapture(index, opened=False))
    camera = OpenCVCamera(device_index=5, capture_dir=tmp_path)

    with pytest.raises(CameraError, match="Unable to open camera device 5"):
        camera.read_frame()
    assert not camera.is_open

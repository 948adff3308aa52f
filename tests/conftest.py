from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable, Optional

import cv2
import numpy as np
import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from photomerge_app.errors import CameraError  # noqa: E402
from photomerge_app.io.camera import CaptureOptions, CaptureResult  # noqa: E402


def write_test_image(path: Path, width: int = 64, height: int = 48, color=(0, 127, 0)) -> Path:
    image = np.zeros((height, width, 3), dtype=np.uint8)
    image[:, :] = color
    ok = cv2.imwrite(str(path), image)
    if not ok:
        raise RuntimeError(f"Failed to create test image at {path}")
    return path


class FakeCamera:
    """Camera double replaying a scripted list of outcomes.

    Each entry is a ``Path`` (successful still), ``None`` (user cancelled) or
    an exception instance to raise.
    """

    def __init__(self, outcomes: Iterable[object]) -> None:
        self.outcomes = list(outcomes)
        self.calls: list[CaptureOptions] = []

    def take_picture(self, options: CaptureOptions) -> CaptureResult:
        self.calls.append(options)
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        if outcome is None:
            return CaptureResult.cancel()
        return CaptureResult(cancelled=False, path=outcome)


@pytest.fixture
def make_images(tmp_path: Path):
    def _make(count: int, width: int = 64, height: int = 48, prefix: str = "u") -> list[Path]:
        folder = tmp_path / "captures"
        folder.mkdir(exist_ok=True)
        return [
            write_test_image(folder / f"{prefix}{index + 1}.png", width, height, color=(index * 40 % 255, 80, 160))
            for index in range(count)
        ]

    return _make


@pytest.fixture
def fake_camera_factory():
    def _factory(outcomes: Iterable[object]) -> FakeCamera:
        return FakeCamera(outcomes)

    return _factory


@pytest.fixture
def broken_camera() -> FakeCamera:
    return FakeCamera([CameraError("device 0 busy")])


@pytest.fixture(scope="session")
def qapp():
    widgets = pytest.importorskip("PyQt6.QtWidgets")
    app: Optional[object] = widgets.QApplication.instance()
    if app is None:
        app = widgets.QApplication([])
    return app

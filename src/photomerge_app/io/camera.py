"""Camera capability backed by OpenCV ``VideoCapture``."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional, Protocol

import cv2
import numpy as np
from loguru import logger

from ..errors import CameraError
from .loader import write_image


@dataclass(slots=True, frozen=True)
class CaptureOptions:
    """Options passed to the camera for a single still.

    ``quality`` is in ``[0, 1]`` and maps onto the JPEG quality of the written
    still. ``allow_editing`` adds a review step before the still is accepted.
    ``include_metadata`` returns device and frame details with the result.
    """

    quality: float = 1.0
    allow_editing: bool = False
    include_metadata: bool = False


@dataclass(slots=True, frozen=True)
class CaptureResult:
    """Outcome of one camera request: either cancelled or a written still."""

    cancelled: bool
    path: Optional[Path] = None
    width: Optional[int] = None
    height: Optional[int] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def cancel(cls) -> "CaptureResult":
        return cls(cancelled=True)


class CameraCapture(Protocol):
    """Anything able to take a single still photograph."""

    def take_picture(self, options: CaptureOptions) -> CaptureResult:
        ...


class OpenCVCamera:
    """Thin wrapper around a ``cv2.VideoCapture`` device.

    The device is opened lazily and kept open between frames so a live
    preview can poll :meth:`read_frame`. Stills are written as JPEG files into
    ``capture_dir``.
    """

    def __init__(self, device_index: int, capture_dir: Path) -> None:
        self.device_index = device_index
        self.capture_dir = capture_dir
        self._capture: Optional[cv2.VideoCapture] = None

    @property
    def is_open(self) -> bool:
        return self._capture is not None and self._capture.isOpened()

    def open(self) -> cv2.VideoCapture:
        if self._capture is not None and self._capture.isOpened():
            return self._capture
        capture = cv2.VideoCapture(self.device_index)
        if not capture.isOpened():
            capture.release()
            raise CameraError(f"Unable to open camera device {self.device_index}")
        self._capture = capture
        logger.info("Opened camera device {}", self.device_index)
        return capture

    def close(self) -> None:
        if self._capture is not None:
            self._capture.release()
            self._capture = None
            logger.debug("Released camera device {}", self.device_index)

    def read_frame(self) -> np.ndarray:
        """Grab the current frame as an RGB array."""
        ok, frame = self.open().read()
        if not ok or frame is None:
            raise CameraError(f"Camera device {self.device_index} returned no frame")
        return cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)

    def write_still(self, frame: np.ndarray, options: CaptureOptions) -> CaptureResult:
        """Persist ``frame`` to the capture directory and describe it."""
        captured_at = datetime.now()
        path = self.capture_dir / f"capture_{captured_at:%Y%m%d_%H%M%S_%f}.jpg"
        try:
            write_image(frame, path, quality=options.quality)
        except (OSError, ValueError) as exc:
            raise CameraError(f"Unable to write captured still to {path}: {exc}") from exc

        height, width = frame.shape[:2]
        metadata: Dict[str, Any] = {}
        if options.include_metadata:
            metadata = {
                "device_index": self.device_index,
                "captured_at": captured_at.isoformat(),
                "width": int(width),
                "height": int(height),
                "quality": options.quality,
            }
        logger.info("Captured still {} ({}x{})", path.name, width, height)
        return CaptureResult(
            cancelled=False,
            path=path,
            width=int(width),
            height=int(height),
            metadata=metadata,
        )

    def take_picture(self, options: CaptureOptions) -> CaptureResult:
        """Grab one frame without any preview and write it out."""
        frame = self.read_frame()
        return self.write_still(frame, options)

    def __enter__(self) -> "OpenCVCamera":
        self.open()
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

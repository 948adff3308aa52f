"""Common interface for layout strategies that merge captured photos."""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List, Sequence, Tuple

import cv2
import numpy as np
from loguru import logger

from ..io.loader import load_image
from ..models.composite import MergedImage, Placement
from ..models.session import CapturedImage


class Compositor(ABC):
    """Turns an ordered sequence of captured images into one merged image.

    Subclasses implement :meth:`layout` over RGB arrays. Strategies that need a
    live widget tree override :meth:`compose` directly and set
    ``requires_gui_thread`` so callers keep them on the UI thread.
    """

    name: str = "base"
    requires_gui_thread: bool = False

    def __init__(self, background: Tuple[int, int, int] = (0, 0, 0)) -> None:
        self.background = background

    def compose(self, images: Sequence[CapturedImage]) -> MergedImage:
        if not images:
            raise ValueError("No images to compose")
        arrays = [load_image(image.path) for image in images]
        canvas, placements = self.layout(arrays)
        logger.debug(
            "{} compositor produced {}x{} canvas from {} images",
            self.name,
            canvas.shape[1],
            canvas.shape[0],
            len(arrays),
        )
        return MergedImage(
            pixels=canvas,
            strategy=self.name,
            sources=tuple(image.path for image in images),
            placements=tuple(placements),
        )

    @abstractmethod
    def layout(self, arrays: Sequence[np.ndarray]) -> Tuple[np.ndarray, List[Placement]]:
        """Draw ``arrays`` onto a new canvas and report where each one went."""

    # ------------------------------------------------------------------
    def _blank_canvas(self, width: int, height: int) -> np.ndarray:
        canvas = np.empty((height, width, 3), dtype=np.uint8)
        canvas[...] = np.asarray(self.background, dtype=np.uint8)
        return canvas


def resize_to_height(image: np.ndarray, height: int) -> np.ndarray:
    """Scale ``image`` to ``height`` rows, keeping its aspect ratio."""
    src_height, src_width = image.shape[:2]
    if src_height == height:
        return image
    width = max(1, int(round(src_width * height / float(src_height))))
    interpolation = cv2.INTER_AREA if height < src_height else cv2.INTER_LINEAR
    return cv2.resize(image, (width, height), interpolation=interpolation)

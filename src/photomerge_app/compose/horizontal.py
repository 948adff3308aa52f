"""Horizontal concatenation at the first image's height."""
from __future__ import annotations

from typing import List, Sequence, Tuple

import cv2
import numpy as np

from ..models.composite import Placement
from .base import Compositor, resize_to_height


class HorizontalConcatenateCompositor(Compositor):
    """Resize every image to the first one's height and join them left to right."""

    name = "horizontal"

    def layout(self, arrays: Sequence[np.ndarray]) -> Tuple[np.ndarray, List[Placement]]:
        target_height = int(arrays[0].shape[0])
        scaled = [np.ascontiguousarray(resize_to_height(array, target_height)) for array in arrays]
        canvas = cv2.hconcat(scaled)

        placements: List[Placement] = []
        x = 0
        for item in scaled:
            width = int(item.shape[1])
            placements.append(Placement(x, 0, width, target_height))
            x += width
        return canvas, placements

"""Vertical stack with width normalisation."""
from __future__ import annotations

from typing import List, Sequence, Tuple

import numpy as np

from ..models.composite import Placement
from .base import Compositor


class VerticalStackCompositor(Compositor):
    """Stack images top to bottom at their natural size.

    The canvas is as wide as the widest image and as tall as all heights
    combined. Narrower images are centred horizontally; each image starts at the
    running sum of the heights drawn above it.
    """

    name = "vertical"

    def layout(self, arrays: Sequence[np.ndarray]) -> Tuple[np.ndarray, List[Placement]]:
        canvas_width = max(int(array.shape[1]) for array in arrays)
        canvas_height = sum(int(array.shape[0]) for array in arrays)
        canvas = self._blank_canvas(canvas_width, canvas_height)

        placements: List[Placement] = []
        offset_y = 0
        for array in arrays:
            height, width = (int(dim) for dim in array.shape[:2])
            offset_x = (canvas_width - width) // 2
            canvas[offset_y : offset_y + height, offset_x : offset_x + width] = array
            placements.append(Placement(offset_x, offset_y, width, height))
            offset_y += height
        return canvas, placements

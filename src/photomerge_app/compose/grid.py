"""Two-row grid layout."""
from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

import numpy as np

from ..models.composite import Placement
from .base import Compositor, resize_to_height


class TwoRowGridCompositor(Compositor):
    """First half of the batch on the top row, second half below.

    Every image is scaled to a shared cell height (the smallest source height
    unless ``cell_height`` is given). Odd batches put the extra image on the top
    row. Rows are horizontally centred on a canvas as wide as the widest row.
    """

    name = "grid"

    def __init__(self, cell_height: Optional[int] = None, background: Tuple[int, int, int] = (0, 0, 0)) -> None:
        super().__init__(background)
        if cell_height is not None and cell_height < 1:
            raise ValueError(f"cell_height must be positive, got {cell_height}")
        self.cell_height = cell_height

    def layout(self, arrays: Sequence[np.ndarray]) -> Tuple[np.ndarray, List[Placement]]:
        target_height = self.cell_height or min(int(array.shape[0]) for array in arrays)
        scaled = [resize_to_height(array, target_height) for array in arrays]

        split = (len(scaled) + 1) // 2
        rows = [row for row in (scaled[:split], scaled[split:]) if row]
        row_widths = [sum(int(item.shape[1]) for item in row) for row in rows]
        canvas_width = max(row_widths)
        canvas = self._blank_canvas(canvas_width, target_height * len(rows))

        placements: List[Placement] = []
        for row_index, (row, row_width) in enumerate(zip(rows, row_widths)):
            x = (canvas_width - row_width) // 2
            y = row_index * target_height
            for item in row:
                width = int(item.shape[1])
                canvas[y : y + target_height, x : x + width] = item
                placements.append(Placement(x, y, width, target_height))
                x += width
        return canvas, placements

"""Dataclasses describing a merged image and its layout."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Tuple

import numpy as np


@dataclass(slots=True, frozen=True)
class Placement:
    """Where one source image landed inside the merged canvas."""

    x: int
    y: int
    width: int
    height: int

    def as_tuple(self) -> Tuple[int, int, int, int]:
        return self.x, self.y, self.width, self.height


@dataclass(slots=True)
class MergedImage:
    """Single composite produced from the whole session.

    ``pixels`` is an RGB ``uint8`` array. The object is not retained by the
    session; it lives only until it has been written to the gallery.
    """

    pixels: np.ndarray
    strategy: str
    sources: Tuple[Path, ...]
    placements: Tuple[Placement, ...] = ()

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def size(self) -> Tuple[int, int]:
        return self.width, self.height

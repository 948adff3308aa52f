"""Immutable capture session snapshots."""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from pathlib import Path
from typing import Optional, Tuple


@dataclass(slots=True, frozen=True)
class CapturedImage:
    """Reference to one captured photo on disk.

    Attributes
    ----------
    path:
        Location of the still image written by the camera capability.
    width, height:
        Natural pixel size once read; ``None`` until known.
    captured_at:
        Wall-clock time of the capture.
    """

    path: Path
    width: Optional[int] = None
    height: Optional[int] = None
    captured_at: datetime = field(default_factory=datetime.now)

    @property
    def size(self) -> Optional[Tuple[int, int]]:
        if self.width is None or self.height is None:
            return None
        return self.width, self.height

    def with_size(self, width: int, height: int) -> "CapturedImage":
        return replace(self, width=int(width), height=int(height))


@dataclass(slots=True, frozen=True)
class Session:
    """Ordered captured images plus the current preview selection.

    Every command returns a new snapshot with ``version`` bumped, so observers
    can hold on to an old snapshot without seeing it change underneath them.
    """

    images: Tuple[CapturedImage, ...] = ()
    selected_index: Optional[int] = None
    version: int = 0

    def __post_init__(self) -> None:
        if self.selected_index is not None and not 0 <= self.selected_index < len(self.images):
            raise IndexError(
                f"Selected index {self.selected_index} outside session of {len(self.images)} images"
            )

    def __len__(self) -> int:
        return len(self.images)

    @property
    def selected(self) -> Optional[CapturedImage]:
        if self.selected_index is None:
            return None
        return self.images[self.selected_index]

    @property
    def has_selection(self) -> bool:
        return self.selected_index is not None

    # ------------------------------------------------------------------
    def append(self, image: CapturedImage) -> "Session":
        return replace(self, images=self.images + (image,), version=self.version + 1)

    def remove_at(self, index: int) -> "Session":
        """Drop the entry at ``index`` and keep the selection on the same image."""
        if not 0 <= index < len(self.images):
            raise IndexError(f"Cannot remove index {index} from session of {len(self.images)} images")
        images = self.images[:index] + self.images[index + 1 :]
        selected = self.selected_index
        if selected is not None:
            if selected == index:
                selected = None
            elif selected > index:
                selected -= 1
        return Session(images=images, selected_index=selected, version=self.version + 1)

    def select(self, index: int) -> "Session":
        if not 0 <= index < len(self.images):
            raise IndexError(f"Cannot select index {index} in session of {len(self.images)} images")
        return replace(self, selected_index=index, version=self.version + 1)

    def clear_selection(self) -> "Session":
        return replace(self, selected_index=None, version=self.version + 1)

    def delete_selected(self) -> "Session":
        """Remove the selected image and clear the selection in one step."""
        if self.selected_index is None:
            return self
        return self.remove_at(self.selected_index)

"""Validate, merge and persist a batch of captured photos."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Sequence

from loguru import logger

from ..compose.base import Compositor
from ..config import BatchPolicy
from ..errors import CompositingError, PersistenceError, PhotoMergeError, ValidationError
from ..io.gallery import Gallery, GalleryAsset
from ..models.composite import MergedImage
from ..models.session import CapturedImage

SAVED_MESSAGE = "Images merged and saved successfully!"


class ComposeState(Enum):
    IDLE = "idle"
    VALIDATING = "validating"
    REJECTED = "rejected"
    COMPOSITING = "compositing"
    SAVING = "saving"
    FAILED = "failed"
    SAVED = "saved"


@dataclass(slots=True, frozen=True)
class ComposeOutcome:
    """Terminal result of one merge-and-save attempt."""

    state: ComposeState
    message: str
    asset: Optional[GalleryAsset] = None
    merged: Optional[MergedImage] = None
    error: Optional[PhotoMergeError] = None

    @property
    def succeeded(self) -> bool:
        return self.state is ComposeState.SAVED


StateListener = Callable[[ComposeState], None]


class Composer:
    """Turns the whole captured sequence into one gallery image.

    Parameters
    ----------
    compositor:
        Layout strategy used by :meth:`merge`.
    gallery:
        Destination of :meth:`save`.
    batch_size, batch_policy:
        Count check applied before any compositing happens.
    output_format:
        Encoding of the saved merge (``png`` or ``jpg``).
    """

    def __init__(
        self,
        compositor: Compositor,
        gallery: Gallery,
        batch_size: int = 4,
        batch_policy: BatchPolicy = BatchPolicy.AT_LEAST,
        output_format: str = "png",
    ) -> None:
        self.compositor = compositor
        self.gallery = gallery
        self.batch_size = batch_size
        self.batch_policy = batch_policy
        self.output_format = output_format
        self.state = ComposeState.IDLE
        self._listeners: List[StateListener] = []

    def subscribe(self, listener: StateListener) -> None:
        self._listeners.append(listener)

    def _transition(self, state: ComposeState) -> None:
        logger.debug("Compose state {} -> {}", self.state.value, state.value)
        self.state = state
        for listener in list(self._listeners):
            listener(state)

    # ------------------------------------------------------------------
    def validate(self, images: Sequence[CapturedImage]) -> None:
        """Raise :class:`ValidationError` when ``images`` violates the batch policy."""
        count = len(images)
        if self.batch_policy is BatchPolicy.NONE:
            if count == 0:
                raise ValidationError("Please capture at least one image first!")
            return
        if count < self.batch_size:
            raise ValidationError(f"Please capture {self.batch_size} images first!")
        if self.batch_policy is BatchPolicy.EXACT and count > self.batch_size:
            extra = count - self.batch_size
            raise ValidationError(
                f"Please keep exactly {self.batch_size} images (delete {extra})!"
            )

    def merge(self, images: Sequence[CapturedImage]) -> MergedImage:
        """Validate and composite the entire sequence into one image."""
        self.validate(images)
        try:
            merged = self.compositor.compose(list(images))
        except CompositingError:
            raise
        except Exception as exc:  # noqa: BLE001
            raise CompositingError(f"{self.compositor.name} merge failed: {exc}") from exc
        logger.info(
            "Merged {} images with {} strategy into {}x{}",
            len(images),
            merged.strategy,
            merged.width,
            merged.height,
        )
        return merged

    def save(self, merged: MergedImage) -> GalleryAsset:
        """Write ``merged`` to the gallery as a new asset every time it is called."""
        try:
            return self.gallery.save_array(merged.pixels, fmt=self.output_format)
        except PersistenceError:
            raise
        except Exception as exc:  # noqa: BLE001
            raise PersistenceError(f"Saving merged image failed: {exc}") from exc

    def merge_and_save(self, images: Sequence[CapturedImage]) -> ComposeOutcome:
        """Run the full flow and always finish back in ``IDLE``."""
        try:
            self._transition(ComposeState.VALIDATING)
            try:
                self.validate(images)
            except ValidationError as exc:
                self._transition(ComposeState.REJECTED)
                logger.info("Merge rejected: {}", exc.user_message)
                return ComposeOutcome(ComposeState.REJECTED, exc.user_message, error=exc)

            self._transition(ComposeState.COMPOSITING)
            try:
                merged = self.merge(images)
            except CompositingError as exc:
                self._transition(ComposeState.FAILED)
                logger.error("Merge failed: {}", exc)
                return ComposeOutcome(ComposeState.FAILED, f"Could not merge images: {exc}", error=exc)

            self._transition(ComposeState.SAVING)
            try:
                asset = self.save(merged)
            except PersistenceError as exc:
                self._transition(ComposeState.FAILED)
                logger.error("Saving merged image failed: {}", exc)
                return ComposeOutcome(
                    ComposeState.FAILED,
                    f"Could not save merged image: {exc}",
                    merged=merged,
                    error=exc,
                )

            self._transition(ComposeState.SAVED)
            return ComposeOutcome(ComposeState.SAVED, SAVED_MESSAGE, asset=asset, merged=merged)
        finally:
            self._transition(ComposeState.IDLE)

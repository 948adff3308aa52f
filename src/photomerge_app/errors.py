"""Exception hierarchy shared by the capture and compose workflows."""
from __future__ import annotations


class PhotoMergeError(Exception):
    """Base class for all application errors."""


class CameraError(PhotoMergeError):
    """Raised when the camera cannot be opened or a frame cannot be read."""


class ValidationError(PhotoMergeError):
    """Raised when the captured batch does not satisfy the batch policy."""

    def __init__(self, user_message: str) -> None:
        super().__init__(user_message)
        self.user_message = user_message


class CompositingError(PhotoMergeError):
    """Raised when a compositor fails to produce the merged image."""


class PersistenceError(PhotoMergeError):
    """Raised when an image cannot be written to the gallery."""

"""Capture session orchestration: camera, selection and per-capture gallery copies."""
from __future__ import annotations

from typing import Callable, List, Optional

from loguru import logger

from ..errors import CameraError, PhotoMergeError
from ..io.camera import CameraCapture, CaptureOptions
from ..io.gallery import Gallery
from ..io.loader import read_image_size
from ..io.permissions import PermissionProvider, PermissionReport
from ..models.session import CapturedImage, Session

SessionListener = Callable[[Session], None]


class CaptureManager:
    """Owns the capture session and mediates camera and gallery access.

    The session is only ever replaced, never mutated, and every replacement is
    pushed to subscribed listeners.
    """

    def __init__(
        self,
        camera: CameraCapture,
        gallery: Optional[Gallery] = None,
        permissions: Optional[PermissionProvider] = None,
        capture_options: Optional[CaptureOptions] = None,
        save_captures_to_gallery: bool = True,
    ) -> None:
        self.camera = camera
        self.gallery = gallery
        self.permissions = permissions
        self.capture_options = capture_options or CaptureOptions()
        self.save_captures_to_gallery = save_captures_to_gallery
        self._session = Session()
        self._listeners: List[SessionListener] = []

    @property
    def session(self) -> Session:
        return self._session

    @property
    def images(self) -> tuple[CapturedImage, ...]:
        return self._session.images

    def subscribe(self, listener: SessionListener) -> None:
        self._listeners.append(listener)

    def _commit(self, session: Session) -> Session:
        if session is self._session:
            return session
        self._session = session
        for listener in list(self._listeners):
            listener(session)
        return session

    # ------------------------------------------------------------------
    def request_permissions(self) -> Optional[PermissionReport]:
        """Ask for camera and gallery access once; denial is reported, not enforced."""
        if self.permissions is None:
            return None
        report = PermissionReport(
            camera=self.permissions.request_camera(),
            gallery=self.permissions.request_gallery(),
        )
        if report.all_granted:
            logger.info("Camera and gallery permissions granted")
        else:
            logger.warning("Permissions denied: {}", ", ".join(report.denied()))
        return report

    def capture(self) -> Optional[CapturedImage]:
        """Take one still, append it to the session and copy it to the gallery.

        Returns ``None`` when the user cancels. Camera failures raise
        :class:`CameraError` and leave the session untouched.
        """
        try:
            result = self.camera.take_picture(self.capture_options)
        except CameraError:
            raise
        except Exception as exc:  # noqa: BLE001
            raise CameraError(f"Camera capture failed: {exc}") from exc

        if result.cancelled or result.path is None:
            logger.debug("Capture cancelled by user")
            return None

        image = CapturedImage(path=result.path)
        if result.width is not None and result.height is not None:
            image = image.with_size(result.width, result.height)
        else:
            try:
                image = image.with_size(*read_image_size(result.path))
            except FileNotFoundError:
                logger.debug("Could not read size of {}", result.path)

        self._commit(self._session.append(image))
        logger.info("Captured image {} ({} in session)", image.path.name, len(self._session))

        if self.save_captures_to_gallery and self.gallery is not None:
            self._copy_to_gallery(image)
        return image

    def _copy_to_gallery(self, image: CapturedImage) -> None:
        # Independent of the append above: a failure here is logged only.
        try:
            self.gallery.save_file(image.path)
        except PhotoMergeError as exc:
            logger.warning("Could not copy {} to gallery: {}", image.path.name, exc)

    def select(self, index: int) -> CapturedImage:
        session = self._commit(self._session.select(index))
        return session.images[index]

    def clear_selection(self) -> None:
        self._commit(self._session.clear_selection())

    def delete_selected(self) -> Optional[CapturedImage]:
        """Drop the selected image from the session; the gallery copy stays."""
        removed = self._session.selected
        if removed is None:
            return None
        self._commit(self._session.delete_selected())
        logger.info("Removed {} from session ({} left)", removed.path.name, len(self._session))
        return removed

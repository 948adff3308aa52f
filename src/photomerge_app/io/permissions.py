"""Best-effort access checks for the camera and the gallery directory."""
from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, Protocol

import cv2
from loguru import logger


class PermissionStatus(Enum):
    GRANTED = "granted"
    DENIED = "denied"

    @property
    def granted(self) -> bool:
        return self is PermissionStatus.GRANTED


@dataclass(slots=True, frozen=True)
class PermissionReport:
    """Independent status of each permission the workflow needs."""

    camera: PermissionStatus
    gallery: PermissionStatus

    @property
    def all_granted(self) -> bool:
        return self.camera.granted and self.gallery.granted

    def denied(self) -> list[str]:
        names = []
        if not self.camera.granted:
            names.append("camera")
        if not self.gallery.granted:
            names.append("gallery")
        return names


class PermissionProvider(Protocol):
    def request_camera(self) -> PermissionStatus:
        ...

    def request_gallery(self) -> PermissionStatus:
        ...


def _device_opens(index: int) -> bool:
    capture = cv2.VideoCapture(index)
    try:
        return bool(capture.isOpened())
    finally:
        capture.release()


class SystemPermissions:
    """Desktop stand-in for OS permission prompts.

    The camera counts as granted when its device opens; the gallery counts as
    granted when its directory exists (or can be created) and is writable.
    """

    def __init__(
        self,
        camera_index: int,
        gallery_dir: Path,
        device_check: Callable[[int], bool] = _device_opens,
    ) -> None:
        self.camera_index = camera_index
        self.gallery_dir = gallery_dir
        self._device_check = device_check

    def request_camera(self) -> PermissionStatus:
        if self._device_check(self.camera_index):
            return PermissionStatus.GRANTED
        logger.warning("Camera device {} is not accessible", self.camera_index)
        return PermissionStatus.DENIED

    def request_gallery(self) -> PermissionStatus:
        try:
            self.gallery_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            logger.warning("Gallery directory {} cannot be created: {}", self.gallery_dir, exc)
            return PermissionStatus.DENIED
        if not os.access(self.gallery_dir, os.W_OK):
            logger.warning("Gallery directory {} is not writable", self.gallery_dir)
            return PermissionStatus.DENIED
        return PermissionStatus.GRANTED

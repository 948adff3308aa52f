"""Camera, gallery, permission and image file capabilities."""

from .camera import CameraCapture, CaptureOptions, CaptureResult, OpenCVCamera
from .gallery import Gallery, GalleryAsset
from .permissions import PermissionReport, PermissionStatus, SystemPermissions

__all__ = [
    "CameraCapture",
    "CaptureOptions",
    "CaptureResult",
    "Gallery",
    "GalleryAsset",
    "OpenCVCamera",
    "PermissionReport",
    "PermissionStatus",
    "SystemPermissions",
]

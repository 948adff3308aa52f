"""Conversions between numpy RGB arrays and Qt image types."""
from __future__ import annotations

import numpy as np
from PyQt6.QtGui import QImage, QPixmap


def numpy_to_qimage(image: np.ndarray) -> QImage:
    if image is None:
        raise ValueError("Image data missing")
    if image.dtype != np.uint8:
        image = image.astype("uint8")
    image = np.ascontiguousarray(image)
    height, width = image.shape[:2]
    qimage = QImage(image.data, width, height, width * 3, QImage.Format.Format_RGB888)
    return qimage.copy()


def numpy_to_pixmap(image: np.ndarray) -> QPixmap:
    return QPixmap.fromImage(numpy_to_qimage(image))


def qimage_to_numpy(qimage: QImage) -> np.ndarray:
    """Copy ``qimage`` into an RGB ``uint8`` array."""
    converted = qimage.convertToFormat(QImage.Format.Format_RGB888)
    width, height = converted.width(), converted.height()
    stride = converted.bytesPerLine()
    pointer = converted.constBits()
    pointer.setsize(stride * height)
    buffer = np.frombuffer(pointer, dtype=np.uint8).reshape(height, stride)
    return buffer[:, : width * 3].reshape(height, width, 3).copy()

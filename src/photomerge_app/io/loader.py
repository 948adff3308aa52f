"""Image loading, probing and encoding utilities."""
from __future__ import annotations

from pathlib import Path
from typing import Tuple

import cv2
import numpy as np
from loguru import logger

SUPPORTED_FORMATS = {"png", "jpg", "jpeg"}


def load_image(path: Path) -> np.ndarray:
    """Load a photo as an RGB uint8 array."""
    image = cv2.imread(str(path), cv2.IMREAD_COLOR)
    if image is None:
        raise FileNotFoundError(f"Unable to read image: {path}")
    image = cv2.cvtColor(image, cv2.COLOR_BGR2RGB)
    logger.debug("Loaded image {} with shape {}", path, image.shape)
    return image


def read_image_size(path: Path) -> Tuple[int, int]:
    """Return the natural ``(width, height)`` of the image at ``path``."""
    image = cv2.imread(str(path), cv2.IMREAD_UNCHANGED)
    if image is None:
        raise FileNotFoundError(f"Unable to read image: {path}")
    height, width = image.shape[:2]
    return int(width), int(height)


def _encode_params(fmt: str, quality: float) -> list[int]:
    if fmt in {"jpg", "jpeg"}:
        return [cv2.IMWRITE_JPEG_QUALITY, int(round(max(0.0, min(1.0, quality)) * 100))]
    # PNG is lossless; quality maps to nothing but a fixed compression level.
    return [cv2.IMWRITE_PNG_COMPRESSION, 3]


def encode_image(image: np.ndarray, fmt: str = "png", quality: float = 1.0) -> bytes:
    """Encode an RGB array to ``fmt`` bytes.

    Parameters
    ----------
    image:
        RGB ``uint8`` array, or a single-channel grayscale array.
    fmt:
        ``png``, ``jpg`` or ``jpeg``.
    quality:
        In ``[0, 1]``; used for JPEG only.
    """
    fmt = fmt.lower()
    if fmt not in SUPPORTED_FORMATS:
        raise ValueError(f"Unsupported image format: {fmt}")
    if image.dtype != np.uint8:
        image = np.clip(image, 0, 255).astype(np.uint8)
    bgr = cv2.cvtColor(image, cv2.COLOR_RGB2BGR) if image.ndim == 3 else image
    ok, buffer = cv2.imencode(f".{fmt}", bgr, _encode_params(fmt, quality))
    if not ok:
        raise ValueError(f"OpenCV could not encode image as {fmt}")
    return buffer.tobytes()


def write_image(image: np.ndarray, path: Path, quality: float = 1.0) -> Path:
    """Encode ``image`` according to the suffix of ``path`` and write it."""
    fmt = path.suffix.lstrip(".").lower() or "png"
    payload = encode_image(image, fmt, quality)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(payload)
    logger.debug("Wrote {} ({} bytes)", path, len(payload))
    return path

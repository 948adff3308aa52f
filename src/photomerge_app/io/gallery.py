"""Directory-backed photo gallery.

The gallery mirrors a phone photo library: callers first register an image
file as an asset, then save that asset into the library. Every save writes a
new file, so saving the same image twice yields two independent assets. There
is no update or delete operation.
"""
from __future__ import annotations

import shutil
import tempfile
import uuid
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional

import numpy as np
from loguru import logger

from ..errors import PersistenceError
from .loader import write_image


@dataclass(slots=True, frozen=True)
class GalleryAsset:
    """Image known to the gallery; ``saved`` once it lives in the library."""

    asset_id: str
    path: Path
    saved: bool = False


class Gallery:
    """Photo library rooted at ``root``."""

    def __init__(self, root: Path, prefix: str = "photomerge") -> None:
        self.root = root
        self.prefix = prefix

    def create_asset(self, source: Path) -> GalleryAsset:
        """Register ``source`` as a pending asset."""
        if not source.is_file():
            raise PersistenceError(f"Cannot create gallery asset from missing file {source}")
        return GalleryAsset(asset_id=uuid.uuid4().hex, path=source)

    def save_to_library(self, asset: GalleryAsset) -> GalleryAsset:
        """Copy ``asset`` into the library under a fresh filename."""
        suffix = asset.path.suffix.lower() or ".png"
        target = self.root / f"{self.prefix}_{datetime.now():%Y%m%d_%H%M%S}_{asset.asset_id[:12]}{suffix}"
        try:
            self.root.mkdir(parents=True, exist_ok=True)
            shutil.copy2(asset.path, target)
        except OSError as exc:
            raise PersistenceError(f"Unable to save {asset.path.name} to gallery {self.root}: {exc}") from exc
        logger.info("Saved gallery asset {}", target)
        return GalleryAsset(asset_id=asset.asset_id, path=target, saved=True)

    def save_file(self, source: Path) -> GalleryAsset:
        return self.save_to_library(self.create_asset(source))

    def save_array(self, image: np.ndarray, fmt: str = "png", quality: float = 1.0) -> GalleryAsset:
        """Encode ``image`` to a temporary file and save it as a new asset."""
        staging_dir: Optional[Path] = None
        try:
            staging_dir = Path(tempfile.mkdtemp(prefix="photomerge-"))
            staged = write_image(image, staging_dir / f"merged.{fmt.lower()}", quality=quality)
            return self.save_file(staged)
        except (OSError, ValueError) as exc:
            raise PersistenceError(f"Unable to encode merged image as {fmt}: {exc}") from exc
        finally:
            if staging_dir is not None:
                shutil.rmtree(staging_dir, ignore_errors=True)

    def assets(self) -> list[Path]:
        """Files currently in the library, oldest name first."""
        if not self.root.is_dir():
            return []
        return sorted(path for path in self.root.iterdir() if path.is_file())

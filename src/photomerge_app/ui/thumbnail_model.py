"""Qt model exposing the captured images as thumbnails."""
from __future__ import annotations

from pathlib import Path
from typing import Dict, Optional

from PyQt6.QtCore import QAbstractListModel, QModelIndex, QSize, Qt
from PyQt6.QtGui import QIcon, QPixmap

from ..models.session import CapturedImage, Session


class ThumbnailListModel(QAbstractListModel):
    """Model backing the horizontal thumbnail strip."""

    PathRole = Qt.ItemDataRole.UserRole + 1

    def __init__(self, thumbnail_size: int = 200, parent=None) -> None:
        super().__init__(parent)
        self.thumbnail_size = thumbnail_size
        self._images: tuple[CapturedImage, ...] = ()
        self._icons: Dict[Path, QIcon] = {}

    # Qt Model API ---------------------------------------------------------
    def rowCount(self, parent: QModelIndex = QModelIndex()) -> int:  # noqa: N802
        if parent.isValid():
            return 0
        return len(self._images)

    def data(self, index: QModelIndex, role: int = Qt.ItemDataRole.DisplayRole):
        if not index.isValid() or not 0 <= index.row() < len(self._images):
            return None
        image = self._images[index.row()]
        if role == Qt.ItemDataRole.DecorationRole:
            return self._icon_for(image.path)
        if role == Qt.ItemDataRole.ToolTipRole:
            size = f" ({image.width}x{image.height})" if image.size else ""
            return f"{image.path.name}{size}"
        if role == Qt.ItemDataRole.SizeHintRole:
            return QSize(self.thumbnail_size + 2, self.thumbnail_size + 2)
        if role == self.PathRole:
            return str(image.path)
        return None

    # Mutators --------------------------------------------------------------
    def set_session(self, session: Session) -> None:
        """Replace the rows with the images of ``session``."""
        self.beginResetModel()
        self._images = session.images
        live = {image.path for image in self._images}
        self._icons = {path: icon for path, icon in self._icons.items() if path in live}
        self.endResetModel()

    def image_at(self, row: int) -> Optional[CapturedImage]:
        if 0 <= row < len(self._images):
            return self._images[row]
        return None

    def _icon_for(self, path: Path) -> QIcon:
        icon = self._icons.get(path)
        if icon is None:
            pixmap = QPixmap(str(path))
            if not pixmap.isNull():
                pixmap = pixmap.scaled(
                    self.thumbnail_size,
                    self.thumbnail_size,
                    Qt.AspectRatioMode.KeepAspectRatioByExpanding,
                    Qt.TransformationMode.SmoothTransformation,
                )
            icon = QIcon(pixmap)
            self._icons[path] = icon
        return icon

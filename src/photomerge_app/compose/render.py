"""Merge by snapshotting an off-screen copy of the thumbnail strip."""
from __future__ import annotations

from typing import List, Sequence

from loguru import logger
from PyQt6.QtCore import QEventLoop, Qt, QTimer
from PyQt6.QtGui import QPixmap
from PyQt6.QtWidgets import QApplication, QHBoxLayout, QLabel, QWidget

from ..errors import CompositingError
from ..models.composite import MergedImage, Placement
from ..models.session import CapturedImage
from ..ui.qt_images import qimage_to_numpy
from .base import Compositor


def cover_pixmap(path: str, edge: int) -> QPixmap:
    """Load ``path`` scaled to fill an ``edge`` x ``edge`` square, cropped centrally."""
    pixmap = QPixmap(path)
    if pixmap.isNull():
        raise FileNotFoundError(f"Unable to read image: {path}")
    scaled = pixmap.scaled(
        edge,
        edge,
        Qt.AspectRatioMode.KeepAspectRatioByExpanding,
        Qt.TransformationMode.SmoothTransformation,
    )
    x = (scaled.width() - edge) // 2
    y = (scaled.height() - edge) // 2
    return scaled.copy(x, y, edge, edge)


class ThumbnailSheet(QWidget):
    """Row of square thumbnails laid out like the on-screen strip."""

    def __init__(self, paths: Sequence[str], edge: int, margin: int = 1, parent=None) -> None:
        super().__init__(parent)
        self.setStyleSheet("background-color: black;")
        layout = QHBoxLayout(self)
        layout.setContentsMargins(margin, margin, margin, margin)
        layout.setSpacing(margin * 2)
        self.cells: List[QLabel] = []
        for path in paths:
            cell = QLabel()
            cell.setFixedSize(edge, edge)
            cell.setPixmap(cover_pixmap(path, edge))
            layout.addWidget(cell)
            self.cells.append(cell)


class OffscreenRenderCompositor(Compositor):
    """Render thumbnails into an invisible widget and grab it as the merge.

    Output resolution is bounded by ``thumbnail_size``. After the layout is
    activated the compositor still waits ``settle_delay_ms`` before grabbing;
    nothing confirms that painting has finished, so the delay is a bound and
    not a guarantee.
    """

    name = "render"
    requires_gui_thread = True

    def __init__(self, thumbnail_size: int = 200, settle_delay_ms: int = 40) -> None:
        super().__init__()
        self.thumbnail_size = thumbnail_size
        self.settle_delay_ms = settle_delay_ms

    def compose(self, images: Sequence[CapturedImage]) -> MergedImage:
        if not images:
            raise ValueError("No images to compose")
        if QApplication.instance() is None:
            raise CompositingError("Off-screen rendering requires a running QApplication")

        sheet = ThumbnailSheet([str(image.path) for image in images], self.thumbnail_size)
        sheet.setAttribute(Qt.WidgetAttribute.WA_DontShowOnScreen, True)
        try:
            sheet.show()
            sheet.layout().activate()
            sheet.adjustSize()
            QApplication.processEvents()
            self._settle()
            snapshot = sheet.grab()
            placements = [
                Placement(cell.x(), cell.y(), cell.width(), cell.height()) for cell in sheet.cells
            ]
        finally:
            sheet.close()
            sheet.deleteLater()

        pixels = qimage_to_numpy(snapshot.toImage())
        logger.debug("Rendered thumbnail sheet {}x{}", pixels.shape[1], pixels.shape[0])
        return MergedImage(
            pixels=pixels,
            strategy=self.name,
            sources=tuple(image.path for image in images),
            placements=tuple(placements),
        )

    def layout(self, arrays):  # pragma: no cover - compose() is overridden
        raise NotImplementedError("The render compositor works on widgets, not arrays")

    def _settle(self) -> None:
        if self.settle_delay_ms <= 0:
            return
        loop = QEventLoop()
        QTimer.singleShot(self.settle_delay_ms, loop.quit)
        loop.exec()

"""Live camera preview dialog used to take a single still."""
from __future__ import annotations

from typing import Optional

import numpy as np
from loguru import logger
from PyQt6.QtCore import Qt, QTimer
from PyQt6.QtWidgets import QDialog, QHBoxLayout, QLabel, QPushButton, QVBoxLayout, QWidget

from ..errors import CameraError
from ..io.camera import CaptureOptions, CaptureResult, OpenCVCamera
from .qt_images import numpy_to_pixmap


class CameraCaptureDialog(QDialog):
    """Shows the camera feed and returns the frame the user keeps."""

    PREVIEW_INTERVAL_MS = 33

    def __init__(self, camera: OpenCVCamera, options: CaptureOptions, parent=None) -> None:
        super().__init__(parent)
        self.setWindowTitle("Capture Image")
        self.camera = camera
        self.options = options
        self.frame: Optional[np.ndarray] = None
        self._reviewing = False

        self._timer = QTimer(self)
        self._timer.setInterval(self.PREVIEW_INTERVAL_MS)
        self._timer.timeout.connect(self._refresh_preview)

        self._build_ui()

    def _build_ui(self) -> None:
        layout = QVBoxLayout(self)
        layout.setContentsMargins(16, 16, 16, 16)
        layout.setSpacing(12)

        self.preview_label = QLabel("Starting camera...")
        self.preview_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.preview_label.setMinimumSize(640, 480)
        self.preview_label.setStyleSheet("background-color: black; color: white;")
        layout.addWidget(self.preview_label)

        buttons = QWidget()
        row = QHBoxLayout(buttons)
        row.setContentsMargins(0, 0, 0, 0)
        self.capture_button = QPushButton("Capture")
        self.retake_button = QPushButton("Retake")
        self.use_button = QPushButton("Use Photo")
        self.cancel_button = QPushButton("Cancel")
        for button in (self.capture_button, self.retake_button, self.use_button, self.cancel_button):
            row.addWidget(button)
        layout.addWidget(buttons)

        self.capture_button.clicked.connect(self._on_capture_clicked)
        self.retake_button.clicked.connect(self._on_retake_clicked)
        self.use_button.clicked.connect(self.accept)
        self.cancel_button.clicked.connect(self.reject)
        self._set_reviewing(False)

    def _set_reviewing(self, reviewing: bool) -> None:
        self._reviewing = reviewing
        self.capture_button.setVisible(not reviewing)
        self.retake_button.setVisible(reviewing)
        self.use_button.setVisible(reviewing)

    # ------------------------------------------------------------------
    def start(self) -> None:
        self.camera.open()
        self._timer.start()

    def _refresh_preview(self) -> None:
        if self._reviewing:
            return
        try:
            frame = self.camera.read_frame()
        except CameraError as exc:
            self._timer.stop()
            logger.error("Camera preview stopped: {}", exc)
            self.preview_label.setText(str(exc))
            self.capture_button.setEnabled(False)
            return
        self.frame = frame
        self._show(frame)

    def _show(self, frame: np.ndarray) -> None:
        pixmap = numpy_to_pixmap(frame).scaled(
            self.preview_label.size(),
            Qt.AspectRatioMode.KeepAspectRatio,
            Qt.TransformationMode.SmoothTransformation,
        )
        self.preview_label.setPixmap(pixmap)

    def _on_capture_clicked(self) -> None:
        if self.frame is None:
            return
        if self.options.allow_editing:
            self._set_reviewing(True)
            self._show(self.frame)
            return
        self.accept()

    def _on_retake_clicked(self) -> None:
        self._set_reviewing(False)

    def done(self, result: int) -> None:
        self._timer.stop()
        super().done(result)


class DialogCamera:
    """Camera capability that asks the user through :class:`CameraCaptureDialog`."""

    def __init__(self, camera: OpenCVCamera, parent=None) -> None:
        self.camera = camera
        self.parent = parent

    def take_picture(self, options: CaptureOptions) -> CaptureResult:
        dialog = CameraCaptureDialog(self.camera, options, self.parent)
        try:
            dialog.start()
            accepted = dialog.exec() == QDialog.DialogCode.Accepted
            frame = dialog.frame
            if not accepted or frame is None:
                return CaptureResult.cancel()
            return self.camera.write_still(frame, options)
        finally:
            dialog.frame = None
            dialog.deleteLater()
            self.camera.close()

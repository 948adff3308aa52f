"""Main application window."""
from __future__ import annotations

from typing import Optional

from loguru import logger
from PyQt6.QtCore import QModelIndex, QSize, Qt, QTimer
from PyQt6.QtGui import QAction, QKeySequence, QPixmap
from PyQt6.QtWidgets import (
    QAbstractItemView,
    QComboBox,
    QHBoxLayout,
    QLabel,
    QListView,
    QMainWindow,
    QMessageBox,
    QPushButton,
    QStatusBar,
    QVBoxLayout,
    QWidget,
)

from ..compose.factory import compositor_for_config
from ..config import AppConfig, MergeStrategy
from ..errors import CameraError
from ..io.camera import CaptureOptions, OpenCVCamera
from ..io.gallery import Gallery
from ..io.permissions import SystemPermissions
from ..models.session import Session
from ..services.capture_manager import CaptureManager
from ..services.composer import ComposeOutcome, Composer, ComposeState
from ..workers.task_runner import FunctionTask, TaskRunner
from .camera_dialog import DialogCamera
from .thumbnail_model import ThumbnailListModel

PERMISSION_WARNING = "Sorry, we need camera and media library permissions to access the images!"


class MainWindow(QMainWindow):
    """Capture screen: camera button, thumbnail strip, merge button and preview."""

    def __init__(self, config: AppConfig) -> None:
        super().__init__()
        self.setWindowTitle("PhotoMerge")
        self.resize(1100, 760)

        self.config = config
        self._task_runner = TaskRunner()
        self._active_tasks: set[FunctionTask] = set()

        self.gallery = Gallery(config.gallery_dir)
        self._camera = OpenCVCamera(config.camera_index, config.capture_dir)
        self.capture_manager = CaptureManager(
            camera=DialogCamera(self._camera, self),
            gallery=self.gallery,
            permissions=SystemPermissions(config.camera_index, config.gallery_dir),
            capture_options=CaptureOptions(quality=1.0, allow_editing=False, include_metadata=False),
            save_captures_to_gallery=config.save_captures_to_gallery,
        )
        self.composer = Composer(
            compositor=compositor_for_config(config),
            gallery=self.gallery,
            batch_size=config.batch_size,
            batch_policy=config.batch_policy,
            output_format=config.output_format,
        )
        self.thumbnail_model = ThumbnailListModel(config.thumbnail_size, self)

        self._build_ui()
        self._create_menu_bar()
        self._connect_signals()
        self._on_session_changed(self.capture_manager.session)

        QTimer.singleShot(0, self._request_permissions)
        logger.info("UI initialised")

    # ------------------------------------------------------------------
    def _build_ui(self) -> None:
        central = QWidget()
        layout = QVBoxLayout(central)
        layout.setContentsMargins(20, 20, 20, 20)
        layout.setSpacing(10)

        self.capture_button = QPushButton("Capture Image")
        layout.addWidget(self.capture_button, alignment=Qt.AlignmentFlag.AlignHCenter)

        edge = self.config.thumbnail_size
        self.thumbnail_view = QListView()
        self.thumbnail_view.setModel(self.thumbnail_model)
        self.thumbnail_view.setViewMode(QListView.ViewMode.IconMode)
        self.thumbnail_view.setFlow(QListView.Flow.LeftToRight)
        self.thumbnail_view.setWrapping(False)
        self.thumbnail_view.setMovement(QListView.Movement.Static)
        self.thumbnail_view.setIconSize(QSize(edge, edge))
        self.thumbnail_view.setSpacing(1)
        self.thumbnail_view.setFixedHeight(edge + 30)
        self.thumbnail_view.setSelectionMode(QAbstractItemView.SelectionMode.SingleSelection)
        layout.addWidget(self.thumbnail_view)

        merge_row = QWidget()
        merge_layout = QHBoxLayout(merge_row)
        merge_layout.setContentsMargins(0, 0, 0, 0)
        self.strategy_combo = QComboBox()
        for strategy in MergeStrategy:
            self.strategy_combo.addItem(strategy.label, strategy)
        self.strategy_combo.setCurrentIndex(list(MergeStrategy).index(self.config.strategy))
        self.merge_button = QPushButton("Merge Images")
        merge_layout.addStretch(1)
        merge_layout.addWidget(QLabel("Layout"))
        merge_layout.addWidget(self.strategy_combo)
        merge_layout.addWidget(self.merge_button)
        merge_layout.addStretch(1)
        layout.addWidget(merge_row)

        layout.addWidget(self._build_preview_panel(), stretch=1)

        self.setCentralWidget(central)
        self.setStatusBar(QStatusBar())

    def _build_preview_panel(self) -> QWidget:
        self.preview_panel = QWidget()
        self.preview_panel.setStyleSheet("background-color: black;")
        panel_layout = QVBoxLayout(self.preview_panel)
        panel_layout.setContentsMargins(20, 20, 20, 20)

        button_row = QHBoxLayout()
        self.delete_button = QPushButton("Delete")
        self.delete_button.setObjectName("deleteButton")
        self.close_preview_button = QPushButton("Close")
        button_row.addWidget(self.delete_button)
        button_row.addStretch(1)
        button_row.addWidget(self.close_preview_button)
        panel_layout.addLayout(button_row)

        self.preview_label = QLabel()
        self.preview_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.preview_label.setMinimumHeight(240)
        panel_layout.addWidget(self.preview_label, stretch=1)

        self.preview_panel.setVisible(False)
        return self.preview_panel

    def _create_menu_bar(self) -> None:
        menu = self.menuBar().addMenu("&File")

        capture_action = QAction("Capture Image", self)
        capture_action.setShortcut(QKeySequence("Ctrl+T"))
        capture_action.triggered.connect(self._on_capture_clicked)
        menu.addAction(capture_action)

        merge_action = QAction("Merge Images", self)
        merge_action.setShortcut(QKeySequence("Ctrl+M"))
        merge_action.triggered.connect(self._on_merge_clicked)
        menu.addAction(merge_action)

        menu.addSeparator()
        quit_action = QAction("Quit", self)
        quit_action.setShortcut(QKeySequence.StandardKey.Quit)
        quit_action.triggered.connect(self.close)
        menu.addAction(quit_action)

    def _connect_signals(self) -> None:
        self.capture_manager.subscribe(self._on_session_changed)
        self.capture_button.clicked.connect(self._on_capture_clicked)
        self.merge_button.clicked.connect(self._on_merge_clicked)
        self.thumbnail_view.clicked.connect(self._on_thumbnail_clicked)
        self.delete_button.clicked.connect(self._on_delete_clicked)
        self.close_preview_button.clicked.connect(lambda: self.capture_manager.clear_selection())

    # ------------------------------------------------------------------
    # Permissions and capture

    def _request_permissions(self) -> None:
        report = self.capture_manager.request_permissions()
        if report is not None and not report.all_granted:
            QMessageBox.warning(self, "Permissions", PERMISSION_WARNING)

    def _on_capture_clicked(self) -> None:
        try:
            image = self.capture_manager.capture()
        except CameraError as exc:
            logger.error("Camera capture failed: {}", exc)
            QMessageBox.critical(self, "Camera", f"Could not capture an image:\n{exc}")
            return
        if image is not None:
            self.statusBar().showMessage(f"Captured {image.path.name}", 3000)

    def _on_thumbnail_clicked(self, index: QModelIndex) -> None:
        if index.isValid():
            self.capture_manager.select(index.row())

    def _on_delete_clicked(self) -> None:
        removed = self.capture_manager.delete_selected()
        if removed is not None:
            self.statusBar().showMessage(f"Removed {removed.path.name}", 3000)

    def _on_session_changed(self, session: Session) -> None:
        self.thumbnail_model.set_session(session)
        selected = session.selected
        if selected is None:
            self.thumbnail_view.clearSelection()
            self.preview_label.clear()
            self.preview_panel.setVisible(False)
        else:
            self.thumbnail_view.setCurrentIndex(self.thumbnail_model.index(session.selected_index))
            pixmap = QPixmap(str(selected.path))
            self.preview_label.setPixmap(
                pixmap.scaled(
                    self.preview_label.width() * 8 // 10 or 640,
                    max(self.preview_label.height(), 240),
                    Qt.AspectRatioMode.KeepAspectRatio,
                    Qt.TransformationMode.SmoothTransformation,
                )
            )
            self.preview_panel.setVisible(True)
        self.statusBar().showMessage(f"{len(session)} image(s) captured")

    # ------------------------------------------------------------------
    # Merge and save

    def _selected_strategy(self) -> MergeStrategy:
        strategy = self.strategy_combo.currentData()
        return strategy if isinstance(strategy, MergeStrategy) else self.config.strategy

    def _on_merge_clicked(self) -> None:
        if not self.merge_button.isEnabled():
            return
        self.composer.compositor = compositor_for_config(self.config, self._selected_strategy())
        images = self.capture_manager.images
        task = FunctionTask(self.composer.merge_and_save, images)
        self.merge_button.setEnabled(False)
        self.statusBar().showMessage("Merging images...")
        self._bind_task(task, self._on_merge_finished)
        if self.composer.compositor.requires_gui_thread:
            self._task_runner.run_inline(task)
        else:
            self._task_runner.submit(task)

    def _on_merge_finished(self, outcome: ComposeOutcome) -> None:
        if outcome.state is ComposeState.SAVED:
            logger.info("Merged image saved to {}", outcome.asset.path if outcome.asset else "?")
            QMessageBox.information(self, "Merge Images", outcome.message)
        elif outcome.state is ComposeState.REJECTED:
            QMessageBox.warning(self, "Merge Images", outcome.message)
        else:
            QMessageBox.critical(self, "Merge Images", outcome.message)

    def _bind_task(self, task: FunctionTask, on_success) -> None:
        self._active_tasks.add(task)
        task.signals.finished.connect(lambda result, t=task: self._on_task_success(t, result, on_success))
        task.signals.failed.connect(lambda error, t=task: self._on_task_failure(t, error))

    def _on_task_success(self, task: FunctionTask, result, on_success) -> None:
        self._active_tasks.discard(task)
        self.merge_button.setEnabled(True)
        try:
            on_success(result)
        finally:
            self.statusBar().clearMessage()

    def _on_task_failure(self, task: FunctionTask, error: Optional[BaseException]) -> None:
        self._active_tasks.discard(task)
        self.merge_button.setEnabled(True)
        self.statusBar().clearMessage()
        logger.error("Background task failed: {}", error)
        QMessageBox.critical(self, "Error", f"Operation failed:\n{error}")

"""Application bootstrap utilities."""
from __future__ import annotations

import sys
from typing import Optional

from loguru import logger
from PyQt6.QtCore import Qt
from PyQt6.QtGui import QGuiApplication
from PyQt6.QtWidgets import QApplication

from .config import load_config
from .logging import configure_logging
from .ui.main_window import MainWindow
from .ui.theme import apply_theme


def _configure_high_dpi() -> None:
    """Configure high-DPI handling before QApplication instantiation."""
    QGuiApplication.setHighDpiScaleFactorRoundingPolicy(
        Qt.HighDpiScaleFactorRoundingPolicy.PassThrough
    )


def main(argv: Optional[list[str]] = None) -> int:
    """Launch the PhotoMerge desktop application."""
    config = load_config()
    configure_logging(config.log_level, config.log_file)
    logger.info(
        "Starting PhotoMerge: strategy={}, batch={} ({}), gallery={}",
        config.strategy,
        config.batch_size,
        config.batch_policy,
        config.gallery_dir,
    )
    argv = list(sys.argv if argv is None else argv)

    _configure_high_dpi()
    app = QApplication(argv)
    apply_theme(app)

    window = MainWindow(config)
    window.show()

    return app.exec()


if __name__ == "__main__":
    sys.exit(main())

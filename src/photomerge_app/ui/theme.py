"""Application-wide theme helpers."""
from __future__ import annotations

from PyQt6.QtGui import QColor, QPalette

BUTTON_STYLE = """
QPushButton {
    background-color: #808080;
    color: white;
    font-weight: bold;
    padding: 10px;
    border-radius: 5px;
}
QPushButton:disabled {
    background-color: #4a4a4a;
    color: #9a9a9a;
}
QPushButton#deleteButton {
    background-color: #a33a3a;
}
"""


def build_palette() -> QPalette:
    palette = QPalette()
    palette.setColor(QPalette.ColorRole.Window, QColor(250, 250, 250))
    palette.setColor(QPalette.ColorRole.WindowText, QColor(20, 20, 20))
    palette.setColor(QPalette.ColorRole.Base, QColor(255, 255, 255))
    palette.setColor(QPalette.ColorRole.AlternateBase, QColor(240, 240, 240))
    palette.setColor(QPalette.ColorRole.Text, QColor(20, 20, 20))
    palette.setColor(QPalette.ColorRole.Highlight, QColor(76, 110, 245))
    palette.setColor(QPalette.ColorRole.HighlightedText, QColor(255, 255, 255))
    return palette


def apply_theme(app) -> None:
    """Apply the light palette and the grey rounded button style."""
    app.setPalette(build_palette())
    app.setStyle("Fusion")
    app.setStyleSheet(BUTTON_STYLE)

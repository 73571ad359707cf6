"""Theme mode state, persistence and palettes."""
from __future__ import annotations

import enum
import logging
from typing import Callable, Dict, List

from PyQt6.QtCore import Qt
from PyQt6.QtGui import QColor, QGuiApplication, QPalette
from PyQt6.QtWidgets import QApplication

from .preferences import PreferenceStore

logger = logging.getLogger(__name__)

THEME_KEY = "theme_mode"


class ThemeMode(enum.Enum):
    SYSTEM = "system"
    LIGHT = "light"
    DARK = "dark"

    @classmethod
    def parse(cls, value) -> "ThemeMode":
        try:
            return cls(value)
        except ValueError:
            return cls.SYSTEM


class ThemeController:
    """Holds the current theme mode and persists changes."""

    def __init__(self, store: PreferenceStore) -> None:
        self.store = store
        self._listeners: List[Callable[[ThemeMode], None]] = []
        self.mode = ThemeMode.parse(store.get(THEME_KEY, ThemeMode.SYSTEM.value))

    def subscribe(self, listener: Callable[[ThemeMode], None]) -> None:
        self._listeners.append(listener)

    def is_dark(self, system_dark: bool) -> bool:
        if self.mode is ThemeMode.SYSTEM:
            return system_dark
        return self.mode is ThemeMode.DARK

    def set_mode(self, mode: ThemeMode) -> None:
        self.mode = mode
        for listener in list(self._listeners):
            listener(mode)
        try:
            self.store.set(THEME_KEY, mode.value)
        except OSError:
            logger.exception("Could not save theme mode %s", mode.value)

    def toggle(self) -> ThemeMode:
        if self.mode is ThemeMode.LIGHT:
            self.set_mode(ThemeMode.DARK)
        else:
            self.set_mode(ThemeMode.LIGHT)
        return self.mode


DARK_COLORS: Dict[str, str] = {
    "window": "#0f111a",
    "text": "#e8ebf2",
    "base": "#141724",
    "alternate": "#191c2c",
    "tooltip": "#1f2336",
    "button": "#1c2030",
    "border": "#2a2d3f",
    "muted": "#9ca3c7",
    "accent": "#3f7cff",
    "accent_hover": "#5b92ff",
    "accent_border": "#345fcc",
}

LIGHT_COLORS: Dict[str, str] = {
    "window": "#f5f6f8",
    "text": "#323338",
    "base": "#ffffff",
    "alternate": "#eef0f4",
    "tooltip": "#ffffff",
    "button": "#e6e9ef",
    "border": "#d0d4e4",
    "muted": "#676879",
    "accent": "#0073ea",
    "accent_hover": "#1f8bff",
    "accent_border": "#005bb8",
}


def system_prefers_dark() -> bool:
    hints = QGuiApplication.styleHints()
    return hints is not None and hints.colorScheme() == Qt.ColorScheme.Dark


def _palette(colors: Dict[str, str], base: QPalette) -> QPalette:
    palette = QPalette(base)
    palette.setColor(QPalette.ColorRole.Window, QColor(colors["window"]))
    palette.setColor(QPalette.ColorRole.WindowText, QColor(colors["text"]))
    palette.setColor(QPalette.ColorRole.Base, QColor(colors["base"]))
    palette.setColor(QPalette.ColorRole.AlternateBase, QColor(colors["alternate"]))
    palette.setColor(QPalette.ColorRole.ToolTipBase, QColor(colors["tooltip"]))
    palette.setColor(QPalette.ColorRole.ToolTipText, QColor(colors["text"]))
    palette.setColor(QPalette.ColorRole.Text, QColor(colors["text"]))
    palette.setColor(QPalette.ColorRole.Button, QColor(colors["button"]))
    palette.setColor(QPalette.ColorRole.ButtonText, QColor(colors["text"]))
    palette.setColor(QPalette.ColorRole.Highlight, QColor(colors["accent"]))
    palette.setColor(QPalette.ColorRole.HighlightedText, QColor("#ffffff"))
    return palette


def stylesheet(colors: Dict[str, str]) -> str:
    return "\n".join(
        [
            f"QWidget {{ font-size: 11pt; color: {colors['text']}; }}",
            f"QMainWindow, QWidget {{ background-color: {colors['window']}; }}",
            (
                f"QPushButton {{ background-color: {colors['accent']}; color: #ffffff;"
                " padding: 6px 16px; border-radius: 6px; font-weight: 600;"
                f" border: 1px solid {colors['accent_border']}; }}"
            ),
            f"QPushButton:hover {{ background-color: {colors['accent_hover']}; }}",
            (
                f"QPushButton:disabled {{ background-color: {colors['border']};"
                f" color: {colors['muted']}; border: 1px solid {colors['border']}; }}"
            ),
            (
                "QLineEdit, QComboBox, QTextEdit, QListWidget, QTreeWidget, QSpinBox {"
                f" background-color: {colors['base']}; border: 1px solid {colors['border']};"
                f" border-radius: 8px; padding: 6px; color: {colors['text']}; }}"
            ),
            (
                f"QGroupBox {{ border: 1px solid {colors['border']}; border-radius: 10px;"
                f" margin-top: 20px; padding: 12px; background: {colors['base']}; }}"
            ),
            (
                "QGroupBox::title { subcontrol-origin: margin; left: 18px;"
                f" padding: 0 6px; background: transparent; font-weight: 600; color: {colors['muted']}; }}"
            ),
            f"QTabWidget::pane {{ border: 1px solid {colors['border']}; border-radius: 10px; }}",
            (
                "QTabBar::tab { padding: 10px 18px; margin: 0 2px; border-radius: 6px;"
                f" background: {colors['base']}; }}"
            ),
            (
                f"QTabBar::tab:selected {{ background: {colors['button']};"
                f" border: 1px solid {colors['accent']}; }}"
            ),
        ]
    )


def apply_theme(app: QApplication, dark: bool) -> None:
    colors = DARK_COLORS if dark else LIGHT_COLORS
    app.setPalette(_palette(colors, app.palette()))
    app.setStyleSheet(stylesheet(colors))

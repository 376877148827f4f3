"""
Look and preferences of the Coinche scoresheet.

Two themes (dark by default, light) built around the team colours, and the
scorebook folder last opened. Both are stored with QSettings.
"""
from __future__ import annotations

from pathlib import Path

from PySide6 import QtCore, QtWidgets

SETTINGS_ORG = "CoincheScorer"
SETTINGS_APP = "CoincheScorer"
THEME_KEY = "theme"
SCOREBOOK_FOLDER_KEY = "scorebook_folder"

DEFAULT_SCOREBOOK_FOLDER = str(Path.home() / "coinche-scorebook")

DARK = "dark"
LIGHT = "light"

BLUE_TEAM_COLOR = "#0342AF"
RED_TEAM_COLOR = "#D9534F"

# Checked announcement buttons take the accent colour; disabled ones (held by
# the other team) are greyed out.
_TEMPLATE = """
QWidget {{ background-color: {base}; color: {text}; }}
QGroupBox {{
    background-color: {panel};
    border: 1px solid {border};
    border-radius: 6px;
    margin-top: 14px;
    padding-top: 12px;
    font-weight: bold;
}}
QGroupBox::title {{ subcontrol-origin: margin; left: 8px; padding: 0 4px; }}
QPushButton {{
    background-color: {button};
    border: 1px solid {border};
    border-radius: 4px;
    padding: 5px 10px;
    text-align: left;
}}
QPushButton:checked {{ background-color: {accent}; color: #ffffff; }}
QPushButton:disabled {{ color: {muted}; }}
QSpinBox, QComboBox, QLineEdit {{
    background-color: {button};
    border: 1px solid {border};
    border-radius: 4px;
    padding: 3px;
}}
QListWidget {{ background-color: {panel}; border: 1px solid {border}; }}
QListWidget::item {{ padding: 4px; border-bottom: 1px solid {border}; }}
QLabel, QCheckBox {{ background-color: transparent; }}
"""

STYLESHEETS = {
    DARK: _TEMPLATE.format(
        base="#262626",
        panel="#303030",
        button="#3a3a3a",
        border="#4a4a4a",
        text="#e6e6e6",
        muted="#7a7a7a",
        accent=BLUE_TEAM_COLOR,
    ),
    LIGHT: _TEMPLATE.format(
        base="#f4f4f4",
        panel="#ffffff",
        button="#e8e8e8",
        border="#c8c8c8",
        text="#1e1e1e",
        muted="#a0a0a0",
        accent=BLUE_TEAM_COLOR,
    ),
}


def _settings() -> QtCore.QSettings:
    return QtCore.QSettings(SETTINGS_ORG, SETTINGS_APP)


def get_saved_theme() -> str:
    theme = _settings().value(THEME_KEY, DARK, type=str)
    return theme if theme in STYLESHEETS else DARK


def save_theme(theme: str) -> None:
    _settings().setValue(THEME_KEY, theme)


def get_scorebook_folder() -> str:
    return _settings().value(SCOREBOOK_FOLDER_KEY, DEFAULT_SCOREBOOK_FOLDER, type=str)


def save_scorebook_folder(path: str) -> None:
    _settings().setValue(SCOREBOOK_FOLDER_KEY, path)


def apply_theme(app: QtWidgets.QApplication, theme: str) -> None:
    app.setStyleSheet(STYLESHEETS.get(theme, STYLESHEETS[DARK]))

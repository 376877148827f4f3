"""
Coinche scorer GUI entrypoint.

A main window hosting one scoresheet at a time, backed by a scorebook folder.
Each scored round is appended to the scorebook's round log; ending a match
records it in the scorebook and saves it.
"""
from __future__ import annotations

from pathlib import Path
from typing import Optional
import uuid

from PySide6 import QtCore, QtGui, QtWidgets

from coinche.match import ArchivedRound, Lineup, end_match
from coinche.scorebook import Scorebook, append_round_log, scorebook_load, scorebook_save

from .match_dialog import NewMatchDialog
from .scoresheet import ScoresheetWidget
from .themes import (
    DARK,
    LIGHT,
    apply_theme,
    get_saved_theme,
    get_scorebook_folder,
    save_scorebook_folder,
    save_theme,
)


class MainWindow(QtWidgets.QMainWindow):
    def __init__(self, scorebook_dir: Optional[str] = None) -> None:
        super().__init__()
        self.setWindowTitle("Coinche Scorer")
        self.resize(900, 900)

        self._book_dir = Path(scorebook_dir or get_scorebook_folder())
        self._book: Scorebook = scorebook_load(self._book_dir)
        self._sheet: Optional[ScoresheetWidget] = None
        self._match_id: Optional[str] = None

        self._setup_menu()
        self._show_placeholder()
        self._update_title()

    def _setup_menu(self) -> None:
        menu = self.menuBar()

        file_menu = menu.addMenu("&File")
        open_action = file_menu.addAction("Open scorebook...")
        open_action.triggered.connect(self._on_open_scorebook)
        file_menu.addSeparator()
        quit_action = file_menu.addAction("Quit")
        quit_action.triggered.connect(self.close)

        match_menu = menu.addMenu("&Match")
        new_action = match_menu.addAction("New match...")
        new_action.triggered.connect(self._on_new_match)
        self._end_action = match_menu.addAction("End match")
        self._end_action.triggered.connect(self._on_end_match)
        self._end_action.setEnabled(False)

        view_menu = menu.addMenu("&View")
        theme_group = QtGui.QActionGroup(self)
        theme_group.setExclusive(True)
        for label, theme in (("Dark", DARK), ("Light", LIGHT)):
            action = view_menu.addAction(label)
            action.setCheckable(True)
            action.setChecked(get_saved_theme() == theme)
            action.triggered.connect(lambda _checked=False, t=theme: self._on_theme_changed(t))
            theme_group.addAction(action)

    def _show_placeholder(self) -> None:
        label = QtWidgets.QLabel("Start a new match from the Match menu.")
        label.setAlignment(QtCore.Qt.AlignCenter)
        self.setCentralWidget(label)

    def _update_title(self) -> None:
        self.setWindowTitle(f"Coinche Scorer - {self._book_dir.name} ({len(self._book.matches)} matches)")

    def scorebook(self) -> Scorebook:
        return self._book

    def sheet(self) -> Optional[ScoresheetWidget]:
        return self._sheet

    def _on_open_scorebook(self) -> None:
        path = QtWidgets.QFileDialog.getExistingDirectory(
            self, "Select scorebook folder", str(self._book_dir)
        )
        if not path:
            return
        try:
            book = scorebook_load(path)
        except (ValueError, KeyError) as exc:
            QtWidgets.QMessageBox.warning(self, "Open scorebook", f"Cannot read scorebook: {exc}")
            return
        self._book_dir = Path(path)
        self._book = book
        save_scorebook_folder(path)
        self._close_sheet()
        self._update_title()

    def _on_new_match(self) -> None:
        dialog = NewMatchDialog(self._book, self)
        accepted = dialog.exec() == QtWidgets.QDialog.Accepted
        # Players added in the dialog are kept even if the match is cancelled.
        scorebook_save(self._book_dir, self._book)
        lineup = dialog.lineup()
        if accepted and lineup is not None:
            self.start_sheet(lineup)

    def start_sheet(self, lineup: Lineup) -> ScoresheetWidget:
        names = {pid: self._book.trigramme(pid) for pid in lineup.players()}
        self._sheet = ScoresheetWidget(lineup, names=names, rules=self._book.rules)
        self._sheet.round_scored.connect(self._on_round_scored)
        self._match_id = uuid.uuid4().hex
        self.setCentralWidget(self._sheet)
        self._end_action.setEnabled(True)
        return self._sheet

    def _close_sheet(self) -> None:
        self._sheet = None
        self._match_id = None
        self._end_action.setEnabled(False)
        self._show_placeholder()

    def _on_round_scored(self, index: int, archived: ArchivedRound) -> None:
        if self._match_id:
            append_round_log(self._book_dir, self._match_id, index, archived)

    def _on_end_match(self) -> None:
        if self._sheet is None:
            return
        answer = QtWidgets.QMessageBox.question(self, "End match", "Record this match and close the sheet?")
        if answer != QtWidgets.QMessageBox.Yes:
            return
        self.finish_match()

    def finish_match(self) -> bool:
        """Record the current match. Returns False when it cannot be closed (tie)."""
        if self._sheet is None:
            return False
        try:
            record = end_match(self._sheet.match(), match_id=self._match_id)
        except ValueError as exc:
            QtWidgets.QMessageBox.warning(self, "End match", str(exc))
            return False
        self._book.record_match(record)
        scorebook_save(self._book_dir, self._book)
        print(f"Recorded match {record.id}: blue={record.blue_score} red={record.red_score}")
        self._close_sheet()
        self._update_title()
        return True

    def _on_theme_changed(self, theme: str) -> None:
        save_theme(theme)
        app = QtWidgets.QApplication.instance()
        if app:
            apply_theme(app, theme)


def main(argv: Optional[list[str]] = None) -> None:
    import sys

    app = QtWidgets.QApplication(argv or sys.argv)
    theme = get_saved_theme()
    apply_theme(app, theme)
    win = MainWindow()
    win.show()
    sys.exit(app.exec())


if __name__ == "__main__":
    main()

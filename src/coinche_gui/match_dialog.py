"""
New Match dialog.

Shows the scorebook's players, lets the user register a new trigramme,
and picks two players per team.
"""
from __future__ import annotations

from typing import Dict, Optional

from PySide6 import QtWidgets

from coinche.match import Lineup
from coinche.rules import Team
from coinche.scorebook import Scorebook

SEATS = ((Team.BLUE, 0), (Team.BLUE, 1), (Team.RED, 0), (Team.RED, 1))


class NewMatchDialog(QtWidgets.QDialog):
    """
    Dialog for choosing the four players of a new match.

    New players are added to ``book`` directly; the caller saves the scorebook.
    """

    def __init__(self, book: Scorebook, parent: Optional[QtWidgets.QWidget] = None) -> None:
        super().__init__(parent)
        self._book = book
        self._lineup: Optional[Lineup] = None
        self._combos: Dict[tuple, QtWidgets.QComboBox] = {}
        self.setWindowTitle("New Match")
        self.setMinimumSize(380, 300)
        self._setup_ui()

    def _setup_ui(self) -> None:
        layout = QtWidgets.QVBoxLayout(self)

        for team in (Team.BLUE, Team.RED):
            group = QtWidgets.QGroupBox(f"{team.value.capitalize()} Team")
            form = QtWidgets.QFormLayout(group)
            for seat in (0, 1):
                combo = QtWidgets.QComboBox()
                self._combos[(team, seat)] = combo
                form.addRow(f"Player {seat + 1}:", combo)
            layout.addWidget(group)
        self._fill_combos()

        add_group = QtWidgets.QGroupBox("Add player")
        add_row = QtWidgets.QHBoxLayout(add_group)
        self._edit_trigramme = QtWidgets.QLineEdit()
        self._edit_trigramme.setMaxLength(3)
        self._edit_trigramme.setPlaceholderText("ABC")
        add_row.addWidget(self._edit_trigramme)
        btn_add = QtWidgets.QPushButton("Add")
        btn_add.clicked.connect(self._on_add_player)
        add_row.addWidget(btn_add)
        layout.addWidget(add_group)

        buttons = QtWidgets.QDialogButtonBox(
            QtWidgets.QDialogButtonBox.Ok | QtWidgets.QDialogButtonBox.Cancel
        )
        buttons.accepted.connect(self._on_accept)
        buttons.rejected.connect(self.reject)
        layout.addWidget(buttons)

    def _fill_combos(self) -> None:
        players = sorted(self._book.players.values(), key=lambda p: p.trigramme)
        for i, seat in enumerate(SEATS):
            combo = self._combos[seat]
            previous = combo.currentData()
            combo.clear()
            for p in players:
                combo.addItem(p.trigramme, p.id)
            idx = combo.findData(previous) if previous else -1
            if idx < 0 and i < len(players):
                idx = i
            combo.setCurrentIndex(idx)

    def _on_add_player(self) -> None:
        try:
            self._book.add_player(self._edit_trigramme.text())
        except ValueError as exc:
            QtWidgets.QMessageBox.warning(self, "Add player", str(exc))
            return
        self._edit_trigramme.clear()
        self._fill_combos()

    def _on_accept(self) -> None:
        ids = [self._combos[seat].currentData() for seat in SEATS]
        if None in ids:
            QtWidgets.QMessageBox.warning(self, "New match", "Four players are needed.")
            return
        if len(set(ids)) != len(ids):
            QtWidgets.QMessageBox.warning(self, "New match", "A player can only appear once in a match.")
            return
        self._lineup = Lineup(blue=(ids[0], ids[1]), red=(ids[2], ids[3]))
        self.accept()

    def lineup(self) -> Optional[Lineup]:
        """The chosen lineup once the dialog was accepted."""
        return self._lineup

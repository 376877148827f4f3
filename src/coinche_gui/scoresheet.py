"""
Scoresheet widget: bidding form, round entry with announcements, running totals and history.

The widget only renders the current workflow phase and forwards user actions to
the pure transitions in ``coinche.match``.
"""
from __future__ import annotations

from typing import Dict, Optional, Tuple, Union

from PySide6 import QtCore, QtWidgets

from coinche.announcements import CATALOG, AnnouncementKind, can_declare
from coinche.match import (
    ArchivedRound,
    BiddingPhase,
    Lineup,
    MatchState,
    ScoringPhase,
    remove_announcement,
    set_last_trick,
    set_points,
    start_match,
    submit_bid,
    submit_scores,
    toggle_announcement,
    update_bid,
)
from coinche.rules import CONTRACTS, DEFAULT_RULES, SUITS, Contract, ScoringRules, Suit, Team, other_team

from .themes import BLUE_TEAM_COLOR, RED_TEAM_COLOR

Phase = Union[BiddingPhase, ScoringPhase]

TEAM_LABELS = {Team.BLUE: "Blue Team", Team.RED: "Red Team"}
PAGE_BIDDING = 0
PAGE_SCORING = 1


def describe_round(rnd: ArchivedRound) -> str:
    """One history line, e.g. ``Blue Team - 80 ♥ (coinche) - made | Blue 180 - Red 60``."""
    bid = rnd.bid
    text = f"{TEAM_LABELS[bid.team]} - {bid.contract.value} {bid.suit.value}"
    if bid.is_surcoinched:
        text += " (surcoinche)"
    elif bid.is_coinched:
        text += " (coinche)"
    text += " - made" if rnd.result.contract_fulfilled else " - failed"
    text += f" | Blue {rnd.result.blue_points} - Red {rnd.result.red_points}"
    for team, sheet in ((Team.BLUE, rnd.blue), (Team.RED, rnd.red)):
        declared = list(sheet.announcements)
        if sheet.belote_rebelote:
            declared.append("Belote-Rebelote")
        if declared:
            text += f"\n    {TEAM_LABELS[team]}: {', '.join(declared)}"
    return text


class ScoresheetWidget(QtWidgets.QWidget):
    """One match sheet. Emits ``round_scored(index, ArchivedRound)`` after each round."""

    round_scored = QtCore.Signal(int, object)

    def __init__(
        self,
        lineup: Lineup,
        names: Optional[Dict[str, str]] = None,
        rules: ScoringRules = DEFAULT_RULES,
        parent: QtWidgets.QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self._phase: Phase = start_match(lineup, rules)
        self._names = names or {}
        self._ann_buttons: Dict[Tuple[Team, str], QtWidgets.QPushButton] = {}
        self._ann_minus: Dict[Tuple[Team, str], QtWidgets.QPushButton] = {}
        self._spins: Dict[Team, QtWidgets.QSpinBox] = {}
        self._last_trick: Dict[Team, QtWidgets.QCheckBox] = {}
        self._setup_ui()
        self._load_bid_widgets()
        self._refresh()

    def phase(self) -> Phase:
        return self._phase

    def match(self) -> MatchState:
        return self._phase.match

    # ----- layout -----

    def _setup_ui(self) -> None:
        layout = QtWidgets.QVBoxLayout(self)

        totals_row = QtWidgets.QHBoxLayout()
        self._total_labels: Dict[Team, QtWidgets.QLabel] = {}
        for team, color in ((Team.BLUE, BLUE_TEAM_COLOR), (Team.RED, RED_TEAM_COLOR)):
            box = QtWidgets.QGroupBox(TEAM_LABELS[team])
            box_layout = QtWidgets.QVBoxLayout(box)
            players = " - ".join(self._names.get(pid, pid) for pid in self.match().lineup.team_players(team))
            box_layout.addWidget(QtWidgets.QLabel(players))
            total = QtWidgets.QLabel("0")
            total.setStyleSheet(f"font-size: 28px; font-weight: bold; color: {color};")
            box_layout.addWidget(total)
            self._total_labels[team] = total
            totals_row.addWidget(box)
        layout.addLayout(totals_row)

        self._stack = QtWidgets.QStackedWidget()
        self._stack.addWidget(self._make_bidding_page())
        self._stack.addWidget(self._make_scoring_page())
        layout.addWidget(self._stack)

        history_group = QtWidgets.QGroupBox("Round history")
        history_layout = QtWidgets.QVBoxLayout(history_group)
        self._history = QtWidgets.QListWidget()
        history_layout.addWidget(self._history)
        layout.addWidget(history_group)

    def _make_bidding_page(self) -> QtWidgets.QWidget:
        page = QtWidgets.QGroupBox("Bidding")
        form = QtWidgets.QFormLayout(page)

        self._combo_team = QtWidgets.QComboBox()
        for team in Team:
            self._combo_team.addItem(TEAM_LABELS[team], team.value)
        form.addRow("Team:", self._combo_team)

        self._combo_contract = QtWidgets.QComboBox()
        for contract in CONTRACTS:
            self._combo_contract.addItem(contract.value, contract.value)
        form.addRow("Contract:", self._combo_contract)

        self._combo_suit = QtWidgets.QComboBox()
        for suit in SUITS:
            self._combo_suit.addItem(suit.value, suit.value)
        form.addRow("Suit:", self._combo_suit)

        self._check_coinche = QtWidgets.QCheckBox("Coinche (x2)")
        self._check_surcoinche = QtWidgets.QCheckBox("Surcoinche (x4)")
        self._check_coinche.toggled.connect(self._on_coinche_toggled)
        self._check_surcoinche.toggled.connect(self._on_surcoinche_toggled)
        form.addRow(self._check_coinche)
        form.addRow(self._check_surcoinche)

        btn_bid = QtWidgets.QPushButton("Submit bid")
        btn_bid.clicked.connect(self._on_submit_bid)
        form.addRow(btn_bid)
        return page

    def _make_scoring_page(self) -> QtWidgets.QWidget:
        page = QtWidgets.QGroupBox("Round points")
        layout = QtWidgets.QVBoxLayout(page)
        self._label_bid = QtWidgets.QLabel()
        layout.addWidget(self._label_bid)

        teams_row = QtWidgets.QHBoxLayout()
        for team in Team:
            teams_row.addWidget(self._make_team_entry(team))
        layout.addLayout(teams_row)

        btn_score = QtWidgets.QPushButton("Submit round")
        btn_score.clicked.connect(self._on_submit_scores)
        layout.addWidget(btn_score)
        return page

    def _make_team_entry(self, team: Team) -> QtWidgets.QWidget:
        box = QtWidgets.QGroupBox(TEAM_LABELS[team])
        layout = QtWidgets.QVBoxLayout(box)

        form = QtWidgets.QFormLayout()
        spin = QtWidgets.QSpinBox()
        spin.setRange(0, 500)
        spin.valueChanged.connect(lambda value, t=team: self._on_points_changed(t, value))
        self._spins[team] = spin
        form.addRow("Points:", spin)
        check = QtWidgets.QCheckBox("Last trick (+10)")
        check.clicked.connect(lambda checked=False, t=team: self._on_last_trick(t))
        self._last_trick[team] = check
        form.addRow(check)
        layout.addLayout(form)

        grid = QtWidgets.QGridLayout()
        for row, entry in enumerate(CATALOG):
            btn = QtWidgets.QPushButton()
            btn.setCheckable(True)
            btn.clicked.connect(lambda checked=False, t=team, title=entry.title: self._on_toggle(t, title))
            grid.addWidget(btn, row, 0)
            self._ann_buttons[(team, entry.title)] = btn
            if entry.kind == AnnouncementKind.REPEATABLE:
                minus = QtWidgets.QPushButton("-")
                minus.setFixedWidth(32)
                minus.clicked.connect(lambda checked=False, t=team, title=entry.title: self._on_remove(t, title))
                grid.addWidget(minus, row, 1)
                self._ann_minus[(team, entry.title)] = minus
        layout.addLayout(grid)
        return box

    # ----- sync -----

    def _load_bid_widgets(self) -> None:
        """Reset the bidding form to the bid of the current bidding phase."""
        if not isinstance(self._phase, BiddingPhase):
            return
        bid = self._phase.bid
        for widget in (self._combo_team, self._combo_contract, self._combo_suit,
                       self._check_coinche, self._check_surcoinche):
            widget.blockSignals(True)
        self._combo_team.setCurrentIndex(self._combo_team.findData(bid.team.value))
        self._combo_contract.setCurrentIndex(self._combo_contract.findData(bid.contract.value))
        self._combo_suit.setCurrentIndex(self._combo_suit.findData(bid.suit.value))
        self._check_coinche.setChecked(bid.is_coinched)
        self._check_surcoinche.setChecked(bid.is_surcoinched)
        for widget in (self._combo_team, self._combo_contract, self._combo_suit,
                       self._check_coinche, self._check_surcoinche):
            widget.blockSignals(False)

    def _refresh(self) -> None:
        match = self.match()
        for team, label in self._total_labels.items():
            label.setText(str(match.total_for(team)))

        if isinstance(self._phase, BiddingPhase):
            self._stack.setCurrentIndex(PAGE_BIDDING)
            return

        self._stack.setCurrentIndex(PAGE_SCORING)
        phase = self._phase
        bid = phase.bid
        self._label_bid.setText(f"{TEAM_LABELS[bid.team]} bid {bid.contract.value} {bid.suit.value}")
        for team in Team:
            own = phase.sheet(team)
            other = phase.sheet(other_team(team))
            spin = self._spins[team]
            spin.blockSignals(True)
            spin.setValue(own.points)
            spin.blockSignals(False)
            self._last_trick[team].setChecked(own.last_trick)
            for entry in CATALOG:
                btn = self._ann_buttons[(team, entry.title)]
                if entry.kind == AnnouncementKind.MUTEX_SINGLETON:
                    held = own.belote_rebelote
                    text = entry.title
                else:
                    count = own.announcements.count(entry.title)
                    held = count > 0
                    text = entry.title
                    if entry.kind == AnnouncementKind.REPEATABLE and count:
                        text = f"{entry.title} ({count})"
                btn.setText(f"{text} - {entry.points} pts")
                btn.setChecked(held)
                btn.setEnabled(held or can_declare(entry.title, other.announcements, other.belote_rebelote))
                minus = self._ann_minus.get((team, entry.title))
                if minus is not None:
                    minus.setEnabled(held)

    # ----- handlers -----

    def _on_coinche_toggled(self, checked: bool) -> None:
        if not checked and self._check_surcoinche.isChecked():
            self._check_surcoinche.setChecked(False)

    def _on_surcoinche_toggled(self, checked: bool) -> None:
        if checked and not self._check_coinche.isChecked():
            self._check_coinche.setChecked(True)

    def _on_submit_bid(self) -> None:
        if not isinstance(self._phase, BiddingPhase):
            return
        phase = update_bid(
            self._phase,
            team=Team(self._combo_team.currentData()),
            contract=Contract(self._combo_contract.currentData()),
            suit=Suit(self._combo_suit.currentData()),
            is_coinched=self._check_coinche.isChecked(),
            is_surcoinched=self._check_surcoinche.isChecked(),
        )
        self._phase = submit_bid(phase)
        self._refresh()

    def _on_points_changed(self, team: Team, value: int) -> None:
        if isinstance(self._phase, ScoringPhase):
            self._phase = set_points(self._phase, team, value)

    def _on_last_trick(self, team: Team) -> None:
        if isinstance(self._phase, ScoringPhase):
            self._phase = set_last_trick(self._phase, team)
            self._refresh()

    def _on_toggle(self, team: Team, title: str) -> None:
        if isinstance(self._phase, ScoringPhase):
            self._phase = toggle_announcement(self._phase, team, title)
            self._refresh()

    def _on_remove(self, team: Team, title: str) -> None:
        if isinstance(self._phase, ScoringPhase):
            self._phase = remove_announcement(self._phase, team, title)
            self._refresh()

    def _on_submit_scores(self) -> None:
        if not isinstance(self._phase, ScoringPhase):
            return
        try:
            phase, archived = submit_scores(self._phase)
        except ValueError as exc:
            QtWidgets.QMessageBox.warning(self, "Round", str(exc))
            return
        self._phase = phase
        self._history.insertItem(0, describe_round(archived))
        self._load_bid_widgets()
        self._refresh()
        self.round_scored.emit(len(phase.match.rounds) - 1, archived)


__all__ = ["ScoresheetWidget", "describe_round"]

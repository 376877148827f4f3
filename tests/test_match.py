"""Tests for the bidding/scoring workflow of a match."""

import pytest

from coinche.match import (
    BiddingPhase,
    Lineup,
    ScoringPhase,
    end_match,
    leading_team,
    remove_announcement,
    round_input,
    set_last_trick,
    set_points,
    start_match,
    submit_bid,
    submit_scores,
    toggle_announcement,
    update_bid,
)
from coinche.rules import Contract, ScoringRules, Suit, Team


def _make_lineup() -> Lineup:
    return Lineup(blue=("p1", "p2"), red=("p3", "p4"))


def _make_scoring(**bid_changes) -> ScoringPhase:
    phase = start_match(_make_lineup())
    if bid_changes:
        phase = update_bid(phase, **bid_changes)
    return submit_bid(phase)


def _play_round(phase: BiddingPhase, blue: int, red: int, last: Team, **bid_changes) -> BiddingPhase:
    scoring = submit_bid(update_bid(phase, **bid_changes) if bid_changes else phase)
    scoring = set_points(scoring, Team.BLUE, blue)
    scoring = set_points(scoring, Team.RED, red)
    scoring = set_last_trick(scoring, last)
    nxt, _ = submit_scores(scoring)
    return nxt


def test_start_match():
    phase = start_match(_make_lineup())
    assert isinstance(phase, BiddingPhase)
    assert phase.match.rounds == ()
    assert phase.match.blue_total == 0 and phase.match.red_total == 0
    assert phase.bid.contract == Contract.C80


def test_start_match_rejects_duplicate_players():
    with pytest.raises(ValueError):
        start_match(Lineup(blue=("p1", "p2"), red=("p2", "p3")))


def test_update_bid_coinche_rules():
    phase = start_match(_make_lineup())
    phase = update_bid(phase, team=Team.RED, contract=Contract.C120, suit=Suit.SPADES)
    assert phase.bid.team == Team.RED
    assert phase.bid.suit == Suit.SPADES

    phase = update_bid(phase, is_surcoinched=True)
    assert phase.bid.is_coinched and phase.bid.is_surcoinched

    phase = update_bid(phase, is_coinched=False)
    assert not phase.bid.is_coinched and not phase.bid.is_surcoinched


def test_transitions_do_not_mutate_input():
    phase = start_match(_make_lineup())
    update_bid(phase, contract=Contract.C150)
    assert phase.bid.contract == Contract.C80


def test_set_points_rejects_negative():
    with pytest.raises(ValueError):
        set_points(_make_scoring(), Team.BLUE, -10)


def test_last_trick_is_exclusive_and_toggles():
    phase = set_last_trick(_make_scoring(), Team.BLUE)
    assert phase.blue.last_trick and not phase.red.last_trick
    phase = set_last_trick(phase, Team.RED)
    assert phase.red.last_trick and not phase.blue.last_trick
    phase = set_last_trick(phase, Team.RED)
    assert not phase.red.last_trick and not phase.blue.last_trick


def test_toggle_repeatable_adds_instances():
    phase = _make_scoring()
    phase = toggle_announcement(phase, Team.BLUE, "Tierce")
    phase = toggle_announcement(phase, Team.BLUE, "Tierce")
    assert phase.blue.announcements == ("Tierce", "Tierce")
    phase = remove_announcement(phase, Team.BLUE, "Tierce")
    assert phase.blue.announcements == ("Tierce",)


def test_toggle_carre_is_exclusive_between_teams():
    phase = toggle_announcement(_make_scoring(), Team.BLUE, "Carré de 9")
    assert phase.blue.announcements == ("Carré de 9",)
    refused = toggle_announcement(phase, Team.RED, "Carré de 9")
    assert refused == phase
    phase = toggle_announcement(phase, Team.BLUE, "Carré de 9")
    assert phase.blue.announcements == ()
    phase = toggle_announcement(phase, Team.RED, "Carré de 9")
    assert phase.red.announcements == ("Carré de 9",)


def test_toggle_belote_is_a_flag_for_one_team():
    phase = toggle_announcement(_make_scoring(), Team.RED, "Belote-Rebelote")
    assert phase.red.belote_rebelote
    assert phase.red.announcements == ()
    assert toggle_announcement(phase, Team.BLUE, "Belote-Rebelote") == phase
    phase = toggle_announcement(phase, Team.RED, "Belote-Rebelote")
    assert not phase.red.belote_rebelote


def test_toggle_unknown_title_raises():
    with pytest.raises(ValueError):
        toggle_announcement(_make_scoring(), Team.BLUE, "Quinte")


def test_remove_missing_announcement_is_noop():
    phase = _make_scoring()
    assert remove_announcement(phase, Team.RED, "Cent") == phase


def test_round_input_mirrors_phase():
    phase = _make_scoring(team=Team.RED, contract=Contract.C100, is_coinched=True)
    phase = set_points(phase, Team.RED, 100)
    phase = toggle_announcement(phase, Team.RED, "Cent")
    rnd = round_input(phase)
    assert rnd.declaring_team == Team.RED
    assert rnd.contract == Contract.C100
    assert rnd.is_coinched and not rnd.is_surcoinched
    assert rnd.red_points == 100
    assert rnd.red_announcements == ("Cent",)


def test_submit_scores_archives_and_accumulates():
    phase = start_match(_make_lineup())
    phase = _play_round(phase, 90, 62, Team.BLUE)
    assert phase.match.blue_total == 180
    assert phase.match.red_total == 60
    assert len(phase.match.rounds) == 1

    phase = _play_round(phase, 122, 40, Team.BLUE, team=Team.RED, contract=Contract.C100)
    assert phase.match.blue_total == 180 + 260
    assert phase.match.red_total == 60
    assert phase.match.rounds[1].result.contract_fulfilled is False
    assert leading_team(phase.match) == Team.BLUE


def test_submit_scores_resets_bid():
    phase = start_match(_make_lineup())
    phase = _play_round(phase, 90, 62, Team.BLUE, contract=Contract.C90, is_coinched=True)
    assert phase.bid.contract == Contract.C80
    assert not phase.bid.is_coinched


def test_submit_scores_uses_match_rules():
    phase = start_match(_make_lineup(), ScoringRules(last_trick_bonus=0))
    phase = _play_round(phase, 90, 72, Team.BLUE)
    # 80 + 90 = 170; 162 - 90 = 72 -> 70
    assert phase.match.blue_total == 170
    assert phase.match.red_total == 70


def test_submit_scores_rejects_invalid_declarations():
    phase = _make_scoring()
    phase = toggle_announcement(phase, Team.BLUE, "Carré de Rois")
    # Bypass the toggle guard to build an inconsistent sheet
    phase = type(phase)(match=phase.match, bid=phase.bid, blue=phase.blue, red=phase.blue)
    with pytest.raises(ValueError, match="both teams"):
        submit_scores(phase)


def test_end_match_records_winners():
    phase = _play_round(start_match(_make_lineup()), 90, 62, Team.BLUE)
    record = end_match(phase.match, match_id="m1", played_at="2024-01-01T00:00:00+00:00")
    assert record.id == "m1"
    assert record.winners == ("p1", "p2")
    assert record.losers == ("p3", "p4")
    assert record.blue_score == 180 and record.red_score == 60
    assert len(record.rounds) == 1


def test_end_match_tie_raises():
    phase = start_match(_make_lineup())
    assert leading_team(phase.match) is None
    with pytest.raises(ValueError, match="Tied"):
        end_match(phase.match)

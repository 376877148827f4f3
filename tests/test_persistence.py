"""Tests for scorebook serialization to and from JSON-compatible dicts."""

import json

from coinche.match import (
    Lineup,
    end_match,
    set_last_trick,
    set_points,
    start_match,
    submit_bid,
    submit_scores,
    toggle_announcement,
    update_bid,
)
from coinche.persistence import (
    SCHEMA_VERSION,
    archived_round_from_dict,
    archived_round_to_dict,
    match_from_dict,
    match_to_dict,
    scorebook_from_dict,
    scorebook_from_json,
    scorebook_to_dict,
    scorebook_to_json,
)
from coinche.rules import Contract, ScoringRules, Suit, Team
from coinche.stats import MatchRecord, Player


def _make_live_record() -> MatchRecord:
    phase = start_match(Lineup(blue=("p1", "p2"), red=("p3", "p4")))
    phase = update_bid(phase, team=Team.RED, contract=Contract.C90, suit=Suit.CLUBS, is_coinched=True)
    scoring = submit_bid(phase)
    scoring = set_points(scoring, Team.RED, 150)
    scoring = set_points(scoring, Team.BLUE, 12)
    scoring = set_last_trick(scoring, Team.RED)
    scoring = toggle_announcement(scoring, Team.RED, "Tierce")
    scoring = toggle_announcement(scoring, Team.BLUE, "Belote-Rebelote")
    phase, _ = submit_scores(scoring)
    return end_match(phase.match, match_id="m1", played_at="2024-03-01T21:00:00+00:00")


def test_archived_round_dict_uses_plain_values():
    record = _make_live_record()
    d = archived_round_to_dict(record.rounds[0])
    assert d["bid"] == {
        "team": "red",
        "contract": "90",
        "suit": "♣",
        "is_coinched": True,
        "is_surcoinched": False,
    }
    assert d["red"]["announcements"] == ["Tierce"]
    assert d["blue"]["belote_rebelote"] is True
    json.dumps(d)
    assert archived_round_from_dict(d) == record.rounds[0]


def test_match_dict_keeps_rounds():
    record = _make_live_record()
    restored = match_from_dict(match_to_dict(record))
    assert restored == record
    assert restored.rounds == record.rounds
    assert restored.winners == ("p3", "p4")


def test_match_from_dict_defaults_for_hand_entered_results():
    restored = match_from_dict({"id": "x", "winners": ["a", "b"], "losers": ["c", "d"]})
    assert restored.rounds == ()
    assert restored.blue_score == 0
    assert restored.played_at == ""


def test_scorebook_dict_metadata_and_rules():
    rules = ScoringRules(capot_value=500)
    d = scorebook_to_dict([Player("p1", "ABC")], [], rules)
    assert d["schema_version"] == SCHEMA_VERSION
    assert "exported_at" in d
    assert d["rules"]["capot_value"] == 500
    data = scorebook_from_dict(d)
    assert data["rules"] == rules
    assert data["players"] == [Player("p1", "ABC")]
    assert data["matches"] == []


def test_scorebook_from_dict_fills_missing_rules():
    data = scorebook_from_dict({"players": [], "matches": []})
    assert data["rules"] == ScoringRules()


def test_scorebook_json_string():
    record = _make_live_record()
    players = [Player(f"p{i}", tri) for i, tri in enumerate(("AAA", "BBB", "CCC", "DDD"), start=1)]
    s = scorebook_to_json(players, [record])
    assert "Belote-Rebelote" not in s
    data = scorebook_from_json(s)
    assert data["players"] == players
    assert data["matches"] == [record]

"""Tests for scorebook save/load, export/import JSON, round log and admin edits."""

import json
from pathlib import Path

import pytest

from coinche.match import Lineup, set_last_trick, set_points, start_match, submit_bid, submit_scores
from coinche.rules import ScoringRules, Team
from coinche.scorebook import (
    LOGS_DIR,
    ROUND_LOG_FILE,
    SCOREBOOK_JSON,
    Scorebook,
    append_round_log,
    load_round_log,
    scorebook_export_json,
    scorebook_import_json,
    scorebook_load,
    scorebook_save,
)
from coinche.stats import MatchRecord


def _make_book() -> Scorebook:
    book = Scorebook()
    for tri in ("AAA", "BBB", "CCC", "DDD"):
        book.add_player(tri)
    return book


def _ids(book: Scorebook, *trigrammes: str) -> tuple:
    return tuple(book.player_by_trigramme(t).id for t in trigrammes)


def _make_record(book: Scorebook, match_id: str, day: int, winners=("AAA", "BBB"), losers=("CCC", "DDD")) -> MatchRecord:
    return MatchRecord(
        id=match_id,
        played_at=f"2024-02-{day:02d}T20:00:00+00:00",
        blue_score=1010,
        red_score=820,
        winners=_ids(book, *winners),
        losers=_ids(book, *losers),
    )


def test_add_player_normalizes_and_validates():
    book = Scorebook()
    player = book.add_player(" abc ")
    assert player.trigramme == "ABC"
    assert book.players[player.id] == player
    with pytest.raises(ValueError):
        book.add_player("ABC")
    with pytest.raises(ValueError):
        book.add_player("AB")
    with pytest.raises(ValueError):
        book.add_player("AB1")


def test_player_lookup():
    book = _make_book()
    assert book.player_by_trigramme("bbb").trigramme == "BBB"
    with pytest.raises(KeyError):
        book.player_by_trigramme("ZZZ")
    assert book.trigramme("missing") == "?"


def test_record_match_checks_lineup():
    book = _make_book()
    book.record_match(_make_record(book, "m1", 1))
    with pytest.raises(ValueError):
        book.record_match(_make_record(book, "m1", 2))
    with pytest.raises(ValueError):
        book.record_match(_make_record(book, "m2", 2, winners=("AAA", "BBB"), losers=("AAA", "DDD")))
    bad = MatchRecord("m3", "2024-02-03", 1, 0, ("ghost", _ids(book, "AAA")[0]), _ids(book, "CCC", "DDD"))
    with pytest.raises(KeyError):
        book.record_match(bad)
    assert len(book.matches) == 1


def test_update_and_delete_match():
    book = _make_book()
    book.record_match(_make_record(book, "m1", 1))
    updated = book.update_match("m1", blue_score=900)
    assert updated.blue_score == 900
    assert book.matches[0].blue_score == 900
    with pytest.raises(ValueError):
        book.update_match("m1", id="other")
    with pytest.raises(KeyError):
        book.update_match("nope", blue_score=1)
    book.delete_match("m1")
    assert book.matches == []
    with pytest.raises(KeyError):
        book.delete_match("m1")


def test_recent_matches_and_pages():
    book = _make_book()
    for day in (3, 1, 5, 2, 4):
        book.record_match(_make_record(book, f"m{day}", day))
    book.record_match(_make_record(book, "other", 6, winners=("AAA", "CCC"), losers=("BBB", "DDD")))
    aaa = _ids(book, "AAA")[0]
    assert [m.id for m in book.recent_matches(aaa, limit=3)] == ["other", "m5", "m4"]
    assert [m.id for m in book.matches_page(1, page_size=4)] == ["other", "m5", "m4", "m3"]
    assert [m.id for m in book.matches_page(2, page_size=4)] == ["m2", "m1"]
    assert book.matches_page(3, page_size=4) == []
    with pytest.raises(ValueError):
        book.matches_page(0)


def test_stats_recomputed_from_history():
    book = _make_book()
    book.record_match(_make_record(book, "m1", 1))
    book.record_match(_make_record(book, "m2", 2, winners=("CCC", "DDD"), losers=("AAA", "BBB")))
    stats = book.stats()
    aaa = _ids(book, "AAA")[0]
    assert stats[aaa].games_played == 2
    assert stats[aaa].win_percentage == 50.0
    book.delete_match("m2")
    assert book.stats()[aaa].win_percentage == 100.0


def test_save_and_load(tmp_path):
    book = _make_book()
    book.rules = ScoringRules(rounding_threshold=5)
    book.record_match(_make_record(book, "m1", 1))
    scorebook_save(tmp_path / "club", book)

    assert (tmp_path / "club" / SCOREBOOK_JSON).exists()
    assert (tmp_path / "club" / LOGS_DIR).is_dir()
    loaded = scorebook_load(tmp_path / "club")
    assert loaded.players == book.players
    assert loaded.matches == book.matches
    assert loaded.rules.rounding_threshold == 5


def test_load_missing_gives_empty_book(tmp_path):
    book = scorebook_load(tmp_path / "nothing")
    assert book.players == {}
    assert book.matches == []


def test_export_import_json(tmp_path):
    book = _make_book()
    book.record_match(_make_record(book, "m1", 1))
    out = tmp_path / "export" / "club.json"
    scorebook_export_json(out, book)
    assert json.loads(out.read_text(encoding="utf-8"))["type"] == "coinche_scorebook_export"
    imported = scorebook_import_json(out)
    assert imported.players == book.players
    assert imported.matches == book.matches


def test_import_rejects_other_json(tmp_path):
    path = tmp_path / "other.json"
    path.write_text(json.dumps({"type": "something_else"}), encoding="utf-8")
    with pytest.raises(ValueError, match="Not a Coinche scorebook"):
        scorebook_import_json(path)


def test_round_log(tmp_path):
    scoring = submit_bid(start_match(Lineup(blue=("a", "b"), red=("c", "d"))))
    scoring = set_last_trick(set_points(scoring, Team.BLUE, 90), Team.BLUE)
    phase, archived = submit_scores(scoring)

    assert load_round_log(tmp_path) == []
    append_round_log(tmp_path, "m1", 0, archived)
    append_round_log(tmp_path, "m2", 0, archived)
    append_round_log(tmp_path, "m1", 1, archived)

    assert (Path(tmp_path) / LOGS_DIR / ROUND_LOG_FILE).exists()
    entries = load_round_log(tmp_path, match_id="m1")
    assert [e["round_index"] for e in entries] == [0, 1]
    assert entries[0]["round"]["result"]["blue_points"] == 180
    assert "timestamp" in entries[0]
    assert len(load_round_log(tmp_path)) == 3

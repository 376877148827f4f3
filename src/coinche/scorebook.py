"""
Scorebook save/load: the community's players and match history.

A scorebook is a directory containing:
- scorebook.json: scoring rules, players, finished matches
- logs/: rounds.jsonl (one line per round scored live)

Export to a single JSON file is supported for sharing between devices.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
import json
from pathlib import Path
import re
from typing import Any, Dict, List, Optional
import uuid

from .match import ArchivedRound
from .persistence import (
    archived_round_to_dict,
    scorebook_from_dict,
    scorebook_to_dict,
)
from .rules import DEFAULT_RULES, ScoringRules
from .stats import MatchRecord, Player, PlayerStats, all_player_stats

SCOREBOOK_JSON = "scorebook.json"
LOGS_DIR = "logs"
ROUND_LOG_FILE = "rounds.jsonl"
EXPORT_TYPE = "coinche_scorebook_export"

_TRIGRAMME = re.compile(r"^[A-Z]{3}$")


@dataclass
class Scorebook:
    """Players and match history of one community."""

    rules: ScoringRules = DEFAULT_RULES
    players: Dict[str, Player] = field(default_factory=dict)
    matches: List[MatchRecord] = field(default_factory=list)

    def add_player(self, trigramme: str) -> Player:
        code = trigramme.strip().upper()
        if not _TRIGRAMME.match(code):
            raise ValueError(f"A trigramme is exactly three letters: {trigramme!r}")
        if any(p.trigramme == code for p in self.players.values()):
            raise ValueError(f"Trigramme already taken: {code}")
        player = Player(id=uuid.uuid4().hex, trigramme=code)
        self.players[player.id] = player
        return player

    def player_by_trigramme(self, trigramme: str) -> Player:
        code = trigramme.strip().upper()
        for p in self.players.values():
            if p.trigramme == code:
                return p
        raise KeyError(code)

    def trigramme(self, player_id: str) -> str:
        player = self.players.get(player_id)
        return player.trigramme if player else "?"

    def _check_lineup(self, record: MatchRecord) -> None:
        ids = record.players()
        if len(set(ids)) != len(ids):
            raise ValueError("A player can only appear once in a match")
        unknown = [pid for pid in ids if pid not in self.players]
        if unknown:
            raise KeyError(unknown[0])

    def record_match(self, record: MatchRecord) -> None:
        self._check_lineup(record)
        if any(m.id == record.id for m in self.matches):
            raise ValueError(f"Match already recorded: {record.id}")
        self.matches.append(record)

    def _index_of(self, match_id: str) -> int:
        for i, m in enumerate(self.matches):
            if m.id == match_id:
                return i
        raise KeyError(match_id)

    def update_match(self, match_id: str, **changes: Any) -> MatchRecord:
        """Correct a recorded match (scores, lineups). The id cannot change."""
        if "id" in changes:
            raise ValueError("A match id cannot be changed")
        i = self._index_of(match_id)
        updated = replace(self.matches[i], **changes)
        self._check_lineup(updated)
        self.matches[i] = updated
        return updated

    def delete_match(self, match_id: str) -> None:
        del self.matches[self._index_of(match_id)]

    def _newest_first(self) -> List[MatchRecord]:
        return sorted(self.matches, key=lambda m: m.played_at, reverse=True)

    def recent_matches(self, player_id: str, limit: int = 5) -> List[MatchRecord]:
        return [m for m in self._newest_first() if m.involves(player_id)][:limit]

    def matches_page(self, page: int, page_size: int = 10) -> List[MatchRecord]:
        """1-based page of the history, newest first."""
        if page < 1:
            raise ValueError(f"Pages start at 1, got {page}")
        start = (page - 1) * page_size
        return self._newest_first()[start:start + page_size]

    def stats(self) -> Dict[str, PlayerStats]:
        return all_player_stats(list(self.players), self.matches)


def _book_payload(book: Scorebook) -> Dict[str, Any]:
    return scorebook_to_dict(list(book.players.values()), book.matches, book.rules)


def _book_from_payload(payload: Dict[str, Any]) -> Scorebook:
    data = scorebook_from_dict(payload)
    return Scorebook(
        rules=data["rules"],
        players={p.id: p for p in data["players"]},
        matches=list(data["matches"]),
    )


def scorebook_save(book_dir: Path | str, book: Scorebook) -> None:
    """Write the scorebook to ``book_dir`` (created if needed)."""
    book_dir = Path(book_dir)
    book_dir.mkdir(parents=True, exist_ok=True)
    (book_dir / LOGS_DIR).mkdir(exist_ok=True)
    with (book_dir / SCOREBOOK_JSON).open("w", encoding="utf-8") as f:
        json.dump(_book_payload(book), f, indent=2, ensure_ascii=False)


def scorebook_load(book_dir: Path | str) -> Scorebook:
    """Load a scorebook; a directory without scorebook.json gives an empty book."""
    path = Path(book_dir) / SCOREBOOK_JSON
    if not path.exists():
        return Scorebook()
    with path.open("r", encoding="utf-8") as f:
        payload = json.load(f)
    return _book_from_payload(payload)


def scorebook_export_json(json_path: Path | str, book: Scorebook) -> None:
    """Export the whole scorebook to a single JSON file."""
    json_path = Path(json_path)
    payload = _book_payload(book)
    payload["type"] = EXPORT_TYPE
    json_path.parent.mkdir(parents=True, exist_ok=True)
    with json_path.open("w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2, ensure_ascii=False)


def scorebook_import_json(json_path: Path | str) -> Scorebook:
    with Path(json_path).open("r", encoding="utf-8") as f:
        payload = json.load(f)
    if payload.get("type") != EXPORT_TYPE:
        raise ValueError("Not a Coinche scorebook export JSON")
    return _book_from_payload(payload)


def append_round_log(
    book_dir: Path | str,
    match_id: str,
    round_index: int,
    archived: ArchivedRound,
) -> None:
    """Append one log entry for a round scored live."""
    log_path = Path(book_dir) / LOGS_DIR / ROUND_LOG_FILE
    log_path.parent.mkdir(parents=True, exist_ok=True)
    entry = {
        "match_id": match_id,
        "round_index": round_index,
        "round": archived_round_to_dict(archived),
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
    with log_path.open("a", encoding="utf-8") as f:
        f.write(json.dumps(entry, ensure_ascii=False) + "\n")


def load_round_log(book_dir: Path | str, match_id: Optional[str] = None) -> List[Dict[str, Any]]:
    """Load round log entries, optionally only those of one match."""
    log_path = Path(book_dir) / LOGS_DIR / ROUND_LOG_FILE
    if not log_path.exists():
        return []
    entries = []
    with log_path.open("r", encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if line:
                entry = json.loads(line)
                if match_id is None or entry.get("match_id") == match_id:
                    entries.append(entry)
    return entries


__all__ = [
    "Scorebook",
    "append_round_log",
    "load_round_log",
    "scorebook_export_json",
    "scorebook_import_json",
    "scorebook_load",
    "scorebook_save",
]

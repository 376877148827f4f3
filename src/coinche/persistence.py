"""
Scorebook serialization for save/load and import/export.

Converts players, match records and archived rounds to and from
JSON-compatible dicts.
"""
from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any, Dict, List

from .match import ArchivedRound, Bid, TeamSheet
from .rules import DEFAULT_RULES, Contract, ScoringRules, Suit, Team, rules_from_dict, rules_to_dict
from .scoring import RoundResult
from .stats import MatchRecord, Player

SCHEMA_VERSION = 1


def player_to_dict(player: Player) -> Dict[str, Any]:
    return {"id": player.id, "trigramme": player.trigramme}


def player_from_dict(d: Dict[str, Any]) -> Player:
    return Player(id=d["id"], trigramme=d["trigramme"])


def _bid_to_dict(bid: Bid) -> Dict[str, Any]:
    return {
        "team": bid.team.value,
        "contract": bid.contract.value,
        "suit": bid.suit.value,
        "is_coinched": bid.is_coinched,
        "is_surcoinched": bid.is_surcoinched,
    }


def _bid_from_dict(d: Dict[str, Any]) -> Bid:
    return Bid(
        team=Team(d.get("team", "blue")),
        contract=Contract(d.get("contract", "80")),
        suit=Suit(d.get("suit", Suit.HEARTS.value)),
        is_coinched=bool(d.get("is_coinched", False)),
        is_surcoinched=bool(d.get("is_surcoinched", False)),
    )


def _sheet_to_dict(sheet: TeamSheet) -> Dict[str, Any]:
    return {
        "points": sheet.points,
        "last_trick": sheet.last_trick,
        "announcements": list(sheet.announcements),
        "belote_rebelote": sheet.belote_rebelote,
    }


def _sheet_from_dict(d: Dict[str, Any]) -> TeamSheet:
    return TeamSheet(
        points=int(d.get("points", 0)),
        last_trick=bool(d.get("last_trick", False)),
        announcements=tuple(d.get("announcements", [])),
        belote_rebelote=bool(d.get("belote_rebelote", False)),
    )


def archived_round_to_dict(rnd: ArchivedRound) -> Dict[str, Any]:
    return {
        "bid": _bid_to_dict(rnd.bid),
        "blue": _sheet_to_dict(rnd.blue),
        "red": _sheet_to_dict(rnd.red),
        "result": {
            "blue_points": rnd.result.blue_points,
            "red_points": rnd.result.red_points,
            "contract_fulfilled": rnd.result.contract_fulfilled,
        },
    }


def archived_round_from_dict(d: Dict[str, Any]) -> ArchivedRound:
    res = d.get("result", {})
    return ArchivedRound(
        bid=_bid_from_dict(d.get("bid", {})),
        blue=_sheet_from_dict(d.get("blue", {})),
        red=_sheet_from_dict(d.get("red", {})),
        result=RoundResult(
            blue_points=int(res.get("blue_points", 0)),
            red_points=int(res.get("red_points", 0)),
            contract_fulfilled=bool(res.get("contract_fulfilled", False)),
        ),
    )


def match_to_dict(record: MatchRecord) -> Dict[str, Any]:
    return {
        "id": record.id,
        "played_at": record.played_at,
        "blue_score": record.blue_score,
        "red_score": record.red_score,
        "winners": list(record.winners),
        "losers": list(record.losers),
        "rounds": [archived_round_to_dict(r) for r in record.rounds],
    }


def match_from_dict(d: Dict[str, Any]) -> MatchRecord:
    return MatchRecord(
        id=d["id"],
        played_at=d.get("played_at", ""),
        blue_score=int(d.get("blue_score", 0)),
        red_score=int(d.get("red_score", 0)),
        winners=tuple(d["winners"]),
        losers=tuple(d["losers"]),
        rounds=tuple(archived_round_from_dict(r) for r in d.get("rounds", [])),
    )


def scorebook_to_dict(
    players: List[Player],
    matches: List[MatchRecord],
    rules: ScoringRules = DEFAULT_RULES,
) -> Dict[str, Any]:
    return {
        "schema_version": SCHEMA_VERSION,
        "exported_at": datetime.now(timezone.utc).isoformat(),
        "rules": rules_to_dict(rules),
        "players": [player_to_dict(p) for p in players],
        "matches": [match_to_dict(m) for m in matches],
    }


def scorebook_from_dict(d: Dict[str, Any]) -> Dict[str, Any]:
    """
    Restore scorebook contents.

    Returns dict with keys ``rules``, ``players`` and ``matches``.
    """
    return {
        "rules": rules_from_dict(d.get("rules", {})),
        "players": [player_from_dict(p) for p in d.get("players", [])],
        "matches": [match_from_dict(m) for m in d.get("matches", [])],
    }


def scorebook_to_json(
    players: List[Player],
    matches: List[MatchRecord],
    rules: ScoringRules = DEFAULT_RULES,
) -> str:
    return json.dumps(scorebook_to_dict(players, matches, rules), indent=2, ensure_ascii=False)


def scorebook_from_json(s: str) -> Dict[str, Any]:
    return scorebook_from_dict(json.loads(s))


__all__ = [
    "SCHEMA_VERSION",
    "archived_round_from_dict",
    "archived_round_to_dict",
    "match_from_dict",
    "match_to_dict",
    "player_from_dict",
    "player_to_dict",
    "scorebook_from_dict",
    "scorebook_from_json",
    "scorebook_to_dict",
    "scorebook_to_json",
]

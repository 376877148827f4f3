"""
Match flow: alternates Bidding -> Scoring -> Bidding, one round per cycle.

States are immutable; every transition returns a new state. The round scorer is
called exactly once per round, in ``submit_scores``, and the scored round is
archived into the match history together with its result.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Optional, Tuple
import uuid

from .announcements import AnnouncementKind, catalog_entry, can_declare, validate_declarations
from .rules import DEFAULT_RULES, Contract, ScoringRules, Suit, Team, other_team
from .scoring import RoundInput, RoundResult, score_round
from .stats import MatchRecord

PlayerId = str


@dataclass(frozen=True)
class Lineup:
    """Two players per team; seats are fixed for the whole match."""

    blue: Tuple[PlayerId, PlayerId]
    red: Tuple[PlayerId, PlayerId]

    def players(self) -> Tuple[PlayerId, ...]:
        return self.blue + self.red

    def team_players(self, team: Team) -> Tuple[PlayerId, PlayerId]:
        return self.blue if team == Team.BLUE else self.red


@dataclass(frozen=True)
class Bid:
    team: Team = Team.BLUE
    contract: Contract = Contract.C80
    suit: Suit = Suit.HEARTS
    is_coinched: bool = False
    is_surcoinched: bool = False


@dataclass(frozen=True)
class TeamSheet:
    """What the scorer enters for one team after the round."""

    points: int = 0
    last_trick: bool = False
    announcements: Tuple[str, ...] = ()
    belote_rebelote: bool = False


@dataclass(frozen=True)
class ArchivedRound:
    bid: Bid
    blue: TeamSheet
    red: TeamSheet
    result: RoundResult


@dataclass(frozen=True)
class MatchState:
    lineup: Lineup
    rounds: Tuple[ArchivedRound, ...] = ()
    blue_total: int = 0
    red_total: int = 0
    rules: ScoringRules = DEFAULT_RULES

    def total_for(self, team: Team) -> int:
        return self.blue_total if team == Team.BLUE else self.red_total


@dataclass(frozen=True)
class BiddingPhase:
    match: MatchState
    bid: Bid = field(default_factory=Bid)


@dataclass(frozen=True)
class ScoringPhase:
    match: MatchState
    bid: Bid
    blue: TeamSheet = field(default_factory=TeamSheet)
    red: TeamSheet = field(default_factory=TeamSheet)

    def sheet(self, team: Team) -> TeamSheet:
        return self.blue if team == Team.BLUE else self.red


def start_match(lineup: Lineup, rules: ScoringRules = DEFAULT_RULES) -> BiddingPhase:
    players = lineup.players()
    if len(set(players)) != len(players):
        raise ValueError("A player can only take one seat in a match")
    return BiddingPhase(match=MatchState(lineup=lineup, rules=rules))


def update_bid(phase: BiddingPhase, **changes) -> BiddingPhase:
    """
    Change fields of the current bid. Surcoinche implies coinche; removing the
    coinche also removes the surcoinche.
    """
    bid = replace(phase.bid, **changes)
    if changes.get("is_surcoinched"):
        bid = replace(bid, is_coinched=True)
    if changes.get("is_coinched") is False:
        bid = replace(bid, is_surcoinched=False)
    return replace(phase, bid=bid)


def submit_bid(phase: BiddingPhase) -> ScoringPhase:
    return ScoringPhase(match=phase.match, bid=phase.bid)


def _with_sheet(phase: ScoringPhase, team: Team, sheet: TeamSheet) -> ScoringPhase:
    if team == Team.BLUE:
        return replace(phase, blue=sheet)
    return replace(phase, red=sheet)


def set_points(phase: ScoringPhase, team: Team, points: int) -> ScoringPhase:
    if points < 0:
        raise ValueError(f"Trick points cannot be negative: {points}")
    return _with_sheet(phase, team, replace(phase.sheet(team), points=int(points)))


def set_last_trick(phase: ScoringPhase, team: Team) -> ScoringPhase:
    """Give the last trick to ``team``, or take it back if it already holds it."""
    if phase.sheet(team).last_trick:
        return _with_sheet(phase, team, replace(phase.sheet(team), last_trick=False))
    opp = other_team(team)
    phase = _with_sheet(phase, opp, replace(phase.sheet(opp), last_trick=False))
    return _with_sheet(phase, team, replace(phase.sheet(team), last_trick=True))


def toggle_announcement(phase: ScoringPhase, team: Team, title: str) -> ScoringPhase:
    """
    Toggle an announcement for ``team``.

    Repeatable titles add one more instance each time. A title the other team
    already holds is refused and the phase is returned unchanged.
    """
    entry = catalog_entry(title)
    if entry is None:
        raise ValueError(f"Unknown announcement: {title!r}")
    own = phase.sheet(team)
    other = phase.sheet(other_team(team))

    if entry.kind == AnnouncementKind.MUTEX_SINGLETON:
        if not own.belote_rebelote and not can_declare(title, other.announcements, other.belote_rebelote):
            return phase
        return _with_sheet(phase, team, replace(own, belote_rebelote=not own.belote_rebelote))

    if entry.kind == AnnouncementKind.REPEATABLE:
        return _with_sheet(phase, team, replace(own, announcements=own.announcements + (title,)))

    if title in own.announcements:
        remaining = tuple(a for a in own.announcements if a != title)
        return _with_sheet(phase, team, replace(own, announcements=remaining))
    if not can_declare(title, other.announcements, other.belote_rebelote):
        return phase
    return _with_sheet(phase, team, replace(own, announcements=own.announcements + (title,)))


def remove_announcement(phase: ScoringPhase, team: Team, title: str) -> ScoringPhase:
    """Drop the most recent instance of ``title``; no-op if the team does not hold it."""
    own = phase.sheet(team)
    if title not in own.announcements:
        return phase
    idx = len(own.announcements) - 1 - own.announcements[::-1].index(title)
    remaining = own.announcements[:idx] + own.announcements[idx + 1:]
    return _with_sheet(phase, team, replace(own, announcements=remaining))


def round_input(phase: ScoringPhase) -> RoundInput:
    bid = phase.bid
    return RoundInput(
        contract=bid.contract,
        declaring_team=bid.team,
        suit=bid.suit,
        is_coinched=bid.is_coinched,
        is_surcoinched=bid.is_surcoinched,
        blue_points=phase.blue.points,
        red_points=phase.red.points,
        blue_last_trick=phase.blue.last_trick,
        red_last_trick=phase.red.last_trick,
        blue_announcements=phase.blue.announcements,
        red_announcements=phase.red.announcements,
        blue_belote_rebelote=phase.blue.belote_rebelote,
        red_belote_rebelote=phase.red.belote_rebelote,
    )


def submit_scores(phase: ScoringPhase) -> Tuple[BiddingPhase, ArchivedRound]:
    """Score the round, archive it, update the totals and go back to bidding."""
    if phase.blue.last_trick and phase.red.last_trick:
        raise ValueError("Only one team can take the last trick")
    problems = validate_declarations(
        phase.blue.announcements,
        phase.blue.belote_rebelote,
        phase.red.announcements,
        phase.red.belote_rebelote,
    )
    if problems:
        raise ValueError("; ".join(problems))

    match = phase.match
    result = score_round(round_input(phase), match.rules)
    archived = ArchivedRound(bid=phase.bid, blue=phase.blue, red=phase.red, result=result)
    match = replace(
        match,
        rounds=match.rounds + (archived,),
        blue_total=match.blue_total + result.blue_points,
        red_total=match.red_total + result.red_points,
    )
    return BiddingPhase(match=match), archived


def leading_team(match: MatchState) -> Optional[Team]:
    """Team with the strictly greater total, or None on a tie."""
    if match.blue_total > match.red_total:
        return Team.BLUE
    if match.red_total > match.blue_total:
        return Team.RED
    return None


def end_match(
    match: MatchState,
    match_id: Optional[str] = None,
    played_at: Optional[str] = None,
) -> MatchRecord:
    """Close the match and produce its history record. A tied match cannot be closed."""
    winner = leading_team(match)
    if winner is None:
        raise ValueError(f"Tied match ({match.blue_total}-{match.red_total}) has no winner")
    loser = other_team(winner)
    return MatchRecord(
        id=match_id or uuid.uuid4().hex,
        played_at=played_at or datetime.now(timezone.utc).isoformat(),
        blue_score=match.blue_total,
        red_score=match.red_total,
        winners=match.lineup.team_players(winner),
        losers=match.lineup.team_players(loser),
        rounds=match.rounds,
    )


__all__ = [
    "ArchivedRound",
    "Bid",
    "BiddingPhase",
    "Lineup",
    "MatchState",
    "ScoringPhase",
    "TeamSheet",
    "end_match",
    "leading_team",
    "remove_announcement",
    "round_input",
    "set_last_trick",
    "set_points",
    "start_match",
    "submit_bid",
    "submit_scores",
    "toggle_announcement",
    "update_bid",
]

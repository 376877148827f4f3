"""
Historical statistics over finished matches: win rates, leaderboard, rivalries,
duos, head-to-head comparison and achievement badges.

Everything here works from ``MatchRecord`` totals and winner/loser lineups; the
round-level details are never needed.
"""
from __future__ import annotations

from dataclasses import dataclass, field
import math
from typing import Any, Dict, List, Optional, Sequence, Tuple

import numpy as np

PlayerId = str


@dataclass(frozen=True)
class Player:
    id: PlayerId
    trigramme: str


@dataclass(frozen=True)
class MatchRecord:
    """One finished match as kept in history."""

    id: str
    played_at: str
    blue_score: int
    red_score: int
    winners: Tuple[PlayerId, PlayerId]
    losers: Tuple[PlayerId, PlayerId]
    # Archived rounds when the match was scored live; empty for hand-entered results
    rounds: Tuple[Any, ...] = field(default=(), compare=False)

    @property
    def winner_score(self) -> int:
        return max(self.blue_score, self.red_score)

    @property
    def loser_score(self) -> int:
        return min(self.blue_score, self.red_score)

    def players(self) -> Tuple[PlayerId, ...]:
        return tuple(self.winners) + tuple(self.losers)

    def involves(self, player_id: PlayerId) -> bool:
        return player_id in self.winners or player_id in self.losers

    def won_by(self, player_id: PlayerId) -> bool:
        return player_id in self.winners


@dataclass(frozen=True)
class PlayerStats:
    games_played: int = 0
    games_won: int = 0
    games_lost: int = 0
    win_percentage: float = 0.0


def _outcome_matrices(
    player_ids: Sequence[PlayerId],
    matches: Sequence[MatchRecord],
) -> Tuple[np.ndarray, np.ndarray]:
    """Boolean (players × matches) arrays: did the player win / lose that match."""
    shape = (len(player_ids), len(matches))
    won = np.zeros(shape, dtype=bool)
    lost = np.zeros(shape, dtype=bool)
    for j, m in enumerate(matches):
        for i, pid in enumerate(player_ids):
            won[i, j] = pid in m.winners
            lost[i, j] = pid in m.losers
    return won, lost


def all_player_stats(
    player_ids: Sequence[PlayerId],
    matches: Sequence[MatchRecord],
) -> Dict[PlayerId, PlayerStats]:
    """Recompute played/won/lost/win% for every player from the full history."""
    won, lost = _outcome_matrices(player_ids, matches)
    n_won = won.sum(axis=1)
    n_lost = lost.sum(axis=1)
    n_played = (won | lost).sum(axis=1)
    pct = np.divide(
        n_won * 100.0,
        n_played,
        out=np.zeros(len(player_ids), dtype=float),
        where=n_played > 0,
    )
    return {
        pid: PlayerStats(
            games_played=int(n_played[i]),
            games_won=int(n_won[i]),
            games_lost=int(n_lost[i]),
            win_percentage=float(pct[i]),
        )
        for i, pid in enumerate(player_ids)
    }


def player_stats(player_id: PlayerId, matches: Sequence[MatchRecord]) -> PlayerStats:
    return all_player_stats([player_id], matches)[player_id]


def global_score(stats: PlayerStats) -> int:
    """Win rate in percent plus a tenth of a point per game played, rounded half up."""
    value = stats.games_won / max(1, stats.games_played) * 100 + stats.games_played / 10
    return int(math.floor(value + 0.5))


def leaderboard(
    player_ids: Sequence[PlayerId],
    matches: Sequence[MatchRecord],
    min_games: int = 10,
    size: int = 3,
) -> Tuple[List[PlayerId], List[PlayerId]]:
    """
    Podium and "struggling" list among players with at least ``min_games`` games.

    The podium is the best ``size`` win rates, best first. The struggling list is
    the next ``size`` players of the ranking (4th to 6th by default), shown
    lowest win rate first.
    """
    stats = all_player_stats(player_ids, matches)
    eligible = [pid for pid in player_ids if stats[pid].games_played >= min_games]
    if not eligible:
        return [], []
    pct = np.array([stats[pid].win_percentage for pid in eligible])
    order = np.argsort(-pct, kind="stable")
    ranked = [eligible[i] for i in order]
    top = ranked[:size]
    following = order[size:2 * size]
    struggling = [eligible[i] for i in following[np.argsort(pct[following], kind="stable")]]
    return top, struggling


@dataclass
class _Record:
    wins: int = 0
    losses: int = 0


@dataclass(frozen=True)
class Rivalries:
    nemesis: Optional[PlayerId] = None
    best_ally: Optional[PlayerId] = None
    worst_ally: Optional[PlayerId] = None


def rivalries(player_id: PlayerId, matches: Sequence[MatchRecord]) -> Rivalries:
    """
    Best and worst partner (most and fewest wins together) and nemesis (the
    opponent with the largest losing balance against the player).
    """
    partners: Dict[PlayerId, _Record] = {}
    opponents: Dict[PlayerId, _Record] = {}
    for m in matches:
        if not m.involves(player_id):
            continue
        won = m.won_by(player_id)
        own, other = (m.winners, m.losers) if won else (m.losers, m.winners)
        for mate in own:
            if mate == player_id:
                continue
            rec = partners.setdefault(mate, _Record())
            if won:
                rec.wins += 1
            else:
                rec.losses += 1
        for opp in other:
            rec = opponents.setdefault(opp, _Record())
            if won:
                rec.wins += 1
            else:
                rec.losses += 1

    best_ally = worst_ally = None
    if partners:
        ranked = sorted(partners.items(), key=lambda kv: (-kv[1].wins, kv[1].losses, kv[0]))
        best_ally = ranked[0][0]
        worst_ally = ranked[-1][0]

    nemesis = None
    losing = [(pid, r.losses - r.wins) for pid, r in opponents.items() if r.losses > r.wins]
    if losing:
        nemesis = sorted(losing, key=lambda kv: (-kv[1], kv[0]))[0][0]
    return Rivalries(nemesis=nemesis, best_ally=best_ally, worst_ally=worst_ally)


@dataclass(frozen=True)
class DuoRecord:
    partner_id: PlayerId
    games: int
    wins: int

    @property
    def win_rate(self) -> float:
        return self.wins / self.games * 100 if self.games else 0.0


def duo_records(player_id: PlayerId, matches: Sequence[MatchRecord]) -> List[DuoRecord]:
    """Results with each partner, in order of first appearance."""
    acc: Dict[PlayerId, _Record] = {}
    for m in matches:
        if not m.involves(player_id):
            continue
        won = m.won_by(player_id)
        team = m.winners if won else m.losers
        for mate in team:
            if mate == player_id:
                continue
            rec = acc.setdefault(mate, _Record())
            if won:
                rec.wins += 1
            else:
                rec.losses += 1
    return [DuoRecord(pid, r.wins + r.losses, r.wins) for pid, r in acc.items()]


def best_and_worst_duo(
    player_id: PlayerId,
    matches: Sequence[MatchRecord],
    min_duo_games: int = 4,
    experienced_after: int = 10,
) -> Tuple[Optional[DuoRecord], Optional[DuoRecord]]:
    """
    Best and worst partnership by win rate.

    Once a player has ``experienced_after`` games, only partners with at least
    ``min_duo_games`` shared games count. There is no worst duo when every
    partnership is unbeaten, and no best duo when none was ever won.
    """
    played = player_stats(player_id, matches).games_played
    records = [
        r for r in duo_records(player_id, matches)
        if played < experienced_after or r.games >= min_duo_games
    ]
    if not records:
        return None, None

    worst = None
    candidate = min(records, key=lambda r: r.win_rate)
    if candidate.win_rate < 100:
        worst = candidate
    best = None
    if any(r.win_rate > 0 for r in records):
        best = max(records, key=lambda r: r.win_rate)
    return best, worst


@dataclass(frozen=True)
class HeadToHead:
    duo_wins: int = 0
    duo_losses: int = 0
    duo_points: int = 0
    vs_wins: int = 0
    vs_losses: int = 0
    p1_points: int = 0
    p2_points: int = 0

    @property
    def synergy(self) -> Optional[int]:
        """Win rate of the pair as partners, in percent."""
        total = self.duo_wins + self.duo_losses
        if total == 0:
            return None
        return int(math.floor(self.duo_wins / total * 100 + 0.5))


def head_to_head(p1: PlayerId, p2: PlayerId, matches: Sequence[MatchRecord]) -> HeadToHead:
    """Compare two players: as partners (duo) and as opponents (vs)."""
    if p1 == p2:
        raise ValueError("Select two different players to compare")
    duo_wins = duo_losses = duo_points = 0
    vs_wins = vs_losses = p1_points = p2_points = 0
    for m in matches:
        win, lose = m.winners, m.losers
        if p1 in win and p2 in win:
            duo_wins += 1
            duo_points += m.winner_score
        elif p1 in lose and p2 in lose:
            duo_losses += 1
            duo_points += m.loser_score
        elif p1 in win and p2 in lose:
            vs_wins += 1
            p1_points += m.winner_score
            p2_points += m.loser_score
        elif p2 in win and p1 in lose:
            vs_losses += 1
            p2_points += m.winner_score
            p1_points += m.loser_score
    return HeadToHead(
        duo_wins=duo_wins,
        duo_losses=duo_losses,
        duo_points=duo_points,
        vs_wins=vs_wins,
        vs_losses=vs_losses,
        p1_points=p1_points,
        p2_points=p2_points,
    )


@dataclass(frozen=True)
class BadgeDefinition:
    key: str
    title: str
    description: str
    min_played: int = 0
    min_won: int = 0

    def unlocked_by(self, stats: PlayerStats) -> bool:
        return stats.games_played >= self.min_played and stats.games_won >= self.min_won


BADGES: tuple[BadgeDefinition, ...] = (
    BadgeDefinition("played_10", "Habitué", "Jouer 10 parties", min_played=10),
    BadgeDefinition("played_50", "Pilier", "Jouer 50 parties", min_played=50),
    BadgeDefinition("played_100", "Centurion", "Jouer 100 parties", min_played=100),
    BadgeDefinition("won_10", "Gagnant", "Remporter 10 victoires", min_won=10),
    BadgeDefinition("won_50", "Champion", "Remporter 50 victoires", min_won=50),
    BadgeDefinition(
        "legend",
        "Badge Légendaire",
        "Jouer 100 parties et remporter 100 victoires",
        min_played=100,
        min_won=100,
    ),
)


def unlocked_badges(stats: PlayerStats) -> List[BadgeDefinition]:
    return [b for b in BADGES if b.unlocked_by(stats)]


__all__ = [
    "BADGES",
    "BadgeDefinition",
    "DuoRecord",
    "HeadToHead",
    "MatchRecord",
    "Player",
    "PlayerStats",
    "Rivalries",
    "all_player_stats",
    "best_and_worst_duo",
    "duo_records",
    "global_score",
    "head_to_head",
    "leaderboard",
    "player_stats",
    "rivalries",
    "unlocked_badges",
]

"""Coinche scorekeeping engine: round scoring, match flow, history statistics."""

__version__ = "0.1.0"

from .rules import Contract, Suit, Team, ScoringRules, DEFAULT_RULES, contract_value, coinche_multiplier
from .announcements import (
    AnnouncementKind,
    AnnouncementEntry,
    CATALOG,
    announcement_points,
    validate_declarations,
)
from .scoring import RoundInput, RoundResult, round_to_tens, score_round
from .match import (
    ArchivedRound,
    Bid,
    BiddingPhase,
    Lineup,
    MatchState,
    ScoringPhase,
    TeamSheet,
    end_match,
    start_match,
    submit_bid,
    submit_scores,
)
from .stats import MatchRecord, Player, PlayerStats, player_stats, head_to_head
from .scorebook import Scorebook, scorebook_load, scorebook_save

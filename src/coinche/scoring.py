"""
Round scoring: effective points, contract check, redistribution, rounding to tens.
Made: declarer = contract×mult + effective + annonces; defence = 162 − declarer effective + annonces.
Failed: declarer = 0; defence = contract×mult + 160 + annonces (declarer's annonces are lost).
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from .announcements import announcement_points
from .rules import (
    DEFAULT_RULES,
    Contract,
    ScoringRules,
    Suit,
    Team,
    coinche_multiplier,
    contract_value,
)


@dataclass(frozen=True)
class RoundInput:
    """Everything the scorer enters once a round has been played at the table."""

    contract: Contract
    declaring_team: Team
    suit: Suit = Suit.HEARTS
    is_coinched: bool = False
    is_surcoinched: bool = False
    blue_points: int = 0
    red_points: int = 0
    blue_last_trick: bool = False
    red_last_trick: bool = False
    blue_announcements: Tuple[str, ...] = ()
    red_announcements: Tuple[str, ...] = ()
    blue_belote_rebelote: bool = False
    red_belote_rebelote: bool = False


@dataclass(frozen=True)
class RoundResult:
    blue_points: int
    red_points: int
    contract_fulfilled: bool

    def points_for(self, team: Team) -> int:
        return self.blue_points if team == Team.BLUE else self.red_points


def round_to_tens(score: int, threshold: int = 6) -> int:
    """Round to a multiple of ten: up when ``score mod 10 >= threshold``, else truncate."""
    remainder = score % 10
    if remainder >= threshold:
        return score - remainder + 10
    return score - remainder


def effective_points(points: int, last_trick: bool, rules: ScoringRules = DEFAULT_RULES) -> int:
    """Trick points plus the last-trick bonus (dix de der)."""
    return points + (rules.last_trick_bonus if last_trick else 0)


def target_value(
    contract: Contract,
    is_coinched: bool,
    is_surcoinched: bool,
    rules: ScoringRules = DEFAULT_RULES,
) -> int:
    """Contract value after the coinche multiplier."""
    return contract_value(contract, rules) * coinche_multiplier(is_coinched, is_surcoinched)


def raw_round_scores(rnd: RoundInput, rules: ScoringRules = DEFAULT_RULES) -> Tuple[int, int, bool]:
    """
    Unrounded (blue, red, fulfilled) for a round.

    Announcements count towards the declarer's target. When the contract fails,
    the defence takes the whole stake and the declarer's announcements are forfeited.
    """
    blue_ann = announcement_points(rnd.blue_announcements, rnd.blue_belote_rebelote, rules)
    red_ann = announcement_points(rnd.red_announcements, rnd.red_belote_rebelote, rules)
    blue_eff = effective_points(rnd.blue_points, rnd.blue_last_trick, rules)
    red_eff = effective_points(rnd.red_points, rnd.red_last_trick, rules)
    target = target_value(rnd.contract, rnd.is_coinched, rnd.is_surcoinched, rules)

    if rnd.declaring_team == Team.BLUE:
        decl_eff, decl_ann, def_ann = blue_eff, blue_ann, red_ann
    else:
        decl_eff, decl_ann, def_ann = red_eff, red_ann, blue_ann

    fulfilled = decl_eff + decl_ann >= target
    if fulfilled:
        declarer = target + decl_eff + decl_ann
        defence = rules.total_trick_points - decl_eff + def_ann
    else:
        declarer = 0
        defence = target + rules.failed_contract_bonus + def_ann

    if rnd.declaring_team == Team.BLUE:
        return declarer, defence, fulfilled
    return defence, declarer, fulfilled


def score_round(rnd: RoundInput, rules: ScoringRules = DEFAULT_RULES) -> RoundResult:
    """Final points awarded to each team for one round, rounded to tens."""
    blue, red, fulfilled = raw_round_scores(rnd, rules)
    return RoundResult(
        blue_points=round_to_tens(blue, rules.rounding_threshold),
        red_points=round_to_tens(red, rules.rounding_threshold),
        contract_fulfilled=fulfilled,
    )


__all__ = [
    "RoundInput",
    "RoundResult",
    "effective_points",
    "raw_round_scores",
    "round_to_tens",
    "score_round",
    "target_value",
]

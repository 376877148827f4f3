"""
Contracts, suits, teams and the numeric conventions of Coinche scoring.
Contract ladder: 80..160 by tens, plus Capot (fixed 250). Coinche ×2, Surcoinche ×4.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Dict


class Suit(str, Enum):
    """Trump suit of the bid. Descriptive only: trump weighting is already in the trick points."""
    HEARTS = "♥"
    SPADES = "♠"
    CLUBS = "♣"
    DIAMONDS = "♦"


class Team(str, Enum):
    BLUE = "blue"
    RED = "red"


class Contract(str, Enum):
    """Declared target, in ascending order."""
    C80 = "80"
    C90 = "90"
    C100 = "100"
    C110 = "110"
    C120 = "120"
    C130 = "130"
    C140 = "140"
    C150 = "150"
    C160 = "160"
    CAPOT = "capot"


CONTRACTS = tuple(Contract)
SUITS = tuple(Suit)


@dataclass(frozen=True)
class ScoringRules:
    """Point conventions used by the round scorer."""

    last_trick_bonus: int = 10
    total_trick_points: int = 162
    # Awarded to the defenders, on top of the contract, when the declarer fails
    failed_contract_bonus: int = 160
    capot_value: int = 250
    belote_rebelote_points: int = 20
    # Remainder (mod 10) from which a score is rounded up to the next ten
    rounding_threshold: int = 6


DEFAULT_RULES = ScoringRules()


def rules_to_dict(rules: ScoringRules) -> Dict[str, Any]:
    return asdict(rules)


def rules_from_dict(d: Dict[str, Any]) -> ScoringRules:
    return ScoringRules(
        last_trick_bonus=int(d.get("last_trick_bonus", 10)),
        total_trick_points=int(d.get("total_trick_points", 162)),
        failed_contract_bonus=int(d.get("failed_contract_bonus", 160)),
        capot_value=int(d.get("capot_value", 250)),
        belote_rebelote_points=int(d.get("belote_rebelote_points", 20)),
        rounding_threshold=int(d.get("rounding_threshold", 6)),
    )


def other_team(team: Team) -> Team:
    return Team.RED if team == Team.BLUE else Team.BLUE


def contract_value(contract: Contract, rules: ScoringRules = DEFAULT_RULES) -> int:
    """Nominal value of the contract: its face value, or the fixed Capot value."""
    if contract == Contract.CAPOT:
        return rules.capot_value
    return int(contract.value)


def coinche_multiplier(is_coinched: bool, is_surcoinched: bool) -> int:
    """Surcoinche wins over coinche; the pair is not checked for consistency."""
    if is_surcoinched:
        return 4
    if is_coinched:
        return 2
    return 1


__all__ = [
    "CONTRACTS",
    "Contract",
    "DEFAULT_RULES",
    "SUITS",
    "ScoringRules",
    "Suit",
    "Team",
    "coinche_multiplier",
    "contract_value",
    "other_team",
    "rules_from_dict",
    "rules_to_dict",
]

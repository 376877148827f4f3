"""
Announcement catalog (annonces) and the validity/valuation passes over it.

Each entry is tagged with how it may be declared in a round:
- REPEATABLE: Tierce, Cinquante, Cent; any number of instances per team, summed.
- EXCLUSIVE_PAIR: the Carrés; once per team, and never the same Carré for both teams.
- MUTEX_SINGLETON: Belote-Rebelote; carried by a per-team flag, one team at most.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, List, Optional, Sequence

from .rules import DEFAULT_RULES, ScoringRules


class AnnouncementKind(str, Enum):
    REPEATABLE = "repeatable"
    EXCLUSIVE_PAIR = "exclusive_pair"
    MUTEX_SINGLETON = "mutex_singleton"


@dataclass(frozen=True)
class AnnouncementEntry:
    title: str
    points: int
    kind: AnnouncementKind


BELOTE_REBELOTE = "Belote-Rebelote"

CATALOG: tuple[AnnouncementEntry, ...] = (
    AnnouncementEntry(BELOTE_REBELOTE, 20, AnnouncementKind.MUTEX_SINGLETON),
    AnnouncementEntry("Carré de Valets", 200, AnnouncementKind.EXCLUSIVE_PAIR),
    AnnouncementEntry("Carré de 9", 150, AnnouncementKind.EXCLUSIVE_PAIR),
    AnnouncementEntry("Carré de 10", 100, AnnouncementKind.EXCLUSIVE_PAIR),
    AnnouncementEntry("Carré de Dames", 100, AnnouncementKind.EXCLUSIVE_PAIR),
    AnnouncementEntry("Carré de Rois", 100, AnnouncementKind.EXCLUSIVE_PAIR),
    AnnouncementEntry("Carré d'As", 100, AnnouncementKind.EXCLUSIVE_PAIR),
    AnnouncementEntry("Tierce", 20, AnnouncementKind.REPEATABLE),
    AnnouncementEntry("Cinquante", 50, AnnouncementKind.REPEATABLE),
    AnnouncementEntry("Cent", 100, AnnouncementKind.REPEATABLE),
)

_BY_TITLE: Dict[str, AnnouncementEntry] = {e.title: e for e in CATALOG}


def catalog_entry(title: str) -> Optional[AnnouncementEntry]:
    return _BY_TITLE.get(title)


def announcement_points(
    titles: Iterable[str],
    belote_rebelote: bool,
    rules: ScoringRules = DEFAULT_RULES,
) -> int:
    """
    Total announcement value for one team.

    Every declared instance contributes its catalog value. Belote-Rebelote counts
    only through the flag; unknown titles count 0 (the validity pass reports them).
    """
    total = 0
    for title in titles:
        entry = _BY_TITLE.get(title)
        if entry is None or entry.kind == AnnouncementKind.MUTEX_SINGLETON:
            continue
        total += entry.points
    if belote_rebelote:
        total += rules.belote_rebelote_points
    return total


def validate_declarations(
    blue_titles: Sequence[str],
    blue_belote: bool,
    red_titles: Sequence[str],
    red_belote: bool,
) -> List[str]:
    """Return the list of violations in both teams' declarations (empty if valid)."""
    problems: List[str] = []
    if blue_belote and red_belote:
        problems.append(f"{BELOTE_REBELOTE} declared by both teams")

    for team, titles in (("blue", blue_titles), ("red", red_titles)):
        seen: set[str] = set()
        for title in titles:
            entry = _BY_TITLE.get(title)
            if entry is None:
                problems.append(f"{team}: unknown announcement {title!r}")
            elif entry.kind == AnnouncementKind.MUTEX_SINGLETON:
                problems.append(f"{team}: {title} is declared with the belote flag, not as an announcement")
            elif entry.kind == AnnouncementKind.EXCLUSIVE_PAIR:
                if title in seen:
                    problems.append(f"{team}: {title} declared more than once")
                seen.add(title)

    shared = sorted(
        set(blue_titles)
        & set(red_titles)
        & {e.title for e in CATALOG if e.kind == AnnouncementKind.EXCLUSIVE_PAIR}
    )
    for title in shared:
        problems.append(f"{title} declared by both teams")
    return problems


def can_declare(title: str, other_titles: Sequence[str], other_belote: bool) -> bool:
    """Whether a team may currently add (or toggle on) ``title``, given the other team's declarations."""
    entry = _BY_TITLE.get(title)
    if entry is None:
        return False
    if entry.kind == AnnouncementKind.REPEATABLE:
        return True
    if entry.kind == AnnouncementKind.MUTEX_SINGLETON:
        return not other_belote
    return title not in other_titles


__all__ = [
    "AnnouncementEntry",
    "AnnouncementKind",
    "BELOTE_REBELOTE",
    "CATALOG",
    "announcement_points",
    "can_declare",
    "catalog_entry",
    "validate_declarations",
]

"""
Player impact scoring for daily start/sit decisions.

For a player on one day:

    impact = sum over categories of
             contribution(player, cat) x urgency_weight(cat) x importance_weight(cat)
    impact *= injury_multiplier
    score  = impact * 0.5 + base_rating * 0.5

Contribution is value - 0.45 for shooting percentages, 3 - TO for
turnovers, and the raw per-game value for the other counting stats. The
base-rating half keeps scores stable when matchup urgency is noisy or
missing.

Also emits up to two "helps" and two "risks" tags for display, only for
HIGH / MED urgency categories. A DTD / GTD tag always leads the risks.
"""

import logging
from typing import List, Mapping, Optional, Sequence

from backend.models import (
    CATEGORY_LABELS,
    CategoryUrgency,
    PERCENTAGE_CATEGORIES,
    RosterEntry,
    ScoredPlayer,
    UrgencyLevel,
)
from backend.projections.injury import InjuryStatus

logger = logging.getLogger(__name__)

# Close categories get +20%, locked ones -30%
URGENCY_WEIGHTS = {
    UrgencyLevel.HIGH: 1.2,
    UrgencyLevel.MED: 1.0,
    UrgencyLevel.LOW: 0.7,
}

# League-average reference shooting rate
PERCENTAGE_REFERENCE = 0.45

# Turnovers above this cost score
TURNOVER_REFERENCE = 3.0

# Share of the final score taken by matchup impact (rest is base rating)
IMPACT_SHARE = 0.5

MAX_TAGS = 2

# Tag thresholds (per game)
TURNOVER_RISK = 2.5
TURNOVER_HELP = 1.5
PERCENTAGE_HELP = 0.50
PERCENTAGE_RISK = 0.40
COUNTING_HELP = 5.0


def category_contribution(value: float, category: str) -> float:
    """Normalized per-game contribution in one category."""
    if category in PERCENTAGE_CATEGORIES:
        return value - PERCENTAGE_REFERENCE
    if category == 'to':
        return TURNOVER_REFERENCE - value
    return value


def _category_tag(value: float, category: str) -> Optional[str]:
    """'help', 'risk' or None for one category value."""
    if category == 'to':
        if value > TURNOVER_RISK:
            return 'risk'
        if value < TURNOVER_HELP:
            return 'help'
        return None
    if category in PERCENTAGE_CATEGORIES:
        if value > PERCENTAGE_HELP:
            return 'help'
        if value < PERCENTAGE_RISK:
            return 'risk'
        return None
    return 'help' if value > COUNTING_HELP else None


def score_player(
    entry: RosterEntry,
    urgencies: Sequence[CategoryUrgency],
    category_weights: Mapping[str, float],
    base_rating: float,
    injury_status: InjuryStatus = InjuryStatus.HEALTHY,
    multiplier: float = 1.0,
    is_core: bool = False,
    opponent: Optional[str] = None,
) -> ScoredPlayer:
    """
    Score one candidate for one day. Pure function.

    Args:
        entry: Roster entry being scored
        urgencies: Category urgency for the current matchup
        category_weights: Per-category importance weights
        base_rating: Context-free composite rating (CRI / wCRI)
        injury_status: Classified status (drives the DTD / GTD risk tag)
        multiplier: Injury availability multiplier applied to impact
        is_core: Whether the player is core (carried through for display)
        opponent: Today's opponent code (carried through for display)

    Returns:
        ScoredPlayer with final score, impact and tags
    """
    player = entry.player
    impact = 0.0
    helps: List[str] = []
    risks: List[str] = []

    for urgency in urgencies:
        category = urgency.category
        value = player.stat(category)

        contribution = category_contribution(value, category)
        urgency_weight = URGENCY_WEIGHTS[urgency.urgency]
        importance = category_weights.get(category, 1.0)
        impact += contribution * urgency_weight * importance

        if urgency.urgency in (UrgencyLevel.HIGH, UrgencyLevel.MED):
            tag = _category_tag(value, category)
            label = CATEGORY_LABELS.get(category, category.upper())
            if tag == 'help':
                helps.append(label)
            elif tag == 'risk':
                risks.append(label)

    impact *= multiplier
    score = impact * IMPACT_SHARE + base_rating * (1 - IMPACT_SHARE)

    if injury_status in (InjuryStatus.DTD, InjuryStatus.GTD):
        risks.insert(0, injury_status.value)

    return ScoredPlayer(
        entry=entry,
        score=score,
        impact=impact,
        base_rating=base_rating,
        injury_status=injury_status.value,
        injury_multiplier=multiplier,
        helps=tuple(helps[:MAX_TAGS]),
        risks=tuple(risks[:MAX_TAGS]),
        is_core=is_core,
        opponent=opponent,
    )


def rank_scored_players(scored: Sequence[ScoredPlayer]) -> List[ScoredPlayer]:
    """Sort by score descending; ties keep roster order (stable sort)."""
    return sorted(scored, key=lambda p: p.score, reverse=True)


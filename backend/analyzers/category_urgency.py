#!/usr/bin/env python3
"""
Category Urgency Analyzer for H2H 9-cat matchups.

Classifies each scoring category as HIGH / MED / LOW urgency from my team's
and my opponent's projected weekly totals (plus in-progress totals when the
week has started):

- HIGH: currently behind, but close enough to swing
- MED: close either way, or projected to flip from winning to losing
- LOW: comfortably ahead

The sign of every delta is "positive = I am ahead". Turnovers are the only
lower-is-better category, so their delta is theirs - mine.

With no matchup data at all every category is MED, so start/sit scoring
still runs on base ratings alone.
"""

import logging
from typing import Dict, List, Optional

from backend.models import (
    CATEGORY_KEYS,
    CategoryUrgency,
    MatchupSnapshot,
    PERCENTAGE_CATEGORIES,
    REVERSE_CATEGORIES,
    UrgencyLevel,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Constants
# =============================================================================

# Percentages: swingable if the gap is within .020
PERCENTAGE_SWING_THRESHOLD = 0.020

# Counting stats: swingable if the gap is within 15% of the remaining
# projected production, or within 10 outright
COUNTING_SWING_FRACTION = 0.15
COUNTING_SWING_ABSOLUTE = 10.0

# "Close" thresholds for MED urgency
PERCENTAGE_CLOSE_THRESHOLD = 0.015
COUNTING_CLOSE_THRESHOLD = 8.0


def neutral_urgency() -> List[CategoryUrgency]:
    """Every category MED with zero delta (no matchup data)."""
    return [
        CategoryUrgency(
            category=key,
            urgency=UrgencyLevel.MED,
            delta=0.0,
            lower_is_better=key in REVERSE_CATEGORIES,
        )
        for key in CATEGORY_KEYS
    ]


def _signed_delta(category: str, mine: float, theirs: float) -> float:
    if category in REVERSE_CATEGORIES:
        return theirs - mine
    return mine - theirs


class CategoryUrgencyAnalyzer:
    """
    Urgency classifier for a single H2H matchup.

    Thresholds are constructor arguments so league-specific tuning does not
    need a code change; defaults match the start/sit advisor.
    """

    def __init__(
        self,
        percentage_swing: float = PERCENTAGE_SWING_THRESHOLD,
        counting_swing_fraction: float = COUNTING_SWING_FRACTION,
        counting_swing_absolute: float = COUNTING_SWING_ABSOLUTE,
        percentage_close: float = PERCENTAGE_CLOSE_THRESHOLD,
        counting_close: float = COUNTING_CLOSE_THRESHOLD,
    ):
        self.percentage_swing = percentage_swing
        self.counting_swing_fraction = counting_swing_fraction
        self.counting_swing_absolute = counting_swing_absolute
        self.percentage_close = percentage_close
        self.counting_close = counting_close

    def analyze(self, matchup: Optional[MatchupSnapshot]) -> List[CategoryUrgency]:
        """
        Classify all 9 categories.

        Args:
            matchup: Projected (and optionally current) totals for both teams

        Returns:
            One CategoryUrgency per category, in category order
        """
        if matchup is None or not matchup.has_data:
            logger.info("No matchup data, using neutral urgency for all categories")
            return neutral_urgency()

        if not matchup.has_projected:
            # Only in-progress totals: they stand in for the projection
            matchup = MatchupSnapshot(
                my_projected=matchup.my_current or {},
                opp_projected=matchup.opp_current or {},
                my_current=matchup.my_current,
                opp_current=matchup.opp_current,
            )

        if matchup.has_current:
            current_my: Dict[str, float] = matchup.my_current
            current_opp: Dict[str, float] = matchup.opp_current
        else:
            # Week hasn't started: projections stand in for the current state
            current_my = matchup.my_projected
            current_opp = matchup.opp_projected

        results = []
        for category in CATEGORY_KEYS:
            proj_my = matchup.my_projected.get(category, 0.0)
            proj_opp = matchup.opp_projected.get(category, 0.0)
            cur_my = current_my.get(category, 0.0)
            cur_opp = current_opp.get(category, 0.0)

            delta = _signed_delta(category, cur_my, cur_opp)
            projected_delta = _signed_delta(category, proj_my, proj_opp)

            urgency = self._classify(category, delta, projected_delta,
                                     proj_my, proj_opp, cur_my, cur_opp)
            results.append(CategoryUrgency(
                category=category,
                urgency=urgency,
                delta=delta,
                lower_is_better=category in REVERSE_CATEGORIES,
            ))

        summary = ', '.join(f"{c.label}={c.urgency.value}" for c in results)
        logger.debug(f"Category urgency: {summary}")
        return results

    def is_swingable(
        self,
        category: str,
        delta: float,
        proj_my: float,
        proj_opp: float,
        cur_my: float,
        cur_opp: float,
    ) -> bool:
        if category in PERCENTAGE_CATEGORIES:
            return abs(delta) <= self.percentage_swing

        remaining = max(0.0, (proj_my + proj_opp) / 2 - max(cur_my, cur_opp))
        return (
            abs(delta) <= remaining * self.counting_swing_fraction
            or abs(delta) <= self.counting_swing_absolute
        )

    def _classify(
        self,
        category: str,
        delta: float,
        projected_delta: float,
        proj_my: float,
        proj_opp: float,
        cur_my: float,
        cur_opp: float,
    ) -> UrgencyLevel:
        close = (
            self.percentage_close if category in PERCENTAGE_CATEGORIES
            else self.counting_close
        )

        if delta < 0 and self.is_swingable(category, delta, proj_my, proj_opp, cur_my, cur_opp):
            return UrgencyLevel.HIGH
        if abs(delta) < close or (projected_delta < 0 and delta >= 0):
            # Close, or winning now but projected to lose
            return UrgencyLevel.MED
        if delta > 0:
            return UrgencyLevel.LOW
        return UrgencyLevel.MED


def analyze_category_urgency(matchup: Optional[MatchupSnapshot]) -> List[CategoryUrgency]:
    """Classify categories with default thresholds."""
    return CategoryUrgencyAnalyzer().analyze(matchup)


def urgency_by_category(urgencies: List[CategoryUrgency]) -> Dict[str, UrgencyLevel]:
    return {u.category: u.urgency for u in urgencies}

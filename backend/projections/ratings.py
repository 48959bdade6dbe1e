"""
CRI / wCRI composite ratings.

CRI (Category Ranking Index) ranks every player on a roster in each of the
9 categories, inverts the rank (N + 1 - rank) and sums across categories.
wCRI weighs each inverted rank by the category importance table. Higher is
better; the minimum CRI for a single-player roster is 9.

The lineup engine treats the rating as an opaque base score. When roster
rows already carry cri / wcri (e.g. from the rankings page) those values win.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Mapping, Optional, Sequence

from backend.models import (
    CATEGORY_KEYS,
    DEFAULT_CATEGORY_WEIGHTS,
    Player,
    REVERSE_CATEGORIES,
    RosterEntry,
)

logger = logging.getLogger(__name__)

RatingFunction = Callable[[Player], float]


@dataclass(frozen=True)
class PlayerRating:
    cri: float
    wcri: float


def calculate_ratings(
    players: Sequence[Player],
    weights: Optional[Mapping[str, float]] = None,
) -> Dict[str, PlayerRating]:
    """
    Calculate CRI and wCRI for every player in the list.

    Ties keep list order (the earlier player gets the better rank).

    Returns:
        Dict of player_id -> PlayerRating
    """
    if not players:
        return {}

    weights = weights or DEFAULT_CATEGORY_WEIGHTS
    n = len(players)
    inverted: List[Dict[str, int]] = [dict() for _ in players]

    for category in CATEGORY_KEYS:
        lower_better = category in REVERSE_CATEGORIES
        order = sorted(
            range(n),
            key=lambda idx: players[idx].stat(category),
            reverse=not lower_better,
        )
        for rank, idx in enumerate(order, start=1):
            inverted[idx][category] = (n + 1) - rank

    ratings = {}
    for idx, player in enumerate(players):
        cri = float(sum(inverted[idx].values()))
        wcri = sum(inverted[idx][cat] * weights.get(cat, 1.0) for cat in CATEGORY_KEYS)
        ratings[player.player_id] = PlayerRating(cri=cri, wcri=wcri)
    return ratings


def build_rating_function(
    roster: Sequence[RosterEntry],
    use_weighted: bool = False,
    weights: Optional[Mapping[str, float]] = None,
) -> RatingFunction:
    """
    Build the base-rating lookup for one roster.

    Supplied cri / wcri values take precedence; the rest are ranked against
    the full roster.
    """
    computed = calculate_ratings([entry.player for entry in roster], weights)

    def rating(player: Player) -> float:
        supplied = player.wcri if use_weighted else player.cri
        if supplied is not None:
            return supplied
        found = computed.get(player.player_id)
        if found is None:
            return 0.0
        return found.wcri if use_weighted else found.cri

    return rating


def core_player_ids(
    roster: Sequence[RosterEntry],
    rating: RatingFunction,
    count: int,
) -> set:
    """
    Top `count` active players by base rating.

    Active means not in a reserve slot and playing minutes. Core players are
    never recommended for a full bench.
    """
    active = [
        entry for entry in roster
        if not entry.is_reserve and entry.player.minutes > 0
    ]
    ranked = sorted(active, key=lambda entry: rating(entry.player), reverse=True)
    return {entry.player_id for entry in ranked[:count]}

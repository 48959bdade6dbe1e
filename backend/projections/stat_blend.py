"""
Per-game stat blending for projections.

Early in the season (or for a player just back from injury) a stat line
over a handful of games is noisy, and some roster rows arrive with whole
stats missing. Projected category totals use a blended per-game line:

    w = games_played / (games_played + SHRINKAGE_K)
    blended = w * observed + (1 - w) * position_average

With SHRINKAGE_K or more games the observed line is used as is. A stat the
row doesn't carry falls back to the average for the player's primary
position.

Shooting volume gets one extra rule: a player who clearly plays (minutes,
points, rebounds, assists or threes) but shows no field-goal or free-throw
attempts has a missing volume, not a zero one. The position average
attempts are used, and a supplied FG% / FT% is applied to them.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Optional, Sequence, Tuple

from backend.models import PERCENTAGE_COMPONENTS, Player, STAT_KEYS

logger = logging.getLogger(__name__)

# Games at which the observed line is fully trusted
SHRINKAGE_K = 10

# Assumed sample when the roster row has no games played
DEFAULT_GAMES_PLAYED = 10

# League per-game averages by position (rotation players)
POSITION_AVERAGES: Dict[str, Dict[str, float]] = {
    'PG': {
        'pts': 14.5, 'reb': 3.5, 'ast': 6.0, 'stl': 1.2, 'blk': 0.3, '3pm': 2.0, 'to': 2.5,
        'fg_pct': 0.44, 'ft_pct': 0.82, 'fga': 12.0, 'fgm': 5.3, 'fta': 3.5, 'ftm': 2.9,
    },
    'SG': {
        'pts': 15.0, 'reb': 3.8, 'ast': 3.5, 'stl': 1.0, 'blk': 0.4, '3pm': 2.2, 'to': 2.0,
        'fg_pct': 0.45, 'ft_pct': 0.80, 'fga': 13.0, 'fgm': 5.9, 'fta': 3.0, 'ftm': 2.4,
    },
    'SF': {
        'pts': 13.5, 'reb': 5.5, 'ast': 2.5, 'stl': 0.9, 'blk': 0.5, '3pm': 1.8, 'to': 1.8,
        'fg_pct': 0.46, 'ft_pct': 0.78, 'fga': 11.0, 'fgm': 5.1, 'fta': 2.8, 'ftm': 2.2,
    },
    'PF': {
        'pts': 12.5, 'reb': 6.5, 'ast': 2.0, 'stl': 0.7, 'blk': 0.8, '3pm': 1.2, 'to': 1.5,
        'fg_pct': 0.48, 'ft_pct': 0.75, 'fga': 10.0, 'fgm': 4.8, 'fta': 2.5, 'ftm': 1.9,
    },
    'C': {
        'pts': 11.0, 'reb': 8.0, 'ast': 1.5, 'stl': 0.5, 'blk': 1.2, '3pm': 0.5, 'to': 1.5,
        'fg_pct': 0.55, 'ft_pct': 0.70, 'fga': 8.0, 'fgm': 4.4, 'fta': 2.8, 'ftm': 2.0,
    },
}

DEFAULT_AVERAGES: Dict[str, float] = {
    'pts': 13.0, 'reb': 5.0, 'ast': 3.0, 'stl': 0.9, 'blk': 0.6, '3pm': 1.5, 'to': 1.8,
    'fg_pct': 0.46, 'ft_pct': 0.77, 'fga': 11.0, 'fgm': 5.1, 'fta': 3.0, 'ftm': 2.3,
}

# Any of these above zero means the player is actually playing
PRODUCTION_KEYS = ('pts', 'reb', 'ast', '3pm')


@dataclass(frozen=True)
class BlendedStats:
    """Per-game line used for projection, and whether any stat was blended."""
    stats: Dict[str, float]
    used_fallback: bool = False


def position_fallback(positions: Sequence[str]) -> Dict[str, float]:
    """Averages for the primary (first listed) position, else league-wide."""
    fallback = dict(DEFAULT_AVERAGES)
    if positions and positions[0] in POSITION_AVERAGES:
        fallback.update(POSITION_AVERAGES[positions[0]])
    return fallback


def shrink(observed: Optional[float], fallback: float, games_played: float) -> Tuple[float, bool]:
    """
    Blend one observed per-game value toward its fallback.

    Returns:
        (value, whether the fallback contributed)
    """
    if observed is None:
        return fallback, True
    if games_played >= SHRINKAGE_K:
        return observed, False
    weight = max(games_played, 0.0) / (max(games_played, 0.0) + SHRINKAGE_K)
    return weight * observed + (1 - weight) * fallback, True


def has_production(player: Player) -> bool:
    stats = player.per_game_stats
    return player.minutes > 0 or any(stats.get(key, 0.0) > 0 for key in PRODUCTION_KEYS)


def blended_per_game_stats(player: Player) -> BlendedStats:
    """Build the per-game line a player's projected starts are summed from."""
    observed = player.per_game_stats
    fallback = position_fallback(player.positions)
    games_played = player.games_played if player.games_played else DEFAULT_GAMES_PLAYED
    playing = has_production(player)

    stats: Dict[str, float] = {}
    used_fallback = False

    shooting_keys = set()
    for pct_key, (made_key, att_key) in PERCENTAGE_COMPONENTS.items():
        shooting_keys.update((pct_key, made_key, att_key))
        missing_volume = (
            playing
            and observed.get(made_key, 0.0) <= 0
            and observed.get(att_key, 0.0) <= 0
        )
        if missing_volume:
            attempts = fallback[att_key]
            pct = observed.get(pct_key)
            if pct is None or pct <= 0:
                pct = fallback[pct_key]
            stats[att_key] = attempts
            stats[made_key] = pct * attempts
            stats[pct_key] = pct
            used_fallback = True
            continue
        for key in (made_key, att_key):
            stats[key], blended = shrink(observed.get(key), fallback[key], games_played)
            used_fallback = used_fallback or blended
        attempts = stats[att_key]
        stats[pct_key] = stats[made_key] / attempts if attempts > 0 else fallback[pct_key]

    for key in STAT_KEYS:
        if key in shooting_keys:
            continue
        stats[key], blended = shrink(observed.get(key), fallback[key], games_played)
        used_fallback = used_fallback or blended

    if used_fallback:
        logger.debug(f"{player.name}: using blended stats (limited sample or missing stats)")

    return BlendedStats(stats=stats, used_fallback=used_fallback)

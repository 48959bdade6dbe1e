"""
Schedule availability for the lineup engine.

Answers "does this player's NBA team play on date D, and against whom" from
an already-fetched list of games. Team codes from ESPN roster rows are not
always standard ('GS', 'NY', 'UTAH', trailing symbols from copied tables),
so every code goes through the alias table first.

An unresolvable team code is not an error: availability comes back
unresolved and the lineup optimizer excludes the player as MissingTeam.

Usage:
    from backend.projections.schedule import resolve_availability

    availability = resolve_availability('GS', games_today)
    if availability.has_game:
        print(availability.opponent)
"""

import logging
import re
from collections import defaultdict
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from backend.models import Game

logger = logging.getLogger(__name__)

# Alternate abbreviations mapping
TEAM_ABBR_ALIASES = {
    'BRK': 'BKN',
    'CHO': 'CHA',
    'GS': 'GSW',
    'NY': 'NYK',
    'NO': 'NOP',
    'NOLA': 'NOP',
    'PHO': 'PHX',
    'SA': 'SAS',
    'WSH': 'WAS',
    'UTAH': 'UTA',
}

_CLEAN_CODE = re.compile(r'^[A-Z]{2,3}$')
_CODE_BLOCK = re.compile(r'[A-Z]{2,4}')


def normalize_team_code(team: Optional[str]) -> Optional[str]:
    """
    Normalize a raw team code to the schedule feed's abbreviation.

    Returns None when no 2-3 letter code can be recovered.
    """
    if not team:
        return None

    raw = str(team).upper().strip()
    if not raw:
        return None

    if _CLEAN_CODE.match(raw):
        return TEAM_ABBR_ALIASES.get(raw, raw)

    # Copied table cells carry junk like "UTAH•" or "GS *"
    match = _CODE_BLOCK.match(raw) or _CODE_BLOCK.search(raw)
    if not match:
        return None

    extracted = match.group(0)
    if extracted in TEAM_ABBR_ALIASES:
        return TEAM_ABBR_ALIASES[extracted]
    if _CLEAN_CODE.match(extracted):
        return extracted
    return None


def has_game(team_code: Optional[str], games: Iterable[Game]) -> bool:
    """True if the (normalized) team plays in any of the given games."""
    if not team_code:
        return False
    return any(g.home_team == team_code or g.away_team == team_code for g in games)


def opponent_code(team_code: Optional[str], games: Iterable[Game]) -> Optional[str]:
    """The other side of the team's game, or None if it doesn't play."""
    if not team_code:
        return None
    for game in games:
        if game.home_team == team_code:
            return game.away_team
        if game.away_team == team_code:
            return game.home_team
    return None


@dataclass(frozen=True)
class Availability:
    """Schedule availability for one player on one date."""
    team_code: Optional[str]
    has_game: bool
    opponent: Optional[str] = None

    @property
    def resolved(self) -> bool:
        return self.team_code is not None


def resolve_availability(raw_team: Optional[str], games: Sequence[Game]) -> Availability:
    """Resolve a player's raw team code against one date's games."""
    team_code = normalize_team_code(raw_team)
    if team_code is None:
        return Availability(team_code=None, has_game=False)

    opponent = opponent_code(team_code, games)
    return Availability(
        team_code=team_code,
        has_game=opponent is not None,
        opponent=opponent,
    )


def group_games_by_date(games: Iterable[Game]) -> Dict[date, List[Game]]:
    """Group a flat schedule by game date (dates in ascending order)."""
    grouped: Dict[date, List[Game]] = defaultdict(list)
    for game in games:
        grouped[game.game_date].append(game)
    return {d: grouped[d] for d in sorted(grouped)}


def get_team_game_dates(
    team: Optional[str],
    games_by_date: Mapping[date, Sequence[Game]]
) -> List[date]:
    """Dates (ascending) on which the team plays."""
    team_code = normalize_team_code(team)
    if not team_code:
        return []
    return sorted(d for d, games in games_by_date.items() if has_game(team_code, games))


# =============================================================================
# Game Status
# =============================================================================

class GameStatus(str, Enum):
    NOT_STARTED = 'NOT_STARTED'
    IN_PROGRESS = 'IN_PROGRESS'
    FINAL = 'FINAL'


_IN_PROGRESS_MARKERS = ('qtr', '1st', '2nd', '3rd', '4th', 'overtime', 'halftime', 'in progress')
_OVERTIME = re.compile(r'\bot\b|\b\d+ot\b')


def parse_game_status(status: Optional[str]) -> GameStatus:
    """Classify a scoreboard status string ('Final', '3rd Qtr', '7:30 pm ET')."""
    if not status:
        return GameStatus.NOT_STARTED

    s = status.strip().lower()
    if 'final' in s:
        return GameStatus.FINAL
    if any(marker in s for marker in _IN_PROGRESS_MARKERS) or _OVERTIME.search(s):
        return GameStatus.IN_PROGRESS
    return GameStatus.NOT_STARTED


def game_has_started(game: Game, now: datetime) -> bool:
    """A game has started once its status leaves NOT_STARTED or its tip time passes."""
    if parse_game_status(game.status) != GameStatus.NOT_STARTED:
        return True
    if game.start_time is None:
        return False

    start = game.start_time
    # Naive feed timestamps are read in the clock's timezone
    if start.tzinfo is None and now.tzinfo is not None:
        start = start.replace(tzinfo=now.tzinfo)
    elif start.tzinfo is not None and now.tzinfo is None:
        now = now.replace(tzinfo=start.tzinfo)
    return start <= now


def slate_has_started(games: Sequence[Game], now: datetime) -> bool:
    """True once any game on the slate has tipped off."""
    return any(game_has_started(game, now) for game in games)

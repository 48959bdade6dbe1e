"""
Domain models for the Fantasy Basketball lineup planner.

This module defines the inputs and results of the lineup engine:
- Players and RosterEntries: parsed roster rows (supplied by the ESPN import)
- Games: one scheduled NBA game on a given date
- LineupSlot: the fixed 8-slot daily lineup definition
- MatchupSnapshot: projected and in-progress category totals for a matchup
- LineupSettings: engine settings (weekly cap, injury weighting, weights)
- DayResult / WeekSummary / HeadToHead: computed results

Nothing here is persisted. Results are rebuilt from their inputs every time
the roster, schedule or settings change.

Parsing helpers raise ValueError for malformed input shape. Every other
domain condition (missing team, no positions, OUT players) is reported in
the results instead of raised.
"""

import logging
import math
from dataclasses import dataclass, field, replace
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, FrozenSet, List, Mapping, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)


# =============================================================================
# Categories
# =============================================================================

# Standard H2H 9-cat categories, in display order
CATEGORIES: List[Tuple[str, str]] = [
    ('fg_pct', 'FG%'),
    ('ft_pct', 'FT%'),
    ('3pm', '3PM'),
    ('reb', 'REB'),
    ('ast', 'AST'),
    ('stl', 'STL'),
    ('blk', 'BLK'),
    ('to', 'TO'),
    ('pts', 'PTS'),
]

CATEGORY_KEYS: List[str] = [key for key, _ in CATEGORIES]
CATEGORY_LABELS: Dict[str, str] = dict(CATEGORIES)

# Categories that are calculated from component stats
PERCENTAGE_CATEGORIES = {'fg_pct', 'ft_pct'}

PERCENTAGE_COMPONENTS = {
    'fg_pct': ('fgm', 'fga'),
    'ft_pct': ('ftm', 'fta'),
}

# Categories where lower is better
REVERSE_CATEGORIES = {'to'}

# Every per-game stat the engine reads
STAT_KEYS: List[str] = CATEGORY_KEYS + ['fgm', 'fga', 'ftm', 'fta']

# Alternate stat keys seen in ESPN / Basketball Reference exports
STAT_KEY_ALIASES = {
    'trb': 'reb',
    'rebounds': 'reb',
    'assists': 'ast',
    'steals': 'stl',
    'blocks': 'blk',
    'tov': 'to',
    'turnovers': 'to',
    '3p': '3pm',
    'threepm': '3pm',
    'fg3m': '3pm',
    'points': 'pts',
    'fgpct': 'fg_pct',
    'ftpct': 'ft_pct',
}

# Default per-category importance weights (same table wCRI uses)
DEFAULT_CATEGORY_WEIGHTS: Dict[str, float] = {
    'fg_pct': 0.65,
    'ft_pct': 0.60,
    '3pm': 0.85,
    'reb': 0.80,
    'ast': 0.75,
    'stl': 0.45,
    'blk': 0.55,
    'to': 0.35,
    'pts': 1.00,
}


def normalize_stat_key(key: str) -> str:
    """Map an alternate stat key onto the engine's canonical key."""
    cleaned = str(key).strip().lower()
    return STAT_KEY_ALIASES.get(cleaned, cleaned)


# =============================================================================
# Lineup Slots
# =============================================================================

POSITIONS = ('PG', 'SG', 'SF', 'PF', 'C')


@dataclass(frozen=True)
class LineupSlot:
    """One daily starting slot and the positions that may fill it."""
    label: str
    eligible_positions: FrozenSet[str]

    def accepts(self, positions: Sequence[str]) -> bool:
        """True if any of the player's positions can fill this slot."""
        return any(pos in self.eligible_positions for pos in positions)


# ESPN default daily lineup: exactly 8 starters, visited in this order
STANDARD_LINEUP_SLOTS: Tuple[LineupSlot, ...] = (
    LineupSlot('PG', frozenset({'PG'})),
    LineupSlot('SG', frozenset({'SG'})),
    LineupSlot('SF', frozenset({'SF'})),
    LineupSlot('PF', frozenset({'PF'})),
    LineupSlot('C', frozenset({'C'})),
    LineupSlot('G', frozenset({'PG', 'SG'})),
    LineupSlot('F/C', frozenset({'SF', 'PF', 'C'})),
    LineupSlot('UTIL', frozenset(POSITIONS)),
)

DAILY_SLOT_COUNT = len(STANDARD_LINEUP_SLOTS)


# =============================================================================
# Parsing Helpers
# =============================================================================

_MISSING_VALUES = {'', '--', '-', 'N/A', 'NA'}


def _to_float(value: Any, field_name: str) -> float:
    """
    Coerce a stat value to float; blank ESPN cells ('--') read as 0.

    NaN and infinities are rejected: they are valid JSON to Flask's parser
    but never a real stat line or setting.
    """
    if value is None:
        return 0.0
    if isinstance(value, bool):
        raise ValueError(f'{field_name} must be numeric, got {value!r}')
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        cleaned = value.strip()
        if cleaned.upper() in _MISSING_VALUES:
            return 0.0
        try:
            number = float(cleaned)
        except ValueError:
            raise ValueError(f'{field_name} must be numeric, got {value!r}') from None
    else:
        raise ValueError(f'{field_name} must be numeric, got {type(value).__name__}')
    if not math.isfinite(number):
        raise ValueError(f'{field_name} must be a finite number, got {value!r}')
    return number


def _to_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in ('1', 'true', 'yes', 'on')
    return bool(value)


def parse_date(value: Any) -> date:
    """Parse a date from a date, datetime or 'YYYY-MM-DD' string."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip()[:10])
        except ValueError:
            raise ValueError(f'Invalid date: {value!r}') from None
    raise ValueError(f'Invalid date: {value!r}')


def parse_datetime(value: Any) -> Optional[datetime]:
    """Parse an ISO timestamp; None and blanks stay None."""
    if value is None or value == '':
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, str):
        text = value.strip()
        if text.endswith('Z'):
            text = text[:-1] + '+00:00'
        try:
            return datetime.fromisoformat(text)
        except ValueError:
            raise ValueError(f'Invalid timestamp: {value!r}') from None
    raise ValueError(f'Invalid timestamp: {value!r}')


def _require_mapping(data: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        raise ValueError(f'{what} must be an object, got {type(data).__name__}')
    return data


def _require_list(data: Any, what: str) -> List[Any]:
    if not isinstance(data, (list, tuple)):
        raise ValueError(f'{what} must be a list, got {type(data).__name__}')
    return list(data)


def parse_stats(raw: Any) -> Dict[str, float]:
    """Parse a per-game stat mapping, normalizing alternate keys."""
    if raw is None:
        return {}
    stats = {}
    for key, value in _require_mapping(raw, 'stats').items():
        stats[normalize_stat_key(key)] = _to_float(value, f'stats.{key}')
    return stats


# =============================================================================
# Roster and Schedule Inputs
# =============================================================================

class SlotType(str, Enum):
    """Where a player sits on the fantasy roster."""
    STARTER = 'starter'
    BENCH = 'bench'
    RESERVE = 'reserve'

    @classmethod
    def parse(cls, value: Any) -> 'SlotType':
        if isinstance(value, SlotType):
            return value
        text = str(value or 'bench').strip().lower()
        # ESPN exports label reserve slots as IR / IR+
        if text in ('ir', 'ir+', 'reserve', 'injured_reserve'):
            return cls.RESERVE
        if text in ('starter', 'start', 'active'):
            return cls.STARTER
        if text in ('bench', 'be', 'bn'):
            return cls.BENCH
        raise ValueError(f'Unknown slot type: {value!r}')


@dataclass(frozen=True)
class Player:
    """An NBA player as parsed from the fantasy roster."""
    player_id: str
    name: str
    positions: Tuple[str, ...]
    team_code: Optional[str]
    status: str = ''
    minutes: float = 0.0
    per_game_stats: Dict[str, float] = field(default_factory=dict)
    cri: Optional[float] = None
    wcri: Optional[float] = None
    games_played: Optional[float] = None

    def stat(self, key: str) -> float:
        """
        Get a per-game stat value.

        Percentages fall back to makes / attempts when the roster row only
        carries the component stats.
        """
        value = self.per_game_stats.get(key)
        if value is not None:
            return value
        if key in PERCENTAGE_COMPONENTS:
            made_key, att_key = PERCENTAGE_COMPONENTS[key]
            attempts = self.per_game_stats.get(att_key, 0.0)
            if attempts > 0:
                return self.per_game_stats.get(made_key, 0.0) / attempts
        return 0.0

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'Player':
        data = _require_mapping(data, 'player')

        player_id = data.get('id', data.get('player_id'))
        if player_id is None or str(player_id).strip() == '':
            raise ValueError('player id is required')

        raw_positions = data.get('positions') or []
        if isinstance(raw_positions, str):
            raw_positions = raw_positions.replace('/', ',').split(',')
        positions = tuple(
            str(pos).strip().upper()
            for pos in _require_list(raw_positions, 'positions')
            if str(pos).strip()
        )

        team_code = data.get('team_code', data.get('nba_team'))
        stats = parse_stats(data.get('stats', data.get('per_game_stats')))

        cri = data.get('cri')
        wcri = data.get('wcri')
        games_played = data.get('games_played', data.get('gp'))

        return cls(
            player_id=str(player_id),
            name=str(data.get('name') or player_id),
            positions=positions,
            team_code=str(team_code) if team_code else None,
            status=str(data.get('status') or ''),
            minutes=_to_float(data.get('minutes', data.get('minutes_per_game')), 'minutes'),
            per_game_stats=stats,
            cri=_to_float(cri, 'cri') if cri is not None else None,
            wcri=_to_float(wcri, 'wcri') if wcri is not None else None,
            games_played=(
                _to_float(games_played, 'games_played') if games_played is not None else None
            ),
        )


@dataclass(frozen=True)
class RosterEntry:
    """A player on a fantasy roster plus the slot he currently occupies."""
    player: Player
    slot_type: SlotType = SlotType.BENCH
    slot: str = ''

    @property
    def player_id(self) -> str:
        return self.player.player_id

    @property
    def is_reserve(self) -> bool:
        return self.slot_type == SlotType.RESERVE

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'RosterEntry':
        """
        Parse a roster row.

        Accepts either {'player': {...}, 'slot_type': ..., 'slot': ...} or a
        flat player object carrying its own slot_type / slot keys.
        """
        data = _require_mapping(data, 'roster entry')
        player_data = data.get('player', data)
        slot = str(data.get('slot') or '')
        slot_type = data.get('slot_type')
        if slot_type is None and slot.upper() in ('IR', 'IR+'):
            slot_type = 'ir'
        return cls(
            player=Player.from_dict(player_data),
            slot_type=SlotType.parse(slot_type),
            slot=slot,
        )


def parse_roster(data: Any) -> List[RosterEntry]:
    """Parse a list of roster rows."""
    if data is None:
        return []
    return [RosterEntry.from_dict(row) for row in _require_list(data, 'roster')]


@dataclass(frozen=True)
class Game:
    """A scheduled NBA game (immutable snapshot)."""
    game_date: date
    home_team: str
    away_team: str
    status: str = ''
    start_time: Optional[datetime] = None
    game_id: str = ''

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'Game':
        data = _require_mapping(data, 'game')
        home = data.get('home_team', data.get('home_team_code'))
        away = data.get('away_team', data.get('away_team_code'))
        if not home or not away:
            raise ValueError('game requires home_team and away_team')
        if 'date' not in data and 'game_date' not in data:
            raise ValueError('game requires a date')
        return cls(
            game_date=parse_date(data.get('date', data.get('game_date'))),
            home_team=str(home).strip().upper(),
            away_team=str(away).strip().upper(),
            status=str(data.get('status') or ''),
            start_time=parse_datetime(data.get('start_time')),
            game_id=str(data.get('game_id') or ''),
        )


def parse_games(data: Any) -> List[Game]:
    """Parse a flat list of games."""
    if data is None:
        return []
    return [Game.from_dict(row) for row in _require_list(data, 'games')]


@dataclass(frozen=True)
class MatchupSnapshot:
    """
    Category totals for the current H2H matchup.

    Projected totals are end-of-week projections for each side. Current
    totals, when supplied, are the in-progress week totals so far.
    """
    my_projected: Dict[str, float]
    opp_projected: Dict[str, float]
    my_current: Optional[Dict[str, float]] = None
    opp_current: Optional[Dict[str, float]] = None

    @property
    def has_current(self) -> bool:
        return self.my_current is not None and self.opp_current is not None

    @property
    def has_projected(self) -> bool:
        return bool(self.my_projected) or bool(self.opp_projected)

    @property
    def has_data(self) -> bool:
        return self.has_projected or bool(self.my_current) or bool(self.opp_current)

    def swapped(self) -> 'MatchupSnapshot':
        """The same matchup seen from the opponent's side."""
        return MatchupSnapshot(
            my_projected=self.opp_projected,
            opp_projected=self.my_projected,
            my_current=self.opp_current,
            opp_current=self.my_current,
        )

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> Optional['MatchupSnapshot']:
        if not data:
            return None
        data = _require_mapping(data, 'matchup')

        def totals(key: str) -> Optional[Dict[str, float]]:
            raw = data.get(key)
            return parse_stats(raw) if raw is not None else None

        return cls(
            my_projected=totals('my_projected') or {},
            opp_projected=totals('opp_projected') or {},
            my_current=totals('my_current'),
            opp_current=totals('opp_current'),
        )


# =============================================================================
# Settings
# =============================================================================

ASSIGNMENT_STRATEGIES = ('greedy', 'matching')
ELAPSED_POLICIES = ('games_started', 'always', 'never')

DEFAULT_WEEKLY_STARTS_CAP = 32
DEFAULT_CORE_PLAYER_COUNT = 6


@dataclass(frozen=True)
class LineupSettings:
    """Engine settings, built from app config and per-request overrides."""
    weekly_starts_cap: int = DEFAULT_WEEKLY_STARTS_CAP
    apply_injury_multipliers: bool = True
    category_weights: Dict[str, float] = field(
        default_factory=lambda: dict(DEFAULT_CATEGORY_WEIGHTS)
    )
    use_weighted_rating: bool = False
    dtd_multiplier: float = 0.70
    gtd_multiplier: float = 0.85
    assignment_strategy: str = 'greedy'
    core_player_count: int = DEFAULT_CORE_PLAYER_COUNT
    today_elapsed_policy: str = 'games_started'
    derive_matchup_from_schedule: bool = False

    def __post_init__(self):
        # Negative or missing cap clamps to 0 (every day then reports overflow)
        cap = self.weekly_starts_cap
        cap = 0 if cap is None else max(0, int(cap))
        object.__setattr__(self, 'weekly_starts_cap', cap)

        weights = dict(DEFAULT_CATEGORY_WEIGHTS)
        for key, value in (self.category_weights or {}).items():
            canonical = normalize_stat_key(key)
            if canonical not in DEFAULT_CATEGORY_WEIGHTS:
                raise ValueError(f'Unknown category weight: {key!r}')
            weights[canonical] = _to_float(value, f'category_weights.{key}')
        object.__setattr__(self, 'category_weights', weights)

        if self.assignment_strategy not in ASSIGNMENT_STRATEGIES:
            raise ValueError(
                f'assignment_strategy must be one of {ASSIGNMENT_STRATEGIES}, '
                f'got {self.assignment_strategy!r}'
            )
        if self.today_elapsed_policy not in ELAPSED_POLICIES:
            raise ValueError(
                f'today_elapsed_policy must be one of {ELAPSED_POLICIES}, '
                f'got {self.today_elapsed_policy!r}'
            )
        if self.core_player_count < 0:
            raise ValueError('core_player_count must be >= 0')

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> 'LineupSettings':
        """Build settings from a Flask config (or any mapping of config keys)."""
        return cls(
            weekly_starts_cap=config.get('WEEKLY_STARTS_CAP', DEFAULT_WEEKLY_STARTS_CAP),
            apply_injury_multipliers=_to_bool(config.get('APPLY_INJURY_MULTIPLIERS', True)),
            use_weighted_rating=_to_bool(config.get('USE_WEIGHTED_RATING', False)),
            dtd_multiplier=float(config.get('DTD_MULTIPLIER', 0.70)),
            gtd_multiplier=float(config.get('GTD_MULTIPLIER', 0.85)),
            assignment_strategy=config.get('LINEUP_ASSIGNMENT_STRATEGY', 'greedy'),
            core_player_count=int(config.get('CORE_PLAYER_COUNT', DEFAULT_CORE_PLAYER_COUNT)),
            today_elapsed_policy=config.get('TODAY_ELAPSED_POLICY', 'games_started'),
        )

    def with_overrides(self, overrides: Optional[Mapping[str, Any]]) -> 'LineupSettings':
        """Return a copy with request-level overrides applied."""
        if not overrides:
            return self
        overrides = _require_mapping(overrides, 'settings')

        changes: Dict[str, Any] = {}
        for key, value in overrides.items():
            if key in ('weekly_starts_cap', 'core_player_count'):
                changes[key] = None if value is None else int(_to_float(value, key))
            elif key in ('apply_injury_multipliers', 'use_weighted_rating',
                         'derive_matchup_from_schedule'):
                changes[key] = _to_bool(value)
            elif key in ('dtd_multiplier', 'gtd_multiplier'):
                changes[key] = _to_float(value, key)
            elif key in ('assignment_strategy', 'today_elapsed_policy'):
                changes[key] = str(value)
            elif key == 'category_weights':
                merged = dict(self.category_weights)
                merged.update(_require_mapping(value, 'category_weights'))
                changes[key] = merged
            else:
                raise ValueError(f'Unknown setting: {key!r}')
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'weekly_starts_cap': self.weekly_starts_cap,
            'apply_injury_multipliers': self.apply_injury_multipliers,
            'category_weights': dict(self.category_weights),
            'use_weighted_rating': self.use_weighted_rating,
            'dtd_multiplier': self.dtd_multiplier,
            'gtd_multiplier': self.gtd_multiplier,
            'assignment_strategy': self.assignment_strategy,
            'core_player_count': self.core_player_count,
            'today_elapsed_policy': self.today_elapsed_policy,
            'derive_matchup_from_schedule': self.derive_matchup_from_schedule,
        }


# =============================================================================
# Computed Results
# =============================================================================

class UrgencyLevel(str, Enum):
    HIGH = 'HIGH'
    MED = 'MED'
    LOW = 'LOW'


@dataclass(frozen=True)
class CategoryUrgency:
    """How much a marginal contribution in one category matters this week."""
    category: str
    urgency: UrgencyLevel
    delta: float  # positive = currently favored
    lower_is_better: bool = False

    @property
    def label(self) -> str:
        return CATEGORY_LABELS.get(self.category, self.category.upper())

    def to_dict(self) -> Dict[str, Any]:
        return {
            'category': self.category,
            'label': self.label,
            'urgency': self.urgency.value,
            'delta': round(self.delta, 4),
            'lower_is_better': self.lower_is_better,
        }


class ExclusionReason(str, Enum):
    MISSING_TEAM = 'MissingTeam'
    NO_POSITIONS = 'NoPositions'
    OUT = 'Out'
    IR_SLOT = 'IrSlot'


class BenchAction(str, Enum):
    """Recommendation for a player with a game who did not get a slot."""
    BENCH = 'BENCH'
    MONITOR = 'MONITOR'  # core player flagged DTD
    HOLD = 'HOLD'  # core player, never a full-bench recommendation


@dataclass(frozen=True)
class ExcludedPlayer:
    player_id: str
    name: str
    reason: ExclusionReason
    team_code: Optional[str] = None
    positions: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            'player_id': self.player_id,
            'name': self.name,
            'reason': self.reason.value,
            'team_code': self.team_code,
            'positions': list(self.positions),
        }


@dataclass(frozen=True)
class ScoredPlayer:
    """A candidate's impact score for one day."""
    entry: RosterEntry
    score: float
    impact: float
    base_rating: float
    injury_status: str
    injury_multiplier: float
    helps: Tuple[str, ...] = ()
    risks: Tuple[str, ...] = ()
    is_core: bool = False
    opponent: Optional[str] = None

    @property
    def player(self) -> Player:
        return self.entry.player

    @property
    def player_id(self) -> str:
        return self.entry.player.player_id

    def to_dict(self) -> Dict[str, Any]:
        return {
            'player_id': self.player_id,
            'name': self.player.name,
            'positions': list(self.player.positions),
            'score': round(self.score, 4),
            'impact': round(self.impact, 4),
            'base_rating': round(self.base_rating, 4),
            'injury_status': self.injury_status,
            'injury_multiplier': self.injury_multiplier,
            'helps': list(self.helps),
            'risks': list(self.risks),
            'is_core': self.is_core,
            'opponent': self.opponent,
        }


@dataclass(frozen=True)
class SlotAssignment:
    slot: str
    player: ScoredPlayer

    @property
    def player_id(self) -> str:
        return self.player.player_id

    def to_dict(self) -> Dict[str, Any]:
        data = self.player.to_dict()
        data['slot'] = self.slot
        return data


@dataclass(frozen=True)
class BenchedPlayer:
    player: ScoredPlayer
    action: BenchAction

    @property
    def player_id(self) -> str:
        return self.player.player_id

    def to_dict(self) -> Dict[str, Any]:
        data = self.player.to_dict()
        data['action'] = self.action.value
        return data


@dataclass
class DayResult:
    """Optimized lineup for one date."""
    game_date: date
    candidate_count: int
    assignments: List[SlotAssignment]
    unfilled_slots: List[str]
    benched: List[BenchedPlayer]
    excluded: List[ExcludedPlayer]
    idle: List[str] = field(default_factory=list)  # active players with no game / no minutes
    slot_count: int = DAILY_SLOT_COUNT

    @property
    def starts(self) -> int:
        return len(self.assignments)

    @property
    def overflow(self) -> int:
        """Candidates with a game who could not be slotted."""
        return max(0, self.candidate_count - self.starts)

    @property
    def unused_slots(self) -> int:
        return len(self.unfilled_slots)

    @property
    def slot_map(self) -> Dict[str, str]:
        return {a.slot: a.player_id for a in self.assignments}

    def to_dict(self) -> Dict[str, Any]:
        return {
            'date': self.game_date.isoformat(),
            'candidate_count': self.candidate_count,
            'starts': self.starts,
            'overflow': self.overflow,
            'unused_slots': self.unused_slots,
            'assignments': [a.to_dict() for a in self.assignments],
            'unfilled_slots': list(self.unfilled_slots),
            'benched': [b.to_dict() for b in self.benched],
            'excluded': [e.to_dict() for e in self.excluded],
            'idle': list(self.idle),
        }


@dataclass(frozen=True)
class DayAllocation:
    """Weekly start-cap allocation for one remaining day."""
    game_date: date
    optimized_starts: int
    used: int
    overflow: int
    remaining_budget: int  # budget left after this day

    def to_dict(self) -> Dict[str, Any]:
        return {
            'date': self.game_date.isoformat(),
            'optimized_starts': self.optimized_starts,
            'used': self.used,
            'overflow': self.overflow,
            'remaining_budget': self.remaining_budget,
        }


@dataclass
class PlayerGameLog:
    """Tracks a player's starts over the remaining days."""
    player_id: str
    player_name: str
    scheduled_games: int = 0
    games_started: int = 0
    games_benched: int = 0
    expected_games: float = 0.0  # started games x injury multiplier
    blended_stats: bool = False  # small sample or missing stats filled from position averages

    def to_dict(self) -> Dict[str, Any]:
        return {
            'player_id': self.player_id,
            'name': self.player_name,
            'scheduled_games': self.scheduled_games,
            'games_started': self.games_started,
            'games_benched': self.games_benched,
            'expected_games': round(self.expected_games, 2),
            'blended_stats': self.blended_stats,
        }


@dataclass
class WeekSummary:
    """Rest-of-week start projection for one team."""
    team_label: str
    weekly_starts_cap: int
    elapsed_days: int = 0
    elapsed_starts: int = 0
    days_remaining: int = 0
    projected_starts: int = 0  # pre-cap, sum of optimized starts
    starts_used: int = 0  # post-cap
    max_possible_starts: int = 0
    overflow: int = 0  # schedule overflow: candidates that could not be slotted
    cap_overflow: int = 0  # starts blocked by the weekly cap
    unused_slots: int = 0
    roster_games_remaining: int = 0
    remaining_budget: int = 0
    remaining_per_day: List[DayResult] = field(default_factory=list)
    elapsed_per_day: List[DayResult] = field(default_factory=list)
    allocations: List[DayAllocation] = field(default_factory=list)
    projected_totals: Dict[str, float] = field(default_factory=dict)
    player_logs: Dict[str, PlayerGameLog] = field(default_factory=dict)

    @classmethod
    def empty(cls, team_label: str, weekly_starts_cap: int) -> 'WeekSummary':
        return cls(
            team_label=team_label,
            weekly_starts_cap=weekly_starts_cap,
            remaining_budget=max(0, weekly_starts_cap),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'team': self.team_label,
            'weekly_starts_cap': self.weekly_starts_cap,
            'elapsed_days': self.elapsed_days,
            'elapsed_starts': self.elapsed_starts,
            'days_remaining': self.days_remaining,
            'projected_starts': self.projected_starts,
            'starts_used': self.starts_used,
            'max_possible_starts': self.max_possible_starts,
            'overflow': self.overflow,
            'cap_overflow': self.cap_overflow,
            'unused_slots': self.unused_slots,
            'roster_games_remaining': self.roster_games_remaining,
            'remaining_budget': self.remaining_budget,
            'remaining_per_day': [d.to_dict() for d in self.remaining_per_day],
            'elapsed_per_day': [d.to_dict() for d in self.elapsed_per_day],
            'allocations': [a.to_dict() for a in self.allocations],
            'projected_totals': {k: round(v, 4) for k, v in self.projected_totals.items()},
            'players': [log.to_dict() for log in self.player_logs.values()],
        }


@dataclass
class HeadToHead:
    """Rest-of-week comparison between my team and the opponent."""
    my_team: WeekSummary
    opponent: Optional[WeekSummary]
    category_urgency: List[CategoryUrgency] = field(default_factory=list)

    @property
    def start_edge_pre_cap(self) -> int:
        opp = self.opponent.projected_starts if self.opponent else 0
        return self.my_team.projected_starts - opp

    @property
    def start_edge(self) -> int:
        """Start edge after the weekly cap is applied to both sides."""
        opp = self.opponent.starts_used if self.opponent else 0
        return self.my_team.starts_used - opp

    def to_dict(self) -> Dict[str, Any]:
        return {
            'my_team': self.my_team.to_dict(),
            'opponent': self.opponent.to_dict() if self.opponent else None,
            'start_edge_pre_cap': self.start_edge_pre_cap,
            'start_edge': self.start_edge,
            'category_urgency': [c.to_dict() for c in self.category_urgency],
        }

# Projections Package
"""
Fantasy Basketball Lineup Engine.

This package turns a roster snapshot and an NBA schedule into daily
start/sit lineups and a rest-of-week start projection:
- schedule: team-code normalization, game availability, slate status
- injury: status classification and availability multipliers
- ratings: CRI / wCRI composite ratings (base rating for scoring)
- stat_blend: small-sample / missing-stat blending toward position averages
- player_impact: urgency-weighted impact score per player per day
- lineup_optimizer: 8-slot daily assignment (greedy or matching)
- start_limit_optimizer: weekly start-cap allocation
- rest_of_week: per-team WeekSummary over the matchup week

Usage:
    from backend.projections import LineupOptimizer, RestOfWeekAggregator

    optimizer = LineupOptimizer(settings)
    rating = build_rating_function(roster)
    day = optimizer.optimize_day(game_date, roster, games, urgencies, rating)
"""

from .clock import Clock, FixedClock, SystemClock
from .injury import InjuryStatus, classify_status, injury_multiplier
from .lineup_optimizer import LineupOptimizer, build_candidate_pool
from .ratings import build_rating_function, calculate_ratings, core_player_ids
from .rest_of_week import RestOfWeekAggregator, project_category_totals
from .schedule import group_games_by_date, normalize_team_code, resolve_availability
from .stat_blend import blended_per_game_stats
from .start_limit_optimizer import StartAllocation, StartLimitOptimizer

__all__ = [
    'Clock',
    'FixedClock',
    'SystemClock',
    'InjuryStatus',
    'classify_status',
    'injury_multiplier',
    'LineupOptimizer',
    'build_candidate_pool',
    'build_rating_function',
    'calculate_ratings',
    'core_player_ids',
    'RestOfWeekAggregator',
    'project_category_totals',
    'group_games_by_date',
    'normalize_team_code',
    'resolve_availability',
    'blended_per_game_stats',
    'StartAllocation',
    'StartLimitOptimizer',
]

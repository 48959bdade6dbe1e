#!/usr/bin/env python3
"""
Rest-of-Week Start Projection.

Runs the same pipeline for my roster and my opponent's roster:

1. Split the matchup week's dates into elapsed and remaining. A date is
   elapsed if it is before today, or if it is today and the slate has
   started (configurable via today_elapsed_policy)
2. Optimize every date's lineup with the daily LineupOptimizer
3. Elapsed days contribute their starts to the elapsed total (callers
   holding the real ESPN starts-used count can pass it instead)
4. Remaining days' optimized starts are spent against the weekly start
   cap by the StartLimitOptimizer
5. Started player-games on remaining days are rolled into projected
   category totals (FG% / FT% from summed makes and attempts). Small
   samples and missing stats are blended toward position averages

The result is a WeekSummary per team plus the head-to-head start edge,
both before and after the cap.
"""

import logging
from collections import OrderedDict
from datetime import date, datetime
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from backend.models import (
    CATEGORY_KEYS,
    CategoryUrgency,
    DayResult,
    Game,
    LineupSettings,
    PERCENTAGE_COMPONENTS,
    PlayerGameLog,
    RosterEntry,
    WeekSummary,
)
from backend.projections.clock import Clock, SystemClock
from backend.projections.lineup_optimizer import LineupOptimizer
from backend.projections.ratings import build_rating_function, core_player_ids
from backend.projections.schedule import slate_has_started
from backend.projections.stat_blend import BlendedStats, blended_per_game_stats
from backend.projections.start_limit_optimizer import StartLimitOptimizer

logger = logging.getLogger(__name__)

# Stats summed into weekly totals (percentages derive from the components)
COUNTING_TOTAL_KEYS = [k for k in CATEGORY_KEYS if k not in PERCENTAGE_COMPONENTS] + [
    'fgm', 'fga', 'ftm', 'fta'
]


# =============================================================================
# Elapsed / Remaining Dates
# =============================================================================

def is_day_elapsed(
    game_date: date,
    games: Sequence[Game],
    now: datetime,
    policy: str = 'games_started',
) -> bool:
    """
    Whether a date's starts are already locked in.

    Past dates are always elapsed, future dates never. Today depends on the
    policy: 'games_started' (once any game tips off), 'always' or 'never'.
    """
    today = now.date()
    if game_date < today:
        return True
    if game_date > today:
        return False
    if policy == 'always':
        return True
    if policy == 'never':
        return False
    return slate_has_started(games, now)


def split_week_dates(
    dates: Sequence[date],
    games_by_date: Mapping[date, Sequence[Game]],
    now: datetime,
    policy: str = 'games_started',
) -> Tuple[List[date], List[date]]:
    """Split matchup dates (deduplicated, ascending) into (elapsed, remaining)."""
    elapsed, remaining = [], []
    for game_date in sorted(set(dates)):
        games = games_by_date.get(game_date, [])
        if is_day_elapsed(game_date, games, now, policy):
            elapsed.append(game_date)
        else:
            remaining.append(game_date)
    return elapsed, remaining


# =============================================================================
# Category Projection
# =============================================================================

def project_category_totals(
    day_results: Sequence[DayResult],
) -> Tuple[Dict[str, float], Dict[str, PlayerGameLog]]:
    """
    Roll started player-games into projected category totals.

    Each start contributes the player's blended per-game line (see
    stat_blend) x his injury multiplier.

    Returns:
        (category totals, per-player game logs keyed by player id)
    """
    sums = {key: 0.0 for key in COUNTING_TOTAL_KEYS}
    logs: Dict[str, PlayerGameLog] = OrderedDict()
    blended: Dict[str, BlendedStats] = {}

    def log_for(player) -> PlayerGameLog:
        if player.player_id not in logs:
            logs[player.player_id] = PlayerGameLog(
                player_id=player.player_id,
                player_name=player.name,
            )
        return logs[player.player_id]

    for day in day_results:
        for assignment in day.assignments:
            scored = assignment.player
            log = log_for(scored.player)
            log.scheduled_games += 1
            log.games_started += 1
            log.expected_games += scored.injury_multiplier

            if scored.player_id not in blended:
                blended[scored.player_id] = blended_per_game_stats(scored.player)
            line = blended[scored.player_id]
            log.blended_stats = line.used_fallback

            for key in COUNTING_TOTAL_KEYS:
                sums[key] += line.stats[key] * scored.injury_multiplier

        for benched in day.benched:
            log = log_for(benched.player.player)
            log.scheduled_games += 1
            log.games_benched += 1

    totals = {key: sums[key] for key in CATEGORY_KEYS if key in sums}
    for pct_key, (made_key, att_key) in PERCENTAGE_COMPONENTS.items():
        attempts = sums[att_key]
        totals[pct_key] = sums[made_key] / attempts if attempts > 0 else 0.0
    for key in ('fgm', 'fga', 'ftm', 'fta'):
        totals[key] = sums[key]

    return totals, logs


def combine_week_totals(
    current: Optional[Mapping[str, float]],
    remaining: Mapping[str, float],
) -> Dict[str, float]:
    """
    End-of-week totals: in-progress totals plus the remaining projection.

    FG% / FT% come from the combined makes and attempts. When the current
    totals carry a percentage but no attempts, that percentage is weighted
    like the remaining projection's volume.
    """
    current = current or {}
    sums = {key: current.get(key, 0.0) + remaining.get(key, 0.0) for key in COUNTING_TOTAL_KEYS}

    totals = {key: sums[key] for key in CATEGORY_KEYS if key in sums}
    for pct_key, (made_key, att_key) in PERCENTAGE_COMPONENTS.items():
        attempts = sums[att_key]
        if current.get(att_key, 0.0) > 0 or pct_key not in current:
            totals[pct_key] = sums[made_key] / attempts if attempts > 0 else 0.0
        elif remaining.get(att_key, 0.0) > 0:
            totals[pct_key] = (current[pct_key] + remaining.get(pct_key, 0.0)) / 2
        else:
            totals[pct_key] = current[pct_key]
    for key in ('fgm', 'fga', 'ftm', 'fta'):
        totals[key] = sums[key]
    return totals


# =============================================================================
# Aggregator
# =============================================================================

class RestOfWeekAggregator:
    """Builds a WeekSummary for one roster over the matchup week."""

    def __init__(
        self,
        settings: Optional[LineupSettings] = None,
        clock: Optional[Clock] = None,
        optimizer: Optional[LineupOptimizer] = None,
    ):
        self.settings = settings or LineupSettings()
        self.clock = clock or SystemClock()
        self.optimizer = optimizer or LineupOptimizer(self.settings)

    def summarize_team(
        self,
        team_label: str,
        roster: Sequence[RosterEntry],
        dates: Sequence[date],
        games_by_date: Mapping[date, Sequence[Game]],
        urgencies: Sequence[CategoryUrgency],
        elapsed_starts: Optional[int] = None,
    ) -> WeekSummary:
        """
        Project one team's rest-of-week starts.

        Args:
            team_label: Display label ('my_team', 'opponent', team name)
            roster: Full fantasy roster
            dates: Every date of the matchup week
            games_by_date: Schedule grouped by date
            urgencies: Category urgency used to score candidates
            elapsed_starts: Actual starts already used this week; when None
                the elapsed days' optimized starts are used

        Returns:
            WeekSummary (zeroed for an empty roster or empty schedule)
        """
        settings = self.settings
        has_games = any(games_by_date.get(d) for d in dates)
        if not roster or not dates or not has_games:
            logger.info(f"{team_label}: empty roster or schedule, returning zeroed summary")
            return WeekSummary.empty(team_label, settings.weekly_starts_cap)

        rating = build_rating_function(
            roster,
            use_weighted=settings.use_weighted_rating,
            weights=settings.category_weights,
        )
        core_ids = core_player_ids(roster, rating, settings.core_player_count)

        now = self.clock.now()
        elapsed_dates, remaining_dates = split_week_dates(
            dates, games_by_date, now, settings.today_elapsed_policy
        )

        def optimize(game_date: date) -> DayResult:
            return self.optimizer.optimize_day(
                game_date,
                roster,
                games_by_date.get(game_date, []),
                urgencies,
                rating,
                core_ids,
            )

        elapsed_results = [optimize(d) for d in elapsed_dates]
        remaining_results = [optimize(d) for d in remaining_dates]

        computed_elapsed = sum(r.starts for r in elapsed_results)
        elapsed_total = computed_elapsed if elapsed_starts is None else max(0, int(elapsed_starts))

        allocation = StartLimitOptimizer(settings.weekly_starts_cap).allocate(
            [(r.game_date, r.starts) for r in remaining_results],
            elapsed_starts=elapsed_total,
        )
        totals, player_logs = project_category_totals(remaining_results)

        slot_count = len(self.optimizer.slots)
        summary = WeekSummary(
            team_label=team_label,
            weekly_starts_cap=settings.weekly_starts_cap,
            elapsed_days=len(elapsed_results),
            elapsed_starts=elapsed_total,
            days_remaining=len(remaining_results),
            projected_starts=sum(r.starts for r in remaining_results),
            starts_used=allocation.total_used,
            max_possible_starts=slot_count * len(remaining_results),
            overflow=sum(r.overflow for r in remaining_results),
            cap_overflow=allocation.total_overflow,
            unused_slots=sum(r.unused_slots for r in remaining_results),
            roster_games_remaining=sum(r.candidate_count for r in remaining_results),
            remaining_budget=allocation.remaining_budget,
            remaining_per_day=remaining_results,
            elapsed_per_day=elapsed_results,
            allocations=allocation.allocations,
            projected_totals=totals,
            player_logs=player_logs,
        )

        logger.info(
            f"{team_label}: {summary.days_remaining} days left, "
            f"{summary.projected_starts}/{summary.max_possible_starts} starts projected, "
            f"{summary.starts_used} after cap (elapsed {summary.elapsed_starts})"
        )
        return summary

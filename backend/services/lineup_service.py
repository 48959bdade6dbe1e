"""
Lineup Planning Service.

The one pipeline every lineup consumer goes through (start/sit advice for a
single day, rest-of-week planning for both teams). It wires the category
urgency analyzer, the daily optimizer, the weekly start-cap allocator and
the clock together from a single LineupSettings, so constants cannot drift
between call sites.

Every call is a pure recomputation over the roster / schedule snapshot it
receives; the service keeps no mutable state between calls.
"""

import logging
from datetime import date
from typing import Any, List, Mapping, Optional, Sequence, Tuple

from backend.analyzers.category_urgency import CategoryUrgencyAnalyzer, neutral_urgency
from backend.models import (
    CategoryUrgency,
    DayResult,
    Game,
    HeadToHead,
    LineupSettings,
    MatchupSnapshot,
    RosterEntry,
)
from backend.projections.clock import Clock, DEFAULT_TIMEZONE, SystemClock
from backend.projections.lineup_optimizer import LineupOptimizer
from backend.projections.ratings import build_rating_function, core_player_ids
from backend.projections.rest_of_week import RestOfWeekAggregator, combine_week_totals
from backend.projections.schedule import group_games_by_date

logger = logging.getLogger(__name__)


class LineupService:
    """Daily and rest-of-week lineup planning over one settings object."""

    def __init__(
        self,
        settings: Optional[LineupSettings] = None,
        clock: Optional[Clock] = None,
        analyzer: Optional[CategoryUrgencyAnalyzer] = None,
    ):
        self.settings = settings or LineupSettings()
        self.clock = clock or SystemClock()
        self.analyzer = analyzer or CategoryUrgencyAnalyzer()
        self.optimizer = LineupOptimizer(self.settings)
        self.aggregator = RestOfWeekAggregator(self.settings, self.clock, self.optimizer)

    @classmethod
    def from_config(
        cls,
        config: Mapping[str, Any],
        overrides: Optional[Mapping[str, Any]] = None,
        clock: Optional[Clock] = None,
    ) -> 'LineupService':
        """Build a service from Flask config plus per-request setting overrides."""
        settings = LineupSettings.from_config(config).with_overrides(overrides)
        if clock is None:
            clock = SystemClock(config.get('SCHEDULE_TIMEZONE', DEFAULT_TIMEZONE))
        return cls(settings=settings, clock=clock)

    def category_urgency(self, matchup: Optional[MatchupSnapshot]) -> List[CategoryUrgency]:
        return self.analyzer.analyze(matchup)

    def plan_day(
        self,
        game_date: date,
        roster: Sequence[RosterEntry],
        games: Sequence[Game],
        matchup: Optional[MatchupSnapshot] = None,
    ) -> Tuple[DayResult, List[CategoryUrgency]]:
        """
        Start/sit plan for one date.

        Args:
            game_date: Date to plan
            roster: Full fantasy roster
            games: Schedule (games on other dates are ignored)
            matchup: Current matchup totals, if known

        Returns:
            (DayResult, category urgency used for scoring)
        """
        urgencies = self.category_urgency(matchup)
        todays_games = [g for g in games if g.game_date == game_date]

        rating = build_rating_function(
            roster,
            use_weighted=self.settings.use_weighted_rating,
            weights=self.settings.category_weights,
        )
        core_ids = core_player_ids(roster, rating, self.settings.core_player_count)

        result = self.optimizer.optimize_day(
            game_date, roster, todays_games, urgencies, rating, core_ids
        )
        return result, urgencies

    def plan_rest_of_week(
        self,
        dates: Sequence[date],
        roster: Sequence[RosterEntry],
        games: Sequence[Game],
        opponent_roster: Optional[Sequence[RosterEntry]] = None,
        matchup: Optional[MatchupSnapshot] = None,
        elapsed_starts: Optional[int] = None,
        opponent_elapsed_starts: Optional[int] = None,
    ) -> HeadToHead:
        """
        Rest-of-week start projection for my team and (optionally) my opponent.

        Args:
            dates: Every date in the matchup week
            roster: My roster
            games: Schedule covering the week
            opponent_roster: Opponent roster; None skips the comparison
            matchup: Current matchup totals, if known
            elapsed_starts: Actual starts I have used so far this week
            opponent_elapsed_starts: Same for the opponent

        Returns:
            HeadToHead with both WeekSummaries and the start edge
        """
        games_by_date = group_games_by_date(games)

        if self._should_derive_matchup(matchup, opponent_roster):
            matchup = self._derive_matchup(dates, roster, opponent_roster, games_by_date, matchup)

        urgencies = self.category_urgency(matchup)

        my_summary = self.aggregator.summarize_team(
            'my_team', roster, dates, games_by_date, urgencies, elapsed_starts
        )

        opponent_summary = None
        if opponent_roster is not None:
            # Opponent lineups are scored from their side of the matchup
            opponent_urgencies = self.category_urgency(matchup.swapped() if matchup else None)
            opponent_summary = self.aggregator.summarize_team(
                'opponent', opponent_roster, dates, games_by_date,
                opponent_urgencies, opponent_elapsed_starts
            )

        result = HeadToHead(
            my_team=my_summary,
            opponent=opponent_summary,
            category_urgency=urgencies,
        )
        if opponent_summary is not None:
            logger.info(
                f"Start edge: {result.start_edge_pre_cap:+d} pre-cap, "
                f"{result.start_edge:+d} after cap"
            )
        return result

    def _should_derive_matchup(
        self,
        matchup: Optional[MatchupSnapshot],
        opponent_roster: Optional[Sequence[RosterEntry]],
    ) -> bool:
        """
        Derive projected totals when none were supplied.

        With no matchup at all this is opt-in (derive_matchup_from_schedule).
        A matchup carrying only in-progress totals is always completed, so the
        current totals are never dropped.
        """
        if not opponent_roster:
            return False
        if matchup is None:
            return self.settings.derive_matchup_from_schedule
        return not matchup.has_projected and matchup.has_data

    def _derive_matchup(
        self,
        dates: Sequence[date],
        roster: Sequence[RosterEntry],
        opponent_roster: Sequence[RosterEntry],
        games_by_date,
        current: Optional[MatchupSnapshot] = None,
    ) -> MatchupSnapshot:
        """
        Project both teams' category totals with a neutral-urgency first pass.

        In-progress totals, when supplied, are added to the remaining-days
        projection and kept as the matchup's current totals.
        """
        neutral = neutral_urgency()
        mine = self.aggregator.summarize_team('my_team', roster, dates, games_by_date, neutral)
        theirs = self.aggregator.summarize_team(
            'opponent', opponent_roster, dates, games_by_date, neutral
        )
        if current is None:
            logger.debug("Derived matchup totals from schedule projection")
            return MatchupSnapshot(
                my_projected=dict(mine.projected_totals),
                opp_projected=dict(theirs.projected_totals),
            )

        logger.debug("Derived matchup totals from current totals plus schedule projection")
        return MatchupSnapshot(
            my_projected=combine_week_totals(current.my_current, mine.projected_totals),
            opp_projected=combine_week_totals(current.opp_current, theirs.projected_totals),
            my_current=current.my_current,
            opp_current=current.opp_current,
        )

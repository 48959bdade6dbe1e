"""
Tests for the consolidated lineup planning service.
"""

from datetime import date

import pytest

from backend.config import TestingConfig
from backend.models import LineupSettings, MatchupSnapshot, UrgencyLevel
from backend.services.lineup_service import LineupService

WEDNESDAY = date(2026, 10, 21)


@pytest.fixture
def my_roster(make_entry):
    stats = {'pts': 10, 'reb': 4}
    return [
        make_entry(f'm_{pos}', positions=[pos], stats=stats)
        for pos in ('PG', 'SG', 'SF', 'C')
    ]


@pytest.fixture
def opponent_roster(make_entry):
    stats = {'pts': 5, 'reb': 12}
    return [
        make_entry('o_pg', positions=['PG'], team='BOS', stats=stats),
        make_entry('o_sg', positions=['SG'], team='BOS', stats=stats),
    ]


@pytest.fixture
def service(wednesday_noon):
    return LineupService(LineupSettings(), clock=wednesday_noon)


def _config(**overrides):
    config = {
        key: getattr(TestingConfig, key)
        for key in dir(TestingConfig) if key.isupper()
    }
    config.update(overrides)
    return config


class TestPlanDay:
    """Test single-day planning."""

    def test_neutral_without_matchup(self, service, my_roster, week_games):
        result, urgencies = service.plan_day(WEDNESDAY, my_roster, week_games)
        assert result.starts == 4
        assert all(u.urgency == UrgencyLevel.MED for u in urgencies)

    def test_other_dates_ignored(self, service, my_roster, make_game):
        """Test games on other dates don't make players available."""
        games = [make_game(date(2026, 10, 22))]
        result, _ = service.plan_day(WEDNESDAY, my_roster, games)
        assert result.starts == 0
        assert len(result.unfilled_slots) == 8
        assert sorted(result.idle) == sorted(e.player_id for e in my_roster)

    def test_matchup_drives_urgency(self, service, my_roster, week_games):
        matchup = MatchupSnapshot(my_projected={'reb': 300}, opp_projected={'reb': 305})
        _, urgencies = service.plan_day(WEDNESDAY, my_roster, week_games, matchup)
        by_category = {u.category: u.urgency for u in urgencies}
        assert by_category['reb'] == UrgencyLevel.HIGH


class TestPlanRestOfWeek:
    """Test head-to-head rest-of-week planning."""

    def test_start_edge(self, service, my_roster, opponent_roster, week_dates, week_games):
        result = service.plan_rest_of_week(
            week_dates, my_roster, week_games, opponent_roster=opponent_roster
        )
        assert result.my_team.projected_starts == 20
        assert result.opponent.projected_starts == 10
        assert result.start_edge_pre_cap == 10
        assert result.start_edge == 10

    def test_cap_narrows_edge(self, wednesday_noon, my_roster, opponent_roster,
                              week_dates, week_games):
        service = LineupService(LineupSettings(weekly_starts_cap=20), clock=wednesday_noon)
        result = service.plan_rest_of_week(
            week_dates, my_roster, week_games, opponent_roster=opponent_roster
        )
        assert result.my_team.starts_used == 12
        assert result.opponent.starts_used == 10
        assert result.start_edge_pre_cap == 10
        assert result.start_edge == 2

    def test_without_opponent(self, service, my_roster, week_dates, week_games):
        result = service.plan_rest_of_week(week_dates, my_roster, week_games)
        assert result.opponent is None
        assert result.start_edge == result.my_team.starts_used
        assert result.to_dict()['opponent'] is None

    def test_actual_elapsed_starts(self, service, my_roster, opponent_roster,
                                   week_dates, week_games):
        result = service.plan_rest_of_week(
            week_dates, my_roster, week_games,
            opponent_roster=opponent_roster,
            elapsed_starts=28,
            opponent_elapsed_starts=0,
        )
        assert result.my_team.starts_used == 4
        assert result.opponent.starts_used == 10
        assert result.start_edge == -6

    def test_derived_matchup(self, wednesday_noon, my_roster, opponent_roster,
                             week_dates, week_games):
        """Test urgency derived from a schedule projection of both rosters."""
        settings = LineupSettings(derive_matchup_from_schedule=True)
        service = LineupService(settings, clock=wednesday_noon)
        result = service.plan_rest_of_week(
            week_dates, my_roster, week_games, opponent_roster=opponent_roster
        )
        by_category = {u.category: u.urgency for u in result.category_urgency}
        # 200 vs 50 points, 80 vs 120 rebounds
        assert by_category['pts'] == UrgencyLevel.LOW
        assert by_category['reb'] == UrgencyLevel.MED

    def test_current_totals_completed_with_projection(self, service, my_roster, opponent_roster,
                                                      week_dates, week_games):
        """Test a matchup with only in-progress totals is projected forward, not dropped."""
        matchup = MatchupSnapshot(
            my_projected={},
            opp_projected={},
            my_current={'pts': 400, 'reb': 20},
            opp_current={'pts': 100, 'reb': 25},
        )
        result = service.plan_rest_of_week(
            week_dates, my_roster, week_games,
            opponent_roster=opponent_roster, matchup=matchup,
        )
        by_category = {u.category: u.urgency for u in result.category_urgency}
        # 400 + 200 vs 100 + 50 points; down 5 rebounds with plenty of week left
        assert by_category['pts'] == UrgencyLevel.LOW
        assert by_category['reb'] == UrgencyLevel.HIGH
        delta = {u.category: u.delta for u in result.category_urgency}
        assert delta['pts'] == pytest.approx(300)

    def test_current_totals_without_opponent_roster(self, service, my_roster, week_games):
        """Test in-progress totals alone still drive urgency."""
        matchup = MatchupSnapshot(
            my_projected={},
            opp_projected={},
            my_current={'pts': 400},
            opp_current={'pts': 100},
        )
        _, urgencies = service.plan_day(WEDNESDAY, my_roster, week_games, matchup)
        by_category = {u.category: u.urgency for u in urgencies}
        assert by_category['pts'] == UrgencyLevel.LOW


class TestFromConfig:
    """Test building the service from app config."""

    def test_config_and_overrides(self, wednesday_noon):
        service = LineupService.from_config(
            _config(WEEKLY_STARTS_CAP=30),
            {'assignment_strategy': 'matching'},
            clock=wednesday_noon,
        )
        assert service.settings.weekly_starts_cap == 30
        assert service.settings.assignment_strategy == 'matching'
        assert service.clock is wednesday_noon

    def test_bad_override(self):
        with pytest.raises(ValueError):
            LineupService.from_config(_config(), {'today_elapsed_policy': 'sometimes'})

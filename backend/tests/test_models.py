"""
Tests for domain models and input parsing.
"""

from datetime import date

import pytest

from backend.models import (
    DAILY_SLOT_COUNT,
    DEFAULT_CATEGORY_WEIGHTS,
    Game,
    HeadToHead,
    LineupSettings,
    MatchupSnapshot,
    Player,
    RosterEntry,
    STANDARD_LINEUP_SLOTS,
    SlotType,
    WeekSummary,
    parse_date,
    parse_roster,
)


class TestLineupSlots:
    """Test the fixed daily slot definition."""

    def test_slot_order(self):
        """Test slots are visited PG, SG, SF, PF, C, G, F/C, UTIL."""
        labels = [slot.label for slot in STANDARD_LINEUP_SLOTS]
        assert labels == ['PG', 'SG', 'SF', 'PF', 'C', 'G', 'F/C', 'UTIL']
        assert DAILY_SLOT_COUNT == 8

    def test_slot_eligibility(self):
        """Test flex slots accept their position groups."""
        slots = {slot.label: slot for slot in STANDARD_LINEUP_SLOTS}
        assert slots['G'].accepts(['SG'])
        assert not slots['G'].accepts(['SF'])
        assert slots['F/C'].accepts(['C'])
        assert slots['UTIL'].accepts(['PF'])
        assert not slots['PG'].accepts([])


class TestPlayerParsing:
    """Test roster row parsing."""

    def test_positions_from_string(self):
        """Test 'PG/SG' position strings split into a tuple."""
        player = Player.from_dict({'id': 7, 'name': 'Guard', 'positions': 'pg/sg'})
        assert player.player_id == '7'
        assert player.positions == ('PG', 'SG')

    def test_blank_stat_cells_read_as_zero(self):
        """Test ESPN '--' cells parse as 0."""
        player = Player.from_dict({'id': 'p1', 'stats': {'pts': '--', 'reb': '7.5'}})
        assert player.per_game_stats['pts'] == 0.0
        assert player.per_game_stats['reb'] == 7.5

    def test_stat_key_aliases(self):
        """Test alternate stat keys map to canonical keys."""
        player = Player.from_dict({'id': 'p1', 'stats': {'TRB': 9, 'tov': 2}})
        assert player.stat('reb') == 9.0
        assert player.stat('to') == 2.0

    def test_percentage_falls_back_to_components(self):
        """Test FG% derives from makes and attempts when missing."""
        player = Player.from_dict({'id': 'p1', 'stats': {'fgm': 5, 'fga': 10}})
        assert player.stat('fg_pct') == pytest.approx(0.5)
        assert player.stat('ft_pct') == 0.0

    def test_non_numeric_stat_raises(self):
        """Test malformed stat values are rejected."""
        with pytest.raises(ValueError):
            Player.from_dict({'id': 'p1', 'stats': {'pts': 'lots'}})

    @pytest.mark.parametrize('value', ['nan', 'Infinity', float('nan'), float('inf')])
    def test_non_finite_stat_raises(self, value):
        """Test NaN and infinite stat values are rejected."""
        with pytest.raises(ValueError):
            Player.from_dict({'id': 'p1', 'stats': {'pts': value}})

    def test_games_played(self):
        """Test games played is read from either key."""
        assert Player.from_dict({'id': 'p1', 'gp': 4}).games_played == 4.0
        assert Player.from_dict({'id': 'p1', 'games_played': '12'}).games_played == 12.0
        assert Player.from_dict({'id': 'p1'}).games_played is None

    def test_missing_id_raises(self):
        """Test a player without an id is rejected."""
        with pytest.raises(ValueError):
            Player.from_dict({'name': 'Nobody'})

    def test_roster_must_be_list(self):
        """Test a non-list roster is a shape error."""
        with pytest.raises(ValueError):
            parse_roster({'id': 'p1'})


class TestRosterEntry:
    """Test roster entry slot parsing."""

    def test_ir_slot_becomes_reserve(self):
        """Test an IR slot label implies a reserve slot type."""
        entry = RosterEntry.from_dict({'id': 'p1', 'positions': ['C'], 'slot': 'IR'})
        assert entry.slot_type == SlotType.RESERVE
        assert entry.is_reserve

    def test_nested_player(self):
        """Test {'player': {...}, 'slot_type': ...} rows."""
        entry = RosterEntry.from_dict({
            'player': {'id': 'p2', 'positions': ['SF']},
            'slot_type': 'starter',
            'slot': 'SF',
        })
        assert entry.player_id == 'p2'
        assert entry.slot_type == SlotType.STARTER

    def test_unknown_slot_type_raises(self):
        """Test an unknown slot type is rejected."""
        with pytest.raises(ValueError):
            SlotType.parse('locker room')

    def test_ir_plus(self):
        """Test IR+ parses as reserve."""
        assert SlotType.parse('IR+') == SlotType.RESERVE


class TestGameParsing:
    """Test schedule row parsing."""

    def test_game_from_dict(self):
        """Test team codes are uppercased and dates parsed."""
        game = Game.from_dict({'date': '2026-10-21', 'home_team': 'lal', 'away_team': 'bos'})
        assert game.game_date == date(2026, 10, 21)
        assert game.home_team == 'LAL'
        assert game.away_team == 'BOS'

    def test_game_requires_date(self):
        """Test a game without a date is rejected."""
        with pytest.raises(ValueError):
            Game.from_dict({'home_team': 'LAL', 'away_team': 'BOS'})

    def test_invalid_date(self):
        """Test unparsable dates raise ValueError."""
        with pytest.raises(ValueError):
            parse_date('next tuesday')


class TestLineupSettings:
    """Test engine settings validation."""

    def test_defaults(self):
        """Test default settings."""
        settings = LineupSettings()
        assert settings.weekly_starts_cap == 32
        assert settings.apply_injury_multipliers is True
        assert settings.category_weights == DEFAULT_CATEGORY_WEIGHTS

    def test_negative_cap_clamps_to_zero(self):
        """Test a negative cap clamps to 0."""
        assert LineupSettings(weekly_starts_cap=-5).weekly_starts_cap == 0
        assert LineupSettings(weekly_starts_cap=None).weekly_starts_cap == 0

    def test_weight_overrides_merge(self):
        """Test overriding one weight keeps the other defaults."""
        settings = LineupSettings().with_overrides({'category_weights': {'pts': 2.0}})
        assert settings.category_weights['pts'] == 2.0
        assert settings.category_weights['reb'] == DEFAULT_CATEGORY_WEIGHTS['reb']

    def test_unknown_weight_rejected(self):
        """Test unknown category weight keys are rejected."""
        with pytest.raises(ValueError):
            LineupSettings(category_weights={'dunks': 1.0})

    def test_unknown_override_rejected(self):
        """Test unknown setting keys are rejected."""
        with pytest.raises(ValueError):
            LineupSettings().with_overrides({'bench_everyone': True})

    def test_infinite_cap_override_rejected(self):
        """Test an infinite weekly cap override is a ValueError, not an overflow."""
        with pytest.raises(ValueError):
            LineupSettings().with_overrides({'weekly_starts_cap': float('inf')})

    def test_invalid_strategy_rejected(self):
        """Test an unknown assignment strategy is rejected."""
        with pytest.raises(ValueError):
            LineupSettings(assignment_strategy='random')

    def test_from_config(self):
        """Test settings built from a config mapping."""
        settings = LineupSettings.from_config({
            'WEEKLY_STARTS_CAP': 28,
            'APPLY_INJURY_MULTIPLIERS': 'false',
            'LINEUP_ASSIGNMENT_STRATEGY': 'matching',
        })
        assert settings.weekly_starts_cap == 28
        assert settings.apply_injury_multipliers is False
        assert settings.assignment_strategy == 'matching'


class TestMatchupSnapshot:
    """Test matchup totals parsing."""

    def test_from_dict_empty(self):
        """Test missing matchup data parses as None."""
        assert MatchupSnapshot.from_dict(None) is None
        assert MatchupSnapshot.from_dict({}) is None

    def test_swapped(self):
        """Test swapping sides."""
        snapshot = MatchupSnapshot.from_dict({
            'my_projected': {'pts': 500},
            'opp_projected': {'pts': 450},
        })
        swapped = snapshot.swapped()
        assert swapped.my_projected == {'pts': 450.0}
        assert swapped.opp_projected == {'pts': 500.0}
        assert not swapped.has_current

    def test_current_only(self):
        """Test in-progress totals alone count as matchup data."""
        snapshot = MatchupSnapshot.from_dict({
            'my_current': {'pts': 300},
            'opp_current': {'pts': 280},
        })
        assert not snapshot.has_projected
        assert snapshot.has_current
        assert snapshot.has_data


class TestHeadToHead:
    """Test start edge calculation."""

    def test_start_edges(self):
        """Test pre-cap and post-cap edges."""
        mine = WeekSummary(team_label='my_team', weekly_starts_cap=32,
                           projected_starts=30, starts_used=24)
        theirs = WeekSummary(team_label='opponent', weekly_starts_cap=32,
                             projected_starts=22, starts_used=22)
        result = HeadToHead(my_team=mine, opponent=theirs)
        assert result.start_edge_pre_cap == 8
        assert result.start_edge == 2

    def test_empty_summary(self):
        """Test a zeroed summary keeps the full budget."""
        summary = WeekSummary.empty('my_team', 32)
        assert summary.projected_starts == 0
        assert summary.remaining_budget == 32
        assert summary.to_dict()['players'] == []

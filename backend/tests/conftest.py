"""
Shared fixtures for the lineup planner tests.

Run with: python -m pytest backend/tests -v
"""

from datetime import date, datetime, timedelta

import pytest

from backend.app import create_app
from backend.config import TestingConfig
from backend.models import Game, Player, RosterEntry, SlotType
from backend.projections.clock import FixedClock

# Matchup week used throughout: Monday 2026-10-19 to Sunday 2026-10-25
WEEK_START = date(2026, 10, 19)
WEEK_DATES = [WEEK_START + timedelta(days=i) for i in range(7)]


@pytest.fixture
def app():
    """Create application for testing."""
    app = create_app(TestingConfig)
    app.config['TESTING'] = True
    yield app


@pytest.fixture
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture
def make_entry():
    """Factory for roster entries with sensible defaults."""
    def _make_entry(
        player_id,
        positions=('PG',),
        team='LAL',
        status='',
        minutes=30.0,
        stats=None,
        slot_type=SlotType.BENCH,
        cri=None,
        wcri=None,
        games_played=None,
    ):
        player = Player(
            player_id=player_id,
            name=f'Player {player_id}',
            positions=tuple(positions),
            team_code=team,
            status=status,
            minutes=minutes,
            per_game_stats=dict(stats or {}),
            cri=cri,
            wcri=wcri,
            games_played=games_played,
        )
        return RosterEntry(player=player, slot_type=slot_type)
    return _make_entry


@pytest.fixture
def make_game():
    """Factory for scheduled games."""
    def _make_game(game_date, home='LAL', away='BOS', status='', start_time=None):
        return Game(
            game_date=game_date,
            home_team=home,
            away_team=away,
            status=status,
            start_time=start_time,
        )
    return _make_game


@pytest.fixture
def week_dates():
    return list(WEEK_DATES)


@pytest.fixture
def week_games(make_game):
    """LAL hosts BOS every day of the matchup week."""
    return [make_game(d) for d in WEEK_DATES]


@pytest.fixture
def wednesday_noon():
    """Clock pinned to Wednesday noon Eastern, before that night's games."""
    return FixedClock(datetime(2026, 10, 21, 12, 0), 'America/New_York')

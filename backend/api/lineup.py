"""
Lineup planning API endpoints.

Every endpoint is a pure recomputation over the roster / schedule snapshot
in the request body; nothing is stored between calls.
"""

import logging

from flask import Blueprint, current_app, jsonify, request

from backend.models import (
    LineupSettings,
    MatchupSnapshot,
    parse_date,
    parse_datetime,
    parse_games,
    parse_roster,
)
from backend.projections.clock import FixedClock
from backend.services.lineup_service import LineupService

logger = logging.getLogger(__name__)

lineup_bp = Blueprint('lineup', __name__)


def _optional_int(data, key):
    value = data.get(key)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        raise ValueError(f'{key} must be an integer')
    try:
        return int(value)
    except (ValueError, OverflowError):
        raise ValueError(f'{key} must be an integer') from None


def _build_service(data, now=None):
    clock = None
    if now is not None:
        clock = FixedClock(now, current_app.config.get('SCHEDULE_TIMEZONE'))
    return LineupService.from_config(current_app.config, data.get('settings'), clock=clock)


@lineup_bp.route('/lineup/settings', methods=['GET'])
def get_settings():
    """
    Get the effective default lineup settings.

    Returns:
        JSON with settings built from the app configuration.
    """
    settings = LineupSettings.from_config(current_app.config)
    return jsonify({'settings': settings.to_dict()}), 200


@lineup_bp.route('/lineup/daily', methods=['POST'])
def plan_daily_lineup():
    """
    Optimize the starting lineup for one date.

    Request JSON:
        date: Date to plan (YYYY-MM-DD)
        roster: Array of roster entries
        games: Array of games ({date, home_team, away_team})
        settings: Optional per-request setting overrides
        matchup: Optional {my_projected, opp_projected, my_current, opp_current}

    Returns:
        JSON with the DayResult and the category urgency used for scoring.
    """
    data = request.get_json(silent=True)

    if not data:
        return jsonify({'error': 'No data provided'}), 400

    required_fields = ['date', 'roster', 'games']
    for field in required_fields:
        if field not in data:
            return jsonify({'error': f'{field} is required'}), 400

    try:
        game_date = parse_date(data['date'])
        roster = parse_roster(data['roster'])
        games = parse_games(data['games'])
        matchup = MatchupSnapshot.from_dict(data.get('matchup'))
        service = _build_service(data)

        result, urgencies = service.plan_day(game_date, roster, games, matchup)
    except ValueError as e:
        logger.warning(f"Rejected daily lineup request: {e}")
        return jsonify({'error': str(e)}), 400

    return jsonify({
        'day': result.to_dict(),
        'category_urgency': [u.to_dict() for u in urgencies],
        'settings': service.settings.to_dict(),
    }), 200


@lineup_bp.route('/lineup/rest-of-week', methods=['POST'])
def plan_rest_of_week():
    """
    Project rest-of-week starts for my team and my opponent.

    Request JSON:
        dates: Array of every date in the matchup week
        roster: My roster entries
        opponent_roster: Optional opponent roster entries
        games: Array of games covering the week
        settings: Optional per-request setting overrides
        matchup: Optional matchup category totals
        elapsed_starts: Optional starts already used this week (mine)
        opponent_elapsed_starts: Optional starts already used (opponent)
        now: Optional ISO timestamp used as the current time

    Returns:
        JSON with a WeekSummary per team and the head-to-head start edge.
    """
    data = request.get_json(silent=True)

    if not data:
        return jsonify({'error': 'No data provided'}), 400

    required_fields = ['dates', 'roster', 'games']
    for field in required_fields:
        if field not in data:
            return jsonify({'error': f'{field} is required'}), 400

    try:
        if not isinstance(data['dates'], list):
            raise ValueError('dates must be a list')
        dates = [parse_date(d) for d in data['dates']]
        roster = parse_roster(data['roster'])
        opponent_roster = None
        if data.get('opponent_roster') is not None:
            opponent_roster = parse_roster(data['opponent_roster'])
        games = parse_games(data['games'])
        matchup = MatchupSnapshot.from_dict(data.get('matchup'))
        elapsed_starts = _optional_int(data, 'elapsed_starts')
        opponent_elapsed_starts = _optional_int(data, 'opponent_elapsed_starts')
        service = _build_service(data, parse_datetime(data.get('now')))

        result = service.plan_rest_of_week(
            dates,
            roster,
            games,
            opponent_roster=opponent_roster,
            matchup=matchup,
            elapsed_starts=elapsed_starts,
            opponent_elapsed_starts=opponent_elapsed_starts,
        )
    except ValueError as e:
        logger.warning(f"Rejected rest-of-week request: {e}")
        return jsonify({'error': str(e)}), 400

    response = result.to_dict()
    response['settings'] = service.settings.to_dict()
    return jsonify(response), 200

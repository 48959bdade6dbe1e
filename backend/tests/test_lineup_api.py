"""
Tests for the lineup planning API endpoints.

Run with: python -m pytest backend/tests/test_lineup_api.py -v
"""

import pytest

WEEK = [f'2026-10-{day}' for day in range(19, 26)]


def _player(player_id, positions, team='LAL', **extra):
    row = {
        'id': player_id,
        'name': f'Player {player_id}',
        'positions': positions,
        'team_code': team,
        'minutes': 32,
        'stats': {'pts': 15, 'reb': 5, 'fgm': 6, 'fga': 12},
        'slot_type': 'bench',
    }
    row.update(extra)
    return row


@pytest.fixture
def roster():
    return [
        _player('pg', ['PG']),
        _player('wing', ['SG', 'SF'], team='GS'),
        _player('big', ['PF', 'C']),
        _player('hurt', ['C'], status='O'),
        _player('stash', ['SF'], slot_type='ir'),
        _player('q', ['PF'], status='Q'),
    ]


@pytest.fixture
def games():
    schedule = []
    for day in WEEK:
        schedule.append({'date': day, 'home_team': 'LAL', 'away_team': 'BOS'})
        schedule.append({'date': day, 'home_team': 'GSW', 'away_team': 'MIA'})
    return schedule


class TestHealth:
    """Test health and generic error handling."""

    def test_health(self, client):
        response = client.get('/api/health')
        assert response.status_code == 200
        assert response.get_json()['status'] == 'healthy'

    def test_unknown_route(self, client):
        response = client.get('/api/nothing-here')
        assert response.status_code == 404
        assert response.get_json()['error'] == 'Not Found'

    def test_wrong_method(self, client):
        response = client.get('/api/lineup/daily')
        assert response.status_code == 405
        assert 'error' in response.get_json()


class TestSettings:
    """Test the settings endpoint."""

    def test_defaults(self, client):
        response = client.get('/api/lineup/settings')
        assert response.status_code == 200
        settings = response.get_json()['settings']
        assert settings['weekly_starts_cap'] == 32
        assert settings['assignment_strategy'] == 'greedy'
        assert settings['category_weights']['pts'] == 1.0


class TestDailyLineup:
    """Test the daily lineup endpoint."""

    def test_daily_lineup(self, client, roster, games):
        response = client.post('/api/lineup/daily', json={
            'date': '2026-10-21',
            'roster': roster,
            'games': games,
        })

        assert response.status_code == 200
        day = response.get_json()['day']
        assert day['date'] == '2026-10-21'
        assert day['candidate_count'] == 4
        assert day['starts'] == 4
        assert len(day['assignments']) + len(day['unfilled_slots']) == 8

        reasons = {e['player_id']: e['reason'] for e in day['excluded']}
        assert reasons == {'hurt': 'Out', 'stash': 'IrSlot'}

        q_row = next(a for a in day['assignments'] if a['player_id'] == 'q')
        assert q_row['injury_multiplier'] == 0.7

    def test_category_urgency_returned(self, client, roster, games):
        response = client.post('/api/lineup/daily', json={
            'date': '2026-10-21',
            'roster': roster,
            'games': games,
            'matchup': {'my_projected': {'pts': 600}, 'opp_projected': {'pts': 500}},
        })
        urgency = {u['category']: u['urgency'] for u in response.get_json()['category_urgency']}
        assert urgency['pts'] == 'LOW'
        assert urgency['reb'] == 'MED'

    def test_settings_override(self, client, roster, games):
        response = client.post('/api/lineup/daily', json={
            'date': '2026-10-21',
            'roster': roster,
            'games': games,
            'settings': {'apply_injury_multipliers': False},
        })
        day = response.get_json()['day']
        q_row = next(a for a in day['assignments'] if a['player_id'] == 'q')
        assert q_row['injury_multiplier'] == 1.0
        assert 'hurt' not in {a['player_id'] for a in day['assignments']}

    def test_missing_field(self, client, roster):
        response = client.post('/api/lineup/daily', json={'date': '2026-10-21', 'roster': roster})
        assert response.status_code == 400
        assert response.get_json()['error'] == 'games is required'

    def test_no_body(self, client):
        response = client.post('/api/lineup/daily')
        assert response.status_code == 400
        assert 'error' in response.get_json()

    @pytest.mark.parametrize('body', [
        {'date': 'someday', 'roster': [], 'games': []},
        {'date': '2026-10-21', 'roster': {'id': 'x'}, 'games': []},
        {'date': '2026-10-21', 'roster': [{'id': 'x', 'stats': {'pts': 'many'}}], 'games': []},
        {'date': '2026-10-21', 'roster': [], 'games': [], 'settings': {'bogus': 1}},
        {'date': '2026-10-21', 'roster': [], 'games': [],
         'settings': {'category_weights': {'dunks': 2}}},
    ])
    def test_malformed_input(self, client, body):
        response = client.post('/api/lineup/daily', json=body)
        assert response.status_code == 400
        assert 'error' in response.get_json()


class TestRestOfWeek:
    """Test the rest-of-week endpoint."""

    def test_rest_of_week(self, client, roster, games):
        opponent = [
            _player('o1', ['PG'], team='BOS'),
            _player('o2', ['C'], team='MIA'),
        ]
        response = client.post('/api/lineup/rest-of-week', json={
            'dates': WEEK,
            'roster': roster,
            'opponent_roster': opponent,
            'games': games,
            'now': '2026-10-21T12:00:00',
        })

        assert response.status_code == 200
        data = response.get_json()
        mine = data['my_team']
        assert mine['elapsed_days'] == 2
        assert mine['days_remaining'] == 5
        assert mine['projected_starts'] == 20
        assert mine['starts_used'] == 20
        assert data['opponent']['projected_starts'] == 10
        assert data['start_edge_pre_cap'] == 10
        assert data['start_edge'] == 10

    def test_cap_override_and_elapsed(self, client, roster, games):
        response = client.post('/api/lineup/rest-of-week', json={
            'dates': WEEK,
            'roster': roster,
            'games': games,
            'now': '2026-10-21T12:00:00',
            'elapsed_starts': 10,
            'settings': {'weekly_starts_cap': 24},
        })

        data = response.get_json()
        assert response.status_code == 200
        assert data['opponent'] is None
        assert data['my_team']['starts_used'] == 14
        assert data['my_team']['cap_overflow'] == 6
        assert data['settings']['weekly_starts_cap'] == 24

    def test_empty_roster(self, client, games):
        response = client.post('/api/lineup/rest-of-week', json={
            'dates': WEEK,
            'roster': [],
            'games': games,
            'now': '2026-10-21T12:00:00',
        })
        mine = response.get_json()['my_team']
        assert mine['projected_starts'] == 0
        assert mine['remaining_budget'] == 32

    def test_bad_elapsed_starts(self, client, roster, games):
        response = client.post('/api/lineup/rest-of-week', json={
            'dates': WEEK,
            'roster': roster,
            'games': games,
            'elapsed_starts': 'lots',
        })
        assert response.status_code == 400

    def test_dates_must_be_list(self, client, roster, games):
        response = client.post('/api/lineup/rest-of-week', json={
            'dates': '2026-10-19',
            'roster': roster,
            'games': games,
        })
        assert response.status_code == 400

    def test_utc_now_reads_as_eastern(self, client, roster, games):
        """Test a 'Z' timestamp late Wednesday night Eastern keeps Wednesday remaining."""
        response = client.post('/api/lineup/rest-of-week', json={
            'dates': WEEK,
            'roster': roster,
            'games': games,
            'now': '2026-10-22T01:00:00Z',
            'settings': {'today_elapsed_policy': 'never'},
        })
        mine = response.get_json()['my_team']
        assert response.status_code == 200
        assert mine['elapsed_days'] == 2
        assert mine['days_remaining'] == 5

    @pytest.mark.parametrize('field', ['weekly_starts_cap', 'dtd_multiplier'])
    def test_non_finite_setting(self, client, field):
        """Test NaN / Infinity literals in the body are a 400, not a server error."""
        body = (
            '{"dates": ["2026-10-21"], "roster": [], "games": [], '
            f'"settings": {{"{field}": Infinity}}}}'
        )
        response = client.post('/api/lineup/rest-of-week', data=body,
                               content_type='application/json')
        assert response.status_code == 400
        assert 'finite' in response.get_json()['error']

    def test_non_finite_elapsed_starts(self, client):
        response = client.post('/api/lineup/rest-of-week', data=(
            '{"dates": ["2026-10-21"], "roster": [], "games": [], "elapsed_starts": NaN}'
        ), content_type='application/json')
        assert response.status_code == 400

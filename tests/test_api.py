import string


def guess_until_over(client):
    data = None
    for letter in string.ascii_lowercase:
        data = client.post('/api/game/guess', json={'letter': letter}).get_json()
        if data['state']['game_status'] != 'playing':
            break
    return data


def test_initial_state(client):
    res = client.get('/api/game/state')
    assert res.status_code == 200
    data = res.get_json()
    assert data['success'] is True
    assert data['state']['game_status'] == 'playing'
    assert data['state']['answer'] is None
    assert data['state']['difficulty'] == 'medium'


def test_guess_flow_reaches_terminal_state(client):
    data = guess_until_over(client)
    assert data['success'] is True
    assert data['state']['game_status'] in ('won', 'lost')
    assert data['state']['answer']

    stats = client.get('/api/statistics').get_json()['statistics']
    assert stats['games_played'] == 1


def test_repeated_guess_is_not_accepted(client):
    first = client.post('/api/game/guess', json={'letter': 'e'}).get_json()
    assert first['accepted'] is True
    second = client.post('/api/game/guess', json={'letter': 'E'}).get_json()
    assert second['accepted'] is False
    assert second['correct'] is False


def test_guess_requires_letter(client):
    res = client.post('/api/game/guess', json={})
    assert res.status_code == 400
    assert res.get_json()['success'] is False


def test_settings_and_new_game(client):
    res = client.post('/api/game/settings', json={'difficulty': 'easy', 'category': 'colors', 'new_round': True})
    data = res.get_json()
    assert data['success'] is True
    assert data['state']['difficulty'] == 'easy'
    assert data['state']['category'] == 'colors'
    assert 'animals' in data['categories']

    res = client.post('/api/game/new')
    assert res.get_json()['state']['guessed_letters'] == []


def test_invalid_difficulty_is_rejected(client):
    res = client.post('/api/game/settings', json={'difficulty': 'nightmare'})
    assert res.status_code == 400
    assert res.get_json()['success'] is False


def test_hint(client):
    data = client.post('/api/game/hint').get_json()
    assert data['success'] is True
    assert data['letter'] in data['state']['guessed_letters']


def test_pause_and_resume(client):
    assert client.post('/api/game/pause').get_json()['state']['game_status'] == 'paused'
    assert client.post('/api/game/pause').status_code == 400
    assert client.post('/api/game/resume').get_json()['state']['game_status'] == 'playing'
    assert client.post('/api/game/resume').status_code == 400


def test_timed_mode_and_best_time(client):
    data = client.post('/api/modes/timed', json={'enabled': True, 'time_limit': 30000}).get_json()
    assert data['state']['timed_mode'] is True
    assert data['state']['time_remaining'] == 30000
    assert client.get('/api/best_time').get_json()['best_time'] is None

    data = client.post('/api/modes/timed', json={'enabled': False}).get_json()
    assert data['state']['timed_mode'] is False


def test_practice_mode(client):
    res = client.post('/api/modes/practice', json={'locked_difficulty': 'hard', 'max_mistakes_override': 3})
    data = res.get_json()
    assert data['state']['practice_mode']['enabled'] is True
    assert data['state']['difficulty'] == 'hard'
    assert data['state']['max_incorrect_guesses'] == 3

    data = client.post('/api/modes/practice', json={'enabled': False}).get_json()
    assert data['state']['practice_mode']['enabled'] is False
    assert data['state']['max_incorrect_guesses'] == 6


def test_multiplayer_session(client):
    data = client.post('/api/multiplayer/start', json={'players': ['Alice', 'Bob'], 'total_rounds': 1}).get_json()
    assert data['current_player']['name'] == 'Alice'

    guess_until_over(client)
    data = client.post('/api/multiplayer/advance').get_json()
    assert data['finished'] is False
    assert data['current_player']['name'] == 'Bob'

    guess_until_over(client)
    data = client.post('/api/multiplayer/advance').get_json()
    assert data['finished'] is True
    assert data['winners']
    assert len(data['standings']) == 2

    assert client.post('/api/multiplayer/advance').status_code == 400
    assert client.get('/api/multiplayer/scores').get_json()['scores'] == []


def test_multiplayer_requires_players(client):
    res = client.post('/api/multiplayer/start', json={'players': []})
    assert res.status_code == 400


def test_achievements(client):
    data = client.get('/api/achievements').get_json()
    assert data['success'] is True
    assert set(data['achievements']) >= {'firstWin', 'scoreHunter'}


def test_statistics_csv_export(client):
    guess_until_over(client)
    res = client.get('/api/statistics?format=csv')
    assert res.mimetype == 'text/csv'
    assert res.get_data(as_text=True).startswith('timestamp,result')

"""
Game Controller

Handles all game-related HTTP endpoints.
"""

from flask import Blueprint, current_app, request, jsonify
from ..utils.errors import HangmanError, user_message
from ..utils.game_logger import game_logger

game_bp = Blueprint('game', __name__)


def get_game_service():
    """Game engine bound to the current application, or None."""
    return getattr(current_app, 'game_service', None)


def _unavailable():
    return jsonify({
        'success': False,
        'error': 'Game service unavailable'
    }), 500


def _success(action: str, response_data: dict, **kwargs):
    response_data = {'success': True, **response_data}
    game_logger.log_server_response(request, action, True, response_data, **kwargs)
    return jsonify(response_data)


def _failure(action: str, error: Exception, status: int = 400):
    game_logger.log_error(error, action, request)
    error_response = {
        'success': False,
        'error': user_message(error)
    }
    if isinstance(error, HangmanError):
        error_response['error_kind'] = error.kind.value
    game_logger.log_server_response(request, action, False, error_response)
    return jsonify(error_response), status


@game_bp.route('/game/new', methods=['POST'])
def new_game():
    """Start a new round with the current settings."""
    try:
        game_service = get_game_service()
        if not game_service:
            return _unavailable()

        game_logger.log_user_action(request, 'new_game')
        game_service.reset_game()
        return _success('new_game', {'state': game_service.get_state()})

    except HangmanError as e:
        return _failure('new_game', e, 500)
    except Exception as e:
        return _failure('new_game', e)


@game_bp.route('/game/state', methods=['GET'])
def get_state():
    """Get current game state."""
    try:
        game_service = get_game_service()
        if not game_service:
            return _unavailable()

        return jsonify({
            'success': True,
            'state': game_service.get_state()
        })

    except Exception as e:
        return _failure('get_state', e, 500)


@game_bp.route('/game/guess', methods=['POST'])
def make_guess():
    """Guess a single letter."""
    try:
        game_service = get_game_service()
        if not game_service:
            return _unavailable()

        data = request.get_json() or {}
        letter = data.get('letter')
        if not isinstance(letter, str) or not letter.strip():
            return jsonify({
                'success': False,
                'error': 'A letter is required'
            }), 400

        game_logger.log_user_action(request, 'guess', letter=letter)

        accepted, correct = game_service.submit_guess(letter)

        state = game_service.get_state()
        return _success('guess', {
            'correct': correct,
            'accepted': accepted,
            'state': state
        }, game_status=state['game_status'])

    except Exception as e:
        return _failure('guess', e)


@game_bp.route('/game/hint', methods=['POST'])
def get_hint():
    """Reveal one hidden letter."""
    try:
        game_service = get_game_service()
        if not game_service:
            return _unavailable()

        game_logger.log_user_action(request, 'hint')
        letter = game_service.get_hint()
        if letter is None:
            return jsonify({
                'success': False,
                'error': 'No hint available for this round'
            }), 400

        return _success('hint', {'letter': letter, 'state': game_service.get_state()})

    except Exception as e:
        return _failure('hint', e)


@game_bp.route('/game/pause', methods=['POST'])
def pause_game():
    """Pause the current round."""
    try:
        game_service = get_game_service()
        if not game_service:
            return _unavailable()

        game_logger.log_user_action(request, 'pause')
        if not game_service.pause_game():
            return jsonify({
                'success': False,
                'error': 'Only a round in progress can be paused'
            }), 400

        return _success('pause', {'state': game_service.get_state()})

    except Exception as e:
        return _failure('pause', e)


@game_bp.route('/game/resume', methods=['POST'])
def resume_game():
    """Resume a paused round."""
    try:
        game_service = get_game_service()
        if not game_service:
            return _unavailable()

        game_logger.log_user_action(request, 'resume')
        if not game_service.resume_game():
            return jsonify({
                'success': False,
                'error': 'Game is not paused'
            }), 400

        return _success('resume', {'state': game_service.get_state()})

    except Exception as e:
        return _failure('resume', e)


@game_bp.route('/game/settings', methods=['POST'])
def update_settings():
    """
    Change difficulty and/or category for the next round.

    Body: {"difficulty": "easy|medium|hard", "category": "...", "new_round": bool}
    """
    try:
        game_service = get_game_service()
        if not game_service:
            return _unavailable()

        data = request.get_json() or {}
        game_logger.log_user_action(request, 'update_settings', settings=data)

        difficulty_applied = None
        if 'difficulty' in data:
            difficulty_applied = game_service.set_difficulty(data['difficulty'])
        if 'category' in data:
            game_service.set_category(data['category'])
        if data.get('new_round'):
            game_service.reset_game()

        return _success('update_settings', {
            'difficulty_applied': difficulty_applied,
            'categories': game_service.available_categories(),
            'state': game_service.get_state()
        })

    except Exception as e:
        return _failure('update_settings', e)


@game_bp.route('/modes/timed', methods=['POST'])
def timed_mode():
    """
    Turn timed mode on or off.

    Body: {"enabled": bool, "time_limit": milliseconds}
    """
    try:
        game_service = get_game_service()
        if not game_service:
            return _unavailable()

        data = request.get_json() or {}
        game_logger.log_user_action(request, 'timed_mode', settings=data)

        if data.get('enabled', True):
            game_service.enable_timed_mode(data.get('time_limit'))
        else:
            game_service.disable_timed_mode()

        return _success('timed_mode', {'state': game_service.get_state()})

    except Exception as e:
        return _failure('timed_mode', e)


@game_bp.route('/modes/practice', methods=['POST'])
def practice_mode():
    """
    Turn practice mode on or off.

    Body: {"enabled": bool, "allow_repeats": bool, "endless": bool,
           "locked_difficulty": str, "max_mistakes_override": int,
           "word_length_filter": {"min": int, "max": int}}
    """
    try:
        game_service = get_game_service()
        if not game_service:
            return _unavailable()

        data = request.get_json() or {}
        game_logger.log_user_action(request, 'practice_mode', settings=data)

        if data.get('enabled', True):
            settings = {
                key: data[key] for key in (
                    'allow_repeats', 'endless', 'locked_difficulty',
                    'max_mistakes_override', 'word_length_filter'
                ) if key in data
            }
            game_service.enable_practice_mode(**settings)
        else:
            game_service.disable_practice_mode()

        return _success('practice_mode', {
            'state': game_service.get_state(),
            'progress': game_service.get_practice_progress()
        })

    except Exception as e:
        return _failure('practice_mode', e)


@game_bp.route('/multiplayer/start', methods=['POST'])
def start_multiplayer():
    """
    Start a local multiplayer session.

    Body: {"players": ["Alice", "Bob"], "total_rounds": int}
    """
    try:
        game_service = get_game_service()
        if not game_service:
            return _unavailable()

        data = request.get_json() or {}
        players = data.get('players') or []
        if not isinstance(players, list):
            return jsonify({
                'success': False,
                'error': 'players must be a list of names'
            }), 400

        game_logger.log_user_action(request, 'start_multiplayer', players=players,
                                    total_rounds=data.get('total_rounds'))
        game_service.enable_multiplayer_mode(players, data.get('total_rounds'))

        return _success('start_multiplayer', {
            'current_player': game_service.get_current_player(),
            'state': game_service.get_state()
        })

    except Exception as e:
        return _failure('start_multiplayer', e)


@game_bp.route('/multiplayer/advance', methods=['POST'])
def advance_multiplayer():
    """Pass the turn, or end the session once the last round is complete."""
    try:
        game_service = get_game_service()
        if not game_service:
            return _unavailable()

        game_logger.log_user_action(request, 'advance_multiplayer')

        result = game_service.advance_or_end_multiplayer()
        if result is None:
            return jsonify({
                'success': False,
                'error': 'Multiplayer is not active'
            }), 400

        if result['finished']:
            return _success('advance_multiplayer', result)
        return _success('advance_multiplayer', {**result, 'state': game_service.get_state()})

    except Exception as e:
        return _failure('advance_multiplayer', e)


@game_bp.route('/multiplayer/end', methods=['POST'])
def end_multiplayer():
    """End the multiplayer session and report the winners."""
    try:
        game_service = get_game_service()
        if not game_service:
            return _unavailable()

        game_logger.log_user_action(request, 'end_multiplayer')
        result = game_service.end_multiplayer_game()
        return _success('end_multiplayer', result)

    except Exception as e:
        return _failure('end_multiplayer', e)


@game_bp.route('/multiplayer/scores', methods=['GET'])
def multiplayer_scores():
    """Get the multiplayer scoreboard."""
    try:
        game_service = get_game_service()
        if not game_service:
            return _unavailable()

        return jsonify({
            'success': True,
            'current_player': game_service.get_current_player(),
            'scores': game_service.get_multiplayer_scores()
        })

    except Exception as e:
        return _failure('multiplayer_scores', e, 500)


@game_bp.route('/statistics', methods=['GET'])
def get_statistics():
    """Get lifetime statistics; ?format=csv exports the game history."""
    try:
        game_service = get_game_service()
        if not game_service:
            return _unavailable()

        if request.args.get('format') == 'csv':
            return current_app.response_class(
                game_service.export_statistics('csv'),
                mimetype='text/csv'
            )

        return jsonify({
            'success': True,
            'statistics': game_service.get_statistics()
        })

    except Exception as e:
        return _failure('get_statistics', e, 500)


@game_bp.route('/achievements', methods=['GET'])
def get_achievements():
    """Get achievement unlock status."""
    try:
        game_service = get_game_service()
        if not game_service:
            return _unavailable()

        return jsonify({
            'success': True,
            'achievements': game_service.get_achievements()
        })

    except Exception as e:
        return _failure('get_achievements', e, 500)


@game_bp.route('/best_time', methods=['GET'])
def get_best_time():
    """Get the best timed completion for the current difficulty and category."""
    try:
        game_service = get_game_service()
        if not game_service:
            return _unavailable()

        return jsonify({
            'success': True,
            'best_time': game_service.get_best_time()
        })

    except Exception as e:
        return _failure('get_best_time', e, 500)

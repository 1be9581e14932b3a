"""
Puzzle Controller

Handles all puzzle-related HTTP endpoints: the board, key presses,
attempts, share text and the countdown to the next puzzle.
"""

from dataclasses import asdict
from flask import Blueprint, current_app, request, jsonify
from ..utils.decorators import require_session
from ..utils.game_logger import game_logger

puzzle_bp = Blueprint('puzzle', __name__)


def _error(action, message, status, ordinal=None):
    error_response = {
        'success': False,
        'error': message
    }
    game_logger.log_server_response(request, action, False, error_response, ordinal)
    return jsonify(error_response), status


@puzzle_bp.route('/puzzle', methods=['GET'])
@require_session
def get_state(session):
    """Get the current puzzle state."""
    ordinal = session.engine.ordinal
    try:
        game_logger.log_user_action(request, 'get_state', ordinal)

        response_data = {
            'success': True,
            'state': asdict(session.view())
        }

        game_logger.log_server_response(request, 'get_state', True, response_data, ordinal)
        return jsonify(response_data)

    except Exception as e:
        game_logger.log_error(request, e, 'get_state', ordinal)
        return _error('get_state', str(e), 500, ordinal)


@puzzle_bp.route('/puzzle/letter', methods=['POST'])
@require_session
def submit_letter(session):
    """Type one letter into the current row."""
    ordinal = session.engine.ordinal
    try:
        data = request.get_json(silent=True)
        if not data or 'letter' not in data:
            return _error('submit_letter', 'Letter is required', 400, ordinal)

        letter = data['letter']
        if not isinstance(letter, str) or len(letter) != 1 or not letter.isalpha():
            return _error('submit_letter', 'Letter must be a single alphabetic character', 400, ordinal)

        game_logger.log_user_action(request, 'submit_letter', ordinal)

        accepted = session.engine.submit_letter(letter)
        response_data = {
            'success': True,
            'accepted': accepted,
            'state': asdict(session.view())
        }

        game_logger.log_server_response(request, 'submit_letter', True, response_data, ordinal, accepted=accepted)
        return jsonify(response_data)

    except Exception as e:
        game_logger.log_error(request, e, 'submit_letter', ordinal)
        return _error('submit_letter', str(e), 500, ordinal)


@puzzle_bp.route('/puzzle/delete', methods=['POST'])
@require_session
def delete_letter(session):
    """Remove the last letter of the current row."""
    ordinal = session.engine.ordinal
    try:
        game_logger.log_user_action(request, 'delete_letter', ordinal)

        accepted = session.engine.delete_letter()
        response_data = {
            'success': True,
            'accepted': accepted,
            'state': asdict(session.view())
        }

        game_logger.log_server_response(request, 'delete_letter', True, response_data, ordinal, accepted=accepted)
        return jsonify(response_data)

    except Exception as e:
        game_logger.log_error(request, e, 'delete_letter', ordinal)
        return _error('delete_letter', str(e), 500, ordinal)


@puzzle_bp.route('/puzzle/submit', methods=['POST'])
@require_session
def submit_attempt(session):
    """Submit the current row for validation and scoring."""
    ordinal = session.engine.ordinal
    try:
        game_logger.log_user_action(request, 'submit_attempt', ordinal)

        result = session.engine.submit_attempt()
        response_data = result.to_dict()
        response_data['state'] = asdict(session.view())

        if not result.success:
            game_logger.log_server_response(
                request, 'submit_attempt', False, response_data, ordinal,
                validation_error=response_data['error']
            )
            return jsonify(response_data), 400

        game_logger.log_server_response(
            request, 'submit_attempt', True, response_data, ordinal,
            row=result.row_index + 1, outcome=response_data['outcome']
        )
        return jsonify(response_data)

    except Exception as e:
        game_logger.log_error(request, e, 'submit_attempt', ordinal)
        return _error('submit_attempt', str(e), 500, ordinal)


@puzzle_bp.route('/share', methods=['GET'])
@require_session
def get_share_text(session):
    """Get the share text of the finished puzzle."""
    ordinal = session.engine.ordinal
    try:
        game_logger.log_user_action(request, 'get_share_text', ordinal)

        text = session.share_text()
        if text is None:
            return _error('get_share_text', 'Puzzle is not finished yet', 409, ordinal)

        response_data = {
            'success': True,
            'text': text
        }
        game_logger.log_server_response(request, 'get_share_text', True, response_data, ordinal)
        return jsonify(response_data)

    except Exception as e:
        game_logger.log_error(request, e, 'get_share_text', ordinal)
        return _error('get_share_text', str(e), 500, ordinal)


@puzzle_bp.route('/countdown', methods=['GET'])
@require_session
def get_countdown(session):
    """Get the time left until the next puzzle."""
    ordinal = session.engine.ordinal
    try:
        remaining = session.remaining()
        if remaining is None:
            return _error('get_countdown', 'Puzzle is not finished yet', 409, ordinal)

        response_data = {
            'success': True,
            'remaining': asdict(remaining),
            'formatted': remaining.format(),
            'next_release': session.countdown.target.isoformat()
        }
        return jsonify(response_data)

    except Exception as e:
        game_logger.log_error(request, e, 'get_countdown', ordinal)
        return _error('get_countdown', str(e), 500, ordinal)


@puzzle_bp.route('/health', methods=['GET'])
def health_check():
    """Health check endpoint."""
    try:
        session = getattr(current_app, 'puzzle_session', None)
        engine = session.engine if session else None

        response_data = {
            'status': 'healthy',
            'puzzle_loaded': engine is not None,
            'ordinal': engine.ordinal if engine else None,
            'log_stats': game_logger.get_log_stats()
        }
        return jsonify(response_data)

    except Exception as e:
        game_logger.log_error(request, e, 'health_check')
        return jsonify({'status': 'error', 'error': str(e)}), 500

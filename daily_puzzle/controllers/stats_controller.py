"""
Statistics Controller

Handles the player statistics endpoint.
"""

from flask import Blueprint, request, jsonify
from ..utils.decorators import require_session
from ..utils.game_logger import game_logger

stats_bp = Blueprint('stats', __name__)


@stats_bp.route('/stats', methods=['GET'])
@require_session
def get_stats(session):
    """Get cumulative statistics, including the derived win percentage."""
    try:
        game_logger.log_user_action(request, 'get_stats', session.engine.ordinal)

        response_data = {
            'success': True,
            'stats': session.stats_summary()
        }

        game_logger.log_server_response(request, 'get_stats', True, response_data, session.engine.ordinal)
        return jsonify(response_data)

    except Exception as e:
        game_logger.log_error(request, e, 'get_stats')
        return jsonify({'success': False, 'error': str(e)}), 500

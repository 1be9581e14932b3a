"""
Request Decorators

Contains decorators shared by the HTTP endpoints.
"""

from functools import wraps
from flask import jsonify, current_app


def require_session(f):
    """
    Decorator that hands the application's puzzle session to the endpoint
    as the ``session`` keyword argument.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        session = getattr(current_app, 'puzzle_session', None)
        if session is None or session.engine is None:
            return jsonify({
                'success': False,
                'error': 'Puzzle session unavailable'
            }), 500

        kwargs['session'] = session
        return f(*args, **kwargs)

    return decorated_function

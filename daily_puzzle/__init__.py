"""
Daily Puzzle Server Application Package

A daily word-guessing puzzle: one secret word per calendar day, scored
attempts, resumable progress, player statistics and a countdown to the next
puzzle, served over HTTP with real-time updates over WebSocket.
"""

from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
from .config import Config


def create_app(config_class=Config, session=None, **session_options):
    """
    Application factory pattern for creating Flask app instances.

    Args:
        config_class: Configuration class to use
        session: Pre-built PuzzleSession; one is built from ``config_class`` otherwise
        **session_options: Passed to PuzzleSession (store, scheduler, clock,
            suggestion_service, words)

    Returns:
        Flask application instance and its SocketIO server
    """
    from .services.puzzle_session import PuzzleSession
    from .utils.game_logger import game_logger

    app = Flask(__name__)
    app.config.from_object(config_class)

    game_logger.configure(config_class.LOG_DIR, config_class.LOG_LEVEL)

    # Initialize extensions
    CORS(app)
    socketio = SocketIO(app, cors_allowed_origins="*", logger=False, engineio_logger=False)

    # Build and start the puzzle session before anything can reach it
    if session is None:
        session = PuzzleSession(config_class, **session_options)
    if session.engine is None:
        session.start()
    app.puzzle_session = session

    # Register blueprints
    from .controllers.puzzle_controller import puzzle_bp
    from .controllers.stats_controller import stats_bp

    app.register_blueprint(puzzle_bp, url_prefix='/api')
    app.register_blueprint(stats_bp, url_prefix='/api')

    # Register WebSocket handlers
    from .websocket.handlers import register_websocket_handlers
    register_websocket_handlers(socketio, session)

    # Store socketio instance for use in other modules
    app.socketio = socketio

    return app, socketio

"""
Daily Puzzle Server - Main Entry Point

This is the main entry point for the daily puzzle server.
It loads today's puzzle and starts the Flask-SocketIO application.
"""

import os
from daily_puzzle import create_app
from daily_puzzle.config import config
from daily_puzzle.utils.game_logger import game_logger


def main():
    """Main function to build the application and start the server."""
    config_class = config[os.getenv('APP_ENV', 'default')]
    app = None

    try:
        print("Loading today's puzzle...")
        app, socketio = create_app(config_class)
        session = app.puzzle_session
        engine = session.engine
        print(f"✓ Puzzle #{engine.ordinal} loaded ({engine.current_row_index}/{engine.attempt_count} attempts used)")
        print(f"✓ Storage backend: {config_class.STORAGE_BACKEND}")
        print(f"✓ Suggestions: {config_class.SUGGESTION_SERVICE_URL or 'offline word list'}")

        game_logger.logger.info(f"Daily Puzzle Server starting with puzzle #{engine.ordinal}")

        print(f"\nStarting Daily Puzzle Server on {config_class.HOST}:{config_class.PORT}")
        print(f"Debug mode: {config_class.DEBUG}")
        print("=" * 50)

        socketio.run(app, host=config_class.HOST, port=config_class.PORT, debug=config_class.DEBUG,
                     use_reloader=False, allow_unsafe_werkzeug=True)

    except KeyboardInterrupt:
        print("\nServer shutting down...")
        game_logger.logger.info("Daily Puzzle Server shutting down (KeyboardInterrupt)")
    except Exception as e:
        print(f"Error starting server: {e}")
        game_logger.logger.error(f"Error starting server: {e}")
        raise
    finally:
        if app is not None:
            app.puzzle_session.shutdown()


if __name__ == '__main__':
    main()

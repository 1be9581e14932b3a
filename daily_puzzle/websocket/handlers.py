"""
WebSocket Event Handlers

Pushes puzzle engine events to connected clients in real time.
"""

from dataclasses import asdict
from flask_socketio import emit
from ..services.observers import PuzzleObserver
from ..utils.game_logger import game_logger


class SocketIOObserver(PuzzleObserver):
    """Broadcasts every engine event to all connected clients."""

    def __init__(self, socketio):
        self.socketio = socketio

    def on_letters_changed(self, row_index, text):
        self.socketio.emit('letters_changed', {'row_index': row_index, 'text': text})

    def on_row_scored(self, row_index, tiles, letter_states):
        self.socketio.emit('row_scored', {
            'row_index': row_index,
            'tiles': tiles,
            'letter_states': letter_states
        })

    def on_row_shake(self, row_index, error):
        self.socketio.emit('row_shake', {'row_index': row_index, 'error': error})

    def on_message(self, message):
        self.socketio.emit('message', {'message': message})

    def on_row_unlocked(self, row_index):
        self.socketio.emit('row_unlocked', {'row_index': row_index})

    def on_word_revealed(self, word):
        self.socketio.emit('word_revealed', {'word': word})

    def on_puzzle_finished(self, won, attempts_used):
        self.socketio.emit('puzzle_finished', {'won': won, 'attempts_used': attempts_used})

    def on_suggestion(self, row_index, suggestion):
        self.socketio.emit('suggestion_updated', {'row_index': row_index, 'suggestion': suggestion})

    def on_countdown(self, remaining):
        self.socketio.emit('countdown_tick', {**asdict(remaining), 'formatted': remaining.format()})

    def on_puzzle_expired(self, ordinal):
        self.socketio.emit('puzzle_expired', {'ordinal': ordinal})


def register_websocket_handlers(socketio, session):
    """Register all WebSocket event handlers and subscribe clients to engine events."""

    session.add_observer(SocketIOObserver(socketio))

    @socketio.on('connect')
    def handle_connect():
        """Send the current puzzle to a newly connected client."""
        try:
            emit('puzzle_state', asdict(session.view()))
        except Exception as e:
            game_logger.log_error(None, e, 'socket_connect')
            emit('error', {'error': 'Puzzle state unavailable'})

    @socketio.on('get_puzzle_state')
    def handle_get_puzzle_state(data=None):
        """Resend the current puzzle on request."""
        emit('puzzle_state', asdict(session.view()))

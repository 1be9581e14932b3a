"""
Game Logger Module for the Daily Puzzle Server

This module provides structured logging for user actions, server responses,
and puzzle events (scored attempts, completions, restores, rotations).
"""

import logging
import json
import os
from datetime import datetime
from typing import Dict, Any, Optional
from pathlib import Path


class GameLogger:
    """
    Centralized logging system for the puzzle server.

    Features:
    - User action tracking with client identification
    - Server response logging
    - Puzzle event logging keyed by puzzle ordinal
    - JSON structured logs for easy parsing

    Handlers are attached on first use so that importing the package never
    touches the filesystem.
    """

    def __init__(self, log_dir: str = "logs", level: str = "INFO"):
        self.log_dir = Path(log_dir)
        self.level = level
        self._logger: Optional[logging.Logger] = None

    def configure(self, log_dir: str, level: str = "INFO"):
        """Point the logger at a new directory/level; handlers are rebuilt lazily."""
        self.log_dir = Path(log_dir)
        self.level = level
        self._logger = None

    @property
    def logger(self) -> logging.Logger:
        if self._logger is None:
            self._logger = self._setup_logger()
        return self._logger

    def _log_file(self) -> Path:
        return self.log_dir / f"puzzle_log_{datetime.now().strftime('%Y-%m-%d')}.log"

    def _setup_logger(self) -> logging.Logger:
        """Setup the main puzzle logger with file handler."""
        self.log_dir.mkdir(parents=True, exist_ok=True)

        logger = logging.getLogger('daily_puzzle')
        logger.setLevel(getattr(logging, str(self.level).upper(), logging.INFO))

        # Prevent duplicate handlers
        if logger.handlers:
            for handler in list(logger.handlers):
                handler.close()
            logger.handlers.clear()

        file_handler = logging.FileHandler(self._log_file(), encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)

        # Console handler for only important messages (WARNING and above)
        console_handler = logging.StreamHandler()
        console_handler.setLevel(logging.WARNING)

        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s | %(levelname)s | %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        ))
        console_handler.setFormatter(logging.Formatter('%(levelname)s: %(message)s'))

        logger.addHandler(file_handler)
        logger.addHandler(console_handler)

        return logger

    def _get_user_identity(self, request) -> Dict[str, str]:
        """Extract client identity information from request."""
        if request is None:
            return {'user_ip': 'system', 'user_agent': None}
        return {
            'user_ip': getattr(request, 'remote_addr', None) or 'unknown',
            'user_agent': str(getattr(request, 'user_agent', '') or '') or None,
        }

    def _create_log_entry(self,
                          event_type: str,
                          action: str,
                          user_info: Dict[str, str],
                          details: Dict[str, Any]) -> str:
        """Create a structured log entry."""
        log_entry = {
            'timestamp': datetime.now().isoformat(),
            'event_type': event_type,
            'action': action,
            'user': user_info,
            'details': details
        }
        return json.dumps(log_entry, ensure_ascii=False, default=str)

    def log_user_action(self,
                        request,
                        action: str,
                        ordinal: Optional[int] = None,
                        **kwargs):
        """
        Log user actions with full context.

        Args:
            request: Flask request object
            action: Type of action (e.g., 'submit_letter', 'submit_attempt', 'get_state')
            ordinal: Puzzle ordinal if applicable
            **kwargs: Additional details to log
        """
        details = {
            'ordinal': ordinal,
            'endpoint': request.endpoint,
            'method': request.method,
            'url': request.url,
            **kwargs
        }

        log_message = self._create_log_entry('USER_ACTION', action, self._get_user_identity(request), details)
        self.logger.info(log_message)

    def log_server_response(self,
                            request,
                            action: str,
                            success: bool,
                            response_data: Dict[str, Any],
                            ordinal: Optional[int] = None,
                            **kwargs):
        """
        Log server responses with full context.

        Args:
            request: Flask request object
            action: Action that was performed
            success: Whether the action succeeded
            response_data: Data being returned to client
            ordinal: Puzzle ordinal if applicable
            **kwargs: Additional details to log
        """
        details = {
            'ordinal': ordinal,
            'success': success,
            'response_size': len(str(response_data)),
            'response_data': self._sanitize_response_data(response_data),
            **kwargs
        }

        event_type = 'SERVER_RESPONSE_SUCCESS' if success else 'SERVER_RESPONSE_ERROR'
        log_message = self._create_log_entry(event_type, action, self._get_user_identity(request), details)

        if success:
            self.logger.info(log_message)
        else:
            self.logger.error(log_message)

    def log_game_event(self,
                       ordinal: Optional[int],
                       event: str,
                       **kwargs):
        """
        Log puzzle-specific events (scored rows, wins, losses, restores).

        Args:
            ordinal: Puzzle ordinal
            event: Type of event (e.g., 'attempt_scored', 'puzzle_won', 'word_revealed')
            **kwargs: Additional puzzle details
        """
        details = {
            'ordinal': ordinal,
            **kwargs
        }

        log_message = self._create_log_entry('GAME_EVENT', event, self._get_user_identity(None), details)
        self.logger.info(log_message)

    def log_error(self,
                  request,
                  error: Exception,
                  action: str,
                  ordinal: Optional[int] = None):
        """
        Log errors with full context.

        Args:
            request: Flask request object, or None outside a request
            error: Exception that occurred
            action: Action that was being performed
            ordinal: Puzzle ordinal if applicable
        """
        details = {
            'ordinal': ordinal,
            'error_type': type(error).__name__,
            'error_message': str(error),
            'action': action
        }

        log_message = self._create_log_entry('ERROR', action, self._get_user_identity(request), details)
        self.logger.error(log_message)

    def _sanitize_response_data(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Keep the answer and full board out of the log."""
        if not isinstance(data, dict):
            return {'data_type': type(data).__name__}

        sanitized = data.copy()

        if 'state' in sanitized and isinstance(sanitized['state'], dict):
            state = sanitized['state']
            sanitized['state'] = {
                'ordinal': state.get('ordinal'),
                'current_row_index': state.get('current_row_index'),
                'status': state.get('status'),
                'finished': state.get('finished'),
                'won': state.get('won'),
                'answer_revealed': state.get('answer') is not None
            }

        return sanitized

    def get_log_stats(self) -> Dict[str, Any]:
        """Get statistics about today's logged events (useful for monitoring)."""
        try:
            log_file = self._log_file()
            if not log_file.exists():
                return {'error': 'No log file found for today'}

            stats = {
                'log_file': str(log_file),
                'file_size_mb': round(log_file.stat().st_size / (1024 * 1024), 2),
                'total_entries': 0,
                'user_actions': 0,
                'server_responses': 0,
                'game_events': 0,
                'errors': 0
            }

            with open(log_file, 'r', encoding='utf-8') as f:
                for line in f:
                    if line.strip():
                        stats['total_entries'] += 1
                        if 'USER_ACTION' in line:
                            stats['user_actions'] += 1
                        elif 'SERVER_RESPONSE' in line:
                            stats['server_responses'] += 1
                        elif 'GAME_EVENT' in line:
                            stats['game_events'] += 1
                        elif 'ERROR' in line:
                            stats['errors'] += 1

            return stats

        except OSError as e:
            return {'error': f'Failed to get stats: {str(e)}'}


# Global logger instance
game_logger = GameLogger(os.getenv('LOG_DIR', 'logs'), os.getenv('LOG_LEVEL', 'INFO'))

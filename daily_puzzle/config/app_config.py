"""
Configuration Management Module

Centralized configuration management following the 12-factor app methodology.
All configuration is loaded from environment variables with sensible defaults.
"""

import os
from dotenv import load_dotenv

# Load environment variables from config.env next to this module
load_dotenv(os.path.join(os.path.dirname(os.path.abspath(__file__)), 'config.env'))


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == 'true'


class Config:
    """Base configuration class with all settings."""

    # Flask Settings
    SECRET_KEY = os.getenv('SECRET_KEY', 'dev-secret-key-change-in-production')
    DEBUG = _env_bool('DEBUG', 'False')
    TESTING = False

    # Server Settings
    HOST = os.getenv('HOST', '127.0.0.1')
    PORT = int(os.getenv('PORT', 5000))

    # Puzzle Settings
    WORD_LENGTH = int(os.getenv('WORD_LENGTH', 5))
    ATTEMPT_COUNT = int(os.getenv('ATTEMPT_COUNT', 6))
    RELEASE_HOUR = int(os.getenv('RELEASE_HOUR', 0))
    PUZZLE_EPOCH = os.getenv('PUZZLE_EPOCH', '2022-01-01')
    WORD_LIST_PATH = os.getenv('WORD_LIST_PATH')

    # Presentation timing (seconds); zero disables the delay
    REVEAL_DELAY_SECONDS = float(os.getenv('REVEAL_DELAY_SECONDS', 1.5))
    REVEAL_WORD_DELAY_SECONDS = float(os.getenv('REVEAL_WORD_DELAY_SECONDS', 2.0))
    MESSAGE_DURATION_SECONDS = float(os.getenv('MESSAGE_DURATION_SECONDS', 2.0))
    COUNTDOWN_TICK_SECONDS = float(os.getenv('COUNTDOWN_TICK_SECONDS', 1.0))

    # Storage Settings: "memory", "file" or "mongo"
    STORAGE_BACKEND = os.getenv('STORAGE_BACKEND', 'file')
    STORAGE_PATH = os.getenv('STORAGE_PATH', 'data/storage.json')
    MONGO_URI = os.getenv('MONGO_URI')
    MONGO_DB_NAME = os.getenv('MONGO_DB_NAME', 'daily_puzzle')

    # Suggestion Service Settings; no URL means the offline word list is used
    SUGGESTION_SERVICE_URL = os.getenv('SUGGESTION_SERVICE_URL')
    SUGGESTION_TIMEOUT_SECONDS = float(os.getenv('SUGGESTION_TIMEOUT_SECONDS', 5))
    SUGGESTION_ASYNC = _env_bool('SUGGESTION_ASYNC', 'True')

    # Share Settings
    PUZZLE_TAG = os.getenv('PUZZLE_TAG', 'DailyWord')
    SHARE_TRAILER = os.getenv('SHARE_TRAILER', '')

    # Logging Settings
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
    LOG_DIR = os.getenv('LOG_DIR', 'logs')


class DevelopmentConfig(Config):
    """Development configuration."""
    DEBUG = True


class ProductionConfig(Config):
    """Production configuration."""
    DEBUG = False


class TestingConfig(Config):
    """Testing configuration."""
    TESTING = True
    DEBUG = True
    STORAGE_BACKEND = 'memory'
    SUGGESTION_SERVICE_URL = None
    SUGGESTION_ASYNC = False
    REVEAL_DELAY_SECONDS = 0.0
    REVEAL_WORD_DELAY_SECONDS = 0.0
    MESSAGE_DURATION_SECONDS = 0.0
    PUZZLE_TAG = 'DailyWord'
    SHARE_TRAILER = ''


# Configuration mapping
config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}

"""
Configuration Management Module

Centralized configuration management following the 12-factor app methodology.
All configuration is loaded from environment variables with sensible defaults.
"""

import os
from dotenv import load_dotenv

# Load environment variables from config.env next to this module
load_dotenv(os.path.join(os.path.dirname(os.path.abspath(__file__)), 'config.env'))


def _optional(name: str):
    value = os.getenv(name)
    return value if value else None


class Config:
    """Base configuration class with all settings."""

    # Flask Settings
    SECRET_KEY = os.getenv('SECRET_KEY', 'dev-secret-key-change-in-production')
    DEBUG = os.getenv('DEBUG', 'False').lower() == 'true'
    TESTING = False

    # Server Settings
    HOST = os.getenv('HOST', '127.0.0.1')
    PORT = int(os.getenv('PORT', 5000))

    # Persistence Settings (in-memory store when MONGO_URI is unset)
    MONGO_URI = _optional('MONGO_URI')
    MONGO_DATABASE = os.getenv('MONGO_DATABASE', 'hangman_game')

    # Word Provider Settings
    WORDS_BASE_URL = _optional('WORDS_BASE_URL')
    WORDS_FETCH_TIMEOUT_SECONDS = float(os.getenv('WORDS_FETCH_TIMEOUT_SECONDS', 10))
    WORDS_MAX_RETRIES = int(os.getenv('WORDS_MAX_RETRIES', 3))
    WORDS_RETRY_BASE_DELAY_SECONDS = float(os.getenv('WORDS_RETRY_BASE_DELAY_SECONDS', 1))
    WORDS_CACHE_TTL_SECONDS = int(os.getenv('WORDS_CACHE_TTL_SECONDS', 7 * 24 * 60 * 60))

    # Game Settings
    DEFAULT_DIFFICULTY = os.getenv('DEFAULT_DIFFICULTY', 'medium')
    DEFAULT_CATEGORY = os.getenv('DEFAULT_CATEGORY', 'animals')
    MAX_INCORRECT_GUESSES = int(os.getenv('MAX_INCORRECT_GUESSES', 6))
    DIFFICULTY_PROGRESSION = os.getenv('DIFFICULTY_PROGRESSION', 'True').lower() == 'true'
    WINS_TO_ADVANCE = int(os.getenv('WINS_TO_ADVANCE', 3))
    DEFAULT_TIME_LIMIT_MS = int(os.getenv('DEFAULT_TIME_LIMIT_MS', 60000))
    TIMER_TICK_MS = int(os.getenv('TIMER_TICK_MS', 100))
    ENABLE_TIMER_IN_TESTS = False

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
    MONGO_URI = None
    WORDS_BASE_URL = None


# Configuration mapping
config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}

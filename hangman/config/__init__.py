"""
Configuration Package

Contains all configuration-related files and settings.

This package separates two types of configuration:
- app_config.py: Flask application configuration (environment-based)
- game_settings.py: Game rules, constants and the bundled word catalog
"""

from .app_config import Config, DevelopmentConfig, ProductionConfig, TestingConfig, config
from .game_settings import (
    DIFFICULTIES, FALLBACK_WORD_CATALOG, MAX_INCORRECT_GUESSES,
    validate_word_catalog_integrity, get_word_statistics
)

__all__ = [
    # App configuration
    'Config', 'DevelopmentConfig', 'ProductionConfig', 'TestingConfig', 'config',
    # Game rules
    'DIFFICULTIES', 'FALLBACK_WORD_CATALOG', 'MAX_INCORRECT_GUESSES',
    'validate_word_catalog_integrity', 'get_word_statistics'
]

"""
Utilities Package

Contains the structured game logger and the engine error taxonomy.
"""

from .errors import (
    ErrorKind, HangmanError, WordDataError, WordSelectionError,
    StorageError, WordFetchError, user_message
)
from .game_logger import game_logger

__all__ = [
    'ErrorKind', 'HangmanError', 'WordDataError', 'WordSelectionError',
    'StorageError', 'WordFetchError', 'user_message', 'game_logger'
]

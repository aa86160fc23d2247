"""
Error Taxonomy

Closed set of error kinds raised by the engine and its collaborators, with the
recovery policy and user-facing message for each kind.
"""

from enum import Enum
from typing import Dict, Tuple


class ErrorKind(Enum):
    DATA = "data"
    STORAGE = "storage"
    NETWORK = "network"


class HangmanError(Exception):
    """Base class for engine errors."""
    kind: ErrorKind = ErrorKind.DATA


class WordDataError(HangmanError):
    """Malformed or empty word catalog, or an invalid difficulty/category."""
    kind = ErrorKind.DATA


class WordSelectionError(WordDataError):
    """Selection exhausted its bounded substitutions. Fatal for the round."""


class StorageError(HangmanError):
    """A persistence read or write failed (quota, disabled, unreachable)."""
    kind = ErrorKind.STORAGE


class WordFetchError(HangmanError):
    """Remote word list fetch failed or timed out."""
    kind = ErrorKind.NETWORK


# Ordered recovery steps per kind, applied by the component that owns the call
RECOVERY_STRATEGIES: Dict[ErrorKind, Tuple[str, ...]] = {
    ErrorKind.DATA: ("substitute_difficulty", "substitute_category", "fail_selection"),
    ErrorKind.STORAGE: ("use_memory_storage",),
    ErrorKind.NETWORK: ("retry_with_backoff", "use_cached_catalog", "use_fallback_catalog"),
}

USER_MESSAGES: Dict[ErrorKind, str] = {
    ErrorKind.DATA: "No words are available for this game. Please try another difficulty or category.",
    ErrorKind.STORAGE: "Progress could not be saved. The game will continue without saving.",
    ErrorKind.NETWORK: "Unable to load the word list. Using offline words.",
}


def user_message(error: Exception) -> str:
    """Message to show a player for an engine error; falls back to str(error)."""
    if isinstance(error, HangmanError):
        return USER_MESSAGES[error.kind]
    return str(error)

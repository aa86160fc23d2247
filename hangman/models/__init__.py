"""
Data Models Package

Contains all data models and schemas used throughout the application.
"""

from .game import (
    GameState, GameStatus, Difficulty, PracticeMode, WordLengthFilter,
    Player, MultiplayerState, WordSelection, RoundOutcome
)

__all__ = [
    'GameState', 'GameStatus', 'Difficulty', 'PracticeMode', 'WordLengthFilter',
    'Player', 'MultiplayerState', 'WordSelection', 'RoundOutcome'
]

"""
Services Package

Contains the game engine and the collaborators it drives.
"""

from .game_service import GameStateMachine, create_game_service
from .word_provider import WordProvider
from .word_selector import WordSelector
from .persistence import PersistenceStore, InMemoryStore, MongoPersistenceStore, SafeStore, create_store
from .notifications import NotificationSink, SocketIONotificationSink
from .statistics import StatisticsTracker
from .achievements import AchievementEvaluator, ACHIEVEMENT_RULES

__all__ = [
    'GameStateMachine', 'create_game_service',
    'WordProvider', 'WordSelector',
    'PersistenceStore', 'InMemoryStore', 'MongoPersistenceStore', 'SafeStore', 'create_store',
    'NotificationSink', 'SocketIONotificationSink',
    'StatisticsTracker', 'AchievementEvaluator', 'ACHIEVEMENT_RULES'
]

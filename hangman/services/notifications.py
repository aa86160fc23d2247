"""
Notification Sinks

Callbacks the engine invokes so a UI can react to game events.
"""

from typing import Dict, Optional

from .achievements import ACHIEVEMENT_TITLES


class NotificationSink:
    """No-op sink. Subclasses override the events they care about."""

    def on_guess(self, letter: str, correct: bool) -> None:
        pass

    def on_win(self, state: Dict) -> None:
        pass

    def on_lose(self, state: Dict) -> None:
        pass

    def on_achievement_unlocked(self, name: str) -> None:
        pass

    def on_multiplayer_advance(self, player: Optional[Dict]) -> None:
        pass

    def on_time_up(self) -> None:
        pass


class SocketIONotificationSink(NotificationSink):
    """Broadcasts engine events to connected clients over Socket.IO."""

    def __init__(self, socketio, namespace: str = '/'):
        self.socketio = socketio
        self.namespace = namespace

    def _emit(self, event: str, payload: Dict) -> None:
        self.socketio.emit(event, payload, namespace=self.namespace)

    def on_guess(self, letter: str, correct: bool) -> None:
        self._emit('guess', {'letter': letter, 'correct': correct})

    def on_win(self, state: Dict) -> None:
        self._emit('game_won', {'state': state})

    def on_lose(self, state: Dict) -> None:
        self._emit('game_lost', {'state': state})

    def on_achievement_unlocked(self, name: str) -> None:
        self._emit('achievement_unlocked', {
            'achievement': name,
            'title': ACHIEVEMENT_TITLES.get(name, name)
        })

    def on_multiplayer_advance(self, player: Optional[Dict]) -> None:
        self._emit('multiplayer_advance', {'player': player})

    def on_time_up(self) -> None:
        self._emit('time_up', {})

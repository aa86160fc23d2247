import random

import pytest

from hangman import create_app
from hangman.config import TestingConfig
from hangman.services.game_service import GameStateMachine
from hangman.services.notifications import NotificationSink
from hangman.services.persistence import InMemoryStore
from hangman.services.word_provider import WordProvider


CATALOG = {
    "easy": {"animals": ["cat"], "colors": ["red"]},
    "medium": {"animals": ["tiger"], "food": ["ice cream"]},
    "hard": {"animals": ["elephant"]},
}


class FakeClock:
    """Monotonic clock in seconds that only moves when told to."""

    def __init__(self, start=1000.0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


class RecordingSink(NotificationSink):
    def __init__(self):
        self.events = []

    def on_guess(self, letter, correct):
        self.events.append(('guess', letter, correct))

    def on_win(self, state):
        self.events.append(('win', state))

    def on_lose(self, state):
        self.events.append(('lose', state))

    def on_achievement_unlocked(self, name):
        self.events.append(('achievement', name))

    def on_multiplayer_advance(self, player):
        self.events.append(('advance', player))

    def on_time_up(self):
        self.events.append(('time_up',))

    def names(self):
        return [event[0] for event in self.events]


def no_background_task(target, *args, **kwargs):
    return None


def play_word(engine):
    """Guesses every distinct letter of the current word."""
    for letter in dict.fromkeys(engine.state.current_word.replace(" ", "")):
        engine.make_guess(letter)


def lose_round(engine):
    for letter in "abcdefghijklmnopqrstuvwxyz":
        if engine.state.game_status.is_terminal:
            break
        if letter not in engine.state.current_word:
            engine.make_guess(letter)


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def sink():
    return RecordingSink()


@pytest.fixture()
def store():
    return InMemoryStore()


@pytest.fixture()
def make_engine(clock, sink, store):
    def factory(catalog=None, difficulty="easy", category="animals", backend=None):
        provider = WordProvider(fallback_catalog=catalog or CATALOG)
        engine = GameStateMachine(
            provider,
            store=backend if backend is not None else store,
            sink=sink,
            config=TestingConfig,
            clock=clock,
            rng=random.Random(7),
            start_background_task=no_background_task
        )
        engine.load_words()
        engine.set_difficulty(difficulty)
        engine.set_category(category)
        engine.reset_game()
        return engine
    return factory


@pytest.fixture()
def engine(make_engine):
    return make_engine()


@pytest.fixture()
def flask_app():
    application, _ = create_app(TestingConfig)
    with application.app_context():
        yield application


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()

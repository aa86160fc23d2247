"""
Game Service

Contains the hangman state machine that owns the shared game state and runs
the scoring, statistics, progression, achievement and multiplayer
collaborators on every finished round.
"""

import random
import threading
import time
from dataclasses import asdict
from typing import Callable, Dict, List, Optional, Tuple

from ..config.app_config import Config
from ..config.game_settings import MASK_CHAR
from ..models.game import Difficulty, GameState, GameStatus, RoundOutcome
from ..utils.game_logger import game_logger
from .achievements import AchievementEvaluator
from .multiplayer import MultiplayerCoordinator
from .notifications import NotificationSink
from .persistence import InMemoryStore, PersistenceStore, SafeStore, create_store
from .practice_mode import PracticeModeFilter, default_practice_progress
from .progression import ProgressionTracker
from .scoring import calculate_score
from .statistics import StatisticsTracker
from .timed_mode import TimedModeController
from .word_provider import WordProvider
from .word_selector import WordSelector

ACHIEVEMENTS_KEY = "achievements"
STATISTICS_KEY = "statistics"
BEST_TIMES_KEY = "best_times"
PRACTICE_PROGRESS_KEY = "practice_progress"
PROGRESSION_KEY = "progression"


class GameStateMachine:
    """
    Hangman game engine for one session.

    This class handles:
    - The playing/paused/won/lost state machine and letter guessing
    - Word selection at the start of every round
    - Scoring, statistics, difficulty progression and achievements on round end
    - Timed, practice and local multiplayer modes

    Every public mutator, and every countdown tick, runs under one re-entrant
    lock, and all of them are status guarded.
    """

    def __init__(self,
                 word_provider: WordProvider,
                 store: Optional[PersistenceStore] = None,
                 sink: Optional[NotificationSink] = None,
                 config=Config,
                 clock: Callable[[], float] = time.monotonic,
                 rng: Optional[random.Random] = None,
                 start_background_task: Optional[Callable] = None,
                 sleep: Callable[[float], None] = time.sleep):
        """
        Args:
            word_provider: Source of the word catalog
            store: Persistence store; wrapped in SafeStore if it is not one
            sink: Receiver of game events
            config: Configuration class
            clock: Monotonic clock in seconds
            rng: Random source for word and hint selection
            start_background_task: Runs the countdown worker
            sleep: Sleep used by the countdown worker
        """
        self.config = config
        self.word_provider = word_provider
        self.store = store if isinstance(store, SafeStore) else SafeStore(store or InMemoryStore())
        self.sink = sink or NotificationSink()
        self.clock = clock
        self._lock = threading.RLock()

        self.state = GameState(
            difficulty=config.DEFAULT_DIFFICULTY,
            category=config.DEFAULT_CATEGORY,
            max_incorrect_guesses=config.MAX_INCORRECT_GUESSES
        )
        self.catalog: Dict[str, Dict[str, List[str]]] = {}

        self.practice = PracticeModeFilter()
        self.selector = WordSelector(rng or random.Random(), self.practice)
        self.multiplayer = MultiplayerCoordinator(self.state.multiplayer)
        self.timer = TimedModeController(
            self.state,
            self._handle_time_up,
            lock=self._lock,
            tick_ms=config.TIMER_TICK_MS,
            start_background_task=start_background_task,
            sleep=sleep
        )

        # Persisted collaborators
        self.progression = ProgressionTracker(config.WINS_TO_ADVANCE, config.DIFFICULTY_PROGRESSION)
        self.progression.load(self.store.get(PROGRESSION_KEY))
        self.statistics = StatisticsTracker(self.store.get(STATISTICS_KEY))
        self.achievements = AchievementEvaluator(self.store.get(ACHIEVEMENTS_KEY))
        best_times = self.store.get(BEST_TIMES_KEY)
        self.best_times: Dict[str, int] = best_times if isinstance(best_times, dict) else {}
        progress = self.store.get(PRACTICE_PROGRESS_KEY)
        self.practice_progress = progress if isinstance(progress, dict) else default_practice_progress()

        self._round_started_at = clock()
        self._paused_at: Optional[float] = None
        self._paused_seconds = 0.0

    # ------------------------------------------------------------------
    # Round lifecycle
    # ------------------------------------------------------------------

    def load_words(self, difficulty: Optional[str] = None) -> Dict[str, Dict[str, List[str]]]:
        """Loads the catalog from the word provider and keeps it for selection."""
        catalog = self.word_provider.load_words(difficulty)
        with self._lock:
            self.catalog = catalog
        game_logger.log_game_event('words_ready', source=self.word_provider.source,
                                   difficulties=sorted(catalog))
        return catalog

    def reset_game(self) -> bool:
        """
        Starts a new round.

        Clears the round-scoped fields and selects a new word; score,
        difficulty and category carry over. The word is selected before
        anything is mutated, so a WordSelectionError leaves the previous round
        untouched.

        Raises:
            WordSelectionError: If the catalog has no usable words
        """
        with self._lock:
            if not self.catalog:
                self.load_words()

            state = self.state
            selection = self.selector.select(self.catalog, state.difficulty, state.category, state.practice_mode)

            self.timer.stop()
            state.current_word = selection.word
            state.difficulty = selection.difficulty
            state.category = selection.category
            state.hidden_cells = selection.hidden_cells
            state.guessed_letters = []
            state.incorrect_guesses = []
            state.game_status = GameStatus.PLAYING
            state.last_round_score = 0
            if state.timed_mode:
                state.time_remaining = state.time_limit

            self._round_started_at = self.clock()
            self._paused_at = None
            self._paused_seconds = 0.0

            game_logger.log_game_event('round_started', difficulty=state.difficulty,
                                       category=state.category, word_length=len(state.current_word))
            self.timer.start()
            return True

    def make_guess(self, letter) -> bool:
        """
        Guesses one letter.

        Args:
            letter: A single letter; case and surrounding whitespace are ignored

        Returns:
            True if the letter is in the word. False if it is not, or if the
            guess was rejected (round not playing, repeated letter, not a-z),
            in which case nothing changed.
        """
        return self.submit_guess(letter)[1]

    def submit_guess(self, letter) -> Tuple[bool, bool]:
        """Like make_guess, but returns (accepted, correct) read under the same lock."""
        with self._lock:
            state = self.state
            if state.game_status is not GameStatus.PLAYING or not state.current_word:
                return False, False
            if not isinstance(letter, str):
                return False, False

            letter = letter.strip().lower()
            if len(letter) != 1 or not 'a' <= letter <= 'z':
                return False, False
            if letter in state.guessed_letters:
                return False, False

            state.guessed_letters.append(letter)
            correct = letter in state.current_word
            if correct:
                state.reveal(letter)
            else:
                state.incorrect_guesses.append(letter)

            self._notify('on_guess', letter, correct)

            if state.is_fully_revealed:
                self._finish_round(GameStatus.WON)
            elif len(state.incorrect_guesses) >= state.max_incorrect_guesses:
                self._finish_round(GameStatus.LOST)

            return True, correct

    def get_hint(self) -> Optional[str]:
        """
        Reveals one random hidden letter by guessing it.

        In practice mode each hint lowers the score multiplier.

        Returns:
            The revealed letter, or None if the round is not playing
        """
        with self._lock:
            state = self.state
            if state.game_status is not GameStatus.PLAYING or not state.current_word:
                return None

            hidden = [char for index, char in enumerate(state.current_word)
                      if state.hidden_cells[index] == MASK_CHAR]
            if not hidden:
                return None

            letter = self.selector.rng.choice(hidden)
            if state.practice_mode.enabled:
                self.practice.register_hint(state.practice_mode)
            game_logger.log_game_event('hint_used', hints_used=state.practice_mode.hints_used)
            self.make_guess(letter)
            return letter

    def pause_game(self) -> bool:
        with self._lock:
            if self.state.game_status is not GameStatus.PLAYING:
                return False
            self.state.game_status = GameStatus.PAUSED
            self._paused_at = self.clock()
            self.timer.stop()
            return True

    def resume_game(self) -> bool:
        with self._lock:
            if self.state.game_status is not GameStatus.PAUSED:
                return False
            self.state.game_status = GameStatus.PLAYING
            if self._paused_at is not None:
                self._paused_seconds += self.clock() - self._paused_at
                self._paused_at = None
            self.timer.start()
            return True

    def toggle_pause(self) -> bool:
        with self._lock:
            if self.state.game_status is GameStatus.PAUSED:
                return self.resume_game()
            return self.pause_game()

    def calculate_score(self) -> int:
        """Score the current round would earn if it were won now."""
        with self._lock:
            return calculate_score(self.state, self._elapsed_ms())

    def _elapsed_ms(self) -> int:
        now = self._paused_at if self._paused_at is not None else self.clock()
        return max(0, int(round((now - self._round_started_at - self._paused_seconds) * 1000)))

    def _handle_time_up(self) -> None:
        if self.state.game_status is GameStatus.PLAYING:
            self._finish_round(GameStatus.LOST, timed_out=True)

    def _finish_round(self, result: GameStatus, timed_out: bool = False) -> None:
        state = self.state
        self.timer.stop()
        elapsed_ms = self._elapsed_ms()
        state.game_status = result

        round_score = 0
        if result is GameStatus.WON:
            round_score = calculate_score(state, elapsed_ms)
            state.score += round_score
        state.last_round_score = round_score

        outcome = RoundOutcome(
            result=result,
            word=state.current_word,
            difficulty=state.difficulty,
            category=state.category,
            elapsed_ms=elapsed_ms,
            total_guesses=len(state.guessed_letters),
            correct_guesses=len(state.guessed_letters) - len(state.incorrect_guesses),
            incorrect_guesses=len(state.incorrect_guesses),
            round_score=round_score,
            timed_out=timed_out
        )

        statistics = self.statistics.record(outcome, state.score)
        self.store.set(STATISTICS_KEY, statistics)

        practice = state.practice_mode
        if outcome.won:
            if state.timed_mode:
                self._record_best_time(state.time_limit - state.time_remaining, outcome)
            state.difficulty = self.progression.record_win(
                state.difficulty, locked=practice.enabled and bool(practice.locked_difficulty)
            )
        else:
            self.progression.record_loss()
        self.store.set(PROGRESSION_KEY, self.progression.to_dict())

        unlocked: List[str] = []
        if practice.enabled:
            self.practice.update_progress(self.practice_progress, outcome)
            self.store.set(PRACTICE_PROGRESS_KEY, self.practice_progress)
        else:
            unlocked = self.achievements.evaluate(statistics, outcome, state.score)
            if unlocked:
                self.store.set(ACHIEVEMENTS_KEY, self.achievements.achievements)

        if state.multiplayer.enabled:
            self.multiplayer.record_outcome(outcome.won, round_score)

        game_logger.log_game_event(
            'round_won' if outcome.won else 'round_lost',
            difficulty=outcome.difficulty,
            category=outcome.category,
            round_score=round_score,
            session_score=state.score,
            elapsed_ms=elapsed_ms,
            incorrect_guesses=outcome.incorrect_guesses,
            timed_out=timed_out,
            practice=practice.enabled
        )

        snapshot = state.to_dict()
        if timed_out:
            self._notify('on_time_up')
        self._notify('on_win' if outcome.won else 'on_lose', snapshot)
        for name in unlocked:
            self._notify('on_achievement_unlocked', name)

    def _record_best_time(self, completion_ms: int, outcome: RoundOutcome) -> None:
        key = f"{outcome.difficulty}-{outcome.category}"
        best = self.best_times.get(key)
        if best is None or completion_ms < best:
            self.best_times[key] = completion_ms
            self.store.set(BEST_TIMES_KEY, self.best_times)
            game_logger.log_game_event('best_time', key=key, completion_ms=completion_ms)

    def _notify(self, event: str, *args) -> None:
        try:
            getattr(self.sink, event)(*args)
        except Exception as e:
            game_logger.log_error(e, f'notify_{event}')

    # ------------------------------------------------------------------
    # Settings and modes
    # ------------------------------------------------------------------

    def set_difficulty(self, difficulty: str) -> bool:
        """
        Chooses the difficulty for the next round.

        Returns:
            False while practice mode locks the difficulty

        Raises:
            ValueError: If difficulty is not easy, medium or hard
        """
        difficulty = Difficulty(difficulty).value
        with self._lock:
            if self.state.practice_mode.enabled and self.state.practice_mode.locked_difficulty:
                return False
            self.state.difficulty = difficulty
            return True

    def set_category(self, category: str) -> bool:
        """Chooses the category for the next round."""
        if not isinstance(category, str) or not category.strip():
            raise ValueError("Category must be a non-empty string")
        with self._lock:
            self.state.category = category.strip().lower()
            return True

    def available_categories(self, difficulty: Optional[str] = None) -> List[str]:
        with self._lock:
            categories = self.catalog.get(difficulty or self.state.difficulty) or {}
            return [name for name, words in categories.items() if words]

    def enable_timed_mode(self, time_limit: Optional[int] = None) -> bool:
        """Turns the countdown on and starts a fresh round."""
        with self._lock:
            self.timer.enable(self.config.DEFAULT_TIME_LIMIT_MS if time_limit is None else time_limit)
            return self.reset_game()

    def disable_timed_mode(self) -> None:
        with self._lock:
            self.timer.disable()

    def enable_practice_mode(self, **settings) -> bool:
        """
        Turns practice mode on and starts a fresh round.

        Args:
            **settings: allow_repeats, endless, locked_difficulty,
                max_mistakes_override, word_length_filter ({'min', 'max'})
        """
        with self._lock:
            self.practice.enable(self.state, **settings)
            return self.reset_game()

    def disable_practice_mode(self) -> bool:
        with self._lock:
            self.practice.disable(self.state, self.config.MAX_INCORRECT_GUESSES)
            return self.reset_game()

    # ------------------------------------------------------------------
    # Multiplayer
    # ------------------------------------------------------------------

    def enable_multiplayer_mode(self, player_names: List[str], total_rounds: Optional[int] = None) -> bool:
        with self._lock:
            self.multiplayer.enable(player_names, total_rounds)
            return self.reset_game()

    def disable_multiplayer_mode(self) -> None:
        with self._lock:
            self.multiplayer.disable()

    def advance_to_next_player(self) -> Optional[Dict]:
        """
        Passes the turn to the next player and starts their round.

        Returns:
            The new current player, or None if multiplayer is off
        """
        with self._lock:
            player = self.multiplayer.advance()
            if player is None:
                return None
            self.reset_game()
            snapshot = asdict(player)
            game_logger.log_game_event('multiplayer_advance', player=player.name,
                                       rounds_played=self.state.multiplayer.rounds_played)
            self._notify('on_multiplayer_advance', snapshot)
            return snapshot

    def should_end_after_advance(self) -> bool:
        with self._lock:
            return self.multiplayer.should_end_after_advance()

    def advance_or_end_multiplayer(self) -> Optional[Dict]:
        """
        Ends the session if the last round is complete, otherwise passes the turn.

        Returns:
            {'finished': True, 'winners', 'standings'} or
            {'finished': False, 'current_player'}; None if multiplayer is off
        """
        with self._lock:
            if not self.state.multiplayer.enabled:
                return None
            if self.multiplayer.should_end_after_advance():
                return {'finished': True, **self.end_multiplayer_game()}
            return {'finished': False, 'current_player': self.advance_to_next_player()}

    def end_multiplayer_game(self) -> Dict[str, List[Dict]]:
        """Ends multiplayer and returns {'winners': [...], 'standings': [...]}."""
        with self._lock:
            winners, standings = self.multiplayer.end()
            if winners:
                game_logger.log_game_event('multiplayer_finished', winners=[p['name'] for p in winners])
            return {'winners': winners, 'standings': standings}

    def get_current_player(self) -> Optional[Dict]:
        with self._lock:
            player = self.multiplayer.current_player()
            return asdict(player) if player else None

    def get_multiplayer_scores(self) -> List[Dict]:
        with self._lock:
            return self.multiplayer.scores()

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------

    def get_state(self) -> Dict:
        with self._lock:
            snapshot = self.state.to_dict()
            snapshot['consecutive_wins'] = self.progression.consecutive_wins
            snapshot['best_time'] = self.get_best_time()
            snapshot['current_player'] = self.get_current_player()
            return snapshot

    def get_statistics(self) -> Dict:
        with self._lock:
            return self.statistics.snapshot()

    def get_achievements(self) -> Dict[str, Dict]:
        with self._lock:
            return self.achievements.snapshot()

    def get_best_time(self) -> Optional[int]:
        """Best timed completion for the current difficulty/category, None outside timed mode."""
        with self._lock:
            if not self.state.timed_mode:
                return None
            return self.best_times.get(self.state.selection_key)

    def get_practice_progress(self) -> Dict:
        with self._lock:
            return dict(self.practice_progress)

    def export_statistics(self, fmt: str = 'json') -> str:
        with self._lock:
            if fmt == 'csv':
                return self.statistics.export_csv()
            return self.statistics.export_json()

    def reset_statistics(self) -> Dict:
        with self._lock:
            statistics = self.statistics.reset()
            self.store.set(STATISTICS_KEY, statistics)
            return self.statistics.snapshot()

    def reset_achievements(self) -> Dict[str, Dict]:
        with self._lock:
            self.store.set(ACHIEVEMENTS_KEY, self.achievements.reset())
            return self.achievements.snapshot()


def create_game_service(config=Config, store: Optional[PersistenceStore] = None,
                        sink: Optional[NotificationSink] = None, **kwargs) -> GameStateMachine:
    """
    Builds a state machine wired to the configured word provider and store.

    The provider and the engine share one SafeStore, so a failing backend
    never reaches word loading or gameplay.
    """
    if store is None:
        store = create_store(config)
    elif not isinstance(store, SafeStore):
        store = SafeStore(store)
    provider = WordProvider.from_config(config, store)
    return GameStateMachine(provider, store=store, sink=sink, config=config, **kwargs)

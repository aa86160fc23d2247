"""
Timed Mode Controller

Countdown clock for timed rounds. The countdown runs as a background task
(Socket.IO's in the server, a daemon thread otherwise) that calls tick() every
TIMER_TICK_MS while the round is playing.
"""

import threading
import time
from typing import Callable, Optional

from ..config.game_settings import TIMER_TICK_MS
from ..models.game import GameState, GameStatus
from ..utils.game_logger import game_logger


def _start_thread(target, *args):
    thread = threading.Thread(target=target, args=args, daemon=True)
    thread.start()
    return thread


class TimedModeController:
    """
    Decrements GameState.time_remaining and forces a loss at zero.

    Every start() bumps a generation number. A worker or tick carrying an
    older generation is discarded, so a countdown left over from a paused,
    reset or finished round can never touch the current one.
    """

    def __init__(self,
                 state: GameState,
                 on_time_up: Callable[[], None],
                 lock=None,
                 tick_ms: int = TIMER_TICK_MS,
                 start_background_task: Optional[Callable] = None,
                 sleep: Callable[[float], None] = time.sleep):
        self.state = state
        self.on_time_up = on_time_up
        self.lock = lock or threading.RLock()
        self.tick_ms = tick_ms
        self.start_background_task = start_background_task or _start_thread
        self.sleep = sleep
        self.generation = 0
        self.running = False

    def enable(self, time_limit: int) -> None:
        if time_limit <= 0:
            raise ValueError("time_limit must be positive")
        self.stop()
        self.state.timed_mode = True
        self.state.time_limit = time_limit
        self.state.time_remaining = time_limit

    def disable(self) -> None:
        self.stop()
        self.state.timed_mode = False

    def start(self) -> bool:
        """Starts a fresh countdown worker. No-op outside timed mode."""
        if not self.state.timed_mode:
            return False
        self.stop()
        self.running = True
        self.start_background_task(self._run, self.generation)
        return True

    def stop(self) -> None:
        self.generation += 1
        self.running = False

    def _run(self, generation: int) -> None:
        while generation == self.generation:
            self.sleep(self.tick_ms / 1000)
            if not self.tick(generation):
                return

    def tick(self, generation: Optional[int] = None) -> bool:
        """
        Advances the clock by one tick.

        Args:
            generation: Generation of the calling worker; None for a direct call

        Returns:
            True while the countdown should keep running
        """
        with self.lock:
            if generation is not None and generation != self.generation:
                return False
            if not self.state.timed_mode:
                self.stop()
                return False
            if self.state.game_status is GameStatus.PAUSED:
                return True
            if self.state.game_status is not GameStatus.PLAYING or self.state.time_remaining <= 0:
                self.stop()
                return False

            self.state.time_remaining -= self.tick_ms
            if self.state.time_remaining > 0:
                return True

            self.state.time_remaining = 0
            self.stop()
            game_logger.log_game_event('time_up', difficulty=self.state.difficulty,
                                       category=self.state.category)
            self.on_time_up()
            return False

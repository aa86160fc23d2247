"""Round scoring.

Pure functions from a finished round to the points it earns. Nothing here
mutates game state.
"""

import math

from ..config.game_settings import (
    BASE_SCORE, MIN_SCORE, EFFICIENCY_BONUS_PER_GUESS, DIFFICULTY_MULTIPLIERS,
    UNTIMED_BONUS_WINDOW_MS, UNTIMED_BONUS_PER_SECOND, TIMED_BONUS_MAX
)
from ..models.game import GameState


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def calculate_time_bonus(state: GameState, elapsed_ms: int) -> int:
    """Timed mode: share of the clock left. Otherwise 2 points per second under 30s."""
    if state.timed_mode:
        if state.time_limit <= 0:
            return 0
        return round_half_up(TIMED_BONUS_MAX * state.time_remaining / state.time_limit)
    return max(0, math.floor((UNTIMED_BONUS_WINDOW_MS - elapsed_ms) / 1000) * UNTIMED_BONUS_PER_SECOND)


def calculate_score(state: GameState, elapsed_ms: int) -> int:
    """Score for winning the current round; never below MIN_SCORE.

    (base + efficiency bonus + time bonus) x difficulty multiplier x practice
    hint penalty, rounded half up.
    """
    difficulty_multiplier = DIFFICULTY_MULTIPLIERS.get(state.difficulty, 1)
    efficiency_bonus = max(
        0, (state.max_incorrect_guesses - len(state.incorrect_guesses)) * EFFICIENCY_BONUS_PER_GUESS
    )
    time_bonus = calculate_time_bonus(state, elapsed_ms)

    penalty_multiplier = 1.0
    if state.practice_mode.enabled:
        penalty_multiplier = state.practice_mode.score_penalty_multiplier

    total = (BASE_SCORE + efficiency_bonus + time_bonus) * difficulty_multiplier * penalty_multiplier
    return max(MIN_SCORE, round_half_up(total))

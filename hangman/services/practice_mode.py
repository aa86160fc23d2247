"""
Practice Mode

Word-length and repeat-avoidance filters, hint penalties, and per-category
practice progress.
"""

from typing import Dict, List, Optional

from ..config.game_settings import (
    HINT_PENALTY_STEP, MIN_PENALTY_MULTIPLIER, MASTERY_MAX_MISTAKES, MAX_INCORRECT_GUESSES
)
from ..models.game import Difficulty, GameState, PracticeMode, RoundOutcome, WordLengthFilter
from ..utils.game_logger import game_logger


def default_practice_progress() -> Dict:
    return {"per_category": {}}


class PracticeModeFilter:
    """Practice-mode rules that operate on GameState.practice_mode."""

    def enable(self, state: GameState,
               allow_repeats: Optional[bool] = None,
               endless: Optional[bool] = None,
               locked_difficulty: Optional[str] = None,
               max_mistakes_override: Optional[int] = None,
               word_length_filter: Optional[Dict] = None) -> None:
        """
        Turns practice mode on.

        Unspecified allow_repeats/endless/locked_difficulty keep their current
        values; the mistake override and length filter are replaced. Hint
        bookkeeping restarts.

        Raises:
            ValueError: If locked_difficulty is not a known tier or the
                mistake override is not positive
        """
        practice = state.practice_mode
        if locked_difficulty is not None:
            Difficulty(locked_difficulty)
        if max_mistakes_override is not None and max_mistakes_override < 1:
            raise ValueError("max_mistakes_override must be at least 1")

        practice.enabled = True
        if allow_repeats is not None:
            practice.allow_repeats = allow_repeats
        if endless is not None:
            practice.endless = endless
        if locked_difficulty is not None:
            practice.locked_difficulty = locked_difficulty
        practice.max_mistakes_override = max_mistakes_override
        practice.word_length_filter = WordLengthFilter(**word_length_filter) if word_length_filter else None
        practice.hints_used = 0
        practice.score_penalty_multiplier = PracticeMode().score_penalty_multiplier

        if practice.locked_difficulty:
            state.difficulty = practice.locked_difficulty
        if practice.max_mistakes_override is not None:
            state.max_incorrect_guesses = practice.max_mistakes_override

    def disable(self, state: GameState, max_incorrect_guesses: int = MAX_INCORRECT_GUESSES) -> None:
        """Turns practice mode off and restores the default mistake limit."""
        defaults = PracticeMode()
        practice = state.practice_mode
        practice.enabled = False
        practice.hints_used = defaults.hints_used
        practice.score_penalty_multiplier = defaults.score_penalty_multiplier
        state.max_incorrect_guesses = max_incorrect_guesses

    def filter_candidates(self, practice: PracticeMode, key: str, words: List[str]) -> List[str]:
        """
        Applies the length filter, then repeat avoidance.

        If repeat avoidance empties the list, the seen set for key is cleared
        and filtering is retried once. If the length filter alone excludes
        every word it is ignored for this selection.
        """
        candidates = list(words)

        if practice.word_length_filter is not None:
            filtered = [word for word in candidates if practice.word_length_filter.accepts(word)]
            if filtered:
                candidates = filtered
            else:
                game_logger.log_warning('length_filter_ignored', key=key,
                                        min=practice.word_length_filter.min,
                                        max=practice.word_length_filter.max)

        if not practice.allow_repeats:
            seen = practice.seen_words_by_key.get(key, set())
            unseen = [word for word in candidates if word not in seen]
            if not unseen:
                practice.seen_words_by_key[key] = set()
                game_logger.log_game_event('practice_seen_words_reset', key=key)
                unseen = list(candidates)
            candidates = unseen

        return candidates

    def record_seen(self, practice: PracticeMode, key: str, word: str) -> None:
        practice.seen_words_by_key.setdefault(key, set()).add(word)

    def register_hint(self, practice: PracticeMode) -> float:
        """Counts a hint and returns the new score multiplier."""
        practice.hints_used += 1
        practice.score_penalty_multiplier = round(
            max(MIN_PENALTY_MULTIPLIER, 1 - HINT_PENALTY_STEP * practice.hints_used), 2
        )
        return practice.score_penalty_multiplier

    def update_progress(self, progress: Dict, outcome: RoundOutcome) -> Dict:
        """Adds a finished practice round to the per-category progress blob."""
        per_category = progress.setdefault("per_category", {})
        stats = per_category.setdefault(outcome.category, {
            "played": 0,
            "correct": 0,
            "wrong": 0,
            "mastered_words": []
        })
        stats["played"] += 1
        if outcome.won:
            stats["correct"] += 1
            if outcome.incorrect_guesses <= MASTERY_MAX_MISTAKES and outcome.word not in stats["mastered_words"]:
                stats["mastered_words"].append(outcome.word)
        else:
            stats["wrong"] += 1
        return progress

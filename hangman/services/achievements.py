"""
Achievement Service

Rule table of one-time badges evaluated after every finished round.
"""

import copy
from datetime import datetime
from typing import Callable, Dict, List, NamedTuple, Optional

from ..config.game_settings import SPEED_DEMON_MS, CATEGORY_EXPLORER_COUNT, SCORE_HUNTER_TARGET
from ..models.game import RoundOutcome
from ..utils.game_logger import game_logger


class AchievementContext(NamedTuple):
    statistics: Dict
    outcome: RoundOutcome
    session_score: int


class AchievementRule(NamedTuple):
    key: str
    title: str
    condition: Callable[[AchievementContext], bool]


ACHIEVEMENT_RULES: List[AchievementRule] = [
    AchievementRule("firstWin", "First Win",
                    lambda ctx: ctx.statistics["games_won"] >= 1),
    AchievementRule("streak5", "5-Game Streak",
                    lambda ctx: ctx.statistics["current_streak"] >= 5),
    AchievementRule("streak10", "10-Game Streak",
                    lambda ctx: ctx.statistics["current_streak"] >= 10),
    AchievementRule("perfectGame", "Perfect Game",
                    lambda ctx: ctx.outcome.won and ctx.outcome.incorrect_guesses == 0),
    AchievementRule("speedDemon", "Speed Demon",
                    lambda ctx: ctx.outcome.elapsed_ms < SPEED_DEMON_MS),
    AchievementRule("difficultyMaster", "Difficulty Master",
                    lambda ctx: ctx.outcome.won and ctx.outcome.difficulty == "hard"),
    AchievementRule("categoryExplorer", "Category Explorer",
                    lambda ctx: len(ctx.statistics["category_stats"]) >= CATEGORY_EXPLORER_COUNT),
    AchievementRule("scoreHunter", "Score Hunter",
                    lambda ctx: ctx.session_score >= SCORE_HUNTER_TARGET),
]

ACHIEVEMENT_TITLES: Dict[str, str] = {rule.key: rule.title for rule in ACHIEVEMENT_RULES}


def default_achievements() -> Dict[str, Dict]:
    return {rule.key: {"unlocked": False, "unlocked_at": None} for rule in ACHIEVEMENT_RULES}


def is_valid_achievements(data) -> bool:
    """Every rule key present with both 'unlocked' and 'unlocked_at'."""
    return isinstance(data, dict) and all(
        isinstance(data.get(rule.key), dict)
        and "unlocked" in data[rule.key]
        and "unlocked_at" in data[rule.key]
        for rule in ACHIEVEMENT_RULES
    )


class AchievementEvaluator:
    """
    Evaluates the rule table against a finished round.

    Unlocks are monotonic: a granted badge is never re-locked by play, only by
    an explicit reset().
    """

    def __init__(self, data: Optional[Dict] = None, clock: Callable[[], datetime] = datetime.now):
        self.clock = clock
        if data is None:
            self.achievements = default_achievements()
        elif is_valid_achievements(data):
            self.achievements = data
        else:
            game_logger.log_warning('achievements_invalid', fallback='defaults')
            self.achievements = default_achievements()

    def evaluate(self, statistics: Dict, outcome: RoundOutcome, session_score: int) -> List[str]:
        """
        Args:
            statistics: Statistics after the round was recorded
            outcome: The finished round
            session_score: Running session score after the round

        Returns:
            Keys unlocked by this round, in rule-table order
        """
        context = AchievementContext(statistics, outcome, session_score)
        unlocked = []
        for rule in ACHIEVEMENT_RULES:
            entry = self.achievements[rule.key]
            if entry["unlocked"] or not rule.condition(context):
                continue
            entry["unlocked"] = True
            entry["unlocked_at"] = self.clock().isoformat()
            unlocked.append(rule.key)
            game_logger.log_game_event('achievement_unlocked', achievement=rule.key, title=rule.title)
        return unlocked

    def snapshot(self) -> Dict[str, Dict]:
        return copy.deepcopy(self.achievements)

    def reset(self) -> Dict[str, Dict]:
        self.achievements = default_achievements()
        return self.achievements

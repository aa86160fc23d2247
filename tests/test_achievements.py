from datetime import datetime

from hangman.models.game import GameStatus, RoundOutcome
from hangman.services.achievements import ACHIEVEMENT_RULES, AchievementEvaluator
from hangman.services.statistics import default_statistics


def outcome(won=True, difficulty="easy", incorrect=1, elapsed_ms=20000):
    return RoundOutcome(
        result=GameStatus.WON if won else GameStatus.LOST,
        word="cat",
        difficulty=difficulty,
        category="animals",
        elapsed_ms=elapsed_ms,
        total_guesses=3 + incorrect,
        correct_guesses=3,
        incorrect_guesses=incorrect
    )


def statistics(**overrides):
    stats = default_statistics()
    stats.update(overrides)
    return stats


def fixed_clock():
    return datetime(2024, 5, 1, 12, 0, 0)


def test_rule_table_keys():
    assert [rule.key for rule in ACHIEVEMENT_RULES] == [
        "firstWin", "streak5", "streak10", "perfectGame",
        "speedDemon", "difficultyMaster", "categoryExplorer", "scoreHunter"
    ]


def test_first_win_unlocks_once():
    evaluator = AchievementEvaluator(clock=fixed_clock)
    stats = statistics(games_won=1, current_streak=1)

    assert evaluator.evaluate(stats, outcome(), 100) == ["firstWin"]
    assert evaluator.snapshot()["firstWin"] == {"unlocked": True, "unlocked_at": "2024-05-01T12:00:00"}
    assert evaluator.evaluate(stats, outcome(), 200) == []


def test_streaks_and_score():
    evaluator = AchievementEvaluator()
    stats = statistics(games_won=10, current_streak=10)
    unlocked = evaluator.evaluate(stats, outcome(), 1000)
    assert unlocked == ["firstWin", "streak5", "streak10", "scoreHunter"]


def test_perfect_and_hard_require_a_win():
    evaluator = AchievementEvaluator()
    assert evaluator.evaluate(statistics(), outcome(won=False, difficulty="hard", incorrect=0), 0) == []

    unlocked = evaluator.evaluate(statistics(games_won=1), outcome(difficulty="hard", incorrect=0), 300)
    assert "perfectGame" in unlocked
    assert "difficultyMaster" in unlocked


def test_speed_demon_and_category_explorer():
    evaluator = AchievementEvaluator()
    categories = {name: {} for name in ("a", "b", "c", "d", "e")}
    unlocked = evaluator.evaluate(statistics(category_stats=categories), outcome(won=False, elapsed_ms=14999), 0)
    assert unlocked == ["speedDemon", "categoryExplorer"]


def test_unlocks_are_monotonic_until_reset():
    evaluator = AchievementEvaluator()
    evaluator.evaluate(statistics(games_won=1), outcome(), 100)
    evaluator.evaluate(statistics(), outcome(won=False), 0)
    assert evaluator.snapshot()["firstWin"]["unlocked"] is True

    evaluator.reset()
    assert not any(entry["unlocked"] for entry in evaluator.snapshot().values())


def test_invalid_stored_data_falls_back_to_defaults():
    evaluator = AchievementEvaluator({"firstWin": True})
    assert set(evaluator.snapshot()) == {rule.key for rule in ACHIEVEMENT_RULES}

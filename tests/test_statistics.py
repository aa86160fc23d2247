import json

from hangman.models.game import GameStatus, RoundOutcome
from hangman.services.statistics import StatisticsTracker, default_statistics


def outcome(won=True, difficulty="easy", category="animals", elapsed_ms=10000, score=100):
    return RoundOutcome(
        result=GameStatus.WON if won else GameStatus.LOST,
        word="cat",
        difficulty=difficulty,
        category=category,
        elapsed_ms=elapsed_ms,
        total_guesses=4,
        correct_guesses=3,
        incorrect_guesses=1,
        round_score=score if won else 0
    )


def test_counts_stay_consistent_after_mixed_results():
    tracker = StatisticsTracker()
    session = 0
    for won in (True, True, False, True, False, False):
        result = outcome(won=won)
        session += result.round_score
        stats = tracker.record(result, session)

    assert stats["games_played"] == stats["games_won"] + stats["games_lost"] == 6
    assert stats["win_percentage"] == 50
    assert stats["current_streak"] == 0
    assert stats["best_streak"] == 2
    assert stats["current_loss_streak"] == 2
    assert stats["longest_loss_streak"] == 2
    assert stats["total_score"] == 300
    assert stats["average_guesses_per_game"] == 4


def test_win_percentage_rounds_to_two_places():
    tracker = StatisticsTracker()
    for won in (True, False, False):
        stats = tracker.record(outcome(won=won), 0)
    assert stats["win_percentage"] == 33.33


def test_buckets_and_fastest_time():
    tracker = StatisticsTracker()
    tracker.record(outcome(elapsed_ms=9000), 100)
    tracker.record(outcome(difficulty="hard", category="science", elapsed_ms=4000), 200)
    stats = tracker.record(outcome(won=False, elapsed_ms=1000), 200)

    assert stats["fastest_completion_time"] == 4000
    assert stats["difficulty_stats"]["easy"]["played"] == 2
    assert stats["difficulty_stats"]["easy"]["best_time"] == 9000
    assert stats["difficulty_stats"]["hard"]["won"] == 1
    assert sorted(tracker.categories_played()) == ["animals", "science"]
    assert stats["performance_metrics"]["accuracy"] == 75


def test_repair_restores_invariants():
    data = default_statistics()
    data.update({"games_played": 10, "games_won": 3, "games_lost": 2, "win_percentage": 90})
    repaired = StatisticsTracker.repair(data)

    assert repaired["games_played"] == 5
    assert repaired["win_percentage"] == 60


def test_repair_replaces_wrong_types():
    repaired = StatisticsTracker.repair({"games_won": "many", "games_lost": None, "game_history": {}})
    assert repaired["games_won"] == 0
    assert repaired["games_lost"] == 0
    assert repaired["game_history"] == []

    assert StatisticsTracker.repair(["not", "a", "dict"]) == default_statistics()


def test_partial_buckets_from_storage_are_completed():
    tracker = StatisticsTracker({
        "category_stats": {"animals": {"played": 1, "won": 1}, "colors": "broken"},
        "difficulty_stats": {"easy": ["not", "a", "bucket"]},
        "daily_stats": {"2026-01-01": {"games_played": 2}},
        "game_history": [{"result": "won"}, "junk"],
        "performance_metrics": {"accuracy": 80}
    })

    stats = tracker.record(outcome(elapsed_ms=7000), 100)

    animals = stats["category_stats"]["animals"]
    assert animals["played"] == 2
    assert animals["won"] == 2
    assert animals["total_time"] == 7000
    assert animals["best_time"] == 7000
    assert "colors" not in stats["category_stats"]
    assert stats["difficulty_stats"]["easy"]["played"] == 1
    assert stats["daily_stats"]["2026-01-01"]["games_won"] == 0
    assert len(stats["game_history"]) == 1
    assert set(stats["performance_metrics"]) == {"accuracy", "efficiency", "consistency", "improvement"}


def test_history_is_capped():
    tracker = StatisticsTracker()
    for _ in range(1005):
        stats = tracker.record(outcome(), 0)
    assert len(stats["game_history"]) == 1000
    assert stats["games_played"] == 1005


def test_exports():
    tracker = StatisticsTracker()
    tracker.record(outcome(), 100)

    exported = json.loads(tracker.export_json())
    assert exported["statistics"]["games_won"] == 1

    lines = tracker.export_csv().strip().splitlines()
    assert lines[0].startswith("timestamp,result,difficulty,category,word")
    assert ",won,easy,animals,cat," in lines[1]


def test_reset():
    tracker = StatisticsTracker()
    tracker.record(outcome(), 100)
    tracker.reset()
    assert tracker.snapshot()["games_played"] == 0

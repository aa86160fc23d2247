"""
Statistics Service

Derives player statistics from finished rounds, keeps them consistent when
loaded from storage, and exports them as JSON or CSV.
"""

import copy
import csv
import io
import json
import math
from datetime import datetime
from typing import Dict, List, Optional

from ..config.game_settings import DIFFICULTIES, MAX_HISTORY_ENTRIES
from ..models.game import RoundOutcome
from ..utils.game_logger import game_logger


def _bucket() -> Dict:
    return {
        "played": 0,
        "won": 0,
        "lost": 0,
        "total_time": 0,
        "average_time": 0,
        "best_time": None
    }


def _day_bucket() -> Dict:
    return {
        "games_played": 0,
        "games_won": 0,
        "games_lost": 0,
        "total_time": 0,
        "total_score": 0
    }


# Fields read back from each history entry, with a value of the expected type
HISTORY_TYPES = {
    "result": "",
    "total_guesses": 0,
    "correct_guesses": 0,
    "play_time": 0,
    "score": 0
}


def default_statistics() -> Dict:
    """Empty statistics blob."""
    return {
        "games_played": 0,
        "games_won": 0,
        "games_lost": 0,
        "win_percentage": 0,
        "total_guesses": 0,
        "average_guesses_per_game": 0,
        "fastest_completion_time": None,
        "current_streak": 0,
        "best_streak": 0,
        "current_loss_streak": 0,
        "longest_loss_streak": 0,
        "total_play_time": 0,
        "average_play_time": 0,
        "total_score": 0,
        "difficulty_stats": {difficulty: _bucket() for difficulty in DIFFICULTIES},
        "category_stats": {},
        "daily_stats": {},
        "game_history": [],
        "performance_metrics": {
            "accuracy": 0,
            "efficiency": 0,
            "consistency": 0,
            "improvement": 0
        },
        "last_played": None
    }


def _compatible(default, value) -> bool:
    if default is None:
        return True
    if value is None:
        return False
    if isinstance(default, (int, float)):
        return isinstance(value, (int, float)) and not isinstance(value, bool)
    return isinstance(value, type(default))


def _repair_buckets(stored: Dict, factory, label: str) -> Dict:
    """Merges each stored bucket onto a fresh one; entries that are not dicts are dropped."""
    buckets = {}
    for name, value in stored.items():
        if not isinstance(value, dict):
            game_logger.log_warning('statistics_bucket_dropped', bucket=label, name=name)
            continue
        bucket = factory()
        bucket.update({key: item for key, item in value.items()
                       if key in bucket and _compatible(bucket[key], item)})
        buckets[name] = bucket
    return buckets


def win_percentage(won: int, played: int) -> float:
    return round(100 * won / played, 2) if played > 0 else 0


class StatisticsTracker:
    """
    Owns the statistics blob.

    Invariants kept after every update and every load:
    games_played == games_won + games_lost and
    win_percentage == 100 * games_won / games_played (0 with no games).
    """

    HISTORY_FIELDS = [
        "timestamp", "result", "difficulty", "category", "word", "play_time",
        "total_guesses", "correct_guesses", "incorrect_guesses", "score"
    ]

    def __init__(self, data: Optional[Dict] = None):
        self.data = self.repair(data) if data is not None else default_statistics()

    @staticmethod
    def repair(data) -> Dict:
        """
        Merges a loaded blob onto the defaults and restores the count invariants.

        Unknown or wrongly typed blobs are replaced by the defaults.
        """
        if not isinstance(data, dict):
            game_logger.log_warning('statistics_invalid', fallback='defaults')
            return default_statistics()

        repaired = default_statistics()
        for key, value in data.items():
            if key in repaired and _compatible(repaired[key], value):
                repaired[key] = value

        repaired["difficulty_stats"] = _repair_buckets(repaired["difficulty_stats"], _bucket, 'difficulty')
        for difficulty in DIFFICULTIES:
            repaired["difficulty_stats"].setdefault(difficulty, _bucket())
        repaired["category_stats"] = _repair_buckets(repaired["category_stats"], _bucket, 'category')
        repaired["daily_stats"] = _repair_buckets(repaired["daily_stats"], _day_bucket, 'day')
        repaired["performance_metrics"] = {
            **default_statistics()["performance_metrics"],
            **{key: value for key, value in repaired["performance_metrics"].items()
               if isinstance(value, (int, float)) and not isinstance(value, bool)}
        }
        repaired["game_history"] = [
            entry for entry in repaired["game_history"]
            if isinstance(entry, dict) and all(_compatible(default, entry.get(key))
                                               for key, default in HISTORY_TYPES.items())
        ]

        won = max(0, int(repaired["games_won"] or 0))
        lost = max(0, int(repaired["games_lost"] or 0))
        if repaired["games_played"] != won + lost:
            game_logger.log_warning('statistics_repaired', games_played=repaired["games_played"],
                                    games_won=won, games_lost=lost)
        repaired["games_won"] = won
        repaired["games_lost"] = lost
        repaired["games_played"] = won + lost
        repaired["win_percentage"] = win_percentage(won, won + lost)
        repaired["game_history"] = repaired["game_history"][-MAX_HISTORY_ENTRIES:]
        return repaired

    def record(self, outcome: RoundOutcome, session_score: int) -> Dict:
        """
        Adds one finished round.

        Args:
            outcome: The finished round
            session_score: Running session score after the round was scored

        Returns:
            The updated statistics blob
        """
        stats = self.data
        now = datetime.now()
        play_time = outcome.elapsed_ms
        won = outcome.won

        stats["game_history"].append({
            "timestamp": now.isoformat(),
            "result": outcome.result.value,
            "difficulty": outcome.difficulty,
            "category": outcome.category,
            "word": outcome.word,
            "play_time": play_time,
            "total_guesses": outcome.total_guesses,
            "correct_guesses": outcome.correct_guesses,
            "incorrect_guesses": outcome.incorrect_guesses,
            "score": outcome.round_score
        })
        if len(stats["game_history"]) > MAX_HISTORY_ENTRIES:
            stats["game_history"] = stats["game_history"][-MAX_HISTORY_ENTRIES:]

        stats["games_played"] += 1
        if won:
            stats["games_won"] += 1
            stats["current_streak"] += 1
            stats["best_streak"] = max(stats["best_streak"], stats["current_streak"])
            stats["current_loss_streak"] = 0
            if stats["fastest_completion_time"] is None or play_time < stats["fastest_completion_time"]:
                stats["fastest_completion_time"] = play_time
        else:
            stats["games_lost"] += 1
            stats["current_streak"] = 0
            stats["current_loss_streak"] += 1
            stats["longest_loss_streak"] = max(stats["longest_loss_streak"], stats["current_loss_streak"])

        stats["win_percentage"] = win_percentage(stats["games_won"], stats["games_played"])
        stats["total_guesses"] += outcome.total_guesses
        stats["average_guesses_per_game"] = round(stats["total_guesses"] / stats["games_played"], 2)
        stats["total_play_time"] += play_time
        stats["average_play_time"] = round(stats["total_play_time"] / stats["games_played"])
        stats["total_score"] = session_score

        self._update_bucket(stats["difficulty_stats"].setdefault(outcome.difficulty, _bucket()), won, play_time)
        self._update_bucket(stats["category_stats"].setdefault(outcome.category, _bucket()), won, play_time)

        day = stats["daily_stats"].setdefault(now.strftime('%Y-%m-%d'), _day_bucket())
        day["games_played"] += 1
        day["games_won" if won else "games_lost"] += 1
        day["total_time"] += play_time
        day["total_score"] += outcome.round_score

        self._update_performance_metrics()
        stats["last_played"] = now.isoformat()
        return stats

    @staticmethod
    def _update_bucket(bucket: Dict, won: bool, play_time: int) -> None:
        bucket["played"] += 1
        bucket["total_time"] += play_time
        bucket["average_time"] = round(bucket["total_time"] / bucket["played"])
        if won:
            bucket["won"] += 1
            if bucket["best_time"] is None or play_time < bucket["best_time"]:
                bucket["best_time"] = play_time
        else:
            bucket["lost"] += 1

    def _update_performance_metrics(self) -> None:
        stats = self.data
        history = stats["game_history"]
        metrics = stats["performance_metrics"]
        if not history:
            return

        # accuracy: share of guessed letters that were in the word
        guesses = sum(game["total_guesses"] for game in history)
        correct = sum(game["correct_guesses"] for game in history)
        metrics["accuracy"] = round(100 * correct / guesses) if guesses else 0

        # efficiency: points per minute of play
        minutes = sum(game["play_time"] for game in history) / 60000
        metrics["efficiency"] = round(sum(game["score"] for game in history) / minutes) if minutes > 0 else 0

        # consistency: standard deviation of winning times
        times = [game["play_time"] for game in history if game["result"] == "won"]
        if len(times) > 1:
            mean = sum(times) / len(times)
            metrics["consistency"] = round(math.sqrt(sum((t - mean) ** 2 for t in times) / len(times)))

        # improvement: recent five games against the five before them
        if len(history) >= 10:
            recent = sum(game["play_time"] for game in history[-5:]) / 5
            older = sum(game["play_time"] for game in history[-10:-5]) / 5
            metrics["improvement"] = round(100 * (older - recent) / older) if older > 0 else 0

    def snapshot(self) -> Dict:
        return copy.deepcopy(self.data)

    def reset(self) -> Dict:
        self.data = default_statistics()
        return self.data

    def export_json(self) -> str:
        return json.dumps({
            "exported_at": datetime.now().isoformat(),
            "statistics": self.data
        }, indent=2)

    def export_csv(self) -> str:
        """Game history as CSV, one row per round."""
        buffer = io.StringIO()
        writer = csv.DictWriter(buffer, fieldnames=self.HISTORY_FIELDS, extrasaction='ignore')
        writer.writeheader()
        for game in self.data["game_history"]:
            writer.writerow(game)
        return buffer.getvalue()

    def categories_played(self) -> List[str]:
        return list(self.data["category_stats"])

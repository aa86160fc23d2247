"""Difficulty progression driven by consecutive wins."""

from typing import Dict, Optional

from ..config.game_settings import WINS_TO_ADVANCE
from ..models.game import Difficulty


class ProgressionTracker:
    """
    Counts consecutive wins and moves difficulty up one tier every
    ``wins_to_advance`` wins. A loss resets the count but never lowers the
    difficulty.
    """

    def __init__(self, wins_to_advance: int = WINS_TO_ADVANCE, enabled: bool = True,
                 consecutive_wins: int = 0):
        self.wins_to_advance = wins_to_advance
        self.enabled = enabled
        self.consecutive_wins = consecutive_wins

    def record_win(self, difficulty: str, locked: bool = False) -> str:
        """
        Args:
            difficulty: Difficulty the round was won on
            locked: True while practice mode pins the difficulty

        Returns:
            The difficulty for the next round
        """
        self.consecutive_wins += 1
        if not self.enabled or locked or self.consecutive_wins < self.wins_to_advance:
            return difficulty

        self.consecutive_wins = 0
        try:
            return Difficulty(difficulty).next_tier().value
        except ValueError:
            return difficulty

    def record_loss(self) -> None:
        self.consecutive_wins = 0

    def to_dict(self) -> Dict:
        return {"consecutive_wins": self.consecutive_wins}

    def load(self, data: Optional[Dict]) -> None:
        if isinstance(data, dict) and isinstance(data.get("consecutive_wins"), int):
            self.consecutive_wins = max(0, data["consecutive_wins"])

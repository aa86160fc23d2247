"""
Multiplayer Coordinator

Local turn-based rotation among named players, tracked by score and wins.
"""

from dataclasses import asdict
from typing import Dict, List, Optional, Tuple

from ..models.game import MultiplayerState, Player


class MultiplayerCoordinator:
    """
    Operates on GameState.multiplayer.

    The coordinator only rotates turns and keeps the scoreboard; resetting the
    round for the next player is the state machine's job.
    """

    def __init__(self, state: MultiplayerState):
        self.state = state

    def enable(self, player_names: List[str], total_rounds: Optional[int] = None) -> None:
        """
        Starts a multiplayer session.

        Args:
            player_names: Display names; blank names become "Player N"
            total_rounds: Rounds per player before the game ends, None for unlimited

        Raises:
            ValueError: If no players are given or total_rounds is not positive
        """
        if not player_names:
            raise ValueError("At least one player is required")
        if total_rounds is not None and total_rounds < 1:
            raise ValueError("total_rounds must be positive")

        self.state.enabled = True
        self.state.players = [
            Player(name=(name or "").strip() or f"Player {index + 1}")
            for index, name in enumerate(player_names)
        ]
        self.state.current_player_index = 0
        self.state.rounds_played = 0
        self.state.total_rounds = total_rounds

    def disable(self) -> None:
        self.state.enabled = False
        self.state.players = []
        self.state.current_player_index = 0
        self.state.rounds_played = 0

    def current_player(self) -> Optional[Player]:
        if not self.state.enabled or not self.state.players:
            return None
        return self.state.players[self.state.current_player_index]

    def record_outcome(self, won: bool, points: int) -> None:
        """Credits the finished round to the player whose turn it is."""
        player = self.current_player()
        if player is None:
            return
        player.score += points
        if won:
            player.wins += 1

    def advance(self) -> Optional[Player]:
        """Counts the round and passes the turn. Returns the new current player."""
        if not self.state.enabled or not self.state.players:
            return None
        self.state.rounds_played += 1
        self.state.current_player_index = (self.state.current_player_index + 1) % len(self.state.players)
        return self.current_player()

    def should_end_after_advance(self) -> bool:
        """True if advancing now would complete the configured number of full rounds."""
        if not self.state.enabled or not self.state.players:
            return False
        if self.state.total_rounds is None:
            return False
        rounds_completed = (self.state.rounds_played + 1) // len(self.state.players)
        return rounds_completed >= self.state.total_rounds

    def standings(self) -> List[Player]:
        return sorted(self.state.players, key=lambda p: (-p.score, -p.wins))

    def end(self) -> Tuple[List[Dict], List[Dict]]:
        """
        Ends the session.

        Returns:
            Tuple of (winners, standings). Every player tied with the top
            (score, wins) pair is a co-winner. Both are empty if multiplayer
            was not enabled.
        """
        if not self.state.enabled:
            return [], []

        ranked = self.standings()
        top = ranked[0]
        winners = [p for p in ranked if (p.score, p.wins) == (top.score, top.wins)]
        result = [asdict(p) for p in winners], [asdict(p) for p in ranked]
        self.disable()
        return result

    def scores(self) -> List[Dict]:
        if not self.state.enabled:
            return []
        return [asdict(p) for p in self.state.players]

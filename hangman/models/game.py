"""
Game Data Models

Contains all game-related data structures and enums.
"""

from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import Dict, List, Optional, Set

from ..config.game_settings import MAX_INCORRECT_GUESSES, MASK_CHAR, MASK_SEPARATOR


class GameStatus(Enum):
    """Round status. WON and LOST are terminal until the next reset."""
    PLAYING = "playing"
    PAUSED = "paused"
    WON = "won"
    LOST = "lost"

    @property
    def is_terminal(self) -> bool:
        return self in (GameStatus.WON, GameStatus.LOST)


class Difficulty(Enum):
    """Difficulty tiers in progression order."""
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"

    def next_tier(self) -> "Difficulty":
        tiers = list(Difficulty)
        index = tiers.index(self)
        return tiers[min(index + 1, len(tiers) - 1)]


@dataclass
class WordLengthFilter:
    """Inclusive bounds on the letter count of a word (spaces excluded)."""
    min: Optional[int] = None
    max: Optional[int] = None

    def accepts(self, word: str) -> bool:
        length = len(word.replace(" ", ""))
        if self.min and length < self.min:
            return False
        if self.max and length > self.max:
            return False
        return True


@dataclass
class PracticeMode:
    """
    Practice mode settings and bookkeeping.

    The field defaults here are the single source of the "practice disabled"
    configuration; enable/disable always start from them.

    endless is a client hint only. The engine never ends a practice session
    on its own; a client that sees endless=False stops starting new rounds
    automatically after one finishes.
    """
    enabled: bool = False
    allow_repeats: bool = True
    endless: bool = True
    locked_difficulty: Optional[str] = None
    max_mistakes_override: Optional[int] = None
    word_length_filter: Optional[WordLengthFilter] = None
    hints_used: int = 0
    score_penalty_multiplier: float = 1.0
    seen_words_by_key: Dict[str, Set[str]] = field(default_factory=dict)

    def to_dict(self) -> Dict:
        data = asdict(self)
        data["seen_words_by_key"] = {key: sorted(words) for key, words in self.seen_words_by_key.items()}
        return data


@dataclass
class Player:
    """A local multiplayer participant."""
    name: str
    score: int = 0
    wins: int = 0


@dataclass
class MultiplayerState:
    """Turn rotation state for local multiplayer."""
    enabled: bool = False
    players: List[Player] = field(default_factory=list)
    current_player_index: int = 0
    rounds_played: int = 0
    total_rounds: Optional[int] = None


@dataclass
class GameState:
    """
    The single mutable game aggregate.

    Round-scoped fields (word, mask, letters, status, timing) are rebuilt on
    every reset; score, difficulty, category and the mode settings persist for
    the whole session.
    """
    current_word: str = ""
    hidden_cells: List[str] = field(default_factory=list)
    guessed_letters: List[str] = field(default_factory=list)
    incorrect_guesses: List[str] = field(default_factory=list)
    max_incorrect_guesses: int = MAX_INCORRECT_GUESSES
    game_status: GameStatus = GameStatus.PLAYING
    score: int = 0
    last_round_score: int = 0
    difficulty: str = Difficulty.MEDIUM.value
    category: str = "animals"
    timed_mode: bool = False
    time_limit: int = 0
    time_remaining: int = 0
    practice_mode: PracticeMode = field(default_factory=PracticeMode)
    multiplayer: MultiplayerState = field(default_factory=MultiplayerState)

    @property
    def hidden_word(self) -> str:
        """Mask string, one cell per character of the word."""
        return MASK_SEPARATOR.join(self.hidden_cells)

    @property
    def is_fully_revealed(self) -> bool:
        return bool(self.hidden_cells) and MASK_CHAR not in self.hidden_cells

    @property
    def selection_key(self) -> str:
        return f"{self.difficulty}-{self.category}"

    def reveal(self, letter: str) -> int:
        """Reveals every occurrence of letter. Returns the number of cells revealed."""
        revealed = 0
        for index, char in enumerate(self.current_word):
            if char == letter and self.hidden_cells[index] == MASK_CHAR:
                self.hidden_cells[index] = letter
                revealed += 1
        return revealed

    def to_dict(self) -> Dict:
        """Client-facing snapshot; the answer is only included once the round is over."""
        return {
            "hidden_word": self.hidden_word,
            "word_length": len(self.current_word),
            "guessed_letters": list(self.guessed_letters),
            "incorrect_guesses": list(self.incorrect_guesses),
            "max_incorrect_guesses": self.max_incorrect_guesses,
            "remaining_guesses": self.max_incorrect_guesses - len(self.incorrect_guesses),
            "game_status": self.game_status.value,
            "score": self.score,
            "last_round_score": self.last_round_score,
            "difficulty": self.difficulty,
            "category": self.category,
            "timed_mode": self.timed_mode,
            "time_limit": self.time_limit,
            "time_remaining": self.time_remaining,
            "practice_mode": self.practice_mode.to_dict(),
            "multiplayer": asdict(self.multiplayer),
            "answer": self.current_word if self.game_status.is_terminal else None
        }


@dataclass
class WordSelection:
    """Result of a word lookup, including any difficulty/category substitution."""
    word: str
    difficulty: str
    category: str

    @property
    def hidden_cells(self) -> List[str]:
        return [" " if char == " " else MASK_CHAR for char in self.word]


@dataclass
class RoundOutcome:
    """Everything the terminal-transition collaborators need about a finished round."""
    result: GameStatus
    word: str
    difficulty: str
    category: str
    elapsed_ms: int
    total_guesses: int
    correct_guesses: int
    incorrect_guesses: int
    round_score: int = 0
    timed_out: bool = False

    @property
    def won(self) -> bool:
        return self.result is GameStatus.WON

"""
Game Configuration Constants Module

This module defines the hangman rule constants and the bundled word catalog.
All game parameters are centralized here so that scoring, progression and
selection code never re-declares its own literals.
"""

import json
import os
import re
from typing import Dict, List, Final, Tuple

# Difficulty tiers in progression order
DIFFICULTIES: Final[Tuple[str, ...]] = ("easy", "medium", "hard")

# Core round rules
MAX_INCORRECT_GUESSES: Final[int] = 6
"""
Default number of wrong letters allowed before a round is lost.
Practice mode may override it per session.
"""

WINS_TO_ADVANCE: Final[int] = 3
MAX_SELECTION_RETRIES: Final[int] = 5
MASK_CHAR: Final[str] = "_"
MASK_SEPARATOR: Final[str] = " "

# Scoring
BASE_SCORE: Final[int] = 100
MIN_SCORE: Final[int] = 50
EFFICIENCY_BONUS_PER_GUESS: Final[int] = 10
DIFFICULTY_MULTIPLIERS: Final[Dict[str, int]] = {"easy": 1, "medium": 2, "hard": 3}
UNTIMED_BONUS_WINDOW_MS: Final[int] = 30000
UNTIMED_BONUS_PER_SECOND: Final[int] = 2
TIMED_BONUS_MAX: Final[int] = 100

# Practice mode hint penalty
HINT_PENALTY_STEP: Final[float] = 0.1
MIN_PENALTY_MULTIPLIER: Final[float] = 0.5
MASTERY_MAX_MISTAKES: Final[int] = 1

# Timed mode
DEFAULT_TIME_LIMIT_MS: Final[int] = 60000
TIMER_TICK_MS: Final[int] = 100

# Achievements / statistics
SPEED_DEMON_MS: Final[int] = 15000
CATEGORY_EXPLORER_COUNT: Final[int] = 5
SCORE_HUNTER_TARGET: Final[int] = 1000
MAX_HISTORY_ENTRIES: Final[int] = 1000

# Word validation
MIN_WORD_LENGTH: Final[int] = 2
MAX_WORD_LENGTH: Final[int] = 50
WORD_PATTERN: Final = re.compile(r"^[a-z ]+$")


def _load_word_catalog() -> Dict[str, Dict[str, List[str]]]:
    """
    Load the bundled word catalog from words.json.

    Returns:
        Dict[str, Dict[str, List[str]]]: difficulty -> category -> lowercase words

    Raises:
        FileNotFoundError: If words.json file is not found
        ValueError: If the JSON is malformed or the catalog is empty
    """
    config_dir = os.path.dirname(os.path.abspath(__file__))
    json_file_path = os.path.join(config_dir, 'words.json')

    try:
        with open(json_file_path, 'r', encoding='utf-8') as f:
            catalog = json.load(f)
    except FileNotFoundError:
        raise FileNotFoundError(f"Word catalog file not found: {json_file_path}")
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in words.json: {e}")

    if not isinstance(catalog, dict) or not catalog:
        raise ValueError("Word catalog must be a non-empty object")

    return {
        difficulty: {category: [word.lower() for word in words] for category, words in categories.items()}
        for difficulty, categories in catalog.items()
    }


# Bundled fallback catalog, the last tier of the word provider
FALLBACK_WORD_CATALOG: Final[Dict[str, Dict[str, List[str]]]] = _load_word_catalog()


def is_valid_word(word) -> bool:
    """True if word is a lowercase letters-and-spaces string of allowed length."""
    if not isinstance(word, str):
        return False
    return MIN_WORD_LENGTH <= len(word) <= MAX_WORD_LENGTH and bool(WORD_PATTERN.match(word))


def validate_word_catalog_integrity(catalog: Dict[str, Dict[str, List[str]]] = None) -> bool:
    """
    Validates the integrity and consistency of a word catalog.

    This function performs validation to ensure:
    1. Structure validation: difficulty -> category -> list of words
    2. Word validation: lowercase letters and spaces, 2-50 characters
    3. Uniqueness validation: no duplicate entries within a category

    Returns:
        bool: True if the catalog passes all validation checks

    Raises:
        ValueError: If any validation check fails with detailed error message
    """
    if catalog is None:
        catalog = FALLBACK_WORD_CATALOG

    if not catalog:
        raise ValueError("Word catalog cannot be empty")

    for difficulty, categories in catalog.items():
        if not isinstance(categories, dict):
            raise ValueError(f"Difficulty '{difficulty}' must map to categories")
        for category, words in categories.items():
            if not isinstance(words, list):
                raise ValueError(f"Category '{difficulty}/{category}' must be a list")
            for index, word in enumerate(words):
                if not is_valid_word(word):
                    raise ValueError(f"Word at {difficulty}/{category}[{index}] '{word}' is invalid")
            if len(words) != len(set(words)):
                duplicates = sorted({word for word in words if words.count(word) > 1})
                raise ValueError(f"Duplicate words found in {difficulty}/{category}: {duplicates}")

    return True


def get_word_statistics(catalog: Dict[str, Dict[str, List[str]]] = None) -> dict:
    """
    Summarizes a word catalog for balancing.

    Returns:
        dict: total_words, per-difficulty word counts, category names and
        average letter count per difficulty
    """
    if catalog is None:
        catalog = FALLBACK_WORD_CATALOG

    if not catalog:
        return {"error": "Word catalog is empty"}

    per_difficulty = {}
    for difficulty, categories in catalog.items():
        words = [word for category_words in categories.values() for word in category_words]
        letters = [len(word.replace(" ", "")) for word in words]
        per_difficulty[difficulty] = {
            "words": len(words),
            "categories": sorted(categories),
            "avg_letters": round(sum(letters) / len(letters), 2) if letters else 0
        }

    return {
        "total_words": sum(info["words"] for info in per_difficulty.values()),
        "difficulties": per_difficulty
    }


if __name__ == "__main__":

    try:
        validate_word_catalog_integrity()
        print(" Word catalog validation passed")

        stats = get_word_statistics()
        print(f" Catalog statistics: {stats}")
    except ValueError as config_error:
        print(f" Configuration validation failed: {config_error}")
        exit(1)

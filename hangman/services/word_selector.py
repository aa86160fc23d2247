"""
Word Selector

Resolves the word for a new round from the catalog, substituting a valid
difficulty or category when the requested one has no words.
"""

import random
from typing import Dict, List, Optional

from ..config.game_settings import MAX_SELECTION_RETRIES
from ..models.game import PracticeMode, WordSelection
from ..utils.errors import WordSelectionError
from ..utils.game_logger import game_logger
from .practice_mode import PracticeModeFilter

WordCatalog = Dict[str, Dict[str, List[str]]]


def _first_non_empty_category(categories) -> Optional[str]:
    if not isinstance(categories, dict):
        return None
    for category, words in categories.items():
        if words:
            return category
    return None


def _first_playable_difficulty(catalog: WordCatalog) -> Optional[str]:
    for difficulty, categories in catalog.items():
        if _first_non_empty_category(categories) is not None:
            return difficulty
    return None


class WordSelector:
    """
    Picks a random word for (difficulty, category).

    Substitution runs in a bounded loop of MAX_SELECTION_RETRIES attempts.
    When it is exhausted the catalog is treated as unusable and
    WordSelectionError is raised.
    """

    def __init__(self, rng: Optional[random.Random] = None,
                 practice_filter: Optional[PracticeModeFilter] = None):
        self.rng = rng or random.Random()
        self.practice_filter = practice_filter or PracticeModeFilter()

    def select(self,
               catalog: WordCatalog,
               difficulty: str,
               category: str,
               practice: Optional[PracticeMode] = None) -> WordSelection:
        """
        Selects a word, applying practice-mode filters.

        Args:
            catalog: difficulty -> category -> words
            difficulty: Requested difficulty
            category: Requested category
            practice: Practice settings; filters apply only when enabled

        Returns:
            WordSelection with the word and the difficulty/category actually used

        Raises:
            WordSelectionError: If no playable word list can be found
        """
        if not catalog:
            raise WordSelectionError("Word catalog is empty. Cannot select word.")

        words = None
        for _ in range(MAX_SELECTION_RETRIES):
            categories = catalog.get(difficulty)
            if _first_non_empty_category(categories) is None:
                substitute = _first_playable_difficulty(catalog)
                if substitute is None:
                    break
                game_logger.log_warning('difficulty_substituted', requested=difficulty, used=substitute)
                difficulty = substitute
                continue

            words = categories.get(category)
            if not words:
                substitute = _first_non_empty_category(categories)
                game_logger.log_warning('category_substituted', difficulty=difficulty,
                                        requested=category, used=substitute)
                category = substitute
                continue
            break

        if not words:
            raise WordSelectionError("No valid words available. Cannot select word.")

        candidates = [word.lower() for word in words]
        key = f"{difficulty}-{category}"
        if practice is not None and practice.enabled:
            candidates = self.practice_filter.filter_candidates(practice, key, candidates)

        word = self.rng.choice(candidates)

        if practice is not None and practice.enabled:
            self.practice_filter.record_seen(practice, key, word)

        return WordSelection(word=word, difficulty=difficulty, category=category)

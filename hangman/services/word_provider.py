"""
Word Provider

Loads the word catalog through three tiers: remote word lists fetched with
retry and exponential backoff, the last catalog cached in the persistence
store, and the catalog bundled with the package. Every tier failure is logged
and falls through to the next; the bundled catalog always answers.
"""

import re
import time
from typing import Callable, Dict, List, Optional, Tuple

import requests

from ..config.game_settings import DIFFICULTIES, FALLBACK_WORD_CATALOG, is_valid_word
from ..utils.errors import StorageError, WordDataError, WordFetchError
from ..utils.game_logger import game_logger
from .persistence import PersistenceStore

WordCatalog = Dict[str, Dict[str, List[str]]]

CACHE_KEY = "words_cache"


def recover_word(word) -> Optional[str]:
    """Strips characters other than letters and spaces; None if nothing usable is left."""
    if not isinstance(word, str):
        return None
    recovered = re.sub(r"[^a-zA-Z ]", "", word).strip().lower()
    recovered = re.sub(r" +", " ", recovered)
    return recovered if is_valid_word(recovered) else None


def validate_catalog(raw) -> Tuple[WordCatalog, List[str]]:
    """
    Normalizes a raw catalog and reports what was repaired.

    Words are lowercased and trimmed; words with stray characters are
    recovered where possible, otherwise dropped; duplicates are dropped;
    categories left empty are removed.

    Args:
        raw: Decoded JSON, expected difficulty -> category -> list of words

    Returns:
        Tuple of (clean catalog, list of warning messages)

    Raises:
        WordDataError: If the structure is wrong or no valid word survives
    """
    if not isinstance(raw, dict):
        raise WordDataError("Word catalog must be an object")

    catalog: WordCatalog = {}
    warnings: List[str] = []

    for difficulty, categories in raw.items():
        if not isinstance(categories, dict):
            warnings.append(f"Difficulty {difficulty} must map to categories")
            continue
        for category, words in categories.items():
            if not isinstance(words, list):
                warnings.append(f"Category {difficulty}/{category} must be a list")
                continue
            clean: List[str] = []
            for word in words:
                normalized = word.strip().lower() if isinstance(word, str) else word
                if not is_valid_word(normalized):
                    recovered = recover_word(word)
                    if recovered is None:
                        warnings.append(f"Dropped invalid word {word!r} in {difficulty}/{category}")
                        continue
                    warnings.append(f"Recovered word {word!r} -> {recovered!r}")
                    normalized = recovered
                if normalized in clean:
                    warnings.append(f"Duplicate word {normalized!r} in {difficulty}/{category}")
                    continue
                clean.append(normalized)
            if clean:
                catalog.setdefault(str(difficulty).lower(), {})[str(category).lower()] = clean

    if not catalog:
        raise WordDataError("Word catalog contains no valid words")

    return catalog, warnings


class WordProvider:
    """
    Three-tier word catalog loader.

    This class handles:
    - Fetching per-difficulty word lists over HTTP with retry/backoff
    - Caching the last good catalog in the persistence store
    - Falling back to the bundled catalog
    """

    def __init__(self,
                 base_url: Optional[str] = None,
                 store: Optional[PersistenceStore] = None,
                 fallback_catalog: Optional[WordCatalog] = None,
                 timeout: float = 10.0,
                 max_retries: int = 3,
                 base_delay: float = 1.0,
                 cache_ttl_seconds: int = 7 * 24 * 60 * 60,
                 session: Optional[requests.Session] = None,
                 sleep: Callable[[float], None] = time.sleep,
                 clock: Callable[[], float] = time.time):
        self.base_url = base_url.rstrip('/') if base_url else None
        self.store = store
        self.fallback_catalog = fallback_catalog if fallback_catalog is not None else FALLBACK_WORD_CATALOG
        self.timeout = timeout
        self.max_retries = max_retries
        self.base_delay = base_delay
        self.cache_ttl_seconds = cache_ttl_seconds
        self.session = session or requests.Session()
        self.sleep = sleep
        self.clock = clock
        self.source: Optional[str] = None

    @classmethod
    def from_config(cls, config, store: Optional[PersistenceStore] = None) -> "WordProvider":
        return cls(
            base_url=config.WORDS_BASE_URL,
            store=store,
            timeout=config.WORDS_FETCH_TIMEOUT_SECONDS,
            max_retries=config.WORDS_MAX_RETRIES,
            base_delay=config.WORDS_RETRY_BASE_DELAY_SECONDS,
            cache_ttl_seconds=config.WORDS_CACHE_TTL_SECONDS
        )

    def load_words(self, difficulty: Optional[str] = None) -> WordCatalog:
        """
        Loads the catalog, optionally restricted to one difficulty.

        Args:
            difficulty: Only load this difficulty tier

        Returns:
            A validated catalog. Never raises for network or cache failures.
        """
        if self.base_url:
            try:
                catalog = self._retry_with_backoff(lambda: self._fetch_remote(difficulty))
                catalog, warnings = validate_catalog(catalog)
                self._log_warnings(warnings, 'network')
                self._write_cache(catalog)
                self.source = 'network'
                return catalog
            except (WordFetchError, WordDataError) as e:
                game_logger.log_warning('word_fetch_failed', error=str(e), fallback='cache')

        cached = self._read_cache(difficulty)
        if cached:
            self.source = 'cache'
            return cached

        catalog, warnings = validate_catalog(self._restrict(self.fallback_catalog, difficulty) or self.fallback_catalog)
        self._log_warnings(warnings, 'fallback')
        self.source = 'fallback'
        game_logger.log_game_event('words_loaded', source='fallback', difficulty=difficulty)
        return catalog

    def _fetch_remote(self, difficulty: Optional[str]) -> WordCatalog:
        """Fetches each difficulty file; succeeds if at least one loads."""
        difficulties = [difficulty] if difficulty else list(DIFFICULTIES)
        catalog: WordCatalog = {}
        failed = []

        for tier in difficulties:
            url = f"{self.base_url}/{tier}.json"
            try:
                response = self.session.get(url, timeout=self.timeout)
                response.raise_for_status()
                catalog[tier] = response.json()
            except (requests.RequestException, ValueError) as e:
                failed.append(tier)
                game_logger.log_warning('word_list_fetch_failed', url=url, error=str(e))

        if not catalog:
            raise WordFetchError(f"Failed to load any word lists from {self.base_url}")
        if failed:
            game_logger.log_warning('word_lists_partially_loaded', failed=failed)
        return catalog

    def _retry_with_backoff(self, fetch: Callable[[], WordCatalog]) -> WordCatalog:
        """Runs fetch up to max_retries + 1 times, doubling the delay after each failure."""
        for attempt in range(self.max_retries + 1):
            try:
                return fetch()
            except WordFetchError:
                if attempt == self.max_retries:
                    raise
                delay = self.base_delay * (2 ** attempt)
                game_logger.log_warning('word_fetch_retry', attempt=attempt + 1, delay_seconds=delay)
                self.sleep(delay)
        raise WordFetchError("Retries exhausted")

    def _read_cache(self, difficulty: Optional[str]) -> Optional[WordCatalog]:
        if self.store is None:
            return None
        try:
            entry = self.store.get(CACHE_KEY)
        except StorageError as e:
            game_logger.log_warning('word_cache_unreadable', error=str(e), fallback='bundled')
            return None
        if not isinstance(entry, dict) or 'words' not in entry:
            return None
        if self.clock() - entry.get('cached_at', 0) > self.cache_ttl_seconds:
            game_logger.log_warning('word_cache_expired', cached_at=entry.get('cached_at'))
            return None
        try:
            catalog, _ = validate_catalog(entry['words'])
        except WordDataError as e:
            game_logger.log_warning('word_cache_invalid', error=str(e))
            return None
        return self._restrict(catalog, difficulty)

    def _write_cache(self, catalog: WordCatalog) -> None:
        if self.store is None:
            return
        try:
            self.store.set(CACHE_KEY, {'words': catalog, 'cached_at': self.clock()})
        except StorageError as e:
            game_logger.log_warning('word_cache_write_failed', error=str(e))

    @staticmethod
    def _restrict(catalog: WordCatalog, difficulty: Optional[str]) -> Optional[WordCatalog]:
        if not difficulty:
            return catalog
        if difficulty not in catalog:
            return None
        return {difficulty: catalog[difficulty]}

    @staticmethod
    def _log_warnings(warnings: List[str], source: str) -> None:
        if warnings:
            game_logger.log_warning('word_catalog_repaired', source=source, warnings=warnings[:20])

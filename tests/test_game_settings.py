import pytest

from hangman.config import (
    DIFFICULTIES, FALLBACK_WORD_CATALOG, get_word_statistics, validate_word_catalog_integrity
)


def test_bundled_catalog_is_valid():
    assert validate_word_catalog_integrity() is True
    assert set(FALLBACK_WORD_CATALOG) == set(DIFFICULTIES)


@pytest.mark.parametrize("catalog", [
    {"easy": {"animals": ["Cat"]}},
    {"easy": {"animals": ["cat", "cat"]}},
    {"easy": ["cat"]},
])
def test_invalid_catalog_raises(catalog):
    with pytest.raises(ValueError):
        validate_word_catalog_integrity(catalog)


def test_word_statistics():
    stats = get_word_statistics({"easy": {"animals": ["cat", "ice cream"]}})
    assert stats["total_words"] == 2
    assert stats["difficulties"]["easy"] == {"words": 2, "categories": ["animals"], "avg_letters": 5.5}

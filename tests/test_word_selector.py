import random

import pytest

from hangman.models.game import PracticeMode, WordLengthFilter
from hangman.services.word_selector import WordSelector
from hangman.utils.errors import WordSelectionError


CATALOG = {
    "easy": {"animals": ["cat", "dog"], "colors": []},
    "medium": {"animals": ["tiger"]},
}


def test_selects_from_requested_list():
    selection = WordSelector(random.Random(3)).select(CATALOG, "easy", "animals")
    assert selection.word in ("cat", "dog")
    assert (selection.difficulty, selection.category) == ("easy", "animals")


def test_empty_category_is_substituted():
    selection = WordSelector().select(CATALOG, "easy", "colors")
    assert selection.category == "animals"


def test_unknown_difficulty_is_substituted():
    selection = WordSelector().select({"medium": {"animals": ["tiger"]}}, "hard", "animals")
    assert selection.word == "tiger"
    assert selection.difficulty == "medium"


def test_words_are_lowercased():
    selection = WordSelector().select({"easy": {"animals": ["CAT"]}}, "easy", "animals")
    assert selection.word == "cat"


@pytest.mark.parametrize("catalog", [
    {},
    {"easy": {}},
    {"easy": {"animals": []}, "hard": {"science": []}},
])
def test_unusable_catalog_raises(catalog):
    with pytest.raises(WordSelectionError):
        WordSelector().select(catalog, "easy", "animals")


def test_practice_without_repeats_cycles_through_words():
    practice = PracticeMode(enabled=True, allow_repeats=False)
    selector = WordSelector(random.Random(0))

    first = selector.select(CATALOG, "easy", "animals", practice).word
    second = selector.select(CATALOG, "easy", "animals", practice).word
    assert {first, second} == {"cat", "dog"}

    # Both seen: the seen set is cleared and selection continues
    third = selector.select(CATALOG, "easy", "animals", practice).word
    assert third in ("cat", "dog")
    assert practice.seen_words_by_key["easy-animals"] == {third}


def test_practice_length_filter():
    catalog = {"easy": {"animals": ["cat", "horse"]}}
    practice = PracticeMode(enabled=True, word_length_filter=WordLengthFilter(min=4))
    selector = WordSelector(random.Random(0))
    for _ in range(5):
        assert selector.select(catalog, "easy", "animals", practice).word == "horse"


def test_length_filter_ignored_when_nothing_matches():
    catalog = {"easy": {"animals": ["cat"]}}
    practice = PracticeMode(enabled=True, word_length_filter=WordLengthFilter(min=10))
    assert WordSelector().select(catalog, "easy", "animals", practice).word == "cat"


def test_disabled_practice_settings_are_ignored():
    catalog = {"easy": {"animals": ["cat"]}}
    practice = PracticeMode(enabled=False, word_length_filter=WordLengthFilter(min=10))
    assert WordSelector().select(catalog, "easy", "animals", practice).word == "cat"
    assert practice.seen_words_by_key == {}

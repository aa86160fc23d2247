from hangman.utils.errors import (
    ErrorKind, RECOVERY_STRATEGIES, USER_MESSAGES, StorageError, WordDataError,
    WordFetchError, WordSelectionError, user_message
)


def test_every_kind_has_strategy_and_message():
    assert set(RECOVERY_STRATEGIES) == set(ErrorKind)
    assert set(USER_MESSAGES) == set(ErrorKind)
    assert all(RECOVERY_STRATEGIES[kind] for kind in ErrorKind)


def test_errors_carry_their_kind():
    assert WordDataError("x").kind is ErrorKind.DATA
    assert WordSelectionError("x").kind is ErrorKind.DATA
    assert StorageError("x").kind is ErrorKind.STORAGE
    assert WordFetchError("x").kind is ErrorKind.NETWORK


def test_user_message():
    assert user_message(WordFetchError("timeout")) == USER_MESSAGES[ErrorKind.NETWORK]
    assert user_message(ValueError("bad letter")) == "bad letter"

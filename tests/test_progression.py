from hangman.services.progression import ProgressionTracker


def test_advances_every_three_wins():
    tracker = ProgressionTracker()
    assert tracker.record_win("easy") == "easy"
    assert tracker.record_win("easy") == "easy"
    assert tracker.record_win("easy") == "medium"
    assert tracker.consecutive_wins == 0


def test_hard_is_the_ceiling():
    tracker = ProgressionTracker(wins_to_advance=1)
    assert tracker.record_win("hard") == "hard"


def test_loss_resets_streak():
    tracker = ProgressionTracker()
    tracker.record_win("easy")
    tracker.record_win("easy")
    tracker.record_loss()
    assert tracker.record_win("easy") == "easy"
    assert tracker.consecutive_wins == 1


def test_locked_or_disabled_never_advances():
    tracker = ProgressionTracker(wins_to_advance=1)
    assert tracker.record_win("easy", locked=True) == "easy"

    tracker = ProgressionTracker(wins_to_advance=1, enabled=False)
    assert tracker.record_win("easy") == "easy"


def test_load_ignores_bad_data():
    tracker = ProgressionTracker()
    tracker.load({"consecutive_wins": "two"})
    assert tracker.consecutive_wins == 0

    tracker.load({"consecutive_wins": 2})
    assert tracker.to_dict() == {"consecutive_wins": 2}

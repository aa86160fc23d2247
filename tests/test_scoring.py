from hangman.models.game import GameState
from hangman.services.scoring import calculate_score, calculate_time_bonus, round_half_up


def make_state(**overrides):
    state = GameState(current_word="tiger", difficulty="medium")
    for key, value in overrides.items():
        setattr(state, key, value)
    return state


def test_round_half_up():
    assert round_half_up(2.5) == 3
    assert round_half_up(3.5) == 4
    assert round_half_up(2.4) == 2


def test_untimed_bonus_two_points_per_second_under_thirty():
    state = make_state()
    assert calculate_time_bonus(state, 0) == 60
    assert calculate_time_bonus(state, 10500) == 38
    assert calculate_time_bonus(state, 30000) == 0
    assert calculate_time_bonus(state, 90000) == 0


def test_timed_bonus_is_share_of_clock_left():
    state = make_state(timed_mode=True, time_limit=60000, time_remaining=45000)
    assert calculate_time_bonus(state, 15000) == 75


def test_difficulty_multiplier_and_efficiency():
    state = make_state(incorrect_guesses=["x", "y"])
    # (100 + 4 * 10 + 0) * 2
    assert calculate_score(state, 40000) == 280

    state.difficulty = "hard"
    assert calculate_score(state, 40000) == 420


def test_practice_penalty_applies_only_in_practice():
    state = make_state(difficulty="easy")
    state.practice_mode.score_penalty_multiplier = 0.7
    assert calculate_score(state, 40000) == 160

    state.practice_mode.enabled = True
    assert calculate_score(state, 40000) == 112


def test_score_never_below_minimum():
    state = make_state(difficulty="easy", incorrect_guesses=list("uvwxyz"))
    state.practice_mode.enabled = True
    state.practice_mode.score_penalty_multiplier = 0.3
    assert calculate_score(state, 120000) == 50

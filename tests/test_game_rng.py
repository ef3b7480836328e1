import pytest

from game_rng import GameRNG


def test_same_seed_same_stream():
    a = GameRNG(seed=42)
    b = GameRNG(seed=42)
    assert [a.get_int(0, 1000) for _ in range(20)] == [b.get_int(0, 1000) for _ in range(20)]


def test_get_int_is_inclusive():
    rng = GameRNG(seed=3)
    values = {rng.get_int(1, 3) for _ in range(200)}
    assert values == {1, 2, 3}


def test_get_int_single_value_and_empty_range():
    rng = GameRNG(seed=3)
    assert rng.get_int(5, 5) == 5
    with pytest.raises(ValueError):
        rng.get_int(6, 5)


def test_chance_extremes():
    rng = GameRNG(seed=9)
    assert not any(rng.chance(0.0) for _ in range(50))
    assert all(rng.chance(1.0) for _ in range(50))


def test_coin_flip_multiple():
    rng = GameRNG(seed=1)
    flips = rng.coin_flip(num_flips=5)
    assert len(flips) == 5
    assert set(flips) <= {"heads", "tails"}
    with pytest.raises(ValueError):
        rng.coin_flip(heads_probability=1.5)


def test_weighted_choice_never_picks_zero_weight():
    rng = GameRNG(seed=11)
    picks = {rng.weighted_choice(["orc", "troll"], [0, 1]) for _ in range(100)}
    assert picks == {"troll"}


def test_weighted_choice_rejects_bad_weights():
    rng = GameRNG(seed=11)
    with pytest.raises(ValueError):
        rng.weighted_choice(["a"], [0])
    with pytest.raises(ValueError):
        rng.weighted_choice(["a", "b"], [1])


def test_state_round_trip_replays_stream():
    rng = GameRNG(seed=5)
    state = rng.get_state()
    first = [rng.get_int(0, 99) for _ in range(10)]
    rng.set_state(state)
    assert [rng.get_int(0, 99) for _ in range(10)] == first


def test_reset_records_seed():
    rng = GameRNG(seed=5)
    rng.reset(seed=8)
    assert rng.initial_seed == 8
    assert rng.get_int(0, 10**6) == GameRNG(seed=8).get_int(0, 10**6)

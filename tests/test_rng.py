import pytest

import delve.rng as rng_module
from delve.rng import SeededRandom


def test_same_seed_same_stream():
    a = SeededRandom(1234)
    b = SeededRandom(1234)
    assert [a.value() for _ in range(20)] == [b.value() for _ in range(20)]
    assert [a.range_int(0, 100) for _ in range(20)] == [b.range_int(0, 100) for _ in range(20)]


def test_range_int_upper_bound_is_exclusive():
    r = SeededRandom(7)
    seen = {r.range_int(3, 6) for _ in range(500)}
    assert seen == {3, 4, 5}


def test_degenerate_range_returns_lower_bound_and_consumes_a_draw():
    a = SeededRandom(99)
    b = SeededRandom(99)
    assert a.range_int(3, 3) == 3
    assert a.range_int(5, 2) == 5
    b.value()
    b.value()
    assert a.value() == b.value()


def test_coin_matches_value_threshold():
    a = SeededRandom(3)
    b = SeededRandom(3)
    for _ in range(50):
        assert a.coin() == (b.value() > 0.5)


def test_choice_is_uniform_index_draw_and_rejects_empty():
    a = SeededRandom(11)
    b = SeededRandom(11)
    items = ["a", "b", "c", "d"]
    for _ in range(20):
        assert a.choice(items) == items[b.range_int(0, len(items))]
    with pytest.raises(ValueError):
        a.choice([])


def test_random_seed_mode_draws_from_clock(monkeypatch):
    monkeypatch.setattr(rng_module, "time_based_seed", lambda: 4242)
    r = SeededRandom.from_settings(5, use_random_seed=True)
    assert r.seed == 4242
    assert SeededRandom.from_settings(5).seed == 5


def test_time_based_seed_fits_31_bits():
    s = rng_module.time_based_seed()
    assert 0 <= s < 2**31

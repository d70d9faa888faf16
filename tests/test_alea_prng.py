"""Tests for the Alea PRNG sampling helpers."""

import pytest

from py_pointcrawl.core.alea_prng import AleaPRNG


class TestAleaPRNG:
    """Test seeded random streams."""

    def test_same_seed_same_stream(self):
        prng1 = AleaPRNG("pointcrawl")
        prng2 = AleaPRNG("pointcrawl")

        assert [prng1.random() for _ in range(20)] == [prng2.random() for _ in range(20)]

    def test_different_seeds_differ(self):
        prng1 = AleaPRNG("seed1")
        prng2 = AleaPRNG("seed2")

        assert [prng1.random() for _ in range(5)] != [prng2.random() for _ in range(5)]

    def test_random_range(self):
        prng = AleaPRNG("range")
        values = [prng.random() for _ in range(1000)]

        assert all(0 <= v < 1 for v in values)
        assert prng.call_count == 1000

    def test_uniform_bounds(self):
        prng = AleaPRNG("uniform")
        values = [prng.uniform(80, 100) for _ in range(500)]

        assert all(80 <= v < 100 for v in values)

    def test_choice_empty_raises(self):
        with pytest.raises(IndexError):
            AleaPRNG("empty").choice([])

    def test_choice_covers_all_items(self):
        prng = AleaPRNG("choice")
        picks = {prng.choice(["a", "b", "c"]) for _ in range(200)}

        assert picks == {"a", "b", "c"}

    def test_weighted_choice_frequencies(self):
        prng = AleaPRNG("weights")
        weights = {"default": 3, "city": 2, "strange": 1}
        n = 30000
        counts = {key: 0 for key in weights}
        for _ in range(n):
            counts[prng.weighted_choice(weights)] += 1

        assert counts["default"] / n == pytest.approx(1 / 2, abs=0.02)
        assert counts["city"] / n == pytest.approx(1 / 3, abs=0.02)
        assert counts["strange"] / n == pytest.approx(1 / 6, abs=0.02)

    def test_weighted_choice_skips_zero_weight(self):
        prng = AleaPRNG("zero")
        picks = {prng.weighted_choice({"never": 0, "always": 1}) for _ in range(100)}

        assert picks == {"always"}

    def test_weighted_choice_rejects_empty_weights(self):
        with pytest.raises(ValueError):
            AleaPRNG("none").weighted_choice({"a": 0})

    def test_chance_certain_outcomes_consume_no_draw(self):
        prng = AleaPRNG("chance")

        assert prng.chance(1.0) is True
        assert prng.chance(0.0) is False
        assert prng.call_count == 0

        prng.chance(0.5)
        assert prng.call_count == 1

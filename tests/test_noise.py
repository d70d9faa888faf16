"""Tests for seeded multi-octave noise."""

import numpy as np
import pytest

from py_pointcrawl.core.alea_prng import AleaPRNG
from py_pointcrawl.core.noise import PerlinNoise


class TestPerlinNoise:
    """Test noise determinism and range."""

    @pytest.fixture
    def noise(self):
        noise = PerlinNoise(AleaPRNG("noise_test"))
        noise.detail(9, 0.45)
        return noise

    def test_deterministic_per_seed(self):
        xs = np.linspace(0, 5, 50)
        a = PerlinNoise(AleaPRNG("same"))(xs, xs * 0.5)
        b = PerlinNoise(AleaPRNG("same"))(xs, xs * 0.5)

        np.testing.assert_array_equal(a, b)

    def test_different_seeds_differ(self):
        xs = np.linspace(0, 5, 50)
        a = PerlinNoise(AleaPRNG("one"))(xs, xs)
        b = PerlinNoise(AleaPRNG("two"))(xs, xs)

        assert not np.array_equal(a, b)

    def test_values_bounded(self, noise):
        xs, ys = np.meshgrid(np.linspace(0, 10, 100), np.linspace(0, 10, 100))
        values = noise(xs, ys)

        assert values.shape == xs.shape
        assert np.all(values >= 0)
        assert np.all(values < noise.max_value + 1e-12)

    def test_scalar_input_returns_float(self, noise):
        value = noise(0.37, 1.2)

        assert isinstance(value, float)
        assert value == pytest.approx(float(noise(np.array([0.37]), np.array([1.2]))[0]))

    def test_negative_coordinates_mirror(self, noise):
        assert noise(-0.5, -1.25) == noise(0.5, 1.25)

    def test_continuity(self, noise):
        a = noise(1.0, 1.0)
        b = noise(1.0 + 1e-6, 1.0)

        assert abs(a - b) < 1e-3

    def test_detail_validation(self, noise):
        with pytest.raises(ValueError):
            noise.detail(0, 0.5)
        with pytest.raises(ValueError):
            noise.detail(4, 1.5)

    def test_max_value(self, noise):
        assert noise.max_value == pytest.approx(0.5 * (1 - 0.45 ** 9) / 0.55)

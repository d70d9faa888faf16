"""
Coherent value noise for terrain fields.

Multi-octave lattice noise with cosine interpolation: each octave doubles
the frequency and scales the amplitude by the falloff (persistence). The
lattice is a table of 4096 random values filled from an Alea stream, so a
seed fully determines the field. Evaluation is vectorised over NumPy arrays.
"""

import numpy as np
from typing import Union

from .alea_prng import AleaPRNG

PERLIN_YWRAPB = 4
PERLIN_YWRAP = 1 << PERLIN_YWRAPB
PERLIN_SIZE = 4095

ArrayLike = Union[float, np.ndarray]


def _scaled_cosine(i: np.ndarray) -> np.ndarray:
    return 0.5 * (1.0 - np.cos(i * np.pi))


class PerlinNoise:
    """
    Seeded 2D noise function returning values in [0, 1).

    Args:
        prng: Stream used to fill the lattice table
        octaves: Number of octaves summed per sample
        falloff: Amplitude multiplier between successive octaves
    """

    def __init__(self, prng: AleaPRNG, octaves: int = 4, falloff: float = 0.5):
        self.table = np.array([prng.random() for _ in range(PERLIN_SIZE + 1)])
        self.octaves = octaves
        self.falloff = falloff

    def detail(self, octaves: int, falloff: float) -> None:
        """Change octave count and amplitude falloff."""
        if octaves < 1:
            raise ValueError("octaves must be >= 1")
        if not 0 < falloff < 1:
            raise ValueError("falloff must be in (0, 1)")
        self.octaves = octaves
        self.falloff = falloff

    @property
    def max_value(self) -> float:
        """Upper bound of the summed octave amplitudes."""
        return 0.5 * (1 - self.falloff ** self.octaves) / (1 - self.falloff)

    def __call__(self, x: ArrayLike, y: ArrayLike) -> ArrayLike:
        x, y = np.broadcast_arrays(
            np.abs(np.asarray(x, dtype=np.float64)),
            np.abs(np.asarray(y, dtype=np.float64)),
        )
        scalar = x.ndim == 0

        xi = np.floor(x).astype(np.int64)
        yi = np.floor(y).astype(np.int64)
        xf = x - xi
        yf = y - yi

        p = self.table
        result = np.zeros(x.shape, dtype=np.float64)
        ampl = 0.5

        for _ in range(self.octaves):
            of = xi + (yi << PERLIN_YWRAPB)

            rxf = _scaled_cosine(xf)
            ryf = _scaled_cosine(yf)

            n1 = p[of & PERLIN_SIZE]
            n1 = n1 + rxf * (p[(of + 1) & PERLIN_SIZE] - n1)
            n2 = p[(of + PERLIN_YWRAP) & PERLIN_SIZE]
            n2 = n2 + rxf * (p[(of + PERLIN_YWRAP + 1) & PERLIN_SIZE] - n2)
            n1 = n1 + ryf * (n2 - n1)

            result += n1 * ampl
            ampl *= self.falloff

            xi = xi << 1
            xf = xf * 2
            yi = yi << 1
            yf = yf * 2

            x_carry = xf >= 1.0
            xi = xi + x_carry
            xf = xf - x_carry
            y_carry = yf >= 1.0
            yi = yi + y_carry
            yf = yf - y_carry

        if scalar:
            return float(result)
        return result

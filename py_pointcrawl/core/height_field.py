"""
Banded terrain field generation.

This module produces the relief layer that biome classification reads:
- Multi-octave noise sampled on the map's pixel grid
- Contour banding of the noise into a LOW (contour) and HIGH (open) class
- Two jitter channels (G, B) derived from the band plus extra noise samples

The channels are stored as clamped 8-bit values, the same discretisation a
canvas pixel buffer applies, because classification statistics depend on it.
"""

import numpy as np
import structlog
from dataclasses import dataclass
from typing import Optional, Tuple

from .alea_prng import AleaPRNG
from .noise import PerlinNoise

logger = structlog.get_logger()

# Band values: contour lines are drawn at 225, open ground at 255
BAND_CONTOUR = 225
BAND_OPEN = 255

# Half-open [low, high) ranges of noise*255 that fall on a contour line
BAND_INTERVALS: Tuple[Tuple[float, float], ...] = (
    (220, 255),
    (200, 223),
    (250, 273),
    (150, 153),
    (100, 103),
    (90, 93),
    (75, 88),
    (60, 63),
    (40, 43),
)


@dataclass
class HeightFieldOptions:
    """Noise and banding parameters for the relief field."""

    octaves: int = 9
    persistence: float = 0.45
    increment: float = 0.002  # Noise-space step per pixel
    detail_scale: float = 10.0  # Frequency multiplier of the texture sample
    open_jitter: float = 50.0  # Texture depth on open ground
    chunk_rows: int = 128  # Rows evaluated per vectorised batch


def band_value(value):
    """
    Classify noise*255 values into contour or open band.

    Args:
        value: Scalar or array of noise values scaled to [0, 255]

    Returns:
        BAND_CONTOUR where the value falls in any contour interval, else BAND_OPEN
    """
    value = np.asarray(value, dtype=np.float64)
    on_contour = np.zeros(value.shape, dtype=bool)
    for low, high in BAND_INTERVALS:
        on_contour |= (value >= low) & (value < high)
    banded = np.where(on_contour, BAND_CONTOUR, BAND_OPEN)
    if banded.ndim == 0:
        return int(banded)
    return banded.astype(np.uint8)


def _clamp_channel(values: np.ndarray) -> np.ndarray:
    """Round and clamp to 0-255 like an 8-bit clamped pixel buffer."""
    return np.clip(np.rint(values), 0, 255).astype(np.uint8)


@dataclass
class HeightField:
    """Banded relief grid indexed as [y, x]."""

    band: np.ndarray
    g: np.ndarray
    b: np.ndarray

    @property
    def width(self) -> int:
        return self.band.shape[1]

    @property
    def height(self) -> int:
        return self.band.shape[0]

    def channels_at(self, x: np.ndarray, y: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
        """
        Read (G, B) at pixel coordinates.

        Coordinates are floored to whole pixels and clamped to the grid.
        """
        px = np.clip(np.floor(np.asarray(x)).astype(np.int64), 0, self.width - 1)
        py = np.clip(np.floor(np.asarray(y)).astype(np.int64), 0, self.height - 1)
        return self.g[py, px], self.b[py, px]


class HeightFieldGenerator:
    """
    Generates the banded relief field from seeded noise.
    """

    def __init__(self, options: Optional[HeightFieldOptions] = None,
                 prng: Optional[AleaPRNG] = None):
        """
        Initialize the generator.

        Args:
            options: Noise and banding parameters
            prng: Stream used to seed the noise lattice
        """
        self.options = options or HeightFieldOptions()
        self.noise = PerlinNoise(prng or AleaPRNG("default"))
        self.noise.detail(self.options.octaves, self.options.persistence)

    def generate(self, width: int, height: int) -> HeightField:
        """
        Sample, band and texture the whole width x height grid.

        Returns:
            HeightField with uint8 band, G and B arrays of shape (height, width)
        """
        if width < 1 or height < 1:
            raise ValueError("Height field dimensions must be positive")

        logger.info("Generating height field", width=width, height=height,
                    octaves=self.options.octaves,
                    persistence=self.options.persistence)

        band = np.empty((height, width), dtype=np.uint8)
        g = np.empty((height, width), dtype=np.uint8)
        b = np.empty((height, width), dtype=np.uint8)

        xoff = np.arange(width, dtype=np.float64) * self.options.increment
        chunk = max(1, self.options.chunk_rows)

        for start in range(0, height, chunk):
            stop = min(start + chunk, height)
            yoff = np.arange(start, stop, dtype=np.float64) * self.options.increment
            xs, ys = np.meshgrid(xoff, yoff)

            band[start:stop], g[start:stop], b[start:stop] = self._shade(xs, ys)

        contour_share = float(np.mean(band == BAND_CONTOUR))
        logger.info("Height field generated", contour_share=round(contour_share, 4))

        return HeightField(band=band, g=g, b=b)

    def _shade(self, xs: np.ndarray, ys: np.ndarray):
        """Compute band, G and B for a block of noise coordinates."""
        scale = self.options.detail_scale
        raw = self.noise(xs, ys) * 255
        detail = self.noise(xs * scale, ys * scale) * 255

        banded = band_value(raw).astype(np.float64)
        on_contour = banded == BAND_CONTOUR

        g = np.where(on_contour, banded - raw, 255.0)
        b = np.where(
            on_contour,
            banded - detail,
            255.0 - detail / 255 * self.options.open_jitter,
        )

        return banded.astype(np.uint8), _clamp_channel(g), _clamp_channel(b)
